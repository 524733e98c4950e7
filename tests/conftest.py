import random
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bitvector import BitVector  # noqa: E402

#: Sizes around byte boundaries, where padding handling goes wrong first.
BOUNDARY_SIZES = [1, 2, 7, 8, 9, 15, 16, 17, 31, 32, 33, 64, 65]


@pytest.fixture(params=BOUNDARY_SIZES)
def boundary_size(request):
    """Each size around a byte boundary, one test run per size."""
    return request.param


@pytest.fixture()
def rng():
    """Deterministic random source so failures are reproducible."""
    return random.Random(20240601)


@pytest.fixture()
def random_vector(rng):
    """Factory producing random vectors of a requested size."""

    def make(size: int) -> BitVector:
        indices = [i for i in range(size) if rng.random() < 0.5]
        return BitVector(size, indices)

    return make


@pytest.fixture()
def sample_vectors(random_vector):
    """A few random vectors for every boundary size, plus all-zero/all-one."""
    vectors = []
    for size in BOUNDARY_SIZES:
        vectors.append(BitVector(size))
        full = BitVector(size)
        full.set_all()
        vectors.append(full)
        for _ in range(3):
            vectors.append(random_vector(size))
    return vectors


def padding_bits(vector: BitVector) -> int:
    """Return the padding bits of the final storage byte (should be 0)."""
    last = vector.to_bytes()[-1]
    rem = vector.size % 8
    if rem == 0:
        return 0
    return last >> rem


@pytest.fixture()
def padding_bits_fn():
    """Fixture that provides the padding_bits helper without importing conftest."""
    return padding_bits
