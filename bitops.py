import struct
from typing import Tuple

BITS_PER_WORD = 8  #: Width of a storage word in bits
WORD_MASK = 0xFF  #: All bits of a storage word set

#: Number of set bits in each byte value.
BYTE_COUNTS = bytes(bin(b).count("1") for b in range(256))
#: Number of unset bits above the highest set bit (8 for zero).
LEADING_ZEROS = bytes(BITS_PER_WORD - b.bit_length() for b in range(256))
#: Number of unset bits below the lowest set bit (8 for zero).
TRAILING_ZEROS = bytes(
    (b & -b).bit_length() - 1 if b else BITS_PER_WORD for b in range(256)
)
#: Each byte value with its 8 bits in reverse order.
REVERSED_BYTES = bytes(int(f"{b:08b}"[::-1], 2) for b in range(256))


def split_index(idx: int) -> Tuple[int, int]:
    """Split a bit index into ``(word, bit)``.

    :param idx: Bit index (LSB-first).
    :type idx: int
    :returns: Storage word position and bit position inside that word.
    :rtype: Tuple[int, int]
    """
    return idx // BITS_PER_WORD, idx % BITS_PER_WORD


def storage_length(size: int) -> int:
    """Number of storage words needed to hold ``size`` bits.

    :param size: Logical number of bits.
    :type size: int
    :returns: ``ceil(size / 8)``.
    :rtype: int
    """
    return (size + BITS_PER_WORD - 1) // BITS_PER_WORD


def tail_mask(size: int) -> int:
    """Mask of the bits in the final storage word that are inside ``size``.

    Padding bits (positions at or above ``size``) are zero in the mask, so
    ``word & tail_mask(size)`` always clears them.

    :param size: Logical number of bits (must be positive).
    :type size: int
    :returns: ``0xFF`` when ``size`` is a multiple of 8, otherwise the low
        ``size % 8`` bits set.
    :rtype: int
    """
    rem = size % BITS_PER_WORD
    if rem == 0:
        return WORD_MASK
    return (1 << rem) - 1


class ByteReader:
    """Strict sequential reader over a bytes-like buffer.

    Unlike slicing, every read checks that enough data remains and raises
    instead of returning a short result.

    :ivar data: Source buffer.
    :type data: bytes
    :ivar pos: Current read position (byte index).
    :type pos: int
    """

    def __init__(self, data: bytes):
        """Create a reader positioned at the start of ``data``.

        :param data: Source buffer.
        :type data: bytes
        :returns: None
        :rtype: None
        """
        self.data = data
        self.pos = 0

    @property
    def remaining(self) -> int:
        """Bytes left to read."""
        return len(self.data) - self.pos

    def read_bytes(self, nbytes: int) -> bytes:
        """Read exactly ``nbytes`` raw bytes.

        :param nbytes: Number of bytes to read.
        :type nbytes: int
        :returns: The next ``nbytes`` bytes.
        :rtype: bytes
        :raises EOFError: If fewer than ``nbytes`` bytes remain.
        """
        if nbytes > self.remaining:
            raise EOFError(
                f"Unexpected end of data: wanted {nbytes} bytes, "
                f"{self.remaining} left"
            )
        result = bytes(self.data[self.pos:self.pos + nbytes])
        self.pos += nbytes
        return result

    def read_struct(self, fmt: struct.Struct) -> tuple:
        """Read and unpack one fixed-size record.

        :param fmt: Precompiled struct layout.
        :type fmt: struct.Struct
        :returns: Unpacked fields.
        :rtype: tuple
        :raises EOFError: If the record is truncated.
        """
        return fmt.unpack(self.read_bytes(fmt.size))
