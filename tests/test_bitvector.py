import copy
import pickle

import pytest

from bitvector import (
    BitVector,
    BitVectorError,
    IndexOutOfRange,
    InvalidCharacter,
    InvalidSize,
    clone,
    create,
    parse,
)


def test_create_sets_listed_indices():
    v = create(10, 0)
    assert str(v) == "0000000001"
    assert v.size == 10


def test_create_get_matches_indices(boundary_size, rng):
    size = boundary_size
    indices = set(rng.sample(range(size), k=size // 2))
    v = create(size, *indices)
    for i in range(size):
        assert v.get(i) == (i in indices)


@pytest.mark.parametrize("size", [0, -1, -8, 1.5, "8", True])
def test_create_invalid_size_raises(size):
    with pytest.raises(InvalidSize):
        _ = create(size)


def test_create_index_out_of_range_raises():
    with pytest.raises(IndexOutOfRange):
        _ = create(4, 1, 4)
    with pytest.raises(IndexOutOfRange):
        _ = create(4, -1)


def test_errors_share_base_and_builtin_types():
    with pytest.raises(BitVectorError):
        _ = create(0)
    with pytest.raises(ValueError):
        _ = create(0)
    with pytest.raises(IndexError):
        _ = create(3).get(3)


def test_parse_basic():
    v = parse("0010000001")
    assert v.size == 10
    assert v.get(0) and v.get(7)
    assert [i for i in range(10) if v.get(i)] == [0, 7]


def test_parse_ignores_spaces():
    v = parse("  1010 0101 ")
    assert v.size == 8
    assert str(v) == "10100101"


@pytest.mark.parametrize("text, char", [("012", "2"), ("01a0", "a"), ("0\t1", "\t")])
def test_parse_invalid_character(text, char):
    with pytest.raises(InvalidCharacter) as excinfo:
        _ = parse(text)
    assert excinfo.value.char == char


@pytest.mark.parametrize("text", ["", "   "])
def test_parse_empty_raises_invalid_size(text):
    with pytest.raises(InvalidSize):
        _ = parse(text)


@pytest.mark.parametrize(
    "text",
    [
        "0", "1", "0101", "00000000", "11111111", "01010101", "0101010101",
        "1000000000000001", "10000000000000001",
    ],
)
def test_to_string_roundtrip_exact(text):
    assert parse(text).to_string() == text


def test_parse_to_string_property(sample_vectors):
    for v in sample_vectors:
        s = str(v)
        assert len(s) == v.size
        assert parse(s) == v


def test_clone_is_independent():
    v = parse("0101010101")
    c = clone(v)
    assert c == v
    c.set(1)
    assert not v.get(1)
    assert c != v
    assert v.clone() == v


def test_copy_and_deepcopy_clone():
    v = parse("1100")
    for c in (copy.copy(v), copy.deepcopy(v)):
        assert c == v
        c.toggle(0)
        assert v.to_string() == "1100"


def test_pickle_roundtrip():
    v = parse("101100111")
    restored = pickle.loads(pickle.dumps(v))
    assert restored == v
    assert restored is not v


def test_set_unset_get():
    v = create(10, 1)
    v.set(9)
    assert str(v) == "1000000010"
    v.unset(1)
    v.unset(0)
    assert str(v) == "1000000000"


@pytest.mark.parametrize("method", ["get", "set", "unset", "toggle"])
@pytest.mark.parametrize("idx", [-1, 4, 100])
def test_single_bit_access_bounds(method, idx):
    v = create(4)
    with pytest.raises(IndexOutOfRange):
        getattr(v, method)(idx)
    assert str(v) == "0000"


def test_toggle_returns_new_value():
    v = create(10, 9, 0)
    a = v.toggle(0)
    b = v.toggle(1)
    assert str(v) == "1000000010"
    assert a is False
    assert b is True


def test_clear():
    v = parse("1111111111")
    v.clear()
    assert str(v) == "0000000000"
    assert v.count() == 0


def test_set_all_keeps_padding_zero(boundary_size, padding_bits_fn):
    size = boundary_size
    v = create(size)
    v.set_all()
    assert str(v) == "1" * size
    assert v.count() == size
    assert padding_bits_fn(v) == 0
    assert v.leading_zeros() == 0


def test_equal():
    cases = [
        ("0101", "010"),
        ("0101", "1010"),
        ("01010101", "10101010"),
        ("0101010101", "1010101010"),
    ]
    for s1, s2 in cases:
        assert parse(s1).equal(parse(s1))
        assert parse(s2).equal(parse(s2))
        assert not parse(s1).equal(parse(s2))
        assert not parse(s2).equal(parse(s1))


def test_eq_with_other_types_is_false():
    v = parse("1")
    assert v != "1"
    assert not (v == 1)


def test_bitvector_is_unhashable():
    with pytest.raises(TypeError):
        hash(parse("1"))


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0000", 0), ("1111", 4), ("0101", 2),
        ("00000000", 0), ("11111111", 8), ("01010101", 4),
        ("0000000000", 0), ("1111111111", 10), ("0101010101", 5),
        ("0000000000000000", 0), ("1111111111111111", 16),
        ("0101010101010101", 8),
    ],
)
def test_count(text, expected):
    assert parse(text).count() == expected


def test_count_complement_property(sample_vectors):
    for v in sample_vectors:
        before = v.count()
        v.not_()
        assert before == v.size - v.count()
        v.not_()
        assert v.count() == before


@pytest.mark.parametrize(
    "text, leading, trailing",
    [
        ("1001", 0, 0), ("0110", 1, 1), ("0000", 4, 4),
        ("10000001", 0, 0), ("01000010", 1, 1), ("00000000", 8, 8),
        ("1000000001", 0, 0), ("0100000010", 1, 1), ("0000000000", 10, 10),
        ("1000000000000001", 0, 0), ("0100000000000010", 1, 1),
        ("0000000000000000", 16, 16), ("1", 0, 0), ("0", 1, 1),
        ("000000001000000000", 8, 9),
    ],
)
def test_leading_trailing_zeros(text, leading, trailing):
    v = parse(text)
    assert v.leading_zeros() == leading
    assert v.trailing_zeros() == trailing


def test_size_and_len():
    for v in (create(4), parse("1010")):
        assert v.size == 4
        assert len(v) == 4


def test_iter_and_int():
    v = parse("1101")
    assert list(v) == [True, False, True, True]
    assert int(v) == 0b1101
    assert int(create(16, 15)) == 1 << 15


def test_getitem_setitem():
    v = parse("0000000000")
    v[3] = True
    v[9] = 1
    assert v[3] and v[9]
    assert str(v) == "1000001000"
    v[3] = False
    assert not v[3]
    assert str(v[0:4]) == "0000"
    assert str(v[6:]) == "1000"
    assert v[:] == v


def test_getitem_rejects_bad_keys():
    v = parse("0101")
    with pytest.raises(IndexOutOfRange):
        _ = v[-1]
    with pytest.raises(ValueError):
        _ = v[0:4:2]
    with pytest.raises(TypeError):
        _ = v["1"]


def test_repr():
    assert repr(parse("0011")) == "<BitVector 0011>"


def test_from_bytes_and_to_bytes():
    v = BitVector.from_bytes(10, b"\x81\x02")
    assert str(v) == "1010000001"
    assert v.to_bytes() == b"\x81\x02"
    with pytest.raises(ValueError):
        _ = BitVector.from_bytes(10, b"\x81")
    with pytest.raises(ValueError):
        _ = BitVector.from_bytes(10, b"\x81\x04")


@pytest.mark.parametrize("method", ["get", "set", "unset", "toggle"])
def test_single_bit_access_rejects_non_int_index(method):
    v = parse("0000")
    with pytest.raises(TypeError, match="integers"):
        getattr(v, method)(1.5)
    with pytest.raises(TypeError):
        _ = v.slice(0.5, 2)
    assert str(v) == "0000"


def test_create_rejects_non_int_index():
    with pytest.raises(TypeError):
        _ = create(4, 1.0)


def test_equal_rejects_non_vector():
    with pytest.raises(TypeError):
        _ = parse("01").equal("01")


class TaggedVector(BitVector):
    pass


def test_subclass_survives_clone_and_operators():
    v = TaggedVector(8, [0, 3])
    other = TaggedVector(8, [3])
    assert type(v.clone()) is TaggedVector
    assert type(copy.copy(v)) is TaggedVector
    assert type(v & other) is TaggedVector
    assert type(v | other) is TaggedVector
    assert type(~v) is TaggedVector
    assert type(v << 1) is TaggedVector
    assert type(v.slice(0, 4)) is TaggedVector
    assert type(v.concat(other)) is TaggedVector
    assert str(v - other) == "00000001"
