from typing import Callable, Iterable, Iterator

from bitops import (
    BITS_PER_WORD,
    BYTE_COUNTS,
    LEADING_ZEROS,
    REVERSED_BYTES,
    TRAILING_ZEROS,
    WORD_MASK,
    split_index,
    storage_length,
    tail_mask,
)


class BitVectorError(Exception):
    """Base class for all bit vector errors."""


class InvalidSize(BitVectorError, ValueError):
    """A vector was requested with a size that is not a positive integer."""


class IndexOutOfRange(BitVectorError, IndexError):
    """A bit index (or slice bound) lies outside ``[0, size)``."""


class SizeMismatch(BitVectorError, ValueError):
    """A binary operation was applied to vectors of different sizes."""


class InvalidCharacter(BitVectorError, ValueError):
    """Text passed to :func:`parse` holds a character other than 0, 1 or space.

    :ivar char: The offending character.
    :type char: str
    """

    def __init__(self, char: str):
        super().__init__(f"Unknown character: {char!r}")
        self.char = char


class DecodeError(BitVectorError, ValueError):
    """A binary payload is truncated or malformed."""


class BitVector:
    """Fixed-size vector of bits packed into bytes.

    Bit ``i`` is stored in byte ``i // 8`` at position ``i % 8``
    (least-significant bit first). Bits of the final byte at or above
    ``size`` are padding and are kept at zero by every operation.

    In the string form bit 0 is the rightmost digit, so ``str(v)`` reads
    like a binary number.

    Mutating methods work in place and return ``None``; the operators
    ``&``, ``|``, ``^``, ``-``, ``~``, ``<<`` and ``>>`` return new vectors.

    :ivar _size: Logical number of bits.
    :type _size: int
    :ivar _data: Packed storage, ``ceil(size / 8)`` bytes.
    :type _data: bytearray
    """

    __hash__ = None

    def __init__(self, size: int, indices: Iterable[int] = ()):
        """Create an all-zero vector of ``size`` bits, then set ``indices``.

        :param size: Number of bits, must be a positive integer.
        :type size: int
        :param indices: Bit positions to set.
        :type indices: Iterable[int]
        :returns: None
        :rtype: None
        :raises InvalidSize: If ``size`` is not a positive integer.
        :raises IndexOutOfRange: If any index is outside ``[0, size)``.
        """
        if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
            raise InvalidSize(f"Size must be a positive integer, got {size!r}")
        self._size = size
        indices = list(indices)
        for idx in indices:
            self._check_index(idx)
        self._data = bytearray(storage_length(size))
        for idx in indices:
            self._set(idx)

    @classmethod
    def from_bytes(cls, size: int, data: bytes) -> "BitVector":
        """Build a vector from raw packed storage.

        :param size: Number of bits.
        :type size: int
        :param data: Exactly ``ceil(size / 8)`` bytes, LSB-first.
        :type data: bytes
        :returns: New vector holding a copy of ``data``.
        :rtype: BitVector
        :raises InvalidSize: If ``size`` is not a positive integer.
        :raises ValueError: If the length of ``data`` is wrong or padding
            bits are set.
        """
        vector = cls(size)
        if len(data) != len(vector._data):
            raise ValueError(
                f"Expected {len(vector._data)} bytes for size {size}, "
                f"got {len(data)}"
            )
        if data[-1] & ~tail_mask(size) & WORD_MASK:
            raise ValueError("Padding bits of the final byte are set")
        vector._data[:] = data
        return vector

    def to_bytes(self) -> bytes:
        """Return a copy of the packed storage."""
        return bytes(self._data)

    @property
    def size(self) -> int:
        """Logical number of bits (fixed at construction)."""
        return self._size

    def clone(self) -> "BitVector":
        """Return an independent deep copy.

        :returns: New vector with the same size and bits.
        :rtype: BitVector
        """
        result = type(self)(self._size)
        result._data[:] = self._data
        return result

    # Single-bit access

    def get(self, idx: int) -> bool:
        """Report whether bit ``idx`` is set.

        :raises IndexOutOfRange: If ``idx`` is outside ``[0, size)``.
        """
        self._check_index(idx)
        return self._get(idx)

    def set(self, idx: int):
        """Set bit ``idx`` to 1.

        :raises IndexOutOfRange: If ``idx`` is outside ``[0, size)``.
        """
        self._check_index(idx)
        self._set(idx)

    def unset(self, idx: int):
        """Set bit ``idx`` to 0.

        :raises IndexOutOfRange: If ``idx`` is outside ``[0, size)``.
        """
        self._check_index(idx)
        self._unset(idx)

    def toggle(self, idx: int) -> bool:
        """Flip bit ``idx``.

        :param idx: Bit position.
        :type idx: int
        :returns: The new value of the bit.
        :rtype: bool
        :raises IndexOutOfRange: If ``idx`` is outside ``[0, size)``.
        """
        self._check_index(idx)
        word, bit = split_index(idx)
        self._data[word] ^= 1 << bit
        return self._get(idx)

    def clear(self):
        """Set all bits to 0."""
        for i in range(len(self._data)):
            self._data[i] = 0

    def set_all(self):
        """Set all ``size`` bits to 1, leaving the padding bits at 0."""
        last = len(self._data) - 1
        for i in range(last):
            self._data[i] = WORD_MASK
        self._data[last] = tail_mask(self._size)

    # Bitwise algebra

    def and_(self, other: "BitVector"):
        """In-place ``self = self & other``.

        :raises SizeMismatch: If the sizes differ.
        """
        self._combine(other, lambda a, b: a & b)

    def or_(self, other: "BitVector"):
        """In-place ``self = self | other``.

        :raises SizeMismatch: If the sizes differ.
        """
        self._combine(other, lambda a, b: a | b)

    def xor(self, other: "BitVector"):
        """In-place ``self = self ^ other``.

        :raises SizeMismatch: If the sizes differ.
        """
        self._combine(other, lambda a, b: a ^ b)

    def and_not(self, other: "BitVector"):
        """In-place bit clear: every bit set in ``other`` is unset in ``self``.

        :raises SizeMismatch: If the sizes differ.
        """
        self._combine(other, lambda a, b: a & ~b)

    def not_(self):
        """In-place complement of bits ``[0, size)``."""
        data = self._data
        for i in range(len(data)):
            data[i] ^= WORD_MASK
        data[-1] &= tail_mask(self._size)

    def _combine(self, other: "BitVector", op: Callable[[int, int], int]):
        """Apply ``op`` byte by byte and re-mask the final byte.

        :param other: Right-hand operand of equal size.
        :type other: BitVector
        :param op: Byte combinator.
        :type op: Callable[[int, int], int]
        :returns: None
        :rtype: None
        :raises TypeError: If ``other`` is not a :class:`BitVector`.
        :raises SizeMismatch: If the sizes differ.
        """
        self._check_size(other)
        data, other_data = self._data, other._data
        for i in range(len(data)):
            data[i] = op(data[i], other_data[i]) & WORD_MASK
        data[-1] &= tail_mask(self._size)

    # Shape operations

    def reverse(self):
        """Swap bit ``i`` with bit ``size - 1 - i`` for every ``i``.

        The bytes are reversed in order and each one is bit-reversed via
        ``REVERSED_BYTES``; that moves the padding to the low end, which is
        then shifted out.
        """
        pad = len(self._data) * BITS_PER_WORD - self._size
        flipped = bytes(REVERSED_BYTES[b] for b in reversed(self._data))
        self._load_int(int.from_bytes(flipped, "little") >> pad)

    def rotate(self, n: int):
        """Rotate by ``|n|`` bits, to the left if ``n > 0``, right if ``n < 0``.

        ``n`` is reduced with a truncating remainder (the sign of ``n`` is
        kept) before the direction is chosen. The bits rotated out of one
        end are captured first and written back at the other end.

        :param n: Rotation distance.
        :type n: int
        :returns: None
        :rtype: None
        """
        size = self._size
        rem = abs(n) % size
        n = rem if n >= 0 else -rem
        if n == 0:
            return
        value = int(self)
        if n > 0:
            carried = value >> (size - n)
            value = (value << n) | carried
        else:
            n = -n
            carried = value & ((1 << n) - 1)
            value = (value >> n) | (carried << (size - n))
        self._load_int(value & self._full_mask())

    def shift(self, n: int):
        """Shift by ``|n|`` bits, to the left if ``n > 0``, right if ``n < 0``.

        Vacated positions are filled with 0 and bits shifted past either end
        are dropped; ``|n| >= size`` clears the vector.

        :param n: Shift distance.
        :type n: int
        :returns: None
        :rtype: None
        """
        if abs(n) >= self._size:
            self.clear()
            return
        if n > 0:
            self._load_int((int(self) << n) & self._full_mask())
        elif n < 0:
            self._load_int(int(self) >> -n)

    def slice(self, start: int, end: int) -> "BitVector":
        """Return bits ``[start, end)`` as a new vector.

        Bit ``k`` of the result is bit ``start + k`` of this vector.

        :param start: First bit (inclusive), must be a valid index.
        :type start: int
        :param end: Last bit (exclusive); ``end - 1`` must be a valid index
            not below ``start``.
        :type end: int
        :returns: New vector of size ``end - start``.
        :rtype: BitVector
        :raises IndexOutOfRange: If either bound is out of range or the
            range is empty.
        """
        self._check_index(start)
        self._check_index(end - 1)
        if end <= start:
            raise IndexOutOfRange(f"Empty slice [{start}, {end})")
        width = end - start
        result = type(self)(width)
        result._load_int((int(self) >> start) & ((1 << width) - 1))
        return result

    def concat(self, other: "BitVector") -> "BitVector":
        """Return ``self`` (high-order bits) followed by ``other`` (low-order).

        ``str(a.concat(b)) == str(a) + str(b)``.

        :param other: Vector that supplies bits ``[0, other.size)``.
        :type other: BitVector
        :returns: New vector of size ``self.size + other.size``.
        :rtype: BitVector
        """
        if not isinstance(other, BitVector):
            raise TypeError(
                f"Expected BitVector, got {type(other).__name__}"
            )
        result = type(self)(self._size + other._size)
        result._load_int((int(self) << other._size) | int(other))
        return result

    # Queries

    def equal(self, other: "BitVector") -> bool:
        """Report whether ``other`` has the same size and bits."""
        if not isinstance(other, BitVector):
            raise TypeError(
                f"Expected BitVector, got {type(other).__name__}"
            )
        if self._size != other._size:
            return False
        return self._data == other._data

    def count(self) -> int:
        """Number of set bits."""
        return sum(BYTE_COUNTS[b] for b in self._data)

    def leading_zeros(self) -> int:
        """Number of unset bits above the highest set bit.

        Scans from the final byte down; the padding width of the final byte
        is subtracted, so the result never exceeds ``size``.

        :returns: Leading zero count in ``[0, size]``.
        :rtype: int
        """
        count = 0
        for b in reversed(self._data):
            count += LEADING_ZEROS[b]
            if b:
                break
        rem = self._size % BITS_PER_WORD
        if rem:
            count -= BITS_PER_WORD - rem
        return count

    def trailing_zeros(self) -> int:
        """Number of unset bits below the lowest set bit.

        :returns: Trailing zero count in ``[0, size]``.
        :rtype: int
        """
        count = 0
        for b in self._data:
            count += TRAILING_ZEROS[b]
            if b:
                break
        return min(count, self._size)

    def to_string(self) -> str:
        """Binary digits, most significant bit first, exactly ``size`` long.

        The final byte prints only its significant digits; every lower
        byte prints all 8, zero-padded.

        :returns: Digit string.
        :rtype: str
        """
        width = self._size % BITS_PER_WORD or BITS_PER_WORD
        digits = [format(self._data[-1], f"0{width}b")]
        digits.extend(format(b, "08b") for b in reversed(self._data[:-1]))
        return "".join(digits)

    # Raw helpers (no bounds checks)

    def _get(self, idx: int) -> bool:
        word, bit = split_index(idx)
        return bool(self._data[word] & (1 << bit))

    def _set(self, idx: int):
        word, bit = split_index(idx)
        self._data[word] |= 1 << bit

    def _unset(self, idx: int):
        word, bit = split_index(idx)
        self._data[word] &= ~(1 << bit) & WORD_MASK

    def _full_mask(self) -> int:
        return (1 << self._size) - 1

    def _load_int(self, value: int):
        # value must already fit in size bits
        self._data[:] = value.to_bytes(len(self._data), "little")

    def _check_index(self, idx: int):
        if not isinstance(idx, int):
            raise TypeError(
                f"Bit indices must be integers, not {type(idx).__name__}"
            )
        if not 0 <= idx < self._size:
            raise IndexOutOfRange(
                f"Index {idx} out of range for size {self._size}"
            )

    def _check_size(self, other: "BitVector"):
        if not isinstance(other, BitVector):
            raise TypeError(
                f"Expected BitVector, got {type(other).__name__}"
            )
        if self._size != other._size:
            raise SizeMismatch(
                f"Bit vector sizes must be equal: {self._size} != {other._size}"
            )

    # Python protocol

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[bool]:
        for i in range(self._size):
            yield self._get(i)

    def __int__(self) -> int:
        return int.from_bytes(self._data, "little")

    def __getitem__(self, key):
        """``v[i]`` reads one bit; ``v[start:end]`` returns :meth:`slice`.

        Negative indices are out of range, as in :meth:`get`.

        :raises TypeError: If ``key`` is neither an int nor a slice.
        :raises ValueError: If a slice step other than 1 is given.
        """
        if isinstance(key, slice):
            if key.step not in (None, 1):
                raise ValueError("Slicing with a step other than 1 is not supported")
            start = 0 if key.start is None else key.start
            stop = self._size if key.stop is None else key.stop
            return self.slice(start, stop)
        if isinstance(key, int):
            return self.get(key)
        raise TypeError(
            f"Indices must be int or slice, not {type(key).__name__}"
        )

    def __setitem__(self, idx: int, value):
        if value:
            self.set(idx)
        else:
            self.unset(idx)

    def __eq__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        return self.equal(other)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"<BitVector {self.to_string()}>"

    def __copy__(self) -> "BitVector":
        return self.clone()

    def __deepcopy__(self, memo) -> "BitVector":
        return self.clone()

    def __reduce__(self):
        return _restore, (self._size, bytes(self._data))

    def __and__(self, other: "BitVector") -> "BitVector":
        if not isinstance(other, BitVector):
            return NotImplemented
        result = self.clone()
        result.and_(other)
        return result

    def __or__(self, other: "BitVector") -> "BitVector":
        if not isinstance(other, BitVector):
            return NotImplemented
        result = self.clone()
        result.or_(other)
        return result

    def __xor__(self, other: "BitVector") -> "BitVector":
        if not isinstance(other, BitVector):
            return NotImplemented
        result = self.clone()
        result.xor(other)
        return result

    def __sub__(self, other: "BitVector") -> "BitVector":
        if not isinstance(other, BitVector):
            return NotImplemented
        result = self.clone()
        result.and_not(other)
        return result

    def __iand__(self, other: "BitVector") -> "BitVector":
        if not isinstance(other, BitVector):
            return NotImplemented
        self.and_(other)
        return self

    def __ior__(self, other: "BitVector") -> "BitVector":
        if not isinstance(other, BitVector):
            return NotImplemented
        self.or_(other)
        return self

    def __ixor__(self, other: "BitVector") -> "BitVector":
        if not isinstance(other, BitVector):
            return NotImplemented
        self.xor(other)
        return self

    def __isub__(self, other: "BitVector") -> "BitVector":
        if not isinstance(other, BitVector):
            return NotImplemented
        self.and_not(other)
        return self

    def __invert__(self) -> "BitVector":
        result = self.clone()
        result.not_()
        return result

    def __lshift__(self, n: int) -> "BitVector":
        if not isinstance(n, int):
            return NotImplemented
        result = self.clone()
        result.shift(n)
        return result

    def __rshift__(self, n: int) -> "BitVector":
        if not isinstance(n, int):
            return NotImplemented
        result = self.clone()
        result.shift(-n)
        return result

    def __ilshift__(self, n: int) -> "BitVector":
        if not isinstance(n, int):
            return NotImplemented
        self.shift(n)
        return self

    def __irshift__(self, n: int) -> "BitVector":
        if not isinstance(n, int):
            return NotImplemented
        self.shift(-n)
        return self


def _restore(size: int, data: bytes) -> BitVector:
    """Unpickle helper."""
    return BitVector.from_bytes(size, data)


def create(size: int, *indices: int) -> BitVector:
    """Create a vector of ``size`` bits with the given bits set.

    :param size: Number of bits, must be positive.
    :type size: int
    :param indices: Bit positions to set.
    :type indices: int
    :returns: New vector.
    :rtype: BitVector
    :raises InvalidSize: If ``size`` is not a positive integer.
    :raises IndexOutOfRange: If any index is outside ``[0, size)``.
    """
    return BitVector(size, indices)


def parse(text: str) -> BitVector:
    """Parse a binary-digit string; the rightmost digit becomes bit 0.

    Space characters are ignored and the size is the number of digits.

    :param text: Digits ``0``/``1``, optionally separated by spaces.
    :type text: str
    :returns: New vector.
    :rtype: BitVector
    :raises InvalidCharacter: If a character is not ``0``, ``1`` or space.
    :raises InvalidSize: If ``text`` holds no digits.
    """
    digits = text.replace(" ", "")
    for ch in digits:
        if ch != "0" and ch != "1":
            raise InvalidCharacter(ch)
    vector = BitVector(len(digits))
    top = len(digits) - 1
    for i, ch in enumerate(digits):
        if ch == "1":
            vector._set(top - i)
    return vector


def clone(vector: BitVector) -> BitVector:
    """Return an independent deep copy of ``vector``."""
    return vector.clone()


def concat(high: BitVector, low: BitVector) -> BitVector:
    """Concatenate two vectors; ``high`` supplies the high-order bits.

    :param high: Vector placed at bits ``[low.size, low.size + high.size)``.
    :type high: BitVector
    :param low: Vector placed at bits ``[0, low.size)``.
    :type low: BitVector
    :returns: New vector of size ``high.size + low.size``.
    :rtype: BitVector
    """
    return high.concat(low)
