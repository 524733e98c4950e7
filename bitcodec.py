import logging
import struct

from bitops import ByteReader, storage_length
from bitvector import BitVector, DecodeError

logger = logging.getLogger(__name__)


class BitVectorCodec:
    """Length-prefixed binary encoding of :class:`BitVector`.

    Format (little-endian):
    - Version: uint8
    - Size in bits: uint64
    - Storage: ``ceil(size / 8)`` raw bytes, LSB-first, padding bits zero

    The encoding is stable within one ``VERSION``; there is no
    compatibility promise across versions.

    :ivar VERSION: Format version written by :meth:`marshal`.
    :type VERSION: int
    :ivar HEADER: Layout of the version and size fields.
    :type HEADER: struct.Struct
    """

    VERSION = 1
    HEADER = struct.Struct("<BQ")

    def marshal(self, vector: BitVector) -> bytes:
        """Encode ``vector``.

        :param vector: Vector to encode.
        :type vector: BitVector
        :returns: Header followed by the packed storage.
        :rtype: bytes
        """
        return self.HEADER.pack(self.VERSION, vector.size) + vector.to_bytes()

    def unmarshal(self, data: bytes) -> BitVector:
        """Decode a payload produced by :meth:`marshal`.

        :param data: Encoded vector.
        :type data: bytes
        :returns: Reconstructed vector.
        :rtype: BitVector
        :raises DecodeError: If the payload is not bytes-like, is truncated,
            has trailing data, an unsupported version, a zero size, or
            padding bits set.
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise DecodeError(
                f"Expected a bytes-like payload, got {type(data).__name__}"
            )
        reader = ByteReader(data)
        try:
            version, size = reader.read_struct(self.HEADER)
            if version != self.VERSION:
                raise DecodeError(f"Unsupported version: {version}")
            if size == 0:
                raise DecodeError("Encoded size must be positive")
            storage = reader.read_bytes(storage_length(size))
        except EOFError as e:
            logger.debug("Rejected bit vector payload: %s", e)
            raise DecodeError(f"Truncated payload: {e}") from e
        except DecodeError as e:
            logger.debug("Rejected bit vector payload: %s", e)
            raise
        if reader.remaining:
            logger.debug(
                "Rejected bit vector payload: %d trailing bytes",
                reader.remaining,
            )
            raise DecodeError(
                f"Unexpected {reader.remaining} trailing bytes after payload"
            )
        try:
            return BitVector.from_bytes(size, storage)
        except ValueError as e:
            logger.debug("Rejected bit vector payload: %s", e)
            raise DecodeError(str(e)) from e


def marshal(vector: BitVector) -> bytes:
    """Encode ``vector`` with the current :class:`BitVectorCodec` format."""
    return BitVectorCodec().marshal(vector)


def unmarshal(data: bytes) -> BitVector:
    """Decode a payload produced by :func:`marshal`.

    :raises DecodeError: If the payload is truncated or malformed.
    """
    return BitVectorCodec().unmarshal(data)
