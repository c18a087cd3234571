"""
reader.py - Big-endian stream reader for NBT documents

Wraps a byte stream, optionally behind a gzip or zlib transport, and
exposes the fixed-width and length-prefixed reads the tag decoder needs.
Reads are strictly sequential; the stream is never rewound.

Usage:
    from nbtdecode.reader import StreamReader, Compression

    reader = StreamReader(Compression.GZIP, open('level.dat', 'rb'))
    tag = reader.read_u8()
    name = reader.read_string()
"""

import io
import logging
import struct
import zlib
from enum import IntEnum
from typing import Any, Union

from .errors import ConfigurationError, StreamError, TruncatedStreamError

logger = logging.getLogger(__name__)

# Underlying streams are read in chunks of at most this size
CHUNK_SIZE = 64 * 1024

_FLOAT32 = struct.Struct('>f')
_FLOAT64 = struct.Struct('>d')
_UINT16 = struct.Struct('>H')
_UINT32 = struct.Struct('>I')

_LENGTH_PREFIX = {
    2: _UINT16,
    4: _UINT32,
}


class Compression(IntEnum):
    """Transport wrapped around the NBT byte stream."""
    NONE = 0
    GZIP = 1
    ZLIB = 2

    @classmethod
    def parse(cls, value: Any) -> 'Compression':
        """Accept a Compression, its integer value or its name."""
        if isinstance(value, Compression):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        elif isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        raise ConfigurationError(f"nbt: Unknown compression type: {value!r}")


_WBITS = {
    Compression.GZIP: 16 + zlib.MAX_WBITS,
    Compression.ZLIB: zlib.MAX_WBITS,
}


def detect_compression(head: bytes) -> Compression:
    """Guess the transport from the first bytes of a document."""
    if head[:2] == b'\x1f\x8b':
        return Compression.GZIP
    if len(head) >= 2:
        cmf, flg = head[0], head[1]
        if cmf & 0x0F == 8 and (cmf << 8 | flg) % 31 == 0:
            return Compression.ZLIB
    return Compression.NONE


class _InflatingStream:
    """Incremental gzip/zlib decompression over a readable stream."""

    def __init__(self, raw, compression: Compression):
        self._raw = raw
        self._name = compression.name.lower()
        self._wbits = _WBITS[compression]
        self._inflater = zlib.decompressobj(self._wbits)
        self._buffer = bytearray()
        self._eof = False

        # Decode up to the first output byte so a bad header fails here
        try:
            while not self._buffer and not self._eof:
                self._fill()
        except zlib.error as e:
            raise ConfigurationError(
                f"nbt: Invalid {self._name} stream: {e}") from e
        if not self._buffer and not self._inflater.eof:
            raise ConfigurationError(
                f"nbt: Empty or truncated {self._name} stream")

    def _fill(self) -> None:
        if self._inflater.eof:
            # A gzip file may hold several members back to back
            if self._wbits != _WBITS[Compression.GZIP]:
                self._eof = True
                return
            rest = self._inflater.unused_data or self._raw.read(CHUNK_SIZE)
            if not rest:
                self._eof = True
                return
            self._inflater = zlib.decompressobj(self._wbits)
            self._buffer += self._inflater.decompress(rest)
            return
        chunk = self._raw.read(CHUNK_SIZE)
        if not chunk:
            self._eof = True
            self._buffer += self._inflater.flush()
            return
        self._buffer += self._inflater.decompress(chunk)

    def read(self, n: int) -> bytes:
        try:
            while len(self._buffer) < n and not self._eof:
                self._fill()
        except zlib.error as e:
            raise StreamError(f"nbt: Corrupt {self._name} data: {e}") from e
        data = bytes(self._buffer[:n])
        del self._buffer[:n]
        return data


class StreamReader:
    """Typed big-endian reads over a raw or decompressed byte stream.

    Any read that cannot be satisfied in full raises
    ``TruncatedStreamError``; failures of the underlying stream raise
    ``StreamError``. There is no recovery: the format has no
    resynchronisation marker.
    """

    def __init__(self, compression: Union[Compression, int, str], stream):
        if stream is None:
            raise ConfigurationError("nbt: Input stream is None")
        if isinstance(stream, (bytes, bytearray, memoryview)):
            stream = io.BytesIO(stream)
        elif not callable(getattr(stream, 'read', None)):
            raise ConfigurationError(
                f"nbt: Input stream is not readable: {type(stream).__name__}")

        self.compression = Compression.parse(compression)
        self.bytes_read = 0

        if self.compression is Compression.NONE:
            self._source = stream
        else:
            try:
                self._source = _InflatingStream(stream, self.compression)
            except OSError as e:
                raise ConfigurationError(
                    f"nbt: Cannot open {self.compression.name.lower()} "
                    f"stream: {e}") from e
        logger.debug("Reading NBT stream with compression=%s",
                     self.compression.name)

    def read_exact(self, n: int) -> bytes:
        """Read exactly *n* bytes."""
        if n == 0:
            return b''
        chunks = []
        remaining = n
        try:
            while remaining > 0:
                chunk = self._source.read(min(remaining, CHUNK_SIZE))
                if not chunk:
                    break
                chunks.append(chunk)
                remaining -= len(chunk)
        except OSError as e:
            raise StreamError(f"nbt: Read failed at byte {self.bytes_read}: {e}") from e
        data = b''.join(chunks)
        if len(data) < n:
            raise TruncatedStreamError(n, len(data), self.bytes_read)
        self.bytes_read += n
        return data

    def read_int(self, width: int, signed: bool) -> int:
        """Big-endian two's-complement (or unsigned) integer of *width* bytes."""
        return int.from_bytes(self.read_exact(width), 'big', signed=signed)

    def read_u8(self) -> int:
        return self.read_exact(1)[0]

    def read_u16(self) -> int:
        return self.read_fixed(_UINT16)

    def read_u32(self) -> int:
        return self.read_fixed(_UINT32)

    def read_fixed(self, fmt: struct.Struct) -> Any:
        """Unpack one value with a precompiled big-endian struct."""
        return fmt.unpack(self.read_exact(fmt.size))[0]

    def read_float32(self) -> float:
        return self.read_fixed(_FLOAT32)

    def read_float64(self) -> float:
        return self.read_fixed(_FLOAT64)

    def read_length_prefixed(self, length_width: int) -> bytes:
        """Read an unsigned length of *length_width* bytes, then that many bytes."""
        length = self.read_fixed(_LENGTH_PREFIX[length_width])
        return self.read_exact(length)

    def read_string(self) -> str:
        """Uint16-prefixed text.

        Bytes are captured as-is: invalid UTF-8 survives as surrogate
        escapes rather than failing the decode.
        """
        return self.read_length_prefixed(2).decode('utf-8', errors='surrogateescape')
