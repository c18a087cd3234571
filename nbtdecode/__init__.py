"""
nbtdecode - Decoder for the Named Binary Tag (NBT) format

Decodes big-endian, tag-typed NBT documents (raw, gzip or zlib) into
dataclasses whose annotations declare the expected kinds.

Usage:
    from dataclasses import dataclass, field
    from typing import List
    from nbtdecode import Compression, Int32, Float64, unmarshal

    @dataclass
    class Player:
        Name: str = ''
        Score: Int32 = 0
        Pos: List[Float64] = field(default_factory=list)

    player = unmarshal(Compression.GZIP, open('player.dat', 'rb'), Player)
"""

from .decoder import (
    DEFAULT_MAX_DEPTH,
    TagDecoder,
    decode,
    decode_bytes,
    read_file,
    unmarshal,
)
from .errors import (
    CapacityError,
    ConfigurationError,
    DecodeError,
    KindMismatchError,
    NBTError,
    NestingTooDeepError,
    PortabilityError,
    StreamError,
    StructuralError,
    TruncatedStreamError,
    UnhandledFieldError,
    UnhandledTagError,
)
from .fields import FieldSpec, fields_of, register_fields, slots_of
from .kinds import (
    FixedBytes,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from .reader import Compression, StreamReader, detect_compression
from .tags import Tag

__version__ = '0.1.0'

__all__ = [
    'CapacityError', 'Compression', 'ConfigurationError', 'DEFAULT_MAX_DEPTH',
    'DecodeError', 'FieldSpec', 'FixedBytes', 'Float32', 'Float64', 'Int16',
    'Int32', 'Int64', 'Int8', 'KindMismatchError', 'NBTError',
    'NestingTooDeepError', 'PortabilityError', 'StreamError', 'StreamReader',
    'StructuralError', 'Tag', 'TagDecoder', 'TruncatedStreamError', 'UInt16',
    'UInt32', 'UInt64', 'UInt8', 'UnhandledFieldError', 'UnhandledTagError',
    'decode', 'decode_bytes', 'detect_compression', 'fields_of', 'read_file',
    'register_fields', 'slots_of', 'unmarshal',
]
