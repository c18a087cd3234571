"""
kinds.py - Destination kinds for decoded values

Python integers have no width, so destination slots declare their kind
through annotations:

    @dataclass
    class Player:
        Health: Int16 = 0
        XpSeed: UInt32 = 0
        Pos: List[Float64] = field(default_factory=list)
        Key: FixedBytes.sized(16) = field(default_factory=FixedBytes.sized(16))

A plain ``int`` annotation is an architecture-width integer and is
rejected for every tag.
"""

import types
import typing
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, NewType, Optional, Tuple

from .fields import is_composite, new_instance

Int8 = NewType('Int8', int)
UInt8 = NewType('UInt8', int)
Int16 = NewType('Int16', int)
UInt16 = NewType('UInt16', int)
Int32 = NewType('Int32', int)
UInt32 = NewType('UInt32', int)
Int64 = NewType('Int64', int)
UInt64 = NewType('UInt64', int)
Float32 = NewType('Float32', float)
Float64 = NewType('Float64', float)


class Kind(Enum):
    """Storage class of a destination slot."""
    BOOL = 'bool'
    INT8 = 'int8'
    UINT8 = 'uint8'
    INT16 = 'int16'
    UINT16 = 'uint16'
    INT32 = 'int32'
    UINT32 = 'uint32'
    INT64 = 'int64'
    UINT64 = 'uint64'
    FLOAT32 = 'float32'
    FLOAT64 = 'float64'
    STRING = 'string'
    BYTES = 'bytes'
    BYTEARRAY = 'bytearray'
    FIXED_BYTES = 'fixed bytes'
    LIST = 'list'
    COMPOUND = 'compound'
    NATIVE_INT = 'int'
    UNSUPPORTED = 'unsupported'

    def __str__(self) -> str:
        return self.value


# Integer kinds: (width in bytes, signed)
INTEGER_KINDS: Dict[Kind, Tuple[int, bool]] = {
    Kind.INT8: (1, True),
    Kind.UINT8: (1, False),
    Kind.INT16: (2, True),
    Kind.UINT16: (2, False),
    Kind.INT32: (4, True),
    Kind.UINT32: (4, False),
    Kind.INT64: (8, True),
    Kind.UINT64: (8, False),
}

_DIRECT_KINDS = {
    bool: Kind.BOOL,
    Int8: Kind.INT8,
    UInt8: Kind.UINT8,
    Int16: Kind.INT16,
    UInt16: Kind.UINT16,
    Int32: Kind.INT32,
    UInt32: Kind.UINT32,
    Int64: Kind.INT64,
    UInt64: Kind.UINT64,
    Float32: Kind.FLOAT32,
    Float64: Kind.FLOAT64,
    float: Kind.FLOAT64,
    str: Kind.STRING,
    bytes: Kind.BYTES,
    bytearray: Kind.BYTEARRAY,
    int: Kind.NATIVE_INT,
}


_UNION_ORIGINS = (typing.Union, getattr(types, 'UnionType', typing.Union))


class FixedBytes(bytearray):
    """Byte buffer whose length is its capacity.

    Use ``FixedBytes.sized(n)`` to get the type for a given capacity; an
    instance starts zero-filled. ByteArray payloads longer than the
    capacity are rejected, shorter ones fill a prefix.
    """
    capacity = 0

    def __init__(self, data: bytes = b''):
        if len(data) > self.capacity:
            raise ValueError(
                f"{len(data)} bytes do not fit in a capacity of {self.capacity}")
        super().__init__(self.capacity)
        self[:len(data)] = data

    @classmethod
    def sized(cls, capacity: int) -> type:
        """Return the FixedBytes subclass holding exactly *capacity* bytes."""
        if capacity < 0:
            raise ValueError(f"Capacity must be non-negative, got {capacity}")
        return _sized_fixed_bytes(capacity)


@lru_cache(maxsize=None)
def _sized_fixed_bytes(capacity: int) -> type:
    return type(f'FixedBytes{capacity}', (FixedBytes,), {'capacity': capacity})


def unwrap_optional(type_: Any) -> Any:
    """``Optional[X]`` -> ``X``; anything else unchanged."""
    if typing.get_origin(type_) in _UNION_ORIGINS:
        args = [a for a in typing.get_args(type_) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return type_


def classify(type_: Any) -> Kind:
    """Map a declared annotation to its destination kind."""
    type_ = unwrap_optional(type_)
    try:
        kind = _DIRECT_KINDS.get(type_)
    except TypeError:  # unhashable annotation
        return Kind.UNSUPPORTED
    if kind is not None:
        return kind
    if isinstance(type_, type) and issubclass(type_, FixedBytes):
        return Kind.FIXED_BYTES
    if typing.get_origin(type_) is list and typing.get_args(type_):
        return Kind.LIST
    if is_composite(type_):
        return Kind.COMPOUND
    return Kind.UNSUPPORTED


def element_type(list_type: Any) -> Any:
    """Element annotation of ``List[X]``."""
    return typing.get_args(unwrap_optional(list_type))[0]


def describe(type_: Any) -> str:
    """Short human-readable name of an annotation for error messages."""
    type_ = unwrap_optional(type_)
    if typing.get_origin(type_) is not None:
        return repr(type_).replace('typing.', '')
    name = getattr(type_, '__name__', None)
    return name if name else repr(type_)


def zero_value(type_: Any) -> Optional[Any]:
    """Empty value of the given annotation, used for new list elements."""
    type_ = unwrap_optional(type_)
    kind = classify(type_)
    if kind is Kind.BOOL:
        return False
    if kind in INTEGER_KINDS or kind is Kind.NATIVE_INT:
        return 0
    if kind in (Kind.FLOAT32, Kind.FLOAT64):
        return 0.0
    if kind is Kind.STRING:
        return ''
    if kind is Kind.BYTES:
        return b''
    if kind is Kind.BYTEARRAY:
        return bytearray()
    if kind is Kind.FIXED_BYTES:
        return type_()
    if kind is Kind.LIST:
        return []
    if kind is Kind.COMPOUND:
        return new_instance(type_)
    return None
