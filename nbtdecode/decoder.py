"""
decoder.py - Recursive tag decoder for NBT documents

Reads one named root tag and materialises it into a caller-supplied
destination. Every step is driven by the tag byte in the stream; the
destination's declared kinds must agree with what the stream holds, or
decoding stops with a DecodeError.

Usage:
    from nbtdecode import decode, unmarshal, Compression

    level = Level()
    with open('level.dat', 'rb') as f:
        decode(Compression.GZIP, f, level)

    # Or let the decoder build the destination
    level = unmarshal(Compression.GZIP, data, Level)
"""

import logging
from pathlib import Path
from typing import Any, Optional, Tuple, Type, TypeVar, Union

from .errors import (
    CapacityError,
    ConfigurationError,
    DecodeError,
    KindMismatchError,
    NestingTooDeepError,
    PortabilityError,
    StructuralError,
    UnhandledFieldError,
    UnhandledTagError,
)
from .fields import Slot, ValueSlot, slots_of
from .kinds import (
    INTEGER_KINDS,
    FixedBytes,
    Kind,
    classify,
    describe,
    element_type,
    unwrap_optional,
    zero_value,
)
from .reader import Compression, StreamReader, detect_compression
from .tags import SCALAR_WIDTH, Tag, tag_name

logger = logging.getLogger(__name__)

# Lists and compounds may nest this deep before decoding is refused
DEFAULT_MAX_DEPTH = 256

# Destination kinds each fixed-width tag may be stored in
SCALAR_TARGETS = {
    Tag.BYTE: (Kind.BOOL, Kind.INT8, Kind.UINT8),
    Tag.SHORT: (Kind.INT16, Kind.UINT16),
    Tag.INT: (Kind.INT32, Kind.UINT32),
    Tag.LONG: (Kind.INT64, Kind.UINT64),
    Tag.FLOAT: (Kind.FLOAT32,),
    Tag.DOUBLE: (Kind.FLOAT64,),
}

T = TypeVar('T')


class TagDecoder:
    """
    Recursive-descent decoder over a StreamReader.

    One decoder handles one document; it keeps no state between values
    beyond the reader's position.
    """

    def __init__(self, reader: StreamReader, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 1:
            raise ConfigurationError(f"nbt: max_depth must be at least 1, got {max_depth}")
        self.reader = reader
        self.max_depth = max_depth

    def read_tag(self) -> Tuple[str, Tag]:
        """Read a tag byte and, unless it is TAG_End, the name after it."""
        tag = self._read_tag_byte()
        if tag is Tag.END:
            return '', tag
        return self.reader.read_string(), tag

    def _read_tag_byte(self) -> Tag:
        raw = self.reader.read_u8()
        try:
            return Tag(raw)
        except ValueError:
            raise UnhandledTagError(tag_name(raw)) from None

    def decode(self, destination: Any) -> None:
        """Decode the root tag into *destination* in place."""
        self.decode_into(ValueSlot(type(destination), destination))

    def decode_into(self, slot: Slot) -> None:
        """Decode the root tag into an arbitrary slot."""
        name, tag = self.read_tag()
        if tag is Tag.END:
            raise StructuralError(
                "nbt: Document starts with TAG_End; expected a named root tag")
        logger.debug("Root %s %r -> %s", tag, name, describe(slot.type))
        self.read_value(tag, slot, 0)
        logger.debug("Decoded %d bytes", self.reader.bytes_read)

    def read_value(self, tag: Tag, slot: Slot, depth: int) -> None:
        """Read one payload of shape *tag* and store it in *slot*."""
        kind = classify(slot.type)
        if kind is Kind.NATIVE_INT:
            raise PortabilityError(describe(slot.type))

        if tag is Tag.END:
            raise StructuralError(
                "nbt: TAG_End is only valid as a compound terminator")

        if tag in SCALAR_TARGETS:
            self._read_scalar(tag, kind, slot)
        elif tag is Tag.BYTE_ARRAY:
            self._read_byte_array(kind, slot)
        elif tag is Tag.STRING:
            if kind is not Kind.STRING:
                raise KindMismatchError(tag, describe(slot.type))
            slot.set(self.reader.read_string())
        elif tag is Tag.LIST:
            self._read_list(kind, slot, depth + 1)
        elif tag is Tag.COMPOUND:
            self._read_compound(kind, slot, depth + 1)
        else:
            # TAG_Int_Array and TAG_Long_Array are recognised but not decoded
            raise UnhandledTagError(tag)

    def _read_scalar(self, tag: Tag, kind: Kind, slot: Slot) -> None:
        if tag is Tag.FLOAT:
            value = self.reader.read_float32()
        elif tag is Tag.DOUBLE:
            value = self.reader.read_float64()
        else:
            # Sign comes from the destination; bool takes the raw byte
            _, signed = INTEGER_KINDS.get(kind, (0, False))
            value = self.reader.read_int(SCALAR_WIDTH[tag], signed)

        if kind not in SCALAR_TARGETS[tag]:
            raise KindMismatchError(tag, describe(slot.type))

        if kind is Kind.BOOL:
            value = value != 0
        slot.set(value)

    def _read_byte_array(self, kind: Kind, slot: Slot) -> None:
        length = self.reader.read_u32()

        if kind is Kind.FIXED_BYTES:
            type_ = unwrap_optional(slot.type)
            if type_.capacity < length:
                raise CapacityError(length, type_.capacity)
            target = slot.get()
            if not isinstance(target, type_):
                target = type_()
            target[:length] = self.reader.read_exact(length)
            slot.set(target)
        elif kind is Kind.BYTEARRAY:
            target = slot.get()
            data = self.reader.read_exact(length)
            if isinstance(target, bytearray) and not isinstance(target, FixedBytes):
                target[:] = data
            else:
                target = bytearray(data)
            slot.set(target)
        elif kind is Kind.BYTES:
            slot.set(self.reader.read_exact(length))
        else:
            raise KindMismatchError(Tag.BYTE_ARRAY, describe(slot.type))

    def _check_depth(self, depth: int) -> None:
        if depth > self.max_depth:
            raise NestingTooDeepError(self.max_depth)

    def _read_list(self, kind: Kind, slot: Slot, depth: int) -> None:
        inner = self._read_tag_byte()
        count = self.reader.read_u32()

        if kind is not Kind.LIST:
            raise KindMismatchError(Tag.LIST, describe(slot.type))
        self._check_depth(depth)
        if inner is Tag.END and count:
            raise StructuralError(
                f"nbt: TAG_List of TAG_End cannot hold {count} elements")

        item_type = element_type(slot.type)
        target = slot.get()
        if isinstance(target, list):
            del target[:]
        else:
            target = []
        slot.set(target)

        for i in range(count):
            item = ValueSlot(item_type, zero_value(item_type))
            try:
                self.read_value(inner, item, depth)
            except DecodeError as e:
                e.within(f'[{i}]')
                raise
            target.append(item.get())

    def _read_compound(self, kind: Kind, slot: Slot, depth: int) -> None:
        if kind is not Kind.COMPOUND:
            raise KindMismatchError(Tag.COMPOUND, describe(slot.type))
        self._check_depth(depth)

        type_ = unwrap_optional(slot.type)
        target = slot.get()
        if not isinstance(target, type_):
            target = zero_value(type_)
            slot.set(target)
        members = slots_of(target)

        while True:
            name, tag = self.read_tag()
            if tag is Tag.END:
                break
            member = members.get(name)
            if member is None:
                raise UnhandledFieldError(tag, name)
            try:
                self.read_value(tag, member, depth)
            except DecodeError as e:
                e.within(name)
                raise


def decode(compression: Union[Compression, int, str], stream: Any,
           destination: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    """
    Decode one NBT document from *stream* into *destination* in place.

    Args:
        compression: Transport around the document (none, gzip, zlib)
        stream: Readable binary file object, or bytes
        destination: Composite instance (or bytearray/FixedBytes) to fill
        max_depth: Maximum list/compound nesting

    Raises:
        ConfigurationError: bad stream, compression or transport header
        StreamError: the stream failed or ended early
        DecodeError: the document does not fit the destination
    """
    reader = StreamReader(compression, stream)
    if destination is None:
        raise ConfigurationError("nbt: Destination is None")
    TagDecoder(reader, max_depth).decode(destination)


def unmarshal(compression: Union[Compression, int, str], stream: Any,
              target_type: Type[T], *, max_depth: int = DEFAULT_MAX_DEPTH) -> T:
    """Decode one NBT document into a new value of *target_type*."""
    reader = StreamReader(compression, stream)
    slot = ValueSlot(target_type, zero_value(target_type))
    TagDecoder(reader, max_depth).decode_into(slot)
    return slot.get()


def decode_bytes(data: bytes, destination: Any,
                 compression: Union[Compression, int, str] = Compression.NONE,
                 **kwargs) -> None:
    """Convenience method: decode an in-memory document in place."""
    decode(compression, data, destination, **kwargs)


def read_file(path: Union[str, Path], target_type: Type[T],
              compression: Optional[Union[Compression, int, str]] = None,
              **kwargs) -> T:
    """
    Decode an NBT file into a new value of *target_type*.

    The compression is detected from the file's first bytes when not
    given.
    """
    with open(path, 'rb') as f:
        if compression is None:
            compression = detect_compression(f.read(2))
            f.seek(0)
            logger.debug("Detected %s compression for %s", compression.name, path)
        return unmarshal(compression, f, target_type, **kwargs)
