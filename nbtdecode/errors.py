"""
errors.py - Exception hierarchy for NBT decoding

Every failure aborts the whole decode. Values already written into the
destination before the failing point are left as they are.
"""

from typing import Optional


class NBTError(Exception):
    """Base class for all decoding errors."""
    pass


class ConfigurationError(NBTError):
    """Absent stream, unknown compression, or transport setup failure."""
    pass


class StreamError(NBTError):
    """The underlying stream failed while reading."""
    pass


class TruncatedStreamError(StreamError):
    """The stream ended before the requested number of bytes."""

    def __init__(self, wanted: int, got: int, offset: int):
        self.wanted = wanted
        self.got = got
        self.offset = offset
        super().__init__(
            f"nbt: Unexpected end of stream at byte {offset}: "
            f"wanted {wanted} bytes, got {got}")


class DecodeError(NBTError):
    """The stream's shape does not match the destination.

    ``path`` locates the failing slot inside the destination
    (``Level.Sections[2].Y``); it is filled in as the error unwinds.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(self._format())

    def _format(self) -> str:
        if self.path:
            return f"{self.message} (at {self.path})"
        return self.message

    def within(self, segment: str) -> 'DecodeError':
        """Prefix the slot path with an enclosing field or list index."""
        if self.path is None:
            self.path = segment
        elif self.path.startswith('['):
            self.path = segment + self.path
        else:
            self.path = f"{segment}.{self.path}"
        self.args = (self._format(),)
        return self

    def __str__(self) -> str:
        return self._format()


class KindMismatchError(DecodeError):
    """Tag payload cannot be stored in the destination's declared kind."""

    def __init__(self, tag, kind):
        self.tag = tag
        self.kind = kind
        super().__init__(
            f"nbt: Tag is {tag}, but I don't know how to put that in a {kind}!")


class CapacityError(DecodeError):
    """ByteArray does not fit in a fixed-capacity destination."""

    def __init__(self, length: int, capacity: int):
        self.length = length
        self.capacity = capacity
        super().__init__(
            f"nbt: Byte array is of length {length}, but the array given "
            f"is only {capacity} long!")


class UnhandledFieldError(DecodeError):
    """Compound member with no matching destination field."""

    def __init__(self, tag, name: str):
        self.tag = tag
        self.name = name
        super().__init__(f"nbt: Unhandled {tag} field {name}")


class UnhandledTagError(DecodeError):
    """Tag value that is unknown or not supported by the decoder."""

    def __init__(self, tag):
        self.tag = tag
        super().__init__(f"nbt: Unhandled tag: {tag}")


class PortabilityError(DecodeError):
    """Destination declared as an architecture-width integer."""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(
            f"nbt: {kind} types are not supported for portability reasons. "
            f"Try Int32 or UInt32.")


class StructuralError(DecodeError):
    """End tag where a value was expected."""
    pass


class NestingTooDeepError(DecodeError):
    """Document nests lists/compounds deeper than the configured limit."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"nbt: Nesting deeper than {limit} levels")
