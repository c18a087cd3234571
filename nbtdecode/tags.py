"""Tag type codes of the NBT wire format."""

from enum import IntEnum


class Tag(IntEnum):
    """One-byte payload discriminator."""
    END = 0
    BYTE = 1
    SHORT = 2
    INT = 3
    LONG = 4
    FLOAT = 5
    DOUBLE = 6
    BYTE_ARRAY = 7
    STRING = 8
    LIST = 9
    COMPOUND = 10
    INT_ARRAY = 11
    LONG_ARRAY = 12

    def __str__(self) -> str:
        return TAG_NAMES[self]

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


TAG_NAMES = {
    Tag.END: 'TAG_End',
    Tag.BYTE: 'TAG_Byte',
    Tag.SHORT: 'TAG_Short',
    Tag.INT: 'TAG_Int',
    Tag.LONG: 'TAG_Long',
    Tag.FLOAT: 'TAG_Float',
    Tag.DOUBLE: 'TAG_Double',
    Tag.BYTE_ARRAY: 'TAG_Byte_Array',
    Tag.STRING: 'TAG_String',
    Tag.LIST: 'TAG_List',
    Tag.COMPOUND: 'TAG_Compound',
    Tag.INT_ARRAY: 'TAG_Int_Array',
    Tag.LONG_ARRAY: 'TAG_Long_Array',
}

# Payload width in bytes of the fixed-width tags
SCALAR_WIDTH = {
    Tag.BYTE: 1,
    Tag.SHORT: 2,
    Tag.INT: 4,
    Tag.LONG: 8,
    Tag.FLOAT: 4,
    Tag.DOUBLE: 8,
}


def tag_name(value: int) -> str:
    """Display name for a raw tag byte, known or not."""
    try:
        return str(Tag(value))
    except ValueError:
        return f"TAG_Unknown({value})"
