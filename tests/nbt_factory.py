"""
nbt_factory.py - Hand-built NBT byte buffers for tests

Documents are assembled from struct-packed pieces so tests never depend
on an encoder:

    data = document('Level',
                    entry('TAG_Int', 'SpawnX', payload.int(-12)),
                    entry('TAG_List', 'Pos', payload.list('TAG_Double', [
                        payload.double(1.5), payload.double(64.0)])))
"""

import struct

TAG_IDS = {
    'TAG_End': 0,
    'TAG_Byte': 1,
    'TAG_Short': 2,
    'TAG_Int': 3,
    'TAG_Long': 4,
    'TAG_Float': 5,
    'TAG_Double': 6,
    'TAG_Byte_Array': 7,
    'TAG_String': 8,
    'TAG_List': 9,
    'TAG_Compound': 10,
    'TAG_Int_Array': 11,
    'TAG_Long_Array': 12,
}


def _tag_id(tag) -> int:
    return TAG_IDS[tag] if isinstance(tag, str) else int(tag)


def name(text: str) -> bytes:
    """Uint16 length-prefixed UTF-8 text."""
    raw = text.encode('utf-8')
    return struct.pack('>H', len(raw)) + raw


class payload:
    """Payload encoders, one per tag; integers wrap to their width."""

    @staticmethod
    def byte(value):
        return struct.pack('>B', value & 0xFF)

    @staticmethod
    def short(value):
        return struct.pack('>H', value & 0xFFFF)

    @staticmethod
    def int(value):
        return struct.pack('>I', value & 0xFFFFFFFF)

    @staticmethod
    def long(value):
        return struct.pack('>Q', value & 0xFFFFFFFFFFFFFFFF)

    @staticmethod
    def float(value):
        return struct.pack('>f', value)

    @staticmethod
    def double(value):
        return struct.pack('>d', value)

    @staticmethod
    def byte_array(data):
        return struct.pack('>I', len(data)) + data

    @staticmethod
    def string(text):
        return name(text)

    @staticmethod
    def list(inner, items, count=None):
        if count is None:
            count = len(items)
        return bytes([_tag_id(inner)]) + struct.pack('>I', count) + b''.join(items)

    @staticmethod
    def compound(*entries):
        return b''.join(entries) + b'\x00'


def entry(tag, entry_name: str, body: bytes) -> bytes:
    """Named entry: tag byte, name, payload."""
    return bytes([_tag_id(tag)]) + name(entry_name) + body


def document(root_name: str, *entries: bytes) -> bytes:
    """Root compound holding the given entries."""
    return entry('TAG_Compound', root_name, payload.compound(*entries))
