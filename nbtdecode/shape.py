"""
shape.py - Target shapes described in YAML

Builds dataclass types from a shape document, so an NBT file can be
decoded without writing Python classes for it.

Shape format:
    name: Level
    fields:
      - name: Data
        $ref: '#/definitions/LevelData'
      - name: Pos
        type: list
        items: {type: f64}
    definitions:
      LevelData:
        fields:
          - {name: LevelName, type: string}
          - {name: Seed, type: bytes, length: 16}

Usage:
    from nbtdecode.shape import load_shape

    Level = load_shape('level.yaml')
    level = read_file('level.dat', Level)
"""

import keyword
import re
from dataclasses import field, make_dataclass
from functools import partial
from pathlib import Path
from typing import Any, Dict, List, Set, Union

import yaml

from .fields import NBT_METADATA_KEY
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
    zero_value,
)


class ShapeDefinitionError(ValueError):
    """Shape document is malformed."""
    pass


# Canonical: u8/s8, Aliases: uint8/int8/i8
TYPE_MAP = {
    'bool': bool,
    'u8': UInt8, 'uint8': UInt8,
    's8': Int8, 'i8': Int8, 'int8': Int8,
    'u16': UInt16, 'uint16': UInt16,
    's16': Int16, 'i16': Int16, 'int16': Int16,
    'u32': UInt32, 'uint32': UInt32,
    's32': Int32, 'i32': Int32, 'int32': Int32,
    'u64': UInt64, 'uint64': UInt64,
    's64': Int64, 'i64': Int64, 'int64': Int64,
    'f32': Float32, 'float': Float32,
    'f64': Float64, 'double': Float64,
    'string': str,
}

_NON_IDENTIFIER = re.compile(r'[^0-9A-Za-z_]')


def _identifier(name: str) -> str:
    ident = _NON_IDENTIFIER.sub('_', name)
    if not ident or ident[0].isdigit() or ident[0] == '_':
        ident = 'f_' + ident
    if keyword.iskeyword(ident):
        ident += '_'
    return ident


class ShapeBuilder:
    """Turns a shape dict into (possibly nested) dataclass types."""

    def __init__(self, shape: Dict[str, Any]):
        if not isinstance(shape, dict):
            raise ShapeDefinitionError("Shape document must be a mapping")
        self.shape = shape
        self.name = shape.get('name', 'Root')
        self.definitions = shape.get('definitions') or {}
        self._built: Dict[str, type] = {}
        self._building: Set[str] = set()

    def build(self) -> type:
        """Build the root type."""
        return self._build_object(self.name, self.shape.get('fields'), self.name)

    def _resolve_ref(self, ref: str) -> type:
        """
        Resolve a $ref reference to its built type.

        Supports: #/definitions/name format (local references)
        """
        if not isinstance(ref, str) or not ref.startswith('#/definitions/'):
            raise ShapeDefinitionError(f"Unsupported $ref format: {ref}")

        def_name = ref.split('/')[-1]
        if def_name in self._built:
            return self._built[def_name]
        if def_name not in self.definitions:
            raise ShapeDefinitionError(f"Definition not found: {def_name}")
        if def_name in self._building:
            raise ShapeDefinitionError(f"Recursive definition: {def_name}")

        self._building.add(def_name)
        definition = self.definitions[def_name] or {}
        built = self._build_object(def_name, definition.get('fields'), def_name)
        self._building.discard(def_name)
        self._built[def_name] = built
        return built

    def _field_type(self, field_def: Dict[str, Any], path: str) -> Any:
        if not isinstance(field_def, dict):
            raise ShapeDefinitionError(f"Field at {path} must be a mapping")
        if '$ref' in field_def:
            return self._resolve_ref(field_def['$ref'])

        field_type = field_def.get('type')
        if field_type in TYPE_MAP:
            return TYPE_MAP[field_type]

        if field_type == 'bytes':
            length = field_def.get('length')
            if length is None:
                return bytes
            if not isinstance(length, int) or isinstance(length, bool) or length < 0:
                raise ShapeDefinitionError(f"Invalid bytes length at {path}: {length!r}")
            return FixedBytes.sized(length)

        if field_type == 'list':
            items = field_def.get('items')
            if items is None:
                raise ShapeDefinitionError(f"List at {path} needs 'items'")
            return List[self._field_type(items, f'{path}[]')]

        if field_type == 'object':
            name = field_def.get('object') or field_def.get('name') or 'Object'
            return self._build_object(name, field_def.get('fields'), path)

        raise ShapeDefinitionError(f"Unknown type at {path}: {field_type}")

    def _build_object(self, name: str, fields: Any, path: str) -> type:
        if not isinstance(fields, list):
            raise ShapeDefinitionError(f"Object at {path} needs a 'fields' list")

        specs = []
        attrs: Set[str] = set()
        for field_def in fields:
            nbt_name = field_def.get('name') if isinstance(field_def, dict) else None
            if not isinstance(nbt_name, str):
                raise ShapeDefinitionError(f"Every field at {path} needs a 'name'")
            type_ = self._field_type(field_def, f'{path}.{nbt_name}')

            attr = _identifier(nbt_name)
            base, n = attr, 2
            while attr in attrs:
                attr = f'{base}_{n}'
                n += 1
            attrs.add(attr)

            specs.append((attr, type_, field(
                default_factory=partial(zero_value, type_),
                metadata={NBT_METADATA_KEY: nbt_name})))

        return make_dataclass(_identifier(str(name)), specs)


def build_shape(shape: Dict[str, Any]) -> type:
    """Build the root dataclass type of a parsed shape document."""
    return ShapeBuilder(shape).build()


def load_shape_string(text: str) -> type:
    """Build the root type from YAML text."""
    return build_shape(yaml.safe_load(text))


def load_shape(path: Union[str, Path]) -> type:
    """Build the root type from a YAML file."""
    return load_shape_string(Path(path).read_text())
