"""
Tests for YAML shape documents.
"""

import dataclasses
from typing import List

import pytest

from nbtdecode import Compression, FixedBytes, Float64, Int32, UInt8, fields_of, unmarshal
from nbtdecode.shape import (
    ShapeDefinitionError,
    build_shape,
    load_shape,
    load_shape_string,
)
from nbt_factory import document, entry, payload


LEVEL_SHAPE = """
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
      - {name: SpawnX, type: i32}
      - {name: raining, type: bool}
      - {name: Seed, type: bytes, length: 4}
      - {name: Version, type: object, fields: [{name: Id, type: u8}]}
"""


def level_document() -> bytes:
    data = payload.compound(
        entry('TAG_String', 'LevelName', payload.string('World')),
        entry('TAG_Int', 'SpawnX', payload.int(-120)),
        entry('TAG_Byte', 'raining', payload.byte(1)),
        entry('TAG_Byte_Array', 'Seed', payload.byte_array(b'\x01\x02')),
        entry('TAG_Compound', 'Version', payload.compound(
            entry('TAG_Byte', 'Id', payload.byte(200)))),
    )
    return document('',
                    entry('TAG_Compound', 'Data', data),
                    entry('TAG_List', 'Pos', payload.list(
                        'TAG_Double', [payload.double(0.5), payload.double(64.0)])))


class TestBuildShape:
    """Shape -> dataclass types."""

    def test_level_shape(self):
        Level = load_shape_string(LEVEL_SHAPE)
        assert dataclasses.is_dataclass(Level)
        assert Level.__name__ == 'Level'

        specs = fields_of(Level)
        assert set(specs) == {'Data', 'Pos'}
        assert specs['Pos'].type == List[Float64]

        data_specs = fields_of(specs['Data'].type)
        assert data_specs['SpawnX'].type is Int32
        assert data_specs['Seed'].type is FixedBytes.sized(4)
        assert fields_of(data_specs['Version'].type)['Id'].type is UInt8

    def test_decode_with_shape(self):
        Level = load_shape_string(LEVEL_SHAPE)
        level = unmarshal(Compression.NONE, level_document(), Level)

        assert level.Data.LevelName == 'World'
        assert level.Data.SpawnX == -120
        assert level.Data.raining is True
        assert level.Data.Seed == b'\x01\x02\x00\x00'
        assert level.Data.Version.Id == 200
        assert level.Pos == [0.5, 64.0]

    def test_defaults_are_zero_values(self):
        Level = load_shape_string(LEVEL_SHAPE)
        level = Level()
        assert level.Pos == []
        assert level.Data.SpawnX == 0
        assert level.Data.Seed == b'\x00' * 4

    def test_awkward_names(self):
        Shape = build_shape({'fields': [
            {'name': 'minecraft:id', 'type': 'string'},
            {'name': '2nd', 'type': 'i32'},
            {'name': 'class', 'type': 'i32'},
            {'name': '_hidden', 'type': 'i32'},
            {'name': 'a-b', 'type': 'i32'},
            {'name': 'a_b', 'type': 'i32'},
        ]})
        specs = fields_of(Shape)
        assert specs['minecraft:id'].attr == 'minecraft_id'
        assert specs['2nd'].attr == 'f_2nd'
        assert specs['class'].attr == 'class_'
        assert specs['_hidden'].attr == 'f__hidden'
        assert specs['a-b'].attr == 'a_b'
        assert specs['a_b'].attr == 'a_b_2'
        assert Shape.__name__ == 'Root'

    def test_unsized_bytes(self):
        Shape = build_shape({'fields': [{'name': 'Raw', 'type': 'bytes'}]})
        assert fields_of(Shape)['Raw'].type is bytes

    def test_shared_definition_built_once(self):
        Shape = build_shape({
            'fields': [{'name': 'A', '$ref': '#/definitions/P'},
                       {'name': 'B', '$ref': '#/definitions/P'}],
            'definitions': {'P': {'fields': [{'name': 'x', 'type': 'i32'}]}},
        })
        specs = fields_of(Shape)
        assert specs['A'].type is specs['B'].type

    def test_load_from_file(self, tmp_path):
        path = tmp_path / 'level.yaml'
        path.write_text(LEVEL_SHAPE)
        assert load_shape(path).__name__ == 'Level'


class TestShapeErrors:
    """Malformed shape documents."""

    @pytest.mark.parametrize("shape,message", [
        ([], "mapping"),
        ({}, "fields"),
        ({'fields': [{'type': 'i32'}]}, "name"),
        ({'fields': [{'name': 'x', 'type': 'i128'}]}, "Unknown type"),
        ({'fields': [{'name': 'x', 'type': 'list'}]}, "items"),
        ({'fields': [{'name': 'x', 'type': 'bytes', 'length': -1}]}, "length"),
        ({'fields': [{'name': 'x', '$ref': 'other.yaml#/P'}]}, "Unsupported"),
        ({'fields': [{'name': 'x', '$ref': '#/definitions/Missing'}]}, "not found"),
        ({'fields': ['x']}, "name"),
    ])
    def test_rejected(self, shape, message):
        with pytest.raises(ShapeDefinitionError, match=message):
            build_shape(shape)

    def test_recursive_definition(self):
        shape = {
            'fields': [{'name': 'root', '$ref': '#/definitions/Tree'}],
            'definitions': {'Tree': {'fields': [
                {'name': 'kids', 'type': 'list', 'items': {'$ref': '#/definitions/Tree'}}]}},
        }
        with pytest.raises(ShapeDefinitionError, match="Recursive"):
            build_shape(shape)

    def test_is_value_error(self):
        assert issubclass(ShapeDefinitionError, ValueError)
