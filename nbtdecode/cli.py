#!/usr/bin/env python3
"""
cli.py - Decode an NBT file against a YAML shape

Usage:
    nbtdecode level.dat --shape level.yaml              # JSON to stdout
    nbtdecode level.dat --shape level.yaml --format yaml
    nbtdecode chunk.bin --shape chunk.yaml --compression zlib -v
"""

import argparse
import dataclasses
import json
import logging
import sys
from typing import Any, List, Optional

import yaml

from .decoder import DEFAULT_MAX_DEPTH, read_file
from .errors import NBTError
from .fields import fields_of
from .shape import ShapeDefinitionError, load_shape


def to_plain(value: Any) -> Any:
    """Convert a decoded value to JSON/YAML-friendly data.

    Composites become dicts keyed by NBT name, byte sequences become hex
    strings.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {name: to_plain(getattr(value, spec.attr))
                for name, spec in fields_of(type(value)).items()}
    if isinstance(value, list):
        return [to_plain(v) for v in value]
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex().upper()
    if isinstance(value, str):
        # Undecodable bytes were kept as surrogate escapes
        return value.encode('utf-8', 'surrogateescape').decode('utf-8', 'replace')
    return value


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog='nbtdecode',
        description='Decode an NBT file into a shape described in YAML'
    )
    parser.add_argument('file', help='Path to the NBT file')
    parser.add_argument('-s', '--shape', required=True,
                        help='Path to the shape YAML file')
    parser.add_argument('-c', '--compression', default='auto',
                        choices=['auto', 'none', 'gzip', 'zlib'],
                        help='Transport compression (default: detect)')
    parser.add_argument('-f', '--format', default='json',
                        choices=['json', 'yaml'],
                        help='Output format')
    parser.add_argument('--max-depth', type=int, default=DEFAULT_MAX_DEPTH,
                        help='Maximum list/compound nesting')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log decoding details to stderr')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    # Load shape
    try:
        target = load_shape(args.shape)
    except (OSError, yaml.YAMLError, ShapeDefinitionError) as e:
        print(f"Error loading shape: {e}", file=sys.stderr)
        return 1

    compression = None if args.compression == 'auto' else args.compression
    try:
        value = read_file(args.file, target, compression,
                          max_depth=args.max_depth)
    except (NBTError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    plain = to_plain(value)
    if args.format == 'yaml':
        print(yaml.safe_dump(plain, sort_keys=False, allow_unicode=True), end='')
    else:
        print(json.dumps(plain, indent=2, ensure_ascii=False))
    return 0


if __name__ == '__main__':
    sys.exit(main())
