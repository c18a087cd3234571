"""
fields.py - Field introspection for composite destinations

A composite is any type whose members can be listed by NBT name:

- dataclasses: every field not starting with ``_``; the NBT name defaults
  to the attribute name and can be overridden with
  ``field(metadata={'nbt': 'Name'})``. ``metadata={'nbt': '-'}`` excludes
  a field.
- other classes: an explicit mapping, either passed to
  ``register_fields(cls, {...})`` or set as a class attribute
  ``__nbt_fields__``. Values are ``(attribute, annotation)`` pairs or a
  bare annotation when the attribute is named like the NBT entry.
"""

import dataclasses
import typing
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Mapping

from .errors import DecodeError

NBT_METADATA_KEY = 'nbt'
SKIP = '-'


@dataclass(frozen=True)
class FieldSpec:
    """One destination member: NBT name, Python attribute and annotation."""
    name: str
    attr: str
    type: Any


class Slot:
    """Mutable, typed location that receives one decoded value."""
    __slots__ = ('type',)

    def __init__(self, type_: Any):
        self.type = type_

    def get(self) -> Any:
        raise NotImplementedError

    def set(self, value: Any) -> None:
        raise NotImplementedError


class AttributeSlot(Slot):
    """Slot backed by an attribute of a composite instance."""
    __slots__ = ('owner', 'attr')

    def __init__(self, owner: Any, spec: FieldSpec):
        super().__init__(spec.type)
        self.owner = owner
        self.attr = spec.attr

    def get(self) -> Any:
        return getattr(self.owner, self.attr, None)

    def set(self, value: Any) -> None:
        setattr(self.owner, self.attr, value)


class ValueSlot(Slot):
    """Free-standing slot: top-level destinations and list elements."""
    __slots__ = ('value',)

    def __init__(self, type_: Any, value: Any = None):
        super().__init__(type_)
        self.value = value

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        self.value = value


_REGISTERED: Dict[type, Dict[str, FieldSpec]] = {}


def _specs_from_mapping(mapping: Mapping[str, Any]) -> Dict[str, FieldSpec]:
    specs = {}
    for name, entry in mapping.items():
        if isinstance(entry, tuple):
            attr, type_ = entry
        else:
            attr, type_ = name, entry
        specs[name] = FieldSpec(name=name, attr=attr, type=type_)
    return specs


def register_fields(cls: type, mapping: Mapping[str, Any]) -> None:
    """Declare the NBT members of a non-dataclass type."""
    _REGISTERED[cls] = _specs_from_mapping(mapping)
    fields_of.cache_clear()


def is_composite(type_: Any) -> bool:
    """True if values of *type_* can receive a TAG_Compound."""
    if not isinstance(type_, type):
        return False
    return (dataclasses.is_dataclass(type_)
            or type_ in _REGISTERED
            or hasattr(type_, '__nbt_fields__'))


@lru_cache(maxsize=None)
def fields_of(cls: type) -> Dict[str, FieldSpec]:
    """NBT name -> FieldSpec for a composite type, computed once per type."""
    if cls in _REGISTERED:
        return _REGISTERED[cls]
    if dataclasses.is_dataclass(cls):
        try:
            hints = typing.get_type_hints(cls)
        except NameError as e:
            raise DecodeError(
                f"nbt: Cannot resolve annotations of {cls.__name__}: {e}") from e
        specs = {}
        for f in dataclasses.fields(cls):
            if f.name.startswith('_'):
                continue
            name = f.metadata.get(NBT_METADATA_KEY, f.name)
            if name == SKIP:
                continue
            specs[name] = FieldSpec(name=name, attr=f.name,
                                    type=hints.get(f.name, f.type))
        return specs
    declared = getattr(cls, '__nbt_fields__', None)
    if declared is not None:
        return _specs_from_mapping(declared)
    raise TypeError(f"{cls.__name__} is not a composite type")


def slots_of(instance: Any) -> Dict[str, AttributeSlot]:
    """NBT name -> writable slot for each member of a composite instance."""
    return {name: AttributeSlot(instance, spec)
            for name, spec in fields_of(type(instance)).items()}


def new_instance(cls: type) -> Any:
    """Construct an empty composite; every member needs a default."""
    try:
        return cls()
    except TypeError as e:
        raise DecodeError(
            f"nbt: Cannot create an empty {cls.__name__}: {e}") from e
