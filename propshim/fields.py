# propshim/fields.py
"""
Field enumeration over arbitrary props shapes.

Props can be mappings, dataclasses, named tuples, ``__slots__`` classes or
plain objects. The comparator and the envelope builder only ever need two
things from them: the names of the author-declared fields, and a way to read
one field without blowing up when it is not there.
"""

import dataclasses
from collections.abc import Mapping
from typing import Any, Iterator


class _Missing:
    """Sentinel for "this field does not exist" (distinct from a field holding None)."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(_Missing, cls).__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "MISSING"


MISSING = _Missing()


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _is_namedtuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def _slot_names(cls: type) -> Iterator[str]:
    seen = set()
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__") or name in seen:
                continue
            seen.add(name)
            yield name


def iter_prop_fields(props: Any) -> Iterator[Any]:
    """
    Yields the field names declared on ``props``, in declaration order.
    Mappings yield every key, whatever its type. Private (underscore) attributes
    are fields like any other; only dunder names are skipped.

    :param props: A mapping, dataclass instance, named tuple or plain object.
    """
    if isinstance(props, Mapping):
        yield from props.keys()
        return

    if dataclasses.is_dataclass(props) and not isinstance(props, type):
        for f in dataclasses.fields(props):
            yield f.name
        return

    if _is_namedtuple(props):
        yield from type(props)._fields
        return

    emitted = set()
    for name in _slot_names(type(props)):
        if hasattr(props, name):
            emitted.add(name)
            yield name

    instance_dict = getattr(props, "__dict__", None)
    if isinstance(instance_dict, dict):
        for name in list(instance_dict.keys()):
            if _is_dunder(name) or name in emitted:
                continue
            yield name


def read_prop_field(props: Any, name: str, default: Any = MISSING) -> Any:
    """
    Reads ``name`` from ``props`` by item lookup for mappings and attribute
    lookup for everything else. Returns ``default`` when the field is missing.

    Exceptions other than "not there" (a raising property, a broken
    ``__getattr__``) propagate; callers decide how to degrade.
    """
    if isinstance(props, Mapping):
        try:
            return props[name]
        except KeyError:
            return default
    try:
        return getattr(props, name)
    except AttributeError:
        return default
