# propshim/envelope.py
"""
The props envelope.

The host runtime rewrites the top-level description of whatever props value
it is handed, which corrupts props objects that are not plain records. Handing
it a ``WrappedProps`` instead keeps the user's props one level down, out of
reach, while still putting the two host-recognised fields where the host looks
for them: at the top level.

**Shape of an envelope:**
- ``value``: always present, the props object exactly as passed in
- ``key``: only present when a reconciliation key was found
- ``ref``: only present when a callable instance-reference callback was found

A missing key is *missing*, never ``key=None``: the host treats a None key as
a real key value and would reconcile every unkeyed child under it.

**Example:**
```python
@dataclass
class RowProps:
    key: int
    label: str
    ref: Optional[Callable] = None

env = wrap_props(RowProps(key=0, label="first"))
env["key"]            # 0 (zero is a valid key)
"ref" in env          # False
unwrap_props(env)     # RowProps(key=0, label='first', ref=None)
```
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional, Tuple

from .fields import MISSING, read_prop_field

logger = logging.getLogger(__name__)

VALUE_FIELD = "value"
KEY_FIELD = "key"
REF_FIELD = "ref"

# Lookup order. Direct fields first, then zero-argument accessors.
KEY_FIELD_NAMES: Tuple[str, ...] = ("key", "Key")
KEY_ACCESSOR_NAMES: Tuple[str, ...] = ("getKey", "get_key")
REF_FIELD_NAMES: Tuple[str, ...] = ("ref", "Ref")
REF_ACCESSOR_NAMES: Tuple[str, ...] = ("getRef", "get_ref")

ABSENT = MISSING


class WrappedProps(Mapping):
    """
    Immutable envelope handed to the host runtime in place of the props.

    Behaves as a read-only mapping (``env["value"]``, ``"key" in env``) and
    exposes the same fields as attributes. Reading an absent ``key``/``ref``
    attribute raises ``AttributeError``, exactly like a missing dict entry
    raises ``KeyError``.
    """
    __slots__ = ("_fields",)

    def __init__(self, value: Any, key: Any = ABSENT, ref: Any = ABSENT):
        fields: Dict[str, Any] = {VALUE_FIELD: value}
        if key is not ABSENT:
            fields[KEY_FIELD] = key
        if ref is not ABSENT:
            fields[REF_FIELD] = ref
        object.__setattr__(self, "_fields", fields)

    def __getitem__(self, name: str) -> Any:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails, i.e. for the envelope fields.
        if name == "_fields":
            raise AttributeError(name)
        try:
            return self._fields[name]
        except KeyError:
            raise AttributeError(
                f"'{type(self).__name__}' has no field '{name}'"
            ) from None

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    # Envelopes are per-render throwaways; two of them are never "the same".
    __eq__ = object.__eq__
    __hash__ = object.__hash__

    @property
    def has_key(self) -> bool:
        return KEY_FIELD in self._fields

    @property
    def has_ref(self) -> bool:
        return REF_FIELD in self._fields

    def to_dict(self) -> Dict[str, Any]:
        """A plain dict with the same top-level fields."""
        return dict(self._fields)

    def __repr__(self):
        parts = [f"{name}={value!r}" for name, value in self._fields.items()]
        return f"WrappedProps({', '.join(parts)})"


def _read_field(props: Any, name: str) -> Any:
    try:
        return read_prop_field(props, name)
    except Exception as e:
        logger.debug("Reading props field %r failed (%s: %s); treating as absent", name, type(e).__name__, e)
        return ABSENT


def _call_accessor(props: Any, name: str) -> Any:
    accessor = _read_field(props, name)
    if accessor is ABSENT or not callable(accessor):
        return ABSENT
    try:
        return accessor()
    except Exception as e:
        logger.debug("Props accessor %r failed (%s: %s); treating as absent", name, type(e).__name__, e)
        return ABSENT


def extract_key(props: Any) -> Any:
    """
    Finds the reconciliation key on ``props``: field ``key``, field ``Key``,
    accessor ``getKey()``, accessor ``get_key()``, first hit wins.

    Only a missing field or ``None`` counts as "no key"; ``0`` is a key.
    Returns ``ABSENT`` if nothing was found.
    """
    if props is None:
        return ABSENT
    for name in KEY_FIELD_NAMES:
        value = _read_field(props, name)
        if value is not ABSENT and value is not None:
            return value
    for name in KEY_ACCESSOR_NAMES:
        value = _call_accessor(props, name)
        if value is not ABSENT and value is not None:
            return value
    return ABSENT


def extract_ref(props: Any) -> Any:
    """
    Finds the instance-reference callback on ``props``: field ``ref``, field
    ``Ref``, accessor ``getRef()``, accessor ``get_ref()``.

    A value is only accepted if it is callable. Returns ``ABSENT`` otherwise.
    """
    if props is None:
        return ABSENT
    for name in REF_FIELD_NAMES:
        value = _read_field(props, name)
        if callable(value):
            return value
    for name in REF_ACCESSOR_NAMES:
        value = _call_accessor(props, name)
        if callable(value):
            return value
    return ABSENT


def wrap_props(props: Any) -> WrappedProps:
    """
    Wraps ``props`` for the host runtime, lifting its key and ref (if any) to
    the top level of the envelope.

    Never raises and never touches ``props`` beyond reading the key/ref
    sources.
    """
    if props is None:
        return WrappedProps(None)
    return WrappedProps(props, key=extract_key(props), ref=extract_ref(props))


def unwrap_props(envelope: Optional[WrappedProps]) -> Any:
    """The props object held by ``envelope``, or None for a None envelope."""
    if envelope is None:
        return None
    return envelope[VALUE_FIELD]
