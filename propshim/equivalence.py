# propshim/equivalence.py
"""
Structural equivalence of props snapshots.

Used by the component layer to decide whether a re-render can be skipped:
if the new props are equivalent to the old ones, nothing the component would
render has changed.

The rules are deliberately narrow. Values match when they are the same
object, when they are equal immutable scalars, or when their own equality
says so. Callables get special treatment because bound methods are
re-allocated on every attribute access (see ``callbacks_equivalent``).
Everything else is "not equivalent", which costs at most one redundant
render.
"""

import enum
import inspect
import logging
import numbers
from typing import Any, Optional

from .callbacks import bound_from, unbound_function
from .config import Config, trust_flag_from_config
from .fields import MISSING, iter_prop_fields, read_prop_field

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, bytes, numbers.Number, enum.Enum)

# --- trust-homogeneous-origin flag ---
# Off by default. When on, two callables whose underlying code matches are
# treated as equivalent without checking what they are bound to.
_trust_homogeneous_origin = False


def trust_homogeneous_origin() -> bool:
    return _trust_homogeneous_origin


def set_trust_homogeneous_origin(enabled: bool) -> None:
    """
    Turns the unsafe callback comparison on or off for the whole process.

    Meant to be set once at start-up (test harnesses mostly). With it on,
    callbacks sharing the same code compare equivalent even when bound to
    different targets.
    """
    global _trust_homogeneous_origin
    enabled = bool(enabled)
    if enabled != _trust_homogeneous_origin:
        logger.info("trust_homogeneous_origin %s", "enabled" if enabled else "disabled")
    _trust_homogeneous_origin = enabled


def configure(config: Optional[Config] = None) -> bool:
    """Sets the flag from configuration (env var, then propshim.yaml). Returns the new value."""
    set_trust_homogeneous_origin(trust_flag_from_config(config))
    return _trust_homogeneous_origin


# --- callbacks ---
def _code_of(func: Any) -> Any:
    return getattr(func, "__code__", None)


def _same_source(func1: Any, func2: Any) -> bool:
    """True if the two functions have the same body."""
    code1, code2 = _code_of(func1), _code_of(func2)
    if code1 is not None and code2 is not None:
        return code1 == code2
    try:
        return inspect.getsource(func1) == inspect.getsource(func2)
    except (OSError, TypeError):
        return False


def _textual_form(callback: Any) -> Any:
    func = unbound_function(callback)
    code = _code_of(func)
    if code is not None:
        return code
    return getattr(func, "__qualname__", None)


def callbacks_equivalent(callback1: Any, callback2: Any) -> bool:
    """
    Decides whether two callables stand for the same callback.

    1. Both bound, to the very same target:
       - same underlying function -> equivalent
       - different function objects with the same code -> equivalent. This is
         how two evaluations of the same lambda inside a method come out; since
         the receiver already matched, same code means same behaviour.
    2. Otherwise, only if trust_homogeneous_origin is on: same code (ignoring
       targets entirely) -> equivalent.
    3. Anything else -> not equivalent.

    A match under (2) only settles this one callback; props_equivalent still
    compares the remaining fields rather than declaring the whole props equal.
    """
    if callback1 is callback2:
        return True

    pair1, pair2 = bound_from(callback1), bound_from(callback2)
    if pair1 is not None and pair2 is not None and pair1[1] is pair2[1]:
        func1, func2 = pair1[0], pair2[0]
        if func1 is func2:
            return True
        if _same_source(func1, func2):
            return True
    elif _trust_homogeneous_origin:
        text1, text2 = _textual_form(callback1), _textual_form(callback2)
        if text1 is not None and text1 == text2:
            return True
    return False


# --- values ---
def _has_custom_equality(value: Any) -> bool:
    if callable(getattr(value, "equals", None)):
        return True
    return type(value).__eq__ is not object.__eq__


def _delegate_equality(value1: Any, value2: Any) -> bool:
    try:
        equals = getattr(value1, "equals", None)
        if callable(equals):
            return equals(value2) is True
        result = value1 == value2
    except Exception as e:
        logger.debug("Equality of %s values raised %s: %s", type(value1).__name__, type(e).__name__, e)
        return False
    # Anything that isn't a plain bool (numpy arrays, NotImplemented) is a mismatch.
    return result is True


def _values_equivalent(value1: Any, value2: Any) -> bool:
    if value1 is value2:
        return True
    if value1 is None or value1 is MISSING or value2 is None or value2 is MISSING:
        return False
    if callable(value1) and callable(value2):
        return callbacks_equivalent(value1, value2)
    if isinstance(value1, _SCALAR_TYPES) and isinstance(value2, _SCALAR_TYPES):
        return type(value1) is type(value2) and _delegate_equality(value1, value2)
    if _has_custom_equality(value1) and _has_custom_equality(value2):
        return _delegate_equality(value1, value2)
    return False


def props_equivalent(props1: Any, props2: Any) -> bool:
    """
    True if ``props1`` and ``props2`` would render the same.

    Both None is equivalent; one None is not. Props of different concrete
    types never match. Otherwise every field of ``props1`` is compared with
    the same field of ``props2`` and the first mismatch ends the comparison.
    """
    if props1 is None and props2 is None:
        return True
    if props1 is None or props2 is None:
        return False
    if type(props1) is not type(props2):
        return False
    if props1 is props2:
        return True

    try:
        names = list(iter_prop_fields(props1))
    except Exception as e:
        logger.debug("Could not enumerate fields of %s: %s", type(props1).__name__, e)
        return False

    for name in names:
        try:
            value1 = read_prop_field(props1, name)
            value2 = read_prop_field(props2, name)
            if not _values_equivalent(value1, value2):
                return False
        except Exception as e:
            logger.debug("Comparing field %r failed (%s: %s)", name, type(e).__name__, e)
            return False
    return True
