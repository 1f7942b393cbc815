# propshim/callbacks.py
"""
Bound callbacks as explicit (function, target) pairs.

Python allocates a fresh bound-method object every time ``instance.method``
is evaluated, so ``self.on_tap is self.on_tap`` is False. Props that pass
``on_tap=self.handle_tap`` therefore never compare equal by identity. The
comparator gets around this by looking *through* the bound object at the
function and the receiver it was bound to.

``bind`` creates such a pair explicitly. Code that builds callbacks with
``bind(handler, target)`` gets exact pair comparison and never needs the
code-equality fallback.
"""

import functools
import types
from typing import Any, Callable, Optional, Tuple


class BoundCallback:
    """
    A function pre-associated with a receiver.

    Calling it invokes ``func(target, *args, **kwargs)``.

    :param func: The unbound function.
    :param target: The receiver passed as the first argument.
    """
    __slots__ = ("func", "target")

    def __init__(self, func: Callable, target: Any):
        if not callable(func):
            raise TypeError(f"BoundCallback func must be callable, got {type(func).__name__}")
        object.__setattr__(self, "func", func)
        object.__setattr__(self, "target", target)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __call__(self, *args, **kwargs):
        return self.func(self.target, *args, **kwargs)

    def __eq__(self, other):
        if not isinstance(other, BoundCallback):
            return NotImplemented
        return self.func is other.func and self.target is other.target

    def __hash__(self):
        return hash((id(self.func), id(self.target)))

    def __repr__(self):
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"BoundCallback({name}, target={type(self.target).__name__})"


def bind(func: Callable, target: Any) -> BoundCallback:
    """Binds ``func`` to ``target``. See :class:`BoundCallback`."""
    return BoundCallback(func, target)


def bound_from(callback: Any) -> Optional[Tuple[Callable, Any]]:
    """
    Returns the ``(function, target)`` pair a callable was bound from, or None
    if it is not recognisably bound.

    Recognised: :class:`BoundCallback`, Python bound methods, and
    ``functools.partial`` objects with exactly one positional argument and no
    keyword arguments (``partial(Widget.on_tap, widget)``).
    """
    if isinstance(callback, BoundCallback):
        return callback.func, callback.target
    if isinstance(callback, types.MethodType):
        return callback.__func__, callback.__self__
    if isinstance(callback, functools.partial):
        if len(callback.args) == 1 and not callback.keywords:
            return callback.func, callback.args[0]
    return None


def unbound_function(callback: Any) -> Any:
    """Strips any binding layers and returns the innermost callable."""
    depth = 0
    while depth < 16:
        pair = bound_from(callback)
        if pair is not None:
            callback = pair[0]
        elif isinstance(callback, functools.partial):
            callback = callback.func
        else:
            break
        depth += 1
    return callback
