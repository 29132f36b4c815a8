"""Transparent proxy that records writes made through it.

TrackedView forwards everything to its target. Reads hand back nested
views for composite values, writes and deletions flag the tracking state
first, and mutating methods flag it when called:
- view["key"] / view.attr returns a cached TrackedView for nested composites
- view.attr = x, del view[k], view += x flag the state, then write through
- view.append(x) flags the state, then calls the real list.append
"""

from __future__ import annotations

import copy
import functools
import operator
import types
from collections.abc import Callable, Iterator, Mapping, Set
from typing import TYPE_CHECKING, Any

from .kinds import is_bound_to

if TYPE_CHECKING:
    from .state import TrackingState


def _parts(view: TrackedView) -> tuple[Any, TrackingState]:
    # object.__getattribute__ skips the view's own interception
    return (
        object.__getattribute__(view, "_view_target"),
        object.__getattribute__(view, "_view_state"),
    )


def unwrap(value: Any) -> Any:
    """Return the target behind a view (through views of views), else the value."""
    while type(value) is TrackedView:
        value = object.__getattribute__(value, "_view_target")
    return value


def _is_method(value: Any, target: Any) -> bool:
    if type(target) is TrackedView:
        # Methods read through an inner view are already tracked functions
        return isinstance(value, types.FunctionType)
    return is_bound_to(value, target)


def _tracked_method(name: str, method: Callable[..., Any], target: Any, state: TrackingState) -> Callable[..., Any]:
    mutating = name in state.config.mutating_methods

    @functools.wraps(method)
    def call(*args: Any, **kwargs: Any) -> Any:
        if mutating:
            state.mark_mutated(f"{name}()", target)
        return method(*[unwrap(a) for a in args], **{k: unwrap(v) for k, v in kwargs.items()})

    return call


class _Forward:
    """Class-level descriptor forwarding a special method to the target.

    Implicit special method lookups go to the type and bypass
    ``__getattribute__``, so every one a view supports is declared here.
    """

    def __init__(self, func: Callable[..., Any] | None = None) -> None:
        self.func = func

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: TrackedView | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        target, state = _parts(instance)
        state.trace("%s on %s", self.name, type(target).__qualname__)
        if self.func is None:
            return getattr(target, self.name)
        return functools.partial(self.func, target)

    def __repr__(self) -> str:
        return f"forward {self.name}"

    def __call__(self, instance: TrackedView, *args: Any, **kwargs: Any) -> Any:
        # copy.copy() calls type(x).__copy__(x)
        return self.__get__(instance, type(instance))(*args, **kwargs)


class _InPlace(_Forward):
    """In-place operator: flags the state only when the target changed in place."""

    def __get__(self, instance: TrackedView | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        target, state = _parts(instance)
        op = self.func
        name = self.name

        def apply(other: Any) -> Any:
            result = op(target, unwrap(other))  # type: ignore[misc]
            if result is not target:
                # Immutable target, the operator built a new value
                return result
            state.mark_mutated(name, target)
            return instance

        return apply


def _binary(op: Callable[[Any, Any], Any]) -> Callable[[Any, Any], Any]:
    def forward(target: Any, other: Any) -> Any:
        return op(target, unwrap(other))

    return forward


def _reflected(op: Callable[[Any, Any], Any]) -> Callable[[Any, Any], Any]:
    def forward(target: Any, other: Any) -> Any:
        return op(unwrap(other), target)

    return forward


class TrackedView:
    """Transparent view over a composite value that records mutations.

    Do not instantiate directly; use :func:`mutrack.wrap`.

    Special methods are declared on the class, so every view answers
    ``callable()``, ``hash()`` and ``iter()`` and passes
    ``isinstance(view, Callable | Hashable | Iterable)`` whatever its
    target supports. Using them on a target that lacks the protocol
    raises the target's own TypeError.
    """

    __slots__ = ("_view_target", "_view_state", "__weakref__")

    def __init__(self, target: Any, state: TrackingState) -> None:
        object.__setattr__(self, "_view_target", target)
        object.__setattr__(self, "_view_state", state)

    # --- Attribute access ---

    def __getattribute__(self, name: str) -> Any:
        target, state = _parts(self)
        state.trace("read .%s on %s", name, type(target).__qualname__)
        value = getattr(target, name)
        if _is_method(value, target):
            return _tracked_method(name, value, target, state)
        return state.view_of(value)

    def __setattr__(self, name: str, value: Any) -> None:
        target, state = _parts(self)
        state.mark_mutated(f"set .{name}", target)
        setattr(target, name, unwrap(value))

    def __delattr__(self, name: str) -> None:
        target, state = _parts(self)
        state.mark_mutated(f"del .{name}", target)
        delattr(target, name)

    # --- Container protocol ---

    def __getitem__(self, key: Any) -> Any:
        target, state = _parts(self)
        state.trace("read [%r] on %s", key, type(target).__qualname__)
        value = target[unwrap(key)]
        if isinstance(key, slice):
            # Slices are fresh copies, writes to them never reach the target
            return value
        return state.view_of(value)

    def __setitem__(self, key: Any, value: Any) -> None:
        target, state = _parts(self)
        state.mark_mutated("set [%s]", target, key)
        target[unwrap(key)] = unwrap(value)

    def __delitem__(self, key: Any) -> None:
        target, state = _parts(self)
        state.mark_mutated("del [%s]", target, key)
        del target[unwrap(key)]

    def __iter__(self) -> Iterator[Any]:
        target, state = _parts(self)
        if isinstance(target, (Mapping, Set)):
            return iter(target)
        items = iter(target)
        return (state.view_of(item) for item in items)

    def __reversed__(self) -> Iterator[Any]:
        target, state = _parts(self)
        if isinstance(target, (Mapping, Set)):
            return reversed(target)
        items = reversed(target)
        return (state.view_of(item) for item in items)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        target, _ = _parts(self)
        return target(*[unwrap(a) for a in args], **{k: unwrap(v) for k, v in kwargs.items()})

    __contains__ = _Forward(_binary(operator.contains))
    __len__ = _Forward(len)
    __length_hint__ = _Forward(operator.length_hint)

    # --- Representation ---

    __repr__ = _Forward(repr)  # type: ignore[assignment]
    __str__ = _Forward(str)  # type: ignore[assignment]
    __bytes__ = _Forward(bytes)
    __format__ = _Forward(format)  # type: ignore[assignment]
    __dir__ = _Forward(dir)  # type: ignore[assignment]
    __bool__ = _Forward(bool)
    __hash__ = _Forward(hash)  # type: ignore[assignment]

    # --- Comparison ---

    __eq__ = _Forward(_binary(operator.eq))  # type: ignore[assignment]
    __ne__ = _Forward(_binary(operator.ne))  # type: ignore[assignment]
    __lt__ = _Forward(_binary(operator.lt))
    __le__ = _Forward(_binary(operator.le))
    __gt__ = _Forward(_binary(operator.gt))
    __ge__ = _Forward(_binary(operator.ge))

    # --- Operators ---

    __add__ = _Forward(_binary(operator.add))
    __sub__ = _Forward(_binary(operator.sub))
    __mul__ = _Forward(_binary(operator.mul))
    __matmul__ = _Forward(_binary(operator.matmul))
    __truediv__ = _Forward(_binary(operator.truediv))
    __floordiv__ = _Forward(_binary(operator.floordiv))
    __mod__ = _Forward(_binary(operator.mod))
    __and__ = _Forward(_binary(operator.and_))
    __or__ = _Forward(_binary(operator.or_))
    __xor__ = _Forward(_binary(operator.xor))
    __radd__ = _Forward(_reflected(operator.add))
    __rsub__ = _Forward(_reflected(operator.sub))
    __rmul__ = _Forward(_reflected(operator.mul))
    __rmatmul__ = _Forward(_reflected(operator.matmul))
    __rtruediv__ = _Forward(_reflected(operator.truediv))
    __rfloordiv__ = _Forward(_reflected(operator.floordiv))
    __rmod__ = _Forward(_reflected(operator.mod))
    __rand__ = _Forward(_reflected(operator.and_))
    __ror__ = _Forward(_reflected(operator.or_))
    __rxor__ = _Forward(_reflected(operator.xor))
    __iadd__ = _InPlace(operator.iadd)
    __isub__ = _InPlace(operator.isub)
    __imul__ = _InPlace(operator.imul)
    __imatmul__ = _InPlace(operator.imatmul)
    __itruediv__ = _InPlace(operator.itruediv)
    __ifloordiv__ = _InPlace(operator.ifloordiv)
    __imod__ = _InPlace(operator.imod)
    __iand__ = _InPlace(operator.iand)
    __ior__ = _InPlace(operator.ior)
    __ixor__ = _InPlace(operator.ixor)
    __neg__ = _Forward(operator.neg)
    __pos__ = _Forward(operator.pos)
    __abs__ = _Forward(abs)
    __invert__ = _Forward(operator.invert)

    # --- Protocols looked up on the type ---

    __enter__ = _Forward()
    __exit__ = _Forward()
    __copy__ = _Forward(copy.copy)
