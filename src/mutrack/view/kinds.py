"""Value classification: which values get a tracked view, which methods mutate."""

import datetime
import decimal
import enum
import fractions
import pathlib
import types
import uuid
from typing import Any

# Names shared across collection kinds first, then Python's own mutators.
MUTATION_METHODS: frozenset[str] = frozenset(
    {
        "set",
        "add",
        "delete",
        "clear",
        "push",
        "pop",
        "shift",
        "unshift",
        "splice",
        "sort",
        "reverse",
        "fill",
        "copyWithin",
        # list / bytearray
        "append",
        "extend",
        "insert",
        "remove",
        # dict / Counter
        "update",
        "setdefault",
        "popitem",
        "subtract",
        # OrderedDict
        "move_to_end",
        # set
        "discard",
        "intersection_update",
        "difference_update",
        "symmetric_difference_update",
        # deque
        "appendleft",
        "extendleft",
        "popleft",
        "rotate",
        # array.array
        "byteswap",
        "frombytes",
        "fromfile",
        "fromlist",
        "fromunicode",
        # explicit dunder writers
        "__setitem__",
        "__delitem__",
        "__setattr__",
        "__delattr__",
        "__iadd__",
        "__isub__",
        "__imul__",
        "__ior__",
        "__iand__",
        "__ixor__",
    }
)

ATOMIC_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    decimal.Decimal,
    fractions.Fraction,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.tzinfo,
    enum.Enum,
    uuid.UUID,
    pathlib.PurePath,
    range,
    types.EllipsisType,
    types.NotImplementedType,
)

ROUTINE_TYPES: tuple[type, ...] = (
    type,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.MethodWrapperType,
    types.WrapperDescriptorType,
    types.MethodDescriptorType,
    types.ClassMethodDescriptorType,
    types.ModuleType,
)

BOUND_METHOD_TYPES: tuple[type, ...] = (
    types.MethodType,
    types.BuiltinMethodType,
    types.MethodWrapperType,
)


def is_composite(value: Any, extra_atomic: tuple[type, ...] = ()) -> bool:
    """Return whether ``value`` should be wrapped in a tracked view.

    ``isinstance`` falls back to ``value.__class__`` for foreign types, so
    this can raise for objects whose attribute access itself fails.
    """
    if value is None:
        return False
    if isinstance(value, ATOMIC_TYPES) or (extra_atomic and isinstance(value, extra_atomic)):
        return False
    return not isinstance(value, ROUTINE_TYPES)


def is_bound_to(value: Any, target: Any) -> bool:
    """Return whether ``value`` is a method bound to ``target``."""
    return isinstance(value, BOUND_METHOD_TYPES) and getattr(value, "__self__", None) is target
