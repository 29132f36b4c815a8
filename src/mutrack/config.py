from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from typing import Any

from .errors import TrackingConfigError
from .view.kinds import MUTATION_METHODS


@dataclass(frozen=True)
class TrackingConfig:
    """Configuration shared by every view created from one wrapper."""

    mutating_methods: frozenset[str] = MUTATION_METHODS
    atomic_types: tuple[type, ...] = field(default_factory=tuple)
    trace: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.mutating_methods, frozenset):
            object.__setattr__(self, "mutating_methods", frozenset(self.mutating_methods))
        if not isinstance(self.atomic_types, tuple):
            object.__setattr__(self, "atomic_types", tuple(self.atomic_types))
        for name in self.mutating_methods:
            if not isinstance(name, str) or not name.isidentifier():
                raise TrackingConfigError(field="mutating_methods", reason=f"not an identifier: {name!r}")
        for tp in self.atomic_types:
            if not isinstance(tp, type):
                raise TrackingConfigError(field="atomic_types", reason=f"not a class: {tp!r}")


DEFAULT_CONFIG = TrackingConfig()


def _import_type(path: str) -> type:
    module_name, sep, qualname = path.partition(":")
    if not sep or not module_name or not qualname:
        raise TrackingConfigError(field="atomicTypes", reason=f"expected 'module:QualName', got {path!r}")
    try:
        obj: Any = importlib.import_module(module_name)
        for part in qualname.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as e:
        raise TrackingConfigError(field="atomicTypes", reason=f"cannot resolve {path!r}: {e}") from e
    if not isinstance(obj, type):
        raise TrackingConfigError(field="atomicTypes", reason=f"{path!r} is not a class")
    return obj


def parse_tracking_config(config: dict[str, Any]) -> TrackingConfig:
    """Parse a plain mapping into a TrackingConfig.

    Expects format:
    {
        "mutatingMethods": {"extend": ["bump"], "exclude": ["sort"]},
        "atomicTypes": ["decimal:Decimal", "mypkg.models:Token"],
        "trace": false
    }

    All keys are optional; missing keys keep the defaults.
    """
    methods = config.get("mutatingMethods", {})
    extend = methods.get("extend", [])
    exclude = methods.get("exclude", [])
    if isinstance(extend, str) or isinstance(exclude, str):
        raise TrackingConfigError(field="mutatingMethods", reason="extend and exclude must be lists of names")

    atomic_types = config.get("atomicTypes", [])
    if isinstance(atomic_types, str):
        raise TrackingConfigError(field="atomicTypes", reason="expected a list of 'module:QualName' strings")

    trace = config.get("trace", False)
    if not isinstance(trace, bool):
        raise TrackingConfigError(field="trace", reason=f"expected a boolean, got {type(trace).__name__}")

    return TrackingConfig(
        mutating_methods=(MUTATION_METHODS | frozenset(extend)) - frozenset(exclude),
        atomic_types=tuple(_import_type(path) for path in atomic_types),
        trace=trace,
    )
