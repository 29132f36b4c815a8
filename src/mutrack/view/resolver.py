"""Value resolver - strip tracked views out of plain structures.

Targets never hold views (writes are unwrapped), but callers may put views
into their own containers; resolve_value() returns a view-free copy.
"""

from typing import Any

from .proxy import TrackedView, unwrap


def resolve_value(value: Any) -> Any:
    """Recursively resolve tracked views to their targets."""
    if type(value) is TrackedView:
        return unwrap(value)
    if isinstance(value, dict):
        return {k: resolve_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [resolve_value(v) for v in value]
    if isinstance(value, tuple):
        return tuple(resolve_value(v) for v in value)
    if isinstance(value, set):
        return {resolve_value(v) for v in value}
    return value
