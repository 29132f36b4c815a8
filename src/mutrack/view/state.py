"""Tracking state shared by every view beneath one wrapped root."""

from __future__ import annotations

import logging
import reprlib
import weakref
from typing import TYPE_CHECKING, Any

from ..errors import WrapConstructionError
from .kinds import is_composite
from .proxy import TrackedView

if TYPE_CHECKING:
    from ..config import TrackingConfig

_log = logging.getLogger(__name__)


class TrackingState:
    """Mutation flag and identity cache for one wrapped root.

    All views created beneath the root hold the same state, so a write
    anywhere in the reachable substructure flags the root. The cache is
    keyed by ``id()`` and holds its views weakly. A live view keeps its
    target alive, so an id cannot be reused while its entry exists, and
    views nobody references any more drop out of the cache.
    """

    __slots__ = ("config", "mutated", "_views")

    def __init__(self, config: TrackingConfig) -> None:
        self.config = config
        self.mutated = False
        self._views: weakref.WeakValueDictionary[int, TrackedView] = weakref.WeakValueDictionary()

    def mark_mutated(self, operation: str, target: Any, *args: Any) -> None:
        """Flag the tree. ``args`` are formatted into ``operation`` on the first write only."""
        if self.mutated:
            return
        self.mutated = True
        if args:
            # reprlib falls back to a placeholder when a key's __repr__ raises
            operation = operation % tuple(reprlib.repr(arg) for arg in args)
        _log.debug(
            "Mutation observed: %s on %s",
            operation,
            type(target).__qualname__,
            extra={"event": "mutation_observed", "operation": operation},
        )

    def trace(self, message: str, *args: object) -> None:
        if self.config.trace:
            _log.debug(message, *args)

    def view_of(self, value: Any) -> Any:
        """Return the view for a value read through a view.

        Cached views are returned even once the tree is dirty; new views
        are only created while no mutation has been seen.
        """
        view = self._views.get(id(value))
        if view is not None:
            return view
        if self.mutated:
            return value
        return self.create_view(value)

    def create_view(self, value: Any) -> Any:
        """Wrap ``value`` in a new cached view, or return it if it is atomic.

        Raises:
            WrapConstructionError: the value cannot be classified or wrapped
        """
        try:
            if type(value) is not TrackedView and not is_composite(value, self.config.atomic_types):
                return value
            view = TrackedView(value, self)
        except Exception as exc:
            value_type = type(value)
            _log.error(
                f"Cannot create tracked view for {value_type.__qualname__}",
                extra={
                    "event": "wrap_construction_failed",
                    "value_type": value_type.__qualname__,
                    "error_type": type(exc).__name__,
                    "error_message": str(exc),
                },
                exc_info=True,
            )
            raise WrapConstructionError(value_type=value_type, cause=exc) from exc
        self._views[id(value)] = view
        return view
