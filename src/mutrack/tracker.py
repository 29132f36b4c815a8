"""Mutation tracking entry points.

wrap() hands back a TrackedView for composite values; is_tracked_view()
and has_mutated() answer the two questions callers ask of it afterwards.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from .config import DEFAULT_CONFIG, TrackingConfig
from .view.proxy import TrackedView
from .view.state import TrackingState

_log = logging.getLogger(__name__)

T = TypeVar("T")


class MutationWrapper:
    """Factory creating independently tracked views with one configuration."""

    def __init__(self, config: TrackingConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG

    @property
    def config(self) -> TrackingConfig:
        return self._config

    def wrap(self, value: T) -> T:
        """Wrap a value so writes made through it are recorded.

        Args:
            value: Any value. Atomic values are returned unchanged.

        Returns:
            A new TrackedView with its own mutation flag and identity cache,
            or ``value`` itself when it is atomic.

        Raises:
            WrapConstructionError: a view cannot be attached to the value
        """
        result = TrackingState(self._config).create_view(value)
        if result is not value:
            _log.debug(
                "Tracking %s",
                type(value).__qualname__,
                extra={"event": "view_created", "value_type": type(value).__qualname__},
            )
        return result


_default_wrapper = MutationWrapper()


def wrap(value: T, config: TrackingConfig | None = None) -> T:
    """Wrap ``value`` in a tracked view (see :meth:`MutationWrapper.wrap`)."""
    if config is None:
        return _default_wrapper.wrap(value)
    return MutationWrapper(config).wrap(value)


def is_tracked_view(value: Any) -> bool:
    """Return whether ``value`` is a tracked view. Never raises."""
    return type(value) is TrackedView


def has_mutated(value: Any) -> bool:
    """Return whether ``value`` is a tracked view that has seen a write. Never raises."""
    if type(value) is not TrackedView:
        return False
    state: TrackingState = object.__getattribute__(value, "_view_state")
    return state.mutated
