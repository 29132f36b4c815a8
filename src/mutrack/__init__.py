"""Transparent mutation tracking for composite values.

>>> state = wrap({"cart": {"items": []}})
>>> state["cart"]["items"].append("apple")
>>> has_mutated(state)
True
"""

from .config import TrackingConfig, parse_tracking_config
from .errors import TrackingConfigError, WrapConstructionError
from .logger import get_logger
from .tracker import MutationWrapper, has_mutated, is_tracked_view, wrap
from .view.kinds import MUTATION_METHODS
from .view.proxy import TrackedView, unwrap
from .view.resolver import resolve_value

get_logger()

__all__ = [
    "MUTATION_METHODS",
    "MutationWrapper",
    "TrackedView",
    "TrackingConfig",
    "TrackingConfigError",
    "WrapConstructionError",
    "has_mutated",
    "is_tracked_view",
    "parse_tracking_config",
    "resolve_value",
    "unwrap",
    "wrap",
]
__version__ = "0.1.0"
