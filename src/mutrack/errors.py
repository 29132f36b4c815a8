"""mutrack errors."""

from __future__ import annotations


class WrapConstructionError(TypeError):
    """Raised when a tracked view cannot be attached to a value.

    The value's type is kept on the error; the value itself is not, since
    values that fail here often cannot be inspected safely.
    """

    def __init__(self, *, value_type: type, cause: BaseException):
        self.value_type = value_type
        self.cause = cause
        super().__init__(f"cannot track {value_type.__qualname__}: {type(cause).__name__}: {cause}")


class TrackingConfigError(ValueError):
    """Raised when a tracking configuration is invalid."""

    def __init__(self, *, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")
