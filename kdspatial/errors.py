"""Error types raised by kdspatial."""

from __future__ import annotations

from typing import Optional


class DimensionMismatch(ValueError):
    """Raised when a point does not have the coordinate count of its set."""

    def __init__(
        self,
        expected: int,
        received: int,
        *,
        index: Optional[int] = None,
    ) -> None:
        self.expected = expected
        self.received = received
        self.index = index
        if index is None:
            message = (
                "target and tree points must share dimension; "
                f"received {received} and {expected}"
            )
        else:
            message = (
                f"point {index} has {received} coordinates; "
                f"expected {expected} (taken from the first point)"
            )
        super().__init__(message)


__all__ = ["DimensionMismatch"]
