"""Exception types raised by the heatmap pipeline.

Everything derives from ``HeatmapError`` so callers (the CLI in
particular) can catch one type. The user-facing kinds also derive from
``ValueError`` since they describe bad input rather than bad code.
"""

from __future__ import annotations


class HeatmapError(Exception):
    """Base class for all latheat errors."""


class EmptyInputError(HeatmapError, ValueError):
    """The dataset contains no datapoints."""

    def __init__(self, message: str = "must provide at least one datapoint") -> None:
        super().__init__(message)


class DegenerateAxisError(HeatmapError, ValueError):
    """No positive bucket width can be derived for an axis."""

    def __init__(self, axis: str, message: str | None = None) -> None:
        self.axis = axis
        super().__init__(message or f"insufficient value range to build {axis} axis")


class InvalidDatapointError(HeatmapError, ValueError):
    """A single datapoint cannot be placed on the grid."""

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"invalid datapoint at index {index}: {reason}")


class InternalInvariantError(HeatmapError, AssertionError):
    """A computed value broke an invariant the pipeline relies on (a bug)."""


class SourceFormatError(HeatmapError, ValueError):
    """Input data could not be detected or parsed."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
