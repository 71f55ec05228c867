"""
Exceptions raised by the k-means clusterer and its I/O helpers.
"""

from typing import Optional


class KMeansError(Exception):
    """Base class for all errors raised by this package."""


class InvalidParameter(KMeansError, ValueError):
    """A run parameter or the point store makes the run impossible.

    Raised before the first iteration, e.g. when ``n_clusters`` is zero or
    exceeds the number of points, or when ``max_iters`` is not positive.
    """


class MalformedInput(KMeansError, ValueError):
    """Input rows are ragged, non-numeric or otherwise unusable."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class NotFittedError(KMeansError, ValueError):
    """The model was used before ``fit`` was called."""
