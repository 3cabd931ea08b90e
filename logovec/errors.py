"""
Logovec exceptions.

Input problems surface before any pipeline stage runs; tracing problems are
fatal for the conversion that hit them. Degenerate images (nothing opaque,
empty palette) are not errors and never raise.
"""


class LogoVecError(Exception):
    """Base class for all logovec errors."""


class ImageLoadError(LogoVecError, ValueError):
    """Input image is missing or cannot be decoded."""


class TracingError(LogoVecError, RuntimeError):
    """Potrace failed or produced output that could not be read."""


class ViewBoxMismatchError(TracingError):
    """Two traced color layers reported different coordinate spaces."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Traced layers disagree on viewBox: expected {expected}, got {actual}"
        )
