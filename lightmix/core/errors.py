"""
Error taxonomy for wave and composer operations.
Every error derives from LightmixError and from the builtin it refines, so callers
can catch either. None of these are transient; nothing is retried.
"""
from contextlib import contextmanager
from typing import Optional


class LightmixError(Exception):
    """Base class for all lightmix errors."""


class ShapeMismatch(LightmixError, ValueError):
    """mix() called on buffers differing in length, sample rate or channel count."""

    def __init__(self, message: str, left: Optional[tuple] = None, right: Optional[tuple] = None):
        super().__init__(message)
        self.left = left
        self.right = right


class FormatMismatch(ShapeMismatch):
    """A composer entry does not share the composer's sample rate / channel count."""


class InvalidPadding(LightmixError, ValueError):
    """Padding requested with a negative amount or a target shorter than the buffer."""


class FilterFailed(LightmixError, RuntimeError):
    """A filter raised; the original exception is kept on .cause and __cause__."""

    def __init__(self, filter_name: str, cause: BaseException):
        super().__init__(f"filter {filter_name!r} failed: {cause!r}")
        self.filter_name = filter_name
        self.cause = cause


class AllocationFailure(LightmixError, MemoryError):
    """Sample storage could not be allocated."""


class ComposerFinalized(LightmixError, RuntimeError):
    """The composer was already finalized."""


@contextmanager
def allocation_guard(what: str):
    """Re-raise MemoryError from the wrapped block as AllocationFailure."""
    try:
        yield
    except MemoryError as err:
        raise AllocationFailure(f"out of memory while allocating {what}") from err
