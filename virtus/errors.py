"""
Error taxonomy shared by the calculators, the roster manager and the API.
"""
from __future__ import annotations


class VirtusError(Exception):
    pass


class OutOfRange(VirtusError, ValueError):
    """A day index or date falls outside the campaign window."""


class ValidationError(VirtusError, ValueError):
    """User input rejected before any mutation (roster size, empty titles, journal step...)."""


class NotFound(VirtusError, LookupError):
    pass
