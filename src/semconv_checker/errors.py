"""
Exception hierarchy for the semantic convention checker.

Only configuration problems are fatal.  Malformed telemetry never raises
out of the compliance traversal; it is logged or skipped instead.
"""

from __future__ import annotations


class SemconvCheckerError(Exception):
    """Base class for all checker errors."""


class CatalogError(SemconvCheckerError):
    """The semantic convention catalog is malformed."""


class UnknownGroupError(CatalogError):
    """A rule referenced a group the catalog does not define."""

    def __init__(self, group: str) -> None:
        self.group = group
        super().__init__(f"Unknown semantic convention group: '{group}'")


class ConfigurationError(SemconvCheckerError):
    """Rule configuration cannot be compiled into a match table."""

    def __init__(self, location: str, message: str) -> None:
        self.location = location
        super().__init__(f"{location}: {message}")


class PayloadError(SemconvCheckerError):
    """An offline export payload could not be decoded."""
