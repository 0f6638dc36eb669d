"""
Exception taxonomy.

Only misuse surfaces as an exception. Degenerate inputs (failed ranges,
zero weights, tiny candidate sets) are reported through sentinel values.
"""


class LatCoreError(Exception):
    """Base class for all lat_core errors."""


class ConfigurationError(LatCoreError, ValueError):
    """Invalid parameters at construction or reconfiguration time."""


class UsageError(LatCoreError, RuntimeError):
    """Programming defect detected at call time (e.g. anchor count changed)."""
