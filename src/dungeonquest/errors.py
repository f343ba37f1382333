"""
Error taxonomy for the analyzer.

Configuration problems and combinatorial precondition violations are fatal
and propagate to the caller. Bag exhaustion and the round horizon are normal
terminal conditions and never raise.
"""


class AnalyzerError(Exception):
    """Base class for all analyzer errors."""


class ConfigurationError(AnalyzerError, ValueError):
    """Invalid configuration (negative counts, non-positive costs, bad geometry)."""


class InsufficientTilesError(AnalyzerError, ValueError):
    """A draw was requested that exceeds the tiles left in the bag."""


class SizeMismatchError(AnalyzerError, AssertionError):
    """An arrangement was requested for a multiset of the wrong size."""


class SchemaVersionError(AnalyzerError, ValueError):
    """A persisted analysis was written by a newer schema."""


__all__ = [
    'AnalyzerError',
    'ConfigurationError',
    'InsufficientTilesError',
    'SizeMismatchError',
    'SchemaVersionError',
]
