"""
Errors - Failure taxonomy for the launch index.

None of these escape to callers of the public services. They are raised at
the seams (document store, discovery, pattern compilation) and caught where
the service can degrade to an empty or stale result.
"""


class LaunchIndexError(Exception):
    """Base class for all launch index failures."""


class DiscoveryFailure(LaunchIndexError):
    """Enumerating applications or plugins failed."""


class PatternCompileFailure(LaunchIndexError):
    """A stored regex or exclude pattern does not compile."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class PersistenceFailure(LaunchIndexError):
    """Reading from or writing to the document store failed."""


class ConflictError(PersistenceFailure):
    """A put carried a stale (or missing) revision token."""

    def __init__(self, key: str, expected: str | None, actual: str | None):
        super().__init__(f"Revision conflict on {key!r}: expected {actual!r}, got {expected!r}")
        self.key = key
        self.expected = expected
        self.actual = actual
