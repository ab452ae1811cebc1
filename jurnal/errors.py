"""
Exception types raised by the journal core.

Unplanned curriculum content is deliberately not an exception: it is an empty
objective/material on the journal entry.
"""


class JournalError(Exception):
    """Base class for journal errors."""


class DataUnavailable(JournalError):
    """Raised when a required upstream input cannot be fetched or read."""


class AmbiguousCurriculumMatch(JournalError):
    """Raised (strict mode only) when several plan rows share the active week bucket."""


class BatchCancelled(JournalError):
    """Raised when a running batch is cancelled before it completes."""
