from __future__ import annotations

"""
Log Writer Error Taxonomy.

Caller mistakes (InvalidRecordError) are always raised. Environment failures
(directory, rotation, append) are suppressible by the sink configuration.
"""


class LogWriterError(Exception):
    """Base class for every failure surfaced by the log sink."""


class InvalidRecordError(LogWriterError, ValueError):
    """A record is empty, whitespace-only, or carries an unknown severity."""


class DirectoryUnavailableError(LogWriterError):
    """The target log directory could not be created."""


class RotationFailedError(LogWriterError):
    """The active log could not be archived, or old archives could not be pruned."""


class AppendFailedError(LogWriterError):
    """A formatted line could not be appended to the active log file."""
