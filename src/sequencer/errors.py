"""Exceptions raised by the sequencer."""

from __future__ import annotations


class SequencerError(Exception):
    """Base class for sequencer failures."""


class ConfigurationError(SequencerError):
    """A setting is missing or points at something that does not exist.

    Raised before any file is touched.
    """


class MoveFailure(SequencerError):
    """The vault could not move a file.

    Aborts the remaining batch; files moved before the failure stay moved.
    """

    def __init__(self, source: str, destination: str, reason: str) -> None:
        super().__init__(f"Could not move {source} to {destination}: {reason}")
        self.source = source
        self.destination = destination
        self.reason = reason
        # (old_path, new_path) pairs moved earlier in the same batch
        self.completed: list = []
