"""Errors that abort a grepurl run."""

from __future__ import annotations

__all__ = ["GrepurlError", "SourceError", "PatternError"]


class GrepurlError(Exception):
    """Base class for fatal grepurl errors."""


class SourceError(GrepurlError):
    """Raised when no document text could be obtained from the selected source."""


class PatternError(GrepurlError):
    """Raised when a user-supplied path or URL pattern does not compile."""

    def __init__(self, option: str, pattern: str, reason: str) -> None:
        self.option = option
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern for --{option}: {pattern!r} ({reason})")
