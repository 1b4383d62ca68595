"""
Exception types raised by the tag recognition engine.
"""

from __future__ import annotations


class TagMarkError(Exception):
    """Base class for all TagMark errors."""


class GrammarError(TagMarkError):
    """A grammar template produced a pattern that does not compile."""

    def __init__(self, language_id: str, pattern: str, reason: str):
        super().__init__(
            f"Invalid comment pattern for language '{language_id}': {reason} ({pattern!r})"
        )
        self.language_id = language_id
        self.pattern = pattern
        self.reason = reason


class SettingsError(TagMarkError):
    """A settings value failed validation."""
