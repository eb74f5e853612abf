from __future__ import annotations


class DebateGuardError(Exception):
    """Base class for errors surfaced to callers of debate_guard."""


class InvalidContentError(DebateGuardError, ValueError):
    """The caller supplied content that is missing required fields."""


class ConfigurationError(DebateGuardError, ValueError):
    """A service or config object was constructed with unusable settings."""


class InstantClassificationError(DebateGuardError):
    """The single-shot classifier could not produce a verdict."""

    def __init__(self, username: str, message: str) -> None:
        super().__init__(f"Instant analysis failed for @{username}: {message}")
        self.username = username
