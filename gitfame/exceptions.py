"""Error types raised by gitfame. All of them abort the run."""

from __future__ import annotations


class GitFameError(Exception):
    """Base class for every fatal gitfame error."""


class ConfigurationError(GitFameError, ValueError):
    """Invalid option value, reported before any git work starts."""


class GitCommandError(GitFameError):
    """A git subprocess failed or git is not installed."""


class MalformedBlameError(GitFameError):
    """Git output does not follow the expected record format."""
