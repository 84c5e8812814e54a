"""Exception types raised by DepDiff."""

from typing import Optional


class DepDiffError(Exception):
    """Base class for all DepDiff errors."""


class LockfileParseError(DepDiffError):
    """Raised when a lockfile does not parse under its format's grammar."""

    def __init__(self, format_name: str, detail: str) -> None:
        """Initialize the parse error.

        Args:
            format_name: Human-readable lockfile format (e.g. 'composer.lock')
            detail: Underlying parser message
        """
        self.format_name = format_name
        self.detail = detail
        super().__init__(f"Failed to parse {format_name}: {detail}")


class UnsupportedLockfileError(DepDiffError):
    """Raised when a lockfile parses but its shape is not recognised."""

    def __init__(self, message: str, format_name: Optional[str] = None) -> None:
        self.format_name = format_name
        super().__init__(message)


class ResolverNotFoundError(DepDiffError):
    """Raised when no resolver matches a name or a pair of files."""
