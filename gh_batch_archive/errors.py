"""Exception classes for gh-batch-archive."""


class BatchArchiveError(Exception):
    """Base exception for all gh-batch-archive errors."""

    exit_code = 1


class DependencyMissingError(BatchArchiveError):
    """Raised when a required external tool (the GitHub CLI) is not installed."""


class AuthenticationError(BatchArchiveError):
    """Raised when the GitHub CLI is not logged in."""


class UpstreamError(BatchArchiveError):
    """Raised when a listing or archive/unarchive call fails."""


class LogUnavailableError(BatchArchiveError):
    """Raised when the log file cannot be opened for appending."""


class NothingToDoError(BatchArchiveError):
    """No repositories left to process: empty listing, no match, or no selection."""

    exit_code = 0


class UserCancelledError(BatchArchiveError):
    """Raised when the operator declines the confirmation prompt."""

    exit_code = 0
