"""Error taxonomy. Every error knows the exit code the CLI returns for it."""

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    FAILURE = 1
    MISSING_CREDENTIAL = 2
    EMPTY_GENERATION = 3
    PROVIDER_ERROR = 4
    EMPTY_DIFF = 5


class GPushError(Exception):
    """Base for all errors gpush reports to the user."""
    exit_code = ExitCode.FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class NoChangesError(GPushError):
    """Nothing is staged."""
    exit_code = ExitCode.FAILURE


class CancelledError(GPushError):
    """The user declined or aborted."""
    exit_code = ExitCode.FAILURE


class ConfigurationError(GPushError):
    """A required setting is missing or a setting has an invalid value."""
    exit_code = ExitCode.MISSING_CREDENTIAL


class GenerationError(GPushError):
    """The provider answered, but no usable commit message came out of it."""
    exit_code = ExitCode.EMPTY_GENERATION


class ProviderError(GPushError):
    """The provider call itself failed (network, credentials, API error)."""
    exit_code = ExitCode.PROVIDER_ERROR


class InvalidDiffError(GPushError):
    exit_code = ExitCode.EMPTY_DIFF


class GitOperationError(GPushError):
    """A git command failed."""
    exit_code = ExitCode.FAILURE


class PartialPushError(GitOperationError):
    """The commit was created locally but the push failed."""

    def __init__(self, commit_id: str, reason: str):
        super().__init__(
            f"Commit {commit_id} was created locally, but the push failed.\n"
            f"Your changes are committed; fix the problem below and run 'git push'.\n\n{reason}"
        )
        self.commit_id = commit_id
        self.reason = reason


__all__ = [
    "ExitCode",
    "GPushError",
    "NoChangesError",
    "CancelledError",
    "ConfigurationError",
    "GenerationError",
    "ProviderError",
    "InvalidDiffError",
    "GitOperationError",
    "PartialPushError",
]
