"""Push Workflow - staged diff -> generated message -> confirmation -> commit -> push.

The steps run strictly in that order and each one runs once. Nothing touches
the repository before the user has confirmed, so a declined or dry run
leaves the index and history exactly as they were.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from gpush import DEFAULT_MAX_DIFF_LENGTH
from gpush.errors import (
    CancelledError,
    ExitCode,
    GenerationError,
    GitOperationError,
    GPushError,
    NoChangesError,
    PartialPushError,
)
from gpush.git import truncate_diff, is_truncated
from gpush.llm import classify_error, extract_commit_message


class Interaction(ABC):
    """What the workflow needs from the user's terminal."""

    @abstractmethod
    def confirm(self, prompt: str) -> bool:
        pass

    @abstractmethod
    def report(self, message: str) -> None:
        pass

    @abstractmethod
    def show_message(self, message: str) -> None:
        """Display a generated commit message."""

    @abstractmethod
    def success(self, message: str) -> None:
        pass

    @abstractmethod
    def error(self, message: str) -> None:
        pass

    @abstractmethod
    def prompt_secret(self, label: str) -> str:
        pass

    def debug(self, message: str) -> None:
        pass

    @contextmanager
    def status(self, message: str, done: Optional[str] = None) -> Iterator[None]:
        """Wrap a slow step; terminals show a spinner, then done on success."""
        yield


@dataclass
class PushOptions:
    dry_run: bool = False
    force: bool = False
    branch: Optional[str] = None
    assume_yes: bool = False


class PushWorkflow:
    """Generates a commit message for the staged changes, then commits and pushes."""

    def __init__(self, repository, provider, interaction: Interaction,
                 max_diff_length: int = DEFAULT_MAX_DIFF_LENGTH):
        self.repository = repository
        self.provider = provider
        self.ui = interaction
        self.max_diff_length = max_diff_length

    def collect_diff(self) -> str:
        with self.ui.status("Getting staged changes..."):
            diff = self.repository.staged_diff()
        if not diff or not diff.strip():
            raise NoChangesError("No changes detected. Stage your changes first with `git add`")
        return diff

    def generate_message(self) -> str:
        """Run the read-only half of the workflow and return the commit message."""
        diff = self.collect_diff()

        # Emptiness is judged on the raw diff; only the provider sees the cut version
        payload = truncate_diff(diff, self.max_diff_length)
        if is_truncated(payload):
            self.ui.debug(f"Diff truncated from {len(diff)} to {self.max_diff_length} chars")
        else:
            self.ui.debug(f"Diff: {len(diff)} chars")

        response = self._call_provider(payload)
        self.ui.debug(f"Response: {len(response)} chars")

        message = extract_commit_message(response)
        if not message:
            raise GenerationError("The provider response did not contain a commit message")
        return message

    def _call_provider(self, payload: str) -> str:
        """Call the provider; anything it raises leaves here as a GPushError."""
        name = self.provider.name
        try:
            with self.ui.status(f"Generating commit message using {name}...", done="Commit message generated"):
                return self.provider.generate_commit_message(payload)
        except GPushError:
            raise
        except Exception as e:
            # Failures outside the SDK error types, e.g. RuntimeError for missing AWS credentials
            hint = getattr(self.provider, "CREDENTIAL_HINT", "")
            raise classify_error(e, name, hint) from e

    def run(self, options: Optional[PushOptions] = None) -> int:
        """Run every step and return the process exit code."""
        options = options or PushOptions()
        try:
            message = self.generate_message()
            self.ui.show_message(message)

            if options.dry_run:
                self.ui.success("Dry run: nothing was committed or pushed")
                return int(ExitCode.SUCCESS)

            if not options.assume_yes and not self.ui.confirm("Commit and push with this message?"):
                raise CancelledError("Cancelled. Nothing was committed.")

            self._commit_and_push(message, options)
        except GPushError as e:
            self.ui.error(e.message)
            return int(e.exit_code)

        return int(ExitCode.SUCCESS)

    def _commit_and_push(self, message: str, options: PushOptions) -> None:
        with self.ui.status("Committing..."):
            commit_id = self.repository.commit(message)
        self.ui.report(f"Committed {commit_id}")

        target = f" to origin/{options.branch}" if options.branch else ""
        try:
            with self.ui.status(f"Pushing{target}..."):
                self.repository.push(force=options.force, branch=options.branch)
        except GitOperationError as e:
            raise PartialPushError(commit_id, e.message) from e

        self.ui.success(f"Changes committed and pushed{target}")
