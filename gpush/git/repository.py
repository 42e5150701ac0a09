"""Git Repository - Read staged changes, commit and push."""

import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from gpush.errors import GitOperationError


@dataclass
class FileChange:
    """Represents a single file's staged changes."""
    path: str
    additions: int
    deletions: int

    @property
    def total_changes(self) -> int:
        return self.additions + self.deletions


@dataclass
class StagedChanges:
    """Complete picture of what's staged for commit."""
    files: list[FileChange] = field(default_factory=list)
    diff: str = ""

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_additions(self) -> int:
        return sum(f.additions for f in self.files)

    @property
    def total_deletions(self) -> int:
        return sum(f.deletions for f in self.files)

    @property
    def is_empty(self) -> bool:
        return not self.diff.strip()


def push_args(force: bool = False, branch: str | None = None) -> list[str]:
    """Extra arguments for 'git push'. An explicit branch always goes to origin."""
    args = []
    if force:
        args.append('--force')
    if branch:
        args.extend(['origin', branch])
    return args


def parse_numstat(output: str) -> list[FileChange]:
    """Parse 'git diff --numstat' output. Binary files show '-' and count as 0."""
    files = []
    for line in output.strip().split('\n'):
        parts = line.split('\t')
        if len(parts) >= 3:
            additions = int(parts[0]) if parts[0] != '-' else 0
            deletions = int(parts[1]) if parts[1] != '-' else 0
            files.append(FileChange(path=parts[2], additions=additions, deletions=deletions))
    return files


# "[main 1a2b3c4] subject" or "[main (root-commit) 1a2b3c4] subject"
COMMIT_SUMMARY = re.compile(r'^\[.*?\s([0-9a-f]{7,40})\]', re.MULTILINE)


def parse_commit_id(output: str) -> str | None:
    """Return the commit id from `git commit` output, or None if absent."""
    match = COMMIT_SUMMARY.search(output)
    return match.group(1) if match else None


class GitRepository:
    """The working tree gpush reads from and commits to."""

    DIFF_ALGORITHM = 'minimal'

    def __init__(self, cwd: str | Path | None = None):
        self.cwd = str(cwd) if cwd is not None else None
        self._verify_git_available()
        self._verify_in_repo()

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace',
                cwd=self.cwd,
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            output = (e.stderr or e.stdout or '').strip()
            raise GitOperationError(f"Git command failed: git {' '.join(args)}\n{output}") from e
        except FileNotFoundError as e:
            raise GitOperationError("Git is not installed or not in PATH") from e

    def _verify_git_available(self) -> None:
        try:
            self._run_git('--version')
        except GitOperationError as e:
            raise GitOperationError("Git is not installed or not in PATH") from e

    def _verify_in_repo(self) -> None:
        try:
            self._run_git('rev-parse', '--git-dir')
        except GitOperationError as e:
            raise GitOperationError("Not inside a git repository") from e

    def staged_diff(self) -> str:
        """Diff of the index against HEAD."""
        return self._run_git('diff', '--cached', f'--diff-algorithm={self.DIFF_ALGORITHM}')

    def staged_files(self) -> list[FileChange]:
        output = self._run_git('diff', '--staged', '--numstat')
        if not output.strip():
            return []
        return parse_numstat(output)

    def staged_changes(self) -> StagedChanges:
        return StagedChanges(files=self.staged_files(), diff=self.staged_diff())

    def current_branch(self) -> str:
        return self._run_git('rev-parse', '--abbrev-ref', 'HEAD').strip()

    def commit(self, message: str) -> str:
        """Commit the index and return the short id of the new commit.

        The id comes from the summary line `git commit` prints, so no second
        command runs after the commit exists. Returns 'HEAD' when the
        summary has no id.
        """
        output = self._run_git('commit', '-m', message)
        return parse_commit_id(output) or 'HEAD'

    def push(self, force: bool = False, branch: str | None = None) -> None:
        self._run_git('push', *push_args(force, branch))
