"""Git Operations Package"""

from gpush.git.repository import GitRepository, FileChange, StagedChanges, parse_commit_id, parse_numstat, push_args
from gpush.git.diff import truncate_diff, is_truncated

__all__ = [
    "GitRepository",
    "FileChange",
    "StagedChanges",
    "parse_commit_id",
    "parse_numstat",
    "push_args",
    "truncate_diff",
    "is_truncated",
]
