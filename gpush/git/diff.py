"""Diff truncation - Bound the diff sent to a provider."""

from gpush import DEFAULT_MAX_DIFF_LENGTH, TRUNCATION_MARKER
from gpush.errors import InvalidDiffError


def truncate_diff(diff: str, max_length: int = DEFAULT_MAX_DIFF_LENGTH) -> str:
    """Cut the diff to max_length characters and append TRUNCATION_MARKER.

    Diffs at or below the limit are returned unchanged.
    """
    if max_length < 1:
        raise ValueError(f"max_length must be positive, got {max_length}")
    if not diff:
        raise InvalidDiffError("No git diff available")
    if len(diff) <= max_length:
        return diff
    return diff[:max_length] + TRUNCATION_MARKER


def is_truncated(diff: str) -> bool:
    return diff.endswith(TRUNCATION_MARKER)
