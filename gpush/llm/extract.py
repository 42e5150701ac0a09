"""Commit message extraction from raw model responses."""

import re

# First ``` fenced block, with an optional language tag on the opening line
FENCED_BLOCK = re.compile(r'```(?:\w*\n)?(.*?)```', re.DOTALL)


def extract_commit_message(response: str) -> str:
    """Pull the commit message out of a model response.

    Returns the trimmed interior of the first fenced block. Without one,
    returns the first paragraph (text before the first blank line, so a
    response that opens with a blank line has none). An empty result must
    be rejected by the caller.
    """
    response = response.replace('\r\n', '\n')
    match = FENCED_BLOCK.search(response)
    if match:
        return match.group(1).strip()
    return response.split('\n\n')[0].strip()
