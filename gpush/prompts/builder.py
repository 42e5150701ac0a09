"""Prompt Builder - Instructions sent to the providers along with the diff."""

from gpush import COMMIT_TYPES, TRUNCATION_MARKER


# Chat-style providers get the instructions as a system message and the raw
# diff as the user message.
SYSTEM_PROMPT = """You are an expert at writing git commit messages.

Generate ONE concise conventional commit message for the staged diff you are given.
Focus on technical accuracy and clarity.

Rules:
- Output ONLY the commit message, no narration before or after it
- Format: type(scope): subject line (lowercase, imperative mood, max 72 chars)
- Optionally follow with a blank line and a few "- " bullet points
- Wrap the message in a ``` fenced block"""

# Prompt-style providers get a single turn with the diff embedded.
PROMPT_TEMPLATE = """Write a conventional commit message for the git diff below.

{types}

Reply with the commit message inside a ``` fenced block and nothing else.

<diff>
{diff}
</diff>"""


def _types_section() -> str:
    types_list = "\n".join(f"  - {t}: {desc}" for t, desc in COMMIT_TYPES.items())
    return f"Choose the most appropriate type:\n{types_list}"


class PromptBuilder:
    """Builds the text each provider style sends."""

    def system_prompt(self) -> str:
        return f"{SYSTEM_PROMPT}\n\n{_types_section()}"

    def user_message(self, diff: str) -> str:
        if diff.endswith(TRUNCATION_MARKER):
            return f"{diff}\n\n[Note: the diff was truncated due to size.]"
        return diff

    def single_turn(self, diff: str) -> str:
        return PROMPT_TEMPLATE.format(types=_types_section(), diff=self.user_message(diff))
