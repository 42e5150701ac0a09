"""Prompt Construction Package"""

from gpush.prompts.builder import PromptBuilder, SYSTEM_PROMPT, PROMPT_TEMPLATE

__all__ = ["PromptBuilder", "SYSTEM_PROMPT", "PROMPT_TEMPLATE"]
