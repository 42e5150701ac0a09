"""OpenAI Chat Completions Provider"""

from gpush.errors import ConfigurationError
from gpush.llm.base import Provider
from gpush.prompts import PromptBuilder


class ChatProvider(Provider):
    """Chat-style provider: system instruction plus the diff as the user message."""

    MAX_TOKENS = 200
    CREDENTIAL_HINT = (
        "Check your OpenAI API key:\n"
        "  gpush config --set-key sk-..."
    )

    def __init__(self, api_key: str, model: str, timeout: float = 60, client=None):
        self.model = model
        self.timeout = timeout
        self._prompts = PromptBuilder()

        if client is None:
            try:
                from openai import OpenAI
            except ImportError as e:
                raise ConfigurationError(
                    "OpenAI SDK not installed. Run:\n"
                    "  pip install openai"
                ) from e
            client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self._client = client

    @classmethod
    def from_config(cls, config) -> 'ChatProvider':
        return cls(api_key=config.openai_api_key, model=config.openai_model, timeout=config.timeout)

    @property
    def name(self) -> str:
        return f"OpenAI ({self.model})"

    def _transport_errors(self) -> tuple[type[BaseException], ...]:
        from openai import OpenAIError
        return (OpenAIError,)

    def _complete(self, diff: str) -> str | None:
        response = self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": self._prompts.system_prompt()},
                {"role": "user", "content": self._prompts.user_message(diff)},
            ],
            max_tokens=self.MAX_TOKENS,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content
