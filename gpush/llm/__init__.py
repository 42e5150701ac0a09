"""LLM Provider Package"""

from gpush.errors import ConfigurationError
from gpush.llm.base import Provider, classify_error
from gpush.llm.bedrock import PromptProvider
from gpush.llm.extract import extract_commit_message
from gpush.llm.openai_chat import ChatProvider

PROVIDERS = {
    "openai": ChatProvider,
    "bedrock": PromptProvider,
}


def get_provider(config) -> Provider:
    """Build the provider named by config.provider.

    Fails before any client is created when the name is not a known provider.
    """
    provider_class = PROVIDERS.get(config.provider)
    if provider_class is None:
        raise ConfigurationError(
            f"Unknown provider: {config.provider}. Use one of: {', '.join(PROVIDERS)}"
        )
    return provider_class.from_config(config)


__all__ = [
    "Provider",
    "ChatProvider",
    "PromptProvider",
    "PROVIDERS",
    "get_provider",
    "classify_error",
    "extract_commit_message",
]
