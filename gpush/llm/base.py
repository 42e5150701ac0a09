"""LLM Base Classes and Shared Code"""

from abc import ABC, abstractmethod

from gpush.errors import GenerationError, InvalidDiffError, ProviderError


# Matched case-insensitively against the exception type and message
CREDENTIAL_PATTERNS = (
    "credential",
    "unauthorized",
    "access denied",
    "accessdenied",
    "api key",
    "api_key",
    "authentication",
    "security token",
    "not authorized",
    "permissiondenied",
    "forbidden",
)

NETWORK_PATTERNS = (
    "timed out",
    "timeout",
    "connection",
    "could not resolve",
    "name or service not known",
    "network",
)

NETWORK_HINT = (
    "Check your network connection, or give the provider more time:\n"
    "  gpush config --timeout 120"
)


def classify_error(error: BaseException, provider_name: str, credential_hint: str) -> ProviderError:
    """Turn a transport or SDK exception into a ProviderError the user can act on."""
    detail = str(error).strip() or type(error).__name__
    haystack = f"{type(error).__name__} {detail}".lower()

    if any(pattern in haystack for pattern in CREDENTIAL_PATTERNS):
        message = f"{provider_name} rejected the credentials: {detail}"
        return ProviderError(f"{message}\n\n{credential_hint}" if credential_hint else message)
    if any(pattern in haystack for pattern in NETWORK_PATTERNS):
        return ProviderError(f"Could not reach {provider_name}: {detail}\n\n{NETWORK_HINT}")
    return ProviderError(f"{provider_name} API error: {detail}")


class Provider(ABC):
    """A backend that turns a diff into a commit message.

    Subclasses implement _complete() for one API style. The public entry
    point makes a single attempt; there are no retries.
    """

    CREDENTIAL_HINT = ""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def _complete(self, diff: str) -> str | None:
        """Call the backend and return its raw text, or None if it had none."""

    @abstractmethod
    def _transport_errors(self) -> tuple[type[BaseException], ...]:
        """Exception types raised by the SDK for failed calls."""

    def generate_commit_message(self, diff: str) -> str:
        """Return the provider's raw, stripped response for diff."""
        if not diff or not diff.strip():
            raise InvalidDiffError("Cannot generate a commit message from an empty diff")

        try:
            content = self._complete(diff)
        except self._transport_errors() as e:
            raise classify_error(e, self.name, self.CREDENTIAL_HINT) from e

        if not content or not content.strip():
            raise GenerationError(f"{self.name} returned an empty response")
        return content.strip()
