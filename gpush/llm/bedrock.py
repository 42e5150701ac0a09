"""AWS Bedrock Provider (Anthropic Claude models)"""

from gpush.errors import ConfigurationError, ProviderError
from gpush.llm.base import Provider
from gpush.prompts import PromptBuilder


class PromptProvider(Provider):
    """Prompt-style provider: one user turn with the diff wrapped in a template.

    Credentials come from the standard AWS chain (environment, ~/.aws, SSO).
    """

    MAX_TOKENS = 500
    CREDENTIAL_HINT = (
        "Check your AWS credentials and that the model is enabled in your region:\n"
        "  aws configure\n"
        "  gpush ai:region <region>"
    )

    def __init__(self, model: str, region: str, timeout: float = 60, client=None):
        self.model = model
        self.region = region
        self.timeout = timeout
        self._prompts = PromptBuilder()
        # An injected client brings its own credentials
        self._check_credentials = client is None

        if client is None:
            try:
                from anthropic import AnthropicBedrock
            except ImportError as e:
                raise ConfigurationError(
                    "Anthropic SDK with Bedrock support not installed. Run:\n"
                    "  pip install 'anthropic[bedrock]'"
                ) from e
            client = AnthropicBedrock(aws_region=region, timeout=timeout, max_retries=0)
        self._client = client

    @classmethod
    def from_config(cls, config) -> 'PromptProvider':
        return cls(model=config.bedrock_model, region=config.aws_region, timeout=config.timeout)

    @property
    def name(self) -> str:
        return f"Bedrock ({self.model}, {self.region})"

    def require_credentials(self) -> None:
        """Raise ProviderError when the AWS chain resolves no credentials.

        The SDK only finds out while signing the request, and then raises a
        bare RuntimeError.
        """
        import boto3

        if boto3.Session(region_name=self.region).get_credentials() is None:
            raise ProviderError(
                f"{self.name} rejected the credentials: no AWS credentials found\n\n{self.CREDENTIAL_HINT}"
            )

    def _transport_errors(self) -> tuple[type[BaseException], ...]:
        from anthropic import AnthropicError
        from botocore.exceptions import BotoCoreError, ClientError
        return (AnthropicError, BotoCoreError, ClientError)

    def _complete(self, diff: str) -> str | None:
        if self._check_credentials:
            self.require_credentials()
        response = self._client.messages.create(
            model=self.model,
            max_tokens=self.MAX_TOKENS,
            messages=[{"role": "user", "content": self._prompts.single_turn(diff)}],
        )
        for block in response.content or []:
            if block.type == "text":
                return block.text
        return None
