"""Configuration Management Package

Settings live in a JSON file, looked up in order:

1. .gpushrc in the current directory (project-specific)
2. .gpushrc in the home directory (global)
3. Built-in defaults

Only values that were explicitly set are written; defaults are applied when
a value is read, so changing a default changes it for every user that never
set it.
"""

import json
import os
import re
import sys
from pathlib import Path
from typing import Any, Optional

from gpush import DEFAULT_MAX_DIFF_LENGTH
from gpush.errors import ConfigurationError

VALID_PROVIDERS = ("openai", "bedrock")

DEFAULTS: dict[str, Any] = {
    "provider": "openai",
    "openai_model": "gpt-4o",
    "bedrock_model": "anthropic.claude-3-5-sonnet-20240620-v1:0",
    "aws_region": "eu-central-1",
    "max_diff_length": DEFAULT_MAX_DIFF_LENGTH,
    "timeout": 60,
}

CREDENTIAL_KEYS = ("openai_api_key",)
SETTINGS = tuple(DEFAULTS) + CREDENTIAL_KEYS
INT_SETTINGS = ("max_diff_length", "timeout")

# Which setting holds the model for each provider
MODEL_KEYS = {
    "openai": "openai_model",
    "bedrock": "bedrock_model",
}

# Environment variables win over the file
ENV_OVERRIDES = {
    "provider": "GPUSH_PROVIDER",
    "openai_model": "OPENAI_MODEL",
    "bedrock_model": "BEDROCK_MODEL",
    "max_diff_length": "MAX_DIFF_LENGTH",
    "openai_api_key": "OPENAI_API_KEY",
}

# Choices offered by the interactive menu: (value, label)
OPENAI_MODELS = [
    ("gpt-4o", "GPT-4o (Most capable)"),
    ("gpt-4o-mini", "GPT-4o mini (Faster, cheaper)"),
    ("gpt-3.5-turbo", "GPT-3.5 Turbo (Legacy)"),
]
BEDROCK_MODELS = [
    ("anthropic.claude-3-5-sonnet-20240620-v1:0", "Claude 3.5 Sonnet (Recommended)"),
    ("anthropic.claude-3-haiku-20240307-v1:0", "Claude 3 Haiku (Faster)"),
]
AWS_REGIONS = [
    ("us-east-1", "US East (N. Virginia)"),
    ("us-west-2", "US West (Oregon)"),
    ("eu-central-1", "EU (Frankfurt)"),
    ("ap-northeast-1", "Asia Pacific (Tokyo)"),
]

API_KEY_PATTERN = re.compile(r'^sk-[A-Za-z0-9\-_]{20,}$')


def validate_api_key(key: str) -> None:
    """Raise ConfigurationError unless key looks like an OpenAI API key."""
    if not key or not API_KEY_PATTERN.match(key):
        raise ConfigurationError(
            'Invalid API key format. API key should start with "sk-" followed by letters and numbers'
        )


def mask_secret(value: Optional[str]) -> str:
    if not value:
        return "Not configured"
    return "*****" + value[-4:]


def _to_positive_int(key: str, value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = 0
    if isinstance(value, bool) or number <= 0:
        raise ConfigurationError(f"Invalid {key} '{value}': must be a positive integer")
    return number


def _normalize(key: str, value: Any) -> Any:
    """Validate a value for key and return it in its stored form."""
    if key in INT_SETTINGS:
        return _to_positive_int(key, value)

    value = str(value).strip() if value is not None else ""
    if key == "provider":
        value = value.lower()
        if value not in VALID_PROVIDERS:
            raise ConfigurationError(
                f"Unknown provider '{value}'. Use one of: {', '.join(VALID_PROVIDERS)}"
            )
    elif key == "openai_api_key":
        validate_api_key(value)
    elif not value:
        raise ConfigurationError(f"Setting '{key}' cannot be empty")
    return value


class Config:
    """Key/value settings with defaults applied at read time."""

    def __init__(self, values: Optional[dict] = None):
        self._values = {k: v for k, v in (values or {}).items() if k in SETTINGS}

    @staticmethod
    def _check_key(key: str) -> None:
        if key not in SETTINGS:
            raise ConfigurationError(
                f"Unknown setting '{key}'. Known settings: {', '.join(SETTINGS)}"
            )

    def get(self, key: str) -> Any:
        """Return the value for key: environment, then file, then default."""
        self._check_key(key)

        env_name = ENV_OVERRIDES.get(key)
        if env_name and os.environ.get(env_name):
            raw = os.environ[env_name]
            return _to_positive_int(env_name, raw) if key in INT_SETTINGS else raw

        value = self._values.get(key)
        if value is None or value == "":
            return DEFAULTS.get(key)
        return value

    def set(self, key: str, value: Any) -> None:
        self._check_key(key)
        self._values[key] = _normalize(key, value)

    def unset(self, key: str) -> None:
        self._check_key(key)
        self._values.pop(key, None)

    def is_set(self, key: str) -> bool:
        return self._values.get(key) not in (None, "")

    def to_dict(self) -> dict:
        return dict(self._values)

    def validate(self) -> list[str]:
        """Validate stored values and return a list of warnings.

        Invalid numeric values are dropped so their defaults apply. The
        provider is left alone: an unknown provider must fail loudly when a
        provider is requested, not be swapped for another one.
        """
        warnings = []
        for key in INT_SETTINGS:
            if key not in self._values:
                continue
            try:
                self._values[key] = _to_positive_int(key, self._values[key])
            except ConfigurationError:
                warnings.append(f"Invalid {key} '{self._values[key]}', using {DEFAULTS[key]}")
                del self._values[key]
        return warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        config = cls(data)
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config

    # Typed accessors

    @property
    def provider(self) -> str:
        return str(self.get("provider")).lower()

    @property
    def model(self) -> str:
        """Model of the selected provider."""
        key = MODEL_KEYS.get(self.provider)
        if key is None:
            raise ConfigurationError(
                f"Unknown provider '{self.provider}'. Use one of: {', '.join(VALID_PROVIDERS)}"
            )
        return self.get(key)

    @property
    def openai_model(self) -> str:
        return self.get("openai_model")

    @property
    def bedrock_model(self) -> str:
        return self.get("bedrock_model")

    @property
    def aws_region(self) -> str:
        return self.get("aws_region")

    @property
    def max_diff_length(self) -> int:
        return self.get("max_diff_length")

    @property
    def timeout(self) -> int:
        return self.get("timeout")

    @property
    def has_api_key(self) -> bool:
        return bool(self.get("openai_api_key"))

    @property
    def openai_api_key(self) -> str:
        key = self.get("openai_api_key")
        if not key:
            raise ConfigurationError("No API key configured. Use `gpush config --set-key <key>`")
        return key


class ConfigManager:
    """Loads and saves the configuration file."""

    CONFIG_FILENAME = ".gpushrc"

    def __init__(self):
        self._config: Optional[Config] = None
        self._config_path: Optional[Path] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        for path in (Path.cwd() / self.CONFIG_FILENAME, Path.home() / self.CONFIG_FILENAME):
            if path.exists():
                self._config = self._load_from_file(path)
                self._config_path = path
                return self._config

        self._config = Config()
        return self._config

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return Config.from_dict(data)
        except (json.JSONDecodeError, ValueError, OSError) as e:
            print(f"Warning: Could not load {path}: {e}", file=sys.stderr)
            return Config()

    def save(self, config: Config, global_config: bool = True) -> Path:
        path = Path.home() / self.CONFIG_FILENAME if global_config else Path.cwd() / self.CONFIG_FILENAME
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config.to_dict(), f, indent=2)
        # The file may hold an API key
        path.chmod(0o600)
        self._config_path = path
        return path

    def set(self, key: str, value: Any, global_config: Optional[bool] = None) -> Path:
        """Set one value and persist it.

        Writes back to the file it was loaded from unless global_config says
        otherwise; with no file loaded, writes the global one.
        """
        config = self.load()
        config.set(key, value)
        if global_config is None:
            global_config = self._config_path != Path.cwd() / self.CONFIG_FILENAME
        return self.save(config, global_config=global_config)

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


__all__ = [
    "Config",
    "ConfigManager",
    "DEFAULTS",
    "SETTINGS",
    "VALID_PROVIDERS",
    "MODEL_KEYS",
    "ENV_OVERRIDES",
    "OPENAI_MODELS",
    "BEDROCK_MODELS",
    "AWS_REGIONS",
    "validate_api_key",
    "mask_secret",
]
