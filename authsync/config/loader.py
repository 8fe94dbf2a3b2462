"""Configuration loading and processing."""

import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigurationError
from .schema import AuthSyncConfig

DEFAULT_CONFIG_FILE = "authsync.config.yaml"


class AuthSyncConfigLoader:
    """Loads and validates authsync configuration."""

    ENV_VAR_PATTERN = re.compile(
        r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
        r"(?:(?P<op>:[-?])(?P<arg>[^}]*))?\}"
    )

    @classmethod
    def load_config(cls, config_path: Optional[Path] = None) -> AuthSyncConfig:
        """Load configuration from a YAML file.

        The file holds an ``authsync`` section; a missing section yields the
        defaults.

        Args:
            config_path: Path to the config file, ``./authsync.config.yaml`` if None

        Returns:
            Validated AuthSyncConfig instance

        Raises:
            ConfigurationError: If configuration is invalid or cannot be loaded
        """
        config_path = Path(config_path) if config_path else cls.get_default_config_path()
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                raw_config = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"Configuration file not found: {config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

        if raw_config is None:
            raw_config = {}
        if not isinstance(raw_config, dict):
            raise ConfigurationError("Configuration file must contain a mapping")

        section = raw_config.get("authsync") or {}
        if not isinstance(section, dict):
            raise ConfigurationError("The 'authsync' section must be a mapping")

        return cls.from_dict(section)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuthSyncConfig:
        """Validate an already parsed ``authsync`` section."""
        processed_config = cls._substitute_env_vars(data)
        try:
            return AuthSyncConfig(**processed_config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid authsync configuration: {e}")

    @classmethod
    def _substitute_env_vars(cls, value: Any) -> Any:
        """Expand environment references in every string of a parsed section.

        ``${NAME}`` requires the variable, ``${NAME:-fallback}`` falls back to
        the given text and ``${NAME:?hint}`` requires it with ``hint`` in the
        error.

        Raises:
            ConfigurationError: If a required variable is not set
        """
        match value:
            case dict():
                return {k: cls._substitute_env_vars(v) for k, v in value.items()}
            case list():
                return [cls._substitute_env_vars(v) for v in value]
            case str():
                return cls.ENV_VAR_PATTERN.sub(cls._expand, value)
        return value

    @staticmethod
    def _expand(match: re.Match) -> str:
        name, operator, argument = match.group("name", "op", "arg")
        env_value = os.environ.get(name)
        if env_value is not None:
            return env_value
        if operator == ":-":
            return argument
        hint = f": {argument}" if operator == ":?" and argument else ""
        raise ConfigurationError(f"Environment variable '{name}' not set{hint}")

    @classmethod
    def get_default_config_path(cls) -> Path:
        return Path.cwd() / DEFAULT_CONFIG_FILE
