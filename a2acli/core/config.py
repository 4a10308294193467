"""CLI configuration using Pydantic Settings.

Values are resolved with this precedence (highest first):

1. Explicit command-line flags (applied by the CLI as overrides)
2. Environment variables with the ``A2ACLI_`` prefix
3. The selected profile of the YAML config file
4. Field defaults

Config file layout::

    default_env: staging
    envs:
      staging:
        service_url: https://agents.staging.example.com
        token: abc123

The file is read from ``--config`` / ``A2ACLI_CONFIG_FILE`` or the first
existing path in ``config_search_paths()``.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from a2acli.core.constants import (
    DEFAULT_HISTORY_SIZE,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_SERVICE_URL,
)
from a2acli.core.exceptions import ConfigError


DEFAULT_ENV_NAME = "default"

# Keys a profile may set; anything else in a profile is ignored
PROFILE_KEYS = ("service_url", "token", "transport")


class Settings(BaseSettings):
    """CLI settings loaded from environment variables and profiles."""

    # Connection
    service_url: str = Field(
        default=DEFAULT_SERVICE_URL,
        description="Base URL of the A2A service",
    )
    token: SecretStr | None = Field(default=None, description="Bearer auth token")
    transport: str | None = Field(
        default=None,
        description="Forced transport binding (grpc, json-rpc, http+json)",
    )
    http_timeout_seconds: float = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout for requests and idle streams",
    )

    # Presentation
    no_tui: bool = Field(default=False, description="Disable the interactive view")
    history_size: int = Field(
        default=DEFAULT_HISTORY_SIZE,
        ge=1,
        description="Log lines kept in the interactive view",
    )

    # Logging
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Logging level")
    log_format: str = Field(default="console", description="console or json")

    # Profile selection
    config_file: Path | None = Field(default=None, description="YAML config file")
    env: str | None = Field(default=None, description="Profile name in the config file")

    model_config = SettingsConfigDict(
        env_prefix="A2ACLI_",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def auth_token(self) -> str | None:
        """Plain-text token, or None when unset."""
        if self.token is None:
            return None
        value = self.token.get_secret_value()
        return value or None


def config_search_paths() -> list[Path]:
    """Return candidate config file paths in lookup order."""
    home = Path.home()
    paths: list[Path] = []
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        paths.append(Path(xdg) / "a2acli" / "config.yaml")
    paths.append(home / ".config" / "a2acli" / "config.yaml")
    paths.append(home / ".a2acli.yaml")
    return paths


def find_config_file(explicit: Path | None = None) -> Path | None:
    """Locate the config file to read.

    Args:
        explicit: Path given on the command line or via environment.

    Returns:
        The file to read, or None when no config file exists.

    Raises:
        ConfigError: If an explicit path does not exist.
    """
    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"config file not found: {explicit}", source=str(explicit))
        return explicit
    for candidate in config_search_paths():
        if candidate.is_file():
            return candidate
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a YAML config file.

    Raises:
        ConfigError: If the file cannot be read or is not a mapping.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read config file {path}: {e}", source=str(path)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping", source=str(path))
    return data


def select_profile(
    data: dict[str, Any],
    env_name: str | None,
) -> tuple[str, dict[str, Any]]:
    """Pick the active profile from parsed config data.

    Args:
        data: Parsed config file contents.
        env_name: Explicitly requested profile, if any.

    Returns:
        Tuple of (profile name, profile values).

    Raises:
        ConfigError: If an explicitly requested profile does not exist.
    """
    envs = data.get("envs") or {}
    name = env_name or data.get("default_env") or DEFAULT_ENV_NAME
    profile = envs.get(name)
    if profile is None:
        if env_name:
            raise ConfigError(f"unknown environment profile: {env_name}", source=env_name)
        return name, {}
    if not isinstance(profile, dict):
        raise ConfigError(f"profile {name} must be a mapping", source=name)
    # YAML reads unquoted digits as ints; every profile key is a string setting
    return name, {k: str(v) for k, v in profile.items() if k in PROFILE_KEYS and v is not None}


def load_settings(
    config_file: Path | None = None,
    env_name: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Build Settings from flags, environment, profile and defaults.

    Args:
        config_file: Explicit config file (``--config``).
        env_name: Explicit profile name (``--env``).
        overrides: Values passed explicitly on the command line.

    Returns:
        Fully resolved Settings. ``config_file`` and ``env`` record the file
        and profile that were used.

    Raises:
        ConfigError: If the config file or profile cannot be used.
    """
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    try:
        from_env = Settings()
    except ValidationError as e:
        raise ConfigError(f"invalid configuration: {e}", source="environment") from e

    path = find_config_file(config_file or from_env.config_file)
    data = read_config_file(path) if path else {}
    name, profile = select_profile(data, env_name or from_env.env)

    # Environment variables outrank profile values
    values = {k: v for k, v in profile.items() if k not in from_env.model_fields_set}
    values.update(overrides)
    values["config_file"] = path
    values["env"] = name
    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration: {e}", source=str(path) if path else name) from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Settings resolved from environment and config file
    """
    return load_settings()
