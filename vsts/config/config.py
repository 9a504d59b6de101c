"""Configuration management for the VSTS client."""

import os
import yaml
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, fields


DEFAULT_API_VERSION = "4.1"


@dataclass
class VstsConfig:
    """Configuration for a VSTS instance connection."""

    instance_name: str
    pat_token: Optional[str] = None
    api_version: str = DEFAULT_API_VERSION
    verify_ssl: bool = True
    timeout: int = 30

    def __post_init__(self) -> None:
        """Load PAT token from environment if not provided."""
        if not self.pat_token:
            self.pat_token = os.environ.get("VSTS_ACCESS_TOKEN")


@dataclass
class Config:
    """Main configuration class."""

    vsts: VstsConfig
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "Config":
        """Create Config instance from dictionary."""
        if not isinstance(config_dict, dict):
            raise _validation_error(["Configuration must be a mapping"])

        vsts_dict = config_dict.get("vsts") or {}
        if not isinstance(vsts_dict, dict):
            raise _validation_error(["The vsts section must be a mapping"])

        known = {f.name for f in fields(VstsConfig)}
        unknown = sorted(set(vsts_dict) - known)
        if unknown:
            raise _validation_error([f"Unknown vsts settings: {', '.join(unknown)}"])

        # Missing instance name is reported by validate()
        settings = dict(vsts_dict)
        settings["instance_name"] = settings.get("instance_name") or ""
        vsts_config = VstsConfig(**settings)

        return cls(
            vsts=vsts_config,
            log_level=config_dict.get("log_level", "INFO"),
        )

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.vsts.instance_name:
            errors.append("VSTS instance name is required")

        if not self.vsts.pat_token:
            errors.append(
                "VSTS personal access token is required "
                "(set in config or VSTS_ACCESS_TOKEN env var)"
            )

        if not self.vsts.api_version:
            errors.append("VSTS API version must not be empty")

        if self.vsts.timeout <= 0:
            errors.append("Timeout must be a positive number of seconds")

        return errors


def _validation_error(errors: List[str]) -> ValueError:
    return ValueError(
        "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
    )


def _validated(config: Config) -> Config:
    errors = config.validate()
    if errors:
        raise _validation_error(errors)
    return config


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to configuration file. If not provided, uses the
                    CONFIG_PATH env var or 'config.yaml' in the current directory.

    Returns:
        Config: Configuration instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If configuration is invalid
    """
    if not config_path:
        config_path = os.environ.get("CONFIG_PATH", "config.yaml")

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    return _validated(Config.from_dict(config_dict))


def load_config_from_env() -> Config:
    """
    Load configuration from environment variables only.

    Environment variables:
        VSTS_INSTANCE: Instance name (or full base URL)
        VSTS_ACCESS_TOKEN: Personal Access Token
        VSTS_API_VERSION: REST API version
        VSTS_VERIFY_SSL: "true"/"false"
        VSTS_TIMEOUT: Request timeout in seconds
        LOG_LEVEL: Logging level
    """
    config_dict = {
        "vsts": {
            "instance_name": os.environ.get("VSTS_INSTANCE"),
            "pat_token": os.environ.get("VSTS_ACCESS_TOKEN"),
            "api_version": os.environ.get("VSTS_API_VERSION", DEFAULT_API_VERSION),
            "verify_ssl": os.environ.get("VSTS_VERIFY_SSL", "true").lower() == "true",
            "timeout": int(os.environ.get("VSTS_TIMEOUT", "30")),
        },
        "log_level": os.environ.get("LOG_LEVEL", "INFO"),
    }

    return _validated(Config.from_dict(config_dict))
