"""Configuration module for the VSTS client."""

from .config import Config, VstsConfig, load_config, load_config_from_env

__all__ = ["Config", "VstsConfig", "load_config", "load_config_from_env"]
