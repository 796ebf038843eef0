"""Configuration management for dependency-context."""

from .manager import (
    DEFAULT_CONFIG,
    PROJECT_ENV_FILES,
    apply_env_vars,
    load_config,
    cfg_fingerprint,
)

__all__ = [
    "DEFAULT_CONFIG",
    "PROJECT_ENV_FILES",
    "apply_env_vars",
    "load_config",
    "cfg_fingerprint",
]
