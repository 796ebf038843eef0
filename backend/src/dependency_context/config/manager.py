"""Configuration management for dependency-context."""

from __future__ import annotations

import copy
import hashlib
import json
import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

PROJECT_ENV_FILES = (".env", ".env.dependency-context")

DEFAULT_CONFIG: Dict = {
    "port": 3006,
    "github_token": None,
    "embedding_model": "sentence-transformers/all-MiniLM-L6-v2",
    "storage_dir": ".dependency-context",
    "debug": False,
    "min_chunk_size": 800,
    "max_chunk_size": 8000,
    "chunk_length_unit": "chars",
    "chunks_returned": 5,
    "replace_on_reindex": False,
}

# env var -> (config key, converter)
ENV_KEYS = {
    "PORT": ("port", int),
    "GITHUB_TOKEN": ("github_token", str),
    "MODEL_NAME": ("embedding_model", str),
    "DEBUG": ("debug", lambda v: v.strip().lower() == "true"),
    "MIN_CHUNK_SIZE": ("min_chunk_size", int),
    "MAX_CHUNK_SIZE": ("max_chunk_size", int),
    "CHUNK_LENGTH_UNIT": ("chunk_length_unit", str),
    "CHUNKS_RETURNED": ("chunks_returned", int),
    "REPLACE_ON_REINDEX": ("replace_on_reindex", lambda v: v.strip().lower() == "true"),
}

# Keys that change what ends up in the index
_FINGERPRINT_KEYS = ("embedding_model", "min_chunk_size", "max_chunk_size", "chunk_length_unit")


def _apply_overrides(config: Dict, values: Mapping[str, Optional[str]], source: str) -> None:
    for env_name, (key, convert) in ENV_KEYS.items():
        raw = values.get(env_name)
        if raw is None or raw == "":
            continue
        try:
            config[key] = convert(raw)
        except ValueError:
            logger.warning(f"Ignoring invalid {env_name}={raw!r} from {source}")


def apply_env_vars(env_vars: Optional[Mapping[str, str]]) -> None:
    """Export request-supplied variables into the process environment."""
    if not env_vars:
        return
    for key, value in env_vars.items():
        os.environ[key] = str(value)


def load_config(project_path: Optional[Union[str, Path]] = None) -> Dict:
    """Load configuration.

    Defaults, then the process environment, then the first project env file
    found (``.env`` or ``.env.dependency-context``).
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    _apply_overrides(config, os.environ, "environment")

    if project_path:
        for name in PROJECT_ENV_FILES:
            env_path = Path(project_path) / name
            if not env_path.is_file():
                continue
            try:
                values = dotenv_values(env_path)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Error loading env file {env_path}: {e}")
                continue
            _apply_overrides(config, values, str(env_path))
            break

    return config


def cfg_fingerprint(cfg: Dict) -> str:
    """Generate fingerprint hash for the settings that shape the index."""
    relevant = {k: cfg.get(k) for k in _FINGERPRINT_KEYS}
    payload = json.dumps(relevant, sort_keys=True, ensure_ascii=False).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()
