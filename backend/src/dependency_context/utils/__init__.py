"""Utility functions for dependency-context."""

from .file_utils import (
    is_binary_file,
    is_valid_project_path,
    relative_doc_path,
)
from .log_config import LOGGER_NAME, setup_logging

__all__ = [
    "is_binary_file",
    "is_valid_project_path",
    "relative_doc_path",
    "LOGGER_NAME",
    "setup_logging",
]
