"""Utility helpers for the linter."""

from .fileio import read_text_file, read_toml_file, read_yaml_file
from .code import COMPONENT_EXTENSIONS, iter_component_files

__all__ = [
    "COMPONENT_EXTENSIONS",
    "iter_component_files",
    "read_text_file",
    "read_toml_file",
    "read_yaml_file",
]
