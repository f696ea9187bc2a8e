"""Basic file IO helpers."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import yaml

from ..errors import AnalyzerIOError, ConfigError


def read_yaml_file(path: Path) -> Any:
    """Return the parsed YAML document, or ``None`` if the file does not exist."""

    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML: {exc}", file_path=str(path)) from exc
    except OSError as exc:
        raise AnalyzerIOError(f"Unable to read file: {exc.strerror or exc}", file_path=str(path)) from exc


def read_toml_file(path: Path) -> Any:
    """Return the parsed TOML document, or ``None`` if the file does not exist."""

    if not path.exists():
        return None
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML: {exc}", file_path=str(path)) from exc
    except OSError as exc:
        raise AnalyzerIOError(f"Unable to read file: {exc.strerror or exc}", file_path=str(path)) from exc


def read_text_file(path: Path) -> str:
    """Return the file contents as UTF-8 text.

    Unlike the structured readers above, a missing file is an error here: the
    caller asked for this exact file.
    """

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise AnalyzerIOError(f"File is not valid UTF-8: {exc.reason}", file_path=str(path)) from exc
    except OSError as exc:
        raise AnalyzerIOError(f"Unable to read file: {exc.strerror or exc}", file_path=str(path)) from exc
