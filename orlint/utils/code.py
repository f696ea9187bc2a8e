"""Component source discovery helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Generator, Iterable

from ..errors import AnalyzerIOError

COMPONENT_EXTENSIONS: tuple[str, ...] = (".orbit",)


def iter_component_files(
    paths: Iterable[str | Path], extensions: tuple[str, ...] = COMPONENT_EXTENSIONS
) -> Generator[Path, None, None]:
    """Yield component files for the given paths.

    Directories are walked recursively and their matches yielded in sorted
    order. Explicit file paths are yielded as given, whatever their suffix.
    """

    for root in paths:
        path = Path(root)
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if candidate.suffix in extensions and candidate.is_file():
                    yield candidate
        elif path.is_file():
            yield path
        else:
            raise AnalyzerIOError("No such file or directory", file_path=str(path))
