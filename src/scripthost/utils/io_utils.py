"""
Centralized file I/O utilities.

- Single place for encoding and path normalization
- Use Path.read_text() consistently (no raw open/read)
"""

import os
from pathlib import Path
from typing import Union

from .config import DEFAULT_FILE_ENCODING


def read_source_file(path: Union[Path, str], encoding: str = DEFAULT_FILE_ENCODING) -> str:
    """Read script source with standard encoding."""
    p = Path(path) if not isinstance(path, Path) else path
    return p.read_text(encoding=encoding)


def normalize_path(path: Union[Path, str]) -> Path:
    """
    Absolute path with redundant '.' and '..' segments removed.

    Lexical only: symlinks are kept as written so names follow the path the user gave.
    """
    return Path(os.path.normpath(os.path.abspath(os.fspath(path))))


def is_script_file(path: Path) -> bool:
    """True if path names an existing regular file."""
    return path.is_file()
