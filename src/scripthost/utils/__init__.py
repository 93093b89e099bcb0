"""
Script host utilities package
"""

from .io_utils import read_source_file, normalize_path, is_script_file
from .config import HostConfig

__all__ = ["read_source_file", "normalize_path", "is_script_file", "HostConfig"]
