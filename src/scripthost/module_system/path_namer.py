"""
Script Path Naming

Pure naming algorithm: script file path → symbol name.

The symbol name is the identity the engine uses for a compilation unit, so two
scripts that share a file name in different folders must not share a name.
The name is therefore built from the whole path below the root marker
directory:

    scripts/sub_folder/foo.custom.kts → SubFolderFoo

This class is stateless and can be shared/reused.
"""

import logging
import os
import re
from pathlib import Path
from typing import List, Optional, Union

from ..shared.errors import InvalidLocationError
from ..utils.config import DEFAULT_ROOT_MARKER, DEFAULT_SCRIPT_EXTENSION, HostConfig, normalize_marker
from ..utils.io_utils import normalize_path

logger = logging.getLogger(__name__)

_TOKEN_SEPARATORS = re.compile(r"[._]")
_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")


def _capitalize(token: str) -> str:
    # Only the first character changes; str.capitalize() would lower-case the rest
    return token[:1].upper() + token[1:]


def split_name_tokens(relative_path: str) -> List[str]:
    """
    Split a marker-relative path into name tokens.

    Directory separators split first, then '.' and '_' inside every segment.
    Empty tokens are kept (they contribute nothing to the name).
    """
    segments = relative_path.replace(os.sep, "/").split("/")
    tokens: List[str] = []
    for segment in segments:
        tokens.extend(_TOKEN_SEPARATORS.split(segment))
    return tokens


class PathNamer:
    """
    Derives the symbol name of a script from its filesystem path.

    Args:
        root_marker: directory segment anchoring the relative path (e.g. 'scripts')
        extension: suffix stripped from the relative path when present

    Examples:
        name(Path('/w/scripts/sub_folder/foo.custom.kts')) → 'SubFolderFoo'
        name(Path('/w/scripts/a_b/c.custom.kts')) → 'ABC'
        name(Path('/w/other/foo.custom.kts')) → InvalidLocationError
    """

    def __init__(
        self,
        root_marker: str = DEFAULT_ROOT_MARKER,
        extension: str = DEFAULT_SCRIPT_EXTENSION,
    ):
        self.root_marker = root_marker
        self.extension = extension
        self._marker_segment = normalize_marker(root_marker)

    @classmethod
    def from_config(cls, config: HostConfig) -> "PathNamer":
        return cls(root_marker=config.root_marker, extension=config.script_extension)

    def relative_path(self, path: Union[Path, str]) -> str:
        """
        Path below the first root marker segment, '/'-separated.

        Raises:
            InvalidLocationError: marker absent, or nothing follows it
        """
        absolute_path = normalize_path(path)
        parts = absolute_path.parts
        try:
            index = parts.index(self._marker_segment)
        except ValueError:
            raise InvalidLocationError(absolute_path, self._marker_segment) from None

        remainder = parts[index + 1:]
        if not remainder:
            raise InvalidLocationError(absolute_path, self._marker_segment)
        return "/".join(remainder)

    def strip_extension(self, relative_path: str) -> str:
        if self.extension and relative_path.endswith(self.extension):
            return relative_path[:-len(self.extension)]
        return relative_path

    def name(self, path: Union[Path, str]) -> str:
        """
        Compute the symbol name for a script path.

        Raises:
            InvalidLocationError: If the path is not under the root marker
        """
        relative = self.strip_extension(self.relative_path(path))
        tokens = split_name_tokens(relative)
        name = "".join(_NON_ALPHANUMERIC.sub("_", _capitalize(token)) for token in tokens)
        logger.debug(f"Path: {normalize_path(path)} | Name: {name}")
        return name


def script_symbol_name(
    path: Union[Path, str],
    root_marker: str = DEFAULT_ROOT_MARKER,
    extension: Optional[str] = DEFAULT_SCRIPT_EXTENSION,
) -> str:
    """Functional form of PathNamer.name()."""
    return PathNamer(root_marker=root_marker, extension=extension or "").name(path)
