"""
Configuration constants for the script host
"""

import os
from dataclasses import dataclass

# Script location constants
DEFAULT_ROOT_MARKER = "scripts"  # Directory every resolvable script must live under
DEFAULT_SCRIPT_EXTENSION = ".custom.kts"

# Import annotation constants
IMPORT_ANNOTATION = "Import"
FILE_ANNOTATION_TARGET = "file"

# Parser configuration constants (Lark caches the compiled LALR tables under the temp dir)
PARSER_CACHE = True

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Logging constants
LOG_LEVEL_ENV_VAR = "SCRIPTHOST_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# CLI constants
PROGRAM_NAME = "scripthost"
USAGE_MESSAGE = f"Usage: {PROGRAM_NAME} /path/to/script"
FAILURE_HEADER = "Script evaluation failed:"


def normalize_marker(root_marker: str) -> str:
    """Root marker as a bare directory segment ('scripts/' → 'scripts')."""
    return root_marker.strip("/").strip(os.sep)


@dataclass(frozen=True)
class HostConfig:
    """
    Naming and resolution settings shared by one evaluation request.

    root_marker: directory name anchoring symbol names (trailing separator ignored)
    script_extension: suffix stripped before deriving a symbol name
    strict_imports: raise UnresolvedImportError on a missing import instead of skipping it
    """
    root_marker: str = DEFAULT_ROOT_MARKER
    script_extension: str = DEFAULT_SCRIPT_EXTENSION
    strict_imports: bool = False
    encoding: str = DEFAULT_FILE_ENCODING
