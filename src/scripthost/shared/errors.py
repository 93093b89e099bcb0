"""
Error Reporting

Diagnostics produced by the evaluation engine and the exception hierarchy
raised while naming scripts and resolving their imports.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from .source_location import SourceLocation
from ..utils.config import FAILURE_HEADER


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------

class Severity(Enum):
    """Diagnostic severity, most severe first."""
    FATAL = "FATAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"

    @property
    def is_failure(self) -> bool:
        return self in (Severity.FATAL, Severity.ERROR)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Diagnostic:
    """One report from the engine (or a resolution failure turned into a report)."""
    severity: Severity
    message: str
    location: Optional[SourceLocation] = None

    def format_line(self) -> str:
        """Render as ' - [<severity>] <message>'."""
        return f" - [{self.severity}] {self.message}"


def has_failures(diagnostics: Iterable[Diagnostic]) -> bool:
    return any(d.severity.is_failure for d in diagnostics)


# ---------------------------------------------------------------------------
# DiagnosticReporter
# ---------------------------------------------------------------------------

class DiagnosticReporter:
    """
    Collects diagnostics in the order they are produced and prints them.

    Nothing is printed while the collected diagnostics contain no failure.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.diagnostics: List[Diagnostic] = []

    def report(
        self,
        severity: Severity,
        message: str,
        location: Optional[SourceLocation] = None,
    ) -> None:
        self.diagnostics.append(Diagnostic(severity=severity, message=message, location=location))

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        self.diagnostics.extend(diagnostics)

    def has_errors(self) -> bool:
        return has_failures(self.diagnostics)

    def format_all(self) -> str:
        lines = [FAILURE_HEADER]
        lines.extend(d.format_line() for d in self.diagnostics)
        return "\n".join(lines)

    def print_failures(self) -> None:
        if not self.has_errors():
            return
        stream = self.stream if self.stream is not None else sys.stdout
        print(self.format_all(), file=stream)


# ============================================================================
# Exception Classes
# ============================================================================

class ScriptHostError(Exception):
    """Base exception for all script host errors"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location:
            return f"{self.message} ({self.location})"
        return self.message


class ResolutionError(ScriptHostError):
    """Naming or import-graph failure; aborts the resolution pass."""


class InvalidLocationError(ResolutionError):
    """The script path does not contain the root marker directory."""
    def __init__(self, path: Path, root_marker: str):
        super().__init__(
            f"The script is not in the expected folder: '{root_marker}/' not found in {path}"
        )
        self.path = path
        self.root_marker = root_marker


class UnresolvedImportError(ResolutionError):
    """A declared import does not refer to an existing script file."""
    def __init__(
        self,
        import_path: str,
        resolved: Path,
        declared_in: Optional[Path] = None,
        location: Optional[SourceLocation] = None,
    ):
        where = f" (imported from {declared_in})" if declared_in else ""
        super().__init__(f"Script '{import_path}' not found at {resolved}{where}", location)
        self.import_path = import_path
        self.resolved = resolved
        self.declared_in = declared_in


class NameCollisionError(ResolutionError):
    """Two distinct script paths derive the same symbol name."""
    def __init__(self, name: str, existing: Path, incoming: Path):
        super().__init__(
            f"Symbol name '{name}' is derived from both {existing} and {incoming}"
        )
        self.name = name
        self.existing = existing
        self.incoming = incoming


class EngineDiagnosticError(ScriptHostError):
    """The engine reported one or more failing diagnostics."""
    def __init__(self, diagnostics: List[Diagnostic]):
        count = sum(1 for d in diagnostics if d.severity.is_failure)
        super().__init__(f"Script evaluation failed with {count} error{'s' if count != 1 else ''}")
        self.diagnostics = list(diagnostics)


class ParseError(ScriptHostError):
    """Parse error with source location"""
    def __init__(self, message: str, source_file: str, location: Optional[SourceLocation] = None):
        super().__init__(message, location)
        self.source_file = source_file


class ScriptRuntimeError(ScriptHostError):
    """Evaluation failure inside one compilation unit."""
