"""Types shared between the module system, the compiler adapters and the engine."""

from .source_location import SourceLocation
from .errors import (
    Severity,
    Diagnostic,
    DiagnosticReporter,
    ScriptHostError,
    ResolutionError,
    InvalidLocationError,
    UnresolvedImportError,
    NameCollisionError,
    EngineDiagnosticError,
    ParseError,
    ScriptRuntimeError,
)

__all__ = [
    "SourceLocation",
    "Severity",
    "Diagnostic",
    "DiagnosticReporter",
    "ScriptHostError",
    "ResolutionError",
    "InvalidLocationError",
    "UnresolvedImportError",
    "NameCollisionError",
    "EngineDiagnosticError",
    "ParseError",
    "ScriptRuntimeError",
]
