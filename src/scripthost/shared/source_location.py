"""
Source Location

Position of a construct inside one script file, used by import directives
and engine diagnostics.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location (file, line, column).

    Immutable (frozen) for hashability. end_line/end_column are 0 when unknown.
    """
    file: str
    line: int
    column: int
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"
