"""Script language frontend: grammar, parser and AST."""

from .parser import Parser, parse_source, clear_parse_cache
from .nodes import Program, Annotation

__all__ = ["Parser", "parse_source", "clear_parse_cache", "Program", "Annotation"]
