"""
Parser

Lark LALR parser for script files. Parse results are frozen ASTs, so they are
cached per (source, file) and shared by the import directive extractor and
the evaluation engine.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError

from .nodes import Program
from .transformer import ScriptTransformer
from ..shared.errors import ParseError
from ..shared.source_location import SourceLocation
from ..utils.config import PARSER_CACHE

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"


class Parser:
    """
    Script parser.

    Takes source code, returns a Program AST with source locations.
    Lark errors are converted to ParseError.
    """

    def __init__(self, cache=PARSER_CACHE):
        self.parser = Lark.open(
            str(GRAMMAR_PATH),
            start="program",
            parser="lalr",
            cache=cache,
            propagate_positions=True,
            maybe_placeholders=False,
        )
        self.transformer = ScriptTransformer()

    def parse(self, source: str, source_file: str = "<script>") -> Program:
        """
        Parse source code to AST.

        Raises:
            ParseError: with the location of the offending token
        """
        self.transformer.current_file = source_file
        # Statements are newline terminated; make the last line terminated too
        text = source if source.endswith("\n") else source + "\n"
        try:
            tree = self.parser.parse(text)
        except UnexpectedInput as e:
            location = SourceLocation(file=source_file, line=e.line, column=e.column)
            raise ParseError(_describe(e, location), source_file, location) from e
        try:
            return self.transformer.transform(tree)
        except VisitError as e:
            # Literal decoding failed, e.g. an invalid escape in a string
            raise ParseError(f"Parse error in {source_file}: {e.orig_exc}", source_file) from e


def _describe(error: UnexpectedInput, location: SourceLocation) -> str:
    if isinstance(error, UnexpectedEOF):
        return f"Parse error at {location}: unexpected end of file"
    if isinstance(error, UnexpectedToken):
        token = error.token
        if token.type == "$END":
            return f"Parse error at {location}: unexpected end of file"
        if token.type == "_NL":
            return f"Parse error at {location}: unexpected end of line"
        return f"Parse error at {location}: unexpected token '{token}'"
    if isinstance(error, UnexpectedCharacters):
        return f"Parse error at {location}: unexpected character '{error.char}'"
    return f"Parse error at {location}"


@lru_cache(maxsize=1)
def _shared_parser() -> Parser:
    return Parser()


@lru_cache(maxsize=256)
def parse_source(source: str, source_file: str) -> Program:
    """Parse source string to AST, cached across resolution and evaluation."""
    return _shared_parser().parse(source, source_file)


def parse_file_source(source: str, source_file: str, parser: Optional[Parser] = None) -> Program:
    if parser is None:
        return parse_source(source, source_file)
    return parser.parse(source, source_file)


def clear_parse_cache() -> None:
    """Clear the parse cache. Used by tests."""
    parse_source.cache_clear()
