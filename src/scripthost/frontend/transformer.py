"""
Script AST Transformer
Converts Lark parse tree to script AST nodes
"""

import ast
import logging
from dataclasses import replace
from typing import List, Union

from lark import Transformer, v_args
from lark.lexer import Token

from .nodes import (
    Annotation,
    BinaryOp,
    Expression,
    ExpressionStatement,
    Literal,
    Member,
    Name,
    Negate,
    PrintStatement,
    Program,
    Statement,
    ValDeclaration,
)
from ..shared.source_location import SourceLocation

logger = logging.getLogger(__name__)


@v_args(inline=True, meta=True)
class ScriptTransformer(Transformer):
    """Builds frozen AST nodes with source locations from the Lark tree."""

    def __init__(self):
        super().__init__()
        self.current_file: str = ""  # Must be set by parser before use

    def _extract_location(self, meta) -> SourceLocation:
        if not self.current_file:
            raise RuntimeError(
                "Parser bug: current_file not set. "
                "Parser must set current_file before transforming."
            )
        if meta is None or getattr(meta, "empty", True):
            return SourceLocation(file=self.current_file, line=0, column=0)
        return SourceLocation(
            file=self.current_file,
            line=meta.line,
            column=meta.column,
            end_line=getattr(meta, "end_line", 0) or 0,
            end_column=getattr(meta, "end_column", 0) or 0,
        )

    def _token_location(self, token: Token) -> SourceLocation:
        return SourceLocation(
            file=self.current_file,
            line=token.line or 0,
            column=token.column or 0,
            end_line=token.end_line or 0,
            end_column=token.end_column or 0,
        )

    # ------------------------------------------------------------------
    # Program and annotations
    # ------------------------------------------------------------------

    def program(self, meta, *items: Union[Annotation, Statement]) -> Program:
        annotations: List[Annotation] = []
        statements: List[Statement] = []
        for item in items:
            if isinstance(item, Annotation):
                # File annotations only count before the first statement
                annotations.append(item if not statements else replace(item, in_header=False))
            else:
                statements.append(item)
        return Program(
            annotations=tuple(annotations),
            statements=tuple(statements),
            source_file=self.current_file,
        )

    def annotation(self, meta, target: Token, name: Token, argument: Token) -> Annotation:
        return Annotation(
            target=str(target),
            name=str(name),
            argument=ast.literal_eval(str(argument)),
            location=self._extract_location(meta),
        )

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def val_decl(self, meta, name: Token, value: Expression) -> ValDeclaration:
        return ValDeclaration(name=str(name), value=value, location=self._extract_location(meta))

    def print_stmt(self, meta, value: Expression) -> PrintStatement:
        return PrintStatement(value=value, location=self._extract_location(meta))

    def expr_stmt(self, meta, value: Expression) -> ExpressionStatement:
        return ExpressionStatement(value=value, location=self._extract_location(meta))

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _binary(self, op: str, meta, left: Expression, right: Expression) -> BinaryOp:
        return BinaryOp(op=op, left=left, right=right, location=self._extract_location(meta))

    def add(self, meta, left, right):
        return self._binary("+", meta, left, right)

    def sub(self, meta, left, right):
        return self._binary("-", meta, left, right)

    def mul(self, meta, left, right):
        return self._binary("*", meta, left, right)

    def div(self, meta, left, right):
        return self._binary("/", meta, left, right)

    def mod(self, meta, left, right):
        return self._binary("%", meta, left, right)

    def eq(self, meta, left, right):
        return self._binary("==", meta, left, right)

    def ne(self, meta, left, right):
        return self._binary("!=", meta, left, right)

    def lt(self, meta, left, right):
        return self._binary("<", meta, left, right)

    def le(self, meta, left, right):
        return self._binary("<=", meta, left, right)

    def gt(self, meta, left, right):
        return self._binary(">", meta, left, right)

    def ge(self, meta, left, right):
        return self._binary(">=", meta, left, right)

    def negate(self, meta, operand: Expression) -> Negate:
        return Negate(operand=operand, location=self._extract_location(meta))

    def number(self, meta, token: Token) -> Literal:
        text = str(token)
        if "." in text or "e" in text.lower():
            value: Union[int, float] = float(text)
        else:
            value = int(text)
        return Literal(value=value, location=self._token_location(token))

    def string(self, meta, token: Token) -> Literal:
        return Literal(value=ast.literal_eval(str(token)), location=self._token_location(token))

    def true(self, meta) -> Literal:
        return Literal(value=True, location=self._extract_location(meta))

    def false(self, meta) -> Literal:
        return Literal(value=False, location=self._extract_location(meta))

    def member(self, meta, owner: Token, member: Token) -> Member:
        return Member(owner=str(owner), member=str(member), location=self._extract_location(meta))

    def name(self, meta, token: Token) -> Name:
        return Name(name=str(token), location=self._token_location(token))
