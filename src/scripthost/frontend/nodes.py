"""
Script AST

Immutable nodes produced by the parser. Frozen so parse results can be cached
and shared between the directive extractor and the engine.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from ..shared.source_location import SourceLocation


@dataclass(frozen=True)
class Annotation:
    """
    File annotation such as @file:Import("lib/util.custom.kts").

    in_header is False when the annotation appears after the first statement.
    """
    target: str
    name: str
    argument: str
    location: SourceLocation
    in_header: bool = True


@dataclass(frozen=True)
class Literal:
    value: Union[int, float, str, bool]
    location: SourceLocation


@dataclass(frozen=True)
class Name:
    name: str
    location: SourceLocation


@dataclass(frozen=True)
class Member:
    """Qualified read of another unit's binding: Symbol.member"""
    owner: str
    member: str
    location: SourceLocation


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: "Expression"
    right: "Expression"
    location: SourceLocation


@dataclass(frozen=True)
class Negate:
    operand: "Expression"
    location: SourceLocation


Expression = Union[Literal, Name, Member, BinaryOp, Negate]


@dataclass(frozen=True)
class ValDeclaration:
    name: str
    value: Expression
    location: SourceLocation


@dataclass(frozen=True)
class PrintStatement:
    value: Expression
    location: SourceLocation


@dataclass(frozen=True)
class ExpressionStatement:
    value: Expression
    location: SourceLocation


Statement = Union[ValDeclaration, PrintStatement, ExpressionStatement]


@dataclass(frozen=True)
class Program:
    annotations: Tuple[Annotation, ...]
    statements: Tuple[Statement, ...]
    source_file: str = "<script>"

    def header_annotations(self) -> Tuple[Annotation, ...]:
        return tuple(a for a in self.annotations if a.in_header)
