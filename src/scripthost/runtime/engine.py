"""
Evaluation Engine

The engine receives a CompilationRequest and evaluates its units in order,
imports first and root last. It never raises for problems in user scripts:
everything is reported as diagnostics in the order they occur.

Phases:
1. Unit identity check (one path per symbol name)
2. Parsing of every unit (all parse errors reported)
3. Annotation checks (warnings only)
4. Evaluation, stopping at the first runtime error
"""

import logging
import math
import sys
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, TextIO

from .environment import ScriptEnvironment
from ..compiler.request import CompilationRequest, ScriptSource
from ..frontend.nodes import (
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
from ..frontend.parser import Parser, parse_file_source
from ..shared.errors import (
    Diagnostic,
    DiagnosticReporter,
    ParseError,
    ScriptRuntimeError,
    Severity,
    has_failures,
)
from ..shared.source_location import SourceLocation
from ..utils.config import FILE_ANNOTATION_TARGET, IMPORT_ANNOTATION

logger = logging.getLogger(__name__)


class EvaluationResult:
    """
    Result of one engine invocation.

    - diagnostics: every report, in production order
    - namespaces: unit name → bindings, for the units that ran
    - output: lines written by println
    - value: value of the root script's last statement when it is an expression
    """
    def __init__(
        self,
        diagnostics: Optional[List[Diagnostic]] = None,
        namespaces: Optional[Dict[str, Dict[str, Any]]] = None,
        output: Optional[List[str]] = None,
        value: Optional[Any] = None,
    ):
        self.diagnostics = diagnostics if diagnostics is not None else []
        self.namespaces = namespaces if namespaces is not None else {}
        self.output = output if output is not None else []
        self.value = value

    @property
    def success(self) -> bool:
        """Whether evaluation succeeded (no ERROR or FATAL diagnostic)"""
        return not has_failures(self.diagnostics)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity.is_failure]

    def __repr__(self) -> str:
        return (f"EvaluationResult(success={self.success}, "
                f"diagnostics={len(self.diagnostics)}, units={list(self.namespaces)})")


class ScriptEngine(ABC):
    """
    Engine interface: compiles and evaluates one request.

    Implementations report problems in user scripts as diagnostics and
    do not raise for them.
    """

    @abstractmethod
    def evaluate(self, request: CompilationRequest) -> EvaluationResult:
        raise NotImplementedError


def format_value(value: Any) -> str:
    """Render a script value the way println prints it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _render(value: Any, location: SourceLocation) -> str:
    try:
        return format_value(value)
    except ValueError as e:
        # int → str conversion is capped by sys.set_int_max_str_digits
        raise ScriptRuntimeError(f"Cannot render value: {e}", location) from e


_ARITHMETIC_OPERATORS = ("+", "-", "*", "/", "%")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _type_name(value: Any) -> str:
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, int):
        return "Int"
    if isinstance(value, float):
        return "Double"
    if isinstance(value, str):
        return "String"
    return type(value).__name__


class InterpreterEngine(ScriptEngine):
    """
    Tree-walking interpreter for the script language.

    Args:
        parser: Parser instance (shared cached parser if None)
        stream: where println writes (sys.stdout at evaluation time if None)
    """

    def __init__(self, parser: Optional[Parser] = None, stream: Optional[TextIO] = None):
        self.parser = parser
        self.stream = stream

    def evaluate(self, request: CompilationRequest) -> EvaluationResult:
        reporter = DiagnosticReporter()
        units = request.units()

        self._check_unit_names(units, reporter)
        if reporter.has_errors():
            return EvaluationResult(reporter.diagnostics)

        programs = self._parse_units(units, reporter)
        if reporter.has_errors():
            return EvaluationResult(reporter.diagnostics)

        for unit in units:
            self._check_annotations(programs[unit.name], reporter)

        environment = ScriptEnvironment(request.dependencies)
        output: List[str] = []
        value: Any = None
        for unit in units:
            try:
                value = self._run_unit(unit, programs[unit.name], environment, output, reporter)
            except ScriptRuntimeError as e:
                reporter.report(Severity.ERROR, f"{unit.name}: {e.message}", e.location)
                break

        logger.debug(f"Evaluated {len(environment.namespaces)} of {len(units)} unit(s)")
        return EvaluationResult(
            diagnostics=reporter.diagnostics,
            namespaces=environment.namespaces,
            output=output,
            value=value,
        )

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _check_unit_names(self, units, reporter: DiagnosticReporter) -> None:
        seen: Dict[str, ScriptSource] = {}
        for unit in units:
            other = seen.get(unit.name)
            if other is not None and other.path != unit.path:
                reporter.report(
                    Severity.FATAL,
                    f"Duplicate compilation unit '{unit.name}': {other.path} and {unit.path}",
                )
            seen.setdefault(unit.name, unit)

    def _parse_units(self, units, reporter: DiagnosticReporter) -> Dict[str, Program]:
        programs: Dict[str, Program] = {}
        for unit in units:
            try:
                programs[unit.name] = parse_file_source(unit.text, str(unit.path), self.parser)
            except ParseError as e:
                reporter.report(Severity.ERROR, e.message, e.location)
        return programs

    def _check_annotations(self, program: Program, reporter: DiagnosticReporter) -> None:
        for annotation in program.annotations:
            label = f"@{annotation.target}:{annotation.name}"
            if annotation.target != FILE_ANNOTATION_TARGET or annotation.name != IMPORT_ANNOTATION:
                reporter.report(Severity.WARNING, f"Unknown annotation {label} is ignored", annotation.location)
            elif not annotation.in_header:
                reporter.report(
                    Severity.WARNING,
                    f"{label} after the first statement is ignored",
                    annotation.location,
                )

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _run_unit(
        self,
        unit: ScriptSource,
        program: Program,
        environment: ScriptEnvironment,
        output: List[str],
        reporter: DiagnosticReporter,
    ) -> Any:
        environment.enter_unit(unit.name)
        logger.debug(f"Running {unit.name} ({unit.path})")
        value: Any = None
        for statement in program.statements:
            value = self._execute(unit.name, statement, environment, output, reporter)
        return value

    def _execute(
        self,
        unit: str,
        statement: Statement,
        environment: ScriptEnvironment,
        output: List[str],
        reporter: DiagnosticReporter,
    ) -> Any:
        if isinstance(statement, ValDeclaration):
            value = self._eval(unit, statement.value, environment)
            if environment.set_value(unit, statement.name, value):
                reporter.report(
                    Severity.WARNING,
                    f"{unit}: '{statement.name}' is already defined, the new value replaces it",
                    statement.location,
                )
            return None
        if isinstance(statement, PrintStatement):
            line = _render(self._eval(unit, statement.value, environment), statement.location)
            output.append(line)
            print(line, file=self.stream if self.stream is not None else sys.stdout)
            return None
        if isinstance(statement, ExpressionStatement):
            return self._eval(unit, statement.value, environment)
        raise TypeError(f"Unknown statement: {type(statement).__name__}")

    def _eval(self, unit: str, expr: Expression, environment: ScriptEnvironment) -> Any:
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Name):
            return environment.lookup(unit, expr.name, expr.location)
        if isinstance(expr, Member):
            return environment.member(expr.owner, expr.member, expr.location)
        if isinstance(expr, Negate):
            operand = self._eval(unit, expr.operand, environment)
            if not _is_number(operand):
                raise ScriptRuntimeError(f"Unary minus is not defined for {_type_name(operand)}", expr.location)
            return -operand
        if isinstance(expr, BinaryOp):
            left = self._eval(unit, expr.left, environment)
            right = self._eval(unit, expr.right, environment)
            return _apply_binary(expr.op, left, right, expr.location)
        raise TypeError(f"Unknown expression: {type(expr).__name__}")


def _apply_binary(op: str, left: Any, right: Any, location: SourceLocation) -> Any:
    if op in ("==", "!="):
        if _is_number(left) and _is_number(right):
            equal = left == right
        else:
            equal = type(left) is type(right) and left == right
        return equal if op == "==" else not equal

    if op == "+" and isinstance(left, str):
        return left + _render(right, location)

    if op in ("<", "<=", ">", ">="):
        comparable = (_is_number(left) and _is_number(right)) or (isinstance(left, str) and isinstance(right, str))
        if not comparable:
            raise ScriptRuntimeError(
                f"Operator '{op}' is not defined for {_type_name(left)} and {_type_name(right)}", location
            )
        if op == "<":
            return left < right
        if op == "<=":
            return left <= right
        if op == ">":
            return left > right
        return left >= right

    if not (_is_number(left) and _is_number(right)):
        raise ScriptRuntimeError(
            f"Operator '{op}' is not defined for {_type_name(left)} and {_type_name(right)}", location
        )
    if op not in _ARITHMETIC_OPERATORS:
        raise ScriptRuntimeError(f"Unknown operator '{op}'", location)
    if op in ("/", "%") and right == 0:
        raise ScriptRuntimeError("Division by zero", location)
    try:
        return _apply_arithmetic(op, left, right)
    except (ArithmeticError, ValueError) as e:
        raise ScriptRuntimeError(f"Arithmetic error in '{op}': {e}", location) from e


def _apply_arithmetic(op: str, left: Any, right: Any) -> Any:
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if op == "/":
        if isinstance(left, int) and isinstance(right, int):
            # Integer division truncates toward zero
            quotient = abs(left) // abs(right)
            return quotient if (left < 0) == (right < 0) else -quotient
        return left / right
    # '%' keeps the sign of the dividend
    if isinstance(left, int) and isinstance(right, int):
        remainder = abs(left) % abs(right)
        return remainder if left >= 0 else -remainder
    return math.fmod(left, right)
