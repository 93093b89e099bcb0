"""Default evaluation engine for the script language."""

from .engine import ScriptEngine, InterpreterEngine, EvaluationResult
from .environment import ScriptEnvironment

__all__ = ["ScriptEngine", "InterpreterEngine", "EvaluationResult", "ScriptEnvironment"]
