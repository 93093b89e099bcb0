"""
scripthost: evaluates script files that import other script files by relative path.
"""

from .compiler.driver import EvaluationDriver
from .compiler.request import CompilationRequest, CompilationRequestBuilder, ScriptSource
from .module_system import ImportGraphResolver, PathNamer, ResolutionGraph, ScriptNode
from .runtime import EvaluationResult, InterpreterEngine, ScriptEngine
from .utils.config import HostConfig

__version__ = "0.1.0"

__all__ = [
    "EvaluationDriver",
    "CompilationRequest",
    "CompilationRequestBuilder",
    "ScriptSource",
    "ImportGraphResolver",
    "PathNamer",
    "ResolutionGraph",
    "ScriptNode",
    "EvaluationResult",
    "InterpreterEngine",
    "ScriptEngine",
    "HostConfig",
]
