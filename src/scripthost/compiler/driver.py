"""
Evaluation Driver

Orchestrates one evaluation request:
1. Resolution (root path → ResolutionGraph)
2. Request building (graph → CompilationRequest)
3. Engine invocation (exactly once, never retried)
4. Diagnostic relay
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO, Union

from .request import CompilationRequest, CompilationRequestBuilder
from ..module_system.directives import ImportDirectiveExtractor
from ..module_system.import_resolver import ImportGraphResolver
from ..runtime.engine import EvaluationResult, InterpreterEngine, ScriptEngine
from ..shared.errors import (
    DiagnosticReporter,
    EngineDiagnosticError,
    ResolutionError,
    Severity,
)
from ..utils.config import HostConfig

logger = logging.getLogger(__name__)


class EvaluationDriver:
    """
    Evaluates a root script with its imports.

    Args:
        config: naming and resolution settings (defaults if None)
        engine: evaluation engine (InterpreterEngine if None)
        extractor: import directive source (header annotations if None)
        stream: where failure reports are written (sys.stdout if None)
    """

    def __init__(
        self,
        config: Optional[HostConfig] = None,
        engine: Optional[ScriptEngine] = None,
        extractor: Optional[ImportDirectiveExtractor] = None,
        stream: Optional[TextIO] = None,
    ):
        self.config = config if config is not None else HostConfig()
        self.resolver = ImportGraphResolver.from_config(self.config, extractor)
        self.builder = CompilationRequestBuilder()
        self.engine = engine if engine is not None else InterpreterEngine()
        self.stream = stream

    def compile(self, root_path: Union[Path, str]) -> CompilationRequest:
        """
        Resolve the import graph and flatten it into an engine request.

        Raises:
            ResolutionError: naming or graph failure; no request is built
        """
        graph = self.resolver.resolve(root_path)
        request = self.builder.build(graph)
        logger.debug(f"Request for {request.root.name}: imports {request.import_names()}")
        return request

    def evaluate(self, root_path: Union[Path, str]) -> EvaluationResult:
        """Compile and invoke the engine once. Engine failures are in the result."""
        request = self.compile(root_path)
        return self.engine.evaluate(request)

    def evaluate_or_raise(self, root_path: Union[Path, str]) -> EvaluationResult:
        """
        Like evaluate(), but a failed evaluation raises.

        Raises:
            EngineDiagnosticError: carrying every diagnostic, in engine order
        """
        result = self.evaluate(root_path)
        if not result.success:
            raise EngineDiagnosticError(result.diagnostics)
        return result

    def run(self, root_path: Union[Path, str]) -> int:
        """
        Evaluate and report; returns the process exit code.

        Prints nothing on success. On failure prints the failure header and
        one ' - [<severity>] <message>' line per diagnostic, returns 1.
        """
        reporter = DiagnosticReporter(self.stream if self.stream is not None else sys.stdout)
        try:
            result = self.evaluate_or_raise(root_path)
        except ResolutionError as e:
            reporter.report(Severity.FATAL, e.message, e.location)
        except EngineDiagnosticError as e:
            reporter.extend(e.diagnostics)
        except (OSError, UnicodeDecodeError) as e:
            reporter.report(Severity.FATAL, f"Cannot read script: {e}")
        except Exception as e:
            logger.exception(f"Engine {type(self.engine).__name__} failed")
            reporter.report(Severity.FATAL, f"Script engine failed: {type(e).__name__}: {e}")
        else:
            for diagnostic in result.diagnostics:
                logger.debug(f"{diagnostic.severity}: {diagnostic.message}")
            return 0

        reporter.print_failures()
        return 1
