"""
Compilation Request

Flattens a resolution graph into what the engine consumes: the root script,
its imports in dependency order, and every unit tagged with its path and
symbol name so the engine never re-derives names.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Set, Tuple

from ..module_system.script_node import ResolutionGraph, ScriptNode


@dataclass(frozen=True)
class ScriptSource:
    """One compilation unit with its designated identity."""
    path: Path
    name: str
    text: str

    @classmethod
    def from_node(cls, node: ScriptNode) -> "ScriptSource":
        return cls(path=node.path, name=node.name, text=node.source)

    def __repr__(self) -> str:
        return f"ScriptSource(name={self.name!r}, path={self.path})"


@dataclass(frozen=True)
class CompilationRequest:
    """
    Engine configuration for one evaluation request.

    - root: the script being evaluated
    - imports: every other reachable script, each before the scripts importing it
    - dependencies: unit name → names of its direct imports, declaration order
    """
    root: ScriptSource
    imports: Tuple[ScriptSource, ...]
    dependencies: Mapping[str, Tuple[str, ...]]

    def units(self) -> Tuple[ScriptSource, ...]:
        """All units in evaluation order (root last)."""
        return self.imports + (self.root,)

    def import_names(self) -> List[str]:
        return [source.name for source in self.imports]


class CompilationRequestBuilder:
    """Builds a CompilationRequest from a frozen ResolutionGraph. Side-effect free."""

    def build(self, graph: ResolutionGraph) -> CompilationRequest:
        if not graph.frozen:
            raise ValueError("Compilation requests are built from a completed resolution")

        ordered = self._dependency_order(graph)
        sources = [ScriptSource.from_node(node) for node in ordered]
        dependencies: Dict[str, Tuple[str, ...]] = {
            node.name: tuple(dep.name for dep in graph.imports_of(node))
            for node in ordered
        }
        # Post-order ends with the root
        return CompilationRequest(
            root=sources[-1],
            imports=tuple(sources[:-1]),
            dependencies=dependencies,
        )

    def _dependency_order(self, graph: ResolutionGraph) -> List[ScriptNode]:
        """Post-order from the root: imports before importers, cycles cut at revisits."""
        ordered: List[ScriptNode] = []
        visited: Set[Path] = set()

        def visit(node: ScriptNode) -> None:
            if node.path in visited:
                return
            visited.add(node.path)
            for dependency in graph.imports_of(node):
                visit(dependency)
            ordered.append(node)

        visit(graph.root_node)
        return ordered
