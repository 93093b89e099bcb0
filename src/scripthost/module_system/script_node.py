"""
Script Graph Types

Pure data structures shared by the resolver and the compilation request
builder. Nodes reference their imports by path key into the owning graph, so
cyclic declarations never produce cyclic object ownership.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .directives import ImportDirective
from ..shared.errors import NameCollisionError


@dataclass(frozen=True)
class ScriptNode:
    """
    One resolved script file.

    - path: normalized absolute path (graph key)
    - name: symbol name derived from path
    - source: script text as read during resolution
    - directives: declared imports in declaration order
    - resolved_imports: paths of the imports that exist, declaration order, no duplicates
    """
    path: Path
    name: str
    source: str
    directives: Tuple[ImportDirective, ...] = ()
    resolved_imports: Tuple[Path, ...] = ()

    def __str__(self) -> str:
        return f"Script({self.name}, {len(self.resolved_imports)} imports)"

    def __repr__(self) -> str:
        return (f"ScriptNode(name={self.name!r}, path={self.path}, "
                f"imports={[str(p) for p in self.resolved_imports]})")


class ResolutionGraph:
    """
    All scripts reachable from one root, keyed by normalized path.

    Also the visited set of the resolver. Each symbol name belongs to exactly
    one path; adding a second path under the same name raises
    NameCollisionError. Frozen once resolution completes.
    """

    def __init__(self, root: Path):
        self.root = root
        self._nodes: Dict[Path, ScriptNode] = {}
        self._names: Dict[str, Path] = {}
        self._frozen = False

    def add(self, node: ScriptNode) -> None:
        self._check_mutable()
        existing = self._names.get(node.name)
        if existing is not None and existing != node.path:
            raise NameCollisionError(node.name, existing, node.path)
        if node.path in self._nodes:
            raise ValueError(f"Script already in graph: {node.path}")
        self._nodes[node.path] = node
        self._names[node.name] = node.path

    def update(self, node: ScriptNode) -> None:
        """Replace an existing node (same path and name), e.g. once its imports are attached."""
        self._check_mutable()
        current = self._nodes[node.path]
        if current.name != node.name:
            raise ValueError(f"Cannot rename {node.path} from {current.name} to {node.name}")
        self._nodes[node.path] = node

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError("Resolution graph is frozen")

    def __contains__(self, path: Path) -> bool:
        return path in self._nodes

    def __getitem__(self, path: Path) -> ScriptNode:
        return self._nodes[path]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[ScriptNode]:
        return iter(self._nodes.values())

    def get(self, path: Path) -> Optional[ScriptNode]:
        return self._nodes.get(path)

    def by_name(self, name: str) -> Optional[ScriptNode]:
        path = self._names.get(name)
        return self.get(path) if path is not None else None

    @property
    def root_node(self) -> ScriptNode:
        return self._nodes[self.root]

    def imports_of(self, node: ScriptNode) -> List[ScriptNode]:
        return [self._nodes[path] for path in node.resolved_imports]

    def names(self) -> Dict[Path, str]:
        return {path: node.name for path, node in self._nodes.items()}

    def __repr__(self) -> str:
        return f"ResolutionGraph(root={self.root}, nodes={list(self._names)})"
