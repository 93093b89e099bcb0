"""
Import Graph Resolution

Builds the resolution graph of a root script: every script reachable through
declared imports, each with its symbol name and its resolved import edges.

Resolution is depth-first and memoized by normalized path. A script enters
the graph before its imports are processed, and the visited check happens
before descending into an import, so mutually importing scripts terminate.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Union

from .directives import AnnotationDirectiveExtractor, ImportDirective, ImportDirectiveExtractor
from .path_namer import PathNamer
from .script_node import ResolutionGraph, ScriptNode
from ..shared.errors import UnresolvedImportError
from ..utils.config import DEFAULT_FILE_ENCODING, HostConfig
from ..utils.io_utils import is_script_file, normalize_path, read_source_file

logger = logging.getLogger(__name__)


class ImportGraphResolver:
    """
    Resolves the import graph of a root script.

    Args:
        namer: PathNamer deriving symbol names (default configuration if None)
        extractor: source of import directives (header annotations if None)
        strict_imports: raise UnresolvedImportError for a missing import
            instead of skipping it
        encoding: encoding used to read script files

    A fresh graph is built per resolve() call; the resolver keeps no state
    between calls and can be reused.
    """

    def __init__(
        self,
        namer: Optional[PathNamer] = None,
        extractor: Optional[ImportDirectiveExtractor] = None,
        strict_imports: bool = False,
        encoding: str = DEFAULT_FILE_ENCODING,
    ):
        self.namer = namer if namer is not None else PathNamer()
        self.extractor = extractor if extractor is not None else AnnotationDirectiveExtractor()
        self.strict_imports = strict_imports
        self.encoding = encoding

    @classmethod
    def from_config(
        cls,
        config: HostConfig,
        extractor: Optional[ImportDirectiveExtractor] = None,
    ) -> "ImportGraphResolver":
        return cls(
            namer=PathNamer.from_config(config),
            extractor=extractor,
            strict_imports=config.strict_imports,
            encoding=config.encoding,
        )

    def resolve(self, root_path: Union[Path, str]) -> ResolutionGraph:
        """
        Resolve every script reachable from root_path.

        Returns:
            Frozen ResolutionGraph whose root is the normalized root_path

        Raises:
            InvalidLocationError: a script is not under the root marker
            NameCollisionError: two distinct scripts derive the same name
            UnresolvedImportError: the root does not exist, or an import is
                missing while strict_imports is set
        """
        root = normalize_path(root_path)
        # Naming comes first: a misplaced root fails before any file is read
        root_name = self.namer.name(root)
        if not is_script_file(root):
            raise UnresolvedImportError(str(root_path), root)

        graph = ResolutionGraph(root)
        self._resolve_script(graph, root, root_name)
        graph.freeze()
        logger.debug(f"Resolved {root_name}: {len(graph)} script(s)")
        return graph

    def _resolve_script(self, graph: ResolutionGraph, path: Path, name: str) -> None:
        source = read_source_file(path, self.encoding)
        directives = tuple(self.extractor.extract(path, source))

        # Enter the graph before descending so cycles find this node
        graph.add(ScriptNode(path=path, name=name, source=source, directives=directives))
        logger.debug(f"Loaded script {name} ({path}): {len(directives)} directive(s)")

        resolved: List[Path] = []
        for directive in directives:
            target = self._locate(path, directive)
            if target is None:
                continue
            if target not in graph:
                self._resolve_script(graph, target, self.namer.name(target))
            if target not in resolved:
                resolved.append(target)

        graph.update(replace(graph[path], resolved_imports=tuple(resolved)))

    def _locate(self, declaring_path: Path, directive: ImportDirective) -> Optional[Path]:
        """Join a directive with the declaring script's folder; None if it is not a file."""
        target = normalize_path(declaring_path.parent / directive.path)
        if is_script_file(target):
            return target

        if self.strict_imports:
            raise UnresolvedImportError(directive.path, target, declaring_path, directive.location)
        logger.warning(f"Skipping import '{directive.path}' of {declaring_path}: {target} does not exist")
        return None
