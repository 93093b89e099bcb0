"""
Import Directive Extraction

A script declares its imports as file annotations in its header:

    @file:Import("../lib/util.custom.kts")
    @file:Import("helpers.custom.kts")

Extraction is pluggable: the resolver only needs an ordered list of raw
relative path strings per script. Order is preserved and duplicates are kept;
de-duplication happens in the graph, keyed by resolved path.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..frontend.parser import Parser, parse_file_source
from ..shared.errors import ParseError
from ..shared.source_location import SourceLocation
from ..utils.config import FILE_ANNOTATION_TARGET, IMPORT_ANNOTATION
from ..utils.io_utils import normalize_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportDirective:
    """A relative import path exactly as declared by one script."""
    path: str
    location: Optional[SourceLocation] = None

    def __str__(self) -> str:
        return f'@{FILE_ANNOTATION_TARGET}:{IMPORT_ANNOTATION}("{self.path}")'


def collect_import_directives(raw_paths: Iterable[str]) -> List[ImportDirective]:
    """Wrap raw path strings as directives, keeping order and duplicates."""
    return [ImportDirective(path=raw) for raw in raw_paths]


class ImportDirectiveExtractor(ABC):
    """Produces the declared imports of one script."""

    @abstractmethod
    def extract(self, path: Path, source: str) -> List[ImportDirective]:
        """
        Args:
            path: normalized path of the declaring script
            source: its source text

        Returns:
            Declared imports in declaration order, duplicates retained
        """
        raise NotImplementedError


class AnnotationDirectiveExtractor(ImportDirectiveExtractor):
    """
    Reads @file:Import("...") annotations from the script header.

    Annotations after the first statement are not imports. A script that does
    not parse declares no imports here; the engine reports its parse error.
    """

    def __init__(self, parser: Optional[Parser] = None):
        self.parser = parser

    def extract(self, path: Path, source: str) -> List[ImportDirective]:
        try:
            program = parse_file_source(source, str(path), self.parser)
        except ParseError as e:
            logger.debug(f"No import directives read from {path}: {e}")
            return []

        directives = [
            ImportDirective(path=annotation.argument, location=annotation.location)
            for annotation in program.header_annotations()
            if annotation.target == FILE_ANNOTATION_TARGET and annotation.name == IMPORT_ANNOTATION
        ]
        logger.debug(f"{path}: {len(directives)} import directive(s)")
        return directives


class StaticDirectiveExtractor(ImportDirectiveExtractor):
    """Directives supplied up front, keyed by script path."""

    def __init__(self, directives: Mapping[Union[Path, str], Sequence[str]]):
        self.directives: Dict[Path, Sequence[str]] = {
            normalize_path(path): raw for path, raw in directives.items()
        }

    def extract(self, path: Path, source: str) -> List[ImportDirective]:
        return collect_import_directives(self.directives.get(normalize_path(path), ()))
