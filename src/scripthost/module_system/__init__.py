"""Module system: script naming, import directives, import graph resolution."""

from .path_namer import PathNamer, script_symbol_name, split_name_tokens
from .directives import (
    ImportDirective,
    ImportDirectiveExtractor,
    AnnotationDirectiveExtractor,
    StaticDirectiveExtractor,
    collect_import_directives,
)
from .script_node import ScriptNode, ResolutionGraph
from .import_resolver import ImportGraphResolver

__all__ = [
    'PathNamer',
    'script_symbol_name',
    'split_name_tokens',
    'ImportDirective',
    'ImportDirectiveExtractor',
    'AnnotationDirectiveExtractor',
    'StaticDirectiveExtractor',
    'collect_import_directives',
    'ScriptNode',
    'ResolutionGraph',
    'ImportGraphResolver',
]
