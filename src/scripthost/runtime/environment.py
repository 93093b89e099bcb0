"""
Execution Environment

One namespace per compilation unit, keyed by the unit's symbol name. A bare
name is looked up in the unit's own namespace first, then in the namespaces
of its direct imports in declaration order. Symbol.member reads any unit that
has already been evaluated.
"""

from typing import Any, Dict, Mapping, Optional, Tuple

from ..shared.errors import ScriptRuntimeError
from ..shared.source_location import SourceLocation


class ScriptEnvironment:
    """
    Namespaces of the units of one evaluation request.
    - enter_unit(name): create the unit's namespace
    - set_value(unit, name, value): bind in the unit's namespace
    - lookup(unit, name): local, then direct imports
    - member(owner, name): qualified read of another unit
    """

    def __init__(self, dependencies: Mapping[str, Tuple[str, ...]]):
        self.dependencies = dependencies
        self.namespaces: Dict[str, Dict[str, Any]] = {}

    def enter_unit(self, unit: str) -> Dict[str, Any]:
        if unit in self.namespaces:
            raise RuntimeError(f"Unit evaluated twice: {unit}")
        namespace: Dict[str, Any] = {}
        self.namespaces[unit] = namespace
        return namespace

    def set_value(self, unit: str, name: str, value: Any) -> bool:
        """Bind name in unit; returns True if an existing binding was replaced."""
        namespace = self.namespaces[unit]
        rebound = name in namespace
        namespace[name] = value
        return rebound

    def lookup(self, unit: str, name: str, location: Optional[SourceLocation] = None) -> Any:
        namespace = self.namespaces[unit]
        if name in namespace:
            return namespace[name]
        for dependency in self.dependencies.get(unit, ()):
            imported = self.namespaces.get(dependency)
            if imported is not None and name in imported:
                return imported[name]
        raise ScriptRuntimeError(f"Unresolved reference: {name}", location)

    def member(self, owner: str, name: str, location: Optional[SourceLocation] = None) -> Any:
        namespace = self.namespaces.get(owner)
        if namespace is None:
            if owner in self.dependencies:
                # Known unit that has not run yet: only possible through an import cycle
                raise ScriptRuntimeError(f"Script '{owner}' is not initialized yet", location)
            raise ScriptRuntimeError(f"Unresolved reference: {owner}", location)
        if name not in namespace:
            raise ScriptRuntimeError(f"Unresolved reference: {owner}.{name}", location)
        return namespace[name]
