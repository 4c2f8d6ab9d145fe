"""
Dependency Graph

Forward (dependencies) and reverse (dependents) edge indices over the
registered modules, plus cycle detection and dependency ordering.
"""

import logging
from typing import Dict, Iterable, List, Optional

from .errors import CircularDependencyError

logger = logging.getLogger(__name__)


class DependencyGraph:
    """
    Directed graph of module dependencies.

    The dependents index is kept as the exact transpose of the dependencies
    index: both are updated together in :meth:`add_module`.
    """

    def __init__(self):
        self._dependencies: Dict[str, List[str]] = {}
        self._dependents: Dict[str, List[str]] = {}

    def __contains__(self, module_name: str) -> bool:
        return module_name in self._dependencies

    def __len__(self) -> int:
        return len(self._dependencies)

    def add_module(self, module_name: str, dependencies: Iterable[str]) -> None:
        """
        Add a module and its outgoing edges.

        Raises:
            ValueError: If the module is already part of the graph
        """
        if module_name in self._dependencies:
            raise ValueError(f"Module '{module_name}' is already in the dependency graph")

        deps = []
        for dep in dependencies:
            if dep not in deps:
                deps.append(dep)

        self._dependencies[module_name] = deps
        for dep in deps:
            self._dependents.setdefault(dep, []).append(module_name)

    def get_dependencies(self, module_name: str) -> List[str]:
        """Get the dependencies of a module (empty if unknown)."""
        return list(self._dependencies.get(module_name, []))

    def get_dependents(self, module_name: str) -> List[str]:
        """Get modules that depend on the given module (empty if unknown)."""
        return list(self._dependents.get(module_name, []))

    def find_cycle(self, module_name: str, dependencies: Optional[Iterable[str]] = None) -> Optional[List[str]]:
        """
        Look for a cycle reachable from ``module_name``.

        Args:
            module_name: Node to start the depth-first traversal from
            dependencies: Outgoing edges to use for ``module_name`` instead of
                the stored ones (the module being registered is not in the
                graph yet)

        Returns:
            The cycle as a list of names ending where it started, or None
        """
        start_edges = list(dependencies) if dependencies is not None else None
        visited = set()
        visiting: List[str] = []

        def edges(name: str) -> List[str]:
            if name == module_name and start_edges is not None:
                return start_edges
            return self._dependencies.get(name, [])

        def visit(name: str) -> Optional[List[str]]:
            if name in visiting:
                return visiting[visiting.index(name):] + [name]
            if name in visited:
                return None

            visiting.append(name)
            for dep in edges(name):
                cycle = visit(dep)
                if cycle:
                    return cycle
            visiting.pop()
            visited.add(name)
            return None

        return visit(module_name)

    def resolve_order(self, module_names: Optional[List[str]] = None) -> List[str]:
        """
        Order modules so that every module comes after its dependencies.

        Args:
            module_names: Modules to order; defaults to every module in the
                graph. Dependencies outside this list are ignored.

        Returns:
            Module names in dependency order; ties keep the input order

        Raises:
            CircularDependencyError: If the modules contain a cycle
        """
        if module_names is None:
            module_names = list(self._dependencies)
        wanted = set(module_names)

        visited = set()
        temp_visited = set()
        result = []

        def visit(name: str):
            if name in temp_visited:
                raise CircularDependencyError(name)
            if name in visited:
                return

            temp_visited.add(name)
            for dep in self._dependencies.get(name, []):
                if dep in wanted:
                    visit(dep)
            temp_visited.remove(name)
            visited.add(name)
            result.append(name)

        for name in module_names:
            if name not in visited:
                visit(name)

        return result

    def clear(self) -> None:
        self._dependencies.clear()
        self._dependents.clear()
