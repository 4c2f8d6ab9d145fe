"""
Module Registry Errors

Exceptions raised by ModuleRegistry.register(). Dependency and cycle failures
are also recorded on the error-status entry they create, so they can be
inspected later through get_module().
"""

from typing import Optional


class ModuleRegistryError(Exception):
    """Base class for module registry failures."""

    def __init__(self, message: str, module_name: Optional[str] = None):
        super().__init__(message)
        self.module_name = module_name


class ValidationError(ModuleRegistryError):
    """A module configuration field is missing or has the wrong type."""

    def __init__(self, field: str, message: str, module_name: Optional[str] = None):
        super().__init__(message, module_name)
        self.field = field


class DuplicateModuleError(ModuleRegistryError):
    """A module with the same name is already registered."""

    def __init__(self, module_name: str):
        super().__init__(f"Module {module_name} is already registered", module_name)


class DependencyNotFoundError(ModuleRegistryError):
    """A declared dependency is not registered (or failed its own registration)."""

    def __init__(self, module_name: str, dependency: str):
        super().__init__(f"Dependency {dependency} not found for module {module_name}", module_name)
        self.dependency = dependency


class CircularDependencyError(ModuleRegistryError):
    """Registering the module would close a cycle in the dependency graph."""

    def __init__(self, module_name: str, cycle: Optional[list] = None):
        super().__init__(f"Circular dependency detected for module {module_name}", module_name)
        self.cycle = cycle or []
