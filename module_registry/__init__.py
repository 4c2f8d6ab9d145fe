"""
Module Registry System

This package tracks the application's functional modules: registration with
dependency validation, feature-flag gated activation, cascade-safe
enable/disable, lifecycle events, health checks and statistics.
"""

from .errors import (
    CircularDependencyError,
    DependencyNotFoundError,
    DuplicateModuleError,
    ModuleRegistryError,
    ValidationError,
)
from .events import ModuleEvent, RegistryEvent
from .module_definition import (
    HealthStatus,
    ModuleConfig,
    ModuleEntry,
    ModuleHealth,
    ModuleMetrics,
    ModuleStatus,
)
from .module_registry import ModuleRegistry
from .statistics import RegistryStatistics

__all__ = [
    'ModuleRegistry',
    'ModuleConfig',
    'ModuleEntry',
    'ModuleStatus',
    'ModuleMetrics',
    'ModuleHealth',
    'HealthStatus',
    'ModuleEvent',
    'RegistryEvent',
    'RegistryStatistics',
    'ModuleRegistryError',
    'ValidationError',
    'DuplicateModuleError',
    'DependencyNotFoundError',
    'CircularDependencyError',
]
