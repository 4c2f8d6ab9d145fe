"""
Module Registry

Registers modules, validates their dependency graph, gates activation on
feature flags, and provides safe enable/disable, health checks and statistics.
"""

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from feature_flags.provider import FeatureFlagProvider, StaticFlagProvider

from .dependency_graph import DependencyGraph
from .errors import (
    CircularDependencyError,
    DependencyNotFoundError,
    DuplicateModuleError,
    ModuleRegistryError,
)
from .events import EventBus, EventListener, EventType, RegistryEvent
from .health import HealthMonitor
from .module_definition import (
    HealthStatus,
    ModuleConfig,
    ModuleEntry,
    ModuleHealth,
    ModuleMetrics,
    ModuleStatus,
)
from .statistics import RegistryStatistics, compute_statistics, estimate_memory_usage
from .validation import coerce_config, normalize_config, validate_module_config

logger = logging.getLogger(__name__)

REGISTRY_VERSION = "1.0.0"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ModuleRegistry:
    """
    Registry for application modules.

    One instance owns all module state. Every public method takes the
    registry's re-entrant lock, so registry calls made from event listeners
    are allowed.

    Args:
        feature_flags: Provider queried for required and optional features.
            Defaults to a provider that reports every flag as off.
        health_check_interval: Default period for :attr:`health_monitor`
    """

    def __init__(self,
                 feature_flags: Optional[FeatureFlagProvider] = None,
                 health_check_interval: float = 60.0):
        self.feature_flags: FeatureFlagProvider = feature_flags if feature_flags is not None else StaticFlagProvider()
        self._modules: Dict[str, ModuleEntry] = {}
        self._graph = DependencyGraph()
        self._events = EventBus()
        self._lock = threading.RLock()
        self.health_monitor = HealthMonitor(self, interval=health_check_interval)

        self._events.emit(RegistryEvent.REGISTRY_READY, data={'registry_version': REGISTRY_VERSION})

    # Registration

    def register(self, config: Union[ModuleConfig, Mapping[str, Any]]) -> None:
        """
        Register a new module.

        Args:
            config: A ModuleConfig or a mapping with the same keys

        Raises:
            ValidationError: If the configuration is malformed (nothing is stored)
            DuplicateModuleError: If the name is already registered
            DependencyNotFoundError: If a dependency is not registered
            CircularDependencyError: If the module would close a cycle

        Dependency and cycle failures still store an entry with ERROR status
        so the failure can be inspected through get_module().
        """
        start_time = time.perf_counter()
        config = coerce_config(config)
        validate_module_config(config)
        config = normalize_config(config)
        name = config.name

        with self._lock:
            if name in self._modules:
                raise DuplicateModuleError(name)

            try:
                for dep in config.dependencies:
                    entry = self._modules.get(dep)
                    if entry is None or entry.status == ModuleStatus.ERROR:
                        raise DependencyNotFoundError(name, dep)

                cycle = self._graph.find_cycle(name, config.dependencies)
                if cycle:
                    raise CircularDependencyError(name, cycle)
            except ModuleRegistryError as e:
                self._record_failure(config, e, start_time)
                raise

            for feature in config.required_features:
                if not self.feature_flags.is_enabled(feature):
                    if config.enabled:
                        logger.warning(f"Module {name} disabled: required feature {feature} is not enabled")
                    config.enabled = False
                    break

            loaded_at = _now()
            entry = ModuleEntry(
                config=config,
                status=ModuleStatus.LOADED,
                loaded_at=loaded_at,
                metrics=ModuleMetrics(
                    load_time=(time.perf_counter() - start_time) * 1000,
                    memory_usage=estimate_memory_usage(config),
                ),
                health=self._initial_health(config, loaded_at),
            )

            self._modules[name] = entry
            self._graph.add_module(name, config.dependencies)

            self._events.emit(RegistryEvent.MODULE_REGISTERED, name, config.snapshot())

        logger.info(f"Registered module: {name} v{config.version} ({entry.metrics.load_time:.2f}ms)")

    def _record_failure(self, config: ModuleConfig, error: ModuleRegistryError, start_time: float) -> None:
        """Store an ERROR entry for a registration that failed after validation."""
        logger.error(f"Failed to register module {config.name}: {error}")
        self._modules[config.name] = ModuleEntry(
            config=config,
            status=ModuleStatus.ERROR,
            loaded_at=_now(),
            metrics=ModuleMetrics(load_time=(time.perf_counter() - start_time) * 1000),
            error=error,
        )
        self._events.emit(RegistryEvent.MODULE_ERROR, config.name, {'error': str(error)})

    def _initial_health(self, config: ModuleConfig, checked_at: datetime) -> ModuleHealth:
        return ModuleHealth(
            status=HealthStatus.HEALTHY,
            last_check=checked_at,
            details={
                'dependencies_resolved': True,
                'features_available': self._check_optional_features(config),
            },
        )

    def _check_optional_features(self, config: ModuleConfig) -> Dict[str, bool]:
        return {feature: self.feature_flags.is_enabled(feature) for feature in config.optional_features}

    # Queries

    def get_module(self, name: str) -> Optional[ModuleEntry]:
        """Get a module entry by name, counting the access."""
        with self._lock:
            entry = self._modules.get(name)
            if entry is not None:
                self._touch(entry)
            return entry

    def get_all_modules(self) -> List[ModuleEntry]:
        """Get all module entries, including error entries, in registration order."""
        with self._lock:
            return list(self._modules.values())

    def get_enabled_modules(self) -> List[ModuleEntry]:
        """Get all loaded and enabled modules."""
        with self._lock:
            return [entry for entry in self._modules.values() if entry.is_active]

    def get_modules_by_category(self, category: Optional[str]) -> List[ModuleEntry]:
        with self._lock:
            return [entry for entry in self._modules.values() if entry.config.category == category]

    def get_dependencies(self, name: str) -> List[str]:
        """Get the dependencies of a module (empty if unknown)."""
        with self._lock:
            return self._graph.get_dependencies(name)

    def get_dependents(self, name: str) -> List[str]:
        """Get modules that depend on the given module (empty if unknown)."""
        with self._lock:
            return self._graph.get_dependents(name)

    def get_load_order(self) -> List[str]:
        """
        Resolve the order in which modules should be loaded.

        Returns:
            Names of all non-error modules, each after its dependencies

        Raises:
            CircularDependencyError: If the graph contains a cycle
        """
        with self._lock:
            return self._graph.resolve_order(
                [name for name, entry in self._modules.items() if entry.status != ModuleStatus.ERROR]
            )

    def get_module_info(self, name: str) -> Optional[Dict[str, Any]]:
        """Get a summary of a module. Does not count as an access."""
        with self._lock:
            entry = self._modules.get(name)
            if entry is None:
                return None

            config = entry.config
            return {
                'name': config.name,
                'description': config.description,
                'version': config.version,
                'status': entry.status.value,
                'enabled': entry.is_active,
                'category': config.category,
                'priority': config.priority,
                'dependencies': self._graph.get_dependencies(name),
                'dependents': self._graph.get_dependents(name),
                'required_features': list(config.required_features),
                'optional_features': list(config.optional_features),
                'access_count': entry.metrics.access_count,
                'health': entry.health.status.value if entry.health else None,
                'last_error': entry.error_message,
            }

    # Activation

    def is_enabled(self, name: str) -> bool:
        """Check if a module is enabled. Unknown modules are never enabled."""
        with self._lock:
            entry = self._modules.get(name)
            if entry is None:
                return False
            self._touch(entry)
            return entry.is_active

    def can_disable(self, name: str) -> bool:
        """
        Check if a module can be safely disabled.

        True when no enabled module depends on it, which includes modules that
        are not registered at all.
        """
        with self._lock:
            return not self._enabled_dependents(name)

    def disable(self, name: str) -> bool:
        """
        Disable a module.

        Returns:
            True if the module was disabled, False if it is unknown, in error
            state, or still has enabled dependents
        """
        with self._lock:
            entry = self._modules.get(name)
            if entry is None:
                logger.error(f"Module {name} not found")
                return False
            if entry.status == ModuleStatus.ERROR:
                logger.error(f"Cannot disable {name}: module failed to register")
                return False

            dependents = self._enabled_dependents(name)
            if dependents:
                logger.error(f"Cannot disable {name}: modules {dependents} depend on it")
                return False

            entry.config.enabled = False
            entry.status = ModuleStatus.DISABLED

            self._events.emit(RegistryEvent.MODULE_DISABLED, name, {
                'version': entry.config.version,
                'reason': 'manual',
            })

        logger.info(f"Module disabled: {name}")
        return True

    def enable(self, name: str) -> bool:
        """
        Enable a module.

        Every dependency must be enabled and every required feature on.
        On failure the module's state is left unchanged.

        Returns:
            True if the module is enabled afterwards, False otherwise
        """
        with self._lock:
            entry = self._modules.get(name)
            if entry is None:
                logger.error(f"Module {name} not found")
                return False
            if entry.status == ModuleStatus.ERROR:
                logger.error(f"Cannot enable {name}: module failed to register")
                return False

            if entry.is_active:
                return True

            for dep in entry.config.dependencies:
                if not self._is_active(dep):
                    logger.warning(f"Cannot enable {name}: dependency {dep} is not enabled")
                    return False

            for feature in entry.config.required_features:
                if not self.feature_flags.is_enabled(feature):
                    logger.warning(f"Cannot enable {name}: required feature {feature} is not enabled")
                    return False

            entry.config.enabled = True
            entry.status = ModuleStatus.LOADED
            entry.health = self._initial_health(entry.config, _now())

            self._events.emit(RegistryEvent.MODULE_ENABLED, name, {
                'version': entry.config.version,
                'dependencies': list(entry.config.dependencies),
            })

        logger.info(f"Module enabled: {name}")
        return True

    def _is_active(self, name: str) -> bool:
        """Enabled check that does not count as an access."""
        with self._lock:
            entry = self._modules.get(name)
            return entry is not None and entry.is_active

    def _enabled_dependents(self, name: str) -> List[str]:
        return [dep for dep in self._graph.get_dependents(name) if self._is_active(dep)]

    def _touch(self, entry: ModuleEntry) -> None:
        entry.metrics.access_count += 1
        entry.metrics.last_accessed = _now()

    # Events

    def add_event_listener(self, event_type: EventType, listener: EventListener) -> None:
        self._events.add_listener(event_type, listener)

    def remove_event_listener(self, event_type: EventType, listener: EventListener) -> None:
        self._events.remove_listener(event_type, listener)

    def listener_count(self, event_type: EventType) -> int:
        return self._events.listener_count(event_type)

    # Health and statistics

    async def perform_health_check(self) -> Dict[str, ModuleHealth]:
        """Run one health sweep over all enabled modules."""
        return await self.health_monitor.check_all()

    def get_statistics(self) -> RegistryStatistics:
        with self._lock:
            return compute_statistics(list(self._modules.values()))

    def clear(self) -> None:
        """
        Remove every module and announce the empty registry.

        Event subscriptions survive, so listeners receive the registry:ready
        event emitted here.
        """
        with self._lock:
            self._modules.clear()
            self._graph.clear()
            self._events.emit(RegistryEvent.REGISTRY_READY, data={'registry_version': REGISTRY_VERSION})
        logger.debug("Module registry cleared")
