"""
Module Health Monitor

Re-evaluates every enabled module against the current state of its
dependencies and feature flags. Sweeps run on demand through
ModuleRegistry.perform_health_check() or periodically as a background task.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Dict, Optional

from .events import RegistryEvent
from .module_definition import HealthStatus, ModuleEntry, ModuleHealth

if TYPE_CHECKING:
    from .module_registry import ModuleRegistry

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class HealthMonitor:
    """Runs health sweeps over the modules of one registry."""

    def __init__(self, registry: 'ModuleRegistry', interval: float = 60.0):
        self.registry = registry
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    async def check_all(self) -> Dict[str, ModuleHealth]:
        """
        Check every currently enabled module.

        Disabled and error modules are skipped, including modules disabled
        while the checks run. Each module still enabled afterwards gets its
        stored health replaced and produces one module:health-check event.

        Returns:
            Mapping of module name to its new health
        """
        registry = self.registry
        with registry._lock:
            entries = [entry for entry in registry._modules.values() if entry.is_active]

        healths = await asyncio.gather(*(self._safe_check(entry) for entry in entries))

        results: Dict[str, ModuleHealth] = {}
        with registry._lock:
            for entry, health in zip(entries, healths):
                # Disabled (or cleared) while the checks ran
                if not entry.is_active or registry._modules.get(entry.name) is not entry:
                    continue
                entry.health = health
                results[entry.name] = health

            for name, health in results.items():
                registry._events.emit(RegistryEvent.MODULE_HEALTH_CHECK, name, health)

        unhealthy = [name for name, health in results.items() if health.status != HealthStatus.HEALTHY]
        if unhealthy:
            logger.warning(f"Health check found {len(unhealthy)} module(s) not healthy: {unhealthy}")
        else:
            logger.debug(f"Health check passed for {len(results)} module(s)")

        return results

    async def _safe_check(self, entry: ModuleEntry) -> ModuleHealth:
        start = time.perf_counter()
        try:
            return await self.check_module(entry)
        except Exception as e:
            logger.error(f"Health check failed for module '{entry.name}': {e}")
            return ModuleHealth(
                status=HealthStatus.UNHEALTHY,
                last_check=datetime.now(timezone.utc),
                details={'error': str(e), 'check_duration': _elapsed_ms(start)},
            )

    async def check_module(self, entry: ModuleEntry) -> ModuleHealth:
        """Evaluate one module's dependencies, then its feature flags."""
        start = time.perf_counter()
        registry = self.registry
        config = entry.config

        for dep in config.dependencies:
            if not registry._is_active(dep):
                return ModuleHealth(
                    status=HealthStatus.UNHEALTHY,
                    last_check=datetime.now(timezone.utc),
                    details={
                        'error': f"Dependency {dep} is not enabled",
                        'check_duration': _elapsed_ms(start),
                    },
                )

        flags = registry.feature_flags
        for feature in config.required_features:
            if not flags.is_enabled(feature):
                return ModuleHealth(
                    status=HealthStatus.DEGRADED,
                    last_check=datetime.now(timezone.utc),
                    details={
                        'warning': f"Required feature {feature} is not enabled",
                        'check_duration': _elapsed_ms(start),
                    },
                )

        return ModuleHealth(
            status=HealthStatus.HEALTHY,
            last_check=datetime.now(timezone.utc),
            details={
                'dependencies_resolved': True,
                'features_available': registry._check_optional_features(config),
                'check_duration': _elapsed_ms(start),
            },
        )

    # Periodic monitoring

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, interval: Optional[float] = None) -> asyncio.Task:
        """
        Start periodic health sweeps on the running event loop.

        Args:
            interval: Seconds between sweeps; defaults to the monitor's interval
        """
        if self.is_running:
            return self._task

        if interval is not None:
            if interval <= 0:
                raise ValueError('Health check interval must be positive')
            self.interval = interval

        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Started periodic health checks every {self.interval}s")
        return self._task

    async def stop(self) -> None:
        """Stop periodic health sweeps and wait for the task to finish."""
        if self._task is None:
            return

        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Stopped periodic health checks")

    async def _run(self) -> None:
        while True:
            try:
                await self.check_all()
            except Exception as e:
                logger.error(f"Periodic health check failed: {e}")
            await asyncio.sleep(self.interval)
