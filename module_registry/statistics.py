"""
Registry statistics: read-only rollups over module entries.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable

from .module_definition import ModuleConfig, ModuleEntry, ModuleStatus

# Per-item cost used by the memory estimate, in bytes
BASE_MODULE_COST = 1024
ROUTE_COST = 512
COMPONENT_COST = 2048
SERVICE_COST = 4096
DEPENDENCY_COST = 256


def estimate_memory_usage(config: ModuleConfig) -> int:
    """Deterministic size estimate for a module based on what it declares."""
    return (
        BASE_MODULE_COST
        + len(config.routes) * ROUTE_COST
        + len(config.components) * COMPONENT_COST
        + len(config.services) * SERVICE_COST
        + len(config.dependencies) * DEPENDENCY_COST
    )


@dataclass
class RegistryStatistics:
    total: int = 0
    enabled: int = 0
    disabled: int = 0
    errors: int = 0
    by_category: Dict[str, int] = field(default_factory=dict)
    by_status: Dict[str, int] = field(default_factory=dict)
    total_memory_usage: int = 0
    average_load_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_statistics(entries: Iterable[ModuleEntry]) -> RegistryStatistics:
    """
    Summarise a collection of module entries.

    Each entry is counted in at most one of enabled/disabled/errors.
    """
    stats = RegistryStatistics()
    total_load_time = 0.0
    load_time_count = 0

    for entry in entries:
        stats.total += 1

        if entry.status == ModuleStatus.ERROR:
            stats.errors += 1
        elif entry.is_active:
            stats.enabled += 1
        else:
            stats.disabled += 1

        category = entry.config.category or 'unknown'
        stats.by_category[category] = stats.by_category.get(category, 0) + 1
        stats.by_status[entry.status.value] = stats.by_status.get(entry.status.value, 0) + 1

        if entry.metrics.memory_usage:
            stats.total_memory_usage += entry.metrics.memory_usage
        if entry.metrics.load_time is not None:
            total_load_time += entry.metrics.load_time
            load_time_count += 1

    stats.average_load_time = total_load_time / load_time_count if load_time_count else 0.0
    return stats
