"""
Module Definition System

Defines the data structures tracked by the module registry: the caller-supplied
ModuleConfig and the registry-owned ModuleEntry with its status, metrics and
health.
"""

import copy
import logging
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)


class ModuleStatus(Enum):
    """Registration status of a module."""
    LOADED = "loaded"
    DISABLED = "disabled"
    ERROR = "error"


class HealthStatus(Enum):
    """Outcome of a module health check."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


# camelCase spellings accepted when a config arrives as a plain mapping
_KEY_ALIASES = {
    'requiredFeatures': 'required_features',
    'optionalFeatures': 'optional_features',
}


@dataclass
class ModuleConfig:
    """Configuration supplied when a module is registered."""
    name: str
    version: str
    description: str = ""
    dependencies: List[str] = field(default_factory=list)
    routes: List[str] = field(default_factory=list)
    components: List[str] = field(default_factory=list)
    services: List[str] = field(default_factory=list)
    enabled: bool = True
    category: Optional[str] = None
    priority: Optional[float] = None
    required_features: List[str] = field(default_factory=list)
    optional_features: List[str] = field(default_factory=list)
    author: Optional[str] = None
    license: Optional[str] = None
    requirements: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ModuleConfig':
        """
        Build a ModuleConfig from a plain mapping.

        Values are taken as-is so that the validation pass can report badly
        typed fields; missing optional keys get their defaults.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            key = _KEY_ALIASES.get(key, key)
            if key in known:
                values[key] = value
            else:
                logger.debug(f"Ignoring unknown module config key '{key}'")

        values.setdefault('name', None)
        values.setdefault('version', None)
        return cls(**values)

    def copy(self) -> 'ModuleConfig':
        """Return an independent copy so callers cannot mutate registry state."""
        return copy.deepcopy(self)

    def snapshot(self) -> Dict[str, Any]:
        """Plain-dict view of the configuration, used in event payloads."""
        return asdict(self)


@dataclass
class ModuleMetrics:
    """Performance metrics for a registered module."""
    load_time: float = 0.0
    """Wall-clock duration of the register() call in milliseconds."""
    access_count: int = 0
    last_accessed: Optional[datetime] = None
    memory_usage: Optional[int] = None
    """Coarse size estimate in bytes, see statistics.estimate_memory_usage."""


@dataclass
class ModuleHealth:
    """Result of a health check."""
    status: HealthStatus
    last_check: datetime
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status.value,
            'last_check': self.last_check.isoformat(),
            'details': dict(self.details),
        }


@dataclass
class ModuleEntry:
    """
    Registry-owned record for a module.

    Created exactly once by ModuleRegistry.register(), either in LOADED state
    or, when registration failed after validation, in ERROR state with the
    failure stored in ``error``.
    """
    config: ModuleConfig
    status: ModuleStatus
    loaded_at: datetime
    metrics: ModuleMetrics = field(default_factory=ModuleMetrics)
    health: Optional[ModuleHealth] = None
    error: Optional[Exception] = None

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def error_message(self) -> Optional[str]:
        """Get the registration error message if the module is in error state."""
        return str(self.error) if self.status == ModuleStatus.ERROR and self.error else None

    @property
    def is_active(self) -> bool:
        """True when the module is loaded and enabled."""
        return self.status == ModuleStatus.LOADED and self.config.enabled
