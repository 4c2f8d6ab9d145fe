"""
Feature flag providers.

The module registry only ever asks one question of the flag system:
``is_enabled(flag_name) -> bool``. Anything that answers it can be injected
into a registry; this module ships an in-memory provider and one backed by
environment configuration.
"""

import logging
import threading
from typing import Dict, List, Mapping, Optional, Protocol, runtime_checkable

from .config import FeatureFlagSettings
from .feature_flag import FlagLike, flag_name


logger = logging.getLogger(__name__)


@runtime_checkable
class FeatureFlagProvider(Protocol):
    """Boolean query interface consumed by the module registry."""

    def is_enabled(self, flag: FlagLike) -> bool:
        ...


class StaticFlagProvider:
    """
    In-memory flag provider.

    Flags not present in the mapping report ``default``. Values can be changed
    at runtime with :meth:`set_flag`, which makes this provider convenient for
    wiring tests and for applications that manage flags themselves.
    """

    def __init__(self, flags: Optional[Mapping[str, bool]] = None, default: bool = False):
        self._flags: Dict[str, bool] = {flag_name(k): bool(v) for k, v in (flags or {}).items()}
        self._default = default
        self._lock = threading.Lock()

    def is_enabled(self, flag: FlagLike) -> bool:
        with self._lock:
            return self._flags.get(flag_name(flag), self._default)

    def set_flag(self, flag: FlagLike, value: bool) -> None:
        with self._lock:
            self._flags[flag_name(flag)] = bool(value)

    def get_all_flags(self) -> Dict[str, bool]:
        with self._lock:
            return self._flags.copy()


class EnvironmentFlagProvider:
    """Flag provider backed by :class:`FeatureFlagSettings`."""

    def __init__(self, settings: Optional[FeatureFlagSettings] = None):
        self.settings = settings if settings is not None else FeatureFlagSettings()
        self._flags = self.settings.as_dict()

    def is_enabled(self, flag: FlagLike) -> bool:
        name = flag_name(flag)
        if name not in self._flags:
            logger.debug(f"Unknown feature flag '{name}' queried, treating as disabled")
            return False
        return self._flags[name]

    def get_all_flags(self) -> Dict[str, bool]:
        """Get all feature flags with their current values."""
        return self._flags.copy()

    def get_enabled_flags(self) -> List[str]:
        """Names of the flags that are currently on."""
        return [name for name, value in self._flags.items() if value]

    def validate(self) -> List[str]:
        """
        Check for combinations of flags that are likely misconfigurations.

        Returns:
            A list of warning messages, empty when the configuration looks sane
        """
        errors = []
        production = self.settings.app_env.lower() == "production"

        if self._flags["debug_mode"] and production:
            errors.append("Debug mode should not be enabled in production")
        if self._flags["beta_features"] and production:
            errors.append("Beta features should not be enabled in production")
        if self._flags["real_time_collaboration"] and not self._flags["caching"]:
            errors.append("Real-time collaboration requires caching to be enabled")
        if self._flags["push_notifications"] and not self._flags["email_notifications"]:
            errors.append("Push notifications typically require email notifications as fallback")

        return errors
