"""
Feature flags package.

Provides flag identifiers and the providers the module registry queries to
gate module activation.

Basic usage:
    ```python
    from feature_flags import FeatureFlag, StaticFlagProvider

    CACHING = FeatureFlag("caching")

    flags = StaticFlagProvider({"caching": True})
    if flags.is_enabled(CACHING):
        print("Caching enabled")
    ```
"""

from .config import FeatureFlagSettings, parse_env_boolean
from .feature_flag import FeatureFlag, flag_name
from .provider import EnvironmentFlagProvider, FeatureFlagProvider, StaticFlagProvider

__all__ = [
    'FeatureFlag',
    'flag_name',

    # Providers
    'FeatureFlagProvider',
    'StaticFlagProvider',
    'EnvironmentFlagProvider',

    # Configuration
    'FeatureFlagSettings',
    'parse_env_boolean',
]

__version__ = "1.0.0"
