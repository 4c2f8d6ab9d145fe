"""
Shared builders for the module registry tests.
"""

import sys
from pathlib import Path

# Add the project root to the path so we can import the packages under test
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from feature_flags import StaticFlagProvider
from module_registry import ModuleConfig, ModuleRegistry

# Flag states used across the registry tests
DEFAULT_FLAGS = {
    'audit_logging': True,
    'caching': True,
    'input_validation': True,
    'advanced_reporting': False,
}


def make_flags(**overrides) -> StaticFlagProvider:
    flags = dict(DEFAULT_FLAGS)
    flags.update(overrides)
    return StaticFlagProvider(flags)


def make_registry(**flag_overrides) -> ModuleRegistry:
    return ModuleRegistry(make_flags(**flag_overrides))


def core_module(**overrides) -> ModuleConfig:
    values = dict(
        name='core',
        version='1.0.0',
        description='Core system functionality',
        dependencies=[],
        routes=['/api/health'],
        components=['Layout', 'Navigation'],
        services=['AuthService'],
        enabled=True,
        category='core',
        priority=100,
    )
    values.update(overrides)
    return ModuleConfig(**values)


def feature_module(**overrides) -> ModuleConfig:
    values = dict(
        name='feature-module',
        version='1.0.0',
        description='Feature module depending on core',
        dependencies=['core'],
        routes=['/api/feature'],
        components=['FeatureComponent'],
        services=['FeatureService'],
        enabled=True,
        category='feature',
        priority=50,
    )
    values.update(overrides)
    return ModuleConfig(**values)


def conditional_module(**overrides) -> ModuleConfig:
    values = dict(
        name='conditional-module',
        version='1.0.0',
        description='Module with feature flag requirements',
        dependencies=['core'],
        routes=['/api/conditional'],
        components=['ConditionalComponent'],
        services=['ConditionalService'],
        enabled=True,
        required_features=['audit_logging'],
        optional_features=['caching'],
        category='feature',
    )
    values.update(overrides)
    return ModuleConfig(**values)


def reporting_module(**overrides) -> ModuleConfig:
    """Module whose required feature is off in DEFAULT_FLAGS."""
    values = dict(
        name='disabled-feature-module',
        version='1.0.0',
        description='Module requiring disabled feature',
        dependencies=['core'],
        routes=['/api/disabled'],
        components=['DisabledComponent'],
        services=['DisabledService'],
        enabled=True,
        required_features=['advanced_reporting'],
        category='feature',
    )
    values.update(overrides)
    return ModuleConfig(**values)


def chain_registry(length: int = 4) -> ModuleRegistry:
    """Registry with module-a <- module-b <- ... linear chain."""
    registry = make_registry()
    names = [f"module-{chr(ord('a') + i)}" for i in range(length)]
    for i, name in enumerate(names):
        registry.register(core_module(name=name, dependencies=[names[i - 1]] if i else []))
    return registry
