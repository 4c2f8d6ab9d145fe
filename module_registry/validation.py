"""
Module configuration validation.

Configs may arrive as plain mappings, so field types cannot be trusted. The
validation pass checks each field explicitly and raises a ValidationError
naming the first offending field.
"""

from numbers import Number
from typing import Any, Mapping, Union

from feature_flags.feature_flag import FeatureFlag, flag_name

from .errors import ValidationError
from .module_definition import ModuleConfig

_LIST_FIELDS = ('dependencies', 'routes', 'components', 'services')
_FEATURE_FIELDS = ('required_features', 'optional_features')


def coerce_config(config: Union[ModuleConfig, Mapping[str, Any]]) -> ModuleConfig:
    """Accept either a ModuleConfig or a mapping with the same keys."""
    if isinstance(config, ModuleConfig):
        return config
    if isinstance(config, Mapping):
        return ModuleConfig.from_dict(config)
    raise ValidationError('config', f"Module config must be a ModuleConfig or a mapping, got {type(config).__name__}")


def validate_module_config(config: ModuleConfig) -> None:
    """
    Validate a module configuration.

    Args:
        config: The configuration to check

    Raises:
        ValidationError: If any field is missing or has the wrong type
    """
    name = config.name
    if not name or not isinstance(name, str):
        raise ValidationError('name', "Module name is required and must be a string")

    if not config.version or not isinstance(config.version, str):
        raise ValidationError('version', "Module version is required and must be a string", name)

    if not isinstance(config.description, str):
        raise ValidationError('description', "Module description must be a string", name)

    for field_name in _LIST_FIELDS:
        value = getattr(config, field_name)
        if not isinstance(value, list):
            raise ValidationError(field_name, f"Module {field_name} must be an array", name)

    for dep in config.dependencies:
        if not isinstance(dep, str) or not dep:
            raise ValidationError('dependencies', "Module dependencies must be non-empty strings", name)

    if not isinstance(config.enabled, bool):
        raise ValidationError('enabled', "Module enabled flag must be a boolean", name)

    for field_name in _FEATURE_FIELDS:
        value = getattr(config, field_name)
        if value is None:
            continue
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise ValidationError(field_name, f"Module {field_name} must be a list of flag names", name)
        for flag in value:
            if not isinstance(flag, (str, FeatureFlag)):
                raise ValidationError(field_name, f"Module {field_name} must be a list of flag names", name)
            feature = flag if isinstance(flag, FeatureFlag) else FeatureFlag(flag)
            if not feature.is_valid_name():
                raise ValidationError(field_name, f"Invalid feature flag name in {field_name}: {feature.name!r}", name)

    if config.category is not None and not isinstance(config.category, str):
        raise ValidationError('category', "Module category must be a string", name)

    if config.priority is not None and (isinstance(config.priority, bool) or not isinstance(config.priority, Number)):
        raise ValidationError('priority', "Module priority must be a number", name)

    if config.requirements is not None and not isinstance(config.requirements, Mapping):
        raise ValidationError('requirements', "Module requirements must be a mapping", name)


def normalize_config(config: ModuleConfig) -> ModuleConfig:
    """
    Return a private, normalised copy of a validated config.

    Feature entries are reduced to plain names (duplicates dropped, order kept).
    """
    normalized = config.copy()
    for field_name in _FEATURE_FIELDS:
        names = []
        for flag in getattr(normalized, field_name) or []:
            name = flag_name(flag)
            if name not in names:
                names.append(name)
        setattr(normalized, field_name, names)
    if normalized.requirements is None:
        normalized.requirements = {}
    return normalized
