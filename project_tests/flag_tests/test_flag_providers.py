#!/usr/bin/env python3
"""
Feature flag tests: identifiers, providers, environment parsing and the
registry settings.
"""

import os
import sys
from contextlib import contextmanager
from pathlib import Path

# Fix Windows encoding issues
if sys.platform == "win32":
    import codecs
    sys.stdout = codecs.getwriter("utf-8")(sys.stdout.detach())
    sys.stderr = codecs.getwriter("utf-8")(sys.stderr.detach())

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from pydantic import ValidationError as SettingsError

from feature_flags import (
    EnvironmentFlagProvider,
    FeatureFlag,
    FeatureFlagProvider,
    FeatureFlagSettings,
    StaticFlagProvider,
    flag_name,
    parse_env_boolean,
)
from module_registry.config import RegistrySettings, get_registry_settings, reset_registry_settings


@contextmanager
def env_vars(**values):
    """Temporarily set environment variables."""
    previous = {key: os.environ.get(key) for key in values}
    os.environ.update(values)
    try:
        yield
    finally:
        for key, value in previous.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value


def test_feature_flag_identity():
    print("🧪 Testing FeatureFlag...")

    caching = FeatureFlag("caching")
    assert caching == FeatureFlag("caching")
    assert caching != FeatureFlag("dark_mode")
    assert caching != "caching"
    assert len({caching, FeatureFlag("caching")}) == 1
    assert str(caching) == "caching"
    assert repr(caching) == "FeatureFlag(name='caching')"
    assert caching.is_valid_name()
    assert not FeatureFlag("   ").is_valid_name()

    assert flag_name(caching) == "caching"
    assert flag_name("dark_mode") == "dark_mode"

    print("  ✅ Flags compare and hash by name")


def test_static_provider():
    print("🧪 Testing StaticFlagProvider...")

    flags = StaticFlagProvider({'caching': True, 'dark_mode': 0})
    assert isinstance(flags, FeatureFlagProvider)
    assert flags.is_enabled('caching') is True
    assert flags.is_enabled(FeatureFlag('caching')) is True
    assert flags.is_enabled('dark_mode') is False
    assert flags.is_enabled('unknown') is False

    flags.set_flag(FeatureFlag('dark_mode'), True)
    assert flags.is_enabled('dark_mode')
    assert flags.get_all_flags() == {'caching': True, 'dark_mode': True}

    permissive = StaticFlagProvider(default=True)
    assert permissive.is_enabled('anything')

    print("  ✅ Static provider answers from its mapping")


def test_parse_env_boolean():
    print("🧪 Testing boolean parsing...")

    for value in ('true', 'TRUE', '1', 'yes', 'on', 'enabled', ' On '):
        assert parse_env_boolean(value, False) is True, value
    for value in ('false', '0', 'no', 'off', 'disabled', 'FALSE'):
        assert parse_env_boolean(value, True) is False, value

    assert parse_env_boolean(None, True) is True
    assert parse_env_boolean('', False) is False
    assert parse_env_boolean('maybe', True) is True
    assert parse_env_boolean('maybe', False) is False
    assert parse_env_boolean(False, True) is False

    print("  ✅ Lenient parsing with defaults")


def test_settings_defaults():
    settings = FeatureFlagSettings(_env_file=None)
    flags = settings.as_dict()

    assert len(flags) == len(FeatureFlagSettings.flag_names()) == 24
    assert 'app_env' not in flags
    assert settings.audit_logging is True
    assert settings.caching is True
    assert settings.real_time_collaboration is False
    assert settings.advanced_reporting is True
    print("  ✅ Flag defaults loaded")


def test_environment_provider():
    print("🧪 Testing EnvironmentFlagProvider...")

    with env_vars(FEATURE_AUDIT='off', FEATURE_CACHE='maybe', FEATURE_REALTIME='YES', FEATURE_DARK_MODE='1'):
        provider = EnvironmentFlagProvider(FeatureFlagSettings(_env_file=None))

    assert isinstance(provider, FeatureFlagProvider)
    assert provider.is_enabled('audit_logging') is False
    assert provider.is_enabled('caching') is True  # invalid value keeps the default
    assert provider.is_enabled(FeatureFlag('real_time_collaboration')) is True
    assert provider.is_enabled('dark_mode') is True
    assert provider.is_enabled('not_a_flag') is False

    enabled = provider.get_enabled_flags()
    assert 'real_time_collaboration' in enabled
    assert 'audit_logging' not in enabled
    assert provider.get_all_flags()['audit_logging'] is False

    print("  ✅ Environment overrides applied")


def test_configuration_warnings():
    print("🧪 Testing configuration validation...")

    with env_vars(APP_ENV='production', FEATURE_DEBUG='true', FEATURE_BETA='true',
                  FEATURE_REALTIME='true', FEATURE_CACHE='false',
                  FEATURE_PUSH='true', FEATURE_EMAIL='false'):
        provider = EnvironmentFlagProvider(FeatureFlagSettings(_env_file=None))

    warnings = provider.validate()
    assert "Debug mode should not be enabled in production" in warnings
    assert "Beta features should not be enabled in production" in warnings
    assert "Real-time collaboration requires caching to be enabled" in warnings
    assert "Push notifications typically require email notifications as fallback" in warnings

    with env_vars(APP_ENV='development', FEATURE_DEBUG='true'):
        provider = EnvironmentFlagProvider(FeatureFlagSettings(_env_file=None))
    assert provider.validate() == []

    print("  ✅ Misconfigurations reported")


def test_registry_settings():
    print("🧪 Testing registry settings...")

    settings = RegistrySettings(_env_file=None, log_level='debug', health_check_interval=5)
    assert settings.log_level == 'DEBUG'
    assert settings.health_check_interval == 5.0

    for bad in ({'log_level': 'chatty'}, {'health_check_interval': 0}):
        try:
            RegistrySettings(_env_file=None, **bad)
        except SettingsError:
            pass
        else:
            raise AssertionError(f"Expected settings error for {bad}")

    with env_vars(REGISTRY_LOG_LEVEL='warning', REGISTRY_HEALTH_CHECK_INTERVAL='2.5'):
        reset_registry_settings()
        try:
            settings = get_registry_settings()
            assert settings.log_level == 'WARNING'
            assert settings.health_check_interval == 2.5
            assert get_registry_settings() is settings
        finally:
            reset_registry_settings()

    print("  ✅ Settings validated and cached")


def main():
    """Run all feature flag tests."""
    print("🚀 Feature Flag Tests")
    print("=" * 50)

    try:
        test_feature_flag_identity()
        test_static_provider()
        test_parse_env_boolean()
        test_settings_defaults()
        test_environment_provider()
        test_configuration_warnings()
        test_registry_settings()

        print("\n" + "=" * 50)
        print("🎉 All feature flag tests passed!")

    except Exception as e:
        print(f"\n❌ Test failed: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
