"""
Feature Flag Configuration

Environment-driven feature toggles. Every flag can be overridden with a
FEATURE_* environment variable (or a .env file); unset or unparseable values
fall back to the defaults declared here.
"""

import logging
from typing import Any, Dict, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)

TRUE_VALUES = ('true', '1', 'yes', 'on', 'enabled')
FALSE_VALUES = ('false', '0', 'no', 'off', 'disabled')


def parse_env_boolean(value: Any, default: bool) -> bool:
    """
    Parse a boolean from an environment value.

    Args:
        value: Raw value (usually a string from the environment)
        default: Value used when the input is empty or not recognised

    Returns:
        The parsed boolean
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return default

    normalized = str(value).strip().lower()
    if not normalized:
        return default
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False

    logger.warning(f"Invalid feature flag value: {value!r}. Using default: {default}")
    return default


class FeatureFlagSettings(BaseSettings):
    """
    Feature flag values with environment variable support.

    Field names are the flag names modules refer to in ``required_features``
    and ``optional_features``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Core features
    real_time_collaboration: bool = Field(False, validation_alias="FEATURE_REALTIME")
    advanced_reporting: bool = Field(True, validation_alias="FEATURE_REPORTING")
    ai_personalization: bool = Field(False, validation_alias="FEATURE_AI")
    mobile_optimization: bool = Field(True, validation_alias="FEATURE_MOBILE")

    # Security features
    two_factor_auth: bool = Field(False, validation_alias="FEATURE_2FA")
    audit_logging: bool = Field(True, validation_alias="FEATURE_AUDIT")
    rate_limiting: bool = Field(True, validation_alias="FEATURE_RATE_LIMIT")
    input_validation: bool = Field(True, validation_alias="FEATURE_INPUT_VALIDATION")

    # Performance features
    caching: bool = Field(True, validation_alias="FEATURE_CACHE")
    lazy_loading: bool = Field(True, validation_alias="FEATURE_LAZY_LOAD")
    image_optimization: bool = Field(True, validation_alias="FEATURE_IMAGE_OPT")
    database_optimization: bool = Field(True, validation_alias="FEATURE_DB_OPT")

    # User experience features
    dark_mode: bool = Field(False, validation_alias="FEATURE_DARK_MODE")
    accessibility_enhancements: bool = Field(True, validation_alias="FEATURE_A11Y")
    offline_support: bool = Field(False, validation_alias="FEATURE_OFFLINE")
    push_notifications: bool = Field(False, validation_alias="FEATURE_PUSH")

    # Development features
    beta_features: bool = Field(False, validation_alias="FEATURE_BETA")
    debug_mode: bool = Field(False, validation_alias="FEATURE_DEBUG")
    performance_monitoring: bool = Field(True, validation_alias="FEATURE_PERF_MON")
    error_tracking: bool = Field(True, validation_alias="FEATURE_ERROR_TRACK")

    # Integration features
    email_notifications: bool = Field(False, validation_alias="FEATURE_EMAIL")
    sms_notifications: bool = Field(False, validation_alias="FEATURE_SMS")
    third_party_integrations: bool = Field(False, validation_alias="FEATURE_THIRD_PARTY")
    webhook_support: bool = Field(False, validation_alias="FEATURE_WEBHOOKS")

    # Deployment environment, used only for configuration warnings
    app_env: str = Field("development", validation_alias="APP_ENV")

    @field_validator('*', mode='before')
    @classmethod
    def parse_flag_value(cls, v, info):
        """Apply the lenient boolean parsing to every flag field."""
        field = cls.model_fields.get(info.field_name)
        if field is None or field.annotation is not bool:
            return v
        return parse_env_boolean(v, field.default)

    @classmethod
    def flag_names(cls) -> List[str]:
        """Names of all declared flags."""
        return [name for name, field in cls.model_fields.items() if field.annotation is bool]

    def as_dict(self) -> Dict[str, bool]:
        """All flags with their current values."""
        return {name: getattr(self, name) for name in self.flag_names()}
