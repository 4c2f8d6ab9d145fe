"""
Feature flag identifier.

A FeatureFlag only carries the name of a flag, never its value. Values are
answered by a FeatureFlagProvider, which the module registry queries when it
gates module activation.
"""

from typing import Union

from pydantic import BaseModel, Field


class FeatureFlag(BaseModel):
    """
    Feature flag identifier with a unique name.

    Examples:
        ```python
        AUDIT_LOGGING = FeatureFlag("audit_logging")
        CACHING = FeatureFlag("caching")

        registry.register({
            "name": "security",
            "version": "1.0.0",
            "required_features": [AUDIT_LOGGING],
        })
        ```

    Attributes:
        name: The unique identifier for this feature flag
    """

    name: str = Field(description="The unique identifier for this feature flag")

    def __init__(self, name: str):
        super().__init__(name=name)

    def __eq__(self, other) -> bool:
        if isinstance(other, FeatureFlag):
            return self.name == other.name
        return False

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"FeatureFlag(name={self.name!r})"

    def __str__(self) -> str:
        return self.name

    def is_valid_name(self) -> bool:
        """Check the name is non-blank and of reasonable length."""
        return (
            isinstance(self.name, str) and
            len(self.name.strip()) > 0 and
            len(self.name) <= 100
        )


FlagLike = Union[str, FeatureFlag]


def flag_name(flag: FlagLike) -> str:
    """Return the plain name of a flag given either a string or a FeatureFlag."""
    if isinstance(flag, FeatureFlag):
        return flag.name
    return flag
