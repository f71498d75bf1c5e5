"""
Shipping-method configuration.

Maps carriers and their delivery services to a minimum number of business
days, plus generic service names and day-range regexes. Loaded from YAML
and validated once, then passed to the delivery date extractor.
"""

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class ShippingConfigError(Exception):
    """Raised when the shipping-method config cannot be read or is invalid."""


@lru_cache(maxsize=None)
def _phrase_regex(phrase: str) -> re.Pattern:
    return re.compile(rf"(?<!\w){re.escape(phrase.strip())}(?!\w)", re.IGNORECASE)


def find_phrase(phrases: list[str], text: str) -> Optional[str]:
    """
    Return the first phrase that occurs in text as a whole word.

    Matching is case-insensitive, so "ups" is found in "Shipped via UPS"
    but not in "groups".
    """
    for phrase in phrases:
        if phrase.strip() and _phrase_regex(phrase).search(text):
            return phrase
    return None


class ShippingMethod(BaseModel):
    """A delivery service and its minimum transit time"""

    model_config = ConfigDict(frozen=True)

    patterns: list[str] = Field(default_factory=list, description="Trigger phrases")
    min_days: int = Field(default=1, ge=0, description="Minimum business days")

    def match(self, text: str) -> Optional[str]:
        return find_phrase(self.patterns, text)


class CarrierShipping(BaseModel):
    """Carrier trigger phrases and the services it offers"""

    model_config = ConfigDict(frozen=True)

    patterns: list[str] = Field(default_factory=list, description="Trigger phrases")
    methods: dict[str, ShippingMethod] = Field(default_factory=dict)

    def match(self, text: str) -> Optional[str]:
        return find_phrase(self.patterns, text)


class ShippingConfig(BaseModel):
    """Shipping-method table used for delivery estimates"""

    model_config = ConfigDict(frozen=True)

    carriers: dict[str, CarrierShipping] = Field(default_factory=dict)
    generic_methods: dict[str, ShippingMethod] = Field(default_factory=dict)
    day_range_patterns: list[str] = Field(
        default_factory=list,
        description="Regexes whose first group is the minimum day count",
    )

    @field_validator("day_range_patterns")
    @classmethod
    def _patterns_compile(cls, patterns: list[str]) -> list[str]:
        for pattern in patterns:
            try:
                compiled = re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid day range pattern {pattern!r}: {e}") from e
            if compiled.groups < 1:
                raise ValueError(f"Day range pattern {pattern!r} needs a capture group")
        return patterns

    @property
    def is_empty(self) -> bool:
        return not (self.carriers or self.generic_methods or self.day_range_patterns)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "ShippingConfig":
        """
        Load and validate a shipping-method YAML file.

        Raises:
            ShippingConfigError: File missing, unreadable, not YAML, or not
                shaped like a shipping config
        """
        path = Path(path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ShippingConfigError(f"Cannot read {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ShippingConfigError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ShippingConfigError(f"{path} must contain a mapping at top level")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ShippingConfigError(f"Invalid shipping config in {path}: {e}") from e


def load_shipping_config(path: Path | str) -> Optional[ShippingConfig]:
    """
    Load the shipping-method config, returning None when it is unusable.

    A missing or empty file logs a warning and an invalid one logs an
    error; in each case delivery estimation falls back to stated dates only.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("Shipping methods config not found at %s", path)
        return None

    try:
        config = ShippingConfig.from_yaml(path)
    except ShippingConfigError as e:
        logger.error("Failed to load shipping methods config: %s", e)
        return None

    if config.is_empty:
        logger.warning("Shipping methods config at %s is empty", path)
        return None

    logger.debug(
        "Loaded shipping config: %d carriers, %d generic methods, %d day ranges",
        len(config.carriers),
        len(config.generic_methods),
        len(config.day_range_patterns),
    )
    return config
