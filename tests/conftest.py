"""
pytest configuration and fixtures.

Loads environment variables from .env file for all tests and provides the
fixed email date and shipping configs used by the delivery tests.
"""

from datetime import date
from pathlib import Path

import pytest
from dotenv import load_dotenv

from parcelparse.config import DEFAULT_SHIPPING_METHODS_PATH
from parcelparse.models.shipping import ShippingConfig


def pytest_configure(config):
    """Load .env file before running tests"""
    # Find the project root (where .env is located)
    project_root = Path(__file__).parent.parent
    env_file = project_root / ".env"

    if env_file.exists():
        load_dotenv(env_file)


@pytest.fixture
def email_date() -> date:
    """A Thursday."""
    return date(2026, 1, 22)


@pytest.fixture
def shipping_config() -> ShippingConfig:
    """Small shipping table built in code, independent of the packaged YAML."""
    return ShippingConfig.model_validate(
        {
            "carriers": {
                "royal_mail": {
                    "patterns": ["royal mail"],
                    "methods": {
                        "first_class": {"patterns": ["1st class", "first class"], "min_days": 1},
                        "second_class": {"patterns": ["2nd class", "second class"], "min_days": 2},
                        "tracked_48": {"patterns": ["tracked 48"], "min_days": 2},
                    },
                },
                "dpd": {
                    "patterns": ["dpd"],
                    "methods": {"next_day": {"patterns": ["next day"], "min_days": 1}},
                },
                "amazon": {
                    "patterns": ["amazon"],
                    "methods": {
                        "next_day": {"patterns": ["one-day", "prime"], "min_days": 1},
                    },
                },
                "ups": {
                    "patterns": ["ups"],
                    "methods": {"ground": {"patterns": ["ground"], "min_days": 3}},
                },
            },
            "generic_methods": {
                "express": {"patterns": ["express"], "min_days": 1},
                "standard": {"patterns": ["standard"], "min_days": 3},
            },
            "day_range_patterns": [
                r"(\d+)\s*(?:-|to)\s*\d+\s*(?:business|working)\s+days",
                r"within\s+(\d+)\s*(?:business|working)?\s*days",
                r"in\s+(\d+)\s*(?:business|working)?\s*days",
            ],
        }
    )


@pytest.fixture
def packaged_shipping_config() -> ShippingConfig:
    return ShippingConfig.from_yaml(DEFAULT_SHIPPING_METHODS_PATH)
