"""
Runtime configuration for parcelparse.

Values come from the environment (optionally via a .env file) with
defaults that let the parser run with no configuration at all.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).parent

# Shipping-method table used by the delivery date extractor
DEFAULT_SHIPPING_METHODS_PATH = PACKAGE_DIR / "data" / "shipping_methods.yaml"
SHIPPING_METHODS_PATH = Path(
    os.getenv("PARCELPARSE_SHIPPING_METHODS_PATH", str(DEFAULT_SHIPPING_METHODS_PATH))
)

# Service name reported to Cloud Logging
LOG_SERVICE_NAME = os.getenv("PARCELPARSE_SERVICE_NAME", "parcelparse")

# Extraction limits
MAX_PRODUCT_DESCRIPTIONS = 10
MIN_DESCRIPTION_LENGTH = 4
MAX_DESCRIPTION_LENGTH = 150
MAX_PRODUCT_IMAGES = 10
MIN_IMAGE_DIMENSION = 50
IMAGE_MATCH_THRESHOLD = 0.3
CONTEXT_WINDOW_CHARS = 300
MAX_DAY_RANGE = 30
