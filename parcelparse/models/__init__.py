"""
parcelparse data models.

Pydantic models for extraction results, shipping-method config and
product-page data.
"""

# Extraction results
from parcelparse.models.extraction import (
    Carrier,
    DeliveryEstimate,
    DeliverySource,
    InboundEmail,
    LineItem,
    ParseResult,
    ProductImage,
    ProductUrl,
    TrackingLink,
)

# Product pages
from parcelparse.models.product_page import ProductPageData, ScrapeStatus

# Shipping config
from parcelparse.models.shipping import (
    CarrierShipping,
    ShippingConfig,
    ShippingConfigError,
    ShippingMethod,
    load_shipping_config,
)
