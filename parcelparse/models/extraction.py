from datetime import date, datetime
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Carrier(StrEnum):
    """Shipping carriers recognized from tracking links and email text"""

    ROYAL_MAIL = "royal_mail"
    DHL = "dhl"
    UPS = "ups"
    FEDEX = "fedex"
    USPS = "usps"
    AMAZON = "amazon"
    DPD = "dpd"
    EVRI = "evri"  # Formerly Hermes
    YODEL = "yodel"
    GLOBAL_E = "global_e"
    UNKNOWN = "unknown"


class DeliverySource(StrEnum):
    """Strategy that produced a delivery estimate"""

    EXPLICIT_DATE = "explicit_date"  # Stated date or relative day word
    SHIPPING_METHOD = "shipping_method"  # Carrier/method min business days
    DAY_RANGE = "day_range"  # "3-5 business days" style phrases


class TrackingLink(BaseModel):
    """Tracking URL found in an email, attributed to a carrier"""

    model_config = ConfigDict(frozen=True)

    carrier: Carrier = Field(default=Carrier.UNKNOWN, description="Shipping carrier")
    url: str = Field(description="Absolute http(s) tracking URL")
    tracking_number: Optional[str] = Field(
        default=None, description="Carrier tracking number"
    )


class ProductUrl(BaseModel):
    """Link to a retailer product page"""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Cleaned product page URL")
    retailer: str = Field(description="Retailer key or domain label")
    product_id: Optional[str] = Field(
        default=None, description="Retailer product identifier (ASIN, SKU, ...)"
    )


class ProductImage(BaseModel):
    """Candidate product image from an HTML email body"""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Absolute image URL")
    alt_text: Optional[str] = Field(default=None, description="Image alt text")
    width: Optional[int] = Field(default=None, description="Declared width in px")
    height: Optional[int] = Field(default=None, description="Declared height in px")

    @property
    def area(self) -> int:
        return (self.width or 0) * (self.height or 0)


class DeliveryEstimate(BaseModel):
    """Estimated delivery date and how it was derived"""

    model_config = ConfigDict(frozen=True)

    estimated_delivery: date = Field(description="Estimated delivery date")
    confidence: float = Field(ge=0.0, le=1.0, description="Extraction confidence")
    source: DeliverySource = Field(description="Strategy that produced the estimate")
    shipping_method: Optional[str] = Field(
        default=None, description="'carrier/method' key when source is shipping_method"
    )
    raw_match: str = Field(description="Text that produced the estimate")


class ParseResult(BaseModel):
    """Everything extracted from one email"""

    model_config = ConfigDict(frozen=True)

    tracking_urls: list[TrackingLink] = Field(default_factory=list)
    product_urls: list[ProductUrl] = Field(default_factory=list)
    order_reference: Optional[str] = None
    retailer_name: Optional[str] = None
    product_descriptions: list[str] = Field(default_factory=list)
    product_images: list[ProductImage] = Field(default_factory=list)
    delivery_info: Optional[DeliveryEstimate] = None


class InboundEmail(BaseModel):
    """Inbound email as handed over by mail ingestion"""

    model_config = ConfigDict(frozen=True)

    subject: str = Field(default="", description="Subject line")
    from_address: Optional[str] = Field(default=None, description="From header")
    body_text: Optional[str] = Field(default=None, description="text/plain body")
    body_html: Optional[str] = Field(default=None, description="text/html body")
    created_at: Optional[datetime | date] = Field(
        default=None, description="When the email was received"
    )


class LineItem(BaseModel):
    """Product line item built from a parse result"""

    model_config = ConfigDict(frozen=True)

    description: str = Field(description="Product description")
    quantity: int = Field(default=1, description="Quantity ordered")
    image_url: Optional[str] = Field(default=None, description="Matched image URL")
