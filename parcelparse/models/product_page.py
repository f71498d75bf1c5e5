from decimal import Decimal
from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ScrapeStatus(StrEnum):
    """How much of a product page could be extracted"""

    COMPLETED = "completed"  # Title and description found
    PARTIAL = "partial"  # One of title/description found
    FAILED = "failed"  # Neither found


class ProductPageData(BaseModel):
    """Product facts extracted from a retailer product page"""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Page URL with tracking params removed")
    retailer: Optional[str] = Field(default=None, description="Retailer key")
    country: str = Field(default="gb", description="Country code guessed from URL")
    title: Optional[str] = Field(default=None, description="Product title")
    description: Optional[str] = Field(default=None, description="Product description")
    brand: Optional[str] = Field(default=None, description="Brand name")
    category: Optional[str] = Field(default=None, description="Category or breadcrumb")
    price: Optional[Decimal] = Field(default=None, description="Price amount")
    currency: Optional[str] = Field(default=None, description="ISO 4217 currency")
    material: Optional[str] = Field(default=None, description="Material/composition")
    image_url: Optional[str] = Field(default=None, description="Absolute image URL")
    structured_data: Optional[dict[str, Any]] = Field(
        default=None, description="JSON-LD Product object when present"
    )
    status: ScrapeStatus = Field(default=ScrapeStatus.FAILED)
