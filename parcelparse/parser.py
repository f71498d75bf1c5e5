"""
Email parser.

Runs every extractor over one inbound email and collects the results
into a ParseResult.
"""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Optional

from parcelparse.config import SHIPPING_METHODS_PATH
from parcelparse.extractors.delivery import DeliveryDateExtractor
from parcelparse.extractors.images import extract_product_images, match_images_to_products
from parcelparse.extractors.order_reference import extract_order_reference
from parcelparse.extractors.product_urls import extract_product_urls
from parcelparse.extractors.products import extract_product_descriptions, looks_like_product
from parcelparse.extractors.retailer import identify_retailer
from parcelparse.extractors.tracking import extract_tracking_urls
from parcelparse.models.extraction import InboundEmail, LineItem, ParseResult
from parcelparse.models.shipping import ShippingConfig, load_shipping_config
from parcelparse.utils.html import html_to_text

logger = logging.getLogger(__name__)


def combined_text(subject: str | None, body_text: str | None, body_html: str | None) -> str:
    """Subject and body as one text, flattening the HTML body if there is no text part."""
    body = body_text
    if not (body and body.strip()) and body_html:
        body = html_to_text(body_html)
    return "\n".join(part for part in (subject, body) if part)


class EmailParser:
    """
    Extract order, shipment and product facts from emails.

    The shipping-method config is optional; without it delivery estimates
    only come from dates stated in the email.

    Example:
        parser = EmailParser.from_config()
        result = parser.parse(
            subject="Your order has shipped",
            body_text=body,
            from_address="orders@asos.com",
            received_at=datetime.now(),
        )
    """

    def __init__(self, shipping_config: Optional[ShippingConfig] = None):
        self.shipping_config = shipping_config
        self.delivery_extractor = DeliveryDateExtractor(shipping_config=shipping_config)

    @classmethod
    def from_config(cls, path: Path | str | None = None) -> "EmailParser":
        """Build a parser with the shipping config at path (or the configured default)."""
        return cls(shipping_config=load_shipping_config(path or SHIPPING_METHODS_PATH))

    def parse(
        self,
        subject: str | None = "",
        body_text: str | None = None,
        body_html: str | None = None,
        received_at: datetime | date | None = None,
        from_address: str | None = None,
    ) -> ParseResult:
        """
        Parse one email.

        Args:
            subject: Subject line
            body_text: text/plain body
            body_html: text/html body
            received_at: When the email arrived; delivery dates before it
                are rejected (defaults to today)
            from_address: From header

        Returns:
            ParseResult with whatever could be found
        """
        text = combined_text(subject, body_text, body_html)

        descriptions = extract_product_descriptions(text)
        result = ParseResult(
            tracking_urls=extract_tracking_urls(text, body_html),
            product_urls=extract_product_urls(text),
            order_reference=extract_order_reference(text),
            retailer_name=identify_retailer(from_address, text),
            product_descriptions=descriptions,
            product_images=extract_product_images(body_html),
            delivery_info=self.delivery_extractor.extract(text, received_at),
        )

        logger.info(
            "Parsed email",
            extra={
                "json_fields": {
                    "retailer": result.retailer_name,
                    "order_reference": result.order_reference,
                    "tracking_urls": len(result.tracking_urls),
                    "products": len(result.product_descriptions),
                    "images": len(result.product_images),
                    "has_delivery_estimate": result.delivery_info is not None,
                }
            },
        )
        return result

    def parse_email(self, email: InboundEmail) -> ParseResult:
        """Parse an InboundEmail record."""
        return self.parse(
            subject=email.subject,
            body_text=email.body_text,
            body_html=email.body_html,
            received_at=email.created_at,
            from_address=email.from_address,
        )

    def parse_many(self, emails: Iterable[InboundEmail]) -> list[Optional[ParseResult]]:
        """
        Parse a batch of emails.

        An email that fails to parse is logged and yields None; the rest
        of the batch is still parsed.
        """
        results = []
        for index, email in enumerate(emails):
            try:
                results.append(self.parse_email(email))
            except Exception:
                logger.exception(
                    "Failed to parse email %d (subject=%r)", index, email.subject
                )
                results.append(None)
        return results

    @staticmethod
    def build_line_items(result: ParseResult) -> list[LineItem]:
        """
        Turn a parse result into product line items.

        Descriptions that only describe the shipment ("Your package") are
        dropped. Images are matched by alt text, or assigned in order when
        no alt text matches at all.
        """
        products = [d for d in result.product_descriptions if looks_like_product(d)]
        if not products:
            return []

        images = result.product_images
        image_urls: list[Optional[str]] = [None] * len(products)
        if images:
            image_urls = match_images_to_products(images, products)
            if all(url is None for url in image_urls):
                logger.info("No alt text matches, assigning images by position")
                image_urls = [image.url for image in images[: len(products)]]
                image_urls += [None] * (len(products) - len(image_urls))

        return [
            LineItem(description=description, quantity=1, image_url=image_url)
            for description, image_url in zip(products, image_urls)
        ]
