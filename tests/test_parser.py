"""Tests for the email parser."""

import logging
import time
from datetime import date

import pytest

from parcelparse import parser as parser_module
from parcelparse.extractors.products import dedup_key
from parcelparse.models.extraction import (
    Carrier,
    DeliverySource,
    InboundEmail,
    LineItem,
    ParseResult,
    ProductImage,
)
from parcelparse.parser import EmailParser, combined_text

AMAZON_BODY = """Order #AMZ-123-456 has shipped!

Items:
- Echo Dot Smart Speaker
Color: Charcoal

Track your package:
https://www.amazon.co.uk/progress-tracker/package/ref=xyz
"""

ASOS_HTML = """
<html><body>
<p>Your order from ASOS</p>
<p>Order number: 123456789</p>
<a href="https://www.royalmail.com/track-your-item?trackNumber=AB123456789GB">Track parcel</a>
<img src="https://images.asos-media.com/products/jeans/1.jpg" alt="Slim Jeans" width="300" height="300">
</body></html>
"""


@pytest.fixture
def parser():
    return EmailParser()


class TestParse:
    def test_amazon_shipping_email(self, parser):
        result = parser.parse(
            subject="Your Amazon order has shipped",
            body_text=AMAZON_BODY,
            from_address="shipping@amazon.co.uk",
        )

        assert result.order_reference == "AMZ-123-456"
        assert result.retailer_name == "Amazon"
        assert any("Echo Dot" in d for d in result.product_descriptions)
        assert [link.carrier for link in result.tracking_urls] == [Carrier.AMAZON]
        assert result.delivery_info is None

    def test_html_only_email(self, parser):
        result = parser.parse(
            subject="Your ASOS order", body_html=ASOS_HTML, from_address="orders@asos.com"
        )

        assert result.retailer_name == "ASOS"
        assert result.order_reference == "123456789"
        assert result.tracking_urls[0].carrier == Carrier.ROYAL_MAIL
        assert result.tracking_urls[0].tracking_number == "AB123456789GB"
        assert [image.alt_text for image in result.product_images] == ["Slim Jeans"]

    def test_subject_is_searched(self, parser):
        result = parser.parse(subject="Order #SUBJ123456 confirmed", body_text="Thanks!")
        assert result.order_reference == "SUBJ123456"

    def test_delivery_uses_received_date(self, shipping_config, email_date):
        result = EmailParser(shipping_config).parse(
            subject="Dispatched",
            body_text="Sent with Royal Mail 1st Class",
            received_at=email_date,
        )
        assert result.delivery_info.estimated_delivery == date(2026, 1, 23)
        assert result.delivery_info.source == DeliverySource.SHIPPING_METHOD

    def test_empty_email(self, parser):
        assert parser.parse() == ParseResult()

    def test_idempotent(self, parser):
        kwargs = dict(
            subject="Your Amazon order has shipped",
            body_text=AMAZON_BODY,
            from_address="shipping@amazon.co.uk",
        )
        assert parser.parse(**kwargs) == parser.parse(**kwargs)

    def test_description_invariants(self, parser):
        body = "\n".join(f"- Widget Model {chr(65 + i)}" for i in range(15))
        body += "\n- widget model a\n2x Widget Model B"
        result = parser.parse(subject="Order confirmed", body_text=body)

        keys = [dedup_key(d) for d in result.product_descriptions]
        assert len(keys) <= 10
        assert len(keys) == len(set(keys))

    def test_logs_summary(self, parser, caplog):
        caplog.set_level(logging.INFO, logger="parcelparse.parser")
        parser.parse(subject="Your Amazon order has shipped", body_text=AMAZON_BODY)

        record = next(r for r in caplog.records if r.getMessage() == "Parsed email")
        assert record.json_fields["order_reference"] == "AMZ-123-456"
        assert record.json_fields["tracking_urls"] == 1

    def test_long_token_body(self, parser):
        body = "Tracking ref " + "a1b2" * 12500

        start = time.perf_counter()
        result = parser.parse(subject="Your parcel is on its way", body_text=body)
        elapsed = time.perf_counter() - start

        assert result.tracking_urls == []
        assert elapsed < 2.0


class TestParseEmail:
    def test_matches_parse(self, parser, email_date):
        email = InboundEmail(
            subject="Your Amazon order has shipped",
            from_address="shipping@amazon.co.uk",
            body_text=AMAZON_BODY,
            created_at=email_date,
        )
        assert parser.parse_email(email) == parser.parse(
            subject=email.subject,
            body_text=AMAZON_BODY,
            from_address=email.from_address,
            received_at=email_date,
        )


class TestParseMany:
    def test_failure_does_not_stop_batch(self, parser, monkeypatch, caplog):
        original = parser_module.extract_order_reference

        def flaky(text):
            if "boom" in text:
                raise RuntimeError("extractor failed")
            return original(text)

        monkeypatch.setattr(parser_module, "extract_order_reference", flaky)

        emails = [
            InboundEmail(subject="Order #GOOD123456", body_text="Thanks"),
            InboundEmail(subject="boom", body_text="Thanks"),
            InboundEmail(subject="Order #ALSO123456", body_text="Thanks"),
        ]
        results = parser.parse_many(emails)

        assert results[0].order_reference == "GOOD123456"
        assert results[1] is None
        assert results[2].order_reference == "ALSO123456"
        assert "Failed to parse email 1" in caplog.text


class TestFromConfig:
    def test_packaged_config(self):
        parser = EmailParser.from_config()
        assert parser.shipping_config is not None
        assert "royal_mail" in parser.shipping_config.carriers

    def test_missing_config(self, tmp_path, caplog):
        parser = EmailParser.from_config(tmp_path / "missing.yaml")
        assert parser.shipping_config is None
        assert "not found" in caplog.text


class TestBuildLineItems:
    def test_generic_descriptions_dropped(self):
        result = ParseResult(product_descriptions=["Your package", "Item from Amazon"])
        assert EmailParser.build_line_items(result) == []

    def test_images_matched_by_alt_text(self):
        result = ParseResult(
            product_descriptions=["Blue Shirt", "Red Pants"],
            product_images=[
                ProductImage(url="https://cdn.example.com/shirt.jpg", alt_text="Blue Shirt"),
                ProductImage(url="https://cdn.example.com/card.jpg", alt_text="Gift card"),
            ],
        )
        assert EmailParser.build_line_items(result) == [
            LineItem(description="Blue Shirt", image_url="https://cdn.example.com/shirt.jpg"),
            LineItem(description="Red Pants", image_url=None),
        ]

    def test_images_assigned_by_position_without_alt_matches(self):
        result = ParseResult(
            product_descriptions=["Wool Scarf", "Leather Gloves", "Beanie Hat"],
            product_images=[
                ProductImage(url="https://cdn.example.com/a.jpg"),
                ProductImage(url="https://cdn.example.com/b.jpg"),
            ],
        )
        items = EmailParser.build_line_items(result)
        assert [item.image_url for item in items] == [
            "https://cdn.example.com/a.jpg",
            "https://cdn.example.com/b.jpg",
            None,
        ]
        assert all(item.quantity == 1 for item in items)

    def test_no_images(self):
        result = ParseResult(product_descriptions=["Wool Scarf"])
        assert EmailParser.build_line_items(result) == [LineItem(description="Wool Scarf")]


class TestCombinedText:
    def test_subject_and_text(self):
        assert combined_text("Hi", "Body", "<p>Ignored</p>") == "Hi\nBody"

    def test_html_fallback(self):
        assert combined_text("Hi", "  ", "<p>From HTML</p>") == "Hi\nFrom HTML"

    def test_nothing(self):
        assert combined_text(None, None, None) == ""
