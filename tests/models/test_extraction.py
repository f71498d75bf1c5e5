"""Tests for extraction result models."""

from datetime import date

import pytest
from pydantic import ValidationError

from parcelparse.models.extraction import (
    Carrier,
    DeliveryEstimate,
    DeliverySource,
    ParseResult,
    ProductImage,
    TrackingLink,
)


class TestTrackingLink:
    def test_defaults_to_unknown_carrier(self):
        link = TrackingLink(url="https://example.com/track/1")
        assert link.carrier == Carrier.UNKNOWN
        assert link.tracking_number is None

    def test_is_frozen(self):
        link = TrackingLink(carrier=Carrier.DHL, url="https://dhl.com/track")
        with pytest.raises(ValidationError):
            link.carrier = Carrier.UPS

    def test_serializes_carrier_as_string(self):
        link = TrackingLink(carrier=Carrier.ROYAL_MAIL, url="https://royalmail.com/track")
        assert link.model_dump(mode="json")["carrier"] == "royal_mail"


class TestProductImage:
    def test_area(self):
        assert ProductImage(url="https://x.com/a.jpg", width=200, height=300).area == 60000

    def test_area_missing_dimension(self):
        assert ProductImage(url="https://x.com/a.jpg", width=200).area == 0


class TestDeliveryEstimate:
    def test_confidence_bounds(self):
        with pytest.raises(ValidationError):
            DeliveryEstimate(
                estimated_delivery=date(2026, 1, 28),
                confidence=1.5,
                source=DeliverySource.EXPLICIT_DATE,
                raw_match="x",
            )

    def test_json_dump(self):
        estimate = DeliveryEstimate(
            estimated_delivery=date(2026, 1, 28),
            confidence=0.9,
            source=DeliverySource.EXPLICIT_DATE,
            raw_match="Estimated delivery date: 2026-01-28",
        )
        dumped = estimate.model_dump(mode="json")
        assert dumped["estimated_delivery"] == "2026-01-28"
        assert dumped["source"] == "explicit_date"
        assert dumped["shipping_method"] is None


class TestParseResult:
    def test_empty_result(self):
        result = ParseResult()
        assert result.tracking_urls == []
        assert result.order_reference is None
        assert result.delivery_info is None
