"""Tests for product URL extraction."""

from parcelparse.extractors.product_urls import (
    clean_product_url,
    extract_product_urls,
    is_excluded,
)
from parcelparse.models.extraction import ProductUrl


class TestExtractProductUrls:
    def test_amazon(self):
        urls = extract_product_urls("View item: https://www.amazon.co.uk/dp/B09B8V1LZ3?ref=abc")
        assert urls == [
            ProductUrl(
                url="https://www.amazon.co.uk/dp/B09B8V1LZ3",
                retailer="amazon",
                product_id="B09B8V1LZ3",
            )
        ]

    def test_asos(self):
        urls = extract_product_urls("https://www.asos.com/nike/nike-air-max/prd/204912345")
        assert urls[0].retailer == "asos"
        assert urls[0].product_id == "204912345"

    def test_http_upgraded_and_known_retailer_not_generic(self):
        urls = extract_product_urls("http://www.argos.co.uk/product/8349024")
        assert urls == [
            ProductUrl(
                url="https://www.argos.co.uk/product/8349024",
                retailer="argos",
                product_id="8349024",
            )
        ]

    def test_generic_shop(self):
        urls = extract_product_urls(
            "Shop again: https://www.boutique-shop.co.uk/products/linen-shirt-blue?utm_source=email"
        )
        assert urls == [
            ProductUrl(
                url="https://www.boutique-shop.co.uk/products/linen-shirt-blue",
                retailer="boutique-shop",
                product_id=None,
            )
        ]

    def test_excluded_links(self):
        text = (
            "https://shop.example.com/products/cart\n"
            "https://shop.example.com/products/shirt.jpg\n"
            "https://shop.example.com/help/item/returns"
        )
        assert extract_product_urls(text) == []

    def test_trailing_punctuation(self):
        urls = extract_product_urls("(https://www.asos.com/x/prd/123).")
        assert urls[0].url == "https://www.asos.com/x/prd/123"

    def test_duplicates(self):
        url = "https://www.asos.com/x/prd/123"
        assert len(extract_product_urls(f"{url}\n{url}")) == 1

    def test_no_text(self):
        assert extract_product_urls(None) == []


class TestCleanProductUrl:
    def test_drops_marketing_params(self):
        url = clean_product_url("http://shop.example.com/p/lamp?tag=x&color=red,")
        assert url == "https://shop.example.com/p/lamp?color=red"


class TestIsExcluded:
    def test_help_page(self):
        assert is_excluded("https://shop.example.com/help/returns")

    def test_product_page(self):
        assert not is_excluded("https://shop.example.com/products/lamp")
