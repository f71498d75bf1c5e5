"""
Tests for domain and merchant-name helpers.
"""

from parcelparse.utils.merchant import (
    extract_domain_from_email,
    primary_domain_label,
    readable_name_from_domain,
)


class TestExtractDomainFromEmail:
    """Tests for extract_domain_from_email function."""

    def test_bare_address(self):
        assert extract_domain_from_email("orders@ASOS.com") == "asos.com"

    def test_display_name_form(self):
        assert extract_domain_from_email("Zara <noreply@zara.com>") == "zara.com"

    def test_no_address(self):
        assert extract_domain_from_email("Zara") is None

    def test_none(self):
        assert extract_domain_from_email(None) is None


class TestPrimaryDomainLabel:
    """Tests for primary_domain_label function."""

    def test_dot_com(self):
        assert primary_domain_label("https://shop.example.com/products/x") == "example"

    def test_co_uk(self):
        assert primary_domain_label("https://www.example.co.uk/p/x") == "example"

    def test_no_host(self):
        assert primary_domain_label("/relative/path") is None


class TestReadableNameFromDomain:
    """Tests for readable_name_from_domain function."""

    def test_hyphenated_domain(self):
        assert readable_name_from_domain("boutique-clothing.com") == "Boutique Clothing"

    def test_strips_sender_subdomain(self):
        """Mail-sending subdomains like orders. never end up in the name."""
        name = readable_name_from_domain("orders.fashionstore.com")
        assert name == "Fashionstore"

    def test_strips_nested_sender_subdomains(self):
        assert readable_name_from_domain("noreply.mail.homeshop.co.uk") == "Homeshop"

    def test_acronym(self):
        assert readable_name_from_domain("asos.com") == "ASOS"

    def test_acronym_word_among_others(self):
        assert readable_name_from_domain("dhl-parcel.co.uk") == "DHL Parcel"

    def test_mixed_case_domain(self):
        assert readable_name_from_domain("Shop.HomeShop.com") == "Homeshop"

    def test_too_short(self):
        assert readable_name_from_domain("ab.com") is None

    def test_none(self):
        assert readable_name_from_domain(None) is None
