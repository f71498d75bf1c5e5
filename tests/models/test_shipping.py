"""Tests for the shipping-method config model and loaders."""

import logging

import pytest
from pydantic import ValidationError

from parcelparse.models.shipping import (
    ShippingConfig,
    ShippingConfigError,
    find_phrase,
    load_shipping_config,
)


class TestFindPhrase:
    def test_case_insensitive(self):
        assert find_phrase(["royal mail"], "Shipped via Royal Mail") == "royal mail"

    def test_whole_word_only(self):
        assert find_phrase(["ups"], "Join our groups for updates") is None

    def test_hyphenated_phrase(self):
        assert find_phrase(["one-day"], "Prime One-Day delivery") == "one-day"

    def test_first_phrase_wins(self):
        assert find_phrase(["2nd class", "second class"], "second class or 2nd class") == "2nd class"


class TestShippingConfig:
    def test_empty_config(self):
        config = ShippingConfig()
        assert config.is_empty
        assert config.carriers == {}

    def test_preserves_carrier_order(self, shipping_config):
        assert list(shipping_config.carriers)[:2] == ["royal_mail", "dpd"]

    def test_negative_min_days_rejected(self):
        with pytest.raises(ValidationError):
            ShippingConfig.model_validate(
                {"generic_methods": {"bad": {"patterns": ["x"], "min_days": -1}}}
            )

    def test_invalid_day_range_regex_rejected(self):
        with pytest.raises(ValidationError):
            ShippingConfig.model_validate({"day_range_patterns": ["(\\d+"]})

    def test_day_range_needs_group(self):
        with pytest.raises(ValidationError):
            ShippingConfig.model_validate({"day_range_patterns": [r"\d+ days"]})

    def test_is_frozen(self, shipping_config):
        with pytest.raises(ValidationError):
            shipping_config.day_range_patterns = []


class TestFromYaml:
    def test_packaged_config_loads(self, packaged_shipping_config):
        assert "royal_mail" in packaged_shipping_config.carriers
        royal_mail = packaged_shipping_config.carriers["royal_mail"]
        assert royal_mail.methods["second_class"].min_days == 2
        assert packaged_shipping_config.day_range_patterns

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ShippingConfigError):
            ShippingConfig.from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("carriers: [unclosed\n")
        with pytest.raises(ShippingConfigError):
            ShippingConfig.from_yaml(path)

    def test_wrong_shape_raises(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ShippingConfigError):
            ShippingConfig.from_yaml(path)

    def test_empty_file_is_empty_config(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert ShippingConfig.from_yaml(path).is_empty


class TestLoadShippingConfig:
    def test_missing_file_returns_none(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            assert load_shipping_config(tmp_path / "missing.yaml") is None
        assert "not found" in caplog.text

    def test_invalid_file_returns_none(self, tmp_path, caplog):
        path = tmp_path / "bad.yaml"
        path.write_text("generic_methods:\n  express:\n    min_days: -3\n")
        with caplog.at_level(logging.ERROR):
            assert load_shipping_config(path) is None
        assert "Failed to load" in caplog.text

    def test_valid_file(self, tmp_path):
        path = tmp_path / "ok.yaml"
        path.write_text(
            "generic_methods:\n"
            "  express:\n"
            "    patterns: [express]\n"
            "    min_days: 1\n"
        )
        config = load_shipping_config(path)
        assert config is not None
        assert config.generic_methods["express"].min_days == 1

    def test_empty_file_returns_none(self, tmp_path, caplog):
        path = tmp_path / "empty.yaml"
        path.write_text("# no carriers yet\n")
        with caplog.at_level(logging.WARNING):
            assert load_shipping_config(path) is None
        assert "is empty" in caplog.text
