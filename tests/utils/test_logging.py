"""Tests for logging setup."""

import logging

import pytest

from parcelparse.utils import logging as logging_utils
from parcelparse.utils.logging import LocalFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord("parcelparse.test", logging.INFO, __file__, 1, "Parsed email", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLocalFormatter:
    def test_appends_json_fields(self):
        formatter = LocalFormatter("%(message)s")
        output = formatter.format(_record(json_fields={"retailer": "ASOS"}))
        assert output.startswith("Parsed email\n")
        assert '"retailer": "ASOS"' in output

    def test_plain_message(self):
        assert LocalFormatter("%(message)s").format(_record()) == "Parsed email"


class TestSetupLogging:
    @pytest.fixture
    def root_handlers(self, monkeypatch):
        monkeypatch.setattr(logging_utils, "_logging_configured", False)
        monkeypatch.delenv("K_SERVICE", raising=False)
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        yield root
        root.handlers[:] = before
        root.setLevel(level)

    def test_configures_once(self, root_handlers):
        count = len(root_handlers.handlers)
        setup_logging(level=logging.DEBUG)
        setup_logging(level=logging.DEBUG)

        assert len(root_handlers.handlers) == count + 1
        assert isinstance(root_handlers.handlers[-1].formatter, LocalFormatter)
        assert root_handlers.level == logging.DEBUG

    def test_local_lines_carry_service_name(self, root_handlers):
        setup_logging(service_name="ingest-worker")

        output = root_handlers.handlers[-1].format(_record())
        assert " - ingest-worker - parcelparse.test - INFO - Parsed email" in output

    def test_cloud_entries_labelled_with_service(self, root_handlers, monkeypatch):
        calls = []

        class FakeClient:
            def setup_logging(self, **kwargs):
                calls.append(kwargs)

        monkeypatch.setenv("K_SERVICE", "ingest")
        monkeypatch.setattr("google.cloud.logging.Client", FakeClient)

        setup_logging(service_name="ingest-worker", level=logging.DEBUG)

        assert calls == [{"log_level": logging.DEBUG, "labels": {"service": "ingest-worker"}}]
