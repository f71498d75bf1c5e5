"""
Logging configuration for parcelparse.

Batch ingestion workers usually run on Cloud Run, where logs written to
Cloud Logging keep their structured fields. Locally, logs go to stdout with
any ``json_fields`` extra printed under the message.
"""

import json
import logging
import os
import sys

# Flag to track if logging is already configured
_logging_configured = False


class LocalFormatter(logging.Formatter):
    """Formatter that appends the ``json_fields`` extra as pretty JSON."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        json_fields = getattr(record, "json_fields", None)
        if json_fields:
            fields_str = json.dumps(json_fields, indent=2, default=str)
            message = f"{message}\n{fields_str}"

        return message


def setup_logging(service_name: str = "parcelparse", level: int = logging.INFO):
    """
    Configure root logging once per process.

    On Cloud Run (``K_SERVICE`` set) logs are routed through
    google-cloud-logging. Everywhere else a stdout handler is installed.

    Args:
        service_name: Service label on Cloud Logging entries and prefix of
            local log lines
        level: Root log level
    """
    global _logging_configured

    if _logging_configured:
        return

    is_gcp = bool(os.getenv("K_SERVICE"))

    if is_gcp:
        _setup_cloud_logging(service_name, level)
    else:
        _setup_local_logging(service_name, level)

    _logging_configured = True


def _setup_cloud_logging(service_name: str, level: int):
    """Configure logging for Cloud Run using google-cloud-logging."""
    try:
        import google.cloud.logging

        client = google.cloud.logging.Client()
        client.setup_logging(log_level=level, labels={"service": service_name})

        logging.info("Cloud Logging configured for service: %s", service_name)
    except Exception as e:
        # Credentials or metadata server unavailable
        _setup_local_logging(service_name, level)
        logging.warning("Failed to setup Cloud Logging, using local logging: %s", e)


def _setup_local_logging(service_name: str, level: int):
    """Configure logging for local runs, prefixing each line with the service."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        LocalFormatter(
            f"%(asctime)s - {service_name} - %(name)s - %(levelname)s - %(message)s"
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
