"""
Delivery date extraction.

Strategies are tried in order and the first that produces a date wins:

1. Explicit dates ("Estimated delivery: 2026-01-28", "Arriving Friday")
2. Relative days ("tomorrow", "next Monday")
3. Shipping method ("Royal Mail 2nd Class") plus business days
4. Day ranges ("3-5 business days"), using the lower bound

An estimate that falls before the email's own date is discarded.
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta

from parcelparse.config import MAX_DAY_RANGE
from parcelparse.models.extraction import DeliveryEstimate, DeliverySource
from parcelparse.models.shipping import ShippingConfig, ShippingMethod
from parcelparse.utils.dates import add_business_days

logger = logging.getLogger(__name__)

CONFIDENCE_EXPLICIT_DATE = 0.9
CONFIDENCE_SHIPPING_METHOD = 0.7
CONFIDENCE_GENERIC_METHOD = 0.6
CONFIDENCE_DAY_RANGE = 0.6

MONTH_NAMES = (
    r"Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?|"
    r"Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?"
)
DAY_NAMES = (
    r"Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday|"
    r"Mon|Tue|Wed|Thu|Fri|Sat|Sun"
)

# Month and day names as dateutil reads them ("Sept", "Thu", ...)
DATE_NAMES = date_parser.parserinfo(dayfirst=True)
WEEKDAYS = (MO, TU, WE, TH, FR, SA, SU)

_DELIVERY_PREFIX = r"(?:estimated\s+)?(?:delivery|arrival|arriving|deliver(?:ed)?)\s*(?:date|by)?"
_NATURAL_PREFIX = (
    r"(?:estimated\s+)?(?:delivery|arrival|arriving|arrives?|deliver(?:ed)?|expected)"
    r"\s*(?:date|by)?"
)
_ORDINAL = r"(?:st|nd|rd|th)?"

# Group 1 of each pattern is the date text
EXPLICIT_DATE_PATTERNS = [
    # 2026-01-28
    re.compile(rf"{_DELIVERY_PREFIX}[:\s]+(\d{{4}}-\d{{2}}-\d{{2}})", re.IGNORECASE),
    # 28/01/2026 or 28-01-2026
    re.compile(rf"{_DELIVERY_PREFIX}[:\s]+(\d{{1,2}}[/-]\d{{1,2}}[/-]\d{{4}})", re.IGNORECASE),
    # January 28, 2026
    re.compile(
        rf"{_NATURAL_PREFIX}[:\s]*((?:{MONTH_NAMES})\s+\d{{1,2}}{_ORDINAL},?\s*\d{{4}})",
        re.IGNORECASE,
    ),
    # 28 January 2026
    re.compile(
        rf"{_NATURAL_PREFIX}[:\s]*(\d{{1,2}}{_ORDINAL}\s+(?:{MONTH_NAMES}),?\s*\d{{4}})",
        re.IGNORECASE,
    ),
    # Arriving January 28
    re.compile(
        rf"(?:arriving|arrives?|expected|delivery)[:\s]*((?:{MONTH_NAMES})\s+\d{{1,2}}{_ORDINAL})\b",
        re.IGNORECASE,
    ),
    # Arriving 28 January
    re.compile(
        rf"(?:arriving|arrives?|expected|delivery)[:\s]*(\d{{1,2}}{_ORDINAL}\s+(?:{MONTH_NAMES}))\b",
        re.IGNORECASE,
    ),
    # by January 28 / on January 28, 2026
    re.compile(
        rf"\b(?:by|on)\s+((?:{MONTH_NAMES})\s+\d{{1,2}}{_ORDINAL}(?:,?\s*\d{{4}})?)\b",
        re.IGNORECASE,
    ),
    # by 28 January / on 28th January 2026
    re.compile(
        rf"\b(?:by|on)\s+(\d{{1,2}}{_ORDINAL}\s+(?:{MONTH_NAMES})(?:,?\s*\d{{4}})?)\b",
        re.IGNORECASE,
    ),
    # Arriving Friday
    re.compile(
        rf"(?:arriving|arrives?|expected|delivery)\s*(?:on)?\s*({DAY_NAMES})\b",
        re.IGNORECASE,
    ),
]

RELATIVE_DATE_PATTERNS = [
    re.compile(r"\b(today|tomorrow)\b", re.IGNORECASE),
    re.compile(rf"\b((?:this|next)\s+(?:{DAY_NAMES}))\b", re.IGNORECASE),
]

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
YEAR_RE = re.compile(r"\b\d{4}\b")
ORDINAL_SUFFIX_RE = re.compile(r"(\d+)(?:st|nd|rd|th)", re.IGNORECASE)


class DeliveryDateExtractor:
    """
    Estimate the delivery date stated or implied by an email.

    Without a shipping config only the explicit and relative date
    strategies run.
    """

    def __init__(self, shipping_config: Optional[ShippingConfig] = None):
        self.shipping_config = shipping_config

    def extract(
        self, email_body: str | None, email_date: date | datetime | None = None
    ) -> Optional[DeliveryEstimate]:
        """
        Estimate the delivery date for one email.

        Args:
            email_body: Email text
            email_date: When the email was received (defaults to today)

        Returns:
            DeliveryEstimate, or None when nothing usable is found
        """
        body = email_body or ""
        email_date = _as_date(email_date)
        if not body.strip():
            return None

        strategies: list[Callable[[str, date], Optional[DeliveryEstimate]]] = [
            self._explicit_date,
            self._relative_date,
            self._shipping_method,
            self._day_range,
        ]

        for strategy in strategies:
            estimate = strategy(body, email_date)
            if estimate is None:
                continue

            if estimate.estimated_delivery < email_date:
                logger.info(
                    "Extracted delivery date %s is before email date %s, discarding",
                    estimate.estimated_delivery,
                    email_date,
                )
                return None

            logger.debug(
                "Delivery estimate %s from %s (%r)",
                estimate.estimated_delivery,
                estimate.source,
                estimate.raw_match,
            )
            return estimate

        return None

    def _explicit_date(self, body: str, email_date: date) -> Optional[DeliveryEstimate]:
        for pattern in EXPLICIT_DATE_PATTERNS:
            match = pattern.search(body)
            if not match:
                continue

            parsed = self.parse_date_string(match.group(1), email_date)
            if parsed is None:
                continue

            return DeliveryEstimate(
                estimated_delivery=parsed,
                confidence=CONFIDENCE_EXPLICIT_DATE,
                source=DeliverySource.EXPLICIT_DATE,
                raw_match=match.group(0),
            )
        return None

    def _relative_date(self, body: str, email_date: date) -> Optional[DeliveryEstimate]:
        for pattern in RELATIVE_DATE_PATTERNS:
            match = pattern.search(body)
            if not match:
                continue

            parsed = self.parse_relative_date(match.group(1), email_date)
            if parsed is None:
                continue

            return DeliveryEstimate(
                estimated_delivery=parsed,
                confidence=CONFIDENCE_EXPLICIT_DATE,
                source=DeliverySource.EXPLICIT_DATE,
                raw_match=match.group(0),
            )
        return None

    def _shipping_method(self, body: str, email_date: date) -> Optional[DeliveryEstimate]:
        if self.shipping_config is None:
            return None

        for carrier_name, carrier in self.shipping_config.carriers.items():
            if not carrier.match(body):
                continue
            for method_name, method in carrier.methods.items():
                estimate = self._method_estimate(
                    method,
                    body,
                    email_date,
                    f"{carrier_name}/{method_name}",
                    CONFIDENCE_SHIPPING_METHOD,
                )
                if estimate:
                    return estimate

        for method_name, method in self.shipping_config.generic_methods.items():
            estimate = self._method_estimate(
                method,
                body,
                email_date,
                f"generic/{method_name}",
                CONFIDENCE_GENERIC_METHOD,
            )
            if estimate:
                return estimate

        return None

    @staticmethod
    def _method_estimate(
        method: ShippingMethod,
        body: str,
        email_date: date,
        key: str,
        confidence: float,
    ) -> Optional[DeliveryEstimate]:
        matched = method.match(body)
        if matched is None:
            return None
        return DeliveryEstimate(
            estimated_delivery=add_business_days(email_date, method.min_days),
            confidence=confidence,
            source=DeliverySource.SHIPPING_METHOD,
            shipping_method=key,
            raw_match=matched,
        )

    def _day_range(self, body: str, email_date: date) -> Optional[DeliveryEstimate]:
        if self.shipping_config is None:
            return None

        for pattern_str in self.shipping_config.day_range_patterns:
            try:
                match = re.search(pattern_str, body, re.IGNORECASE)
            except re.error as e:
                logger.warning("Skipping invalid day range pattern %r: %s", pattern_str, e)
                continue
            if not match:
                continue

            try:
                min_days = int(match.group(1))
            except (IndexError, TypeError, ValueError):
                continue
            if min_days <= 0 or min_days > MAX_DAY_RANGE:
                continue

            return DeliveryEstimate(
                estimated_delivery=add_business_days(email_date, min_days),
                confidence=CONFIDENCE_DAY_RANGE,
                source=DeliverySource.DAY_RANGE,
                raw_match=match.group(0),
            )
        return None

    @staticmethod
    def parse_date_string(date_str: str | None, email_date: date) -> Optional[date]:
        """
        Parse the date text captured by an explicit-date pattern.

        Handles ISO, day-first numeric (UK), "January 28[, 2026]",
        "28 January[ 2026]" and bare weekday names. A date without a year
        is placed in the email's year, or the next one if that would be
        before the email date.
        """
        if not date_str or not date_str.strip():
            return None

        cleaned = ORDINAL_SUFFIX_RE.sub(r"\1", date_str.strip())
        cleaned = re.sub(r"\s+", " ", cleaned)

        weekday = DATE_NAMES.weekday(cleaned) if cleaned.isalpha() else None
        if weekday is not None:
            return _next_weekday(email_date, weekday, allow_today=False)

        try:
            if ISO_DATE_RE.match(cleaned):
                # dayfirst would read 2026-02-05 as the 2nd of May
                return date_parser.isoparse(cleaned).date()

            parsed = date_parser.parse(
                cleaned,
                parserinfo=DATE_NAMES,
                default=datetime(email_date.year, 1, 1),
            ).date()
        except (ValueError, OverflowError) as e:
            logger.debug("Unparseable delivery date %r: %s", date_str, e)
            return None

        if not YEAR_RE.search(cleaned) and parsed < email_date:
            parsed += relativedelta(years=1)
        return parsed

    @staticmethod
    def parse_relative_date(relative_str: str, email_date: date) -> Optional[date]:
        """Resolve "today", "tomorrow", "this <day>" or "next <day>"."""
        relative = relative_str.strip().lower()

        if relative == "today":
            return email_date
        if relative == "tomorrow":
            return email_date + timedelta(days=1)

        match = re.match(r"(this|next)\s+(\w+)", relative)
        if not match:
            return None

        weekday = DATE_NAMES.weekday(match.group(2))
        if weekday is None:
            return None

        # "next Thursday" on a Thursday means a week later
        return _next_weekday(email_date, weekday, allow_today=match.group(1) == "this")


def _next_weekday(start: date, weekday: int, allow_today: bool) -> date:
    """
    Nearest date on or after start falling on weekday.

    A bare weekday mention on that same weekday ("Arriving Thursday" sent
    on a Thursday) means the following week, so allow_today is False there.
    """
    return start + relativedelta(days=0 if allow_today else 1, weekday=WEEKDAYS[weekday])


def _as_date(value: date | datetime | None) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value
