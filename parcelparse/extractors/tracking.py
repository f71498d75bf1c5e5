"""
Tracking-link extraction.

Finds carrier tracking URLs in email text and HTML and attributes each to
a carrier, using in turn the URL shape, nearby carrier names and finally
the shape of the tracking number.
"""

import logging
import re

from bs4 import BeautifulSoup, Comment

from parcelparse.config import CONTEXT_WINDOW_CHARS
from parcelparse.models.extraction import Carrier, TrackingLink
from parcelparse.patterns.carriers import (
    BARE_URL_RE,
    CARRIER_TEXT_ALIASES,
    CARRIER_URL_PATTERNS,
    GENERIC_TRACKING_KEYWORDS_RE,
    GENERIC_URL_RE,
    TRACKING_NUMBER_SIGNATURES,
    TRACKING_NUMBER_URL_PATTERNS,
)
from parcelparse.utils.html import strip_tags
from parcelparse.utils.urls import clean_url, ensure_scheme, is_absolute_http

logger = logging.getLogger(__name__)

# "<carrier> tracking number: <number> ... <url>"
TRACKING_NUMBER_WITH_URL_RE = re.compile(
    r"(?P<hint>[^\n]{0,40}?)\btracking\s*(?:number|no\.?|#|id)\s*:?\s*"
    r"(?P<number>(?=[A-Z0-9]*\d)[A-Z0-9]{8,30})\b"
    r"[\s\S]{0,80}?(?P<url>https?://[^\s\"'<>]+)",
    re.IGNORECASE,
)

# Anchor text that is itself shaped like a tracking number
TRACKING_NUMBER_TOKEN_RE = re.compile(r"\b(?=[A-Z0-9]*\d)(?=[0-9]*[A-Z])[A-Z0-9]{10,30}\b")

# An anchor shortly after the word "tracking"
ANCHOR_AFTER_TRACKING_RE = re.compile(
    r"tracking[\s\S]{0,200}?<a\s[^>]*?href=[\"'](https?://[^\"']+)[\"']",
    re.IGNORECASE,
)


def detect_carrier_from_text(text: str | None) -> Carrier | None:
    """
    Find the first carrier name mentioned in text.

    Aliases are checked in a fixed priority order (Global-e before Royal
    Mail before DHL, ...), so the result does not depend on where in the
    text each name appears.
    """
    if not text:
        return None
    for carrier, pattern in CARRIER_TEXT_ALIASES:
        if pattern.search(text):
            return carrier
    return None


def classify_tracking_number(number: str | None) -> Carrier | None:
    """Identify a carrier from the shape of a tracking number alone."""
    if not number:
        return None
    number = number.strip()
    for carrier, pattern in TRACKING_NUMBER_SIGNATURES:
        if pattern.match(number):
            return carrier
    return None


def extract_tracking_number(url: str | None) -> str | None:
    """
    Pull a tracking number out of a tracking URL.

    Tries query/path keys such as ``trackingNumber=`` and ``/track/`` first,
    then well-known number shapes anywhere in the URL.

    Returns:
        Tracking number, or None if the URL carries none
    """
    if not url:
        return None
    for pattern in TRACKING_NUMBER_URL_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def carrier_for_url(url: str) -> Carrier | None:
    """Carrier whose tracking-URL shape matches url."""
    for entry in CARRIER_URL_PATTERNS:
        for pattern in entry.patterns:
            if pattern.search(url):
                return entry.carrier
    return None


class _LinkCollector:
    """Ordered, URL-keyed accumulator where the first carrier seen is kept."""

    def __init__(self):
        self._links: dict[str, dict] = {}

    def __contains__(self, url: str) -> bool:
        return url in self._links

    def add(self, url: str, carrier: Carrier, tracking_number: str | None = None):
        url = clean_url(url)
        if not is_absolute_http(url):
            return

        existing = self._links.get(url)
        if existing is not None:
            if not existing["tracking_number"] and tracking_number:
                existing["tracking_number"] = tracking_number
            return

        self._links[url] = {
            "carrier": carrier,
            "url": url,
            "tracking_number": tracking_number,
        }

    def unknown(self) -> list[dict]:
        return [link for link in self._links.values() if link["carrier"] == Carrier.UNKNOWN]

    def results(self) -> list[TrackingLink]:
        links = []
        for link in self._links.values():
            number = link["tracking_number"] or extract_tracking_number(link["url"])
            links.append(
                TrackingLink(carrier=link["carrier"], url=link["url"], tracking_number=number)
            )
        return links


def extract_tracking_urls(text: str | None, html: str | None = None) -> list[TrackingLink]:
    """
    Extract tracking links from an email.

    Args:
        text: Plain text (subject and body)
        html: Optional HTML body

    Returns:
        Tracking links in discovery order, one per URL
    """
    text = text or ""
    links = _LinkCollector()

    # Known carrier URL shapes
    for url in _url_candidates(text):
        carrier = carrier_for_url(url)
        if carrier is not None:
            links.add(url, carrier)

    # Any other link that looks like tracking
    for match in GENERIC_URL_RE.finditer(text):
        url = clean_url(match.group(0))
        if url in links or not GENERIC_TRACKING_KEYWORDS_RE.search(url):
            continue
        links.add(url, Carrier.UNKNOWN)

    if html:
        _collect_html_links(html, text, links)

    _enrich_unknown_carriers(links, text, html)

    results = links.results()
    logger.debug(
        "Extracted tracking links",
        extra={"json_fields": {"count": len(results), "carriers": [str(r.carrier) for r in results]}},
    )
    return results


def _url_candidates(text: str) -> list[str]:
    """Absolute and scheme-less links in text, in order of appearance."""
    matches = [*GENERIC_URL_RE.finditer(text), *BARE_URL_RE.finditer(text)]
    matches.sort(key=lambda match: match.start())
    return [clean_url(ensure_scheme(match.group(0))) for match in matches]


def _collect_html_links(html: str, text: str, links: _LinkCollector):
    soup = BeautifulSoup(html, "html.parser")

    # (a) "tracking number: XYZ <url>" ties a number to a URL
    for source in (text, _linkified_text(soup)):
        for match in TRACKING_NUMBER_WITH_URL_RE.finditer(source):
            number = match.group("number")
            carrier = (
                detect_carrier_from_text(match.group("hint"))
                or carrier_for_url(match.group("url"))
                or classify_tracking_number(number)
                or Carrier.UNKNOWN
            )
            links.add(match.group("url"), carrier, number)

    # (b) anchors whose text mentions tracking or shows a tracking number
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not is_absolute_http(href):
            continue
        label = anchor.get_text(" ", strip=True)
        number_match = TRACKING_NUMBER_TOKEN_RE.search(label)
        if not (re.search(r"track", label, re.IGNORECASE) or number_match):
            continue
        carrier = carrier_for_url(href) or Carrier.UNKNOWN
        links.add(href, carrier, number_match.group(0) if number_match else None)

    # (c) any anchor right after the word "tracking"
    for match in ANCHOR_AFTER_TRACKING_RE.finditer(html):
        links.add(match.group(1), Carrier.UNKNOWN)


def _linkified_text(soup: BeautifulSoup) -> str:
    """Page text with each anchor followed by its href."""
    parts = []
    for element in soup.find_all(string=True):
        if isinstance(element, Comment) or element.parent.name in (
            "script",
            "style",
            "head",
            "title",
        ):
            continue
        parts.append(str(element))
        anchor = element.find_parent("a", href=True)
        if anchor is not None and element is anchor.find_all(string=True)[-1]:
            parts.append(f" {anchor['href'].strip()} ")
    return re.sub(r"[ \t]+", " ", "".join(parts))


def _enrich_unknown_carriers(links: _LinkCollector, text: str, html: str | None):
    for link in links.unknown():
        url = link["url"]
        carrier = detect_carrier_from_text(_text_context(text, url))

        if carrier is None and html:
            carrier = detect_carrier_from_text(_html_context(html, url))

        if carrier is None:
            number = link["tracking_number"] or extract_tracking_number(url)
            carrier = classify_tracking_number(number)

        if carrier is not None:
            logger.debug("Attributed %s to %s from context", url, carrier)
            link["carrier"] = carrier


def _text_context(text: str, url: str) -> str:
    index = text.find(url)
    if index < 0:
        index = text.find(url.replace("&", "&amp;"))
    if index < 0:
        return ""
    start = max(0, index - CONTEXT_WINDOW_CHARS)
    end = index + len(url) + CONTEXT_WINDOW_CHARS
    return text[start:index] + " " + text[index + len(url) : end]


def _html_context(html: str, url: str) -> str:
    """Visible text just before the anchor that links to url."""
    index = html.find(url)
    if index < 0:
        index = html.find(url.replace("&", "&amp;"))
    if index < 0:
        return ""
    fragment = html[max(0, index - CONTEXT_WINDOW_CHARS) : index]
    # Drop the opening tag of the anchor itself
    fragment = re.sub(r"<a\s[^>]*$", "", fragment, flags=re.IGNORECASE)
    return strip_tags(fragment)
