"""
Retailer identification.

Works out which shop an email came from, looking through forwarded
headers for the original sender before falling back to the outer
sender, the body text and finally a name derived from the domain.
"""

import logging
import re

from parcelparse.patterns.retailers import RETAILER_PATTERNS, match_retailer
from parcelparse.utils.merchant import extract_domain_from_email, readable_name_from_domain

logger = logging.getLogger(__name__)

FORWARDED_MARKER_RE = re.compile(
    r"-{2,}\s*(?:Forwarded message|Original Message)\s*-{2,}", re.IGNORECASE
)
FROM_LINE_RE = re.compile(r"^[\s>*]*From:\s*(.+)$", re.IGNORECASE | re.MULTILINE)
# "From: Shop <orders@shop.com>" directly followed by a Date/Sent/To line
BARE_FROM_HEADER_RE = re.compile(
    r"^[\s>*]*From:\s*([^\n]*@[^\n]*)\n[\s>*]*(?:Date|Sent|To):",
    re.IGNORECASE | re.MULTILINE,
)
EMAIL_ADDRESS_RE = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")


def find_forwarded_sender(text: str | None) -> str | None:
    """
    Return the original sender address of a forwarded email.

    Looks for a "Forwarded message" / "Original Message" block first and
    takes its first From: line, then for a bare From: header block.
    """
    if not text:
        return None

    marker = FORWARDED_MARKER_RE.search(text)
    if marker:
        from_line = FROM_LINE_RE.search(text, marker.end())
        if from_line:
            address = EMAIL_ADDRESS_RE.search(from_line.group(1))
            if address:
                return address.group(0)

    header = BARE_FROM_HEADER_RE.search(text)
    if header:
        address = EMAIL_ADDRESS_RE.search(header.group(1))
        if address:
            return address.group(0)

    return None


def identify_retailer(from_address: str | None, text: str | None) -> str | None:
    """
    Identify the retailer behind an email.

    Resolution order, first success wins:
    1. Forwarded original sender matched against known retailers
    2. Outer sender matched against known retailers
    3. Known retailer domain mentioned in the body
    4. Readable name from the forwarded sender's domain
    5. Readable name from the outer sender's domain

    Args:
        from_address: From header of the (possibly forwarding) email
        text: Subject and body text

    Returns:
        Retailer display name, or None
    """
    original_sender = find_forwarded_sender(text)

    for source, candidate in (
        ("forwarded sender", original_sender),
        ("sender", from_address),
        ("body", text),
    ):
        name = match_retailer(candidate, RETAILER_PATTERNS)
        if name:
            logger.debug("Retailer %s identified from %s", name, source)
            return name

    for address in (original_sender, from_address):
        name = readable_name_from_domain(extract_domain_from_email(address))
        if name:
            logger.debug("Retailer %s derived from domain of %s", name, address)
            return name

    return None
