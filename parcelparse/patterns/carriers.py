"""
Carrier tables: tracking-URL shapes, text aliases and tracking-number
signatures.

Each entry is data, so supporting a new carrier means adding rows here.
"""

import re
from typing import NamedTuple

from parcelparse.models.extraction import Carrier

# URL characters up to whitespace, quotes or tag delimiters
_URL_CHARS = r"[^\s\"'<>]"


def _host(body: str) -> re.Pattern:
    # Searched inside an already isolated URL; the domain must not be the
    # tail of a longer label ("notevri.com")
    return re.compile(rf"(?<![\w-]){body}", re.IGNORECASE)


class CarrierUrlPatterns(NamedTuple):
    carrier: Carrier
    patterns: tuple[re.Pattern, ...]


# Tried in order against each candidate URL; the first row that matches wins
CARRIER_URL_PATTERNS: list[CarrierUrlPatterns] = [
    CarrierUrlPatterns(
        Carrier.ROYAL_MAIL,
        (
            _host(r"royalmail\.com/track"),
            _host(r"parcelforce\.com/track"),
        ),
    ),
    CarrierUrlPatterns(
        Carrier.DHL,
        (
            _host(rf"dhl\.(?:com|co\.uk|de)/{_URL_CHARS}*track"),
            _host(r"webtrack\.dhlglobalmail\.com"),
        ),
    ),
    CarrierUrlPatterns(
        Carrier.UPS,
        (
            _host(r"ups\.com/track"),
            _host(r"ups\.com/WebTracking"),
        ),
    ),
    CarrierUrlPatterns(
        Carrier.FEDEX,
        (_host(rf"fedex\.com/{_URL_CHARS}*track"),),
    ),
    CarrierUrlPatterns(
        Carrier.USPS,
        (
            _host(r"tools\.usps\.com/go/TrackConfirmAction"),
            _host(rf"usps\.com/{_URL_CHARS}*track"),
        ),
    ),
    CarrierUrlPatterns(
        Carrier.AMAZON,
        (
            _host(rf"amazon\.(?:com|co\.uk|de|fr){_URL_CHARS}*progress-tracker"),
            _host(rf"amazon\.(?:com|co\.uk|de|fr){_URL_CHARS}*/gp/css/shiptrack"),
            _host(r"track\.amazon\.(?:com|co\.uk)"),
        ),
    ),
    CarrierUrlPatterns(
        Carrier.DPD,
        (
            _host(r"dpd\.(?:co\.uk|com)/track"),
            _host(r"track\.dpd\.(?:co\.uk|com)"),
        ),
    ),
    CarrierUrlPatterns(
        Carrier.EVRI,
        (
            _host(r"myhermes\.co\.uk/track"),
            _host(r"evri\.com/track"),
        ),
    ),
    CarrierUrlPatterns(
        Carrier.YODEL,
        (_host(r"yodel\.co\.uk/track"),),
    ),
    CarrierUrlPatterns(
        Carrier.GLOBAL_E,
        (_host(rf"global-e\.com/{_URL_CHARS}*track"),),
    ),
]

# Absolute links
GENERIC_URL_RE = re.compile(rf"https?://{_URL_CHARS}+", re.IGNORECASE)
# Scheme-less links such as "www.evri.com/track/...". The lookbehind keeps a
# match from starting inside a word, a host or an email address, so each run
# of URL characters is scanned from one position only.
BARE_URL_RE = re.compile(
    rf"(?<![\w@/.:-])(?:[a-z0-9-]+\.)+[a-z]{{2,}}(?:/{_URL_CHARS}*)?", re.IGNORECASE
)
GENERIC_TRACKING_KEYWORDS_RE = re.compile(r"track|delivery|shipment|parcel", re.IGNORECASE)

# Carrier names as they appear in email text, in priority order
CARRIER_TEXT_ALIASES: list[tuple[Carrier, re.Pattern]] = [
    (Carrier.GLOBAL_E, re.compile(r"\bglobal-?e\b", re.IGNORECASE)),
    (Carrier.ROYAL_MAIL, re.compile(r"\broyal\s*mail\b", re.IGNORECASE)),
    (Carrier.DHL, re.compile(r"\bdhl\b", re.IGNORECASE)),
    (Carrier.UPS, re.compile(r"\bups\b", re.IGNORECASE)),
    (Carrier.FEDEX, re.compile(r"\bfed\s*ex\b", re.IGNORECASE)),
    (Carrier.DPD, re.compile(r"\bdpd\b", re.IGNORECASE)),
    (Carrier.EVRI, re.compile(r"\b(?:evri|hermes)\b", re.IGNORECASE)),
    (Carrier.USPS, re.compile(r"\busps\b", re.IGNORECASE)),
    (Carrier.YODEL, re.compile(r"\byodel\b", re.IGNORECASE)),
]

# Tracking-number shapes that identify a carrier on their own
TRACKING_NUMBER_SIGNATURES: list[tuple[Carrier, re.Pattern]] = [
    (Carrier.GLOBAL_E, re.compile(r"^LTN[A-Z0-9]+$", re.IGNORECASE)),
    (Carrier.ROYAL_MAIL, re.compile(r"^[A-Z]{2}\d{9}[A-Z]{2}$")),
    (Carrier.UPS, re.compile(r"^1Z[A-Z0-9]{16}$")),
    (Carrier.AMAZON, re.compile(r"^TBA\d{10,}$")),
]

# Tracking numbers embedded in tracking URLs, most specific first.
# Path/query tokens must contain a digit so "tracking/tracking-express"
# does not yield "tracking".
_TOKEN = r"(?=[A-Z0-9]*\d)([A-Z0-9]{6,})"

TRACKING_NUMBER_URL_PATTERNS: list[re.Pattern] = [
    re.compile(rf"tracking[_-]?(?:number|id|no)?[=/]{_TOKEN}", re.IGNORECASE),
    re.compile(rf"track(?:num(?:ber)?)?[=/]{_TOKEN}", re.IGNORECASE),
    re.compile(rf"shipment(?:id)?[=/]{_TOKEN}", re.IGNORECASE),
    re.compile(r"\b([A-Z]{2}\d{9}[A-Z]{2})\b"),
    re.compile(r"\b(1Z[A-Z0-9]{16})\b"),
    re.compile(r"\b(LTN[A-Z0-9]{6,})\b"),
    re.compile(r"\b(\d{12,22})\b"),
]
