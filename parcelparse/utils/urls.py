"""URL cleanup shared by the tracking, product-URL and product-page extractors."""

import re
from urllib.parse import unquote_plus, urlsplit, urlunsplit

TRAILING_PUNCTUATION_RE = re.compile(r"[.,;:!?\])}>\"']+$")

# Query parameters added by marketing/analytics tools
TRACKING_PARAMS = frozenset(
    {
        "utm_source",
        "utm_medium",
        "utm_campaign",
        "utm_term",
        "utm_content",
        "gclid",
        "gbraid",
        "gad_source",
        "gad_campaignid",
        "fbclid",
        "fb_action_ids",
        "fb_action_types",
        "fb_source",
        "mc_cid",
        "mc_eid",
        "ref",
        "ref_src",
        "ref_url",
        "_ga",
        "_gl",
    }
)


def clean_url(url: str) -> str:
    """Strip trailing punctuation and decode ``&amp;`` artifacts left by HTML."""
    url = url.strip()
    url = url.replace("&amp;", "&")
    return TRAILING_PUNCTUATION_RE.sub("", url)


def ensure_scheme(url: str) -> str:
    """Prefix ``https://`` when a URL was matched without its scheme."""
    if re.match(r"^https?://", url, re.IGNORECASE):
        return url
    return f"https://{url.lstrip('/')}"


def drop_query_params(url: str, should_drop) -> str:
    """
    Remove query parameters whose name satisfies ``should_drop``.

    Kept parameters stay byte-for-byte as they were. Returns the URL
    unchanged when it cannot be split.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return url

    if not parts.query:
        return url

    kept = [
        pair
        for pair in parts.query.split("&")
        if pair and not should_drop(unquote_plus(pair.split("=", 1)[0]))
    ]
    query = "&".join(kept)

    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def strip_tracking_params(url: str) -> str:
    """Remove analytics parameters (utm_*, gclid, fbclid, ...) from a URL."""
    return drop_query_params(url, lambda key: key in TRACKING_PARAMS)


def is_absolute_http(url: str | None) -> bool:
    """True when ``url`` is an absolute http(s) URL."""
    return bool(url) and re.match(r"^https?://[^\s/]+", url, re.IGNORECASE) is not None
