"""Product image extraction from HTML emails, and matching images to products."""

import logging
import re

from bs4 import BeautifulSoup

from parcelparse.config import IMAGE_MATCH_THRESHOLD, MAX_PRODUCT_IMAGES, MIN_IMAGE_DIMENSION
from parcelparse.models.extraction import ProductImage
from parcelparse.patterns.blocklists import (
    MATCH_STOPWORDS,
    NON_PRODUCT_ALT_RE,
    NON_PRODUCT_IMAGE_URL_RES,
)
from parcelparse.utils.urls import is_absolute_http

logger = logging.getLogger(__name__)

LEADING_DIGITS_RE = re.compile(r"^\s*(\d+)")
WORD_RE = re.compile(r"[a-z0-9]+")
MIN_TOKEN_LENGTH = 3


def extract_product_images(html: str | None) -> list[ProductImage]:
    """
    Extract likely product images from an HTML email body.

    Logos, social icons, tracking pixels, payment badges and images
    declared smaller than the minimum size are dropped.

    Returns:
        Up to ten images, largest declared area first
    """
    if not html:
        return []

    soup = BeautifulSoup(html, "html.parser")
    images = []
    seen = set()

    for img in soup.find_all("img"):
        src = (img.get("src") or "").strip()
        if not is_absolute_http(src) or src in seen:
            continue
        if _is_non_product_url(src):
            continue

        alt = (img.get("alt") or "").strip() or None
        if alt and NON_PRODUCT_ALT_RE.search(alt):
            continue

        width = _dimension(img.get("width"))
        height = _dimension(img.get("height"))
        if width is not None and width < MIN_IMAGE_DIMENSION:
            continue
        if height is not None and height < MIN_IMAGE_DIMENSION:
            continue

        seen.add(src)
        images.append(ProductImage(url=src, alt_text=alt, width=width, height=height))

    # Stable sort keeps document order among equal areas
    images.sort(key=lambda image: image.area, reverse=True)
    images = images[:MAX_PRODUCT_IMAGES]

    logger.debug("Extracted %d product images", len(images))
    return images


def match_images_to_products(
    images: list[ProductImage], descriptions: list[str]
) -> list[str | None]:
    """
    Pick the best image for each product description by alt-text overlap.

    Each description is scored independently against every image as the
    share of its keywords found in the image's alt text; the best image
    scoring above the threshold wins, the earliest on ties. One image may
    match several descriptions.

    Returns:
        One image URL or None per description, in description order
    """
    image_tokens = [(image, _keywords(image.alt_text)) for image in images]
    matches = []

    for description in descriptions:
        product_tokens = _keywords(description)
        best_url = None
        best_score = IMAGE_MATCH_THRESHOLD

        if product_tokens:
            for image, tokens in image_tokens:
                if not tokens:
                    continue
                score = len(product_tokens & tokens) / len(product_tokens)
                if score > best_score:
                    best_score = score
                    best_url = image.url

        matches.append(best_url)

    return matches


def _keywords(text: str | None) -> set[str]:
    if not text:
        return set()
    return {
        word
        for word in WORD_RE.findall(text.lower())
        if len(word) >= MIN_TOKEN_LENGTH and word not in MATCH_STOPWORDS
    }


def _is_non_product_url(url: str) -> bool:
    return any(pattern.search(url) for pattern in NON_PRODUCT_IMAGE_URL_RES)


def _dimension(value) -> int | None:
    """Parse a width/height attribute such as "200" or "200px"."""
    if value is None:
        return None
    match = LEADING_DIGITS_RE.match(str(value))
    return int(match.group(1)) if match else None
