"""
Product facts from a retailer product page.

Works on HTML that has already been fetched. Each field is taken from
the most structured source available: JSON-LD Product data, then Open
Graph tags, then plain meta tags, then the page markup itself.
"""

import html as html_lib
import json
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from parcelparse.models.product_page import ProductPageData, ScrapeStatus
from parcelparse.patterns.retailers import RETAILER_KEYS, match_retailer
from parcelparse.utils.urls import strip_tracking_params

logger = logging.getLogger(__name__)

TITLE_SELECTORS = [
    "h1[class*=product]",
    "h1[id*=product]",
    "h1",
    "span[class*=product-title]",
    "div[class*=product-name]",
]
DESCRIPTION_SELECTORS = [
    "div[class*=product-description]",
    "div[id*=description]",
    "p[class*=description]",
]
BRAND_SELECTORS = ["span[class*=brand]", "a[class*=brand]"]
BREADCRUMB_SELECTORS = ["nav[class*=breadcrumb]", "ol[class*=breadcrumb]", "ul[class*=breadcrumb]"]
IMAGE_SELECTORS = ["img[class*=product]", "img[id*=product]"]

# Symbol-led prices in page text, with the currency each implies
PRICE_PATTERNS = [
    (re.compile(r"(?:£|GBP)\s*([\d,]+\.?\d*)"), "GBP"),
    (re.compile(r"(?:\$|USD)\s*([\d,]+\.?\d*)"), "USD"),
    (re.compile(r"(?:€|EUR)\s*([\d,]+\.?\d*)"), "EUR"),
    (re.compile(r"price[:\s]*(?:£|\$|€)?\s*([\d,]+\.?\d*)", re.IGNORECASE), None),
]

MATERIAL_PATTERNS = [
    re.compile(r"material[:\s]*([^\n]+)", re.IGNORECASE),
    re.compile(r"composition[:\s]*([^\n]+)", re.IGNORECASE),
    re.compile(r"fabric[:\s]*([^\n]+)", re.IGNORECASE),
    re.compile(r"made\s+(?:from|of)[:\s]*([^\n]+)", re.IGNORECASE),
]
MIN_MATERIAL_LENGTH = 4
MAX_MATERIAL_LENGTH = 199

COUNTRY_PATTERNS = [
    ("gb", re.compile(r"\.co\.uk|/uk/|/en-gb", re.IGNORECASE)),
    ("ie", re.compile(r"/ie/|/en-ie", re.IGNORECASE)),
    ("de", re.compile(r"\.de/|/de/|/de-de", re.IGNORECASE)),
    ("fr", re.compile(r"\.fr/|/fr/|/fr-fr", re.IGNORECASE)),
    ("es", re.compile(r"\.es/|/es/|/es-es", re.IGNORECASE)),
    ("it", re.compile(r"\.it/|/it/|/it-it", re.IGNORECASE)),
    ("us", re.compile(r"\.com(?!\.)|/us/|/en-us", re.IGNORECASE)),
]
DEFAULT_COUNTRY = "gb"


def detect_country_from_url(url: str) -> str:
    """Guess the shop's country from its URL, defaulting to gb."""
    for country, pattern in COUNTRY_PATTERNS:
        if pattern.search(url):
            return country
    return DEFAULT_COUNTRY


def detect_retailer(url: str) -> Optional[str]:
    """Known retailer key for url, else the first label of its host."""
    retailer = match_retailer(url, RETAILER_KEYS)
    if retailer:
        return retailer

    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    if not host:
        return None
    return host.lower().removeprefix("www.").split(".")[0]


def clean_text(text: Any) -> Optional[str]:
    """Decode HTML entities and collapse whitespace."""
    if text is None:
        return None
    text = re.sub(r"\s+", " ", html_lib.unescape(str(text))).strip()
    return text or None


def normalize_image_url(image_url: Optional[str], page_url: str) -> Optional[str]:
    """Make an image URL absolute relative to the page's origin."""
    if not image_url or not image_url.strip():
        return None

    image_url = image_url.strip()
    if image_url.startswith("//"):
        return f"https:{image_url}"
    if image_url.lower().startswith("http"):
        return image_url

    try:
        page = urlparse(page_url)
    except ValueError:
        return image_url
    if not page.scheme or not page.netloc:
        return image_url

    base = f"{page.scheme}://{page.netloc}"
    return f"{base}{image_url}" if image_url.startswith("/") else f"{base}/{image_url}"


def extract_product_page(html: Optional[str], url: str) -> ProductPageData:
    """
    Extract product details from a product page.

    Args:
        html: Page HTML
        url: Page URL, used to resolve relative image links and guess
            retailer and country

    Returns:
        ProductPageData; status is completed when both title and
        description were found, partial for one of them, failed otherwise
    """
    page_url = strip_tracking_params(url)
    soup = BeautifulSoup(html or "", "html.parser")

    json_ld = _json_ld_product(soup)
    open_graph = _open_graph(soup)
    meta = _meta_tags(soup)

    title = clean_text(
        _ld_text(json_ld, "name")
        or open_graph["title"]
        or meta["title"]
        or _first_text(soup, TITLE_SELECTORS)
    )
    description = clean_text(
        _ld_text(json_ld, "description")
        or open_graph["description"]
        or meta["description"]
        or _first_text(soup, DESCRIPTION_SELECTORS)
    )
    brand = clean_text(_ld_brand(json_ld) or _first_text(soup, BRAND_SELECTORS))
    category = clean_text(_ld_text(json_ld, "category") or _breadcrumb_category(soup))
    price, currency = _price(json_ld, open_graph, soup, page_url)
    material = clean_text(_material(json_ld, soup))
    image_url = normalize_image_url(_image(json_ld, open_graph, soup), page_url)

    if title and description:
        status = ScrapeStatus.COMPLETED
    elif title or description:
        status = ScrapeStatus.PARTIAL
    else:
        status = ScrapeStatus.FAILED

    logger.debug(
        "Extracted product page",
        extra={"json_fields": {"url": page_url, "status": str(status), "has_json_ld": bool(json_ld)}},
    )

    return ProductPageData(
        url=page_url,
        retailer=detect_retailer(page_url),
        country=detect_country_from_url(page_url),
        title=title,
        description=description,
        brand=brand,
        category=category,
        price=price,
        currency=currency,
        material=material,
        image_url=image_url,
        structured_data=json_ld,
        status=status,
    )


def _is_product(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    item_type = item.get("@type")
    if isinstance(item_type, list):
        return "Product" in item_type
    return item_type == "Product"


def _json_ld_product(soup: BeautifulSoup) -> Optional[dict]:
    """First schema.org Product in the page's JSON-LD blocks."""
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.debug("Skipping malformed JSON-LD block")
            continue

        if isinstance(data, dict) and isinstance(data.get("@graph"), list):
            for item in data["@graph"]:
                if _is_product(item):
                    return item
        if _is_product(data):
            return data
        if isinstance(data, list):
            for item in data:
                if _is_product(item):
                    return item

    return None


def _meta_content(soup: BeautifulSoup, **attrs) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return None
    content = tag.get("content")
    return content.strip() if content and content.strip() else None


def _open_graph(soup: BeautifulSoup) -> dict[str, Optional[str]]:
    return {
        "title": _meta_content(soup, property="og:title"),
        "description": _meta_content(soup, property="og:description"),
        "image": _meta_content(soup, property="og:image"),
        "price": _meta_content(soup, property="og:price:amount")
        or _meta_content(soup, property="product:price:amount"),
        "currency": _meta_content(soup, property="og:price:currency")
        or _meta_content(soup, property="product:price:currency"),
    }


def _meta_tags(soup: BeautifulSoup) -> dict[str, Optional[str]]:
    title = _meta_content(soup, name="title")
    if title is None and soup.title is not None:
        title = soup.title.get_text(strip=True) or None
    return {"title": title, "description": _meta_content(soup, name="description")}


def _first_text(soup: BeautifulSoup, selectors: list[str]) -> Optional[str]:
    for selector in selectors:
        element = soup.select_one(selector)
        if element is not None:
            text = element.get_text(" ", strip=True)
            if text:
                return text
    return None


def _ld_text(json_ld: Optional[dict], key: str) -> Optional[str]:
    if not json_ld:
        return None
    value = json_ld.get(key)
    return value if isinstance(value, str) else None


def _ld_brand(json_ld: Optional[dict]) -> Optional[str]:
    if not json_ld:
        return None
    brand = json_ld.get("brand")
    if isinstance(brand, str):
        return brand
    if isinstance(brand, dict) and isinstance(brand.get("name"), str):
        return brand["name"]
    return None


def _breadcrumb_category(soup: BeautifulSoup) -> Optional[str]:
    for selector in BREADCRUMB_SELECTORS:
        nav = soup.select_one(selector)
        if nav is None:
            continue
        items = [link.get_text(" ", strip=True) for link in nav.find_all("a")]
        items = [item for item in items if item and item.lower() != "home"]
        if items:
            return " > ".join(items)
    return None


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return Decimal(str(value).replace(",", "").strip())
    except InvalidOperation:
        return None


def _detect_currency(text: str, url: str) -> Optional[str]:
    if "£" in text or ".co.uk" in url.lower():
        return "GBP"
    if "$" in text:
        return "USD"
    if "€" in text:
        return "EUR"
    return None


def _price(
    json_ld: Optional[dict],
    open_graph: dict[str, Optional[str]],
    soup: BeautifulSoup,
    url: str,
) -> tuple[Optional[Decimal], Optional[str]]:
    if json_ld and json_ld.get("offers"):
        offers = json_ld["offers"]
        if isinstance(offers, list):
            offers = offers[0] if offers else None
        if isinstance(offers, dict):
            price = _to_decimal(offers.get("price") or offers.get("lowPrice"))
            if price is not None:
                return price, offers.get("priceCurrency")

    price = _to_decimal(open_graph["price"])
    if price is not None:
        return price, open_graph["currency"]

    text = soup.get_text(" ")
    for pattern, currency in PRICE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        price = _to_decimal(match.group(1))
        if price is not None:
            return price, currency or _detect_currency(text, url)

    return None, None


def _material(json_ld: Optional[dict], soup: BeautifulSoup) -> Optional[str]:
    if json_ld and isinstance(json_ld.get("material"), str):
        return json_ld["material"]

    text = soup.get_text("\n")
    for pattern in MATERIAL_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        material = clean_text(match.group(1))
        if material and MIN_MATERIAL_LENGTH <= len(material) <= MAX_MATERIAL_LENGTH:
            return material
    return None


def _image(
    json_ld: Optional[dict], open_graph: dict[str, Optional[str]], soup: BeautifulSoup
) -> Optional[str]:
    image = json_ld.get("image") if json_ld else None
    if isinstance(image, list):
        image = image[0] if image else None
    if isinstance(image, dict):
        image = image.get("url")
    if isinstance(image, str) and image.strip():
        return image

    if open_graph["image"]:
        return open_graph["image"]

    for selector in IMAGE_SELECTORS:
        img = soup.select_one(selector)
        if img is not None and img.get("src"):
            return img["src"]
    return None
