"""HTML-to-text conversion for email bodies.

Some merchants send HTML-only emails with no text/plain part; the
extractors work on text, so the HTML body is flattened first.
"""

import re

from bs4 import BeautifulSoup

TAG_RE = re.compile(r"<[^>]+>")


def html_to_text(html: str | None) -> str:
    """
    Convert an HTML email body to plain text.

    Args:
        html: Raw HTML string from the email body

    Returns:
        Plain text with one line per block element and blank runs collapsed
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")

    for tag in soup(["script", "style", "head"]):
        tag.decompose()

    text = soup.get_text(separator="\n")

    lines = [line.strip() for line in text.splitlines()]
    text = "\n".join(lines)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def strip_tags(fragment: str) -> str:
    """Remove tags from a (possibly truncated) HTML fragment."""
    return re.sub(r"\s+", " ", TAG_RE.sub(" ", fragment)).strip()
