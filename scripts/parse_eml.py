"""
Parse a saved email (.eml) and print what was extracted.

Usage:
    python scripts/parse_eml.py message.eml
    python scripts/parse_eml.py message.eml --date 2026-01-22
"""

import argparse
import json
import sys
from datetime import date
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from email.utils import parsedate_to_datetime
from pathlib import Path

from parcelparse.config import LOG_SERVICE_NAME
from parcelparse.parser import EmailParser
from parcelparse.utils.logging import setup_logging


def read_message(path: Path) -> EmailMessage:
    with open(path, "rb") as f:
        return BytesParser(policy=policy.default).parse(f)


def first_part(message: EmailMessage, content_type: str) -> str | None:
    """Decoded content of the first part with the given type."""
    for part in message.walk():
        if part.get_content_type() == content_type and not part.is_attachment():
            return part.get_content()
    return None


def received_date(message: EmailMessage) -> date | None:
    header = message.get("Date")
    if not header:
        return None
    try:
        return parsedate_to_datetime(str(header)).date()
    except (TypeError, ValueError):
        return None


def main():
    """Main function."""
    arg_parser = argparse.ArgumentParser(description="Parse an .eml file")
    arg_parser.add_argument("path", type=Path, help="RFC 822 message file")
    arg_parser.add_argument(
        "--date",
        type=date.fromisoformat,
        help="Email date (YYYY-MM-DD); defaults to the Date header",
    )
    args = arg_parser.parse_args()

    setup_logging(service_name=LOG_SERVICE_NAME)

    if not args.path.exists():
        print(f"❌ File not found: {args.path}", file=sys.stderr)
        sys.exit(1)

    message = read_message(args.path)

    parser = EmailParser.from_config()
    result = parser.parse(
        subject=str(message.get("Subject", "")),
        body_text=first_part(message, "text/plain"),
        body_html=first_part(message, "text/html"),
        received_at=args.date or received_date(message),
        from_address=str(message.get("From", "")) or None,
    )

    output = result.model_dump(mode="json")
    output["line_items"] = [
        item.model_dump(mode="json") for item in parser.build_line_items(result)
    ]
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
