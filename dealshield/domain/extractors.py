"""Field extractors - independent scans of raw message text for one structured fact each"""

import re
from typing import List, Optional
from dealshield.utils.text_utils import strip_trailing_punctuation, unique_in_order

MAX_LINKS = 8

UNSPECIFIED_PAYMENT = "Unspecified"
PAYMENT_SEPARATOR = ", "
CRYPTO_CATEGORY = "Crypto"

SHORTENER_DOMAINS = frozenset({"bit.ly", "t.co", "tinyurl.com", "goo.gl"})

# Grouped thousands ("1,200" / "1 200") or a plain digit run, optional cents
_NUMBER = r"(?:\d{1,3}(?:[, ]\d{3})+|\d+)(?:\.\d{2})?"

_AMOUNT_PATTERN = re.compile(
    rf"[$€£]\s?{_NUMBER}"
    rf"|\b{_NUMBER}\s?(?:USD|EUR|GBP)\b",
    re.IGNORECASE,
)

_DEADLINE_PATTERN = re.compile(
    r"\b(?:in\s+\d{1,3}\s+(?:days?|weeks?)"
    r"|by\s+\w+\s+\d{1,2}"
    r"|\d{1,2}/\d{1,2}/\d{2,4}"
    r"|\d{4}-\d{2}-\d{2})\b",
    re.IGNORECASE,
)

_LINK_PATTERN = re.compile(
    r"\bhttps?://[^\s)]+"
    r"|\b(?:bit\.ly|t\.co|tinyurl\.com|goo\.gl)/[^\s)]+"
    r"|\b[a-z0-9][a-z0-9.-]*\.[a-z]{2,}/[^\s)]*",
    re.IGNORECASE,
)

_SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

# Detection order is the order categories appear in the joined result
PAYMENT_METHODS = (
    ("Bank transfer", re.compile(r"\b(?:iban|swift|bank transfer|wire)\w*", re.IGNORECASE)),
    ("PayPal", re.compile(r"\bpaypal\w*", re.IGNORECASE)),
    (CRYPTO_CATEGORY, re.compile(r"\b(?:crypto\w*|usdt\w*|btc\b|eth(?:ereum)?\b|wallet\w*)", re.IGNORECASE)),
    ("Gift cards", re.compile(r"\b(?:gift ?card|voucher)\w*", re.IGNORECASE)),
)


def extract_amount(text: str) -> Optional[str]:
    """
    Find the first monetary amount in the text.

    Accepts a currency symbol followed by a number ("$1,200", "€ 99.50") or a
    number followed by an ISO code ("1500 USD"). The match is returned verbatim.
    """
    match = _AMOUNT_PATTERN.search(text)
    return match.group(0) if match else None


def extract_deadline(text: str) -> Optional[str]:
    """
    Find the first deadline expression in the text.

    Recognized shapes: "in 10 days", "in 2 weeks", "by Friday 15",
    "15/03/2025" and "2025-03-15". The match is returned verbatim.
    """
    match = _DEADLINE_PATTERN.search(text)
    return match.group(0) if match else None


def detect_payment(text: str) -> str:
    """
    Name every payment rail mentioned in the text.

    Returns e.g. "Bank transfer, Crypto", or "Unspecified" when nothing matches.
    """
    hits = [name for name, pattern in PAYMENT_METHODS if pattern.search(text)]
    if not hits:
        return UNSPECIFIED_PAYMENT
    return PAYMENT_SEPARATOR.join(unique_in_order(hits))


def payment_categories(payment: str) -> List[str]:
    """Split a detect_payment() result back into its categories"""
    if payment == UNSPECIFIED_PAYMENT:
        return []
    return payment.split(PAYMENT_SEPARATOR)


def extract_links(text: str, limit: int = MAX_LINKS) -> List[str]:
    """
    Collect outbound links: explicit http(s) URLs, shortener links and bare
    domains with a path. The first `limit` matches are kept, then
    deduplicated in first-seen order.
    """
    found = [strip_trailing_punctuation(m.group(0)) for m in _LINK_PATTERN.finditer(text)]
    return unique_in_order(link for link in found[:limit] if link)


def link_host(link: str) -> str:
    """Lower-cased host part of a link, with scheme, port and 'www.' removed"""
    host = _SCHEME_PATTERN.sub("", link).split("/", 1)[0]
    host = host.rsplit("@", 1)[-1].split(":", 1)[0].lower()
    return host[4:] if host.startswith("www.") else host


def is_shortened_link(link: str) -> bool:
    """True when the link points at a known URL-shortener domain"""
    return link_host(link) in SHORTENER_DOMAINS
