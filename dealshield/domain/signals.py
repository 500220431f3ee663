"""Signal detector catalog - the ordered table of risk indicators"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
from dealshield.domain.extractors import extract_amount, extract_deadline, extract_links, is_shortened_link
from dealshield.utils.text_utils import unique_in_order


@dataclass(frozen=True)
class MessageFields:
    """Field extractor outputs the detectors can test against"""

    amount: Optional[str]
    deadline: Optional[str]
    links: List[str]

    @classmethod
    def from_text(cls, text: str) -> "MessageFields":
        return cls(
            amount=extract_amount(text),
            deadline=extract_deadline(text),
            links=extract_links(text),
        )


# Returns the trigger phrases when the detector fires, None otherwise
Matcher = Callable[[str, MessageFields], Optional[List[str]]]


@dataclass(frozen=True)
class SignalDetector:
    """One row of the catalog: condition, points, label and follow-up actions"""

    code: str
    label: str
    points: int
    actions: Tuple[str, ...]
    match: Matcher


def phrase_matcher(pattern: str) -> Matcher:
    """
    Fire when the vocabulary pattern occurs; trigger phrases are the distinct matched substrings.

    Patterns anchor on a leading word boundary and take a trailing \\w* so
    inflected forms ("urgently", "rushed") fire while "brush" does not.
    """
    compiled = re.compile(pattern, re.IGNORECASE)

    def match(text: str, fields: MessageFields) -> Optional[List[str]]:
        hits = [m.group(0) for m in compiled.finditer(text)]
        if not hits:
            return None
        return unique_in_order(hits, key=str.casefold)

    return match


def shortened_link_matcher(text: str, fields: MessageFields) -> Optional[List[str]]:
    shortened = [link for link in fields.links if is_shortened_link(link)]
    return shortened or None


def missing_field_matcher(field_name: str) -> Matcher:
    """Fire on absence of an extracted field; absence has no phrase to highlight"""

    def match(text: str, fields: MessageFields) -> Optional[List[str]]:
        return [] if getattr(fields, field_name) is None else None

    return match


DETECTORS: Tuple[SignalDetector, ...] = (
    SignalDetector(
        code="urgency",
        label="Urgency pressure",
        points=12,
        actions=("Slow down: verify key terms before sending money.",),
        match=phrase_matcher(r"\b(?:urgent|asap|today|immediately|right now|rush)\w*"),
    ),
    SignalDetector(
        code="secrecy",
        label="Secrecy request",
        points=18,
        actions=("Treat secrecy requests as a red flag. Confirm identity via a second channel.",),
        match=phrase_matcher(r"\b(?:confidential|don['’]t tell|keep this secret)\w*"),
    ),
    SignalDetector(
        code="advance_fee",
        label="Advance-fee / pay-first pattern",
        points=28,
        actions=(
            "Do not pay fees upfront. Require clear contract + verifiable business identity.",
            "Ask for a standard invoice and verifiable company details.",
        ),
        match=phrase_matcher(
            r"\b(?:activation fee|processing fee|release the funds|advance fee|to start, pay)\w*"
        ),
    ),
    SignalDetector(
        code="payment_change",
        label="Payment details change request",
        points=30,
        actions=(
            "Freeze payments: confirm new payment details via a verified second channel (call / known contact).",
            "Compare the new details against previous invoices / contracts.",
        ),
        match=phrase_matcher(
            r"\b(?:bank details have changed|new account|pay to the new|updated payment details)\w*"
        ),
    ),
    SignalDetector(
        code="shortened_link",
        label="Shortened link",
        points=20,
        actions=("Avoid shortened links for payments. Request the full official domain.",),
        match=shortened_link_matcher,
    ),
    SignalDetector(
        code="crypto_only",
        label="Payment rail restriction (crypto-only)",
        points=16,
        actions=("Prefer standard invoicing and traceable business payment rails for first-time counterparties.",),
        match=phrase_matcher(r"\b(?:only accept crypto|crypto\w* only|usdt only)\w*"),
    ),
    SignalDetector(
        code="missing_amount",
        label="Missing or unclear amount",
        points=10,
        actions=("Clarify the exact amount, currency, and milestone schedule in writing.",),
        match=missing_field_matcher("amount"),
    ),
    SignalDetector(
        code="missing_deadline",
        label="Missing deadline / deliverables clarity",
        points=6,
        actions=("Confirm deliverables, acceptance criteria, and deadline.",),
        match=missing_field_matcher("deadline"),
    ),
)
