"""Safe-reply drafting keyed by risk tier and deal snapshot"""

from dealshield.domain.extractors import CRYPTO_CATEGORY, payment_categories
from dealshield.domain.models import DealSnapshot, RiskTier

GREETING = "Hi, thanks for the update."
CLOSING = "Once confirmed, I'm happy to proceed immediately."

TONE_BY_TIER = {
    RiskTier.HIGH: "Before proceeding, I need to verify a few details for safety.",
    RiskTier.MEDIUM: "Quick verification before we proceed:",
    RiskTier.LOW: "Just confirming a couple of details to avoid misunderstandings:",
}

CHECKLIST = (
    "1) Please confirm the exact amount + currency and the payment method.",
    "2) Please confirm the payment details via a second channel (call / known contact).",
    "3) Please share a standard invoice and your company details (legal name, website, address).",
)
LINKS_ITEM = "4) Please share the full official domain (no shortened links)."
CRYPTO_ITEM = "5) For first-time engagements, I prefer standard invoicing and traceable business payment rails."


def build_safe_reply(tier: RiskTier, snapshot: DealSnapshot) -> str:
    """
    Draft a reply that asks the counterparty to verify the deal.

    The checklist always carries items 1-3; item 4 is added when the message
    contained links and item 5 when crypto was among the payment rails.
    """
    lines = [GREETING, TONE_BY_TIER[tier], "", *CHECKLIST]

    if snapshot.links:
        lines.append(LINKS_ITEM)
    if CRYPTO_CATEGORY in payment_categories(snapshot.payment):
        lines.append(CRYPTO_ITEM)

    lines.append("")
    lines.append(CLOSING)
    return "\n".join(lines)
