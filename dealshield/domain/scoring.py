"""Risk aggregation engine - core business logic for message risk scoring"""

from typing import List, Sequence
from dealshield.domain.models import RiskReason, RiskResult, RiskTier
from dealshield.domain.signals import DETECTORS, MessageFields, SignalDetector
from dealshield.utils.text_utils import unique_in_order

BASE_SCORE = 10
MIN_SCORE = 0
MAX_SCORE = 100

HIGH_THRESHOLD = 70
MEDIUM_THRESHOLD = 40


def clamp_score(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def determine_tier(score: int) -> RiskTier:
    """
    Map a clamped score to its risk tier.

    Tiers (lower bound inclusive):
    - 70+:   HIGH
    - 40-69: MEDIUM
    - 0-39:  LOW
    """
    if score >= HIGH_THRESHOLD:
        return RiskTier.HIGH
    elif score >= MEDIUM_THRESHOLD:
        return RiskTier.MEDIUM
    else:
        return RiskTier.LOW


def score_risk(text: str, detectors: Sequence[SignalDetector] = DETECTORS) -> RiskResult:
    """
    Main entry point: run every signal detector over the text and aggregate.

    Flow:
    1. Extract amount, deadline and links once for the field-based detectors
    2. Evaluate every detector in catalog order (no short-circuiting)
    3. Sum base score and point deltas, clamp to [0, 100]
    4. Classify into a tier and deduplicate the verification plan
    """
    fields = MessageFields.from_text(text)

    score = BASE_SCORE
    reasons: List[RiskReason] = []
    plan: List[str] = []

    for detector in detectors:
        phrases = detector.match(text, fields)
        if phrases is None:
            continue
        score += detector.points
        reasons.append(RiskReason(label=detector.label, points=detector.points, trigger_phrases=tuple(phrases)))
        plan.extend(detector.actions)

    score = clamp_score(score)

    return RiskResult(
        score=score,
        tier=determine_tier(score),
        reasons=reasons,
        plan=unique_in_order(plan),
        links=list(fields.links),
    )


def reason_codes(result: RiskResult, detectors: Sequence[SignalDetector] = DETECTORS) -> List[str]:
    """Detector codes of the fired reasons (used for metrics and logs)"""
    codes = {d.label: d.code for d in detectors}
    return [codes.get(reason.label, "unknown") for reason in result.reasons]


def collect_trigger_phrases(result: RiskResult) -> List[str]:
    """All phrases worth highlighting: every reason's trigger phrases followed by the links"""
    phrases: List[str] = []
    for reason in result.reasons:
        phrases.extend(reason.trigger_phrases)
    phrases.extend(result.links)
    return unique_in_order(phrase for phrase in phrases if phrase)
