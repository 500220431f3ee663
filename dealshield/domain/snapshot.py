"""Deal snapshot assembly from extractor output and optional recognized entities"""

from typing import Iterable, Optional
from dealshield.domain.extractors import detect_payment, extract_amount, extract_deadline
from dealshield.domain.models import DealSnapshot, Entity, RiskResult

MIN_ENTITY_CONFIDENCE = 0.60
MAX_ENTITIES = 18


def summarize_parties(
    entities: Iterable[Entity],
    min_confidence: float = MIN_ENTITY_CONFIDENCE,
    max_entities: int = MAX_ENTITIES,
) -> Optional[str]:
    """
    Render recognized entities as the snapshot's parties line.

    Requirements:
    - Drop entities below min_confidence
    - Keep at most max_entities of the remainder
    - Collapse repeated (text, type) pairs, first occurrence wins

    Example:
        [Sarah/PERSON 0.99, Northwind Studio/ORGANIZATION 0.91, Sarah/PERSON 0.97]
        → "Sarah (PERSON), Northwind Studio (ORGANIZATION)"
    """
    confident = [e for e in entities if e.confidence >= min_confidence][:max_entities]

    seen = set()
    pretty = []
    for entity in confident:
        key = (entity.text, entity.type)
        if key in seen:
            continue
        seen.add(key)
        pretty.append(f"{entity.text} ({entity.type.value})")

    return ", ".join(pretty) if pretty else None


def build_snapshot(text: str, result: RiskResult, parties: Optional[str] = None) -> DealSnapshot:
    """Combine field extractor outputs with the aggregator's links"""
    return DealSnapshot(
        parties=parties,
        amount=extract_amount(text),
        deadline=extract_deadline(text),
        payment=detect_payment(text),
        links=list(result.links),
    )
