"""Domain models - pure Python dataclasses representing analysis results"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class RiskTier(str, Enum):
    """Discrete classification of the numeric risk score"""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class EntityType(str, Enum):
    """Entity classes reported by the entity-recognition collaborator"""

    PERSON = "PERSON"
    ORGANIZATION = "ORGANIZATION"
    LOCATION = "LOCATION"
    MISC = "MISC"


@dataclass(frozen=True)
class RiskReason:
    """One fired signal detector"""

    label: str
    points: int
    trigger_phrases: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RiskResult:
    """Output of risk aggregation for one message"""

    score: int
    tier: RiskTier
    reasons: List[RiskReason]
    plan: List[str]
    links: List[str]

    def sorted_reasons(self) -> List[RiskReason]:
        """Reasons ordered for display: heaviest first, catalog order among ties"""
        return sorted(self.reasons, key=lambda r: r.points, reverse=True)


@dataclass(frozen=True)
class DealSnapshot:
    """Structured facts extracted from one message"""

    payment: str
    amount: Optional[str] = None
    deadline: Optional[str] = None
    links: List[str] = field(default_factory=list)
    parties: Optional[str] = None


@dataclass(frozen=True)
class Entity:
    """Named entity returned by the recognizer"""

    text: str
    type: EntityType
    confidence: float


@dataclass(frozen=True)
class HighlightSpan:
    """Highlighted region in original text coordinates (end exclusive)"""

    start: int
    end: int
    text: str
