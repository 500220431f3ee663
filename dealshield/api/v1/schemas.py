"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional


class AnalysisRequest(BaseModel):
    """Request body for POST /v1/analyze"""

    text: str = Field(..., min_length=1, description="Free-form negotiation or transaction text")

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("text must not be blank")
        return value.strip()


class ReasonSchema(BaseModel):
    """Single fired signal"""

    label: str
    points: int
    trigger_phrases: List[str]


class SnapshotSchema(BaseModel):
    """Extracted deal facts"""

    parties: Optional[str] = None
    amount: Optional[str] = None
    deadline: Optional[str] = None
    payment: str
    links: List[str]


class HighlightSchema(BaseModel):
    """Highlighted span in original text coordinates"""

    start: int
    end: int
    text: str


class AnalysisResponse(BaseModel):
    """Response for POST /v1/analyze"""

    score: int = Field(..., ge=0, le=100)
    tier: Literal["LOW", "MEDIUM", "HIGH"]
    reasons: List[ReasonSchema]
    plan: List[str]
    snapshot: SnapshotSchema
    reply: str
    highlights: List[HighlightSchema]
    highlighted_html: str
    mode: Literal["ai+rules", "rules-only"]
