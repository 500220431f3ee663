"""POST /v1/analyze - message risk analysis endpoint"""

import asyncio
import logging
import time
from typing import Optional, Tuple
from fastapi import APIRouter, Depends, HTTPException, Request

from dealshield.api.v1.schemas import AnalysisRequest, AnalysisResponse, HighlightSchema, ReasonSchema, SnapshotSchema
from dealshield.api.dependencies import get_entity_recognizer, get_request_id
from dealshield.config import settings
from dealshield.domain.exceptions import EntityRecognitionUnavailable
from dealshield.domain.highlight import highlight_matches, render_markup
from dealshield.domain.reply import build_safe_reply
from dealshield.domain.scoring import collect_trigger_phrases, reason_codes, score_risk
from dealshield.domain.snapshot import build_snapshot, summarize_parties
from dealshield.infrastructure.clients.ner import EntityRecognizer
from dealshield.infrastructure.observability.logging import log_analysis
from dealshield.infrastructure.observability.metrics import ner_failure_counter, record_analysis

router = APIRouter()

MODE_AI = "ai+rules"
MODE_RULES_ONLY = "rules-only"

DEFAULT_PLAN_STEP = "Proceed with standard invoicing and confirm details in writing."


async def recognize_parties(recognizer: EntityRecognizer, text: str, request_id: str) -> Tuple[Optional[str], bool]:
    """
    Best-effort parties line from entity recognition.

    Returns (parties, recognized). Any failure or timeout downgrades to
    (None, False); nothing is raised to the caller.
    """
    try:
        entities = await asyncio.wait_for(recognizer.recognize(text), timeout=settings.ner_timeout_seconds)
    except asyncio.TimeoutError:
        ner_failure_counter.inc()
        logging.warning(
            f"Entity recognition timed out after {settings.ner_timeout_seconds}s",
            extra={"request_id": request_id},
        )
        return None, False
    except EntityRecognitionUnavailable as e:
        logging.warning(f"Entity recognition unavailable: {e}", extra={"request_id": request_id})
        return None, False

    parties = summarize_parties(
        entities,
        min_confidence=settings.ner_min_confidence,
        max_entities=settings.ner_max_entities,
    )
    return parties, True


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_message(
    request_body: AnalysisRequest,
    request: Request,
    recognizer: EntityRecognizer = Depends(get_entity_recognizer),
):
    """
    Score a message for deal risk and draft a safe reply.

    Flow:
    1. Run the rule-based risk aggregation (synchronous, no I/O)
    2. Ask the entity recognizer for parties (optional, may fail)
    3. Assemble the deal snapshot and draft the safe reply
    4. Map trigger phrases and links to highlight spans
    """
    start_time = time.time()
    request_id = get_request_id(request)
    text = request_body.text

    try:
        # 1. Rules
        result = score_risk(text)

        # 2. Parties
        parties, recognized = await recognize_parties(recognizer, text, request_id)
        mode = MODE_AI if recognized else MODE_RULES_ONLY

        # 3. Snapshot + reply
        snapshot = build_snapshot(text, result, parties=parties)
        reply = build_safe_reply(result.tier, snapshot)

        # 4. Highlights
        spans = highlight_matches(text, collect_trigger_phrases(result))

        signals = reason_codes(result)
        duration_ms = (time.time() - start_time) * 1000
        record_analysis(result.tier.value, result.score, signals)
        log_analysis(request_id, result.score, result.tier.value, signals, mode, duration_ms)

        return AnalysisResponse(
            score=result.score,
            tier=result.tier.value,
            reasons=[
                ReasonSchema(label=r.label, points=r.points, trigger_phrases=list(r.trigger_phrases))
                for r in result.sorted_reasons()
            ],
            plan=result.plan or [DEFAULT_PLAN_STEP],
            snapshot=SnapshotSchema(
                parties=snapshot.parties,
                amount=snapshot.amount,
                deadline=snapshot.deadline,
                payment=snapshot.payment,
                links=snapshot.links,
            ),
            reply=reply,
            highlights=[HighlightSchema(start=s.start, end=s.end, text=s.text) for s in spans],
            highlighted_html=render_markup(text, spans),
            mode=mode,
        )

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
