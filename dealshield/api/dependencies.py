"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache
from fastapi import Request
from dealshield.config import settings
from dealshield.infrastructure.clients.ner import DisabledEntityRecognizer, EntityRecognizer, HttpEntityRecognizer


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


@lru_cache(maxsize=1)
def get_entity_recognizer() -> EntityRecognizer:
    """Provide the process-wide entity recognizer (keeps its selected model between requests)"""
    if not settings.ner_enabled:
        return DisabledEntityRecognizer()
    return HttpEntityRecognizer()
