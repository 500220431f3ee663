"""Pytest fixtures for testing"""

import pytest
from typing import List
from fastapi.testclient import TestClient
from dealshield.api.main import create_app
from dealshield.api.dependencies import get_entity_recognizer
from dealshield.domain.exceptions import EntityRecognitionUnavailable
from dealshield.domain.models import Entity, EntityType


CLEAN_DEAL = """Hi Omar,
We'd like to hire you for a landing page redesign. Budget is $1,200, delivery in 10 days.
Payment: 50% upfront via bank transfer, 50% after delivery.
Please confirm the milestone breakdown and send an invoice.
Sarah, Northwind Studio"""

BANK_CHANGE = """Hello,
Quick update: our bank details have changed. Please pay the invoice to the NEW account below today.
Account name: NW Trading Ltd
IBAN: XX00 0000 0000 0000
Also, keep this confidential and do not contact anyone else, we're in a rush.
Thanks."""

ADVANCE_FEE = """URGENT: We need to secure your service now.
To start, please pay the “activation fee” of $150 today. After that, we will release the full $3,000.
Use this link to confirm: bit.ly/pay-confirm
We only accept crypto. Don’t tell anyone about this deal."""


class StubEntityRecognizer:
    """Recognizer returning a fixed entity list"""

    def __init__(self, entities: List[Entity]):
        self.entities = entities
        self.calls = 0

    async def recognize(self, text: str) -> List[Entity]:
        self.calls += 1
        return self.entities


class FailingEntityRecognizer:
    """Recognizer whose model never loads"""

    async def recognize(self, text: str) -> List[Entity]:
        raise EntityRecognitionUnavailable("model download failed")


@pytest.fixture
def clean_deal() -> str:
    return CLEAN_DEAL


@pytest.fixture
def bank_change() -> str:
    return BANK_CHANGE


@pytest.fixture
def advance_fee() -> str:
    return ADVANCE_FEE


@pytest.fixture
def sample_entities() -> List[Entity]:
    """Entities as a token-classification model would report them for CLEAN_DEAL"""
    return [
        Entity(text="Omar", type=EntityType.PERSON, confidence=0.99),
        Entity(text="Sarah", type=EntityType.PERSON, confidence=0.98),
        Entity(text="Northwind Studio", type=EntityType.ORGANIZATION, confidence=0.93),
        Entity(text="Omar", type=EntityType.PERSON, confidence=0.97),
        Entity(text="redesign", type=EntityType.MISC, confidence=0.31),
    ]


@pytest.fixture
def recognizer(sample_entities: List[Entity]) -> StubEntityRecognizer:
    return StubEntityRecognizer(sample_entities)


def _client_with(recognizer) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_entity_recognizer] = lambda: recognizer
    return TestClient(app)


@pytest.fixture
def make_client():
    """Factory for test clients wired to a given entity recognizer"""
    return _client_with


@pytest.fixture
def client(recognizer: StubEntityRecognizer) -> TestClient:
    """Create FastAPI test client with a stubbed entity recognizer"""
    return _client_with(recognizer)


@pytest.fixture
def rules_only_client() -> TestClient:
    """Create FastAPI test client whose entity recognizer always fails"""
    return _client_with(FailingEntityRecognizer())
