"""Entity recognition client for a hosted token-classification model"""

import asyncio
import logging
from typing import Any, List, Optional, Protocol, Sequence
import httpx
from dealshield.config import settings
from dealshield.domain.exceptions import EntityRecognitionUnavailable
from dealshield.domain.models import Entity, EntityType
from dealshield.infrastructure.observability.metrics import ner_failure_counter, ner_latency_histogram

logger = logging.getLogger(__name__)

# CoNLL-style labels, with or without B-/I- prefixes
LABEL_TO_ENTITY_TYPE = {
    "PER": EntityType.PERSON,
    "ORG": EntityType.ORGANIZATION,
    "LOC": EntityType.LOCATION,
    "MISC": EntityType.MISC,
}

WARM_UP_TEXT = "Sarah from Northwind Studio in London."


class EntityRecognizer(Protocol):
    """Classifies text into entity spans; raises EntityRecognitionUnavailable on failure"""

    async def recognize(self, text: str) -> List[Entity]:
        ...


def parse_entities(payload: Any) -> List[Entity]:
    """
    Convert a token-classification response into Entity objects.

    Accepts aggregated items ({"entity_group": "PER", ...}) and raw token items
    ({"entity": "B-PER", ...}). Labels outside PER/ORG/LOC/MISC are dropped.

    Raises:
        EntityRecognitionUnavailable: When the payload is not a list of entity objects
    """
    if not isinstance(payload, list):
        raise EntityRecognitionUnavailable(f"Unexpected entity payload: {type(payload).__name__}")

    entities = []
    try:
        for item in payload:
            label = str(item.get("entity_group") or item.get("entity") or "")
            entity_type = LABEL_TO_ENTITY_TYPE.get(label.split("-")[-1].upper())
            word = str(item.get("word", "")).strip()
            if entity_type is None or not word:
                continue
            confidence = min(max(float(item["score"]), 0.0), 1.0)
            entities.append(Entity(text=word, type=entity_type, confidence=confidence))
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise EntityRecognitionUnavailable(f"Invalid entity data from model: {e}") from e

    return entities


class HttpEntityRecognizer:
    """
    Client for a hosted NER model (Hugging Face inference API shape).

    The model is selected lazily, once per instance: the first candidate id that
    answers is kept for every later call. A failed selection is not cached, so
    the next call tries again.
    """

    def __init__(
        self,
        api_base: str | None = None,
        model_ids: Sequence[str] | None = None,
        api_token: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_base = (api_base or settings.ner_api_base).rstrip("/")
        self.model_ids = list(model_ids or settings.ner_model_ids)
        self.api_token = api_token if api_token is not None else settings.ner_api_token
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.ner_max_retries if max_retries is None else max_retries
        self.backoff_base = settings.ner_backoff_base if backoff_base is None else backoff_base
        self._transport = transport
        self._model_id: Optional[str] = None
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def model_id(self) -> Optional[str]:
        return self._model_id

    def _selection_lock(self) -> asyncio.Lock:
        # The instance is cached process-wide and may outlive an event loop
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def warm_up(self) -> str:
        """
        Select and cache the first model that answers.

        Raises:
            EntityRecognitionUnavailable: When no candidate model responds
        """
        if self._model_id is not None:
            return self._model_id

        async with self._selection_lock():
            if self._model_id is None:
                self._model_id = await self._select_model()
        return self._model_id

    async def recognize(self, text: str) -> List[Entity]:
        """
        Run entity recognition over the text.

        Raises:
            EntityRecognitionUnavailable: On model selection failure, exhausted retries or invalid response
        """
        model_id = await self.warm_up()
        with ner_latency_histogram.time():
            payload = await self._invoke(model_id, text)
        return parse_entities(payload)

    async def _select_model(self) -> str:
        last_error: Optional[EntityRecognitionUnavailable] = None
        for model_id in self.model_ids:
            try:
                await self._invoke(model_id, WARM_UP_TEXT)
                logger.info("Entity recognition model ready", extra={"model_id": model_id})
                return model_id
            except EntityRecognitionUnavailable as e:
                logger.warning(f"Entity recognition model unavailable: {e}", extra={"model_id": model_id})
                last_error = e
        raise last_error or EntityRecognitionUnavailable("No entity recognition model configured")

    async def _invoke(self, model_id: str, text: str) -> Any:
        """
        POST the text to one model with retry logic.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base ... (base^attempt)
        - Retries on 5xx errors (model still loading) and network failures
        - 4xx errors fail immediately
        """
        headers = {"Authorization": f"Bearer {self.api_token}"} if self.api_token else {}
        body = {"inputs": text, "parameters": {"aggregation_strategy": "simple"}}

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            while True:
                try:
                    response = await client.post(f"{self.api_base}/{model_id}", json=body, headers=headers)
                    response.raise_for_status()
                    return response.json()

                except httpx.HTTPStatusError as e:
                    ner_failure_counter.inc()
                    status = e.response.status_code
                    if status < 500 or attempt + 1 >= self.max_retries:
                        raise EntityRecognitionUnavailable(f"Entity model {model_id} error: {status}") from e

                except httpx.TimeoutException as e:
                    ner_failure_counter.inc()
                    if attempt + 1 >= self.max_retries:
                        raise EntityRecognitionUnavailable(f"Entity model {model_id} timeout after {self.timeout}s") from e

                except httpx.RequestError as e:
                    ner_failure_counter.inc()
                    if attempt + 1 >= self.max_retries:
                        raise EntityRecognitionUnavailable(f"Entity model {model_id} unreachable: {e}") from e

                except ValueError as e:
                    ner_failure_counter.inc()
                    raise EntityRecognitionUnavailable(f"Invalid JSON from entity model {model_id}") from e

                attempt += 1
                backoff = self.backoff_base * (2 ** (attempt - 1))
                await asyncio.sleep(backoff)


class DisabledEntityRecognizer:
    """Rules-only mode: recognition is switched off by configuration"""

    async def recognize(self, text: str) -> List[Entity]:
        raise EntityRecognitionUnavailable("Entity recognition is disabled")
