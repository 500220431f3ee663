"""Configuration management using Pydantic Settings"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "dealshield"
    log_level: str = "INFO"

    # Entity recognition (hosted token-classification model)
    ner_enabled: bool = True
    ner_api_base: str = "https://router.huggingface.co/hf-inference/models"
    ner_api_token: Optional[str] = None
    # Tried in order until one answers; the first that does is kept for the process
    ner_model_ids: List[str] = [
        "elastic/distilbert-base-cased-finetuned-conll03-english",
        "dslim/bert-base-NER",
    ]
    ner_warm_up_on_startup: bool = True

    # Parties filtering
    ner_min_confidence: float = 0.60
    ner_max_entities: int = 18

    # HTTP Client
    http_timeout_seconds: float = 10.0
    ner_timeout_seconds: float = 15.0  # Overall budget for one recognize() call
    ner_max_retries: int = 3
    ner_backoff_base: float = 1.0  # Exponential backoff base in seconds


settings = Settings()
