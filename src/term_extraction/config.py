"""
Application configuration management.

This module handles process-level configuration from environment variables using
Pydantic Settings. Per-run extraction options live in
``term_extraction.models.configuration``.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application configuration from environment variables.

    All settings can be overridden via environment variables with the same name
    (e.g. ``LOG_LEVEL=DEBUG``).
    """

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Scheduling
    default_num_threads: int = 10
    scheduler_queue_size: int = 1000
    scheduler_timeout_seconds: float = 2 * 24 * 60 * 60  # two days

    # Linguistic annotation
    spacy_model_name: str = "en_core_web_sm"
    spacy_use_lemmas: bool = True

    # Scoring
    default_domain_size: int = 50

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


# Global settings instance
settings = Settings()
