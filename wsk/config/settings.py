from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..datamodel.values import ENTITY_IRI_PREFIX

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Project-wide settings sourced from .env and environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WSK_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    evaluation_workers: int = 1
    entity_prefix: str = ENTITY_IRI_PREFIX

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {value!r}, expected one of {LOG_LEVELS}")
        return level


settings = Settings()
