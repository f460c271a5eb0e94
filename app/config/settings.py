from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.preprocessing.models import RedactionMode

DEFAULT_PII_PATTERNS: dict[str, str] = {
    "creditcard": r"\b(?:\d{4}[ -]?){3}\d{4}\b",
    "ssn": r"\b\d{3}-\d{2}-\d{4}\b",
    "phone": r"(?<!\w)(?:\+?1[-.\s]?)?(?:\(\d{3}\)|\d{3})[-.\s]?\d{3}[-.\s]?\d{4}(?!\w)",
    "email": r"[\w.\-+]+@[\w.\-]+\.\w{2,}",
}


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    preprocessing_enabled: bool = True
    pii_detection_enabled: bool = True
    pii_redaction_mode: RedactionMode = RedactionMode.ANONYMIZE
    pii_categories: list[str] = Field(
        default_factory=lambda: ["creditcard", "ssn", "phone", "email"]
    )
    pii_patterns: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_PII_PATTERNS)
    )

    log_original_text: bool = False
    log_processed_text: bool = True
    log_detections: bool = False

    session_ttl_seconds: int = Field(default=0, ge=0)

    chat_provider: str = "echo"
    chat_system_prompt: str = (
        "You are a helpful phone assistant. Values in square brackets such as"
        " [PHONE_1] are placeholders for private data; repeat them exactly."
    )
    chat_max_history_messages: int = Field(default=20, ge=1)

    openai_api_key: str = ""
    openai_model_name: str = "gpt-4o-mini"
    openai_timeout_seconds: int = 30
    openai_temperature: float = 0.2
    openai_base_url: str = ""

    @field_validator("pii_redaction_mode", mode="before")
    @classmethod
    def _normalize_redaction_mode(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value
