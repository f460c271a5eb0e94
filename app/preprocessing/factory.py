from app.config.settings import Settings
from app.preprocessing.base import BaseConversationPreprocessor
from app.preprocessing.patterns import PatternRegistry
from app.preprocessing.preprocessor import ConversationPreprocessor
from app.preprocessing.session_store import SessionAnonymizationStore


class PreprocessorFactory:
    """Creates the configured conversation preprocessor."""

    @classmethod
    def create(cls, settings: Settings) -> BaseConversationPreprocessor:
        """Compile the configured PII rules and build a preprocessor."""
        registry = PatternRegistry.from_config(
            settings.pii_categories,
            settings.pii_patterns,
        )
        return ConversationPreprocessor(
            registry=registry,
            store=SessionAnonymizationStore(ttl_seconds=settings.session_ttl_seconds),
            redaction_mode=settings.pii_redaction_mode,
            enabled=settings.preprocessing_enabled and settings.pii_detection_enabled,
            log_original_text=settings.log_original_text,
            log_processed_text=settings.log_processed_text,
            log_detections=settings.log_detections,
        )
