from app.config.settings import Settings
from app.preprocessing.factory import PreprocessorFactory
from app.preprocessing.models import RedactionMode
from app.preprocessing.preprocessor import ConversationPreprocessor


class TestPreprocessorFactory:
    def test_returns_conversation_preprocessor(self) -> None:
        preprocessor = PreprocessorFactory.create(Settings())
        assert isinstance(preprocessor, ConversationPreprocessor)

    def test_uses_configured_categories(self) -> None:
        settings = Settings(pii_categories=["email"])
        preprocessor = PreprocessorFactory.create(settings)
        result = preprocessor.preprocess("555-123-4567 a@b.com", "s1")
        assert result.processed_text == "555-123-4567 [EMAIL_1]"

    def test_uses_configured_mode(self) -> None:
        settings = Settings(pii_categories=["ssn"], pii_redaction_mode=RedactionMode.REMOVE)
        preprocessor = PreprocessorFactory.create(settings)
        result = preprocessor.preprocess("ssn 123-45-6789", "s1")
        assert result.processed_text == "ssn "

    def test_preprocessing_disabled(self) -> None:
        preprocessor = PreprocessorFactory.create(Settings(preprocessing_enabled=False))
        result = preprocessor.preprocess("a@b.com", "s1")
        assert result.processed_text == "a@b.com"
        assert result.was_modified is False

    def test_pii_detection_disabled(self) -> None:
        preprocessor = PreprocessorFactory.create(Settings(pii_detection_enabled=False))
        result = preprocessor.preprocess("a@b.com", "s1")
        assert result.was_modified is False

    def test_misconfigured_rules_pass_text_through(self) -> None:
        settings = Settings(pii_categories=["phone"], pii_patterns={"phone": "(["})
        preprocessor = PreprocessorFactory.create(settings)
        result = preprocessor.preprocess("555-123-4567", "s1")
        assert result.processed_text == "555-123-4567"

    def test_session_ttl_applied(self) -> None:
        preprocessor = PreprocessorFactory.create(Settings(session_ttl_seconds=30))
        assert isinstance(preprocessor, ConversationPreprocessor)
        preprocessor.preprocess("a@b.com", "s1")
        assert "s1" in preprocessor.store
