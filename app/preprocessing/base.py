from abc import ABC, abstractmethod

from app.preprocessing.models import PreprocessingResult


class BaseConversationPreprocessor(ABC):
    """Contract for conversation text preprocessing adapters."""

    @abstractmethod
    def preprocess(self, text: str, session_id: str) -> PreprocessingResult:
        """Detect PII in user text before it is sent to the language model.

        Args:
            text: Raw transcribed text from speech-to-text (or an email body).
            session_id: Conversation session id scoping the anonymization map.

        Returns:
            PreprocessingResult with processed text and detection metadata.
        """

    @abstractmethod
    def postprocess(self, text: str, session_id: str) -> str:
        """Map anonymization tokens in a model reply back to original values.

        Args:
            text: Language model reply.
            session_id: Same session id used for preprocessing.

        Returns:
            Reply text with known tokens replaced by the original values.
        """

    @abstractmethod
    def end_session(self, session_id: str) -> bool:
        """Forget all anonymization state for *session_id*."""
