from dataclasses import dataclass, field

from app.preprocessing.models import PiiDetection


@dataclass(frozen=True)
class ChatMessage:
    """One message in the anonymized history sent to the language model."""

    role: str  # "user" or "assistant"
    content: str


@dataclass
class ConversationTurn:
    """Everything produced while handling one user utterance."""

    session_id: str
    user_text: str
    processed_text: str
    model_reply: str
    reply_text: str
    detections: list[PiiDetection] = field(default_factory=list)
