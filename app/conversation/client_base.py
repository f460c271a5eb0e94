from abc import ABC, abstractmethod

from app.conversation.models import ChatMessage


class BaseChatClient(ABC):
    """Contract for provider-specific chat completion clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        messages: list[ChatMessage],
    ) -> str:
        """Return the assistant reply as plain text."""
