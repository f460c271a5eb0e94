"""Offline chat client.

Replies by echoing the last user message, tokens included, so the whole
preprocess -> model -> postprocess path can run without network access.
"""

from typing import ClassVar

from app.conversation.client_base import BaseChatClient
from app.conversation.models import ChatMessage


class EchoChatClientAdapter(BaseChatClient):
    """Chat client that repeats the caller back. No network calls."""

    REPLY_TEMPLATE: ClassVar[str] = "You said: {content}"
    EMPTY_REPLY: ClassVar[str] = "I didn't catch that. Could you repeat it?"

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        messages: list[ChatMessage],
    ) -> str:
        _ = model, temperature, system_prompt
        for message in reversed(messages):
            if message.role == "user":
                if not message.content.strip():
                    return self.EMPTY_REPLY
                return self.REPLY_TEMPLATE.format(content=message.content)
        return self.EMPTY_REPLY
