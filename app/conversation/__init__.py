from app.conversation.client_base import BaseChatClient
from app.conversation.factory import ChatClientFactory
from app.conversation.service import ConversationService, build_conversation_service

__all__ = [
    "BaseChatClient",
    "ChatClientFactory",
    "ConversationService",
    "build_conversation_service",
]
