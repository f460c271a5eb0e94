class ConversationError(Exception):
    """Raised when a conversation turn cannot be completed."""


class ChatClientError(ConversationError):
    """Raised when the language model returns nothing usable."""


class ChatClientNetworkError(ChatClientError):
    """Raised when the language model call fails due to network/infrastructure issues."""
