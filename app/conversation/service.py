"""One conversation turn: preprocess -> language model -> postprocess."""

import threading
import time
from collections import deque
from collections.abc import Callable

from app.config.settings import Settings
from app.conversation.client_base import BaseChatClient
from app.conversation.factory import ChatClientFactory
from app.conversation.models import ChatMessage, ConversationTurn
from app.logging.logger import Log
from app.preprocessing.base import BaseConversationPreprocessor
from app.preprocessing.factory import PreprocessorFactory


class _SessionHistory:
    def __init__(self, max_messages: int, now: float) -> None:
        self.messages: deque[ChatMessage] = deque(maxlen=max_messages)
        self.last_access = now


class ConversationService:
    """Routes user utterances through PII preprocessing to a chat model.

    The model only sees processed text. History is kept per session in its
    anonymized form so follow-up turns keep context without leaking values.

    With ``history_ttl_seconds > 0`` a session's history is dropped once it
    has been idle longer than the TTL. Use the anonymization store's TTL and
    clock here: history is touched before the preprocessor touches its
    session, so the history always expires no later than the tokens in it.
    """

    def __init__(
        self,
        *,
        preprocessor: BaseConversationPreprocessor,
        client: BaseChatClient,
        model: str,
        temperature: float = 0.2,
        system_prompt: str = "",
        max_history_messages: int = 20,
        history_ttl_seconds: float = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._preprocessor = preprocessor
        self._client = client
        self._model = model
        self._temperature = temperature
        self._system_prompt = system_prompt
        self._max_history = max_history_messages
        self._ttl = history_ttl_seconds
        self._clock = clock
        self._histories: dict[str, _SessionHistory] = {}
        self._lock = threading.Lock()
        self._last_purge = clock()

    def handle_turn(self, session_id: str, user_text: str) -> ConversationTurn:
        """Process one user utterance and return the de-anonymized reply.

        History only changes once the chat provider has answered.

        Raises:
            ChatClientError: if the chat provider fails.
        """
        Log.info("Handling conversation turn", session_id=session_id)

        history = self._touch_history(session_id)
        preprocessed = self._preprocessor.preprocess(user_text, session_id)
        Log.info(
            f"{len(preprocessed.detections)} PII detections", session_id=session_id
        )

        user_message = ChatMessage(role="user", content=preprocessed.processed_text)
        with self._lock:
            messages = [*history.messages, user_message]

        model_reply = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            messages=messages,
        )
        with self._lock:
            history.messages.append(user_message)
            history.messages.append(ChatMessage(role="assistant", content=model_reply))

        reply_text = self._preprocessor.postprocess(model_reply, session_id)
        return ConversationTurn(
            session_id=session_id,
            user_text=user_text,
            processed_text=preprocessed.processed_text,
            model_reply=model_reply,
            reply_text=reply_text,
            detections=list(preprocessed.detections),
        )

    def history(self, session_id: str) -> list[ChatMessage]:
        """Anonymized messages kept for *session_id*."""
        now = self._clock()
        with self._lock:
            history = self._histories.get(session_id)
            if history is None or self._is_expired(history, now):
                return []
            return list(history.messages)

    def end_session(self, session_id: str) -> None:
        with self._lock:
            self._histories.pop(session_id, None)
        self._preprocessor.end_session(session_id)
        Log.info("Session ended", session_id=session_id)

    def _touch_history(self, session_id: str) -> _SessionHistory:
        now = self._clock()
        with self._lock:
            if self._ttl and now - self._last_purge >= self._ttl / 2:
                self._purge_expired(now)

            history = self._histories.get(session_id)
            if history is not None and self._is_expired(history, now):
                Log.info("Conversation history expired", session_id=session_id)
                history = None
            if history is None:
                history = _SessionHistory(self._max_history, now)
                self._histories[session_id] = history
            history.last_access = now
            return history

    def _purge_expired(self, now: float) -> None:
        self._last_purge = now
        stale_ids = [
            sid for sid, history in self._histories.items()
            if self._is_expired(history, now)
        ]
        for sid in stale_ids:
            del self._histories[sid]
        if stale_ids:
            Log.info(f"Purged {len(stale_ids)} expired conversation histories")

    def _is_expired(self, history: _SessionHistory, now: float) -> bool:
        return bool(self._ttl) and now - history.last_access > self._ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._histories)


def build_conversation_service(settings: Settings) -> ConversationService:
    """Build a ConversationService with all required adapters."""
    preprocessor = PreprocessorFactory.create(settings)
    client = ChatClientFactory.create(settings)
    return ConversationService(
        preprocessor=preprocessor,
        client=client,
        model=settings.openai_model_name,
        temperature=settings.openai_temperature,
        system_prompt=settings.chat_system_prompt,
        max_history_messages=settings.chat_max_history_messages,
        history_ttl_seconds=settings.session_ttl_seconds,
    )
