import httpx
import openai

from app.conversation.client_base import BaseChatClient
from app.conversation.exceptions import ChatClientError, ChatClientNetworkError
from app.conversation.models import ChatMessage


class OpenAIChatClientAdapter(BaseChatClient):
    """Chat client adapter built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        messages: list[ChatMessage],
    ) -> str:
        payload: list[dict[str, str]] = []
        if system_prompt:
            payload.append({"role": "system", "content": system_prompt})
        payload.extend({"role": m.role, "content": m.content} for m in messages)

        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                messages=payload,
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ChatClientNetworkError(
                f"Chat provider network error: {exc}"
            ) from exc
        except openai.APIError as exc:
            raise ChatClientNetworkError(
                f"Chat provider API error: {exc}"
            ) from exc

        if not response.choices:
            raise ChatClientError("Chat provider returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise ChatClientError("Chat provider returned empty response")
        return content
