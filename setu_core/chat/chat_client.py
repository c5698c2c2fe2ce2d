# =============================================================================
# setu_core/chat/chat_client.py
# HTTP transport for the streaming chat endpoint
# =============================================================================
"""
ChatEndpointClient - POSTs the conversation and yields the raw SSE body.

Usage:
    client = ChatEndpointClient.from_settings(settings)
    text = await StreamDecoder().consume(client.stream_chat(history, "en"))
"""

from __future__ import annotations
from typing import Any, AsyncIterator, Dict, List, Optional
import logging

import httpx

from setu_core.errors import ChatRateLimitError, ChatTransportError

logger = logging.getLogger(__name__)

# The endpoint expects language names, the app uses codes
CONTEXT_LANGUAGES = {"en": "english", "hi": "hindi"}

DEFAULT_ERROR_MESSAGE = "Failed to get AI response"


class ChatEndpointClient:
    """Streaming client for the tutor chat function."""

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        timeout: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._client = client
        self._transport = transport

    @classmethod
    def from_settings(cls, settings, **kwargs) -> ChatEndpointClient:
        settings.require_remote()
        return cls(
            settings.chat_endpoint,
            api_key=settings.supabase_key,
            timeout=settings.chat_timeout_seconds,
            **kwargs,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    @staticmethod
    def _error_for(response: httpx.Response) -> ChatTransportError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("error") if isinstance(body, dict) else None

        if response.status_code == 429:
            return ChatRateLimitError(message or "Rate limits exceeded. Please try again later.")
        if response.status_code == 402:
            return ChatTransportError(
                message or "AI service temporarily unavailable.",
                status_code=402,
            )
        return ChatTransportError(message or DEFAULT_ERROR_MESSAGE, status_code=response.status_code)

    async def stream_chat(
        self,
        messages: List[Dict[str, str]],
        language: str = "en",
        context: Optional[Dict[str, Any]] = None,
    ) -> AsyncIterator[bytes]:
        """
        Send the conversation and yield response body chunks as they arrive.

        Raises:
            ChatRateLimitError: HTTP 429
            ChatTransportError: any other non-2xx status or a transport failure
        """
        body = {
            "messages": messages,
            "context": {**(context or {}), "language": CONTEXT_LANGUAGES.get(language, "english")},
        }

        client = self._client
        owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

        try:
            async with client.stream("POST", self.url, json=body, headers=self._headers()) as response:
                if not response.is_success:
                    await response.aread()
                    error = self._error_for(response)
                    logger.warning(f"Chat endpoint returned {response.status_code}: {error.message}")
                    raise error

                async for chunk in response.aiter_bytes():
                    yield chunk
        except httpx.HTTPError as e:
            raise ChatTransportError(f"Chat request failed: {e}") from e
        finally:
            if owns_client:
                await client.aclose()
