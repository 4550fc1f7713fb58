"""OpenAI LLM provider implementation."""
import json

import httpx

from app.config.settings import get_settings
from app.core.logging import get_logger
from app.llm.base import (
    LLMProvider,
    LLMConfig,
    LLMResponse,
    Message,
)

logger = get_logger(__name__)


class OpenAIProvider(LLMProvider):
    """
    OpenAI-compatible LLM provider.

    Works with OpenAI API, OpenRouter, and other compatible endpoints.
    Uses the chat completions endpoint for conversations.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.api_key = api_key or settings.openai_api_key
        self.base_url = (base_url or settings.openai_base_url).rstrip('/')
        self.default_model = default_model or settings.openai_model
        self.timeout = timeout or settings.openai_timeout
        self._transport = transport

        if not self.api_key:
            logger.warning("openai_api_key_missing", detail="LLM features will fail")

        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    def _build_messages(self, messages: list[Message]) -> list[dict]:
        """Convert Message objects to OpenAI format."""
        return [{"role": m.role, "content": m.content} for m in messages]

    async def chat(
        self,
        messages: list[Message],
        config: LLMConfig,
    ) -> LLMResponse:
        """
        Send chat request to OpenAI-compatible API.

        When a schema is given it is appended to the system message; the reply
        is left as plain text so callers can expect top-level arrays.
        """
        client = await self._get_client()

        payload = {
            "model": config.model or self.default_model,
            "messages": self._build_messages(messages),
            "temperature": config.temperature,
        }

        if config.max_tokens:
            payload["max_tokens"] = config.max_tokens

        if config.json_schema:
            schema_hint = f"\n\nRespond with valid JSON matching this schema: {json.dumps(config.json_schema)}"
            if messages and messages[0].role == "system":
                payload["messages"][0]["content"] += schema_hint

        try:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "openai_api_error",
                status_code=e.response.status_code,
                body=e.response.text[:500],
            )
            raise

        data = response.json()
        choice = (data.get("choices") or [{}])[0]
        content = (choice.get("message") or {}).get("content") or ""
        usage = data.get("usage", {})

        logger.info(
            "openai_chat_completed",
            model=data.get("model"),
            total_tokens=usage.get("total_tokens"),
            finish_reason=choice.get("finish_reason"),
        )

        return LLMResponse(
            content=content,
            usage={
                "prompt_tokens": usage.get("prompt_tokens"),
                "completion_tokens": usage.get("completion_tokens"),
                "total_tokens": usage.get("total_tokens"),
            },
            model=data.get("model"),
            finish_reason=choice.get("finish_reason"),
        )

    async def health_check(self) -> bool:
        """
        Check if OpenAI API is accessible.

        Attempts to list models to verify connection.
        """
        if not self.api_key:
            return False

        try:
            client = await self._get_client()
            response = await client.get(f"{self.base_url}/models")
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning("openai_health_check_failed", error=str(e))
            return False
