"""Provider-neutral LLM types."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Literal


@dataclass
class Message:
    role: Literal["system", "user", "assistant"]
    content: str


@dataclass
class LLMConfig:
    model: str | None = None
    temperature: float = 0.0
    max_tokens: int | None = None
    json_schema: dict | None = None


@dataclass
class LLMResponse:
    content: str
    usage: dict = field(default_factory=dict)
    model: str | None = None
    finish_reason: str | None = None


class LLMProvider(ABC):
    """Chat-completion backend."""

    @abstractmethod
    async def chat(self, messages: list[Message], config: LLMConfig) -> LLMResponse:
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        ...

    async def close(self) -> None:
        """Release network resources."""
        return None
