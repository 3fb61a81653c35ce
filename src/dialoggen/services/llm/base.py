from abc import ABC, abstractmethod
from typing import List
import logging
from enum import Enum

from ...models.stats import ChatMessage, ChatResult

logger = logging.getLogger(__name__)

class LLMProvider(str, Enum):
    """Available LLM providers."""
    OLLAMA = "ollama"

class LLMService(ABC):
    """Base class for chat-completion gateways."""

    model_name: str

    @abstractmethod
    async def chat(
        self,
        system_prompt: str,
        history: List[ChatMessage],
        temperature: float = 0.7
    ) -> ChatResult:
        """Send a system prompt plus ordered history, return text and stats.

        Raises:
            OllamaUnavailableError: the server could not be reached.
            GenerationFailedError: the server answered with an error or
                unusable content.
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True if the server is reachable. Never raises."""
        pass

    async def close(self) -> None:
        """Release any network resources held by the service."""
        pass

    async def __aenter__(self) -> 'LLMService':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def provider_name(self) -> str:
        """Get the name of the LLM provider."""
        return self.__class__.__name__.replace('Service', '')
