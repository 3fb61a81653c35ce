import json
import logging
import time
import aiohttp
from typing import Any, Dict, List
import asyncio

from ...errors import GenerationFailedError, OllamaUnavailableError
from ...models.stats import ChatMessage, ChatResult, ChatStats
from .base import LLMService
from .session_manager import SessionManager

logger = logging.getLogger(__name__)

class OllamaService(LLMService):
    """Chat gateway backed by a local Ollama server."""

    def __init__(
        self,
        model_name: str = "mistral:7b",
        host: str = "http://localhost:11434",
        timeout: float = 300.0
    ):
        self.model_name = model_name
        self.host = host.rstrip("/")
        self.api_base = f"{self.host}/api"
        self.timeout = timeout
        self.session_manager = SessionManager(timeout=timeout)

    async def health_check(self) -> bool:
        """Check that the Ollama server answers the model listing endpoint."""
        try:
            session = await self.session_manager.get_session()
            async with session.get(f"{self.api_base}/tags") as response:
                if response.status != 200:
                    logger.warning(f"Ollama health check returned status {response.status}")
                    return False
                return True
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Ollama server not reachable at {self.host}: {e}")
            return False

    def _build_payload(
        self,
        system_prompt: str,
        history: List[ChatMessage],
        temperature: float
    ) -> Dict[str, Any]:
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend(message.model_dump() for message in history)
        return {
            "model": self.model_name,
            "messages": messages,
            "stream": False,
            "options": {"temperature": temperature}
        }

    @staticmethod
    def _counter(result: Dict[str, Any], key: str) -> int:
        """Read a server counter; missing or non-numeric values count as zero."""
        value = result.get(key)
        if value is None:
            return 0
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric {key} from Ollama: {value!r}")
            return 0

    @classmethod
    def _parse_stats(cls, result: Dict[str, Any], wall_time: float) -> ChatStats:
        return ChatStats(
            prompt_tokens=cls._counter(result, "prompt_eval_count"),
            completion_tokens=cls._counter(result, "eval_count"),
            eval_duration_ns=cls._counter(result, "eval_duration"),
            wall_time=wall_time
        )

    async def chat(
        self,
        system_prompt: str,
        history: List[ChatMessage],
        temperature: float = 0.7
    ) -> ChatResult:
        """Run one non-streaming chat completion."""
        payload = self._build_payload(system_prompt, history, temperature)
        logger.debug(
            f"Sending chat request to Ollama: model={self.model_name}, "
            f"{len(payload['messages'])} messages, temperature={temperature}"
        )

        session = await self.session_manager.get_session()
        started = time.perf_counter()
        try:
            async with session.post(f"{self.api_base}/chat", json=payload) as response:
                raw_body = await response.read()
                wall_time = time.perf_counter() - started
                if response.status != 200:
                    body = raw_body.decode("utf-8", errors="replace")
                    logger.error(f"Ollama API error (status {response.status}): {body}")
                    raise GenerationFailedError(f"HTTP {response.status}: {body}")
        except (aiohttp.ClientConnectionError, asyncio.TimeoutError) as e:
            raise OllamaUnavailableError(self.host, str(e) or type(e).__name__) from e
        except aiohttp.ClientError as e:
            raise GenerationFailedError(f"Request to Ollama failed: {e}") from e

        try:
            body = raw_body.decode("utf-8")
            result = json.loads(body)
        except UnicodeDecodeError as e:
            raise GenerationFailedError(f"Ollama response is not valid UTF-8: {e}") from e
        except json.JSONDecodeError as e:
            raise GenerationFailedError(f"Invalid JSON from Ollama: {e}") from e

        message = result.get("message") if isinstance(result, dict) else None
        if not isinstance(message, dict) or not isinstance(message.get("content"), str):
            raise GenerationFailedError(f"Ollama response has no message content: {body[:200]}")

        stats = self._parse_stats(result, wall_time)
        logger.debug(
            f"Received {stats.completion_tokens} completion tokens "
            f"in {stats.wall_time:.2f}s"
        )
        return ChatResult(content=message["content"], stats=stats)

    async def close(self) -> None:
        await self.session_manager.close()
