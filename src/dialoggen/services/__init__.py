"""Dialog generation services."""

from .conversation import (
    DialogOrchestrator,
    build_conversation_history,
    next_speaker,
    other_speaker
)
from .editor import PodcastEditor
from .llm import (
    LLMService,
    LLMProvider,
    OllamaService,
    create_llm_service
)

__all__ = [
    "DialogOrchestrator",
    "PodcastEditor",
    "build_conversation_history",
    "next_speaker",
    "other_speaker",
    "LLMService",
    "LLMProvider",
    "OllamaService",
    "create_llm_service"
]
