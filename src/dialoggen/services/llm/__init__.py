from typing import Optional
from .base import LLMProvider, LLMService
from .ollama_service import OllamaService
from .prompts import (
    PODCAST_EDITOR_SYSTEM_PROMPT,
    build_editor_prompt,
    build_speaker_system_prompt
)
from .response_parser import clean_response, parse_dialog_lines, parse_script

def create_llm_service(
    provider: LLMProvider = LLMProvider.OLLAMA,
    model_name: Optional[str] = None,
    **kwargs
) -> LLMService:
    """Create appropriate LLM service based on provider."""
    if provider == LLMProvider.OLLAMA:
        return OllamaService(
            model_name=model_name or "mistral:7b",
            host=kwargs.get('host', "http://localhost:11434"),
            timeout=kwargs.get('timeout', 300.0)
        )
    else:
        raise ValueError(f"Unsupported LLM provider: {provider}")

__all__ = [
    'LLMProvider',
    'LLMService',
    'OllamaService',
    'create_llm_service',
    'PODCAST_EDITOR_SYSTEM_PROMPT',
    'build_editor_prompt',
    'build_speaker_system_prompt',
    'clean_response',
    'parse_dialog_lines',
    'parse_script'
]
