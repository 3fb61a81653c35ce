import logging

from ..errors import GenerationFailedError
from ..models.dialogue import GeneratedDialog
from ..models.stats import ChatMessage
from .llm import (
    LLMService,
    PODCAST_EDITOR_SYSTEM_PROMPT,
    build_editor_prompt,
    parse_script
)

logger = logging.getLogger(__name__)

class PodcastEditor:
    """Rewrites a finished transcript into a tighter podcast script."""

    def __init__(self, llm: LLMService, temperature: float = 0.7):
        self.llm = llm
        self.temperature = temperature

    async def edit(self, dialog: GeneratedDialog) -> GeneratedDialog:
        """Edit a generated dialog with a single model call.

        The edited text is parsed back into exchanges; the returned metadata
        adds the editing call's tokens and time to the original totals.
        """
        messages = [ChatMessage(role="user", content=build_editor_prompt(dialog.format_script()))]

        logger.info(f"Editing script of {len(dialog.exchanges)} exchanges")
        result = await self.llm.chat(PODCAST_EDITOR_SYSTEM_PROMPT, messages, self.temperature)
        logger.info(f"Editor responded in {result.stats.wall_time:.1f}s")

        edited = parse_script(result.content)
        if not edited:
            raise GenerationFailedError("Editor returned no recognizable 'Speaker: line' dialog")

        metadata = dialog.metadata.with_call(
            result.stats,
            model=f"{dialog.metadata.model} (edited)",
            turns=len(edited)
        )
        return GeneratedDialog(exchanges=edited, metadata=metadata)
