from typing import Callable, List, Optional
import logging

from ..errors import DialogGenError, SpeakerConfigurationError, TurnGenerationError
from ..models.dialogue import DialogExchange, GeneratedDialog
from ..models.scene import DialogConfig
from ..models.speaker import SpeakerProfile
from ..models.stats import ChatMessage, StatsAccumulator
from .llm import LLMService, build_speaker_system_prompt, clean_response

logger = logging.getLogger(__name__)

# Called after each generated turn with (turn number, total turns, exchange)
TurnCallback = Callable[[int, int, DialogExchange], None]


def next_speaker(config: DialogConfig, last_speaker: Optional[str]) -> SpeakerProfile:
    """Pick who answers the seed lines.

    The counterpart of the last seed speaker goes first. With no seed lines
    speaker2 opens, since prompts usually have speaker1 starting.
    """
    if last_speaker == config.speaker1.name:
        return config.speaker2
    if last_speaker == config.speaker2.name:
        return config.speaker1
    return config.speaker2


def other_speaker(config: DialogConfig, speaker: SpeakerProfile) -> SpeakerProfile:
    """Return the counterpart of ``speaker``, matched by name."""
    if speaker.name == config.speaker1.name:
        return config.speaker2
    if speaker.name == config.speaker2.name:
        return config.speaker1
    raise SpeakerConfigurationError(
        f"{speaker.name!r} is not one of the configured speakers "
        f"{config.speaker1.name!r} and {config.speaker2.name!r}"
    )


def build_conversation_history(
    exchanges: List[DialogExchange],
    speaker_name: str
) -> List[ChatMessage]:
    """Tag the transcript from ``speaker_name``'s point of view.

    Their own lines become "assistant" messages, everything else "user".
    """
    return [
        ChatMessage(
            role="assistant" if exchange.speaker == speaker_name else "user",
            content=exchange.content
        )
        for exchange in exchanges
    ]


class DialogOrchestrator:
    """Generates a dialog one model call per turn, alternating speakers."""

    def __init__(self, llm: LLMService, config: DialogConfig):
        self.llm = llm
        self.config = config

    async def generate(self, on_turn: Optional[TurnCallback] = None) -> GeneratedDialog:
        """Run the configured number of turns and return the full transcript.

        Raises:
            SpeakerConfigurationError: before any call, if the speakers or
                seed lines are inconsistent.
            TurnGenerationError: if a model call fails. Nothing is retried.
        """
        config = self.config
        config.validate_speakers()

        turns = config.scene.turns
        temperature = config.scene.temperature
        exchanges = list(config.initial_lines)
        last_speaker = exchanges[-1].speaker if exchanges else None
        current = next_speaker(config, last_speaker)
        stats = StatsAccumulator()

        logger.info(
            f"Generating {turns} turns between {config.speaker1.name} and "
            f"{config.speaker2.name} ({len(exchanges)} seed lines, {current.name} first)"
        )

        for turn in range(1, turns + 1):
            other = other_speaker(config, current)
            system_prompt = build_speaker_system_prompt(current, other, config.directions)
            history = build_conversation_history(exchanges, current.name)

            logger.debug(f"Turn {turn}/{turns}: {current.name} ({len(history)} history messages)")
            try:
                result = await self.llm.chat(system_prompt, history, temperature)
            except DialogGenError as e:
                logger.error(f"Turn {turn}/{turns} failed for {current.name}: {e}")
                raise TurnGenerationError(turn, turns, current.name, list(exchanges), e) from e

            stats.add(result.stats)
            exchange = DialogExchange(
                speaker=current.name,
                content=clean_response(result.content, current.name)
            )
            exchanges.append(exchange)

            if not exchange.content:
                logger.warning(f"Turn {turn}/{turns}: {current.name} produced an empty line")
            if on_turn:
                on_turn(turn, turns, exchange)

            current = other

        metadata = stats.build_metadata(self.llm.model_name, turns, temperature)
        logger.info(
            f"Generated {turns} turns: {metadata.total_tokens} tokens, "
            f"{metadata.total_wall_time:.2f}s, {metadata.avg_tokens_per_second:.1f} tok/s"
        )
        return GeneratedDialog(exchanges=exchanges, metadata=metadata)
