"""Error types raised by dialoggen."""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models.dialogue import DialogExchange


class DialogGenError(Exception):
    """Base class for all dialoggen errors."""


class MissingConfigurationError(DialogGenError):
    """A required scene configuration file could not be read."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Missing required file: {filename}")


class SpeakerConfigurationError(DialogGenError):
    """The speaker registry or seed lines are inconsistent."""


class OllamaUnavailableError(DialogGenError):
    """The model server could not be reached at all."""

    def __init__(self, host: str, reason: Optional[str] = None):
        self.host = host
        self.reason = reason
        message = f"Ollama server unavailable at {host}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class GenerationFailedError(DialogGenError):
    """The server answered, but not with a usable completion."""


class TurnGenerationError(DialogGenError):
    """A model call failed while generating a specific turn.

    ``cause`` is the original gateway error. ``exchanges`` holds the
    transcript as it stood before the failing turn so callers can decide
    whether to keep it.
    """

    def __init__(self, turn: int, total_turns: int, speaker: str,
                 exchanges: List["DialogExchange"], cause: Exception):
        self.turn = turn
        self.total_turns = total_turns
        self.speaker = speaker
        self.exchanges = exchanges
        self.cause = cause
        super().__init__(
            f"Turn {turn}/{total_turns} generation failed for {speaker}: {cause}"
        )
