from .dialogue import DialogExchange, DialogLine, GeneratedDialog, format_script
from .scene import DialogConfig, SceneDirections, SceneParameters
from .speaker import SpeakerProfile
from .stats import (
    ChatMessage,
    ChatResult,
    ChatStats,
    GenerationMetadata,
    StatsAccumulator
)

__all__ = [
    "DialogExchange",
    "DialogLine",
    "GeneratedDialog",
    "format_script",
    "DialogConfig",
    "SceneDirections",
    "SceneParameters",
    "SpeakerProfile",
    "ChatMessage",
    "ChatResult",
    "ChatStats",
    "GenerationMetadata",
    "StatsAccumulator"
]
