from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

from ..errors import SpeakerConfigurationError
from .dialogue import DialogLine
from .speaker import SpeakerProfile


class SceneDirections(BaseModel):
    """Director's notes shared by both speakers for every turn."""
    model_config = ConfigDict(frozen=True)

    scene_name: str = ""
    setting: str = ""
    mood: str = ""
    goal: str = ""
    notes: str = ""


class SceneParameters(BaseModel):
    """Run parameters read from scene.txt."""
    model_config = ConfigDict(frozen=True)

    turns: int = Field(default=4, ge=0)
    temperature: float = 0.7
    model: Optional[str] = None


class DialogConfig(BaseModel):
    """Everything a generation run needs: both speakers, scene and seed lines."""
    model_config = ConfigDict(frozen=True)

    speaker1: SpeakerProfile
    speaker2: SpeakerProfile
    directions: SceneDirections = Field(default_factory=SceneDirections)
    initial_lines: List[DialogLine] = Field(default_factory=list)
    scene: SceneParameters = Field(default_factory=SceneParameters)

    @property
    def speakers(self) -> Tuple[SpeakerProfile, SpeakerProfile]:
        return self.speaker1, self.speaker2

    @property
    def speaker_names(self) -> Tuple[str, str]:
        return self.speaker1.name, self.speaker2.name

    def validate_speakers(self) -> None:
        """Check that both speakers are distinct and every seed line belongs to one of them.

        Raises:
            SpeakerConfigurationError: if the registry cannot attribute every line.
        """
        names = self.speaker_names
        if not all(name.strip() for name in names):
            raise SpeakerConfigurationError(
                "Both speakers need a name (set 'Name:' in speaker1.txt and speaker2.txt)"
            )
        if names[0] == names[1]:
            raise SpeakerConfigurationError(
                f"Speakers must have different names, both are named {names[0]!r}"
            )
        for index, line in enumerate(self.initial_lines, start=1):
            if line.speaker not in names:
                raise SpeakerConfigurationError(
                    f"Prompt line {index} is spoken by {line.speaker!r}, "
                    f"expected one of {names[0]!r} or {names[1]!r}"
                )
