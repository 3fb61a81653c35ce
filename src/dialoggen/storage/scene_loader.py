"""Loading of a scene directory into a DialogConfig.

A scene directory holds five plain-text files::

    speaker1.txt    speaker2.txt    directions.txt    scene.txt    prompt.txt

All but ``prompt.txt`` use "Key: value" lines. A line without a key is a
continuation of the previous value.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from ..errors import MissingConfigurationError
from ..models.scene import DialogConfig, SceneDirections, SceneParameters
from ..models.speaker import SpeakerProfile
from ..services.llm.response_parser import parse_dialog_lines

logger = logging.getLogger(__name__)

SPEAKER1_FILE = "speaker1.txt"
SPEAKER2_FILE = "speaker2.txt"
DIRECTIONS_FILE = "directions.txt"
SCENE_FILE = "scene.txt"
PROMPT_FILE = "prompt.txt"

DEFAULT_TURNS = 4
DEFAULT_TEMPERATURE = 0.7


def _is_key(candidate: str) -> bool:
    return bool(candidate) and all(c.isalpha() or c.isspace() for c in candidate)


def parse_key_value(content: str) -> Dict[str, str]:
    """Parse "Key: value" lines into a dict with lower-cased keys."""
    fields: Dict[str, str] = {}
    current_key: Optional[str] = None
    current_value = ""

    for line in content.splitlines():
        line = line.strip()

        if ":" in line:
            candidate, value = line.split(":", 1)
            if _is_key(candidate):
                if current_key is not None:
                    fields[current_key] = current_value.strip()
                current_key = candidate.strip().lower()
                current_value = value.strip()
                continue

        if current_key is not None and line:
            current_value = f"{current_value} {line}" if current_value else line

    if current_key is not None:
        fields[current_key] = current_value.strip()

    return fields


def _read(input_dir: Path, filename: str) -> str:
    path = input_dir / filename
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        logger.debug(f"Could not read {path}: {e}")
        raise MissingConfigurationError(filename) from e


def load_speaker(input_dir: Path, filename: str) -> SpeakerProfile:
    fields = parse_key_value(_read(input_dir, filename))
    return SpeakerProfile(
        name=fields.get("name", ""),
        background=fields.get("background", ""),
        personality=fields.get("personality", ""),
        motivations=fields.get("motivations", ""),
        speaking_style=fields.get("speaking style", ""),
    )


def load_directions(input_dir: Path) -> SceneDirections:
    fields = parse_key_value(_read(input_dir, DIRECTIONS_FILE))
    return SceneDirections(
        scene_name=fields.get("scene", ""),
        setting=fields.get("setting", ""),
        mood=fields.get("mood", ""),
        goal=fields.get("goal", ""),
        notes=fields.get("notes", ""),
    )


def load_scene(input_dir: Path) -> SceneParameters:
    """Read turns, temperature and model; bad numbers fall back to defaults."""
    fields = parse_key_value(_read(input_dir, SCENE_FILE))

    try:
        turns = int(fields.get("turns", DEFAULT_TURNS))
        if turns < 0:
            raise ValueError(turns)
    except ValueError:
        logger.warning(f"Invalid turns {fields.get('turns')!r} in {SCENE_FILE}, using {DEFAULT_TURNS}")
        turns = DEFAULT_TURNS

    try:
        temperature = float(fields.get("temperature", DEFAULT_TEMPERATURE))
    except ValueError:
        logger.warning(
            f"Invalid temperature {fields.get('temperature')!r} in {SCENE_FILE}, "
            f"using {DEFAULT_TEMPERATURE}"
        )
        temperature = DEFAULT_TEMPERATURE

    return SceneParameters(
        turns=turns,
        temperature=temperature,
        model=fields.get("model") or None,
    )


def load_config(input_dir: Union[str, Path]) -> DialogConfig:
    """Load every scene file from ``input_dir``.

    Raises:
        MissingConfigurationError: naming the first file that could not be read.
    """
    input_dir = Path(input_dir)
    logger.info(f"Loading scene configuration from {input_dir}")

    config = DialogConfig(
        speaker1=load_speaker(input_dir, SPEAKER1_FILE),
        speaker2=load_speaker(input_dir, SPEAKER2_FILE),
        directions=load_directions(input_dir),
        initial_lines=parse_dialog_lines(_read(input_dir, PROMPT_FILE)),
        scene=load_scene(input_dir),
    )
    logger.info(
        f"Loaded speakers {config.speaker1.name} and {config.speaker2.name}, "
        f"{len(config.initial_lines)} seed lines, {config.scene.turns} turns"
    )
    return config
