"""Prompt building for speaker turns and the editing pass."""

from ...models.scene import SceneDirections
from ...models.speaker import SpeakerProfile

SPEAKER_PROMPT_TEMPLATE = """You are {name} talking to {other_name}.

{name}: {background} {personality} {speaking_style}

Scene: {scene}. {setting}
{notes}

RESPOND WITH EXACTLY ONE SHORT SENTENCE. Either a statement OR a question, never both. No followup. Just react to what {other_name} said."""

PODCAST_EDITOR_SYSTEM_PROMPT = """You are an expert podcast editor with years of experience making conversations more engaging and natural-sounding.

Your goal is to edit podcast scripts so that:
- Listeners stay engaged and come back for more episodes
- The conversation flows naturally with good pacing
- Each speaker has a distinct, consistent voice
- The dialog feels authentic, not scripted
- Awkward phrasings are smoothed out
- Repetitive content is trimmed or varied
- The energy and momentum build appropriately

Edit the following podcast script. Preserve the speaker names and format (SPEAKER: dialog).
Make it tighter, more engaging, and more natural. Keep the same general content and meaning, but improve the delivery."""


def build_speaker_system_prompt(
    speaker: SpeakerProfile,
    other: SpeakerProfile,
    directions: SceneDirections
) -> str:
    """Build the system prompt that puts the model in ``speaker``'s voice."""
    return SPEAKER_PROMPT_TEMPLATE.format(
        name=speaker.name,
        other_name=other.name,
        background=speaker.background,
        personality=speaker.personality,
        speaking_style=speaker.speaking_style,
        scene=directions.scene_name,
        setting=directions.setting,
        notes=directions.notes,
    )


def build_editor_prompt(script: str) -> str:
    return f"Edit this podcast script:\n\n{script.strip()}"
