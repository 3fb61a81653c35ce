"""Shared fixtures for dialoggen tests."""

from typing import List, Optional, Sequence, Union

import pytest

from dialoggen.errors import GenerationFailedError
from dialoggen.models import (
    ChatMessage,
    ChatResult,
    ChatStats,
    DialogConfig,
    DialogExchange,
    SceneDirections,
    SceneParameters,
    SpeakerProfile,
)
from dialoggen.services.llm import LLMService


class FakeLLMService(LLMService):
    """Gateway stand-in that replays canned replies and records each call."""

    def __init__(
        self,
        replies: Sequence[Union[str, ChatResult, Exception]],
        model_name: str = "fake:1b",
        healthy: bool = True,
    ):
        self.model_name = model_name
        self.replies = list(replies)
        self.healthy = healthy
        self.calls: List[dict] = []
        self.closed = False

    async def chat(self, system_prompt: str, history: List[ChatMessage],
                   temperature: float = 0.7) -> ChatResult:
        self.calls.append({
            "system_prompt": system_prompt,
            "history": list(history),
            "temperature": temperature,
        })
        if not self.replies:
            raise GenerationFailedError("no more canned replies")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, ChatResult):
            return reply
        return ChatResult(content=reply, stats=ChatStats())

    async def health_check(self) -> bool:
        return self.healthy

    async def close(self) -> None:
        self.closed = True


def make_config(
    seed: Optional[List[DialogExchange]] = None,
    turns: int = 4,
    temperature: float = 0.7,
    names=("Ann", "Ben"),
) -> DialogConfig:
    return DialogConfig(
        speaker1=SpeakerProfile(
            name=names[0],
            background="A retired lighthouse keeper.",
            personality="Dry and patient.",
            motivations="Wants the light kept on.",
            speaking_style="Short, nautical phrases.",
        ),
        speaker2=SpeakerProfile(
            name=names[1],
            background="A new harbour inspector.",
            personality="Eager and literal.",
            motivations="Wants to close the lighthouse.",
            speaking_style="Formal and wordy.",
        ),
        directions=SceneDirections(
            scene_name="The last inspection",
            setting="A lighthouse gallery at dusk.",
            mood="Tense",
            goal="Decide the lighthouse's fate.",
            notes="Keep it civil.",
        ),
        initial_lines=seed or [],
        scene=SceneParameters(turns=turns, temperature=temperature),
    )


@pytest.fixture
def config() -> DialogConfig:
    return make_config()


@pytest.fixture
def scene_dir(tmp_path):
    """A complete scene directory on disk."""
    (tmp_path / "speaker1.txt").write_text(
        "Name: Ann\n"
        "Background: A retired lighthouse keeper\n"
        "who still climbs the stairs every night.\n"
        "Personality: Dry and patient.\n"
        "Motivations: Keep the light on.\n"
        "Speaking style: Short, nautical phrases.\n"
    )
    (tmp_path / "speaker2.txt").write_text(
        "Name: Ben\n"
        "Background: A new harbour inspector.\n"
        "Personality: Eager.\n"
        "Motivations: Close the lighthouse.\n"
        "Speaking style: Formal.\n"
    )
    (tmp_path / "directions.txt").write_text(
        "Scene: The last inspection\n"
        "Setting: A lighthouse gallery at dusk.\n"
        "Mood: Tense\n"
        "Goal: Decide the lighthouse's fate.\n"
        "Notes: Keep it civil.\n"
    )
    (tmp_path / "scene.txt").write_text("Turns: 2\nTemperature: 0.5\n")
    (tmp_path / "prompt.txt").write_text(
        "Opening at the top of the stairs.\n"
        "\n"
        "Ann: You're late, inspector.\n"
    )
    return tmp_path


@pytest.fixture
def config_factory():
    return make_config


@pytest.fixture
def fake_llm_factory():
    return FakeLLMService
