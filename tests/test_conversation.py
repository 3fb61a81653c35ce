"""
Tests for the turn-taking engine.
"""
import pytest

from dialoggen.errors import (
    GenerationFailedError,
    OllamaUnavailableError,
    SpeakerConfigurationError,
    TurnGenerationError,
)
from dialoggen.models import ChatResult, ChatStats, DialogExchange, SpeakerProfile
from dialoggen.services.conversation import (
    DialogOrchestrator,
    build_conversation_history,
    next_speaker,
    other_speaker,
)


TRANSCRIPT = [
    DialogExchange(speaker="Ann", content="You're late."),
    DialogExchange(speaker="Ben", content="The ferry was cancelled."),
    DialogExchange(speaker="Ben", content="Twice."),
    DialogExchange(speaker="Ann", content="Convenient."),
]


class TestSpeakerSelection:
    """Who speaks first and who answers."""

    def test_no_seed_starts_with_second_speaker(self, config):
        assert next_speaker(config, None).name == "Ben"

    def test_answers_last_seed_speaker(self, config):
        assert next_speaker(config, "Ann").name == "Ben"
        assert next_speaker(config, "Ben").name == "Ann"

    def test_other_speaker_by_name(self, config):
        assert other_speaker(config, config.speaker1) == config.speaker2
        assert other_speaker(config, config.speaker2) == config.speaker1

    def test_other_speaker_unknown_is_configuration_error(self, config):
        with pytest.raises(SpeakerConfigurationError):
            other_speaker(config, SpeakerProfile(name="Cleo"))


class TestConversationHistory:
    """Role tagging from the current speaker's point of view."""

    def test_own_lines_are_assistant(self):
        roles = [m.role for m in build_conversation_history(TRANSCRIPT, "Ann")]
        assert roles == ["assistant", "user", "user", "assistant"]

    def test_roles_are_complement_for_other_speaker(self):
        ann = [m.role for m in build_conversation_history(TRANSCRIPT, "Ann")]
        ben = [m.role for m in build_conversation_history(TRANSCRIPT, "Ben")]
        swap = {"assistant": "user", "user": "assistant"}
        assert ben == [swap[role] for role in ann]

    def test_content_is_preserved_in_order(self):
        history = build_conversation_history(TRANSCRIPT, "Ben")
        assert [m.content for m in history] == [e.content for e in TRANSCRIPT]

    def test_empty_transcript(self):
        assert build_conversation_history([], "Ann") == []


class TestDialogOrchestrator:
    """End-to-end generation against a fake gateway."""

    @pytest.mark.asyncio
    async def test_end_to_end_two_turns(self, config_factory, fake_llm_factory):
        config = config_factory(turns=2)
        llm = fake_llm_factory(["Ben: I agree.", "Sure thing."])

        dialog = await DialogOrchestrator(llm, config).generate()

        assert dialog.exchanges == [
            DialogExchange(speaker="Ben", content="I agree."),
            DialogExchange(speaker="Ann", content="Sure thing."),
        ]
        assert dialog.metadata.model == "fake:1b"
        assert dialog.metadata.turns == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("turns", [0, 1, 2, 5])
    async def test_transcript_length_and_seed_preserved(self, config_factory, fake_llm_factory, turns):
        seed = [
            DialogExchange(speaker="Ann", content="You're late."),
            DialogExchange(speaker="Ben", content="The ferry was cancelled."),
        ]
        config = config_factory(seed=seed, turns=turns)
        llm = fake_llm_factory([f"Line {i}." for i in range(turns)])

        dialog = await DialogOrchestrator(llm, config).generate()

        assert len(dialog.exchanges) == len(seed) + turns
        assert dialog.exchanges[:len(seed)] == seed
        assert len(llm.calls) == turns

    @pytest.mark.asyncio
    async def test_speakers_alternate(self, config_factory, fake_llm_factory):
        seed = [DialogExchange(speaker="Ben", content="Evening.")]
        config = config_factory(seed=seed, turns=5)
        llm = fake_llm_factory(["Hm."] * 5)

        dialog = await DialogOrchestrator(llm, config).generate()

        generated = [e.speaker for e in dialog.exchanges[1:]]
        assert generated == ["Ann", "Ben", "Ann", "Ben", "Ann"]
        for previous, current in zip(generated, generated[1:]):
            assert previous != current

    @pytest.mark.asyncio
    async def test_each_call_sees_speaker_perspective(self, config_factory, fake_llm_factory):
        seed = [DialogExchange(speaker="Ann", content="You're late.")]
        config = config_factory(seed=seed, turns=2, temperature=0.3)
        llm = fake_llm_factory(["Sorry.", "Fine."])

        await DialogOrchestrator(llm, config).generate()

        first, second = llm.calls
        assert first["system_prompt"].startswith("You are Ben talking to Ann.")
        assert [m.role for m in first["history"]] == ["user"]
        assert second["system_prompt"].startswith("You are Ann talking to Ben.")
        assert [m.role for m in second["history"]] == ["assistant", "user"]
        assert [m.content for m in second["history"]] == ["You're late.", "Sorry."]
        assert first["temperature"] == second["temperature"] == 0.3

    @pytest.mark.asyncio
    async def test_system_prompt_carries_scene(self, config, fake_llm_factory):
        llm = fake_llm_factory(["Hm."] * config.scene.turns)

        await DialogOrchestrator(llm, config).generate()

        prompt = llm.calls[0]["system_prompt"]
        assert "A new harbour inspector." in prompt
        assert "Scene: The last inspection. A lighthouse gallery at dusk." in prompt
        assert "Keep it civil." in prompt
        assert "EXACTLY ONE SHORT SENTENCE" in prompt

    @pytest.mark.asyncio
    async def test_aggregates_statistics(self, config_factory, fake_llm_factory):
        config = config_factory(turns=3)
        llm = fake_llm_factory([
            ChatResult(content="One.", stats=ChatStats(
                prompt_tokens=10, completion_tokens=4, eval_duration_ns=500_000_000, wall_time=1.0)),
            ChatResult(content="Two.", stats=ChatStats(
                prompt_tokens=20, completion_tokens=6, eval_duration_ns=500_000_000, wall_time=1.5)),
            ChatResult(content="Three.", stats=ChatStats(
                prompt_tokens=30, completion_tokens=10, eval_duration_ns=1_000_000_000, wall_time=2.0)),
        ])

        dialog = await DialogOrchestrator(llm, config).generate()
        meta = dialog.metadata

        assert meta.total_prompt_tokens == 60
        assert meta.total_completion_tokens == 20
        assert meta.total_tokens == 80
        assert meta.total_wall_time == pytest.approx(4.5)
        assert meta.avg_tokens_per_second == pytest.approx(10.0)

    @pytest.mark.asyncio
    async def test_no_eval_time_gives_zero_rate(self, config_factory, fake_llm_factory):
        config = config_factory(turns=1)
        llm = fake_llm_factory([ChatResult(content="One.", stats=ChatStats(completion_tokens=7))])

        dialog = await DialogOrchestrator(llm, config).generate()

        assert dialog.metadata.avg_tokens_per_second == 0.0

    @pytest.mark.asyncio
    async def test_empty_reply_is_kept(self, config_factory, fake_llm_factory):
        config = config_factory(turns=1)
        llm = fake_llm_factory(["Ben:"])

        dialog = await DialogOrchestrator(llm, config).generate()

        assert dialog.exchanges == [DialogExchange(speaker="Ben", content="")]

    @pytest.mark.asyncio
    async def test_failure_aborts_with_turn_number(self, config_factory, fake_llm_factory):
        config = config_factory(turns=3)
        cause = GenerationFailedError("HTTP 500: boom")
        llm = fake_llm_factory(["One.", cause, "never used"])

        with pytest.raises(TurnGenerationError) as excinfo:
            await DialogOrchestrator(llm, config).generate()

        error = excinfo.value
        assert error.turn == 2
        assert error.speaker == "Ann"
        assert error.cause is cause
        assert error.__cause__ is cause
        assert error.exchanges == [DialogExchange(speaker="Ben", content="One.")]
        assert "Turn 2/3" in str(error)
        assert len(llm.calls) == 2

    @pytest.mark.asyncio
    async def test_unavailable_is_not_retried(self, config_factory, fake_llm_factory):
        config = config_factory(turns=2)
        llm = fake_llm_factory([OllamaUnavailableError("http://localhost:11434")])

        with pytest.raises(TurnGenerationError) as excinfo:
            await DialogOrchestrator(llm, config).generate()

        assert isinstance(excinfo.value.cause, OllamaUnavailableError)
        assert len(llm.calls) == 1

    @pytest.mark.asyncio
    async def test_unknown_seed_speaker_fails_before_any_call(self, config_factory, fake_llm_factory):
        seed = [DialogExchange(speaker="Narrator", content="It was a dark night.")]
        config = config_factory(seed=seed, turns=2)
        llm = fake_llm_factory(["Hm.", "Hm."])

        with pytest.raises(SpeakerConfigurationError):
            await DialogOrchestrator(llm, config).generate()
        assert llm.calls == []

    @pytest.mark.asyncio
    async def test_duplicate_speaker_names_rejected(self, config_factory, fake_llm_factory):
        config = config_factory(names=("Ann", "Ann"), turns=1)

        with pytest.raises(SpeakerConfigurationError):
            await DialogOrchestrator(fake_llm_factory(["Hm."]), config).generate()

    @pytest.mark.asyncio
    async def test_generate_is_repeatable(self, config_factory, fake_llm_factory):
        config = config_factory(turns=2)
        llm = fake_llm_factory(["A.", "B.", "C.", "D."])
        orchestrator = DialogOrchestrator(llm, config)

        first = await orchestrator.generate()
        second = await orchestrator.generate()

        assert [e.content for e in first.exchanges] == ["A.", "B."]
        assert [e.content for e in second.exchanges] == ["C.", "D."]
        assert config.initial_lines == []

    @pytest.mark.asyncio
    async def test_on_turn_callback(self, config_factory, fake_llm_factory):
        config = config_factory(turns=2)
        seen = []

        await DialogOrchestrator(fake_llm_factory(["A.", "B."]), config).generate(
            on_turn=lambda turn, total, exchange: seen.append((turn, total, exchange.speaker))
        )

        assert seen == [(1, 2, "Ben"), (2, 2, "Ann")]
