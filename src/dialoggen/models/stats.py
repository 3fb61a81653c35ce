"""Per-call and per-run generation statistics."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

NANOS_PER_SECOND = 1_000_000_000


class ChatMessage(BaseModel):
    """A role-tagged message sent to the chat endpoint."""
    role: str = Field(..., pattern="^(system|user|assistant)$")
    content: str


class ChatStats(BaseModel):
    """Counters for a single model call.

    Token counts and ``eval_duration_ns`` come from the server and default
    to zero when it does not report them. ``wall_time`` is measured locally
    in seconds.
    """
    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = 0
    completion_tokens: int = 0
    eval_duration_ns: int = 0
    wall_time: float = 0.0


class ChatResult(BaseModel):
    """Generated text plus the statistics of the call that produced it."""
    model_config = ConfigDict(frozen=True)

    content: str
    stats: ChatStats = Field(default_factory=ChatStats)


class GenerationMetadata(BaseModel):
    """Aggregated statistics for a whole generation run."""
    model_config = ConfigDict(frozen=True)

    model: str
    turns: int
    temperature: float
    total_prompt_tokens: int = 0
    total_completion_tokens: int = 0
    total_wall_time: float = 0.0
    avg_tokens_per_second: float = 0.0

    @property
    def total_tokens(self) -> int:
        return self.total_prompt_tokens + self.total_completion_tokens

    def with_call(self, stats: ChatStats, model: Optional[str] = None,
                  turns: Optional[int] = None) -> "GenerationMetadata":
        """Return a copy with one more call folded into the totals.

        The average rate is left untouched.
        """
        return self.model_copy(update={
            "model": model if model is not None else self.model,
            "turns": turns if turns is not None else self.turns,
            "total_prompt_tokens": self.total_prompt_tokens + stats.prompt_tokens,
            "total_completion_tokens": self.total_completion_tokens + stats.completion_tokens,
            "total_wall_time": self.total_wall_time + stats.wall_time,
        })


class StatsAccumulator:
    """Running totals owned by a single generation run."""

    def __init__(self):
        self.prompt_tokens = 0
        self.completion_tokens = 0
        self.eval_duration_ns = 0
        self.wall_time = 0.0
        self.calls = 0

    def add(self, stats: ChatStats) -> None:
        self.prompt_tokens += stats.prompt_tokens
        self.completion_tokens += stats.completion_tokens
        self.eval_duration_ns += stats.eval_duration_ns
        self.wall_time += stats.wall_time
        self.calls += 1

    @property
    def tokens_per_second(self) -> float:
        if self.eval_duration_ns <= 0:
            return 0.0
        return self.completion_tokens / (self.eval_duration_ns / NANOS_PER_SECOND)

    def build_metadata(self, model: str, turns: int, temperature: float) -> GenerationMetadata:
        return GenerationMetadata(
            model=model,
            turns=turns,
            temperature=temperature,
            total_prompt_tokens=self.prompt_tokens,
            total_completion_tokens=self.completion_tokens,
            total_wall_time=self.wall_time,
            avg_tokens_per_second=self.tokens_per_second,
        )
