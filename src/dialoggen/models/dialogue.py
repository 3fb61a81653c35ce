# src/dialoggen/models/dialogue.py
from typing import List
from pydantic import BaseModel, ConfigDict
from .stats import GenerationMetadata


class DialogExchange(BaseModel):
    """A single speaker/utterance pair in the transcript."""
    model_config = ConfigDict(frozen=True)

    speaker: str
    content: str

    def format_line(self) -> str:
        return f"{self.speaker}: {self.content}"


# Seed lines read from prompt.txt share the exchange shape
DialogLine = DialogExchange


def format_script(exchanges: List[DialogExchange]) -> str:
    """Render exchanges as "Speaker: content" paragraphs."""
    return "\n\n".join(exchange.format_line() for exchange in exchanges)


class GeneratedDialog(BaseModel):
    """A finished transcript together with its run metadata."""
    model_config = ConfigDict(frozen=True)

    exchanges: List[DialogExchange]
    metadata: GenerationMetadata

    def format_script(self) -> str:
        return format_script(self.exchanges)
