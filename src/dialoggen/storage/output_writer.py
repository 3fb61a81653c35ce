import logging
import re
from pathlib import Path
from typing import Tuple, Union

from ..models.dialogue import GeneratedDialog
from ..models.stats import GenerationMetadata

logger = logging.getLogger(__name__)

DIALOG_FILE_PATTERN = re.compile(r"^generated-dialog(\d+)\.txt$")


def format_metadata(meta: GenerationMetadata) -> str:
    return (
        f"Model: {meta.model}\n"
        f"Turns: {meta.turns}\n"
        f"Temperature: {meta.temperature:.2f}\n"
        f"\n"
        f"Prompt tokens: {meta.total_prompt_tokens}\n"
        f"Completion tokens: {meta.total_completion_tokens}\n"
        f"Total tokens: {meta.total_tokens}\n"
        f"\n"
        f"Wall time: {meta.total_wall_time:.2f}s\n"
        f"Tokens/second: {meta.avg_tokens_per_second:.1f}\n"
    )


class OutputWriter:
    """Writes transcripts and their metadata into an output directory."""

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)

    def next_file_number(self) -> int:
        """One more than the highest existing generated-dialogN.txt."""
        highest = 0
        if self.output_dir.is_dir():
            for entry in self.output_dir.iterdir():
                match = DIALOG_FILE_PATTERN.match(entry.name)
                if match:
                    highest = max(highest, int(match.group(1)))
        return highest + 1

    def _write_pair(self, dialog: GeneratedDialog, dialog_name: str, metadata_name: str) -> Tuple[Path, Path]:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        dialog_path = self.output_dir / dialog_name
        metadata_path = self.output_dir / metadata_name

        dialog_path.write_text(dialog.format_script().rstrip(), encoding="utf-8")
        metadata_path.write_text(format_metadata(dialog.metadata), encoding="utf-8")
        logger.info(f"Wrote {dialog_path} and {metadata_path}")
        return dialog_path, metadata_path

    def write(self, dialog: GeneratedDialog) -> Path:
        """Write generated-dialogN.txt and output-metadataN.txt, returning the dialog path."""
        number = self.next_file_number()
        dialog_path, _ = self._write_pair(
            dialog,
            f"generated-dialog{number}.txt",
            f"output-metadata{number}.txt"
        )
        return dialog_path

    def write_edited(self, dialog: GeneratedDialog) -> Path:
        """Write edited-podcast.txt and edited-metadata.txt, replacing earlier ones."""
        dialog_path, _ = self._write_pair(dialog, "edited-podcast.txt", "edited-metadata.txt")
        return dialog_path
