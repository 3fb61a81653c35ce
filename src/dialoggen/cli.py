"""Command-line entry point: generate a dialog from a scene directory."""

import asyncio
import contextlib
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import config
from .errors import (
    DialogGenError,
    MissingConfigurationError,
    SpeakerConfigurationError,
    TurnGenerationError
)
from .models.dialogue import DialogExchange, GeneratedDialog
from .models.scene import DialogConfig
from .services.conversation import DialogOrchestrator
from .services.editor import PodcastEditor
from .services.llm import LLMProvider, create_llm_service
from .storage import OutputWriter, load_config

app = typer.Typer(help="Generate AI-powered dialog between two characters using a local LLM.")
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def resolve_model(cli_model: Optional[str], dialog_config: DialogConfig) -> str:
    """CLI option wins over scene.txt, which wins over settings."""
    return cli_model or dialog_config.scene.model or config.settings.llm_model


def print_dialog(dialog: GeneratedDialog) -> None:
    for exchange in dialog.exchanges:
        console.print(f"[bold]{escape(exchange.speaker)}[/bold]: {escape(exchange.content)}\n", highlight=False)


async def run(
    input_dir: Path,
    output_dir: Path,
    model: Optional[str],
    ollama_url: str,
    edit: bool,
    verbose: bool
) -> Path:
    """Load, check the server, generate, write and optionally edit."""
    if verbose:
        err_console.print(f"Loading configuration from: {input_dir}")
    dialog_config = load_config(input_dir)
    dialog_config.validate_speakers()

    if verbose:
        err_console.print(
            f"Loaded speakers: {dialog_config.speaker1.name} and {dialog_config.speaker2.name}"
        )
        err_console.print(
            f"Scene: {dialog_config.directions.scene_name} ({dialog_config.scene.turns} turns)"
        )

    model_name = resolve_model(model, dialog_config)
    llm = create_llm_service(
        LLMProvider.OLLAMA,
        model_name=model_name,
        host=ollama_url,
        timeout=config.settings.request_timeout
    )

    async with llm:
        if verbose:
            err_console.print(f"Connecting to Ollama at {ollama_url} with model {model_name}...")
        if not await llm.health_check():
            raise DialogGenError(f"Health check failed: Ollama server not available at {ollama_url}. Is Ollama running?")
        if verbose:
            err_console.print("Ollama server connected.\n")
            if dialog_config.initial_lines:
                err_console.print("Initial dialog:")
                for line in dialog_config.initial_lines:
                    err_console.print(f"  {escape(line.format_line())}", highlight=False)

        def show_turn(turn: int, total: int, exchange: DialogExchange) -> None:
            err_console.print(f"Turn {turn}/{total}: {escape(exchange.speaker)} ... {escape(exchange.content)}", highlight=False)

        orchestrator = DialogOrchestrator(llm, dialog_config)
        status = contextlib.nullcontext() if verbose else console.status(
            f"Generating {dialog_config.scene.turns} turns...", spinner="dots"
        )
        with status:
            dialog = await orchestrator.generate(on_turn=show_turn if verbose else None)

        writer = OutputWriter(output_dir)
        output_path = writer.write(dialog)
        console.print(f"\nDialog generated: {output_path}")
        console.print("\n--- Generated Dialog ---\n")
        print_dialog(dialog)

        if edit:
            if verbose:
                err_console.print("\n--- Editing podcast script ---\n")
            try:
                edited = await PodcastEditor(llm).edit(dialog)
            except DialogGenError as e:
                raise DialogGenError(f"Editing failed: {e}") from e
            edited_path = writer.write_edited(edited)
            console.print(f"\nEdited podcast: {edited_path}")
            console.print("\n--- Edited Podcast ---\n")
            print_dialog(edited)

    return output_path


@app.command()
def main(
    input_dir: Path = typer.Option(..., "--input", "-i", help="Input directory containing configuration files"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output directory (defaults to input directory)"
    ),
    model: Optional[str] = typer.Option(
        None, "--model", "-m", help="Ollama model to use (overrides scene.txt)"
    ),
    ollama_url: Optional[str] = typer.Option(
        None, "--ollama-url", help="Ollama server URL (overrides OLLAMA_HOST)"
    ),
    edit: bool = typer.Option(False, "--edit", help="Run the podcast editing pass after generation"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output")
):
    """Generate a dialog between the two speakers defined in INPUT."""
    config.settings.setup_logging(verbose=verbose)

    if not input_dir.exists():
        err_console.print(f"[red]Input directory does not exist: {input_dir}")
        raise typer.Exit(1)
    if not input_dir.is_dir():
        err_console.print(f"[red]Input path is not a directory: {input_dir}")
        raise typer.Exit(1)

    try:
        asyncio.run(run(
            input_dir=input_dir,
            output_dir=output or input_dir,
            model=model,
            ollama_url=ollama_url or config.settings.ollama_host,
            edit=edit,
            verbose=verbose
        ))
    except MissingConfigurationError as e:
        err_console.print(f"[red]Configuration error: {escape(str(e))}")
        raise typer.Exit(1)
    except SpeakerConfigurationError as e:
        err_console.print(f"[red]Speaker configuration error: {escape(str(e))}")
        raise typer.Exit(1)
    except TurnGenerationError as e:
        logger.error(str(e))
        err_console.print(f"[red]Generation failed: {escape(str(e))}")
        raise typer.Exit(1)
    except DialogGenError as e:
        logger.error(str(e))
        err_console.print(f"[red]Error: {escape(str(e))}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
