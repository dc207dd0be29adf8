"""Note feature commands: tags and summaries."""

from pathlib import Path
from typing import Optional

import typer

from notes_ai.cli.utils import (
    display_info,
    display_warning,
    get_client,
    handle_errors,
    read_note,
    run_async,
)
from notes_ai.models.llm import GenerateTagsRequest
from notes_ai.services.summary_service import SummaryService
from notes_ai.services.tag_service import TagGenerationService


@handle_errors
def tags_command(
    note_path: Path = typer.Argument(..., help="Note file (UTF-8 text)"),
    max_tags: int = typer.Option(6, "--max-tags", "-n", help="Maximum tags"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model override"),
):
    """Generate tags for a note file."""
    content = read_note(note_path)
    service = TagGenerationService(get_client())
    result = run_async(
        service.generate_tags(
            GenerateTagsRequest(content=content, max_tags=max_tags, model=model)
        )
    )

    if not result.tags:
        display_warning("No tags could be generated.")
        raise typer.Exit(code=1)

    for tag in result.tags:
        typer.echo(f"#{tag}")
    display_info(f"model={result.model} tags={len(result.tags)}")


@handle_errors
def summarize_command(
    note_path: Path = typer.Argument(..., help="Note file (UTF-8 text)"),
):
    """Summarize a note file into bullet points."""
    content = read_note(note_path)
    service = SummaryService(get_client())
    result = run_async(service.generate_summary(content))

    typer.echo(result.summary)
    display_info(f"model={result.model} output_tokens={result.output_tokens}")
