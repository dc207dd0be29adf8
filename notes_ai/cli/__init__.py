"""notes-ai CLI Package.

Command-line access to the note AI features.

Usage:
    python -m notes_ai.cli health
    python -m notes_ai.cli env
    python -m notes_ai.cli generate "Hello"
    python -m notes_ai.cli estimate "some text"
    python -m notes_ai.cli tags note.md --max-tags 5
    python -m notes_ai.cli summarize note.md
"""

import typer

from notes_ai.cli.generate import estimate_command, generate_command
from notes_ai.cli.health import env_command, health_command
from notes_ai.cli.notes import summarize_command, tags_command

app = typer.Typer(help="notes-ai: Gemini-backed tags and summaries for notes")

app.command(name="health")(health_command)
app.command(name="env")(env_command)
app.command(name="generate")(generate_command)
app.command(name="estimate")(estimate_command)
app.command(name="tags")(tags_command)
app.command(name="summarize")(summarize_command)

__all__ = [
    "app",
    "health_command",
    "env_command",
    "generate_command",
    "estimate_command",
    "tags_command",
    "summarize_command",
]
