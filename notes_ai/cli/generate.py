"""Raw text generation and token estimation commands."""

from typing import Optional

import typer

from notes_ai.cli.utils import display_info, get_client, handle_errors, run_async
from notes_ai.models.llm import GenerateTextRequest


@handle_errors
def generate_command(
    prompt: str = typer.Argument(..., help="Prompt to send"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model override"),
    max_tokens: Optional[int] = typer.Option(
        None, "--max-tokens", help="Token budget override"
    ),
    temperature: Optional[float] = typer.Option(
        None, "--temperature", "-t", help="Sampling temperature"
    ),
):
    """Generate text for PROMPT."""
    client = get_client()
    response = run_async(
        client.generate_text(
            GenerateTextRequest(
                prompt=prompt,
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        )
    )

    typer.echo(response.text)
    display_info(
        f"model={response.model} input_tokens={response.input_tokens} "
        f"output_tokens={response.output_tokens} total_tokens={response.total_tokens}"
    )


@handle_errors
def estimate_command(
    text: str = typer.Argument(..., help="Text to estimate"),
):
    """Estimate tokens for TEXT and check it against the configured limit."""
    client = get_client()
    tokens = client.estimate_tokens(text)
    within_limit = client.validate_token_limit(tokens)

    typer.echo(f"Estimated tokens: {tokens}")
    typer.echo(f"Within limit ({client.config.max_tokens}): {within_limit}")
