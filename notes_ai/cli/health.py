"""Health and environment commands."""

import typer

from notes_ai.cli.utils import (
    display_error,
    display_info,
    display_success,
    display_warning,
    get_client,
    handle_errors,
    run_async,
)
from notes_ai.services.config_manager import check_environment_setup


@handle_errors
def health_command():
    """Send a minimal request to Gemini and report latency."""
    client = get_client()
    result = run_async(client.health_check_detailed())

    if result.success:
        display_success(f"Gemini API healthy ({result.latency_ms:.0f}ms)")
        return

    display_error(f"Gemini API unhealthy ({result.latency_ms:.0f}ms): {result.error}")
    raise typer.Exit(code=1)


@handle_errors
def env_command():
    """Check that the required environment variables are set."""
    status = check_environment_setup()

    for warning in status.warnings:
        display_warning(warning)

    if not status.is_valid:
        display_error(f"Missing variables: {', '.join(status.missing_vars)}")
        raise typer.Exit(code=1)

    display_info("Environment is configured.")
