"""Shared CLI utilities.

Provides client construction, error handling and output helpers for all
commands.
"""

import asyncio
import functools
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import structlog
import typer

from notes_ai.observability.logging import configure_logging
from notes_ai.services.config_manager import ConfigValidationError, get_log_level
from notes_ai.services.llm.client import LLMClient, create_llm_client
from notes_ai.utils.exceptions import LLMError

configure_logging(level=get_log_level())
logger = structlog.get_logger()

F = TypeVar("F", bound=Callable)
T = TypeVar("T")


def get_client() -> LLMClient:
    """Build an LLM client from the environment.

    Raises:
        typer.Exit: If configuration is invalid.
    """
    try:
        return create_llm_client()
    except ConfigValidationError as e:
        typer.secho(f"Configuration Error: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def run_async(coro: Awaitable[T]) -> T:
    return asyncio.run(coro)  # type: ignore[arg-type]


def read_note(path: Path) -> str:
    """Read a note file as UTF-8 text."""
    if not path.exists():
        typer.secho(f"Note file not found: {path}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    return path.read_text(encoding="utf-8")


def handle_errors(func: F) -> F:
    """Decorator for consistent error handling.

    LLMError is shown with its localized user message and kind; anything
    else is logged with its traceback.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except LLMError as e:
            logger.warning("command_llm_error", kind=e.kind.value, error=e.message)
            typer.secho(f"{e.user_message} ({e.kind.value})", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        except Exception as e:
            logger.exception("command_failed")
            typer.secho(f"Error: {e}", fg=typer.colors.RED)
            raise typer.Exit(code=1)

    return wrapper  # type: ignore[return-value]


def display_success(message: str) -> None:
    typer.secho(message, fg=typer.colors.GREEN)


def display_warning(message: str) -> None:
    typer.secho(message, fg=typer.colors.YELLOW)


def display_error(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)


def display_info(message: str) -> None:
    typer.secho(message, fg=typer.colors.CYAN)
