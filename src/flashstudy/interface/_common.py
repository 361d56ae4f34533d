"""Shared helpers for CLI command modules."""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import typer

from flashstudy.application.config import AppConfig, resolve_config
from flashstudy.domain.exceptions import FlashstudyError

T = TypeVar("T")


def _resolve_with_overrides(ctx: typer.Context | None = None, **overrides: Any) -> AppConfig:
    """Resolve config, layering global options stored on the context under explicit overrides."""
    merged: dict[str, Any] = {}
    if ctx is not None and ctx.obj:
        merged.update(ctx.obj.get("overrides", {}))
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return resolve_config(merged)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine, turning flashstudy errors into a red message and exit code 1."""
    try:
        return asyncio.run(coro)
    except FlashstudyError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1) from e
