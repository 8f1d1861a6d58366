"""Coloured operator-facing output. Diagnostics go through logging instead."""
from __future__ import annotations
from typing import Iterable
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.theme import Theme

custom_theme = Theme({
    "info": "cyan",
    "ok": "bold green",
    "warn": "bold yellow",
    "error": "bold red",
})

console = Console(theme=custom_theme)
err_console = Console(theme=custom_theme, stderr=True)


def banner() -> None:
    console.print(Panel("DayZ Server Docker Container", style="info", expand=False))


def info(message: str) -> None:
    console.print(escape(message), style="info")


def success(message: str) -> None:
    console.print(f"✅ {escape(message)}", style="ok")


def warn(message: str) -> None:
    console.print(f"⚠️  {escape(message)}", style="warn")


def error(message: str) -> None:
    err_console.print(f"❌ {escape(message)}", style="error")


def validation_errors(errors: Iterable[str]) -> None:
    err_console.print("Configuration validation failed:", style="error")
    for e in errors:
        err_console.print(f"  • {escape(e)}", style="error")


def steam_guard_instructions() -> None:
    body = (
        "A Steam Guard code has been sent to your email.\n\n"
        "To continue:\n"
        "  1. Check your email for the Steam Guard code\n"
        "  2. Set the STEAM_GUARD_CODE environment variable, e.g. in docker-compose.yml or .env:\n"
        "       [info]STEAM_GUARD_CODE=XXXXX[/info]\n"
        "  3. Recreate the container: [info]docker-compose up -d[/info]\n\n"
        "The container will exit now. Restart after adding the code."
    )
    err_console.print(Panel(body, title="STEAM GUARD CODE REQUIRED", border_style="warn"))
