"""polysub languages command — list supported languages."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from polysub.core.languages import DEEPL_LANGUAGES, SUPPORTED_LANGUAGES

console = Console()


def languages(
    deepl_only: Annotated[
        bool,
        typer.Option("--deepl-only", help="Only show languages DeepL can translate."),
    ] = False,
) -> None:
    """List all language codes accepted for translation."""
    table = Table(title=f"Supported Languages ({len(SUPPORTED_LANGUAGES)})")
    table.add_column("Code", style="bold cyan", width=5)
    table.add_column("Language", width=20)
    table.add_column("DeepL", width=6)

    for code in sorted(SUPPORTED_LANGUAGES):
        name = SUPPORTED_LANGUAGES[code].title()
        has_deepl = code in DEEPL_LANGUAGES

        if deepl_only and not has_deepl:
            continue

        table.add_row(code, name, "yes" if has_deepl else "-")

    console.print(table)
    console.print(
        "\n[dim]LibreTranslate, Google and LLM providers accept every code listed; "
        "availability on a self-hosted LibreTranslate depends on its installed models.[/dim]"
    )
