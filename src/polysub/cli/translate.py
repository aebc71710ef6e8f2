"""polysub translate command — translate existing subtitle files."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from polysub.core.config import load_config
from polysub.core.events import TranslationProgress
from polysub.core.models import SubtitleSource, TranslationStats
from polysub.subtitles.converter import load_subtitles, save_subtitles
from polysub.translation.outcomes import TranslationError

console = Console()


def translate(
    subtitle_file: Annotated[
        Path,
        typer.Argument(help="Path to subtitle file (SRT, VTT, ASS, TXT)."),
    ],
    to: Annotated[
        Optional[str],
        typer.Option("--to", "-t", help="Target language code (run 'polysub languages' to list)."),
    ] = None,
    source: Annotated[
        Optional[str],
        typer.Option("--from", "-s", help="Source language code (run 'polysub languages' to list)."),
    ] = None,
    provider: Annotated[
        Optional[str],
        typer.Option(help="Primary provider: libretranslate, deepl, openai, google."),
    ] = None,
    glossary: Annotated[
        Optional[Path],
        typer.Option("--glossary", "-g", help="Glossary file (TOML or JSON)."),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file path."),
    ] = None,
    fmt: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: srt, vtt, ass, txt."),
    ] = "srt",
) -> None:
    """Translate a subtitle file to another language."""
    from polysub.core.languages import validate_language
    from polysub.translation.glossary import load_glossary

    config = load_config(
        **{
            "translation.provider": provider,
            "translation.source_language": source,
            "translation.target_language": to,
        }
    )
    source_lang = config.translation.source_language
    target_lang = config.translation.target_language

    for code in (source_lang, target_lang):
        try:
            validate_language(code)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

    if not subtitle_file.is_file():
        console.print(f"[red]File not found:[/red] {subtitle_file}")
        raise typer.Exit(1)

    try:
        gloss = load_glossary(glossary) if glossary is not None else None
    except (OSError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[bold]Loading subtitles:[/bold] {subtitle_file}")
    subtitles = load_subtitles(subtitle_file, source_lang)
    console.print(f"[bold]Segments:[/bold] {len(subtitles.entries)}")

    try:
        result, stats = asyncio.run(_run(config, subtitles, target_lang, gloss))
    except (TranslationError, ValueError) as e:
        _print_failure(e)
        raise typer.Exit(1)

    # Determine output path
    if output is not None:
        sub_path = output
    else:
        sub_path = subtitle_file.with_suffix(f".{target_lang}.{fmt}")

    save_subtitles(result, sub_path, fmt=fmt)
    console.print(f"[green]Saved:[/green] {sub_path}")

    if stats is not None:
        console.print(_stats_table(stats))


async def _run(config, subtitles: SubtitleSource, target_lang: str, glossary):
    from polysub.translation.session import Translator

    async with Translator(config) as translator:
        translator.set_glossary(glossary)
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            console=console,
        ) as progress:
            task = progress.add_task("Translating subtitles", total=1.0)

            def on_progress(event: TranslationProgress) -> None:
                progress.update(task, completed=event.percentage, description=event.message)

            result = await translator.translate(subtitles, target_lang, on_progress=on_progress)
        return result, translator.get_last_stats()


def _print_failure(error: Exception) -> None:
    if isinstance(error, TranslationError):
        provider = error.provider_id.display_name if error.provider_id else "Translation"
        console.print(f"[red]{provider} failed:[/red] {error.user_message}")
        if error.is_retryable:
            console.print("[dim]This looks temporary, try again in a moment.[/dim]")
    else:
        console.print(f"[red]{error}[/red]")


def _stats_table(stats: TranslationStats) -> Table:
    table = Table(title="Translation statistics", show_header=False)
    table.add_column("Metric", style="bold cyan")
    table.add_column("Value")
    table.add_row("Segments", str(stats.total_segments))
    table.add_row("From cache", str(stats.cached_segments))
    table.add_row("API calls", str(stats.api_calls))
    table.add_row("Characters sent", str(stats.total_characters))
    table.add_row("Duration", f"{stats.duration_ms / 1000:.1f}s")
    if stats.provider_used:
        table.add_row("Provider", stats.provider_used.display_name)
    if stats.fallbacks_used:
        table.add_row("Fallbacks", ", ".join(p.display_name for p in stats.fallbacks_used))
    return table
