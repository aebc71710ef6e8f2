"""polysub providers command — show providers, fallback order and batch limits."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from polysub.core.config import load_config
from polysub.core.models import ProviderId
from polysub.translation.providers import build_providers, fallback_order

console = Console()


def providers() -> None:
    """List translation providers, whether they are configured, and the fallback order."""
    config = load_config()
    primary = ProviderId.from_string(config.translation.provider)
    if primary is None:
        console.print(f"[red]Unknown translation provider:[/red] {config.translation.provider}")
        raise typer.Exit(1)

    adapters = build_providers(config, client=None)
    order = [p.provider_id for p in fallback_order(primary, adapters)]

    table = Table(title="Translation Providers")
    table.add_column("Id", style="bold cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Ready")
    table.add_column("Order", justify="right")
    table.add_column("Chars", justify="right")
    table.add_column("Segs", justify="right")
    table.add_column("Ctx", justify="right")

    for provider_id, adapter in adapters.items():
        limits = adapter.batch_config
        position = str(order.index(provider_id) + 1) if provider_id in order else "-"
        table.add_row(
            provider_id.value,
            provider_id.display_name + (" *" if provider_id == primary else ""),
            "yes" if adapter.is_configured else "[dim]no[/dim]",
            position,
            str(limits.max_characters),
            str(limits.max_segments),
            str(limits.context_segments),
        )

    console.print(table)
    console.print("[dim]* primary provider. Limits are per batch: characters, segments, context pairs.[/dim]")
    console.print(
        "\n[dim]Set credentials in polysub.toml or the environment "
        "(e.g. POLYSUB_DEEPL__API_KEY).[/dim]"
    )
