"""PolySub CLI entry point."""

from typing import Annotated, Optional

import typer
from dotenv import load_dotenv

from polysub import __version__
from polysub.cli.languages import languages
from polysub.cli.providers import providers
from polysub.cli.translate import translate

app = typer.Typer(
    name="polysub",
    help="PolySub — Subtitle translation with provider fallback, caching and glossaries.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"polysub {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """PolySub — Subtitle translation with provider fallback, caching and glossaries."""
    # Load .env file for API keys (POLYSUB_DEEPL__API_KEY, etc.)
    # Does not override existing env vars; shell exports take precedence
    load_dotenv(override=False)


app.command("translate")(translate)
app.command("providers")(providers)
app.command("languages")(languages)
