"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from adapters.content_stores.json_file import load_documents
from adapters.mymemory_translator import MyMemoryTranslator
from core.config import AppSettings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_PROBE_TEXT = "Hola"


async def _check_provider(settings: AppSettings) -> tuple[bool, str]:
    targets = settings.target_languages()
    if not targets:
        return False, "No target languages configured"
    async with MyMemoryTranslator(settings) as translator:
        translated = await translator.translate(_PROBE_TEXT, targets[0])
    if translator.failures:
        return False, "Provider call failed (see warning log)"
    return True, f"{_PROBE_TEXT!r} -> {translated!r} ({targets[0]})"


def _check_store(path: Path) -> tuple[bool, str]:
    if not path.exists():
        return False, f"{path} does not exist"
    try:
        data = load_documents(path)
    except (OSError, ValueError) as exc:
        return False, str(exc)
    counts = ", ".join(f"{name}={len(docs or {})}" for name, docs in sorted(data.items()))
    return True, counts or "empty"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="catalog-localizer doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Languages", "OK", ", ".join(settings.language_codes))
    table.add_row("Default language", "OK", settings.default_language.value)
    table.add_row("Provider URL", "OK", settings.provider_url)
    table.add_row("Call delay", "OK", f"{settings.translation_delay_seconds:.2f}s")

    ok_store, detail_store = _check_store(settings.store_path)
    table.add_row("Content store", "OK" if ok_store else "FAIL", detail_store)

    ok_provider, detail_provider = asyncio.run(_check_provider(settings))
    table.add_row("Translation provider", "OK" if ok_provider else "FAIL", detail_provider)

    _console.print(table)

    if not ok_provider:
        _console.print(
            "\n[yellow]Note:[/yellow] When the provider fails, migrations keep the source text "
            "and the entity can be re-translated later with `migrate --force`."
        )


@app.command(name="setup-provider")
def setup_provider() -> None:
    """Interactive provider setup (stored in the user config .env)."""

    settings = AppSettings()
    url = typer.prompt("Provider URL", default=settings.provider_url, show_default=True).strip()
    delay = typer.prompt(
        "Seconds between calls",
        default=settings.translation_delay_seconds,
        type=float,
        show_default=True,
    )
    timeout = typer.prompt(
        "Per-call timeout (seconds)",
        default=settings.provider_timeout_seconds,
        type=float,
        show_default=True,
    )

    if not url:
        raise typer.BadParameter("provider URL is required")
    if delay < 0 or timeout <= 0:
        raise typer.BadParameter("delay must be >= 0 and timeout > 0")

    env_path = write_user_env_vars(
        {
            "CATALOG_LOCALIZER_PROVIDER_URL": url,
            "CATALOG_LOCALIZER_TRANSLATION_DELAY_SECONDS": str(delay),
            "CATALOG_LOCALIZER_PROVIDER_TIMEOUT_SECONDS": str(timeout),
        }
    )

    _console.print(f"[green]Saved provider config to:[/green] {env_path}")
