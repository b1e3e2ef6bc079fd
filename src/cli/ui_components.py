"""Componentes de UI para CLI (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Tables/panels are reused by several commands.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import EntityStatus, MigrationRunStats, PricingResult

_STATUS_STYLES: dict[EntityStatus, str] = {
    EntityStatus.SUCCESS: "green",
    EntityStatus.FAILED: "red",
    EntityStatus.SKIPPED: "yellow",
}


def print_banner(console: Console) -> None:
    """Welcome banner. Not printed in `--json` mode."""

    title = Text("catalog-localizer", style="bold cyan")
    subtitle = Text("Traducciones • Precios personalizados", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_stats_table(stats: MigrationRunStats, *, collection: str) -> Table:
    table = Table(title=f"Migration summary: {collection}")
    table.add_column("Outcome", style="bold", no_wrap=True)
    table.add_column("Count", justify="right")
    table.add_row(Text("Success", style="green"), str(stats.success))
    table.add_row(Text("Failed", style="red"), str(stats.failed))
    table.add_row(Text("Skipped", style="yellow"), str(stats.skipped))
    if stats.cancelled:
        table.caption = "Run cancelled before visiting every entity."
    return table


def build_outcomes_table(stats: MigrationRunStats) -> Table:
    table = Table(title="Entities")
    table.add_column("Entity", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Fields", style="white")
    table.add_column("Error", style="red")
    for outcome in stats.outcomes:
        style = _STATUS_STYLES.get(outcome.status, "white")
        table.add_row(
            outcome.entity_id,
            Text(outcome.status.value, style=style),
            ", ".join(outcome.fields),
            outcome.error or "",
        )
    return table


def build_price_panel(result: PricingResult, *, title: str) -> Panel:
    body = Text()
    body.append(f"Price: {result.price:.2f}\n", style="bold")
    if result.original_price is not None:
        body.append(f"Original: {result.original_price:.2f}\n")
    if result.discount_amount is not None:
        body.append(f"Discount: {result.discount_amount:.2f} ({result.discount_percentage}%)\n")
    body.append(f"Tier: {result.tier_label or 'Base price'}", style="dim")
    return Panel(body, title=Text(title, style="bold yellow"), border_style="yellow")
