"""Console rendering for key status and migration results.

Color scheme:
- **Configured**   — bright_green dot.
- **Demo mode**    — yellow dot (USDA key deliberately unset).
- **Missing**      — red dot.
- **Vault error**  — bold red dot, shown with ``verbose``.
"""

from __future__ import annotations

from typing import Iterable, Optional

from rich.console import Console
from rich.text import Text

from mealplanner.constants import APP_NAME, APP_VERSION
from mealplanner.credentials.migration import MigrationReport
from mealplanner.credentials.status import KeyStatus
from mealplanner.credentials.store import LookupStatus

_DOT = "●"


def status_dot(status: KeyStatus) -> Text:
    """One coloured dot plus label, as in the app's toolbar indicator."""
    if status.lookup is LookupStatus.ERROR:
        style = "bold red"
    elif status.demo:
        style = "yellow"
    elif status.configured:
        style = "bright_green"
    else:
        style = "red"
    text = Text(_DOT, style=style)
    text.append(f" {status.label}")
    return text


def render_key_status(
    statuses: Iterable[KeyStatus],
    console: Optional[Console] = None,
    *,
    verbose: bool = False,
) -> None:
    """Print the availability indicator line (and details when *verbose*)."""
    console = console or Console()
    statuses = list(statuses)

    line = Text()
    for i, status in enumerate(statuses):
        if i:
            line.append("  ")
        line.append_text(status_dot(status))
    console.print(line)

    if any(s.demo for s in statuses):
        console.print(Text("USDA food search is in demo mode.", style="yellow"))

    if verbose:
        console.print(Text(f"{APP_NAME} v{APP_VERSION}", style="dim"))
        for status in statuses:
            console.print(
                f"  {status.label:<14s} {status.kind.namespace:<34s} {status.lookup.value}"
            )


def render_migration_report(report: MigrationReport, console: Optional[Console] = None) -> None:
    console = console or Console()
    for kind in report.stored:
        console.print(Text(f"✔ {kind.label} key stored", style="green"))
    for kind in report.skipped:
        console.print(Text(f"- {kind.label} key empty, skipped", style="dim"))
    for kind in report.failed:
        console.print(Text(f"✘ {kind.label} key could not be stored", style="bold red"))
    if not (report.stored or report.skipped or report.failed):
        console.print("No keys found to migrate.")
    elif report.ok:
        console.print(Text("API keys are now kept in secure storage.", style="bold green"))
