"""Terminal rendering for review output, uploads, and history."""

from __future__ import annotations

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from codelens_core.inputs import readable_bytes
from codelens_core.session import SessionState
from codelens_store.models import ReviewRecord

console = Console()


def print_review(text: str, reviewed_chars: int | None = None) -> None:
    if not text:
        console.print("[yellow]No review output yet.[/yellow]")
        return
    subtitle = f"{reviewed_chars:,}자 리뷰됨" if reviewed_chars is not None else None
    console.print(Panel(Markdown(text), title="Review", subtitle=subtitle, border_style="cyan"))


def print_error(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_files(state: SessionState) -> None:
    if not state.items:
        console.print("[yellow]No files uploaded.[/yellow]")
        return
    total = sum(item.size for item in state.items)
    table = Table(
        title=f"{len(state.items)}개 선택됨 • {readable_bytes(total)}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("#", justify="right", width=4)
    table.add_column("File")
    table.add_column("Size", justify="right", width=10)
    for i, item in enumerate(state.items, 1):
        marker = "[bold green]*[/bold green] " if item.id == state.selected_item_id else ""
        table.add_row(str(i), f"{marker}{item.name}", readable_bytes(item.size))
    console.print(table)


def print_history(records: list[ReviewRecord]) -> None:
    if not records:
        console.print("[yellow]No reviews in this session yet.[/yellow]")
        return
    table = Table(title="Review History", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", width=4)
    table.add_column("Reviewed At", width=20)
    table.add_column("Input")
    for i, r in enumerate(records, 1):
        table.add_row(str(i), r.timestamp[:19].replace("T", " "), r.summary)
    console.print(table)
