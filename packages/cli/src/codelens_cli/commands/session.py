"""session command: interactive review session with in-memory history."""

from __future__ import annotations

import asyncio
import shlex
import sys

import click
from rich.syntax import Syntax

from codelens_cli.auth import resolve_api_key
from codelens_cli.render import console, print_error, print_files, print_history, print_review
from codelens_core.inputs import InputMode, readable_bytes
from codelens_core.reviewer import ReviewOrchestrator

EMPTY_PREVIEW = "// 파일이 비어있습니다"

_HELP = """[bold]Commands[/bold]
  mode file|manual   switch input source (clears the other one)
  add <paths>        upload files
  files              list uploaded files
  select <n>         preview file n
  remove <n>         remove file n
  paste              enter code manually; finish with a line containing only '.'
  focus \\[text]       show or set the review focus
  key                enter the OpenAI API key
  run                run a review
  output             show the current review
  history            list past reviews
  show <n>           redisplay past review n
  dismiss            clear the error
  quit               leave the session (history is discarded)"""


def _item_at(orchestrator: ReviewOrchestrator, arg: str):
    try:
        index = int(arg) - 1
    except ValueError:
        return None
    items = orchestrator.state.items
    if 0 <= index < len(items):
        return items[index]
    return None


def _report_error(orchestrator: ReviewOrchestrator) -> bool:
    if orchestrator.state.last_error:
        print_error(orchestrator.state.last_error)
        return True
    return False


def _cmd_mode(orchestrator: ReviewOrchestrator, arg: str) -> None:
    try:
        mode = InputMode(arg)
    except ValueError:
        print_error("Mode must be 'file' or 'manual'.")
        return
    orchestrator.set_input_mode(mode)
    console.print(f"Input mode: [bold]{mode.value}[/bold]")


def _cmd_add(orchestrator: ReviewOrchestrator, arg: str) -> None:
    paths = shlex.split(arg)
    if not paths:
        print_error("Usage: add <paths>")
        return
    asyncio.run(orchestrator.add_files(paths))
    if not _report_error(orchestrator):
        print_files(orchestrator.state)


def _cmd_files(orchestrator: ReviewOrchestrator, arg: str) -> None:
    print_files(orchestrator.state)


def _cmd_select(orchestrator: ReviewOrchestrator, arg: str) -> None:
    item = _item_at(orchestrator, arg)
    if item is None:
        print_error(f"No file #{arg}.")
        return
    orchestrator.select_file(item.id)
    console.print(f"[bold cyan]{item.name}[/bold cyan]  [dim]{readable_bytes(item.size)}[/dim]")
    if not item.content:
        console.print(EMPTY_PREVIEW, highlight=False)
        return
    lexer = Syntax.guess_lexer(item.name, code=item.content)
    console.print(Syntax(item.content, lexer, line_numbers=True))


def _cmd_remove(orchestrator: ReviewOrchestrator, arg: str) -> None:
    item = _item_at(orchestrator, arg)
    if item is None:
        print_error(f"No file #{arg}.")
        return
    orchestrator.remove_file(item.id)
    console.print(f"Removed {item.name}.")


def _cmd_paste(orchestrator: ReviewOrchestrator, arg: str) -> None:
    if orchestrator.state.input_mode != InputMode.MANUAL:
        orchestrator.set_input_mode(InputMode.MANUAL)
    console.print("[dim]Paste code, then a line containing only '.'[/dim]")
    lines = []
    while True:
        line = sys.stdin.readline()
        if not line or line.rstrip("\r\n") == ".":
            break
        lines.append(line)
    orchestrator.set_manual_text("".join(lines))
    console.print(f"Manual input: {len(orchestrator.state.manual_text)} characters.")


def _cmd_focus(orchestrator: ReviewOrchestrator, arg: str) -> None:
    if arg:
        orchestrator.set_focus(arg)
    console.print(f"Focus: {orchestrator.state.focus}")


def _cmd_key(orchestrator: ReviewOrchestrator, arg: str) -> None:
    orchestrator.set_credential(click.prompt("OpenAI API key", hide_input=True, default="", show_default=False))


def _cmd_run(orchestrator: ReviewOrchestrator, arg: str) -> None:
    with console.status("Reviewing..."):
        asyncio.run(orchestrator.run_review())
    if not _report_error(orchestrator):
        print_review(orchestrator.state.current_output, len(orchestrator.reviewable_unit))


def _cmd_output(orchestrator: ReviewOrchestrator, arg: str) -> None:
    print_review(orchestrator.state.current_output, len(orchestrator.reviewable_unit))


def _cmd_history(orchestrator: ReviewOrchestrator, arg: str) -> None:
    print_history(orchestrator.list_history())


def _cmd_show(orchestrator: ReviewOrchestrator, arg: str) -> None:
    records = orchestrator.list_history()
    try:
        record = records[int(arg) - 1]
    except (ValueError, IndexError):
        print_error(f"No review #{arg}.")
        return
    orchestrator.select_history_entry(record.id)
    console.print(f"[dim]{record.timestamp[:19].replace('T', ' ')} · {record.summary}[/dim]")
    print_review(orchestrator.state.current_output)


def _cmd_dismiss(orchestrator: ReviewOrchestrator, arg: str) -> None:
    orchestrator.dismiss_error()


_COMMANDS = {
    "mode": _cmd_mode,
    "add": _cmd_add,
    "files": _cmd_files,
    "select": _cmd_select,
    "remove": _cmd_remove,
    "paste": _cmd_paste,
    "focus": _cmd_focus,
    "key": _cmd_key,
    "run": _cmd_run,
    "output": _cmd_output,
    "history": _cmd_history,
    "show": _cmd_show,
    "dismiss": _cmd_dismiss,
}


@click.command("session")
@click.option("--api-key", default=None, help="OpenAI API key. Defaults to OPENAI_API_KEY.")
@click.pass_context
def session_cmd(ctx, api_key: str | None):
    """Start an interactive review session.

    Uploaded files, the API key and the review history live only as long as
    the session does.
    """
    config = ctx.obj["config"]
    orchestrator = ReviewOrchestrator(ctx.obj["client"])
    orchestrator.set_focus(config["focus"])
    key = resolve_api_key(api_key)
    if key:
        orchestrator.set_credential(key)

    console.print(_HELP)
    while True:
        line = click.prompt("codelens", default="", show_default=False, prompt_suffix="> ")
        command, _, arg = line.strip().partition(" ")
        if not command:
            continue
        if command in ("quit", "exit"):
            break
        if command == "help":
            console.print(_HELP)
            continue
        handler = _COMMANDS.get(command)
        if handler is None:
            print_error(f"Unknown command: {command}. Type 'help' for a list.")
            continue
        handler(orchestrator, arg.strip())
