"""review command: review files or pasted code once."""

from __future__ import annotations

import asyncio
import sys

import click

from codelens_cli.auth import resolve_api_key
from codelens_cli.render import console, print_review
from codelens_core.inputs import InputMode
from codelens_core.reviewer import ReviewOrchestrator


async def _review_once(orchestrator: ReviewOrchestrator, files: tuple[str, ...], manual: str | None) -> None:
    if files:
        await orchestrator.add_files(list(files))
        if orchestrator.state.last_error:
            return
    elif manual is not None:
        orchestrator.set_input_mode(InputMode.MANUAL)
        orchestrator.set_manual_text(manual)
    await orchestrator.run_review()


@click.command("review")
@click.argument("files", nargs=-1, type=click.Path())
@click.option("--manual", "manual_text", default=None, help="Review this code snippet instead of files.")
@click.option("--stdin", "from_stdin", is_flag=True, help="Read the code snippet from standard input.")
@click.option("--focus", default=None, help="Review focus. Overrides config file.")
@click.option("--api-key", default=None, help="OpenAI API key. Defaults to OPENAI_API_KEY.")
@click.pass_context
def review_cmd(
    ctx,
    files: tuple[str, ...],
    manual_text: str | None,
    from_stdin: bool,
    focus: str | None,
    api_key: str | None,
):
    """Review uploaded files or a pasted snippet and print the result.

    Files are reviewed together, in the order given, as one request.

    \b
    Required environment variables:
      OPENAI_API_KEY       Unless --api-key is given
    """
    if manual_text is not None and from_stdin:
        raise click.UsageError("Use either --manual or --stdin, not both.")
    if from_stdin:
        manual_text = sys.stdin.read()
    if files and manual_text is not None:
        raise click.UsageError("Pass files or a manual snippet, not both.")

    from codelens_core.config import load_config

    config = load_config(ctx.obj["config_path"], cli_overrides={"focus": focus})
    orchestrator = ReviewOrchestrator(ctx.obj["client"])
    orchestrator.set_focus(config["focus"])
    orchestrator.set_credential(resolve_api_key(api_key) or "")

    with console.status("Reviewing..."):
        asyncio.run(_review_once(orchestrator, files, manual_text))

    if orchestrator.state.last_error:
        raise click.ClickException(orchestrator.state.last_error)
    print_review(orchestrator.state.current_output, len(orchestrator.reviewable_unit))
