"""CLI entry point for codelens.

Commands:
  review   review files or pasted code once and print the result
  session  interactive session with in-memory review history
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.logging import RichHandler

from codelens_cli.commands.review import review_cmd
from codelens_cli.commands.session import session_cmd
from codelens_cli.render import console


def _build_client(config: dict):
    """Instantiate the review client from .codelens.yml settings.

    This factory lives in cli.py so codelens_core does not know about the
    CLI config format.
    """
    from codelens_core.providers.openai import OpenAIReviewClient

    return OpenAIReviewClient(base_url=config.get("base_url"), timeout=config.get("request_timeout"))


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("codelens"),
    prog_name="codelens",
)
@click.option(
    "--config",
    "config_path",
    default=".codelens.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="CODELENS_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """AI code review for files and pasted snippets."""
    from codelens_core.config import load_config

    _configure_logging(verbose)
    ctx.ensure_object(dict)

    config = load_config(config_path)
    ctx.obj["config_path"] = config_path
    ctx.obj["config"] = config
    ctx.obj["client"] = _build_client(config)


main.add_command(review_cmd)
main.add_command(session_cmd)
