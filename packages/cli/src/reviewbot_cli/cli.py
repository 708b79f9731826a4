"""CLI entry point for reviewbot.

Commands:
  serve   — run the GitHub App webhook server
  review  — run the same checks on a pull request from the terminal
"""

from __future__ import annotations

import importlib.metadata

import click

from reviewbot_cli.commands.review import review_cmd
from reviewbot_cli.commands.serve import serve_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("reviewbot"),
    prog_name="reviewbot",
)
@click.option(
    "--config",
    "config_path",
    default=None,
    help="Path to the configuration file. Defaults to .reviewbot.yml.",
    envvar="REVIEWBOT_CONFIG",
)
@click.pass_context
def main(ctx: click.Context, config_path: str | None):
    """GitHub pull request review bot."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(serve_cmd)
main.add_command(review_cmd)
