"""
Console interaction — click prompts and browser launch.
"""

from __future__ import annotations

import logging

import click

from ghworkflow.adapters.base import UserInteraction

logger = logging.getLogger(__name__)


class ConsoleInteraction(UserInteraction):
    """UserInteraction for a real terminal."""

    def confirm(self, prompt: str, default: bool = False) -> bool:
        return click.confirm(prompt, default=default)

    def open_url(self, url: str) -> None:
        # click.launch returns the opener's exit code; non-zero means no browser
        if click.launch(url) != 0:
            logger.info("Browser launch failed for %s", url)
            click.secho("   ⚠️  Could not open browser automatically", fg="yellow")
        click.echo("   Please visit: ", nl=False)
        click.secho(url, fg="cyan")

    def acknowledge(self, prompt: str) -> None:
        click.prompt(prompt, default="", show_default=False, prompt_suffix=" ")

    def notify(self, message: str) -> None:
        click.echo(message)
