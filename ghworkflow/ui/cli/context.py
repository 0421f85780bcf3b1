"""
Shared CLI plumbing — resolve root, settings and adapters from the click context.

Tests (or embedding code) can pre-seed ``obj["client"]`` and
``obj["interaction"]`` to run commands against doubles.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from ghworkflow.adapters.base import ControlPlane, UserInteraction
from ghworkflow.core.config.loader import Settings, settings_for
from ghworkflow.core.errors import ConfigError


def project_root(ctx: click.Context) -> Path:
    """Repository root from --root, else the current directory."""
    root: Path | None = ctx.obj.get("root")
    return (root or Path.cwd()).resolve()


def settings(ctx: click.Context) -> Settings:
    """Load ghworkflow.yml once per invocation; exit 1 when it is invalid."""
    if "settings" not in ctx.obj:
        try:
            ctx.obj["settings"] = settings_for(project_root(ctx))
        except ConfigError as e:
            click.secho(f"❌ {e}", fg="red")
            sys.exit(1)
    return ctx.obj["settings"]


def control_plane(ctx: click.Context) -> ControlPlane:
    if "client" not in ctx.obj:
        from ghworkflow.adapters.github import GhControlPlane

        ctx.obj["client"] = GhControlPlane(project_root(ctx), timeout=settings(ctx).gh_timeout)
    return ctx.obj["client"]


def interaction(ctx: click.Context) -> UserInteraction:
    if "interaction" not in ctx.obj:
        from ghworkflow.adapters.console import ConsoleInteraction

        ctx.obj["interaction"] = ConsoleInteraction()
    return ctx.obj["interaction"]
