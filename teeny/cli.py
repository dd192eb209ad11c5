"""Command-line interface for Teeny.

This module defines the CLI commands using Click framework.
Every command works on the project in the current working directory.

Commands:
- build: Build the site into public/.
- develop: Build, then serve public/ and rebuild on changes.
- init: Scaffold pages/, static/ and templates/ with example content.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import aiofiles
import aiofiles.os
import click

from . import __version__
from .utils import PAGES_DIR, STATIC_DIR, TEMPLATES_DIR, attempt

EXAMPLE_FILES = {
    f"{PAGES_DIR}/index.md": "---\ntemplate: homepage\n---\n# Hello World",
    f"{TEMPLATES_DIR}/homepage.html": (
        "<html><body><p>My first Teeny page</p><div id='page-content'></div>"
        "<script type=\"text/javascript\" src='main.js'></script></body></html>"
    ),
    f"{TEMPLATES_DIR}/default.html": (
        "<html><body><div id='page-content'></div></body></html>"
    ),
    f"{STATIC_DIR}/main.js": "console.log('hello world')",
}


class _TeenyGroup(click.Group):
    """Click group that reports unknown commands with exit status 1."""

    def resolve_command(self, ctx, args):
        name = args[0]
        if self.get_command(ctx, name) is None:
            click.echo(f"Command 'teeny {name}' does not exist.", err=True)
            ctx.exit(1)
        return super().resolve_command(ctx, args)


@click.group(cls=_TeenyGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="teeny")
@click.pass_context
def cli(ctx):
    """Teeny static site generator."""
    if ctx.invoked_subcommand is None:
        click.echo("Missing command. Use one of: build, develop, init.", err=True)
        ctx.exit(1)


def _report_template_failure(exc) -> None:
    click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
    click.echo(click.style(f"  Template: {exc.source_path}", fg="yellow"), err=True)
    click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)


@cli.command()
def build():
    """Build the site into public/."""
    project_root = Path.cwd()
    from .build import build_site
    from .templates import TemplateStructureError

    try:
        result = asyncio.run(build_site(project_root))
    except TemplateStructureError as exc:
        _report_template_failure(exc)
        raise SystemExit(1) from None
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from None
    click.echo(f"Built {len(result.pages)} pages into {result.output_dir}")


@cli.command()
@click.argument("port", type=int, required=False)
def develop(port: int | None):
    """Build, serve and rebuild on changes."""
    project_root = Path.cwd()
    from .build import load_config
    from .server import develop as run_develop
    from .templates import TemplateStructureError
    from .watch import WATCH_MODES

    config = load_config(project_root)
    mode = str(config["watch"])
    if mode not in WATCH_MODES:
        raise click.ClickException(
            f"Unknown watch mode {mode!r}; expected one of {', '.join(WATCH_MODES)}"
        )
    resolved_port = port if port is not None else int(config["port"])

    try:
        asyncio.run(run_develop(project_root, resolved_port, mode=mode))
    except TemplateStructureError as exc:
        _report_template_failure(exc)
        raise SystemExit(1) from None
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from None
    except KeyboardInterrupt:
        click.echo("Development server stopped.")


@cli.command()
def init():
    """Scaffold a new Teeny project in the current directory."""
    project_root = Path.cwd()
    created = asyncio.run(_scaffold(project_root))
    for rel_path in created:
        click.echo(f"Created {rel_path}")


def main():
    """Entry point for the CLI application."""
    cli()


async def _scaffold(root: Path) -> list[str]:
    """Create the source directories and example files.

    Directories that already exist are left alone and example files are
    never overwritten. A file that cannot be written is reported and
    skipped.

    Args:
        root: Project root directory.

    Returns:
        Project-relative paths of the files that were written.
    """
    for folder in (PAGES_DIR, STATIC_DIR, TEMPLATES_DIR):
        await attempt(aiofiles.os.mkdir, root / folder)

    created = []
    for rel_path, content in EXAMPLE_FILES.items():
        target = root / rel_path
        if await aiofiles.os.path.exists(target):
            continue
        try:
            async with aiofiles.open(target, "w", encoding="utf-8") as f:
                await f.write(content)
        except OSError as exc:
            click.echo(f"Could not write {rel_path}: {exc}", err=True)
            continue
        created.append(rel_path)
    return created
