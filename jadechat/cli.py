"""Command line interface for jadechat."""

from __future__ import annotations

import asyncio
import json
import logging
import sys

import click

from .config import ChatSettings
from .exceptions import ModelSetupError, require_apple_fm
from .render import HTMLSegmentRenderer, render_segments
from .segments import SegmentKind, segment

logger = logging.getLogger("jadechat")

_KIND_CHOICES = [kind.value for kind in SegmentKind]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Jade chat tools: split model output into markdown, code and math."""
    _configure_logging(verbose)


@cli.command("segment")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--kind",
    "kinds",
    type=click.Choice(_KIND_CHOICES),
    multiple=True,
    help="Only print segments of this kind (repeatable).",
)
def segment_command(source, kinds: tuple[str, ...]) -> None:
    """Print the segments of SOURCE (default: stdin) as JSON lines."""
    content = source.read()
    for index, seg in enumerate(segment(content)):
        if kinds and seg.kind.value not in kinds:
            continue
        click.echo(json.dumps({"index": index, **seg.to_dict()}, ensure_ascii=False))


@cli.command("render")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
def render_command(source) -> None:
    """Render SOURCE (default: stdin) as an HTML fragment."""
    click.echo(render_segments(segment(source.read()), HTMLSegmentRenderer()))


@cli.command("chat")
@click.argument("prompt")
@click.option("--instructions", default=None, help="Override the system instructions.")
def chat_command(prompt: str, instructions: str | None) -> None:
    """Send PROMPT to the on-device model and print the segmented reply."""
    from .chat import Conversation

    if not prompt.strip():
        raise click.BadParameter("must not be blank", param_hint="'PROMPT'")
    if instructions is None:
        settings = ChatSettings()
    elif instructions.strip():
        settings = ChatSettings(instructions=instructions)
    else:
        raise click.BadParameter("must not be blank", param_hint="'--instructions'")
    conversation = Conversation(settings=settings)

    async def _run() -> None:
        final = None
        async for frame in conversation.send(prompt):
            final = frame
        if final is None:
            return
        for seg in final.segments:
            click.echo(f"--- {seg.kind.value}")
            click.echo(seg.text)

    asyncio.run(_run())


@cli.command("doctor")
def doctor_command() -> None:
    """Check that the Apple Foundation Models SDK and model are usable."""
    require_apple_fm("jadechat doctor")
    click.echo("Apple Foundation Models: available")


def cli_entry() -> None:
    try:
        cli()
    except ModelSetupError as exc:
        click.echo(str(exc), err=True)
        sys.exit(2)


if __name__ == "__main__":
    cli_entry()
