"""ConvertBot formats command.

Shows how a source file is classified and which targets it may be
converted to.
"""

import json
from pathlib import Path

import click

from convertbot.classifier import (
    FormatClassifier,
    guess_content_type,
    is_legacy_container,
)
from convertbot.cli.exit_codes import ExitCode
from convertbot.domain.enums import MediaKind


@click.command("formats")
@click.argument("source", type=click.Path(path_type=Path, dir_okay=False))
@click.option(
    "--content-type",
    default=None,
    help="Declared MIME type of SOURCE (default: guessed from the name).",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output results as JSON",
)
def formats_command(source: Path, content_type: str | None, json_output: bool) -> None:
    """List the formats SOURCE can be converted to."""
    classifier = FormatClassifier()
    declared = content_type or guess_content_type(source)
    kind = classifier.classify(source, declared)
    targets = sorted(classifier.legal_targets(kind), key=lambda t: t.value)
    legacy = is_legacy_container(source)

    if json_output:
        data = {
            "source": str(source),
            "content_type": declared,
            "kind": kind.value,
            "backend": "external_tool" if legacy else "native",
            "targets": [t.value for t in targets],
        }
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo(f"Source: {source.name}")
        click.echo(f"Content type: {declared or 'unknown'}")
        click.echo(f"Kind: {kind.value}")
        if targets:
            click.echo(f"Targets: {', '.join(t.description for t in targets)}")
        if legacy:
            click.echo("Note: converted with the external ffmpeg tool (no progress).")

    if kind is MediaKind.UNKNOWN:
        if not json_output:
            click.echo("Not a recognized video or audio file.", err=True)
        raise SystemExit(ExitCode.INVALID_REQUEST)
