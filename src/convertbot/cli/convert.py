"""ConvertBot convert command.

Submits one conversion request, renders its events on the main thread
and maps the outcome to an exit code. Ctrl+C cancels a native
conversion; external tool conversions cannot be cancelled.
"""

import logging
from pathlib import Path

import click

from convertbot.classifier import guess_content_type
from convertbot.cli import load_cli_config
from convertbot.cli.exit_codes import FAILURE_EXIT_CODES, ExitCode
from convertbot.completion import HOOK_TIMEOUT
from convertbot.dispatch import QueueEventContext
from convertbot.domain.enums import QualityLevel, TargetFormat
from convertbot.domain.models import (
    Cancelled,
    ConversionRequest,
    Failed,
    ProgressEvent,
    SessionEvent,
    StatusEvent,
    Succeeded,
)
from convertbot.orchestrator import ConversionOrchestrator, SessionHandle

logger = logging.getLogger(__name__)

# Resolution of the progress bar
PROGRESS_STEPS = 1000


class _ProgressRenderer:
    """Listener that drives a click progress bar."""

    def __init__(self) -> None:
        self.bar = None
        self._shown = 0

    def __call__(self, event: SessionEvent) -> None:
        if self.bar is None:
            return
        if isinstance(event, StatusEvent):
            self.bar.label = event.message
            self.bar.render_progress()
        elif isinstance(event, ProgressEvent):
            steps = int(event.fraction * PROGRESS_STEPS)
            if steps > self._shown:
                self.bar.update(steps - self._shown)
                self._shown = steps


def _wait_for_terminal(
    events: QueueEventContext, handle: SessionHandle
) -> SessionEvent:
    """Pump events until the session ends, cancelling on Ctrl+C."""
    try:
        return events.run_until_terminal()
    except KeyboardInterrupt:
        if not handle.cancel():
            click.echo(
                "\nThis conversion cannot be cancelled; it will finish in the "
                "background if the process keeps running.",
                err=True,
            )
            raise SystemExit(ExitCode.INTERRUPTED) from None
        click.echo("\nCancelling…", err=True)
        return events.run_until_terminal()


@click.command("convert")
@click.argument("source", type=click.Path(path_type=Path, dir_okay=False))
@click.option(
    "--to",
    "target",
    required=True,
    type=click.Choice([t.value for t in TargetFormat], case_sensitive=False),
    help="Output format.",
)
@click.option(
    "--compress",
    is_flag=True,
    help="Re-encode to a smaller file instead of keeping the source streams.",
)
@click.option(
    "--quality",
    type=click.Choice([q.value for q in QualityLevel], case_sensitive=False),
    default=QualityLevel.HIGH.value,
    show_default=True,
    help="Quality used with --compress.",
)
@click.option(
    "--content-type",
    default=None,
    help="Declared MIME type of SOURCE (default: guessed from the name).",
)
@click.option("--no-reveal", is_flag=True, help="Do not reveal the result.")
@click.option("--no-sound", is_flag=True, help="Do not play the completion sound.")
@click.option("--no-notify", is_flag=True, help="Do not post a notification.")
@click.pass_context
def convert_command(
    ctx: click.Context,
    source: Path,
    target: str,
    compress: bool,
    quality: str,
    content_type: str | None,
    no_reveal: bool,
    no_sound: bool,
    no_notify: bool,
) -> None:
    """Convert SOURCE to another format.

    The result is written next to SOURCE with the new extension; an
    existing file is never overwritten ("clip (1).mp4" is used instead).
    """
    config = load_cli_config(ctx)

    if no_reveal:
        config.notifications.reveal_file = False
    if no_sound:
        config.notifications.play_sound = False
    if no_notify:
        config.notifications.post_notification = False

    request = ConversionRequest(
        source=source,
        target=TargetFormat.from_string(target),
        compress=compress,
        quality=QualityLevel(quality.casefold()),
        content_type=content_type or guess_content_type(source),
    )

    events = QueueEventContext()
    orchestrator = ConversionOrchestrator.from_config(config, event_context=events)
    renderer = _ProgressRenderer()

    with click.progressbar(
        length=PROGRESS_STEPS,
        label="Preparing…",
        show_percent=True,
        show_eta=False,
    ) as bar:
        renderer.bar = bar
        handle = orchestrator.submit(request, renderer)
        terminal = _wait_for_terminal(events, handle)
    handle.wait()

    if isinstance(terminal, Succeeded):
        click.echo(f"Saved to {terminal.destination}")
        if handle.completion_thread is not None:
            handle.completion_thread.join(timeout=HOOK_TIMEOUT * 3)
        raise SystemExit(ExitCode.SUCCESS)

    if isinstance(terminal, Cancelled):
        click.echo("Cancelled.", err=True)
        raise SystemExit(ExitCode.CANCELLED)

    assert isinstance(terminal, Failed)
    click.echo(f"Error: {terminal.reason}", err=True)
    raise SystemExit(FAILURE_EXIT_CODES.get(terminal.kind, ExitCode.GENERAL_ERROR))
