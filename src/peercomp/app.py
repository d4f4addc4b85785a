"""The ``peercomp`` Typer application and its console-script entry point.

:func:`main` turns :class:`~peercomp.exceptions.PeercompError` into the
error's exit code and anything unexpected into a crash log under
``<data dir>/logs``.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from peercomp import __version__
from peercomp.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="peercomp",
    help="Tab completion for peerd and other table-driven command lines.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

from peercomp.commands.complete import complete_command  # noqa: E402
from peercomp.commands.completion import completion_app  # noqa: E402
from peercomp.commands.grammar import grammar_app  # noqa: E402

app.command("complete", help="Print completion candidates (called by the shell glue).")(
    complete_command
)
app.add_typer(completion_app, name="completion", help="Install or print shell glue scripts.")
app.add_typer(grammar_app, name="grammar", help="Inspect and extend command grammars.")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"peercomp {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="Tables as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Tables as tab-separated text."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print errors and warnings."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages to stderr."),
    log_file: Optional[str] = typer.Option(
        None, "--log-file", help="Append debug logs to this file."
    ),
) -> None:
    """Resolve config, install the output manager and logging.

    A broken config file is downgraded to a warning so that a Tab press
    still gets candidates computed from the defaults.
    """
    from peercomp.config import resolve_config
    from peercomp.exceptions import ConfigError
    from peercomp.models import GlobalConfig
    from peercomp.output import (
        OutputFormat,
        OutputManager,
        configure_logging,
        set_output,
        warning,
    )

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    try:
        config = resolve_config(cli_format=cli_format, cli_log_file=log_file)
        config_problem = None
    except ConfigError as exc:
        config, config_problem = GlobalConfig(), str(exc)

    try:
        fmt = OutputFormat(config.output.format)
    except ValueError:
        fmt = OutputFormat.AUTO

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    configure_logging(verbose=verbose, log_file=config.log_file, console=output.stderr_console)
    if config_problem:
        warning(f"{config_problem}; using defaults")

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def _cancel(signum: int, frame: Any) -> None:  # noqa: ANN401
    sys.stderr.write("\nCancelled.\n")
    sys.exit(130)


def _write_crash_log(exc: Exception) -> str:
    from peercomp.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    return str(log_path)


def main() -> None:
    """Console-script entry point; always exits via :class:`SystemExit`."""
    signal.signal(signal.SIGINT, _cancel)
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        _cancel(signal.SIGINT, None)
    except Exception as exc:
        from peercomp.exceptions import PeercompError
        from peercomp.output import error

        if isinstance(exc, PeercompError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error. Crash log: {_write_crash_log(exc)}")
        sys.exit(EXIT_GENERIC_FAILURE)
