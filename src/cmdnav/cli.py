"""CLI for the cmdnav command."""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional

import typer

from .core.model import UsageSpec
from .log_manager import LogManager
from .spec_loader import SpecLoadError, load_spec_file, load_spec_from_command
from .tui import NavigatorApp


class Theme(str, Enum):
    ledger = "ledger"
    analyst = "analyst"
    seminar = "seminar"


SELF_SPEC: Dict[str, Any] = {
    "name": "cmdnav",
    "bin": "cmdnav",
    "about": "Browse a CLI's command tree and compose a command line",
    "cmd": {
        "flags": [
            {"long": ["cmd"], "short": ["c"], "arg": "BIN", "help": "Binary name used in the composed command"},
            {"long": ["spec-file"], "short": ["f"], "arg": "PATH", "help": "Read the JSON usage spec from a file"},
            {"long": ["theme"], "arg": "THEME", "choices": ["ledger", "analyst", "seminar"], "help": "Initial theme"},
            {"long": ["log-file"], "arg": "PATH", "help": "Write the session log here on exit"},
            {"long": ["usage"], "help": "Print cmdnav's own usage spec as JSON"},
        ],
        "args": [
            {"name": "spec_cmd", "help": "Shell command whose stdout is a JSON usage spec"},
        ],
    },
}


app = typer.Typer(
    help="Browse a CLI's command tree and compose a command line",
    add_completion=False,
)


@app.command(context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False})
def main(
    spec_cmd: Optional[List[str]] = typer.Argument(
        None, metavar="SPEC_CMD...", help="Shell command that prints a JSON usage spec"
    ),
    cmd: Optional[str] = typer.Option(
        None, "--cmd", "-c", envvar="CMDNAV_CMD", help="Binary name used in the composed command"
    ),
    spec_file: Optional[Path] = typer.Option(None, "--spec-file", "-f", help="Read the JSON usage spec from a file"),
    theme: Theme = typer.Option(Theme.ledger, "--theme", envvar="CMDNAV_THEME", help="Initial theme"),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", envvar="CMDNAV_LOG_FILE", help="Write the session log here on exit"
    ),
    usage: bool = typer.Option(False, "--usage", help="Print cmdnav's own usage spec as JSON"),
):
    """
    Browse a command tree interactively and print the composed command.

    Enter on the command preview accepts and prints the command line;
    q / Esc at the root / Ctrl+C quit without output.

    Examples:
        # Spec from a file
        cmdnav --spec-file mycli.json

        # Spec printed by the tool itself
        cmdnav mycli usage --json

        # Run the result
        eval "$(cmdnav -f mycli.json)"
    """
    if usage:
        typer.echo(json.dumps(SELF_SPEC, indent=2))
        raise typer.Exit()

    try:
        spec = load_spec(spec_cmd or [], spec_file)
    except SpecLoadError as exc:
        _fail(str(exc))

    logs = LogManager()
    result = NavigatorApp(spec, bin_override=cmd, start_theme=theme.value, log_manager=logs).run()
    if log_file is not None:
        logs.dump(log_file)
    if result:
        typer.echo(result)


def load_spec(spec_cmd: List[str], spec_file: Optional[Path]) -> UsageSpec:
    """Load from exactly one of a spec command or a spec file."""
    if spec_cmd and spec_file is not None:
        raise SpecLoadError("Give either a spec command or --spec-file, not both")
    if spec_file is not None:
        return load_spec_file(spec_file)
    if spec_cmd:
        return load_spec_from_command(" ".join(spec_cmd))
    raise SpecLoadError("No usage spec: pass a spec command or --spec-file")


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
