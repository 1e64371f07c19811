"""
specforge command line.

    specforge validate widget.json [--json] [--strict]
    specforge build widget.json -o dist/ [--minify] [--no-tests] [--no-comments]
    specforge simulate widget.json -e click -e click
"""

from pathlib import Path

import typer

from .core.config import get_settings
from .core.json import safe_json_dumps
from .core.logging_config import configure_logging
from .core.validate import SpecforgeError, SpecLoadError
from .generator import GenerateOptions, GenerationError, generate
from .generator.program import INTERVAL_MS
from .runtime import WidgetHost
from .spec.loader import load_spec
from .validator import format_validation_result, validate

app = typer.Typer(help="Validate SpecJSON widgets, build packages and simulate them.", no_args_is_help=True)


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Override SPECFORGE_LOG_LEVEL"),
) -> None:
    """Compile SpecJSON widget specs into self-contained packages."""
    settings = get_settings()
    configure_logging(log_level or settings.log_level, settings.json_logs)


def _read_spec(path: Path) -> dict:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        typer.echo(f"Error: cannot read {path}: {e}", err=True)
        raise typer.Exit(code=2)
    try:
        return load_spec(text)
    except SpecLoadError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)


@app.command("validate")
def validate_command(
    file: Path = typer.Argument(..., help="SpecJSON file"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    strict: bool = typer.Option(False, "--strict", help="Fail on warnings too"),
) -> None:
    """Validate a spec and report every error and warning."""
    result = validate(_read_spec(file))

    if as_json:
        typer.echo(safe_json_dumps(result.to_dict(), indent=2))
    else:
        typer.echo(format_validation_result(result))

    if not result.valid or (strict and result.warnings):
        raise typer.Exit(code=1)


@app.command("build")
def build_command(
    file: Path = typer.Argument(..., help="SpecJSON file"),
    output: Path = typer.Option(Path("dist"), "--output", "-o", help="Output directory"),
    minify: bool = typer.Option(False, "--minify", help="Collapse markup whitespace"),
    no_tests: bool = typer.Option(False, "--no-tests", help="Skip the test scaffold"),
    no_comments: bool = typer.Option(False, "--no-comments", help="Skip banners and comments"),
) -> None:
    """Generate a widget package into OUTPUT/<widget id>/."""
    options = GenerateOptions(minify=minify, include_tests=not no_tests, include_comments=not no_comments)
    try:
        package = generate(_read_spec(file), options)
    except GenerationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    target = output / package.id
    target.mkdir(parents=True, exist_ok=True)
    for generated in package.files:
        (target / generated.path).write_text(generated.content, encoding="utf-8")
        typer.echo(f"  {target / generated.path}")
    typer.echo(f"✓ Built {package.id} ({len(package.files)} files)")


@app.command("simulate")
def simulate_command(
    file: Path = typer.Argument(..., help="SpecJSON file"),
    events: list[str] = typer.Option([], "--event", "-e", help="widget:event type to send (repeatable)"),
    ticks: int = typer.Option(0, "--ticks", help="Interval timer ticks to run after the events"),
) -> None:
    """Run a spec in the reference runtime and print the host's view."""
    try:
        package = generate(_read_spec(file), GenerateOptions(include_tests=False))
    except SpecforgeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    host = WidgetHost()
    session = host.launch(package)
    host.settle()
    for event in events:
        host.send_event(session.instance_id, event)
        host.settle()
    if ticks and session.runtime is not None:
        session.runtime.advance(ticks * INTERVAL_MS)
        host.settle()

    typer.echo(safe_json_dumps({
        "widgetId": session.widget_id,
        "phase": session.runtime.phase.value if session.runtime else None,
        "state": session.runtime.state if session.runtime else session.state,
        "emits": session.emits,
        "outputs": session.outputs,
        "broadcasts": session.broadcasts,
    }, indent=2))
