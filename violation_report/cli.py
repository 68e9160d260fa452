"""CLI entry point — command definitions using Click.

Commands:
    init      Generate a template config file
    export    Merge one rule's violations into the JSON report
    show      Summarize the rules and violation counts in the report
"""

import functools
import io
import json
import sys
from pathlib import Path
from typing import Any

import click

from violation_report import __version__


# ---------------------------------------------------------------------------
# Helpers shared by all data commands
# ---------------------------------------------------------------------------

def _load_config(ctx: click.Context):
    """Return the Config for this invocation.

    Without --config, a missing default file means built-in defaults.
    """
    from violation_report.config import DEFAULT_CONFIG, Config, load

    obj = ctx.obj
    config_path = obj["config_path"]
    if config_path is None:
        if not Path(DEFAULT_CONFIG).exists():
            _verbose(ctx, f"No '{DEFAULT_CONFIG}' found, using defaults")
            return Config()
        config_path = DEFAULT_CONFIG

    _verbose(ctx, f"Loading config from '{config_path}'")
    return load(config_path)


def _verbose(ctx: click.Context, message: str) -> None:
    if ctx.obj["verbose"]:
        click.echo(f"[verbose] {message}", err=True)


def _emit_json(data: Any, pretty: bool) -> None:
    indent = 2 if pretty else None
    click.echo(json.dumps(data, indent=indent, ensure_ascii=False))


def _handle_errors(func):
    """Decorator that catches report exceptions and exits cleanly."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from violation_report.codec import DecodeError, EncodeError
        from violation_report.config import ConfigError
        from violation_report.models import ViolationInputError

        try:
            return func(*args, **kwargs)
        except ConfigError as exc:
            click.echo(f"Configuration error: {exc}", err=True)
            sys.exit(1)
        except ViolationInputError as exc:
            click.echo(f"Invalid violations file: {exc}", err=True)
            sys.exit(1)
        except DecodeError as exc:
            click.echo(f"Invalid existing report: {exc}", err=True)
            sys.exit(1)
        except EncodeError as exc:
            click.echo(f"Could not write report: {exc}", err=True)
            sys.exit(1)

    return wrapper


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "config_path", default=None,
              help="Path to the configuration file [default: violation-report.yaml if present].")
@click.option("--verbose", is_flag=True, default=False,
              help="Enable verbose logging.")
@click.version_option(__version__, prog_name="violation-report")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Architecture violation report tool — merge rule results into one JSON file."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@cli.command("init")
@click.option("--output", "output_path", default="violation-report.yaml", show_default=True,
              help="Path where the template config file will be written.")
def init_command(output_path: str) -> None:
    """Generate a template violation-report.yaml file."""
    from violation_report.config import ConfigError, generate_template
    try:
        generate_template(output_path)
        click.echo(f"Template written to '{output_path}'.")
        click.echo("Edit it with your report path and rule aliases.")
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------

@cli.command("export")
@click.argument("rule")
@click.argument("violations_file")
@click.option("--report", "report_path", default=None,
              help="Report file to update (overrides config).")
@click.option("--pretty", is_flag=True, default=False,
              help="Pretty-print the report (indent 2).")
@click.pass_context
@_handle_errors
def export_command(ctx: click.Context, rule: str, violations_file: str,
                   report_path: str | None, pretty: bool) -> None:
    """Merge the violations of RULE read from VIOLATIONS_FILE into the report."""
    from violation_report.codec import EncodeError
    from violation_report.exporter import JsonViolationExporter
    from violation_report.models import ViolationBatches

    config = _load_config(ctx)
    rule_text = config.resolve_rule(rule)
    batches = ViolationBatches.load(violations_file)

    path = Path(report_path or config.report)
    exporter = JsonViolationExporter(indent=2 if pretty else config.indent)
    buffer = io.StringIO()

    # The existing report is fully decoded before anything is written
    if path.exists():
        _verbose(ctx, f"Merging '{rule_text}' into existing report '{path}'")
        with path.open(encoding="utf-8") as f:
            rule_result = exporter.export(rule_text, batches, f, buffer)
    else:
        _verbose(ctx, f"Creating report '{path}' for '{rule_text}'")
        rule_result = exporter.export_new(rule_text, batches, buffer)

    try:
        path.write_text(buffer.getvalue(), encoding="utf-8")
    except OSError as exc:
        raise EncodeError(f"Failed to write '{path}': {exc}") from exc
    _verbose(ctx, f"{len(rule_result.violations)} violation(s) recorded for '{rule_text}'")
    click.echo(f"Report written to '{path}'", err=True)


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------

@cli.command("show")
@click.option("--report", "report_path", default=None,
              help="Report file to read (overrides config).")
@click.option("--pretty", is_flag=True, default=False,
              help="Pretty-print the JSON output.")
@click.pass_context
@_handle_errors
def show_command(ctx: click.Context, report_path: str | None, pretty: bool) -> None:
    """Print the rules in the report with their violation counts."""
    from violation_report.codec import decode
    from violation_report.results import summarize

    config = _load_config(ctx)
    path = Path(report_path or config.report)

    if not path.exists():
        _verbose(ctx, f"Report '{path}' does not exist yet")
        results = []
    else:
        with path.open(encoding="utf-8") as f:
            results = decode(f)

    _emit_json(summarize(results), pretty)
