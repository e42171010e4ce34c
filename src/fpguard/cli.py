"""Command-line interface for fpguard using Click."""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Final

import click

from fpguard.config import load_config
from fpguard.constants import (
    DEFAULT_SEVERITIES,
    EXIT_USAGE_ERROR,
    OutputFormat,
    __version__,
    canonical_rule_id,
)
from fpguard.explain import RULE_CATALOG, format_rule_detail, format_rule_table
from fpguard.rules.registry import resolve_rule_ids
from fpguard.runner import LintResult, lint_paths, render_results
from fpguard.types import ConfigError, FpGuardConfig, UnknownRuleError


def format_config_text(*, config: FpGuardConfig) -> str:
    """Format configuration as human-readable text."""
    lines: list[str] = [
        "fpguard Configuration",
        "=" * 40,
        "",
        f"Config file: {config.config_path or '(defaults)'}",
        "",
        "File Discovery:",
        f"  Include: {', '.join(config.include)}",
        f"  Exclude: {', '.join(config.exclude[:5])}{'...' if len(config.exclude) > 5 else ''}",
        "",
        "Output:",
        f"  Format: {config.output_format.value}",
        f"  Show source: {config.show_source}",
        f"  Jobs: {config.jobs}",
        "",
        "Rule Severities:",
    ]

    for code, severity in sorted(config.rules.severities.items()):
        lines.append(f"  {code}: {severity.value.upper()}")

    max_display: str | int = (
        config.ignores.max_per_file if config.ignores.max_per_file is not None else "unlimited"
    )
    lines.extend([
        "",
        "Ignore Governance:",
        f"  Require reason: {config.ignores.require_reason}",
        f"  Disallow: {sorted(config.ignores.disallow) or '(none)'}",
        f"  Max per file: {max_display}",
    ])

    return "\n".join(lines)


def format_config_json(*, config: FpGuardConfig) -> str:
    """Format configuration as JSON."""
    data: dict[str, Any] = {
        "config_path": str(config.config_path) if config.config_path else None,
        "include": list(config.include),
        "exclude": list(config.exclude),
        "output_format": config.output_format.value,
        "show_source": config.show_source,
        "jobs": config.jobs,
        "rules": {
            code: sev.value for code, sev in sorted(config.rules.severities.items())
        },
        "ignores": {
            "require_reason": config.ignores.require_reason,
            "disallow": sorted(config.ignores.disallow),
            "max_per_file": config.ignores.max_per_file,
        },
    }
    return json.dumps(data, indent=2)


class ConfigType(click.ParamType):
    """Custom Click parameter type for config path."""

    name: str = "path"

    def convert(
        self,
        value: str | Path | None,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> Path | None:
        if value is None:
            return None
        return Path(value)


CONFIG_TYPE: Final[ConfigType] = ConfigType()


class FpGuardGroup(click.Group):
    """Click group whose usage errors exit with EXIT_USAGE_ERROR.

    Exit code 2 is reserved for parse failures.
    """

    def make_context(
        self,
        info_name: str | None,
        args: list[str],
        parent: click.Context | None = None,
        **extra: Any,
    ) -> click.Context:
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = EXIT_USAGE_ERROR
            raise

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = EXIT_USAGE_ERROR
            raise


@click.group(cls=FpGuardGroup)
@click.version_option(version=__version__, prog_name="fpguard")
@click.option(
    "--config",
    "config_path",
    type=CONFIG_TYPE,
    default=None,
    help="Path to fpguard.toml (default: search upward from current directory)",
)
@click.option("--verbose", is_flag=True, help="Show progress and timing")
@click.option("--debug", is_flag=True, help="Show detailed trace")
@click.pass_context
def cli(
    ctx: click.Context,
    *,
    config_path: Path | None,
    verbose: bool,
    debug: bool,
) -> None:
    """fpguard - A functional-style linter for JavaScript."""
    level: int = (
        logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    )
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )

    ctx.ensure_object(dict)
    try:
        cfg: FpGuardConfig = load_config(path=config_path)
        ctx.obj["config"] = cfg
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        if e.path:
            click.echo(f"  in: {e.path}", err=True)
        ctx.exit(EXIT_USAGE_ERROR)


@cli.command()
@click.option("--validate", is_flag=True, help="Only validate configuration, don't print")
@click.option("--json", "as_json", is_flag=True, help="Output configuration as JSON")
@click.pass_context
def config(ctx: click.Context, *, validate: bool, as_json: bool) -> None:
    """Show or validate configuration."""
    cfg: FpGuardConfig = ctx.obj["config"]

    if validate:
        click.echo(f"Configuration valid: {cfg.config_path or '(defaults)'}")
        return

    if as_json:
        click.echo(format_config_json(config=cfg))
    else:
        click.echo(format_config_text(config=cfg))


@cli.command()
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=None,
    help="Output format (overrides config)",
)
@click.option(
    "--rule",
    "rule_ids",
    multiple=True,
    help="Only run this rule (repeatable)",
)
@click.option("--show-source/--no-show-source", default=None, help="Show source code snippets")
@click.option(
    "--jobs",
    type=click.IntRange(min=1),
    default=None,
    help="Number of files to analyse in parallel (overrides config)",
)
@click.pass_context
def lint(
    ctx: click.Context,
    paths: tuple[Path, ...],
    *,
    output_format: str | None,
    rule_ids: tuple[str, ...],
    show_source: bool | None,
    jobs: int | None,
) -> None:
    """Run linting on JavaScript files."""
    cfg: FpGuardConfig = ctx.obj["config"]

    overrides: dict[str, Any] = {}
    if output_format is not None:
        overrides["output_format"] = OutputFormat(output_format)
    if show_source is not None:
        overrides["show_source"] = show_source
    if jobs is not None:
        overrides["jobs"] = jobs
    if rule_ids:
        try:
            overrides["selected_rules"] = resolve_rule_ids(rule_ids=rule_ids)
        except UnknownRuleError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(EXIT_USAGE_ERROR)
            return

    if overrides:
        cfg = replace(cfg, **overrides)

    if not paths:
        paths = (Path("."),)

    missing: list[str] = [str(p) for p in paths if not p.exists()]
    if missing:
        click.echo(f"Error: Path does not exist: {', '.join(missing)}", err=True)
        ctx.exit(EXIT_USAGE_ERROR)
        return

    result: LintResult = lint_paths(paths=paths, config=cfg)
    click.echo(render_results(result=result, config=cfg))
    ctx.exit(result.exit_code)


@cli.command()
@click.argument("rule_id", required=False, default=None)
@click.option("--all", "show_all", is_flag=True, help="List all rules with summaries")
@click.pass_context
def explain(ctx: click.Context, rule_id: str | None, *, show_all: bool) -> None:
    """Show rule documentation and examples."""
    cfg: FpGuardConfig = ctx.obj["config"]

    if show_all:
        severities: dict[str, str] = {
            code: sev.value for code, sev in cfg.rules.severities.items()
        }
        click.echo(format_rule_table(catalog=RULE_CATALOG, severities=severities))
        return

    if rule_id is None:
        click.echo("Usage: fpguard explain <RULE_ID> or fpguard explain --all")
        ctx.exit(EXIT_USAGE_ERROR)
        return

    code: str | None = canonical_rule_id(rule_id)
    if code is None or code not in RULE_CATALOG:
        click.echo(f"Error: Unknown rule id '{rule_id}'.", err=True)
        ctx.exit(EXIT_USAGE_ERROR)
        return

    click.echo(format_rule_detail(
        info=RULE_CATALOG[code],
        default_severity=DEFAULT_SEVERITIES[code].value,
    ))


def main() -> None:
    """Main entry point for fpguard CLI."""
    cli()


if __name__ == "__main__":
    main()
