"""Click-based CLI for rhythmguard."""

import json
import sys
from pathlib import Path
from typing import Any

import click

from . import __version__
from .config import CONFIG_FILENAME, ConfigLoader, RhythmguardConfig
from .guard_logging import get_logger, setup_logging
from .models import LintResult
from .presets import get_default_registry
from .rules import create_rule_engine

# Stylesheet extensions collected when a directory is given
STYLESHEET_EXTENSIONS = frozenset([".css", ".scss", ".less", ".pcss"])

# Rules enabled when neither the config nor --rule names any
DEFAULT_RULES: dict[str, Any] = {"rhythmguard/use-scale": True}


def parse_rule_override(text: str) -> tuple[str, Any]:
    """Parse a ``--rule ID=JSON`` value.

    A bare ``ID`` enables the rule with default options.

    Raises:
        click.BadParameter: If the JSON part does not parse.
    """
    rule_id, sep, raw_setting = text.partition("=")
    rule_id = rule_id.strip()
    if not rule_id:
        raise click.BadParameter(f"missing rule id in {text!r}")
    if not sep:
        return rule_id, True
    try:
        return rule_id, json.loads(raw_setting)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON for {rule_id}: {e}") from e


def collect_stylesheets(paths: tuple[str, ...]) -> list[Path]:
    """Expand files and directories into a sorted, de-duplicated file list."""
    files: set[Path] = set()
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for candidate in path.rglob("*"):
                if candidate.is_file() and candidate.suffix.lower() in STYLESHEET_EXTENSIONS:
                    files.add(candidate)
        else:
            files.add(path)
    return sorted(files)


def format_text_result(result: LintResult) -> list[str]:
    lines = [str(finding) for finding in result.findings if not finding.fixed]
    for rule_id, error in result.rule_errors.items():
        lines.append(f"{result.file_path}: rule {rule_id} failed: {error}")
    return lines


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """rhythmguard - enforce spacing scales and design tokens in stylesheets."""


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file path",
)
@click.option("--fix", is_flag=True, help="Write fixed values back to the files")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option(
    "--rule",
    "rule_overrides",
    multiple=True,
    help="Rule setting as ID=JSON, e.g. rhythmguard/use-scale='{\"scale\": [0, 4, 8]}'",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
def lint(paths, config_file, fix, output_format, rule_overrides, verbose, quiet):
    """Lint stylesheets against the configured scale rules."""

    if quiet and verbose:
        click.echo("Error: --quiet and --verbose are mutually exclusive", err=True)
        sys.exit(2)

    setup_logging(quiet=quiet, verbose=verbose)
    logger = get_logger()

    project_path = Path.cwd()
    try:
        config = ConfigLoader(project_path).load(Path(config_file) if config_file else None)
    except (OSError, ValueError) as e:
        click.echo(f"Error: failed to load config: {e}", err=True)
        sys.exit(2)

    rules = dict(config.rules)
    try:
        for override in rule_overrides:
            rule_id, setting = parse_rule_override(override)
            rules[rule_id] = setting
    except click.BadParameter as e:
        click.echo(f"Error: --rule {e.message}", err=True)
        sys.exit(2)

    if not rules:
        rules = dict(DEFAULT_RULES)

    engine = create_rule_engine()
    results: list[LintResult] = []

    for file_path in collect_stylesheets(paths):
        if config.is_file_ignored(file_path, project_path):
            logger.debug(f"Skipping ignored file {file_path}")
            continue

        try:
            code = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            click.echo(f"Error: cannot read {file_path}: {e}", err=True)
            sys.exit(2)

        result = engine.lint(code, rules, fix=fix, file_path=file_path, cwd=project_path)
        results.append(result)

        if fix and result.fixed_findings and result.code != code:
            file_path.write_text(result.code, encoding="utf-8")
            logger.info(
                f"Fixed {len(result.fixed_findings)} values in {file_path}",
                extra={"file_path": str(file_path), "finding_count": len(result.fixed_findings)},
            )

    _report(results, output_format, quiet)

    failed = any(result.errored or result.warnings for result in results)
    sys.exit(1 if failed else 0)


def _report(results: list[LintResult], output_format: str, quiet: bool) -> None:
    if output_format == "json":
        click.echo(json.dumps([result.to_dict() for result in results], indent=2))
        return

    problem_count = 0
    for result in results:
        lines = format_text_result(result)
        problem_count += len(lines)
        for line in lines:
            click.echo(line)

    if not quiet:
        fixed_count = sum(len(result.fixed_findings) for result in results)
        summary = f"{problem_count} problem(s) in {len(results)} file(s)"
        if fixed_count:
            summary += f", {fixed_count} fixed"
        click.echo(summary)


@cli.command()
@click.option("--community", is_flag=True, help="Only list community presets")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def presets(community, as_json):
    """List available scale presets."""

    registry = get_default_registry()
    names = registry.list_community_names() if community else registry.list_names()
    entries = [registry.get(name) for name in names]

    if as_json:
        click.echo(json.dumps([preset.to_dict() for preset in entries if preset], indent=2))
        return

    for preset in entries:
        if preset is None:
            continue
        steps = ", ".join(f"{step:g}" for step in preset.steps)
        line = f"{preset.name}: {steps}"
        if preset.aliases:
            line += f" (aliases: {', '.join(preset.aliases)})"
        click.echo(line)
        if community and preset.description:
            click.echo(f"  {preset.description}")


@cli.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def init_config(force):
    """Write a starter rhythmguard.config.json in the current directory."""

    loader = ConfigLoader(Path.cwd())
    target = loader.project_path / CONFIG_FILENAME
    if target.exists() and not force:
        click.echo(f"Error: {target} already exists (use --force)", err=True)
        sys.exit(1)

    config = RhythmguardConfig(rules=dict(DEFAULT_RULES))
    path = loader.save(config, target)
    click.echo(f"Created {path}")


if __name__ == "__main__":
    cli()
