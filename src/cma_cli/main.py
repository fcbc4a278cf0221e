import json
import logging
from pathlib import Path

import typer
from cma_lint.config import ConfigError
from cma_lint.engine import LinterEngine
from cma_lint.models import Severity
from cma_lint.registry import RuleRegistry
from cma_lint.reporter import has_blocking, summarize

from .config import DEFAULT_CONFIG_FILE, load_config
from .converters import diagnostic_to_lint_issue, format_issue
from .models import LintReport

app = typer.Typer(help="Clean Architecture linter - check Dart projects for layering violations")

# Generated sources are not written by hand and are never linted
GENERATED_SUFFIXES = (".g.dart", ".freezed.dart", ".config.dart", ".mocks.dart")


def collect_dart_files(paths: list[Path]) -> list[Path]:
    files = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob("*.dart") if not p.name.endswith(GENERATED_SUFFIXES)))
        else:
            files.append(path)
    return files


def _load_or_exit(config_file: Path):
    try:
        return load_config(config_file)
    except ConfigError as exc:
        for error in exc.errors:
            typer.echo(f"Config error: {error}", err=True)
        raise typer.Exit(code=2)


@app.command()
def lint(
    paths: list[Path] = typer.Argument(None, help="Dart files or directories to lint (default: lib)"),
    config_file: Path = typer.Option(DEFAULT_CONFIG_FILE, "--config", help="Path to config file"),
    severity: str = typer.Option("info", help="Minimum severity to show (error, warning, info)"),
    output_format: str = typer.Option("text", "--format", help="Output format: text or json"),
    jobs: int = typer.Option(0, help="Worker threads, 0 for one per CPU"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Run architecture rules on Dart files"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        min_severity = Severity(severity.lower())
    except ValueError:
        raise typer.BadParameter(f"Unknown severity '{severity}'", param_hint="--severity")
    if output_format not in ("text", "json"):
        raise typer.BadParameter(f"Unknown format '{output_format}'", param_hint="--format")

    config = _load_or_exit(config_file)

    if not paths:
        paths = [Path("lib")] if Path("lib").is_dir() else [Path.cwd()]
    files = collect_dart_files(paths)
    if not files:
        typer.echo("Error: No Dart files found")
        raise typer.Exit(code=1)

    engine = LinterEngine(config=config, jobs=jobs or None)
    diagnostics = engine.analyze_files(files)

    issues = [diagnostic_to_lint_issue(d) for d in diagnostics if d.severity >= min_severity]
    counts = summarize(diagnostics)

    if output_format == "json":
        report = LintReport(
            issues=issues,
            files_checked=len(files),
            errors=counts[Severity.ERROR],
            warnings=counts[Severity.WARNING],
            infos=counts[Severity.INFO],
        )
        typer.echo(json.dumps(report.model_dump(mode="json"), indent=2))
    else:
        for issue in issues:
            typer.echo(format_issue(issue))
        typer.echo(
            f"\n{len(files)} file(s) checked: {counts[Severity.ERROR]} error(s), "
            f"{counts[Severity.WARNING]} warning(s), {counts[Severity.INFO]} info ({len(issues)} reported)"
        )

    if has_blocking(diagnostics):
        raise typer.Exit(code=1)


@app.command()
def rules(
    config_file: Path = typer.Option(DEFAULT_CONFIG_FILE, "--config", help="Path to config file"),
):
    """List rules with their effective severity"""
    config = _load_or_exit(config_file)
    for rule in RuleRegistry().get_all_rules():
        state = config.severity_of(rule.rule_id).value if rule.is_active(config) else "inactive"
        typer.echo(f"{rule.rule_id:<40} {state:<9} {rule.description}")


if __name__ == "__main__":
    app()
