from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from colgen import __version__
from colgen.pipeline.orchestrator import Orchestrator
from colgen.utils.config import CONFIG_FILE
from colgen.utils.structured_data import dump_structured_data
from colgen.utils.types import RULE_GROUP, RULE_INDEX, CustomRule, Rule, is_map_rule

app = typer.Typer(help="Generate collection helpers for Go structs from //colgen directives.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show colgen version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    del version
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def generate(
    source: Path = typer.Argument(
        ...,
        envvar="GOFILE",
        exists=True,
        dir_okay=False,
        help="Go file with //colgen directives (defaults to $GOFILE under go generate).",
    ),
    list_suffix: bool = typer.Option(False, "--list", help="Always name collections <Entity>List."),
    imports: Optional[str] = typer.Option(
        None,
        "--imports",
        help="Comma-separated import paths added to the generated file.",
    ),
    func_package: Optional[str] = typer.Option(
        None,
        "--funcpkg",
        help="Package qualifier for the Map/MapP helpers.",
    ),
    config_path: Path = typer.Option(Path(CONFIG_FILE), "--config", help="Path to colgen config file."),
    no_format: bool = typer.Option(False, "--no-format", help="Skip the gofmt pass."),
) -> None:
    try:
        orchestrator = Orchestrator(
            config_path=config_path,
            list_suffix=True if list_suffix else None,
            imports=imports,
            func_package=func_package,
            format_output=False if no_format else None,
        )
        report = orchestrator.run(source)
    except RuntimeError as exc:
        typer.echo(f"Generation failed: {exc}")
        raise typer.Exit(code=1)

    for warning in report.warnings:
        typer.echo(f"Warning: {warning}")
    if report.replacements:
        typer.echo(f"Replaced {len(report.replacements)} directives in {report.source_path}")
    if report.output_path:
        typer.echo(f"Generated: {report.output_path}")
    elif not report.replacements:
        typer.echo(f"No colgen directives in {report.source_path}")


def _describe(custom: CustomRule) -> str:
    if is_map_rule(custom.name):
        return f"{custom.name}({custom.arg})"
    if custom.name in {RULE_INDEX, RULE_GROUP}:
        return f"{custom.name}({custom.field})"
    return custom.name + custom.field


def _rules_table(rules: List[Rule]) -> Table:
    table = Table(title="colgen rules")
    table.add_column("Entity", justify="left")
    table.add_column("Base", justify="center")
    table.add_column("Custom rules", justify="left")

    for rule in rules:
        customs = ", ".join(_describe(custom) for custom in rule.custom_rules)
        table.add_row(rule.entity_name, "yes" if rule.base_gen else "no", customs)
    return table


@app.command()
def rules(
    source: Path = typer.Argument(..., envvar="GOFILE", exists=True, dir_okay=False, help="Go file to inspect"),
    list_suffix: bool = typer.Option(False, "--list", help="Always name collections <Entity>List."),
    config_path: Path = typer.Option(Path(CONFIG_FILE), "--config", help="Path to colgen config file."),
    as_json: bool = typer.Option(False, "--as-json", help="Print merged rules as JSON"),
    as_yaml: bool = typer.Option(False, "--as-yaml", help="Print merged rules as YAML"),
) -> None:
    try:
        orchestrator = Orchestrator(config_path=config_path, list_suffix=True if list_suffix else None)
        merged = orchestrator.plan(source)
    except RuntimeError as exc:
        typer.echo(f"Failed to read rules: {exc}")
        raise typer.Exit(code=1)

    if as_json or as_yaml:
        typer.echo(dump_structured_data([asdict(rule) for rule in merged], as_yaml=as_yaml).rstrip("\n"))
        return
    if not merged:
        typer.echo(f"No colgen rules in {source}")
        return
    Console().print(_rules_table(merged))


if __name__ == "__main__":
    app()
