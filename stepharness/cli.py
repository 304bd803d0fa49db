"""Command line interface for running test step sequences."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import typer

from stepharness import StepHarness, get_history
from stepharness.bag import ParameterBag
from stepharness.cli_utils.loader import load_registry
from stepharness.config import load_config
from stepharness.errors import RegistryLoadError
from stepharness.generators import get_generator

app = typer.Typer(help="CLI for stepharness test sequences")

# Command groups
steps_app = typer.Typer(help="Commands for inspecting registered steps")
history_app = typer.Typer(help="Commands for the execution history")
params_app = typer.Typer(help="Commands for generating parameter values")

app.add_typer(steps_app, name="steps")
app.add_typer(history_app, name="history")
app.add_typer(params_app, name="params")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (defaults to the configured level)"
    ),
) -> None:
    """stepharness CLI entry point."""
    level = (log_level or load_config().logging.level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _parse_pairs(pairs: Optional[List[str]]) -> Dict[str, Any]:
    parsed: Dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            typer.secho(f"Invalid parameter '{pair}', expected key=value", fg=typer.colors.RED)
            raise typer.Exit(code=2)
        parsed[key] = _parse_value(value)
    return parsed


def _load_registry_or_exit(target: str):
    try:
        return load_registry(target)
    except RegistryLoadError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(code=1)


@steps_app.command("list")
def steps_list(target: str) -> None:
    """
    List the steps registered in a registry.

    Args:
        target: 'module:attribute' or 'path/to/file.py:attribute' naming a
            StepRegistry or StepHarness

    Example:
        stepharness steps list tests/fixtures/forex_steps.py:registry
        # Output: login    Open trading session
        #         place_order    Place market order
    """
    registry = _load_registry_or_exit(target)
    steps = registry.list()
    if not steps:
        typer.echo("No steps registered")
        return
    for step_id, step in steps.items():
        line = f"{step_id}\t{step.name}"
        if step.tags:
            line += f"\t[{', '.join(step.tags)}]"
        typer.echo(line)


@app.command("run")
def run(
    target: str,
    step_ids: List[str] = typer.Argument(..., help="Step ids to run in order"),
    param: Optional[List[str]] = typer.Option(
        None, "--param", "-p", help="Initial parameter as key=value (JSON values allowed)"
    ),
    params_json: Optional[str] = typer.Option(
        None, "--params-json", help="Initial parameters as a JSON object"
    ),
) -> None:
    """
    Run steps in order against one shared parameter bag.

    Each outcome is printed as it is reported. The run stops at the first
    failing step that asks to abort, and the command exits with code 1 when
    any step failed or the run stopped early.

    Example:
        stepharness run suite.py:registry login place_order -p pair=EUR/USD
        # Output: login          SUCCESS  Session opened
        #         place_order    FAILED   Order rejected
    """
    registry = _load_registry_or_exit(target)

    bag: ParameterBag = {}
    if params_json:
        try:
            loaded = json.loads(params_json)
        except json.JSONDecodeError as e:
            typer.secho(f"Invalid --params-json: {e}", fg=typer.colors.RED)
            raise typer.Exit(code=2)
        if not isinstance(loaded, dict):
            typer.secho("--params-json must be a JSON object", fg=typer.colors.RED)
            raise typer.Exit(code=2)
        bag.update(loaded)
    bag.update(_parse_pairs(param))

    config = load_config()
    harness = StepHarness(
        registry=registry,
        history=get_history(),
        step_timeout=config.executor.step_timeout,
    )
    result = asyncio.run(harness.run_sequence(step_ids, bag))

    for step_id, outcome in zip(result.requested, result.outcomes):
        status = "SUCCESS" if outcome.success else "FAILED"
        typer.echo(f"{step_id}\t{status}\t{outcome.message}")
    if result.aborted:
        typer.secho(
            f"Sequence stopped after {len(result)}/{len(result.requested)} steps",
            fg=typer.colors.RED,
        )
    if not result.success:
        raise typer.Exit(code=1)


@history_app.command("list")
def history_list(
    recent: Optional[int] = typer.Option(None, help="Only show the last N records"),
) -> None:
    """
    List recorded step executions, oldest first.

    Example:
        stepharness history list --recent 2
        # Output: 3    login          SUCCESS    12.5ms    Session opened
        #         4    place_order    FAILED     40.1ms    Order rejected
    """
    history = get_history()
    records = asyncio.run(history.all())
    if not records:
        typer.echo("No history records found")
        return
    start = max(len(records) - recent, 0) if recent is not None else 0
    for index in range(start, len(records)):
        rec = records[index]
        status = "SUCCESS" if rec.success else "FAILED"
        typer.echo(
            f"{index}\t{rec.step_id}\t{status}\t{rec.duration_ms:.1f}ms\t{rec.outcome.message}"
        )


@history_app.command("show")
def history_show(index: int) -> None:
    """Print one history record as JSON."""
    history = get_history()
    records = asyncio.run(history.all())
    if index < 0 or index >= len(records):
        typer.echo("Record not found")
        raise typer.Exit(code=1)
    typer.echo(records[index].model_dump_json(indent=2))


@history_app.command("clear")
def history_clear() -> None:
    """Remove every history record."""
    history = get_history()
    asyncio.run(history.clear())
    typer.echo("History cleared")


@params_app.command("generate")
def params_generate(
    type_name: str,
    count: int = typer.Option(1, min=1, help="How many values to generate"),
    option: Optional[List[str]] = typer.Option(
        None, "--option", "-o", help="Generator configuration as key=value"
    ),
    forex: bool = typer.Option(False, help="Include market-condition generators"),
) -> None:
    """
    Generate parameter values of one type.

    Example:
        stepharness params generate forex_price -o pair=GBP/USD --count 3
    """
    generator = get_generator(load_config().generator, forex=forex)
    configuration = _parse_pairs(option)
    for _ in range(count):
        typer.echo(str(generator.generate_parameter(type_name, configuration)))


@params_app.command("types")
def params_types(
    forex: bool = typer.Option(False, help="Include market-condition generators"),
) -> None:
    """List available generator types."""
    generator = get_generator(load_config().generator, forex=forex)
    for name in sorted(generator.available_generators()):
        typer.echo(name)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
