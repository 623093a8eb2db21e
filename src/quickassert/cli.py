from __future__ import annotations

from pathlib import Path

import typer

from quickassert.retry import RetryStrategy

app = typer.Typer(name="quickassert", help="Tools for quickassert configuration")


def _describe(name: str, strategy: RetryStrategy) -> str:
    parts = [f"delay={strategy.delay:g}s", f"factor={max(strategy.factor, 1.0):g}"]
    if strategy.max_delay:
        parts.append(f"max_delay={strategy.max_delay:g}s")
    if strategy.max_duration:
        parts.append(f"max_duration={strategy.max_duration:g}s")
    if strategy.max_count is not None:
        parts.append(f"max_count={strategy.max_count}")
    return f"{name}: {', '.join(parts)}"


@app.command()
def validate(
    config: str = typer.Argument(help="Path to a quickassert YAML config"),
):
    """Load a config and print the retry schedules it selects."""
    from quickassert.config import load_config

    config_path = Path(config)
    if not config_path.exists():
        typer.echo(f"Error: config file not found: {config}", err=True)
        raise typer.Exit(1)

    try:
        qa_config = load_config(config_path)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(_describe("eventually", qa_config.eventually))
    typer.echo(_describe("stable", qa_config.stable))
    if qa_config.debug_log:
        typer.echo(f"debug log: {qa_config.debug_log}")
    if qa_config.junit:
        typer.echo(f"junit: {qa_config.junit}")


@app.command()
def schema(
    out: str = typer.Option(
        "schemas/quickassert.schema.json", "--out", "-o", help="Output path for JSON Schema"
    ),
):
    """Write the JSON Schema of the config file."""
    from quickassert.schema import write_json_schema

    out_path = Path(out)
    write_json_schema(out_path)
    typer.echo(f"Wrote schema: {out_path}")


if __name__ == "__main__":
    app()
