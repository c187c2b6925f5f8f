"""Entry point for benchmarks CLI."""

from typing import Annotated

import typer

from . import benchs  # pyright: ignore[reportUnusedImport] # noqa: F401
from ._pipeline import run_pipeline, to_table
from ._registery import BENCHMARKS, CONSOLE

app = typer.Typer(help="Benchmarks for lazychain developments.")


@app.command(name="list")
def list_benchmarks() -> None:
    """List every registered benchmark."""
    for benchmark in BENCHMARKS:
        CONSOLE.print(f"{benchmark.category}: {benchmark.name}")


@app.command()
def run(
    *,
    category: Annotated[
        str | None, typer.Option("--category", "-c", help="Only run this category.")
    ] = None,
) -> None:
    """Run benchmarks and print their median timings."""
    CONSOLE.print("Running benchmarks...", style="bold blue")
    try:
        stats = run_pipeline(category)
    except LookupError as e:
        CONSOLE.print(f"✗ {e}", style="bold red")
        raise typer.Exit(code=1) from e
    CONSOLE.print()
    CONSOLE.print(to_table(stats))


if __name__ == "__main__":
    app()
