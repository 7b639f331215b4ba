"""
Command-line interface for Cubic Lab.

Usage:
    cubic-lab info                      Show available precision formats
    cubic-lab solve A B C D             Solve ax³ + bx² + cx + d = 0
    cubic-lab sweep                     Run an accuracy sweep

Negative coefficients can be passed directly or after ``--``:
    cubic-lab solve --precision fp32 -- 1 -6 11 -6
"""

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from cubic_lab import __version__
from cubic_lab.algorithms import (
    PROBLEM_KINDS,
    cubic_roots,
    diagnose_roots,
    run_accuracy_sweep,
)
from cubic_lab.data import (
    PrecisionFormat,
    get_spec,
    get_tolerance,
    list_available_formats,
)

app = typer.Typer(
    name="cubic-lab",
    help="Robust real roots of cubic polynomials with accuracy diagnostics",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"cubic-lab version {__version__}")
        raise typer.Exit()


@app.callback()  # type: ignore[misc]
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log degenerate-input handling."),
    ] = False,
) -> None:
    """Cubic Lab - Real roots of cubic polynomials."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()  # type: ignore[misc]
def info() -> None:
    """Display information about available precision formats."""
    table = Table(title="Available Precision Formats")

    table.add_column("Format", style="cyan", no_wrap=True)
    table.add_column("Bits", justify="right")
    table.add_column("Mantissa", justify="right")
    table.add_column("Machine ε", justify="right")
    table.add_column("Discriminant ulps", justify="right")
    table.add_column("Polish steps", justify="right")
    table.add_column("Residual factor", justify="right")

    for fmt in list_available_formats():
        spec = get_spec(fmt)
        table.add_row(
            fmt.value.upper(),
            str(spec.bits),
            str(spec.mantissa_bits),
            f"{spec.machine_epsilon:.2e}",
            f"{get_tolerance(fmt, 'discriminant_ulps'):g}",
            str(get_tolerance(fmt, "polish_steps")),
            f"{get_tolerance(fmt, 'residual_factor'):g}",
        )

    console.print(table)


@app.command(context_settings={"ignore_unknown_options": True})  # type: ignore[misc]
def solve(
    a: Annotated[float, typer.Argument(help="Cubic coefficient")],
    b: Annotated[float, typer.Argument(help="Quadratic coefficient")],
    c: Annotated[float, typer.Argument(help="Linear coefficient")],
    d: Annotated[float, typer.Argument(help="Constant term")],
    precision: Annotated[
        str,
        typer.Option("--precision", "-p", help="Precision format to use"),
    ] = "fp64",
) -> None:
    """Solve ax³ + bx² + cx + d = 0 and report root diagnostics."""
    try:
        fmt = get_spec(precision).format
    except ValueError as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc

    roots = cubic_roots(a, b, c, d, precision=fmt)
    diagnostics = diagnose_roots(a, b, c, d, precision=fmt)

    table = Table(title=f"Roots of {a:g}x³ + {b:g}x² + {c:g}x + {d:g} ({fmt.value})")
    table.add_column("Slot", justify="right")
    table.add_column("Root", justify="right", style="cyan")
    table.add_column("Residual", justify="right")
    table.add_column("Expected", justify="right")
    table.add_column("κ", justify="right")
    table.add_column("Trust", justify="center")

    for slot, diag in enumerate(diagnostics):
        table.add_row(
            str(slot),
            f"{diag.root:.17g}",
            f"{diag.residual:.3e}",
            f"{diag.expected_residual:.3e}",
            f"{diag.condition_number:.3e}",
            "✓" if diag.trustworthy else "[yellow]?[/]",
        )
    for slot in range(len(diagnostics), len(roots)):
        table.add_row(str(slot), "NaN", "—", "—", "—", "—", style="dim")

    console.print(table)

    if any(not diag.trustworthy for diag in diagnostics):
        console.print(
            "\n[yellow]Note:[/] Residuals above the expected bound usually mean "
            "a multiple or nearly multiple root; such results are unreliable."
        )


@app.command()  # type: ignore[misc]
def sweep(
    kind: Annotated[
        str,
        typer.Option("--kind", "-k", help=f"Problem kind: {', '.join(PROBLEM_KINDS)}"),
    ] = "distinct",
    count: Annotated[
        int,
        typer.Option("--count", "-n", help="Number of problems"),
    ] = 100,
    precision: Annotated[
        list[str] | None,
        typer.Option("--precision", "-p", help="Precision formats to sweep"),
    ] = None,
    seed: Annotated[
        int,
        typer.Option("--seed", "-s", help="Seed of the first problem"),
    ] = 42,
) -> None:
    """Run an accuracy sweep over generated problems with known roots."""
    if precision is None:
        precision = [fmt.value for fmt in PrecisionFormat]

    try:
        summaries = [
            run_accuracy_sweep(kind, count, fmt, seed=seed) for fmt in precision
        ]
    except ValueError as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc

    table = Table(title=f"Accuracy Sweep ({kind}, n={count})")
    table.add_column("Property", style="bold")
    for summary in summaries:
        table.add_column(summary.precision.upper(), justify="right")

    table.add_row("Root count mismatches", *[str(s.root_count_mismatches) for s in summaries])
    table.add_row("Max forward error", *[f"{s.max_forward_error:.2e}" for s in summaries])
    table.add_row("Max residual ratio", *[f"{s.max_residual_ratio:.2f}" for s in summaries])
    table.add_row("Trustworthy", *[f"{s.trustworthy_fraction:.1%}" for s in summaries])
    table.add_row("Mean solve time", *[f"{s.mean_solve_time_ns:,.0f} ns" for s in summaries])

    console.print(table)


if __name__ == "__main__":
    app()
