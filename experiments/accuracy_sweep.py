"""Generate accuracy summaries for cubic-lab reports.

This script runs accuracy sweeps for every precision format and problem kind
and writes one JSON file per format. Output JSON files are suitable for
plotting forward error and residual quality against precision.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

from cubic_lab.algorithms.problems import PROBLEM_KINDS
from cubic_lab.algorithms.sweep import run_accuracy_sweep
from cubic_lab.data.precision_types import get_precision_hierarchy, get_spec


def generate_sweeps(
    count: int = 1000,
    scale: float = 10.0,
    seed: int = 42,
    output_dir: Path | None = None,
) -> None:
    """Run accuracy sweeps for all formats and problem kinds.

    Args:
        count: Problems per kind.
        scale: Root magnitude.
        seed: Seed of the first problem.
        output_dir: Output directory (defaults to experiments/sweeps/).
    """
    if output_dir is None:
        output_dir = Path(__file__).parent / "sweeps"

    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"Generating accuracy sweeps (n={count} per kind, scale={scale})...")

    for precision in get_precision_hierarchy():
        spec = get_spec(precision)
        print(f"  Running {precision.value}...", end=" ", flush=True)

        summaries = [
            run_accuracy_sweep(kind, count, precision, seed=seed, scale=scale)
            for kind in PROBLEM_KINDS
        ]

        output = {
            "metadata": {
                "precision": precision.value,
                "machine_epsilon": spec.machine_epsilon,
                "problems_per_kind": count,
                "scale": scale,
                "seed": seed,
                "timestamp": datetime.now(UTC).isoformat(),
            },
            "sweeps": [summary.to_dict() for summary in summaries],
        }

        output_file = output_dir / f"sweep_{precision.value}.json"
        with output_file.open("w") as f:
            json.dump(output, f, indent=2)

        mismatches = sum(s.root_count_mismatches for s in summaries)
        print(f"✓ {mismatches} root-count mismatches")

    print(f"\nSweeps saved to: {output_dir}")


def main() -> None:
    """Generate all accuracy sweeps."""
    print("=" * 70)
    print("Cubic Lab - Accuracy Sweep Generation")
    print("=" * 70)

    output_dir = Path(__file__).parent / "sweeps"
    generate_sweeps(output_dir=output_dir)

    print("\n" + "=" * 70)
    print("✓ All sweeps generated successfully!")
    print("=" * 70)
    print("\nGenerated files:")
    for sweep_file in sorted(output_dir.glob("sweep_*.json")):
        size_kb = sweep_file.stat().st_size / 1024
        print(f"  - {sweep_file.name} ({size_kb:.1f} KB)")


if __name__ == "__main__":
    main()
