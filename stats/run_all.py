"""
Run the fuel poverty islands pipeline.

Executes in order:
1. Fuel poverty table (data/prepare_fuel_poverty.py)
2. LAD boundaries (data/process_boundaries.py)
3. Island classification (stats/island_analysis.py)
4. Maps (stats/island_maps.py)

Usage:
    uv run python stats/run_all.py             # full pipeline
    uv run python stats/run_all.py --skip-data # reuse prepared inputs
"""

import subprocess
import sys
from datetime import datetime
from pathlib import Path

BASE_DIR = Path(__file__).parent.parent

DATA_STEPS = [
    "data/prepare_fuel_poverty.py",
    "data/process_boundaries.py",
]

ANALYSIS_STEPS = [
    "stats/island_analysis.py",
    "stats/island_maps.py",
]


def run_script(script_name: str) -> bool:
    """Run a Python script and return success status."""
    script_path = BASE_DIR / script_name

    if not script_path.exists():
        print(f"  WARNING: Script not found: {script_name}")
        return False

    print(f"\n{'=' * 60}")
    print(f"RUNNING: {script_name}")
    print(f"{'=' * 60}")

    result = subprocess.run(
        [sys.executable, str(script_path)],
        cwd=str(BASE_DIR),
        capture_output=False,
        text=True,
    )
    return result.returncode == 0


def main():
    """Run the pipeline, stopping at the first failure."""
    print("=" * 60)
    print("FUEL POVERTY ISLANDS PIPELINE")
    print("=" * 60)
    print(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"Base directory: {BASE_DIR}")

    skip_data = "--skip-data" in sys.argv
    steps = ANALYSIS_STEPS if skip_data else DATA_STEPS + ANALYSIS_STEPS

    results = {"success": [], "failed": [], "skipped": []}
    if skip_data:
        results["skipped"] = list(DATA_STEPS)

    for script in steps:
        if run_script(script):
            results["success"].append(script)
        else:
            results["failed"].append(script)
            # Later steps read this step's output
            results["skipped"] += steps[steps.index(script) + 1 :]
            break

    print("\n" + "=" * 60)
    print("PIPELINE COMPLETE")
    print("=" * 60)
    print(f"\nTimestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"\nSuccessful: {len(results['success'])}")
    for s in results["success"]:
        print(f"  ✓ {s}")

    if results["failed"]:
        print(f"\nFailed: {len(results['failed'])}")
        for s in results["failed"]:
            print(f"  ✗ {s}")

    if results["skipped"]:
        print(f"\nSkipped: {len(results['skipped'])}")
        for s in results["skipped"]:
            print(f"  - {s}")

    print("\n" + "=" * 60)
    print("OUTPUT LOCATIONS")
    print("=" * 60)
    print("  Fuel poverty table: data/temp/statistics/lad_fuel_poverty.parquet")
    print("  Boundaries:         data/temp/boundaries/local_authorities.gpkg")
    print("  Islands:            data/temp/stats/islands.{gpkg,csv}")
    print("  Figures:            stats/figures/")

    sys.exit(1 if results["failed"] else 0)


if __name__ == "__main__":
    main()
