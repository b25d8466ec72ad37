"""
Prepare DESNZ sub-regional fuel poverty statistics at local authority level.

Reads the sub-regional fuel poverty workbook (Low Income Low Energy
Efficiency measure) and reduces the local authority sheet to one row per
district with standard column names.

Data source: https://www.gov.uk/government/collections/fuel-poverty-sub-regional-statistics
License: UK Open Government Licence (OGL)

Input:
    raw/sub-regional-fuel-poverty-tables.xlsx   (downloaded manually)

Output:
    - temp/statistics/lad_fuel_poverty.parquet
        Columns: code, name, fuel_poor_pct, households, fuel_poor_households

Usage:
    uv run python data/prepare_fuel_poverty.py
    uv run python data/prepare_fuel_poverty.py path/to/workbook.xlsx
"""

import sys
from pathlib import Path

import pandas as pd

from fuel_poverty.paths import RAW_DIR, TEMP_DIR
from fuel_poverty.records import METRIC_COL, clean_fuel_poverty, standardise_columns

INPUT_PATH = RAW_DIR / "sub-regional-fuel-poverty-tables.xlsx"
OUTPUT_DIR = TEMP_DIR / "statistics"

# Local authority sheet in the workbook
SHEET_NAME = "Table 2"

# Rows scanned for the header line (title and notes sit above it)
HEADER_SEARCH_ROWS = 20


def find_header_row(raw: pd.DataFrame) -> int:
    """
    Locate the header row beneath the sheet's title and notes.

    Parameters
    ----------
    raw : pd.DataFrame
        Sheet read with ``header=None``.

    Returns
    -------
    int
        Zero-based row index of the header.
    """
    for i in range(min(HEADER_SEARCH_ROWS, len(raw))):
        cells = [str(v).strip().lower() for v in raw.iloc[i].tolist()]
        if any(c.startswith(("area code", "la code", "lad code")) for c in cells):
            return i
    raise ValueError(
        f"Cannot find header row in first {HEADER_SEARCH_ROWS} rows of {SHEET_NAME}"
    )


def load_workbook(path: Path, sheet_name: str = SHEET_NAME) -> pd.DataFrame:
    """Read the local authority sheet with its real header row."""
    if not path.exists():
        raise FileNotFoundError(
            f"Input file not found: {path}\n"
            f"Download from: "
            f"https://www.gov.uk/government/collections/fuel-poverty-sub-regional-statistics"
        )

    print(f"Loading {sheet_name} from {path}")
    raw = pd.read_excel(path, sheet_name=sheet_name, header=None)
    header_row = find_header_row(raw)
    print(f"  Header found on row {header_row + 1}")

    df = raw.iloc[header_row + 1 :].copy()
    df.columns = raw.iloc[header_row].tolist()
    df = df.dropna(axis=1, how="all").dropna(axis=0, how="all")
    print(f"  Loaded {len(df):,} rows, columns: {list(df.columns)}")
    return df


def main() -> None:
    """Main processing pipeline."""
    print("=" * 60)
    print("Sub-regional Fuel Poverty Processing")
    print("=" * 60)

    path = Path(sys.argv[1]) if len(sys.argv) > 1 else INPUT_PATH
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    print("\n[1/3] Loading workbook...")
    df = load_workbook(path)

    print("\n[2/3] Cleaning...")
    df = standardise_columns(df)
    n_before = len(df)
    lad = clean_fuel_poverty(df)
    print(f"  Local authority rows: {n_before:,} -> {len(lad):,}")

    print("\n[3/3] Saving...")
    output_path = OUTPUT_DIR / "lad_fuel_poverty.parquet"
    lad.to_parquet(output_path, index=False)
    print(f"  Saved to {output_path}")

    print("\n" + "=" * 60)
    print("Processing complete!")
    print("=" * 60)
    print(f"\nDistricts: {len(lad):,}")
    print(f"Fuel poor (%): min {lad[METRIC_COL].min():.1f}, "
          f"median {lad[METRIC_COL].median():.1f}, max {lad[METRIC_COL].max():.1f}")

    print("\nHighest fuel poverty:")
    for _, row in lad.nlargest(5, METRIC_COL).iterrows():
        print(f"  {row['name']} ({row['code']}): {row[METRIC_COL]:.1f}%")


if __name__ == "__main__":
    main()
