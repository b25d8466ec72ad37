"""
Cleaning the sub-regional fuel poverty table into area records.

The DESNZ sub-regional fuel poverty workbook ships one sheet per geography
with descriptive headers ("Area Codes", "Area names", "Number of
households1", ...) and region/country subtotal rows mixed in with the
local authorities. These helpers reduce it to one row per local authority
district with standard column names.
"""

import re

import pandas as pd

from fuel_poverty.islands import Area, NeighbourSummary

# Standard column names used throughout the project
CODE_COL = "code"
NAME_COL = "name"
METRIC_COL = "fuel_poor_pct"

# Local authority district code prefixes (unitary, non-metropolitan,
# metropolitan, London borough, Welsh unitary)
LAD_PREFIXES: tuple[str, ...] = ("E06", "E07", "E08", "E09", "W06")

GSS_CODE_PATTERN = r"^[A-Z]\d{8}$"


def _normalise_header(col: object) -> str:
    """Lower-case a header and drop footnote digits and punctuation."""
    text = str(col).lower()
    text = re.sub(r"(?<=[a-z)])\d+$", "", text.strip())
    return re.sub(r"[^a-z%]+", " ", text).strip()


def standardise_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename fuel poverty table headers to the project's standard names.

    Parameters
    ----------
    df : pd.DataFrame
        Raw table as read from the workbook.

    Returns
    -------
    pd.DataFrame
        Table with ``code``, ``name``, ``fuel_poor_pct`` and, when present,
        ``households`` and ``fuel_poor_households`` columns.

    Raises
    ------
    KeyError
        If the code, name or proportion column cannot be identified.
    """
    col_mapping = {}
    for col in df.columns:
        key = _normalise_header(col)
        if key in ("area codes", "area code", "la code", "lad code", "code"):
            col_mapping[col] = CODE_COL
        elif key in ("area names", "area name", "la name", "lad name", "name"):
            col_mapping[col] = NAME_COL
        elif "proportion" in key and "fuel poor" in key:
            col_mapping[col] = METRIC_COL
        elif key.startswith("number of households in fuel poverty"):
            col_mapping[col] = "fuel_poor_households"
        elif key == "number of households":
            col_mapping[col] = "households"

    df = df.rename(columns=col_mapping)

    required = [CODE_COL, NAME_COL, METRIC_COL]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise KeyError(
            f"Required columns not found: {missing}\n"
            f"Available columns: {list(df.columns)}"
        )

    return df


def clean_fuel_poverty(
    df: pd.DataFrame, prefixes: tuple[str, ...] = LAD_PREFIXES
) -> pd.DataFrame:
    """
    Reduce a standardised table to one row per local authority district.

    Drops blank, subtotal and footnote rows, keeps codes with one of
    ``prefixes``, and coerces the numeric columns.
    """
    df = df.copy()
    df[CODE_COL] = df[CODE_COL].astype("string").str.strip()
    df[NAME_COL] = df[NAME_COL].astype("string").str.strip()

    is_gss = df[CODE_COL].str.match(GSS_CODE_PATTERN, na=False).astype(bool)
    is_lad = df[CODE_COL].str.startswith(prefixes, na=False).astype(bool)
    df = df[is_gss & is_lad]

    numeric_cols = [
        c for c in (METRIC_COL, "households", "fuel_poor_households") if c in df.columns
    ]
    for col in numeric_cols:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    df = df[df[METRIC_COL].notna()]

    keep = [CODE_COL, NAME_COL, *numeric_cols]
    return df[keep].reset_index(drop=True)


def to_areas(df: pd.DataFrame) -> list[Area]:
    """Convert a cleaned table to ``Area`` records."""
    extra_cols = [c for c in df.columns if c not in (CODE_COL, NAME_COL, METRIC_COL)]
    areas = []
    for row in df.to_dict("records"):
        areas.append(
            Area(
                code=str(row[CODE_COL]),
                name=str(row[NAME_COL]),
                metric=float(row[METRIC_COL]),
                attributes={c: row[c] for c in extra_cols},
            )
        )
    return areas


def verdicts_frame(summaries: dict[str, NeighbourSummary]) -> pd.DataFrame:
    """Tabulate neighbour summaries, indexed by area code."""
    rows = [
        {
            CODE_COL: s.code,
            "band": s.band.label,
            "band_index": s.band.index,
            "n_neighbours": s.n_neighbours,
            "n_lower": s.n_lower,
            "n_higher": s.n_higher,
            "n_same_band": s.n_same_band,
            "split": s.is_split,
            "verdict": s.verdict.value,
        }
        for s in summaries.values()
    ]
    columns = [
        CODE_COL, "band", "band_index", "n_neighbours", "n_lower",
        "n_higher", "n_same_band", "split", "verdict",
    ]
    return pd.DataFrame(rows, columns=columns).set_index(CODE_COL)
