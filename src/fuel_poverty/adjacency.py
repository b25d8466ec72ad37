"""
Neighbour relations between local authority polygons.

Two areas are neighbours when their boundaries intersect (shared edge or
touching corner). Computed with a geopandas self spatial join, so the
spatial index does the candidate filtering; self matches are dropped.
"""

import geopandas as gpd
import pandas as pd
from shapely.validation import make_valid

from fuel_poverty.islands import InvalidInputError


def validate_geometries(gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Validate and fix invalid geometries.

    Parameters
    ----------
    gdf : gpd.GeoDataFrame
        Input GeoDataFrame.

    Returns
    -------
    gpd.GeoDataFrame
        Copy of the input with valid geometries.
    """
    gdf = gdf.copy()
    invalid = ~gdf.geometry.is_valid
    if invalid.any():
        gdf.loc[invalid, gdf.geometry.name] = gdf.geometry[invalid].apply(make_valid)
    return gdf


def neighbour_pairs(gdf: gpd.GeoDataFrame, code_col: str = "code") -> pd.DataFrame:
    """
    Ordered (area, neighbour) pairs from a polygon self-intersection.

    Parameters
    ----------
    gdf : gpd.GeoDataFrame
        One polygon per area.
    code_col : str
        Column holding the unique area code.

    Returns
    -------
    pd.DataFrame
        Columns ``code`` and ``neighbour_code``, sorted, no self pairs.
        Both directions of every adjacency are present.

    Raises
    ------
    InvalidInputError
        If ``code_col`` holds duplicate codes.
    """
    if code_col not in gdf.columns:
        raise KeyError(
            f"Code column '{code_col}' not found. Columns: {list(gdf.columns)}"
        )
    duplicated = gdf[code_col][gdf[code_col].duplicated()]
    if len(duplicated) > 0:
        raise InvalidInputError(
            f"Duplicate area codes: {sorted(set(duplicated.astype(str)))}"
        )

    polys = gdf[[code_col, gdf.geometry.name]].rename(columns={code_col: "code"})
    joined = gpd.sjoin(
        polys,
        polys.rename(columns={"code": "neighbour_code"}),
        how="inner",
        predicate="intersects",
    )
    pairs = joined.loc[joined["code"] != joined["neighbour_code"], ["code", "neighbour_code"]]
    pairs = pairs.astype(str).drop_duplicates()
    return pairs.sort_values(["code", "neighbour_code"]).reset_index(drop=True)


def find_neighbours(gdf: gpd.GeoDataFrame, code_col: str = "code") -> dict[str, set[str]]:
    """Map every area code to the set of codes it intersects (excluding itself)."""
    pairs = neighbour_pairs(gdf, code_col)
    neighbours: dict[str, set[str]] = {str(c): set() for c in gdf[code_col]}
    for code, neighbour in zip(pairs["code"], pairs["neighbour_code"]):
        neighbours[code].add(neighbour)
    return neighbours
