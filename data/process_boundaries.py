"""
Process ONS Local Authority District boundaries into analysis-ready polygons.

Reads the LAD boundary shapefile (any LADyyCD/LADyyNM release) and produces
one valid polygon per district with standard ``code`` / ``name`` columns.
Geometries are kept at full resolution: simplifying each polygon on its
own opens slivers between neighbours and breaks the adjacency join.

Input: raw/Local_Authority_Districts/*.shp
Output: temp/boundaries/local_authorities.gpkg
"""

import sys
from pathlib import Path

import geopandas as gpd

from fuel_poverty.adjacency import validate_geometries
from fuel_poverty.paths import RAW_DIR, TEMP_DIR

INPUT_DIR = RAW_DIR / "Local_Authority_Districts"
OUTPUT_DIR = TEMP_DIR / "boundaries"

# Fuel poverty statistics cover England only
COUNTRY_PREFIXES: tuple[str, ...] = ("E",)


def find_shapefile(directory: Path) -> Path:
    """Return the single shapefile in ``directory``."""
    shapefiles = sorted(directory.glob("*.shp"))
    if not shapefiles:
        raise FileNotFoundError(
            f"No shapefile found in {directory}\n"
            f"Download from: https://geoportal.statistics.gov.uk/ "
            f"(Local Authority Districts, generalised clipped boundaries)"
        )
    if len(shapefiles) > 1:
        print(f"  Multiple shapefiles found, using {shapefiles[0].name}")
    return shapefiles[0]


def load_local_authorities(path: Path) -> gpd.GeoDataFrame:
    """
    Load LAD boundaries from a shapefile.

    Parameters
    ----------
    path : Path
        Path to the shapefile.

    Returns
    -------
    gpd.GeoDataFrame
        Districts with standardised ``code`` and ``name`` columns.

    Raises
    ------
    KeyError
        If no LAD code/name columns can be identified.
    """
    print(f"Loading local authorities from {path}")
    gdf = gpd.read_file(path)
    print(f"  Loaded {len(gdf):,} polygons")
    print(f"  Columns: {list(gdf.columns)}")

    # ONS suffixes the release year (LAD21CD, LAD23NM, ...); Welsh names
    # come as LADyyNMW and are left alone
    col_mapping = {}
    for col in gdf.columns:
        col_upper = col.upper()
        if col_upper.startswith("LAD") and col_upper.endswith("CD"):
            col_mapping[col] = "code"
        elif col_upper.startswith("LAD") and col_upper.endswith("NM"):
            col_mapping[col] = "name"

    if col_mapping:
        print(f"  Renaming columns: {col_mapping}")
        gdf = gdf.rename(columns=col_mapping)

    required = ["code", "name"]
    missing = [c for c in required if c not in gdf.columns]
    if missing:
        raise KeyError(
            f"Required columns not found: {missing}\n"
            f"Available columns: {list(gdf.columns)}\n"
            f"Please check the ONS Local Authority Districts data format."
        )

    return gdf[["code", "name", "geometry"]]


def main() -> None:
    """Main processing pipeline."""
    print("=" * 60)
    print("Local Authority District Boundary Processing")
    print("=" * 60)

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    print("\n[1/4] Loading local authorities...")
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else find_shapefile(INPUT_DIR)
    lad = load_local_authorities(path)

    n_before = len(lad)
    lad = lad[lad["code"].str.startswith(COUNTRY_PREFIXES)]
    print(f"  Filtered to {COUNTRY_PREFIXES}: {n_before:,} -> {len(lad):,}")

    print("\n[2/4] Validating geometries...")
    invalid_count = int((~lad.geometry.is_valid).sum())
    lad = validate_geometries(lad)
    print(f"  Fixed {invalid_count} invalid geometries")

    print("\n[3/4] Dissolving multi-part records...")
    n_before = len(lad)
    lad = lad.dissolve(by="code", aggfunc="first", as_index=False)
    print(f"  Records: {n_before:,} -> {len(lad):,}")

    print("\n[4/4] Saving...")
    output_path = OUTPUT_DIR / "local_authorities.gpkg"
    lad.to_file(output_path, driver="GPKG")
    print(f"  Saved to {output_path}")

    print("\n" + "=" * 60)
    print("Processing complete!")
    print("=" * 60)
    print(f"\nInput:  {path}")
    print(f"Output: {output_path}")
    print(f"CRS:    {lad.crs}")
    print(f"\nDistricts: {len(lad):,}")


if __name__ == "__main__":
    main()
