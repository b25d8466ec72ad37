"""
Islands of difference in local authority fuel poverty.

Joins the LAD fuel poverty table to LAD boundaries, finds each district's
neighbours by polygon intersection, buckets fuel poverty into bands and
flags districts whose band differs from every neighbour in one direction.

Run after data/prepare_fuel_poverty.py and data/process_boundaries.py.

Output:
    - temp/stats/islands.gpkg            boundaries + band + verdict
    - temp/stats/islands.csv             per-district neighbour counts
    - temp/stats/neighbour_pairs.csv     (district, neighbour, direction)

Usage:
    uv run python stats/island_analysis.py
"""

import geopandas as gpd
import pandas as pd

from fuel_poverty.adjacency import find_neighbours, neighbour_pairs
from fuel_poverty.islands import DEFAULT_BAND_EDGES, Classification, summarise_neighbours
from fuel_poverty.paths import TEMP_DIR
from fuel_poverty.records import METRIC_COL, to_areas, verdicts_frame

STATS_PATH = TEMP_DIR / "statistics" / "lad_fuel_poverty.parquet"
BOUNDARIES_PATH = TEMP_DIR / "boundaries" / "local_authorities.gpkg"
OUTPUT_DIR = TEMP_DIR / "stats"

BAND_EDGES = DEFAULT_BAND_EDGES


def load_joined() -> gpd.GeoDataFrame:
    """Inner-join fuel poverty statistics onto district boundaries."""
    for path in (STATS_PATH, BOUNDARIES_PATH):
        if not path.exists():
            raise FileNotFoundError(
                f"Input file not found: {path}\n"
                f"Run data/prepare_fuel_poverty.py and data/process_boundaries.py first."
            )

    print(f"Loading statistics from {STATS_PATH}")
    stats = pd.read_parquet(STATS_PATH)
    print(f"  {len(stats):,} districts")

    print(f"Loading boundaries from {BOUNDARIES_PATH}")
    boundaries = gpd.read_file(BOUNDARIES_PATH)
    print(f"  {len(boundaries):,} polygons")

    gdf = boundaries[["code", "geometry"]].merge(stats, on="code", how="inner")
    unmatched_stats = sorted(set(stats["code"]) - set(gdf["code"]))
    unmatched_bounds = sorted(set(boundaries["code"]) - set(gdf["code"]))
    print(f"  Joined: {len(gdf):,} districts")
    if unmatched_stats:
        print(f"  No boundary for {len(unmatched_stats)} codes: {unmatched_stats[:10]}")
    if unmatched_bounds:
        print(f"  No statistics for {len(unmatched_bounds)} codes: {unmatched_bounds[:10]}")

    return gdf


def pair_directions(pairs: pd.DataFrame, table: pd.DataFrame) -> pd.DataFrame:
    """Label each (district, neighbour) pair Above/Under/Same by band."""
    band_index = table["band_index"]
    own = pairs["code"].map(band_index)
    other = pairs["neighbour_code"].map(band_index)
    direction = pd.Series("Same", index=pairs.index)
    direction[own > other] = "Above"
    direction[own < other] = "Under"
    return pairs.assign(direction=direction)


def main() -> None:
    """Run the island classification."""
    print("=" * 60)
    print("ISLANDS OF DIFFERENCE: LAD FUEL POVERTY")
    print("=" * 60)

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    print("\n[1/4] Loading data...")
    gdf = load_joined()

    print("\n[2/4] Finding neighbours...")
    neighbours = find_neighbours(gdf)
    pairs = neighbour_pairs(gdf)
    counts = pd.Series({k: len(v) for k, v in neighbours.items()})
    print(f"  {len(pairs):,} neighbour pairs")
    print(f"  Neighbours per district: median {counts.median():.0f}, max {counts.max()}")

    print("\n[3/4] Classifying...")
    print(f"  Band edges: {list(BAND_EDGES)}")
    areas = to_areas(gdf.drop(columns="geometry"))
    summaries = summarise_neighbours(areas, neighbours, BAND_EDGES)
    table = verdicts_frame(summaries)

    for verdict in Classification:
        n = int((table["verdict"] == verdict.value).sum())
        print(f"  {verdict.value:<14} {n:>4}")
    n_split = int(table["split"].sum())
    if n_split:
        print(f"  ({n_split} 'Same' districts have neighbours split above and below)")

    result = gdf.merge(table, left_on="code", right_index=True, how="left")
    islands = result[result["verdict"].isin(
        [Classification.ABOVE_ISLAND.value, Classification.UNDER_ISLAND.value]
    )].sort_values(METRIC_COL, ascending=False)

    names = dict(zip(result["code"], result["name"]))
    print("\n  Islands:")
    for _, row in islands.iterrows():
        nbrs = ", ".join(sorted(names[c] for c in neighbours[row["code"]]))
        print(f"    {row['verdict']:<5} {row['name']} ({row[METRIC_COL]:.1f}%, "
              f"{row['band']}) vs {nbrs}")

    print("\n[4/4] Saving...")
    gpkg_path = OUTPUT_DIR / "islands.gpkg"
    result.to_file(gpkg_path, driver="GPKG")
    print(f"  Saved {gpkg_path}")

    csv_path = OUTPUT_DIR / "islands.csv"
    result.drop(columns="geometry").to_csv(csv_path, index=False)
    print(f"  Saved {csv_path}")

    pairs_path = OUTPUT_DIR / "neighbour_pairs.csv"
    pair_directions(pairs, table).to_csv(pairs_path, index=False)
    print(f"  Saved {pairs_path}")


if __name__ == "__main__":
    main()
