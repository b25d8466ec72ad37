"""
Choropleth maps of fuel poverty bands and islands of difference.

Two panels, matching the two frames of the original animated view:
    All      every district coloured by fuel poverty band
    Islands  only districts flagged as above/under islands keep their colour,
             the rest are greyed out

Run after stats/island_analysis.py.

Usage:
    uv run python stats/island_maps.py
"""

import geopandas as gpd
import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.patches import Patch

from fuel_poverty.islands import Classification, make_bands
from fuel_poverty.paths import FIGURE_DIR, TEMP_DIR

DATA_PATH = TEMP_DIR / "stats" / "islands.gpkg"

# Display-only simplification (metres for BNG); analysis uses full geometry
SIMPLIFY_TOLERANCE = 200

BAND_LABELS = [b.label for b in make_bands()]
BAND_COLORS = dict(zip(BAND_LABELS, sns.color_palette("YlOrRd", len(BAND_LABELS)).as_hex()))
BACKGROUND_COLOR = "#e0e0e0"
ISLAND_EDGE_COLORS = {
    Classification.ABOVE_ISLAND.value: "#08306b",
    Classification.UNDER_ISLAND.value: "#00441b",
}

plt.style.use("seaborn-v0_8-whitegrid")
plt.rcParams.update({"figure.dpi": 150, "savefig.dpi": 150})


def load_data() -> gpd.GeoDataFrame:
    """Load classified districts and simplify for drawing."""
    if not DATA_PATH.exists():
        raise FileNotFoundError(
            f"Input file not found: {DATA_PATH}\nRun stats/island_analysis.py first."
        )
    print(f"Loading {DATA_PATH}")
    gdf = gpd.read_file(DATA_PATH)
    print(f"  {len(gdf):,} districts")
    gdf["geometry"] = gdf.geometry.simplify(tolerance=SIMPLIFY_TOLERANCE)
    return gdf


def _draw_bands(ax: plt.Axes, gdf: gpd.GeoDataFrame) -> None:
    for label, group in gdf.groupby("band"):
        group.plot(ax=ax, color=BAND_COLORS.get(label, BACKGROUND_COLOR),
                   edgecolor="white", linewidth=0.2)


def plot_panels(gdf: gpd.GeoDataFrame) -> plt.Figure:
    """Side-by-side 'All' and 'Islands' maps with a shared band legend."""
    fig, axes = plt.subplots(1, 2, figsize=(12, 8))
    is_island = gdf["verdict"].isin(list(ISLAND_EDGE_COLORS))

    ax = axes[0]
    _draw_bands(ax, gdf)
    ax.set_title("All", fontsize=13, fontweight="bold")

    ax = axes[1]
    gdf[~is_island].plot(ax=ax, color=BACKGROUND_COLOR, edgecolor="white", linewidth=0.2)
    islands = gdf[is_island]
    _draw_bands(ax, islands)
    for verdict, color in ISLAND_EDGE_COLORS.items():
        subset = islands[islands["verdict"] == verdict]
        if len(subset) > 0:
            subset.boundary.plot(ax=ax, color=color, linewidth=1.0)
    ax.set_title(f"Islands ({len(islands)})", fontsize=13, fontweight="bold")

    for ax in axes:
        ax.set_axis_off()
        ax.set_aspect("equal")

    handles = [Patch(facecolor=BAND_COLORS[b], label=b) for b in BAND_LABELS]
    handles += [
        Patch(facecolor="none", edgecolor=c, label=f"{v} island")
        for v, c in ISLAND_EDGE_COLORS.items()
    ]
    fig.legend(handles=handles, title="Households in fuel poverty (%)",
               loc="lower center", ncol=4, fontsize=8, title_fontsize=9)
    fig.suptitle("Fuel poverty islands of difference", fontsize=14, fontweight="bold")
    plt.tight_layout(rect=(0, 0.08, 1, 0.96))
    return fig


def main() -> None:
    """Generate the map figure."""
    print("=" * 60)
    print("ISLAND MAPS")
    print("=" * 60)

    FIGURE_DIR.mkdir(parents=True, exist_ok=True)
    gdf = load_data()

    fig = plot_panels(gdf)
    output_path = FIGURE_DIR / "fuel_poverty_islands.png"
    fig.savefig(output_path, bbox_inches="tight")
    plt.close(fig)
    print(f"  Saved {output_path}")


if __name__ == "__main__":
    main()
