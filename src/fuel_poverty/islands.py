"""
Islands of difference: areas whose fuel poverty band differs from every neighbour.

Each area's metric (percentage of households in fuel poverty) is bucketed
into half-open bands. An area is an island when all of its neighbours sit in
a different band on the same side:

    Above  every neighbour is in a lower band  (area is worse off)
    Under  every neighbour is in a higher band (area is better off)
    Same   at least one neighbour shares the band, or neighbours are split
    No neighbours  the area touches nothing in the analysed set

Counting is done with integers (n lower == n neighbours) rather than a
frequency ratio compared against 1.0.

Pure computation: no I/O, no module state.
"""

from __future__ import annotations

import math
import numbers
from bisect import bisect_right
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

# Fuel poverty percentage bands used in the LAD analysis
DEFAULT_BAND_EDGES: tuple[float, ...] = (5, 10, 15, 20, 25)


class InvalidInputError(ValueError):
    """Malformed or inconsistent classifier input."""


class Classification(str, Enum):
    SAME = "Same"
    ABOVE_ISLAND = "Above"
    UNDER_ISLAND = "Under"
    NO_NEIGHBOURS = "No neighbours"

    @property
    def is_island(self) -> bool:
        return self in (Classification.ABOVE_ISLAND, Classification.UNDER_ISLAND)


@dataclass(frozen=True)
class Area:
    """A local authority with its fuel poverty rate."""

    code: str
    name: str
    metric: float
    attributes: Mapping[str, Any] = field(
        default_factory=dict, compare=False, hash=False, repr=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))


@dataclass(frozen=True, order=True)
class Band:
    """Half-open range ``[lower, upper)`` of the metric, ordered by position."""

    index: int
    label: str = field(compare=False)
    lower: float = field(compare=False)
    upper: float = field(compare=False)

    def contains(self, value: float) -> bool:
        return self.lower <= value < self.upper


@dataclass(frozen=True)
class NeighbourSummary:
    """Integer neighbour counts behind a verdict."""

    code: str
    band: Band
    n_neighbours: int
    n_lower: int
    n_higher: int
    n_same_band: int

    @property
    def verdict(self) -> Classification:
        if self.n_neighbours == 0:
            return Classification.NO_NEIGHBOURS
        if self.n_lower == self.n_neighbours:
            return Classification.ABOVE_ISLAND
        if self.n_higher == self.n_neighbours:
            return Classification.UNDER_ISLAND
        return Classification.SAME

    @property
    def is_split(self) -> bool:
        """No neighbour shares the band but they sit on both sides."""
        return self.n_same_band == 0 and self.n_lower > 0 and self.n_higher > 0


NeighbourSource = (
    Mapping[str, Iterable["str | Area"]] | Callable[[str], Iterable["str | Area"]]
)


def _format_edge(value: float) -> str:
    return f"{value:g}"


def _default_labels(edges: Sequence[float]) -> list[str]:
    if not edges:
        return ["All"]
    first = edges[0]
    labels = [
        f"0 to {_format_edge(first)}" if first > 0 else f"Under {_format_edge(first)}"
    ]
    for lo, hi in zip(edges, edges[1:]):
        labels.append(f"{_format_edge(lo)} to {_format_edge(hi)}")
    labels.append(f"Over {_format_edge(edges[-1])}")
    return labels


def make_bands(
    band_edges: Sequence[float] = DEFAULT_BAND_EDGES,
    labels: Sequence[str] | None = None,
) -> tuple[Band, ...]:
    """
    Build the ordered bands for a sequence of thresholds.

    Parameters
    ----------
    band_edges : Sequence[float]
        Strictly increasing, finite thresholds ``e0 < e1 < ... < e{n-1}``.
    labels : Sequence[str], optional
        One label per band (``len(band_edges) + 1``). Defaults to
        ``"0 to 5"``, ``"5 to 10"``, ..., ``"Over 25"`` style labels.

    Returns
    -------
    tuple[Band, ...]
        Bands ``[-inf, e0), [e0, e1), ..., [e{n-1}, +inf)``.

    Raises
    ------
    InvalidInputError
        If the edges are not finite and strictly increasing, or the label
        count does not match.
    """
    edges = [float(e) for e in band_edges]
    if any(not math.isfinite(e) for e in edges):
        raise InvalidInputError(f"Band edges must be finite: {list(band_edges)}")
    for lo, hi in zip(edges, edges[1:]):
        if not lo < hi:
            raise InvalidInputError(
                f"Band edges must be strictly increasing: {list(band_edges)}"
            )

    if labels is None:
        labels = _default_labels(edges)
    elif len(labels) != len(edges) + 1:
        raise InvalidInputError(
            f"Expected {len(edges) + 1} band labels, got {len(labels)}"
        )

    bounds = [-math.inf, *edges, math.inf]
    return tuple(
        Band(index=i, label=str(labels[i]), lower=bounds[i], upper=bounds[i + 1])
        for i in range(len(edges) + 1)
    )


def band_for(metric: float, bands: Sequence[Band]) -> Band:
    """Return the band containing ``metric`` (lower edge inclusive)."""
    lowers = [b.lower for b in bands[1:]]
    return bands[bisect_right(lowers, metric)]


def _validate_areas(areas: Iterable[Area]) -> dict[str, Area]:
    by_code: dict[str, Area] = {}
    duplicates: set[str] = set()
    for area in areas:
        if area.code in by_code:
            duplicates.add(area.code)
            continue
        metric = area.metric
        if not isinstance(metric, numbers.Real) or isinstance(metric, bool):
            raise InvalidInputError(
                f"Area {area.code} has a non-numeric metric: {metric!r}"
            )
        if not math.isfinite(metric):
            raise InvalidInputError(
                f"Area {area.code} has a non-finite metric: {area.metric!r}"
            )
        by_code[area.code] = area

    if duplicates:
        raise InvalidInputError(f"Duplicate area codes: {sorted(duplicates)}")
    if not by_code:
        raise InvalidInputError("No areas to classify")
    return by_code


def _neighbour_codes(code: str, neighbours: NeighbourSource) -> set[str]:
    if callable(neighbours):
        items = neighbours(code)
    else:
        items = neighbours.get(code, ())
    codes = {item.code if isinstance(item, Area) else item for item in items}
    # Self matches from the intersection join are dropped, not rejected
    codes.discard(code)
    return codes


def summarise_neighbours(
    areas: Iterable[Area],
    neighbours: NeighbourSource,
    band_edges: Sequence[float] = DEFAULT_BAND_EDGES,
    labels: Sequence[str] | None = None,
) -> dict[str, NeighbourSummary]:
    """
    Count, for every area, its neighbours in lower, higher and equal bands.

    Parameters
    ----------
    areas : Iterable[Area]
        Areas to classify. Codes must be unique.
    neighbours : Mapping or callable
        Area code -> neighbouring area codes (or ``Area`` objects). Self
        references are dropped and codes outside ``areas`` are ignored.
    band_edges : Sequence[float]
        Strictly increasing band thresholds.
    labels : Sequence[str], optional
        Band labels, see :func:`make_bands`.

    Returns
    -------
    dict[str, NeighbourSummary]
        One summary per input area, keyed by code.
    """
    bands = make_bands(band_edges, labels)
    by_code = _validate_areas(areas)
    band_of = {code: band_for(area.metric, bands) for code, area in by_code.items()}

    summaries: dict[str, NeighbourSummary] = {}
    for code in by_code:
        own = band_of[code]
        n_lower = n_higher = n_same = 0
        for other in _neighbour_codes(code, neighbours):
            other_band = band_of.get(other)
            if other_band is None:
                continue
            if other_band < own:
                n_lower += 1
            elif other_band > own:
                n_higher += 1
            else:
                n_same += 1
        summaries[code] = NeighbourSummary(
            code=code,
            band=own,
            n_neighbours=n_lower + n_higher + n_same,
            n_lower=n_lower,
            n_higher=n_higher,
            n_same_band=n_same,
        )
    return summaries


def classify(
    areas: Iterable[Area],
    neighbours: NeighbourSource,
    band_edges: Sequence[float] = DEFAULT_BAND_EDGES,
) -> dict[str, Classification]:
    """Label every area as an above/under island, same, or isolated."""
    summaries = summarise_neighbours(areas, neighbours, band_edges)
    return {code: s.verdict for code, s in summaries.items()}
