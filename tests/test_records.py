"""
tests/test_records.py — Fuel poverty table cleaning and record conversion.
"""

import pandas as pd
import pytest

from fuel_poverty.islands import Area, summarise_neighbours
from fuel_poverty.records import (
    clean_fuel_poverty,
    standardise_columns,
    to_areas,
    verdicts_frame,
)


@pytest.fixture
def raw_table() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Area Codes": [
                "E92000001", "E12000001", "E06000001", "E06000002",
                "E07000223", "E09000001", None, "Source: DESNZ",
            ],
            "Area names": [
                "England", "North East", " Hartlepool", "Middlesbrough",
                "Adur", "City of London", None, None,
            ],
            "Number of households1": [
                23_000_000, 1_200_000, 42_000, 60_000, 28_000, 5_000, None, None,
            ],
            "Number of households in fuel poverty1": [
                3_000_000, 180_000, 7_500, 11_000, 3_000, "..", None, None,
            ],
            "Proportion of households fuel poor (%)": [
                13.1, 15.0, 17.8, 18.3, 10.7, "..", None, None,
            ],
        }
    )


class TestStandardiseColumns:
    def test_renames_headers(self, raw_table):
        df = standardise_columns(raw_table)
        assert list(df.columns) == [
            "code", "name", "households", "fuel_poor_households", "fuel_poor_pct",
        ]

    def test_alternative_headers(self):
        df = pd.DataFrame(columns=["LA Code", "LA Name", "Proportion of households fuel poor (%)"])
        assert list(standardise_columns(df).columns) == ["code", "name", "fuel_poor_pct"]

    def test_missing_metric(self):
        df = pd.DataFrame(columns=["Area Codes", "Area names"])
        with pytest.raises(KeyError, match="fuel_poor_pct"):
            standardise_columns(df)


class TestCleanFuelPoverty:
    def test_keeps_local_authorities_only(self, raw_table):
        df = clean_fuel_poverty(standardise_columns(raw_table))
        assert list(df["code"]) == ["E06000001", "E06000002", "E07000223"]

    def test_strips_names(self, raw_table):
        df = clean_fuel_poverty(standardise_columns(raw_table))
        assert df.loc[0, "name"] == "Hartlepool"

    def test_numeric_columns(self, raw_table):
        df = clean_fuel_poverty(standardise_columns(raw_table))
        assert df["fuel_poor_pct"].tolist() == [17.8, 18.3, 10.7]
        assert pd.api.types.is_numeric_dtype(df["households"])

    def test_custom_prefixes(self, raw_table):
        df = clean_fuel_poverty(standardise_columns(raw_table), prefixes=("E12",))
        assert list(df["code"]) == ["E12000001"]


class TestToAreas:
    def test_records(self, raw_table):
        areas = to_areas(clean_fuel_poverty(standardise_columns(raw_table)))
        assert areas[0] == Area("E06000001", "Hartlepool", 17.8)
        assert areas[0].attributes["households"] == 42_000
        assert set(areas[0].attributes) == {"households", "fuel_poor_households"}


def test_verdicts_frame():
    areas = [Area("A", "Ash", 30.0), Area("B", "Birch", 12.0), Area("C", "Cedar", 8.0)]
    summaries = summarise_neighbours(areas, {"A": {"B", "C"}, "B": {"A"}})
    table = verdicts_frame(summaries)
    assert table.index.name == "code"
    assert table.loc["A", "verdict"] == "Above"
    assert table.loc["A", "band"] == "Over 25"
    assert table.loc["B", "verdict"] == "Under"
    assert table.loc["C", "verdict"] == "No neighbours"
    assert table.loc["A", "n_lower"] == 2
