from __future__ import annotations

import logging
import math
from pathlib import Path

import pandas as pd
import pytest

from ev_dashboard.config import AppConfig
from ev_dashboard.io.read import load_rows, parse_rows
from ev_dashboard.model import ROW_COLUMNS, parse_vehicle_type
from sample_data import CSV_HEADER, CSV_LINES


def test_load_rows_normalizes_source_columns(tmp_path: Path) -> None:
    csv_path = tmp_path / "rows.csv"
    csv_path.write_text(
        "\ufeff" + CSV_HEADER + ",County\n" + "\n".join(line + ",King" for line in CSV_LINES),
        encoding="utf-8",
    )

    rows = load_rows(csv_path=csv_path, config=AppConfig())

    assert list(rows.columns) == ROW_COLUMNS
    assert len(rows) == 5
    assert rows.loc[0, "make"] == "TESLA"
    assert rows.loc[0, "model_year"] == 2020
    assert rows.loc[0, "vehicle_type"] == "BEV"
    assert rows.loc[3, "vehicle_type"] == "PHEV"
    assert math.isnan(rows.loc[4, "electric_range"])


def test_load_rows_coerces_malformed_fields_and_warns(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    csv_path = tmp_path / "rows.csv"
    csv_path.write_text(
        "\n".join(
            [
                CSV_HEADER,
                "TESLA,MODEL 3,20x1,Battery Electric Vehicle (BEV),Eligible,n/a,47.6,-122.3",
                "KIA,EV6,2022.5,Hydrogen,Eligible,310,,",
            ]
        ),
        encoding="utf-8",
    )

    with caplog.at_level(logging.WARNING, logger="ev_dashboard.io.read"):
        rows = load_rows(csv_path=csv_path, config=AppConfig())

    assert rows["model_year"].isna().all()
    assert math.isnan(rows.loc[0, "electric_range"])
    assert rows.loc[1, "vehicle_type"] is None
    assert math.isnan(rows.loc[1, "latitude"])
    assert "Column model_year has 2 malformed value(s)" in caplog.text
    assert "Column vehicle_type has 1 malformed value(s)" in caplog.text
    # Blank coordinates are missing, not malformed.
    assert "latitude" not in caplog.text


def test_load_rows_reports_missing_columns(tmp_path: Path) -> None:
    csv_path = tmp_path / "rows.csv"
    csv_path.write_text("Make,Model\nTESLA,MODEL 3\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Missing required columns in CSV: Model Year"):
        load_rows(csv_path=csv_path, config=AppConfig())


def test_custom_column_names_are_honoured(tmp_path: Path) -> None:
    config = AppConfig.model_validate({"columns": {"make": "Manufacturer"}})
    csv_path = tmp_path / "rows.csv"
    csv_path.write_text(
        CSV_HEADER.replace("Make", "Manufacturer", 1) + "\n" + CSV_LINES[0] + "\n",
        encoding="utf-8",
    )

    rows = load_rows(csv_path=csv_path, config=config)

    assert rows["make"].tolist() == ["TESLA"]


def test_parse_rows_requires_canonical_columns() -> None:
    with pytest.raises(ValueError, match="Normalized data missing column"):
        parse_rows(pd.DataFrame({"make": ["TESLA"]}))


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("Battery Electric Vehicle (BEV)", "BEV"),
        ("Plug-in Hybrid Electric Vehicle (PHEV)", "PHEV"),
        ("phev", "PHEV"),
        ("", None),
        (None, None),
        ("Fuel Cell", None),
    ],
)
def test_parse_vehicle_type(label: object, expected: str | None) -> None:
    assert parse_vehicle_type(label) == expected
