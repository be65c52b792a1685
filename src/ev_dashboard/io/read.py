from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Iterable

import pandas as pd

from ev_dashboard.config import AppConfig
from ev_dashboard.io.schema import normalize_columns
from ev_dashboard.model import ROW_COLUMNS, Row, parse_vehicle_type

LOGGER = logging.getLogger(__name__)

TEXT_COLUMNS = ["make", "model", "cafv_eligibility"]
FLOAT_COLUMNS = ["electric_range", "latitude", "longitude"]


def _validate_required_columns(df: pd.DataFrame) -> pd.DataFrame:
    for column in ROW_COLUMNS:
        if column not in df.columns:
            raise ValueError(f"Normalized data missing column: {column}")
    return df


def _parse_years(values: pd.Series) -> pd.Series:
    years = pd.to_numeric(values, errors="coerce").astype(float)
    years = years.where(years == years.round())
    return years.astype("Int64")


def parse_rows(df: pd.DataFrame) -> pd.DataFrame:
    """Coerce canonical columns into the typed row frame.

    Text fields are stripped, numeric fields become NaN (or NA for years) when
    malformed, and vehicle type labels collapse to ``BEV``/``PHEV``.
    """
    working = _validate_required_columns(df)[ROW_COLUMNS].copy()
    for column in TEXT_COLUMNS:
        working[column] = working[column].fillna("").astype(str).str.strip()
    working["model_year"] = _parse_years(working["model_year"])
    working["vehicle_type"] = working["vehicle_type"].map(parse_vehicle_type).astype(object)
    for column in FLOAT_COLUMNS:
        working[column] = pd.to_numeric(working[column], errors="coerce").astype(float)
    return working.reset_index(drop=True)


def _log_malformed_fields(raw: pd.DataFrame, parsed: pd.DataFrame) -> None:
    for column in ["model_year", "vehicle_type", *FLOAT_COLUMNS]:
        supplied = raw[column].notna() & (raw[column].astype(str).str.strip() != "")
        malformed = int((supplied & parsed[column].isna()).sum())
        if malformed:
            LOGGER.warning("Column %s has %d malformed value(s)", column, malformed)


def load_rows(csv_path: Path, config: AppConfig) -> pd.DataFrame:
    """Load registration rows from CSV and return the typed row frame."""
    # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
    df = pd.read_csv(csv_path, encoding="utf-8-sig", dtype=str)
    normalized = normalize_columns(df=df, columns=config.columns)
    rows = parse_rows(normalized)
    _log_malformed_fields(normalized, rows)
    LOGGER.info("Loaded %d rows from %s", len(rows), csv_path)
    return rows


def rows_to_frame(rows: Iterable[Row]) -> pd.DataFrame:
    records = [asdict(row) for row in rows]
    frame = pd.DataFrame.from_records(records, columns=ROW_COLUMNS)
    return parse_rows(frame)

