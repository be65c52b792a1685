from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from ev_dashboard.config import ColumnsConfig


@dataclass(frozen=True)
class CanonicalColumns:
    make: str = "make"
    model: str = "model"
    model_year: str = "model_year"
    vehicle_type: str = "vehicle_type"
    cafv_eligibility: str = "cafv_eligibility"
    electric_range: str = "electric_range"
    latitude: str = "latitude"
    longitude: str = "longitude"


def normalize_columns(df: pd.DataFrame, columns: ColumnsConfig) -> pd.DataFrame:
    """Rename source columns to the canonical row fields and drop everything else."""
    rename_map = {
        columns.make: CanonicalColumns.make,
        columns.model: CanonicalColumns.model,
        columns.model_year: CanonicalColumns.model_year,
        columns.vehicle_type: CanonicalColumns.vehicle_type,
        columns.cafv_eligibility: CanonicalColumns.cafv_eligibility,
        columns.electric_range: CanonicalColumns.electric_range,
        columns.latitude: CanonicalColumns.latitude,
        columns.longitude: CanonicalColumns.longitude,
    }
    stripped = df.rename(columns=lambda column: str(column).strip())
    missing = [source for source in rename_map if source not in stripped.columns]
    if missing:
        missing_str = ", ".join(missing)
        raise ValueError(f"Missing required columns in CSV: {missing_str}")
    return stripped[list(rename_map)].rename(columns=rename_map)
