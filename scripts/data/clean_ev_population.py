#!/usr/bin/env python3
from __future__ import annotations

import argparse
import re
from pathlib import Path

import pandas as pd

DATA_DIR = Path(__file__).resolve().parents[2] / "data"
DEFAULT_INPUT = DATA_DIR / "Electric_Vehicle_Population_Data.csv"
DEFAULT_OUTPUT = DATA_DIR / "Electric_Vehicle_Population_Data_Cleaned.csv"

KEEP_COLUMNS = [
    "Make",
    "Model",
    "Model Year",
    "Electric Vehicle Type",
    "Clean Alternative Fuel Vehicle (CAFV) Eligibility",
    "Electric Range",
]
LOCATION_COLUMN = "Vehicle Location"
POINT_RE = re.compile(r"POINT\s*\(\s*(-?[\d.]+)\s+(-?[\d.]+)\s*\)", re.IGNORECASE)


def parse_point(value: object) -> tuple[float | None, float | None]:
    """Return (longitude, latitude) from a WKT ``POINT (lon lat)`` string."""
    match = POINT_RE.search(str(value or ""))
    if match is None:
        return None, None
    return float(match.group(1)), float(match.group(2))


def clean_frame(raw: pd.DataFrame) -> pd.DataFrame:
    raw = raw.rename(columns=lambda column: str(column).strip())
    missing = [column for column in [*KEEP_COLUMNS, LOCATION_COLUMN] if column not in raw.columns]
    if missing:
        raise ValueError(f"Missing required columns in raw export: {', '.join(missing)}")

    cleaned = raw[KEEP_COLUMNS].copy()
    for column in ["Make", "Model"]:
        cleaned[column] = cleaned[column].fillna("").astype(str).str.strip().str.upper()
    points = raw[LOCATION_COLUMN].map(parse_point)
    cleaned["Longitude"] = [longitude for longitude, _ in points]
    cleaned["Latitude"] = [latitude for _, latitude in points]
    return cleaned.loc[cleaned["Make"] != ""].reset_index(drop=True)


def main() -> None:
    parser = argparse.ArgumentParser(description="Trim the raw EV population export.")
    parser.add_argument("--input", type=Path, default=DEFAULT_INPUT)
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT)
    args = parser.parse_args()

    raw = pd.read_csv(args.input, encoding="utf-8-sig", dtype=str)
    cleaned = clean_frame(raw)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    cleaned.to_csv(args.output, index=False)
    print(f"Wrote {len(cleaned)} rows to {args.output}")


if __name__ == "__main__":
    main()
