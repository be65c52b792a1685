from __future__ import annotations

import logging

import pandas as pd

from ev_dashboard.features.filters import filter_rows
from ev_dashboard.model import (
    VEHICLE_TYPE_KEYS,
    Aggregate,
    BarMode,
    CategoryCount,
    ChartKind,
    FilterContext,
    GeoCluster,
    GroupCount,
    PieSlice,
    ScatterPoint,
    StackedSeries,
    StackSegment,
    YearGroupBucket,
    YearPoint,
    YearSeries,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_COORDINATE_PRECISION = 2


def _with_text(rows: pd.DataFrame, column: str) -> pd.DataFrame:
    return rows.loc[rows[column].notna() & (rows[column] != "")]


def distinct_makes(rows: pd.DataFrame) -> list[str]:
    """Distinct makes in first-seen order, used to populate checkbox panels."""
    if rows.empty:
        return []
    return [str(make) for make in _with_text(rows, "make")["make"].drop_duplicates()]


def build_category_counts(rows: pd.DataFrame, column: str) -> list[CategoryCount]:
    working = _with_text(rows, column)
    if working.empty:
        return []
    counts = working.groupby(column, sort=False).size()
    return [CategoryCount(category=str(key), count=int(value)) for key, value in counts.items()]


def build_make_counts(rows: pd.DataFrame) -> list[CategoryCount]:
    return build_category_counts(rows, "make")


def build_model_counts(rows: pd.DataFrame) -> list[CategoryCount]:
    return build_category_counts(rows, "model")


def build_pie_slices(rows: pd.DataFrame) -> list[PieSlice]:
    working = rows.dropna(subset=["vehicle_type"])
    if working.empty:
        return []
    counts = working.groupby("vehicle_type", sort=False).size()
    total = int(counts.sum())
    return [
        PieSlice(category=str(key), count=int(value), value=int(value) / total * 100.0)
        for key, value in counts.items()
    ]


def _year_group_counts(rows: pd.DataFrame, group_column: str) -> pd.Series:
    working = _with_text(rows.dropna(subset=["model_year"]), group_column)
    return working.groupby(["model_year", group_column], sort=False).size()


def build_stacked_buckets(
    rows: pd.DataFrame, keys: list[str] | None = None
) -> list[YearGroupBucket]:
    """Count rows per model year and vehicle type, zero-filling missing types."""
    keys = list(keys or VEHICLE_TYPE_KEYS)
    counts = _year_group_counts(rows, "vehicle_type")
    if counts.empty:
        return []
    table = counts.unstack(fill_value=0).reindex(columns=keys, fill_value=0).sort_index()
    buckets: list[YearGroupBucket] = []
    for year, row in table.iterrows():
        groups = tuple(GroupCount(group_key=key, count=int(row[key])) for key in keys)
        buckets.append(
            YearGroupBucket(
                year=int(year),
                groups=groups,
                total=sum(group.count for group in groups),
            )
        )
    return buckets


def build_grouped_buckets(rows: pd.DataFrame) -> list[YearGroupBucket]:
    """Count rows per model year and CAFV eligibility, newest year first."""
    counts = _year_group_counts(rows, "cafv_eligibility")
    by_year: dict[int, list[GroupCount]] = {}
    for (year, group_key), count in counts.items():
        by_year.setdefault(int(year), []).append(
            GroupCount(group_key=str(group_key), count=int(count))
        )
    return [
        YearGroupBucket(
            year=year,
            groups=tuple(groups),
            total=sum(group.count for group in groups),
        )
        for year, groups in sorted(by_year.items(), reverse=True)
    ]


def build_year_series(rows: pd.DataFrame) -> list[YearSeries]:
    """One series per make, zero-filled over every model year in ``rows``."""
    working = _with_text(rows.dropna(subset=["model_year"]), "make")
    if working.empty:
        return []
    years = sorted(int(year) for year in working["model_year"].unique())
    counts = working.groupby(["make", "model_year"], sort=False).size()
    lookup = {(str(make), int(year)): int(count) for (make, year), count in counts.items()}
    return [
        YearSeries(
            series_key=make,
            points=tuple(YearPoint(year=year, count=lookup.get((make, year), 0)) for year in years),
        )
        for make in distinct_makes(working)
    ]


def build_scatter_points(rows: pd.DataFrame) -> list[ScatterPoint]:
    """Average electric range per model year; NaN when a year has no valid range."""
    working = rows.dropna(subset=["model_year"])
    if working.empty:
        return []
    averages = working.groupby("model_year", sort=True)["electric_range"].mean()
    return [
        ScatterPoint(year=int(year), average_range=float(average))
        for year, average in averages.items()
    ]


def build_geo_clusters(
    rows: pd.DataFrame, precision: int = DEFAULT_COORDINATE_PRECISION
) -> list[GeoCluster]:
    working = rows.dropna(subset=["latitude", "longitude"])
    if working.empty:
        return []
    rounded = pd.DataFrame(
        {
            "latitude": working["latitude"].round(precision),
            "longitude": working["longitude"].round(precision),
        }
    )
    counts = rounded.groupby(["latitude", "longitude"], sort=False).size()
    return [
        GeoCluster(latitude=float(latitude), longitude=float(longitude), count=int(count))
        for (latitude, longitude), count in counts.items()
    ]


def group_keys(buckets: list[YearGroupBucket]) -> list[str]:
    keys: list[str] = []
    for bucket in buckets:
        for group in bucket.groups:
            if group.group_key not in keys:
                keys.append(group.group_key)
    return keys


def stack_buckets(
    buckets: list[YearGroupBucket], keys: list[str] | None = None
) -> list[StackedSeries]:
    """Stack bucket groups into one series per key with running lower/upper offsets."""
    keys = list(keys) if keys is not None else group_keys(buckets)
    segments: dict[str, list[StackSegment]] = {key: [] for key in keys}
    for bucket in buckets:
        lower = 0
        for key in keys:
            upper = lower + bucket.count_for(key)
            segments[key].append(StackSegment(year=bucket.year, lower=lower, upper=upper))
            lower = upper
    return [StackedSeries(key=key, segments=tuple(segments[key])) for key in keys]


def aggregate(
    rows: pd.DataFrame,
    context: FilterContext | None,
    kind: ChartKind | str,
    *,
    bar_mode: BarMode | str | None = None,
    coordinate_precision: int = DEFAULT_COORDINATE_PRECISION,
) -> Aggregate:
    """Filter ``rows`` for ``kind`` and reduce them into that chart's aggregate."""
    kind = ChartKind(kind)
    filtered = filter_rows(rows, context, kind)
    LOGGER.debug("Aggregating %d of %d rows for %s", len(filtered), len(rows), kind.value)

    if kind is ChartKind.BAR:
        mode = BarMode(bar_mode) if bar_mode else BarMode.for_context(context)
        if mode is BarMode.MODEL:
            return build_model_counts(filtered)
        return build_make_counts(filtered)
    if kind is ChartKind.PIE:
        return build_pie_slices(filtered)
    if kind is ChartKind.STACKED:
        return build_stacked_buckets(filtered)
    if kind is ChartKind.LINE:
        return build_year_series(filtered)
    if kind is ChartKind.GROUPED:
        return build_grouped_buckets(filtered)
    if kind is ChartKind.SCATTER:
        return build_scatter_points(filtered)
    return build_geo_clusters(filtered, precision=coordinate_precision)
