from __future__ import annotations

import pandas as pd

from ev_dashboard.model import CHART_DROPDOWNS, ChartKind, FilterContext


def search_mask(rows: pd.DataFrame, search_term: str) -> pd.Series:
    """Rows whose make contains ``search_term``, case-insensitively."""
    term = (search_term or "").strip().lower()
    if not term:
        return pd.Series(True, index=rows.index)
    return rows["make"].fillna("").str.lower().str.contains(term, regex=False)


def checkbox_mask(rows: pd.DataFrame, checked: frozenset[str] | set[str]) -> pd.Series:
    # An empty checked set is treated as every make checked.
    if not checked:
        return pd.Series(True, index=rows.index)
    return rows["make"].isin(sorted(checked))


def chart_mask(rows: pd.DataFrame, context: FilterContext | None, kind: ChartKind) -> pd.Series:
    if context is None:
        return pd.Series(True, index=rows.index)
    mask = search_mask(rows, context.search_term)
    dropdown = CHART_DROPDOWNS.get(kind)
    if dropdown is not None:
        mask &= checkbox_mask(rows, context.checked_for(dropdown))
    return mask


def filter_rows(rows: pd.DataFrame, context: FilterContext | None, kind: ChartKind) -> pd.DataFrame:
    """Apply the search and checkbox predicates that ``kind`` participates in.

    Bar and line charts AND the global search with their own make dropdown;
    every other chart is filtered by the search term only.
    """
    if rows.empty:
        return rows
    return rows.loc[chart_mask(rows, context, kind)]
