from dataclasses import dataclass
from typing import Iterable, Optional

import pandas as pd

ASCENDING = "asc"
DESCENDING = "desc"


@dataclass(frozen=True)
class SortDirective:
    field: str
    direction: str = ASCENDING

    def __post_init__(self):
        if self.direction not in (ASCENDING, DESCENDING):
            raise ValueError(f"Unknown sort direction '{self.direction}'")

    @property
    def ascending(self) -> bool:
        return self.direction == ASCENDING


@dataclass(frozen=True)
class FilterDirective:
    field: str
    value: str

    def matches(self, text) -> bool:
        return self.value.lower() in str(text).lower()


def sort_frame(df: pd.DataFrame, sort: SortDirective) -> pd.DataFrame:
    # mergesort keeps equal keys in canonical order for both directions
    return df.sort_values(by=sort.field, ascending=sort.ascending, kind="mergesort")


def filter_frame(df: pd.DataFrame, flt: FilterDirective) -> pd.DataFrame:
    if df.empty:
        return df.copy()
    mask = df[flt.field].astype(str).str.lower().str.contains(
        flt.value.lower(), regex=False
    )
    return df[mask]


def derive_view(
    df: pd.DataFrame,
    sort: Optional[SortDirective] = None,
    flt: Optional[FilterDirective] = None,
) -> pd.DataFrame:
    """Sorted then filtered copy of ``df``; the index keeps canonical positions."""
    view = sort_frame(df, sort) if sort is not None else df.copy()
    if flt is not None:
        view = filter_frame(view, flt)
    return view


def visible_fields(fields: Iterable[str], hidden) -> list[str]:
    hidden = set(hidden or ())
    return [f for f in fields if f not in hidden]
