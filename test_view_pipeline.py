import pandas as pd
import pytest

from grid_schema import PROJECT_SCHEMA
from record_store import RecordStore
from view_pipeline import (
    ASCENDING,
    DESCENDING,
    FilterDirective,
    SortDirective,
    derive_view,
    visible_fields,
)


def _seed_df():
    return RecordStore(PROJECT_SCHEMA).df


def test_derive_view_does_not_mutate_input():
    df = _seed_df()
    before = df.copy(deep=True)
    derive_view(df, SortDirective("priority", DESCENDING), FilterDirective("status", "progress"))
    pd.testing.assert_frame_equal(df, before)


def test_derive_view_is_idempotent():
    df = _seed_df()
    sort = SortDirective("job_request", ASCENDING)
    first = derive_view(df, sort)
    second = derive_view(df, sort)
    pd.testing.assert_frame_equal(first, second)


def test_no_directives_returns_equal_copy():
    df = _seed_df()
    view = derive_view(df)
    pd.testing.assert_frame_equal(view, df)
    assert view is not df


@pytest.mark.parametrize("field", ["job_request", "status", "priority", "submitter"])
def test_sort_ascending_is_monotonic(field):
    view = derive_view(_seed_df(), SortDirective(field, ASCENDING))
    values = list(view[field])
    assert all(a <= b for a, b in zip(values, values[1:]))


def test_sort_descending_is_monotonic_and_stable():
    view = derive_view(_seed_df(), SortDirective("priority", DESCENDING))
    assert list(view["priority"]) == ["Medium", "Medium", "Low", "Low", "High"]
    # ties keep canonical order
    assert list(view["id"]) == ["1", "3", "4", "5", "2"]


def test_sort_is_lexicographic_on_text():
    df = RecordStore(
        PROJECT_SCHEMA, [{"id": "10"}, {"id": "2"}, {"id": "1"}]
    ).df
    view = derive_view(df, SortDirective("id", ASCENDING))
    assert list(view["id"]) == ["1", "10", "2"]


def test_filter_is_case_insensitive_substring():
    df = _seed_df()
    flt = FilterDirective("job_request", "PRESS")
    view = derive_view(df, flt=flt)
    for value in view["job_request"]:
        assert "press" in value.lower()
    excluded = df.loc[~df.index.isin(view.index), "job_request"]
    for value in excluded:
        assert "press" not in value.lower()
    assert list(view["id"]) == ["2"]


def test_filter_treats_value_literally():
    df = RecordStore(PROJECT_SCHEMA, [{"job_request": "a.b"}, {"job_request": "axb"}]).df
    view = derive_view(df, flt=FilterDirective("job_request", "a.b"))
    assert list(view["job_request"]) == ["a.b"]


def test_seed_sort_then_filter_scenario():
    view = derive_view(
        _seed_df(),
        SortDirective("priority", DESCENDING),
        FilterDirective("status", "progress"),
    )
    assert all("progress" in s.lower() for s in view["status"])
    assert list(view["id"]) == ["1", "3"]


def test_view_keeps_canonical_index():
    view = derive_view(_seed_df(), SortDirective("priority", ASCENDING))
    # High (canonical 1) sorts first
    assert int(view.index[0]) == 1


def test_filter_on_empty_frame():
    df = RecordStore(PROJECT_SCHEMA, []).df
    view = derive_view(df, SortDirective("id"), FilterDirective("status", "x"))
    assert len(view) == 0


def test_bad_direction_rejected():
    with pytest.raises(ValueError):
        SortDirective("id", "sideways")


def test_filter_directive_matches():
    flt = FilterDirective("status", "Prog")
    assert flt.matches("In-progress")
    assert not flt.matches("Complete")


def test_visible_fields_keeps_order():
    assert visible_fields(("a", "b", "c"), {"b"}) == ["a", "c"]
    assert visible_fields(("a", "b"), None) == ["a", "b"]
