import io

import pytest

from import_engine.errors import MalformedRowError
from import_engine.locale_header import (
    LocaleOverride, is_header_row, override_values, parse_header, primary_bound,
)
from import_engine.tree_builder import DepthParentMap, TreeBuilder
from services.store_service import default_root_category_id


def test_depth_map_is_seeded_with_root():
    parents = DepthParentMap(2)
    assert parents.parent_for(0) == 2
    assert parents.parent_for(1) is None
    assert 0 in parents
    assert len(parents) == 1


def test_recording_a_depth_forgets_deeper_entries():
    """A new node at depth 1 starts a new branch; depth 2 and 3 go stale."""
    parents = DepthParentMap(2)
    parents.record(1, 10)
    parents.record(2, 11)
    parents.record(3, 12)
    parents.record(1, 20)
    assert parents.as_dict() == {0: 2, 1: 20}


def test_recording_same_depth_overwrites():
    parents = DepthParentMap(2)
    parents.record(1, 10)
    parents.record(2, 11)
    parents.record(2, 12)
    assert parents.as_dict() == {0: 2, 1: 10, 2: 12}


def test_header_row_detection():
    assert is_header_row(["", "de"], forced=False)
    assert is_header_row(["  ", "de"], forced=False)
    assert is_header_row([], forced=False)
    assert is_header_row(["name", "de"], forced=True)
    assert not is_header_row(["Men", "Shirts"], forced=False)


def test_parse_header_keeps_non_blank_cells_with_columns():
    overrides = parse_header(["", " de ", "", "fr"])
    assert overrides == [LocaleOverride(1, "de"), LocaleOverride(3, "fr")]


def test_primary_bound_stops_at_lowest_header_column():
    overrides = [LocaleOverride(3, "fr"), LocaleOverride(2, "de")]
    assert primary_bound(overrides, 5) == 2
    assert primary_bound(overrides, 1) == 1
    assert primary_bound([], 4) == 4


def test_override_values_skip_blank_and_missing_cells():
    overrides = [LocaleOverride(1, "de"), LocaleOverride(2, "fr"), LocaleOverride(5, "it")]
    assert override_values(overrides, ["Men", " Herren ", "  "]) == [("de", "Herren")]


def test_builder_creates_nested_nodes_and_prints_progress(session):
    out = io.StringIO()
    builder = TreeBuilder(session, default_root_category_id(session), stream=out)

    assert builder.process(1, ["Men", "Shirts", " Casual "]) == 3

    assert out.getvalue() == "-- Men\n---- Shirts\n------ Casual\n"
    assert builder.report.created == 3
    assert len(builder.parents) == 4


def test_builder_applies_overrides_to_each_created_node(session):
    out = io.StringIO()
    builder = TreeBuilder(
        session,
        default_root_category_id(session),
        overrides=[LocaleOverride(2, "de")],
        stream=out,
    )

    builder.process(1, ["Men", "Shirts", "Hemden"])

    assert out.getvalue() == "-- Men [de: Hemden]\n---- Shirts [de: Hemden]\n"
    assert builder.report.overrides == 2


def test_builder_rejects_row_without_parent(session):
    builder = TreeBuilder(session, default_root_category_id(session), stream=io.StringIO())

    with pytest.raises(MalformedRowError) as exc:
        builder.process(4, ["", "Shirts"])

    assert exc.value.line == 4
    assert exc.value.depth == 1
    assert "Line 4, column 2" in str(exc.value)
