"""
quote/* reducer tests.

Tests:
1-4.   update_item_value (winder auto-set, no-op reference, consolidation, price reset)
5-8.   cycle_item_type / set_item_type
9-13.  insert / delete / clear rows
14-17. K3 cycles, winder/motor exclusivity, batch updates
18-22. Light-filter rows, accessory summary, reset, exhaustiveness
23.    Trailing-empty invariant over an edit sequence
"""

import pytest

from blindquote.state import actions as a
from blindquote.state.initial_state import is_empty_item, make_quote_data
from blindquote.state.quote_reducer import QUOTE_HANDLERS, quote_reducer

from builders import blind, empty, items_of, quote_with_items


def _apply(quote_data, deps, *actions):
    for action in actions:
        quote_data = quote_reducer(quote_data, action, deps)
    return quote_data


def _assert_trailing_invariant(items):
    assert is_empty_item(items[-1])
    for first, second in zip(items, items[1:]):
        assert not (is_empty_item(first) and is_empty_item(second))


# ============================================================
# update_item_value
# ============================================================

def test_large_blind_gets_hd_winder(deps):
    quote = quote_with_items(make_quote_data()["products"]["roller_blind"]["items"][0])
    quote = _apply(quote, deps,
                   a.UpdateItemValue(0, "width", 3000),
                   a.UpdateItemValue(0, "height", 2000))
    assert items_of(quote)[0]["winder"] == "HD"


def test_hd_winder_not_set_when_motor_present(deps):
    quote = quote_with_items(blind(width=3000, height=1000, motor="Motor"), empty())
    quote = _apply(quote, deps, a.UpdateItemValue(0, "height", 2000))
    assert items_of(quote)[0]["winder"] == ""


def test_small_blind_keeps_no_winder(deps):
    quote = quote_with_items(empty())
    quote = _apply(quote, deps,
                   a.UpdateItemValue(0, "width", 1000),
                   a.UpdateItemValue(0, "height", 1200))
    assert items_of(quote)[0]["winder"] == ""


def test_unchanged_value_returns_same_object(deps):
    quote = quote_with_items(blind(), empty())
    assert quote_reducer(quote, a.UpdateItemValue(0, "width", 1000), deps) is quote


def test_first_width_appends_trailing_row(deps):
    quote = quote_with_items(empty())
    quote = _apply(quote, deps, a.UpdateItemValue(0, "width", 1000))
    items = items_of(quote)
    assert len(items) == 2
    assert is_empty_item(items[1])


def test_dimension_change_clears_line_price(deps):
    quote = quote_with_items(blind(line_price=150), empty())
    quote = _apply(quote, deps, a.UpdateItemValue(0, "width", 1300))
    assert items_of(quote)[0]["line_price"] is None


# ============================================================
# Fabric type
# ============================================================

def test_cycle_item_type_advances_and_wraps(deps):
    quote = quote_with_items(blind(fabric_type="SN", fabric="Kleen", color="White", line_price=150), empty())
    quote = _apply(quote, deps, a.CycleItemType(0))
    item = items_of(quote)[0]
    assert item["fabric_type"] == "B1"
    assert item["line_price"] is None
    assert item["fabric"] == ""
    assert item["color"] == ""


def test_cycle_item_type_starts_at_first_type(deps):
    quote = quote_with_items(blind(fabric_type=None), empty())
    quote = _apply(quote, deps, a.CycleItemType(0))
    assert items_of(quote)[0]["fabric_type"] == "B1"


def test_cycle_item_type_noop_without_dimensions(deps):
    quote = quote_with_items(empty())
    assert quote_reducer(quote, a.CycleItemType(0), deps) is quote


def test_set_item_type_drops_row_from_lf_set(deps):
    quote = quote_with_items(blind(fabric_type="B3"), blind(fabric_type="B3"), empty())
    quote = _apply(quote, deps, a.AddLFModifiedRows((0, 1)), a.SetItemType(0, "B1"))
    assert quote["ui_metadata"]["lf_modified_row_indexes"] == [1]


# ============================================================
# Rows
# ============================================================

def test_insert_row_after_selected(deps):
    quote = quote_with_items(blind(), blind(width=2000), empty())
    quote = _apply(quote, deps, a.InsertRow(0))
    items = items_of(quote)
    assert len(items) == 4
    assert is_empty_item(items[1])
    assert items[2]["width"] == 2000


def test_insert_row_noop_on_last_row_or_before_blank(deps):
    quote = quote_with_items(blind(), empty())
    assert quote_reducer(quote, a.InsertRow(1), deps) is quote
    assert quote_reducer(quote, a.InsertRow(0), deps) is quote


def test_insert_row_shifts_lf_rows(deps):
    quote = quote_with_items(blind(), blind(), empty())
    quote = _apply(quote, deps, a.AddLFModifiedRows((1,)), a.InsertRow(0))
    assert quote["ui_metadata"]["lf_modified_row_indexes"] == [2]


def test_delete_row_keeps_trailing_row(deps):
    quote = quote_with_items(blind(), blind(width=2000), empty())
    quote = _apply(quote, deps, a.DeleteRow(0))
    items = items_of(quote)
    assert len(items) == 2
    assert items[0]["width"] == 2000
    assert quote_reducer(quote, a.DeleteRow(1), deps) is quote


def test_delete_multiple_rows(deps):
    quote = quote_with_items(blind(width=1000), blind(width=2000), blind(width=3000), empty())
    quote = _apply(quote, deps, a.DeleteMultipleRows((0, 2)))
    items = items_of(quote)
    assert [item["width"] for item in items] == [2000, None]


def test_clear_row_collapses_into_trailing_row(deps):
    quote = quote_with_items(blind(), blind(width=2000), empty())
    quote = _apply(quote, deps, a.ClearRow(1))
    items = items_of(quote)
    assert len(items) == 2
    assert items[0]["width"] == 1000


# ============================================================
# Item properties
# ============================================================

@pytest.mark.parametrize("column,expected", [
    ("over", ["O", ""]),
    ("oi", ["IN", "OUT", ""]),
    ("lr", ["L", "R", ""]),
])
def test_k3_properties_cycle(deps, column, expected):
    quote = quote_with_items(blind(), empty())
    seen = []
    for _ in expected:
        quote = _apply(quote, deps, a.CycleK3Property(0, column))
        seen.append(items_of(quote)[0][column])
    assert seen == expected


def test_winder_and_motor_are_exclusive(deps):
    quote = quote_with_items(blind(winder="HD"), empty())
    quote = _apply(quote, deps, a.UpdateWinderMotorProperty(0, "motor", "Motor"))
    item = items_of(quote)[0]
    assert item["motor"] == "Motor"
    assert item["winder"] == ""


def test_batch_update_property_skips_empty_rows(deps):
    quote = quote_with_items(blind(), blind(), empty())
    quote = _apply(quote, deps, a.BatchUpdateProperty("location", "Bed 1"))
    assert [item["location"] for item in items_of(quote)] == ["Bed 1", "Bed 1", ""]


def test_batch_update_property_by_type_honours_exclusions(deps):
    quote = quote_with_items(blind(fabric_type="B1"), blind(fabric_type="B1"), blind(fabric_type="B2"), empty())
    quote = _apply(quote, deps, a.BatchUpdatePropertyByType("B1", "fabric", "Kleen", exclude_indexes=(1,)))
    assert [item["fabric"] for item in items_of(quote)] == ["Kleen", "", "", ""]


def test_batch_update_fabric_type(deps):
    quote = quote_with_items(blind(fabric_type="B1"), blind(fabric_type="B2"), empty())
    quote = _apply(quote, deps, a.BatchUpdateFabricType("SN"))
    assert [item["fabric_type"] for item in items_of(quote)] == ["SN", "SN", None]


# ============================================================
# Light filter, summary, reset
# ============================================================

def test_lf_properties_set_and_removed(deps):
    quote = quote_with_items(blind(fabric_type="B3"), empty())
    quote = _apply(quote, deps, a.BatchUpdateLFProperties((0,), "Linen", "Sand"))
    assert items_of(quote)[0]["fabric"] == "Linen"
    quote = _apply(quote, deps, a.RemoveLFProperties((0,)))
    assert items_of(quote)[0]["color"] == ""


def test_update_accessory_summary_merges(deps):
    quote = quote_with_items(blind(), empty())
    quote = _apply(quote, deps,
                   a.UpdateAccessorySummary({"winder_cost_sum": 20}),
                   a.UpdateAccessorySummary({"dual_cost_sum": 30}))
    accessories = quote["products"]["roller_blind"]["summary"]["accessories"]
    assert accessories == {"winder_cost_sum": 20, "dual_cost_sum": 30}
    assert quote_reducer(quote, a.UpdateAccessorySummary({"dual_cost_sum": 30}), deps) is quote


def test_reset_quote_data(deps):
    quote = quote_with_items(blind(), empty())
    quote = _apply(quote, deps, a.ResetQuoteData())
    items = items_of(quote)
    assert len(items) == 1
    assert is_empty_item(items[0])


def test_reset_returns_default_product(deps):
    quote = quote_with_items(blind(), empty())
    quote["current_product"] = "venetian"
    quote = _apply(quote, deps, a.ResetQuoteData())
    assert quote["current_product"] == deps.default_product
    assert len(items_of(quote)) == 1


def test_every_quote_action_has_a_handler():
    assert set(a.QUOTE_ACTIONS) == set(QUOTE_HANDLERS)


# ============================================================
# Invariant
# ============================================================

def test_trailing_empty_invariant_over_edit_sequence(deps):
    quote = quote_with_items(empty())
    steps = [
        a.UpdateItemValue(0, "width", 1000),
        a.UpdateItemValue(0, "height", 1200),
        a.UpdateItemValue(1, "width", 2000),
        a.UpdateItemValue(2, "height", 1500),
        a.InsertRow(0),
        a.InsertRow(2),
        a.DeleteRow(2),
        a.ClearRow(0),
        a.DeleteRow(0),
        a.ClearRow(1),
        a.DeleteMultipleRows((0, 1)),
    ]
    for step in steps:
        quote = _apply(quote, deps, step)
        _assert_trailing_invariant(items_of(quote))
