"""
quote/* sub-reducer.

Pure functions (quote_data, action, deps) -> quote_data. A handler returns the
same quote_data object when nothing changed so subscribers can skip work by
reference comparison. No handler performs I/O; pricing thresholds and the item
template come from the injected QuoteDeps.
"""

import logging
from dataclasses import dataclass

from . import actions as a
from .initial_state import DEFAULT_PRODUCT, is_empty_item, make_quote_data
from .row_consolidator import consolidate_empty_rows

logger = logging.getLogger(__name__)

DIMENSION_COLUMNS = ("width", "height")
PRICE_INPUT_COLUMNS = ("width", "height", "fabric_type")

# Per-item cycles for the K3 option columns (wrapping)
K3_CYCLE_SEQUENCES = {
    "over": ["", "O"],
    "oi": ["", "IN", "OUT"],
    "lr": ["", "L", "R"],
}

WINDER_MOTOR_PROPS = ("winder", "motor")


@dataclass
class QuoteDeps:
    """Collaborators injected into the quote reducer."""
    product_factory: object
    config: object
    default_product: str = DEFAULT_PRODUCT


# --- Tree helpers ---

def _current_product(quote_data: dict) -> dict:
    return quote_data["products"][quote_data["current_product"]]


def _current_items(quote_data: dict) -> list:
    return _current_product(quote_data)["items"]


def _make_empty_item_factory(quote_data: dict, deps: QuoteDeps):
    strategy = deps.product_factory.get_product_strategy(quote_data["current_product"])
    return strategy.get_initial_item_data


def _with_product(quote_data: dict, **changes) -> dict:
    product_key = quote_data["current_product"]
    product = {**quote_data["products"][product_key], **changes}
    return {**quote_data, "products": {**quote_data["products"], product_key: product}}


def _with_items(quote_data: dict, items: list) -> dict:
    return _with_product(quote_data, items=items)


def _with_lf_rows(quote_data: dict, rows) -> dict:
    metadata = {**quote_data["ui_metadata"], "lf_modified_row_indexes": sorted(set(rows))}
    return {**quote_data, "ui_metadata": metadata}


def _lf_rows(quote_data: dict) -> set:
    return set(quote_data.get("ui_metadata", {}).get("lf_modified_row_indexes", []))


def _valid_row(items: list, row_index) -> bool:
    return isinstance(row_index, int) and 0 <= row_index < len(items)


def _with_fabric_type(item: dict, fabric_type) -> dict:
    """Changing fabric type invalidates the cached price and the fabric selection."""
    return {**item, "fabric_type": fabric_type, "line_price": None, "fabric": "", "color": ""}


def _commit_items(quote_data: dict, items: list, deps: QuoteDeps, changed_rows=()) -> dict:
    """Consolidate, write back, and drop re-typed rows from the light-filter set."""
    items = consolidate_empty_rows(items, _make_empty_item_factory(quote_data, deps))
    new_data = _with_items(quote_data, items)
    lf_rows = _lf_rows(quote_data)
    if changed_rows and lf_rows & set(changed_rows):
        new_data = _with_lf_rows(new_data, lf_rows - set(changed_rows))
    return new_data


def _shift_lf_rows_after_delete(quote_data: dict, deleted_index: int) -> dict:
    lf_rows = _lf_rows(quote_data)
    if not lf_rows:
        return quote_data
    shifted = [i - 1 if i > deleted_index else i for i in lf_rows if i != deleted_index]
    return _with_lf_rows(quote_data, shifted)


def _apply_hd_winder_rule(item: dict, deps: QuoteDeps) -> dict:
    """Large blinds without a motor get an HD winder automatically."""
    if not (item.get("width") and item.get("height")):
        return item
    thresholds = deps.config.get_logic_thresholds()
    if not thresholds or "hd_winder_threshold_area" not in thresholds:
        return item
    area = item["width"] * item["height"]
    if area > thresholds["hd_winder_threshold_area"] and not item.get("motor"):
        return {**item, "winder": "HD"}
    return item


# --- Handlers ---

def _set_quote_data(quote_data, action: a.SetQuoteData, deps):
    return action.quote_data


def _reset_quote_data(quote_data, action: a.ResetQuoteData, deps):
    strategy = deps.product_factory.get_product_strategy(deps.default_product)
    return make_quote_data(deps.default_product, strategy.get_initial_item_data())


def _insert_row(quote_data, action: a.InsertRow, deps):
    items = _current_items(quote_data)
    index = action.selected_index
    # A new blank row never lands next to another blank row
    if (not _valid_row(items, index) or index == len(items) - 1
            or is_empty_item(items[index]) or is_empty_item(items[index + 1])):
        return quote_data

    new_items = list(items)
    new_items.insert(index + 1, _make_empty_item_factory(quote_data, deps)())
    new_data = _with_items(quote_data, new_items)

    lf_rows = _lf_rows(quote_data)
    if any(i > index for i in lf_rows):
        new_data = _with_lf_rows(new_data, [i + 1 if i > index else i for i in lf_rows])
    return new_data


def _delete_row(quote_data, action: a.DeleteRow, deps):
    items = _current_items(quote_data)
    index = action.row_index
    if not _valid_row(items, index):
        return quote_data
    if index == len(items) - 1 and is_empty_item(items[index]):
        return quote_data

    new_items = items[:index] + items[index + 1:]
    if not new_items:
        new_items = [_make_empty_item_factory(quote_data, deps)()]
    new_data = _shift_lf_rows_after_delete(quote_data, index)

    # Deleting the only filled row between two blank rows leaves them adjacent
    if 0 < index < len(new_items) - 1 and is_empty_item(new_items[index - 1]) and is_empty_item(new_items[index]):
        new_items = new_items[:index] + new_items[index + 1:]
        new_data = _shift_lf_rows_after_delete(new_data, index)
    return _commit_items(new_data, new_items, deps)


def _delete_multiple_rows(quote_data, action: a.DeleteMultipleRows, deps):
    new_data = quote_data
    for index in sorted(set(action.row_indexes), reverse=True):
        new_data = _delete_row(new_data, a.DeleteRow(index), deps)
    return new_data


def _clear_row(quote_data, action: a.ClearRow, deps):
    items = _current_items(quote_data)
    index = action.row_index
    if not _valid_row(items, index) or is_empty_item(items[index]):
        return quote_data

    new_items = list(items)
    new_items[index] = {
        **_with_fabric_type(items[index], None),
        "width": None,
        "height": None,
    }
    new_data = quote_data
    changed_rows = [index]
    is_last = index == len(items) - 1
    neighbour_blank = (index > 0 and is_empty_item(items[index - 1])) or (
        index < len(items) - 2 and is_empty_item(items[index + 1])
    )
    if not is_last and neighbour_blank:
        new_items.pop(index)
        new_data = _shift_lf_rows_after_delete(quote_data, index)
        changed_rows = ()
    return _commit_items(new_data, new_items, deps, changed_rows=changed_rows)


def _update_item_value(quote_data, action: a.UpdateItemValue, deps):
    items = _current_items(quote_data)
    index, column, value = action.row_index, action.column, action.value
    if not _valid_row(items, index) or items[index].get(column) == value:
        return quote_data

    if column == "fabric_type":
        new_item = _with_fabric_type(items[index], value)
    else:
        new_item = {**items[index], column: value}
        if column in PRICE_INPUT_COLUMNS:
            new_item["line_price"] = None
    if column in DIMENSION_COLUMNS:
        new_item = _apply_hd_winder_rule(new_item, deps)

    new_items = list(items)
    new_items[index] = new_item
    changed_rows = [index] if column == "fabric_type" else ()
    return _commit_items(quote_data, new_items, deps, changed_rows=changed_rows)


def _update_item_property(quote_data, action: a.UpdateItemProperty, deps):
    if action.prop in PRICE_INPUT_COLUMNS:
        return _update_item_value(
            quote_data, a.UpdateItemValue(action.row_index, action.prop, action.value), deps,
        )
    items = _current_items(quote_data)
    index = action.row_index
    if not _valid_row(items, index) or items[index].get(action.prop) == action.value:
        return quote_data

    new_items = list(items)
    new_items[index] = {**items[index], action.prop: action.value}
    return _with_items(quote_data, new_items)


def _update_winder_motor_property(quote_data, action: a.UpdateWinderMotorProperty, deps):
    if action.prop not in WINDER_MOTOR_PROPS:
        logger.warning("Ignoring winder/motor update for unknown property %s", action.prop)
        return quote_data
    items = _current_items(quote_data)
    index = action.row_index
    if not _valid_row(items, index) or items[index].get(action.prop) == action.value:
        return quote_data

    new_item = {**items[index], action.prop: action.value}
    if action.value:
        other = "motor" if action.prop == "winder" else "winder"
        new_item[other] = ""

    new_items = list(items)
    new_items[index] = new_item
    return _with_items(quote_data, new_items)


def _cycle_k3_property(quote_data, action: a.CycleK3Property, deps):
    sequence = K3_CYCLE_SEQUENCES.get(action.column)
    items = _current_items(quote_data)
    index = action.row_index
    if sequence is None or not _valid_row(items, index) or is_empty_item(items[index]):
        return quote_data

    current = items[index].get(action.column) or ""
    position = sequence.index(current) if current in sequence else -1
    next_value = sequence[(position + 1) % len(sequence)]
    if next_value == current:
        return quote_data

    new_items = list(items)
    new_items[index] = {**items[index], action.column: next_value}
    return _with_items(quote_data, new_items)


def _cycle_item_type(quote_data, action: a.CycleItemType, deps):
    items = _current_items(quote_data)
    index = action.row_index
    if not _valid_row(items, index):
        return quote_data
    item = items[index]
    if not item.get("width") and not item.get("height"):
        return quote_data

    sequence = deps.config.get_fabric_type_sequence()
    if not sequence:
        return quote_data

    # An untyped item starts the cycle at the first type
    current_type = item.get("fabric_type") or sequence[-1]
    position = sequence.index(current_type) if current_type in sequence else -1
    next_type = sequence[(position + 1) % len(sequence)]

    new_items = list(items)
    new_items[index] = _with_fabric_type(item, next_type)
    return _commit_items(quote_data, new_items, deps, changed_rows=[index])


def _set_item_type(quote_data, action: a.SetItemType, deps):
    items = _current_items(quote_data)
    index = action.row_index
    if not _valid_row(items, index):
        return quote_data
    item = items[index]
    if (not item.get("width") and not item.get("height")) or item.get("fabric_type") == action.fabric_type:
        return quote_data

    new_items = list(items)
    new_items[index] = _with_fabric_type(item, action.fabric_type)
    return _commit_items(quote_data, new_items, deps, changed_rows=[index])


def _retype_rows(quote_data, row_indexes, fabric_type, deps):
    items = _current_items(quote_data)
    new_items = list(items)
    changed = []
    for index in row_indexes:
        if not _valid_row(items, index):
            continue
        item = items[index]
        if not item.get("width") and not item.get("height"):
            continue
        if item.get("fabric_type") == fabric_type:
            continue
        new_items[index] = _with_fabric_type(item, fabric_type)
        changed.append(index)
    if not changed:
        return quote_data
    return _commit_items(quote_data, new_items, deps, changed_rows=changed)


def _batch_update_fabric_type(quote_data, action: a.BatchUpdateFabricType, deps):
    indexes = range(len(_current_items(quote_data)))
    return _retype_rows(quote_data, indexes, action.fabric_type, deps)


def _batch_update_fabric_type_for_selection(quote_data, action: a.BatchUpdateFabricTypeForSelection, deps):
    return _retype_rows(quote_data, action.row_indexes, action.fabric_type, deps)


def _update_rows(quote_data, row_indexes, changes: dict):
    """Apply the same field changes to each listed row; same object back if nothing differs."""
    items = _current_items(quote_data)
    new_items = list(items)
    changed = False
    for index in row_indexes:
        if not _valid_row(items, index):
            continue
        item = items[index]
        if all(item.get(k) == v for k, v in changes.items()):
            continue
        new_items[index] = {**item, **changes}
        changed = True
    return _with_items(quote_data, new_items) if changed else quote_data


def _batch_update_property(quote_data, action: a.BatchUpdateProperty, deps):
    items = _current_items(quote_data)
    indexes = [i for i, item in enumerate(items) if not is_empty_item(item)]
    return _update_rows(quote_data, indexes, {action.prop: action.value})


def _batch_update_property_by_type(quote_data, action: a.BatchUpdatePropertyByType, deps):
    items = _current_items(quote_data)
    excluded = set(action.exclude_indexes)
    indexes = [
        i for i, item in enumerate(items)
        if item.get("fabric_type") == action.fabric_type and i not in excluded
    ]
    return _update_rows(quote_data, indexes, {action.prop: action.value})


def _batch_update_lf_properties(quote_data, action: a.BatchUpdateLFProperties, deps):
    return _update_rows(
        quote_data, action.row_indexes, {"fabric": action.fabric, "color": action.color},
    )


def _remove_lf_properties(quote_data, action: a.RemoveLFProperties, deps):
    return _update_rows(quote_data, action.row_indexes, {"fabric": "", "color": ""})


def _add_lf_modified_rows(quote_data, action: a.AddLFModifiedRows, deps):
    lf_rows = _lf_rows(quote_data)
    if set(action.row_indexes) <= lf_rows:
        return quote_data
    return _with_lf_rows(quote_data, lf_rows | set(action.row_indexes))


def _remove_lf_modified_rows(quote_data, action: a.RemoveLFModifiedRows, deps):
    lf_rows = _lf_rows(quote_data)
    if not lf_rows & set(action.row_indexes):
        return quote_data
    return _with_lf_rows(quote_data, lf_rows - set(action.row_indexes))


def _update_accessory_summary(quote_data, action: a.UpdateAccessorySummary, deps):
    summary = _current_product(quote_data)["summary"]
    accessories = summary.get("accessories", {})
    if all(accessories.get(k) == v for k, v in action.data.items()):
        return quote_data
    new_summary = {**summary, "accessories": {**accessories, **action.data}}
    return _with_product(quote_data, summary=new_summary)


def _set_cost_discount_percentage(quote_data, action: a.SetCostDiscountPercentage, deps):
    if quote_data.get("cost_discount_percentage") == action.percentage:
        return quote_data
    return {**quote_data, "cost_discount_percentage": action.percentage}


QUOTE_HANDLERS = {
    a.SetQuoteData: _set_quote_data,
    a.ResetQuoteData: _reset_quote_data,
    a.InsertRow: _insert_row,
    a.DeleteRow: _delete_row,
    a.DeleteMultipleRows: _delete_multiple_rows,
    a.ClearRow: _clear_row,
    a.UpdateItemValue: _update_item_value,
    a.UpdateItemProperty: _update_item_property,
    a.UpdateWinderMotorProperty: _update_winder_motor_property,
    a.CycleK3Property: _cycle_k3_property,
    a.CycleItemType: _cycle_item_type,
    a.SetItemType: _set_item_type,
    a.BatchUpdateProperty: _batch_update_property,
    a.BatchUpdatePropertyByType: _batch_update_property_by_type,
    a.BatchUpdateFabricType: _batch_update_fabric_type,
    a.BatchUpdateFabricTypeForSelection: _batch_update_fabric_type_for_selection,
    a.BatchUpdateLFProperties: _batch_update_lf_properties,
    a.RemoveLFProperties: _remove_lf_properties,
    a.AddLFModifiedRows: _add_lf_modified_rows,
    a.RemoveLFModifiedRows: _remove_lf_modified_rows,
    a.UpdateAccessorySummary: _update_accessory_summary,
    a.SetCostDiscountPercentage: _set_cost_discount_percentage,
}

_unhandled = set(a.QUOTE_ACTIONS) - set(QUOTE_HANDLERS)
if _unhandled:
    raise TypeError(f"quote reducer has no handler for: {sorted(c.__name__ for c in _unhandled)}")


def quote_reducer(quote_data: dict, action: a.Action, deps: QuoteDeps) -> dict:
    handler = QUOTE_HANDLERS.get(type(action))
    if handler is None:
        logger.warning("Unhandled quote action %s", action.TYPE)
        return quote_data
    return handler(quote_data, action, deps)
