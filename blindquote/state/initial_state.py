"""
Default shapes for the quote state tree.

State is a plain nested dict:
    {"quote_data": QuoteData, "ui": UiState}

QuoteData is the persisted unit handed to the save/load collaborator.
UiState holds the F1/F2 inputs and view selections; it is never saved.
"""

import copy
import uuid

DEFAULT_PRODUCT = "roller_blind"

# Item fields and their empty values
ITEM_DEFAULTS = {
    "width": None,
    "height": None,
    "fabric_type": None,
    "line_price": None,
    "location": "",
    "fabric": "",
    "color": "",
    "over": "",
    "oi": "",
    "lr": "",
    "dual": "",
    "chain": None,
    "winder": "",
    "motor": "",
}

F1_DEFAULTS = {
    "discount_percentage": 0,
    "remote_1ch_qty": None,
    "remote_16ch_qty": None,
    "dual_combo_qty": None,
    "dual_slim_qty": None,
}

F2_DEFAULTS = {
    "wifi_qty": 0,
    "delivery_qty": 0,
    "install_qty": 0,
    "removal_qty": 0,
    "mul_times": 1,
    "discount": 0,
    "delivery_fee_excluded": False,
    "install_fee_excluded": False,
    "removal_fee_excluded": False,
}

UI_DEFAULTS = {
    "current_view": "QUICK_QUOTE",
    "active_tab_id": None,
    "active_cell": {"row_index": 0, "column": "width"},
    "multi_select_selected_indexes": [],
    "lf_selected_row_indexes": [],
    "active_edit_mode": None,
    "dual_chain_mode": None,
    "drive_accessory_mode": None,
    "drive_remote_count": 0,
    "drive_charger_count": 0,
    "drive_cord_count": 0,
    "is_sum_outdated": False,
    "f1": F1_DEFAULTS,
    "f2": F2_DEFAULTS,
}


def new_item_id() -> str:
    return f"item-{uuid.uuid4()}"


def make_item(**fields) -> dict:
    """A fresh Item with a new item_id; keyword fields override the defaults."""
    item = {"item_id": new_item_id(), **ITEM_DEFAULTS}
    item.update(fields)
    return item


def is_empty_item(item: dict) -> bool:
    """An item with no width, height or fabric type is empty."""
    return not item.get("width") and not item.get("height") and not item.get("fabric_type")


def make_product_quote(first_item: dict = None) -> dict:
    return {
        "items": [first_item or make_item()],
        "summary": {"total_sum": 0, "accessories": {}},
    }


def make_quote_data(product_key: str = DEFAULT_PRODUCT, first_item: dict = None) -> dict:
    return {
        "current_product": product_key,
        "products": {product_key: make_product_quote(first_item)},
        "ui_metadata": {"lf_modified_row_indexes": []},
        "cost_discount_percentage": 0,
    }


def make_ui_state() -> dict:
    return copy.deepcopy(UI_DEFAULTS)


def make_initial_state(product_key: str = DEFAULT_PRODUCT) -> dict:
    return {"quote_data": make_quote_data(product_key), "ui": make_ui_state()}
