"""
ui/* sub-reducer: view selections, drive accessory counters and F1/F2 inputs.
"""

import logging

from . import actions as a
from .initial_state import make_ui_state

logger = logging.getLogger(__name__)

DRIVE_COUNT_KEYS = {
    "remote": "drive_remote_count",
    "charger": "drive_charger_count",
    "cord": "drive_cord_count",
}


def _set(ui: dict, key: str, value) -> dict:
    if ui.get(key) == value:
        return ui
    return {**ui, key: value}


def _toggle_in_list(values: list, value) -> list:
    if value in values:
        return [v for v in values if v != value]
    return values + [value]


def _merge(ui: dict, section: str, changes: dict) -> dict:
    current = ui[section]
    if all(current.get(k) == v for k, v in changes.items()):
        return ui
    return {**ui, section: {**current, **changes}}


# --- Handlers ---

def _set_current_view(ui, action: a.SetCurrentView):
    return _set(ui, "current_view", action.view_name)


def _set_active_tab(ui, action: a.SetActiveTab):
    return _set(ui, "active_tab_id", action.tab_id)


def _set_active_cell(ui, action: a.SetActiveCell):
    return _set(ui, "active_cell", {"row_index": action.row_index, "column": action.column})


def _toggle_multi_select_selection(ui, action: a.ToggleMultiSelectSelection):
    selected = _toggle_in_list(ui["multi_select_selected_indexes"], action.row_index)
    return {**ui, "multi_select_selected_indexes": selected}


def _clear_multi_select_selection(ui, action: a.ClearMultiSelectSelection):
    return _set(ui, "multi_select_selected_indexes", [])


def _toggle_lf_selection(ui, action: a.ToggleLFSelection):
    selected = _toggle_in_list(ui["lf_selected_row_indexes"], action.row_index)
    return {**ui, "lf_selected_row_indexes": selected}


def _clear_lf_selection(ui, action: a.ClearLFSelection):
    return _set(ui, "lf_selected_row_indexes", [])


def _set_active_edit_mode(ui, action: a.SetActiveEditMode):
    return _set(ui, "active_edit_mode", action.mode)


def _set_dual_chain_mode(ui, action: a.SetDualChainMode):
    return _set(ui, "dual_chain_mode", action.mode)


def _set_drive_accessory_mode(ui, action: a.SetDriveAccessoryMode):
    return _set(ui, "drive_accessory_mode", action.mode)


def _set_drive_accessory_count(ui, action: a.SetDriveAccessoryCount):
    key = DRIVE_COUNT_KEYS.get(action.accessory)
    if key is None or action.count is None or action.count < 0:
        return ui
    return _set(ui, key, action.count)


def _set_f1_remote_distribution(ui, action: a.SetF1RemoteDistribution):
    return _merge(ui, "f1", {"remote_1ch_qty": action.qty_1ch, "remote_16ch_qty": action.qty_16ch})


def _set_f1_dual_distribution(ui, action: a.SetF1DualDistribution):
    return _merge(ui, "f1", {"dual_combo_qty": action.combo_qty, "dual_slim_qty": action.slim_qty})


def _set_f1_discount_percentage(ui, action: a.SetF1DiscountPercentage):
    return _merge(ui, "f1", {"discount_percentage": action.percentage})


def _set_f2_value(ui, action: a.SetF2Value):
    if action.key not in ui["f2"]:
        logger.warning("Ignoring unknown F2 field %s", action.key)
        return ui
    return _merge(ui, "f2", {action.key: action.value})


def _toggle_f2_fee_exclusion(ui, action: a.ToggleF2FeeExclusion):
    key = f"{action.fee_type}_fee_excluded"
    if key not in ui["f2"]:
        return ui
    return _merge(ui, "f2", {key: not ui["f2"][key]})


def _set_sum_outdated(ui, action: a.SetSumOutdated):
    return _set(ui, "is_sum_outdated", action.is_outdated)


def _reset_ui(ui, action: a.ResetUi):
    return make_ui_state()


UI_HANDLERS = {
    a.SetCurrentView: _set_current_view,
    a.SetActiveTab: _set_active_tab,
    a.SetActiveCell: _set_active_cell,
    a.ToggleMultiSelectSelection: _toggle_multi_select_selection,
    a.ClearMultiSelectSelection: _clear_multi_select_selection,
    a.ToggleLFSelection: _toggle_lf_selection,
    a.ClearLFSelection: _clear_lf_selection,
    a.SetActiveEditMode: _set_active_edit_mode,
    a.SetDualChainMode: _set_dual_chain_mode,
    a.SetDriveAccessoryMode: _set_drive_accessory_mode,
    a.SetDriveAccessoryCount: _set_drive_accessory_count,
    a.SetF1RemoteDistribution: _set_f1_remote_distribution,
    a.SetF1DualDistribution: _set_f1_dual_distribution,
    a.SetF1DiscountPercentage: _set_f1_discount_percentage,
    a.SetF2Value: _set_f2_value,
    a.ToggleF2FeeExclusion: _toggle_f2_fee_exclusion,
    a.SetSumOutdated: _set_sum_outdated,
    a.ResetUi: _reset_ui,
}

_unhandled = set(a.UI_ACTIONS) - set(UI_HANDLERS)
if _unhandled:
    raise TypeError(f"ui reducer has no handler for: {sorted(c.__name__ for c in _unhandled)}")


def ui_reducer(ui: dict, action: a.Action) -> dict:
    handler = UI_HANDLERS.get(type(action))
    if handler is None:
        logger.warning("Unhandled ui action %s", action.TYPE)
        return ui
    return handler(ui, action)
