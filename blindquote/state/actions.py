"""
Actions: the closed set of state changes the reducer understands.

Each action is a frozen dataclass with a namespaced TYPE ("quote/..." or
"ui/..."). The reducers keep a handler table keyed by action class and check
at import time that every action below has exactly one handler.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Tuple


class Action:
    TYPE: ClassVar[str] = ""

    @property
    def namespace(self) -> str:
        return self.TYPE.split("/", 1)[0]


# =========================================================
# quote/*: QuoteData mutations
# =========================================================

@dataclass(frozen=True)
class SetQuoteData(Action):
    TYPE: ClassVar[str] = "quote/set_quote_data"
    quote_data: dict


@dataclass(frozen=True)
class ResetQuoteData(Action):
    TYPE: ClassVar[str] = "quote/reset_quote_data"


@dataclass(frozen=True)
class InsertRow(Action):
    TYPE: ClassVar[str] = "quote/insert_row"
    selected_index: int


@dataclass(frozen=True)
class DeleteRow(Action):
    TYPE: ClassVar[str] = "quote/delete_row"
    row_index: int


@dataclass(frozen=True)
class DeleteMultipleRows(Action):
    TYPE: ClassVar[str] = "quote/delete_multiple_rows"
    row_indexes: Tuple[int, ...]


@dataclass(frozen=True)
class ClearRow(Action):
    TYPE: ClassVar[str] = "quote/clear_row"
    row_index: int


@dataclass(frozen=True)
class UpdateItemValue(Action):
    TYPE: ClassVar[str] = "quote/update_item_value"
    row_index: int
    column: str
    value: Any


@dataclass(frozen=True)
class UpdateItemProperty(Action):
    TYPE: ClassVar[str] = "quote/update_item_property"
    row_index: int
    prop: str
    value: Any


@dataclass(frozen=True)
class UpdateWinderMotorProperty(Action):
    TYPE: ClassVar[str] = "quote/update_winder_motor_property"
    row_index: int
    prop: str
    value: str


@dataclass(frozen=True)
class CycleK3Property(Action):
    TYPE: ClassVar[str] = "quote/cycle_k3_property"
    row_index: int
    column: str


@dataclass(frozen=True)
class CycleItemType(Action):
    TYPE: ClassVar[str] = "quote/cycle_item_type"
    row_index: int


@dataclass(frozen=True)
class SetItemType(Action):
    TYPE: ClassVar[str] = "quote/set_item_type"
    row_index: int
    fabric_type: str


@dataclass(frozen=True)
class BatchUpdateProperty(Action):
    TYPE: ClassVar[str] = "quote/batch_update_property"
    prop: str
    value: Any


@dataclass(frozen=True)
class BatchUpdatePropertyByType(Action):
    TYPE: ClassVar[str] = "quote/batch_update_property_by_type"
    fabric_type: str
    prop: str
    value: Any
    exclude_indexes: Tuple[int, ...] = ()


@dataclass(frozen=True)
class BatchUpdateFabricType(Action):
    TYPE: ClassVar[str] = "quote/batch_update_fabric_type"
    fabric_type: str


@dataclass(frozen=True)
class BatchUpdateFabricTypeForSelection(Action):
    TYPE: ClassVar[str] = "quote/batch_update_fabric_type_for_selection"
    row_indexes: Tuple[int, ...]
    fabric_type: str


@dataclass(frozen=True)
class BatchUpdateLFProperties(Action):
    TYPE: ClassVar[str] = "quote/batch_update_lf_properties"
    row_indexes: Tuple[int, ...]
    fabric: str
    color: str


@dataclass(frozen=True)
class RemoveLFProperties(Action):
    TYPE: ClassVar[str] = "quote/remove_lf_properties"
    row_indexes: Tuple[int, ...]


@dataclass(frozen=True)
class AddLFModifiedRows(Action):
    TYPE: ClassVar[str] = "quote/add_lf_modified_rows"
    row_indexes: Tuple[int, ...]


@dataclass(frozen=True)
class RemoveLFModifiedRows(Action):
    TYPE: ClassVar[str] = "quote/remove_lf_modified_rows"
    row_indexes: Tuple[int, ...]


@dataclass(frozen=True)
class UpdateAccessorySummary(Action):
    TYPE: ClassVar[str] = "quote/update_accessory_summary"
    data: dict


@dataclass(frozen=True)
class SetCostDiscountPercentage(Action):
    TYPE: ClassVar[str] = "quote/set_cost_discount_percentage"
    percentage: float


# =========================================================
# ui/*: view selections and F1/F2 inputs
# =========================================================

@dataclass(frozen=True)
class SetCurrentView(Action):
    TYPE: ClassVar[str] = "ui/set_current_view"
    view_name: str


@dataclass(frozen=True)
class SetActiveTab(Action):
    TYPE: ClassVar[str] = "ui/set_active_tab"
    tab_id: Optional[str]


@dataclass(frozen=True)
class SetActiveCell(Action):
    TYPE: ClassVar[str] = "ui/set_active_cell"
    row_index: Optional[int]
    column: Optional[str]


@dataclass(frozen=True)
class ToggleMultiSelectSelection(Action):
    TYPE: ClassVar[str] = "ui/toggle_multi_select_selection"
    row_index: int


@dataclass(frozen=True)
class ClearMultiSelectSelection(Action):
    TYPE: ClassVar[str] = "ui/clear_multi_select_selection"


@dataclass(frozen=True)
class ToggleLFSelection(Action):
    TYPE: ClassVar[str] = "ui/toggle_lf_selection"
    row_index: int


@dataclass(frozen=True)
class ClearLFSelection(Action):
    TYPE: ClassVar[str] = "ui/clear_lf_selection"


@dataclass(frozen=True)
class SetActiveEditMode(Action):
    TYPE: ClassVar[str] = "ui/set_active_edit_mode"
    mode: Optional[str]


@dataclass(frozen=True)
class SetDualChainMode(Action):
    TYPE: ClassVar[str] = "ui/set_dual_chain_mode"
    mode: Optional[str]


@dataclass(frozen=True)
class SetDriveAccessoryMode(Action):
    TYPE: ClassVar[str] = "ui/set_drive_accessory_mode"
    mode: Optional[str]


@dataclass(frozen=True)
class SetDriveAccessoryCount(Action):
    TYPE: ClassVar[str] = "ui/set_drive_accessory_count"
    accessory: str
    count: int


@dataclass(frozen=True)
class SetF1RemoteDistribution(Action):
    TYPE: ClassVar[str] = "ui/set_f1_remote_distribution"
    qty_1ch: Optional[int]
    qty_16ch: Optional[int]


@dataclass(frozen=True)
class SetF1DualDistribution(Action):
    TYPE: ClassVar[str] = "ui/set_f1_dual_distribution"
    combo_qty: Optional[int]
    slim_qty: Optional[int]


@dataclass(frozen=True)
class SetF1DiscountPercentage(Action):
    TYPE: ClassVar[str] = "ui/set_f1_discount_percentage"
    percentage: float


@dataclass(frozen=True)
class SetF2Value(Action):
    TYPE: ClassVar[str] = "ui/set_f2_value"
    key: str
    value: Any


@dataclass(frozen=True)
class ToggleF2FeeExclusion(Action):
    TYPE: ClassVar[str] = "ui/toggle_f2_fee_exclusion"
    fee_type: str


@dataclass(frozen=True)
class SetSumOutdated(Action):
    TYPE: ClassVar[str] = "ui/set_sum_outdated"
    is_outdated: bool


@dataclass(frozen=True)
class ResetUi(Action):
    TYPE: ClassVar[str] = "ui/reset_ui"


def _subclasses(namespace: str) -> list:
    return [cls for cls in Action.__subclasses__() if cls.TYPE.startswith(namespace + "/")]


QUOTE_ACTIONS = _subclasses("quote")
UI_ACTIONS = _subclasses("ui")
