"""
Quote Service: the workflow layer between callers (HTTP routers, tests) and
the store.

Every method validates BEFORE it dispatches, so a rejected change never
reaches the quote state. Methods return None on success or an error dict:

    {"message": str, "code": str?, "row_index": int?, "column": str?}

Pricing, accessory and summary numbers come from the engines; the service
only decides what gets committed.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from .accessory_calculator import AccessoryCalculator
from .distribution_validator import (
    parse_quantity,
    validate_chain_length,
    validate_distribution,
    validate_pairing,
)
from .pricing_engine import PricingEngine
from .schemas import QuoteDataSchema
from .state import actions as a
from .state.quote_reducer import PRICE_INPUT_COLUMNS
from .state.store import QuoteStore
from .strategies.registry import ProductFactory

logger = logging.getLogger(__name__)

DRIVE_MODES = ("winder", "motor", "remote", "charger", "cord")
MOTOR_DEPENDENT_ACCESSORIES = ("remote", "charger")
DUAL_CHAIN_MODES = ("dual", "chain")


def _error(message: str, code: str = None, row_index: int = None, column: str = None) -> dict:
    error = {"message": message}
    if code:
        error["code"] = code
    if row_index is not None:
        error["row_index"] = row_index
    if column:
        error["column"] = column
    return error


class QuoteService:

    def __init__(self, store: QuoteStore, config, pricing_engine: PricingEngine = None,
                 accessory_calculator: AccessoryCalculator = None,
                 product_factory: ProductFactory = None):
        self.store = store
        self.config = config
        self.product_factory = product_factory or ProductFactory(config)
        self.pricing_engine = pricing_engine or PricingEngine(config)
        self.accessory_calculator = accessory_calculator or AccessoryCalculator(
            config, self.product_factory,
        )

    # --- Read access ---

    @property
    def state(self) -> dict:
        return self.store.get_state()

    @property
    def quote_data(self) -> dict:
        return self.state["quote_data"]

    @property
    def ui(self) -> dict:
        return self.state["ui"]

    @property
    def items(self) -> list:
        quote_data = self.quote_data
        return quote_data["products"][quote_data["current_product"]]["items"]

    def strategy(self):
        return self.product_factory.get_product_strategy(self.quote_data["current_product"])

    def dispatch(self, action: a.Action) -> bool:
        return self.store.dispatch(action)

    def _is_editable_row(self, row_index) -> bool:
        """Any existing row except the trailing empty one."""
        items = self.items
        return isinstance(row_index, int) and 0 <= row_index < len(items) - 1

    def _has_motor(self) -> bool:
        return any(item.get("motor") for item in self.items)

    # =========================================================
    # Item editing
    # =========================================================

    def commit_item_value(self, row_index: int, column: str, value) -> Optional[dict]:
        """Width/height are range-checked against the product's validation rules."""
        if not 0 <= row_index < len(self.items):
            return _error(f"Row {row_index} does not exist.", "invalid_row", row_index, column)

        if column in ("width", "height"):
            if value is None or value == "":
                value = None
            else:
                parsed = parse_quantity(value)
                if parsed is None or parsed <= 0:
                    return _error("Only positive integers are allowed.", "invalid_value", row_index, column)
                rule = self.strategy().get_validation_rules().get(column)
                if rule and not rule["min"] <= parsed <= rule["max"]:
                    return _error(
                        f"{rule['name']} must be between {rule['min']} and {rule['max']}.",
                        "out_of_range", row_index, column,
                    )
                value = parsed
        elif column == "fabric_type" and value is not None and not isinstance(value, str):
            return _error("Fabric type must be text.", "invalid_value", row_index, column)

        self.dispatch(a.UpdateItemValue(row_index, column, value))
        return None

    def update_item_property(self, row_index: int, prop: str, value) -> Optional[dict]:
        """Price inputs go through commit_item_value; other props are free text."""
        if prop in PRICE_INPUT_COLUMNS:
            return self.commit_item_value(row_index, prop, value)
        if not 0 <= row_index < len(self.items):
            return _error(f"Row {row_index} does not exist.", "invalid_row", row_index, prop)
        self.dispatch(a.UpdateItemProperty(row_index, prop, value))
        return None

    def calculate_and_sum(self) -> Optional[dict]:
        """Price every row and commit; on error flag the sum outdated and jump to the cell."""
        result = self.pricing_engine.calculate_and_sum(self.quote_data, self.strategy())
        self.dispatch(a.SetQuoteData(result["updated_quote_data"]))

        first_error = result["first_error"]
        if first_error:
            self.dispatch(a.SetSumOutdated(True))
            if first_error.get("row_index") is not None:
                self.dispatch(a.SetActiveCell(first_error["row_index"], first_error.get("column")))
            return _error(
                first_error["message"], "pricing_error",
                first_error.get("row_index"), first_error.get("column"),
            )

        self.dispatch(a.SetSumOutdated(False))
        return None

    # =========================================================
    # Dual brackets and chain length
    # =========================================================

    def set_dual_chain_mode(self, mode: Optional[str]) -> Optional[dict]:
        """Switch mode; leaving dual mode requires a valid pairing."""
        if mode is not None and mode not in DUAL_CHAIN_MODES:
            return _error(f"Unknown mode {mode}.", "invalid_mode")
        current = self.ui["dual_chain_mode"]
        if current == "dual" and mode != "dual":
            error = self.close_dual_mode()
            if error:
                return error
        self.dispatch(a.SetDualChainMode(mode))
        if mode == "dual":
            self.refresh_dual_price()
        return None

    def close_dual_mode(self) -> Optional[dict]:
        error = validate_pairing(self.items, "dual", "D", "Dual Brackets (D)")
        if error:
            return error
        self.dispatch(a.SetDualChainMode(None))
        return None

    def toggle_dual(self, row_index: int) -> Optional[dict]:
        if not self._is_editable_row(row_index):
            return _error("The trailing empty row cannot be edited.", "invalid_row", row_index, "dual")
        new_value = "" if self.items[row_index].get("dual") == "D" else "D"
        self.dispatch(a.UpdateItemProperty(row_index, "dual", new_value))
        self.refresh_dual_price()
        return None

    def refresh_dual_price(self) -> float:
        """Reprice the dual brackets (no pairing validation) and store the sum."""
        price = self.accessory_calculator.compute_dual_price(self.quote_data)
        self.dispatch(a.UpdateAccessorySummary({"dual_cost_sum": price}))
        return price

    def set_chain(self, row_index: int, value) -> Optional[dict]:
        if not self._is_editable_row(row_index):
            return _error("The trailing empty row cannot be edited.", "invalid_row", row_index, "chain")
        error = validate_chain_length(value)
        if error:
            return {**error, "row_index": row_index}
        chain = None if value is None or value == "" else parse_quantity(value)
        self.dispatch(a.UpdateItemProperty(row_index, "chain", chain))
        return None

    # =========================================================
    # Drive accessories
    # =========================================================

    def set_drive_accessory_mode(self, mode: Optional[str]) -> Optional[dict]:
        """
        Switch drive mode. Leaving winder mode requires a valid HD pairing;
        leaving any mode reprices. Entering remote/charger mode with motors
        present and a zero count starts the count at 1.
        """
        if mode is not None and mode not in DRIVE_MODES:
            return _error(f"Unknown mode {mode}.", "invalid_mode")
        current = self.ui["drive_accessory_mode"]
        if current == "winder" and mode != "winder":
            error = validate_pairing(self.items, "winder", "HD", "HD Winders")
            if error:
                return error
        if current:
            self.recalculate_drive_accessories()

        self.dispatch(a.SetDriveAccessoryMode(mode))

        if mode in MOTOR_DEPENDENT_ACCESSORIES and self._has_motor():
            if not self.ui[f"drive_{mode}_count"]:
                self.dispatch(a.SetDriveAccessoryCount(mode, 1))
        return None

    def close_drive_mode(self) -> Optional[dict]:
        return self.set_drive_accessory_mode(None)

    def toggle_winder(self, row_index: int, confirm: bool = False) -> Optional[dict]:
        return self._toggle_drive(row_index, "winder", "HD", "Motor", "HD Winder", confirm)

    def toggle_motor(self, row_index: int, confirm: bool = False) -> Optional[dict]:
        return self._toggle_drive(row_index, "motor", "Motor", "HD Winder", "Motor", confirm)

    def _toggle_drive(self, row_index, prop, on_value, other_label, label, confirm) -> Optional[dict]:
        if not self._is_editable_row(row_index):
            return _error("The trailing empty row cannot be edited.", "invalid_row", row_index, prop)
        item = self.items[row_index]
        other = "motor" if prop == "winder" else "winder"
        activating = not item.get(prop)
        if activating and item.get(other) and not confirm:
            return _error(
                f"This blind is set to {other_label}. Are you sure you want to change it to {label}?",
                "confirm_required", row_index, prop,
            )
        self.dispatch(a.UpdateWinderMotorProperty(row_index, prop, on_value if activating else ""))
        return None

    def set_drive_accessory_count(self, accessory: str, count: int, confirm: bool = False) -> Optional[dict]:
        if count is None or count < 0:
            return _error("Count cannot be negative.", "invalid_count", column=accessory)
        if count == 0 and accessory in MOTOR_DEPENDENT_ACCESSORIES and self._has_motor() and not confirm:
            return _error(
                f"Motors are present in the quote. Are you sure you want to set the {accessory} quantity to 0?",
                "confirm_required", column=accessory,
            )
        self.dispatch(a.SetDriveAccessoryCount(accessory, count))
        return None

    def recalculate_drive_accessories(self) -> dict:
        summary = self.accessory_calculator.compute_drive_accessory_summary(self.quote_data, self.ui)
        self.dispatch(a.UpdateAccessorySummary(summary["summary_update"]))
        return summary

    # =========================================================
    # F1 / F2
    # =========================================================

    def set_remote_distribution(self, qty_1ch, qty_16ch) -> Optional[dict]:
        total = self.ui["drive_remote_count"] or 0
        error = validate_distribution(qty_1ch, qty_16ch, total, ("1-channel", "16-channel"))
        if error:
            return error
        self.dispatch(a.SetF1RemoteDistribution(parse_quantity(qty_1ch), parse_quantity(qty_16ch)))
        return None

    def set_dual_distribution(self, combo_qty, slim_qty) -> Optional[dict]:
        total_pairs = sum(1 for item in self.items if item.get("dual") == "D") // 2
        error = validate_distribution(combo_qty, slim_qty, total_pairs, ("Combo", "Slim"))
        if error:
            return error
        self.dispatch(a.SetF1DualDistribution(parse_quantity(combo_qty), parse_quantity(slim_qty)))
        return None

    def set_f1_discount(self, percentage) -> Optional[dict]:
        try:
            percentage = float(percentage)
        except (TypeError, ValueError):
            return _error("Discount must be a number.", "invalid_discount")
        if not 0 <= percentage <= 100:
            return _error("Discount must be between 0 and 100.", "invalid_discount")
        self.dispatch(a.SetF1DiscountPercentage(percentage))
        self.dispatch(a.SetCostDiscountPercentage(percentage))
        return None

    def set_f2_value(self, key: str, value) -> Optional[dict]:
        if key not in self.ui["f2"]:
            return _error(f"Unknown F2 field {key}.", "invalid_field", column=key)

        if key.endswith("_fee_excluded"):
            if not isinstance(value, bool):
                return _error("Value must be true or false.", "invalid_value", column=key)
        elif key.endswith("_qty"):
            value = parse_quantity(value)
            if value is None or value < 0:
                return _error("Only non-negative integers are allowed.", "invalid_value", column=key)
        else:
            if isinstance(value, bool):
                return _error("Value must be a number.", "invalid_value", column=key)
            try:
                value = float(value)
            except (TypeError, ValueError):
                return _error("Value must be a number.", "invalid_value", column=key)
            if not value >= 0:
                return _error("Value cannot be negative.", "invalid_value", column=key)

        self.dispatch(a.SetF2Value(key, value))
        return None

    def toggle_f2_fee_exclusion(self, fee_type: str) -> Optional[dict]:
        if f"{fee_type}_fee_excluded" not in self.ui["f2"]:
            return _error(f"Unknown fee {fee_type}.", "invalid_field", column=fee_type)
        self.dispatch(a.ToggleF2FeeExclusion(fee_type))
        return None

    def get_f1_summary(self) -> dict:
        return self.accessory_calculator.compute_f1_summary(self.quote_data, self.ui)

    def get_f2_summary(self) -> dict:
        return self.accessory_calculator.compute_f2_summary(self.quote_data, self.ui)

    # =========================================================
    # Load / export / reset
    # =========================================================

    def load_quote_data(self, raw: dict) -> Optional[dict]:
        """Adopt a saved QuoteData tree after a shape check."""
        try:
            QuoteDataSchema.model_validate(raw)
        except ValidationError as e:
            logger.warning("Rejected quote data: %s", e)
            return _error("Quote data is malformed.", "invalid_quote_data")
        if raw["current_product"] not in raw["products"]:
            return _error(f"Quote has no data for product {raw['current_product']}.", "invalid_quote_data")

        self.dispatch(a.SetQuoteData(raw))
        self.dispatch(a.SetF1DiscountPercentage(raw.get("cost_discount_percentage") or 0))
        self.dispatch(a.SetSumOutdated(False))
        return None

    def export_quote_data(self) -> dict:
        return self.quote_data

    def reset(self) -> None:
        self.dispatch(a.ResetQuoteData())
        self.dispatch(a.ResetUi())
