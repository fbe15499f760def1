"""
Roller blind strategy.

Line price = price matrix cell for (smallest width band >= width,
smallest drop band >= height). Dimensions outside the validation range or
beyond the largest band are pricing errors, not exceptions.
Accessories price as count × unit price; dual brackets price per pair.
"""

import bisect

from ..config_provider import ConfigProvider, config_provider
from ..state.initial_state import make_item
from .base import AccessoryKind, BaseProductStrategy


DEFAULT_VALIDATION_RULES = {
    "width": {"min": 250, "max": 3300, "name": "Width"},
    "height": {"min": 300, "max": 3300, "name": "Height"},
}


class RollerBlindStrategy(BaseProductStrategy):

    product_key = "roller_blind"

    def __init__(self, config: ConfigProvider = None):
        self.config = config or config_provider

    def get_initial_item_data(self) -> dict:
        return make_item()

    def get_validation_rules(self) -> dict:
        return self.config.get_validation_rules(self.product_key) or DEFAULT_VALIDATION_RULES

    def calculate_price(self, item: dict, matrix) -> dict:
        fabric_type = item.get("fabric_type")
        if not matrix:
            return self.make_price_error(
                f"No price matrix found for fabric type {fabric_type}.", "fabric_type",
            )

        rules = self.get_validation_rules()
        for column in ("width", "height"):
            rule = rules.get(column)
            value = item.get(column)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return self.make_price_error("Only positive integers are allowed.", column)
            if rule and (value < rule["min"] or value > rule["max"]):
                return self.make_price_error(
                    f"{rule['name']} must be between {rule['min']} and {rule['max']}.", column,
                )

        widths = matrix.get("widths") or []
        drops = matrix.get("drops") or []
        width_index = bisect.bisect_left(widths, item["width"])
        drop_index = bisect.bisect_left(drops, item["height"])

        if width_index >= len(widths):
            return self.make_price_error(
                f"Width {item['width']} exceeds the largest price band "
                f"({widths[-1] if widths else 0}) for type {fabric_type}.",
                "width",
            )
        if drop_index >= len(drops):
            return self.make_price_error(
                f"Height {item['height']} exceeds the largest price band "
                f"({drops[-1] if drops else 0}) for type {fabric_type}.",
                "height",
            )

        price = matrix["prices"][drop_index][width_index]
        return {"price": price, "error": None}

    # --- Accessories ---

    def accessory_handlers(self) -> dict:
        return {
            AccessoryKind.WINDER: self.count_times_price,
            AccessoryKind.MOTOR: self.count_times_price,
            AccessoryKind.REMOTE: self.count_times_price,
            AccessoryKind.REMOTE_1CH: self.count_times_price,
            AccessoryKind.REMOTE_16CH: self.count_times_price,
            AccessoryKind.CHARGER: self.count_times_price,
            AccessoryKind.CORD: self.count_times_price,
            AccessoryKind.DUAL: self.calculate_dual_price,
            AccessoryKind.DUAL_COMBO: self.count_times_price,
            AccessoryKind.DUAL_SLIM: self.count_times_price,
        }

    def calculate_dual_price(self, items: list, unit_price: float) -> float:
        """Dual brackets are sold per adjacent pair of 'D' items."""
        return self.count_times_price(self.count_dual_pairs(items or []), unit_price)

    @staticmethod
    def count_dual_pairs(items: list) -> int:
        return sum(1 for item in items if item.get("dual") == "D") // 2
