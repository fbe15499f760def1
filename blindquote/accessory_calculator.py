"""
Accessory / Summary Calculator.

Sale and cost prices per accessory, the drive-accessory summary, and the two
financial summaries:

F1 (cost):   component sale prices + retail discounted by f1.discount_percentage,
             then GST on the subtotal.
F2 (profit): surcharges, multiplied/discounted retail (f2 discount), profit
             against the F1 figures, GST on the sell price.

F1 and F2 each apply their own discount to the same retail total. Both are
kept: F1 is the cost side, F2 the sell side.

Every price here degrades to 0 when reference data or a mapping is missing.
Nothing raises across the store boundary.
"""

import logging

from .config import settings
from .config_provider import ConfigProvider, config_provider
from .strategies.base import ITEM_BASED_ACCESSORIES, AccessoryKind
from .strategies.registry import ProductFactory

logger = logging.getLogger(__name__)

F2_FEES = ("delivery", "install", "removal")


class AccessoryCalculator:

    def __init__(self, config: ConfigProvider = None, product_factory: ProductFactory = None):
        self.config = config or config_provider
        self.product_factory = product_factory or ProductFactory(self.config)

    # --- Per-accessory prices ---

    def _strategy(self, product_type: str):
        try:
            return self.product_factory.get_product_strategy(product_type)
        except ValueError as e:
            logger.error("Strategy not found for product type %s: %s", product_type, e)
            return None

    def calculate_accessory_sale_price(self, product_type: str, kind: AccessoryKind,
                                       count: int = None, items: list = None) -> float:
        """Customer price for an accessory: item list for dual, else a count."""
        strategy = self._strategy(product_type)
        if strategy is None:
            return 0.0
        price_key = self.config.get_accessory_mappings()["price_key_map"].get(kind.value)
        if not price_key:
            logger.error("No sale price key for accessory %s", kind.value)
            return 0.0
        unit_price = self.config.get_accessory_price(price_key) or 0
        data = items if kind in ITEM_BASED_ACCESSORIES else count
        return strategy.price_accessory(kind, data, unit_price)

    def calculate_accessory_cost(self, product_type: str, kind: AccessoryKind,
                                 count=None, cost_key: str = None) -> float:
        """Supplier cost for an accessory, from the cost price list."""
        strategy = self._strategy(product_type)
        if strategy is None:
            return 0.0
        cost_key = cost_key or self.config.get_accessory_mappings()["cost_key_map"].get(kind.value)
        if not cost_key:
            logger.error("Cost calculation for '%s' requires a cost key.", kind.value)
            return 0.0
        unit_cost = self.config.get_accessory_price(cost_key) or 0
        return strategy.price_accessory(kind, count, unit_cost)

    # --- Distribution defaults ---

    def resolve_remote_distribution(self, total_remotes: int, f1: dict) -> tuple:
        """
        (1-ch, 16-ch) remote quantities. Unset 1-ch is 0, unset 16-ch is
        total minus 1-ch. An explicit split that no longer adds up to the
        current total is dropped in favour of the derived one.
        """
        qty_1ch = f1.get("remote_1ch_qty")
        qty_16ch = f1.get("remote_16ch_qty")
        if qty_1ch is not None and qty_16ch is not None and qty_1ch + qty_16ch != total_remotes:
            logger.info("Remote split %s/%s is stale for total %s", qty_1ch, qty_16ch, total_remotes)
            qty_1ch, qty_16ch = None, None
        qty_1ch = qty_1ch or 0
        if qty_16ch is None:
            qty_16ch = max(total_remotes - qty_1ch, 0)
        return qty_1ch, qty_16ch

    def resolve_dual_distribution(self, total_pairs: int, f1: dict) -> tuple:
        """(combo, slim) bracket quantities. Unset combo takes all detected pairs."""
        combo = f1.get("dual_combo_qty")
        slim = f1.get("dual_slim_qty")
        if combo is not None and slim is not None and combo + slim != total_pairs:
            logger.info("Dual split %s/%s is stale for %s pairs", combo, slim, total_pairs)
            combo, slim = None, None
        if combo is None:
            combo = total_pairs
        return combo, slim or 0

    # --- Drive accessories (winder / motor / remote / charger / cord) ---

    def compute_drive_accessory_summary(self, quote_data: dict, ui: dict) -> dict:
        product_type = quote_data["current_product"]
        items = quote_data["products"][product_type]["items"]

        counts = {
            AccessoryKind.WINDER: sum(1 for item in items if item.get("winder") == "HD"),
            AccessoryKind.MOTOR: sum(1 for item in items if item.get("motor")),
            AccessoryKind.REMOTE: ui.get("drive_remote_count") or 0,
            AccessoryKind.CHARGER: ui.get("drive_charger_count") or 0,
            AccessoryKind.CORD: ui.get("drive_cord_count") or 0,
        }
        lines = {}
        for kind, count in counts.items():
            lines[kind.value] = {
                "count": count,
                "price": self.calculate_accessory_sale_price(product_type, kind, count=count),
            }

        grand_total = sum(line["price"] for line in lines.values())
        return {
            "lines": lines,
            "grand_total": grand_total,
            "summary_update": {
                "winder_cost_sum": lines["winder"]["price"],
                "motor_cost_sum": lines["motor"]["price"],
                "remote_cost_sum": lines["remote"]["price"],
                "charger_cost_sum": lines["charger"]["price"],
                "cord_cost_sum": lines["cord"]["price"],
            },
        }

    def compute_dual_price(self, quote_data: dict) -> float:
        product_type = quote_data["current_product"]
        items = quote_data["products"][product_type]["items"]
        return self.calculate_accessory_sale_price(product_type, AccessoryKind.DUAL, items=items)

    # --- F1 ---

    def compute_f1_summary(self, quote_data: dict, ui: dict) -> dict:
        product_type = quote_data["current_product"]
        product = quote_data["products"][product_type]
        items = product["items"]
        f1 = ui.get("f1", {})

        def sale(kind, count):
            return self.calculate_accessory_sale_price(product_type, kind, count=count)

        winder_qty = sum(1 for item in items if item.get("winder") == "HD")
        motor_qty = sum(1 for item in items if item.get("motor"))
        remote_1ch_qty, remote_16ch_qty = self.resolve_remote_distribution(
            ui.get("drive_remote_count") or 0, f1,
        )
        charger_qty = ui.get("drive_charger_count") or 0
        cord_qty = ui.get("drive_cord_count") or 0
        total_pairs = sum(1 for item in items if item.get("dual") == "D") // 2
        combo_qty, slim_qty = self.resolve_dual_distribution(total_pairs, f1)

        components = {
            "winder": {"qty": winder_qty, "price": sale(AccessoryKind.WINDER, winder_qty)},
            "motor": {"qty": motor_qty, "price": sale(AccessoryKind.MOTOR, motor_qty)},
            "remote_1ch": {"qty": remote_1ch_qty, "price": sale(AccessoryKind.REMOTE_1CH, remote_1ch_qty)},
            "remote_16ch": {"qty": remote_16ch_qty, "price": sale(AccessoryKind.REMOTE_16CH, remote_16ch_qty)},
            "charger": {"qty": charger_qty, "price": sale(AccessoryKind.CHARGER, charger_qty)},
            "cord_3m": {"qty": cord_qty, "price": sale(AccessoryKind.CORD, cord_qty)},
            "dual_combo": {"qty": combo_qty, "price": sale(AccessoryKind.DUAL_COMBO, combo_qty)},
            "dual_slim": {"qty": slim_qty, "price": sale(AccessoryKind.DUAL_SLIM, slim_qty)},
        }
        component_total = sum(c["price"] for c in components.values())

        retail = product["summary"].get("total_sum") or 0
        discount_pct = f1.get("discount_percentage") or 0
        rb_price = retail * (1 - discount_pct / 100.0)

        sub_total = component_total + rb_price
        gst = sub_total * settings.GST_RATE
        return {
            "components": components,
            "component_total": component_total,
            "rb_retail": retail,
            "discount_percentage": discount_pct,
            "rb_price": rb_price,
            "sub_total": sub_total,
            "gst": gst,
            "final_total": sub_total + gst,
        }

    # --- F2 ---

    def compute_f2_summary(self, quote_data: dict, ui: dict) -> dict:
        product = quote_data["products"][quote_data["current_product"]]
        items = product["items"]
        f2 = ui.get("f2", {})
        unit_prices = self.config.get_f2_config()["unit_prices"]

        retail = product["summary"].get("total_sum") or 0

        wifi_sum = (f2.get("wifi_qty") or 0) * unit_prices.get("wifi", 0)
        fees = {fee: (f2.get(f"{fee}_qty") or 0) * unit_prices.get(fee, 0) for fee in F2_FEES}

        surcharge = wifi_sum
        for fee, amount in fees.items():
            if not f2.get(f"{fee}_fee_excluded"):
                surcharge += amount

        mul_times = f2.get("mul_times") or 1
        dis_rb_price = retail * mul_times - (f2.get("discount") or 0)
        sum_price = dis_rb_price + surcharge

        f1_summary = self.compute_f1_summary(quote_data, ui)
        rb_profit = dis_rb_price - f1_summary["rb_price"]

        priced = [item["line_price"] for item in items
                  if isinstance(item.get("line_price"), (int, float)) and item["line_price"] > 0]
        single_profit = rb_profit / len(priced) if priced else 0
        first_rb_price = priced[0] if priced else 0

        sum_profit = sum_price - f1_summary["final_total"]
        gst = sum_price * settings.GST_RATE
        return {
            "total_sum_for_rb_time": retail,
            "wifi_sum": wifi_sum,
            "delivery_fee": fees["delivery"],
            "install_fee": fees["install"],
            "removal_fee": fees["removal"],
            "surcharge_fee": surcharge,
            "dis_rb_price": dis_rb_price,
            "sum_price": sum_price,
            "first_rb_price": first_rb_price,
            "rb_profit": rb_profit,
            "single_profit": single_profit,
            "sum_profit": sum_profit,
            "gst": gst,
            "net_profit": sum_profit - gst,
        }
