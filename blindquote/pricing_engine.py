"""
Pricing Engine: line prices and total for the current product.

For every item with width, height and fabric type set, the matrix for its
fabric type is looked up (aliases resolved by the ConfigProvider) and the
product strategy prices it. Items missing an input get line_price = None.

Only the first error, by row order, is reported, but every row is still
priced. The caller commits the result either way and marks the sum outdated
when first_error is set.
"""

import logging

from .config import settings
from .config_provider import ConfigProvider, config_provider

logger = logging.getLogger(__name__)


class PricingEngine:

    def __init__(self, config: ConfigProvider = None):
        self.config = config or config_provider

    def calculate_and_sum(self, quote_data: dict, product_strategy) -> dict:
        """
        Returns:
            {
                "updated_quote_data": dict,   # new tree, input untouched
                "first_error": {"message", "row_index", "column"} | None,
            }
        """
        if product_strategy is None:
            message = "Product strategy not provided."
            if settings.DEBUG:
                raise ValueError(message)
            logger.error("calculate_and_sum: %s", message)
            return {"updated_quote_data": quote_data, "first_error": {"message": message, "row_index": None}}

        product_key = quote_data["current_product"]
        product_data = quote_data["products"][product_key]

        if not self.config.is_initialized:
            logger.error("calculate_and_sum: price data not loaded: clearing line prices")
            first_error = {"message": "Price data is not loaded.", "row_index": None}
            new_items = [{**item, "line_price": None} for item in product_data["items"]]
        else:
            new_items, first_error = self._price_items(product_data["items"], product_strategy)

        total_sum = self._sum_line_prices(new_items)

        updated_product = {
            **product_data,
            "items": new_items,
            "summary": {**product_data["summary"], "total_sum": total_sum},
        }
        updated_quote_data = {
            **quote_data,
            "products": {**quote_data["products"], product_key: updated_product},
        }
        return {"updated_quote_data": updated_quote_data, "first_error": first_error}

    def _price_items(self, items: list, product_strategy):
        first_error = None
        new_items = []
        for index, item in enumerate(items):
            new_item = {**item, "line_price": None}
            if item.get("width") and item.get("height") and item.get("fabric_type"):
                matrix = self.config.get_price_matrix(item["fabric_type"])
                result = product_strategy.calculate_price(item, matrix)
                if result.get("price") is not None:
                    new_item["line_price"] = result["price"]
                elif first_error is None:
                    error = result.get("error") or {"message": "Price could not be calculated."}
                    first_error = {**error, "row_index": index}
            new_items.append(new_item)

        if first_error:
            logger.info("Pricing error at row %s: %s", first_error["row_index"], first_error["message"])
        return new_items, first_error

    def _sum_line_prices(self, items: list) -> float:
        """Sum of all non-null line prices."""
        return sum(item.get("line_price") or 0 for item in items)
