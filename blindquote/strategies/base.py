"""
Abstract base class for all product strategies.

Input: an Item dict plus the price matrix for its fabric type
Output: {"price": float | None, "error": {...} | None}
"""

import enum
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict

logger = logging.getLogger(__name__)


class AccessoryKind(str, enum.Enum):
    WINDER = "winder"
    MOTOR = "motor"
    REMOTE = "remote"
    REMOTE_1CH = "remote_1ch"
    REMOTE_16CH = "remote_16ch"
    CHARGER = "charger"
    CORD = "cord"
    DUAL = "dual"
    DUAL_COMBO = "dual_combo"
    DUAL_SLIM = "dual_slim"


# Accessories priced from the item list rather than a plain count
ITEM_BASED_ACCESSORIES = {AccessoryKind.DUAL}


class BaseProductStrategy(ABC):
    """All product strategies inherit from this."""

    product_key: str = ""

    @abstractmethod
    def get_initial_item_data(self) -> dict:
        """A fresh empty Item with a new stable item_id."""
        pass

    @abstractmethod
    def calculate_price(self, item: dict, matrix) -> dict:
        """
        Price one item from its matrix.
        Returns {"price": float, "error": None} or {"price": None, "error": {...}}.
        """
        pass

    @abstractmethod
    def get_validation_rules(self) -> dict:
        """{column: {"min", "max", "name"}} for numeric inputs."""
        pass

    @abstractmethod
    def accessory_handlers(self) -> Dict[AccessoryKind, Callable]:
        """One handler per AccessoryKind: handler(count_or_items, unit_price) -> float."""
        pass

    # --- Helpers shared by all strategies ---

    def price_accessory(self, kind: AccessoryKind, data, unit_price: float) -> float:
        handler = self.accessory_handlers().get(kind)
        if handler is None:
            logger.error("%s has no handler for accessory %s", type(self).__name__, kind.value)
            return 0.0
        return handler(data, unit_price)

    def count_times_price(self, count, unit_price: float) -> float:
        """Count × unit price; None or negative counts price at zero."""
        if not count or count < 0:
            return 0.0
        return count * (unit_price or 0)

    def make_price_error(self, message: str, column: str = None) -> dict:
        return {"price": None, "error": {"message": message, "column": column}}
