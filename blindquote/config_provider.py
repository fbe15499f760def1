"""
ConfigProvider: read-only reference data for the quoting core.

Loads price matrices, accessory unit prices, the fabric type cycle order,
business rules (validation ranges, HD winder threshold, accessory key maps)
and the F2 surcharge unit prices from a single JSON document.

Loading is the only boundary that can fail. A failed or missing load leaves
the provider uninitialized: every getter logs and returns a neutral value
(None, [] or {}) instead of raising, so a partially loaded session never
crashes a calculation pass.
"""

import json
import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, ValidationError, model_validator

from .config import settings

logger = logging.getLogger(__name__)


# --- Reference data schema ---

class PriceMatrix(BaseModel):
    name: Optional[str] = None
    widths: List[int] = []
    drops: List[int] = []
    prices: List[List[float]] = []
    alias_for: Optional[str] = None

    @model_validator(mode="after")
    def check_shape(self):
        if self.alias_for:
            return self
        if len(self.prices) != len(self.drops):
            raise ValueError("prices must have one row per drop band")
        for row in self.prices:
            if len(row) != len(self.widths):
                raise ValueError("each price row must have one entry per width band")
        return self


class AccessoryPrice(BaseModel):
    price: Optional[float] = None


class ValidationRule(BaseModel):
    min: int
    max: int
    name: str


class AccessoryMappings(BaseModel):
    price_key_map: Dict[str, str] = {}
    cost_key_map: Dict[str, str] = {}


class BusinessRules(BaseModel):
    validation: Dict[str, Dict[str, ValidationRule]] = {}
    logic: Dict[str, float] = {}
    mappings: AccessoryMappings = AccessoryMappings()


class F2Config(BaseModel):
    unit_prices: Dict[str, float] = {
        "wifi": 0.0,
        "delivery": 0.0,
        "install": 0.0,
        "removal": 0.0,
    }


class ReferenceData(BaseModel):
    fabric_type_sequence: List[str] = []
    matrices: Dict[str, PriceMatrix] = {}
    accessories: Dict[str, AccessoryPrice] = {}
    business_rules: BusinessRules = BusinessRules()
    f2: F2Config = F2Config()


class ConfigProvider:
    """Immutable-after-load reference data. One instance per app."""

    def __init__(self):
        self._data: Optional[ReferenceData] = None
        self.load_error: Optional[str] = None

    @property
    def is_initialized(self) -> bool:
        return self._data is not None

    def initialize(self, path: str = None) -> bool:
        """
        Load reference data from a JSON file. Idempotent once loaded.
        Returns True on success. Failures are logged and kept in load_error.
        """
        if self.is_initialized:
            return True
        path = path or settings.REFERENCE_DATA_PATH
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            self.load_error = f"Could not load price data from {path}: {e}"
            logger.error(self.load_error)
            return False
        return self.load_data(raw)

    def load_data(self, raw: dict) -> bool:
        """Adopt reference data from an in-memory dict, replacing any prior load."""
        try:
            data = ReferenceData.model_validate(raw)
        except ValidationError as e:
            self.load_error = f"Invalid price data: {e.error_count()} error(s)"
            logger.error("%s\n%s", self.load_error, e)
            return False

        for fabric_type, matrix in data.matrices.items():
            if matrix.alias_for and matrix.alias_for not in data.matrices:
                logger.warning(
                    "Matrix %s is an alias for unknown matrix %s", fabric_type, matrix.alias_for,
                )

        self._data = data
        self.load_error = None
        logger.info(
            "Reference data loaded: %d matrices, %d accessories",
            len(data.matrices), len(data.accessories),
        )
        return True

    # --- Getters ---

    def get_price_matrix(self, fabric_type: str) -> Optional[dict]:
        """Matrix for a fabric type, following one level of alias_for."""
        if not self.is_initialized:
            logger.error("ConfigProvider not initialized: no price matrix for %s", fabric_type)
            return None
        matrix = self._data.matrices.get(fabric_type)
        if matrix and matrix.alias_for:
            matrix = self._data.matrices.get(matrix.alias_for)
        if matrix is None:
            logger.warning("No price matrix for fabric type %s", fabric_type)
            return None
        return matrix.model_dump()

    def get_accessory_price(self, key: str) -> Optional[float]:
        if not self.is_initialized:
            logger.error("ConfigProvider not initialized: no accessory price for %s", key)
            return None
        accessory = self._data.accessories.get(key)
        if accessory is not None and accessory.price is not None:
            return accessory.price
        logger.error("Accessory price for '%s' not found.", key)
        return None

    def get_fabric_type_sequence(self) -> List[str]:
        if not self.is_initialized:
            logger.error("ConfigProvider not initialized: empty fabric type sequence")
            return []
        return list(self._data.fabric_type_sequence)

    def get_validation_rules(self, product_type: str) -> Optional[dict]:
        if not self.is_initialized:
            return None
        rules = self._data.business_rules.validation.get(product_type)
        if rules is None:
            return None
        return {column: rule.model_dump() for column, rule in rules.items()}

    def get_logic_thresholds(self) -> Optional[dict]:
        if not self.is_initialized or not self._data.business_rules.logic:
            return None
        return dict(self._data.business_rules.logic)

    def get_accessory_mappings(self) -> dict:
        if not self.is_initialized:
            return {"price_key_map": {}, "cost_key_map": {}}
        return self._data.business_rules.mappings.model_dump()

    def get_f2_config(self) -> dict:
        if not self.is_initialized:
            return F2Config().model_dump()
        return self._data.f2.model_dump()


# Shared instance: loaded once at app startup
config_provider = ConfigProvider()
