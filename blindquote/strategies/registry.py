"""
Strategy registry: maps product keys to strategy classes.

Every registered strategy must handle every AccessoryKind; this is checked
once at import so a missing handler fails at startup, not mid-calculation.
"""

from ..config_provider import ConfigProvider
from .base import AccessoryKind, BaseProductStrategy
from .roller_blind import RollerBlindStrategy

STRATEGY_REGISTRY: dict[str, type] = {
    "roller_blind": RollerBlindStrategy,
}


def _check_accessory_coverage(registry: dict) -> None:
    for product_key, strategy_cls in registry.items():
        handlers = strategy_cls().accessory_handlers()
        missing = [kind.value for kind in AccessoryKind if kind not in handlers]
        if missing:
            raise TypeError(
                f"Strategy for {product_key} is missing accessory handlers: {missing}"
            )


_check_accessory_coverage(STRATEGY_REGISTRY)


def get_strategy(product_key: str, config: ConfigProvider = None) -> BaseProductStrategy:
    """Returns a strategy instance for a product, or raises ValueError."""
    if product_key not in STRATEGY_REGISTRY:
        raise ValueError(
            f"No strategy registered for product: {product_key}. "
            f"Available: {list(STRATEGY_REGISTRY.keys())}"
        )
    return STRATEGY_REGISTRY[product_key](config)


def has_strategy(product_key: str) -> bool:
    return product_key in STRATEGY_REGISTRY


def list_strategies() -> list[str]:
    return list(STRATEGY_REGISTRY.keys())


class ProductFactory:
    """Strategy lookup bound to one ConfigProvider; injected into the reducer."""

    def __init__(self, config: ConfigProvider = None):
        self.config = config
        self._cache: dict[str, BaseProductStrategy] = {}

    def get_product_strategy(self, product_key: str) -> BaseProductStrategy:
        if product_key not in self._cache:
            self._cache[product_key] = get_strategy(product_key, self.config)
        return self._cache[product_key]
