"""
Process-wide quote session: one store and one service, built lazily so the
reference data is loaded before the first request uses them.
"""

from .config import settings
from .config_provider import config_provider
from .quote_service import QuoteService
from .state.initial_state import make_initial_state
from .state.quote_reducer import QuoteDeps
from .state.root_reducer import create_root_reducer
from .state.store import QuoteStore
from .strategies.registry import ProductFactory

_service = None


def build_quote_service(config=None, product_key: str = None) -> QuoteService:
    config = config or config_provider
    product_key = product_key or settings.DEFAULT_PRODUCT
    factory = ProductFactory(config)
    deps = QuoteDeps(product_factory=factory, config=config, default_product=product_key)
    store = QuoteStore(make_initial_state(product_key), create_root_reducer(deps))
    return QuoteService(store, config, product_factory=factory)


def get_quote_service() -> QuoteService:
    global _service
    if _service is None:
        _service = build_quote_service()
    return _service
