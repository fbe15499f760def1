"""
ConfigProvider + strategy registry tests.

Tests:
1-4. Loading (packaged file, bad file, bad shape, uninitialized getters)
5-7. Getters (alias resolution, accessory prices, rules and mappings)
8-10. Registry (lookup, unknown product, accessory coverage)
"""

import pytest

from blindquote.config import DEFAULT_REFERENCE_DATA
from blindquote.config_provider import ConfigProvider
from blindquote.strategies.base import AccessoryKind
from blindquote.strategies.registry import (
    ProductFactory,
    get_strategy,
    has_strategy,
    list_strategies,
)
from blindquote.strategies.roller_blind import RollerBlindStrategy


# ============================================================
# Loading
# ============================================================

def test_initialize_from_packaged_file():
    provider = ConfigProvider()
    assert provider.initialize(DEFAULT_REFERENCE_DATA) is True
    assert provider.is_initialized
    assert provider.get_fabric_type_sequence() == ["B1", "B2", "B3", "B4", "B5", "SN"]


def test_initialize_missing_file(tmp_path):
    provider = ConfigProvider()
    assert provider.initialize(str(tmp_path / "missing.json")) is False
    assert not provider.is_initialized
    assert "Could not load price data" in provider.load_error


def test_malformed_matrix_rejected(reference_data):
    reference_data["matrices"]["B1"]["prices"] = [[1, 2]]
    provider = ConfigProvider()
    assert provider.load_data(reference_data) is False
    assert provider.load_error.startswith("Invalid price data")


def test_uninitialized_getters_are_neutral(empty_config):
    assert empty_config.get_price_matrix("B1") is None
    assert empty_config.get_accessory_price("motorStandard") is None
    assert empty_config.get_fabric_type_sequence() == []
    assert empty_config.get_logic_thresholds() is None
    assert empty_config.get_accessory_mappings() == {"price_key_map": {}, "cost_key_map": {}}


# ============================================================
# Getters
# ============================================================

def test_alias_matrix_resolves_to_target(config):
    assert config.get_price_matrix("B5") == config.get_price_matrix("B4")
    assert config.get_price_matrix("B5")["name"] == "Light Filter Premium"


def test_accessory_prices(config):
    assert config.get_accessory_price("winderHD") == 20
    assert config.get_accessory_price("noSuchThing") is None


def test_rules_and_mappings(config):
    rules = config.get_validation_rules("roller_blind")
    assert rules["width"] == {"min": 250, "max": 3300, "name": "Width"}
    assert config.get_logic_thresholds()["hd_winder_threshold_area"] == 4000000
    assert config.get_accessory_mappings()["price_key_map"]["dual"] == "dualBracket"
    assert config.get_f2_config()["unit_prices"]["wifi"] == 200


# ============================================================
# Registry
# ============================================================

def test_registry_lookup(config):
    assert has_strategy("roller_blind")
    assert list_strategies() == ["roller_blind"]
    assert isinstance(get_strategy("roller_blind", config), RollerBlindStrategy)


def test_unknown_product_raises():
    with pytest.raises(ValueError, match="No strategy registered"):
        get_strategy("venetian")


def test_strategies_cover_every_accessory_kind(config):
    handlers = ProductFactory(config).get_product_strategy("roller_blind").accessory_handlers()
    assert set(handlers) == set(AccessoryKind)


def test_product_factory_caches(config):
    factory = ProductFactory(config)
    assert factory.get_product_strategy("roller_blind") is factory.get_product_strategy("roller_blind")
