"""
Pricing engine + roller blind strategy tests.

Tests:
1-3.  Scenario pricing (line price, empty row, total)
4-5.  First-error determinism, remaining rows still priced
6.    Purity (same input twice, input untouched)
7-8.  Missing config / missing strategy
9-13. Strategy band lookup, alias matrices, range, band and type errors
"""

import pytest

from blindquote.pricing_engine import PricingEngine

from builders import blind, empty, items_of, quote_with_items


# ============================================================
# Engine
# ============================================================

def test_scenario_single_blind(config, strategy):
    quote = quote_with_items(blind(width=1000, height=1200, fabric_type="B2"), empty())
    result = PricingEngine(config).calculate_and_sum(quote, strategy)

    items = items_of(result["updated_quote_data"])
    assert items[0]["line_price"] == 150
    assert items[1]["line_price"] is None
    assert result["updated_quote_data"]["products"]["roller_blind"]["summary"]["total_sum"] == 150
    assert result["first_error"] is None


def test_items_missing_an_input_are_unpriced(config, strategy):
    quote = quote_with_items(blind(), blind(fabric_type=None), empty())
    result = PricingEngine(config).calculate_and_sum(quote, strategy)
    items = items_of(result["updated_quote_data"])
    assert items[1]["line_price"] is None
    assert result["updated_quote_data"]["products"]["roller_blind"]["summary"]["total_sum"] == 150


def test_summary_keeps_accessories(config, strategy):
    quote = quote_with_items(blind(), empty())
    quote["products"]["roller_blind"]["summary"]["accessories"] = {"dual_cost_sum": 30}
    result = PricingEngine(config).calculate_and_sum(quote, strategy)
    summary = result["updated_quote_data"]["products"]["roller_blind"]["summary"]
    assert summary["accessories"] == {"dual_cost_sum": 30}


def test_first_error_is_lowest_row(config, strategy):
    quote = quote_with_items(
        blind(), blind(), blind(width=100), blind(), blind(), blind(height=9000), empty(),
    )
    result = PricingEngine(config).calculate_and_sum(quote, strategy)

    assert result["first_error"]["row_index"] == 2
    assert result["first_error"]["column"] == "width"
    assert "Width must be between 250 and 3300" in result["first_error"]["message"]


def test_rows_after_an_error_are_still_priced(config, strategy):
    quote = quote_with_items(blind(width=100), blind(), empty())
    result = PricingEngine(config).calculate_and_sum(quote, strategy)
    items = items_of(result["updated_quote_data"])
    assert items[0]["line_price"] is None
    assert items[1]["line_price"] == 150
    assert result["updated_quote_data"]["products"]["roller_blind"]["summary"]["total_sum"] == 150


def test_pricing_is_pure(config, strategy):
    quote = quote_with_items(blind(), blind(width=2000, height=2000, fabric_type="SN"), empty())
    engine = PricingEngine(config)
    first = engine.calculate_and_sum(quote, strategy)
    second = engine.calculate_and_sum(quote, strategy)
    assert first["updated_quote_data"] == second["updated_quote_data"]
    assert items_of(quote)[0]["line_price"] is None


def test_uninitialized_config_clears_prices(empty_config, strategy):
    quote = quote_with_items(blind(line_price=150), empty())
    result = PricingEngine(empty_config).calculate_and_sum(quote, strategy)
    assert items_of(result["updated_quote_data"])[0]["line_price"] is None
    assert result["first_error"]["message"] == "Price data is not loaded."
    assert result["updated_quote_data"]["products"]["roller_blind"]["summary"]["total_sum"] == 0


def test_missing_strategy_is_reported(config):
    quote = quote_with_items(blind(), empty())
    result = PricingEngine(config).calculate_and_sum(quote, None)
    assert result["updated_quote_data"] is quote
    assert result["first_error"]["message"] == "Product strategy not provided."


def test_missing_strategy_raises_in_debug(config, monkeypatch):
    from blindquote.config import settings
    monkeypatch.setattr(settings, "DEBUG", True)
    with pytest.raises(ValueError):
        PricingEngine(config).calculate_and_sum(quote_with_items(empty()), None)


# ============================================================
# Strategy
# ============================================================

@pytest.mark.parametrize("width,height,expected", [
    (600, 1200, 120),     # exact lower bands
    (601, 1200, 135),     # just over -> next width band
    (3000, 3000, 312),    # largest band
    (250, 300, 120),      # minimum dimensions price at the first band
])
def test_band_lookup(config, strategy, width, height, expected):
    matrix = config.get_price_matrix("B2")
    result = strategy.calculate_price(blind(width=width, height=height), matrix)
    assert result["price"] == expected


def test_alias_matrix_prices_like_target(config, strategy):
    b4 = strategy.calculate_price(blind(fabric_type="B4"), config.get_price_matrix("B4"))
    b5 = strategy.calculate_price(blind(fabric_type="B5"), config.get_price_matrix("B5"))
    assert b5["price"] == b4["price"] == 180


def test_width_beyond_largest_band(config, strategy):
    result = strategy.calculate_price(blind(width=3200), config.get_price_matrix("B2"))
    assert result["price"] is None
    assert result["error"]["column"] == "width"
    assert "largest price band" in result["error"]["message"]


def test_unknown_fabric_type_has_no_matrix(config, strategy):
    result = strategy.calculate_price(blind(fabric_type="ZZ"), config.get_price_matrix("ZZ"))
    assert result["price"] is None
    assert result["error"]["column"] == "fabric_type"


def test_non_numeric_dimension_is_a_pricing_error(config, strategy):
    result = strategy.calculate_price(blind(width="1000"), config.get_price_matrix("B2"))
    assert result["price"] is None
    assert result["error"]["column"] == "width"
