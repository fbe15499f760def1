"""
Distribution validator tests.

Tests:
1-4. Split totals (valid, mismatch, negative, non-integer)
5-8. Pairing (adjacent pairs, non-adjacent, odd count, none flagged)
9.   Chain length
"""

import pytest

from blindquote.distribution_validator import (
    parse_quantity,
    validate_chain_length,
    validate_distribution,
    validate_pairing,
)

from builders import blind, empty


def _flagged(indexes, length=9, column="dual", flag="D"):
    return [blind(**{column: flag}) if i in indexes else blind() for i in range(length)] + [empty()]


# ============================================================
# Split totals
# ============================================================

def test_valid_split():
    assert validate_distribution(3, 5, 8) is None
    assert validate_distribution("3", "5", 8) is None


def test_split_total_mismatch():
    error = validate_distribution(3, 4, 8)
    assert error["code"] == "total_mismatch"
    assert error["message"] == "Total must equal 8. Current total: 7."


def test_negative_quantity_rejected():
    assert validate_distribution(-1, 9, 8)["code"] == "negative_quantity"


@pytest.mark.parametrize("value", [None, "", "abc", 1.5, True])
def test_non_integer_quantity_rejected(value):
    assert validate_distribution(value, 8, 8)["code"] == "invalid_quantity"


def test_parse_quantity():
    assert parse_quantity(" 4 ") == 4
    assert parse_quantity(2.0) == 2
    assert parse_quantity("-3") == -3
    assert parse_quantity("2.5") is None


# ============================================================
# Pairing
# ============================================================

def test_adjacent_pairs_pass():
    assert validate_pairing(_flagged({2, 3, 6, 7}), "dual", "D", "Dual Brackets (D)") is None


def test_non_adjacent_pair_fails():
    error = validate_pairing(_flagged({2, 4}), "dual", "D", "Dual Brackets (D)")
    assert error["code"] == "not_adjacent"
    assert error["row_index"] == 2


def test_odd_count_fails():
    error = validate_pairing(_flagged({2, 3, 6}), "dual", "D", "Dual Brackets (D)")
    assert error["code"] == "odd_count"
    assert "even number" in error["message"]


def test_no_flags_pass():
    assert validate_pairing(_flagged(set()), "winder", "HD", "HD Winders") is None


def test_hd_winder_pairing():
    items = _flagged({0, 1}, column="winder", flag="HD")
    assert validate_pairing(items, "winder", "HD", "HD Winders") is None


# ============================================================
# Chain length
# ============================================================

@pytest.mark.parametrize("value,valid", [
    (None, True), ("", True), (3, True), ("12", True),
    (0, False), (-2, False), ("abc", False), (1.5, False),
])
def test_chain_length(value, valid):
    assert (validate_chain_length(value) is None) is valid
