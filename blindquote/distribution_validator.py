"""
Distribution Validator.

- validate_distribution: a known total split across two named buckets
  (remote 1-ch / 16-ch, dual combo / slim).
- validate_pairing: flagged items (dual 'D', winder 'HD') must come in
  adjacent index pairs (i, i+1), scanning in item order.
- validate_chain_length: chain is a positive integer or empty.

All return None when valid, else an error dict with a human-readable message.
"""

from typing import Optional


def parse_quantity(value) -> Optional[int]:
    """Integer from int / integral float / numeric string, else None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        qty = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        qty = int(value)
    elif isinstance(value, str):
        try:
            qty = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    return qty


def validate_distribution(qty_a, qty_b, required_total: int,
                          labels: tuple = ("first", "second")) -> Optional[dict]:
    """Both quantities must be non-negative integers that add up to required_total."""
    parsed_a = parse_quantity(qty_a)
    parsed_b = parse_quantity(qty_b)
    for label, parsed in zip(labels, (parsed_a, parsed_b)):
        if parsed is None:
            return {"code": "invalid_quantity", "message": f"{label} quantity must be a whole number."}
        if parsed < 0:
            return {"code": "negative_quantity", "message": f"{label} quantity cannot be negative."}

    if parsed_a + parsed_b != required_total:
        return {
            "code": "total_mismatch",
            "message": f"Total must equal {required_total}. Current total: {parsed_a + parsed_b}.",
        }
    return None


def flagged_indexes(items: list, column: str, flag_value: str) -> list:
    return [i for i, item in enumerate(items) if item.get(column) == flag_value]


def validate_pairing(items: list, column: str, flag_value: str, label: str) -> Optional[dict]:
    """
    Flagged items must be an even count, in adjacent pairs.
    Flags on rows {2, 3, 6, 7} pass; {2, 4} and {2, 3, 6} fail.
    """
    indexes = flagged_indexes(items, column, flag_value)

    if len(indexes) % 2 != 0:
        return {
            "code": "odd_count",
            "message": f"The total count of {label} must be an even number. Please correct the selection.",
            "row_index": indexes[-1],
            "column": column,
        }

    for i in range(0, len(indexes), 2):
        if indexes[i + 1] != indexes[i] + 1:
            return {
                "code": "not_adjacent",
                "message": f"{label} must be set on adjacent items. Please check your selection.",
                "row_index": indexes[i],
                "column": column,
            }
    return None


def validate_chain_length(value) -> Optional[dict]:
    """Chain length: empty clears it, otherwise a positive integer."""
    if value is None or value == "":
        return None
    qty = parse_quantity(value)
    if qty is None or qty <= 0:
        return {"code": "invalid_chain", "message": "Only positive integers are allowed.", "column": "chain"}
    return None
