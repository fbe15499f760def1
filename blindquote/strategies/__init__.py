"""
Product pricing strategies.

One strategy per product type: initial item template, price matrix lookup,
validation ranges and one accessory handler per AccessoryKind.
"""
