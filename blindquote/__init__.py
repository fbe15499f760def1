"""
Roller blind quoting core: quote state, pricing and F1/F2 summaries.
"""

__version__ = "1.0.0"
