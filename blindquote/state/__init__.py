"""
Quote state: actions, reducers, row consolidation and the QuoteStore.
"""
