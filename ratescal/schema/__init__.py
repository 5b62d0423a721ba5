"""
Market data schemas.
"""

from .quotes import MarketData, QuoteId

__all__ = [
    "MarketData",
    "QuoteId",
]
