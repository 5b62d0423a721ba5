"""
Base abstraction for quote loading.
"""

from datetime import date
from typing import Protocol, runtime_checkable

from ratescal.schema.quotes import MarketData


@runtime_checkable
class QuoteSource(Protocol):
    """
    Protocol for market quote sources.

    Any source (file, database, API) that can produce the quotes observed on
    one valuation date.
    """

    def load(self, valuation_date: date) -> MarketData:
        """
        Load the quotes of one valuation date.

        Args:
            valuation_date: Date for which to load quotes

        Returns:
            Market data snapshot
        """
        ...
