"""
Market quote loading.

Quote sources turn files into immutable ``MarketData`` snapshots:

- ``load_quotes_csv`` / ``CSVQuoteSource``: tabular quote files with
  ``Valuation Date``, ``Symbology``, ``Ticker`` and ``Value`` columns
- ``JSONQuoteSource``: one JSON file per valuation date
"""

from .base import QuoteSource
from .loaders import CSVQuoteSource, JSONQuoteSource, load_quotes_csv

__all__ = [
    "QuoteSource",
    "CSVQuoteSource",
    "JSONQuoteSource",
    "load_quotes_csv",
]
