"""
Concrete quote loaders.

Provides loaders for CSV and JSON quote files.
"""

import json
from datetime import date
from pathlib import Path
from typing import Dict, Optional, Union

import pandas as pd

from ratescal.schema.quotes import MarketData, QuoteId

CSV_COLUMNS = ("Valuation Date", "Symbology", "Ticker", "Value")


def load_quotes_csv(
    path: Union[str, Path],
    valuation_date: date,
    symbology: Optional[str] = None,
) -> MarketData:
    """
    Load the quotes of one valuation date from a CSV file.

    The file has the columns ``Valuation Date``, ``Symbology``, ``Ticker`` and
    ``Value``; the ticker becomes the quote id. Rows of other dates are ignored.

    Args:
        path: CSV file
        valuation_date: Date to select
        symbology: Only keep rows of this symbology, all rows if omitted

    Returns:
        Market data snapshot

    Raises:
        ValueError: If columns are missing or a ticker appears twice for the date
    """
    frame = pd.read_csv(path)
    missing = [c for c in CSV_COLUMNS if c not in frame.columns]
    if missing:
        raise ValueError(f"Quote file {path} is missing columns: {missing}")
    frame["Symbology"] = frame["Symbology"].astype(str)
    frame["Ticker"] = frame["Ticker"].astype(str).str.strip()

    dates = pd.to_datetime(frame["Valuation Date"]).dt.date
    selected = frame[dates == valuation_date]
    if symbology is not None:
        selected = selected[selected["Symbology"] == symbology]

    duplicated = selected["Ticker"][selected["Ticker"].duplicated()]
    if not duplicated.empty:
        raise ValueError(
            f"Duplicate quotes for {valuation_date} in {path}: {sorted(set(duplicated))}"
        )

    values: Dict[QuoteId, float] = {
        QuoteId(ticker): float(value)
        for ticker, value in zip(selected["Ticker"], selected["Value"])
    }
    return MarketData(valuation_date, values)


class CSVQuoteSource:
    """Load market quotes from one CSV file holding many valuation dates."""

    def __init__(self, path: Union[str, Path], symbology: Optional[str] = None):
        self.path = Path(path)
        self.symbology = symbology

    def load(self, valuation_date: date) -> MarketData:
        return load_quotes_csv(self.path, valuation_date, self.symbology)


class JSONQuoteSource:
    """
    Load market quotes from JSON files, one file per valuation date.

    Useful for testing, backtesting, or when database is unavailable.
    """

    def __init__(self, data_directory: Union[str, Path]):
        """
        Initialize JSON quote source.

        Args:
            data_directory: Directory containing ``<YYYY-MM-DD>_quotes.json`` files
        """
        self.data_directory = Path(data_directory)

    def _load_json_file(self, filepath: Path) -> Dict:
        with open(filepath, "r") as f:
            return json.load(f)

    def _get_quote_file(self, valuation_date: date) -> Path:
        return self.data_directory / f"{valuation_date.isoformat()}_quotes.json"

    def load(self, valuation_date: date) -> MarketData:
        """
        Load the quotes of one valuation date.

        The file holds ``{"quotes": [{"id": ..., "value": ...}, ...]}``.

        Raises:
            FileNotFoundError: If there is no file for the date
            ValueError: If the file is for another date or repeats a quote id
        """
        data = self._load_json_file(self._get_quote_file(valuation_date))
        file_date = data.get("valuation_date")
        if file_date is not None and date.fromisoformat(file_date) != valuation_date:
            raise ValueError(
                f"Quote file for {valuation_date} is dated {file_date}"
            )

        values: Dict[QuoteId, float] = {}
        for q in data.get("quotes", []):
            quote_id = QuoteId(q["id"])
            if quote_id in values:
                raise ValueError(f"Duplicate quote {quote_id} for {valuation_date}")
            values[quote_id] = float(q["value"])
        return MarketData(valuation_date, values)
