import json
from datetime import date

import pandas as pd
import pytest

from ratescal.data import CSVQuoteSource, JSONQuoteSource, QuoteSource, load_quotes_csv
from ratescal.errors import MissingMarketDataError
from ratescal.schema.quotes import MarketData, QuoteId

VALUATION_DATE = date(2024, 6, 3)


@pytest.fixture
def quote_csv(tmp_path):
    frame = pd.DataFrame(
        [
            {"Valuation Date": "2024-06-03", "Symbology": "BBG", "Ticker": "EUR-ESTR-1D", "Value": 0.039},
            {"Valuation Date": "2024-06-03", "Symbology": "BBG", "Ticker": "EUR-ESTR-OIS-1Y", "Value": 0.037},
            {"Valuation Date": "2024-06-03", "Symbology": "RIC", "Ticker": "EUR-E3M-FUT-1", "Value": 96.6},
            {"Valuation Date": "2024-06-04", "Symbology": "BBG", "Ticker": "EUR-ESTR-1D", "Value": 0.0391},
        ]
    )
    path = tmp_path / "quotes.csv"
    frame.to_csv(path, index=False)
    return path


def test_market_data_is_read_only():
    market_data = MarketData(VALUATION_DATE, {"A": 1.0})
    with pytest.raises(TypeError):
        market_data.values[QuoteId("B")] = 2.0

    bumped = market_data.with_bumped("A", 0.5)
    assert bumped.get_value("A") == 1.5
    assert market_data.get_value("A") == 1.0
    assert "A" not in market_data.without("A")
    assert len(market_data.with_value("B", 2.0)) == 2


def test_missing_quote_is_a_typed_key_error():
    market_data = MarketData(VALUATION_DATE, {"A": 1.0})
    assert market_data.find_value("B") is None
    with pytest.raises(MissingMarketDataError, match="'B'"):
        market_data.get_value("B")
    with pytest.raises(KeyError):
        market_data.with_bumped("B", 1.0)


def test_quote_id_must_not_be_empty():
    with pytest.raises(ValueError):
        QuoteId(" ")
    assert QuoteId.of("X") == QuoteId("X")
    assert str(QuoteId("X")) == "X"


def test_load_quotes_csv_selects_date_and_symbology(quote_csv):
    market_data = load_quotes_csv(quote_csv, VALUATION_DATE)
    assert market_data.valuation_date == VALUATION_DATE
    assert len(market_data) == 3
    assert market_data.get_value("EUR-ESTR-1D") == pytest.approx(0.039)

    bbg = CSVQuoteSource(quote_csv, symbology="BBG").load(VALUATION_DATE)
    assert set(bbg) == {QuoteId("EUR-ESTR-1D"), QuoteId("EUR-ESTR-OIS-1Y")}
    assert isinstance(CSVQuoteSource(quote_csv), QuoteSource)


def test_load_quotes_csv_rejects_bad_files(tmp_path):
    path = tmp_path / "bad.csv"
    pd.DataFrame([{"Valuation Date": "2024-06-03", "Ticker": "A"}]).to_csv(path, index=False)
    with pytest.raises(ValueError, match="missing columns"):
        load_quotes_csv(path, VALUATION_DATE)

    pd.DataFrame(
        [
            {"Valuation Date": "2024-06-03", "Symbology": "BBG", "Ticker": "A", "Value": 1.0},
            {"Valuation Date": "2024-06-03", "Symbology": "BBG", "Ticker": "A", "Value": 2.0},
        ]
    ).to_csv(path, index=False)
    with pytest.raises(ValueError, match="Duplicate quotes"):
        load_quotes_csv(path, VALUATION_DATE)


def test_json_quote_source(tmp_path):
    payload = {
        "valuation_date": "2024-06-03",
        "quotes": [{"id": "EUR-ESTR-1D", "value": 0.039}, {"id": "EUR-E3M-FUT-1", "value": 96.6}],
    }
    (tmp_path / "2024-06-03_quotes.json").write_text(json.dumps(payload))
    source = JSONQuoteSource(tmp_path)
    market_data = source.load(VALUATION_DATE)
    assert market_data.get_value("EUR-E3M-FUT-1") == pytest.approx(96.6)

    with pytest.raises(FileNotFoundError):
        source.load(date(2024, 6, 4))

    payload["valuation_date"] = "2024-06-05"
    (tmp_path / "2024-06-04_quotes.json").write_text(json.dumps(payload))
    with pytest.raises(ValueError, match="dated"):
        source.load(date(2024, 6, 4))
