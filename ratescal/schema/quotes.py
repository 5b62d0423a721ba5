"""
Market quote identifiers and immutable market data snapshots.
"""

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Union

from ratescal.errors import MissingMarketDataError


@dataclass(frozen=True, order=True)
class QuoteId:
    """Identifier of one market observable, e.g. ``QuoteId("EUR-IRS6M-10Y")``."""

    value: str

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise ValueError("Quote id must not be empty")

    @classmethod
    def of(cls, value: Union[str, "QuoteId"]) -> "QuoteId":
        return value if isinstance(value, QuoteId) else cls(value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, eq=False)
class MarketData:
    """Quote values observed on one valuation date.

    The snapshot is read-only. Scenario and bump helpers return new
    instances.
    """

    valuation_date: date
    values: Mapping[QuoteId, float] = field(default_factory=dict)

    def __post_init__(self):
        frozen = MappingProxyType({QuoteId.of(k): float(v) for k, v in self.values.items()})
        object.__setattr__(self, "values", frozen)

    @classmethod
    def of(cls, valuation_date: date, values: Mapping[Union[str, QuoteId], float]) -> "MarketData":
        return cls(valuation_date, values)

    def __contains__(self, quote_id) -> bool:
        return QuoteId.of(quote_id) in self.values

    def __iter__(self) -> Iterator[QuoteId]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def find_value(self, quote_id: Union[str, QuoteId]) -> Optional[float]:
        """Quote value, or ``None`` when the quote is not in the snapshot."""
        return self.values.get(QuoteId.of(quote_id))

    def get_value(self, quote_id: Union[str, QuoteId]) -> float:
        """Quote value, raising :class:`MissingMarketDataError` when absent."""
        value = self.find_value(quote_id)
        if value is None:
            raise MissingMarketDataError(
                QuoteId.of(quote_id),
                f"No market data available for quote '{quote_id}' on {self.valuation_date}",
            )
        return value

    def with_value(self, quote_id: Union[str, QuoteId], value: float) -> "MarketData":
        """New snapshot with one quote replaced or added."""
        updated: Dict[QuoteId, float] = dict(self.values)
        updated[QuoteId.of(quote_id)] = value
        return MarketData(self.valuation_date, updated)

    def with_bumped(self, quote_id: Union[str, QuoteId], shift: float) -> "MarketData":
        """New snapshot with one existing quote shifted by ``shift``."""
        return self.with_value(quote_id, self.get_value(quote_id) + shift)

    def without(self, quote_id: Union[str, QuoteId]) -> "MarketData":
        """New snapshot with one quote removed."""
        key = QuoteId.of(quote_id)
        return MarketData(self.valuation_date, {k: v for k, v in self.values.items() if k != key})
