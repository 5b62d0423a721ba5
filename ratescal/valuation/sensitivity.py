"""
Point, parameter and market quote sensitivities.

A point sensitivity is the derivative of a priced quantity with respect to
the discount factor of a named curve at one date. Curves turn point
sensitivities into parameter sensitivities, and calibration Jacobians turn
those into sensitivities to the original market quotes.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ratescal.schema.quotes import QuoteId

if TYPE_CHECKING:
    from ratescal.curves.base import DatedParameterMetadata


@dataclass(frozen=True)
class PointSensitivity:
    """d value / d discount factor of ``curve_name`` at ``date``."""

    curve_name: str
    currency: str
    date: date
    sensitivity: float

    @property
    def key(self) -> Tuple[str, str, date]:
        return (self.curve_name, self.currency, self.date)

    def multiplied_by(self, factor: float) -> "PointSensitivity":
        return PointSensitivity(self.curve_name, self.currency, self.date, self.sensitivity * factor)


@dataclass(frozen=True)
class PointSensitivities:
    """Immutable collection of point sensitivities.

    ``normalized()`` merges entries with the same curve, currency and date and
    sorts them, which gives every pricing call a deterministic output order.
    """

    sensitivities: Tuple[PointSensitivity, ...] = ()

    @classmethod
    def empty(cls) -> "PointSensitivities":
        return cls(())

    @classmethod
    def of(cls, *sensitivities: PointSensitivity) -> "PointSensitivities":
        return cls(tuple(sensitivities))

    def __iter__(self) -> Iterator[PointSensitivity]:
        return iter(self.sensitivities)

    def __len__(self) -> int:
        return len(self.sensitivities)

    def __add__(self, other: "PointSensitivities") -> "PointSensitivities":
        return self.combined_with(other)

    def combined_with(self, other: "PointSensitivities") -> "PointSensitivities":
        return PointSensitivities(self.sensitivities + tuple(other))

    def multiplied_by(self, factor: float) -> "PointSensitivities":
        return PointSensitivities(tuple(s.multiplied_by(factor) for s in self.sensitivities))

    def normalized(self) -> "PointSensitivities":
        merged: Dict[Tuple[str, str, date], float] = {}
        for s in self.sensitivities:
            merged[s.key] = merged.get(s.key, 0.0) + s.sensitivity
        return PointSensitivities(
            tuple(PointSensitivity(k[0], k[1], k[2], merged[k]) for k in sorted(merged))
        )

    def for_curve(self, curve_name: str) -> "PointSensitivities":
        return PointSensitivities(tuple(s for s in self.sensitivities if s.curve_name == curve_name))

    def curve_names(self) -> List[str]:
        """Curve names in first-seen order."""
        names: List[str] = []
        for s in self.sensitivities:
            if s.curve_name not in names:
                names.append(s.curve_name)
        return names


@dataclass(frozen=True, eq=False)
class CurrencyParameterSensitivity:
    """Sensitivity to each parameter of one curve, in one currency."""

    curve_name: str
    currency: str
    sensitivity: np.ndarray
    metadata: Tuple["DatedParameterMetadata", ...] = ()

    def __post_init__(self):
        values = np.array(self.sensitivity, dtype=float)
        values.setflags(write=False)
        object.__setattr__(self, "sensitivity", values)

    @property
    def key(self) -> Tuple[str, str]:
        return (self.curve_name, self.currency)

    @property
    def parameter_count(self) -> int:
        return len(self.sensitivity)

    def plus(self, other: np.ndarray) -> "CurrencyParameterSensitivity":
        return CurrencyParameterSensitivity(
            self.curve_name, self.currency, self.sensitivity + other, self.metadata
        )

    def multiplied_by(self, factor: float) -> "CurrencyParameterSensitivity":
        return CurrencyParameterSensitivity(
            self.curve_name, self.currency, self.sensitivity * factor, self.metadata
        )


class CurrencyParameterSensitivities:
    """Parameter sensitivities keyed by (curve name, currency)."""

    def __init__(self, sensitivities: Iterable[CurrencyParameterSensitivity] = ()):
        self._sensitivities: Dict[Tuple[str, str], CurrencyParameterSensitivity] = {}
        for s in sensitivities:
            existing = self._sensitivities.get(s.key)
            self._sensitivities[s.key] = existing.plus(s.sensitivity) if existing else s

    def __iter__(self) -> Iterator[CurrencyParameterSensitivity]:
        return iter(self._sensitivities.values())

    def __len__(self) -> int:
        return len(self._sensitivities)

    def __contains__(self, key) -> bool:
        return key in self._sensitivities

    def find(self, curve_name: str, currency: str) -> Optional[CurrencyParameterSensitivity]:
        return self._sensitivities.get((curve_name, currency))

    def get(self, curve_name: str, currency: str) -> CurrencyParameterSensitivity:
        found = self.find(curve_name, currency)
        if found is None:
            raise KeyError(f"No parameter sensitivity for curve {curve_name} in {currency}")
        return found

    def combined_with(
        self, other: "CurrencyParameterSensitivities"
    ) -> "CurrencyParameterSensitivities":
        return CurrencyParameterSensitivities(list(self) + list(other))

    def multiplied_by(self, factor: float) -> "CurrencyParameterSensitivities":
        return CurrencyParameterSensitivities(s.multiplied_by(factor) for s in self)

    def total(self) -> Dict[str, float]:
        """Sum of all parameter sensitivities per currency."""
        totals: Dict[str, float] = {}
        for s in self:
            totals[s.currency] = totals.get(s.currency, 0.0) + float(s.sensitivity.sum())
        return totals

    def to_frame(self) -> pd.DataFrame:
        rows = []
        for s in self:
            for i, value in enumerate(s.sensitivity):
                meta = s.metadata[i] if i < len(s.metadata) else None
                rows.append(
                    {
                        "curve": s.curve_name,
                        "currency": s.currency,
                        "parameter": i,
                        "label": str(meta) if meta else "",
                        "date": meta.date if meta else None,
                        "sensitivity": float(value),
                    }
                )
        return pd.DataFrame(
            rows, columns=["curve", "currency", "parameter", "label", "date", "sensitivity"]
        )


@dataclass(frozen=True)
class MarketQuoteSensitivities:
    """Sensitivity to each market quote, keyed by (quote id, currency)."""

    sensitivities: Dict[Tuple[QuoteId, str], float] = field(default_factory=dict)

    def __iter__(self) -> Iterator[Tuple[QuoteId, str]]:
        return iter(self.sensitivities)

    def __len__(self) -> int:
        return len(self.sensitivities)

    def items(self):
        return self.sensitivities.items()

    def get(self, quote_id, currency: str) -> float:
        """Sensitivity to one quote, zero when the quote does not contribute."""
        return self.sensitivities.get((QuoteId.of(quote_id), currency), 0.0)

    def quote_ids(self) -> Sequence[QuoteId]:
        return sorted({quote_id for quote_id, _ in self.sensitivities})

    def total(self, currency: Optional[str] = None) -> float:
        return sum(
            value
            for (_, ccy), value in self.sensitivities.items()
            if currency is None or ccy == currency
        )

    def combined_with(self, other: "MarketQuoteSensitivities") -> "MarketQuoteSensitivities":
        merged = dict(self.sensitivities)
        for key, value in other.items():
            merged[key] = merged.get(key, 0.0) + value
        return MarketQuoteSensitivities(merged)

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {"quote_id": str(quote_id), "currency": ccy, "sensitivity": value}
            for (quote_id, ccy), value in sorted(self.sensitivities.items())
        ]
        return pd.DataFrame(rows, columns=["quote_id", "currency", "sensitivity"])
