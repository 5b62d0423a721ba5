"""
Forward rate agreement conventions.
"""

from dataclasses import dataclass

from ratescal.conventions.indices import EUR_EURIBOR_3M, EUR_EURIBOR_6M, RateIndex


@dataclass(frozen=True)
class FraConvention:
    """FRA on a term index; spot lag and accrual follow the index."""

    index: RateIndex

    @property
    def name(self) -> str:
        return f"{self.index.name}-FRA"

    @property
    def currency(self) -> str:
        return self.index.currency

    @property
    def spot_lag_days(self) -> int:
        return self.index.fixing_lag_days


EURIBOR_3M_FRA = FraConvention(EUR_EURIBOR_3M)
EURIBOR_6M_FRA = FraConvention(EUR_EURIBOR_6M)
