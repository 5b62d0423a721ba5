"""
Sensitivity of calibrated curve parameters to market quotes.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from ratescal.schema.quotes import QuoteId


@dataclass(frozen=True, eq=False)
class JacobianCalibrationMatrix:
    """d parameter / d quote for one calibrated curve.

    Rows follow the curve parameters, columns follow ``quote_ids``. The quote
    ids cover the curve's own nodes and every quote of the curves it was
    calibrated against.
    """

    curve_name: str
    quote_ids: Tuple[QuoteId, ...]
    matrix: np.ndarray

    def __post_init__(self):
        matrix = np.array(self.matrix, dtype=float)
        if matrix.ndim != 2 or matrix.shape[1] != len(self.quote_ids):
            raise ValueError(
                f"Jacobian for {self.curve_name} must have one column per quote id, "
                f"got shape {matrix.shape} for {len(self.quote_ids)} quotes"
            )
        matrix.setflags(write=False)
        object.__setattr__(self, "quote_ids", tuple(QuoteId.of(q) for q in self.quote_ids))
        object.__setattr__(self, "matrix", matrix)

    @property
    def parameter_count(self) -> int:
        return self.matrix.shape[0]

    def expanded(self, quote_ids: Sequence[QuoteId]) -> np.ndarray:
        """Matrix re-indexed onto a larger ordered set of quote ids."""
        position = {q: j for j, q in enumerate(quote_ids)}
        result = np.zeros((self.parameter_count, len(quote_ids)))
        for j, quote_id in enumerate(self.quote_ids):
            result[:, position[quote_id]] += self.matrix[:, j]
        return result
