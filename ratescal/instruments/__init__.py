"""Conventions of the calibration instruments."""

from .deposit import (
    EUR_DEPOSIT_T0,
    EUR_DEPOSIT_T2,
    EURIBOR_3M_FIXING_DEPOSIT,
    EURIBOR_6M_FIXING_DEPOSIT,
    GBP_DEPOSIT_T0,
    USD_DEPOSIT_T0,
    IborFixingDepositConvention,
    TermDepositConvention,
)
from .fra import EURIBOR_3M_FRA, EURIBOR_6M_FRA, FraConvention
from .future import (
    EUR_EURIBOR_3M_IMM_FUTURE,
    DateSequence,
    IborFutureConvention,
    imm_date_in_month,
    next_imm_date,
    nth_imm_date,
    third_wednesday,
)
from .swap import (
    EUR_EURIBOR_3M_EURIBOR_6M,
    EUR_FIXED_1Y_ESTR_OIS,
    EUR_FIXED_1Y_EURIBOR_3M,
    EUR_FIXED_1Y_EURIBOR_6M,
    EURIBOR_3M_FLOATING,
    EURIBOR_6M_FLOATING,
    EUR_IRS_FIXED,
    GBP_FIXED_1Y_SONIA_OIS,
    USD_FIXED_1Y_SOFR_OIS,
    IborIborSwapConvention,
    LegType,
    SwapConvention,
    SwapLegConvention,
)

__all__ = [
    "TermDepositConvention",
    "IborFixingDepositConvention",
    "FraConvention",
    "IborFutureConvention",
    "DateSequence",
    "third_wednesday",
    "next_imm_date",
    "nth_imm_date",
    "imm_date_in_month",
    "LegType",
    "SwapLegConvention",
    "SwapConvention",
    "IborIborSwapConvention",
    "EUR_DEPOSIT_T0",
    "EUR_DEPOSIT_T2",
    "USD_DEPOSIT_T0",
    "GBP_DEPOSIT_T0",
    "EURIBOR_3M_FIXING_DEPOSIT",
    "EURIBOR_6M_FIXING_DEPOSIT",
    "EURIBOR_3M_FRA",
    "EURIBOR_6M_FRA",
    "EUR_EURIBOR_3M_IMM_FUTURE",
    "EURIBOR_3M_FLOATING",
    "EURIBOR_6M_FLOATING",
    "EUR_IRS_FIXED",
    "EUR_FIXED_1Y_ESTR_OIS",
    "USD_FIXED_1Y_SOFR_OIS",
    "GBP_FIXED_1Y_SONIA_OIS",
    "EUR_FIXED_1Y_EURIBOR_3M",
    "EUR_FIXED_1Y_EURIBOR_6M",
    "EUR_EURIBOR_3M_EURIBOR_6M",
]
