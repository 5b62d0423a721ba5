"""Curves, curve nodes and curve group definitions."""

# Curve representation
from .base import DatedParameterMetadata, ValueType
from .nodal import InterpolatedNodalCurve
from .jacobian import JacobianCalibrationMatrix

# Nodes and definitions
from .nodes import (
    CURVE_NODE_TYPES,
    CurveNode,
    CurveNodeDate,
    CurveNodeDateType,
    FixedIborSwapCurveNode,
    FixedOvernightSwapCurveNode,
    FraCurveNode,
    IborFixingDepositCurveNode,
    IborFutureCurveNode,
    AbsoluteIborFutureCurveNode,
    IborIborSwapCurveNode,
    NodeRequirements,
    TermDepositCurveNode,
)
from .definition import CurveDefinition, CurveGroupDefinition

# Curve lookup
from .provider import RatesProvider

__all__ = [
    "ValueType",
    "DatedParameterMetadata",
    "InterpolatedNodalCurve",
    "JacobianCalibrationMatrix",
    "CurveNode",
    "CurveNodeDate",
    "CurveNodeDateType",
    "NodeRequirements",
    "TermDepositCurveNode",
    "IborFixingDepositCurveNode",
    "FraCurveNode",
    "IborFutureCurveNode",
    "AbsoluteIborFutureCurveNode",
    "FixedOvernightSwapCurveNode",
    "FixedIborSwapCurveNode",
    "IborIborSwapCurveNode",
    "CURVE_NODE_TYPES",
    "CurveDefinition",
    "CurveGroupDefinition",
    "RatesProvider",
]
