"""
Pure Python data models for the breadboard simulator.

This package contains Qt-free data classes that represent circuit elements.
All models use only Python standard library types (no PyQt6 dependencies).
"""

from .constraint import ConstraintResult, ConstraintStatus, RotationDirection
from .indicator import IndicatorBoard, IndicatorData, IndicatorKind
from .net import CircuitSnapshot, NetData
from .part import (
    INSTANCE_TITLE_PLACEHOLDER,
    NON_PART_CAPABILITIES,
    CircuitView,
    ConnectorData,
    DeviceFamily,
    ItemCapability,
    PartData,
)

__all__ = [
    "CircuitSnapshot",
    "CircuitView",
    "ConnectorData",
    "ConstraintResult",
    "ConstraintStatus",
    "DeviceFamily",
    "INSTANCE_TITLE_PLACEHOLDER",
    "IndicatorBoard",
    "IndicatorData",
    "IndicatorKind",
    "ItemCapability",
    "NON_PART_CAPABILITIES",
    "NetData",
    "PartData",
    "RotationDirection",
]
