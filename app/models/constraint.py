"""
ConstraintResult - Pure Python record of how a simulated part is operating.

This module contains no Qt dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ConstraintStatus(Enum):
    WITHIN_SPEC = "within_spec"
    OUT_OF_SPEC = "out_of_spec"
    DISPLAY = "display"


class RotationDirection(Enum):
    CLOCKWISE = "cw"
    COUNTER_CLOCKWISE = "ccw"


@dataclass
class ConstraintResult:
    """
    Outcome of checking one part against its ratings.

    Besides the status, a result may carry what the part shows while
    working: the text on a multimeter screen, the brightness of an LED
    (0.0 to 1.0) or the direction a motor turns.
    """

    status: ConstraintStatus
    reason: str = ""
    display_text: Optional[str] = None
    brightness: Optional[float] = None
    rotation: Optional[RotationDirection] = None

    @property
    def is_out_of_spec(self) -> bool:
        return self.status is ConstraintStatus.OUT_OF_SPEC

    @classmethod
    def within_spec(cls, **kwargs) -> "ConstraintResult":
        return cls(ConstraintStatus.WITHIN_SPEC, **kwargs)

    @classmethod
    def out_of_spec(cls, reason: str, **kwargs) -> "ConstraintResult":
        return cls(ConstraintStatus.OUT_OF_SPEC, reason=reason, **kwargs)

    @classmethod
    def display(cls, text: str) -> "ConstraintResult":
        return cls(ConstraintStatus.DISPLAY, display_text=text)
