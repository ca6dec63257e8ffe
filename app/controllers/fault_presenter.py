"""
FaultPresenter - Turns constraint results into visual indicators.

This module contains no Qt dependencies. Indicators are recorded on an
IndicatorBoard; the editor views observe the board and draw them.
"""

import logging
from typing import Iterable, Optional

from models.constraint import ConstraintResult, RotationDirection
from models.indicator import IndicatorBoard, IndicatorKind
from models.part import CircuitView, PartData

logger = logging.getLogger(__name__)

_ROTATION_INDICATORS = {
    RotationDirection.CLOCKWISE: IndicatorKind.ROTATION_CW,
    RotationDirection.COUNTER_CLOCKWISE: IndicatorKind.ROTATION_CCW,
}


class FaultPresenter:
    """
    Places smoke, rotation, screen-text, brightness and grey-out indicators.

    Smoke, rotation and screen text are shown in both views. LED brightness
    only makes sense on the breadboard, so it goes on the counterpart.
    """

    def __init__(self, board: Optional[IndicatorBoard] = None):
        self.board = board or IndicatorBoard()

    def remove_all(self) -> None:
        """Remove every indicator (and LED brightness) from both views."""
        self.board.clear()

    def clear_effects(self, part: PartData, counterpart: Optional[PartData] = None) -> None:
        """Remove the indicators of one part before it is evaluated again."""
        self.board.remove_part(part.view, part)
        if counterpart is not None:
            self.board.remove_part(counterpart.view, counterpart)

    def grey_out_non_simulated(
        self,
        primary_view: CircuitView,
        secondary_view: CircuitView,
        simulated_parts: Iterable[PartData],
        counterparts: Iterable[PartData],
    ) -> int:
        """
        Grey out the parts of both views that are not being simulated.

        Wires, labels, boards and other non-part items are left alone.
        Returns the number of items greyed out.
        """
        count = 0
        for view, active in ((primary_view, simulated_parts), (secondary_view, counterparts)):
            active_ids = {id(part) for part in active}
            for item in view.items:
                if id(item) in active_ids or not item.is_greyable():
                    continue
                self.board.add(view.name, item, IndicatorKind.GREY_OUT)
                count += 1
        logger.debug("Greyed out %d items", count)
        return count

    def apply(self, part: PartData, counterpart: Optional[PartData], result: ConstraintResult) -> None:
        """Show the outcome of one part's evaluation."""
        targets = [p for p in (part, counterpart) if p is not None]

        if result.is_out_of_spec:
            logger.debug("%s out of spec: %s", part.instance_title, result.reason)
            for target in targets:
                self.board.add(target.view, target, IndicatorKind.SMOKE, result.reason)

        if result.brightness is not None and counterpart is not None:
            self.board.add(counterpart.view, counterpart, IndicatorKind.BRIGHTNESS, result.brightness)

        if result.rotation is not None:
            kind = _ROTATION_INDICATORS[result.rotation]
            for target in targets:
                self.board.add(target.view, target, kind)

        if result.display_text is not None:
            for target in targets:
                self.board.add(target.view, target, IndicatorKind.SCREEN_TEXT, result.display_text)
