"""
IndicatorBoard - Pure Python record of the visual indicators placed by the simulator.

This module contains no Qt dependencies. The simulator decides *that* and
*what* to display (smoke, rotation arrows, multimeter text, LED brightness,
grey-out); views observe the board and draw the indicators themselves.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from .part import PartData

logger = logging.getLogger(__name__)


class IndicatorKind(Enum):
    """Kinds of visual indicators."""

    SMOKE = "smoke"
    ROTATION_CW = "rotation_cw"
    ROTATION_CCW = "rotation_ccw"
    SCREEN_TEXT = "screen_text"
    BRIGHTNESS = "brightness"
    GREY_OUT = "grey_out"


@dataclass(frozen=True)
class IndicatorData:
    """One indicator attached to a part in a view."""

    view: str
    part: PartData
    kind: IndicatorKind
    # Screen text for SCREEN_TEXT, brightness ratio for BRIGHTNESS
    value: Any = None


class IndicatorBoard:
    """
    Indicators currently shown, per view.

    Observer events:
        indicators_changed (str) - the name of the view whose indicators changed
        indicators_cleared (None) - every indicator of every view was removed
    """

    def __init__(self, view_names: tuple[str, ...] = ("schematic", "breadboard")):
        self._indicators: dict[str, list[IndicatorData]] = {name: [] for name in view_names}
        self._observers: list[Callable[[str, Any], None]] = []

    def add_observer(self, callback: Callable[[str, Any], None]) -> None:
        """Register a callback for indicator change events."""
        if callback not in self._observers:
            self._observers.append(callback)

    def remove_observer(self, callback: Callable[[str, Any], None]) -> None:
        """Unregister a previously registered callback."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self, event: str, data: Any) -> None:
        for observer in self._observers:
            try:
                observer(event, data)
            except (TypeError, AttributeError, RuntimeError) as e:
                logger.error("Error notifying observer: %s", e)

    @property
    def view_names(self) -> list[str]:
        return list(self._indicators)

    def add(self, view: str, part: PartData, kind: IndicatorKind, value: Any = None) -> IndicatorData:
        """Attach an indicator to a part. Brightness replaces any previous brightness."""
        indicators = self._indicators.setdefault(view, [])
        if kind is IndicatorKind.BRIGHTNESS:
            indicators[:] = [i for i in indicators if not (i.part is part and i.kind is kind)]
        indicator = IndicatorData(view=view, part=part, kind=kind, value=value)
        indicators.append(indicator)
        self._notify("indicators_changed", view)
        return indicator

    def remove_part(self, view: str, part: PartData) -> None:
        """Remove every indicator of one part in one view."""
        indicators = self._indicators.get(view, [])
        remaining = [i for i in indicators if i.part is not part]
        if len(remaining) != len(indicators):
            self._indicators[view] = remaining
            self._notify("indicators_changed", view)

    def clear(self) -> None:
        """Remove every indicator from every view (LED brightness included)."""
        for indicators in self._indicators.values():
            indicators.clear()
        self._notify("indicators_cleared", None)

    def indicators(self, view: Optional[str] = None) -> list[IndicatorData]:
        """All indicators of one view, or of every view when view is None."""
        if view is not None:
            return list(self._indicators.get(view, []))
        return [i for indicators in self._indicators.values() for i in indicators]

    def for_part(self, part: PartData, kind: Optional[IndicatorKind] = None) -> list[IndicatorData]:
        """Indicators attached to a part, optionally filtered by kind."""
        return [i for i in self.indicators() if i.part is part and (kind is None or i.kind is kind)]

    def count(self) -> int:
        return sum(len(indicators) for indicators in self._indicators.values())
