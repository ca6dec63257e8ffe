"""
simulation/view_bridge.py

Pairs each simulated part with its counterpart in the second editor view.
"""

import logging
from typing import Iterable, Optional

from models.part import PartData

from .exceptions import AmbiguousTitleError

logger = logging.getLogger(__name__)


class ViewBridge:
    """
    Part -> counterpart lookup for one simulation run.

    Parts are paired by exact (case-sensitive) instance title. A title that
    matches several items of the second view is an error, since the fault
    would otherwise be drawn on an arbitrary one of them.
    """

    def __init__(self, simulated_parts: Iterable[PartData], other_view_items: Iterable[PartData]):
        by_title: dict[str, list[PartData]] = {}
        for item in other_view_items:
            by_title.setdefault(item.instance_title, []).append(item)

        self._counterparts: dict[PartData, PartData] = {}
        for part in simulated_parts:
            candidates = by_title.get(part.instance_title, [])
            if len(candidates) > 1:
                raise AmbiguousTitleError(part.instance_title, len(candidates))
            if candidates:
                self._counterparts[part] = candidates[0]
            else:
                logger.debug("No counterpart for %s in the second view", part.instance_title)

    def counterpart(self, part: PartData) -> Optional[PartData]:
        """Return the counterpart of a part, or None if it has none."""
        return self._counterparts.get(part)

    def counterparts(self) -> list[PartData]:
        return list(self._counterparts.values())

    def __contains__(self, part: PartData) -> bool:
        return part in self._counterparts

    def __len__(self) -> int:
        return len(self._counterparts)
