"""
simulation/net_mapper.py

Maps connectors to the net numbers used in the netlist.
"""

import logging
from typing import Iterable

from models.part import ConnectorData

logger = logging.getLogger(__name__)

GROUND_NET = 0


class NetMapper:
    """
    Connector -> net index lookup for one simulation run.

    The index of a net is its position in the ordered net list handed over
    by the editor; net 0 is ground. Connectors that are not in any net are
    treated as grounded.
    """

    def __init__(self, nets: Iterable[Iterable[ConnectorData]]):
        self._net_of: dict[ConnectorData, int] = {}
        self._net_count = 0
        for index, net in enumerate(nets):
            self._net_count = index + 1
            for connector in net:
                previous = self._net_of.get(connector)
                if previous is not None and previous != index:
                    logger.debug("Connector %r listed in nets %d and %d, keeping %d", connector, previous, index, index)
                self._net_of[connector] = index

    def net_of(self, connector: ConnectorData) -> int:
        """Return the net index of a connector (ground if unknown)."""
        return self._net_of.get(connector, GROUND_NET)

    def __contains__(self, connector: ConnectorData) -> bool:
        return connector in self._net_of

    def __len__(self) -> int:
        return len(self._net_of)

    @property
    def net_count(self) -> int:
        return self._net_count
