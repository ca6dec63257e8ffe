"""
NetData - Pure Python data model for electrical nets.

This module contains no Qt dependencies. A net is a set of connectors that
are electrically connected (share the same voltage). The editor hands the
simulator an ordered list of nets; a net's position in that list is the
node number used in the netlist, with net 0 being ground.
"""

from dataclasses import dataclass, field

from .part import ConnectorData, PartData


@dataclass
class NetData:
    """
    Pure Python data class representing an electrical net.

    Connectors are kept in insertion order so that the same circuit always
    produces the same mapping.
    """

    connectors: list[ConnectorData] = field(default_factory=list)

    def add_connector(self, connector: ConnectorData) -> None:
        """Add a connector to this net (ignored if already present)."""
        if not any(c is connector for c in self.connectors):
            self.connectors.append(connector)

    def __iter__(self):
        return iter(self.connectors)

    def __len__(self) -> int:
        return len(self.connectors)

    def is_empty(self) -> bool:
        return len(self.connectors) == 0

    def __repr__(self) -> str:
        return f"NetData(connectors={len(self.connectors)})"


@dataclass
class CircuitSnapshot:
    """
    Everything the editor provides for one simulation run.

    Attributes:
        netlist: SPICE netlist text to load in the engine.
        nets: Ordered nets; index 0 is the ground net.
        parts: Parts of the primary view that appear in the netlist.
    """

    netlist: str
    nets: list[NetData] = field(default_factory=list)
    parts: list[PartData] = field(default_factory=list)

    def simulable_parts(self) -> list[PartData]:
        """Parts with a SPICE template and at least one wired connector."""
        return [part for part in self.parts if part.has_spice_template() and part.is_connected()]
