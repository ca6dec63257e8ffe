"""
PartData - Pure Python data model for circuit parts and their connectors.

This module contains no Qt dependencies. A part is one item of an editor
view: a simulable component (resistor, LED, multimeter, ...) or a non-part
scene item (wire, label, breadboard, ...). Non-part items are identified by
their capability tags rather than by their Python type.

Families are free text at the editor boundary ("Ceramic Capacitor",
"Red (633nm) LED", ...). DeviceFamily.from_text() turns them into the closed
set of families the constraint rules know about.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

# Placeholder the netlist template uses for the part's instance title.
# The character just before it is the SPICE device letter.
INSTANCE_TITLE_PLACEHOLDER = "{instanceTitle}"


class DeviceFamily(Enum):
    """Families of parts that have constraint rules."""

    CAPACITOR = "capacitor"
    DIODE = "diode"
    LED = "led"
    RESISTOR = "resistor"
    MULTIMETER = "multimeter"
    DC_MOTOR = "dc motor"
    IR_SENSOR = "ir sensor"
    BATTERY = "battery"
    POTENTIOMETER = "potentiometer"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_text(cls, family: str) -> "DeviceFamily":
        """Classify a free-text family. First match wins."""
        text = (family or "").lower()
        for keywords, device_family in _FAMILY_KEYWORDS:
            if any(keyword in text for keyword in keywords):
                if device_family is cls.LED and any(word in text for word in _LED_ARRAY_WORDS):
                    return cls.UNSUPPORTED
                return device_family
        return cls.UNSUPPORTED


# Order matters: "potentiometer" must not be caught by an earlier entry, and
# "diode" is checked before "led" as the editor does.
_FAMILY_KEYWORDS = [
    (("capacitor",), DeviceFamily.CAPACITOR),
    (("diode",), DeviceFamily.DIODE),
    (("led",), DeviceFamily.LED),
    (("resistor",), DeviceFamily.RESISTOR),
    (("multimeter",), DeviceFamily.MULTIMETER),
    (("dc motor",), DeviceFamily.DC_MOTOR),
    (("line sensor", "distance sensor"), DeviceFamily.IR_SENSOR),
    (("battery", "voltage source"), DeviceFamily.BATTERY),
    (("potentiometer", "sparkfun trimpot"), DeviceFamily.POTENTIOMETER),
]

# LED displays and matrices have no single-diode spice line
_LED_ARRAY_WORDS = ("matrix", "display")


class ItemCapability(Enum):
    """Tags carried by scene items."""

    WIRE = "wire"
    LABEL = "label"
    NOTE = "note"
    BOARD = "board"
    SYMBOL = "symbol"
    RULER = "ruler"
    SIMULABLE = "simulable"


# Items with any of these tags are never greyed out
NON_PART_CAPABILITIES = frozenset(
    {
        ItemCapability.WIRE,
        ItemCapability.LABEL,
        ItemCapability.NOTE,
        ItemCapability.BOARD,
        ItemCapability.SYMBOL,
        ItemCapability.RULER,
    }
)


@dataclass(eq=False)
class ConnectorData:
    """
    A terminal of a part.

    Connectors compare by identity: two parts can both have a "+" connector.
    """

    shared_name: str = ""
    shared_description: str = ""
    # Whether a wire is attached to this connector
    connected: bool = False

    def matches(self, *labels: str) -> bool:
        """Return True if the shared name or description equals any label (case-insensitive)."""
        wanted = {label.lower() for label in labels}
        return self.shared_name.lower() in wanted or self.shared_description.lower() in wanted

    def __repr__(self) -> str:
        return f"ConnectorData({self.shared_name!r}, connected={self.connected})"


@dataclass(eq=False)
class PartData:
    """
    Pure Python data class representing one item of an editor view.

    Parts compare by identity so they can be used as dictionary keys even
    when two views hold parts with the same title.
    """

    instance_title: str
    family: str = ""
    # Declared property values, e.g. {"power": "250mW"}
    properties: dict[str, str] = field(default_factory=dict)
    # Unit symbol per property name, e.g. {"power": "W"}
    property_symbols: dict[str, str] = field(default_factory=dict)
    connectors: list[ConnectorData] = field(default_factory=list)
    # SPICE template line, e.g. "R{instanceTitle} {net connector0} {net connector1} {resistance}"
    spice: str = ""
    capabilities: frozenset = frozenset({ItemCapability.SIMULABLE})
    view: str = ""

    @property
    def device_family(self) -> DeviceFamily:
        return DeviceFamily.from_text(self.family)

    def get_property(self, name: str) -> str:
        """Return a property value (case-insensitive name), or an empty string."""
        if name in self.properties:
            return self.properties[name]
        lowered = name.lower()
        for key, value in self.properties.items():
            if key.lower() == lowered:
                return value
        return ""

    def get_symbol(self, name: str) -> str:
        """Return the unit symbol declared for a property (case-insensitive name)."""
        lowered = name.lower()
        for key, symbol in self.property_symbols.items():
            if key.lower() == lowered:
                return symbol
        return ""

    def find_connector(self, *labels: str) -> Optional[ConnectorData]:
        """Return the last connector whose shared name or description matches a label."""
        found = None
        for connector in self.connectors:
            if connector.matches(*labels):
                found = connector
        return found

    def has_spice_template(self) -> bool:
        return bool(self.spice.strip())

    def is_connected(self) -> bool:
        """True if at least one connector is wired."""
        return any(connector.connected for connector in self.connectors)

    def is_greyable(self) -> bool:
        """True for real parts; wires, labels, boards, etc. are never greyed out."""
        return not (set(self.capabilities) & NON_PART_CAPABILITIES)

    def __repr__(self) -> str:
        return f"PartData({self.instance_title!r}, family={self.family!r})"


@dataclass
class CircuitView:
    """A named editor view (e.g. "schematic", "breadboard") and its scene items."""

    name: str
    items: list[PartData] = field(default_factory=list)

    def add(self, part: PartData) -> PartData:
        part.view = self.name
        self.items.append(part)
        return part
