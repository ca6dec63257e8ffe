"""
simulation/quantity_extractor.py

Reads voltages, currents and powers of parts from the engine result vectors.

ngspice names its vectors as follows:
    v(<net>)             voltage of a net (net 0 is ground and has no vector)
    @<device>[i]         current through R, C, L, V, E, F, G, H and I devices
    @<device>[id]        current through a diode
    @<device>[ib|ic|ie]  base/collector/emitter current of a transistor
    @<device>[p]         power of a device
Vectors that do not exist read as 0.0.
"""

import logging
import math
from enum import Enum

from models.part import INSTANCE_TITLE_PLACEHOLDER, ConnectorData, PartData

from .engine_adapter import EngineAdapter
from .exceptions import InvalidDeviceError, PropertyValueError, TemplateError
from .format_utils import convert_from_power_prefix
from .net_mapper import GROUND_NET, NetMapper

logger = logging.getLogger(__name__)

# Device letters whose current is exposed as "[i]"
_BRANCH_CURRENT_DEVICES = frozenset("rclvefghi")

NO_LIMIT = math.inf


class TransistorLeg(Enum):
    BASE = "ib"
    COLLECTOR = "ic"
    EMITTER = "ie"


def device_type_code(part: PartData) -> str:
    """
    Return the SPICE device letter of a part, lower-cased.

    The letter is the character just before the instance title placeholder
    of the part's SPICE line, e.g. "d" for "D{instanceTitle} ...".

    Raises:
        TemplateError: the placeholder is missing or has nothing before it.
    """
    index = part.spice.find(INSTANCE_TITLE_PLACEHOLDER)
    if index > 0:
        return part.spice[index - 1].lower()
    raise TemplateError(
        f"Error getting the device type. The type is not recognized. "
        f"Part={part.instance_title}, Spice line={part.spice}"
    )


def max_property_value(part: PartData, property_name: str) -> float:
    """
    Return the numeric value of a rating property such as "power" or "voltage".

    An empty property means the part declares no limit (infinity).

    Raises:
        PropertyValueError: the value cannot be read as a number.
    """
    text = part.get_property(property_name)
    if not text.strip():
        return NO_LIMIT
    symbol = part.get_symbol(property_name)
    try:
        return convert_from_power_prefix(text, symbol)
    except ValueError as e:
        raise PropertyValueError(
            f"Property '{property_name}' of {part.instance_title} is not a number: {text!r}"
        ) from e


class QuantityExtractor:
    """Physical quantities of parts for one simulation run."""

    def __init__(self, adapter: EngineAdapter, net_mapper: NetMapper):
        self._adapter = adapter
        self._nets = net_mapper

    def vector_value(self, name: str, default: float = 0.0) -> float:
        """Return the first element of a result vector, or default if it is empty."""
        values = self._adapter.fetch_vector(name)
        if not values:
            return default
        return values[0]

    def net_voltage(self, net: int) -> float:
        if net == GROUND_NET:
            return 0.0
        return self.vector_value(f"v({net})")

    def voltage_between(self, c0: ConnectorData, c1: ConnectorData) -> float:
        """Voltage of connector c0 relative to connector c1."""
        return self.net_voltage(self._nets.net_of(c0)) - self.net_voltage(self._nets.net_of(c1))

    def power(self, part: PartData, subpart: str = "") -> float:
        """
        Power of a part.

        Parts made of several spice devices name them with a suffix, e.g. a
        potentiometer R1 is made of R1A and R1B; pass "A" to get the power
        of R1A.
        """
        instance = (part.instance_title + subpart).lower()
        return self.vector_value(f"@{instance}[p]")

    def current(self, part: PartData, subpart: str = "") -> float:
        """
        Current through a part (or one of its subparts).

        Raises:
            TemplateError: the part's device letter cannot be read.
            InvalidDeviceError: the device type does not expose a current.
        """
        instance = (part.instance_title + subpart).lower()
        device = device_type_code(part)

        # LED1 in the editor is DLED1 in ngspice, but R1 stays R1
        if instance.startswith(device):
            name = f"@{instance}"
        else:
            name = f"@{device}{instance}"

        if device == "d":
            name += "[id]"
        elif device in _BRANCH_CURRENT_DEVICES:
            name += "[i]"
        else:
            raise InvalidDeviceError(
                f"Error getting the current of the device. The device type is not recognized. "
                f"First letter is {device}"
            )
        return self.vector_value(name)

    def transistor_current(self, spice_name: str, leg: TransistorLeg) -> float:
        """
        Current of one leg of a transistor, given its ngspice name (e.g. "q1").

        Raises:
            InvalidDeviceError: the name is not a transistor or the leg is unknown.
        """
        if not spice_name or spice_name[0].lower() != "q":
            raise InvalidDeviceError(
                f"Error getting the current of a transistor. The device is not a transistor, "
                f"its first letter is not a Q. Name: {spice_name}"
            )
        if not isinstance(leg, TransistorLeg):
            raise InvalidDeviceError(
                f"Error getting the current of a transistor. The transistor leg is not recognized. Leg: {leg}"
            )
        return self.vector_value(f"@{spice_name}[{leg.value}]")
