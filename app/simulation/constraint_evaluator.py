"""
simulation/constraint_evaluator.py

Checks simulated parts against their ratings.

Each device family has one rule. A rule reads the quantities it needs from
the QuantityExtractor and the part's declared maxima and returns a
ConstraintResult, or None when the part cannot be checked (e.g. one of the
connectors it needs is missing from the part definition).
"""

import logging
from typing import Callable, Optional

from models.constraint import ConstraintResult, RotationDirection
from models.part import DeviceFamily, PartData

from .format_utils import format_value
from .multimeter import read_multimeter
from .quantity_extractor import QuantityExtractor, TransistorLeg, max_property_value

logger = logging.getLogger(__name__)

# Fraction of the short-circuit current a battery may deliver
BATTERY_SAFETY_MARGIN = 0.1

Rule = Callable[[PartData], Optional[ConstraintResult]]


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


class ConstraintEvaluator:
    """Per-family rating checks for one simulation run."""

    def __init__(self, extractor: QuantityExtractor, battery_safety_margin: float = BATTERY_SAFETY_MARGIN):
        self.extractor = extractor
        self.battery_safety_margin = battery_safety_margin
        self._rules: dict[DeviceFamily, Rule] = {
            DeviceFamily.CAPACITOR: self.check_capacitor,
            DeviceFamily.DIODE: self.check_diode,
            DeviceFamily.LED: self.check_led,
            DeviceFamily.RESISTOR: self.check_resistor,
            DeviceFamily.MULTIMETER: self.check_multimeter,
            DeviceFamily.DC_MOTOR: self.check_dc_motor,
            DeviceFamily.IR_SENSOR: self.check_ir_sensor,
            DeviceFamily.BATTERY: self.check_battery,
            DeviceFamily.POTENTIOMETER: self.check_potentiometer,
        }

    def evaluate(self, part: PartData) -> Optional[ConstraintResult]:
        """
        Check one part.

        Returns None for parts without a rule or whose connectors cannot be
        resolved.

        Raises:
            PartEvaluationError: the part's definition is malformed.
        """
        rule = self._rules.get(part.device_family)
        if rule is None:
            logger.debug("No rule for %s (family %r)", part.instance_title, part.family)
            return None
        return rule(part)

    # --- Rules ---

    def check_capacitor(self, part: PartData) -> Optional[ConstraintResult]:
        """
        Ceramic (bidirectional) capacitors may take their rated voltage in
        either direction. Electrolytic and tantalum capacitors must not be
        reverse biased and are only allowed half their rated voltage.
        """
        pos_leg = part.find_connector("+")
        neg_leg = part.find_connector("-")
        if pos_leg is None or neg_leg is None:
            return None

        max_v = max_property_value(part, "voltage")
        v = self.extractor.voltage_between(pos_leg, neg_leg)
        logger.debug("Capacitor %s: voltage=%s, max=%s", part.instance_title, v, max_v)

        if "bidirectional" in part.family.lower():
            if abs(v) > max_v:
                return ConstraintResult.out_of_spec(
                    f"voltage {format_value(v, 'V')} exceeds {format_value(max_v, 'V')}"
                )
        else:
            if v < 0:
                return ConstraintResult.out_of_spec(f"reverse voltage {format_value(v, 'V')}")
            if v > max_v / 2:
                return ConstraintResult.out_of_spec(
                    f"voltage {format_value(v, 'V')} exceeds half the rating {format_value(max_v, 'V')}"
                )
        return ConstraintResult.within_spec()

    def _check_power(self, part: PartData, power: float) -> ConstraintResult:
        max_power = max_property_value(part, "power")
        logger.debug("%s: power=%s, max=%s", part.instance_title, power, max_power)
        if power > max_power:
            return ConstraintResult.out_of_spec(
                f"power {format_value(power, 'W')} exceeds {format_value(max_power, 'W')}"
            )
        return ConstraintResult.within_spec()

    def check_diode(self, part: PartData) -> Optional[ConstraintResult]:
        return self._check_power(part, self.extractor.power(part))

    def check_resistor(self, part: PartData) -> Optional[ConstraintResult]:
        return self._check_power(part, self.extractor.power(part))

    def check_potentiometer(self, part: PartData) -> Optional[ConstraintResult]:
        """A potentiometer is two resistors, A and B, sharing the wiper."""
        power = self.extractor.power(part, "A") + self.extractor.power(part, "B")
        return self._check_power(part, power)

    def check_led(self, part: PartData) -> Optional[ConstraintResult]:
        """The brightness follows the current; a burnt LED stays dark."""
        current = self.extractor.current(part)
        max_current = max_property_value(part, "current")
        logger.debug("LED %s: current=%s, max=%s", part.instance_title, current, max_current)

        if current > max_current:
            return ConstraintResult.out_of_spec(
                f"current {format_value(current, 'A')} exceeds {format_value(max_current, 'A')}",
                brightness=0.0,
            )
        brightness = _clamp(current / max_current) if max_current > 0 else 0.0
        return ConstraintResult.within_spec(brightness=brightness)

    def check_battery(self, part: PartData) -> Optional[ConstraintResult]:
        """Flags short circuits: the current may only be a fraction of V / R_internal."""
        voltage = max_property_value(part, "voltage")
        resistance = max_property_value(part, "internal resistance")
        if resistance == 0:
            max_current = float("inf")
        else:
            max_current = voltage / resistance * self.battery_safety_margin
        current = self.extractor.current(part)
        logger.debug("Battery %s: current=%s, max=%s", part.instance_title, current, max_current)

        if abs(current) > max_current:
            return ConstraintResult.out_of_spec(
                f"current {format_value(current, 'A')} exceeds {format_value(max_current, 'A')}"
            )
        return ConstraintResult.within_spec()

    def check_ir_sensor(self, part: PartData) -> Optional[ConstraintResult]:
        """
        Line sensors have a push-pull (transistor) output; distance sensors
        have an analog output modelled by a source and resistor "a".
        """
        vcc = part.find_connector("vcc", "supply voltage")
        gnd = part.find_connector("gnd", "ground")
        out = part.find_connector("out", "output voltage")
        if vcc is None or gnd is None or out is None:
            return None

        max_v = max_property_value(part, "voltage (max)")
        max_i_out = max_property_value(part, "max output current")

        v = self.extractor.voltage_between(vcc, gnd)
        if "line sensor" in part.family.lower():
            spice_name = "q" + part.instance_title.lower()
            i_out = self.extractor.transistor_current(spice_name, TransistorLeg.COLLECTOR)
        else:
            i_out = self.extractor.current(part, "a")
        logger.debug("IR sensor %s: vcc=%s, iout=%s", part.instance_title, v, i_out)

        if v > max_v or v < 0:
            return ConstraintResult.out_of_spec(
                f"supply voltage {format_value(v, 'V')} outside 0 to {format_value(max_v, 'V')}"
            )
        if abs(i_out) > max_i_out:
            return ConstraintResult.out_of_spec(
                f"output current {format_value(i_out, 'A')} exceeds {format_value(max_i_out, 'A')}"
            )
        return ConstraintResult.within_spec()

    def check_dc_motor(self, part: PartData) -> Optional[ConstraintResult]:
        """The motor turns once the voltage reaches its minimum."""
        terminal1 = part.find_connector("pin 1")
        terminal2 = part.find_connector("pin 2")
        if terminal1 is None or terminal2 is None:
            return None

        max_v = max_property_value(part, "voltage (max)")
        min_v = max_property_value(part, "voltage (min)")
        v = self.extractor.voltage_between(terminal1, terminal2)
        logger.debug("Motor %s: voltage=%s, range=[%s, %s]", part.instance_title, v, min_v, max_v)

        if abs(v) > max_v:
            return ConstraintResult.out_of_spec(
                f"voltage {format_value(v, 'V')} exceeds {format_value(max_v, 'V')}"
            )
        if abs(v) >= min_v:
            direction = RotationDirection.CLOCKWISE if v > 0 else RotationDirection.COUNTER_CLOCKWISE
            return ConstraintResult.within_spec(rotation=direction)
        return ConstraintResult.within_spec()

    def check_multimeter(self, part: PartData) -> Optional[ConstraintResult]:
        return read_multimeter(part, self.extractor)
