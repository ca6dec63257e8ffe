"""
simulation/multimeter.py

Works out what a multimeter part shows on its screen.

The screen has five 7-segment digits; the decimal point is drawn inside the
previous digit and does not take a position of its own.
"""

import logging
import math
from typing import Optional

from models.constraint import ConstraintResult
from models.part import PartData

from .format_utils import convert_to_power_prefix
from .quantity_extractor import QuantityExtractor

logger = logging.getLogger(__name__)

SCREEN_DIGITS = 5
ERROR_TEXT = "ERR"
# Readings below this magnitude are shown as 0 instead of e.g. 0.000p
ZERO_THRESHOLD = 1.0e-12

COM_PROBE = "com probe"
VOLTAGE_PROBE = "v probe"
CURRENT_PROBE = "a probe"

VOLTMETER = "voltmeter (dc)"
AMMETER = "ammeter (dc)"
OHMMETER = "ohmmeter"


def pad_screen_text(text: str) -> str:
    """Left-pad text with spaces so it fills the screen (dots do not count)."""
    digits = len(text.replace(".", ""))
    if digits < SCREEN_DIGITS:
        return " " * (SCREEN_DIGITS - digits) + text
    return text


def format_reading(number: float) -> str:
    """
    Format a reading for the screen: four significant digits, an SI prefix,
    upper-case K, padded to the screen width.

    Examples: 5000 -> "5.000K", 5 -> " 5.000", 0.0123 -> "12.30m"
    """
    if abs(number) < ZERO_THRESHOLD:
        number = 0.0
    text = convert_to_power_prefix(number, 6)
    point = text.find(".")
    text = convert_to_power_prefix(number, 4 - point)
    text = text.replace("k", "K")
    return pad_screen_text(text)


def _screen(text: str) -> ConstraintResult:
    return ConstraintResult.display(text)


def _reading(number: float) -> ConstraintResult:
    if not math.isfinite(number):
        return _screen(ERROR_TEXT)
    return ConstraintResult.display(format_reading(number))


def read_multimeter(part: PartData, extractor: QuantityExtractor) -> Optional[ConstraintResult]:
    """
    Return the screen contents of a multimeter, or None if nothing is shown.

    A multimeter with all three probes wired, or with the probe of another
    measurement mode wired, shows "ERR".
    """
    com_probe = part.find_connector(COM_PROBE)
    v_probe = part.find_connector(VOLTAGE_PROBE)
    a_probe = part.find_connector(CURRENT_PROBE)
    if com_probe is None or v_probe is None or a_probe is None:
        return None

    if com_probe.connected and v_probe.connected and a_probe.connected:
        logger.debug("Multimeter %s connected with three terminals", part.instance_title)
        return _screen(ERROR_TEXT)

    variant = part.get_property("variant").lower()

    if variant == VOLTMETER:
        if a_probe.connected:
            logger.debug("Voltmeter %s has the current terminal connected", part.instance_title)
            return _screen(ERROR_TEXT)
        if com_probe.connected and v_probe.connected:
            return _reading(extractor.voltage_between(v_probe, com_probe))
        return None

    if variant == AMMETER:
        if v_probe.connected:
            logger.debug("Ammeter %s has the voltage terminal connected", part.instance_title)
            return _screen(ERROR_TEXT)
        return _reading(extractor.current(part))

    if variant == OHMMETER:
        if a_probe.connected:
            logger.debug("Ohmmeter %s has the current terminal connected", part.instance_title)
            return _screen(ERROR_TEXT)
        voltage = extractor.voltage_between(v_probe, com_probe)
        current = extractor.current(part)
        if current == 0:
            return _screen(ERROR_TEXT)
        resistance = abs(voltage / current)
        logger.debug("Ohmmeter: Volt: %s, Curr: %s, Ohm: %s", voltage, current, resistance)
        return _reading(resistance)

    logger.debug("Multimeter %s has an unknown variant %r", part.instance_title, variant)
    return None
