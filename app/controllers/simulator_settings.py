"""
SimulatorSettings - Tunables of the live simulator.

Only the enabled flag is stored in QSettings; the timing values are
constants of the simulator and may be overridden by callers and tests.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from PyQt6.QtCore import QSettings

logger = logging.getLogger(__name__)

SETTINGS_ORGANIZATION = "SDSMT"
SETTINGS_APPLICATION = "Breadboard Simulator"
ENABLED_KEY = "simulatorEnabled"


@dataclass
class SimulatorSettings:
    debounce_ms: int = 200
    timeout_ms: int = 3000
    poll_interval: float = 0.001
    battery_safety_margin: float = 0.1
    enabled: bool = False


def _to_bool(value) -> bool:
    # QSettings returns "true"/"false" strings on some backends
    return value == "true" or value is True


def load_simulator_settings(settings: Optional[QSettings] = None) -> SimulatorSettings:
    """Read the simulator settings, falling back to defaults for missing keys."""
    if settings is None:
        settings = QSettings(SETTINGS_ORGANIZATION, SETTINGS_APPLICATION)

    result = SimulatorSettings()
    enabled = settings.value(ENABLED_KEY)
    if enabled is not None:
        result.enabled = _to_bool(enabled)
    logger.debug("Simulator enabled: %s", result.enabled)
    return result
