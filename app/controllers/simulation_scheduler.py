"""
SimulationScheduler - Debounced re-simulation on circuit edits.

Edits arrive in bursts (dragging a wire changes the circuit many times per
second), so trigger() only arms a single-shot timer; the run happens once
the edits have settled.
"""

import logging
from enum import Enum
from typing import Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .simulation_controller import SimulationController, SimulationResult
from .simulator_settings import SimulatorSettings, load_simulator_settings

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    DISABLED = "disabled"
    IDLE = "idle"
    ARMED = "armed"
    RUNNING = "running"


class SimulationScheduler(QObject):
    """Decides when the SimulationController runs."""

    enabledChanged = pyqtSignal(bool)
    simulatingChanged = pyqtSignal(bool)
    simulationFinished = pyqtSignal(object)  # SimulationResult

    def __init__(
        self,
        controller: SimulationController,
        settings: Optional[SimulatorSettings] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.controller = controller
        self.settings = settings or load_simulator_settings()
        self._enabled = self.settings.enabled
        self._simulating = False
        self._armed = False
        self._running = False

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(self.settings.debounce_ms)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def state(self) -> SchedulerState:
        if not self._enabled:
            return SchedulerState.DISABLED
        if self._running:
            return SchedulerState.RUNNING
        if self._armed:
            return SchedulerState.ARMED
        return SchedulerState.IDLE

    def is_enabled(self) -> bool:
        return self._enabled

    def is_simulating(self) -> bool:
        return self._simulating

    def enable(self, enabled: bool) -> None:
        """Turn the simulator on or off. Turning it off removes every indicator."""
        if not enabled:
            self._disarm()
            self.controller.cancel()
            self.controller.presenter.remove_all()
        if enabled == self._enabled:
            return
        self._enabled = enabled
        logger.info("Simulator %s", "enabled" if enabled else "disabled")
        self.enabledChanged.emit(enabled)

    def trigger(self) -> None:
        """Schedule a run after the debounce delay. Repeated calls coalesce."""
        if not self._enabled:
            logger.debug("Simulator disabled, ignoring trigger")
            return
        if not self._simulating:
            return
        self._arm()

    def start(self) -> None:
        """Start simulating and run once immediately."""
        if not self._enabled:
            logger.debug("Simulator disabled, ignoring start")
            return
        if not self._simulating:
            self._simulating = True
            self.simulatingChanged.emit(True)
        self.simulate()

    def stop(self) -> None:
        """Stop simulating, cancel any run in progress and remove every indicator."""
        self._simulating = False
        self._disarm()
        self.controller.cancel()
        self.controller.presenter.remove_all()
        self.simulatingChanged.emit(False)

    def simulate(self) -> Optional[SimulationResult]:
        """Run the controller now. Does nothing unless enabled and simulating."""
        if not self._enabled or not self._simulating:
            return None
        if self._running:
            self._arm()
            return None

        self._running = True
        try:
            result = self.controller.simulate()
        finally:
            self._running = False

        if result.stop_simulating:
            self.stop()
        self.simulationFinished.emit(result)
        return result

    def _arm(self) -> None:
        self._armed = True
        self._timer.start(self.settings.debounce_ms)

    def _disarm(self) -> None:
        self._armed = False
        self._timer.stop()

    def _on_timeout(self) -> None:
        self._armed = False
        if self._running:
            # A run is still pending; try again once it is done
            self._arm()
            return
        self.simulate()
