"""
SimulationController - Orchestrates one run of the live simulator.

This module contains no Qt dependencies. It coordinates the engine
lifecycle, net mapping, view pairing, per-part constraint checks and the
indicators shown for them.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from models.constraint import ConstraintResult
from models.indicator import IndicatorBoard
from models.net import CircuitSnapshot
from models.part import CircuitView, PartData
from simulation.constraint_evaluator import ConstraintEvaluator
from simulation.engine_adapter import BackgroundRun, EngineAdapter, RunOutcome
from simulation.exceptions import (
    AmbiguousTitleError,
    EngineInitError,
    EngineTimeoutError,
    FatalRuntimeError,
    NetlistLoadError,
    PartEvaluationError,
)
from simulation.net_mapper import NetMapper
from simulation.quantity_extractor import QuantityExtractor
from simulation.view_bridge import ViewBridge

from .fault_presenter import FaultPresenter
from .simulator_settings import SimulatorSettings

logger = logging.getLogger(__name__)


@dataclass
class SimulationRun:
    """State rebuilt for every run."""

    snapshot: CircuitSnapshot
    parts: list[PartData]
    net_mapper: NetMapper
    bridge: ViewBridge
    background: BackgroundRun


@dataclass
class SimulationResult:
    """Result of a simulation run."""

    success: bool
    error: str = ""
    netlist: str = ""
    diagnostics: str = ""
    # Instance title -> result of the constraint check
    results: dict[str, ConstraintResult] = field(default_factory=dict)
    # Instance title -> why the part could not be evaluated
    failures: dict[str, str] = field(default_factory=dict)
    # The scheduler must stop simulating (the error needs user action)
    stop_simulating: bool = False
    cancelled: bool = False
    outcome: Optional[RunOutcome] = None


class SimulationController:
    """
    Controller for the simulation pipeline.

    Coordinates: load netlist -> run in background -> map nets and views
    -> wait -> check every part -> show indicators

    Observer events:
        simulation_started (None)
        simulation_completed (SimulationResult) - also sent for cancelled runs
        simulation_failed (SimulationResult)
    """

    def __init__(
        self,
        snapshot_provider: Callable[[], CircuitSnapshot],
        primary_view: CircuitView,
        secondary_view: CircuitView,
        adapter: Optional[EngineAdapter] = None,
        presenter: Optional[FaultPresenter] = None,
        settings: Optional[SimulatorSettings] = None,
    ):
        self.snapshot_provider = snapshot_provider
        self.primary_view = primary_view
        self.secondary_view = secondary_view
        self.settings = settings or SimulatorSettings()
        self.presenter = presenter or FaultPresenter(IndicatorBoard((primary_view.name, secondary_view.name)))
        self._adapter = adapter
        self._observers: list[Callable[[str, Any], None]] = []
        self._current_run: Optional[SimulationRun] = None
        self.last_run: Optional[SimulationRun] = None

    @property
    def adapter(self) -> EngineAdapter:
        """Lazy initialization of the EngineAdapter."""
        if self._adapter is None:
            self._adapter = EngineAdapter(poll_interval=self.settings.poll_interval)
        return self._adapter

    def add_observer(self, callback: Callable[[str, Any], None]) -> None:
        """Register a callback for simulation events."""
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
    def is_running(self) -> bool:
        return self._current_run is not None

    def cancel(self) -> None:
        """Cancel the run in progress, if any. Safe to call from any thread."""
        run = self._current_run
        if run is not None:
            logger.debug("Cancelling simulation run")
            run.background.cancel()

    def _failed(self, result: SimulationResult) -> SimulationResult:
        logger.warning("Simulation failed: %s", result.error)
        self._notify("simulation_failed", result)
        return result

    def simulate(self) -> SimulationResult:
        """
        Run the full simulation pipeline once.

        Steps: initialize engine -> load -> run -> map -> wait -> evaluate parts
        """
        self._notify("simulation_started", None)

        # 1. Engine
        try:
            self.adapter.initialize()
        except EngineInitError as e:
            return self._failed(SimulationResult(success=False, error=str(e), stop_simulating=True))

        # 2. Load the netlist of the current circuit
        snapshot = self.snapshot_provider()
        try:
            self.adapter.reset_and_load(snapshot.netlist)
        except NetlistLoadError as e:
            return self._failed(
                SimulationResult(
                    success=False,
                    error=f"{e}.\n\nSimulator messages:\n{e.diagnostics}\n\nNetlist:\n{e.netlist}",
                    netlist=snapshot.netlist,
                    diagnostics=e.diagnostics,
                    stop_simulating=True,
                )
            )

        # 3. Run in the background; map the circuit meanwhile
        background = self.adapter.run()
        parts = snapshot.simulable_parts()
        try:
            bridge = ViewBridge(parts, self.secondary_view.items)
        except AmbiguousTitleError as e:
            background.cancel()
            background.wait(self.settings.timeout_ms)
            return self._failed(
                SimulationResult(success=False, error=str(e), netlist=snapshot.netlist, stop_simulating=True)
            )

        run = SimulationRun(
            snapshot=snapshot,
            parts=parts,
            net_mapper=NetMapper(snapshot.nets),
            bridge=bridge,
            background=background,
        )
        # The run stays cancellable until every part has been checked
        self._current_run = run
        self.last_run = run
        try:
            return self._finish(run)
        finally:
            self._current_run = None

    def _cancelled(self, run: SimulationRun, outcome: RunOutcome) -> SimulationResult:
        logger.debug("Simulation cancelled, discarding results")
        self.presenter.remove_all()
        result = SimulationResult(success=False, netlist=run.snapshot.netlist, cancelled=True, outcome=outcome)
        self._notify("simulation_completed", result)
        return result

    def _finish(self, run: SimulationRun) -> SimulationResult:
        snapshot = run.snapshot
        self.presenter.remove_all()
        self.presenter.grey_out_non_simulated(
            self.primary_view, self.secondary_view, run.parts, run.bridge.counterparts()
        )

        # 4. Wait for the engine
        outcome = run.background.wait(self.settings.timeout_ms)
        if outcome is RunOutcome.CANCELLED:
            return self._cancelled(run, outcome)

        if outcome is RunOutcome.TIMED_OUT:
            e = EngineTimeoutError(self.settings.timeout_ms)
            return self._failed(
                SimulationResult(
                    success=False,
                    error=str(e),
                    netlist=snapshot.netlist,
                    stop_simulating=True,
                    outcome=outcome,
                )
            )

        if self.adapter.had_error():
            e = FatalRuntimeError(self.adapter.diagnostics(stderr=True), snapshot.netlist)
            self.presenter.remove_all()
            return self._failed(
                SimulationResult(
                    success=False,
                    error=f"{e}.\n\nSimulator messages:\n{e.diagnostics}\n\nNetlist:\n{e.netlist}",
                    netlist=snapshot.netlist,
                    diagnostics=e.diagnostics,
                    outcome=outcome,
                )
            )

        # 5. Check every part
        result = SimulationResult(success=True, netlist=snapshot.netlist, outcome=outcome)
        if not self._evaluate_parts(run, result):
            return self._cancelled(run, RunOutcome.CANCELLED)
        logger.info(
            "Simulation finished: %d parts checked, %d failed", len(result.results), len(result.failures)
        )
        self._notify("simulation_completed", result)
        return result

    def _evaluate_parts(self, run: SimulationRun, result: SimulationResult) -> bool:
        """Check every part and show its indicators. Returns False if the run was cancelled meanwhile."""
        extractor = QuantityExtractor(self.adapter, run.net_mapper)
        evaluator = ConstraintEvaluator(extractor, self.settings.battery_safety_margin)

        for part in run.parts:
            if run.background.cancelled:
                return False
            counterpart = run.bridge.counterpart(part)
            self.presenter.clear_effects(part, counterpart)
            try:
                checked = evaluator.evaluate(part)
            except PartEvaluationError as e:
                logger.warning("Could not check %s: %s", part.instance_title, e)
                result.failures[part.instance_title] = str(e)
                continue
            if checked is None:
                continue
            if run.background.cancelled:
                return False
            result.results[part.instance_title] = checked
            self.presenter.apply(part, counterpart, checked)
        return True
