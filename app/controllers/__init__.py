"""
Controllers for the breadboard simulator.

This package contains the controller classes that orchestrate simulation
runs between the engine, the circuit models and the views. Everything but
the scheduler is Qt-free and reports through an observer pattern.
"""

from .fault_presenter import FaultPresenter
from .simulation_controller import SimulationController, SimulationResult, SimulationRun
from .simulation_scheduler import SchedulerState, SimulationScheduler
from .simulator_settings import SimulatorSettings, load_simulator_settings

__all__ = [
    "FaultPresenter",
    "SchedulerState",
    "SimulationController",
    "SimulationResult",
    "SimulationRun",
    "SimulationScheduler",
    "SimulatorSettings",
    "load_simulator_settings",
]
