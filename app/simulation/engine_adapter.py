"""
simulation/engine_adapter.py

Drives one instance of the simulation engine: reset, load a netlist, run an
operating-point analysis in the engine's background thread, wait for it,
and read result vectors and logs.

The engine itself is injected as an EngineHandle so tests can use a fake.
By default a shared-library ngspice instance is created on first use.
"""

import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional, Protocol, Sequence, runtime_checkable

from .exceptions import EngineInitError, NetlistLoadError

logger = logging.getLogger(__name__)

# Substrings searched (case-insensitively) in the engine logs
LOAD_ERROR_MARKER = "error"  # e.g. "Error on line 3"
LOAD_WARNING_MARKER = "warning"  # e.g. "Warning: can't find model"
NOTHING_LOADED_MARKER = "there aren't any circuits loaded"

DEFAULT_TIMEOUT_MS = 3000
DEFAULT_POLL_INTERVAL = 0.001  # seconds


@runtime_checkable
class EngineHandle(Protocol):
    """Interface of a simulation engine instance."""

    def initialize(self) -> None:
        ...

    def clear_diagnostics(self) -> None:
        ...

    def command(self, text: str) -> None:
        """Pass a control command ("remcirc", "reset", "listing", "bg_run", "bg_halt")."""
        ...

    def load_circuit(self, netlist: str) -> None:
        ...

    def fetch_vector(self, name: str) -> Sequence[float]:
        """Return the named result vector, or an empty sequence."""
        ...

    def get_diagnostics(self, is_stderr: bool) -> str:
        ...

    def had_fatal_error(self) -> bool:
        ...

    def is_background_running(self) -> bool:
        ...


def default_engine_factory() -> EngineHandle:
    """Create the shared-library ngspice engine."""
    from .ngspice_shared import NgspiceSharedEngine

    return NgspiceSharedEngine()


class RunOutcome(Enum):
    """How waiting for a background run ended."""

    FINISHED = "finished"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


class BackgroundRun:
    """
    Completion handle for one background analysis.

    wait() blocks the caller until the engine reports that its background
    thread stopped, the timeout expires, or cancel() is called (from any
    thread). On timeout or cancellation the engine is halted once.
    """

    def __init__(self, adapter: "EngineAdapter", poll_interval: float = DEFAULT_POLL_INTERVAL):
        self._adapter = adapter
        self._poll_interval = poll_interval
        self._cancel_event = threading.Event()
        self._halted = False
        self.outcome: Optional[RunOutcome] = None

    def cancel(self) -> None:
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def _halt(self) -> None:
        if not self._halted:
            self._halted = True
            self._adapter.abort()

    def wait(self, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> RunOutcome:
        """Wait for the engine to finish. Returns the outcome."""
        if self.outcome is not None:
            return self.outcome

        deadline = time.monotonic() + timeout_ms / 1000.0
        while self._adapter.is_running():
            if self._cancel_event.is_set():
                self._halt()
                self.outcome = RunOutcome.CANCELLED
                return self.outcome
            if time.monotonic() >= deadline:
                logger.error("The spice simulator did not finish after %d ms", timeout_ms)
                self._halt()
                self.outcome = RunOutcome.TIMED_OUT
                return self.outcome
            self._cancel_event.wait(self._poll_interval)

        self.outcome = RunOutcome.CANCELLED if self._cancel_event.is_set() else RunOutcome.FINISHED
        return self.outcome


class EngineAdapter:
    """
    Lifecycle of the simulation engine.

    Only one logical owner may use the adapter at a time; the scheduler
    serializes runs so that no second run starts while one is pending.
    """

    def __init__(
        self,
        engine: Optional[EngineHandle] = None,
        engine_factory: Optional[Callable[[], EngineHandle]] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self._engine = engine
        self._engine_factory = engine_factory or default_engine_factory
        self._poll_interval = poll_interval
        self._initialized = False

    @property
    def engine(self) -> Optional[EngineHandle]:
        return self._engine

    def initialize(self) -> EngineHandle:
        """Create and initialize the engine if not done yet."""
        if self._initialized:
            return self._engine
        try:
            if self._engine is None:
                self._engine = self._engine_factory()
            self._engine.initialize()
        except (ImportError, OSError, NameError, RuntimeError, ValueError, AttributeError) as e:
            self._engine = None
            raise EngineInitError(f"Could not create simulator instance: {e}") from e
        if self._engine is None:
            raise EngineInitError("Could not create simulator instance")
        self._initialized = True
        logger.debug("Simulation engine initialized: %r", self._engine)
        return self._engine

    def _require_engine(self) -> EngineHandle:
        if not self._initialized:
            return self.initialize()
        return self._engine

    def command(self, text: str) -> None:
        logger.debug("Running command(%s)", text)
        self._require_engine().command(text)

    def clear_diagnostics(self) -> None:
        self._require_engine().clear_diagnostics()

    def diagnostics(self, stderr: bool = False) -> str:
        return self._require_engine().get_diagnostics(stderr)

    def reset_and_load(self, netlist: str) -> None:
        """
        Remove the previous circuit, reset the engine and load a netlist.

        Raises:
            NetlistLoadError: the standard log mentions an error or the
                diagnostic log mentions a warning.
        """
        engine = self._require_engine()
        self.command("remcirc")
        self.command("reset")
        engine.clear_diagnostics()

        logger.debug("Loading netlist:\n%s", netlist)
        engine.load_circuit(netlist)

        stdout = engine.get_diagnostics(False)
        stderr = engine.get_diagnostics(True)
        if LOAD_ERROR_MARKER in stdout.lower() or LOAD_WARNING_MARKER in stderr.lower():
            logger.error("Error loading the netlist. Probably some SPICE field is wrong.")
            raise NetlistLoadError(stdout, stderr, netlist)

    def run(self) -> BackgroundRun:
        """Start the analysis in the engine's background thread and return immediately."""
        self.command("listing")
        self.command("bg_run")
        return BackgroundRun(self, self._poll_interval)

    def is_running(self) -> bool:
        return self._require_engine().is_background_running()

    def abort(self) -> None:
        self.command("bg_halt")

    def fetch_vector(self, name: str) -> list[float]:
        """Return a result vector as a list, or an empty list if it is not defined."""
        values = self._require_engine().fetch_vector(name)
        if values is None:
            return []
        return [float(v) for v in values]

    def had_error(self) -> bool:
        """True if the engine flagged an error, or reports that nothing was loaded."""
        engine = self._require_engine()
        if engine.had_fatal_error():
            return True
        return NOTHING_LOADED_MARKER in engine.get_diagnostics(True).lower()
