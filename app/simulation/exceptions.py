"""
simulation/exceptions.py

Exceptions raised while driving the simulation engine and while reading
per-part quantities from its results.

Engine failures (SimulatorError subclasses other than PartEvaluationError)
abort the whole run. PartEvaluationError subclasses only concern one part:
the controller logs them and moves on to the next part.
"""


class SimulatorError(Exception):
    """Base class for every simulator error."""


class EngineInitError(SimulatorError):
    """The engine instance could not be created or initialized."""


class NetlistLoadError(SimulatorError):
    """The engine reported errors or warnings while loading the netlist."""

    def __init__(self, stdout: str, stderr: str, netlist: str):
        self.stdout = stdout
        self.stderr = stderr
        self.netlist = netlist
        super().__init__("The simulator gave an error when loading the netlist")

    @property
    def diagnostics(self) -> str:
        return self.stdout + self.stderr


class FatalEngineError(SimulatorError):
    """The engine failed while running an analysis."""


class EngineTimeoutError(FatalEngineError):
    """The background analysis did not finish in time and was halted."""

    def __init__(self, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__(f"The spice simulator did not finish after {timeout_ms} ms. Aborting simulation.")


class FatalRuntimeError(FatalEngineError):
    """The engine flagged an error after running, or nothing was simulated."""

    def __init__(self, diagnostics: str, netlist: str):
        self.diagnostics = diagnostics
        self.netlist = netlist
        super().__init__("The simulator gave an error when trying to simulate this circuit")


class AmbiguousTitleError(SimulatorError):
    """Several parts of the second view share the title of a simulated part."""

    def __init__(self, title: str, count: int):
        self.title = title
        self.count = count
        super().__init__(f"{count} parts share the title '{title}' in the second view")


class PartEvaluationError(SimulatorError):
    """A single part could not be evaluated."""


class TemplateError(PartEvaluationError):
    """The device type could not be read from a part's SPICE template."""


class InvalidDeviceError(PartEvaluationError):
    """A quantity was requested from a device type that does not provide it."""


class PropertyValueError(PartEvaluationError):
    """A declared property value could not be parsed as a number."""
