"""
Shared test fixtures for the breadboard simulator test suite.

Fixtures build pure-Python model objects and an in-memory engine so the
pipeline can be exercised without ngspice.
"""

import os
import sys
from pathlib import Path

# Ensure app/ is on sys.path so bare imports (models, simulation, controllers)
# work when running individual test files (e.g., python -m pytest app/tests/unit/test_foo.py).
_app_dir = str(Path(__file__).resolve().parent.parent)
if _app_dir not in sys.path:
    sys.path.insert(0, _app_dir)

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from models.net import CircuitSnapshot, NetData
from models.part import CircuitView, ConnectorData, ItemCapability, PartData
from simulation.engine_adapter import EngineAdapter

RESISTOR_SPICE = "R{instanceTitle} {net connector0} {net connector1} {resistance}"
DIODE_SPICE = "D{instanceTitle} {net connector0} {net connector1} LED"
CAPACITOR_SPICE = "C{instanceTitle} {net connector0} {net connector1} {capacitance}"
BATTERY_SPICE = "V{instanceTitle} {net connector1} {net connector0} DC {voltage}"
MULTIMETER_SPICE = "V{instanceTitle} {net connector1} {net connector2} DC 0"


class FakeEngine:
    """
    In-memory EngineHandle.

    Vectors come from a dict. The background run reports itself running for
    `running_polls` calls of is_background_running() (-1 means until halted).
    """

    def __init__(self, vectors=None, running_polls=0):
        self.vectors = dict(vectors or {})
        self.running_polls = running_polls
        self.commands = []
        self.loaded = []
        self.initialize_calls = 0
        self.stdout = ""
        self.stderr = ""
        # Written to the logs when a netlist is loaded / a run starts
        self.load_stdout = ""
        self.load_stderr = ""
        self.run_stderr = ""
        self.fatal = False
        self._polls_left = 0

    def initialize(self):
        self.initialize_calls += 1

    def clear_diagnostics(self):
        self.stdout = ""
        self.stderr = ""

    def command(self, text):
        self.commands.append(text)
        if text == "bg_run":
            self._polls_left = self.running_polls
            self.stderr += self.run_stderr
        elif text == "bg_halt":
            self._polls_left = 0

    def load_circuit(self, netlist):
        self.loaded.append(netlist)
        self.stdout += self.load_stdout
        self.stderr += self.load_stderr

    def fetch_vector(self, name):
        return self.vectors.get(name, [])

    def get_diagnostics(self, is_stderr):
        return self.stderr if is_stderr else self.stdout

    def had_fatal_error(self):
        return self.fatal

    def is_background_running(self):
        if self._polls_left < 0:
            return True
        if self._polls_left > 0:
            self._polls_left -= 1
            return True
        return False


def make_connector(name, description="", connected=True):
    """Helper to create a ConnectorData with minimal boilerplate."""
    return ConnectorData(shared_name=name, shared_description=description, connected=connected)


def make_part(title, family, spice="", properties=None, symbols=None, connectors=None, capabilities=None):
    """Helper to create a PartData."""
    part = PartData(
        instance_title=title,
        family=family,
        properties=dict(properties or {}),
        property_symbols=dict(symbols or {}),
        connectors=list(connectors or []),
        spice=spice,
    )
    if capabilities is not None:
        part.capabilities = frozenset(capabilities)
    return part


def make_resistor(title="R1", power="250mW"):
    return make_part(
        title,
        "Resistor",
        spice=RESISTOR_SPICE,
        properties={"resistance": "220Ω", "power": power},
        symbols={"resistance": "Ω", "power": "W"},
        connectors=[make_connector("pin 0"), make_connector("pin 1")],
    )


def make_led(title="LED1", current="20mA", family="Red (633nm) LED"):
    return make_part(
        title,
        family,
        spice=DIODE_SPICE,
        properties={"current": current},
        symbols={"current": "A"},
        connectors=[make_connector("anode", "+"), make_connector("cathode", "-")],
    )


def make_capacitor(title="C1", voltage="6.3V", family="Electrolytic Capacitor"):
    return make_part(
        title,
        family,
        spice=CAPACITOR_SPICE,
        properties={"voltage": voltage},
        symbols={"voltage": "V"},
        connectors=[make_connector("+"), make_connector("-")],
    )


def make_multimeter(title="VM1", variant="voltmeter (dc)", com=True, v=True, a=False):
    return make_part(
        title,
        "multimeter",
        spice=MULTIMETER_SPICE,
        properties={"variant": variant},
        connectors=[
            make_connector("com probe", connected=com),
            make_connector("v probe", connected=v),
            make_connector("a probe", connected=a),
        ],
    )


def make_wire_item(title="Wire1"):
    return make_part(title, "wire", capabilities={ItemCapability.WIRE})


def make_views(parts, counterpart_titles=None):
    """
    Build a schematic view holding `parts` and a breadboard view holding a
    counterpart (same title) for each of them, or only for counterpart_titles.
    """
    schematic = CircuitView("schematic")
    breadboard = CircuitView("breadboard")
    for part in parts:
        schematic.add(part)
        if counterpart_titles is None or part.instance_title in counterpart_titles:
            breadboard.add(make_part(part.instance_title, part.family))
    return schematic, breadboard


def make_snapshot(parts, nets=None, netlist="* test circuit\n.op\n.end\n"):
    return CircuitSnapshot(
        netlist=netlist,
        nets=[NetData(list(net)) for net in (nets or [])],
        parts=list(parts),
    )


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def adapter(fake_engine):
    return EngineAdapter(engine=fake_engine, poll_interval=0)


@pytest.fixture
def led_circuit():
    """
    Battery -- R1 -- LED1 -- ground

    Nets: 0 = ground (battery -, LED cathode), 1 = battery + / R1 pin 0,
    2 = R1 pin 1 / LED anode.
    """
    battery = make_part(
        "VCC1",
        "battery",
        spice=BATTERY_SPICE,
        properties={"voltage": "5V", "internal resistance": "0.1Ω"},
        symbols={"voltage": "V", "internal resistance": "Ω"},
        connectors=[make_connector("-"), make_connector("+")],
    )
    resistor = make_resistor("R1")
    led = make_led("LED1")
    nets = [
        [battery.connectors[0], led.connectors[1]],
        [battery.connectors[1], resistor.connectors[0]],
        [resistor.connectors[1], led.connectors[0]],
    ]
    return battery, resistor, led, nets
