"""
simulation/ngspice_shared.py

EngineHandle backed by ngspice running as a shared library (through PySpice).

ngspice writes its log through a callback; the lines are kept here, split
into standard output and diagnostic output, until clear_diagnostics() is
called.
"""

import logging
import threading

import numpy as np
from PySpice.Spice.NgSpice.Shared import NgSpiceShared, ffi

logger = logging.getLogger(__name__)


class _CapturingNgSpiceShared(NgSpiceShared):
    """NgSpiceShared that hands every log line to its owner."""

    def __init__(self, owner: "NgspiceSharedEngine", **kwargs):
        self._owner = owner
        super().__init__(**kwargs)

    def send_char(self, message, ngspice_id):
        prefix, _, content = message.partition(" ")
        self._owner._append_log(prefix == "stderr", content)
        return 0


class NgspiceSharedEngine:
    """ngspice shared-library engine."""

    def __init__(self, ngspice_id: int = 0):
        self._ngspice_id = ngspice_id
        self._ngspice = None
        self._lock = threading.Lock()
        self._stdout: list[str] = []
        self._stderr: list[str] = []
        self._fatal_error = False

    def _append_log(self, is_stderr: bool, line: str) -> None:
        # Called from the ngspice background thread as well
        with self._lock:
            if is_stderr:
                self._stderr.append(line)
                if "error" in line.lower():
                    self._fatal_error = True
            else:
                self._stdout.append(line)

    def initialize(self) -> None:
        if self._ngspice is None:
            self._ngspice = _CapturingNgSpiceShared(self, ngspice_id=self._ngspice_id, send_data=False)
            logger.info("ngspice shared library loaded")

    def clear_diagnostics(self) -> None:
        with self._lock:
            self._stdout.clear()
            self._stderr.clear()
            self._fatal_error = False

    # PySpice reports ngspice failures as NameError subclasses
    # (NgSpiceCommandError, NgSpiceCircuitError) or as a bare NameError
    # when an API call returns non-zero.

    def command(self, text: str) -> None:
        try:
            self._ngspice.exec_command(text)
        except NameError as e:
            logger.error("ngspice command '%s' failed: %s", text, e)
            with self._lock:
                self._fatal_error = True

    def load_circuit(self, netlist: str) -> None:
        try:
            self._ngspice.load_circuit(netlist)
        except NameError as e:
            # The load check looks for "error" in the standard log
            self._append_log(False, f"Error: {e}")

    def fetch_vector(self, name: str) -> np.ndarray:
        info = self._ngspice._ngspice_shared.ngGet_Vec_Info(name.encode("utf8"))
        if info == ffi.NULL or info.v_length <= 0:
            return np.empty(0)
        length = info.v_length
        if info.v_realdata != ffi.NULL:
            buffer = ffi.buffer(info.v_realdata, length * ffi.sizeof("double"))
            return np.frombuffer(buffer, dtype=np.float64).copy()
        # Complex vectors only occur in AC analyses; keep the real part
        return np.array([info.v_compdata[i].cx_real for i in range(length)], dtype=np.float64)

    def get_diagnostics(self, is_stderr: bool) -> str:
        with self._lock:
            lines = self._stderr if is_stderr else self._stdout
            return "\n".join(lines)

    def had_fatal_error(self) -> bool:
        with self._lock:
            return self._fatal_error

    def is_background_running(self) -> bool:
        return bool(self._ngspice._ngspice_shared.ngSpice_running())
