"""
Tests for simulation/multimeter.py: screen text of multimeter parts.
"""

import pytest
from models.constraint import ConstraintStatus
from simulation.multimeter import (ERROR_TEXT, format_reading, pad_screen_text,
                                   read_multimeter)
from simulation.net_mapper import NetMapper
from simulation.quantity_extractor import QuantityExtractor
from tests.conftest import make_multimeter


def _read(adapter, meter):
    """Read a meter whose com probe is on ground and v probe on net 1."""
    com, v_probe, _ = meter.connectors
    extractor = QuantityExtractor(adapter, NetMapper([[com], [v_probe]]))
    return read_multimeter(meter, extractor)


class TestFormatting:
    @pytest.mark.parametrize(
        "number, text",
        [
            (5000, "5.000K"),
            (5, " 5.000"),
            (0.0123, "12.30m"),
            (123.456, " 123.5"),
            (0, " 0.000"),
            (1e-15, " 0.000"),
        ],
    )
    def test_format_reading(self, number, text):
        assert format_reading(number) == text

    def test_padding_ignores_decimal_point(self):
        assert pad_screen_text("1.5") == "   1.5"
        assert pad_screen_text("12345") == "12345"


class TestProbes:
    @pytest.mark.parametrize("variant", ["voltmeter (dc)", "ammeter (dc)", "ohmmeter"])
    def test_three_probes_wired_is_error(self, adapter, variant):
        result = _read(adapter, make_multimeter(variant=variant, com=True, v=True, a=True))
        assert result.status is ConstraintStatus.DISPLAY
        assert result.display_text == ERROR_TEXT == "ERR"

    def test_unknown_variant_shows_nothing(self, adapter):
        assert _read(adapter, make_multimeter(variant="capacitance")) is None

    def test_missing_probe_connector(self, adapter):
        meter = make_multimeter()
        meter.connectors.pop()
        assert _read(adapter, meter) is None


class TestVoltmeter:
    def test_reads_voltage(self, adapter, fake_engine):
        fake_engine.vectors["v(1)"] = [5.0]
        result = _read(adapter, make_multimeter(variant="Voltmeter (DC)"))
        assert result.display_text == " 5.000"

    def test_current_probe_is_error(self, adapter):
        result = _read(adapter, make_multimeter(variant="voltmeter (dc)", com=True, v=False, a=True))
        assert result.display_text == "ERR"

    def test_open_probe_shows_nothing(self, adapter):
        assert _read(adapter, make_multimeter(variant="voltmeter (dc)", com=True, v=False)) is None


class TestAmmeter:
    def test_reads_current(self, adapter, fake_engine):
        fake_engine.vectors["@vm1[i]"] = [0.0123]
        result = _read(adapter, make_multimeter(variant="ammeter (dc)", v=False, a=True))
        assert result.display_text == "12.30m"

    def test_voltage_probe_is_error(self, adapter):
        result = _read(adapter, make_multimeter(variant="ammeter (dc)", com=True, v=True, a=False))
        assert result.display_text == "ERR"


class TestOhmmeter:
    def test_reads_resistance(self, adapter, fake_engine):
        fake_engine.vectors.update({"v(1)": [5.0], "@vm1[i]": [0.001]})
        result = _read(adapter, make_multimeter(variant="ohmmeter"))
        assert result.display_text == "5.000K"

    def test_negative_current_gives_magnitude(self, adapter, fake_engine):
        fake_engine.vectors.update({"v(1)": [5.0], "@vm1[i]": [-0.001]})
        result = _read(adapter, make_multimeter(variant="ohmmeter"))
        assert result.display_text == "5.000K"

    def test_zero_current_is_error(self, adapter, fake_engine):
        fake_engine.vectors["v(1)"] = [5.0]
        result = _read(adapter, make_multimeter(variant="ohmmeter"))
        assert result.display_text == "ERR"

    def test_current_probe_is_error(self, adapter):
        result = _read(adapter, make_multimeter(variant="ohmmeter", v=False, a=True))
        assert result.display_text == "ERR"
