"""
Tests for models/part.py, models/net.py and models/indicator.py.
"""

import pytest
from models.indicator import IndicatorBoard, IndicatorKind
from models.part import DeviceFamily, ItemCapability
from tests.conftest import (make_connector, make_led, make_part,
                            make_resistor, make_snapshot, make_wire_item)


class TestDeviceFamily:
    @pytest.mark.parametrize(
        "family, expected",
        [
            ("Ceramic Capacitor", DeviceFamily.CAPACITOR),
            ("Rectifier Diode", DeviceFamily.DIODE),
            ("Red (633nm) LED", DeviceFamily.LED),
            ("Resistor", DeviceFamily.RESISTOR),
            ("multimeter", DeviceFamily.MULTIMETER),
            ("DC Motor", DeviceFamily.DC_MOTOR),
            ("Line Sensor", DeviceFamily.IR_SENSOR),
            ("IR Distance Sensor", DeviceFamily.IR_SENSOR),
            ("Battery block 9V", DeviceFamily.BATTERY),
            ("voltage source", DeviceFamily.BATTERY),
            ("Rotary Potentiometer (Small)", DeviceFamily.POTENTIOMETER),
            ("Sparkfun Trimpot", DeviceFamily.POTENTIOMETER),
            ("microcontroller", DeviceFamily.UNSUPPORTED),
            ("", DeviceFamily.UNSUPPORTED),
        ],
    )
    def test_from_text(self, family, expected):
        assert DeviceFamily.from_text(family) is expected

    def test_led_matrix_unsupported(self):
        assert DeviceFamily.from_text("LED Matrix 8x8") is DeviceFamily.UNSUPPORTED

    def test_led_display_unsupported(self):
        assert DeviceFamily.from_text("7-segment LED display") is DeviceFamily.UNSUPPORTED


class TestPartData:
    def test_property_lookup_is_case_insensitive(self):
        part = make_resistor(power="0.5W")
        assert part.get_property("Power") == "0.5W"
        assert part.get_symbol("POWER") == "W"

    def test_missing_property_is_empty(self):
        assert make_resistor().get_property("voltage") == ""

    def test_find_connector_by_name_or_description(self):
        vcc = make_connector("pin1", "VCC")
        part = make_part("U1", "Line Sensor", connectors=[vcc, make_connector("pin2", "GND")])
        assert part.find_connector("vcc", "supply voltage") is vcc
        assert part.find_connector("out") is None

    def test_connectors_compare_by_identity(self):
        a, b = make_connector("+"), make_connector("+")
        assert a != b
        assert len({a, b}) == 2

    def test_is_connected(self):
        part = make_part("R9", "Resistor", connectors=[make_connector("0", connected=False)])
        assert not part.is_connected()
        part.connectors[0].connected = True
        assert part.is_connected()

    def test_wires_are_not_greyable(self):
        assert make_resistor().is_greyable()
        assert not make_wire_item().is_greyable()

    def test_breadboard_not_greyable(self):
        board = make_part("Breadboard1", "breadboard", capabilities={ItemCapability.BOARD})
        assert not board.is_greyable()


class TestCircuitSnapshot:
    def test_simulable_parts_skip_unwired_and_templateless(self):
        wired = make_resistor("R1")
        unwired = make_resistor("R2")
        for connector in unwired.connectors:
            connector.connected = False
        templateless = make_part("U1", "microcontroller", connectors=[make_connector("vcc")])
        snapshot = make_snapshot([wired, unwired, templateless])
        assert snapshot.simulable_parts() == [wired]


class TestIndicatorBoard:
    def test_add_and_query(self):
        board = IndicatorBoard()
        led = make_led()
        board.add("schematic", led, IndicatorKind.SMOKE)
        assert board.count() == 1
        assert board.for_part(led, IndicatorKind.SMOKE)[0].view == "schematic"

    def test_brightness_replaces_previous(self):
        board = IndicatorBoard()
        led = make_led()
        board.add("breadboard", led, IndicatorKind.BRIGHTNESS, 0.2)
        board.add("breadboard", led, IndicatorKind.BRIGHTNESS, 0.7)
        values = [i.value for i in board.for_part(led, IndicatorKind.BRIGHTNESS)]
        assert values == [0.7]

    def test_remove_part_only_touches_one_view(self):
        board = IndicatorBoard()
        led = make_led()
        board.add("schematic", led, IndicatorKind.SMOKE)
        board.add("breadboard", led, IndicatorKind.SMOKE)
        board.remove_part("schematic", led)
        assert [i.view for i in board.indicators()] == ["breadboard"]

    def test_clear_notifies(self):
        board = IndicatorBoard()
        events = []
        board.add_observer(lambda event, data: events.append(event))
        board.add("schematic", make_led(), IndicatorKind.SMOKE)
        board.clear()
        assert board.count() == 0
        assert events == ["indicators_changed", "indicators_cleared"]

    def test_failing_observer_is_isolated(self):
        board = IndicatorBoard()
        received = []

        def broken(event, data):
            raise RuntimeError("view deleted")

        board.add_observer(broken)
        board.add_observer(lambda event, data: received.append(event))
        board.add("schematic", make_led(), IndicatorKind.SMOKE)
        assert received == ["indicators_changed"]
