"""
Tests for simulation/net_mapper.py and simulation/view_bridge.py.
"""

import pytest
from models.part import CircuitView
from simulation.exceptions import AmbiguousTitleError
from simulation.net_mapper import GROUND_NET, NetMapper
from simulation.view_bridge import ViewBridge
from tests.conftest import make_connector, make_led, make_part, make_resistor


class TestNetMapper:
    def test_index_is_position_in_net_list(self):
        a, b, c = make_connector("a"), make_connector("b"), make_connector("c")
        mapper = NetMapper([[a], [b, c]])
        assert mapper.net_of(a) == 0
        assert mapper.net_of(b) == 1
        assert mapper.net_of(c) == 1
        assert mapper.net_count == 2

    def test_unknown_connector_is_ground(self):
        mapper = NetMapper([[make_connector("a")]])
        stray = make_connector("stray")
        assert stray not in mapper
        assert mapper.net_of(stray) == GROUND_NET

    def test_equal_names_are_distinct_connectors(self):
        plus1, plus2 = make_connector("+"), make_connector("+")
        mapper = NetMapper([[], [plus1], [plus2]])
        assert mapper.net_of(plus1) == 1
        assert mapper.net_of(plus2) == 2
        assert len(mapper) == 2

    def test_connector_listed_twice_keeps_last(self):
        a = make_connector("a")
        mapper = NetMapper([[a], [a]])
        assert mapper.net_of(a) == 1

    def test_empty(self):
        mapper = NetMapper([])
        assert len(mapper) == 0
        assert mapper.net_count == 0


class TestViewBridge:
    def _breadboard(self, *titles):
        view = CircuitView("breadboard")
        for title in titles:
            view.add(make_part(title, "Resistor"))
        return view

    def test_pairs_by_title(self):
        r1, led = make_resistor("R1"), make_led("LED1")
        breadboard = self._breadboard("LED1", "R1")
        bridge = ViewBridge([r1, led], breadboard.items)
        assert bridge.counterpart(r1) is breadboard.items[1]
        assert bridge.counterpart(led) is breadboard.items[0]
        assert len(bridge) == 2

    def test_missing_counterpart_is_none(self):
        r1 = make_resistor("R1")
        bridge = ViewBridge([r1], self._breadboard("R2").items)
        assert bridge.counterpart(r1) is None
        assert r1 not in bridge

    def test_titles_are_case_sensitive(self):
        r1 = make_resistor("R1")
        bridge = ViewBridge([r1], self._breadboard("r1").items)
        assert bridge.counterpart(r1) is None

    def test_duplicate_titles_raise(self):
        r1 = make_resistor("R1")
        with pytest.raises(AmbiguousTitleError) as excinfo:
            ViewBridge([r1], self._breadboard("R1", "R1").items)
        assert excinfo.value.title == "R1"
        assert excinfo.value.count == 2

    def test_duplicates_of_unsimulated_titles_are_ignored(self):
        r1 = make_resistor("R1")
        bridge = ViewBridge([r1], self._breadboard("R1", "Wire5", "Wire5").items)
        assert r1 in bridge
