"""Tests for road markings and the marking loader."""
import pytest

from errors import UnknownMarkingError
from geometry import Point
from markings import (
    Crossing,
    Light,
    LightState,
    MarkingType,
    Parking,
    Start,
    Stop,
    Target,
    Yield,
    load_marking,
)


def _record(kind):
    return {"type": kind, "center": {"x": 10, "y": 20}, "direction": {"x": 0, "y": 1},
            "width": 30, "height": 8}


@pytest.mark.parametrize(
    "kind, cls",
    [("light", Light), ("cross", Crossing), ("stop", Stop), ("yield", Yield),
     ("park", Parking), ("start", Start), ("target", Target)],
)
def test_load_marking_dispatches_on_type(kind, cls) -> None:
    marking = load_marking(_record(kind))

    assert type(marking) is cls
    assert marking.type == MarkingType(kind)
    assert marking.center == Point(10, 20)
    assert marking.to_record()["type"] == kind


def test_unknown_marking_type_is_fatal() -> None:
    with pytest.raises(UnknownMarkingError, match="bogus"):
        load_marking(_record("bogus"))


def test_support_runs_along_direction() -> None:
    m = Light(Point(0, 0), Point(0, 1), 10, 6)

    assert m.support.p1 == pytest.approx(Point(0, 3), abs=1e-9)
    assert m.support.p2 == pytest.approx(Point(0, -3), abs=1e-9)
    assert m.support.length() == pytest.approx(6)


def test_marking_polygon_is_width_by_height_rectangle() -> None:
    m = Stop(Point(0, 0), Point(1, 0), 20, 4)

    bb = m.poly.bounding_box()
    assert len(m.poly.points) == 4
    assert bb.xmax - bb.xmin == pytest.approx(4)
    assert bb.ymax - bb.ymin == pytest.approx(20)
    assert m.border == m.poly.segments[2]


def test_light_starts_green_with_border() -> None:
    light = Light(Point(5, 5), Point(1, 0), 10, 4)

    assert light.state is LightState.GREEN
    assert light.border == light.poly.segments[0]


def test_crossing_and_parking_have_two_borders() -> None:
    for cls in (Crossing, Parking):
        m = cls(Point(0, 0), Point(1, 0), 10, 4)
        assert m.borders == [m.poly.segments[0], m.poly.segments[2]]
