"""
markings.py
===========
Road markings placed by the editing layer: traffic lights, crossings,
stop/yield lines, parking spots, start and target points.

Every marking is a small rectangle (``poly``) around a ``support`` segment
of length ``height`` laid along ``direction`` through ``center``. Only
:class:`Light` is driven by the generator (see :mod:`control_center`); the
other kinds are carried so that a world record round-trips.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Type

from envelope import Envelope
from errors import UnknownMarkingError
from geometry import Point, Segment


class MarkingType(str, Enum):
    LIGHT = "light"
    CROSS = "cross"
    STOP = "stop"
    YIELD = "yield"
    PARK = "park"
    START = "start"
    TARGET = "target"


class LightState(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class Marking:
    type: MarkingType

    def __init__(self, center: Point, direction: Point, width: float, height: float):
        self.center = Point(*center)
        self.direction = Point(*direction)
        self.width = width
        self.height = height
        angle = self.direction.angle()
        self.support = Segment(self.center.translate(angle, height / 2),
                               self.center.translate(angle, -height / 2))
        self.poly = Envelope(self.support, width, 0).polygon

    def __repr__(self):
        return f"{type(self).__name__}(center={tuple(self.center)})"

    def to_record(self):
        return {"type": self.type.value, "center": self.center.to_record(),
                "direction": self.direction.to_record(),
                "width": self.width, "height": self.height}


class Light(Marking):
    type = MarkingType.LIGHT

    def __init__(self, center, direction, width, height):
        super().__init__(center, direction, width, height)
        self.state = LightState.GREEN
        self.border = self.poly.segments[0]


class Crossing(Marking):
    type = MarkingType.CROSS

    def __init__(self, center, direction, width, height):
        super().__init__(center, direction, width, height)
        self.borders = [self.poly.segments[0], self.poly.segments[2]]


class Stop(Marking):
    type = MarkingType.STOP

    def __init__(self, center, direction, width, height):
        super().__init__(center, direction, width, height)
        self.border = self.poly.segments[2]


class Yield(Stop):
    type = MarkingType.YIELD


class Parking(Marking):
    type = MarkingType.PARK

    def __init__(self, center, direction, width, height):
        super().__init__(center, direction, width, height)
        self.borders = [self.poly.segments[0], self.poly.segments[2]]


class Start(Marking):
    type = MarkingType.START


class Target(Marking):
    type = MarkingType.TARGET


MARKING_CLASSES: Dict[str, Type[Marking]] = {
    cls.type.value: cls for cls in (Light, Crossing, Stop, Yield, Parking, Start, Target)
}


def load_marking(data) -> Marking:
    """Rebuild a marking from its record. An unknown ``type`` means the record
    is corrupt, so this raises instead of guessing."""
    cls = MARKING_CLASSES.get(data.get("type"))
    if cls is None:
        raise UnknownMarkingError(f"Unknown marking type {data.get('type')!r}")
    return cls(Point.load(data["center"]), Point.load(data["direction"]),
               data["width"], data["height"])
