import math

from geometry import Segment
from polygon import Polygon


class Envelope:
    """Capsule polygon of total width ``width`` around a skeleton segment.

    ``roundness`` is the number of arc steps per half-turn cap; 0 and 1 both
    give a plain rectangle.
    """

    def __init__(self, skeleton: Segment, width: float, roundness: int = 1, polygon: Polygon = None):
        self.skeleton = skeleton
        self.polygon = polygon if polygon is not None else self._generate_polygon(width, roundness)

    def _generate_polygon(self, width, roundness):
        p1, p2 = self.skeleton.p1, self.skeleton.p2
        radius = width / 2
        alpha = (p1 - p2).angle()
        start = alpha - math.pi / 2
        end = alpha + math.pi / 2
        step = math.pi / max(1, roundness)
        eps = step / 2  # guards the inclusive arc end against float drift
        angles = []
        k = 0
        while start + k * step < end + eps:
            angles.append(start + k * step)
            k += 1
        points = [p1.translate(a, radius) for a in angles]
        points += [p2.translate(math.pi + a, radius) for a in angles]
        return Polygon(points)

    @classmethod
    def load(cls, data) -> "Envelope":
        return cls(Segment.load(data["skeleton"]), 0, 0, Polygon.load(data["polygon"]))

    def to_record(self):
        return {"skeleton": self.skeleton.to_record(), "polygon": self.polygon.to_record()}
