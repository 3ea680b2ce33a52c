import math
from dataclasses import dataclass
from typing import Iterable, NamedTuple, Optional, Sequence

PARALLEL_EPS = 1e-3


def lerp(a, b, t): return a + (b - a) * t
def clamp(val, lo, hi): return max(min(val, hi), lo)


class Point(NamedTuple):
    """2D point / vector. Equality is exact, so points can key sets and dicts."""
    x: float
    y: float

    def __add__(self, other): return Point(self.x + other[0], self.y + other[1])
    def __sub__(self, other): return Point(self.x - other[0], self.y - other[1])
    def __mul__(self, s): return Point(self.x * s, self.y * s)
    __rmul__ = __mul__
    def __neg__(self): return Point(-self.x, -self.y)

    def dot(self, other): return self.x * other[0] + self.y * other[1]
    def cross(self, other): return self.x * other[1] - self.y * other[0]
    def length(self): return math.hypot(self.x, self.y)
    def angle(self): return math.atan2(self.y, self.x)

    def normalize(self):
        l = self.length()
        return Point(0.0, 0.0) if l == 0 else Point(self.x / l, self.y / l)

    def rotate(self, angle):
        c, s = math.cos(angle), math.sin(angle)
        return Point(self.x * c - self.y * s, self.x * s + self.y * c)

    def translate(self, angle, distance):
        return Point(self.x + distance * math.cos(angle), self.y + distance * math.sin(angle))

    def distance_to(self, other):
        return math.hypot(self.x - other[0], self.y - other[1])

    def lerp(self, other, t):
        return Point(lerp(self.x, other[0], t), lerp(self.y, other[1], t))

    @staticmethod
    def average(points: Sequence["Point"]) -> "Point":
        sx = sum(p[0] for p in points); sy = sum(p[1] for p in points)
        return Point(sx / len(points), sy / len(points))

    @classmethod
    def load(cls, data) -> "Point":
        return cls(float(data["x"]), float(data["y"]))

    def to_record(self):
        return {"x": float(self.x), "y": float(self.y)}


@dataclass(frozen=True, eq=False)
class Segment:
    """Directed edge between two points.

    Identity is undirected: ``Segment(a, b) == Segment(b, a)``. The one-way
    flag is an attribute of the road, not of the geometry, and is ignored
    by equality and hashing.
    """
    p1: Point
    p2: Point
    one_way: bool = False

    def __eq__(self, other):
        if not isinstance(other, Segment):
            return NotImplemented
        return frozenset((self.p1, self.p2)) == frozenset((other.p1, other.p2))

    def __hash__(self):
        return hash(frozenset((self.p1, self.p2)))

    def length(self): return self.p1.distance_to(self.p2)
    def midpoint(self): return Point((self.p1.x + self.p2.x) / 2, (self.p1.y + self.p2.y) / 2)
    def includes(self, point): return self.p1 == point or self.p2 == point
    def is_degenerate(self): return self.p1 == self.p2
    def reversed(self): return Segment(self.p2, self.p1, self.one_way)

    def direction_vector(self) -> Point:
        return (self.p2 - self.p1).normalize()

    @classmethod
    def load(cls, data) -> "Segment":
        return cls(Point.load(data["p1"]), Point.load(data["p2"]), bool(data.get("oneWay", False)))

    def to_record(self):
        return {"p1": self.p1.to_record(), "p2": self.p2.to_record(), "oneWay": self.one_way}


class Intersection(NamedTuple):
    x: float
    y: float
    offset: float         # along a1 -> a2
    other_offset: float   # along b1 -> b2

    @property
    def point(self): return Point(self.x, self.y)

    def is_interior(self):
        return 0.0 < self.offset < 1.0 and 0.0 < self.other_offset < 1.0


class Projection(NamedTuple):
    point: Point
    offset: float
    valid: bool


def intersect(a1, a2, b1, b2) -> Optional[Intersection]:
    ax, ay = a2[0] - a1[0], a2[1] - a1[1]
    bx, by = b1[0] - b2[0], b1[1] - b2[1]
    cx, cy = a1[0] - b1[0], a1[1] - b1[1]
    den = bx * ay - by * ax
    if abs(den) < PARALLEL_EPS:
        return None
    alpha = (by * cx - bx * cy) / den
    beta = -(ay * cx - ax * cy) / den
    if alpha < 0 or alpha > 1 or beta < 0 or beta > 1:
        return None
    return Intersection(a1[0] + alpha * ax, a1[1] + alpha * ay, alpha, beta)


def project(segment: Segment, point) -> Projection:
    a = segment.p1
    ab = segment.p2 - segment.p1
    ab2 = ab.dot(ab)
    if ab2 == 0:
        return Projection(a, 0.0, False)
    t = (Point(*point) - a).dot(ab) / ab2
    return Projection(a + ab * t, t, True)


def distance_to_segment(segment: Segment, point) -> float:
    proj = project(segment, point)
    if proj.offset < 0 or proj.offset > 1:
        return min(segment.p1.distance_to(point), segment.p2.distance_to(point))
    return proj.point.distance_to(point)


def nearest_point(loc, points: Iterable[Point], max_distance=math.inf) -> Optional[Point]:
    best, best_d = None, max_distance
    for p in points:
        d = p.distance_to(loc)
        if d < best_d:
            best, best_d = p, d
    return best


def nearest_segment(loc, segments: Iterable[Segment], max_distance=math.inf) -> Optional[Segment]:
    best, best_d = None, max_distance
    for s in segments:
        d = distance_to_segment(s, loc)
        if d < best_d:
            best, best_d = s, d
    return best
