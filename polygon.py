"""
polygon.py
==========
Closed vertex loops and the segment-splitting union used to merge road
envelopes into border lines.

The union is not a general boolean union: every polygon is split against
every other one (:func:`multi_break`) and an edge survives when its midpoint
is outside all the *other* polygons. That is exact for the convex capsules
produced by :class:`envelope.Envelope`, which is all the generator feeds it.
"""

from __future__ import annotations

import math
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from geometry import Point, Segment, distance_to_segment, intersect


class BoundingBox(NamedTuple):
    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @classmethod
    def around(cls, points: Iterable[Point]) -> Optional["BoundingBox"]:
        xs = []; ys = []
        for x, y in points:
            xs.append(x); ys.append(y)
        if not xs:
            return None
        return cls(min(xs), min(ys), max(xs), max(ys))

    def intersects(self, other: "BoundingBox") -> bool:
        return (self.xmax >= other.xmin and self.xmin <= other.xmax
                and self.ymax >= other.ymin and self.ymin <= other.ymax)

    def expanded(self, margin: float) -> "BoundingBox":
        return BoundingBox(self.xmin - margin, self.ymin - margin, self.xmax + margin, self.ymax + margin)

    def as_rect(self):
        return (self.xmin, self.ymin, self.xmax - self.xmin, self.ymax - self.ymin)


def _edges_of(points: Sequence[Point]) -> List[Segment]:
    n = len(points)
    return [Segment(points[i], points[(i + 1) % n]) for i in range(n)]


class Polygon:
    def __init__(self, points: Sequence[Point], segments: Optional[Sequence[Segment]] = None):
        self._points: List[Point] = [Point(*p) for p in points]
        self.segments: List[Segment] = list(segments) if segments is not None else _edges_of(self._points)

    @property
    def points(self) -> List[Point]:
        return self._points

    @points.setter
    def points(self, points):
        self._points = [Point(*p) for p in points]
        self.segments = _edges_of(self._points)

    def __repr__(self):
        return f"Polygon({len(self._points)} points, {len(self.segments)} edges)"

    def with_segments(self, segments: Sequence[Segment]) -> "Polygon":
        return Polygon(self._points, segments)

    def bounding_box(self) -> Optional[BoundingBox]:
        return BoundingBox.around(self._points)

    def contains_point(self, point) -> bool:
        """Parity of edge crossings along a horizontal ray towards +x.

        Each edge is half-open in y, so a ray through a shared vertex counts
        once. Works on the edge list, so split edges give the same answer.
        """
        x, y = point
        inside = False
        for s in self.segments:
            (x1, y1), (x2, y2) = s.p1, s.p2
            if (y1 > y) != (y2 > y):
                xinters = (x2 - x1) * (y - y1) / (y2 - y1) + x1
                if x < xinters:
                    inside = not inside
        return inside

    def contains_segment(self, segment: Segment) -> bool:
        return self.contains_point(segment.midpoint())

    def intersects(self, other: "Polygon") -> bool:
        for s1 in self.segments:
            for s2 in other.segments:
                hit = intersect(s1.p1, s1.p2, s2.p1, s2.p2)
                if hit and hit.is_interior():
                    return True
        return False

    def distance_to_point(self, point) -> float:
        if not self.segments:
            return math.inf
        return min(distance_to_segment(s, point) for s in self.segments)

    def distance_to_polygon(self, other: "Polygon") -> float:
        d = min((other.distance_to_point(p) for p in self._points), default=math.inf)
        return min(d, min((self.distance_to_point(p) for p in other.points), default=math.inf))

    @classmethod
    def load(cls, data) -> "Polygon":
        return cls([Point.load(p) for p in data["points"]])

    def to_record(self):
        return {"points": [p.to_record() for p in self._points]}


def break_edges(edges1: Sequence[Segment], edges2: Sequence[Segment]) -> Tuple[List[Segment], List[Segment]]:
    """Split both edge lists at every mutual interior crossing.

    Works on copies. Each split shortens the current edge and inserts the
    remainder right after it, so later iterations see the pieces.
    """
    segs1 = list(edges1); segs2 = list(edges2)
    i = 0
    while i < len(segs1):
        j = 0
        while j < len(segs2):
            a = segs1[i]; b = segs2[j]
            hit = intersect(a.p1, a.p2, b.p1, b.p2)
            if hit and hit.is_interior():
                p = hit.point
                segs1[i] = Segment(a.p1, p, a.one_way)
                segs1.insert(i + 1, Segment(p, a.p2, a.one_way))
                segs2[j] = Segment(b.p1, p, b.one_way)
                segs2.insert(j + 1, Segment(p, b.p2, b.one_way))
            j += 1
        i += 1
    return segs1, segs2


def multi_break(polygons: Sequence[Polygon]) -> List[Polygon]:
    """Pairwise :func:`break_edges` in ``i < j`` order. Returns new polygons."""
    edges = [list(p.segments) for p in polygons]
    for i in range(len(edges)):
        for j in range(i + 1, len(edges)):
            edges[i], edges[j] = break_edges(edges[i], edges[j])
    return [p.with_segments(e) for p, e in zip(polygons, edges)]


def union(polygons: Sequence[Polygon]) -> List[Segment]:
    broken = multi_break(polygons)
    kept: List[Segment] = []
    for i, poly in enumerate(broken):
        others = [q for j, q in enumerate(broken) if j != i]
        for s in poly.segments:
            if not any(q.contains_segment(s) for q in others):
                kept.append(s)
    return kept
