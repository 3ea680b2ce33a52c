import hashlib
import json
from typing import Iterable, List

from errors import StateError
from geometry import Point, Segment


class RoadGraph:
    """Road-center points and the segments joining them.

    Both stores keep insertion order and reject value duplicates; segments
    are undirected for identity (``a-b`` and ``b-a`` are the same road).
    This is the only input the editing layer mutates; generators just read
    ``points``, ``segments`` and :meth:`hash`.
    """

    def __init__(self, points: Iterable[Point] = (), segments: Iterable[Segment] = ()):
        self.points: List[Point] = []
        self.segments: List[Segment] = []
        for p in points:
            self.try_add_point(Point(*p))
        for s in segments:
            self.try_add_segment(s)

    # -------- queries --------
    def contains_point(self, point) -> bool:
        return point in self.points

    def contains_segment(self, segment: Segment) -> bool:
        return segment in self.segments

    def segments_with_point(self, point) -> List[Segment]:
        return [s for s in self.segments if s.includes(point)]

    def degree(self, point) -> int:
        return len(self.segments_with_point(point))

    # -------- mutation --------
    def add_point(self, point):
        self.points.append(point)

    def add_segment(self, segment: Segment):
        for p in (segment.p1, segment.p2):
            if p not in self.points:
                self.points.append(p)
        self.segments.append(segment)

    def try_add_point(self, point) -> bool:
        if self.contains_point(point):
            return False
        self.add_point(point)
        return True

    def try_add_segment(self, segment: Segment) -> bool:
        if segment.is_degenerate() or self.contains_segment(segment):
            return False
        self.add_segment(segment)
        return True

    def remove_segment(self, segment: Segment) -> bool:
        try:
            self.segments.remove(segment)
        except ValueError:
            return False
        return True

    def remove_point(self, point) -> bool:
        if point not in self.points:
            return False
        for s in self.segments_with_point(point):
            self.remove_segment(s)
        self.points.remove(point)
        return True

    def dispose(self):
        self.points.clear()
        self.segments.clear()

    # -------- state --------
    def hash(self) -> str:
        """Stable digest of the graph content, for change detection."""
        blob = json.dumps(self.to_record(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha1(blob.encode("utf-8")).hexdigest()

    def to_record(self):
        return {"points": [p.to_record() for p in self.points],
                "segments": [s.to_record() for s in self.segments]}

    @classmethod
    def load(cls, data) -> "RoadGraph":
        try:
            points = [Point.load(p) for p in data.get("points", [])]
            segments = [Segment.load(s) for s in data.get("segments", [])]
        except (KeyError, TypeError, ValueError) as e:
            raise StateError(f"malformed graph record: {e}") from e
        return cls(points, segments)
