import logging
import math

from envelope import Envelope
from geometry import Segment
from polygon import Polygon, union

log = logging.getLogger("buildings")

DEDUP_EPS = 0.01


class Building:
    __slots__ = ("base", "height")

    def __init__(self, base: Polygon, height: float = 200):
        self.base = base
        self.height = height

    def __repr__(self):
        return f"Building({len(self.base.points)} points, height={self.height})"

    def to_record(self):
        return {"base": self.base.to_record(), "height": self.height}

    @classmethod
    def load(cls, data):
        return cls(Polygon.load(data["base"]), data.get("height", 200))


class BuildingSystem:
    """Lines the roads of a graph with rectangular building footprints.

    Footprints are laid end to end along the outer guide lines of a wide
    envelope around every road, then thinned greedily in index order: the
    later of two clashing footprints is dropped. The result depends on
    segment order and is not an optimal packing.
    """

    def __init__(self, params):
        self.params = params
        self.buildings = []

    def reset(self):
        self.buildings.clear()

    def _guides(self, graph):
        p = self.params
        width = p["ROAD_WIDTH"] + p["BUILDING_WIDTH"] + p["SPACING"] * 2
        envelopes = [Envelope(s, width, p["ROUNDNESS"]) for s in graph.segments]
        guides = union([e.polygon for e in envelopes])
        return [g for g in guides if g.length() >= p["BUILDING_MIN_LENGTH"]]

    def _supports(self, guides):
        min_len = self.params["BUILDING_MIN_LENGTH"]
        spacing = self.params["SPACING"]
        supports = []
        if min_len + spacing <= 0:
            return supports
        for g in guides:
            length = g.length() + spacing
            count = math.floor(length / (min_len + spacing))
            if count < 1:
                continue
            build_len = length / count - spacing
            d = g.direction_vector()
            for i in range(count):
                p1 = g.p1 + d * (build_len * i + spacing * i)
                p2 = p1 + d * build_len
                supports.append(Segment(p1, p2))
        return supports

    def _dedup(self, bases):
        min_gap = self.params["SPACING"] - DEDUP_EPS
        i = 0
        while i < len(bases) - 1:
            j = i + 1
            while j < len(bases):
                if bases[i].intersects(bases[j]) or bases[i].distance_to_polygon(bases[j]) < min_gap:
                    del bases[j]  # later indices shift down; j stays
                else:
                    j += 1
            i += 1
        return bases

    def generate(self, graph):
        self.buildings = []
        if not graph.segments:
            return self.buildings
        guides = self._guides(graph)
        supports = self._supports(guides)
        bases = [Envelope(s, self.params["BUILDING_WIDTH"], 1).polygon for s in supports]
        kept = self._dedup(bases)
        self.buildings = [Building(b) for b in kept]
        log.debug("buildings: %d guides, %d candidates, %d kept", len(guides), len(supports), len(kept))
        return self.buildings

    def serialize_state(self):
        return {"buildings": [b.to_record() for b in self.buildings]}

    def restore_state(self, state):
        self.buildings = [Building.load(b) for b in state.get("buildings", [])]
