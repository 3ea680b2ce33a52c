import logging
import math
import random

from geometry import Point, lerp
from polygon import BoundingBox, Polygon
from quadtree import Quadtree

log = logging.getLogger("trees")

MAX_FAILED_ATTEMPTS = 200
TREE_BASE_VERTICES = 32


class Tree:
    """A tree stamp. ``base`` is a noisy circle used for spacing and drawing;
    the noise depends only on the center and size, so a reloaded tree gets
    the same outline."""

    def __init__(self, center, size=50, height_coefficient=0.3, level_count=7):
        self.center = Point(*center)
        self.size = size
        self.height_coefficient = height_coefficient
        self.level_count = level_count
        self.base = self._level(self.center, size)

    def __repr__(self):
        return f"Tree(center={tuple(self.center)}, size={self.size})"

    def _level(self, point, size):
        rad = size / 2
        pts = []
        for k in range(TREE_BASE_VERTICES):
            a = k * 2 * math.pi / TREE_BASE_VERTICES
            noise = math.cos(math.fmod((a + self.center.x) * size, 17)) ** 2
            pts.append(point.translate(a, rad * lerp(0.5, 1, noise)))
        return Polygon(pts)

    def to_record(self):
        return {"center": self.center.to_record(), "size": self.size,
                "heightCoefficient": self.height_coefficient, "levelCount": self.level_count}

    @classmethod
    def load(cls, data):
        return cls(Point.load(data["center"]), data.get("size", 50),
                   data.get("heightCoefficient", 0.3), data.get("levelCount", 7))


class TreeSystem:
    """Scatters trees near (but clear of) roads and buildings by rejection
    sampling inside the bounding box of the built area.

    Sampling stops after :data:`MAX_FAILED_ATTEMPTS` consecutive rejections;
    every accepted tree resets the count.
    """

    def __init__(self, params, seed=None):
        self.params = params
        self.trees = []
        self._rng = random.Random(seed)

    def reset(self):
        self.trees.clear()

    def _accepts(self, p, nearby, size):
        if any(poly.contains_point(p) for poly in nearby):
            return False
        dists = [poly.distance_to_point(p) for poly in nearby]
        if any(d <= size / 2 for d in dists):
            return False
        if any(t.center.distance_to(p) <= size for t in self.trees):
            return False
        return any(d < size * 2 for d in dists)

    def generate(self, occupied, bounds_points):
        """Place trees around ``occupied`` polygons within the box spanned by
        ``bounds_points``. Returns the new tree list."""
        self.trees = []
        bb = BoundingBox.around(bounds_points)
        if bb is None or not occupied:
            return self.trees
        size = self.params["TREE_SIZE"]
        # polygons further than 2*size can neither block nor support a tree
        index = Quadtree.from_polygons(occupied, margin=size * 2)
        attempts = 0; fails = 0
        while fails < MAX_FAILED_ATTEMPTS:
            attempts += 1
            p = Point(lerp(bb.xmin, bb.xmax, self._rng.random()), lerp(bb.ymax, bb.ymin, self._rng.random()))
            nearby = index.query((p.x, p.y, 0.0, 0.0))
            if self._accepts(p, nearby, size):
                self.trees.append(Tree(p, size=size))
                fails = 0
                continue
            fails += 1
        log.debug("trees: %d placed after %d samples", len(self.trees), attempts)
        return self.trees

    def serialize_state(self):
        return {"trees": [t.to_record() for t in self.trees]}

    def restore_state(self, state):
        self.trees = [Tree.load(t) for t in state.get("trees", [])]
