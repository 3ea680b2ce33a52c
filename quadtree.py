QT_MAX_OBJECTS = 16
QT_MAX_LEVELS  = 8


def rects_overlap(a, b):
    ax, ay, aw, ah = a; bx, by, bw, bh = b
    return not (ax + aw < bx or bx + bw < ax or ay + ah < by or by + bh < ay)


def _rect_union(a, b):
    if a is None: return b
    x0 = min(a[0], b[0]); y0 = min(a[1], b[1])
    x1 = max(a[0] + a[2], b[0] + b[2]); y1 = max(a[1] + a[3], b[1] + b[3])
    return (x0, y0, x1 - x0, y1 - y0)


class Quadtree:
    """Region quadtree over axis-aligned rects ``(x, y, w, h)``.

    An item lives in the deepest node whose quadrant holds its center. Items
    may stick out of their quadrant, so every node also keeps the extent of
    all rects stored below it and queries prune on that extent.
    """

    def __init__(self, bounds, depth=0):
        self.x, self.y, self.w, self.h = bounds
        self.depth = depth
        self.items = []
        self.children = None
        self.extent = None

    def __len__(self):
        n = len(self.items)
        if self.children:
            n += sum(len(c) for c in self.children)
        return n

    @classmethod
    def from_polygons(cls, polygons, margin=0.0):
        """Index ``polygons`` by their bounding boxes grown by ``margin``."""
        boxes = []
        for poly in polygons:
            bb = poly.bounding_box()
            if bb is not None:
                boxes.append((bb.expanded(margin).as_rect(), poly))
        bounds = None
        for rect, _ in boxes:
            bounds = _rect_union(bounds, rect)
        qt = cls(bounds or (0.0, 0.0, 0.0, 0.0))
        for rect, poly in boxes:
            qt.insert(rect, poly)
        return qt

    def _subdivide(self):
        hx, hy = self.w / 2, self.h / 2; x, y = self.x, self.y; d = self.depth + 1
        self.children = (
            Quadtree((x,      y,      hx, hy), d),
            Quadtree((x + hx, y,      hx, hy), d),
            Quadtree((x,      y + hy, hx, hy), d),
            Quadtree((x + hx, y + hy, hx, hy), d),
        )

    def _child(self, rect):
        cx = rect[0] + rect[2] / 2; cy = rect[1] + rect[3] / 2
        right = cx >= self.x + self.w / 2; bottom = cy >= self.y + self.h / 2
        return self.children[int(right) + 2 * int(bottom)]

    def insert(self, rect, payload):
        self.extent = _rect_union(self.extent, rect)
        if len(self.items) < QT_MAX_OBJECTS or self.depth >= QT_MAX_LEVELS:
            self.items.append((rect, payload)); return
        if self.children is None:
            self._subdivide()
        self._child(rect).insert(rect, payload)

    def query(self, rect, out=None):
        """Payloads whose rect overlaps ``rect``."""
        if out is None:
            out = []
        if self.extent is None or not rects_overlap(rect, self.extent):
            return out
        for r, p in self.items:
            if rects_overlap(r, rect):
                out.append(p)
        if self.children:
            for c in self.children:
                c.query(rect, out)
        return out
