"""
world.py
========
Derives the drivable world from a :class:`roads.RoadGraph`.

:meth:`World.generate` always rebuilds everything from scratch: road
envelopes and borders, lane guides, buildings, trees, and one traffic
:class:`control_center.ControlCenter` per signalised intersection. There is
no incremental update; callers that poll for edits use
:meth:`World.ensure_synced`, which regenerates only when the graph hash
moved.

The derived collections (``envelopes``, ``road_borders``, ``lane_guides``,
``buildings``, ``trees``, ``control_centers``) are replaced wholesale on
each pass and are meant to be read, not mutated, by renderers and agents.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from buildings import Building, BuildingSystem
from config import make_params, params_from_record, params_to_record
from control_center import ControlCenter
from decorations import Tree, TreeSystem
from envelope import Envelope
from errors import StateError
from geometry import Point, Segment, nearest_point
from markings import Light, Marking, load_marking
from polygon import union
from roads import RoadGraph

log = logging.getLogger("world")


class World:
    def __init__(self, graph: RoadGraph, params: Optional[Mapping[str, Any]] = None, *,
                 markings: Iterable[Marking] = (), seed: Optional[int] = None,
                 timestamp: float = 0.0):
        self.graph = graph
        self.params = make_params(params)
        self.markings: List[Marking] = list(markings)
        self.timestamp = timestamp
        self.envelopes: List[Envelope] = []
        self.road_borders: List[Segment] = []
        self.lane_guides: List[Segment] = []
        self.buildings: List[Building] = []
        self.trees: List[Tree] = []
        self.control_centers: List[ControlCenter] = []
        self._buildings = BuildingSystem(self.params)
        self._trees = TreeSystem(self.params, seed=seed)
        self._graph_key = None
        self.generate()

    # -------- generation --------
    def generate(self) -> None:
        p = self.params
        self.envelopes = [Envelope(s, p["ROAD_WIDTH"], p["ROUNDNESS"]) for s in self.graph.segments]
        self.road_borders = union([e.polygon for e in self.envelopes])
        self.lane_guides = self._generate_lane_guides()
        self.buildings = list(self._buildings.generate(self.graph))
        self.trees = list(self._generate_trees())
        self.generate_control_centers()
        self._graph_key = self.graph.hash()
        log.info("generated world: %d segments -> %d borders, %d lane guides, %d buildings, %d trees, %d control centers",
                 len(self.graph.segments), len(self.road_borders), len(self.lane_guides),
                 len(self.buildings), len(self.trees), len(self.control_centers))

    def _generate_lane_guides(self) -> List[Segment]:
        p = self.params
        envelopes = [Envelope(s, p["ROAD_WIDTH"] / 2, p["ROUNDNESS"]) for s in self.graph.segments]
        return union([e.polygon for e in envelopes])

    def _generate_trees(self) -> List[Tree]:
        points = [q for s in self.road_borders for q in (s.p1, s.p2)]
        points += [q for b in self.buildings for q in b.base.points]
        occupied = [b.base for b in self.buildings] + [e.polygon for e in self.envelopes]
        return self._trees.generate(occupied, points)

    def ensure_synced(self) -> bool:
        """Regenerate if the graph changed since the last pass."""
        key = self.graph.hash()
        if key == self._graph_key:
            return False
        log.debug("graph hash changed, regenerating")
        self.generate()
        return True

    # -------- signals --------
    def lights(self) -> List[Light]:
        return [m for m in self.markings if isinstance(m, Light)]

    def intersections(self, degree: int = 2) -> List[Point]:
        """Graph points joining more than ``degree`` segments. Falls back to the
        point nearest the first marking when the graph has no such point."""
        if not self.graph.points:
            return []
        counts: Dict[Point, int] = {}
        for s in self.graph.segments:
            counts[s.p1] = counts.get(s.p1, 0) + 1
            counts[s.p2] = counts.get(s.p2, 0) + 1
        found = [pt for pt, n in counts.items() if n > degree]
        if found:
            return found
        if not self.markings:
            return []
        near = nearest_point(self.markings[0].center, self.graph.points)
        return [near] if near is not None else []

    def generate_control_centers(self) -> List[ControlCenter]:
        self.control_centers = []
        lights = self.lights()
        if not lights:
            return self.control_centers
        candidates = self.intersections()
        if not candidates:
            return self.control_centers
        by_center: Dict[Point, ControlCenter] = {}
        for light in lights:
            center = nearest_point(light.center, candidates)
            cc = by_center.get(center)
            if cc is None:
                cc = ControlCenter(center, [], timestamp=self.timestamp,
                                   green_duration=self.params["GREEN_DURATION"],
                                   yellow_duration=self.params["YELLOW_DURATION"])
                by_center[center] = cc
                self.control_centers.append(cc)
            cc.add_light(light)
        return self.control_centers

    def add_marking(self, marking: Marking):
        self.markings.append(marking)
        self.generate_control_centers()

    def remove_marking(self, marking: Marking) -> bool:
        try:
            self.markings.remove(marking)
        except ValueError:
            return False
        self.generate_control_centers()
        return True

    def update(self, timestamp: float) -> None:
        """Advance every control center to ``timestamp`` (ms, non-decreasing)."""
        self.timestamp = timestamp
        for cc in self.control_centers:
            cc.update(timestamp)

    # -------- state --------
    def serialize_state(self) -> Dict[str, Any]:
        state = params_to_record(self.params)
        state.update({
            "graph": self.graph.to_record(),
            "envelopes": [e.to_record() for e in self.envelopes],
            "roadBorders": [s.to_record() for s in self.road_borders],
            "laneGuides": [s.to_record() for s in self.lane_guides],
            "markings": [m.to_record() for m in self.markings],
            "controlCenters": [c.to_record() for c in self.control_centers],
        })
        state.update(self._buildings.serialize_state())
        state.update(self._trees.serialize_state())
        return state

    @classmethod
    def restore_state(cls, state: Mapping[str, Any], timestamp: float = 0.0) -> "World":
        """Rebuild a world from :meth:`serialize_state` output without
        regenerating. Unknown marking types propagate as
        :class:`errors.UnknownMarkingError`."""
        try:
            world = cls.__new__(cls)
            world.graph = RoadGraph.load(state["graph"])
            world.params = params_from_record(state)
            world.timestamp = timestamp
            world.markings = [load_marking(m) for m in state.get("markings", [])]
            world.envelopes = [Envelope.load(e) for e in state.get("envelopes", [])]
            world.road_borders = [Segment.load(s) for s in state.get("roadBorders", [])]
            world.lane_guides = [Segment.load(s) for s in state.get("laneGuides", [])]
            world._buildings = BuildingSystem(world.params)
            world._buildings.restore_state(state)
            world._trees = TreeSystem(world.params)
            world._trees.restore_state(state)
            world.control_centers = [ControlCenter.load(c, world.markings, timestamp)
                                     for c in state.get("controlCenters", [])]
        except (KeyError, TypeError, ValueError) as e:
            raise StateError(f"malformed world record: {e}") from e
        world.buildings = list(world._buildings.buildings)
        world.trees = list(world._trees.trees)
        world._graph_key = world.graph.hash()
        return world
