#!/usr/bin/env python3
"""
road_weaver.py
==============
Headless driver: builds a grid of roads, generates the world around it and
runs the traffic lights for a number of simulated seconds.

Usage::

    road-weaver --rows 3 --cols 3 --block 400 --ticks 12
    road-weaver --param road_width=60 --param roundness=6 --dump > world.json

Parameters come from :data:`config.DEFAULT_PARAMS`, then
``ROAD_WEAVER_<KEY>`` environment variables, then ``--param`` flags.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence

from config import make_params, params_from_env
from control_center import TICK_DURATION
from errors import RoadWeaverError
from geometry import Point, Segment
from logging_setup import setup_logging
from markings import Light
from roads import RoadGraph
from world import World

log = logging.getLogger("main")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def grid_graph(rows: int, cols: int, block: float) -> RoadGraph:
    graph = RoadGraph()
    pts = [[Point(c * block, r * block) for c in range(cols)] for r in range(rows)]
    for row in pts:
        for p in row:
            graph.try_add_point(p)
    for r in range(rows):
        for c in range(cols):
            if c + 1 < cols:
                graph.try_add_segment(Segment(pts[r][c], pts[r][c + 1]))
            if r + 1 < rows:
                graph.try_add_segment(Segment(pts[r][c], pts[r + 1][c]))
    return graph


def approach_lights(graph: RoadGraph, road_width: float) -> List[Light]:
    """One light per approach of every point joining more than two roads,
    set back one road width from the junction and facing incoming traffic."""
    lights = []
    for p in graph.points:
        incident = graph.segments_with_point(p)
        if len(incident) <= 2:
            continue
        for s in incident:
            other = s.p2 if s.p1 == p else s.p1
            d = (other - p).normalize()
            lights.append(Light(p + d * road_width, -d, road_width / 2, road_width / 4))
    return lights


def _parse_param(text: str):
    key, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    return key.strip(), value.strip()


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="road-weaver", description=__doc__.split("\n\n")[0].strip())
    ap.add_argument("--rows", type=int, default=2)
    ap.add_argument("--cols", type=int, default=3)
    ap.add_argument("--block", type=float, default=500.0, help="distance between grid points")
    ap.add_argument("--ticks", type=int, default=6, help="simulated seconds to run the lights for")
    ap.add_argument("--seed", type=int, default=None, help="tree placement seed")
    ap.add_argument("--param", action="append", type=_parse_param, default=[], metavar="KEY=VALUE")
    ap.add_argument("--dump", action="store_true", help="print the generated world as JSON")
    ap.add_argument("--log-level", default="INFO", type=str.upper, choices=LOG_LEVELS)
    ap.add_argument("--log-file", default=None)
    return ap


def run(args: argparse.Namespace) -> World:
    overrides = params_from_env()
    overrides.update(dict(args.param))
    params = make_params(overrides)

    graph = grid_graph(args.rows, args.cols, args.block)
    markings = approach_lights(graph, params["ROAD_WIDTH"])
    world = World(graph, params, markings=markings, seed=args.seed)

    for tick in range(1, args.ticks + 1):
        world.ensure_synced()
        world.update(tick * TICK_DURATION)
        for cc in world.control_centers:
            states = " ".join(l.state.value[0].upper() for l in cc.lights)
            log.info("t=%ds center=(%g,%g) %s", tick, cc.center.x, cc.center.y, states)
    return world


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)
    try:
        world = run(args)
    except RoadWeaverError as e:
        log.error("%s", e)
        return 2
    if args.dump:
        json.dump(world.serialize_state(), sys.stdout)
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
