"""End-to-end tests for world generation, signals and state records."""
import copy
import json

import pytest

from control_center import TICK_DURATION
from errors import ConfigError, StateError, UnknownMarkingError
from geometry import Point, Segment
from markings import Light, LightState, Stop
from roads import RoadGraph
from world import World

G, Y, R = LightState.GREEN, LightState.YELLOW, LightState.RED


def _total(segments):
    return sum(s.length() for s in segments)


def _cross(arm=300):
    c = Point(0, 0)
    ends = [Point(arm, 0), Point(0, arm), Point(-arm, 0), Point(0, -arm)]
    return RoadGraph(segments=[Segment(c, e) for e in ends])


def _cross_lights():
    return [Light(Point(100, 0), Point(-1, 0), 20, 10),
            Light(Point(0, 100), Point(0, -1), 20, 10),
            Light(Point(-100, 0), Point(1, 0), 20, 10),
            Light(Point(0, -100), Point(0, 1), 20, 10)]


CROSS_PARAMS = dict(ROAD_WIDTH=40, ROUNDNESS=0, BUILDING_MIN_LENGTH=1000, TREE_SIZE=40)


def test_single_road_end_to_end() -> None:
    graph = RoadGraph(segments=[Segment(Point(0, 0), Point(200, 0))])
    params = dict(ROAD_WIDTH=20, ROUNDNESS=0, BUILDING_MIN_LENGTH=250, BUILDING_WIDTH=10, SPACING=10)

    world = World(graph, params, seed=1)

    assert len(world.envelopes) == 1
    assert len(world.road_borders) == 4
    assert _total(world.road_borders) == pytest.approx(440)
    assert _total(world.lane_guides) == pytest.approx(420)
    assert world.buildings == []
    # the only free space in the box is the road itself
    assert world.trees == []
    assert world.control_centers == []


def test_empty_graph_generates_nothing() -> None:
    world = World(RoadGraph(), markings=_cross_lights())

    assert world.envelopes == [] and world.road_borders == [] and world.lane_guides == []
    assert world.buildings == [] and world.trees == []
    assert world.intersections() == []
    assert world.control_centers == []


def test_cross_borders_are_cut_at_the_junction() -> None:
    world = World(_cross(), CROSS_PARAMS, seed=2)

    # per arm: two sides of 300 - 20 plus the far end cap
    assert len(world.road_borders) == 12
    assert _total(world.road_borders) == pytest.approx(4 * (2 * 280 + 40))
    for s in world.road_borders:
        mid = s.midpoint()
        assert not (abs(mid.x) < 20 and abs(mid.y) < 20)


def test_buildings_and_trees_are_generated_around_roads() -> None:
    params = dict(ROAD_WIDTH=40, ROUNDNESS=4, BUILDING_WIDTH=60, BUILDING_MIN_LENGTH=80,
                  SPACING=20, TREE_SIZE=40)

    world = World(_cross(), params, seed=4)

    assert world.buildings
    assert world.trees
    for t in world.trees:
        for e in world.envelopes:
            assert not e.polygon.contains_point(t.center)
        for b in world.buildings:
            assert not b.base.contains_point(t.center)


def test_cross_gets_one_control_center() -> None:
    lights = _cross_lights()

    world = World(_cross(), CROSS_PARAMS, markings=lights, seed=2)

    assert world.intersections() == [Point(0, 0)]
    assert len(world.control_centers) == 1
    cc = world.control_centers[0]
    assert cc.center == Point(0, 0)
    assert cc.lights == lights
    assert cc.total_ticks() == 12
    assert [l.state for l in lights] == [G, R, R, R]

    world.update(3 * TICK_DURATION)
    assert [l.state for l in lights] == [R, G, R, R]

    world.update(5 * TICK_DURATION)
    assert [l.state for l in lights] == [R, Y, R, R]


def test_lights_split_between_nearest_intersections() -> None:
    a, b = Point(0, 0), Point(1000, 0)
    graph = RoadGraph(segments=[Segment(a, b),
                                Segment(a, Point(0, 300)), Segment(a, Point(0, -300)),
                                Segment(b, Point(1000, 300)), Segment(b, Point(1000, -300))])
    near_a = [Light(Point(100, 0), Point(-1, 0), 20, 10), Light(Point(0, 100), Point(0, -1), 20, 10)]
    near_b = [Light(Point(900, 0), Point(1, 0), 20, 10)]

    world = World(graph, CROSS_PARAMS, markings=near_a + near_b, seed=3)

    assert sorted(world.intersections()) == [a, b]
    by_center = {cc.center: cc for cc in world.control_centers}
    assert by_center[a].lights == near_a
    assert by_center[b].lights == near_b
    assert by_center[b].total_ticks() == 5


def test_no_junction_falls_back_to_point_nearest_first_marking() -> None:
    graph = RoadGraph(segments=[Segment(Point(0, 0), Point(200, 0))])
    light = Light(Point(190, 5), Point(-1, 0), 10, 5)

    world = World(graph, CROSS_PARAMS, markings=[light], seed=1)

    assert world.intersections() == [Point(200, 0)]
    assert [cc.center for cc in world.control_centers] == [Point(200, 0)]
    assert world.control_centers[0].lights == [light]


def test_markings_without_lights_get_no_control_center() -> None:
    world = World(_cross(), CROSS_PARAMS, markings=[Stop(Point(50, 0), Point(-1, 0), 20, 5)], seed=1)

    assert world.control_centers == []


def test_ensure_synced_regenerates_only_on_change() -> None:
    graph = RoadGraph(segments=[Segment(Point(0, 0), Point(200, 0))])
    world = World(graph, CROSS_PARAMS, seed=1)

    assert world.ensure_synced() is False

    graph.try_add_segment(Segment(Point(200, 0), Point(200, 300)))
    assert world.ensure_synced() is True
    assert len(world.envelopes) == 2
    assert world.ensure_synced() is False


def test_add_and_remove_marking_rebuild_control_centers() -> None:
    world = World(_cross(), CROSS_PARAMS, seed=1)
    light = Light(Point(100, 0), Point(-1, 0), 20, 10)

    world.add_marking(light)
    assert len(world.control_centers) == 1
    assert world.control_centers[0].lights == [light]

    assert world.remove_marking(light) is True
    assert world.control_centers == []
    assert world.remove_marking(light) is False


def test_state_round_trip_does_not_regenerate() -> None:
    world = World(_cross(), dict(CROSS_PARAMS, BUILDING_MIN_LENGTH=80), markings=_cross_lights(), seed=6)
    state = world.serialize_state()
    json.dumps(state)

    restored = World.restore_state(state)

    assert restored.serialize_state() == state
    assert restored.params == world.params
    assert len(restored.trees) == len(world.trees)
    assert restored.ensure_synced() is False
    assert len(restored.control_centers) == 1
    assert [l.state for l in restored.control_centers[0].lights] == [G, R, R, R]


def test_restore_rejects_unknown_marking_type() -> None:
    state = World(_cross(), CROSS_PARAMS, markings=_cross_lights(), seed=1).serialize_state()
    state = copy.deepcopy(state)
    state["markings"][0]["type"] = "bogus"

    with pytest.raises(UnknownMarkingError):
        World.restore_state(state)


def test_restore_rejects_malformed_record() -> None:
    state = World(_cross(), CROSS_PARAMS, seed=1).serialize_state()
    del state["graph"]

    with pytest.raises(StateError):
        World.restore_state(state)


def test_zero_building_step_fails_before_generation() -> None:
    graph = RoadGraph(segments=[Segment(Point(0, 0), Point(200, 0))])

    with pytest.raises(ConfigError):
        World(graph, dict(SPACING=0, BUILDING_MIN_LENGTH=0))
