"""Tests for the road graph store."""
import pytest

from errors import StateError
from geometry import Point, Segment
from roads import RoadGraph


def _triangle():
    a, b, c = Point(0, 0), Point(100, 0), Point(0, 100)
    return RoadGraph([a, b, c], [Segment(a, b), Segment(b, c), Segment(c, a)]), (a, b, c)


def test_points_are_deduplicated_by_value() -> None:
    graph = RoadGraph()

    assert graph.try_add_point(Point(1, 2)) is True
    assert graph.try_add_point(Point(1.0, 2.0)) is False
    assert graph.points == [Point(1, 2)]


def test_reversed_duplicate_segment_is_rejected() -> None:
    graph, (a, b, _) = _triangle()
    before = graph.hash()

    assert graph.try_add_segment(Segment(b, a)) is False
    assert len(graph.segments) == 3
    assert graph.hash() == before


def test_degenerate_segment_is_rejected() -> None:
    graph = RoadGraph()

    assert graph.try_add_segment(Segment(Point(5, 5), Point(5, 5))) is False
    assert graph.segments == []


def test_adding_segment_registers_endpoints() -> None:
    graph = RoadGraph()

    assert graph.try_add_segment(Segment(Point(0, 0), Point(10, 0)))
    assert graph.points == [Point(0, 0), Point(10, 0)]


def test_remove_point_cascades_to_incident_segments() -> None:
    graph, (a, b, c) = _triangle()

    assert graph.remove_point(a) is True
    assert graph.points == [b, c]
    assert graph.segments == [Segment(b, c)]
    assert graph.remove_point(a) is False


def test_remove_segment_matches_either_direction() -> None:
    graph, (a, b, _) = _triangle()

    assert graph.remove_segment(Segment(b, a)) is True
    assert graph.remove_segment(Segment(b, a)) is False
    assert len(graph.segments) == 2


def test_incident_queries() -> None:
    graph, (a, b, c) = _triangle()
    d = Point(-50, 0)
    graph.try_add_segment(Segment(a, d))

    assert graph.degree(a) == 3
    assert graph.degree(d) == 1
    assert set(graph.segments_with_point(b)) == {Segment(a, b), Segment(b, c)}


def test_hash_tracks_content() -> None:
    g1, _ = _triangle()
    g2, _ = _triangle()

    assert g1.hash() == g2.hash()
    g2.try_add_point(Point(7, 7))
    assert g1.hash() != g2.hash()


def test_dispose_clears_everything() -> None:
    graph, _ = _triangle()

    graph.dispose()

    assert graph.points == [] and graph.segments == []


def test_record_round_trip() -> None:
    graph, _ = _triangle()

    again = RoadGraph.load(graph.to_record())

    assert again.points == graph.points
    assert again.segments == graph.segments
    assert again.hash() == graph.hash()


def test_malformed_record_raises_state_error() -> None:
    with pytest.raises(StateError):
        RoadGraph.load({"points": [{"x": 1}]})


def test_degenerate_segment_does_not_match_real_road() -> None:
    a, b = Point(0, 0), Point(10, 0)
    graph = RoadGraph(segments=[Segment(a, b)])

    assert graph.contains_segment(Segment(a, a)) is False
    assert graph.remove_segment(Segment(a, a)) is False
    assert graph.segments == [Segment(a, b)]
