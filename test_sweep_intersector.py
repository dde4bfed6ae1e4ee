#!/usr/bin/env python3
"""
Test the sweep engine: event ordering, group filtering and pair completeness.
"""

import sys
import os
os.environ.setdefault("MPLBACKEND", "Agg")
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import pytest

from edgesweep.data_structures import Edge, EventKind, GroupTag
from edgesweep.errors import EngineStateError, InvalidConfigurationError
from edgesweep.graph_utils import brute_force_overlaps, polyline_edges, random_uniform_edges, shared_extent_edges
from edgesweep.segment_intersector import CountingIntersector, PairCollector, SegmentIntersector
from edgesweep.sweep_intersector import SimpleSweepLineIntersector, find_all, find_between


EDGE_A = [(0.0, 0.0), (10.0, 0.0)]
EDGE_B = [(5.0, 1.0), (15.0, -1.0)]


def test_find_between_reports_single_cross_group_pair():
    """A spans x in [0, 10], B spans [5, 15]: one A-B pair."""
    collector = PairCollector()
    find_between([EDGE_A], [EDGE_B], collector)

    assert collector.num_tests == 1
    seg0, seg1 = collector.pairs[0]
    assert {seg0.source, seg1.source} == {0, 1}


def test_single_segment_collections_report_nothing():
    for edges in ([EDGE_A], [EDGE_B]):
        for exhaustive in (False, True):
            collector = PairCollector()
            find_all(edges, collector, exhaustive=exhaustive)
            assert collector.pairs == []


def test_disjoint_extents_never_reported():
    edges = [[(0.0, 0.0), (1.0, 1.0)], [(5.0, 0.0), (6.0, 1.0)]]

    for exhaustive in (False, True):
        collector = PairCollector()
        find_all(edges, collector, exhaustive=exhaustive)
        assert collector.pairs == []

    collector = PairCollector()
    find_between(edges[:1], edges[1:], collector)
    assert collector.pairs == []


def test_same_edge_pairs_only_in_exhaustive_mode():
    """Two overlapping segments of one edge: paired only when all segments are tested."""
    edge = [(0.0, 0.0), (10.0, 10.0), (2.0, 5.0)]

    collector = PairCollector()
    find_all([edge], collector, exhaustive=True)
    assert collector.pair_keys() == [((0, 0), (0, 1))]

    collector = PairCollector()
    find_all([edge], collector, exhaustive=False)
    assert collector.pairs == []


def test_exhaustive_mode_adds_same_edge_pairs_for_many_edges():
    edges = [
        [(0.0, 0.0), (10.0, 0.0), (0.0, 1.0)],  # two segments, both x in [0, 10]
        [(5.0, -1.0), (5.0, 5.0)],              # vertical segment at x = 5
    ]

    per_edge = PairCollector()
    find_all(edges, per_edge, exhaustive=False)
    assert per_edge.unordered_keys() == {((0, 0), (1, 0)), ((0, 1), (1, 0))}

    every_segment = PairCollector()
    find_all(edges, every_segment, exhaustive=True)
    assert every_segment.unordered_keys() == {((0, 0), (1, 0)), ((0, 1), (1, 0)), ((0, 0), (0, 1))}


def test_segment_never_paired_with_itself():
    edges = [[(0.0, 0.0), (4.0, 4.0), (1.0, 3.0), (5.0, 0.0)]]
    collector = PairCollector()
    find_all(edges, collector, exhaustive=True)

    assert collector.pairs
    for seg0, seg1 in collector.pairs:
        assert seg0.key != seg1.key


def test_touching_extents_are_reported():
    """Activate events sort before deactivate events at equal coordinates."""
    edges = [[(0.0, 0.0), (5.0, 0.0)], [(5.0, 3.0), (10.0, 3.0)]]
    collector = PairCollector()
    find_all(edges, collector)
    assert collector.pair_keys() == [((0, 0), (1, 0))]

    engine = SimpleSweepLineIntersector()
    engine.register(edges)
    engine.prepare()
    kinds_at_five = [ev.kind for ev in engine.events if ev.x == 5.0]
    assert kinds_at_five == [EventKind.ACTIVATE, EventKind.DEACTIVATE]


def test_zero_width_extents_at_same_coordinate():
    edges = [[(5.0, 0.0), (5.0, 1.0)], [(5.0, 2.0), (5.0, 3.0)]]
    collector = PairCollector()
    find_all(edges, collector)
    assert collector.pair_keys() == [((0, 0), (1, 0))]


def test_span_end_points_at_own_deactivate_event():
    engine = SimpleSweepLineIntersector()
    engine.register(polyline_edges(10, points_per_edge=4, seed=3))
    engine.prepare()

    activates = [ev for ev in engine.events if ev.is_activate]
    assert len(activates) == engine.n_segments == 30
    for i, ev in enumerate(engine.events):
        if ev.is_activate:
            assert ev.span_end > i
            assert engine.events[ev.span_end] is ev.partner
            assert ev.partner.partner is ev


def test_events_sorted_by_coordinate():
    engine = SimpleSweepLineIntersector()
    engine.register(random_uniform_edges(200, seed=5))
    engine.prepare()

    keys = [ev.sort_key() for ev in engine.events]
    assert keys == sorted(keys)
    assert len(engine.events) == 400


def test_malformed_edges_contribute_no_segments():
    edges = [[], [(1.0, 1.0)], [(0.0, 0.0), (2.0, 2.0)], [(1.0, 0.0), (1.0, 5.0)]]
    collector = PairCollector()
    engine = find_all(edges, collector)

    assert engine.n_segments == 2
    assert collector.pair_keys() == [((2, 0), (3, 0))]


@pytest.mark.parametrize("exhaustive", [False, True])
def test_matches_brute_force_overlaps(exhaustive):
    """Every overlapping, eligible pair is reported exactly once."""
    edges = polyline_edges(40, points_per_edge=6, extent=100.0, step=8.0, seed=11)
    collector = PairCollector()
    find_all(edges, collector, exhaustive=exhaustive)

    expected = {tuple(sorted(pair)) for pair in brute_force_overlaps(edges)}
    if not exhaustive:
        expected = {pair for pair in expected if pair[0][0] != pair[1][0]}

    assert len(collector.pairs) == len(collector.unordered_keys())
    assert collector.unordered_keys() == expected


def test_find_between_matches_brute_force_cross_pairs():
    edges_a = random_uniform_edges(150, extent=100.0, max_length=10.0, seed=1)
    edges_b = random_uniform_edges(150, extent=100.0, max_length=10.0, seed=2)
    collector = PairCollector()
    find_between(edges_a, edges_b, collector)

    expected = set()
    for i, a in enumerate(edges_a):
        a_lo, a_hi = sorted(a.coords[:, 0])
        for j, b in enumerate(edges_b):
            b_lo, b_hi = sorted(b.coords[:, 0])
            if a_lo <= b_hi and b_lo <= a_hi:
                expected.add((i, j))

    found = set()
    for seg0, seg1 in collector.pairs:
        assert seg0.source != seg1.source
        a, b = (seg0, seg1) if seg0.source == 0 else (seg1, seg0)
        found.add((a.edge_index, b.edge_index))

    assert len(found) == len(collector.pairs)
    assert found == expected


def test_repeated_calls_report_same_order():
    edges = polyline_edges(30, points_per_edge=5, seed=21)
    first, second = PairCollector(), PairCollector()
    find_all(edges, first, exhaustive=True)
    find_all(edges, second, exhaustive=True)
    assert first.pair_keys() == second.pair_keys()


def test_sweep_along_y_axis():
    edges = [[(0.0, 0.0), (0.0, 10.0)], [(5.0, 5.0), (5.0, 15.0)]]

    collector = PairCollector()
    find_all(edges, collector, sweep_axis=0)
    assert collector.pairs == []

    collector = PairCollector()
    find_all(edges, collector, sweep_axis=1)
    assert collector.pair_keys() == [((0, 0), (1, 0))]


def test_overlap_counter_includes_filtered_pairs():
    edge = [(0.0, 0.0), (10.0, 10.0), (2.0, 5.0)]
    collector = PairCollector()
    engine = find_all([edge], collector, exhaustive=False)

    assert engine.n_overlaps == 1
    assert engine.n_reported == 0


def test_uniform_input_is_subquadratic():
    n = 2000
    counter = CountingIntersector()
    engine = find_all(random_uniform_edges(n, extent=1000.0, max_length=10.0, seed=42), counter)

    assert counter.num_tests == engine.n_reported
    assert engine.n_overlaps < n * n / 20


def test_shared_extent_input_is_quadratic():
    n = 200
    counter = CountingIntersector()
    engine = find_all(shared_extent_edges(n), counter)

    assert engine.n_overlaps == n * (n - 1) // 2
    assert counter.num_tests == n * (n - 1) // 2


class _StopAfterFirst(SegmentIntersector):
    def test(self, seg0, seg1):
        self.num_tests += 1
        self.is_done = True


def test_sweep_stops_when_collaborator_done():
    edges = shared_extent_edges(3)

    collaborator = _StopAfterFirst()
    find_all(edges, collaborator)
    # the first activate event finishes its span before the flag is checked
    assert collaborator.num_tests == 2

    collaborator = _StopAfterFirst()
    find_all(edges, collaborator, stop_when_done=False)
    assert collaborator.num_tests == 3


def test_missing_collaborator_fails_before_registration():
    engine = SimpleSweepLineIntersector()
    with pytest.raises(InvalidConfigurationError):
        engine.compute_self_intersections([EDGE_A, EDGE_B], None)
    assert engine.events == []

    with pytest.raises(ValueError):
        find_between([EDGE_A], [EDGE_B], object())


def test_engine_cannot_be_reused():
    engine = find_all([EDGE_A, EDGE_B], PairCollector())
    with pytest.raises(EngineStateError):
        engine.compute_self_intersections([EDGE_A, EDGE_B], PairCollector())
    with pytest.raises(EngineStateError):
        engine.sweep(PairCollector())


def test_engine_phase_order_enforced():
    engine = SimpleSweepLineIntersector()
    engine.register([EDGE_A, EDGE_B])
    with pytest.raises(EngineStateError):
        engine.sweep(PairCollector())

    engine.prepare()
    with pytest.raises(EngineStateError):
        engine.register([EDGE_A])
    with pytest.raises(EngineStateError):
        engine.register([])
    with pytest.raises(EngineStateError):
        engine.register_own_groups([])
    with pytest.raises(EngineStateError):
        engine.prepare()


def test_group_tags_compare_by_value():
    assert GroupTag.own(3) == GroupTag.own(3)
    assert GroupTag.own(3) != GroupTag.own(4)
    assert GroupTag.named('A') != GroupTag.named('B')
    assert GroupTag.own(0) != GroupTag.named(0)
    assert GroupTag.none().is_none
    assert not GroupTag.named('A').is_none


def test_register_own_groups_tags_each_edge():
    engine = SimpleSweepLineIntersector()
    engine.register_own_groups([EDGE_A, [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0)]])

    groups = {(ev.interval.edge_index, ev.group) for ev in engine.events}
    assert groups == {(0, GroupTag.own(0)), (1, GroupTag.own(1))}


def test_own_groups_distinct_across_registrations():
    engine = SimpleSweepLineIntersector()
    engine.register_own_groups([[(0.0, 0.0), (10.0, 0.0)]])
    engine.register_own_groups([[(5.0, 1.0), (15.0, 1.0)]])
    engine.prepare()
    collector = PairCollector()
    engine.sweep(collector)

    # both edges sit at index 0 of their own list
    assert engine.n_edges == 2
    assert collector.pair_keys() == [((0, 0), (0, 0))]
    assert len({ev.group for ev in engine.events}) == 2


def test_edge_coordinates_validated():
    with pytest.raises(ValueError):
        Edge([1.0, 2.0, 3.0])
    assert Edge([]).num_segments == 0
    assert Edge([(0, 0), (1, 1), (0, 0)]).is_closed
