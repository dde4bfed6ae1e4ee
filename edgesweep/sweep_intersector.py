"""
Candidate pair discovery for one or two sets of edges using a simple x-axis sweep line.

Each segment becomes an activate event at the low end of its sweep-axis extent
and a deactivate event at the high end. After sorting, every activate event
knows the sorted position of its own deactivate event, so the events that can
overlap it are exactly the ones between those two positions. Every activate
event found in that range belongs to a segment whose extent overlaps the
current one, and each unordered pair is seen once, from the segment that
activates first.

Still O(n^2) in the worst case (every segment spanning the same extent), but
the average case is far cheaper than testing all pairs.

Registration modes:
    - no group (GroupTag.none()): every overlapping pair is reported,
      including segments of the same edge. Needed for self-intersection.
    - own group per edge (GroupTag.own(i)): segments of the same edge are
      never paired; segments of different edges always are.
    - named groups (GroupTag.named('A') / 'B'): only A-B pairs are reported.

Main API:
    find_all(edges, collaborator, exhaustive=False)
    find_between(edges_a, edges_b, collaborator)
"""

import logging
from typing import Iterable, List, Optional

from .data_structures import Edge, EventKind, GroupTag, SegmentInterval, SweepEvent, as_edge
from .errors import EngineStateError, InvalidConfigurationError

logger = logging.getLogger(__name__)


GROUP_A = GroupTag.named('A')
GROUP_B = GroupTag.named('B')


def check_collaborator(collaborator) -> None:
    """Fail before any event is processed if there is nowhere to send pairs."""
    if collaborator is None:
        raise InvalidConfigurationError("an intersection collaborator is required")
    if not callable(getattr(collaborator, 'test', None)):
        raise InvalidConfigurationError(
            f"collaborator {type(collaborator).__name__} has no callable test(seg0, seg1)")


class EdgeSetIntersector:
    """
    Interface for strategies that find the segment pairs of one or two edge
    sets that need an intersection test.
    """

    def compute_self_intersections(self, edges: Iterable, collaborator,
                                   test_all_segments: bool = False) -> None:
        """
        Report candidate pairs within one set of edges.

        Args:
            edges: Edges to test
            collaborator: Receives each candidate pair through test(seg0, seg1)
            test_all_segments: Also pair segments belonging to the same edge
        """
        raise NotImplementedError()

    def compute_intersections(self, edges0: Iterable, edges1: Iterable, collaborator) -> None:
        """Report candidate pairs between two sets of edges."""
        raise NotImplementedError()


class SimpleSweepLineIntersector(EdgeSetIntersector):
    """
    One-shot sweep engine. Build a new instance for every call; an engine
    that has swept refuses further use.
    """

    def __init__(self, sweep_axis: int = 0, stop_when_done: bool = True):
        self.sweep_axis = sweep_axis
        self.stop_when_done = stop_when_done
        self.events: List[SweepEvent] = []
        self.n_segments = 0
        self.n_edges = 0
        # statistics
        self.n_overlaps = 0
        self.n_reported = 0
        self._prepared = False
        self._swept = False

    # ------------------------------------------------------------------
    # EdgeSetIntersector
    # ------------------------------------------------------------------

    def compute_self_intersections(self, edges, collaborator, test_all_segments=False):
        check_collaborator(collaborator)
        if test_all_segments:
            self.register(edges, GroupTag.none())
        else:
            self.register_own_groups(edges)
        self.prepare()
        self.sweep(collaborator)

    def compute_intersections(self, edges0, edges1, collaborator):
        check_collaborator(collaborator)
        self.register(edges0, GROUP_A)
        self.register(edges1, GROUP_B, source=1)
        self.prepare()
        self.sweep(collaborator)

    # ------------------------------------------------------------------
    # Event construction
    # ------------------------------------------------------------------

    def register(self, edges: Iterable, group: Optional[GroupTag] = None, source: int = 0) -> None:
        """Add events for every segment of ``edges``, all tagged with ``group``."""
        self._check_open()
        if group is None:
            group = GroupTag.none()
        for edge_index, edge in enumerate(edges):
            self._add(as_edge(edge), edge_index, group, source)

    def register_own_groups(self, edges: Iterable) -> None:
        """
        Add events for every segment of ``edges``, each edge in its own group.

        Own groups are numbered per engine, so edges from separate calls never
        share a group.
        """
        self._check_open()
        for edge_index, edge in enumerate(edges):
            self._add(as_edge(edge), edge_index, GroupTag.own(self.n_edges))

    def _check_open(self) -> None:
        if self._prepared:
            raise EngineStateError("cannot register edges after events have been prepared")

    def _add(self, edge: Edge, edge_index: int, group: GroupTag, source: int = 0) -> None:
        self._check_open()
        self.n_edges += 1
        # edges with fewer than two points have no segments
        for i in range(edge.num_points - 1):
            interval = SegmentInterval.from_edge(edge, edge_index, i, self.sweep_axis, source)
            activate = SweepEvent(EventKind.ACTIVATE, interval.min_x, group, interval)
            deactivate = SweepEvent(EventKind.DEACTIVATE, interval.max_x, group, interval, partner=activate)
            activate.partner = deactivate
            self.events.append(activate)
            self.events.append(deactivate)
            self.n_segments += 1

    # ------------------------------------------------------------------
    # Ordering and span resolution
    # ------------------------------------------------------------------

    def prepare(self) -> None:
        """
        Sort events and resolve each activate event's span.

        Because deactivate events link to their activate event, the range of
        events to compare against a given activate event is known exactly
        once the order is fixed.
        """
        if self._prepared:
            raise EngineStateError("events have already been prepared")
        # list.sort is stable: equal keys keep registration order
        self.events.sort(key=SweepEvent.sort_key)
        for j, ev in enumerate(self.events):
            if ev.is_deactivate:
                ev.partner.span_end = j
        self._prepared = True
        logger.debug("prepared %d events for %d segments", len(self.events), self.n_segments)

    # ------------------------------------------------------------------
    # Overlap sweep
    # ------------------------------------------------------------------

    def sweep(self, collaborator) -> None:
        """Forward every overlapping, group-eligible segment pair to ``collaborator``."""
        check_collaborator(collaborator)
        if not self._prepared:
            raise EngineStateError("prepare() must run before sweep()")
        if self._swept:
            raise EngineStateError("engine has already swept; build a new engine for each call")
        self._swept = True
        self.n_overlaps = 0
        self.n_reported = 0

        for i, ev in enumerate(self.events):
            if ev.is_activate:
                self._process_overlaps(i, ev.span_end, ev, collaborator)
            if self.stop_when_done and getattr(collaborator, 'is_done', False):
                logger.debug("collaborator done after event %d of %d", i, len(self.events))
                break

        logger.debug("sweep examined %d overlaps, reported %d pairs", self.n_overlaps, self.n_reported)

    def _process_overlaps(self, start: int, end: int, ev0: SweepEvent, collaborator) -> None:
        interval0 = ev0.interval
        group0 = ev0.group
        events = self.events
        # the event at `end` is ev0's own deactivate event
        for i in range(start + 1, end):
            ev1 = events[i]
            if ev1.is_activate:
                self.n_overlaps += 1
                if group0.is_none or group0 != ev1.group:
                    interval0.compute_intersections(ev1.interval, collaborator)
                    self.n_reported += 1


def find_all(edges: Iterable, collaborator, exhaustive: bool = False,
             sweep_axis: int = 0, stop_when_done: bool = True) -> SimpleSweepLineIntersector:
    """
    Report candidate pairs within one edge collection on a fresh engine.

    Args:
        edges: Edges (or raw coordinate sequences) to test
        collaborator: Receives each candidate pair through test(seg0, seg1)
        exhaustive: Also pair segments of the same edge (self-intersection testing)
        sweep_axis: Coordinate index to sweep along

    Returns:
        The spent engine, for its overlap and report counters
    """
    engine = SimpleSweepLineIntersector(sweep_axis, stop_when_done)
    engine.compute_self_intersections(edges, collaborator, test_all_segments=exhaustive)
    return engine


def find_between(edges_a: Iterable, edges_b: Iterable, collaborator,
                 sweep_axis: int = 0, stop_when_done: bool = True) -> SimpleSweepLineIntersector:
    """Report candidate pairs between two edge collections on a fresh engine."""
    engine = SimpleSweepLineIntersector(sweep_axis, stop_when_done)
    engine.compute_intersections(edges_a, edges_b, collaborator)
    return engine
