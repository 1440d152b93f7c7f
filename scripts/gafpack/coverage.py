"""
Alignment-to-Graph Coverage Projection

An alignment's path is the concatenation of its node sequences, and the
target interval [start, end) is an offset range over that concatenation.
Coverage is attributed node by node:

    first node      node length - target start
    interior nodes  full node length
    last node       (target end - target start) - bases attributed so far

so the bases attributed for one record always sum to end - start. If the
declared length is shorter than what the walk already accounts for before
its last node, the declared length is widened to match and the last node gets
0. Pass ``strict_interval=True`` to reject such records instead.

Each consecutive pair of steps also yields one directed edge: (a, b) when a
is traversed forward, (b, a) when it is traversed in reverse.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from .accumulators import EdgeCoverage, NodeCoverage, QueryWeights
from .errors import GafpackError, IntervalOutOfRange, WalkLengthMismatch
from .gaf_utils import Step, decode_walk
from .graph_index import GraphIndex

logger = logging.getLogger(__name__)

NodeCallback = Callable[[int, int], None]
EdgeCallback = Callable[[int, int], None]


def allocate(
    steps: List[Step],
    target_start: int,
    target_end: int,
    node_length: Callable[[int], int],
    on_node: NodeCallback,
    on_edge: Optional[EdgeCallback] = None,
    strict_interval: bool = False,
) -> int:
    """
    Attribute an alignment's target interval to the nodes of its walk.

    Args:
        steps: Decoded walk, in traversal order (non-empty)
        target_start: Alignment start on the concatenated walk
        target_end: Alignment end on the concatenated walk (exclusive)
        node_length: Node id -> length
        on_node: Called as on_node(node_id, bases) once per step
        on_edge: Called as on_edge(from_id, to_id) between consecutive steps
        strict_interval: Raise WalkLengthMismatch instead of widening

    Returns:
        Total bases attributed

    Raises:
        IntervalOutOfRange: target start lies beyond the first node

    Examples:
        >>> from gafpack.gaf_utils import decode_path
        >>> lengths = {1: 10, 2: 5, 3: 8}
        >>> seen = {}
        >>> allocate(decode_path(">1>2>3"), 2, 20, lengths.get, seen.__setitem__)
        18
        >>> seen
        {1: 8, 2: 5, 3: 5}
    """
    target_len = target_end - target_start
    last = len(steps) - 1
    seen = 0

    for i, step in enumerate(steps):
        length = node_length(step.node_id)

        if i == 0:
            if length < target_start:
                raise IntervalOutOfRange(
                    f"Target start {target_start} exceeds length {length} of first node {step.node_id}"
                )
            length -= target_start

        if i == last:
            if target_len < seen:
                if strict_interval:
                    raise WalkLengthMismatch(
                        f"Walk covers {seen} bases before its last node but target length is {target_len}"
                    )
                logger.debug(f"Widening target length {target_len} to walk length {seen}")
                target_len = seen
            length = target_len - seen

        on_node(step.node_id, length)

        if i < last and on_edge is not None:
            nxt = steps[i + 1].node_id
            if step.is_forward:
                on_edge(step.node_id, nxt)
            else:
                on_edge(nxt, step.node_id)

        seen += length

    return seen


@dataclass
class ProjectionStats:
    """Counters for one pass over an alignment file."""
    records: int = 0
    unaligned: int = 0
    bases: int = 0
    widened: int = 0

    @property
    def aligned(self) -> int:
        return self.records - self.unaligned


def project_alignments(
    lines: Iterable[str],
    index: GraphIndex,
    node_coverage: NodeCoverage,
    edge_coverage: Optional[EdgeCoverage] = None,
    weights: Optional[QueryWeights] = None,
    strict_interval: bool = False,
) -> ProjectionStats:
    """
    Fold GAF lines into coverage accumulators.

    Args:
        lines: GAF records (one per item)
        index: Graph index supplying node lengths (unknown nodes count as 0)
        node_coverage: Per-node accumulator
        edge_coverage: Per-edge accumulator, or None to skip edges
        weights: Query-group counts from a first pass, or None for unweighted
        strict_interval: Reject walks longer than their declared interval

    Returns:
        ProjectionStats for the pass

    Raises:
        GafpackError: on the first malformed record; the message is prefixed
            with the 1-based record number
    """
    stats = ProjectionStats()
    on_edge = edge_coverage.add if edge_coverage is not None else None

    for record_no, line in enumerate(lines, 1):
        stats.records += 1
        try:
            walk = decode_walk(line)
            if walk is None:
                stats.unaligned += 1
                continue

            steps, target_start, target_end = walk
            divisor = weights.divisor(line) if weights is not None else 1

            def on_node(node_id: int, length: int) -> None:
                node_coverage.add(node_id, length, divisor)

            bases = allocate(
                steps, target_start, target_end,
                index.get_length, on_node, on_edge,
                strict_interval=strict_interval,
            )
        except GafpackError as e:
            e.args = (f"Record {record_no}: {e}",)
            raise

        stats.bases += bases
        if bases > target_end - target_start:
            stats.widened += 1

    logger.info(
        f"Processed {stats.records} records "
        f"({stats.aligned} aligned, {stats.unaligned} unaligned, {stats.widened} widened)"
    )
    return stats
