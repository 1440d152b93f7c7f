"""
Coverage Accumulators

Running totals fed by the coverage allocator:

- NodeCoverage: bases attributed to each node, optionally divided by a
  per-alignment divisor (query-group weighting)
- EdgeCoverage: number of times each directed edge was traversed
- QueryWeights: occurrence count of each query-group key, built in a first
  pass over the alignment file so that a query placed N times contributes
  1/N of its coverage per placement
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from .errors import UnknownEdge
from .graph_index import Edge, GraphIndex

WEIGHT_KEY_SCHEMES = ("interval", "name")


class NodeCoverage:
    """Per-node coverage vector aligned with a GraphIndex."""

    def __init__(self, index: GraphIndex):
        self.index = index
        self.values = np.zeros(len(index), dtype=np.float64)

    def add(self, node_id: int, length: int, divisor: int = 1) -> None:
        """Add ``length / divisor`` bases to a node. Unknown nodes are ignored."""
        slot = self.index.slot(node_id)
        if slot is None:
            return
        self.values[slot] += length / divisor

    def total(self) -> float:
        return float(self.values.sum())

    def scaled_by_length(self) -> np.ndarray:
        """Mean depth per node (coverage / node length); 0 for empty nodes."""
        lengths = self.index.lengths.astype(np.float64)
        return np.divide(
            self.values, lengths,
            out=np.zeros_like(self.values),
            where=lengths > 0,
        )

    def as_dict(self) -> Dict[int, float]:
        return {n: float(v) for n, v in zip(self.index.node_ids, self.values)}


class EdgeCoverage:
    """
    Traversal counts per directed edge.

    Args:
        universe: Edges to seed with a zero count (e.g. the graph's links)
        strict: Reject edges outside the seeded universe with UnknownEdge
    """

    def __init__(self, universe: Optional[Iterable[Edge]] = None, strict: bool = False):
        if strict and universe is None:
            raise ValueError("Strict edge checking needs a seeded edge universe")
        self.strict = strict
        self.counts: Dict[Edge, int] = {}
        if universe is not None:
            for edge in universe:
                self.counts[edge] = 0

    def add(self, from_node: int, to_node: int) -> None:
        edge = (from_node, to_node)
        if edge not in self.counts:
            if self.strict:
                raise UnknownEdge(from_node, to_node)
            self.counts[edge] = 0
        self.counts[edge] += 1

    def __len__(self) -> int:
        return len(self.counts)

    def items(self) -> List[Tuple[Edge, int]]:
        """(edge, count) pairs ordered by (from, to)."""
        return sorted(self.counts.items())


def query_key(line: str, scheme: str = "interval") -> Optional[str]:
    """
    Query-group key of a GAF line.

    'interval' groups by query name, query start and query end (columns 0, 2
    and 3); 'name' groups by query name alone. Returns None when the line is
    too short to form a key.

    Examples:
        >>> query_key("read1\\t100\\t0\\t50\\t+\\t>1", "interval")
        'read1:0:50'
        >>> query_key("read1\\t100\\t0\\t50\\t+\\t>1", "name")
        'read1'
    """
    parts = line.split("\t", 4)
    if scheme == "name":
        return parts[0]
    if scheme != "interval":
        raise ValueError(f"Unknown query key scheme: {scheme!r}")
    if len(parts) < 4:
        return None
    return f"{parts[0]}:{parts[2]}:{parts[3]}"


class QueryWeights:
    """Occurrence counts of query-group keys across an alignment file."""

    def __init__(self, scheme: str = "interval"):
        if scheme not in WEIGHT_KEY_SCHEMES:
            raise ValueError(f"Unknown query key scheme: {scheme!r}")
        self.scheme = scheme
        self.counts: Counter = Counter()

    def count(self, lines: Iterable[str]) -> "QueryWeights":
        """First pass: tally every key in ``lines``."""
        for line in lines:
            key = query_key(line, self.scheme)
            if key is not None:
                self.counts[key] += 1
        return self

    def divisor(self, line: str) -> int:
        """How many ways this line's coverage is split; 1 for uncounted keys."""
        key = query_key(line, self.scheme)
        if key is None:
            return 1
        return self.counts.get(key, 1)

    def __len__(self) -> int:
        return len(self.counts)
