"""
Graph Index for GFA Pangenome Graphs

Builds a lookup from node id to node length from the segment (S) records of a
GFA file, and optionally the set of directed edges declared by its link (L)
records.

GFA records used:
    S   <id>    <sequence>   ...            node, length = len(sequence)
    L   <from>  <+/->  <to>  <+/->  ...      link between two node ends

Node ids must be unsigned integers but need not be contiguous. The index keeps
an explicit id -> slot map; ids that are not in the map have no slot and are
treated as length 0 by ``get_length`` so that alignments against a filtered
subset of the graph do not abort the run.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Tuple

import numpy as np

from .compression import iter_lines
from .errors import MalformedGraph, UnknownNode

logger = logging.getLogger(__name__)

_UNSIGNED = re.compile(r"[0-9]+")

Edge = Tuple[int, int]


def _parse_node_id(token: str, line_no: int) -> int:
    if not _UNSIGNED.fullmatch(token):
        raise MalformedGraph(f"Line {line_no}: node id {token!r} is not an unsigned integer")
    return int(token)


@dataclass(eq=False)
class GraphIndex:
    """
    Node id -> length lookup.

    Attributes:
        node_ids: Node ids in ascending order (one per slot)
        lengths: Node lengths aligned with ``node_ids``
        links: Directed edges declared by the graph, if links were loaded
    """
    node_ids: List[int]
    lengths: np.ndarray
    links: Optional[FrozenSet[Edge]] = None
    _slots: Dict[int, int] = field(init=False, repr=False)

    def __post_init__(self):
        self._slots = {node_id: i for i, node_id in enumerate(self.node_ids)}

    @classmethod
    def from_records(
        cls,
        records: Iterable[Tuple[int, int]],
        links: Optional[Iterable[Edge]] = None,
    ) -> "GraphIndex":
        """
        Build an index from (node_id, sequence_length) pairs.

        A repeated node id keeps the last length seen.

        Examples:
            >>> index = GraphIndex.from_records([(3, 8), (1, 10), (2, 5)])
            >>> index.node_ids
            [1, 2, 3]
            >>> index.length_of(1)
            10
        """
        by_id: Dict[int, int] = {}
        for node_id, length in records:
            by_id[node_id] = length

        node_ids = sorted(by_id)
        lengths = np.array([by_id[n] for n in node_ids], dtype=np.int64)
        return cls(
            node_ids=node_ids,
            lengths=lengths,
            links=frozenset(links) if links is not None else None,
        )

    def __len__(self) -> int:
        return len(self.node_ids)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._slots

    def slot(self, node_id: int) -> Optional[int]:
        """Position of a node in ``node_ids``/``lengths``, or None if unknown."""
        return self._slots.get(node_id)

    def length_of(self, node_id: int) -> int:
        """Length of a node, raising UnknownNode if it is not indexed."""
        i = self._slots.get(node_id)
        if i is None:
            raise UnknownNode(f"Node {node_id} is not in the graph")
        return int(self.lengths[i])

    def get_length(self, node_id: int) -> int:
        """Length of a node, or 0 if it is not indexed."""
        i = self._slots.get(node_id)
        if i is None:
            return 0
        return int(self.lengths[i])


def link_edges(from_node: int, from_orient: str, to_node: int, to_orient: str) -> List[Edge]:
    """
    Directed edges a walk may produce when it crosses a GFA link.

    A walk emits (a, b) for a forward step a followed by b, and (b, a) for a
    reverse step a followed by b. Same-strand links can therefore only be
    observed one way round; mixed-strand links can be observed both ways.

    Examples:
        >>> link_edges(3, '+', 9, '+')
        [(3, 9)]
        >>> link_edges(3, '-', 9, '-')
        [(9, 3)]
        >>> link_edges(3, '+', 9, '-')
        [(3, 9), (9, 3)]
    """
    if from_orient == to_orient:
        if from_orient == "+":
            return [(from_node, to_node)]
        return [(to_node, from_node)]
    return [(from_node, to_node), (to_node, from_node)]


def iter_gfa_records(
    lines: Iterable[str],
    include_links: bool = False,
) -> Iterator[Tuple[str, tuple]]:
    """
    Yield ('S', (id, length)) and, if requested, ('L', edge) items.

    S lines missing the id or sequence column are skipped. All other record
    types are ignored.
    """
    for line_no, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue

        parts = line.split("\t")
        record_type = parts[0]

        if record_type == "S":
            if len(parts) < 3:
                continue
            node_id = _parse_node_id(parts[1], line_no)
            yield "S", (node_id, len(parts[2]))

        elif record_type == "L" and include_links:
            if len(parts) < 5:
                raise MalformedGraph(f"Line {line_no}: link record has {len(parts)} columns, expected >= 5")
            from_node = _parse_node_id(parts[1], line_no)
            to_node = _parse_node_id(parts[3], line_no)
            from_orient, to_orient = parts[2], parts[4]
            if from_orient not in ("+", "-") or to_orient not in ("+", "-"):
                raise MalformedGraph(f"Line {line_no}: bad link orientation {from_orient!r}/{to_orient!r}")
            for edge in link_edges(from_node, from_orient, to_node, to_orient):
                yield "L", edge


def build_index(lines: Iterable[str], include_links: bool = False) -> GraphIndex:
    """Build a GraphIndex from GFA text lines."""
    nodes: List[Tuple[int, int]] = []
    links: Set[Edge] = set()

    for record_type, value in iter_gfa_records(lines, include_links=include_links):
        if record_type == "S":
            nodes.append(value)
        else:
            links.add(value)

    return GraphIndex.from_records(nodes, links=links if include_links else None)


def parse_gfa(gfa_path: str, include_links: bool = False) -> GraphIndex:
    """
    Load a (possibly compressed) GFA file into a GraphIndex.

    Args:
        gfa_path: Path to GFA file (.gz/.bz2/.xz detected automatically)
        include_links: Also collect the directed edge universe from L records

    Returns:
        GraphIndex for the file's segments
    """
    logger.info(f"Loading graph: {gfa_path}")
    index = build_index(iter_lines(gfa_path, error=MalformedGraph), include_links=include_links)

    if index.links is not None:
        logger.info(f"Loaded {len(index)} nodes and {len(index.links)} directed edges")
    else:
        logger.info(f"Loaded {len(index)} nodes")
    return index
