"""
gafpack - Core Library

Projects GAF read alignments onto a GFA pangenome graph:
- Graph index: node id -> length lookup, optional declared edge set
- Walk decoding of GAF path strings (">1<2>3")
- Coverage allocation over the nodes and edges of each walk
- Accumulators for unweighted, query-weighted and edge coverage
"""

__version__ = "0.1.0"

from .errors import (
    GafpackError,
    MalformedRecord,
    MalformedPath,
    MalformedInterval,
    IntervalOutOfRange,
    WalkLengthMismatch,
    UnknownNode,
    UnknownEdge,
    MalformedGraph,
)

from .graph_index import (
    GraphIndex,
    parse_gfa,
)

from .gaf_utils import (
    Step,
    GafRecord,
    decode_path,
    decode_walk,
    parse_gaf_line,
    iter_gaf_lines,
)

from .coverage import (
    allocate,
    project_alignments,
    ProjectionStats,
)

from .accumulators import (
    NodeCoverage,
    EdgeCoverage,
    QueryWeights,
)

__all__ = [
    # Errors
    "GafpackError",
    "MalformedRecord",
    "MalformedPath",
    "MalformedInterval",
    "IntervalOutOfRange",
    "WalkLengthMismatch",
    "UnknownNode",
    "UnknownEdge",
    "MalformedGraph",
    # Graph
    "GraphIndex",
    "parse_gfa",
    # GAF
    "Step",
    "GafRecord",
    "decode_path",
    "decode_walk",
    "parse_gaf_line",
    "iter_gaf_lines",
    # Coverage
    "allocate",
    "project_alignments",
    "ProjectionStats",
    "NodeCoverage",
    "EdgeCoverage",
    "QueryWeights",
]
