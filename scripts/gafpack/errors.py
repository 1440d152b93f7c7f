"""
Error types raised while projecting alignments onto a graph.

None of these are recovered inside the library. A single bad record
invalidates the whole run, so they propagate to the caller (the CLI turns
them into a non-zero exit status).
"""

from typing import Optional


class GafpackError(ValueError):
    """Base class for all projection errors."""


class MalformedRecord(GafpackError):
    """Alignment line has too few tab-separated columns."""


class MalformedPath(GafpackError):
    """Path field contains a token that is not a node id."""


class MalformedInterval(GafpackError):
    """Target start/end are not integers, or end < start."""


class IntervalOutOfRange(GafpackError):
    """Declared target interval does not fit the traversed nodes."""


class WalkLengthMismatch(IntervalOutOfRange):
    """Walk is longer than the declared target length (strict interval mode)."""


class UnknownNode(GafpackError):
    """Node id is not present in the graph index."""


class MalformedGraph(GafpackError):
    """Graph record could not be parsed."""


class UnknownEdge(GafpackError):
    """Edge implied by a walk is missing from the graph's link set."""

    def __init__(self, from_node: int, to_node: int, message: Optional[str] = None):
        self.from_node = from_node
        self.to_node = to_node
        if message is None:
            message = f"Edge {from_node} -> {to_node} is not declared in the graph"
        super().__init__(message)
