"""
GAF File Utilities

This module parses GAF (Graphical mApping Format) alignment records and
decodes their path column into an ordered walk over graph nodes.

GAF Format (minigraph / GraphAligner output), 0-based columns:
    Col 0:  Query name
    Col 1:  Query length
    Col 2:  Query start (0-based)
    Col 3:  Query end
    Col 4:  Strand (+/-)
    Col 5:  Path, e.g. ">12<7>9", or "*" when unaligned
    Col 6:  Path length
    Col 7:  Target start on the path (0-based)
    Col 8:  Target end on the path
    Col 9+: Matches, block length, mapping quality, tags

Only columns 0, 2, 3, 5, 7 and 8 are used for coverage projection. Any
record that cannot be decoded raises; there is no skip-and-continue mode.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .compression import iter_lines
from .errors import MalformedInterval, MalformedPath, MalformedRecord

FORWARD = ">"
REVERSE = "<"
UNALIGNED = "*"

MIN_GAF_COLUMNS = 9

_PATH_SPLIT = re.compile(r"[<>]")
_UNSIGNED = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class Step:
    """One node traversal of a walk."""
    node_id: int
    orientation: str  # '>' forward, '<' reverse

    @property
    def is_forward(self) -> bool:
        return self.orientation == FORWARD


@dataclass
class GafRecord:
    """Parsed GAF alignment record (columns needed for coverage)."""
    query_name: str
    query_start: str
    query_end: str
    path: str
    target_start: int
    target_end: int

    @property
    def is_aligned(self) -> bool:
        return self.path != UNALIGNED

    @property
    def target_aligned_length(self) -> int:
        """Length of the path region covered by the alignment."""
        return self.target_end - self.target_start

    @property
    def steps(self) -> List[Step]:
        return decode_path(self.path)


def decode_path(path: str) -> List[Step]:
    """
    Decode a GAF path string into an ordered list of steps.

    Args:
        path: Concatenation of orientation-prefixed node ids

    Returns:
        List of Step in traversal order

    Raises:
        MalformedPath: if a token is not an unsigned integer, or the number of
            node tokens differs from the number of orientation markers

    Examples:
        >>> decode_path(">5<7")
        [Step(node_id=5, orientation='>'), Step(node_id=7, orientation='<')]
    """
    markers = [c for c in path if c == FORWARD or c == REVERSE]
    tokens = [t for t in _PATH_SPLIT.split(path) if t]

    if len(tokens) != len(markers) or not tokens:
        raise MalformedPath(
            f"Path {path!r} has {len(tokens)} node ids but {len(markers)} orientation markers"
        )

    if path[0] not in (FORWARD, REVERSE):
        raise MalformedPath(f"Path {path!r} does not start with an orientation marker")

    steps = []
    for marker, token in zip(markers, tokens):
        if not _UNSIGNED.fullmatch(token):
            raise MalformedPath(f"Path {path!r}: {token!r} is not a node id")
        steps.append(Step(int(token), marker))

    return steps


def _parse_offset(value: str, name: str) -> int:
    if not _UNSIGNED.fullmatch(value):
        raise MalformedInterval(f"{name} {value!r} is not a non-negative integer")
    return int(value)


def parse_gaf_line(line: str) -> GafRecord:
    """
    Parse a single GAF line into a GafRecord.

    Args:
        line: Tab-separated GAF line

    Returns:
        GafRecord for the line

    Raises:
        MalformedRecord: fewer than 9 columns
        MalformedInterval: bad or inverted target start/end

    Examples:
        >>> record = parse_gaf_line("read1\\t100\\t0\\t18\\t+\\t>1>2>3\\t23\\t2\\t20")
        >>> record.target_aligned_length
        18
    """
    parts = line.rstrip("\r\n").split("\t")
    if len(parts) < MIN_GAF_COLUMNS:
        raise MalformedRecord(
            f"GAF record has {len(parts)} columns, expected at least {MIN_GAF_COLUMNS}"
        )

    target_start = _parse_offset(parts[7], "Target start")
    target_end = _parse_offset(parts[8], "Target end")
    if target_end < target_start:
        raise MalformedInterval(
            f"Target end {target_end} is before target start {target_start}"
        )

    return GafRecord(
        query_name=parts[0],
        query_start=parts[2],
        query_end=parts[3],
        path=parts[5],
        target_start=target_start,
        target_end=target_end,
    )


def decode_walk(line: str) -> Optional[Tuple[List[Step], int, int]]:
    """
    Extract the walk and target interval from a GAF line.

    Returns:
        (steps, target_start, target_end), or None for an unaligned ('*') record
    """
    parts = line.split("\t", 6)
    if len(parts) > 5 and parts[5] == UNALIGNED:
        return None

    record = parse_gaf_line(line)
    return record.steps, record.target_start, record.target_end


def iter_gaf_lines(gaf_path: str) -> Iterator[str]:
    """
    Stream alignment lines from a (possibly compressed) GAF file.

    Blank lines and '#' comment lines are skipped.
    """
    for line in iter_lines(gaf_path, error=MalformedRecord):
        if not line or line.startswith("#"):
            continue
        yield line
