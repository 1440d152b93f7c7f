"""
Tests for GAF record parsing and walk decoding.
"""

import gzip
import sys
from pathlib import Path

import pytest

# Add scripts directory to path for imports
scripts_dir = Path(__file__).parent.parent / "scripts"
sys.path.insert(0, str(scripts_dir))

from gafpack.errors import MalformedInterval, MalformedPath, MalformedRecord
from gafpack.gaf_utils import (
    Step,
    decode_path,
    decode_walk,
    iter_gaf_lines,
    parse_gaf_line,
)


# ============================================================================
# Tests: Path Decoding
# ============================================================================

class TestDecodePath:
    """Tests for decode_path function."""

    def test_forward_steps(self):
        """Forward markers produce forward steps in order."""
        steps = decode_path(">1>2>3")
        assert [s.node_id for s in steps] == [1, 2, 3]
        assert all(s.is_forward for s in steps)

    def test_mixed_orientation(self):
        """Each id is paired with the marker before it."""
        steps = decode_path(">5<7>12")
        assert steps == [Step(5, ">"), Step(7, "<"), Step(12, ">")]
        assert steps[1].is_forward is False

    def test_single_node(self):
        """Single node walk."""
        assert decode_path("<42") == [Step(42, "<")]

    def test_large_ids(self):
        """Multi-digit ids are not split."""
        assert decode_path(">1000000<23")[0].node_id == 1000000

    def test_non_numeric_token(self):
        """Named segments are not node ids."""
        with pytest.raises(MalformedPath):
            decode_path(">utig1-12>3")

    def test_missing_leading_marker(self):
        """A path that starts with an id has fewer markers than ids."""
        with pytest.raises(MalformedPath):
            decode_path("5>7")

    def test_trailing_marker(self):
        """A dangling marker has no id."""
        with pytest.raises(MalformedPath):
            decode_path(">5>7>")

    def test_leading_id_with_trailing_marker(self):
        """Equal counts but misaligned markers are rejected."""
        with pytest.raises(MalformedPath):
            decode_path("5>7<")

    def test_empty_path(self):
        """Empty path is malformed."""
        with pytest.raises(MalformedPath):
            decode_path("")


# ============================================================================
# Tests: GAF Line Parsing
# ============================================================================

class TestParseGafLine:
    """Tests for parse_gaf_line function."""

    def test_valid_line(self, make_gaf_line):
        """Parse a valid GAF line."""
        record = parse_gaf_line(make_gaf_line("read1", ">1>2>3", 2, 20))

        assert record.query_name == "read1"
        assert record.path == ">1>2>3"
        assert record.target_start == 2
        assert record.target_end == 20
        assert record.target_aligned_length == 18
        assert record.is_aligned is True

    def test_nine_columns_is_enough(self):
        """Only the first nine columns are required."""
        record = parse_gaf_line("q\t10\t0\t10\t+\t>1\t10\t0\t10")
        assert record.target_end == 10

    def test_short_line(self):
        """Line with fewer than 9 columns is a malformed record."""
        with pytest.raises(MalformedRecord):
            parse_gaf_line("read1\t1000\t10\t950\t+\t>1")

    def test_inverted_interval(self, make_gaf_line):
        """End before start is a malformed interval."""
        with pytest.raises(MalformedInterval):
            parse_gaf_line(make_gaf_line("read1", ">1", 20, 10, query_end=5))

    def test_non_numeric_offset(self):
        """Non-integer target offsets are malformed intervals."""
        with pytest.raises(MalformedInterval):
            parse_gaf_line("q\t10\t0\t10\t+\t>1\t10\tXX\t10")

    def test_negative_offset(self):
        """Negative offsets are malformed intervals."""
        with pytest.raises(MalformedInterval):
            parse_gaf_line("q\t10\t0\t10\t+\t>1\t10\t-1\t10")


# ============================================================================
# Tests: Walk Decoding
# ============================================================================

class TestDecodeWalk:
    """Tests for decode_walk function."""

    def test_aligned(self, make_gaf_line):
        """Aligned record yields steps and interval."""
        steps, start, end = decode_walk(make_gaf_line("read1", ">1<2", 3, 9))
        assert steps == [Step(1, ">"), Step(2, "<")]
        assert (start, end) == (3, 9)

    def test_unaligned(self, make_gaf_line):
        """'*' path is skipped without error."""
        assert decode_walk(make_gaf_line("read2", "*", 0, 0)) is None

    def test_unaligned_short_record(self):
        """Unaligned records do not need target columns."""
        assert decode_walk("read2\t100\t0\t0\t+\t*") is None

    def test_bad_path_propagates(self, make_gaf_line):
        """Malformed path is an error, not a skipped record."""
        with pytest.raises(MalformedPath):
            decode_walk(make_gaf_line("read1", ">1>x", 0, 5))


# ============================================================================
# Tests: File Streaming
# ============================================================================

class TestIterGafLines:
    """Tests for iter_gaf_lines function."""

    def test_skips_comments_and_blanks(self, temp_dir, make_gaf_line):
        """Blank and '#' lines are not yielded."""
        path = temp_dir / "reads.gaf"
        path.write_text(
            "# header\n"
            + make_gaf_line("read1", ">1", 0, 5) + "\n"
            + "\n"
            + make_gaf_line("read2", ">2", 0, 5) + "\n"
        )
        lines = list(iter_gaf_lines(str(path)))
        assert len(lines) == 2
        assert lines[0].startswith("read1\t")
        assert not lines[0].endswith("\n")

    def test_gzip_detected_by_content(self, temp_dir, make_gaf_line):
        """Gzipped input is read even without a .gz extension."""
        path = temp_dir / "reads.gaf"
        with gzip.open(path, "wt") as f:
            f.write(make_gaf_line("read1", ">1", 0, 5) + "\n")
        lines = list(iter_gaf_lines(str(path)))
        assert len(lines) == 1
        assert lines[0].split("\t")[5] == ">1"

    def test_undecodable_bytes(self, temp_dir):
        """Non-UTF-8 bytes raise MalformedRecord."""
        path = temp_dir / "reads.gaf"
        path.write_bytes(b"q\xff\t100\t0\t10\t+\t>1\t10\t0\t10\t10\t10\t60\n")
        with pytest.raises(MalformedRecord, match="undecodable"):
            list(iter_gaf_lines(str(path)))
