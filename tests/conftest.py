"""
Pytest configuration and fixtures for gafpack tests.
"""

import gzip
import tempfile
from pathlib import Path

import pytest


# ============================================================================
# Path Fixtures
# ============================================================================

@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def scripts_dir(project_root):
    """Return the scripts directory."""
    return project_root / "scripts"


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# Graph Fixtures
# ============================================================================

@pytest.fixture
def sample_gfa_content():
    """
    Small graph: nodes 1 (10bp), 2 (5bp), 3 (8bp), 9 (4bp).

    Declared links give directed edges 1->2, 2->3 and 9->1; there is no
    link between 3 and 9.
    """
    return (
        "H\tVN:Z:1.0\n"
        "S\t1\tACGTACGTAC\n"
        "S\t2\tGGGCC\n"
        "S\t3\tTTTTAAAA\n"
        "S\t9\tCATG\n"
        "L\t1\t+\t2\t+\t0M\n"
        "L\t2\t+\t3\t+\t0M\n"
        "L\t9\t+\t1\t+\t0M\n"
        "P\tpath1\t1+,2+,3+\t*\n"
    )


@pytest.fixture
def sample_gfa_file(temp_dir, sample_gfa_content):
    """Create a temporary GFA file."""
    gfa_path = temp_dir / "graph.gfa"
    gfa_path.write_text(sample_gfa_content)
    return gfa_path


@pytest.fixture
def sample_gfa_gz_file(temp_dir, sample_gfa_content):
    """Create a gzipped GFA file without a .gz extension."""
    gfa_path = temp_dir / "graph_compressed.gfa"
    with gzip.open(gfa_path, "wt") as f:
        f.write(sample_gfa_content)
    return gfa_path


# ============================================================================
# Alignment Fixtures
# ============================================================================

def gaf_line(query, path, target_start, target_end, query_start=0, query_end=None, path_length=0):
    """Build a 12-column GAF line."""
    if query_end is None:
        query_end = target_end - target_start
    return "\t".join(str(x) for x in [
        query, 100, query_start, query_end, "+", path, path_length,
        target_start, target_end, query_end - query_start, query_end - query_start, 60,
    ])


@pytest.fixture
def make_gaf_line():
    """Factory for GAF lines."""
    return gaf_line


@pytest.fixture
def sample_gaf_content():
    """
    Three records:
    - read1 over >1>2>3 from 2 to 20 -> {1: 8, 2: 5, 3: 5}
    - read2 unaligned
    - read3 over <2<1 from 0 to 15 -> {2: 5, 1: 10}, edge 1->2
    """
    return "\n".join([
        gaf_line("read1", ">1>2>3", 2, 20),
        gaf_line("read2", "*", 0, 0),
        gaf_line("read3", "<2<1", 0, 15),
    ]) + "\n"


@pytest.fixture
def sample_gaf_file(temp_dir, sample_gaf_content):
    """Create a temporary GAF file."""
    gaf_path = temp_dir / "reads.gaf"
    gaf_path.write_text(sample_gaf_content)
    return gaf_path


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def sample_config():
    """Provide a sample configuration dictionary."""
    return {
        "coverage": {
            "len_scale": False,
            "coverage_column": True,
            "weight_queries": True,
            "weight_key": "name",
            "edges": True,
        }
    }
