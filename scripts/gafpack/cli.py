"""
gafpack: project GAF alignments onto a GFA graph as node/edge coverage.

Usage:
    gafpack --gfa graph.gfa.gz --gaf reads.gaf > coverage.tsv
    gafpack --gfa graph.gfa --gaf reads.gaf --weight-queries --coverage-column
    gafpack --gfa graph.gfa --gaf reads.gaf --edges --strict-edges
    gafpack --gfa graph.gfa --gaf reads.gaf --config config.yaml -o coverage.tsv
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from . import __version__
from .accumulators import WEIGHT_KEY_SCHEMES, EdgeCoverage, NodeCoverage, QueryWeights
from .config import load_config, resolve_options, validate_config
from .coverage import project_alignments
from .errors import GafpackError
from .gaf_utils import iter_gaf_lines
from .graph_index import parse_gfa
from .output import coverage_frame, write_column, write_table

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gafpack",
        description="Project a GAF alignment file into coverage over GFA graph nodes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--gfa", required=True,
                        help="Input GFA pangenome graph (gzip/bzip2/xz ok)")
    parser.add_argument("-g", "--gaf", required=True,
                        help="Input GAF alignment file (gzip/bzip2/xz ok)")
    parser.add_argument("-l", "--len-scale", action="store_true", default=None,
                        help="Scale coverage values by node length")
    parser.add_argument("-c", "--coverage-column", action="store_true", default=None,
                        help="Emit graph coverage vector in a single column")
    parser.add_argument("-w", "--weight-queries", action="store_true", default=None,
                        help="Weight coverage by query group occurrences")
    parser.add_argument("--weight-key", choices=WEIGHT_KEY_SCHEMES, default=None,
                        help="Query group key: 'interval' (name, query start, query end) "
                             "or 'name' (default: interval)")
    parser.add_argument("-e", "--edges", action="store_true", default=None,
                        help="Also report directed edge traversal counts")
    parser.add_argument("--strict-edges", action="store_true", default=None,
                        help="Fail on edges not declared by the graph's L records (implies --edges)")
    parser.add_argument("--strict-interval", action="store_true", default=None,
                        help="Fail when a walk is longer than its declared target interval")
    parser.add_argument("--config", metavar="YAML",
                        help="YAML file with default options (coverage: section)")
    parser.add_argument("-o", "--output", default="-",
                        help="Output file (default: stdout)")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def run(gfa: str, gaf: str, options: dict, output: str = "-") -> None:
    """Compute coverage for one GAF file and write it to ``output``."""
    strict_edges = options["strict_edges"]
    want_edges = options["edges"] or strict_edges

    index = parse_gfa(gfa, include_links=strict_edges)
    node_coverage = NodeCoverage(index)

    edge_coverage = None
    if want_edges:
        edge_coverage = EdgeCoverage(
            universe=index.links if strict_edges else None,
            strict=strict_edges,
        )

    weights = None
    if options["weight_queries"]:
        logger.info(f"Counting query groups ({options['weight_key']}): {gaf}")
        weights = QueryWeights(options["weight_key"]).count(iter_gaf_lines(gaf))
        logger.info(f"Found {len(weights)} query groups")

    logger.info(f"Projecting alignments: {gaf}")
    project_alignments(
        iter_gaf_lines(gaf),
        index,
        node_coverage,
        edge_coverage=edge_coverage,
        weights=weights,
        strict_interval=options["strict_interval"],
    )

    if options["len_scale"]:
        values = node_coverage.scaled_by_length()
    else:
        values = node_coverage.values
    edge_items = edge_coverage.items() if edge_coverage is not None else None

    out = sys.stdout if output == "-" else open(output, "w")
    try:
        if options["coverage_column"]:
            write_column(gaf, values, out, edge_items=edge_items)
        else:
            write_table(coverage_frame(gaf, index, values, edge_items), out)
    finally:
        if out is not sys.stdout:
            out.close()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    section = {}
    if args.config:
        try:
            section = load_config(args.config)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML: {e}")
            return 1
        except (FileNotFoundError, ValueError) as e:
            logger.error(str(e))
            return 1

        is_valid, errors = validate_config(section)
        if not is_valid:
            logger.error("Configuration errors:")
            for error in errors:
                logger.error(f"  - {error}")
            return 1

    options = resolve_options(section, {
        "len_scale": args.len_scale,
        "coverage_column": args.coverage_column,
        "weight_queries": args.weight_queries,
        "weight_key": args.weight_key,
        "edges": args.edges,
        "strict_edges": args.strict_edges,
        "strict_interval": args.strict_interval,
    })

    try:
        run(args.gfa, args.gaf, options, args.output)
    except GafpackError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
