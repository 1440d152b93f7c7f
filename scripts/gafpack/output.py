"""
Coverage output formatting.

Two layouts are supported:

Table (default), one header row and one data row per sample:
    #sample     node.1  node.2  ...  edge.1>2  ...
    reads.gaf   8       5       ...  1         ...

Column, one value per line under a sample comment:
    ##sample: reads.gaf
    #coverage
    8
    5
    #edges
    1   2   1
"""

from typing import List, Optional, Sequence, TextIO, Tuple

import numpy as np
import pandas as pd

from .graph_index import Edge, GraphIndex


def format_value(value) -> str:
    """
    Render a coverage value in positional notation; whole numbers are
    printed without a fraction.

    Examples:
        >>> format_value(8.0)
        '8'
        >>> format_value(2.5)
        '2.5'
        >>> format_value(5e-06)
        '0.000005'
    """
    return np.format_float_positional(float(value), trim="-")


def node_label(node_id: int) -> str:
    return f"node.{node_id}"


def edge_label(edge: Edge) -> str:
    return f"edge.{edge[0]}>{edge[1]}"


def coverage_frame(
    sample: str,
    index: GraphIndex,
    node_values: np.ndarray,
    edge_items: Optional[Sequence[Tuple[Edge, int]]] = None,
) -> pd.DataFrame:
    """
    One-row DataFrame of a sample's coverage.

    Args:
        sample: Row label (usually the GAF path)
        index: Graph index the node values are aligned with
        node_values: Per-node values in index order
        edge_items: Optional (edge, count) pairs appended after the nodes

    Returns:
        DataFrame indexed by sample with node (then edge) columns
    """
    columns: List[str] = [node_label(n) for n in index.node_ids]
    values: List[float] = [float(v) for v in node_values]

    if edge_items:
        columns.extend(edge_label(edge) for edge, _ in edge_items)
        values.extend(count for _, count in edge_items)

    frame = pd.DataFrame([values], columns=columns, index=[sample])
    frame.index.name = "#sample"
    return frame


def write_table(frame: pd.DataFrame, out: TextIO) -> None:
    """Write a coverage frame as a tab-separated table."""
    formatted = frame.astype(object).apply(lambda col: col.map(format_value))
    formatted.to_csv(out, sep="\t", index_label="#sample", lineterminator="\n")


def write_column(
    sample: str,
    node_values: np.ndarray,
    out: TextIO,
    edge_items: Optional[Sequence[Tuple[Edge, int]]] = None,
) -> None:
    """Write coverage as a single column with a sample comment header."""
    out.write(f"##sample: {sample}\n")
    out.write("#coverage\n")
    for value in node_values:
        out.write(format_value(value) + "\n")

    if edge_items is not None:
        out.write("#edges\n")
        for (from_node, to_node), count in edge_items:
            out.write(f"{from_node}\t{to_node}\t{count}\n")
