"""
Graph inspection helpers: statistics and printable summaries of a graph
(or of the sub-graph reachable from one output node).
"""
from collections import Counter
from typing import Dict, List, Union

import numpy as np

from ..debug import dbg
from .engine import topological_order
from .graph import Graph
from .node import Node

log = dbg("graph_utils")


def _collect(target: Union[Graph, Node]) -> List[Node]:
    """Nodes in construction order, from a Graph or from an output node."""
    if isinstance(target, Graph):
        return target.nodes()
    return sorted(topological_order(target), key=lambda n: n.index)


def get_graph_stats(target: Union[Graph, Node]) -> Dict:
    """
    Graph statistics (no output).

    Returns:
        dict with nodes, edges, leaves, fan-in/fan-out and a per-op count
    """
    nodes = _collect(target)
    if not nodes:
        return {
            'nodes': 0,
            'edges': 0,
            'leaves': 0,
            'max_fan_in': 0,
            'avg_fan_in': 0.0,
            'max_fan_out': 0,
            'avg_fan_out': 0.0,
            'operations': {}
        }

    n_nodes = len(nodes)
    fan_ins = [len(n.operands) for n in nodes]
    n_edges = sum(fan_ins)

    # fan-out counts only consumers inside the collected set
    fan_out = Counter()
    for n in nodes:
        for p in n.operands:
            fan_out[id(p)] += 1
    fan_outs = [fan_out[id(n)] for n in nodes]

    op_counter = Counter(n.op for n in nodes)

    return {
        'nodes': n_nodes,
        'edges': n_edges,
        'leaves': op_counter.get('leaf', 0),
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_outs),
        'avg_fan_out': float(np.mean(fan_outs)),
        'operations': dict(op_counter)
    }


def format_graph_summary(target: Union[Graph, Node]) -> str:
    stats = get_graph_stats(target)
    if stats['nodes'] == 0:
        return "Empty computation graph"

    lines = [
        "COMPUTATION GRAPH SUMMARY",
        f"Total nodes:        {stats['nodes']:,}",
        f"Total edges:        {stats['edges']:,}",
        f"Leaves:             {stats['leaves']:,}",
        f"Max fan-in:         {stats['max_fan_in']}",
        f"Avg fan-in:         {stats['avg_fan_in']:.2f}",
        f"Max fan-out:        {stats['max_fan_out']}",
        f"Avg fan-out:        {stats['avg_fan_out']:.2f}",
        "Operation breakdown:",
    ]
    for op_type, count in Counter(stats['operations']).most_common(10):
        pct = 100.0 * count / stats['nodes']
        lines.append(f"  {op_type:12s}: {count:6,} ({pct:5.1f}%)")
    return "\n".join(lines)


def format_computation_graph(target: Union[Graph, Node], max_nodes: int = 20) -> str:
    """One line per node: index, op, cached value and operand indices."""
    nodes = _collect(target)
    if not nodes:
        return "Empty graph"

    lines = []
    for node in nodes[:max_nodes]:
        if node.operands:
            parent_info = ", ".join(f"Node{p.index}" for p in node.operands)
            lines.append(f"Node {node.index:4d}: {node.op:12s} ({node.value:10.6f}) <- [{parent_info}]")
        else:
            label = node.name if node.name is not None else "const"
            lines.append(f"Node {node.index:4d}: {label:12s} ({node.value:10.6f}) [leaf]")
    if len(nodes) > max_nodes:
        lines.append(f"... ({len(nodes) - max_nodes} more nodes)")
    return "\n".join(lines)


def print_graph_summary(target: Union[Graph, Node], detailed: bool = False) -> Dict:
    """Log the summary (and optionally the node list) at INFO; return the stats."""
    log.info("\n%s", format_graph_summary(target))
    if detailed:
        log.info("\n%s", format_computation_graph(target, max_nodes=100))
    return get_graph_stats(target)
