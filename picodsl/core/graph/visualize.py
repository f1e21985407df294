from __future__ import annotations

import re
from typing import Dict, List

import networkx as nx

from ..model.pipeline import PipelineNode


def _safe_id(name: str) -> str:
    return re.sub(r"[^a-zA-Z0-9_]", "_", name)


class PipelineGraph:
    """Inspection helpers for a built pipeline graph."""

    @staticmethod
    def to_mermaid(graph: nx.DiGraph) -> str:
        """Mermaid flowchart; pipelines with a group label are drawn inside a subgraph."""
        ids: Dict[PipelineNode, str] = {
            node: f"p{index}_{_safe_id(node.name)}" for index, node in enumerate(graph.nodes)
        }
        lines = ["graph LR"]

        grouped: Dict[str, List[PipelineNode]] = {}
        for node in graph.nodes:
            if node.group is None:
                lines.append(f'    {ids[node]}["{node.name}"]')
            else:
                grouped.setdefault(node.group, []).append(node)
        for group, members in grouped.items():
            lines.append(f'    subgraph {_safe_id(group)} ["{group}"]')
            for node in members:
                lines.append(f'        {ids[node]}["{node.name}"]')
            lines.append("    end")

        for src, dst in graph.edges:
            lines.append(f"    {ids[src]} --> {ids[dst]}")
        return "\n".join(lines)

    @staticmethod
    def upstream(graph: nx.DiGraph, pipeline: PipelineNode) -> List[PipelineNode]:
        """Every pipeline that must complete before ``pipeline``, in declaration order."""
        ancestors = nx.ancestors(graph, pipeline)
        return [node for node in graph.nodes if node in ancestors]
