from typing import Any, Dict, List, Optional

from .analyzer import GraphAnalyzer
from .core import OperationDependencyGraph

LISTING_LIMIT = 10


class GraphReporter:
    """Render a markdown summary of a semantic dependency graph"""

    def __init__(self, strict_clusters: bool = False):
        self.strict_clusters = strict_clusters

    def generate_summary(self, graph: OperationDependencyGraph,
                         analysis: Optional[Dict[str, Any]] = None) -> str:
        if analysis is None:
            analysis = GraphAnalyzer(graph).analyze(strict_clusters=self.strict_clusters)
        stats = analysis['stats']

        lines = [
            "# Operation Dependency Graph Summary",
            "",
            "## Statistics",
            f"- **Total Operations**: {stats['total_operations']}",
            f"- **Total Semantic Types**: {stats['total_semantic_types']}",
            f"- **Total Dependencies**: {stats['total_dependencies']}",
            f"- **Average Dependencies per Operation**: "
            f"{stats['average_dependencies_per_operation']:.2f}",
            "",
        ]

        lines.append(f"## Entry Points ({len(analysis['entry_points'])})")
        lines.append("Operations that can be called without dependencies:")
        lines.extend(self._operation_listing(graph, analysis['entry_points']))
        lines.append("")

        lines.append(f"## Sink Operations ({len(analysis['sinks'])})")
        lines.append("Operations that don't produce outputs used by others:")
        lines.extend(self._operation_listing(graph, analysis['sinks']))
        lines.append("")

        lines.append("## Most Used Semantic Types")
        top_types = list(analysis['semantic_type_usage'].items())[:LISTING_LIMIT]
        for name, count in top_types:
            semantic_type = graph.semantic_types.get(name)
            description = (semantic_type.description if semantic_type else None) or 'No description'
            lines.append(f"- **{name}** ({count} dependencies): {description}")

        if analysis['clusters']:
            lines.append("")
            lines.append("## Operation Clusters")
            lines.append("Groups of operations with mutual dependencies:")
            for cluster in analysis['clusters']:
                lines.append(f"- Cluster: {', '.join(cluster)}")

        return "\n".join(lines) + "\n"

    @staticmethod
    def _operation_listing(graph: OperationDependencyGraph, op_ids: List[str]) -> List[str]:
        lines = []
        for op_id in op_ids[:LISTING_LIMIT]:
            op = graph.operations.get(op_id)
            text = (op.summary or op.description) if op else None
            lines.append(f"- **{op_id}**: {text or 'No description'}")
        if len(op_ids) > LISTING_LIMIT:
            lines.append(f"... and {len(op_ids) - LISTING_LIMIT} more")
        return lines

    def save(self, summary: str, output_path: str):
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(summary)
        print(f"Exported summary report to {output_path}")
