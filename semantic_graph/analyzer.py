import networkx as nx
from collections import Counter
from typing import Dict, Any, List, Set
from .core import OperationDependencyGraph

class GraphAnalyzer:
    """Analyze and provide insights about the dependency graph"""

    def __init__(self, graph: OperationDependencyGraph):
        self.graph = graph

    def analyze(self, strict_clusters: bool = False) -> Dict[str, Any]:
        """Entry points, sinks, usage counts, clusters and basic statistics"""
        return {
            'entry_points': self.find_entry_points(),
            'sinks': self.find_sinks(),
            'clusters': (self.find_strongly_connected_components() if strict_clusters
                         else self.find_clusters()),
            'semantic_type_usage': self.semantic_type_usage(),
            'stats': self.graph.stats(),
            'complexity_metrics': self._complexity_metrics(),
        }

    def find_entry_points(self) -> List[str]:
        """Operations that are never the target of an edge."""
        targets = {e.target_operation_id for e in self.graph.edges}
        return [op_id for op_id in self.graph.operations if op_id not in targets]

    def find_sinks(self) -> List[str]:
        """Operations that are never the source of an edge."""
        sources = {e.source_operation_id for e in self.graph.edges}
        return [op_id for op_id in self.graph.operations if op_id not in sources]

    def semantic_type_usage(self) -> Dict[str, int]:
        """Edge count per semantic type, most used first."""
        usage = Counter(e.semantic_type for e in self.graph.edges)
        return dict(usage.most_common())

    def find_clusters(self) -> List[List[str]]:
        """
        Approximate mutual-dependency grouping: an operation is grouped with the
        operations it has both an outgoing and an incoming edge to, one hop each
        way. Longer cycles are not detected; see find_strongly_connected_components.
        """
        outgoing: Dict[str, Set[str]] = {}
        incoming: Dict[str, Set[str]] = {}
        for edge in self.graph.edges:
            outgoing.setdefault(edge.source_operation_id, set()).add(edge.target_operation_id)
            incoming.setdefault(edge.target_operation_id, set()).add(edge.source_operation_id)

        clusters = []
        visited: Set[str] = set()
        for op_id in self.graph.operations:
            if op_id in visited:
                continue
            cluster = [op_id]
            visited.add(op_id)
            mutual = outgoing.get(op_id, set()) & incoming.get(op_id, set())
            for other in sorted(mutual):
                if other not in visited:
                    cluster.append(other)
                    visited.add(other)
            if len(cluster) > 1:
                clusters.append(cluster)
        return clusters

    def find_strongly_connected_components(self) -> List[List[str]]:
        """Exact cycle grouping over the same edges (Tarjan-style SCC)."""
        order = {op_id: i for i, op_id in enumerate(self.graph.operations)}
        components = []
        for component in nx.strongly_connected_components(self.graph.graph):
            if len(component) > 1:
                components.append(sorted(component, key=order.get))
        components.sort(key=lambda c: order[c[0]])
        return components

    def _complexity_metrics(self) -> Dict[str, Any]:
        """Degree statistics over distinct neighbouring operations"""
        simple = nx.DiGraph(self.graph.graph)
        in_degrees = [d for n, d in simple.in_degree()]
        out_degrees = [d for n, d in simple.out_degree()]

        return {
            'avg_incoming_deps': sum(in_degrees) / len(in_degrees) if in_degrees else 0,
            'avg_outgoing_deps': sum(out_degrees) / len(out_degrees) if out_degrees else 0,
            'max_incoming_deps': max(in_degrees) if in_degrees else 0,
            'max_outgoing_deps': max(out_degrees) if out_degrees else 0,
            'is_dag': nx.is_directed_acyclic_graph(simple),
        }
