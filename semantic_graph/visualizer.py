import pydot

from .core import OperationDependencyGraph
from .enums import DependencyStrength, HTTPMethod
from .operation import Operation


class GraphVisualizer:
    """Visualize the semantic dependency graph"""

    def __init__(self, graph: OperationDependencyGraph):
        self.graph = graph

    def to_dot(self) -> pydot.Dot:
        dot_graph = pydot.Dot(graph_type='digraph', rankdir='TB')

        for op_id, op in self.graph.operations.items():
            dot_graph.add_node(pydot.Node(
                op_id,
                label=f"{op.method.value} {op.path}",
                shape='box',
                style='filled',
                fillcolor=self._get_node_color(op),
            ))

        for edge in self.graph.edges:
            dot_graph.add_edge(pydot.Edge(
                edge.source_operation_id,
                edge.target_operation_id,
                label=edge.semantic_type,
                color=self._get_edge_color(edge.strength),
                style='solid' if edge.strength == DependencyStrength.REQUIRED else 'dashed',
            ))
        return dot_graph

    def export_dot(self, output_path: str):
        """Export graph to DOT format (Graphviz)"""
        self.to_dot().write_raw(output_path)
        print(f"Exported DOT graph to {output_path}")

    def _get_node_color(self, operation: Operation) -> str:
        """Get color for operation node based on HTTP method"""
        color_map = {
            HTTPMethod.GET: '#4CAF50',      # Green
            HTTPMethod.POST: '#2196F3',     # Blue
            HTTPMethod.PUT: '#FF9800',      # Orange
            HTTPMethod.PATCH: '#FF9800',    # Orange
            HTTPMethod.DELETE: '#F44336',   # Red
        }
        return color_map.get(operation.method, '#9E9E9E')

    def _get_edge_color(self, strength: DependencyStrength) -> str:
        color_map = {
            DependencyStrength.REQUIRED: '#F44336',
            DependencyStrength.CONDITIONAL: '#FFC107',
            DependencyStrength.OPTIONAL: '#9E9E9E',
        }
        return color_map.get(strength, '#000000')
