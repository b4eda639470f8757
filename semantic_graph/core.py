import networkx as nx
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from .operation import Operation
from .semantic_type import SemanticType
from .dependency import DependencyEdge
from .errors import GraphIntegrityError

if TYPE_CHECKING:
    from .library import SemanticTypeLibrary
    from .root_analyzer import RootOperationAnalysis


class OperationDependencyGraph:
    """
    Aggregate root: operations keyed by id, semantic types keyed by name, the
    derived edge list and the optional enrichment blocks. A networkx
    MultiDiGraph mirrors operations and edges for graph queries.
    """

    def __init__(self,
                 operations: Optional[Dict[str, Operation]] = None,
                 semantic_types: Optional[Dict[str, SemanticType]] = None,
                 edges: Optional[List[DependencyEdge]] = None):
        self.operations: Dict[str, Operation] = dict(operations or {})
        self.semantic_types: Dict[str, SemanticType] = dict(semantic_types or {})
        self.edges: List[DependencyEdge] = list(edges or [])

        self.semantic_type_library: Optional["SemanticTypeLibrary"] = None
        self.root_dependency_analysis: Optional["RootOperationAnalysis"] = None
        self.cross_contamination_map: Optional[Dict[str, List[str]]] = None

        self.graph = nx.MultiDiGraph()
        for op_id, operation in self.operations.items():
            self.graph.add_node(op_id, **operation.get_summary())
        for edge in self.edges:
            self._add_graph_edge(edge)

    def _add_graph_edge(self, edge: DependencyEdge):
        # Unknown endpoints are left out of the mirror; validate() reports them
        if edge.source_operation_id in self.graph and edge.target_operation_id in self.graph:
            self.graph.add_edge(edge.source_operation_id, edge.target_operation_id,
                                **edge.get_graph_summary())

    def get_operation(self, operation_id: str) -> Operation:
        if operation_id not in self.operations:
            raise ValueError(f"Operation {operation_id} not found")
        return self.operations[operation_id]

    def get_dependencies(self, operation_id: str) -> List[DependencyEdge]:
        """Edges pointing into an operation (what it needs)."""
        self.get_operation(operation_id)
        return [e for e in self.edges if e.target_operation_id == operation_id]

    def get_dependents(self, operation_id: str) -> List[DependencyEdge]:
        """Edges leaving an operation (what it feeds)."""
        self.get_operation(operation_id)
        return [e for e in self.edges if e.source_operation_id == operation_id]

    def producers_of(self, semantic_type: str) -> List[str]:
        return [op_id for op_id, op in self.operations.items()
                if any(r.semantic_type == semantic_type for r in op.produced_references())]

    def consumers_of(self, semantic_type: str) -> List[str]:
        return [op_id for op_id, op in self.operations.items()
                if any(r.semantic_type == semantic_type for r in op.consumed_references())]

    def validate(self) -> None:
        """
        Raise GraphIntegrityError if any edge is a self-edge, points at an
        unknown operation or semantic type, or records field paths that the
        producer/consumer do not actually carry.
        """
        problems = []
        for edge in self.edges:
            label = f"{edge.source_operation_id}->{edge.target_operation_id}[{edge.semantic_type}]"
            if edge.source_operation_id == edge.target_operation_id:
                problems.append(f"self-edge {label}")
            if edge.semantic_type not in self.semantic_types:
                problems.append(f"unknown semantic type in {label}")
            source = self.operations.get(edge.source_operation_id)
            target = self.operations.get(edge.target_operation_id)
            if source is None or target is None:
                problems.append(f"unknown operation in {label}")
                continue
            produced = {(r.semantic_type, r.field_path) for r in source.produced_references()}
            consumed = {(r.semantic_type, r.field_path) for r in target.consumed_references()}
            if (edge.semantic_type, edge.source_field_path) not in produced:
                problems.append(f"phantom producer field {edge.source_field_path} in {label}")
            if (edge.semantic_type, edge.target_field_path) not in consumed:
                problems.append(f"phantom consumer field {edge.target_field_path} in {label}")
        if problems:
            raise GraphIntegrityError(problems)

    def stats(self) -> Dict[str, Any]:
        total_operations = len(self.operations)
        return {
            'total_operations': total_operations,
            'total_semantic_types': len(self.semantic_types),
            'total_dependencies': len(self.edges),
            'average_dependencies_per_operation': (
                len(self.edges) / total_operations if total_operations else 0.0),
        }
