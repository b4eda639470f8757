import json
import os
from datetime import datetime, timezone
from typing import Any, Dict

from .core import OperationDependencyGraph
from .dependency import DependencyEdge
from .errors import GraphFormatError
from .library import SemanticTypeLibrary
from .operation import Operation
from .root_analyzer import RootOperationAnalysis
from .semantic_type import SemanticType


class GraphExporter:
    """Persist an OperationDependencyGraph as camelCase JSON and read it back"""

    @staticmethod
    def to_dict(graph: OperationDependencyGraph) -> Dict[str, Any]:
        operations = [op.to_dict() for op in graph.operations.values()]
        data: Dict[str, Any] = {
            'operations': operations,
            'operationsById': {op['operationId']: op for op in operations},
            'semanticTypes': [st.to_dict() for st in graph.semantic_types.values()],
            'edges': [e.to_dict() for e in graph.edges],
            'metadata': {
                'extractedAt': datetime.now(timezone.utc).isoformat(),
                'totalOperations': len(graph.operations),
                'totalSemanticTypes': len(graph.semantic_types),
                'totalDependencies': len(graph.edges),
            },
        }
        if graph.semantic_type_library is not None:
            data['semanticTypeLibrary'] = graph.semantic_type_library.to_dict()
        if graph.root_dependency_analysis is not None:
            data['rootDependencyAnalysis'] = graph.root_dependency_analysis.to_dict()
        if graph.cross_contamination_map is not None:
            data['crossContaminationMap'] = {
                name: list(sources) for name, sources in graph.cross_contamination_map.items()
            }
        return data

    @staticmethod
    def from_dict(data: Any) -> OperationDependencyGraph:
        if not isinstance(data, dict):
            raise GraphFormatError("Graph document must be a JSON object")
        try:
            raw_operations = data.get('operations')
            if raw_operations is None:
                raw_operations = list((data.get('operationsById') or {}).values())
            operations = [Operation.from_dict(op) for op in raw_operations]
            semantic_types = {}
            for raw in data.get('semanticTypes') or []:
                semantic_type = SemanticType.from_dict(raw)
                semantic_types[semantic_type.name] = semantic_type
            edges = [DependencyEdge.from_dict(e) for e in data.get('edges') or []]

            graph = OperationDependencyGraph(
                operations={op.operation_id: op for op in operations},
                semantic_types=semantic_types,
                edges=edges,
            )
            if 'semanticTypeLibrary' in data:
                graph.semantic_type_library = SemanticTypeLibrary.from_dict(
                    data['semanticTypeLibrary'])
            if 'rootDependencyAnalysis' in data:
                graph.root_dependency_analysis = RootOperationAnalysis.from_dict(
                    data['rootDependencyAnalysis'])
            if 'crossContaminationMap' in data:
                graph.cross_contamination_map = {
                    name: list(sources)
                    for name, sources in data['crossContaminationMap'].items()
                }
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise GraphFormatError(f"Malformed graph document: {e}") from e
        return graph

    def save(self, graph: OperationDependencyGraph, output_path: str):
        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(graph), f, indent=2)
        print(f"Exported semantic graph to {output_path}")

    def load(self, input_path: str) -> OperationDependencyGraph:
        try:
            with open(input_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise GraphFormatError(f"Cannot read graph file {input_path}: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise GraphFormatError(f"Graph file {input_path} is not valid JSON: {e}") from e
        return self.from_dict(data)
