"""
Top-level package interface.
"""

from .analyzer import GraphAnalyzer
from .builder import DependencyGraphBuilder
from .config import BootstrapTemplate, ExtractorConfig
from .contamination import CrossContaminationAnalyzer
from .core import OperationDependencyGraph
from .dependency import DependencyEdge
from .document import SpecDocument
from .enums import DependencyStrength, HTTPMethod, OperationType, ParameterLocation
from .errors import GraphFormatError, GraphIntegrityError, SpecLoadError
from .exporter import GraphExporter
from .extractor import OperationExtractor
from .library import SemanticTypeLibrary, SemanticTypeLibraryBuilder
from .loader import SpecLoader
from .operation import Operation
from .parameter import OperationParameter
from .pipeline import SemanticGraphExtractor
from .reference import SemanticTypeReference
from .report import GraphReporter
from .resolver import AnnotationLocator, NameHeuristicLocator, SchemaResolver
from .root_analyzer import RootDependencyAnalyzer, RootOperationAnalysis
from .semantic_type import SemanticType
from .visualizer import GraphVisualizer


def build_semantic_graph_from_openapi(
    spec_path: str,
    export_results: bool = True,
    output_dir: str = './output',
    config: ExtractorConfig = None,
) -> OperationDependencyGraph:
    """
    Convenience wrapper: extract the semantic dependency graph from an OpenAPI
    specification and optionally write every export format to output_dir.
    """
    extractor = SemanticGraphExtractor(config)
    graph = extractor.extract(spec_path)

    if export_results:
        extractor.export_all(output_dir)

    print("\nDependency Strength Summary:")
    summary = {}
    for edge in graph.edges:
        summary[edge.strength] = summary.get(edge.strength, 0) + 1
    for strength, count in sorted(summary.items(), key=lambda x: x[1], reverse=True):
        print(f"  {strength.value}: {count}")

    return graph
