import logging
import os
import time
from typing import Optional, Union

from .builder import DependencyGraphBuilder
from .config import ExtractorConfig
from .contamination import CrossContaminationAnalyzer
from .core import OperationDependencyGraph
from .document import SpecDocument
from .exporter import GraphExporter
from .extractor import OperationExtractor
from .library import SemanticTypeLibraryBuilder
from .loader import SpecLoader
from .report import GraphReporter
from .resolver import SchemaResolver
from .root_analyzer import RootDependencyAnalyzer
from .visualizer import GraphVisualizer

logger = logging.getLogger(__name__)


class SemanticGraphExtractor:
    """
    End-to-end extraction: load the specification, extract operations and
    semantic types, build the dependency graph and attach the semantic type
    library, root dependency analysis and cross-contamination map.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None,
                 loader: Optional[SpecLoader] = None, verbose: bool = True):
        self.config = config or ExtractorConfig()
        self.loader = loader or SpecLoader()
        self.verbose = verbose
        self.graph: Optional[OperationDependencyGraph] = None

    def _banner(self, text: str):
        if self.verbose:
            print(text)

    def extract(self, source: Union[str, SpecDocument]) -> OperationDependencyGraph:
        """
        Steps:
        1. Load the specification (file path, URL or already parsed document)
        2. Extract operations and semantic types
        3. Build producer -> consumer edges
        4. Enrich with library, root analysis and contamination map
        """
        self._banner("=" * 80)
        self._banner("SEMANTIC GRAPH EXTRACTOR")
        self._banner("=" * 80)
        start_time = time.time()

        document = source if isinstance(source, SpecDocument) else self.loader.load(source)

        self._banner("\n[PHASE 1] Extracting operations and semantic types")
        self._banner("-" * 80)
        resolver = SchemaResolver(document, self.config)
        extractor = OperationExtractor(document, self.config, resolver)
        operations = extractor.extract_operations()
        semantic_types = extractor.extract_semantic_types(operations)
        self._banner(f"  Extracted {len(operations)} operations, "
                     f"{len(semantic_types)} semantic types")

        self._banner("\n[PHASE 2] Building dependency graph")
        self._banner("-" * 80)
        graph = DependencyGraphBuilder().build(operations, semantic_types)
        self._banner(f"  Found {len(graph.edges)} dependencies")

        self._banner("\n[PHASE 3] Enriching graph")
        self._banner("-" * 80)
        self.enrich(graph, document)

        elapsed = time.time() - start_time
        self._banner("\n" + "=" * 80)
        self._banner(f"Graph extraction completed in {elapsed:.2f} seconds")
        self._banner("=" * 80)

        self.graph = graph
        return graph

    def enrich(self, graph: OperationDependencyGraph, document: SpecDocument):
        graph.semantic_type_library = SemanticTypeLibraryBuilder(
            document, self.config).build(graph.semantic_types)

        root_analyzer = RootDependencyAnalyzer(self.config)
        graph.root_dependency_analysis = root_analyzer.analyze(graph)
        implicit = root_analyzer.find_implicit_dependencies(list(graph.operations.values()))
        logger.debug("Implicit bootstrap dependencies for %d operations", len(implicit))

        graph.cross_contamination_map = CrossContaminationAnalyzer(
            self.config).find_contamination_opportunities(graph.semantic_types)

        analysis = graph.root_dependency_analysis
        self._banner(f"  Semantic type library: {len(graph.semantic_type_library.semantic_types)} types")
        self._banner(f"  Bootstrap sequences: {len(analysis.bootstrap_sequences)}")
        self._banner(f"  Contamination candidates: {len(graph.cross_contamination_map)} types")

    def export_all(self, output_dir: Optional[str] = None):
        """Write graph JSON, markdown summary and DOT file into output_dir"""
        if self.graph is None:
            raise RuntimeError("No graph extracted yet, call extract() first")
        output_dir = output_dir or self.config.output_dir
        os.makedirs(output_dir, exist_ok=True)

        self._banner("\n[EXPORT] Exporting semantic graph...")
        GraphExporter().save(self.graph, os.path.join(output_dir, 'operation-dependency-graph.json'))
        reporter = GraphReporter()
        reporter.save(reporter.generate_summary(self.graph),
                      os.path.join(output_dir, 'dependency-summary.md'))
        GraphVisualizer(self.graph).export_dot(os.path.join(output_dir, 'graph.dot'))
        self._banner(f"\nAll exports completed in {output_dir}/")
