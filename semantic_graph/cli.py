import argparse
import logging
import sys
from typing import List, Optional

from .analyzer import GraphAnalyzer
from .config import ExtractorConfig
from .errors import GraphFormatError, GraphIntegrityError, SpecLoadError
from .exporter import GraphExporter
from .pipeline import SemanticGraphExtractor
from .report import GraphReporter
from .visualizer import GraphVisualizer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='semantic-graph',
        description="Extract operation dependency graphs from semantically annotated OpenAPI specifications"
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    extract = subparsers.add_parser('extract', help='Build a graph from an OpenAPI specification')
    extract.add_argument('spec', help='Path or http(s) URL of the OpenAPI specification')
    extract.add_argument(
        '--output', '-o',
        default='operation-dependency-graph.json',
        help='Output file for the graph JSON (default: operation-dependency-graph.json)'
    )
    extract.add_argument('--report', help='Also write a markdown summary to this file')
    extract.add_argument('--dot', help='Also write a Graphviz DOT file')
    extract.add_argument('--bootstrap-file', help='YAML file with bootstrap sequence templates')
    extract.add_argument('--strict-clusters', action='store_true',
                         help='Use strongly connected components for clusters in the report')

    analyze = subparsers.add_parser('analyze', help='Summarize a previously extracted graph')
    analyze.add_argument('graph', help='Graph JSON file produced by extract')
    analyze.add_argument('--output', '-o', help='Write the markdown summary to this file')
    analyze.add_argument('--strict-clusters', action='store_true',
                         help='Use strongly connected components for clusters')

    validate = subparsers.add_parser('validate', help='Check a graph for integrity problems')
    validate.add_argument('graph', help='Graph JSON file produced by extract')
    validate.add_argument('--operation', action='append', default=[], metavar='ID',
                          help='Operation id that must be present (repeatable)')
    validate.add_argument('--semantic-type', action='append', default=[], metavar='NAME',
                          help='Semantic type that must be present (repeatable)')
    return parser


def _extract(args) -> int:
    config = ExtractorConfig.from_env(bootstrap_file=args.bootstrap_file)
    extractor = SemanticGraphExtractor(config)
    graph = extractor.extract(args.spec)

    GraphExporter().save(graph, args.output)
    if args.report:
        reporter = GraphReporter(strict_clusters=args.strict_clusters)
        reporter.save(reporter.generate_summary(graph), args.report)
    if args.dot:
        GraphVisualizer(graph).export_dot(args.dot)
    return 0


def _analyze(args) -> int:
    graph = GraphExporter().load(args.graph)
    analysis = GraphAnalyzer(graph).analyze(strict_clusters=args.strict_clusters)
    stats = analysis['stats']

    print()
    print("SUMMARY")
    print("-" * 50)
    print(f"  Operations:           {stats['total_operations']}")
    print(f"  Semantic types:       {stats['total_semantic_types']}")
    print(f"  Dependencies:         {stats['total_dependencies']}")
    print(f"  Avg deps/operation:   {stats['average_dependencies_per_operation']:.2f}")
    print(f"  Entry points:         {len(analysis['entry_points'])}")
    print(f"  Sinks:                {len(analysis['sinks'])}")
    print(f"  Clusters:             {len(analysis['clusters'])}")

    if args.output:
        reporter = GraphReporter(strict_clusters=args.strict_clusters)
        reporter.save(reporter.generate_summary(graph, analysis), args.output)
    return 0


def _validate(args) -> int:
    graph = GraphExporter().load(args.graph)
    failures = 0
    try:
        graph.validate()
        print("  Graph integrity: OK")
    except GraphIntegrityError as e:
        failures += len(e.problems)
        print(f"  Graph integrity: {len(e.problems)} problem(s)")
        for problem in e.problems:
            print(f"    - {problem}")

    for op_id in args.operation:
        present = op_id in graph.operations
        failures += 0 if present else 1
        print(f"  Operation {op_id}: {'present' if present else 'MISSING'}")
    for name in args.semantic_type:
        present = name in graph.semantic_types
        failures += 0 if present else 1
        print(f"  Semantic type {name}: {'present' if present else 'MISSING'}")

    return 1 if failures else 0


COMMANDS = {
    'extract': _extract,
    'analyze': _analyze,
    'validate': _validate,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
    )
    try:
        return COMMANDS[args.command](args)
    except (SpecLoadError, GraphFormatError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
