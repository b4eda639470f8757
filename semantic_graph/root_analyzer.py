import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config import BootstrapTemplate, ExtractorConfig
from .core import OperationDependencyGraph
from .enums import HTTPMethod, OperationType
from .operation import Operation

logger = logging.getLogger(__name__)


@dataclass
class BootstrapSequence:
    name: str
    description: str
    operations: List[str]
    produces: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'description': self.description,
            'operations': list(self.operations),
            'produces': list(self.produces),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BootstrapSequence":
        return cls(data['name'], data.get('description', ''),
                   list(data.get('operations') or []), list(data.get('produces') or []))


@dataclass
class RootOperationAnalysis:
    deployment_operations: List[str] = field(default_factory=list)
    setup_operations: List[str] = field(default_factory=list)
    entry_point_operations: List[str] = field(default_factory=list)
    bootstrap_sequences: List[BootstrapSequence] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'deploymentOperations': list(self.deployment_operations),
            'setupOperations': list(self.setup_operations),
            'entryPointOperations': list(self.entry_point_operations),
            'bootstrapSequences': [s.to_dict() for s in self.bootstrap_sequences],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RootOperationAnalysis":
        return cls(
            deployment_operations=list(data.get('deploymentOperations') or []),
            setup_operations=list(data.get('setupOperations') or []),
            entry_point_operations=list(data.get('entryPointOperations') or []),
            bootstrap_sequences=[BootstrapSequence.from_dict(s)
                                 for s in data.get('bootstrapSequences') or []],
        )


class RootDependencyAnalyzer:
    """
    Identify deployment, setup and entry-point operations, and instantiate the
    configured bootstrap sequences whose operations exist in the graph.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig()

    def analyze(self, graph: OperationDependencyGraph) -> RootOperationAnalysis:
        operations = list(graph.operations.values())
        analysis = RootOperationAnalysis(
            deployment_operations=[op.operation_id for op in operations
                                   if self.is_deployment_operation(op)],
            setup_operations=[op.operation_id for op in operations
                              if self.is_setup_operation(op)],
            entry_point_operations=self.find_entry_points(graph),
            bootstrap_sequences=self.build_bootstrap_sequences(graph.operations),
        )
        logger.debug("Found %d deployment operations, %d setup operations, %d bootstrap sequences",
                     len(analysis.deployment_operations), len(analysis.setup_operations),
                     len(analysis.bootstrap_sequences))
        return analysis

    def is_deployment_operation(self, operation: Operation) -> bool:
        return (
            operation.operation_type == OperationType.DEPLOY
            or self.config.deployment_keyword in operation.operation_id.lower()
            or self.config.deployment_path_segment in operation.path
            or (self.config.resource_tag in operation.tags
                and operation.method == HTTPMethod.POST)
        )

    def is_setup_operation(self, operation: Operation) -> bool:
        name = operation.operation_id.lower()
        return (
            operation.operation_type == OperationType.SETUP
            or any(keyword in name for keyword in self.config.setup_keywords)
            or operation.operation_id in self.config.setup_operation_ids
        )

    @staticmethod
    def find_entry_points(graph: OperationDependencyGraph) -> List[str]:
        """Same no-incoming-edge rule as GraphAnalyzer, computed independently."""
        targets = {e.target_operation_id for e in graph.edges}
        return [op_id for op_id in graph.operations if op_id not in targets]

    def build_bootstrap_sequences(self, operations: Dict[str, Operation]
                                  ) -> List[BootstrapSequence]:
        sequences = []
        for template in self.config.bootstrap_templates:
            if self._applies(template, operations):
                sequences.append(BootstrapSequence(
                    name=template.name,
                    description=template.description,
                    operations=list(template.operations),
                    produces=list(template.produces),
                ))
        return sequences

    @staticmethod
    def _applies(template: BootstrapTemplate, operations: Dict[str, Operation]) -> bool:
        return all(op_id in operations for op_id in template.required_operations())

    def find_implicit_dependencies(self, operations: List[Operation]) -> Dict[str, List[str]]:
        """Operation id -> bootstrap sequence names implied by naming conventions."""
        implicit: Dict[str, List[str]] = {}
        for operation in operations:
            if operation.operation_type in (OperationType.DEPLOY, OperationType.SEARCH):
                continue
            name = operation.operation_id.lower()
            for keyword, sequence in self.config.implicit_dependency_rules.items():
                if keyword in name:
                    implicit.setdefault(operation.operation_id, []).append(sequence)
        return implicit
