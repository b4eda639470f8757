import logging
from typing import Dict, List

from .core import OperationDependencyGraph
from .dependency import DependencyEdge
from .enums import DependencyStrength
from .operation import Operation
from .reference import SemanticTypeReference
from .semantic_type import SemanticType

logger = logging.getLogger(__name__)


class DependencyGraphBuilder:
    """
    Match every operation's produced semantic types against every other
    operation's consumed ones. Pairwise (O(n^2)) over operations, which is fine
    for specifications with a few hundred operations.
    """

    def build(self, operations: List[Operation],
              semantic_types: Dict[str, SemanticType]) -> OperationDependencyGraph:
        edges: List[DependencyEdge] = []

        # Reference lists are computed once per operation, not once per pair
        produced = {op.operation_id: op.produced_references() for op in operations}
        consumed = {op.operation_id: op.consumed_references() for op in operations}

        for source in operations:
            if not produced[source.operation_id]:
                continue
            for target in operations:
                if source.operation_id == target.operation_id:
                    continue
                edges.extend(self._find_dependencies(
                    source, target, produced[source.operation_id], consumed[target.operation_id]))

        logger.debug("Found %d dependencies between %d operations", len(edges), len(operations))
        return OperationDependencyGraph(
            operations={op.operation_id: op for op in operations},
            semantic_types=semantic_types,
            edges=edges,
        )

    def _find_dependencies(self, source: Operation, target: Operation,
                           produced: List[SemanticTypeReference],
                           consumed: List[SemanticTypeReference]) -> List[DependencyEdge]:
        dependencies = []
        for out_ref in produced:
            for in_ref in consumed:
                if out_ref.semantic_type != in_ref.semantic_type:
                    continue
                dependencies.append(DependencyEdge(
                    source_operation_id=source.operation_id,
                    target_operation_id=target.operation_id,
                    semantic_type=out_ref.semantic_type,
                    source_field_path=out_ref.field_path,
                    target_field_path=in_ref.field_path,
                    strength=self.determine_strength(in_ref, source),
                    description=(f"{target.operation_id} requires {out_ref.semantic_type} "
                                 f"from {source.operation_id}"),
                ))
        return dependencies

    @staticmethod
    def determine_strength(consumed: SemanticTypeReference,
                           source: Operation) -> DependencyStrength:
        if consumed.required:
            return DependencyStrength.REQUIRED
        if source.eventually_consistent:
            return DependencyStrength.CONDITIONAL

        field_path = consumed.field_path
        if field_path.startswith('path.'):
            return DependencyStrength.REQUIRED
        if field_path.startswith('query.'):
            return DependencyStrength.REQUIRED if consumed.required else DependencyStrength.OPTIONAL
        if field_path and '.' not in field_path:
            # top-level request body field
            return DependencyStrength.REQUIRED if consumed.required else DependencyStrength.OPTIONAL
        return DependencyStrength.OPTIONAL
