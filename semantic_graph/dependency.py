from dataclasses import dataclass
from typing import Dict, Any, Optional
from .enums import DependencyStrength
from .utils import compact

@dataclass(slots=True, frozen=True)
class DependencyEdge:
    """
    A directed producer -> consumer link carried by one semantic type.
    Edges are derived data: the builder recomputes them on every build.
    """
    source_operation_id: str
    target_operation_id: str
    semantic_type: str
    source_field_path: str
    target_field_path: str
    strength: DependencyStrength
    description: Optional[str] = None

    def get_graph_summary(self) -> Dict[str, Any]:
        """Returns a lightweight dictionary summary for graph edge attributes."""
        return {
            "semantic_type": self.semantic_type,
            "strength": self.strength.value,
            "source_field_path": self.source_field_path,
            "target_field_path": self.target_field_path,
        }

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            'sourceOperationId': self.source_operation_id,
            'targetOperationId': self.target_operation_id,
            'semanticType': self.semantic_type,
            'sourceFieldPath': self.source_field_path,
            'targetFieldPath': self.target_field_path,
            'strength': self.strength.value,
            'description': self.description,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DependencyEdge":
        return cls(
            source_operation_id=data['sourceOperationId'],
            target_operation_id=data['targetOperationId'],
            semantic_type=data['semanticType'],
            source_field_path=data.get('sourceFieldPath', ''),
            target_field_path=data.get('targetFieldPath', ''),
            strength=DependencyStrength(data['strength']),
            description=data.get('description'),
        )
