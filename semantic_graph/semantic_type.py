from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from .utils import compact

_CONSTRAINT_FIELDS = ('description', 'format', 'pattern', 'min_length', 'max_length')


@dataclass(frozen=True)
class SemanticType:
    """A named logical type layered over a primitive schema type."""
    name: str
    base_type: str = 'string'
    description: Optional[str] = None
    format: Optional[str] = None
    pattern: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None

    @classmethod
    def from_schema(cls, name: str, schema: Dict[str, Any]) -> "SemanticType":
        return cls(
            name=name,
            base_type=schema.get('type') or 'string',
            description=schema.get('description'),
            format=schema.get('format'),
            pattern=schema.get('pattern'),
            min_length=schema.get('minLength'),
            max_length=schema.get('maxLength'),
        )

    def merge(self, other: "SemanticType") -> Tuple["SemanticType", List[str]]:
        """
        Fill constraint fields missing here from a later discovery of the same type.
        Values already set are never overwritten; disagreeing values are reported
        back as conflicts.
        """
        updates = {}
        conflicts = []
        for name in _CONSTRAINT_FIELDS:
            mine, theirs = getattr(self, name), getattr(other, name)
            if theirs is None:
                continue
            if mine is None:
                updates[name] = theirs
            elif mine != theirs and name != 'description':
                conflicts.append(f"{name}: {mine!r} != {theirs!r}")
        if self.base_type != other.base_type:
            conflicts.append(f"base_type: {self.base_type!r} != {other.base_type!r}")
        merged = replace(self, **updates) if updates else self
        return merged, conflicts

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            'name': self.name,
            'description': self.description,
            'format': self.format,
            'baseType': self.base_type,
            'pattern': self.pattern,
            'minLength': self.min_length,
            'maxLength': self.max_length,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SemanticType":
        return cls(
            name=data['name'],
            base_type=data.get('baseType', 'string'),
            description=data.get('description'),
            format=data.get('format'),
            pattern=data.get('pattern'),
            min_length=data.get('minLength'),
            max_length=data.get('maxLength'),
        )
