from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from .enums import ParameterLocation
from .reference import FieldSchema, SemanticTypeReference
from .utils import compact

@dataclass
class OperationParameter:
    """Represents an API parameter and its semantic type binding"""
    name: str
    location: ParameterLocation
    required: bool = False
    semantic_type: Optional[str] = None
    provider: bool = False  # authoritative source of the semantic type's value
    description: Optional[str] = None
    schema: FieldSchema = field(default_factory=FieldSchema)
    examples: List[Any] = field(default_factory=list)

    def __hash__(self):
        return hash((self.name, self.location))

    @property
    def field_path(self) -> str:
        return f"{self.location.value}.{self.name}"

    def as_reference(self) -> Optional[SemanticTypeReference]:
        """View this parameter as a consumed semantic type reference."""
        if not self.semantic_type:
            return None
        return SemanticTypeReference(
            semantic_type=self.semantic_type,
            field_path=self.field_path,
            required=self.required,
            description=self.description,
            schema=FieldSchema(
                type=self.schema.type,
                format=self.schema.format,
                pattern=self.schema.pattern,
                min_length=self.schema.min_length,
                max_length=self.schema.max_length,
                enum=self.schema.enum,
            ),
            examples=list(self.examples),
            provider=self.provider,
        )

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            'name': self.name,
            'location': self.location.value,
            'semanticType': self.semantic_type,
            'required': self.required,
            'description': self.description,
            'schema': self.schema.to_dict(),
            'examples': self.examples,
            'provider': self.provider or None,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OperationParameter":
        return cls(
            name=data['name'],
            location=ParameterLocation(data['location']),
            required=bool(data.get('required', False)),
            semantic_type=data.get('semanticType'),
            provider=bool(data.get('provider', False)),
            description=data.get('description'),
            schema=FieldSchema.from_dict(data.get('schema') or {}),
            examples=list(data.get('examples') or []),
        )
