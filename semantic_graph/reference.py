from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .utils import compact


@dataclass
class FieldSchema:
    """Primitive schema shape of a field or parameter"""
    type: str = 'string'
    format: Optional[str] = None
    pattern: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    enum: Optional[List[Any]] = None
    nullable: Optional[bool] = None
    items: Optional["FieldSchema"] = None
    properties: Optional[Dict[str, "FieldSchema"]] = None

    @classmethod
    def from_schema(cls, schema: Dict[str, Any]) -> "FieldSchema":
        """Shallow capture of a resolved schema node (no nested shapes)"""
        return cls(
            type=schema.get('type') or 'string',
            format=schema.get('format'),
            pattern=schema.get('pattern'),
            min_length=schema.get('minLength'),
            max_length=schema.get('maxLength'),
            minimum=schema.get('minimum'),
            maximum=schema.get('maximum'),
            enum=schema.get('enum'),
            nullable=schema.get('nullable'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            'type': self.type,
            'format': self.format,
            'pattern': self.pattern,
            'minLength': self.min_length,
            'maxLength': self.max_length,
            'minimum': self.minimum,
            'maximum': self.maximum,
            'enum': self.enum,
            'nullable': self.nullable,
            'items': self.items.to_dict() if self.items else None,
            'properties': ({k: v.to_dict() for k, v in self.properties.items()}
                           if self.properties is not None else None),
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldSchema":
        items = data.get('items')
        properties = data.get('properties')
        return cls(
            type=data.get('type', 'string'),
            format=data.get('format'),
            pattern=data.get('pattern'),
            min_length=data.get('minLength'),
            max_length=data.get('maxLength'),
            minimum=data.get('minimum'),
            maximum=data.get('maximum'),
            enum=data.get('enum'),
            nullable=data.get('nullable'),
            items=cls.from_dict(items) if items else None,
            properties=({k: cls.from_dict(v) for k, v in properties.items()}
                        if properties is not None else None),
        )


@dataclass
class ValidationConstraint:
    type: str  # required, format, pattern, range, length, enum
    rule: str
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return compact({'type': self.type, 'rule': self.rule, 'errorMessage': self.error_message})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidationConstraint":
        return cls(type=data['type'], rule=data['rule'], error_message=data.get('errorMessage'))


@dataclass
class SemanticTypeReference:
    """One occurrence of a semantic type at a field path inside a body"""
    semantic_type: str
    field_path: str
    required: bool = False
    description: Optional[str] = None
    schema: FieldSchema = field(default_factory=FieldSchema)
    examples: List[Any] = field(default_factory=list)
    constraints: List[ValidationConstraint] = field(default_factory=list)
    provider: bool = False

    def key(self):
        return (self.semantic_type, self.field_path)

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            'semanticType': self.semantic_type,
            'fieldPath': self.field_path,
            'required': self.required,
            'description': self.description,
            'schema': self.schema.to_dict(),
            'examples': self.examples,
            'constraints': [c.to_dict() for c in self.constraints],
            'provider': self.provider,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SemanticTypeReference":
        return cls(
            semantic_type=data['semanticType'],
            field_path=data.get('fieldPath', ''),
            required=bool(data.get('required', False)),
            description=data.get('description'),
            schema=FieldSchema.from_dict(data.get('schema') or {}),
            examples=list(data.get('examples') or []),
            constraints=[ValidationConstraint.from_dict(c) for c in data.get('constraints') or []],
            provider=bool(data.get('provider', False)),
        )
