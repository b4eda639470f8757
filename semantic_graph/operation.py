from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from .enums import HTTPMethod, OperationType
from .parameter import OperationParameter
from .reference import SemanticTypeReference
from .utils import compact

PRODUCING_STATUS_PREFIXES = ('2', '3')

@dataclass
class OperationMetadata:
    """Verbatim copy of an x-operation-kind block"""
    kind: Optional[str] = None  # query|create|update|patch|delete|command|event|batch-command
    duplicate_policy: Optional[str] = None  # conflict|return-existing|ignore|upsert|merge
    idempotent: Optional[bool] = None
    safe: Optional[bool] = None
    idempotency_mechanism: Optional[str] = None  # natural-key|body-hash|idempotency-key|...
    idempotency_scope: Optional[str] = None
    idempotency_key_header: Optional[str] = None

    _WIRE_NAMES = {
        'kind': 'kind',
        'duplicate_policy': 'duplicatePolicy',
        'idempotent': 'idempotent',
        'safe': 'safe',
        'idempotency_mechanism': 'idempotencyMechanism',
        'idempotency_scope': 'idempotencyScope',
        'idempotency_key_header': 'idempotencyKeyHeader',
    }

    def to_dict(self) -> Dict[str, Any]:
        return compact({wire: getattr(self, attr) for attr, wire in self._WIRE_NAMES.items()})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OperationMetadata":
        return cls(**{attr: data.get(wire) for attr, wire in cls._WIRE_NAMES.items()})


@dataclass
class ConditionalIdempotency:
    """Verbatim copy of an x-conditional-idempotency block"""
    key_fields: List[str]
    window_field: str
    window_unit: Optional[str] = None
    duplicate_policy: Optional[str] = None  # currently 'ignore'
    applies_when: Optional[str] = None  # 'key-present'

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            'keyFields': list(self.key_fields),
            'window': compact({'field': self.window_field, 'unit': self.window_unit}),
            'duplicatePolicy': self.duplicate_policy,
            'appliesWhen': self.applies_when,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConditionalIdempotency":
        window = data.get('window') or {}
        return cls(
            key_fields=list(data['keyFields']),
            window_field=window['field'],
            window_unit=window.get('unit'),
            duplicate_policy=data.get('duplicatePolicy'),
            applies_when=data.get('appliesWhen'),
        )


@dataclass(slots=True)
class Operation:
    """Represents a single API operation with its semantic type usage."""
    operation_id: str
    method: HTTPMethod
    path: str
    operation_type: OperationType
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    parameters: List[OperationParameter] = field(default_factory=list)
    request_body_semantic_types: List[SemanticTypeReference] = field(default_factory=list)
    response_semantic_types: Dict[str, List[SemanticTypeReference]] = field(default_factory=dict)
    idempotent: bool = False
    cacheable: bool = False
    eventually_consistent: bool = False
    operation_metadata: Optional[OperationMetadata] = None
    conditional_idempotency: Optional[ConditionalIdempotency] = None

    def __hash__(self):
        return hash(self.operation_id)

    def produced_references(self) -> List[SemanticTypeReference]:
        """Semantic types this operation yields on success (2xx) or redirect (3xx)."""
        produced = []
        for status_code, references in self.response_semantic_types.items():
            if str(status_code).startswith(PRODUCING_STATUS_PREFIXES):
                produced.extend(references)
        return produced

    def consumed_references(self) -> List[SemanticTypeReference]:
        """Semantic types this operation takes in, parameters first, then body fields."""
        consumed = [ref for ref in (p.as_reference() for p in self.parameters) if ref]
        consumed.extend(self.request_body_semantic_types)
        return consumed

    def produced_types(self) -> List[str]:
        return sorted({ref.semantic_type for ref in self.produced_references()})

    def consumed_types(self) -> List[str]:
        return sorted({ref.semantic_type for ref in self.consumed_references()})

    def get_summary(self) -> Dict[str, Any]:
        """Returns a lightweight dictionary summary for graph node attributes."""
        return {
            "method": self.method.value,
            "path": self.path,
            "operation_type": self.operation_type.value,
            "tags": ", ".join(self.tags) if self.tags else ""
        }

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            'operationId': self.operation_id,
            'method': self.method.value,
            'path': self.path,
            'summary': self.summary,
            'description': self.description,
            'tags': list(self.tags),
            'parameters': [p.to_dict() for p in self.parameters],
            'requestBodySemanticTypes': [r.to_dict() for r in self.request_body_semantic_types],
            'responseSemanticTypes': {
                code: [r.to_dict() for r in refs]
                for code, refs in self.response_semantic_types.items()
            },
            'eventuallyConsistent': self.eventually_consistent,
            'operationType': self.operation_type.value,
            'idempotent': self.idempotent,
            'cacheable': self.cacheable,
            'operationMetadata': (self.operation_metadata.to_dict()
                                  if self.operation_metadata else None),
            'conditionalIdempotency': (self.conditional_idempotency.to_dict()
                                       if self.conditional_idempotency else None),
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Operation":
        metadata = data.get('operationMetadata')
        conditional = data.get('conditionalIdempotency')
        return cls(
            operation_id=data['operationId'],
            method=HTTPMethod(data['method'].upper()),
            path=data['path'],
            operation_type=OperationType(data.get('operationType', 'action')),
            summary=data.get('summary'),
            description=data.get('description'),
            tags=list(data.get('tags') or []),
            parameters=[OperationParameter.from_dict(p) for p in data.get('parameters') or []],
            request_body_semantic_types=[
                SemanticTypeReference.from_dict(r)
                for r in data.get('requestBodySemanticTypes') or []
            ],
            response_semantic_types={
                str(code): [SemanticTypeReference.from_dict(r) for r in refs]
                for code, refs in (data.get('responseSemanticTypes') or {}).items()
            },
            idempotent=bool(data.get('idempotent', False)),
            cacheable=bool(data.get('cacheable', False)),
            eventually_consistent=bool(data.get('eventuallyConsistent', False)),
            operation_metadata=OperationMetadata.from_dict(metadata) if metadata else None,
            conditional_idempotency=(ConditionalIdempotency.from_dict(conditional)
                                     if conditional else None),
        )
