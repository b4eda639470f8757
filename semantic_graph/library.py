"""
Semantic type library: valid and invalid example values per semantic type,
plus the value-generation rules a test generator can use to synthesize more.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config import ExtractorConfig
from .document import SpecDocument
from .enums import InvalidationType
from .semantic_type import SemanticType
from .utils import compact, unique

logger = logging.getLogger(__name__)

# Patterns for which known-good values can be produced without a regex engine
PATTERN_EXAMPLES = {
    '^-?[0-9]+$': ['12345', '-67890', '1', '999999999'],
    r'^-?\d+$': ['12345', '-67890', '1', '999999999'],
    '^[0-9]+$': ['12345', '1', '999999999'],
    r'^\d+$': ['12345', '1', '999999999'],
}
IDENTIFIER_DEFAULT_EXAMPLES = ['12345', '67890']
PLACEHOLDER_EXAMPLE = 'example_value'


@dataclass
class InvalidExample:
    value: Any
    invalidation_type: InvalidationType
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'value': self.value,
            'invalidationType': self.invalidation_type.value,
            'description': self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InvalidExample":
        return cls(data.get('value'), InvalidationType(data['invalidationType']),
                   data.get('description', ''))


@dataclass
class GenerationRule:
    type: str  # random | boundary | pattern | enum
    rule: str

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'rule': self.rule}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationRule":
        return cls(data['type'], data['rule'])


@dataclass
class SemanticTypeDefinition:
    name: str
    base_type: str = 'string'
    description: Optional[str] = None
    format: Optional[str] = None
    pattern: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    valid_examples: List[Any] = field(default_factory=list)
    invalid_examples: List[InvalidExample] = field(default_factory=list)
    cross_contamination_sources: List[str] = field(default_factory=list)
    generation_rules: List[GenerationRule] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            'name': self.name,
            'description': self.description,
            'baseType': self.base_type,
            'format': self.format,
            'pattern': self.pattern,
            'minLength': self.min_length,
            'maxLength': self.max_length,
            'validExamples': self.valid_examples,
            'invalidExamples': [e.to_dict() for e in self.invalid_examples],
            'crossContaminationSources': self.cross_contamination_sources,
            'generationRules': [r.to_dict() for r in self.generation_rules],
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SemanticTypeDefinition":
        return cls(
            name=data['name'],
            base_type=data.get('baseType', 'string'),
            description=data.get('description'),
            format=data.get('format'),
            pattern=data.get('pattern'),
            min_length=data.get('minLength'),
            max_length=data.get('maxLength'),
            valid_examples=list(data.get('validExamples') or []),
            invalid_examples=[InvalidExample.from_dict(e)
                              for e in data.get('invalidExamples') or []],
            cross_contamination_sources=list(data.get('crossContaminationSources') or []),
            generation_rules=[GenerationRule.from_dict(r)
                              for r in data.get('generationRules') or []],
        )


@dataclass
class SemanticTypeLibrary:
    semantic_types: Dict[str, SemanticTypeDefinition] = field(default_factory=dict)

    def get(self, name: str) -> Optional[SemanticTypeDefinition]:
        return self.semantic_types.get(name)

    def to_dict(self) -> Dict[str, Any]:
        return {'semanticTypes': [d.to_dict() for d in self.semantic_types.values()]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SemanticTypeLibrary":
        definitions = [SemanticTypeDefinition.from_dict(d) for d in data.get('semanticTypes') or []]
        return cls({d.name: d for d in definitions})


class SemanticTypeLibraryBuilder:
    """Assemble a SemanticTypeDefinition for every discovered semantic type"""

    def __init__(self, document: SpecDocument, config: Optional[ExtractorConfig] = None):
        self.document = document
        self.config = config or ExtractorConfig()

    def build(self, semantic_types: Dict[str, SemanticType]) -> SemanticTypeLibrary:
        library = SemanticTypeLibrary()
        for name, semantic_type in semantic_types.items():
            library.semantic_types[name] = SemanticTypeDefinition(
                name=name,
                base_type=semantic_type.base_type,
                description=semantic_type.description,
                format=semantic_type.format,
                pattern=semantic_type.pattern,
                min_length=semantic_type.min_length,
                max_length=semantic_type.max_length,
                valid_examples=self.valid_examples(semantic_type),
                invalid_examples=self.invalid_examples(semantic_type),
                cross_contamination_sources=self.cross_contamination_sources(
                    semantic_type, semantic_types),
                generation_rules=self.generation_rules(semantic_type),
            )
        logger.debug("Built libraries for %d semantic types", len(library.semantic_types))
        return library

    def _matching_schemas(self, name: str) -> List[Dict[str, Any]]:
        return [schema for schema in self.document.schemas.values()
                if isinstance(schema, dict)
                and schema.get(self.config.semantic_type_key) == name]

    def valid_examples(self, semantic_type: SemanticType) -> List[Any]:
        examples: List[Any] = []
        schemas = self._matching_schemas(semantic_type.name)
        for schema in schemas:
            if 'example' in schema:
                examples.append(schema['example'])
            if isinstance(schema.get('examples'), list):
                examples.extend(schema['examples'])

        pattern = semantic_type.pattern or next(
            (s['pattern'] for s in schemas if s.get('pattern')), None)
        if pattern:
            examples.extend(PATTERN_EXAMPLES.get(pattern, []))

        if not examples:
            if self.config.looks_like_identifier(semantic_type.name):
                examples.extend(IDENTIFIER_DEFAULT_EXAMPLES)
            else:
                examples.append(PLACEHOLDER_EXAMPLE)
        return unique(examples)

    @staticmethod
    def invalid_examples(semantic_type: SemanticType) -> List[InvalidExample]:
        invalid = []
        if semantic_type.base_type == 'string':
            invalid.append(InvalidExample(12345, InvalidationType.WRONG_TYPE,
                                          'Number instead of string'))
            invalid.append(InvalidExample(True, InvalidationType.WRONG_TYPE,
                                          'Boolean instead of string'))
            invalid.append(InvalidExample(None, InvalidationType.WRONG_TYPE,
                                          'Null instead of string'))
        if semantic_type.pattern:
            invalid.append(InvalidExample('invalid_format', InvalidationType.WRONG_FORMAT,
                                          f"Does not match pattern: {semantic_type.pattern}"))
        if semantic_type.min_length:
            invalid.append(InvalidExample('x' * (semantic_type.min_length - 1),
                                          InvalidationType.OUT_OF_BOUNDS,
                                          f"Below minimum length: {semantic_type.min_length}"))
        if semantic_type.max_length is not None:
            invalid.append(InvalidExample('x' * (semantic_type.max_length + 1),
                                          InvalidationType.OUT_OF_BOUNDS,
                                          f"Above maximum length: {semantic_type.max_length}"))
        return invalid

    @staticmethod
    def cross_contamination_sources(target: SemanticType,
                                    all_types: Dict[str, SemanticType]) -> List[str]:
        """Other types with the same base type and format (pattern is ignored here)."""
        return [name for name, other in all_types.items()
                if name != target.name
                and other.base_type == target.base_type
                and other.format == target.format]

    def generation_rules(self, semantic_type: SemanticType) -> List[GenerationRule]:
        rules = []
        if semantic_type.pattern:
            rules.append(GenerationRule('pattern', semantic_type.pattern))
        if (semantic_type.base_type == 'string'
                and self.config.looks_like_identifier(semantic_type.name)):
            rules.append(GenerationRule('random', 'numeric_string'))
        return rules
