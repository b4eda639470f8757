"""
Operation extraction.

Builds one canonical ``Operation`` per path/method pair and collects the
semantic types declared in the document. Defects in a single operation are
logged and skipped; they never abort the extraction.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from .config import ExtractorConfig
from .document import HTTP_METHODS, SpecDocument
from .enums import HTTPMethod, OperationType, ParameterLocation
from .operation import ConditionalIdempotency, Operation, OperationMetadata
from .parameter import OperationParameter
from .reference import SemanticTypeReference
from .resolver import SchemaResolver
from .semantic_type import SemanticType

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = {HTTPMethod.GET, HTTPMethod.PUT, HTTPMethod.DELETE,
                      HTTPMethod.HEAD, HTTPMethod.OPTIONS}
CACHEABLE_METHODS = {HTTPMethod.GET, HTTPMethod.HEAD}
ACTION_PATH_SEGMENTS = ('/activation', '/completion', '/deletion')


class OperationExtractor:
    """Extract operations and semantic types from a parsed specification"""

    def __init__(self, document: SpecDocument, config: Optional[ExtractorConfig] = None,
                 resolver: Optional[SchemaResolver] = None):
        self.document = document
        self.config = config or ExtractorConfig()
        self.resolver = resolver or SchemaResolver(document, self.config)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def extract_operations(self) -> List[Operation]:
        operations = []
        seen_ids = set()

        for path, path_item in self.document.paths.items():
            if not isinstance(path_item, dict):
                continue
            if '$ref' in path_item:
                path_item, _ = self.resolver.resolve(path_item)
                if path_item is None:
                    continue

            for method in HTTP_METHODS:
                spec = path_item.get(method)
                if not isinstance(spec, dict):
                    continue
                operation_id = spec.get('operationId')
                if not operation_id:
                    logger.warning("Operation %s %s has no operationId, skipping",
                                   method.upper(), path)
                    continue
                if operation_id in seen_ids:
                    logger.warning("Duplicate operationId %s at %s %s, skipping",
                                   operation_id, method.upper(), path)
                    continue
                seen_ids.add(operation_id)
                operations.append(self._extract_operation(path, method, spec, path_item))

        logger.debug("Extracted %d operations", len(operations))
        return operations

    def _extract_operation(self, path: str, method: str, spec: Dict[str, Any],
                           path_item: Dict[str, Any]) -> Operation:
        http_method = HTTPMethod[method.upper()]
        return Operation(
            operation_id=spec['operationId'],
            method=http_method,
            path=path,
            operation_type=self.classify_operation(spec['operationId'], path, http_method),
            summary=spec.get('summary'),
            description=spec.get('description'),
            tags=list(spec.get('tags') or []),
            parameters=self._extract_parameters(path_item.get('parameters') or [],
                                                spec.get('parameters') or []),
            request_body_semantic_types=self._extract_request_body(spec.get('requestBody')),
            response_semantic_types=self._extract_responses(spec.get('responses') or {}),
            idempotent=http_method in IDEMPOTENT_METHODS,
            cacheable=http_method in CACHEABLE_METHODS,
            eventually_consistent=spec.get(self.config.eventually_consistent_key) is True,
            operation_metadata=self._parse_operation_kind(
                spec.get(self.config.operation_kind_key)),
            conditional_idempotency=self._parse_conditional_idempotency(
                spec.get(self.config.conditional_idempotency_key)),
        )

    @staticmethod
    def classify_operation(operation_id: str, path: str, method: HTTPMethod) -> OperationType:
        """Deploy beats search, search beats the plain method table."""
        if '/deployment' in path and method == HTTPMethod.POST:
            return OperationType.DEPLOY
        if 'search' in operation_id or '/search' in path:
            return OperationType.SEARCH

        if method == HTTPMethod.POST:
            if any(segment in path for segment in ACTION_PATH_SEGMENTS):
                return OperationType.ACTION
            return OperationType.CREATE
        if method == HTTPMethod.GET:
            return OperationType.READ
        if method in (HTTPMethod.PUT, HTTPMethod.PATCH):
            return OperationType.UPDATE
        if method == HTTPMethod.DELETE:
            return OperationType.DELETE
        return OperationType.ACTION

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def _extract_parameters(self, path_level: List[Any],
                            operation_level: List[Any]) -> List[OperationParameter]:
        merged: Dict[Tuple[str, str], OperationParameter] = {}
        for raw in list(path_level) + list(operation_level):
            param_spec, _ = self.resolver.resolve(raw)
            if param_spec is None:
                continue
            param = self._extract_parameter(param_spec)
            if param is not None:
                # operation-level entries come last and override path-level ones
                merged[(param.name, param.location.value)] = param
        return list(merged.values())

    def _extract_parameter(self, spec: Dict[str, Any]) -> Optional[OperationParameter]:
        name = spec.get('name')
        try:
            location = ParameterLocation(spec.get('in'))
        except ValueError:
            logger.warning("Parameter %s has unknown location %r, skipping", name, spec.get('in'))
            return None
        if not name:
            logger.warning("Parameter without a name in %s, skipping", location.value)
            return None

        semantic_type, provider = None, False
        schema = spec.get('schema')
        if isinstance(schema, dict):
            semantic_type, provider = self.resolver.locate(schema)

        return OperationParameter(
            name=name,
            location=location,
            # path parameters are always required
            required=bool(spec.get('required')) or location == ParameterLocation.PATH,
            semantic_type=semantic_type,
            provider=provider,
            description=spec.get('description'),
            schema=self.resolver.field_schema(schema),
            examples=self._parameter_examples(spec),
        )

    @staticmethod
    def _parameter_examples(spec: Dict[str, Any]) -> List[Any]:
        examples = []
        if 'example' in spec:
            examples.append(spec['example'])
        if isinstance(spec.get('examples'), dict):
            for example in spec['examples'].values():
                if isinstance(example, dict) and 'value' in example:
                    examples.append(example['value'])
        return examples

    # ------------------------------------------------------------------
    # Bodies
    # ------------------------------------------------------------------

    def _extract_request_body(self, request_body: Any) -> List[SemanticTypeReference]:
        if not request_body:
            return []
        request_body, _ = self.resolver.resolve(request_body)
        if request_body is None:
            return []
        return self._extract_content(request_body.get('content'), required=True)

    def _extract_responses(self, responses: Dict[str, Any]) -> Dict[str, List[SemanticTypeReference]]:
        result = {}
        for status_code, response in responses.items():
            resolved, _ = self.resolver.resolve(response)
            if resolved is None:
                result[str(status_code)] = []
                continue
            result[str(status_code)] = self._extract_content(resolved.get('content'),
                                                             required=False)
        return result

    def _extract_content(self, content: Any, required: bool) -> List[SemanticTypeReference]:
        """References from every media type, de-duplicated across media types."""
        if not isinstance(content, dict):
            return []
        references: List[SemanticTypeReference] = []
        index: Dict[Tuple[str, str], SemanticTypeReference] = {}
        for media_type in content.values():
            if not isinstance(media_type, dict) or 'schema' not in media_type:
                continue
            for ref in self.resolver.collect_references(media_type['schema'], '', required):
                existing = index.get(ref.key())
                if existing is not None:
                    existing.provider = existing.provider or ref.provider
                    continue
                index[ref.key()] = ref
                references.append(ref)
        return references

    # ------------------------------------------------------------------
    # Vendor extensions
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_operation_kind(raw: Any) -> Optional[OperationMetadata]:
        """Accepts an object or a list; a list yields its first meaningful object."""
        block = None
        if isinstance(raw, list):
            block = next((o for o in raw if isinstance(o, dict) and (
                o.get('kind') or o.get('duplicatePolicy') or o.get('idempotencyMechanism'))),
                None)
        elif isinstance(raw, dict):
            block = raw
        if not block:
            return None
        metadata = OperationMetadata.from_dict(block)
        if not metadata.to_dict():
            return None  # none of the known keys
        return metadata

    @staticmethod
    def _parse_conditional_idempotency(raw: Any) -> Optional[ConditionalIdempotency]:
        if not isinstance(raw, dict):
            return None
        key_fields = raw.get('keyFields')
        window = raw.get('window')
        if not (isinstance(key_fields, list) and key_fields
                and isinstance(window, dict) and isinstance(window.get('field'), str)):
            return None
        return ConditionalIdempotency.from_dict(raw)

    # ------------------------------------------------------------------
    # Semantic types
    # ------------------------------------------------------------------

    def extract_semantic_types(self, operations: Optional[List[Operation]] = None
                               ) -> Dict[str, SemanticType]:
        """
        Register every annotation found in the component schemas and component
        parameters. Names that only operations know about (inferred from a
        reference name) are registered from the reference's field schema.
        """
        registry: Dict[str, SemanticType] = {}

        for schema in self.document.schemas.values():
            self._discover(schema, registry, set())

        parameters = self.document.components.get('parameters') or {}
        if isinstance(parameters, dict):
            for param in parameters.values():
                if isinstance(param, dict) and isinstance(param.get('schema'), dict):
                    self._discover(param['schema'], registry, set())

        for operation in operations or []:
            references = operation.consumed_references()
            for status_refs in operation.response_semantic_types.values():
                references.extend(status_refs)
            for ref in references:
                if ref.semantic_type not in registry:
                    self._register(registry, SemanticType(
                        name=ref.semantic_type,
                        base_type=ref.schema.type,
                        description=ref.description,
                        format=ref.schema.format,
                        pattern=ref.schema.pattern,
                        min_length=ref.schema.min_length,
                        max_length=ref.schema.max_length,
                    ))

        logger.debug("Discovered %d semantic types", len(registry))
        return registry

    def _discover(self, schema: Any, registry: Dict[str, SemanticType], seen: set):
        # $ref targets are visited as component schemas in their own right
        if not isinstance(schema, dict) or '$ref' in schema or id(schema) in seen:
            return
        seen.add(id(schema))

        name = schema.get(self.config.semantic_type_key)
        if name:
            self._register(registry, SemanticType.from_schema(name, schema))

        for key in ('allOf', 'oneOf', 'anyOf'):
            for member in schema.get(key) or []:
                self._discover(member, registry, seen)
        if isinstance(schema.get('properties'), dict):
            for prop in schema['properties'].values():
                self._discover(prop, registry, seen)
        if isinstance(schema.get('items'), dict):
            self._discover(schema['items'], registry, seen)

    @staticmethod
    def _register(registry: Dict[str, SemanticType], semantic_type: SemanticType):
        existing = registry.get(semantic_type.name)
        if existing is None:
            registry[semantic_type.name] = semantic_type
            return
        merged, conflicts = existing.merge(semantic_type)
        if conflicts:
            logger.warning("Conflicting re-declaration of semantic type %s (%s); keeping first",
                           semantic_type.name, ", ".join(conflicts))
        registry[semantic_type.name] = merged
