"""
Schema resolution and semantic-type discovery.

Two traversals live here:

* ``find_semantic_type`` - first annotation found on a node or, depth-first,
  inside its ``allOf`` members.
* ``collect_references`` - every semantic type reachable from a root schema,
  with dot/bracket field paths (``a.b[].c``) and required-ness.

Deciding *which* name a node carries is delegated to a locator, so the
naming-convention fallback can be replaced by a stricter strategy without
touching the callers.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from .config import ExtractorConfig
from .document import SpecDocument
from .reference import FieldSchema, SemanticTypeReference, ValidationConstraint

logger = logging.getLogger(__name__)

# (semantic type name, schema node that carries the annotation)
Match = Tuple[str, Dict[str, Any]]


class AnnotationLocator:
    """Only explicit annotations count."""

    def locate(self, resolver: "SchemaResolver", node: Dict[str, Any],
               resolved: Dict[str, Any], ref: Optional[str],
               provider: bool) -> Optional[Match]:
        return resolver.find_annotation(resolved)


class NameHeuristicLocator(AnnotationLocator):
    """
    Falls back to the name of a ``$ref`` target (``ProcessInstanceKey``) when
    the target carries no annotation. Naming conventions are not a structural
    guarantee, so this may both over- and under-match.
    """

    def __init__(self, identifier_suffix: str = 'Key', require_provider: bool = True):
        self.identifier_suffix = identifier_suffix
        self.require_provider = require_provider

    def locate(self, resolver, node, resolved, ref, provider):
        match = super().locate(resolver, node, resolved, ref, provider)
        if match or not ref:
            return match
        if self.require_provider and not provider:
            return None
        name = SpecDocument.ref_name(ref)
        if self.looks_like_identifier(name):
            logger.debug("Inferred semantic type %s from reference name", name)
            return name, resolved
        return None

    def looks_like_identifier(self, name: str) -> bool:
        return (len(name) > len(self.identifier_suffix)
                and name[0].isupper()
                and name.endswith(self.identifier_suffix))


class ReferenceCollector:
    """
    Accumulator for ``collect_references``: one entry per
    (semantic type, field path). Rediscovering a pair only ORs the provider flag.
    """

    def __init__(self):
        self._references: List[SemanticTypeReference] = []
        self._index: Dict[Tuple[str, str], SemanticTypeReference] = {}

    def add(self, reference: SemanticTypeReference):
        existing = self._index.get(reference.key())
        if existing is not None:
            existing.provider = existing.provider or reference.provider
            return
        self._index[reference.key()] = reference
        self._references.append(reference)

    def mark_provider(self, field_path: str):
        for reference in self._references:
            if reference.field_path == field_path:
                reference.provider = True

    @property
    def references(self) -> List[SemanticTypeReference]:
        return list(self._references)


class SchemaResolver:
    """Resolve references and discover semantic types inside schemas."""

    def __init__(self, document: SpecDocument, config: Optional[ExtractorConfig] = None,
                 locator: Optional[AnnotationLocator] = None):
        self.document = document
        self.config = config or ExtractorConfig()
        self.locator = locator or NameHeuristicLocator(
            self.config.identifier_suffix,
            require_provider=self.config.require_provider_for_name_fallback,
        )

    # ------------------------------------------------------------------
    # Reference handling
    # ------------------------------------------------------------------

    def resolve(self, node: Any) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
        """
        Follow a (possibly chained) ``$ref``. Returns the target node and the
        last reference followed, or (None, ref) if it cannot be resolved.
        """
        ref = None
        seen = set()
        while isinstance(node, dict) and '$ref' in node:
            ref = node['$ref']
            if ref in seen:
                logger.warning("Circular reference chain at %s", ref)
                return None, ref
            seen.add(ref)
            node = self.document.resolve(ref)
        if not isinstance(node, dict):
            return None, ref
        return node, ref

    def is_provider(self, *nodes: Optional[Dict[str, Any]]) -> bool:
        return any(isinstance(n, dict) and n.get(self.config.provider_key) is True
                   for n in nodes)

    # ------------------------------------------------------------------
    # First-match annotation search
    # ------------------------------------------------------------------

    def find_annotation(self, node: Any, _seen=None) -> Optional[Match]:
        """Node itself first, then each allOf member depth-first; first match wins."""
        resolved, ref = self.resolve(node)
        if resolved is None:
            return None
        _seen = set() if _seen is None else _seen
        if id(resolved) in _seen:
            return None
        _seen.add(id(resolved))

        name = resolved.get(self.config.semantic_type_key)
        if name:
            return name, resolved

        for member in resolved.get('allOf') or []:
            found = self.find_annotation(member, _seen)
            if found:
                return found
        return None

    def find_semantic_type(self, node: Any) -> Optional[str]:
        found = self.find_annotation(node)
        return found[0] if found else None

    def locate(self, node: Any) -> Tuple[Optional[str], bool]:
        """Semantic type bound to a single schema (e.g. a parameter) and its provider flag."""
        resolved, ref = self.resolve(node)
        if resolved is None:
            return None, False
        provider = self.is_provider(node, resolved)
        match = self.locator.locate(self, node, resolved, ref, provider)
        if not match:
            return None, False
        return match[0], provider

    # ------------------------------------------------------------------
    # Full traversal
    # ------------------------------------------------------------------

    def collect_references(self, root: Any, field_path: str = '',
                           required: bool = False) -> List[SemanticTypeReference]:
        """Every semantic type reference reachable from ``root``."""
        collector = ReferenceCollector()
        self._walk(root, field_path, required, collector, ())
        return collector.references

    def _walk(self, node: Any, field_path: str, required: bool,
              collector: ReferenceCollector, chain: Tuple[str, ...]):
        resolved, ref = self.resolve(node)
        if resolved is None:
            return
        if ref:
            if ref in chain:
                return  # recursive schema
            chain = chain + (ref,)

        provider = self.is_provider(node, resolved)
        match = self.locator.locate(self, node, resolved, ref, provider)
        if match:
            collector.add(self._make_reference(match, resolved, field_path, required, provider))

        properties = resolved.get('properties')
        if isinstance(properties, dict):
            required_fields = resolved.get('required') or []
            for prop_name, prop_schema in properties.items():
                prop_path = f"{field_path}.{prop_name}" if field_path else prop_name
                self._walk(prop_schema, prop_path, prop_name in required_fields,
                           collector, chain)

        items = resolved.get('items')
        if isinstance(items, dict):
            item_path = f"{field_path}[]" if field_path else '[]'
            self._walk(items, item_path, required, collector, chain)

        for member in resolved.get('allOf') or []:
            self._walk(member, field_path, required, collector, chain)
            if provider:
                collector.mark_provider(field_path)

        for key in ('oneOf', 'anyOf'):
            for member in resolved.get(key) or []:
                self._walk(member, field_path, required, collector, chain)

    def _make_reference(self, match: Match, resolved: Dict[str, Any], field_path: str,
                        required: bool, provider: bool) -> SemanticTypeReference:
        name, annotated = match
        return SemanticTypeReference(
            semantic_type=name,
            field_path=field_path,
            required=required,
            description=resolved.get('description') or annotated.get('description'),
            schema=FieldSchema.from_schema(annotated),
            examples=schema_examples(resolved) or schema_examples(annotated),
            constraints=validation_constraints(annotated),
            provider=provider,
        )

    # ------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------

    def field_schema(self, node: Any, _chain: Tuple[str, ...] = ()) -> FieldSchema:
        """Schema shape including nested items/properties, resolving references."""
        resolved, ref = self.resolve(node)
        if resolved is None or (ref and ref in _chain):
            return FieldSchema()
        if ref:
            _chain = _chain + (ref,)

        shape = FieldSchema.from_schema(resolved)
        if isinstance(resolved.get('items'), dict):
            shape.items = self.field_schema(resolved['items'], _chain)
        if isinstance(resolved.get('properties'), dict):
            shape.properties = {
                name: self.field_schema(prop, _chain)
                for name, prop in resolved['properties'].items()
            }
        return shape


def schema_examples(schema: Dict[str, Any]) -> List[Any]:
    examples = []
    if 'example' in schema:
        examples.append(schema['example'])
    if isinstance(schema.get('examples'), list):
        examples.extend(schema['examples'])
    return examples


def validation_constraints(schema: Dict[str, Any]) -> List[ValidationConstraint]:
    constraints = []
    if schema.get('pattern'):
        constraints.append(ValidationConstraint(
            'pattern', schema['pattern'], f"Must match pattern: {schema['pattern']}"))
    if schema.get('minLength') is not None:
        constraints.append(ValidationConstraint(
            'length', f"minLength: {schema['minLength']}",
            f"Must be at least {schema['minLength']} characters long"))
    if schema.get('maxLength') is not None:
        constraints.append(ValidationConstraint(
            'length', f"maxLength: {schema['maxLength']}",
            f"Must be no more than {schema['maxLength']} characters long"))
    if schema.get('enum'):
        values = ', '.join(str(v) for v in schema['enum'])
        constraints.append(ValidationConstraint(
            'enum', f"enum: [{values}]", f"Must be one of: {values}"))
    return constraints
