"""
In-memory specification document handed to the engine by the loader.

The engine never parses description-language syntax itself; it only walks
the already parsed mapping and resolves local JSON references in it.
"""
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

HTTP_METHODS = ('get', 'post', 'put', 'patch', 'delete', 'head', 'options', 'trace')


class SpecDocument:
    """A parsed OpenAPI document plus its reference-resolution table."""

    def __init__(self, raw: Optional[Dict[str, Any]] = None, source: str = '<memory>'):
        self.raw: Dict[str, Any] = raw if isinstance(raw, dict) else {}
        self.source = source

    @property
    def paths(self) -> Dict[str, Any]:
        paths = self.raw.get('paths')
        return paths if isinstance(paths, dict) else {}

    @property
    def components(self) -> Dict[str, Any]:
        components = self.raw.get('components')
        return components if isinstance(components, dict) else {}

    @property
    def schemas(self) -> Dict[str, Any]:
        schemas = self.components.get('schemas')
        return schemas if isinstance(schemas, dict) else {}

    @property
    def title(self) -> str:
        return (self.raw.get('info') or {}).get('title', '')

    def resolve(self, ref: str) -> Optional[Any]:
        """
        Resolve a local JSON reference such as '#/components/schemas/JobKey'.
        Returns None (and logs a warning) when the target does not exist.
        """
        if not isinstance(ref, str) or not ref.startswith('#/'):
            logger.warning("Unable to resolve reference: %s", ref)
            return None

        node: Any = self.raw
        for token in ref[2:].split('/'):
            token = token.replace('~1', '/').replace('~0', '~')
            if isinstance(node, dict) and token in node:
                node = node[token]
            elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
                node = node[int(token)]
            else:
                logger.warning("Unable to resolve reference: %s", ref)
                return None
        return node

    @staticmethod
    def ref_name(ref: str) -> str:
        """Last segment of a reference, e.g. 'JobKey'."""
        return ref.rsplit('/', 1)[-1]
