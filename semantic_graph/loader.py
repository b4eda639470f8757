import json
import os
from typing import Any, Dict
from urllib.parse import urlparse

import requests
import yaml

from .document import SpecDocument
from .errors import SpecLoadError


class SpecLoader:
    """Load an OpenAPI specification from a local file or an http(s) URL."""

    def __init__(self, timeout: int = 30):
        self.timeout = timeout

    def load(self, source: str) -> SpecDocument:
        if urlparse(source).scheme in ('http', 'https'):
            text = self._download(source)
        else:
            text = self._read(source)
        return SpecDocument(self._parse(text, source), source=source)

    def _download(self, url: str) -> str:
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise SpecLoadError(f"Failed to download specification from {url}: {e}") from e
        return response.text

    def _read(self, path: str) -> str:
        if not os.path.exists(path):
            raise SpecLoadError(f"Specification file not found: {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise SpecLoadError(f"Cannot read specification {path}: {e}") from e

    def _parse(self, text: str, source: str) -> Dict[str, Any]:
        try:
            if source.endswith('.json'):
                data = json.loads(text)
            else:
                # YAML is a superset of JSON, so unknown extensions go through here
                data = yaml.safe_load(text)
        except (ValueError, yaml.YAMLError) as e:
            raise SpecLoadError(f"Failed to parse specification {source}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SpecLoadError(f"Specification {source} is not a mapping")
        return data
