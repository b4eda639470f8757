import json
from typing import Any, Dict, Iterable, List


def compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None, the way absent JSON fields are omitted."""
    return {k: v for k, v in data.items() if v is not None}


def unique(values: Iterable[Any]) -> List[Any]:
    """Order-preserving de-duplication that also copes with unhashable values."""
    seen = set()
    result = []
    for value in values:
        # type name keeps 1 and True (and "1") apart
        marker = (type(value).__name__, json.dumps(value, sort_keys=True, default=str))
        if marker in seen:
            continue
        seen.add(marker)
        result.append(value)
    return result
