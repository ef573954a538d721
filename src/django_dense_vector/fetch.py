from typing import Any, Mapping

from .tokens import ObjectPairs

_MISSING = object()


def _indexed_pairs(pairs: ObjectPairs) -> dict[str, Any]:
    # The mapper skips null, so the first non-null occurrence is the one indexed
    result: dict[str, Any] = {}
    for key, value in pairs:
        if result.get(key) is None:
            result[key] = value
    return result


def extract_value(source: Any, path: str) -> Any:
    """Look up a dotted path in a document source, or None when absent.

    A key containing dots is matched whole before the path is split, so both
    {"a.b": 1} and {"a": {"b": 1}} resolve "a.b".
    """
    if isinstance(source, ObjectPairs):
        source = _indexed_pairs(source)

    if not isinstance(source, Mapping):
        return None

    value = source.get(path, _MISSING)
    if value is not _MISSING:
        return value

    head, sep, rest = path.partition(".")
    while sep:
        if head in source:
            return extract_value(source[head], rest)
        next_head, sep, rest = rest.partition(".")
        head = f"{head}.{next_head}"
    return None


class SourceValueFetcher:
    """Fetches a field's values from the document source, exactly as supplied.

    The field's stored blob is never read; an array is returned as a single
    value rather than one value per element.
    """

    def __init__(self, field_name: str):
        self.field_name = field_name

    def parse_source_value(self, value: Any) -> Any:
        return value

    def fetch_values(self, source: Any) -> list[Any]:
        value = extract_value(source, self.field_name)
        if value is None:
            return []
        return [self.parse_source_value(value)]
