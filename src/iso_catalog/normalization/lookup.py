"""Key-insensitive field access over one raw record."""

from collections.abc import Iterable, Mapping
from typing import Any

from iso_catalog.primitives import is_finite_number, normalize_key, number_text, to_number


class FieldLookup:
    """
    Index a raw mapping by normalized key so candidate lookups are O(1).

    Every accessor takes an ordered candidate list (most specific first) and
    returns the first match that is present and not None. ``download_url``,
    ``downloadUrl`` and ``Download-URL`` all hit the same entry.
    """

    __slots__ = ("_fields",)

    def __init__(self, record: Mapping[Any, Any]) -> None:
        self._fields: dict[str, Any] = {normalize_key(k): v for k, v in record.items()}

    def __contains__(self, key: object) -> bool:
        return normalize_key(key) in self._fields

    def value(self, keys: Iterable[str]) -> Any:
        for key in keys:
            found = self._fields.get(normalize_key(key))
            if found is not None:
                return found
        return None

    def string(self, keys: Iterable[str]) -> str | None:
        found = self.value(keys)
        if isinstance(found, str):
            return found.strip() or None
        if is_finite_number(found):
            return number_text(found)
        return None

    def number(self, keys: Iterable[str]) -> int | float | None:
        return to_number(self.value(keys))
