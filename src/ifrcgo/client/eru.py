"""ERU (Emergency Response Unit) type resolution.

The ERU endpoints filter on a numeric type id, but agents tend to ask for
"wash" or "logistics". EruTypeMapping turns the upstream type catalogue into
a lower-cased label -> id table and adds heuristic aliases found by matching
patterns against the catalogue labels.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from ifrcgo.foundation.errors import UnknownEruTypeError

# alias -> label patterns, tried in order; the first catalogue entry matching
# the earliest pattern wins. Patterns match on word boundaries rather than as
# plain substrings, so "wash" finds "WASH - Water Supply" but not "WASHkit",
# and "wash" falls back to a "water" label when no WASH entry exists.
ALIASES: dict[str, tuple[str, ...]] = {
    "wash": (r"\bwash\b", r"\bwater\b"),
    "water": (r"\bwater\b", r"\bwash\b"),
    "logistics": (r"\blogistic",),
    "relief": (r"\brelief\b",),
    "telecom": (r"\btelecom", r"\bit\b", r"information technology"),
    "it": (r"\bit\b", r"\btelecom", r"information technology"),
    "health": (r"\bhealth\b", r"\bclinic\b", r"\bhospital\b"),
    "hospital": (r"\bhospital\b",),
    "shelter": (r"\bshelter\b",),
    "basecamp": (r"\bbase ?camp\b",),
    "base camp": (r"\bbase ?camp\b",),
}

_ID_KEYS = ("key", "id")
_LABEL_KEYS = ("label", "name", "value")


def _catalogue_items(catalogue: Any) -> list[Any]:
    if isinstance(catalogue, dict):
        return list(catalogue.get("results") or [])
    if isinstance(catalogue, list):
        return catalogue
    return []


def _entry_id(item: dict[str, Any]) -> int | None:
    for key in _ID_KEYS:
        value = item.get(key)
        if isinstance(value, bool) or value is None:
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            continue
    return None


def _entry_label(item: dict[str, Any]) -> str | None:
    for key in _LABEL_KEYS:
        value = item.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def parse_catalogue(catalogue: Any) -> list[tuple[int, str]]:
    """Extract (id, label) pairs in catalogue order, skipping malformed entries."""
    entries: list[tuple[int, str]] = []
    for item in _catalogue_items(catalogue):
        if not isinstance(item, dict):
            continue
        ident, label = _entry_id(item), _entry_label(item)
        if ident is not None and label is not None:
            entries.append((ident, label))
    return entries


@dataclass(frozen=True, slots=True)
class EruTypeMapping:
    """Lower-cased ERU type labels and aliases mapped to numeric type ids.
    
    Example:
        >>> mapping = EruTypeMapping.from_catalogue([
        ...     {"key": 1, "value": "Basecamp"},
        ...     {"key": 4, "value": "WASH - Water Supply"},
        ... ])
        >>> mapping.resolve("Basecamp"), mapping.resolve("wash")
        (1, 4)
    """
    
    labels: dict[str, int] = field(default_factory=dict)
    aliases: dict[str, int] = field(default_factory=dict)
    
    @classmethod
    def from_catalogue(cls, catalogue: Any) -> EruTypeMapping:
        entries = parse_catalogue(catalogue)
        labels: dict[str, int] = {}
        for ident, label in entries:
            labels.setdefault(label.lower(), ident)
        
        aliases: dict[str, int] = {}
        for alias, patterns in ALIASES.items():
            if alias in labels:
                continue
            match = _first_match(entries, patterns)
            if match is not None:
                aliases[alias] = match
        return cls(labels=labels, aliases=aliases)
    
    def resolve(self, value: str) -> int:
        """Resolve a label or alias (case-insensitive) to its type id."""
        key = value.strip().lower()
        if key in self.labels:
            return self.labels[key]
        if key in self.aliases:
            return self.aliases[key]
        raise UnknownEruTypeError(value, self.keys())
    
    def keys(self) -> list[str]:
        return sorted({*self.labels, *self.aliases})
    
    def __len__(self) -> int:
        return len(self.labels)


def _first_match(entries: list[tuple[int, str]], patterns: tuple[str, ...]) -> int | None:
    for pattern in patterns:
        regex = re.compile(pattern, re.IGNORECASE)
        for ident, label in entries:
            if regex.search(label):
                return ident
    return None
