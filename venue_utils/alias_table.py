import json
from collections import defaultdict
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from venue_utils.text_normalization import normalize_venue_key
from venue_utils.venue_aliases import DEFAULT_VENUE_ALIASES

# Substring matches only consider keys longer than this
MIN_SUBSTRING_ALIAS_LENGTH = 3


class AliasTable:
    """
    Read-only mapping from venue name variants to canonical display names.

    Lookup first tries an exact match on the normalized key, then the longest
    alias key contained in it. Every canonical name is also a key for itself,
    so looking up a canonical name returns it unchanged.
    """

    def __init__(self, aliases: Mapping[str, str], min_substring_length: int = MIN_SUBSTRING_ALIAS_LENGTH):
        table: Dict[str, str] = {}
        for variant, canonical in aliases.items():
            key = normalize_venue_key(variant)
            if not key or not canonical:
                continue
            if key in table and table[key] != canonical:
                raise ValueError(
                    f"Alias '{variant}' maps to both '{table[key]}' and '{canonical}'"
                )
            table[key] = canonical

        for canonical in sorted(set(table.values())):
            key = normalize_venue_key(canonical)
            if key:
                table.setdefault(key, canonical)

        self._aliases = MappingProxyType(table)
        self.min_substring_length = min_substring_length
        # Most specific key first; equal lengths fall back to key order
        self._substring_keys = sorted(
            (key for key in table if len(key) > min_substring_length),
            key=lambda key: (-len(key), key),
        )

    @classmethod
    def default(cls) -> "AliasTable":
        return cls(DEFAULT_VENUE_ALIASES)

    @classmethod
    def from_json(cls, path: str) -> "AliasTable":
        """Load a {variant: canonical} JSON object."""
        with open(path, "r", encoding="utf-8") as f:
            aliases = json.load(f)
        if not isinstance(aliases, dict):
            raise ValueError(f"Alias file {path} must contain a JSON object")
        return cls(aliases)

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    def __len__(self):
        return len(self._aliases)

    def __contains__(self, variant):
        return normalize_venue_key(variant) in self._aliases

    def lookup(self, venue: str) -> Optional[str]:
        key = normalize_venue_key(venue)
        if not key:
            return None

        canonical = self._aliases.get(key)
        if canonical is not None:
            return canonical

        for alias in self._substring_keys:
            if alias in key:
                return self._aliases[alias]
        return None

    def canonical_names(self) -> List[str]:
        return sorted(set(self._aliases.values()))

    def variations_by_canonical(self) -> Dict[str, List[str]]:
        grouped = defaultdict(list)
        for key, canonical in self._aliases.items():
            grouped[canonical].append(key)
        return {canonical: sorted(keys) for canonical, keys in sorted(grouped.items())}
