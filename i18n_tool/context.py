"""Tree of translatable keys discovered while scanning source code."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List


@dataclass(frozen=True)
class KeyMatch:
    """One occurrence of a key in source code."""

    locator: str
    ordinal: int

    def __str__(self) -> str:
        return f"{self.locator} @ {self.ordinal}"


@dataclass
class ContextNode:
    """Keys found under one context path, plus the nested context paths.

    Both mappings keep insertion order, which is the order of discovery.
    """

    key_matches: Dict[str, List[KeyMatch]] = field(default_factory=dict)
    nested_contexts: Dict[str, "ContextNode"] = field(default_factory=dict)

    def add_key(self, key: str, locator: str, ordinal: int) -> None:
        self.key_matches.setdefault(key, []).append(KeyMatch(locator, ordinal))

    def get_context(self, path: Iterable[str]) -> "ContextNode":
        """Return the node at ``path`` below this one, creating missing nodes."""
        node = self
        for segment in path:
            child = node.nested_contexts.get(segment)
            if child is None:
                child = ContextNode()
                node.nested_contexts[segment] = child
            node = child
        return node

    def count_keys(self) -> int:
        return len(self.key_matches) + sum(
            child.count_keys() for child in self.nested_contexts.values()
        )
