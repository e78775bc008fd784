"""In-memory model of a translation file.

Each container keeps a single ordered ``nodes`` list so that comments, entries
and contexts are written back in the order they were read. The typed views
(``entries``, ``children``, ``comments`` ...) are computed from that list.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .const import (
    ALL_LANGUAGES,
    CONTEXT_ID_ATTR,
    CONTEXT_TAG,
    DEPRECATED_COMMENT,
    ENTRY_TAG,
    FOUNDING_HEADING,
    KEY_TAG,
    LANG_ATTR,
    ROOT_TAG,
    VALUE_TAG,
)
from .context import KeyMatch

FOUNDING_RE = re.compile(
    "^" + re.escape(FOUNDING_HEADING) + r" (?P<locator>.*?) (?:@ (?P<ordinal>\d+) )?$",
    re.DOTALL,
)


class CommentKind(Enum):
    FOUNDING = "founding"
    DEPRECATION = "deprecation"
    OTHER = "other"


def classify_comment(text: str) -> CommentKind:
    if text == DEPRECATED_COMMENT:
        return CommentKind.DEPRECATION
    if text.startswith(FOUNDING_HEADING):
        return CommentKind.FOUNDING
    return CommentKind.OTHER


def render_founding_comment(match: KeyMatch, include_ordinal: bool) -> str:
    text = f"{FOUNDING_HEADING} {match.locator} "
    if include_ordinal:
        text += f"@ {match.ordinal} "
    return text


@dataclass
class Comment:
    """A comment node; its kind is decided once from its text."""

    text: str
    line: Optional[int] = None
    kind: CommentKind = field(init=False)

    def __post_init__(self) -> None:
        self.kind = classify_comment(self.text)

    @property
    def provenance(self) -> Optional[KeyMatch]:
        """Locator and ordinal of a founding comment, when it can be parsed.

        Comments written without ordinal report ordinal ``0``.
        """
        if self.kind is not CommentKind.FOUNDING:
            return None
        match = FOUNDING_RE.match(self.text)
        if match is None:
            return None
        ordinal = match.group("ordinal")
        return KeyMatch(match.group("locator"), int(ordinal) if ordinal else 0)


@dataclass
class ForeignElement:
    """Element the format does not define, preserved as-is.

    ``nodes`` holds child elements, comments and text runs (plain ``str``)
    in document order.
    """

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    nodes: List[Union["Node", str]] = field(default_factory=list)
    line: Optional[int] = None

    @property
    def text(self) -> str:
        return "".join(node for node in self.nodes if isinstance(node, str))

    def has_mixed_content(self) -> bool:
        """Tell whether non-whitespace text sits among the children."""
        return any(isinstance(node, str) and node.strip() for node in self.nodes)


@dataclass
class KeyElement:
    text: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    line: Optional[int] = None

    tag = KEY_TAG


@dataclass
class ValueElement:
    text: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    line: Optional[int] = None

    tag = VALUE_TAG

    @property
    def language(self) -> Optional[str]:
        return self.attributes.get(LANG_ATTR)


@dataclass(eq=False)
class DocumentEntry:
    attributes: Dict[str, str] = field(default_factory=dict)
    nodes: List["Node"] = field(default_factory=list)
    line: Optional[int] = None

    tag = ENTRY_TAG

    @classmethod
    def create(cls, key: str) -> "DocumentEntry":
        return cls(nodes=[KeyElement(text=key)])

    @property
    def key_elements(self) -> List[KeyElement]:
        return [node for node in self.nodes if isinstance(node, KeyElement)]

    @property
    def key_element(self) -> Optional[KeyElement]:
        return next((node for node in self.nodes if isinstance(node, KeyElement)), None)

    @property
    def key(self) -> Optional[str]:
        """Text of the first key element, ``None`` when the entry has no key."""
        element = self.key_element
        return element.text if element is not None else None

    @property
    def values(self) -> List[ValueElement]:
        return [node for node in self.nodes if isinstance(node, ValueElement)]

    @property
    def comments(self) -> List[Comment]:
        return [node for node in self.nodes if isinstance(node, Comment)]

    @property
    def omitted_languages(self) -> str:
        """Raw languages a translator marked as not needing a translation."""
        element = self.key_element
        if element is None:
            return ""
        return element.attributes.get(LANG_ATTR, "").strip()

    @property
    def needs_no_translation(self) -> bool:
        return self.omitted_languages == ALL_LANGUAGES

    def has_comment(self, text: str) -> bool:
        return any(comment.text == text for comment in self.comments)

    def is_deprecated(self) -> bool:
        return any(comment.kind is CommentKind.DEPRECATION for comment in self.comments)


@dataclass(eq=False)
class DocumentContext:
    """A ``Context`` element, or the document root when ``is_root`` is set."""

    attributes: Dict[str, str] = field(default_factory=dict)
    nodes: List["Node"] = field(default_factory=list)
    line: Optional[int] = None
    is_root: bool = False

    @property
    def tag(self) -> str:
        return ROOT_TAG if self.is_root else CONTEXT_TAG

    @classmethod
    def create(cls, context_id: str) -> "DocumentContext":
        return cls(attributes={CONTEXT_ID_ATTR: context_id})

    @property
    def id(self) -> Optional[str]:
        if self.is_root:
            return None
        return self.attributes.get(CONTEXT_ID_ATTR)

    @property
    def entries(self) -> List[DocumentEntry]:
        return [node for node in self.nodes if isinstance(node, DocumentEntry)]

    @property
    def children(self) -> List["DocumentContext"]:
        return [node for node in self.nodes if isinstance(node, DocumentContext)]

    @property
    def comments(self) -> List[Comment]:
        return [node for node in self.nodes if isinstance(node, Comment)]

    def find_entry(self, key: str) -> Optional[DocumentEntry]:
        return next((entry for entry in self.entries if entry.key == key), None)

    def find_child(self, context_id: str) -> Optional["DocumentContext"]:
        return next((child for child in self.children if child.id == context_id), None)

    def walk(self, path: str = "/") -> Iterator[Tuple["DocumentContext", str]]:
        """Yield this context and every nested one, depth first, with its path.

        Paths are ``/``-delimited and end with ``/``; the root is ``/``.
        A context without identifier contributes an empty segment.
        """
        yield self, path
        for child in self.children:
            yield from child.walk(f"{path}{child.id or ''}/")


Node = Union[Comment, ForeignElement, KeyElement, ValueElement, DocumentEntry, DocumentContext]


@dataclass
class Document:
    """A translation file: the root context plus the comments around it."""

    root: DocumentContext = field(default_factory=lambda: DocumentContext(is_root=True))
    leading_comments: List[Comment] = field(default_factory=list)
    trailing_comments: List[Comment] = field(default_factory=list)

    def iter_entries(self) -> Iterator[Tuple[DocumentEntry, str]]:
        """Yield every entry with its context path.

        Within a context the entries come before the nested contexts.
        """
        for context, path in self.root.walk():
            for entry in context.entries:
                yield entry, path
