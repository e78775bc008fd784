"""Runtime lookup of translated strings from a deployed translation file."""

from __future__ import annotations

import locale
import logging
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .const import CONTEXT_SEPARATOR, CONTEXT_TAG, ENTRY_TAG, KEY_TAG, LANG_ATTR, VALUE_TAG
from .document import Comment, DocumentContext, DocumentEntry, KeyElement, ValueElement
from .escapes import unescape
from .exceptions import ParseError
from .loader import Source, load

_LOGGER = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True)
class Language:
    """A language designator and its primary subtag (``es-ES`` -> ``es``)."""

    full: str
    primary: Optional[str]

    @classmethod
    def parse(cls, designator: str) -> "Language":
        full = designator.strip().lower().replace("_", "-")
        primary, separator, _ = full.partition("-")
        return cls(full, primary if separator else None)


def current_language() -> str:
    language, _ = locale.getlocale()
    return language or DEFAULT_LANGUAGE


class Localizer:
    """Translations for one context, falling back to the enclosing context.

    Texts without translation anywhere up the context chain are returned
    unchanged.
    """

    def __init__(self, parent: Optional["Localizer"] = None) -> None:
        self._parent = parent
        self._localizations: Dict[str, str] = {}
        self._nested: Dict[str, "Localizer"] = {}

    def localize(self, text: str) -> str:
        localizer: Optional[Localizer] = self
        while localizer is not None:
            localized = localizer._localizations.get(text)
            if localized is not None:
                return localized
            localizer = localizer._parent
        return text

    def localize_format(self, format_string: str, *args: Any, **kwargs: Any) -> str:
        return self.localize(format_string).format(*args, **kwargs)

    def localize_all(self, texts: Iterable[str]) -> List[str]:
        return [self.localize(text) for text in texts]

    def context(self, context_id: Union[str, Iterable[str]]) -> "Localizer":
        """Localizer of a nested context; ``"A.B"`` is the same as ``["A", "B"]``."""
        segments = context_id.split(CONTEXT_SEPARATOR) if isinstance(context_id, str) else context_id
        localizer = self
        for segment in segments:
            segment = segment.strip()
            nested = localizer._nested.get(segment)
            if nested is None:
                nested = Localizer(localizer)
                localizer._nested[segment] = nested
            localizer = nested
        return localizer

    def clear(self) -> None:
        self._localizations.clear()
        for nested in self._nested.values():
            nested.clear()

    def load_xml(self, source: Source, language: Optional[str] = None, merge: bool = True) -> None:
        """Load the translations for ``language`` from a translation file.

        Without ``language`` the language of the current locale is used.
        Unlike the synchronization tool, any malformed content is an error.
        """
        if isinstance(source, (str, PathLike)) and not Path(source).exists():
            raise FileNotFoundError(f"Translation file not found: {source}")

        document = load(source)
        if document.root.line is None:
            raise ParseError("XML has no root element")

        if not merge:
            self.clear()

        target = Language.parse(language or current_language())
        _LOGGER.debug("Loading translations for language %s", target.full)
        self._load_context(document.root, target)

    def _load_context(self, element: DocumentContext, language: Language) -> None:
        for node in element.nodes:
            if isinstance(node, Comment):
                continue
            if isinstance(node, DocumentEntry):
                self._load_entry(node, language)
            elif isinstance(node, DocumentContext):
                context_id = node.id
                if context_id is None:
                    raise ParseError(f"Missing attribute 'id' in '{CONTEXT_TAG}' XML element", node.line)
                self.context(context_id)._load_context(node, language)
            else:
                raise ParseError("Invalid XML element", getattr(node, "line", None))

    def _load_entry(self, entry: DocumentEntry, language: Language) -> None:
        key: Optional[str] = None
        value_full: Optional[str] = None
        value_primary: Optional[str] = None

        for node in entry.nodes:
            if isinstance(node, Comment):
                continue
            if isinstance(node, KeyElement):
                if key is not None:
                    raise ParseError(f"Too many child '{KEY_TAG}' XML elements", node.line)
                key = unescape(node.text)
            elif isinstance(node, ValueElement):
                designator = node.language
                if designator is None:
                    raise ParseError(f"Missing attribute '{LANG_ATTR}' in '{VALUE_TAG}' XML element", node.line)
                designator = designator.lower()
                if designator == language.full:
                    if value_full is not None:
                        raise ParseError(
                            f"Too many child '{VALUE_TAG}' XML elements with the same '{LANG_ATTR}' attribute",
                            node.line,
                        )
                    value_full = unescape(node.text)
                elif designator == language.primary:
                    if value_primary is not None:
                        raise ParseError(
                            f"Too many child '{VALUE_TAG}' XML elements with the same '{LANG_ATTR}' attribute",
                            node.line,
                        )
                    value_primary = unescape(node.text)
            else:
                raise ParseError("Invalid XML element", getattr(node, "line", None))

        if key is None:
            raise ParseError(f"Missing child '{KEY_TAG}' XML element in '{ENTRY_TAG}'", entry.line)

        value = value_full if value_full is not None else value_primary
        if value is not None:
            self._localizations[key] = value


# Process-wide localizer used by the module-level functions below, so that
# application code can call ``localize("...")`` directly.
_default_localizer: Optional[Localizer] = None


def get_localizer() -> Localizer:
    global _default_localizer
    if _default_localizer is None:
        _default_localizer = Localizer()
    return _default_localizer


def set_localizer(localizer: Optional[Localizer]) -> None:
    """Replace the process-wide localizer; ``None`` starts over with an empty one."""
    global _default_localizer
    _default_localizer = localizer


def load_xml(source: Source, language: Optional[str] = None, merge: bool = True) -> None:
    get_localizer().load_xml(source, language, merge)


def localize(text: str) -> str:
    return get_localizer().localize(text)


def localize_format(format_string: str, *args: Any, **kwargs: Any) -> str:
    return get_localizer().localize_format(format_string, *args, **kwargs)


def localize_all(texts: Iterable[str]) -> List[str]:
    return get_localizer().localize_all(texts)


def context(context_id: Union[str, Iterable[str]]) -> Localizer:
    return get_localizer().context(context_id)
