"""Reading translation files into a :class:`~i18n_tool.document.Document`."""

from __future__ import annotations

import codecs
import logging
import re
from os import PathLike
from pathlib import Path
from typing import BinaryIO, List, Optional, Tuple, Union
from xml.parsers import expat

from .const import CONTEXT_TAG, ENTRY_TAG, KEY_TAG, ROOT_TAG, VALUE_TAG
from .document import (
    Comment,
    Document,
    DocumentContext,
    DocumentEntry,
    ForeignElement,
    KeyElement,
    ValueElement,
)
from .exceptions import ParseError

_LOGGER = logging.getLogger(__name__)

Source = Union[str, "PathLike[str]", bytes, BinaryIO]

_BOMS: Tuple[Tuple[bytes, str], ...] = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def detect_declared_encoding(content: bytes) -> Optional[str]:
    match = re.search(rb"<\?xml[^>]*encoding=['\"]([^'\"]+)['\"]", content[:200], re.IGNORECASE)
    if match:
        return match.group(1).decode("ascii", errors="replace").lower()
    return None


def decode_auto(raw: bytes) -> str:
    """Decode file contents honoring a BOM or the declared encoding."""
    for bom, encoding in _BOMS:
        if raw.startswith(bom):
            return raw[len(bom):].decode(encoding)
    declared = detect_declared_encoding(raw)
    if declared:
        try:
            codecs.lookup(declared)
        except LookupError as exc:
            raise ParseError(f"Unknown encoding '{declared}' declared in XML file") from exc
        return raw.decode(declared)
    return raw.decode("utf-8")


def read_source(source: Source) -> Optional[bytes]:
    """Return the raw contents of ``source``, or ``None`` for a missing file."""
    if isinstance(source, bytes):
        return source
    if isinstance(source, (str, PathLike)):
        path = Path(source)
        if not path.exists():
            return None
        return path.read_bytes()
    return source.read()


_Frame = Union[DocumentContext, DocumentEntry, KeyElement, ValueElement, ForeignElement]


class DocumentBuilder:
    """Expat handler target that builds the document model while keeping comments.

    Method names mirror ``TreeBuilder`` (``start``/``end``/``data``/``comment``/
    ``close``), but every callback also receives the current source line.
    """

    def __init__(self) -> None:
        self.document: Optional[Document] = None
        self._stack: List[_Frame] = []
        self._leading_comments: List[Comment] = []
        # Depth of elements nested inside a Key/Value, whose text is merged.
        self._text_depth = 0

    def start(self, tag: str, attrs: dict, line: int) -> None:
        if not self._stack:
            if tag != ROOT_TAG:
                raise ParseError("Invalid XML root element in existing output file", line)
            root = DocumentContext(attributes=dict(attrs), line=line, is_root=True)
            self.document = Document(root=root, leading_comments=self._leading_comments)
            self._stack.append(root)
            return

        parent = self._stack[-1]
        if isinstance(parent, (KeyElement, ValueElement)):
            self._text_depth += 1
            return

        node: _Frame
        if isinstance(parent, DocumentContext) and tag == ENTRY_TAG:
            node = DocumentEntry(attributes=dict(attrs), line=line)
        elif isinstance(parent, DocumentContext) and tag == CONTEXT_TAG:
            node = DocumentContext(attributes=dict(attrs), line=line)
        elif isinstance(parent, DocumentEntry) and tag == KEY_TAG:
            node = KeyElement(attributes=dict(attrs), line=line)
        elif isinstance(parent, DocumentEntry) and tag == VALUE_TAG:
            node = ValueElement(attributes=dict(attrs), line=line)
        else:
            node = ForeignElement(tag=tag, attributes=dict(attrs), line=line)
        parent.nodes.append(node)
        self._stack.append(node)

    def end(self, tag: str) -> None:
        if self._text_depth:
            self._text_depth -= 1
            return
        self._stack.pop()

    def data(self, text: str, line: int) -> None:
        if not self._stack:
            return
        current = self._stack[-1]
        if isinstance(current, (KeyElement, ValueElement)):
            current.text += text
        elif isinstance(current, ForeignElement):
            if current.nodes and isinstance(current.nodes[-1], str):
                current.nodes[-1] += text
            else:
                current.nodes.append(text)
        elif text.strip():
            _LOGGER.warning("Line %s: ignoring text outside of any key or value: %r", line, text.strip())

    def comment(self, text: str, line: int) -> None:
        if not self._stack:
            if self.document is None:
                self._leading_comments.append(Comment(text, line=line))
            else:
                self.document.trailing_comments.append(Comment(text, line=line))
            return
        current = self._stack[-1]
        if isinstance(current, (KeyElement, ValueElement)):
            _LOGGER.debug("Line %s: ignoring comment inside '%s' element", line, current.tag)
            return
        container: Union[DocumentContext, DocumentEntry, ForeignElement] = current
        container.nodes.append(Comment(text, line=line))

    def close(self) -> Document:
        if self.document is None:
            raise ParseError("Invalid XML format in existing output file: no root element")
        return self.document


def parse_document(content: str) -> Document:
    """Parse XML text into a document."""
    parser = expat.ParserCreate()
    parser.buffer_text = True
    builder = DocumentBuilder()

    parser.StartElementHandler = lambda tag, attrs: builder.start(tag, attrs, parser.CurrentLineNumber)
    parser.EndElementHandler = builder.end
    parser.CharacterDataHandler = lambda text: builder.data(text, parser.CurrentLineNumber)
    parser.CommentHandler = lambda text: builder.comment(text, parser.CurrentLineNumber)

    try:
        parser.Parse(content, True)
    except expat.ExpatError as exc:
        raise ParseError(
            f"Invalid XML format in existing output file: {expat.ErrorString(exc.code)}",
            exc.lineno,
        ) from exc
    return builder.close()


def load(source: Source) -> Document:
    """Load a translation file.

    A missing, empty or whitespace-only source gives an empty document.
    """
    raw = read_source(source)
    if raw is None:
        _LOGGER.info("Translation file %s does not exist, starting from scratch", source)
        return Document()

    try:
        content = decode_auto(raw)
    except UnicodeDecodeError as exc:
        raise ParseError(f"Invalid XML format in existing output file: {exc}") from exc

    if not content.strip():
        _LOGGER.info("Translation file is blank, starting from scratch")
        return Document()

    return parse_document(content)
