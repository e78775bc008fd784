"""Serialization of a :class:`~i18n_tool.document.Document` back to XML."""

from __future__ import annotations

import os
from os import PathLike
from pathlib import Path
from typing import BinaryIO, Dict, List, Union

from .const import INDENT, OUTPUT_ENCODING, XML_DECLARATION
from .document import (
    Comment,
    Document,
    DocumentContext,
    DocumentEntry,
    ForeignElement,
    KeyElement,
    ValueElement,
)

Destination = Union[str, "PathLike[str]", BinaryIO]

# A raw CR would be normalized to LF when the file is read back.
_TEXT_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;", "\r": "&#xD;"}
_ATTR_ESCAPES = dict(_TEXT_ESCAPES, **{'"': "&quot;", "\n": "&#xA;", "\t": "&#x9;"})


def escape_text(text: str) -> str:
    return "".join(_TEXT_ESCAPES.get(char, char) for char in text)


def escape_attribute(value: str) -> str:
    return "".join(_ATTR_ESCAPES.get(char, char) for char in value)


def _start_tag(tag: str, attributes: Dict[str, str]) -> str:
    rendered = "".join(f' {name}="{escape_attribute(value)}"' for name, value in attributes.items())
    return f"<{tag}{rendered}"


def _write_leaf(element: Union[KeyElement, ValueElement], level: int, lines: List[str]) -> None:
    indent = INDENT * level
    start = _start_tag(element.tag, element.attributes)
    if element.text:
        lines.append(f"{indent}{start}>{escape_text(element.text)}</{element.tag}>")
    else:
        lines.append(f"{indent}{start} />")


def _inline(node: Union[ForeignElement, Comment, str]) -> str:
    if isinstance(node, str):
        return escape_text(node)
    if isinstance(node, Comment):
        return f"<!--{node.text}-->"
    start = _start_tag(node.tag, node.attributes)
    if not node.nodes:
        return f"{start} />"
    return f"{start}>{''.join(_inline(child) for child in node.nodes)}</{node.tag}>"


def _write_foreign(element: ForeignElement, level: int, lines: List[str]) -> None:
    """Write an unknown element.

    Mixed content goes on one line exactly as read. Otherwise the children are
    indented like those of any other element.
    """
    indent = INDENT * level
    children = [node for node in element.nodes if not isinstance(node, str)]
    if element.has_mixed_content():
        lines.append(f"{indent}{_inline(element)}")
        return
    start = _start_tag(element.tag, element.attributes)
    if not children:
        lines.append(f"{indent}{start} />")
        return
    lines.append(f"{indent}{start}>")
    for node in children:
        _write_node(node, level + 1, lines)
    lines.append(f"{indent}</{element.tag}>")


def _write_container(element: Union[DocumentContext, DocumentEntry], level: int, lines: List[str]) -> None:
    indent = INDENT * level
    start = _start_tag(element.tag, element.attributes)
    if not element.nodes:
        lines.append(f"{indent}{start} />")
        return
    lines.append(f"{indent}{start}>")
    for node in element.nodes:
        _write_node(node, level + 1, lines)
    lines.append(f"{indent}</{element.tag}>")


def _write_node(node, level: int, lines: List[str]) -> None:
    if isinstance(node, Comment):
        lines.append(f"{INDENT * level}<!--{node.text}-->")
    elif isinstance(node, (KeyElement, ValueElement)):
        _write_leaf(node, level, lines)
    elif isinstance(node, ForeignElement):
        _write_foreign(node, level, lines)
    else:
        _write_container(node, level, lines)


def serialize(document: Document) -> str:
    """Render ``document`` as indented XML text with an encoding declaration."""
    lines = [XML_DECLARATION]
    lines.extend(f"<!--{comment.text}-->" for comment in document.leading_comments)
    _write_container(document.root, 0, lines)
    lines.extend(f"<!--{comment.text}-->" for comment in document.trailing_comments)
    return "\n".join(lines)


def atomic_write(data: bytes, output: Path) -> None:
    """Replace ``output`` through a temporary sibling, never leaving it half written."""
    temp_path = output.with_name(output.name + ".tmp")
    try:
        with temp_path.open("wb") as fp:
            fp.write(data)
            fp.flush()
            os.fsync(fp.fileno())
        os.replace(temp_path, output)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise


def write(document: Document, destination: Destination) -> None:
    data = serialize(document).encode(OUTPUT_ENCODING)
    if isinstance(destination, (str, PathLike)):
        atomic_write(data, Path(destination))
    else:
        destination.write(data)
