"""Merging of discovered keys into a translation document.

All functions mutate the document in place. Comments that are neither
founding comments nor deprecation markers are never touched, except by
:func:`delete_all_comments` and :func:`prepare_for_deployment`.
"""

from __future__ import annotations

import logging
from typing import List, Set, Union

from .const import DEPRECATED_COMMENT, LANG_ATTR
from .context import ContextNode
from .document import (
    Comment,
    CommentKind,
    Document,
    DocumentContext,
    DocumentEntry,
    ForeignElement,
    KeyElement,
    render_founding_comment,
)

_LOGGER = logging.getLogger(__name__)

_Container = Union[DocumentContext, DocumentEntry, ForeignElement]


def _containers(container: _Container):
    for node in container.nodes:
        if isinstance(node, (DocumentContext, DocumentEntry, ForeignElement)):
            yield node


def delete_founding_comments(document: Document) -> int:
    """Remove the founding comments of every entry. Returns how many were removed."""
    removed = 0
    for entry, _ in document.iter_entries():
        kept = [
            node
            for node in entry.nodes
            if not (isinstance(node, Comment) and node.kind is CommentKind.FOUNDING)
        ]
        removed += len(entry.nodes) - len(kept)
        entry.nodes = kept
    _LOGGER.debug("Deleted %s founding comment(s)", removed)
    return removed


def _insert_entry(container: DocumentContext, entry: DocumentEntry) -> None:
    """Place a new entry right after the last existing one, or first if none."""
    last_index = -1
    for index, node in enumerate(container.nodes):
        if isinstance(node, DocumentEntry):
            last_index = index
    container.nodes.insert(last_index + 1, entry)


def _insert_founding_comment(entry: DocumentEntry, text: str) -> None:
    index = next(
        (index for index, node in enumerate(entry.nodes) if isinstance(node, KeyElement)),
        len(entry.nodes),
    )
    entry.nodes.insert(index, Comment(text))


def _merge_context(
    container: DocumentContext,
    context: ContextNode,
    include_ordinals: bool,
    matched: Set[DocumentEntry],
) -> None:
    for key, key_matches in context.key_matches.items():
        entry = container.find_entry(key)
        if entry is None:
            entry = DocumentEntry.create(key)
            _insert_entry(container, entry)
            _LOGGER.debug("New entry for key %r", key)
        matched.add(entry)

        for key_match in key_matches:
            text = render_founding_comment(key_match, include_ordinals)
            if not entry.has_comment(text):
                _insert_founding_comment(entry, text)

    for context_id, nested in context.nested_contexts.items():
        child = container.find_child(context_id)
        if child is None:
            child = DocumentContext.create(context_id)
            container.nodes.append(child)
            _LOGGER.debug("New context %r", context_id)
        _merge_context(child, nested, include_ordinals, matched)


def create_entries(document: Document, root_context: ContextNode, include_ordinals: bool) -> Set[DocumentEntry]:
    """Create or update the entries for every discovered key.

    Returns the entries matched by the discovered keys, new ones included.
    """
    matched: Set[DocumentEntry] = set()
    _merge_context(document.root, root_context, include_ordinals, matched)
    return matched


def create_deprecation_comments(document: Document, matched: Set[DocumentEntry]) -> int:
    """Mark every keyed entry not in ``matched`` as deprecated.

    Entries in ``matched`` lose a deprecation marker left by a previous run.
    Returns the number of markers added.
    """
    added = 0
    for entry, _ in document.iter_entries():
        if entry in matched:
            entry.nodes = [
                node
                for node in entry.nodes
                if not (isinstance(node, Comment) and node.kind is CommentKind.DEPRECATION)
            ]
        elif entry.key is not None and not entry.is_deprecated():
            entry.nodes.insert(0, Comment(DEPRECATED_COMMENT))
            added += 1
    _LOGGER.debug("Marked %s entry(ies) as deprecated", added)
    return added


def _delete_comments(container: _Container) -> None:
    container.nodes = [node for node in container.nodes if not isinstance(node, Comment)]
    for child in _containers(container):
        _delete_comments(child)


def delete_all_comments(document: Document) -> None:
    document.leading_comments.clear()
    document.trailing_comments.clear()
    _delete_comments(document.root)


def _prepare_context(context: DocumentContext) -> None:
    kept: List = []
    for node in context.nodes:
        if isinstance(node, Comment):
            continue
        if isinstance(node, DocumentEntry):
            if not node.values:
                continue
            key_element = node.key_element
            if key_element is not None:
                key_element.attributes.pop(LANG_ATTR, None)
            _delete_comments(node)
        elif isinstance(node, DocumentContext):
            _prepare_context(node)
            if not node.nodes:
                continue
        elif isinstance(node, ForeignElement):
            _delete_comments(node)
        kept.append(node)
    context.nodes = kept


def prepare_for_deployment(document: Document) -> None:
    """Strip everything a runtime does not need from the document.

    Comments go, entries without any value go, the omitted-languages
    attribute of keys goes, and contexts left without children go.
    """
    document.leading_comments.clear()
    document.trailing_comments.clear()
    _prepare_context(document.root)
