"""Translation file handle tying loading, synchronization, analysis and writing."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Set

from . import analysis, synchronization, writer
from .analysis import EntryReport, FileIssue, PatternLike
from .context import ContextNode
from .document import Document, DocumentEntry
from .exceptions import InvalidStateError
from .loader import Source, load

_LOGGER = logging.getLogger(__name__)


class I18NFile:
    """A translation file being synchronized or analyzed.

    Mutating operations are meant to run in this order, each being optional
    except :meth:`create_entries`::

        i18n_file.load(path)
        i18n_file.delete_founding_comments()
        i18n_file.create_entries(root_context, include_ordinals=True)
        i18n_file.create_deprecation_comments()
        i18n_file.write_to_file(path)

    Every operation other than :meth:`load` raises :class:`InvalidStateError`
    when no document has been loaded.
    """

    def __init__(self) -> None:
        self._document: Optional[Document] = None
        self._matched: Set[DocumentEntry] = set()

    @property
    def document(self) -> Document:
        if self._document is None:
            raise InvalidStateError("Not initialized")
        return self._document

    def load(self, source: Source) -> None:
        self._document = load(source)
        self._matched = set()

    # Generation

    def delete_founding_comments(self) -> None:
        synchronization.delete_founding_comments(self.document)

    def create_entries(self, root_context: ContextNode, include_ordinals: bool = True) -> None:
        self._matched = synchronization.create_entries(self.document, root_context, include_ordinals)
        _LOGGER.info("Synchronized %s key(s)", len(self._matched))

    def create_deprecation_comments(self) -> None:
        added = synchronization.create_deprecation_comments(self.document, self._matched)
        if added:
            _LOGGER.info("%s entry(ies) newly marked as deprecated", added)

    def delete_all_comments(self) -> None:
        synchronization.delete_all_comments(self.document)

    def prepare_for_deployment(self) -> None:
        synchronization.prepare_for_deployment(self.document)

    def write_to_file(self, destination: writer.Destination) -> None:
        writer.write(self.document, destination)

    # Analysis

    def get_file_issues(self) -> List[FileIssue]:
        return list(analysis.get_file_issues(self.document))

    def get_deprecated_entries(
        self,
        include_contexts: Iterable[PatternLike] = (),
        exclude_contexts: Iterable[PatternLike] = (),
    ) -> List[EntryReport]:
        return list(analysis.get_deprecated_entries(self.document, include_contexts, exclude_contexts))

    def get_no_translation_entries(
        self,
        languages: Sequence[str] = (),
        include_contexts: Iterable[PatternLike] = (),
        exclude_contexts: Iterable[PatternLike] = (),
        require_all: bool = False,
    ) -> List[EntryReport]:
        return list(
            analysis.get_no_translation_entries(
                self.document, languages, include_contexts, exclude_contexts, require_all
            )
        )
