"""Translation file toolchain: source scanning, file synchronization and lookup."""

from .analysis import EntryReport, FileIssue
from .context import ContextNode, KeyMatch
from .document import Comment, CommentKind, Document, DocumentContext, DocumentEntry
from .exceptions import I18NToolError, InvalidStateError, ParseError, ScanError
from .i18n_file import I18NFile
from .loader import load
from .localizer import Localizer, get_localizer, localize, localize_all, localize_format, set_localizer
from .writer import serialize, write

__version__ = "1.0.0"

__all__ = [
    "Comment",
    "CommentKind",
    "ContextNode",
    "Document",
    "DocumentContext",
    "DocumentEntry",
    "EntryReport",
    "FileIssue",
    "I18NFile",
    "I18NToolError",
    "InvalidStateError",
    "KeyMatch",
    "Localizer",
    "ParseError",
    "ScanError",
    "get_localizer",
    "load",
    "localize",
    "localize_all",
    "localize_format",
    "serialize",
    "set_localizer",
    "write",
]
