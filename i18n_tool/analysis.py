"""Read-only queries over a translation document."""

from __future__ import annotations

import re
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Pattern, Sequence, Union

from .const import CONTEXT_ID_ATTR, CONTEXT_TAG, ENTRY_TAG, KEY_TAG, LANG_ATTR, VALUE_TAG
from .document import Document, DocumentContext, DocumentEntry

PatternLike = Union[str, Pattern[str]]


class FileIssue(NamedTuple):
    line: Optional[int]
    message: str
    is_error: bool


class EntryReport(NamedTuple):
    line: Optional[int]
    context: str
    key: Optional[str]


def compile_patterns(patterns: Optional[Iterable[PatternLike]]) -> List[Pattern[str]]:
    if not patterns:
        return []
    return [re.compile(pattern) if isinstance(pattern, str) else pattern for pattern in patterns]


def matches_contexts(
    context: str,
    include_contexts: Sequence[Pattern[str]],
    exclude_contexts: Sequence[Pattern[str]],
) -> bool:
    """Tell whether a context path passes the include and exclude filters.

    No include pattern means everything is included.
    """
    if include_contexts and not any(pattern.search(context) for pattern in include_contexts):
        return False
    return not any(pattern.search(context) for pattern in exclude_contexts)


def _entry_issues(entry: DocumentEntry) -> Iterator[FileIssue]:
    key_elements = entry.key_elements
    if not key_elements:
        yield FileIssue(entry.line, f"'{ENTRY_TAG}' element does not have a '{KEY_TAG}' element", True)
    elif len(key_elements) > 1:
        yield FileIssue(entry.line, f"'{ENTRY_TAG}' element has more than one '{KEY_TAG}' element", True)

    for key_element in key_elements:
        if not key_element.text:
            yield FileIssue(key_element.line, f"'{KEY_TAG}' element is empty", True)

    languages: Dict[str, Optional[int]] = {}
    for value in entry.values:
        language = value.language
        if language is None:
            yield FileIssue(value.line, f"'{VALUE_TAG}' element attribute '{LANG_ATTR}' is missing", True)
        elif not language:
            yield FileIssue(value.line, f"'{VALUE_TAG}' element attribute '{LANG_ATTR}' is empty", True)
        elif language in languages:
            yield FileIssue(
                value.line,
                f"Translation for language '{language}' has already been defined at line {languages[language]}",
                False,
            )
        else:
            languages[language] = value.line

        if not value.text:
            yield FileIssue(value.line, f"'{VALUE_TAG}' element is empty", False)


def _context_issues(context: DocumentContext) -> Iterator[FileIssue]:
    context_id = context.id
    if context_id is None:
        yield FileIssue(context.line, f"'{CONTEXT_TAG}' element attribute '{CONTEXT_ID_ATTR}' is missing", True)
    elif not context_id:
        yield FileIssue(context.line, f"'{CONTEXT_TAG}' element attribute '{CONTEXT_ID_ATTR}' is empty", True)


def get_file_issues(document: Document) -> Iterator[FileIssue]:
    """Report structural problems, depth first, entries before nested contexts."""
    for context, _ in document.root.walk():
        if not context.is_root:
            yield from _context_issues(context)
        for entry in context.entries:
            yield from _entry_issues(entry)


def get_deprecated_entries(
    document: Document,
    include_contexts: Optional[Iterable[PatternLike]] = None,
    exclude_contexts: Optional[Iterable[PatternLike]] = None,
) -> Iterator[EntryReport]:
    includes = compile_patterns(include_contexts)
    excludes = compile_patterns(exclude_contexts)
    for entry, path in document.iter_entries():
        if entry.is_deprecated() and matches_contexts(path, includes, excludes):
            yield EntryReport(entry.line, path, entry.key)


def _lacks_translation(entry: DocumentEntry, languages: Sequence[str], require_all: bool) -> bool:
    if entry.needs_no_translation:
        return False

    omitted = entry.omitted_languages
    present = {value.language for value in entry.values if value.language}

    if not languages:
        return not omitted and not present

    omitted_languages = {language.strip() for language in omitted.split(",")}
    expected = [language for language in languages if language not in omitted_languages]
    if not expected:
        return False
    if require_all:
        return any(language not in present for language in expected)
    return not any(language in present for language in expected)


def get_no_translation_entries(
    document: Document,
    languages: Optional[Sequence[str]] = None,
    include_contexts: Optional[Iterable[PatternLike]] = None,
    exclude_contexts: Optional[Iterable[PatternLike]] = None,
    require_all: bool = False,
) -> Iterator[EntryReport]:
    """Report entries without translation.

    With no ``languages``, an entry is reported when it has no value for any
    language. Otherwise it is reported when none of ``languages`` has a value,
    or, with ``require_all``, when at least one of them has none. Languages
    listed in the key's ``lang`` attribute are not expected.
    """
    languages = list(languages or [])
    includes = compile_patterns(include_contexts)
    excludes = compile_patterns(exclude_contexts)
    for entry, path in document.iter_entries():
        if _lacks_translation(entry, languages, require_all) and matches_contexts(path, includes, excludes):
            yield EntryReport(entry.line, path, entry.key)
