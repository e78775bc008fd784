"""Discovery of translatable strings in Python source files.

A call is translatable when its callee is named ``localize``,
``localize_format`` or one of the extra function names, and its first argument
is a string literal or an f-string::

    localizer.localize("Hello")
    localizer.context("Dialogs.Save").localize(f"Save {name}?")

Chained ``context(...)`` calls place the key in nested contexts; a dotted
context identifier is split into one context per segment.
"""

from __future__ import annotations

import ast
import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Union

from .const import CONTEXT_FUNCTION, CONTEXT_SEPARATOR, DEFAULT_LOCALIZE_FUNCTIONS
from .context import ContextNode
from .escapes import escape
from .exceptions import ScanError

_LOGGER = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def _callee_name(call: ast.Call) -> Optional[str]:
    func = call.func
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return None


def _literal_text(value: ast.expr) -> Optional[str]:
    if isinstance(value, ast.Constant) and isinstance(value.value, str):
        return value.value
    return None


def _format_spec_text(spec: Optional[ast.expr]) -> str:
    if not isinstance(spec, ast.JoinedStr):
        return ""
    return "".join(part.value for part in spec.values if isinstance(part, ast.Constant))


def fstring_to_key(fstring: ast.JoinedStr) -> str:
    """Turn an f-string into a positional format string.

    ``f"{count} files in {folder!r}"`` becomes ``"{0} files in {1!r}"``.
    """
    result: List[str] = []
    placeholder_index = 0
    for part in fstring.values:
        if isinstance(part, ast.Constant):
            result.append(str(part.value).replace("{", "{{").replace("}", "}}"))
        elif isinstance(part, ast.FormattedValue):
            placeholder = str(placeholder_index)
            if part.conversion != -1:
                placeholder += "!" + chr(part.conversion)
            spec = _format_spec_text(part.format_spec)
            if spec:
                placeholder += ":" + spec
            result.append("{" + placeholder + "}")
            placeholder_index += 1
    return "".join(result)


def _context_path(call: ast.Call) -> List[str]:
    """Context segments selected by the ``context(...)`` calls the call is chained on."""
    func = call.func
    if not isinstance(func, ast.Attribute) or not isinstance(func.value, ast.Call):
        return []

    context_call = func.value
    if _callee_name(context_call) != CONTEXT_FUNCTION or len(context_call.args) != 1:
        return []
    context_id = _literal_text(context_call.args[0])
    if context_id is None:
        return []

    path = _context_path(context_call) if isinstance(context_call.func, ast.Attribute) else []
    path.extend(segment.strip() for segment in context_id.split(CONTEXT_SEPARATOR))
    return path


def _locator(path: Path) -> str:
    try:
        return os.path.relpath(path)
    except ValueError:
        # Different drive on Windows.
        return str(path)


def parse_source(source: Union[str, bytes], locator: str, function_names: Iterable[str], root_context: ContextNode) -> int:
    """Add the keys found in ``source`` to ``root_context``. Returns how many were found."""
    try:
        tree = ast.parse(source, filename=locator)
    except (SyntaxError, ValueError) as exc:
        raise ScanError(f"Cannot parse {locator}: {exc}") from exc

    names = set(function_names)
    calls = sorted(
        (
            node
            for node in ast.walk(tree)
            if isinstance(node, ast.Call) and node.args and _callee_name(node) in names
        ),
        key=lambda node: (node.lineno, node.col_offset),
    )

    found = 0
    for node in calls:
        first_argument = node.args[0]
        if isinstance(first_argument, ast.JoinedStr):
            key = fstring_to_key(first_argument)
        else:
            key = _literal_text(first_argument)
            if key is None:
                continue

        context = root_context.get_context(_context_path(node))
        context.add_key(escape(key), locator, node.lineno)
        found += 1
    return found


def parse_file(path: PathLike, extra_function_names: Optional[Sequence[str]], root_context: ContextNode) -> None:
    """Scan one source file, inserting its keys into ``root_context``."""
    source_path = Path(path)
    function_names = list(DEFAULT_LOCALIZE_FUNCTIONS) + list(extra_function_names or [])
    try:
        source = source_path.read_bytes()
    except OSError as exc:
        raise ScanError(f"Cannot read {source_path}: {exc}") from exc
    found = parse_source(source, _locator(source_path), function_names, root_context)
    _LOGGER.debug("%s: %s key(s) found", source_path, found)


def iter_source_files(directory: PathLike, pattern: str, recursive: bool) -> Iterator[Path]:
    """Files of ``directory`` matching ``pattern``, then those of its subdirectories."""
    directory = Path(directory)
    if not directory.is_dir():
        raise ScanError(f"Input directory does not exist: {directory}")
    yield from sorted(path for path in directory.glob(pattern) if path.is_file())
    if recursive:
        for child in sorted(path for path in directory.iterdir() if path.is_dir()):
            yield from iter_source_files(child, pattern, True)


def scan_directories(
    directories: Iterable[PathLike],
    pattern: str,
    recursive: bool,
    extra_function_names: Optional[Sequence[str]] = None,
) -> ContextNode:
    root_context = ContextNode()
    for directory in directories:
        for path in iter_source_files(directory, pattern, recursive):
            parse_file(path, extra_function_names, root_context)
    return root_context
