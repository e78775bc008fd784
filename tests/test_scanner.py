from __future__ import annotations

import ast
import textwrap

import pytest

from i18n_tool.context import ContextNode, KeyMatch
from i18n_tool.exceptions import ScanError
from i18n_tool.scanner import fstring_to_key, iter_source_files, parse_file, parse_source, scan_directories

FUNCTIONS = ("localize", "localize_format")


def _scan(source: str, functions=FUNCTIONS) -> ContextNode:
    root = ContextNode()
    parse_source(textwrap.dedent(source), "main.py", functions, root)
    return root


def test_literal_keys_in_discovery_order():
    root = _scan(
        """\
        print(localize("Hello"))
        title = tr.localize("Goodbye")
        text = localize("Hello")
        """
    )

    assert list(root.key_matches) == ["Hello", "Goodbye"]
    assert root.key_matches["Hello"] == [KeyMatch("main.py", 1), KeyMatch("main.py", 3)]


def test_non_literal_arguments_are_skipped():
    root = _scan(
        """\
        localize(message)
        localize()
        localize(42)
        """
    )

    assert root.key_matches == {}


def test_chained_contexts_build_nested_nodes():
    root = _scan(
        """\
        tr.context("Dialogs").localize("Save")
        tr.context("Dialogs.Open").localize("Open")
        tr.context("Menu").context("File").localize_format("Quit {0}", name)
        """
    )

    dialogs = root.nested_contexts["Dialogs"]
    assert list(dialogs.key_matches) == ["Save"]
    assert list(dialogs.nested_contexts["Open"].key_matches) == ["Open"]
    assert list(root.nested_contexts["Menu"].nested_contexts["File"].key_matches) == ["Quit {0}"]
    assert root.key_matches == {}


def test_fstring_becomes_positional_format():
    call = ast.parse('localize(f"{count:>3} files in {folder!r} {{literal}}")').body[0].value

    assert fstring_to_key(call.args[0]) == "{0:>3} files in {1!r} {{literal}}"


def test_control_characters_are_escaped_in_keys():
    root = _scan('localize("Line\\nBreak")\n')

    assert list(root.key_matches) == [r"Line\nBreak"]


def test_extra_function_names():
    root = _scan('_("Extra")\nlocalize("Default")\n', FUNCTIONS + ("_",))

    assert list(root.key_matches) == ["Extra", "Default"]


def test_syntax_error():
    with pytest.raises(ScanError, match="Cannot parse main.py"):
        _scan("localize(\n")


def test_parse_file_uses_relative_locator(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "module.py").write_text('gettext("Found")\n', encoding="utf-8")
    root = ContextNode()

    parse_file(tmp_path / "module.py", ["gettext"], root)

    assert root.key_matches == {"Found": [KeyMatch("module.py", 1)]}


def test_iter_source_files(tmp_path):
    (tmp_path / "b.py").write_text("", encoding="utf-8")
    (tmp_path / "a.py").write_text("", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("", encoding="utf-8")
    (tmp_path / "pkg").mkdir()
    (tmp_path / "pkg" / "c.py").write_text("", encoding="utf-8")

    assert [path.name for path in iter_source_files(tmp_path, "*.py", False)] == ["a.py", "b.py"]
    assert [path.name for path in iter_source_files(tmp_path, "*.py", True)] == ["a.py", "b.py", "c.py"]


def test_missing_directory(tmp_path):
    with pytest.raises(ScanError, match="does not exist"):
        list(iter_source_files(tmp_path / "missing", "*.py", False))


def test_scan_directories(tmp_path):
    (tmp_path / "one.py").write_text('localize("A")\n', encoding="utf-8")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "two.py").write_text('tr.context("X").localize("B")\n', encoding="utf-8")

    root = scan_directories([tmp_path], "*.py", recursive=True)

    assert list(root.key_matches) == ["A"]
    assert list(root.nested_contexts["X"].key_matches) == ["B"]
    assert root.count_keys() == 2


def test_control_characters_outside_the_short_escapes():
    root = _scan('localize("bell\\x07here")\n')

    assert list(root.key_matches) == [r"bell\u0007here"]
