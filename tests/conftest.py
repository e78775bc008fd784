from __future__ import annotations

from pathlib import Path

import pytest

from i18n_tool.context import ContextNode, KeyMatch

EXISTING_CONTENTS = "\n".join(
    [
        "<I18N>",
        "  <Entry>",
        "    <!-- Found in: Match 1 @ 1 -->",
        "    <!-- Found in: Match 1 @ 11 -->",
        "    <Key>Key 1</Key>",
        "    <Value lang='de'>Schlüssel 1</Value>",
        "    <Value lang='fr'>Clef 1</Value>",
        "  </Entry>",
        "  <Entry>",
        "    <Key>Key 2</Key>",
        "    <!-- Non-Erasable Comment -->",
        "    <Value lang='es'>Clave 2</Value>",
        "    <Value lang='fr'>Clef 2</Value>",
        "  </Entry>",
        '  <Context id="Context 1">',
        "    <!-- Non-Erasable Comment -->",
        "    <Entry>",
        "      <!-- Found in: Match 3 @ 33 -->",
        "      <!-- Found in: Match 3 @ 1 -->",
        '      <Key lang="es,it">Key 3</Key>',
        "    </Entry>",
        '    <Context id="Context 10">',
        "      <Entry>",
        "        <!-- DEPRECATED -->",
        "        <Key>Key 5</Key>",
        "      </Entry>",
        "    </Context>",
        '    <Context id="Context 11">',
        "      <Entry>",
        "        <!-- Found in: Match 9 @ 99 -->",
        '        <Key lang="ca">Key 9</Key>',
        "        <Value lang='es'>Clave 9</Value>",
        "      </Entry>",
        "    </Context>",
        "  </Context>",
        "  <Entry>",
        "    <!-- DEPRECATED -->",
        "    <Key>Key 6</Key>",
        "  </Entry>",
        "</I18N>",
    ]
)

MALFORMED_CONTENTS = "\n".join(
    [
        "<I18N>",
        "  <Entry>",
        "    <!-- Found in: Match 1 @ 1 -->",
        "    <!-- Found in: Match 1 @ 11 -->",
        "    <Key>Key 1</Key>",
        "  </Entry>",
        "  <Entry>",
        '    <Key lang="*">Key 2</Key>',
        "    <!-- Non-Erasable Comment -->",
        "  </Entry>",
        '  <Context id="Context 1">',
        "    <!-- Non-Erasable Comment -->",
        "    <Entry>",
        "      <!-- Found in: Match 3 @ 33 -->",
        "      <!-- Found in: Match 3 @ 1 -->",
        "      <Key>Key 3</Key>",
        "      <Value>Value without language</Value>",
        "    </Entry>",
        '    <Context id="Context 11">',
        "      <Entry>",
        "        <!-- Found in: Match 9 @ 99 -->",
        "        <Key>Key 9</Key>",
        "      </Entry>",
        "    </Context>",
        "  </Context>",
        "  <Entry>",
        "  </Entry>",
        "  <Entry>",
        "    <Key/>",
        "    <Value lang='zh'></Value>",
        "    <Value lang='zh'>Other value</Value>",
        "  </Entry>",
        "  <Context>",
        "    <Entry>",
        "      <Key>Key 77</Key>",
        "      <Key>Key 78</Key>",
        "      <Value lang=''>Value with empty language</Value>",
        "    </Entry>",
        "    <Context id=''>",
        "    </Context>",
        "  </Context>",
        "</I18N>",
    ]
)


def build_root_context() -> ContextNode:
    root = ContextNode()
    root.key_matches["Key 1"] = [KeyMatch("Match 1", 1), KeyMatch("Match 1", 2)]
    root.key_matches["Key 6"] = [KeyMatch("Match 6", 0)]
    root.key_matches["Key A"] = [KeyMatch("Match A", 0)]

    context_1 = root.get_context(["Context 1"])
    context_1.key_matches["Key 3"] = [KeyMatch("Match 3", 1), KeyMatch("Match 3", 2)]

    root.get_context(["Context 2", "Context 22"]).add_key("Key 4", "Match 4", 0)
    return root


@pytest.fixture
def translation_file(tmp_path: Path) -> Path:
    return tmp_path / "Translations.xml"


@pytest.fixture
def existing_file(translation_file: Path) -> Path:
    translation_file.write_text(EXISTING_CONTENTS, encoding="utf-8")
    return translation_file


@pytest.fixture
def malformed_file(translation_file: Path) -> Path:
    translation_file.write_text(MALFORMED_CONTENTS, encoding="utf-8")
    return translation_file


@pytest.fixture
def root_context() -> ContextNode:
    return build_root_context()
