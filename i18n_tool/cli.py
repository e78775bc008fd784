"""Command line front end: ``generate``, ``analyze`` and ``deploy``."""

from __future__ import annotations

import argparse
import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from tqdm import tqdm

from .analysis import EntryReport
from .const import ALL_LANGUAGES, DEFAULT_INPUT_PATTERN
from .context import ContextNode
from .exceptions import I18NToolError
from .i18n_file import I18NFile
from .scanner import iter_source_files, parse_file

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerateOptions:
    input_directories: Sequence[Path]
    output_file: Path
    pattern: str = DEFAULT_INPUT_PATTERN
    recursive: bool = False
    preserve_founding_comments: bool = False
    include_line_numbers: bool = True
    mark_deprecated: bool = False
    extra_functions: Sequence[str] = ()
    show_progress: bool = False


@dataclass(frozen=True)
class AnalyzeOptions:
    input_file: Path
    check_deprecated: bool = False
    # None: no check; empty: translation for any language.
    check_languages: Optional[Sequence[str]] = None
    require_all_languages: bool = False
    include_contexts: Sequence[re.Pattern] = ()
    exclude_contexts: Sequence[re.Pattern] = ()


@dataclass(frozen=True)
class DeployOptions:
    input_file: Path
    output_file: Path


def compile_regex_list(patterns: Optional[Sequence[str]]) -> List[re.Pattern]:
    if not patterns:
        return []
    compiled: List[re.Pattern] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise I18NToolError(f"Invalid context regex ({pattern}): {exc}") from exc
    return compiled


def normalize_languages(languages: Optional[Sequence[str]]) -> Optional[List[str]]:
    """``*`` anywhere in the list means "a translation for any language"."""
    if languages is None:
        return None
    if ALL_LANGUAGES in languages:
        return []
    return list(languages)


def generate(options: GenerateOptions, i18n_file: Optional[I18NFile] = None) -> int:
    i18n_file = i18n_file or I18NFile()
    root_context = ContextNode()

    source_files = [
        path
        for directory in options.input_directories
        for path in iter_source_files(directory, options.pattern, options.recursive)
    ]
    for path in tqdm(source_files, desc="Scanning", unit="file", disable=not options.show_progress):
        parse_file(path, options.extra_functions, root_context)
    _LOGGER.info("%s file(s) scanned, %s key(s) found", len(source_files), root_context.count_keys())

    i18n_file.load(options.output_file)
    if not options.preserve_founding_comments:
        i18n_file.delete_founding_comments()
    i18n_file.create_entries(root_context, options.include_line_numbers)
    if options.mark_deprecated:
        i18n_file.create_deprecation_comments()
    i18n_file.write_to_file(options.output_file)

    print(f"Translation file {options.output_file} generated successfully")
    return 0


def _describe(report: EntryReport) -> str:
    key = f"'{report.key}'" if report.key is not None else "<missing>"
    return f"context: {report.context}, key: {key}"


def analyze(options: AnalyzeOptions, i18n_file: Optional[I18NFile] = None) -> int:
    i18n_file = i18n_file or I18NFile()
    i18n_file.load(options.input_file)
    source = options.input_file

    for issue in i18n_file.get_file_issues():
        severity = "ERROR" if issue.is_error else "WARNING"
        print(f"{source}:{issue.line}: {severity}: {issue.message}")

    if options.check_deprecated:
        for report in i18n_file.get_deprecated_entries(options.include_contexts, options.exclude_contexts):
            print(f"{source}:{report.line}: Deprecated entry ({_describe(report)})")

    if options.check_languages is not None:
        for report in i18n_file.get_no_translation_entries(
            options.check_languages,
            options.include_contexts,
            options.exclude_contexts,
            options.require_all_languages,
        ):
            print(f"{source}:{report.line}: Entry without translation ({_describe(report)})")

    return 0


def deploy(options: DeployOptions, i18n_file: Optional[I18NFile] = None) -> int:
    i18n_file = i18n_file or I18NFile()
    i18n_file.load(options.input_file)
    i18n_file.prepare_for_deployment()
    i18n_file.write_to_file(options.output_file)

    print(f"Deployment file {options.output_file} generated successfully")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="i18n-tool",
        description="Keep translation files in sync with the strings used in source code.",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (repeatable).")
    commands = parser.add_subparsers(dest="command", required=True)

    gen = commands.add_parser("generate", help="Create or update a translation file from source code.")
    gen.add_argument("-I", "--input", dest="input_directories", type=Path, nargs="+", required=True,
                     help="Input directories.")
    gen.add_argument("-o", "--output", dest="output_file", type=Path, required=True,
                     help="Translation file to create or update.")
    gen.add_argument("-p", "--pattern", default=DEFAULT_INPUT_PATTERN,
                     help=f"Input files name pattern (default {DEFAULT_INPUT_PATTERN}).")
    gen.add_argument("-r", "--recursive", action="store_true", help="Scan input directories recursively.")
    gen.add_argument("-k", "--preserve-founding-comments", action="store_true",
                     help="Keep founding comments from previous runs.")
    gen.add_argument("-L", "--no-line-numbers", dest="include_line_numbers", action="store_false",
                     help="Do not record line numbers in founding comments.")
    gen.add_argument("-d", "--mark-deprecated", action="store_true",
                     help="Mark entries not found in source code as deprecated.")
    gen.add_argument("-e", "--extra-function", dest="extra_functions", action="append", default=[],
                     help="Extra function name to scan for translatable strings (repeatable).")
    gen.add_argument("--progress", action="store_true", help="Show a progress bar while scanning.")

    ana = commands.add_parser("analyze", help="Report problems in a translation file.")
    ana.add_argument("-i", "--input", dest="input_file", type=Path, required=True, help="Translation file.")
    ana.add_argument("-d", "--deprecated", dest="check_deprecated", action="store_true",
                     help="Report deprecated entries.")
    ana.add_argument("-t", "--no-translation", dest="check_languages", nargs="+", default=None,
                     help="Report entries without translation for these languages ('*' for any language).")
    ana.add_argument("-a", "--all-languages", dest="require_all_languages", action="store_true",
                     help="Report entries missing any of the languages instead of all of them.")
    ana.add_argument("-c", "--include-context", dest="include_contexts", action="append", default=[],
                     help="Regular expression for contexts to include (repeatable).")
    ana.add_argument("-C", "--exclude-context", dest="exclude_contexts", action="append", default=[],
                     help="Regular expression for contexts to exclude (repeatable).")

    dep = commands.add_parser("deploy", help="Write a translation file stripped for distribution.")
    dep.add_argument("-i", "--input", dest="input_file", type=Path, required=True, help="Translation file.")
    dep.add_argument("-o", "--output", dest="output_file", type=Path, required=True, help="Deployment file.")

    return parser


def _log_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def run(args: argparse.Namespace) -> int:
    if args.command == "generate":
        return generate(
            GenerateOptions(
                input_directories=args.input_directories,
                output_file=args.output_file,
                pattern=args.pattern,
                recursive=args.recursive,
                preserve_founding_comments=args.preserve_founding_comments,
                include_line_numbers=args.include_line_numbers,
                mark_deprecated=args.mark_deprecated,
                extra_functions=args.extra_functions,
                show_progress=args.progress,
            )
        )
    if args.command == "analyze":
        return analyze(
            AnalyzeOptions(
                input_file=args.input_file,
                check_deprecated=args.check_deprecated,
                check_languages=normalize_languages(args.check_languages),
                require_all_languages=args.require_all_languages,
                include_contexts=compile_regex_list(args.include_contexts),
                exclude_contexts=compile_regex_list(args.exclude_contexts),
            )
        )
    return deploy(DeployOptions(input_file=args.input_file, output_file=args.output_file))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=_log_level(args.verbose), format="%(levelname)s: %(message)s")

    try:
        return run(args)
    except I18NToolError as exc:
        _LOGGER.debug("Command failed", exc_info=True)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
