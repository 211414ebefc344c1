"""Source scanner discovering translation lookups in Python code.

Walks a source tree, parses every ``*.py`` file with :mod:`ast` and inspects
each call whose callee name is a configured accessor (``t("k")``,
``i18n.translate("k")``, ``Translator.t_locale(locale, "k")``). The key
argument is handed to :func:`translations.evaluator.evaluate`; literal keys
become :class:`UsageLocation` records, everything else a
:class:`DynamicUsage` carrying the raw expression and its literal prefix.

Key argument selection:
 - a ``key=`` keyword argument, when present;
 - otherwise the second positional argument when the receiver is a static
   helper (``Translator``) and more than one positional argument is passed;
 - otherwise the first positional argument.

The walk is single-threaded and sorted so results are deterministic. A file
that cannot be read or parsed is logged and skipped; errors enumerating the
tree itself propagate. Expressions nested deeper than the interpreter
recursion limit count as unparsable.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
from typing import List, Optional, Set

from config import settings
from core import filesystem

from .evaluator import Resolved, evaluate, extract_prefix

__all__ = [
    "UsageLocation",
    "DynamicUsage",
    "ScanOptions",
    "ScanResult",
    "TranslationUsageVisitor",
    "scan_source",
    "scan_text",
]

_log = logging.getLogger(__name__)

REASON_NO_ARGUMENTS = "no arguments"


@dataclass(frozen=True)
class UsageLocation:
    key: str
    file: str
    line: int
    accessor: str


@dataclass(frozen=True)
class DynamicUsage:
    file: str
    line: int
    accessor: str
    reason: str
    expression: str = ""
    prefix: str = ""


@dataclass(frozen=True)
class ScanOptions:
    accessor_names: frozenset = frozenset(settings.ACCESSOR_NAMES)
    static_helpers: frozenset = frozenset(settings.STATIC_HELPERS)
    excluded_file_names: frozenset = frozenset(n.lower() for n in settings.EXCLUDED_FILE_NAMES)
    excluded_directories: tuple = settings.EXCLUDED_DIRECTORIES

    @classmethod
    def from_config(cls, config) -> "ScanOptions":
        return cls(
            accessor_names=frozenset(config.accessor_names),
            static_helpers=frozenset(config.static_helpers),
            excluded_file_names=frozenset(n.lower() for n in config.excluded_file_names),
            excluded_directories=tuple(config.excluded_directories),
        )


@dataclass
class ScanResult:
    keys: Set[str] = field(default_factory=set)
    usages: List[UsageLocation] = field(default_factory=list)
    dynamic_usages: List[DynamicUsage] = field(default_factory=list)
    file_count: int = 0
    failed_files: List[str] = field(default_factory=list)


class TranslationUsageVisitor(ast.NodeVisitor):
    """Collects translation lookups of one parsed file into a ``ScanResult``."""

    def __init__(self, source: str, rel_path: str, options: ScanOptions, sink: ScanResult):
        self._source = source
        self._rel_path = rel_path
        self._options = options
        self._sink = sink

    def visit_Call(self, node: ast.Call) -> None:
        name, receiver = _callee(node.func)
        if name is not None and name in self._options.accessor_names:
            self._handle_lookup(node, name, receiver)
        self.generic_visit(node)

    def _handle_lookup(self, node: ast.Call, accessor: str, receiver: Optional[str]) -> None:
        key_expr = self._key_argument(node, receiver)
        if key_expr is None:
            self._sink.dynamic_usages.append(
                DynamicUsage(self._rel_path, node.lineno, accessor, REASON_NO_ARGUMENTS)
            )
            return
        resolution = evaluate(key_expr)
        if isinstance(resolution, Resolved):
            self._sink.keys.add(resolution.value)
            self._sink.usages.append(
                UsageLocation(resolution.value, self._rel_path, node.lineno, accessor)
            )
            return
        raw = ast.get_source_segment(self._source, key_expr) or ""
        self._sink.dynamic_usages.append(
            DynamicUsage(
                self._rel_path,
                node.lineno,
                accessor,
                resolution.reason,
                expression=raw,
                prefix=extract_prefix(raw),
            )
        )

    def _key_argument(self, node: ast.Call, receiver: Optional[str]) -> Optional[ast.AST]:
        for kw in node.keywords:
            if kw.arg == "key":
                return kw.value
        args = node.args
        if not args:
            return None
        index = 1 if receiver in self._options.static_helpers and len(args) > 1 else 0
        return args[index]


def _callee(func: ast.AST) -> tuple[Optional[str], Optional[str]]:
    """Return (invoked name, receiver name) for ``name(...)`` / ``recv.name(...)``."""
    if isinstance(func, ast.Name):
        return func.id, None
    if isinstance(func, ast.Attribute):
        receiver = func.value.id if isinstance(func.value, ast.Name) else None
        return func.attr, receiver
    return None, None


def _relative(path: Path, repo_root: Path) -> str:
    try:
        return Path(os.path.relpath(path, repo_root)).as_posix()
    except ValueError:  # different drive on Windows
        return path.as_posix()


def scan_text(
    source: str, rel_path: str, options: ScanOptions | None = None, sink: ScanResult | None = None
) -> ScanResult:
    """Scan one file's text.

    Raises ``SyntaxError``/``ValueError`` if it does not parse, and
    ``RecursionError`` for expressions nested too deeply to walk.
    """
    sink = sink if sink is not None else ScanResult()
    tree = ast.parse(source, filename=rel_path)
    TranslationUsageVisitor(source, rel_path, options or ScanOptions(), sink).visit(tree)
    return sink


def scan_source(
    source_dir: str | Path,
    repo_root: str | Path,
    options: ScanOptions | None = None,
) -> ScanResult:
    """Scan every Python file under ``source_dir``.

    Returns an empty result when ``source_dir`` does not exist.
    """
    options = options or ScanOptions()
    result = ScanResult()
    root = Path(source_dir)
    repo = Path(repo_root)
    if not root.is_dir():
        _log.info("Source directory %s does not exist; nothing to scan", root)
        return result
    for path in filesystem.iter_files(root, ".py", options.excluded_directories):
        if path.name.lower() in options.excluded_file_names:
            continue
        rel_path = _relative(path, repo)
        try:
            text = filesystem.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            _log.warning("Skipping unreadable source file %s: %s", rel_path, e)
            result.failed_files.append(rel_path)
            continue
        # Parse into a scratch result so a failing file contributes nothing.
        try:
            partial = scan_text(text, rel_path, options)
        except (SyntaxError, ValueError, RecursionError, MemoryError) as e:
            _log.warning("Skipping unparsable source file %s: %s", rel_path, e)
            result.failed_files.append(rel_path)
            continue
        _merge(result, partial)
        result.file_count += 1
    _log.debug(
        "Scanned %d files under %s: %d keys, %d dynamic usages",
        result.file_count,
        root,
        len(result.keys),
        len(result.dynamic_usages),
    )
    return result


def _merge(into: ScanResult, other: ScanResult) -> None:
    into.keys.update(other.keys)
    into.usages.extend(other.usages)
    into.dynamic_usages.extend(other.dynamic_usages)

