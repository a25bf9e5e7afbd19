"""
Core logic for xmlfilter package.
"""

from __future__ import annotations

import shutil
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

import pathspec
from colorama import Style, init as colorama_init
from lxml import etree

from .errors import (
    ConfigFileError,
    CopyError,
    DirectoryError,
    DocumentParseError,
    QueryCompilationError,
)
from .namespaces import NamespaceBinding

colorama_init()

XML_SUFFIX = "xml"


def report(msg: str, colour: str = "", stream=None) -> None:
    """Print a ``[xmlfilter]`` line, coloured when *colour* is given."""
    line = f"[xmlfilter] {msg}"
    if colour:
        line = colour + line + Style.RESET_ALL
    print(line, file=stream or sys.stdout)


# --exclude-from support
def load_exclude_patterns(config_path: Path) -> "pathspec.GitIgnoreSpec":
    """
    Read ignore patterns for candidate file names.

    Patterns use .gitignore syntax and are matched against the bare file
    name, since candidates are never taken from subdirectories.
    """
    if not config_path.is_file():
        state = "is not a file" if config_path.exists() else "does not exist"
        raise ConfigFileError(f"--exclude-from file '{config_path}' {state}")
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Could not read --exclude-from file '{config_path}': {e}")
    patterns = [ln for ln in text.splitlines() if ln.strip() and not ln.startswith("#")]
    return pathspec.GitIgnoreSpec.from_lines(patterns)


# Candidate scanning
def check_directory(path: Path, role: str = "Input") -> Path:
    try:
        path = path.resolve()
    except (OSError, RuntimeError) as e:
        raise DirectoryError(f"Could not resolve {role.lower()} path '{path}': {e}")
    if not path.exists():
        raise DirectoryError(f"{role} directory '{path}' does not exist")
    if not path.is_dir():
        raise DirectoryError(f"{path} is not a directory")
    return path


def _is_candidate(p: Path) -> bool:
    # Literal suffix test: "fooxml" qualifies, ".XML" does not.
    return p.is_file() and not p.name.startswith(".") and p.name.endswith(XML_SUFFIX)


def scan_candidates(
    in_dir: Path,
    exclude_spec: Optional["pathspec.GitIgnoreSpec"] = None,
) -> List[Path]:
    """
    List the XML candidates directly inside *in_dir*, sorted by name.

    Subdirectories are not descended into.
    """
    try:
        entries = sorted(in_dir.iterdir(), key=lambda p: p.name)
    except (OSError, PermissionError) as e:
        raise DirectoryError(f"An error occurred while opening {in_dir.name}: {e}")

    kept: List[Path] = []
    for p in entries:
        if not _is_candidate(p):
            continue
        if exclude_spec and exclude_spec.match_file(p.name):
            continue
        kept.append(p)
    return kept


# Query compilation
@dataclass(frozen=True)
class CompiledQuery:
    """
    An XPath expression bound to a namespace binding.

    lxml evaluators are not shared across threads, so each thread compiles
    its own copy on first use; the source text and binding are shared.
    """

    source: str
    binding: NamespaceBinding = field(default_factory=NamespaceBinding)
    _local: threading.local = field(
        default_factory=threading.local, repr=False, compare=False
    )

    def evaluator(self) -> "etree.XPath":
        xpath = getattr(self._local, "xpath", None)
        if xpath is None:
            xpath = etree.XPath(
                self.source,
                namespaces=self.binding.as_xpath_namespaces(),
                smart_strings=False,
            )
            self._local.xpath = xpath
        return xpath

    def select(self, doc) -> list:
        """Evaluate against *doc* and return the matched node-set."""
        try:
            result = self.evaluator()(doc)
        except etree.XPathError as e:
            raise QueryCompilationError(
                f"XPath expression {self.source} cannot be evaluated: {e}"
            )
        if not isinstance(result, list):
            raise QueryCompilationError(
                f"XPath expression {self.source} does not select nodes "
                f"(got {type(result).__name__})"
            )
        return result


_PROBE = "<xmlfilter-probe/>"


def compile_query(
    query: str, binding: Optional[NamespaceBinding] = None
) -> CompiledQuery:
    """
    Compile *query* once for the whole run.

    The expression is also run against an empty probe document so that
    undefined prefixes and scalar-valued expressions fail here, before any
    candidate is parsed.
    """
    if not query or not query.strip():
        raise QueryCompilationError("XPath expression cannot be compiled: empty query")

    compiled = CompiledQuery(source=query, binding=binding or NamespaceBinding())
    try:
        compiled.evaluator()
    except (etree.XPathError, TypeError, ValueError) as e:
        raise QueryCompilationError(f"XPath expression {query} cannot be compiled: {e}")

    compiled.select(etree.ElementTree(etree.fromstring(_PROBE)))
    return compiled


# Per-file evaluation
@dataclass
class MatchResult:
    path: Path
    count: int = 0
    error: Optional[DocumentParseError] = None

    @property
    def matched(self) -> bool:
        return self.error is None and self.count > 0


def _make_parser() -> "etree.XMLParser":
    # lxml already keeps contiguous character data in one text/tail string;
    # strip_cdata (the default) folds CDATA sections into it as well.
    return etree.XMLParser(no_network=True, huge_tree=False, strip_cdata=True)


def parse_document(path: Path) -> "etree._ElementTree":
    try:
        return etree.parse(str(path), _make_parser())
    except etree.ParseError as e:
        raise DocumentParseError(path, str(e))
    except OSError as e:
        raise DocumentParseError(path, e.strerror or str(e))


def evaluate(path: Path, query: CompiledQuery) -> MatchResult:
    try:
        doc = parse_document(path)
    except DocumentParseError as e:
        return MatchResult(path=path, error=e)
    return MatchResult(path=path, count=len(query.select(doc)))


def evaluate_all(
    candidates: List[Path], query: CompiledQuery, jobs: int = 1
) -> List[MatchResult]:
    """Evaluate every candidate; results come back in candidate order."""
    if jobs <= 1 or len(candidates) <= 1:
        return [evaluate(p, query) for p in candidates]
    with ThreadPoolExecutor(max_workers=jobs) as pool:
        return list(pool.map(lambda p: evaluate(p, query), candidates))


def filter_matching(
    candidates: List[Path],
    query: CompiledQuery,
    jobs: int = 1,
    on_error: Optional[Callable[[DocumentParseError], None]] = None,
) -> List[Path]:
    """
    Return the candidates with at least one node matching *query*.

    Unparseable files are handed to *on_error* and left out; they never
    stop the run.
    """
    selected: List[Path] = []
    for result in evaluate_all(candidates, query, jobs=jobs):
        if result.error is not None:
            if on_error:
                on_error(result.error)
            continue
        if result.matched:
            selected.append(result.path)
    return selected


# Copy step
def copy_selected(
    paths: List[Path], out_dir: Path, verbose: bool = False
) -> List[CopyError]:
    """
    Copy *paths* flat into *out_dir*, overwriting existing files.

    Every file is attempted; failures are returned rather than raised.
    """
    failures: List[CopyError] = []
    for p in paths:
        dest = out_dir / p.name
        try:
            shutil.copyfile(p, dest)
        except shutil.SameFileError:
            # Source and destination are the same file; nothing to copy.
            continue
        except OSError as e:
            failures.append(CopyError(p, getattr(e, "strerror", None) or str(e)))
            continue
        if verbose:
            report(f"+ {p.name} -> {dest}")
    return failures
