"""
CLI entrypoint for xmlfilter package.
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from colorama import Fore, Style

from . import __version__
from .core import (
    check_directory,
    compile_query,
    copy_selected,
    filter_matching,
    load_exclude_patterns,
    report,
    scan_candidates,
)
from .errors import (
    ArgumentError,
    DocumentParseError,
    EmptyInputError,
    NoMatchError,
    XmlFilterError,
)
from .namespaces import NamespaceBinding


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        raise ArgumentError(message)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = _ArgumentParser(
        prog="xmlfilter",
        description=(
            "Copy the XML files of a directory that contain nodes matching "
            "an XPath expression."
        ),
    )
    p.add_argument("in_dir", type=Path, help="Directory holding the XML files")
    p.add_argument("out_dir", type=Path, help="Destination directory for matches")
    p.add_argument("query", help="XPath 1.0 expression selecting nodes")
    p.add_argument(
        "xmlns",
        nargs="?",
        default="",
        help='Optional namespace declaration, e.g. xmlns:p="urn:example"',
    )
    p.add_argument(
        "--exclude-from",
        type=Path,
        help="Path to a file with ignore patterns for candidate names (one per line)",
    )
    p.add_argument(
        "--jobs",
        type=int,
        default=1,
        help="Number of files evaluated in parallel (default 1)",
    )
    p.add_argument(
        "--raw-namespace",
        action="store_true",
        help="Keep quote characters around the namespace URI",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="List matching files without copying them",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ns = p.parse_args(argv)
    if ns.jobs < 1:
        p.error("--jobs must be at least 1")
    return ns


def _fail(msg: str) -> None:
    print(Fore.RED + f"Error: {msg}" + Style.RESET_ALL, file=sys.stderr)


def _warn(err: DocumentParseError) -> None:
    report(f"! {err}", Fore.YELLOW, sys.stderr)


def run(ns: argparse.Namespace) -> int:
    in_dir = check_directory(ns.in_dir, "Input")
    out_dir = check_directory(ns.out_dir, "Output")

    exclude_spec = None
    if ns.exclude_from:
        exclude_spec = load_exclude_patterns(ns.exclude_from.resolve())
        if ns.verbose:
            report(f"Loaded exclude patterns from {ns.exclude_from}")

    binding = NamespaceBinding.parse(ns.xmlns, strip_quotes=not ns.raw_namespace)
    query = compile_query(ns.query, binding)
    if ns.verbose:
        report(f"Compiled {query.source} with {binding}")
        report(f"Scanning {in_dir} …")
    candidates = scan_candidates(in_dir, exclude_spec)
    if not candidates:
        raise EmptyInputError(f"{in_dir.name} is empty.")

    selected = filter_matching(candidates, query, jobs=ns.jobs, on_error=_warn)
    if ns.verbose:
        report(f"{len(candidates)} candidates, {len(selected)} matching.")
    if not selected:
        raise NoMatchError(
            f"No file contains nodes matching the XPath expression {ns.query}"
        )

    if ns.dry_run:
        for p in selected:
            print(p.name)
        return 0

    failures = copy_selected(selected, out_dir, verbose=ns.verbose)
    for err in failures:
        report(f"! {err}", Fore.YELLOW, sys.stderr)
    if failures:
        _fail(
            f"{len(failures)} of {len(selected)} files could not be copied "
            f"to {out_dir}."
        )
        return 1

    if ns.verbose:
        report(f"Done → {out_dir}. {len(selected)} files copied.", Fore.GREEN)
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    try:
        ns = _parse_args(argv)
        sys.exit(run(ns))
    except XmlFilterError as e:
        _fail(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
