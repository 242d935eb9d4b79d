"""Command-line utilities for the citation resolver."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Optional, TextIO

from citation_resolver.api import CitationClient
from citation_resolver.exceptions import MalformedInputError
from citation_resolver.formatting.citations import format_citation
from citation_resolver.formatting.styles import CitationStyle, ExportFormat

STYLE_CHOICES = [style.value for style in CitationStyle]
EXPORT_CHOICES = [fmt.value for fmt in ExportFormat] + STYLE_CHOICES


def _read_references(path: Optional[str]) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve references and format citations")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    format_cmd = subparsers.add_parser("format", help="Format a list of references, one per line")
    format_cmd.add_argument("file", nargs="?", default=None, help="Reference file (default: stdin)")
    format_cmd.add_argument("--style", choices=STYLE_CHOICES, default="apa")
    format_cmd.add_argument("--json", action="store_true", help="Print the full batch result as JSON")

    export_cmd = subparsers.add_parser("export", help="Export references as BibTeX, EndNote or text")
    export_cmd.add_argument("file", nargs="?", default=None, help="Reference file (default: stdin)")
    export_cmd.add_argument("--format", dest="output", choices=EXPORT_CHOICES, default="bibtex")
    export_cmd.add_argument(
        "--output", dest="destination", default=None, help="Write to this path instead of stdout"
    )
    export_cmd.add_argument(
        "--output-dir",
        default=None,
        help="Write to the suggested filename (e.g. references.bib) in this directory",
    )

    lookup_cmd = subparsers.add_parser("lookup", help="Look up a single DOI")
    lookup_cmd.add_argument("doi")

    search_cmd = subparsers.add_parser("search", help="Search providers by title")
    search_cmd.add_argument("title")
    search_cmd.add_argument("--style", choices=STYLE_CHOICES, default=None)

    return parser


def _run_format(client: CitationClient, args: argparse.Namespace, out: TextIO) -> int:
    result = client.resolve_batch(_read_references(args.file), args.style)
    if args.json:
        json.dump(result.to_dict(), out, indent=2)
        out.write("\n")
        return 0

    for line in result.rendered:
        out.write(f"{line}\n")
    for group in result.ambiguous:
        out.write(f"\n[{group.index + 1}] {group.query}\n")
        for option in group.options:
            out.write(f"  {option.id}: {option.formatted}\n")
    return 0


def _run_export(client: CitationClient, args: argparse.Namespace, out: TextIO) -> int:
    document = client.export_batch(_read_references(args.file), args.output)
    destination = args.destination
    if destination is None and args.output_dir:
        destination = str(Path(args.output_dir) / document.filename)

    if destination is None:
        out.write(document.content)
        out.write("\n")
        return 0

    Path(destination).write_text(document.content, encoding="utf-8")
    out.write(f"Wrote {destination} ({document.content_type})\n")
    return 0


def _run_lookup(client: CitationClient, args: argparse.Namespace, out: TextIO) -> int:
    paper = client.lookup_by_doi(args.doi)
    if paper is None:
        out.write(json.dumps({"success": False, "error": "Paper not found"}) + "\n")
        return 1
    out.write(json.dumps({"success": True, "data": paper.to_dict()}, indent=2) + "\n")
    return 0


def _run_search(client: CitationClient, args: argparse.Namespace, out: TextIO) -> int:
    papers = client.search_by_title(args.title)
    if args.style:
        for index, paper in enumerate(papers, start=1):
            out.write(f"{index}. {format_citation(paper, args.style)}\n")
        return 0

    payload = {"success": True, "data": [paper.to_dict() for paper in papers], "total": len(papers)}
    out.write(json.dumps(payload, indent=2) + "\n")
    return 0


def main(
    argv: list[str] | None = None,
    *,
    client_factory: Callable[[], CitationClient] = CitationClient,
    out: TextIO | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    out = out or sys.stdout

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands: dict[str, Any] = {
        "format": _run_format,
        "export": _run_export,
        "lookup": _run_lookup,
        "search": _run_search,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.error("Unknown command")
        return 1

    try:
        return handler(client_factory(), args, out)
    except MalformedInputError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
