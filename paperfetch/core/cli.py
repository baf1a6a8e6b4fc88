"""
CLI interface for paperfetch
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .codeblock import PAPER_BLOCK_TEMPLATE, extract_paper_blocks
from .downloader import PaperDownloader
from .link_resolver import resolve_links
from .models import Failed, PaperData
from .paper_fetcher import PaperFetcher
from .settings import load_settings


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser"""
    parser = argparse.ArgumentParser(
        description="Download papers (and their LaTeX sources) into a notes library"
    )
    parser.add_argument(
        "--config",
        help="YAML config file"
    )
    parser.add_argument(
        "--download-path",
        help="Base directory for downloads (overrides config)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    download = subparsers.add_parser(
        "download",
        help="Download a paper from a link or from paper blocks in a note",
    )
    download.add_argument(
        "link",
        nargs="?",
        help="Paper link (abstract page, PDF URL, ...)"
    )
    download.add_argument(
        "--block",
        help="Markdown note containing ```paper blocks"
    )
    download.add_argument("--title", default="", help="Paper title")
    download.add_argument("--authors", default="", help="Paper authors")
    download.add_argument("--date", default="", help="Publication date")
    download.add_argument(
        "--note",
        help="Note name used as the folder name (defaults to the --block file stem)"
    )
    download.add_argument(
        "--force",
        action="store_true",
        help="Download again even if the paper is already saved"
    )

    resolve = subparsers.add_parser("resolve", help="Show the endpoints for a link")
    resolve.add_argument("link", help="Paper link")

    subparsers.add_parser("template", help="Print an empty paper block")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "template":
        print(PAPER_BLOCK_TEMPLATE)
        return

    if args.command == "resolve":
        endpoints = resolve_links(args.link)
        print(f"primary: {endpoints.primary}")
        print(f"archive: {endpoints.archive or '-'}")
        return

    try:
        settings = load_settings(args.config, download_path=args.download_path)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else settings.log_level,
            format="%(levelname)s %(name)s: %(message)s",
        )
        jobs = _collect_jobs(args)

        failed = False
        with PaperFetcher(timeout=settings.timeout, user_agent=settings.user_agent) as fetcher:
            downloader = PaperDownloader(settings=settings, fetcher=fetcher)
            for note_name, paper in jobs:
                saved = downloader.find_saved(note_name, paper)
                if saved is not None and not args.force:
                    print(f"Already saved: {saved}")
                    continue

                print(f"Downloading {paper.display_title}...")
                outcome = downloader.download(note_name, paper)
                if isinstance(outcome, Failed):
                    failed = True
                    print(outcome.describe(), file=sys.stderr)
                else:
                    print(outcome.describe())
    except Exception as exc:
        if args.verbose:
            raise
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if failed:
        sys.exit(1)


def _collect_jobs(args: argparse.Namespace) -> List[Tuple[str, PaperData]]:
    if args.block:
        note_path = Path(args.block)
        papers = extract_paper_blocks(note_path.read_text(encoding="utf-8"))
        if not papers:
            raise ValueError(f"No paper blocks found in {note_path}")
        note_name = args.note or note_path.stem
        return [(note_name, paper) for paper in papers]

    if not args.link:
        raise ValueError("Provide a link or --block")
    if not args.note:
        raise ValueError("--note is required when downloading a single link")

    paper = PaperData(
        title=args.title,
        authors=args.authors,
        date=args.date,
        link=args.link,
    )
    return [(args.note, paper)]


if __name__ == "__main__":
    main()
