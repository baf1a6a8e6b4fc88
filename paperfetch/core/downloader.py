"""
Main downloader class for paperfetch
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

from .archive import extract_source_archive
from .link_resolver import resolve_links
from .markdown_converter import html_to_markdown
from .models import (
    BranchResult,
    Failed,
    FetchedPayload,
    PaperData,
    PipelineOutcome,
    SavedDocument,
    SavedDocumentWithSource,
    SavedMarkup,
)
from .paper_fetcher import PaperFetcher
from .paths import PaperPaths, build_paper_paths, count_tex_files, find_saved_file
from .settings import Settings
from .sniffer import PayloadKind, decode_text, sniff_payload

logger = logging.getLogger(__name__)


class PaperDownloader:
    """Download a paper and, when available, its LaTeX sources"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        fetcher: Optional[PaperFetcher] = None,
        converter: Callable[[str], str] = html_to_markdown,
    ):
        """
        Initialize downloader

        Args:
            settings: Runtime settings (download path, timeout, user agent)
            fetcher: Object with a ``fetch(url) -> bytes`` method
            converter: HTML to Markdown converter for non-PDF responses
        """
        self.settings = settings or Settings()
        self.fetcher = fetcher or PaperFetcher(
            timeout=self.settings.timeout,
            user_agent=self.settings.user_agent,
        )
        self.converter = converter

    def paths_for(self, note_name: str, paper: PaperData) -> PaperPaths:
        return build_paper_paths(
            self.settings.resolved_download_path,
            note_name,
            paper.title,
        )

    def find_saved(self, note_name: str, paper: PaperData) -> Optional[Path]:
        """Existing download for this paper, if any"""
        return find_saved_file(self.paths_for(note_name, paper).candidates)

    def download(self, note_name: str, paper: PaperData) -> PipelineOutcome:
        """
        Download a paper described by a note block

        Args:
            note_name: Name of the note the paper belongs to
            paper: Parsed paper block

        Returns:
            PipelineOutcome for the run
        """
        if not paper.link:
            return Failed("No link provided.")

        paths = self.paths_for(note_name, paper)
        logger.info("Downloading %s", paper.display_title)
        return asyncio.run(self.run(paper.link, paths))

    async def run(self, link: str, paths: PaperPaths) -> PipelineOutcome:
        """
        Fetch the primary document and the source archive concurrently

        Only a failure of the primary branch fails the run; anything going
        wrong on the archive branch is logged and ignored.
        """
        endpoints = resolve_links(link)

        branches = [self._primary_branch(endpoints.primary, paths)]
        if endpoints.has_archive:
            branches.append(self._archive_branch(endpoints.archive, paths))

        results = await asyncio.gather(*branches)
        primary = results[0]

        if len(results) > 1 and not results[1].ok:
            logger.warning(
                "Source archive skipped for %s: %s",
                endpoints.archive,
                results[1].error,
            )

        if not primary.ok:
            return Failed(str(primary.error) or type(primary.error).__name__)

        saved_path, kind = primary.value
        tex_count = count_tex_files(paths.dest_dir)
        if tex_count > 0:
            return SavedDocumentWithSource(saved_path, tex_count)
        if kind is PayloadKind.DOCUMENT:
            return SavedDocument(saved_path)
        return SavedMarkup(saved_path)

    async def _fetch(self, url: str) -> FetchedPayload:
        data = await asyncio.to_thread(self.fetcher.fetch, url)
        return FetchedPayload(data=data, source_endpoint=url)

    async def _primary_branch(self, url: str, paths: PaperPaths) -> BranchResult:
        try:
            payload = await self._fetch(url)
            saved = await asyncio.to_thread(self._save_primary, payload, paths)
        except Exception as exc:
            logger.error("Primary download failed for %s: %s", url, exc)
            return BranchResult.failure(exc)
        return BranchResult.success(saved)

    async def _archive_branch(self, url: str, paths: PaperPaths) -> BranchResult:
        try:
            payload = await self._fetch(url)
            result = await asyncio.to_thread(
                extract_source_archive,
                payload.data,
                paths.dest_dir,
            )
        except Exception as exc:
            return BranchResult.failure(exc)

        logger.info(
            "Source archive %s: %d files extracted (%d .tex)",
            url,
            len(result),
            result.tex_count,
        )
        return BranchResult.success(result)

    def _save_primary(self, payload: FetchedPayload, paths: PaperPaths) -> tuple[Path, PayloadKind]:
        kind = sniff_payload(payload.data)
        paths.dest_dir.mkdir(parents=True, exist_ok=True)

        if kind is PayloadKind.DOCUMENT:
            paths.pdf_path.write_bytes(payload.data)
            logger.info("Saved document -> %s", paths.pdf_path)
            return paths.pdf_path, kind

        markdown = self.converter(decode_text(payload.data))
        paths.markup_path.write_text(markdown, encoding="utf-8")
        logger.info(
            "%s did not serve a PDF, saved converted page -> %s",
            payload.source_endpoint,
            paths.markup_path,
        )
        return paths.markup_path, kind
