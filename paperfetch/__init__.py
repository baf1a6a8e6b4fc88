"""
paperfetch - Download papers and their LaTeX sources into a notes library

This is the main public API module.
"""

from .core.models import PaperData, ResolvedEndpoints
from .core.downloader import PaperDownloader
from .core.link_resolver import resolve_links

__version__ = "0.1.0"
__all__ = [
    "PaperDownloader",
    "PaperData",
    "ResolvedEndpoints",
    "resolve_links",
]
