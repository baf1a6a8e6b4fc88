"""
paperfetch - Download papers and their LaTeX sources into a notes library

This package resolves reference links to document and source-archive
endpoints, fetches both, sniffs what was actually served and extracts the
useful members of gzip+tar source bundles.
"""

__version__ = "0.1.0"
__author__ = "paperfetch contributors"
__license__ = "MIT"

from .models import PaperData, ResolvedEndpoints
from .downloader import PaperDownloader

__all__ = [
    "PaperData",
    "PaperDownloader",
    "ResolvedEndpoints",
]
