"""
Source archive handling - gzip decompression and raw TeX fallback
"""
from __future__ import annotations

import logging
import zlib
from pathlib import Path
from typing import Optional

from .extractor import extract_members
from .models import ExtractionResult
from .sniffer import looks_like_tex
from .tar_reader import has_ustar_magic, iter_tar_members

logger = logging.getLogger(__name__)

RAW_TEX_FILENAME = "main.tex"
GZIP_MAGIC = b"\x1f\x8b"
GZIP_WBITS = 16 + zlib.MAX_WBITS


def decompress(data: bytes) -> Optional[bytes]:
    """Inflate a gzip stream, returning None if it is not valid gzip"""
    if data[:2] != GZIP_MAGIC:
        logger.debug("Payload has no gzip header")
        return None
    inflater = zlib.decompressobj(wbits=GZIP_WBITS)
    try:
        inflated = inflater.decompress(data)
    except zlib.error as exc:
        logger.debug("Payload is not a gzip stream: %s", exc)
        return None

    if not inflater.eof:
        logger.debug("Gzip stream ended before its end-of-stream marker")
        return None
    if inflater.unused_data:
        logger.debug("Ignoring %d bytes after the gzip stream", len(inflater.unused_data))
    return inflated


def write_raw_tex(data: bytes, dest_dir: Path) -> Optional[Path]:
    """
    Save a buffer as main.tex if it looks like LaTeX source

    Some source endpoints serve a single uncompressed .tex file instead of
    an archive. Anything else is discarded.
    """
    if not looks_like_tex(data):
        logger.debug("Source payload is neither an archive nor LaTeX, discarding")
        return None

    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    target = dest_dir / RAW_TEX_FILENAME
    target.write_bytes(data)
    logger.info("Saved raw LaTeX source -> %s", target)
    return target


def extract_source_archive(data: bytes, dest_dir: Path) -> ExtractionResult:
    """
    Extract the useful parts of a source payload into dest_dir

    Args:
        data: Payload fetched from the source-archive endpoint
        dest_dir: Destination directory for the paper

    Returns:
        ExtractionResult (empty when nothing usable was found)
    """
    result = ExtractionResult()

    tar_data = decompress(data)
    if tar_data is None:
        raw = write_raw_tex(data, dest_dir)
        if raw is not None:
            result.record(raw)
        return result

    if not has_ustar_magic(tar_data):
        raw = write_raw_tex(tar_data, dest_dir)
        if raw is not None:
            result.record(raw)
        return result

    return extract_members(tar_data, iter_tar_members(tar_data), Path(dest_dir))
