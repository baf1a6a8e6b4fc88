"""
Selective extraction of source and figure files from a tar buffer
"""
from __future__ import annotations

import logging
import posixpath
from pathlib import Path
from typing import Iterable, Optional

from .models import ExtractionResult, TarMember
from .tar_reader import member_payload

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = {".tex", ".bbl"}
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".svg", ".eps", ".pdf"}
IMAGES_DIRNAME = "images"


def _basename(name: str) -> str:
    return posixpath.basename(name.replace("\\", "/"))


def classify_member(name: str) -> Optional[str]:
    """Return "source", "image" or None based on the file extension"""
    suffix = posixpath.splitext(_basename(name))[1].lower()
    if suffix in SOURCE_EXTENSIONS:
        return "source"
    if suffix in IMAGE_EXTENSIONS:
        return "image"
    return None


def target_path(dest_dir: Path, member: TarMember) -> Optional[Path]:
    """
    Compute where a member should be written, or None to skip it

    Archive directories are flattened: only the basename of the member is
    kept. Figures go to ``<dest_dir>/images``.
    """
    if member.size <= 0 or not member.is_file:
        return None

    basename = _basename(member.name)
    if basename in ("", ".", ".."):
        return None

    kind = classify_member(basename)
    if kind == "source":
        return dest_dir / basename
    if kind == "image":
        return dest_dir / IMAGES_DIRNAME / basename
    return None


def extract_members(
    data: bytes,
    members: Iterable[TarMember],
    dest_dir: Path,
) -> ExtractionResult:
    """
    Write allowlisted members of a tar buffer into a destination directory

    Existing files are overwritten, so extracting the same archive twice
    yields the same file set. A member that cannot be written is logged and
    skipped.

    Args:
        data: Decompressed tar bytes the members were read from
        members: Member records, typically from ``iter_tar_members``
        dest_dir: Destination directory

    Returns:
        ExtractionResult listing written files and the number of .tex files
    """
    result = ExtractionResult()
    dest_dir = Path(dest_dir)

    for member in members:
        target = target_path(dest_dir, member)
        if target is None:
            logger.debug("Skipping tar member %s (%d bytes)", member.name, member.size)
            continue

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(member_payload(data, member))
        except OSError as exc:
            logger.warning("Could not write %s: %s", target, exc)
            continue

        logger.info("Extracted %s -> %s", member.name, target)
        result.record(target)

    return result
