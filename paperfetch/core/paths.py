"""
Filesystem layout for downloaded papers
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from .extractor import IMAGES_DIRNAME

PathLike = Union[str, "os.PathLike[str]"]

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-{2,}")


def sanitize_filename(name: str) -> str:
    """
    Make a string safe to use as a file or directory name

    >>> sanitize_filename("My: Paper / Title?")
    'My-Paper-Title'
    """
    value = _UNSAFE_CHARS.sub("-", name or "")
    value = _WHITESPACE.sub("-", value)
    value = _DASHES.sub("-", value)
    return value.strip("-")


def expand_home(path: PathLike) -> Path:
    text = os.fspath(path)
    if text.startswith("~"):
        return Path(os.path.expanduser("~")) / text[1:].lstrip("/\\")
    return Path(text)


def ensure_dir(path: PathLike) -> Path:
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


@dataclass(frozen=True)
class PaperPaths:
    """Output locations for one paper"""
    dest_dir: Path
    pdf_path: Path
    markup_path: Path

    @property
    def images_dir(self) -> Path:
        return self.dest_dir / IMAGES_DIRNAME

    @property
    def candidates(self) -> tuple[Path, Path]:
        return (self.pdf_path, self.markup_path)


def build_paper_paths(base: PathLike, note_name: str, title: str) -> PaperPaths:
    """
    Compute ``<base>/<note>/<title>/<title>.pdf`` and its markdown sibling
    """
    safe_title = sanitize_filename(title or "Untitled") or "Untitled"
    dest_dir = expand_home(base) / sanitize_filename(note_name) / safe_title
    return PaperPaths(
        dest_dir=dest_dir,
        pdf_path=dest_dir / f"{safe_title}.pdf",
        markup_path=dest_dir / f"{safe_title}.md",
    )


def find_saved_file(paths: Iterable[PathLike]) -> Optional[Path]:
    """Return the first path that exists on disk right now"""
    for candidate in paths:
        path = Path(candidate)
        if path.is_file():
            return path
    return None


def count_tex_files(dest_dir: PathLike) -> int:
    directory = Path(dest_dir)
    if not directory.is_dir():
        return 0
    return sum(
        1
        for entry in directory.iterdir()
        if entry.is_file() and entry.suffix.lower() == ".tex"
    )
