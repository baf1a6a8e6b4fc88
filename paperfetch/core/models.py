"""
Data models for paperfetch
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Union


@dataclass
class PaperData:
    """Fields of a ``paper`` note block"""
    title: str = ""
    authors: str = ""
    date: str = ""
    link: str = ""

    @property
    def display_title(self) -> str:
        return self.title or "Untitled"

    @property
    def meta_line(self) -> str:
        """Authors followed by the date in parentheses"""
        text = self.authors
        if self.date:
            text += f" ({self.date})" if text else self.date
        return text

    def __str__(self):
        return f"{self.display_title} <{self.link or 'no link'}>"


@dataclass(frozen=True)
class ResolvedEndpoints:
    """Primary document endpoint and optional source-archive endpoint"""
    primary: str
    archive: Optional[str] = None

    @property
    def has_archive(self) -> bool:
        return bool(self.archive)


@dataclass(frozen=True)
class FetchedPayload:
    """Bytes downloaded from one endpoint"""
    data: bytes
    source_endpoint: str

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class TarMember:
    """One header record found while scanning a tar buffer"""
    name: str
    size: int
    payload_offset: int
    typeflag: bytes = b"0"

    @property
    def payload_end(self) -> int:
        return self.payload_offset + self.size

    @property
    def is_file(self) -> bool:
        # Regular file, old-style regular file, contiguous file
        return self.typeflag in (b"0", b"\x00", b"7")


@dataclass
class ExtractionResult:
    """Files written while extracting a source archive"""
    written_files: List[Path] = field(default_factory=list)
    tex_count: int = 0

    def record(self, path: Path) -> None:
        self.written_files.append(path)
        if path.suffix.lower() == ".tex":
            self.tex_count += 1

    def __len__(self) -> int:
        return len(self.written_files)


@dataclass(frozen=True)
class SavedDocument:
    path: Path
    ok = True

    def describe(self) -> str:
        return f"Saved: {self.path}"


@dataclass(frozen=True)
class SavedMarkup:
    path: Path
    ok = True

    def describe(self) -> str:
        return f"Saved: {self.path}"


@dataclass(frozen=True)
class SavedDocumentWithSource:
    path: Path
    tex_count: int
    ok = True

    def describe(self) -> str:
        return f"Saved: {self.path} (+{self.tex_count} .tex files)"


@dataclass(frozen=True)
class Failed:
    reason: str
    ok = False

    def describe(self) -> str:
        return f"Download failed: {self.reason}"


PipelineOutcome = Union[SavedDocument, SavedMarkup, SavedDocumentWithSource, Failed]


@dataclass(frozen=True)
class BranchResult:
    """Success or failure of one pipeline branch"""
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "BranchResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "BranchResult":
        return cls(error=error)
