"""
Content sniffing for downloaded payloads
"""
from __future__ import annotations

from enum import Enum


PDF_SIGNATURE = b"%PDF"
TEX_MARKERS = (b"\\document", b"\\begin", b"\\input")
TEX_SNIFF_LENGTH = 1024


class PayloadKind(str, Enum):
    DOCUMENT = "document"
    MARKUP = "markup"


def sniff_payload(data: bytes) -> PayloadKind:
    """Classify a payload by its leading bytes, ignoring any declared type"""
    if data[:4] == PDF_SIGNATURE:
        return PayloadKind.DOCUMENT
    return PayloadKind.MARKUP


def looks_like_tex(data: bytes) -> bool:
    """Check the head of a buffer for common LaTeX commands"""
    head = bytes(data[:TEX_SNIFF_LENGTH])
    return any(marker in head for marker in TEX_MARKERS)


def decode_text(data: bytes) -> str:
    return bytes(data).decode("utf-8", errors="replace")
