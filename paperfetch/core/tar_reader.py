"""
Minimal ustar reader over an in-memory buffer

Only the fields needed for selective extraction are decoded: the member
name, its size and the typeflag. Header checksums are not verified.
"""
from __future__ import annotations

import logging
from typing import Iterator

from .models import TarMember

logger = logging.getLogger(__name__)

BLOCK_SIZE = 512
USTAR_MAGIC = b"ustar"
MAGIC_OFFSET = 257

NAME_FIELD = slice(0, 100)
SIZE_FIELD = slice(124, 136)
TYPEFLAG_OFFSET = 156


def has_ustar_magic(data: bytes) -> bool:
    return data[MAGIC_OFFSET:MAGIC_OFFSET + len(USTAR_MAGIC)] == USTAR_MAGIC


def parse_name(header: bytes) -> str:
    raw = bytes(header[NAME_FIELD]).split(b"\x00", 1)[0]
    return raw.decode("utf-8", errors="replace")


def parse_size(header: bytes) -> int:
    """Parse the octal size field; anything unparseable counts as 0"""
    raw = bytes(header[SIZE_FIELD])
    try:
        text = raw.decode("utf-8").split("\x00", 1)[0].strip()
        size = int(text, 8)
    except (UnicodeDecodeError, ValueError):
        logger.debug("Unparseable tar size field %r, using 0", raw)
        return 0
    return max(size, 0)


def _padded(size: int) -> int:
    return (size + BLOCK_SIZE - 1) // BLOCK_SIZE * BLOCK_SIZE


def _is_zero_block(block: bytes) -> bool:
    return not any(block)


def iter_tar_members(data: bytes) -> Iterator[TarMember]:
    """
    Yield tar members one header at a time

    Scanning stops at the first all-zero block, or as soon as a header or a
    member payload would extend past the end of the buffer. A truncated
    archive is not an error: members already yielded stay valid.

    Args:
        data: Decompressed tar bytes

    Yields:
        TarMember records in archive order
    """
    view = memoryview(data)
    total = len(view)
    offset = 0

    while offset + BLOCK_SIZE <= total:
        header = view[offset:offset + BLOCK_SIZE]
        if _is_zero_block(header):
            return

        name = parse_name(header)
        size = parse_size(header)
        typeflag = bytes(header[TYPEFLAG_OFFSET:TYPEFLAG_OFFSET + 1])
        payload_offset = offset + BLOCK_SIZE

        if payload_offset + size > total:
            logger.debug("Tar member %s truncated at offset %d", name, payload_offset)
            return

        yield TarMember(
            name=name,
            size=size,
            payload_offset=payload_offset,
            typeflag=typeflag,
        )
        offset = payload_offset + _padded(size)


def member_payload(data: bytes, member: TarMember) -> bytes:
    return bytes(data[member.payload_offset:member.payload_end])
