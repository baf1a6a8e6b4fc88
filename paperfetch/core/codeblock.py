"""
Parsing and rendering of ``paper`` blocks embedded in markdown notes

A block looks like::

    ```paper
    title: Attention Is All You Need
    authors: Vaswani et al.
    date: 2017
    link: https://arxiv.org/abs/1706.03762
    ```
"""
from __future__ import annotations

import re
from dataclasses import fields
from typing import List, Optional

from .models import PaperData


PAPER_FIELDS = tuple(f.name for f in fields(PaperData))

PAPER_BLOCK_PATTERN = re.compile(
    r"^```paper[ \t]*\r?\n(?P<body>.*?)^```[ \t]*\r?$",
    re.MULTILINE | re.DOTALL,
)


def parse_paper_block(source: str) -> PaperData:
    """
    Parse the body of a paper block

    Lines without a colon are ignored and unknown keys are dropped. Only the
    first colon separates key from value, so URLs survive intact.
    """
    values = {}
    for line in (source or "").splitlines():
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip().lower()
        if key in PAPER_FIELDS:
            values[key] = value.strip()
    return PaperData(**values)


def extract_paper_blocks(markdown: str) -> List[PaperData]:
    """Parse every fenced paper block found in a note"""
    return [
        parse_paper_block(match.group("body"))
        for match in PAPER_BLOCK_PATTERN.finditer(markdown or "")
    ]


def render_paper_block(paper: Optional[PaperData] = None) -> str:
    """Render a paper block; with no argument, the empty insert template"""
    paper = paper or PaperData()
    lines = ["```paper"]
    lines.extend(f"{name}: {getattr(paper, name)}" for name in PAPER_FIELDS)
    lines.append("```")
    return "\n".join(lines)


PAPER_BLOCK_TEMPLATE = render_paper_block()
