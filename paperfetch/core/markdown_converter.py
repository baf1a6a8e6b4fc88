"""
HTML to Markdown conversion for pages served instead of a PDF
"""
import re

from markdownify import MarkdownConverter


class PageConverter(MarkdownConverter):
    """Markdown converter that drops script and style contents"""

    def convert_script(self, el, text, *args, **kwargs):
        return ""

    def convert_style(self, el, text, *args, **kwargs):
        return ""


def html_to_markdown(text: str) -> str:
    """
    Convert an HTML page to Markdown

    Args:
        text: HTML source

    Returns:
        Markdown string
    """
    markdown = PageConverter(heading_style="atx").convert(text or "")
    markdown = re.sub(r"\n{3,}", "\n\n", markdown)
    return markdown.strip() + "\n"
