"""
Tests for content sniffing
"""
from paperfetch.core.sniffer import PayloadKind, decode_text, looks_like_tex, sniff_payload


class TestSniffPayload:
    """Test primary payload classification"""

    def test_pdf(self):
        assert sniff_payload(b"%PDF-1.4\n...") is PayloadKind.DOCUMENT

    def test_html(self):
        assert sniff_payload(b"<html><body>redirect</body></html>") is PayloadKind.MARKUP

    def test_short_and_empty(self):
        assert sniff_payload(b"%PD") is PayloadKind.MARKUP
        assert sniff_payload(b"") is PayloadKind.MARKUP

    def test_signature_must_lead(self):
        assert sniff_payload(b" %PDF-1.4") is PayloadKind.MARKUP


class TestLooksLikeTex:
    def test_markers(self):
        assert looks_like_tex(b"\\documentclass{article}")
        assert looks_like_tex(b"% comment\n\\begin{abstract}")
        assert looks_like_tex(b"\\input{sections/intro}")

    def test_plain_text(self):
        assert not looks_like_tex(b"Hello world")


def test_decode_text_replaces_invalid_bytes():
    assert decode_text(b"caf\xc3\xa9 \xff") == "caf\u00e9 \ufffd"
