"""
Tests for selective extraction
"""
import io
import tarfile
from pathlib import Path

from paperfetch.core.extractor import classify_member, extract_members, target_path
from paperfetch.core.models import TarMember
from paperfetch.core.tar_reader import iter_tar_members


def _tarfile_bytes(files) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w", format=tarfile.USTAR_FORMAT) as tar:
        for name, data in files:
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def _file_set(root: Path):
    return sorted(str(p.relative_to(root)) for p in root.rglob("*") if p.is_file())


class TestClassifyMember:
    """Test extension-based classification"""

    def test_sources(self):
        assert classify_member("paper.tex") == "source"
        assert classify_member("dir/refs.BBL") == "source"

    def test_images(self):
        for name in ("a.png", "b.JPG", "c.jpeg", "d.gif", "e.svg", "f.eps", "g.pdf"):
            assert classify_member(name) == "image"

    def test_other(self):
        assert classify_member("style.sty") is None
        assert classify_member("Makefile") is None
        assert classify_member("notes.tex.bak") is None


class TestTargetPath:
    """Test output path computation"""

    def test_flattens_directories(self, tmp_path: Path):
        """Only the basename of a member is kept"""
        member = TarMember(name="src/sections/intro.tex", size=10, payload_offset=512)
        assert target_path(tmp_path, member) == tmp_path / "intro.tex"

    def test_images_go_to_subdirectory(self, tmp_path: Path):
        member = TarMember(name="figures/fig1.png", size=10, payload_offset=512)
        assert target_path(tmp_path, member) == tmp_path / "images" / "fig1.png"

    def test_path_escape_is_flattened(self, tmp_path: Path):
        """Parent references cannot leave the destination"""
        member = TarMember(name="../../etc/evil.tex", size=10, payload_offset=512)
        assert target_path(tmp_path, member) == tmp_path / "evil.tex"
        member = TarMember(name="..\\..\\evil.bbl", size=10, payload_offset=512)
        assert target_path(tmp_path, member) == tmp_path / "evil.bbl"

    def test_skips_empty_and_unknown(self, tmp_path: Path):
        assert target_path(tmp_path, TarMember("empty.tex", 0, 512)) is None
        assert target_path(tmp_path, TarMember("macros.sty", 10, 512)) is None
        assert target_path(tmp_path, TarMember("figs/", 0, 512, typeflag=b"5")) is None

    def test_skips_non_regular_entries(self, tmp_path: Path):
        """Extended headers carry metadata, not file content"""
        member = TarMember("PaxHeader/paper.tex", 30, 512, typeflag=b"x")
        assert target_path(tmp_path, member) is None


class TestExtractMembers:
    """Test writing members to disk"""

    def test_writes_allowlisted_files(self, tmp_path: Path):
        """Sources at the root, figures under images/, the rest skipped"""
        tex = b"\\documentclass{article}" + b"%" * 277
        png = b"\x89PNG\r\n\x1a\n" + b"\x00" * 1192
        data = _tarfile_bytes([
            ("paper.tex", tex),
            ("fig1.png", png),
            ("paper.bbl", b"\\begin{thebibliography}"),
            ("macros.sty", b"\\def"),
            ("blank.tex", b""),
        ])

        result = extract_members(data, iter_tar_members(data), tmp_path)

        assert (tmp_path / "paper.tex").read_bytes() == tex
        assert (tmp_path / "images" / "fig1.png").read_bytes() == png
        assert (tmp_path / "paper.bbl").exists()
        assert not (tmp_path / "macros.sty").exists()
        assert not (tmp_path / "blank.tex").exists()
        assert result.tex_count == 1
        assert len(result.written_files) == 3

    def test_no_images_dir_without_images(self, tmp_path: Path):
        data = _tarfile_bytes([("paper.tex", b"\\input{x}")])
        extract_members(data, iter_tar_members(data), tmp_path)
        assert not (tmp_path / "images").exists()

    def test_idempotent(self, tmp_path: Path):
        """Extracting twice overwrites and leaves the same file set"""
        data = _tarfile_bytes([
            ("a/main.tex", b"main"),
            ("b/fig.eps", b"eps"),
        ])
        extract_members(data, iter_tar_members(data), tmp_path)
        first = _file_set(tmp_path)
        second_result = extract_members(data, iter_tar_members(data), tmp_path)

        assert _file_set(tmp_path) == first == ["images/fig.eps", "main.tex"]
        assert second_result.tex_count == 1

    def test_write_failure_skips_member(self, tmp_path: Path):
        """A member that cannot be written does not stop the others"""
        (tmp_path / "images").write_text("not a directory")
        data = _tarfile_bytes([
            ("fig.png", b"png"),
            ("paper.tex", b"tex"),
        ])

        result = extract_members(data, iter_tar_members(data), tmp_path)

        assert [p.name for p in result.written_files] == ["paper.tex"]
        assert result.tex_count == 1
