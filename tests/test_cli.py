"""
Tests for the command line interface
"""
from pathlib import Path

import pytest

from paperfetch.core import cli
from paperfetch.core.models import Failed, SavedDocument


class _FakeDownloader:
    instances = []

    def __init__(self, settings=None, fetcher=None):
        self.settings = settings
        self.fetcher = fetcher
        self.downloads = []
        self.saved = None
        self.outcome = SavedDocument(Path("/tmp/out.pdf"))
        _FakeDownloader.instances.append(self)

    def find_saved(self, note_name, paper):
        return self.saved

    def download(self, note_name, paper):
        self.downloads.append((note_name, paper))
        return self.outcome


class _FakeFetcher:
    def __init__(self, timeout=None, user_agent=None):
        self.timeout = timeout
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True


@pytest.fixture
def fake_downloader(monkeypatch):
    _FakeDownloader.instances = []
    monkeypatch.setattr(cli, "PaperDownloader", _FakeDownloader)
    monkeypatch.setattr(cli, "PaperFetcher", _FakeFetcher)
    return _FakeDownloader


class TestCli:
    """Test CLI sub-commands"""

    def test_template(self, capsys):
        cli.main(["template"])
        out = capsys.readouterr().out
        assert out.startswith("```paper\ntitle: ")

    def test_resolve(self, capsys):
        cli.main(["resolve", "https://arxiv.org/abs/2301.00001"])
        out = capsys.readouterr().out
        assert "primary: https://arxiv.org/pdf/2301.00001" in out
        assert "archive: https://arxiv.org/e-print/2301.00001" in out

    def test_download_link(self, capsys, fake_downloader, tmp_path: Path):
        cli.main([
            "--download-path", str(tmp_path),
            "download", "https://arxiv.org/abs/1",
            "--title", "T", "--note", "N",
        ])
        downloader = fake_downloader.instances[0]
        assert downloader.settings.download_path == str(tmp_path)
        note, paper = downloader.downloads[0]
        assert note == "N"
        assert paper.title == "T"
        assert "Saved: " in capsys.readouterr().out

    def test_download_block_file(self, fake_downloader, tmp_path: Path):
        note = tmp_path / "Reading List.md"
        note.write_text(
            "```paper\ntitle: A\nlink: https://x.org/a.pdf\n```\n"
            "```paper\ntitle: B\nlink: https://x.org/b.pdf\n```\n",
            encoding="utf-8",
        )
        cli.main(["--download-path", str(tmp_path), "download", "--block", str(note)])
        downloads = fake_downloader.instances[0].downloads
        assert [(n, p.title) for n, p in downloads] == [("Reading List", "A"), ("Reading List", "B")]

    def test_already_saved(self, capsys, monkeypatch, fake_downloader, tmp_path: Path):
        monkeypatch.setattr(_FakeDownloader, "find_saved", lambda self, n, p: Path("/x/T.pdf"))
        cli.main(["--download-path", str(tmp_path), "download", "https://x.org/t.pdf",
                  "--title", "T", "--note", "N"])
        assert "Already saved: /x/T.pdf" in capsys.readouterr().out
        assert fake_downloader.instances[0].downloads == []

    def test_failed_download_exits_nonzero(self, capsys, monkeypatch, fake_downloader, tmp_path: Path):
        monkeypatch.setattr(_FakeDownloader, "download", lambda self, n, p: Failed("boom"))
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["--download-path", str(tmp_path), "download", "https://x.org/t.pdf",
                      "--note", "N"])
        assert excinfo.value.code == 1
        assert "Download failed: boom" in capsys.readouterr().err

    def test_missing_note(self, capsys, fake_downloader, tmp_path: Path):
        with pytest.raises(SystemExit):
            cli.main(["--download-path", str(tmp_path), "download", "https://x.org/t.pdf"])
        assert "--note is required" in capsys.readouterr().err

    def test_fetcher_is_closed(self, fake_downloader, tmp_path: Path):
        """The shared fetcher is closed once all downloads finish"""
        cli.main(["--download-path", str(tmp_path), "download", "https://x.org/t.pdf",
                  "--note", "N"])
        fetcher = fake_downloader.instances[0].fetcher
        assert isinstance(fetcher, _FakeFetcher)
        assert fetcher.closed
