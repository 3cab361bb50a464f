"""Tests for source fetchers and fetcher selection."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from yt_dlp.utils import DownloadError

from audiosplit.config import Settings
from audiosplit.errors import InvalidInputError, SourceUnavailableError
from audiosplit.fetchers.base import fetcher_for, is_remote
from audiosplit.fetchers.local import LocalFileFetcher
from audiosplit.fetchers.ytdlp import YtDlpFetcher, classify_error

URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


class TestFetcherFor:
    def test_url_uses_ytdlp(self):
        assert isinstance(fetcher_for(URL, Settings()), YtDlpFetcher)

    def test_local_file(self, tmp_path):
        media = tmp_path / "talk.mp4"
        media.write_bytes(b"video")
        assert isinstance(fetcher_for(str(media), Settings()), LocalFileFetcher)

    @pytest.mark.parametrize("source", ["", "ftp://example.com/a.mp3", "nowhere/file.mp4"])
    def test_rejects_other_sources(self, source):
        with pytest.raises(InvalidInputError):
            fetcher_for(source, Settings())

    def test_is_remote(self):
        assert is_remote("http://example.com/v")
        assert not is_remote("https://")
        assert not is_remote("/tmp/file.mp4")


class TestClassifyError:
    @pytest.mark.parametrize(
        "message, reason",
        [
            ("ERROR: unable to download video data: HTTP Error 410: Gone", "gone"),
            ("ERROR: unable to download video data: HTTP Error 403: Forbidden", "forbidden"),
            ("ERROR: [youtube] abc: Private video. Sign in if you've been granted access", "forbidden"),
            ("ERROR: [youtube] abc: Video unavailable", "not_found"),
            ("ERROR: Unsupported URL: https://example.com", "not_found"),
            ("ERROR: Unable to download webpage: <urlopen error timed out>", "network"),
        ],
    )
    def test_reasons(self, message, reason):
        assert classify_error(message) == reason


def _fake_ydl(info: dict | None = None, error: Exception | None = None, writes: Path | None = None):
    """Patchable stand-in for yt_dlp.YoutubeDL used as a context manager."""
    instances: list[MagicMock] = []

    def factory(opts):
        ydl = MagicMock()
        ydl.opts = opts

        def extract_info(url, download=False):
            if error is not None:
                raise error
            if download and writes is not None:
                writes.write_bytes(b"audio")
            return info

        ydl.extract_info.side_effect = extract_info
        ydl.__enter__.return_value = ydl
        ydl.__exit__.return_value = False
        instances.append(ydl)
        return ydl

    factory.instances = instances
    return factory


class TestYtDlpFetcher:
    def test_fetch_downloads_to_slug(self, tmp_path):
        factory = _fake_ydl(
            info={"title": "Never Gonna Give You Up", "id": "dQw4w9WgXcQ"},
            writes=tmp_path / "never_gonna_give_you_up.mp3",
        )
        with patch("audiosplit.fetchers.ytdlp.yt_dlp.YoutubeDL", side_effect=factory):
            media = YtDlpFetcher(Settings()).fetch(URL, tmp_path)

        assert media.title == "Never Gonna Give You Up"
        assert media.slug == "never_gonna_give_you_up"
        assert media.path == tmp_path / "never_gonna_give_you_up.mp3"

        info_call, download_call = factory.instances
        assert info_call.extract_info.call_args.kwargs["download"] is False
        opts = download_call.opts
        assert opts["format"] == "bestaudio/best"
        assert opts["outtmpl"] == str(tmp_path / "never_gonna_give_you_up.%(ext)s")
        assert opts["postprocessors"][0]["key"] == "FFmpegExtractAudio"
        assert opts["postprocessors"][0]["preferredcodec"] == "mp3"
        assert "ffmpeg_location" not in opts

    def test_custom_ffmpeg_and_cookies(self, tmp_path):
        cookies = tmp_path / "cookies.txt"
        cookies.write_text("# Netscape HTTP Cookie File\n")
        settings = Settings(ffmpeg_path="/usr/local/bin/ffmpeg", cookies_file=cookies)
        factory = _fake_ydl(info={"title": "t"}, writes=tmp_path / "t.mp3")
        with patch("audiosplit.fetchers.ytdlp.yt_dlp.YoutubeDL", side_effect=factory):
            YtDlpFetcher(settings).fetch(URL, tmp_path)

        opts = factory.instances[-1].opts
        assert opts["ffmpeg_location"] == "/usr/local/bin/ffmpeg"
        assert opts["cookiefile"] == str(cookies)

    def test_missing_cookies_file_is_skipped(self, tmp_path, caplog):
        settings = Settings(cookies_file=tmp_path / "nope.txt")
        with caplog.at_level("WARNING"):
            fetcher = YtDlpFetcher(settings)
        assert "Cookies file" in caplog.text
        assert "cookiefile" not in fetcher._base_options()

    def test_download_error_translated(self, tmp_path):
        factory = _fake_ydl(error=DownloadError("ERROR: HTTP Error 403: Forbidden"))
        with patch("audiosplit.fetchers.ytdlp.yt_dlp.YoutubeDL", side_effect=factory):
            with pytest.raises(SourceUnavailableError) as exc_info:
                YtDlpFetcher(Settings()).fetch(URL, tmp_path)

        assert exc_info.value.reason == "forbidden"
        assert exc_info.value.status_code == 400
        assert str(exc_info.value) == "This video is not available for download"

    def test_network_error_is_503(self, tmp_path):
        factory = _fake_ydl(error=DownloadError("ERROR: <urlopen error timed out>"))
        with patch("audiosplit.fetchers.ytdlp.yt_dlp.YoutubeDL", side_effect=factory):
            with pytest.raises(SourceUnavailableError) as exc_info:
                YtDlpFetcher(Settings()).fetch(URL, tmp_path)
        assert exc_info.value.status_code == 503


class TestLocalFileFetcher:
    @patch("audiosplit.fetchers.local.ffutil.extract_audio")
    def test_transcodes_into_dest(self, mock_extract, tmp_path):
        media_file = tmp_path / "My Talk.mp4"
        media_file.write_bytes(b"video")
        dest = tmp_path / "job"
        dest.mkdir()

        media = LocalFileFetcher(Settings()).fetch(str(media_file), dest)

        assert media.title == "My Talk"
        assert media.slug == "my_talk"
        assert media.path == dest / "my_talk.mp3"
        mock_extract.assert_called_once()
        assert mock_extract.call_args.args[:2] == (media_file, dest / "my_talk.mp3")

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceUnavailableError) as exc_info:
            LocalFileFetcher(Settings()).fetch(str(tmp_path / "nope.mp4"), tmp_path)
        assert exc_info.value.reason == "not_found"

    @patch(
        "audiosplit.fetchers.local.ffutil.extract_audio",
        side_effect=subprocess.CalledProcessError(1, ["ffmpeg"], stderr=b"no audio"),
    )
    def test_unreadable_media(self, mock_extract, tmp_path):
        media_file = tmp_path / "broken.mp4"
        media_file.write_bytes(b"junk")
        with pytest.raises(SourceUnavailableError, match="no audio"):
            LocalFileFetcher(Settings()).fetch(str(media_file), tmp_path)


class TestLocalFileFetcherGuard:
    @patch("audiosplit.fetchers.local.ffutil.extract_audio")
    def test_refuses_to_overwrite_input(self, mock_extract, tmp_path):
        media_file = tmp_path / "song.mp3"
        media_file.write_bytes(b"original")

        with pytest.raises(InvalidInputError, match="overwrite"):
            LocalFileFetcher(Settings()).fetch(str(media_file), tmp_path)

        mock_extract.assert_not_called()
        assert media_file.read_bytes() == b"original"
