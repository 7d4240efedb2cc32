"""Tests for foxforge.source module."""

import io
import tarfile

import pytest
import requests

from foxforge.exceptions import ExitCode
from foxforge.source import (
    DownloadError,
    ExtractionError,
    VersionNotFoundError,
    download_file,
    download_firefox_source,
    extract_archive,
    format_bytes,
    get_download_url,
    get_firefox_version,
    get_tarball_filename,
)


def _make_tarball(path, top="firefox-146.0", files=None):
    """Write a tar.xz shaped like a Firefox source archive."""
    files = files or {"README.md": "# Firefox\n", "browser/config/version.txt": "146.0\n"}
    with tarfile.open(path, "w:xz") as tar:
        for rel_path, content in files.items():
            data = content.encode()
            name = f"{top}/{rel_path}" if top else rel_path
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return path


def _mock_response(mocker, status_code=200, body=b"", headers=None):
    response = mocker.MagicMock()
    response.status_code = status_code
    response.headers = headers if headers is not None else {"content-length": str(len(body))}
    response.iter_content.return_value = [body[:4], body[4:]] if body else []
    return response


@pytest.fixture
def mock_get(mocker):
    return mocker.patch("foxforge.source.requests.get")


class TestGetDownloadUrl:
    """Tests for get_download_url function."""

    def test_release(self):
        """Test a release URL."""
        assert get_download_url("146.0") == (
            "https://archive.mozilla.org/pub/firefox/releases/146.0/source/"
            "firefox-146.0.source.tar.xz"
        )

    def test_esr_product(self):
        """Test ESR product appends the esr suffix once."""
        url = get_download_url("140.0", "firefox-esr")
        assert "/140.0esr/source/firefox-140.0esr.source.tar.xz" in url

        url = get_download_url("140.0esr", "firefox-esr")
        assert "/140.0esr/source/firefox-140.0esr.source.tar.xz" in url

    def test_beta(self):
        """Test beta versions are used as-is."""
        assert "/147.0b1/source/firefox-147.0b1.source.tar.xz" in get_download_url(
            "147.0b1", "firefox-beta"
        )

    def test_tarball_filename(self):
        """Test the cached tarball name."""
        assert get_tarball_filename("146.0") == "firefox-146.0.source.tar.xz"


class TestDownloadFile:
    """Tests for download_file function."""

    def test_success(self, mocker, mock_get, temp_dir):
        """Test content is streamed to the destination."""
        body = b"tarball-bytes"
        mock_get.return_value.__enter__.return_value = _mock_response(mocker, body=body)
        progress = []

        dest = temp_dir / "out.tar.xz"
        download_file("https://example.com/out.tar.xz", dest, lambda d, t: progress.append((d, t)))

        assert dest.read_bytes() == body
        assert not (temp_dir / "out.tar.xz.part").exists()
        assert progress[-1] == (len(body), len(body))

    def test_no_content_length(self, mocker, mock_get, temp_dir):
        """Test progress is not reported without a total."""
        mock_get.return_value.__enter__.return_value = _mock_response(
            mocker, body=b"data", headers={}
        )
        progress = mocker.MagicMock()

        download_file("https://example.com/x", temp_dir / "x", progress)

        progress.assert_not_called()
        assert (temp_dir / "x").read_bytes() == b"data"

    def test_not_found(self, mocker, mock_get, temp_dir):
        """Test 404 raises VersionNotFoundError."""
        mock_get.return_value.__enter__.return_value = _mock_response(mocker, status_code=404)

        with pytest.raises(VersionNotFoundError) as exc_info:
            download_file(get_download_url("999.0"), temp_dir / "x")

        assert exc_info.value.version == "999.0"
        assert exc_info.value.exit_code == ExitCode.DOWNLOAD_ERROR
        assert not (temp_dir / "x").exists()

    def test_http_error(self, mocker, mock_get, temp_dir):
        """Test other HTTP errors raise DownloadError."""
        response = _mock_response(mocker, status_code=500)
        error_response = mocker.MagicMock(status_code=500, reason="Server Error")
        response.raise_for_status.side_effect = requests.HTTPError(response=error_response)
        mock_get.return_value.__enter__.return_value = response

        with pytest.raises(DownloadError, match="HTTP 500: Server Error"):
            download_file("https://example.com/x", temp_dir / "x")

    def test_network_error(self, mock_get, temp_dir):
        """Test connection failures raise DownloadError and leave no files."""
        mock_get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(DownloadError) as exc_info:
            download_file("https://example.com/x", temp_dir / "x")

        assert exc_info.value.url == "https://example.com/x"
        assert list(temp_dir.iterdir()) == []


class TestExtractArchive:
    """Tests for extract_archive function."""

    def test_extracts(self, temp_dir):
        """Test files are extracted."""
        archive = _make_tarball(temp_dir / "a.tar.xz")

        extract_archive(archive, temp_dir / "out")

        assert (temp_dir / "out/firefox-146.0/README.md").read_text() == "# Firefox\n"

    def test_corrupt(self, temp_dir):
        """Test a corrupt archive raises ExtractionError."""
        archive = temp_dir / "bad.tar.xz"
        archive.write_bytes(b"not a tarball")

        with pytest.raises(ExtractionError):
            extract_archive(archive, temp_dir / "out")


class TestDownloadFirefoxSource:
    """Tests for download_firefox_source function."""

    def test_uses_cache(self, mock_get, temp_dir):
        """Test a cached tarball is extracted without downloading."""
        cache = temp_dir / "cache"
        cache.mkdir()
        _make_tarball(cache / get_tarball_filename("146.0"))
        engine = temp_dir / "engine"

        tarball = download_firefox_source("146.0", "firefox", engine, cache)

        mock_get.assert_not_called()
        assert tarball == cache / "firefox-146.0.source.tar.xz"
        assert (engine / "README.md").read_text() == "# Firefox\n"
        assert get_firefox_version(engine) == "146.0"
        assert not (temp_dir / "engine.tmp").exists()

    def test_downloads(self, mocker, mock_get, temp_dir):
        """Test a missing tarball is downloaded into the cache."""
        body = _make_tarball(temp_dir / "src.tar.xz").read_bytes()
        mock_get.return_value.__enter__.return_value = _mock_response(mocker, body=body)
        cache = temp_dir / "cache"

        download_firefox_source("146.0", "firefox", temp_dir / "engine", cache)

        assert mock_get.call_args[0][0] == get_download_url("146.0")
        assert (cache / "firefox-146.0.source.tar.xz").exists()
        assert (temp_dir / "engine/browser/config/version.txt").exists()

    def test_replaces_engine(self, mock_get, temp_dir):
        """Test an existing engine directory is replaced."""
        cache = temp_dir / "cache"
        cache.mkdir()
        _make_tarball(cache / get_tarball_filename("146.0"))
        engine = temp_dir / "engine"
        engine.mkdir()
        (engine / "stale.txt").write_text("old")

        download_firefox_source("146.0", "firefox", engine, cache)

        assert not (engine / "stale.txt").exists()
        assert (engine / "README.md").exists()

    def test_flat_archive(self, mock_get, temp_dir):
        """Test an archive without a top-level directory is used as-is."""
        cache = temp_dir / "cache"
        cache.mkdir()
        _make_tarball(cache / get_tarball_filename("146.0"), top=None)

        download_firefox_source("146.0", "firefox", temp_dir / "engine", cache)

        assert (temp_dir / "engine/README.md").exists()


class TestHelpers:
    """Tests for small helpers."""

    def test_version_missing(self, temp_dir):
        """Test a tree without version.txt has no version."""
        assert get_firefox_version(temp_dir) is None

    def test_format_bytes(self):
        """Test unit selection."""
        assert format_bytes(512) == "512.0 B"
        assert format_bytes(1536) == "1.5 KB"
        assert format_bytes(3 * 1024 ** 3) == "3.0 GB"
