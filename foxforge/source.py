"""Firefox source download and extraction.

Contains:
- DownloadError, ExtractionError, VersionNotFoundError, EngineExistsError
- get_download_url: archive.mozilla.org URL for a source tarball
- get_tarball_filename: Cached tarball name for a version
- download_file: Stream a URL to disk with progress reporting
- extract_archive: Unpack a source tarball
- download_firefox_source: Download (or reuse the cached tarball) and extract
- get_firefox_version: Version recorded in an extracted source tree
- format_bytes: Human-readable byte counts
"""

import lzma
import shutil
import tarfile
from pathlib import Path
from typing import Callable, Optional

import requests

from foxforge.exceptions import ExitCode, ForgeError


ARCHIVE_BASE_URL = "https://archive.mozilla.org/pub/firefox/releases"
CHUNK_SIZE = 8192
REQUEST_TIMEOUT = 30

ProgressCallback = Callable[[int, int], None]


class DownloadError(ForgeError):
    """Raised when the Firefox source download fails."""

    exit_code = ExitCode.DOWNLOAD_ERROR

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.url = url

    @property
    def user_message(self) -> str:
        msg = f"Download Error: {self.message}"
        if self.url:
            msg += f"\n\nURL: {self.url}"
        msg += "\n\nTo fix this:\n"
        msg += "  1. Check your internet connection\n"
        msg += "  2. Verify the Firefox version in forge.yaml is valid\n"
        msg += '  3. Try again with "foxforge download --force"'
        return msg


class ExtractionError(DownloadError):
    """Raised when the downloaded archive cannot be extracted."""

    def __init__(self, archive_path: Path, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to extract archive: {archive_path}", cause=cause)
        self.archive_path = archive_path

    @property
    def user_message(self) -> str:
        return (
            "Extraction Error: Failed to extract Firefox source archive.\n\n"
            f"Archive: {self.archive_path}\n\n"
            "To fix this:\n"
            "  1. Delete the corrupted archive and try again\n"
            "  2. Ensure you have enough disk space"
        )


class VersionNotFoundError(DownloadError):
    """Raised when the Firefox version does not exist on the archive server."""

    def __init__(self, version: str, url: Optional[str] = None):
        super().__init__(f"Firefox version {version} not found on archive.mozilla.org", url)
        self.version = version

    @property
    def user_message(self) -> str:
        return (
            f'Download Error: Firefox version "{self.version}" was not found.\n\n'
            "To fix this:\n"
            "  1. Check the version number in forge.yaml\n"
            f"  2. Visit {ARCHIVE_BASE_URL}/ to see available versions\n"
            '  3. Update firefox.version with "foxforge config firefox.version <version>"'
        )


class EngineExistsError(DownloadError):
    """Raised when the engine directory already exists."""

    def __init__(self, engine_path: Path):
        super().__init__(f"Engine directory already exists: {engine_path}")
        self.engine_path = engine_path

    @property
    def user_message(self) -> str:
        return (
            "Download Error: Firefox source already exists.\n\n"
            f"Path: {self.engine_path}\n\n"
            "To fix this:\n"
            '  1. Use "foxforge download --force" to re-download\n'
            "  2. Or manually delete the engine/ directory"
        )


def _version_path(version: str, product: str) -> str:
    """Normalise ESR versions to the ``<n>esr`` form used on the archive."""
    is_esr = product == "firefox-esr" or "esr" in version.lower()
    if not is_esr:
        return version
    base = version[:-3] if version.lower().endswith("esr") else version
    return f"{base}esr"


def get_download_url(version: str, product: str = "firefox") -> str:
    """Get the download URL for a Firefox source tarball.

    Args:
        version: Firefox version, e.g. "146.0" or "140.0esr".
        product: Firefox product type.

    Returns:
        Full URL to the source tarball.
    """
    version_path = _version_path(version, product)
    return f"{ARCHIVE_BASE_URL}/{version_path}/source/firefox-{version_path}.source.tar.xz"


def get_tarball_filename(version: str) -> str:
    """Get the cached tarball filename for a version."""
    return f"firefox-{version}.source.tar.xz"


def download_file(
    url: str,
    dest_path: Path,
    on_progress: Optional[ProgressCallback] = None,
) -> None:
    """Download a URL to a file.

    Content is streamed into a ``.part`` file that is renamed on completion,
    so an interrupted download never looks like a cached tarball.

    Args:
        url: URL to download.
        dest_path: Destination file path.
        on_progress: Called with (downloaded, total) bytes when the server
            reports a content length.

    Raises:
        VersionNotFoundError: On HTTP 404.
        DownloadError: On any other HTTP or network failure.
    """
    partial_path = dest_path.with_name(dest_path.name + ".part")

    try:
        with requests.get(url, stream=True, timeout=REQUEST_TIMEOUT) as response:
            if response.status_code == 404:
                version = url.rsplit("/", 1)[-1].removeprefix("firefox-").removesuffix(
                    ".source.tar.xz"
                )
                raise VersionNotFoundError(version, url)
            response.raise_for_status()

            total = int(response.headers.get("content-length", 0))
            downloaded = 0
            with open(partial_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
                    downloaded += len(chunk)
                    if on_progress and total > 0:
                        on_progress(downloaded, total)
    except requests.HTTPError as e:
        partial_path.unlink(missing_ok=True)
        status = e.response.status_code if e.response is not None else "?"
        reason = e.response.reason if e.response is not None else str(e)
        raise DownloadError(f"HTTP {status}: {reason}", url, cause=e) from e
    except requests.RequestException as e:
        partial_path.unlink(missing_ok=True)
        raise DownloadError(str(e), url, cause=e) from e

    partial_path.replace(dest_path)


def extract_archive(archive_path: Path, dest_dir: Path) -> None:
    """Extract a (compressed) tar archive.

    Args:
        archive_path: Path to the archive.
        dest_dir: Directory to extract into (created if missing).

    Raises:
        ExtractionError: If the archive is corrupt or unreadable.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    try:
        with tarfile.open(archive_path, "r:*") as tar:
            if hasattr(tarfile, "data_filter"):
                tar.extractall(dest_dir, filter="data")
            else:
                tar.extractall(dest_dir)
    except (tarfile.TarError, lzma.LZMAError, EOFError) as e:
        raise ExtractionError(archive_path, cause=e) from e


def download_firefox_source(
    version: str,
    product: str,
    dest_dir: Path,
    cache_dir: Path,
    on_progress: Optional[ProgressCallback] = None,
) -> Path:
    """Download and extract the Firefox source into dest_dir.

    A tarball already in the cache is reused. The archive is extracted
    next to dest_dir first and then moved into place, unwrapping the single
    ``firefox-*`` top-level directory the source tarballs contain.

    Args:
        version: Firefox version.
        product: Firefox product type.
        dest_dir: Destination (engine) directory; replaced if it exists.
        cache_dir: Directory holding downloaded tarballs.
        on_progress: Optional download progress callback.

    Returns:
        Path to the cached tarball.
    """
    cache_dir.mkdir(parents=True, exist_ok=True)
    tarball_path = cache_dir / get_tarball_filename(version)

    if not tarball_path.exists():
        download_file(get_download_url(version, product), tarball_path, on_progress)

    temp_dir = dest_dir.with_name(dest_dir.name + ".tmp")
    shutil.rmtree(temp_dir, ignore_errors=True)
    extract_archive(tarball_path, temp_dir)

    extracted = next(
        (p for p in temp_dir.iterdir() if p.is_dir() and p.name.startswith("firefox-")),
        None,
    )

    shutil.rmtree(dest_dir, ignore_errors=True)
    if extracted is not None:
        extracted.rename(dest_dir)
        shutil.rmtree(temp_dir, ignore_errors=True)
    else:
        temp_dir.rename(dest_dir)

    return tarball_path


def get_firefox_version(engine_dir: Path) -> Optional[str]:
    """Read the Firefox version from browser/config/version.txt, if present."""
    version_file = engine_dir / "browser" / "config" / "version.txt"
    if not version_file.is_file():
        return None
    return version_file.read_text(encoding="utf-8").strip()


def format_bytes(num_bytes: float) -> str:
    """Format a byte count, e.g. ``1.5 GB``."""
    units = ["B", "KB", "MB", "GB"]
    size = float(num_bytes)
    unit = 0
    while size >= 1024 and unit < len(units) - 1:
        size /= 1024
        unit += 1
    return f"{size:.1f} {units[unit]}"
