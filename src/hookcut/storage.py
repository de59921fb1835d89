"""Moving bytes in and out of the worker.

download_file fetches a source clip over HTTP(S) with requests, or
copies it when the URL is a file:// URI or a plain local path.
LocalBlobStore stands in for bucket storage: uploads are copied under
a root directory and addressed by a public base URL.
"""

import logging
import shutil
from pathlib import Path
from urllib.parse import unquote, urlparse

import requests

from .errors import DownloadError, UploadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1 << 20


def download_file(url: str, dest: str | Path, timeout: float = 60.0) -> Path:
    """Fetch `url` into `dest` and return the destination path.

    Raises:
        DownloadError: Non-2xx response, network failure, or missing file.
    """
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    logger.info("   📥 Downloading: %s", url[:80])

    parsed = urlparse(url)
    if parsed.scheme in ("http", "https"):
        try:
            with requests.get(url, stream=True, timeout=timeout) as response:
                response.raise_for_status()
                with open(dest, "wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        f.write(chunk)
        except requests.RequestException as exc:
            raise DownloadError(f"Failed to download {url}: {exc}") from exc
    else:
        source = Path(unquote(parsed.path)) if parsed.scheme == "file" else Path(url)
        if not source.is_file():
            raise DownloadError(f"Failed to download {url}: no such file")
        shutil.copyfile(source, dest)

    logger.info("   ✓ Downloaded: %s (%d bytes)", dest, dest.stat().st_size)
    return dest


class LocalBlobStore:
    """Directory-backed object store with public URLs."""

    def __init__(self, root: str | Path, public_base_url: str | None = None):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None

    def _target(self, key: str) -> Path:
        """Resolve `key` under the root, refusing keys that escape it."""
        root = self.root.resolve()
        target = (root / key).resolve()
        if root not in target.parents:
            raise UploadError(f"Storage key escapes the storage root: {key!r}")
        return target

    def url_for(self, key: str) -> str:
        target = self._target(key)
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return target.as_uri()

    def upload(self, path: str | Path, key: str) -> str:
        """Store `path` under `key` (overwriting) and return its public URL.

        Raises:
            UploadError: Key outside the root, source missing, or copy failed.
        """
        target = self._target(key)
        logger.info("   📤 Uploading to %s", target)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(path, target)
        except OSError as exc:
            raise UploadError(f"Upload failed: {exc}") from exc
        url = self.url_for(key)
        logger.info("   ✓ Uploaded to: %s", url)
        return url
