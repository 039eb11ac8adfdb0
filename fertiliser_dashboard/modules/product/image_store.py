"""
Local stand-in for an object store: product pictures are copied under the
data directory and referenced by file:// URL.
"""
from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path
from urllib.parse import unquote, urlparse

from ...config import IMAGES_PATH

_log = logging.getLogger(__name__)

ALLOWED_SUFFIXES = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp"}


def store_image(source: str | Path, images_dir: Path | None = None) -> str:
    """
    Copy `source` into the image store and return its file:// URL.

    The stored name is prefixed with a millisecond timestamp so two uploads
    of "photo.jpg" do not overwrite each other. Raises ValueError for
    unsupported file types and OSError when the copy fails.
    """
    src = Path(source)
    if src.suffix.lower() not in ALLOWED_SUFFIXES:
        raise ValueError(f"Unsupported image type: {src.suffix or '(none)'}")
    target_dir = Path(images_dir) if images_dir is not None else IMAGES_PATH
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / f"{int(time.time() * 1000)}_{src.name.replace(' ', '_')}"
    shutil.copy2(src, target)
    _log.info("Stored product image %s", target.name)
    return target.resolve().as_uri()


def local_path(url: str | None) -> Path | None:
    """Filesystem path behind a file:// URL from store_image(); None otherwise."""
    if not url or not url.startswith("file://"):
        return None
    return Path(unquote(urlparse(url).path))
