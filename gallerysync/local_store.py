import json
import re
from pathlib import Path
from typing import List

from gallerysync.errors import CleanupError, DownloadError, WriteError

# Files the cleanup pass is allowed to touch, independent of INCLUDE_EXTS.
LOCAL_IMAGE_RE = re.compile(r"\.(jpe?g|png|webp)$", re.IGNORECASE)


def ensure_dir(path: Path):
    path.mkdir(parents=True, exist_ok=True)


def list_local_images(gallery_dir: Path) -> List[str]:
    """
    Return the names of image files directly inside gallery_dir, sorted.
    """
    if not gallery_dir.exists():
        return []
    return sorted(
        p.name for p in gallery_dir.iterdir()
        if p.is_file() and LOCAL_IMAGE_RE.search(p.name)
    )


def save_bytes(path: Path, data: bytes):
    """
    Write downloaded bytes to path. A partial file is removed on failure so
    the next run does not mistake it for a finished download.
    """
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        path.unlink(missing_ok=True)
        raise DownloadError(f"Cannot write {path}: {e}") from e


def delete_local_file(path: Path):
    if not path.exists():
        return
    try:
        path.unlink()
    except OSError as e:
        raise CleanupError(f"Error deleting {path}: {e}") from e


def write_index(index_file: Path, file_names: List[str]):
    """
    Write the ordered filename list as a JSON array.
    """
    try:
        ensure_dir(index_file.parent)
        with open(index_file, "w", encoding="utf-8") as f:
            json.dump(list(file_names), f, indent=2, ensure_ascii=False)
    except (OSError, TypeError, ValueError) as e:
        raise WriteError(f"Cannot write index {index_file}: {e}") from e


def load_index(index_file: Path) -> List[str]:
    """
    Load a previously written index.
    Return empty if the file doesn't exist or isn't valid JSON; it gets rewritten anyway.
    """
    if not index_file.exists():
        return []
    try:
        with open(index_file, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        return []
