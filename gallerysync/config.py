import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Mapping, Optional

from gallerysync.errors import ConfigurationError

# === PATH CONFIGURATION ===
GALLERY_DIR = Path("assets/gallery")
INDEX_FILE = GALLERY_DIR / "index.json"

# === MICROSOFT GRAPH ===
TOKEN_URL = "https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"
GRAPH_ROOT = "https://graph.microsoft.com/v1.0"
SCOPES = ["https://graph.microsoft.com/.default"]

# Graph returns at most this many children per page.
PAGE_SIZE = 200

# === DEFAULTS ===
DEFAULT_MAX_IMAGES = 200
DEFAULT_EXTS = "jpg,jpeg,png,webp"

REQUIRED_VARS = ("TENANT_ID", "CLIENT_ID", "CLIENT_SECRET", "SP_FOLDER_SHARE_URL")


@dataclass(frozen=True)
class SyncConfig:
    tenant_id: str
    client_id: str
    client_secret: str = field(repr=False)
    share_url: str
    delete_missing: bool = False
    max_images: int = DEFAULT_MAX_IMAGES
    allowed_exts: FrozenSet[str] = frozenset(DEFAULT_EXTS.split(","))
    gallery_dir: Path = GALLERY_DIR
    index_file: Path = INDEX_FILE
    follow_next_link: bool = False
    continue_on_download_error: bool = False


def parse_flag(value: Optional[str]) -> bool:
    """Only the literal string 'true' (any case) switches a flag on."""
    return (value or "").strip().lower() == "true"


def parse_exts(value: Optional[str]) -> FrozenSet[str]:
    raw = value if value and value.strip() else DEFAULT_EXTS
    return frozenset(e.strip().lower().lstrip(".") for e in raw.split(",") if e.strip())


def parse_max_images(value: Optional[str]) -> int:
    if value is None or not value.strip():
        return DEFAULT_MAX_IMAGES
    try:
        max_images = int(value.strip())
    except ValueError:
        raise ConfigurationError(f"MAX_IMAGES must be an integer, got {value!r}")
    if max_images < 0:
        raise ConfigurationError(f"MAX_IMAGES must not be negative, got {max_images}")
    return max_images


def load_config(environ: Optional[Mapping[str, str]] = None) -> SyncConfig:
    """
    Build the run configuration from environment variables.
    Raises ConfigurationError listing every missing required variable.
    """
    env = os.environ if environ is None else environ

    missing = [name for name in REQUIRED_VARS if not (env.get(name) or "").strip()]
    if missing:
        raise ConfigurationError(f"Missing required env vars: {', '.join(missing)}")

    gallery_dir = Path(env.get("GALLERY_DIR") or GALLERY_DIR)
    index_file = env.get("INDEX_FILE")

    return SyncConfig(
        tenant_id=env["TENANT_ID"].strip(),
        client_id=env["CLIENT_ID"].strip(),
        client_secret=env["CLIENT_SECRET"].strip(),
        share_url=env["SP_FOLDER_SHARE_URL"].strip(),
        delete_missing=parse_flag(env.get("DELETE_MISSING")),
        max_images=parse_max_images(env.get("MAX_IMAGES")),
        allowed_exts=parse_exts(env.get("INCLUDE_EXTS")),
        gallery_dir=gallery_dir,
        index_file=Path(index_file) if index_file else gallery_dir / INDEX_FILE.name,
        follow_next_link=parse_flag(env.get("FOLLOW_NEXT_LINK")),
        continue_on_download_error=parse_flag(env.get("CONTINUE_ON_DOWNLOAD_ERROR")),
    )
