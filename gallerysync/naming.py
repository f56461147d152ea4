import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

import icu

# Matches a trailing ".ext" on a display name.
NAME_EXT_RE = re.compile(r"\.([A-Za-z0-9]+)$")

# Checked in order: "image/jpeg" must map to jpeg, not jpg.
MIME_EXTS = [
    ("jpeg", "jpeg"),
    ("jpg", "jpg"),
    ("png", "png"),
    ("webp", "webp"),
]


@dataclass(frozen=True)
class RemoteImageItem:
    id: str
    name: str
    mime_type: str
    download_url: str
    created: str = ""
    last_modified: str = ""

    @classmethod
    def from_drive_item(cls, item: dict) -> "RemoteImageItem":
        file_facet = item.get("file") or {}
        return cls(
            id=item.get("id") or "",
            name=item.get("name") or "",
            mime_type=file_facet.get("mimeType") or "",
            download_url=item.get("@microsoft.graph.downloadUrl") or "",
            created=item.get("createdDateTime") or "",
            last_modified=item.get("lastModifiedDateTime") or "",
        )


def _name_collator():
    # ICU root collation; digit runs compare by value.
    collator = icu.Collator.createInstance(icu.Locale.getRoot())
    collator.setAttribute(icu.UCollAttribute.NUMERIC_COLLATION, icu.UCollAttributeValue.ON)
    return collator


NAME_COLLATOR = _name_collator()


def natural_sort_key(name: str):
    """
    Locale-aware sort key with numeric collation, so "img2" comes before
    "img10" and "Éclair" sorts with the e's. The raw name breaks ties.
    """
    return NAME_COLLATOR.getSortKey(name), name


def is_image(item: dict) -> bool:
    mime_type = (item.get("file") or {}).get("mimeType") or ""
    return mime_type.startswith("image/")


def select_image_items(children: Iterable[dict], max_items: int) -> List[RemoteImageItem]:
    """
    Turn a raw children listing into the canonical list of syncable images:
    image entries only, each with an id and a download URL, sorted by name
    and cut to max_items.
    """
    items = [RemoteImageItem.from_drive_item(c) for c in children if is_image(c)]
    items = [it for it in items if it.id and it.download_url]
    items.sort(key=lambda it: natural_sort_key(it.name))
    return items[:max_items]


def extension_for(name: str, mime_type: str, allowed_exts) -> str:
    """
    Pick the local file extension for an item.
    Returns "" when neither the name nor the mime type gives one.
    """
    m = NAME_EXT_RE.search(name or "")
    ext = m.group(1).lower() if m else ""
    if ext and ext in allowed_exts:
        return ext

    mt = (mime_type or "").lower()
    for needle, mime_ext in MIME_EXTS:
        if needle in mt:
            return mime_ext
    return ""


def local_filename(item: RemoteImageItem, ext: str) -> str:
    return f"{item.id}.{ext}"


def build_desired_files(items: Iterable[RemoteImageItem],
                        allowed_exts) -> Tuple[Dict[str, RemoteImageItem], List[str]]:
    """
    Map stable local filenames ({id}.{ext}) to their remote items.
    Items without a usable extension are skipped.
    Returns (desired, ordered_names); both follow the order of items.
    """
    desired: Dict[str, RemoteImageItem] = {}
    ordered_names: List[str] = []

    for it in items:
        ext = extension_for(it.name, it.mime_type, allowed_exts)
        if not ext:
            continue
        file_name = local_filename(it, ext)
        if file_name in desired:
            continue
        desired[file_name] = it
        ordered_names.append(file_name)

    return desired, ordered_names
