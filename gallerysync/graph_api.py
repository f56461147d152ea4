import base64
from typing import List, Tuple

import requests

from gallerysync.config import GRAPH_ROOT, PAGE_SIZE
from gallerysync.errors import DownloadError, ListingError, ResolutionError


def get_headers(token: str) -> dict:
    """
    Return headers for authorized requests to Microsoft Graph.
    """
    return {"Authorization": f"Bearer {token}"}


def to_share_id(url: str) -> str:
    """
    Encode a sharing URL as a Graph share id: unpadded base64url prefixed with 'u!'.
    """
    b64 = base64.b64encode(url.encode("utf-8")).decode("ascii")
    return "u!" + b64.replace("+", "-").replace("/", "_").rstrip("=")


def _error_body(resp) -> str:
    try:
        return str(resp.json())
    except ValueError:
        return resp.text


def graph_json(token: str, url: str, error_cls, params=None) -> dict:
    """
    GET a Graph endpoint and return the decoded JSON body.
    Any transport failure or non-2xx status is raised as error_cls.
    """
    try:
        resp = requests.get(url, headers=get_headers(token), params=params)
    except requests.exceptions.RequestException as e:
        raise error_cls(f"Graph request failed for {url}: {e}") from e

    if not 200 <= resp.status_code < 300:
        raise error_cls(f"Graph error {resp.status_code}: {_error_body(resp)}")

    try:
        return resp.json()
    except ValueError as e:
        raise error_cls(f"Graph returned invalid JSON for {url}") from e


def resolve_shared_folder(token: str, share_url: str) -> Tuple[str, str]:
    """
    Resolve a folder sharing link to its (driveId, itemId).
    Raises ResolutionError if the link is invalid, not permitted or deleted.
    """
    url = f"{GRAPH_ROOT}/shares/{to_share_id(share_url)}/driveItem"
    folder = graph_json(token, url, ResolutionError)

    drive_id = (folder.get("parentReference") or {}).get("driveId")
    folder_id = folder.get("id")
    if not drive_id or not folder_id:
        raise ResolutionError(f"Folder resolve failed: {folder}")
    return drive_id, folder_id


def list_folder_children(token: str, drive_id: str, item_id: str,
                         follow_next_link: bool = False) -> List[dict]:
    """
    List the children of a drive folder.
    Only the first page is read unless follow_next_link is set.
    """
    url = f"{GRAPH_ROOT}/drives/{drive_id}/items/{item_id}/children"
    data = graph_json(token, url, ListingError, params={"$top": PAGE_SIZE})
    children = list(data.get("value", []))

    next_link = data.get("@odata.nextLink")
    while follow_next_link and next_link:
        # nextLink already carries the query string
        data = graph_json(token, next_link, ListingError)
        children.extend(data.get("value", []))
        next_link = data.get("@odata.nextLink")

    return children


def download_file(download_url: str, label: str = "") -> bytes:
    """
    Fetch raw bytes from a pre-authenticated download URL.
    The URL carries its own credentials, so no Authorization header is sent.
    """
    try:
        resp = requests.get(download_url)
    except requests.exceptions.RequestException as e:
        raise DownloadError(f"Download failed for {label}: {e}") from e
    if not 200 <= resp.status_code < 300:
        raise DownloadError(f"Download failed {resp.status_code}: {label}")
    return resp.content
