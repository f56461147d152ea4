from dataclasses import dataclass, field
from typing import Dict, List, Optional

from gallerysync.auth import AuthManager
from gallerysync.config import SyncConfig
from gallerysync.errors import DownloadError
from gallerysync.local_store import (
    delete_local_file,
    ensure_dir,
    list_local_images,
    load_index,
    save_bytes,
    write_index,
)
from gallerysync.naming import RemoteImageItem, build_desired_files, select_image_items
from gallerysync.reporter import SyncReporter
from gallerysync import graph_api as gapi


@dataclass
class SyncResult:
    downloaded: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    index: List[str] = field(default_factory=list)
    index_changed: bool = False


class GallerySync:
    """
    Orchestrates one pass of the gallery sync:
     - authenticate
     - resolve the share link to a drive folder
     - list and select images
     - download missing files
     - optionally remove local files gone from SharePoint
     - write the index
    """

    def __init__(self, config: SyncConfig, reporter: Optional[SyncReporter] = None,
                 auth_manager: Optional[AuthManager] = None):
        self.config = config
        self.reporter = reporter or SyncReporter()
        self.auth_manager = auth_manager or AuthManager(config)
        self.token = None

        # filename -> remote item, in index order
        self.desired: Dict[str, RemoteImageItem] = {}
        self.ordered_names: List[str] = []

        self.result = SyncResult()

    def run(self) -> SyncResult:
        ensure_dir(self.config.gallery_dir)

        self.authenticate()
        drive_id, folder_id = self.resolve_folder()
        self.gather_items(drive_id, folder_id)
        self.download_missing()
        self.cleanup_local()
        self.write_manifest()

        self.reporter.complete(self.result)
        return self.result

    # -----------------------------
    # 1) REMOTE
    # -----------------------------

    def authenticate(self):
        self.token = self.auth_manager.authenticate()
        self.reporter.token_acquired()

    def resolve_folder(self):
        self.reporter.resolving_folder()
        return gapi.resolve_shared_folder(self.token, self.config.share_url)

    def gather_items(self, drive_id: str, folder_id: str) -> List[str]:
        """
        List the folder and build the desired filename mapping.
        """
        self.reporter.listing_children()
        children = gapi.list_folder_children(
            self.token, drive_id, folder_id,
            follow_next_link=self.config.follow_next_link,
        )
        items = select_image_items(children, self.config.max_images)
        self.reporter.items_found(len(items), self.config.max_images)

        self.desired, self.ordered_names = build_desired_files(items, self.config.allowed_exts)
        return self.ordered_names

    # -----------------------------
    # 2) LOCAL
    # -----------------------------

    def download_missing(self):
        """
        Download every desired file that isn't already on disk.
        Presence by name is the only check; existing files are never refreshed.
        """
        for file_name, item in self.desired.items():
            out_path = self.config.gallery_dir / file_name
            if out_path.exists():
                self.result.skipped.append(file_name)
                continue

            self.reporter.downloading(item.name, file_name)
            try:
                data = gapi.download_file(item.download_url, file_name)
                save_bytes(out_path, data)
            except DownloadError as e:
                if not self.config.continue_on_download_error:
                    raise
                self.reporter.download_failed(file_name, e)
                self.result.failed.append(file_name)
                continue
            self.result.downloaded.append(file_name)

    def cleanup_local(self):
        """
        Remove local images that are not in the current desired set.
        Only runs when DELETE_MISSING is enabled.
        """
        if not self.config.delete_missing:
            self.reporter.cleanup_skipped()
            return

        for file_name in list_local_images(self.config.gallery_dir):
            if file_name not in self.desired:
                self.reporter.removing(file_name)
                delete_local_file(self.config.gallery_dir / file_name)
                self.result.deleted.append(file_name)

    def write_manifest(self):
        failed = set(self.result.failed)
        index = [name for name in self.ordered_names if name not in failed]

        self.reporter.writing_index(self.config.index_file)
        previous = load_index(self.config.index_file)
        write_index(self.config.index_file, index)

        self.result.index = index
        self.result.index_changed = previous != index
