from pathlib import Path


class SyncReporter:
    """
    Receives progress events from GallerySync. Every hook is a no-op here,
    so this class doubles as the silent reporter.
    """

    def token_acquired(self):
        pass

    def resolving_folder(self):
        pass

    def listing_children(self):
        pass

    def items_found(self, count: int, max_images: int):
        pass

    def downloading(self, name: str, file_name: str):
        pass

    def download_failed(self, file_name: str, error: Exception):
        pass

    def removing(self, file_name: str):
        pass

    def cleanup_skipped(self):
        pass

    def writing_index(self, index_file: Path):
        pass

    def complete(self, result):
        pass


class ConsoleReporter(SyncReporter):
    """Prints progress to stdout."""

    def token_acquired(self):
        print("Token acquired")

    def resolving_folder(self):
        print("Resolving SharePoint folder from share link...")

    def listing_children(self):
        print("Listing folder children...")

    def items_found(self, count, max_images):
        print(f"Found {count} image(s) (max {max_images})")

    def downloading(self, name, file_name):
        print(f"Download {name} -> {file_name}")

    def download_failed(self, file_name, error):
        print(f"Skipping {file_name}: {error}")

    def removing(self, file_name):
        print(f"Remove local file not in SharePoint: {file_name}")

    def cleanup_skipped(self):
        print("DELETE_MISSING is false, local cleanup skipped")

    def writing_index(self, index_file):
        print(f"Writing {index_file}")

    def complete(self, result):
        print(
            f"\nSync complete: {len(result.downloaded)} downloaded, "
            f"{len(result.skipped)} already present, {len(result.deleted)} removed"
        )
        if result.index_changed:
            print("Index updated")
        else:
            print("Index unchanged")
