from pathlib import Path

import pytest

from gallerysync.config import SyncConfig
from gallerysync.reporter import SyncReporter


class FakeResponse:
    def __init__(self, *, json_data=None, status_code=200, content_bytes: bytes = b"", text=""):
        self._json_data = json_data
        self.status_code = status_code
        self.content = content_bytes
        self.text = text

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON body")
        return self._json_data


class RecordingReporter(SyncReporter):
    def __init__(self):
        self.events = []

    def token_acquired(self):
        self.events.append(("token_acquired",))

    def items_found(self, count, max_images):
        self.events.append(("items_found", count, max_images))

    def downloading(self, name, file_name):
        self.events.append(("downloading", file_name))

    def download_failed(self, file_name, error):
        self.events.append(("download_failed", file_name))

    def removing(self, file_name):
        self.events.append(("removing", file_name))

    def cleanup_skipped(self):
        self.events.append(("cleanup_skipped",))

    def complete(self, result):
        self.events.append(("complete",))

    def names(self, event):
        return [e[1] for e in self.events if e[0] == event]


class FakeAuthManager:
    def __init__(self, token="tok-123"):
        self.token = token
        self.calls = 0

    def authenticate(self):
        self.calls += 1
        return self.token


def drive_item(item_id, name, mime_type="image/jpeg", download_url=None):
    item = {
        "id": item_id,
        "name": name,
        "file": {"mimeType": mime_type},
        "createdDateTime": "2024-01-01T00:00:00Z",
        "lastModifiedDateTime": "2024-01-02T00:00:00Z",
    }
    item["@microsoft.graph.downloadUrl"] = (
        download_url if download_url is not None else f"https://dl.example/{item_id}"
    )
    return item


@pytest.fixture
def gallery_dir(tmp_path: Path) -> Path:
    d = tmp_path / "gallery"
    d.mkdir()
    return d


@pytest.fixture
def config_factory(gallery_dir):
    def _factory(**overrides):
        values = dict(
            tenant_id="contoso.onmicrosoft.com",
            client_id="client-1",
            client_secret="secret-1",
            share_url="https://contoso.sharepoint.com/:f:/s/team/EabcDEF",
            gallery_dir=gallery_dir,
            index_file=gallery_dir / "index.json",
        )
        values.update(overrides)
        return SyncConfig(**values)

    return _factory


@pytest.fixture
def reporter():
    return RecordingReporter()
