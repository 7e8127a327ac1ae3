"""Shared test fixtures: an in-memory Azure Files share and storage handles bound to it."""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import pytest
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from azure.core.paging import ItemPaged
from azure.storage.fileshare import ContentSettings, DirectoryProperties, FileProperties

from azfile_store._features import Feature, FeatureSet
from azfile_store._storage import Storage

if TYPE_CHECKING:
    from collections.abc import Iterator

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
CHUNK = 4


def pytest_configure(config: object) -> None:
    """Register custom markers."""
    if isinstance(config, pytest.Config):
        config.addinivalue_line("markers", "integration: requires external services")


def service_error(code: str, status: int, cls: type[HttpResponseError] = HttpResponseError) -> HttpResponseError:
    """Build an SDK error the way the storage pipeline does: error code and status set after construction."""
    exc = cls(message=f"{code}: simulated")
    exc.error_code = code  # type: ignore[attr-defined]
    exc.status_code = status
    return exc


def not_found() -> HttpResponseError:
    return service_error("ResourceNotFound", 404, ResourceNotFoundError)


def _dir_props(name: str) -> DirectoryProperties:
    props = DirectoryProperties()
    props.name = name
    props.last_modified = NOW
    props.etag = '"0x8D0DIR"'
    props.server_encrypted = True
    return props


def _file_props(name: str, data: bytes) -> FileProperties:
    props = FileProperties()
    props.name = name
    props.size = len(data)
    props.last_modified = NOW
    props.etag = '"0x8D0FILE"'
    props.server_encrypted = True
    props.content_settings = ContentSettings(
        content_type="application/octet-stream",
        content_md5=bytearray(hashlib.md5(data).digest()),  # noqa: S324
    )
    return props


class FakeDownloader:
    """Stands in for ``StorageStreamDownloader``."""

    def __init__(self, data: bytes) -> None:
        self._data = data

    def chunks(self) -> Iterator[bytes]:
        for i in range(0, len(self._data), CHUNK):
            yield self._data[i : i + CHUNK]


class FakeShare:
    """In-memory share implementing the part of ``ShareClient`` that ``Storage`` calls.

    Every service call is recorded in ``calls`` as ``(method, path)``. Errors can
    be injected per call through ``failures``.
    """

    share_name = "share"

    def __init__(self) -> None:
        self.dirs: set[str] = {""}
        self.files: dict[str, bytes] = {}
        self.calls: list[tuple[str, str]] = []
        self.markers: list[str | None] = []
        self.page_size: int | None = None
        self.final_marker: str | None = None
        self.failures: dict[tuple[str, str], Exception] = {}
        self.file_overrides: dict[str, dict[str, Any]] = {}
        self.closed = False

    # region: setup helpers

    def mkdir(self, path: str) -> None:
        parts = path.strip("/").split("/")
        for i in range(1, len(parts) + 1):
            self.dirs.add("/".join(parts[:i]))

    def put(self, path: str, data: bytes = b"") -> None:
        parent = path.rsplit("/", 1)[0] if "/" in path else ""
        if parent:
            self.mkdir(parent)
        self.files[path] = data

    # endregion

    def get_directory_client(self, directory_path: str | None = None) -> FakeDirectoryClient:
        return FakeDirectoryClient(self, (directory_path or "").strip("/"))

    def get_file_client(self, file_path: str) -> FakeFileClient:
        return FakeFileClient(self, file_path)

    def close(self) -> None:
        self.closed = True

    def record(self, method: str, path: str) -> None:
        self.calls.append((method, path))
        failure = self.failures.get((method, path))
        if failure is not None:
            raise failure

    def children(self, directory: str, name_prefix: str | None) -> list[Any]:
        prefix = f"{directory}/" if directory else ""
        entries: list[tuple[str, Any]] = []
        for d in self.dirs:
            if d and d.startswith(prefix) and "/" not in d[len(prefix) :]:
                entries.append((d[len(prefix) :], None))
        for f, data in self.files.items():
            if f.startswith(prefix) and "/" not in f[len(prefix) :]:
                entries.append((f[len(prefix) :], data))
        if name_prefix:
            entries = [e for e in entries if e[0].startswith(name_prefix)]
        # Interleaved by name; the storage layer must regroup directories first.
        entries.sort(key=lambda e: e[0])
        return [_dir_props(name) if data is None else _file_props(name, data) for name, data in entries]


class FakeDirectoryClient:
    def __init__(self, share: FakeShare, path: str) -> None:
        self._share = share
        self.path = path

    def list_directories_and_files(
        self,
        name_starts_with: str | None = None,
        results_per_page: int | None = None,
        **kwargs: Any,
    ) -> ItemPaged[Any]:
        share = self._share

        def get_next(token: str | None) -> tuple[str | None, list[Any]]:
            share.record("list", self.path)
            share.markers.append(token)
            if self.path not in share.dirs:
                raise not_found()
            entries = share.children(self.path, name_starts_with)
            start = int(token.rsplit("-", 1)[1]) if token else 0
            size = min(results_per_page or 5000, share.page_size or 5000)
            end = start + size
            next_marker = f"marker-{end}" if end < len(entries) else share.final_marker
            return next_marker, entries[start:end]

        return ItemPaged(get_next, lambda response: response)

    def get_directory_properties(self, **kwargs: Any) -> DirectoryProperties:
        self._share.record("get_directory_properties", self.path)
        if self.path not in self._share.dirs:
            raise not_found()
        return _dir_props(self.path.rsplit("/", 1)[-1])

    def delete_directory(self, **kwargs: Any) -> None:
        self._share.record("delete_directory", self.path)
        if self.path not in self._share.dirs:
            raise not_found()
        if self._share.children(self.path, None):
            raise service_error("DirectoryNotEmpty", 409)
        self._share.dirs.discard(self.path)


class FakeFileClient:
    def __init__(self, share: FakeShare, path: str) -> None:
        self._share = share
        self.path = path

    def _data(self) -> bytes:
        if self.path not in self._share.files:
            raise not_found()
        return self._share.files[self.path]

    def get_file_properties(self, **kwargs: Any) -> FileProperties:
        self._share.record("get_file_properties", self.path)
        props = _file_props(self.path.rsplit("/", 1)[-1], self._data())
        for key, value in self._share.file_overrides.get(self.path, {}).items():
            setattr(props, key, value)
        return props

    def delete_file(self, **kwargs: Any) -> None:
        self._share.record("delete_file", self.path)
        self._data()
        del self._share.files[self.path]

    def download_file(self, offset: int | None = None, length: int | None = None, **kwargs: Any) -> FakeDownloader:
        self._share.record("download_file", self.path)
        if length is not None and offset is None:
            raise ValueError("Offset value must not be None if length is set.")
        data = self._data()
        if offset is not None and offset >= len(data):
            raise service_error("InvalidRange", 416)
        start = offset or 0
        end = start + length if length is not None else len(data)
        return FakeDownloader(data[start:end])

    def create_file(self, size: int, **kwargs: Any) -> None:
        self._share.record("create_file", self.path)
        parent = self.path.rsplit("/", 1)[0] if "/" in self.path else ""
        if parent not in self._share.dirs:
            raise service_error("ParentNotFound", 404)
        self._share.files[self.path] = b"\0" * size

    def upload_range(self, data: Any, offset: int, length: int, **kwargs: Any) -> None:
        self._share.record("upload_range", self.path)
        chunk = data.read(length)
        if len(chunk) != length:
            raise service_error("InvalidHeaderValue", 400)
        current = self._data()
        self._share.files[self.path] = current[:offset] + chunk + current[offset + length :]


@pytest.fixture
def share() -> FakeShare:
    s = FakeShare()
    s.mkdir("ws")
    return s


@pytest.fixture
def storage(share: FakeShare) -> Storage:
    """Handle rooted at ``/ws/`` with virtual directory support."""
    return Storage(share, work_dir="/ws/", features=FeatureSet({Feature.VIRTUAL_DIR}))


@pytest.fixture
def plain_storage(share: FakeShare) -> Storage:
    """Handle rooted at ``/ws/`` without virtual directory support."""
    return Storage(share, work_dir="/ws/")
