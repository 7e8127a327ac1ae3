"""Azure Files storage handle: CRUD operations and the listing engine."""

from __future__ import annotations

import base64
import contextlib
import dataclasses
import functools
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, BinaryIO

from azure.core.credentials import AzureNamedKeyCredential
from azure.core.exceptions import HttpResponseError
from azure.storage.fileshare import DirectoryProperties, FileProperties, LinearRetry, ShareClient

from azfile_store._config import StorageConfig, parse_bool
from azfile_store._errors import (
    InitError,
    InvalidPair,
    ListModeInvalid,
    NotFound,
    PermissionDenied,
    StoreError,
    Unexpected,
)
from azfile_store._features import Feature, FeatureSet
from azfile_store._iowrap import CallbackReader, SizedReader, as_stream, iter_chunks
from azfile_store._iterator import ObjectIterator
from azfile_store._models import ListMode, Object, ObjectMode, StorageMeta
from azfile_store._pairs import parse_pairs
from azfile_store._path import PathTranslator, normalize_work_dir, split_prefix

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from azfile_store._iterator import ObjectPage
    from azfile_store._pairs import OperationPairs
    from azfile_store._types import WritableContent

log = logging.getLogger(__name__)

TYPE = "azfile"

_MAX_RESULTS = 200

# Requests are tried exactly once; deadlines belong to the caller.
_TRY_TIMEOUT = 720 * 60 * 60

_NOT_FOUND_CODES = frozenset({"ResourceNotFound", "ParentNotFound"})
_PERMISSION_CODES = frozenset(
    {"InsufficientAccountPermissions", "AuthorizationPermissionMismatch", "AuthorizationFailure"}
)


# region: error mapping


def format_error(exc: BaseException, *, op: str | None = None, path: str | None = None) -> StoreError:
    """Convert a service exception into an azfile_store error.

    ``StoreError`` instances are produced by this package already and are
    returned unchanged. Anything else is classified once and chained to the
    original exception through ``__cause__``.
    """
    if isinstance(exc, StoreError):
        return exc
    error = _classify_error(exc)(str(exc), op=op, path=path, backend=TYPE)
    error.__cause__ = exc
    return error


def _classify_error(exc: BaseException) -> type[StoreError]:
    if not isinstance(exc, HttpResponseError):
        return Unexpected
    code = getattr(exc, "error_code", None)
    code = str(getattr(code, "value", code) or "")
    if not code:
        return NotFound if exc.status_code == 404 else Unexpected
    if code in _NOT_FOUND_CODES:
        return NotFound
    if code in _PERMISSION_CODES:
        return PermissionDenied
    return Unexpected


# endregion


@dataclasses.dataclass
class _ObjectPageStatus:
    """Cursor of one listing. ``marker`` is opaque and only ever copied from a response."""

    prefix: str
    marker: str | None = None
    max_results: int = _MAX_RESULTS


class Storage:
    """An Azure Files share exposed as a flat object store rooted at a work directory.

    Every path argument is caller-visible and relative to ``work_dir``. The
    handle is immutable after construction and safe to share between threads;
    the iterators it returns are not.

    :param client: ``ShareClient`` for the share.
    :param work_dir: Root directory for all paths (default ``/``).
    :param name: Share name, reported by ``metadata()``.
    :param default_pairs: Per-operation option defaults, keyed by operation name.
    :param features: Enabled features.
    """

    def __init__(
        self,
        client: Any,
        *,
        work_dir: str = "/",
        name: str = "",
        default_pairs: dict[str, dict[str, object]] | None = None,
        features: FeatureSet | None = None,
    ) -> None:
        self._client = client
        self._work_dir = normalize_work_dir(work_dir)
        self._paths = PathTranslator(self._work_dir)
        self._name = name or str(getattr(client, "share_name", "") or "")
        self._default_pairs = {op: dict(pairs) for op, pairs in (default_pairs or {}).items()}
        self._features = features or FeatureSet()

    @classmethod
    def from_config(cls, config: StorageConfig) -> Storage:
        """Build a handle and its share client from a ``StorageConfig``."""
        if config.endpoint.protocol == "http":
            log.warning("Endpoint %s is plain http; shared-key requests are not encrypted.", config.endpoint.url)
        client = ShareClient(
            account_url=config.endpoint.url,
            share_name=config.name,
            credential=AzureNamedKeyCredential(config.credential.account_name, config.credential.account_key),
            retry_policy=LinearRetry(retry_total=0),
            read_timeout=_TRY_TIMEOUT,
        )
        return cls(
            client,
            work_dir=config.work_dir,
            name=config.name,
            default_pairs=config.default_pairs,
            features=config.features,
        )

    @property
    def work_dir(self) -> str:
        return self._work_dir

    @property
    def features(self) -> FeatureSet:
        return self._features

    def __repr__(self) -> str:
        return f"Storage(type={TYPE!r}, name={self._name!r}, work_dir={self._work_dir!r})"

    def close(self) -> None:
        """Close the underlying share client."""
        close = getattr(self._client, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> Storage:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # region: helpers

    @contextmanager
    def _errors(self, op: str, path: str) -> Iterator[None]:
        """Map service exceptions raised inside the block, tagging them with *op* and *path*."""
        try:
            yield
        except StoreError:
            raise
        except Exception as exc:
            raise format_error(exc, op=op, path=path) from exc

    def _parse(self, op: str, pairs: dict[str, object], path: str | None = None) -> OperationPairs:
        return parse_pairs(op, pairs, self._default_pairs.get(op), path=path)

    def _directory_client(self, abs_path: str) -> Any:
        return self._client.get_directory_client(abs_path.rstrip("/"))

    def _format_entry(self, item: Any, directory: str) -> Object:
        """Map one listing entry to an ``Object`` by entity kind."""
        abs_path = f"{directory}/{item.name}" if directory else item.name
        if isinstance(item, DirectoryProperties):
            return self._format_dir_object(abs_path)
        if isinstance(item, FileProperties):
            return self._format_file_object(item, abs_path)
        raise Unexpected(f"Unknown listing entry type {type(item).__name__}", op="list", backend=TYPE)

    def _format_dir_object(self, abs_path: str) -> Object:
        return Object(id=abs_path, path=self._paths.to_relative(abs_path), mode=ObjectMode.DIR)

    def _format_file_object(self, item: FileProperties, abs_path: str) -> Object:
        # A reported length of 0 is an empty file; None means the service omitted it.
        size = item.size
        return Object(
            id=abs_path,
            path=self._paths.to_relative(abs_path),
            mode=ObjectMode.READ,
            content_length=int(size) if size is not None else None,
        )

    def _format_properties(self, props: Any, abs_path: str, path: str) -> Object:
        """Map a properties response to a fully populated ``Object``."""
        if isinstance(props, DirectoryProperties):
            return Object(
                id=abs_path,
                path=path,
                mode=ObjectMode.DIR,
                last_modified=props.last_modified,
                etag=props.etag or None,
                server_encrypted=parse_bool(props.server_encrypted),
            )
        if isinstance(props, FileProperties):
            settings = props.content_settings
            md5 = settings.content_md5 if settings is not None else None
            return Object(
                id=abs_path,
                path=path,
                mode=ObjectMode.READ,
                content_length=props.size,
                last_modified=props.last_modified,
                etag=props.etag or None,
                content_type=(settings.content_type if settings is not None else None) or None,
                content_md5=base64.b64encode(bytes(md5)).decode("ascii") if md5 else None,
                server_encrypted=parse_bool(props.server_encrypted),
            )
        raise Unexpected(f"Unknown properties type {type(props).__name__}", op="stat", path=path, backend=TYPE)

    # endregion

    # region: create, delete, stat

    def create(self, path: str, **pairs: object) -> Object:
        """Describe an object without contacting the service.

        Directory descriptors carry a trailing separator in ``id``.

        :raises CapabilityNotSupported: For ``object_mode=DIR`` without virtual dir support.
        """
        opt = self._parse("create", pairs, path)
        abs_path = self._paths.to_absolute(path)
        if opt.is_dir:
            self._features.require(Feature.VIRTUAL_DIR, op="create", path=path)
            return Object(id=abs_path.rstrip("/") + "/", path=path, mode=ObjectMode.DIR)
        return Object(id=abs_path, path=path, mode=ObjectMode.READ, done=False)

    def delete(self, path: str, **pairs: object) -> None:
        """Delete a file, or a directory with ``object_mode=DIR``. Missing targets are not an error.

        :raises CapabilityNotSupported: For ``object_mode=DIR`` without virtual dir support.
        """
        opt = self._parse("delete", pairs, path)
        if opt.is_dir:
            self._features.require(Feature.VIRTUAL_DIR, op="delete", path=path)
        abs_path = self._paths.to_absolute(path)
        try:
            with self._errors("delete", path):
                if opt.is_dir:
                    self._directory_client(abs_path).delete_directory(**opt.sdk_kwargs())
                else:
                    self._client.get_file_client(abs_path).delete_file(**opt.sdk_kwargs())
        except NotFound:
            log.debug("delete %r: already absent", path)

    def stat(self, path: str, **pairs: object) -> Object:
        """Fetch full metadata for a file, or a directory with ``object_mode=DIR``.

        :raises NotFound: If the target does not exist.
        :raises CapabilityNotSupported: For ``object_mode=DIR`` without virtual dir support.
        """
        opt = self._parse("stat", pairs, path)
        if opt.is_dir:
            self._features.require(Feature.VIRTUAL_DIR, op="stat", path=path)
        abs_path = self._paths.to_absolute(path)
        with self._errors("stat", path):
            if opt.is_dir:
                props = self._directory_client(abs_path).get_directory_properties(**opt.sdk_kwargs())
            else:
                props = self._client.get_file_client(abs_path).get_file_properties(**opt.sdk_kwargs())
            return self._format_properties(props, abs_path, path)

    # endregion

    # region: listing

    def list(self, path: str, **pairs: object) -> ObjectIterator:
        """List objects under *path* lazily; no request is made until the first ``next()``.

        ``list_mode=ListMode.PREFIX`` (default) treats ``path`` as a name prefix
        within its parent directory. ``list_mode=ListMode.DIR`` lists the
        immediate children of the directory ``path``. Neither mode recurses.
        Within each page directories come before files.

        :raises ListModeInvalid: If the mode is not ``DIR`` or ``PREFIX``.
        :raises CapabilityNotSupported: For ``ListMode.DIR`` without virtual dir support.
        """
        opt = self._parse("list", pairs, path)
        mode = opt.list_mode or ListMode.PREFIX
        if mode is ListMode.DIR:
            self._features.require(Feature.VIRTUAL_DIR, op="list", path=path)
            next_page = self._next_object_page_by_dir
        elif mode is ListMode.PREFIX:
            next_page = self._next_object_page_by_prefix
        else:
            raise ListModeInvalid(actual=mode, op="list", path=path, backend=TYPE)

        status = _ObjectPageStatus(prefix=self._paths.to_absolute(path))
        return ObjectIterator(functools.partial(next_page, path=path, opt=opt), status)

    def _next_object_page_by_dir(self, page: ObjectPage, *, path: str, opt: OperationPairs) -> bool:
        directory = page.status.prefix.rstrip("/")
        return self._next_object_page(page, directory, None, path=path, opt=opt)

    def _next_object_page_by_prefix(self, page: ObjectPage, *, path: str, opt: OperationPairs) -> bool:
        directory, name_prefix = split_prefix(page.status.prefix)
        return self._next_object_page(page, directory, name_prefix, path=path, opt=opt)

    def _next_object_page(
        self,
        page: ObjectPage,
        directory: str,
        name_prefix: str | None,
        *,
        path: str,
        opt: OperationPairs,
    ) -> bool:
        """Fetch one segment into ``page.data``; return ``True`` when no segment follows."""
        status: _ObjectPageStatus = page.status
        log.debug("list %r: directory=%r name_prefix=%r marker=%r", path, directory, name_prefix, status.marker)
        with self._errors("list", path):
            pages = (
                self._directory_client(directory)
                .list_directories_and_files(
                    name_starts_with=name_prefix,
                    results_per_page=status.max_results,
                    **opt.sdk_kwargs(),
                )
                .by_page(continuation_token=status.marker)
            )
            items = list(next(pages, ()))
            next_marker = pages.continuation_token

        dirs: list[Object] = []
        files: list[Object] = []
        for item in items:
            obj = self._format_entry(item, directory)
            (dirs if obj.is_dir else files).append(obj)
        page.data = dirs + files

        if not next_marker:
            return True
        status.marker = next_marker
        return False

    # endregion

    # region: read and write

    def read(self, path: str, sink: BinaryIO, **pairs: object) -> int:
        """Copy a file, or the range ``[offset, offset + size)``, into *sink*.

        Without *size* the whole file (from *offset*) is downloaded. With *size* a
        ranged request is sent, which the service rejects for an empty file; that
        surfaces as ``Unexpected``.

        :returns: Number of bytes written to *sink*.
        :raises NotFound: If the file does not exist.
        """
        opt = self._parse("read", pairs, path)
        if opt.size == 0:
            return 0
        # Ranged requests fail on empty files, so offset 0 without a size downloads whole.
        offset = opt.offset or None
        if opt.size is not None and offset is None:
            offset = 0
        abs_path = self._paths.to_absolute(path)
        copied = 0
        with self._errors("read", path):
            downloader = self._client.get_file_client(abs_path).download_file(
                offset=offset, length=opt.size, **opt.sdk_kwargs()
            )
            with contextlib.closing(iter_chunks(downloader.chunks(), opt.io_callback)) as chunks:
                for chunk in chunks:
                    sink.write(chunk)
                    copied += len(chunk)
        return copied

    def write(self, path: str, source: WritableContent, size: int, **pairs: object) -> int:
        """Write *size* bytes from *source* to a file, replacing any existing content.

        The file is created at its final length, then filled with one range upload.
        Bytes-like sources shorter than *size* are rejected before any request. A
        stream that ends early fails the upload after the file was already
        recreated, leaving *size* zero bytes in place of the old content.

        :returns: *size*.
        :raises InvalidPair: If *size* is negative or exceeds a bytes-like *source*.
        """
        opt = self._parse("write", pairs, path)
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise InvalidPair(pair="size", value=size, op="write", path=path)
        if isinstance(source, (bytes, bytearray, memoryview)):
            available = memoryview(source).nbytes
            if available < size:
                msg = f"Source holds {available} bytes, fewer than size {size}"
                raise InvalidPair(msg, pair="size", value=size, op="write", path=path)
        abs_path = self._paths.to_absolute(path)
        file_client = self._client.get_file_client(abs_path)
        with self._errors("write", path):
            file_client.create_file(size, **opt.sdk_kwargs())
            if size:
                stream = as_stream(source)
                if opt.io_callback is not None:
                    stream = CallbackReader(stream, opt.io_callback)
                with SizedReader(stream, size) as body:
                    file_client.upload_range(body, offset=0, length=size, **opt.sdk_kwargs())
        return size

    # endregion

    def metadata(self, **pairs: object) -> StorageMeta:
        """Return static metadata about this handle. No request is made."""
        self._parse("metadata", pairs)
        return StorageMeta(work_dir=self._work_dir, name=self._name)


def _redact(pairs: dict[str, object]) -> dict[str, object]:
    return {key: "***" if key == "credential" else value for key, value in pairs.items()}


def new_storager(**pairs: object) -> Storage:
    """Create a storage handle from keyword options.

    Accepted options: ``endpoint``, ``credential``, ``name``, ``work_dir``,
    ``default_pairs``, ``enable_virtual_dir``. No request is made.

    :raises InitError: If any option is missing, unknown or malformed.
    """
    try:
        storage = Storage.from_config(StorageConfig.from_dict(pairs))
    except Exception as exc:
        err = format_error(exc, op="new_storager")
        raise InitError(err=err, op="new_storager", pairs=_redact(pairs), backend=TYPE) from err
    log.info("Created %r", storage)
    return storage
