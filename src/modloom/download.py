"""Downloading mod files.

Downloading happens in two independent steps. First a `DownloadAction` is
resolved to a `File` record by `DownloadResolver`; then the signed URL of
that record is fetched with a plain GET and exposed as a chunked byte stream
or written to a local file.

Typical usage:
```python
async with ModioClient(api_key="...") as client:
    info = await client.download((5, 19)).save_to_file("mod.zip")

    async with client.download((5, 19, "1.2")).chunked() as chunked:
        async for chunk in chunked:
            digest.update(chunk)
```
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

import httpx
from aiofile import async_open

from .exceptions import (
    ModFileNotFoundError,
    ModNotFoundError,
    MultipleFilesFoundError,
    NetworkError,
    NoPrimaryFileError,
    NotFoundError,
    TimeoutError,
    TransportError,
    VersionNotFoundError,
)
from .filters import DATE_ADDED, VERSION
from .log_config import logger
from .models import File, Mod
from .routing import Routes

if TYPE_CHECKING:
    from .client import ModioClient


class ResolvePolicy(Enum):
    """What to do when several files match a requested version."""

    LATEST = "latest"
    """Download the most recently added file."""
    FAIL = "fail"
    """Raise `MultipleFilesFoundError`."""


# --- Download actions ---


@dataclass(frozen=True)
class Primary:
    """Download the primary file of a mod."""

    game_id: int
    mod_id: int


@dataclass(frozen=True)
class FileAction:
    """Download a specific file of a mod."""

    game_id: int
    mod_id: int
    file_id: int


@dataclass(frozen=True)
class FileObject:
    """Download an already fetched file record."""

    file: File


@dataclass(frozen=True)
class Version:
    """Download the file of a mod with a specific version."""

    game_id: int
    mod_id: int
    version: str
    policy: ResolvePolicy = ResolvePolicy.LATEST


DownloadAction = Primary | FileAction | FileObject | Version


def download_action(value: Any) -> DownloadAction:
    """Converts a value into a `DownloadAction`.

    Accepted values:
        - a `DownloadAction`, returned unchanged,
        - a `Mod`: its primary file record, or `Primary` if it has none,
        - a `File`,
        - `(game_id, mod_id)`,
        - `(game_id, mod_id, file_id)`,
        - `(game_id, mod_id, version)`, resolved with `ResolvePolicy.LATEST`.

    Raises:
        TypeError: If the value cannot be converted.
    """
    if isinstance(value, Primary | FileAction | FileObject | Version):
        return value
    if isinstance(value, Mod):
        if value.modfile is not None:
            return FileObject(value.modfile)
        return Primary(value.game_id, value.id)
    if isinstance(value, File):
        return FileObject(value)
    if isinstance(value, tuple):
        if len(value) == 2:
            return Primary(*value)
        if len(value) == 3:
            game_id, mod_id, target = value
            if isinstance(target, str):
                return Version(game_id, mod_id, target, ResolvePolicy.LATEST)
            return FileAction(game_id, mod_id, target)
    raise TypeError(f"Cannot convert {value!r} into a download action")


@dataclass(frozen=True)
class DownloadInfo:
    """Details of a resolved download.

    Attributes:
        file_id: Id of the resolved file.
        download_url: The signed URL of the file contents.
        filesize: Size of the file in bytes.
        filesize_uncompressed: Size of the extracted archive in bytes.
        filehash: MD5 hash of the file contents.
    """

    file_id: int
    download_url: str
    filesize: int
    filesize_uncompressed: int
    filehash: str

    @classmethod
    def from_file(cls, file: File) -> "DownloadInfo":
        return cls(
            file_id=file.id,
            download_url=file.download.binary_url,
            filesize=file.filesize,
            filesize_uncompressed=file.filesize_uncompressed,
            filehash=file.filehash.md5,
        )


class DownloadResolver:
    """Resolves a `DownloadAction` to a `File` record."""

    def __init__(self, client: "ModioClient", action: DownloadAction):
        self._client = client
        self.action = action

    async def resolve(self) -> File:
        """Resolves the action.

        Returns:
            File: The file to download.

        Raises:
            ModNotFoundError: If the mod does not exist.
            NoPrimaryFileError: If the mod has no primary file.
            ModFileNotFoundError: If the requested file does not exist.
            VersionNotFoundError: If no file has the requested version.
            MultipleFilesFoundError: If several files have the requested
                version and the policy is `ResolvePolicy.FAIL`.
        """
        action = self.action
        logger.debug(f"Resolving download action {action}")
        if isinstance(action, FileObject):
            return action.file
        if isinstance(action, Primary):
            return await self._resolve_primary(action)
        if isinstance(action, FileAction):
            return await self._resolve_file(action)
        return await self._resolve_version(action)

    async def _resolve_primary(self, action: Primary) -> File:
        try:
            mod: Mod = await self._client.request(
                Routes.get_mod(action.game_id, action.mod_id), model=Mod
            )
        except NotFoundError as e:
            raise ModNotFoundError(game_id=action.game_id, mod_id=action.mod_id) from e
        if mod.modfile is None:
            raise NoPrimaryFileError(game_id=action.game_id, mod_id=action.mod_id)
        return mod.modfile

    async def _resolve_file(self, action: FileAction) -> File:
        try:
            return await self._client.request(
                Routes.get_file(action.game_id, action.mod_id, action.file_id),
                model=File,
            )
        except NotFoundError as e:
            raise ModFileNotFoundError(
                game_id=action.game_id, mod_id=action.mod_id, file_id=action.file_id
            ) from e

    async def _resolve_version(self, action: Version) -> File:
        # Two results are enough to tell a unique match from an ambiguous one.
        filter = VERSION.eq(action.version).order_by(DATE_ADDED.desc()).limit(2)
        query = self._client.query(
            Routes.get_files(action.game_id, action.mod_id), File, filter
        )
        try:
            files = await query.first_page()
        except NotFoundError as e:
            raise ModNotFoundError(game_id=action.game_id, mod_id=action.mod_id) from e

        if not files:
            raise VersionNotFoundError(
                game_id=action.game_id, mod_id=action.mod_id, version=action.version
            )
        if len(files) > 1 and action.policy is ResolvePolicy.FAIL:
            raise MultipleFilesFoundError(
                game_id=action.game_id, mod_id=action.mod_id, version=action.version
            )
        return files[0]


class ChunkedDownload:
    """An open download, iterated as chunks of bytes.

    Attributes:
        info: Details of the resolved file.
        headers: Response headers of the download.
    """

    def __init__(self, info: DownloadInfo, response: httpx.Response, chunk_size: int):
        self.info = info
        self.headers = response.headers
        self._response = response
        self._chunks = response.aiter_bytes(chunk_size)

    @property
    def content_length(self) -> int | None:
        value = self.headers.get("Content-Length")
        return int(value) if value and value.isdigit() else None

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self

    async def __anext__(self) -> bytes:
        url = self._response.request.url
        try:
            return await self._chunks.__anext__()
        except httpx.TimeoutException as e:
            logger.error(f"Download timed out: {url}")
            raise TimeoutError("Download timed out", request=self._response.request) from e
        except httpx.NetworkError as e:
            logger.error(f"Network error while downloading {url}: {e}")
            raise NetworkError(
                f"Network error for {url}: {e}", request=self._response.request
            ) from e
        except httpx.RequestError as e:
            logger.error(f"HTTP error while downloading {url}: {e}")
            raise TransportError(
                f"HTTP request error for {url}: {e}", request=self._response.request
            ) from e


class Downloader:
    """Downloads the file selected by a `DownloadAction`.

    Constructed with `ModioClient.download()`. The action is resolved once,
    on first use.
    """

    def __init__(self, client: "ModioClient", action: DownloadAction):
        self._client = client
        self._resolver = DownloadResolver(client, action)
        self._info: DownloadInfo | None = None

    async def info(self) -> DownloadInfo:
        """Resolves the action, once, and returns the download details."""
        if self._info is None:
            file = await self._resolver.resolve()
            self._info = DownloadInfo.from_file(file)
            logger.info(
                f"Resolved download to file {self._info.file_id} ({self._info.filesize} bytes)"
            )
        return self._info

    @asynccontextmanager
    async def chunked(self) -> AsyncIterator[ChunkedDownload]:
        """Opens the download as a stream of chunks.

        Yields:
            ChunkedDownload: The open download. The response is closed on exit.

        Raises:
            DownloadError: If the action cannot be resolved.
            TransportError: If the download request fails.
            APIError, RateLimitError, DecodeError: If the download URL answers
                with a non-2xx status.
        """
        info = await self.info()
        response = await self._client.stream_url(info.download_url)
        try:
            yield ChunkedDownload(info, response, self._client.settings.download_chunk_size)
        finally:
            await response.aclose()

    async def save_to_file(self, path: str | os.PathLike) -> DownloadInfo:
        """Writes the download to a local file.

        Args:
            path: The file to create or overwrite.

        Returns:
            DownloadInfo: Details of the downloaded file.
        """
        buffer_size = self._client.settings.download_buffer_size
        written = 0
        async with self.chunked() as chunked, async_open(str(path), "wb") as afp:
            buffer = bytearray()
            async for chunk in chunked:
                buffer += chunk
                if len(buffer) >= buffer_size:
                    await afp.write(bytes(buffer))
                    written += len(buffer)
                    buffer.clear()
            if buffer:
                await afp.write(bytes(buffer))
                written += len(buffer)
        logger.info(f"Saved file {chunked.info.file_id} to {path} ({written} bytes)")
        return chunked.info

    # Defined last so the name does not shadow the builtin for the methods above.
    async def bytes(self) -> bytes:
        """Reads the whole download into memory."""
        async with self.chunked() as chunked:
            return b"".join([chunk async for chunk in chunked])
