"""Uploading large mod files in multiple parts.

A multipart upload session lives on the server until it is completed or
explicitly aborted. Parts are sent with a `Content-Range` header; every part
except the last must be exactly `MULTIPART_FILE_PART_SIZE` bytes.

Typical usage:
```python
uploader = client.upload(game_id, mod_id, "modfile.zip")
await uploader.start()
await uploader.upload_file("modfile.zip")
await uploader.complete()
file = await uploader.add_file(AddFileOptions(version="1.0", active=True))
```
"""

import os
from collections.abc import AsyncIterable, Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .constants import MULTIPART_FILE_PART_SIZE
from .exceptions import UploadNotStartedError
from .log_config import logger
from .models import File, UploadPart, UploadSession
from .multipart import read_file_chunks
from .resources.files_client import AddFileOptions

if TYPE_CHECKING:
    from .client import ModioClient


@dataclass(frozen=True)
class ContentRange:
    """An inclusive byte range of an upload part.

    Attributes:
        start: Position of the first byte of the part.
        end: Position of the last byte of the part.
        total: Size of the complete file.
    """

    start: int
    end: int
    total: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def __str__(self) -> str:
        return f"bytes {self.start}-{self.end}/{self.total}"


def byte_ranges(
    length: int, chunk_size: int = MULTIPART_FILE_PART_SIZE
) -> Iterator[tuple[int, int]]:
    """Splits `length` bytes into inclusive `(start, end)` ranges.

    Every range is `chunk_size` bytes long except the last, which holds the
    remainder. A length of 0 yields nothing.

    Example:
        >>> list(byte_ranges(14, 5))
        [(0, 4), (5, 9), (10, 13)]
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    full, remainder = divmod(length, chunk_size)
    for i in range(full):
        start = i * chunk_size
        yield start, start + chunk_size - 1
    if remainder > 0:
        start = full * chunk_size
        yield start, start + remainder - 1


class MultipartUploader:
    """Drives one multipart upload session of a mod.

    Constructed with `ModioClient.upload()` for a new session, or with an
    `upload_id` to continue an existing one.

    Attributes:
        game_id: The game of the mod.
        mod_id: The mod the file is uploaded to.
        filename: The file name the session is created with.
        upload_id: The id of the session, once started.
    """

    def __init__(
        self,
        client: "ModioClient",
        game_id: int,
        mod_id: int,
        filename: str | None = None,
        *,
        nonce: str | None = None,
        upload_id: str | None = None,
    ):
        self._client = client
        self.game_id = game_id
        self.mod_id = mod_id
        self.filename = filename
        self.nonce = nonce
        self.upload_id = upload_id

    def _require_session(self) -> str:
        if self.upload_id is None:
            raise UploadNotStartedError(
                "The multipart upload session has not been started."
            )
        return self.upload_id

    async def start(self) -> UploadSession:
        """Creates the upload session on the server."""
        if self.filename is None:
            raise UploadNotStartedError("A filename is required to start a session.")
        session = await self._client.uploads.create(
            self.game_id, self.mod_id, self.filename, nonce=self.nonce
        )
        self.upload_id = session.upload_id
        logger.info(
            f"Started upload session {session.upload_id} for mod {self.mod_id} "
            f"of game {self.game_id}"
        )
        return session

    async def add_part(
        self,
        range: ContentRange,
        source: AsyncIterable[bytes] | Iterable[bytes],
    ) -> UploadPart:
        """Uploads one part of the file.

        Args:
            range: The byte range the part covers.
            source: The bytes of the part, exactly `range.length` of them.
        """
        upload_id = self._require_session()
        logger.debug(f"Uploading part {range} of session {upload_id}")
        return await self._client.uploads.add_part(
            self.game_id, self.mod_id, upload_id, range, source
        )

    async def parts(self) -> list[UploadPart]:
        """Lists the parts the server has received so far."""
        upload_id = self._require_session()
        return await self._client.uploads.parts(self.game_id, self.mod_id, upload_id).collect()

    async def complete(self) -> UploadSession:
        """Marks the session as complete; the server then assembles the file."""
        upload_id = self._require_session()
        session = await self._client.uploads.complete(self.game_id, self.mod_id, upload_id)
        logger.info(f"Completed upload session {upload_id}")
        return session

    async def abort(self) -> None:
        """Deletes the session and the parts uploaded so far."""
        upload_id = self._require_session()
        await self._client.uploads.delete(self.game_id, self.mod_id, upload_id)
        logger.info(f"Aborted upload session {upload_id}")

    async def add_file(self, options: AddFileOptions | None = None) -> File:
        """Adds the completed upload as a new file of the mod."""
        upload_id = self._require_session()
        return await self._client.files.add(
            self.game_id, self.mod_id, options, upload_id=upload_id
        )

    async def upload_file(
        self, path: str | os.PathLike, chunk_size: int = MULTIPART_FILE_PART_SIZE
    ) -> list[UploadPart]:
        """Uploads a local file part by part.

        The session must be started; it is left open for `complete()`.

        Args:
            path: The file to upload.
            chunk_size: The part size, `MULTIPART_FILE_PART_SIZE` unless the
                file is uploaded to a server with other requirements.

        Returns:
            list[UploadPart]: The parts as acknowledged by the server.
        """
        self._require_session()
        total = Path(path).stat().st_size
        read_size = self._client.settings.file_read_chunk_size
        parts: list[UploadPart] = []
        for start, end in byte_ranges(total, chunk_size):
            content_range = ContentRange(start, end, total)
            source = read_file_chunks(
                path, read_size, offset=start, length=content_range.length
            )
            parts.append(await self.add_part(content_range, source))
        logger.info(f"Uploaded {len(parts)} part(s) of {path} ({total} bytes)")
        return parts
