# modloom/resources/uploads_client.py
"""Client for the mod.io multipart upload session endpoints.

These are the raw endpoints; `modloom.upload.MultipartUploader` drives a
whole session on top of them.
"""

from collections.abc import AsyncIterable, Iterable
from typing import TYPE_CHECKING

from ..filters import Filter
from ..log_config import logger
from ..models import UploadPart, UploadSession
from ..multipart import StreamBody
from ..pagination import Query
from ..routing import Routes
from .base_client import BaseResourceClient

if TYPE_CHECKING:
    from ..upload import ContentRange


class UploadsClient(BaseResourceClient):
    """Client for the `/games/{game_id}/mods/{mod_id}/files/multipart` endpoints.

    All of them require a token.
    """

    def sessions(
        self, game_id: int, mod_id: int, filter: Filter | None = None
    ) -> Query[UploadSession]:
        """Lists the open upload sessions of a mod."""
        return self._api_client.query(
            Routes.get_multipart_upload_sessions(game_id, mod_id), UploadSession, filter
        )

    def parts(
        self, game_id: int, mod_id: int, upload_id: str, filter: Filter | None = None
    ) -> Query[UploadPart]:
        """Lists the parts uploaded to a session so far."""
        return self._api_client.query(
            Routes.get_multipart_upload_parts(game_id, mod_id, upload_id), UploadPart, filter
        )

    async def create(
        self, game_id: int, mod_id: int, filename: str, *, nonce: str | None = None
    ) -> UploadSession:
        """Creates an upload session.

        Args:
            game_id: The game of the mod.
            mod_id: The mod the file is uploaded to.
            filename: Name of the uploaded file, must end with `.zip`.
            nonce: Optional token (at most 64 characters) that prevents
                duplicate sessions from being created concurrently.
        """
        logger.debug(f"Creating upload session for '{filename}' on mod {mod_id}")
        return await self._api_client.request(
            Routes.create_multipart_upload_session(game_id, mod_id),
            model=UploadSession,
            body={"filename": filename, "nonce": nonce},
        )

    async def add_part(
        self,
        game_id: int,
        mod_id: int,
        upload_id: str,
        range: "ContentRange",
        source: AsyncIterable[bytes] | Iterable[bytes],
    ) -> UploadPart:
        """Uploads the bytes of `range` to a session."""
        return await self._api_client.request(
            Routes.add_multipart_upload_part(game_id, mod_id, upload_id),
            model=UploadPart,
            body=StreamBody(source),
            headers={"Content-Range": str(range), "Content-Length": str(range.length)},
        )

    async def complete(self, game_id: int, mod_id: int, upload_id: str) -> UploadSession:
        return await self._api_client.request(
            Routes.complete_multipart_upload_session(game_id, mod_id, upload_id),
            model=UploadSession,
        )

    async def delete(self, game_id: int, mod_id: int, upload_id: str) -> None:
        await self._api_client.request(
            Routes.delete_multipart_upload_session(game_id, mod_id, upload_id)
        )
