# modloom/resources/files_client.py
"""Client for the mod.io modfile endpoints.

This module provides the `FilesClient` and the option models used to add and
edit files. New files are sent as a streamed multipart form, either with the
file contents or with the id of a completed multipart upload session.
"""

import json
import os
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel

from ..constants import OCTET_STREAM, TargetPlatform
from ..exceptions import BuilderError
from ..filters import Filter
from ..log_config import logger
from ..models import File
from ..multipart import Form, Part
from ..pagination import Query
from ..routing import Routes
from .base_client import BaseResourceClient, form_fields, form_value


class EditFileOptions(BaseModel):
    """Editable details of a modfile. Unset fields are left unchanged."""

    active: bool | None = None
    changelog: str | None = None
    metadata_blob: str | None = None
    version: str | None = None


class AddFileOptions(EditFileOptions):
    """Details of a new modfile.

    Attributes:
        active: Make the file the primary file of the mod.
        changelog: Changes in this release.
        filehash: MD5 of the file, checked by the server after the upload.
        metadata_blob: Metadata interpreted by the game.
        version: Release version of the file.
    """

    filehash: str | None = None


_TEXT_FIELDS = ("active", "changelog", "metadata_blob", "version")
_INPUT_JSON_FIELDS = ("active", "changelog", "filehash", "metadata_blob", "version")


class FilesClient(BaseResourceClient):
    """Client for the mod.io `/games/{game_id}/mods/{mod_id}/files` endpoints."""

    async def get(self, game_id: int, mod_id: int, file_id: int) -> File:
        """Fetches a modfile.

        Raises:
            NotFoundError: If the mod or the file does not exist.
        """
        logger.info(f"Fetching file {file_id} of mod {mod_id}")
        return await self._api_client.request(
            Routes.get_file(game_id, mod_id, file_id), model=File
        )

    async def add(
        self,
        game_id: int,
        mod_id: int,
        options: AddFileOptions | None = None,
        *,
        file: str | os.PathLike | None = None,
        filename: str = "modfile.zip",
        upload_id: str | None = None,
    ) -> File:
        """Adds a file to a mod. Requires a token.

        Exactly one of `file` and `upload_id` must be given.

        Args:
            game_id: The game of the mod.
            mod_id: The mod to add the file to.
            options: Details of the file.
            file: A local file, streamed as the `filedata` field.
            filename: File name sent when `file` has no base name.
            upload_id: The id of a completed multipart upload session.

        Raises:
            BuilderError: If neither or both of `file` and `upload_id` are given.
        """
        if (file is None) == (upload_id is None):
            raise BuilderError("Exactly one of 'file' and 'upload_id' is required.")
        fields = (options or AddFileOptions()).model_dump(exclude_none=True)

        form = Form()
        if upload_id is not None:
            form.text("upload_id", upload_id)
        else:
            chunk_size = self._api_client.settings.file_read_chunk_size
            form.part(
                "filedata",
                Part.file(file, filename, chunk_size=chunk_size).mime(OCTET_STREAM),
            )
        for name in _TEXT_FIELDS:
            if name in fields:
                form.text(name, form_value(fields[name]))

        # The file hash is only ever sent inside input_json.
        input_json: dict[str, Any] = {"upload_id": upload_id} if upload_id is not None else {}
        input_json.update((name, fields[name]) for name in _INPUT_JSON_FIELDS if name in fields)
        form.part(
            "input_json",
            Part.bytes(json.dumps(input_json, separators=(",", ":")).encode("utf-8")),
        )

        logger.info(f"Adding file to mod {mod_id} of game {game_id}")
        return await self._api_client.request(
            Routes.add_file(game_id, mod_id), model=File, body=form
        )

    async def edit(
        self, game_id: int, mod_id: int, file_id: int, options: EditFileOptions
    ) -> File:
        """Edits the details of a modfile. Requires a token."""
        return await self._api_client.request(
            Routes.edit_file(game_id, mod_id, file_id), model=File, body=form_fields(options)
        )

    async def manage_platforms(
        self,
        game_id: int,
        mod_id: int,
        file_id: int,
        *,
        approved: Sequence[TargetPlatform] = (),
        denied: Sequence[TargetPlatform] = (),
    ) -> File:
        """Approves or denies a modfile for platforms. Requires a token.

        Only game moderators may approve or deny files; the updated file is
        returned.
        """
        body = form_fields(
            {
                "approved": [p.value for p in approved] or None,
                "denied": [p.value for p in denied] or None,
            }
        )
        logger.info(f"Updating platform status of file {file_id}: {body}")
        return await self._api_client.request(
            Routes.manage_platform_status(game_id, mod_id, file_id), model=File, body=body
        )

    async def delete(self, game_id: int, mod_id: int, file_id: int) -> None:
        """Deletes a modfile. Requires a token."""
        logger.info(f"Deleting file {file_id} of mod {mod_id}")
        await self._api_client.request(Routes.delete_file(game_id, mod_id, file_id))

    def list(self, game_id: int, mod_id: int, filter: Filter | None = None) -> Query[File]:
        """Lists the files of a mod matching `filter`."""
        return self._api_client.query(Routes.get_files(game_id, mod_id), File, filter)
