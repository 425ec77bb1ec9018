# modloom/resources/mods_client.py
"""Client for the mod.io mod endpoints.

This module provides the `ModsClient` for mod profiles, subscriptions,
events, dependencies, statistics, tags, metadata, ratings, team members and
media, together with the option models used to add and edit mods.
"""

import json
import os
from collections.abc import Mapping, Sequence

from pydantic import BaseModel

from ..constants import IMAGE_ANY, OCTET_STREAM
from ..exceptions import BuilderError
from ..filters import Filter
from ..log_config import logger
from ..models import Dependency, Event, Message, MetadataKV, Mod, Statistics, Tag, TeamMember
from ..multipart import Form, Part
from ..pagination import Query
from ..routing import Routes
from .base_client import BaseResourceClient, form_fields, form_value


class EditModOptions(BaseModel):
    """Editable details of a mod profile. Unset fields are left unchanged.

    Attributes:
        status: Status of the mod (1 accepted, 3 deleted), for game admins.
        visible: 1 to make the mod public, 0 to hide it.
        stock: Maximum number of subscribers, for mods sold in limited stock.
        maturity_option: Bit field of mature content flags.
        community_options: Bit field of enabled community features.
        credit_options: Bit field of credit options.
        tags: Replaces the tags of the mod.
    """

    status: int | None = None
    visible: int | None = None
    name: str | None = None
    name_id: str | None = None
    summary: str | None = None
    description: str | None = None
    homepage_url: str | None = None
    stock: int | None = None
    maturity_option: int | None = None
    community_options: int | None = None
    credit_options: int | None = None
    metadata_blob: str | None = None
    tags: list[str] | None = None


class AddModOptions(BaseModel):
    """Details of a new mod. `name` and `summary` are required."""

    name: str
    summary: str
    visible: int | None = None
    name_id: str | None = None
    description: str | None = None
    homepage_url: str | None = None
    stock: int | None = None
    maturity_option: int | None = None
    community_options: int | None = None
    credit_options: int | None = None
    metadata_blob: str | None = None
    tags: list[str] | None = None


def metadata_fields(metadata: Mapping[str, Sequence[str]], *, keys_only: bool) -> list[str]:
    """Flattens metadata to the `key:value` entries of `metadata[]`.

    Keys are sorted. A key without values is sent on its own when `keys_only`
    is true, which deletes every value of that key.
    """
    entries: list[str] = []
    for key in sorted(metadata):
        values = metadata[key]
        if not values and keys_only:
            entries.append(key)
        entries.extend(f"{key}:{value}" for value in values)
    return entries


def _media_fields(
    images: Sequence[str], youtube: Sequence[str], sketchfab: Sequence[str]
) -> dict[str, list[str]]:
    return form_fields(
        {"images": images or None, "youtube": youtube or None, "sketchfab": sketchfab or None}
    )


class ModsClient(BaseResourceClient):
    """Client for the mod.io `/games/{game_id}/mods` endpoints."""

    async def get(self, game_id: int, mod_id: int) -> Mod:
        """Fetches a mod profile.

        Raises:
            NotFoundError: If the game or the mod does not exist.
        """
        logger.info(f"Fetching mod {mod_id} of game {game_id}")
        return await self._api_client.request(Routes.get_mod(game_id, mod_id), model=Mod)

    async def add(
        self, game_id: int, options: AddModOptions, logo: str | os.PathLike
    ) -> Mod:
        """Adds a mod to a game. Requires a token.

        Args:
            game_id: The game to add the mod to.
            options: Details of the mod.
            logo: Local image file used as the logo of the mod.
        """
        fields = options.model_dump(exclude_none=True)
        chunk_size = self._api_client.settings.file_read_chunk_size

        form = Form()
        form.text("name", fields.pop("name"))
        form.text("summary", fields.pop("summary"))
        form.part("logo", Part.file(logo, "logo.png", chunk_size=chunk_size).mime(IMAGE_ANY))
        tags = fields.pop("tags", [])
        for name, value in fields.items():
            form.text(name, form_value(value))
        for tag in tags:
            form.text("tags[]", tag)
        form.part(
            "input_json",
            Part.bytes(
                json.dumps(
                    options.model_dump(exclude_none=True), separators=(",", ":")
                ).encode("utf-8")
            ),
        )

        logger.info(f"Adding mod '{options.name}' to game {game_id}")
        return await self._api_client.request(Routes.add_mod(game_id), model=Mod, body=form)

    async def edit(self, game_id: int, mod_id: int, options: EditModOptions) -> Mod:
        """Edits a mod profile. Requires a token."""
        return await self._api_client.request(
            Routes.edit_mod(game_id, mod_id), model=Mod, body=form_fields(options)
        )

    async def delete(self, game_id: int, mod_id: int) -> None:
        """Deletes a mod profile. Requires a token."""
        logger.info(f"Deleting mod {mod_id} of game {game_id}")
        await self._api_client.request(Routes.delete_mod(game_id, mod_id))

    async def subscribe(self, game_id: int, mod_id: int) -> Mod:
        """Subscribes the authenticated user to a mod and returns the mod."""
        return await self._api_client.request(
            Routes.subscribe_to_mod(game_id, mod_id), model=Mod
        )

    async def unsubscribe(self, game_id: int, mod_id: int) -> None:
        await self._api_client.request(Routes.unsubscribe_from_mod(game_id, mod_id))

    async def rate(self, game_id: int, mod_id: int, rating: int) -> Message:
        """Rates a mod: 1 is positive, -1 negative and 0 resets the rating.

        Raises:
            BuilderError: If `rating` is not -1, 0 or 1.
        """
        if rating not in (-1, 0, 1):
            raise BuilderError(f"Invalid rating {rating}, expected -1, 0 or 1.")
        return await self._api_client.request(
            Routes.rate_mod(game_id, mod_id), model=Message, body={"rating": str(rating)}
        )

    def events(
        self, game_id: int, mod_id: int | None = None, filter: Filter | None = None
    ) -> Query[Event]:
        """Lists the events of one mod, or of every mod of the game."""
        route = (
            Routes.get_mods_events(game_id)
            if mod_id is None
            else Routes.get_mod_events(game_id, mod_id)
        )
        return self._api_client.query(route, Event, filter)

    def dependencies(
        self,
        game_id: int,
        mod_id: int,
        *,
        recursive: bool | None = None,
        filter: Filter | None = None,
    ) -> Query[Dependency]:
        return self._api_client.query(
            Routes.get_mod_dependencies(game_id, mod_id, recursive), Dependency, filter
        )

    async def add_dependencies(
        self,
        game_id: int,
        mod_id: int,
        dependencies: Sequence[int],
        *,
        replace: bool | None = None,
    ) -> Message:
        """Adds dependencies to a mod.

        Args:
            game_id: The game of the mod.
            mod_id: The mod that depends on `dependencies`.
            dependencies: Ids of the mods required by the mod.
            replace: Replace the existing dependencies instead of adding to them.
        """
        body = form_fields({"dependencies": dependencies, "sync": replace})
        return await self._api_client.request(
            Routes.add_mod_dependencies(game_id, mod_id), model=Message, body=body
        )

    async def delete_dependencies(
        self, game_id: int, mod_id: int, dependencies: Sequence[int]
    ) -> None:
        await self._api_client.request(
            Routes.delete_mod_dependencies(game_id, mod_id),
            body=form_fields({"dependencies": dependencies}),
        )

    def tags(self, game_id: int, mod_id: int, filter: Filter | None = None) -> Query[Tag]:
        return self._api_client.query(Routes.get_mod_tags(game_id, mod_id), Tag, filter)

    async def add_tags(self, game_id: int, mod_id: int, tags: Sequence[str]) -> Message:
        return await self._api_client.request(
            Routes.add_mod_tags(game_id, mod_id), model=Message, body=form_fields({"tags": tags})
        )

    async def delete_tags(self, game_id: int, mod_id: int, tags: Sequence[str]) -> None:
        await self._api_client.request(
            Routes.delete_mod_tags(game_id, mod_id), body=form_fields({"tags": tags})
        )

    async def metadata(self, game_id: int, mod_id: int) -> dict[str, list[str]]:
        """Fetches every metadata key-value pair of a mod, grouped by key.

        A key can hold several values; they are returned in server order.
        """
        pairs = await self._api_client.query(
            Routes.get_mod_metadata(game_id, mod_id), MetadataKV
        ).collect()
        metadata: dict[str, list[str]] = {}
        for pair in pairs:
            metadata.setdefault(pair.metakey, []).append(pair.metavalue)
        return metadata

    async def add_metadata(
        self, game_id: int, mod_id: int, metadata: Mapping[str, Sequence[str]]
    ) -> Message:
        """Adds metadata values to a mod. Requires a token."""
        body = {"metadata[]": metadata_fields(metadata, keys_only=False)}
        return await self._api_client.request(
            Routes.add_mod_metadata(game_id, mod_id), model=Message, body=body
        )

    async def delete_metadata(
        self, game_id: int, mod_id: int, metadata: Mapping[str, Sequence[str]]
    ) -> None:
        """Deletes metadata of a mod. A key mapped to no values is deleted entirely."""
        body = {"metadata[]": metadata_fields(metadata, keys_only=True)}
        await self._api_client.request(Routes.delete_mod_metadata(game_id, mod_id), body=body)

    def team(
        self, game_id: int, mod_id: int, filter: Filter | None = None
    ) -> Query[TeamMember]:
        """Lists the team members of a mod."""
        return self._api_client.query(
            Routes.get_mod_team_members(game_id, mod_id), TeamMember, filter
        )

    async def add_media(
        self,
        game_id: int,
        mod_id: int,
        *,
        logo: str | os.PathLike | None = None,
        images: Sequence[str | os.PathLike] = (),
        images_zip: str | os.PathLike | None = None,
        youtube: Sequence[str] = (),
        sketchfab: Sequence[str] = (),
        replace: bool | None = None,
    ) -> Message:
        """Uploads images and links media to a mod. Requires a token.

        Args:
            game_id: The game of the mod.
            mod_id: The mod to add the media to.
            logo: Local image file used as the new logo.
            images: Local image files added to the gallery.
            images_zip: A local zip archive of gallery images.
            youtube: YouTube links.
            sketchfab: Sketchfab links.
            replace: Replace the existing gallery instead of adding to it.
        """
        chunk_size = self._api_client.settings.file_read_chunk_size
        form = Form()
        if replace is not None:
            form.text("sync", form_value(replace))
        if logo is not None:
            form.part(
                "logo", Part.file(logo, "logo.png", chunk_size=chunk_size).mime(IMAGE_ANY)
            )
        for i, image in enumerate(images):
            form.part(
                f"image{i}",
                Part.file(image, f"image{i}.png", chunk_size=chunk_size).mime(IMAGE_ANY),
            )
        if images_zip is not None:
            form.part(
                "images",
                Part.file(images_zip, "images.zip", chunk_size=chunk_size).mime(OCTET_STREAM),
            )
        for link in youtube:
            form.text("youtube[]", link)
        for link in sketchfab:
            form.text("sketchfab[]", link)

        logger.info(f"Uploading media of mod {mod_id}")
        return await self._api_client.request(
            Routes.add_mod_media(game_id, mod_id), model=Message, body=form
        )

    async def delete_media(
        self,
        game_id: int,
        mod_id: int,
        *,
        images: Sequence[str] = (),
        youtube: Sequence[str] = (),
        sketchfab: Sequence[str] = (),
    ) -> None:
        """Removes gallery images (by file name) and media links from a mod."""
        body = _media_fields(images, youtube, sketchfab)
        await self._api_client.request(Routes.delete_mod_media(game_id, mod_id), body=body)

    async def reorder_media(
        self,
        game_id: int,
        mod_id: int,
        *,
        images: Sequence[str] = (),
        youtube: Sequence[str] = (),
        sketchfab: Sequence[str] = (),
    ) -> None:
        """Reorders the gallery. Every existing item of a reordered kind must be listed."""
        body = _media_fields(images, youtube, sketchfab)
        await self._api_client.request(Routes.reorder_mod_media(game_id, mod_id), body=body)

    async def stats(self, game_id: int, mod_id: int) -> Statistics:
        return await self._api_client.request(
            Routes.get_mod_stats(game_id, mod_id), model=Statistics
        )

    def all_stats(self, game_id: int, filter: Filter | None = None) -> Query[Statistics]:
        """Lists the statistics of every mod of the game."""
        return self._api_client.query(Routes.get_mods_stats(game_id), Statistics, filter)

    def list(self, game_id: int, filter: Filter | None = None) -> Query[Mod]:
        """Lists the mods of a game matching `filter`."""
        return self._api_client.query(Routes.get_mods(game_id), Mod, filter)
