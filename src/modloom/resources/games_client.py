# modloom/resources/games_client.py
"""Client for the mod.io game endpoints.

This module provides the `GamesClient`, giving access to game profiles,
their statistics, their tag options and their media.
"""

import os
from collections.abc import Sequence

from ..constants import IMAGE_ANY, TagType
from ..exceptions import BuilderError
from ..filters import Filter
from ..log_config import logger
from ..models import Game, GameStatistics, Message, TagOption
from ..multipart import Form, Part
from ..pagination import Query
from ..routing import Routes
from .base_client import BaseResourceClient, form_fields


class GamesClient(BaseResourceClient):
    """Client for the mod.io `/games` endpoints."""

    async def get(self, game_id: int, *, show_hidden_tags: bool | None = None) -> Game:
        """Fetches a game profile.

        Args:
            game_id: The id of the game.
            show_hidden_tags: Include hidden tag options, requires the game to
                be managed by the authenticated user.

        Raises:
            NotFoundError: If the game does not exist.
        """
        logger.info(f"Fetching game {game_id}")
        return await self._api_client.request(
            Routes.get_game(game_id, show_hidden_tags), model=Game
        )

    async def stats(self, game_id: int) -> GameStatistics:
        return await self._api_client.request(
            Routes.get_game_stats(game_id), model=GameStatistics
        )

    def tags(self, game_id: int, *, show_hidden_tags: bool | None = None) -> Query[TagOption]:
        return self._api_client.query(
            Routes.get_game_tags(game_id, show_hidden_tags), TagOption
        )

    async def add_tags(
        self,
        game_id: int,
        name: str,
        kind: TagType,
        tags: Sequence[str],
        *,
        hidden: bool | None = None,
        locked: bool | None = None,
    ) -> Message:
        """Adds a tag group, or tags to an existing group. Requires a token.

        Args:
            game_id: The game to add the tags to.
            name: The name of the tag group.
            kind: Whether one (`DROPDOWN`) or many (`CHECKBOXES`) tags of the
                group can be selected.
            tags: The tags of the group.
            hidden: Hide the group from users.
            locked: Only allow game admins to apply the tags.
        """
        body = form_fields(
            {"name": name, "type": kind.value, "hidden": hidden, "locked": locked, "tags": tags}
        )
        logger.info(f"Adding tags {list(tags)} to group '{name}' of game {game_id}")
        return await self._api_client.request(
            Routes.add_game_tags(game_id), model=Message, body=body
        )

    async def delete_tags(
        self, game_id: int, name: str, tags: Sequence[str] | None = None
    ) -> None:
        """Deletes tags from a tag group, or the whole group when `tags` is None."""
        # An empty `tags[]` value removes the whole group.
        body = {"name": name, "tags[]": list(tags) if tags is not None else [""]}
        logger.info(f"Deleting tags {tags} of group '{name}' from game {game_id}")
        await self._api_client.request(Routes.delete_game_tags(game_id), body=body)

    async def rename_tag(self, game_id: int, old: str, new: str) -> Message:
        """Renames a tag across every tag group and mod of the game."""
        return await self._api_client.request(
            Routes.rename_game_tags(game_id), model=Message, body={"from": old, "to": new}
        )

    async def add_media(
        self,
        game_id: int,
        *,
        logo: str | os.PathLike | None = None,
        icon: str | os.PathLike | None = None,
        header: str | os.PathLike | None = None,
    ) -> Message:
        """Uploads new logo, icon and/or header images for a game.

        Raises:
            BuilderError: If no image is given.
        """
        images = {"logo": logo, "icon": icon, "header": header}
        if all(path is None for path in images.values()):
            raise BuilderError("At least one of 'logo', 'icon' and 'header' is required.")

        chunk_size = self._api_client.settings.file_read_chunk_size
        form = Form()
        for name, path in images.items():
            if path is not None:
                form.part(
                    name,
                    Part.file(path, f"{name}.png", chunk_size=chunk_size).mime(IMAGE_ANY),
                )
        logger.info(f"Uploading media of game {game_id}")
        return await self._api_client.request(
            Routes.add_game_media(game_id), model=Message, body=form
        )

    def list(
        self, filter: Filter | None = None, *, show_hidden_tags: bool | None = None
    ) -> Query[Game]:
        """Lists the games matching `filter`."""
        return self._api_client.query(Routes.get_games(show_hidden_tags), Game, filter)
