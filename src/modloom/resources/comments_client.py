# modloom/resources/comments_client.py
"""Client for the comments of mods."""

from ..filters import Filter
from ..log_config import logger
from ..models import Comment
from ..pagination import Query
from ..routing import Routes
from .base_client import BaseResourceClient


class CommentsClient(BaseResourceClient):
    """Client for the `/games/{game_id}/mods/{mod_id}/comments` endpoints.

    Reading comments requires an API key; writing them requires a token.
    """

    async def get(self, game_id: int, mod_id: int, comment_id: int) -> Comment:
        """Fetches a comment.

        Raises:
            NotFoundError: If the mod or the comment does not exist.
        """
        return await self._api_client.request(
            Routes.get_mod_comment(game_id, mod_id, comment_id), model=Comment
        )

    async def add(
        self, game_id: int, mod_id: int, content: str, *, reply_id: int | None = None
    ) -> Comment:
        """Adds a comment to a mod, optionally as a reply to another comment."""
        logger.info(f"Adding comment to mod {mod_id} of game {game_id}")
        return await self._api_client.request(
            Routes.add_mod_comment(game_id, mod_id),
            model=Comment,
            body={"content": content, "reply_id": reply_id},
        )

    async def edit(self, game_id: int, mod_id: int, comment_id: int, content: str) -> Comment:
        return await self._api_client.request(
            Routes.edit_mod_comment(game_id, mod_id, comment_id),
            model=Comment,
            body={"content": content},
        )

    async def delete(self, game_id: int, mod_id: int, comment_id: int) -> None:
        logger.info(f"Deleting comment {comment_id} of mod {mod_id}")
        await self._api_client.request(Routes.delete_mod_comment(game_id, mod_id, comment_id))

    async def karma(
        self, game_id: int, mod_id: int, comment_id: int, *, positive: bool = True
    ) -> Comment:
        """Gives a comment positive or negative karma and returns the updated comment."""
        return await self._api_client.request(
            Routes.update_mod_comment_karma(game_id, mod_id, comment_id),
            model=Comment,
            body={"karma": "1" if positive else "-1"},
        )

    def list(self, game_id: int, mod_id: int, filter: Filter | None = None) -> Query[Comment]:
        """Lists the comments of a mod matching `filter`."""
        return self._api_client.query(Routes.get_mod_comments(game_id, mod_id), Comment, filter)
