# modloom/resources/me_client.py
"""Client for the endpoints of the authenticated user.

Every endpoint here acts on behalf of a user and requires a token, including
muting and unmuting other users.
"""

from ..filters import Filter
from ..log_config import logger
from ..models import Event, File, Game, Mod, Rating, User
from ..pagination import Query
from ..routing import Routes
from .base_client import BaseResourceClient


class MeClient(BaseResourceClient):
    """Client for the mod.io `/me` endpoints."""

    async def get(self) -> User:
        """Fetches the authenticated user."""
        return await self._api_client.request(Routes.user_authenticated(), model=User)

    def subscriptions(self, filter: Filter | None = None) -> Query[Mod]:
        """Lists the mods the user is subscribed to."""
        return self._api_client.query(Routes.user_subscriptions(), Mod, filter)

    def games(self, filter: Filter | None = None) -> Query[Game]:
        """Lists the games the user added or is a team member of."""
        return self._api_client.query(Routes.user_games(), Game, filter)

    def mods(self, filter: Filter | None = None) -> Query[Mod]:
        """Lists the mods the user added or is a team member of."""
        return self._api_client.query(Routes.user_mods(), Mod, filter)

    def files(self, filter: Filter | None = None) -> Query[File]:
        return self._api_client.query(Routes.user_files(), File, filter)

    def events(self, filter: Filter | None = None) -> Query[Event]:
        return self._api_client.query(Routes.user_events(), Event, filter)

    def ratings(self, filter: Filter | None = None) -> Query[Rating]:
        return self._api_client.query(Routes.user_ratings(), Rating, filter)

    def muted(self, filter: Filter | None = None) -> Query[User]:
        """Lists the users the authenticated user has muted."""
        return self._api_client.query(Routes.user_muted(), User, filter)

    async def mute_user(self, user_id: int) -> None:
        """Mutes a user, hiding their content from the authenticated user."""
        logger.info(f"Muting user {user_id}")
        await self._api_client.request(Routes.mute_user(user_id))

    async def unmute_user(self, user_id: int) -> None:
        logger.info(f"Unmuting user {user_id}")
        await self._api_client.request(Routes.unmute_user(user_id))
