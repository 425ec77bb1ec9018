"""Route table and host selection for the mod.io API.

Every route statically declares its HTTP method, its path and the credential
kind it requires. Routes returning the paginated list envelope are
`ListRoute`s; only those can be handed to `ModioClient.query()`.
"""

import re
from dataclasses import dataclass

from .auth import AuthMethod
from .constants import DEFAULT_HOST, GAME_HOST_TEMPLATE, TEST_HOST
from .exceptions import ConfigurationError

_AUTHORITY_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9.-]*[A-Za-z0-9])?(?::\d{1,5})?$")

API_KEY = AuthMethod.API_KEY
TOKEN = AuthMethod.TOKEN


@dataclass(frozen=True)
class Host:
    """The API host requests are sent to.

    Attributes:
        authority: The host (and optional port) used for routes without a game.
        per_game: Send routes that target a game to that game's own host.
    """

    authority: str = DEFAULT_HOST
    per_game: bool = False

    @classmethod
    def default(cls) -> "Host":
        return cls(DEFAULT_HOST)

    @classmethod
    def test(cls) -> "Host":
        return cls(TEST_HOST)

    @classmethod
    def game(cls, game_id: int) -> "Host":
        return cls(GAME_HOST_TEMPLATE.format(game_id=game_id))

    @classmethod
    def dynamic(cls, fallback: str = DEFAULT_HOST) -> "Host":
        return cls(_check_authority(fallback), per_game=True)

    @classmethod
    def custom(cls, authority: str) -> "Host":
        return cls(_check_authority(authority))

    def resolve(self, game_id: int | None = None) -> str:
        if self.per_game and game_id is not None:
            return GAME_HOST_TEMPLATE.format(game_id=game_id)
        return self.authority


def _check_authority(authority: str) -> str:
    if not _AUTHORITY_RE.match(authority):
        raise ConfigurationError(f"Invalid host '{authority}'")
    return authority


@dataclass(frozen=True)
class Route:
    """A single API endpoint.

    Attributes:
        method: HTTP method.
        path: Path below `/v1`.
        auth: The credential kind required by the endpoint.
        game_id: The game the route targets, used for dynamic host selection.
        query: Fixed query parameters that belong to the route itself.
    """

    method: str
    path: str
    auth: AuthMethod
    game_id: int | None = None
    query: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class ListRoute(Route):
    """A route returning the paginated list envelope."""


def _flag(name: str, value: bool | None) -> tuple[tuple[str, str], ...]:
    if value is None:
        return ()
    return ((name, str(value).lower()),)


class Routes:
    """Factories for every mod.io v1 endpoint known to this library."""

    # --- Games ---

    @staticmethod
    def get_games(show_hidden_tags: bool | None = None) -> ListRoute:
        return ListRoute("GET", "/games", API_KEY, query=_flag("show_hidden_tags", show_hidden_tags))

    @staticmethod
    def get_game(game_id: int, show_hidden_tags: bool | None = None) -> Route:
        return Route(
            "GET",
            f"/games/{game_id}",
            API_KEY,
            game_id,
            _flag("show_hidden_tags", show_hidden_tags),
        )

    @staticmethod
    def get_game_stats(game_id: int) -> Route:
        return Route("GET", f"/games/{game_id}/stats", API_KEY, game_id)

    @staticmethod
    def get_game_tags(game_id: int, show_hidden_tags: bool | None = None) -> ListRoute:
        return ListRoute(
            "GET",
            f"/games/{game_id}/tags",
            API_KEY,
            game_id,
            _flag("show_hidden_tags", show_hidden_tags),
        )

    @staticmethod
    def add_game_tags(game_id: int) -> Route:
        return Route("POST", f"/games/{game_id}/tags", TOKEN, game_id)

    @staticmethod
    def delete_game_tags(game_id: int) -> Route:
        return Route("DELETE", f"/games/{game_id}/tags", TOKEN, game_id)

    @staticmethod
    def rename_game_tags(game_id: int) -> Route:
        return Route("PUT", f"/games/{game_id}/tags/rename", TOKEN, game_id)

    @staticmethod
    def add_game_media(game_id: int) -> Route:
        return Route("POST", f"/games/{game_id}/media", TOKEN, game_id)

    # --- Mods ---

    @staticmethod
    def get_mods(game_id: int) -> ListRoute:
        return ListRoute("GET", f"/games/{game_id}/mods", API_KEY, game_id)

    @staticmethod
    def get_mod(game_id: int, mod_id: int) -> Route:
        return Route("GET", f"/games/{game_id}/mods/{mod_id}", API_KEY, game_id)

    @staticmethod
    def add_mod(game_id: int) -> Route:
        return Route("POST", f"/games/{game_id}/mods", TOKEN, game_id)

    @staticmethod
    def edit_mod(game_id: int, mod_id: int) -> Route:
        return Route("PUT", f"/games/{game_id}/mods/{mod_id}", TOKEN, game_id)

    @staticmethod
    def delete_mod(game_id: int, mod_id: int) -> Route:
        return Route("DELETE", f"/games/{game_id}/mods/{mod_id}", TOKEN, game_id)

    @staticmethod
    def get_mods_events(game_id: int) -> ListRoute:
        return ListRoute("GET", f"/games/{game_id}/mods/events", API_KEY, game_id)

    @staticmethod
    def get_mods_stats(game_id: int) -> ListRoute:
        return ListRoute("GET", f"/games/{game_id}/mods/stats", API_KEY, game_id)

    @staticmethod
    def get_mod_events(game_id: int, mod_id: int) -> ListRoute:
        return ListRoute("GET", f"/games/{game_id}/mods/{mod_id}/events", API_KEY, game_id)

    @staticmethod
    def get_mod_stats(game_id: int, mod_id: int) -> Route:
        return Route("GET", f"/games/{game_id}/mods/{mod_id}/stats", API_KEY, game_id)

    @staticmethod
    def get_mod_team_members(game_id: int, mod_id: int) -> ListRoute:
        return ListRoute("GET", f"/games/{game_id}/mods/{mod_id}/team", API_KEY, game_id)

    @staticmethod
    def get_mod_dependencies(game_id: int, mod_id: int, recursive: bool | None = None) -> ListRoute:
        return ListRoute(
            "GET",
            f"/games/{game_id}/mods/{mod_id}/dependencies",
            API_KEY,
            game_id,
            _flag("recursive", recursive),
        )

    @staticmethod
    def add_mod_dependencies(game_id: int, mod_id: int) -> Route:
        return Route("POST", f"/games/{game_id}/mods/{mod_id}/dependencies", TOKEN, game_id)

    @staticmethod
    def delete_mod_dependencies(game_id: int, mod_id: int) -> Route:
        return Route("DELETE", f"/games/{game_id}/mods/{mod_id}/dependencies", TOKEN, game_id)

    @staticmethod
    def get_mod_metadata(game_id: int, mod_id: int) -> ListRoute:
        return ListRoute("GET", f"/games/{game_id}/mods/{mod_id}/metadatakvp", API_KEY, game_id)

    @staticmethod
    def add_mod_metadata(game_id: int, mod_id: int) -> Route:
        return Route("POST", f"/games/{game_id}/mods/{mod_id}/metadatakvp", TOKEN, game_id)

    @staticmethod
    def delete_mod_metadata(game_id: int, mod_id: int) -> Route:
        return Route("DELETE", f"/games/{game_id}/mods/{mod_id}/metadatakvp", TOKEN, game_id)

    @staticmethod
    def get_mod_tags(game_id: int, mod_id: int) -> ListRoute:
        return ListRoute("GET", f"/games/{game_id}/mods/{mod_id}/tags", API_KEY, game_id)

    @staticmethod
    def add_mod_tags(game_id: int, mod_id: int) -> Route:
        return Route("POST", f"/games/{game_id}/mods/{mod_id}/tags", TOKEN, game_id)

    @staticmethod
    def delete_mod_tags(game_id: int, mod_id: int) -> Route:
        return Route("DELETE", f"/games/{game_id}/mods/{mod_id}/tags", TOKEN, game_id)

    @staticmethod
    def add_mod_media(game_id: int, mod_id: int) -> Route:
        return Route("POST", f"/games/{game_id}/mods/{mod_id}/media", TOKEN, game_id)

    @staticmethod
    def delete_mod_media(game_id: int, mod_id: int) -> Route:
        return Route("DELETE", f"/games/{game_id}/mods/{mod_id}/media", TOKEN, game_id)

    @staticmethod
    def reorder_mod_media(game_id: int, mod_id: int) -> Route:
        return Route("PUT", f"/games/{game_id}/mods/{mod_id}/media/reorder", TOKEN, game_id)

    @staticmethod
    def rate_mod(game_id: int, mod_id: int) -> Route:
        return Route("POST", f"/games/{game_id}/mods/{mod_id}/ratings", TOKEN, game_id)

    @staticmethod
    def subscribe_to_mod(game_id: int, mod_id: int) -> Route:
        return Route("POST", f"/games/{game_id}/mods/{mod_id}/subscribe", TOKEN, game_id)

    @staticmethod
    def unsubscribe_from_mod(game_id: int, mod_id: int) -> Route:
        return Route("DELETE", f"/games/{game_id}/mods/{mod_id}/subscribe", TOKEN, game_id)

    # --- Comments ---

    @staticmethod
    def get_mod_comments(game_id: int, mod_id: int) -> ListRoute:
        return ListRoute("GET", f"/games/{game_id}/mods/{mod_id}/comments", API_KEY, game_id)

    @staticmethod
    def get_mod_comment(game_id: int, mod_id: int, comment_id: int) -> Route:
        return Route(
            "GET", f"/games/{game_id}/mods/{mod_id}/comments/{comment_id}", API_KEY, game_id
        )

    @staticmethod
    def add_mod_comment(game_id: int, mod_id: int) -> Route:
        return Route("POST", f"/games/{game_id}/mods/{mod_id}/comments", TOKEN, game_id)

    @staticmethod
    def edit_mod_comment(game_id: int, mod_id: int, comment_id: int) -> Route:
        return Route(
            "PUT", f"/games/{game_id}/mods/{mod_id}/comments/{comment_id}", TOKEN, game_id
        )

    @staticmethod
    def delete_mod_comment(game_id: int, mod_id: int, comment_id: int) -> Route:
        return Route(
            "DELETE", f"/games/{game_id}/mods/{mod_id}/comments/{comment_id}", TOKEN, game_id
        )

    @staticmethod
    def update_mod_comment_karma(game_id: int, mod_id: int, comment_id: int) -> Route:
        return Route(
            "POST",
            f"/games/{game_id}/mods/{mod_id}/comments/{comment_id}/karma",
            TOKEN,
            game_id,
        )

    # --- Files ---

    @staticmethod
    def get_files(game_id: int, mod_id: int) -> ListRoute:
        return ListRoute("GET", f"/games/{game_id}/mods/{mod_id}/files", API_KEY, game_id)

    @staticmethod
    def get_file(game_id: int, mod_id: int, file_id: int) -> Route:
        return Route("GET", f"/games/{game_id}/mods/{mod_id}/files/{file_id}", API_KEY, game_id)

    @staticmethod
    def add_file(game_id: int, mod_id: int) -> Route:
        return Route("POST", f"/games/{game_id}/mods/{mod_id}/files", TOKEN, game_id)

    @staticmethod
    def edit_file(game_id: int, mod_id: int, file_id: int) -> Route:
        return Route("PUT", f"/games/{game_id}/mods/{mod_id}/files/{file_id}", TOKEN, game_id)

    @staticmethod
    def delete_file(game_id: int, mod_id: int, file_id: int) -> Route:
        return Route("DELETE", f"/games/{game_id}/mods/{mod_id}/files/{file_id}", TOKEN, game_id)

    @staticmethod
    def manage_platform_status(game_id: int, mod_id: int, file_id: int) -> Route:
        return Route(
            "POST", f"/games/{game_id}/mods/{mod_id}/files/{file_id}/platforms", TOKEN, game_id
        )

    # --- Multipart upload sessions ---

    @staticmethod
    def create_multipart_upload_session(game_id: int, mod_id: int) -> Route:
        return Route("POST", f"/games/{game_id}/mods/{mod_id}/files/multipart", TOKEN, game_id)

    @staticmethod
    def add_multipart_upload_part(game_id: int, mod_id: int, upload_id: str) -> Route:
        return Route(
            "PUT",
            f"/games/{game_id}/mods/{mod_id}/files/multipart",
            TOKEN,
            game_id,
            (("upload_id", upload_id),),
        )

    @staticmethod
    def get_multipart_upload_parts(game_id: int, mod_id: int, upload_id: str) -> ListRoute:
        return ListRoute(
            "GET",
            f"/games/{game_id}/mods/{mod_id}/files/multipart",
            TOKEN,
            game_id,
            (("upload_id", upload_id),),
        )

    @staticmethod
    def complete_multipart_upload_session(game_id: int, mod_id: int, upload_id: str) -> Route:
        return Route(
            "POST",
            f"/games/{game_id}/mods/{mod_id}/files/multipart/complete",
            TOKEN,
            game_id,
            (("upload_id", upload_id),),
        )

    @staticmethod
    def delete_multipart_upload_session(game_id: int, mod_id: int, upload_id: str) -> Route:
        return Route(
            "DELETE",
            f"/games/{game_id}/mods/{mod_id}/files/multipart",
            TOKEN,
            game_id,
            (("upload_id", upload_id),),
        )

    @staticmethod
    def get_multipart_upload_sessions(game_id: int, mod_id: int) -> ListRoute:
        return ListRoute(
            "GET", f"/games/{game_id}/mods/{mod_id}/files/multipart/sessions", TOKEN, game_id
        )

    # --- Authenticated user ---

    @staticmethod
    def user_authenticated() -> Route:
        return Route("GET", "/me", TOKEN)

    @staticmethod
    def user_events() -> ListRoute:
        return ListRoute("GET", "/me/events", TOKEN)

    @staticmethod
    def user_files() -> ListRoute:
        return ListRoute("GET", "/me/files", TOKEN)

    @staticmethod
    def user_games() -> ListRoute:
        return ListRoute("GET", "/me/games", TOKEN)

    @staticmethod
    def user_mods() -> ListRoute:
        return ListRoute("GET", "/me/mods", TOKEN)

    @staticmethod
    def user_muted() -> ListRoute:
        return ListRoute("GET", "/me/users/muted", TOKEN)

    @staticmethod
    def user_ratings() -> ListRoute:
        return ListRoute("GET", "/me/ratings", TOKEN)

    @staticmethod
    def user_subscriptions() -> ListRoute:
        return ListRoute("GET", "/me/subscribed", TOKEN)

    @staticmethod
    def mute_user(user_id: int) -> Route:
        return Route("POST", f"/users/{user_id}/mute", TOKEN)

    @staticmethod
    def unmute_user(user_id: int) -> Route:
        return Route("DELETE", f"/users/{user_id}/mute", TOKEN)

    # --- Misc ---

    @staticmethod
    def terms() -> Route:
        return Route("GET", "/authenticate/terms", API_KEY)

    @staticmethod
    def submit_report() -> Route:
        return Route("POST", "/report", TOKEN)
