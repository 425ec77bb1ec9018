"""Pydantic models for games."""

from .base import ModioModel


class TagOption(ModioModel):
    name: str
    type: str
    tags: list[str] = []
    hidden: bool = False
    locked: bool = False


class GameStatistics(ModioModel):
    game_id: int
    mods_count_total: int = 0
    mods_downloads_today: int = 0
    mods_downloads_total: int = 0
    mods_subscribers_total: int = 0
    date_expires: int = 0


class Game(ModioModel):
    id: int
    status: int = 1
    date_added: int = 0
    date_updated: int = 0
    date_live: int = 0
    ugc_name: str = "mods"
    name: str
    name_id: str
    summary: str = ""
    instructions: str | None = None
    instructions_url: str | None = None
    profile_url: str | None = None
    tag_options: list[TagOption] = []
