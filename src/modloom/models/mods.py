"""Pydantic models for mods and their related resources.

This covers mod profiles and their statistics, events, dependencies, tags,
comments, team members and metadata key-value pairs.
"""

from typing import Any

from pydantic import field_validator

from .base import ModioModel, empty_object_as_none
from .files import File
from .users import User


class Tag(ModioModel):
    name: str
    date_added: int = 0


class Statistics(ModioModel):
    mod_id: int
    downloads_today: int = 0
    downloads_total: int = 0
    subscribers_total: int = 0
    date_expires: int = 0


class Mod(ModioModel):
    """A mod profile.

    Only the fields used by this library are declared; everything else the
    API returns is kept as extra data.

    Attributes:
        modfile: The primary file of the mod, or None when the mod has no file.
    """

    id: int
    game_id: int
    status: int = 1
    visible: int = 1
    submitted_by: User | None = None
    date_added: int = 0
    date_updated: int = 0
    date_live: int = 0
    name: str
    name_id: str
    summary: str = ""
    description: str | None = None
    homepage_url: str | None = None
    profile_url: str | None = None
    metadata_blob: str | None = None
    modfile: File | None = None
    tags: list[Tag] = []
    stats: Statistics | None = None

    @field_validator("modfile", "stats", "submitted_by", mode="before")
    @classmethod
    def _empty_objects(cls, v: Any) -> Any:
        return empty_object_as_none(v)


class Event(ModioModel):
    id: int
    mod_id: int
    user_id: int
    date_added: int
    event_type: str


class Dependency(ModioModel):
    mod_id: int
    date_added: int = 0


class Comment(ModioModel):
    """A comment on a mod.

    Attributes:
        reply_id: The comment this one replies to, 0 for a top level comment.
        thread_position: Position of the comment in its thread, e.g. `01.02`.
        karma: The karma of the comment.
    """

    id: int
    resource_id: int = 0
    user: User
    date_added: int = 0
    reply_id: int = 0
    thread_position: str = ""
    karma: int = 0
    content: str


class TeamMember(ModioModel):
    id: int
    user: User
    level: int
    date_added: int = 0
    position: str = ""


class MetadataKV(ModioModel):
    """One key-value pair of the metadata of a mod."""

    metakey: str
    metavalue: str
