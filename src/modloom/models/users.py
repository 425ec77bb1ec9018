"""Pydantic models for users, ratings and the terms of use."""

from typing import Any

from pydantic import field_validator

from .base import ModioModel, empty_object_as_none


class Avatar(ModioModel):
    filename: str
    original: str


class User(ModioModel):
    id: int
    name_id: str
    username: str
    date_online: int = 0
    avatar: Avatar | None = None
    profile_url: str | None = None

    @field_validator("avatar", mode="before")
    @classmethod
    def _empty_avatar(cls, v: Any) -> Any:
        return empty_object_as_none(v)


class Rating(ModioModel):
    game_id: int
    mod_id: int
    rating: int
    date_added: int


class Terms(ModioModel):
    """The terms of use text and the button/link labels to display with it."""

    plaintext: str
    html: str
    buttons: dict[str, Any] = {}
    links: dict[str, Any] = {}
