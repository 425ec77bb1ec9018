from .base import ErrorDetail, ErrorResponse, ListResponse, Message, ModioModel
from .files import Download, File, FileHash, UploadPart, UploadSession
from .games import Game, GameStatistics, TagOption
from .mods import Comment, Dependency, Event, MetadataKV, Mod, Statistics, Tag, TeamMember
from .users import Avatar, Rating, Terms, User

__all__ = [
    "Avatar",
    "Comment",
    "Dependency",
    "Download",
    "ErrorDetail",
    "ErrorResponse",
    "Event",
    "File",
    "FileHash",
    "Game",
    "GameStatistics",
    "ListResponse",
    "Message",
    "MetadataKV",
    "Mod",
    "ModioModel",
    "Rating",
    "Statistics",
    "Tag",
    "TagOption",
    "TeamMember",
    "Terms",
    "UploadPart",
    "UploadSession",
    "User",
]
