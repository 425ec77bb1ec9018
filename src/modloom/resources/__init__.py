"""Exposes the resource client classes."""

from .base_client import BaseResourceClient
from .comments_client import CommentsClient
from .files_client import AddFileOptions, EditFileOptions, FilesClient
from .games_client import GamesClient
from .me_client import MeClient
from .mods_client import AddModOptions, EditModOptions, ModsClient
from .reports_client import ReportsClient
from .uploads_client import UploadsClient

__all__ = [
    "AddFileOptions",
    "AddModOptions",
    "BaseResourceClient",
    "CommentsClient",
    "EditFileOptions",
    "EditModOptions",
    "FilesClient",
    "GamesClient",
    "MeClient",
    "ModsClient",
    "ReportsClient",
    "UploadsClient",
]
