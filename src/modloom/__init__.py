"""modloom: An asynchronous Python client for the mod.io REST API."""

__version__ = "0.1.0"

from .auth import ApiKeyAuth, AuthMethod, Credentials, StaticTokenAuth
from .client import ModioClient
from .config import ModioSettings, get_settings
from .constants import (
    ReportResource,
    ReportType,
    TagType,
    TargetPlatform,
    TargetPortal,
    TeamLevel,
)
from .download import (
    DownloadInfo,
    Downloader,
    FileAction,
    FileObject,
    Primary,
    ResolvePolicy,
    Version,
    download_action,
)
from .exceptions import (
    APIError,
    ApiKeyRequiredError,
    AuthMethodMismatchError,
    BodyStreamError,
    BuilderError,
    ConfigurationError,
    DecodeError,
    DownloadError,
    FormConsumedError,
    InvalidHeaderError,
    ModFileNotFoundError,
    ModioError,
    ModNotFoundError,
    MultipleFilesFoundError,
    NetworkError,
    NoPrimaryFileError,
    NotFoundError,
    RateLimitError,
    TermsAcceptanceRequiredError,
    TimeoutError,
    TokenRequiredError,
    TransportError,
    UnauthorizedError,
    UploadNotStartedError,
    ValidationError,
    VersionNotFoundError,
)
from .filters import Filter, FilterField, Operator
from .log_config import configure_logging
from .models import Comment, File, Game, Message, Mod, Terms, User
from .multipart import Form, Part
from .pagination import Page, Paginator, Query
from .resources import AddFileOptions, AddModOptions, EditFileOptions, EditModOptions
from .routing import Host, ListRoute, Route, Routes
from .upload import ContentRange, MultipartUploader, byte_ranges

__all__ = [
    # Core Client
    "ModioClient",
    "ModioSettings",
    "get_settings",
    "configure_logging",
    # Auth and routing
    "ApiKeyAuth",
    "AuthMethod",
    "Credentials",
    "StaticTokenAuth",
    "Host",
    "ListRoute",
    "Route",
    "Routes",
    "ReportResource",
    "ReportType",
    "TagType",
    "TargetPlatform",
    "TargetPortal",
    "TeamLevel",
    # Queries
    "Filter",
    "FilterField",
    "Operator",
    "Page",
    "Paginator",
    "Query",
    # Transfers and write options
    "AddFileOptions",
    "AddModOptions",
    "ContentRange",
    "DownloadInfo",
    "Downloader",
    "EditFileOptions",
    "EditModOptions",
    "FileAction",
    "FileObject",
    "Form",
    "MultipartUploader",
    "Part",
    "Primary",
    "ResolvePolicy",
    "Version",
    "byte_ranges",
    "download_action",
    # Exceptions
    "APIError",
    "ApiKeyRequiredError",
    "AuthMethodMismatchError",
    "BodyStreamError",
    "BuilderError",
    "ConfigurationError",
    "DecodeError",
    "DownloadError",
    "FormConsumedError",
    "InvalidHeaderError",
    "ModFileNotFoundError",
    "ModNotFoundError",
    "ModioError",
    "MultipleFilesFoundError",
    "NetworkError",
    "NoPrimaryFileError",
    "NotFoundError",
    "RateLimitError",
    "TermsAcceptanceRequiredError",
    "TimeoutError",
    "TokenRequiredError",
    "TransportError",
    "UnauthorizedError",
    "UploadNotStartedError",
    "ValidationError",
    "VersionNotFoundError",
    # Key Models
    "Comment",
    "File",
    "Game",
    "Message",
    "Mod",
    "Terms",
    "User",
]
