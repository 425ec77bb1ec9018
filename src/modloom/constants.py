"""Constants used throughout the modloom library.

This module defines the mod.io hosts, API version, header names, default
client settings and the enumerations accepted by mod.io headers and forms.
"""

from enum import Enum, IntEnum

# Hosts
DEFAULT_HOST = "api.mod.io"
TEST_HOST = "api.test.mod.io"
GAME_HOST_TEMPLATE = "g-{game_id}.modapi.io"
API_VERSION: int = 1

# Headers
HDR_X_MODIO_PLATFORM = "X-Modio-Platform"
HDR_X_MODIO_PORTAL = "X-Modio-Portal"
FORM_URLENCODED = "application/x-www-form-urlencoded"
OCTET_STREAM = "application/octet-stream"
IMAGE_ANY = "image/*"

# Default settings
DEFAULT_USER_AGENT = "modloom/0.1.0"
DEFAULT_TIMEOUT: float = 30.0
DEFAULT_MAX_REDIRECTS: int = 10
DEFAULT_DOWNLOAD_CHUNK_SIZE: int = 64 * 1024
DEFAULT_DOWNLOAD_BUFFER_SIZE: int = 512 * 512
DEFAULT_FILE_READ_CHUNK_SIZE: int = 64 * 1024

# Required size (50MB) of upload parts except the last part.
MULTIPART_FILE_PART_SIZE: int = 50 * 1024 * 1024

# error_ref returned with a 403 when the user has to accept the terms first.
TERMS_ACCEPTANCE_REQUIRED_ERROR_REF: int = 11051


class TargetPlatform(str, Enum):
    """Values accepted by the `X-Modio-Platform` header."""

    ANDROID = "android"
    IOS = "ios"
    LINUX = "linux"
    MAC = "mac"
    WINDOWS = "windows"
    PS4 = "ps4"
    PS5 = "ps5"
    SOURCE = "source"
    SWITCH = "switch"
    XBOX_ONE = "xboxone"
    XBOX_SERIES_X = "xboxseriesx"
    OCULUS = "oculus"


class TargetPortal(str, Enum):
    """Values accepted by the `X-Modio-Portal` header."""

    STEAM = "steam"
    GOG = "gog"
    EGS = "egs"
    ITCHIO = "itchio"
    NINTENDO = "nintendo"
    PSN = "psn"
    XBOX_LIVE = "xboxlive"
    APPLE = "apple"
    GOOGLE = "google"
    FACEBOOK = "facebook"
    DISCORD = "discord"


class TagType(str, Enum):
    """How the tags of a game tag group are selected."""

    CHECKBOXES = "checkboxes"
    DROPDOWN = "dropdown"


class TeamLevel(IntEnum):
    """Roles of a mod team member."""

    MODERATOR = 1
    CREATOR = 4
    ADMIN = 8


class ReportType(IntEnum):
    GENERIC = 0
    DMCA = 1


class ReportResource(str, Enum):
    """Kinds of resources that can be reported."""

    GAMES = "games"
    MODS = "mods"
    USERS = "users"
