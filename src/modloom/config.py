# modloom/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_DOWNLOAD_BUFFER_SIZE,
    DEFAULT_DOWNLOAD_CHUNK_SIZE,
    DEFAULT_FILE_READ_CHUNK_SIZE,
    DEFAULT_HOST,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    TargetPlatform,
    TargetPortal,
)
from .types import PostRequestHook, PreRequestHook


class ModioSettings(BaseSettings):
    """
    Manages user-configurable settings for the modloom client, primarily
    loaded from environment variables or a .env file.

    Settings are loaded from environment variables (prefixed with 'MODLOOM_')
    or .env/secrets.env files.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "secrets.env"),  # Look in both .env and secrets.env
        env_file_encoding="utf-8",
        # e.g. MODLOOM_API_KEY, MODLOOM_TOKEN
        env_prefix="MODLOOM_",
        extra="ignore",  # Ignore extra fields found in environment
        case_sensitive=False,  # Allow flexible casing in environment variables
        arbitrary_types_allowed=True,  # Allow hook callables
    )

    # --- Credentials ---
    api_key: str | None = Field(
        default=None, description="mod.io API key, used for read-only endpoints"
    )
    token: str | None = Field(
        default=None,
        description="OAuth2 access token, used for endpoints acting on behalf of a user",
    )

    # --- Host Selection ---
    host: str = Field(default=DEFAULT_HOST, description="API host (authority)")
    use_test_env: bool = Field(
        default=False, description="Use the mod.io test environment"
    )
    game_id: int | None = Field(
        default=None, description="Send every request to the host of this game"
    )
    dynamic_game_host: bool = Field(
        default=False,
        description="Send requests targeting a game to that game's own host",
    )

    # --- Client Behavior Settings ---
    request_timeout: float = Field(
        default=DEFAULT_TIMEOUT, description="Default request timeout in seconds"
    )
    max_redirects: int = Field(
        default=DEFAULT_MAX_REDIRECTS,
        description="Maximum number of redirects followed per request",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header for requests",
    )
    target_platform: TargetPlatform | None = Field(
        default=None, description="Value of the X-Modio-Platform header"
    )
    target_portal: TargetPortal | None = Field(
        default=None, description="Value of the X-Modio-Portal header"
    )

    # --- Transfer Settings ---
    download_chunk_size: int = Field(
        default=DEFAULT_DOWNLOAD_CHUNK_SIZE,
        description="Size of the chunks yielded by download streams",
    )
    download_buffer_size: int = Field(
        default=DEFAULT_DOWNLOAD_BUFFER_SIZE,
        description="Write buffer size used when saving downloads to a file",
    )
    file_read_chunk_size: int = Field(
        default=DEFAULT_FILE_READ_CHUNK_SIZE,
        description="Read size used when streaming local files into uploads",
    )

    # --- Logging ---
    log_level: str = Field(
        default="INFO", description="Default level used by configure_logging()"
    )

    # --- Hook Settings ---
    pre_request_hooks: list[PreRequestHook] = Field(
        default_factory=list,
        description="List of hooks to call before a request is made.",
    )
    post_request_hooks: list[PostRequestHook] = Field(
        default_factory=list,
        description="List of hooks to call after a response is received and parsed.",
    )


# Create a single, cached instance of settings
@lru_cache
def get_settings() -> ModioSettings:
    """
    Provides access to the application settings.

    Settings are loaded from environment variables (prefixed with 'MODLOOM_')
    or .env/secrets.env files. The instance is cached for performance.

    Returns:
        ModioSettings: The application settings instance.
    """
    return ModioSettings()
