"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]

DEFAULT_INDEXER_PRIORITY: list[str] = [
    "therarbg",
    "1337x",
    "thepiratebay",
    "yts",
    "rutor",
    "uindex",
    "eztv",
    "ilcorsaronero",
    "kickasstorrentsws",
    "nyaasi",
    "subsplease",
    "animetosho",
    "extratorrentst",
]


def _normalize_path(value: Any) -> Path:
    """Expand ``~`` without touching the filesystem."""
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


def _require_positive(name: str, value: float) -> float:
    if value <= 0:
        raise ValueError(f"{name} must be > 0")
    return value


class ServerConfig(BaseModel):
    """Bind address and the URLs handed out to Stremio clients."""

    host: str = "0.0.0.0"
    port: int = 7000
    public_base_url: Optional[str] = Field(
        default=None,
        description=(
            "Externally reachable base URL used in stream and placeholder URLs. "
            "Falls back to the request's base URL."
        ),
    )
    public_dir: Path = Field(
        default=Path("./public"),
        description="Directory with the placeholder videos served under /public.",
    )

    @field_validator("public_dir", mode="before")
    @classmethod
    def _validate_public_dir(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("public_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        return v.rstrip("/") if v else v


class CacheConfig(BaseModel):
    """In-memory cache bounds."""

    max_entries: int = Field(
        default=10_000,
        description="Max keys per cache before least recently used keys are evicted.",
    )
    resolved_link_ttl_seconds: int = Field(
        default=3600,
        description="How long a resolved debrid download URL is reused.",
    )

    @field_validator("max_entries", "resolved_link_ttl_seconds")
    @classmethod
    def _validate_positive(cls, v: int, info: Any) -> int:
        return int(_require_positive(info.field_name, v))


class JackettConfig(BaseModel):
    """Jackett Torznab aggregator."""

    url: str = Field(
        default="http://localhost:9117/api/v2.0",
        description="Jackett API base URL (without /indexers).",
    )
    api_key: str = Field(default="", description="Jackett API key.")
    timeout_seconds: float = Field(
        default=15.0,
        description="Upper bound for a single indexer query.",
    )
    movie_limit: int = 50
    series_limit: int = 100
    anime_limit: int = 33
    anime_indexers: list[str] = Field(
        default_factory=lambda: ["nyaasi", "subsplease", "animetosho"],
        description="Indexer IDs queried for anime episodes.",
    )
    anime_category: int = Field(
        default=5070,
        description="Torznab category for anime (TV/Anime).",
    )

    @field_validator("timeout_seconds")
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        return _require_positive("jackett.timeout_seconds", v)

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class OmdbConfig(BaseModel):
    url: str = "https://www.omdbapi.com/"
    api_key: str = ""


class RealDebridConfig(BaseModel):
    url: str = "https://api.real-debrid.com/rest/1.0"
    api_key: str = Field(default="", description="Real-Debrid API token.")

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class AniListConfig(BaseModel):
    url: str = "https://graphql.anilist.co"


class RankingConfig(BaseModel):
    """Candidate ordering knobs."""

    indexer_priority: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INDEXER_PRIORITY),
        description=(
            "Indexer names, best first. Names are compared lowercased with "
            "whitespace and hyphens removed."
        ),
    )


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (server/http/logging/cache/jackett/...).
    - Environment variables are handled by EnvOverrides(BaseSettings) so that
      load.py controls precedence (defaults < YAML < ENV < CLI).
    """

    # General
    app_name: str = Field(default="debridify", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    server: ServerConfig = Field(default_factory=ServerConfig)

    # HTTP client (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Timeout in seconds for every outgoing request.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
    )
    http_user_agent: str = Field(
        default="Debridify/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
    )
    http_retry_max_attempts: int = Field(
        default=3,
        validation_alias=AliasChoices(
            "http_retry_max_attempts",
            AliasPath("http", "retry_max_attempts"),
        ),
        description="Retries after a 429/502/503/504 response.",
    )
    http_retry_backoff_base: float = Field(
        default=1.0,
        validation_alias=AliasChoices(
            "http_retry_backoff_base",
            AliasPath("http", "retry_backoff_base"),
        ),
    )
    http_retry_max_backoff: float = Field(
        default=30.0,
        validation_alias=AliasChoices(
            "http_retry_max_backoff",
            AliasPath("http", "retry_max_backoff"),
        ),
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description="console/json. If unset, derived from environment.",
    )
    log_file_dir: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_file_dir",
            AliasPath("logging", "file_dir"),
        ),
        description="Write daily rotated log files here (15 kept). Off when unset.",
    )

    cache: CacheConfig = Field(default_factory=CacheConfig)
    jackett: JackettConfig = Field(default_factory=JackettConfig)
    omdb: OmdbConfig = Field(default_factory=OmdbConfig)
    realdebrid: RealDebridConfig = Field(default_factory=RealDebridConfig)
    anilist: AniListConfig = Field(default_factory=AniListConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)

    @field_validator("log_file_dir", mode="before")
    @classmethod
    def _validate_log_dir(cls, v: Any) -> Optional[Path]:
        if v is None or v == "":
            return None
        return _normalize_path(v)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        return _require_positive("http_timeout_seconds", v)

    @field_validator("http_retry_max_attempts")
    @classmethod
    def _validate_retry_attempts(cls, v: int) -> int:
        if v < 0:
            raise ValueError("http_retry_max_attempts must be >= 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Reads ``DEBRIDIFY_*`` variables. Upstream credentials also accept the
    plain names the addon has always used (``JACKETT_URL``, ``OMDB_API_KEY``,
    ``REAL_DEBRID_API_KEY``, ``PORT``, ``LOG_TO_FILE``).
    """

    model_config = SettingsConfigDict(
        env_prefix="DEBRIDIFY_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    host: Optional[str] = None
    port: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("DEBRIDIFY_PORT", "PORT"),
    )
    public_base_url: Optional[str] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None
    http_retry_max_attempts: Optional[int] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None
    log_file_dir: Optional[Path] = None
    log_to_file: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices("DEBRIDIFY_LOG_TO_FILE", "LOG_TO_FILE"),
    )

    cache_max_entries: Optional[int] = None
    resolved_link_ttl_seconds: Optional[int] = None

    jackett_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DEBRIDIFY_JACKETT_URL", "JACKETT_URL"),
    )
    jackett_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DEBRIDIFY_JACKETT_API_KEY", "JACKETT_API_KEY"),
    )
    omdb_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DEBRIDIFY_OMDB_URL", "OMDB_URL"),
    )
    omdb_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DEBRIDIFY_OMDB_API_KEY", "OMDB_API_KEY"),
    )
    real_debrid_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "DEBRIDIFY_REAL_DEBRID_API_KEY", "REAL_DEBRID_API_KEY"
        ),
    )

    def to_update_dict(self) -> dict[str, Any]:
        """Return only values that were actually provided (non-None)."""
        return self.model_dump(exclude_none=True)
