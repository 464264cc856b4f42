"""Centralized configuration for owl-fts using Pydantic Settings."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_UNKNOWN_PAGE_ID = "[unknown]"


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``OWL_FTS_*`` environment variables.

    Nothing here changes the wire format; settings only control how decoded
    indexes report results and how the library logs and traces its work.
    """

    model_config = SettingsConfigDict(
        env_prefix="OWL_FTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="info", description="Root logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON log lines")

    # Search
    unknown_page_id: str = Field(
        default=DEFAULT_UNKNOWN_PAGE_ID,
        description="Identifier reported for postings whose page ordinal is outside the page table",
    )
    default_search_limit: int | None = Field(
        default=None,
        ge=1,
        description="Maximum results returned when search() is called without an explicit limit",
    )

    # Observability
    service_name: str = Field(default="owl-fts", description="Service name attached to traces and metrics")
    tracing_enabled: bool = Field(default=True, description="Wrap decode and search calls in tracing spans")

    @model_validator(mode="after")
    def _check_unknown_page_id(self) -> "Settings":
        if not self.unknown_page_id.strip():
            raise ValueError("OWL_FTS_UNKNOWN_PAGE_ID must not be blank; it is shown in place of unresolved pages.")
        return self

    def resolve_limit(self, limit: int | None) -> int | None:
        """Return the explicit limit, falling back to the configured default."""
        if limit is not None:
            return limit
        return self.default_search_limit
