"""Runtime configuration for provider clients and the resolution pipeline."""

from __future__ import annotations

from typing import Optional

import requests
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = "CitationFormatter/1.0"


class CitationSettings(BaseSettings):  # type: ignore[misc]
    """Settings controlling upstream providers, candidate caps and concurrency."""

    timeout: float = Field(10.0, description="Timeout (in seconds) for each outbound request")
    user_agent: str = Field(DEFAULT_USER_AGENT, description="Client identifier sent upstream")
    mailto: Optional[str] = Field(None, description="Contact address appended to the User-Agent")
    crossref_base_url: Optional[str] = None
    semanticscholar_base_url: Optional[str] = None
    semanticscholar_api_key: Optional[str] = None
    search_rows: int = Field(10, description="Rows requested from each title search")
    format_candidate_limit: int = Field(5, description="Ambiguous cap for the format/batch flow")
    search_candidate_limit: int = Field(10, description="Result cap for standalone title search")
    enable_doi_title_fallback: bool = Field(
        True, description="Search Semantic Scholar with the DOI text when Crossref has no record"
    )
    batch_workers: int = Field(1, description="Concurrent reference lines within one batch")
    max_attempts: int = Field(1, description="Attempts per upstream call, 1 disables retries")

    model_config = SettingsConfigDict(env_prefix="CITATION_", env_file=".env", extra="ignore")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    @field_validator(
        "search_rows",
        "format_candidate_limit",
        "search_candidate_limit",
        "batch_workers",
        "max_attempts",
    )
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("value must be at least 1")
        return value

    @property
    def client_identifier(self) -> str:
        if self.mailto:
            return f"{self.user_agent} (mailto:{self.mailto})"
        return self.user_agent

    def build_session(self, session: Optional[requests.Session] = None) -> requests.Session:
        """Return a :class:`requests.Session` carrying the client identifier."""

        session = session if session is not None else requests.Session()
        if self.client_identifier:
            session.headers["User-Agent"] = self.client_identifier
        return session
