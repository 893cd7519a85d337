"""Canonical Pydantic models shared across all econops modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory
or built once per client:
    :class:`CacheConfig`, :class:`RequestConfig`, :class:`OutputConfig`,
    :class:`GlobalConfig`, and :class:`ClientConfig`.

**Cache models** -- produced and consumed by :mod:`econops.cache`:
    :class:`CacheEntry` and :class:`CacheStats`.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_URL = "https://econops.com:8000"
"""Production API endpoint used when no base URL is configured."""


# --- Config ---


class CacheConfig(BaseModel):
    """Response cache settings."""

    enabled: bool = Field(default=True, description="Enable response caching")
    directory: Optional[str] = Field(
        default=None,
        description="Cache directory (defaults to <tmp>/econops_cache)",
    )


class RequestConfig(BaseModel):
    """HTTP request settings."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=False, description="Verify SSL certificates")


class OutputConfig(BaseModel):
    """Output formatting settings."""

    format: Literal["auto", "json", "rich"] = Field(
        default="auto", description="Result format when --json is not given"
    )


class GlobalConfig(BaseModel):
    """User-level configuration persisted as ``config.json``.

    Loaded by :func:`~econops.config.load_global_config` and written by
    :func:`~econops.config.save_global_config`. Every field has a default,
    so a missing file is equivalent to ``GlobalConfig()``.

    Example::

        GlobalConfig(
            base_url="https://staging.econops.com",
            token_source="file:~/.econops-token",
        )
    """

    base_url: str = Field(default=DEFAULT_BASE_URL, description="API base URL")
    token_source: Optional[str] = Field(
        default=None,
        description="Where to read the API token from: env:VAR or file:/path",
    )
    cache: CacheConfig = Field(default_factory=CacheConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


class ClientConfig(BaseModel):
    """Resolved, immutable settings of one :class:`~econops.client.Client`."""

    model_config = ConfigDict(frozen=True)

    token: str
    base_url: str
    use_cache: bool = True
    headers: dict[str, str] = Field(default_factory=dict)


# --- Cache ---


class CacheEntry(BaseModel):
    """A previously observed successful API response.

    Attributes:
        status_code: HTTP status of the cached response (always 200 in
            practice).
        data: Parsed JSON body.
        headers: Response headers as a flat string mapping.
    """

    status_code: int
    data: Any = None
    headers: dict[str, str] = Field(default_factory=dict)


class CacheStats(BaseModel):
    """Summary of what is currently persisted in a response cache."""

    directory: str
    count: int = 0
    total_bytes: int = 0
