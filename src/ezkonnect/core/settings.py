"""Process-wide settings for ezkonnect.

Configuration is read once at startup from the environment (and an
optional ``.env`` file) and validated by pydantic.  Everything uses the
``EZKONNECT_`` prefix except the confirmation timeout, which keeps the
plain ``REQUEST_TIMEOUT_SECONDS`` name the deployment manifests already
set.

Fields
──────
host                     : Bind address for the HTTP server
port                     : Bind port for the HTTP server
debug                    : Expose exception text in 500 responses
log_level                : Structlog log level
log_json                 : Force JSON (True) / console (False) logs; auto when unset
api_prefix               : URL prefix for the REST endpoints
cors_origins             : Allowed CORS origins for the UI
request_timeout_seconds  : Shared deadline for one annotate batch
kubeconfig               : Local kubeconfig used when the file exists

Examples:
    >>> settings = EzkonnectSettings(request_timeout_seconds=1)
    >>> settings.request_timeout_seconds
    1

Tags:
    settings, configuration, pydantic, environment, ezkonnect
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EzkonnectSettings(BaseSettings):
    """Settings for the ezkonnect server.

    Order of precedence (highest → lowest):
        1. Environment variables (``EZKONNECT_PORT``, ``REQUEST_TIMEOUT_SECONDS``, ...)
        2. ``.env`` file
        3. Defaults below
    """

    model_config = SettingsConfigDict(
        env_prefix="EZKONNECT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ── Server ───────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=5050, description="Bind port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # ── Observability ────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool | None = Field(default=None, description="JSON logs; auto-detect when unset")

    # ── API ──────────────────────────────────────────────────────────────
    api_prefix: str = Field(default="/api/v1", description="URL prefix for all endpoints")
    api_title: str = Field(default="ezkonnect-server", description="OpenAPI title")
    api_version: str = Field(default="1.0.0", description="OpenAPI version string")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # ── Annotate-and-confirm ─────────────────────────────────────────────
    request_timeout_seconds: int = Field(
        default=5,
        gt=0,
        validation_alias=AliasChoices("REQUEST_TIMEOUT_SECONDS", "request_timeout_seconds"),
        description="Seconds an annotate batch may wait for the operator to react",
    )

    # ── Cluster ──────────────────────────────────────────────────────────
    kubeconfig: Path = Field(
        default_factory=lambda: Path.home() / ".kube" / "config",
        description="Kubeconfig file used when present; otherwise in-cluster credentials",
    )
