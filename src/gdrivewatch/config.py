"""Runtime settings for gdrivewatch."""

from __future__ import annotations

import logging
from datetime import timedelta

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gdrivewatch.auth import AuthInfo
from gdrivewatch.controller import RetryPolicy
from gdrivewatch.errors import AuthError


class TrackerSettings(BaseSettings):
    """
    Settings read from GDRIVEWATCH_* environment variables (or a .env file).

    The Google OAuth client values also accept the unprefixed GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET and GOOGLE_REFRESH_TOKEN names.
    """

    model_config = SettingsConfigDict(
        env_prefix="GDRIVEWATCH_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    google_client_id: str = Field(
        default="",
        validation_alias=AliasChoices("GDRIVEWATCH_GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_ID"),
    )
    google_client_secret: str = Field(
        default="",
        validation_alias=AliasChoices("GDRIVEWATCH_GOOGLE_CLIENT_SECRET", "GOOGLE_CLIENT_SECRET"),
    )
    google_refresh_token: str = Field(
        default="",
        validation_alias=AliasChoices("GDRIVEWATCH_GOOGLE_REFRESH_TOKEN", "GOOGLE_REFRESH_TOKEN"),
    )
    token_file: str = ""

    database_url: str = "sqlite:///gdrivewatch.db"
    rename_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    duplicate_window_seconds: int = Field(default=3600, ge=0)
    supports_all_drives: bool = True
    max_retries: int = Field(default=3, ge=0)
    retry_initial_delay_sec: float = Field(default=1.0, ge=0.0)
    log_level: str = "INFO"

    @property
    def duplicate_window(self) -> timedelta:
        return timedelta(seconds=self.duplicate_window_seconds)

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries,
            initial_delay_sec=self.retry_initial_delay_sec,
        )

    def auth_info(self) -> AuthInfo:
        """
        Build AuthInfo from the configured credentials.

        Raises:
            AuthError: if neither a refresh token nor a token file is configured.
        """
        if self.google_refresh_token:
            if not self.google_client_id or not self.google_client_secret:
                raise AuthError("A refresh token requires client id and client secret")
            return AuthInfo.from_refresh_token(
                self.google_client_id,
                self.google_client_secret,
                self.google_refresh_token,
            )
        if self.token_file:
            return AuthInfo.from_token_file(self.token_file)
        raise AuthError(
            "No Google credentials configured",
            details={"hint": "Set GOOGLE_REFRESH_TOKEN or GDRIVEWATCH_TOKEN_FILE"},
        )


def configure_logging(settings: TrackerSettings | None = None) -> None:
    """Opt-in logging setup for applications embedding gdrivewatch."""
    level_name = (settings.log_level if settings is not None else "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
