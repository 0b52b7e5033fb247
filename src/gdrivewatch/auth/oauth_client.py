"""OAuth credentials and Drive service construction."""

from __future__ import annotations

import os
from typing import Sequence

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from gdrivewatch.errors import AuthError, InvalidArgumentError

from .auth_info import AuthInfo

TOKEN_URI: str = "https://oauth2.googleapis.com/token"


class OAuthClient:
    """
    Turn an AuthInfo into Drive credentials.

    A stored refresh token or an existing authorized-user token file is
    required; no interactive consent flow is run.
    """

    def __init__(self, auth_info: AuthInfo) -> None:
        self._auth_info = auth_info

    def get_credentials(self, scopes: Sequence[str], ensure_valid: bool = True) -> Credentials:
        """
        Return OAuth credentials for the given scopes.

        With ensure_valid, credentials without a usable access token are
        refreshed. A refreshed token-file credential is written back to its
        file.

        Raises:
            AuthError: on load/refresh failures.
            InvalidArgumentError: if scopes is invalid.
        """
        if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
            raise InvalidArgumentError("scopes must be a non-empty sequence of strings")

        if self._auth_info.kind == "authorized_user":
            creds = self._from_token_file(list(scopes))
        else:
            creds = self._from_refresh_token(list(scopes))

        if ensure_valid and not creds.valid:
            self._refresh(creds)
        return creds

    def build_drive_service(self, scopes: Sequence[str], ensure_valid: bool = True):
        """
        Build a Drive v3 service resource.

        Returns:
            googleapiclient.discovery.Resource
        """
        creds = self.get_credentials(scopes=scopes, ensure_valid=ensure_valid)
        try:
            return build("drive", "v3", credentials=creds, cache_discovery=False)
        except Exception as exc:
            raise AuthError("Failed to build Drive service", cause=exc) from exc

    # ----------------------------
    # Internals
    # ----------------------------
    def _from_token_file(self, scopes: list[str]) -> Credentials:
        token_file = self._auth_info.token_file
        if not os.path.exists(token_file):
            raise AuthError("token_file does not exist", details={"token_file": token_file})
        try:
            return Credentials.from_authorized_user_file(token_file, scopes=scopes)
        except Exception as exc:
            raise AuthError(
                "Failed to load token_file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc

    def _from_refresh_token(self, scopes: list[str]) -> Credentials:
        data = self._auth_info.data
        return Credentials(
            None,
            refresh_token=data["refresh_token"],
            token_uri=TOKEN_URI,
            client_id=data["client_id"],
            client_secret=data["client_secret"],
            scopes=scopes,
        )

    def _refresh(self, creds: Credentials) -> None:
        if not creds.refresh_token:
            raise AuthError(
                "Credentials are invalid and have no refresh token",
                details={"kind": self._auth_info.kind},
            )
        try:
            creds.refresh(Request())
        except Exception as exc:
            raise AuthError(
                "Failed to refresh OAuth credentials",
                details={"kind": self._auth_info.kind},
                cause=exc,
            ) from exc

        if self._auth_info.kind == "authorized_user":
            self._save_credentials(creds)

    def _save_credentials(self, creds: Credentials) -> None:
        token_file = self._auth_info.token_file
        try:
            with open(token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except OSError as exc:
            raise AuthError(
                "Failed to save refreshed token_file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc
