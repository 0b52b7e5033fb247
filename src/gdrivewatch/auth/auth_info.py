"""Authentication information for gdrivewatch (OAuth only)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_REQUIRED_KEYS: dict[str, tuple[str, ...]] = {
    "refresh_token": ("client_id", "client_secret", "refresh_token"),
    "authorized_user": ("token_file",),
}


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    Authentication information.

    Supported kinds:
        kind = "refresh_token"
            data must include client_id, client_secret, refresh_token
        kind = "authorized_user"
            data must include token_file (authorized-user JSON)

    Token acquisition is not handled here; the refresh token or token file
    must already exist.
    """

    kind: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.kind not in _REQUIRED_KEYS:
            raise ValueError(
                "AuthInfo.kind must be one of: " + ", ".join(sorted(_REQUIRED_KEYS))
            )

        if not isinstance(self.data, dict):
            raise TypeError("AuthInfo.data must be a dict")

        for key in _REQUIRED_KEYS[self.kind]:
            value = self.data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"AuthInfo.data['{key}'] must be a non-empty string")

    @classmethod
    def from_refresh_token(
        cls,
        client_id: str,
        client_secret: str,
        refresh_token: str,
    ) -> AuthInfo:
        return cls(
            kind="refresh_token",
            data={
                "client_id": client_id,
                "client_secret": client_secret,
                "refresh_token": refresh_token,
            },
        )

    @classmethod
    def from_token_file(cls, token_file: str) -> AuthInfo:
        return cls(kind="authorized_user", data={"token_file": token_file})

    @property
    def token_file(self) -> str:
        """Path to OAuth token JSON (authorized user)."""
        return str(self.data["token_file"])
