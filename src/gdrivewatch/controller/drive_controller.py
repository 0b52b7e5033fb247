"""Google Drive API controller (read-only)."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, TypeVar

from googleapiclient.errors import HttpError

from gdrivewatch.auth import AuthInfo, OAuthClient
from gdrivewatch.errors import (
    DetailFetchFailure,
    FatalSourceError,
    HttpErrorInfo,
    NetworkError,
    SourceError,
    is_transient,
    map_http_error,
)
from gdrivewatch.models import RevisionInfo

from .fields import (
    FILE_FIELDS,
    LIST_FIELDS,
    LIST_PAGE_SIZE,
    NAME_FIELDS,
    PARENT_FIELDS,
    REVISION_FIELDS,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


class GoogleDriveController:
    """
    Drive API controller.

    Notes:
        - Only read calls are issued; tracked folders are never written to.
        - `supports_all_drives` is applied to all requests consistently.
        - Transient failures are retried per RetryPolicy, then raised as the
          mapped gdrivewatch error.
    """

    DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive.readonly",)

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        scopes: Optional[Sequence[str]] = None,
        supports_all_drives: bool = True,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        self._supports_all_drives = supports_all_drives
        self._retry_policy = retry_policy or RetryPolicy()

        use_scopes = list(scopes) if scopes is not None else list(self.DEFAULT_SCOPES)
        client = OAuthClient(auth_info)
        self._service = client.build_drive_service(use_scopes, ensure_valid=True)

    @classmethod
    def from_service(
        cls,
        service: Any,
        *,
        supports_all_drives: bool = True,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> "GoogleDriveController":
        """Create controller from a pre-built Drive service (useful for tests)."""
        obj = cls.__new__(cls)
        obj._supports_all_drives = supports_all_drives
        obj._retry_policy = retry_policy or RetryPolicy()
        obj._service = service
        return obj

    # ----------------------------
    # Public API
    # ----------------------------
    def get(self, file_id: str) -> dict[str, Any]:
        """Return raw metadata (id, name, mimeType, parents, owners) of one item."""
        req = self._service.files().get(
            fileId=file_id,
            fields=FILE_FIELDS,
            **self._common_get_kwargs(),
        )
        return self._execute(req.execute)

    def list_children(self, folder_id: str) -> list[dict[str, Any]]:
        """Return raw dicts of the non-trashed direct children of folder_id."""
        q = f"'{folder_id}' in parents and trashed = false"
        children: list[dict[str, Any]] = []
        page_token: Optional[str] = None

        while True:
            req = self._service.files().list(
                q=q,
                fields=LIST_FIELDS,
                pageSize=LIST_PAGE_SIZE,
                pageToken=page_token,
                **self._common_list_kwargs(),
            )
            data = self._execute(req.execute)
            children.extend(f for f in data.get("files", []) if isinstance(f, dict))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return children

    def get_item_parents(self, item_id: str) -> list[str]:
        req = self._service.files().get(
            fileId=item_id,
            fields=PARENT_FIELDS,
            **self._common_get_kwargs(),
        )
        data = self._execute(req.execute)
        parents = data.get("parents") or []
        return [p for p in parents if isinstance(p, str)]

    def get_parent_name(self, item_id: str) -> str:
        """
        Resolve the display name of item_id's first parent.

        Returns "root" when the item has no parent and "unknown" when the
        lookup fails.
        """
        try:
            parents = self.get_item_parents(item_id)
            if not parents:
                return "root"
            req = self._service.files().get(
                fileId=parents[0],
                fields=NAME_FIELDS,
                **self._common_get_kwargs(),
            )
            data = self._execute(req.execute)
        except SourceError as exc:
            logger.warning("Could not resolve parent name for %s: %s", item_id, exc)
            return "unknown"

        name = data.get("name")
        return name if isinstance(name, str) else "unknown"

    def get_revision_info(self, file_id: str) -> RevisionInfo:
        """
        Return the most recent revision and the revision count of a file.

        Raises:
            DetailFetchFailure: if the revisions cannot be listed.
        """
        revisions: list[dict[str, Any]] = []
        page_token: Optional[str] = None

        try:
            while True:
                req = self._service.revisions().list(
                    fileId=file_id,
                    fields=REVISION_FIELDS,
                    pageToken=page_token,
                )
                data = self._execute(req.execute)
                revisions.extend(r for r in data.get("revisions", []) if isinstance(r, dict))

                page_token = data.get("nextPageToken")
                if not page_token:
                    break
        except SourceError as exc:
            raise DetailFetchFailure(
                "Failed to fetch revision details",
                details={"file_id": file_id, **exc.details},
                cause=exc,
            ) from exc

        return RevisionInfo(
            last_revision=revisions[-1] if revisions else None,
            revision_count=len(revisions),
        )

    # ----------------------------
    # Internals
    # ----------------------------
    def _common_get_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _common_list_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True, "includeItemsFromAllDrives": True}

    def _execute(self, func: Callable[[], T]) -> T:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if is_transient(mapped) and attempt < self._retry_policy.max_retries:
                    logger.debug("Retrying Drive call after %s (attempt %d)", mapped, attempt + 1)
                    time.sleep(delay)
                    delay *= 2
                    continue
                if mapped is exc:
                    raise
                raise mapped from exc

        raise FatalSourceError("Unexpected retry loop termination")

    def _map_exception(self, exc: Exception) -> SourceError:
        if isinstance(exc, SourceError):
            return exc

        if isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return FatalSourceError("Drive API error", cause=exc)


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None
        err = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
