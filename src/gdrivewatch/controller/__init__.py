"""Controller exports for gdrivewatch."""

from __future__ import annotations

from .drive_controller import GoogleDriveController, RetryPolicy

__all__ = ["GoogleDriveController", "RetryPolicy"]
