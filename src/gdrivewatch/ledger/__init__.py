"""Change ledger exports for gdrivewatch."""

from __future__ import annotations

from .store import DEFAULT_DUPLICATE_WINDOW, ChangeLedger

__all__ = ["ChangeLedger", "DEFAULT_DUPLICATE_WINDOW"]
