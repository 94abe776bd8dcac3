"""
Clock 포트: now 주입 (테스트 결정성)
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """UTC aware datetime."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
