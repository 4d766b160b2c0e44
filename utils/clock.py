"""시각 유틸리티"""
from datetime import datetime, timezone
from typing import Optional


def utc_now(now: Optional[datetime] = None) -> datetime:
    """
    기준 시각 정규화

    None이면 현재 UTC 시각, tzinfo가 없는 시각은 UTC로 간주합니다.
    """
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now
