"""경매 관련 설정 (입찰, 정산, 스윕)"""
from dataclasses import dataclass


# =============================================================================
# 입찰 / 정산
# =============================================================================

@dataclass(frozen=True)
class AuctionConfig:
    """경매 설정"""

    SMALL_INCREMENT_THRESHOLD: int = 10_000
    """이 금액 미만 시작가는 작은 최소 증분을 사용"""

    SMALL_MIN_INCREMENT: int = 100
    """시작가 10,000 미만 경매의 최소 증분"""

    LARGE_MIN_INCREMENT: int = 500
    """시작가 10,000 이상 경매의 최소 증분"""

    DEFAULT_DURATION_DAYS: int = 7
    """승인 시 기본 경매 기간 (7일)"""

    MAX_DURATION_DAYS: int = 365
    """최대 경매 기간"""

    SOFT_CLOSE_WINDOW_SECONDS: int = 120
    """마감 직전 입찰 시 연장되는 구간 (2분)"""

    MAX_WRITE_ATTEMPTS: int = 5
    """버전 충돌 시 최대 시도 횟수"""

    RECENT_BIDS_LIMIT: int = 50
    """입찰 내역 기본 조회 개수"""


AUCTION = AuctionConfig()


# =============================================================================
# 스윕 (만료 경매 정산)
# =============================================================================

@dataclass(frozen=True)
class SweepConfig:
    """만료 경매 정산 주기 설정"""

    INTERVAL_MINUTES: int = 1
    """스윕 주기 (1분)"""


SWEEP = SweepConfig()
