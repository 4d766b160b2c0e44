"""
AgriBid 설정 상수

경매 규칙과 관련된 매직 넘버를 여기서 관리합니다.
각 도메인별 설정은 config/ 하위 모듈에 정의되어 있습니다.
"""
from config.auction import (
    AuctionConfig, AUCTION,
    SweepConfig, SWEEP,
)

__all__ = [
    "AuctionConfig",
    "AUCTION",
    "SweepConfig",
    "SWEEP",
]
