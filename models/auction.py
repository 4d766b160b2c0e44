"""
경매 모델

판매자가 등록한 장비/가축 경매 정보를 관리합니다.
"""
from datetime import datetime
from enum import Enum

from tortoise import fields, models

from utils.clock import utc_now


class AuctionStatus(str, Enum):
    """경매 상태"""
    DRAFT = "draft"                    # 작성 중
    PENDING_REVIEW = "pending_review"  # 관리자 검토 대기
    ACTIVE = "active"                  # 진행 중
    SOLD = "sold"                      # 낙찰
    UNSOLD = "unsold"                  # 유찰
    REJECTED = "rejected"              # 반려

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    def can_transition_to(self, target: "AuctionStatus") -> bool:
        return target in ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS: dict[AuctionStatus, frozenset[AuctionStatus]] = {
    AuctionStatus.DRAFT: frozenset({AuctionStatus.PENDING_REVIEW}),
    AuctionStatus.PENDING_REVIEW: frozenset({AuctionStatus.ACTIVE, AuctionStatus.REJECTED}),
    AuctionStatus.ACTIVE: frozenset({AuctionStatus.SOLD, AuctionStatus.UNSOLD}),
    AuctionStatus.SOLD: frozenset(),
    AuctionStatus.UNSOLD: frozenset(),
    AuctionStatus.REJECTED: frozenset(),
}

TERMINAL_STATUSES = frozenset({AuctionStatus.SOLD, AuctionStatus.UNSOLD, AuctionStatus.REJECTED})


class Auction(models.Model):
    """
    경매 등록 정보

    - current_price는 유효 입찰 중 최고가 (입찰이 없으면 starting_price)
    - version은 가격/상태를 바꾸는 모든 쓰기마다 1씩 증가 (compare-and-set)
    - sold/unsold/rejected는 종료 상태로, 이후 상태 변경 불가
    """

    id = fields.BigIntField(pk=True)

    # 판매자 정보
    seller = fields.ForeignKeyField(
        "models.User",
        related_name="auctions",
        on_delete=fields.CASCADE
    )

    # 매물 정보 (등록 후 변경 없음)
    title = fields.CharField(max_length=255)
    make = fields.CharField(max_length=100)
    model_name = fields.CharField(max_length=100)
    year = fields.IntField()
    operating_hours = fields.IntField(default=0)
    location = fields.CharField(max_length=255, default="")
    description = fields.TextField(null=True)

    # 가격
    starting_price = fields.BigIntField()
    reserve_price = fields.BigIntField()
    min_increment = fields.BigIntField()
    current_price = fields.BigIntField()

    # 시간
    start_time = fields.DatetimeField()
    end_time = fields.DatetimeField()
    is_extended = fields.BooleanField(default=False)  # 마감 연장 여부
    created_at = fields.DatetimeField(auto_now_add=True)

    # 상태
    status = fields.CharEnumField(AuctionStatus, default=AuctionStatus.DRAFT)
    version = fields.IntField(default=0)

    # 정산 정보
    winner = fields.ForeignKeyField(
        "models.User",
        related_name="won_auctions",
        null=True,
        on_delete=fields.SET_NULL
    )
    settled_at = fields.DatetimeField(null=True)
    rejection_reason = fields.TextField(null=True)

    class Meta:
        table = "auction"
        indexes = (
            ("status", "end_time"),  # 만료 정산 쿼리
            ("seller", "status"),    # 내 경매 조회
            ("end_time",),
        )

    def minimum_next_bid(self, has_bids: bool) -> int:
        """다음 입찰의 최소 금액"""
        if not has_bids:
            return self.starting_price
        return self.current_price + self.min_increment

    def has_ended(self, now: datetime | None = None) -> bool:
        """종료 시각 경과 여부"""
        now = utc_now(now)
        return now >= self.end_time

    def __str__(self) -> str:
        return f"Auction {self.id}: {self.title} ({self.status})"
