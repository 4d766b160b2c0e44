"""
입찰 기록 모델

경매에 대한 입찰 시도를 추가 전용(append-only)으로 기록합니다.
"""
from enum import Enum

from tortoise import fields, models


class BidStatus(str, Enum):
    """입찰 상태"""
    VALID = "valid"      # 유효
    VOIDED = "voided"    # 관리자 무효 처리


class Bid(models.Model):
    """
    입찰 기록

    - 생성 후 허용되는 변경은 valid → voided 뿐
    - 무효 처리된 입찰도 감사용으로 삭제하지 않음
    """

    id = fields.BigIntField(pk=True)

    auction = fields.ForeignKeyField(
        "models.Auction",
        related_name="bids",
        on_delete=fields.CASCADE
    )

    bidder = fields.ForeignKeyField(
        "models.User",
        related_name="bids",
        on_delete=fields.CASCADE
    )

    amount = fields.BigIntField()
    placed_at = fields.DatetimeField()
    status = fields.CharEnumField(BidStatus, default=BidStatus.VALID)

    # 무효 처리 감사 정보
    void_reason = fields.TextField(null=True)
    voided_by = fields.ForeignKeyField(
        "models.User",
        related_name="voided_bids",
        null=True,
        on_delete=fields.SET_NULL
    )
    voided_at = fields.DatetimeField(null=True)

    class Meta:
        table = "bid"
        indexes = (
            ("auction", "placed_at"),         # 경매별 입찰 내역
            ("auction", "status", "amount"),  # 최고 입찰 조회
            ("bidder",),                      # 내 입찰 조회
        )

    @property
    def is_valid(self) -> bool:
        return self.status == BidStatus.VALID

    def __str__(self) -> str:
        return f"Bid {self.id}: R{self.amount} on Auction {self.auction_id} ({self.status})"
