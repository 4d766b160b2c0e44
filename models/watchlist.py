"""
관심 경매 모델
"""
from tortoise import fields, models


class WatchlistEntry(models.Model):
    """사용자별 관심 경매 (사용자-경매 쌍은 하나만)"""

    id = fields.BigIntField(pk=True)

    user = fields.ForeignKeyField(
        "models.User",
        related_name="watchlist",
        on_delete=fields.CASCADE
    )
    auction = fields.ForeignKeyField(
        "models.Auction",
        related_name="watchers",
        on_delete=fields.CASCADE
    )
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "watchlist"
        unique_together = (("user", "auction"),)
        indexes = (
            ("user", "created_at"),
        )
