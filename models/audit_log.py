"""
감사 로그 모델

관리자 조치(입찰 무효, 경매 승인/반려)를 기록합니다.
"""
from enum import Enum

from tortoise import fields, models


class AuditAction(str, Enum):
    """관리자 조치 종류"""
    VOID_BID = "VOID_BID"
    APPROVE_AUCTION = "APPROVE_AUCTION"
    REJECT_AUCTION = "REJECT_AUCTION"


class AuditLog(models.Model):
    """관리자 감사 로그"""

    id = fields.BigIntField(pk=True)

    admin = fields.ForeignKeyField(
        "models.User",
        related_name="audit_logs",
        on_delete=fields.CASCADE
    )

    action = fields.CharEnumField(AuditAction, max_length=32)
    target_id = fields.CharField(max_length=64, null=True)
    target_type = fields.CharField(max_length=32, null=True)
    details = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "audit_log"
        indexes = (
            ("created_at",),
            ("admin", "created_at"),
        )
