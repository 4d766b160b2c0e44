"""
알림 모델
"""
from enum import Enum

from tortoise import fields, models


class NotificationType(str, Enum):
    """알림 타입"""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(models.Model):
    """
    사용자 알림

    경매 정산 결과 등을 판매자/낙찰자에게 전달합니다.
    """

    id = fields.BigIntField(pk=True)
    recipient = fields.ForeignKeyField("models.User", related_name="notifications")

    notification_type = fields.CharEnumField(NotificationType)
    title = fields.CharField(max_length=200)
    message = fields.TextField()
    link = fields.CharField(max_length=255, null=True)  # 예: "/auction/42"

    is_read = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "notification"
        indexes = (
            ("recipient", "is_read"),
        )
