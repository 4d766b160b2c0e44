"""
알림 서비스

경매 정산 결과 등 시스템 알림을 저장하고 조회합니다.
"""
import logging
from typing import List, Optional

from models.notification import Notification, NotificationType

logger = logging.getLogger(__name__)


class NotificationService:
    """알림 서비스"""

    @staticmethod
    async def notify(
        recipient_id: int,
        notification_type: NotificationType,
        title: str,
        message: str,
        link: Optional[str] = None
    ) -> Notification:
        """
        알림 발송

        Args:
            recipient_id: 받는 사람 User.id
            notification_type: 알림 타입
            title: 제목
            message: 내용
            link: 관련 화면 경로

        Returns:
            생성된 알림
        """
        notification = await Notification.create(
            recipient_id=recipient_id,
            notification_type=notification_type,
            title=title,
            message=message,
            link=link,
        )

        logger.info(
            f"Notification sent: user_id={recipient_id}, "
            f"type={notification_type.value}, title={title}"
        )
        return notification

    @staticmethod
    async def get_unread(recipient_id: int, limit: int = 50) -> List[Notification]:
        """읽지 않은 알림 (최신순)"""
        return await Notification.filter(
            recipient_id=recipient_id,
            is_read=False
        ).order_by("-created_at", "-id").limit(limit)

    @staticmethod
    async def mark_as_read(notification_id: int, recipient_id: int) -> bool:
        """
        읽음 처리

        Returns:
            본인 알림이 읽음 처리되었는지 여부
        """
        updated = await Notification.filter(
            id=notification_id,
            recipient_id=recipient_id
        ).update(is_read=True)
        return bool(updated)

    @staticmethod
    async def mark_all_as_read(recipient_id: int) -> int:
        """모든 알림 읽음 처리"""
        return await Notification.filter(
            recipient_id=recipient_id,
            is_read=False
        ).update(is_read=True)
