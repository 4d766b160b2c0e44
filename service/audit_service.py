"""
관리자 감사 로그 서비스
"""
import logging
from typing import List, Optional

from models.audit_log import AuditAction, AuditLog

logger = logging.getLogger(__name__)


class AuditService:
    """감사 로그 기록/조회"""

    @staticmethod
    async def log(
        admin_id: int,
        action: AuditAction,
        target_id: Optional[str] = None,
        target_type: Optional[str] = None,
        details: Optional[str] = None,
        conn=None
    ) -> AuditLog:
        """감사 로그 기록 (conn이 주어지면 해당 트랜잭션에 포함)"""
        entry = await AuditLog.create(
            admin_id=admin_id,
            action=action,
            target_id=target_id,
            target_type=target_type,
            details=details,
            using_db=conn,
        )
        logger.info(f"Audit: admin {admin_id} {action.value} {target_type}:{target_id}")
        return entry

    @staticmethod
    async def get_recent(limit: int = 50) -> List[AuditLog]:
        """최근 감사 로그 (최신순)"""
        return await AuditLog.all().order_by("-created_at", "-id").limit(limit)
