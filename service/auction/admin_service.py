"""
관리자 경매 서비스

입찰 무효 처리, 경매 승인/반려 등 관리자 조치를 권한 확인 및 감사 로그와 함께 수행합니다.
조치와 감사 로그는 같은 트랜잭션에서 기록되어 함께 커밋되거나 함께 롤백됩니다.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from tortoise.transactions import in_transaction

from config.auction import AUCTION
from exceptions import AuctionNotFoundError, BidNotFoundError, InvalidVoidReasonError
from models.audit_log import AuditAction, AuditLog
from models.auction import Auction
from models.bid import Bid
from service.audit_service import AuditService
from service.auction.bid_ledger import BidLedger
from service.auction.concurrency import run_with_conflict_retry
from service.auction.settlement_service import SettlementService
from service.user_service import require_admin

logger = logging.getLogger(__name__)


@dataclass
class AuctionSnapshot:
    """관리자 화면 갱신용 경매 스냅샷"""

    auction: Auction
    bids: List[Bid]

    @property
    def current_price(self) -> int:
        return self.auction.current_price


class AdminAuctionService:
    """관리자 경매 조치"""

    @staticmethod
    async def void_bid(actor_id: int, bid_id: int, reason: str) -> AuctionSnapshot:
        """
        입찰 무효 처리

        Args:
            actor_id: 관리자 User.id
            bid_id: 무효 처리할 입찰 ID
            reason: 무효 사유

        Returns:
            무효 처리 후 경매 스냅샷 (새 현재가 + 입찰 내역)

        Raises:
            AdminPermissionError: 관리자 아님
            InvalidVoidReasonError: 사유 누락
            BidNotFoundError: 입찰 없음
            BidAlreadyVoidedError: 이미 무효 처리됨
        """
        await require_admin(actor_id)

        reason = (reason or "").strip()
        if not reason:
            raise InvalidVoidReasonError()

        bid = await Bid.get_or_none(id=bid_id)
        if not bid:
            raise BidNotFoundError(bid_id)

        async def _once() -> None:
            async with in_transaction() as conn:
                voided = await BidLedger.void_bid(bid_id, reason, actor_id, conn=conn)
                auction = await Auction.get(id=voided.auction_id, using_db=conn)

                await AuditService.log(
                    admin_id=actor_id,
                    action=AuditAction.VOID_BID,
                    target_id=str(bid_id),
                    target_type="bid",
                    details=f"Reason: {reason}. New Price: {auction.current_price}",
                    conn=conn,
                )

        await run_with_conflict_retry(_once, bid.auction_id, "admin void_bid")
        return await AdminAuctionService.get_snapshot(bid.auction_id)

    @staticmethod
    async def approve_auction(
        actor_id: int,
        auction_id: int,
        duration_days: int = AUCTION.DEFAULT_DURATION_DAYS
    ) -> Auction:
        """경매 승인 (pending_review → active)"""
        await require_admin(actor_id)

        async def _once() -> Auction:
            async with in_transaction() as conn:
                auction = await SettlementService.approve_auction(
                    auction_id, duration_days, conn=conn
                )
                await AuditService.log(
                    admin_id=actor_id,
                    action=AuditAction.APPROVE_AUCTION,
                    target_id=str(auction_id),
                    target_type="auction",
                    details=f"Duration: {duration_days} days. Ends: {auction.end_time.isoformat()}",
                    conn=conn,
                )
            return auction

        return await run_with_conflict_retry(_once, auction_id, "admin approve_auction")

    @staticmethod
    async def reject_auction(
        actor_id: int,
        auction_id: int,
        reason: Optional[str] = None
    ) -> Auction:
        """경매 반려 (pending_review → rejected)"""
        await require_admin(actor_id)

        async def _once() -> Auction:
            async with in_transaction() as conn:
                auction = await SettlementService.reject_auction(auction_id, reason, conn=conn)
                await AuditService.log(
                    admin_id=actor_id,
                    action=AuditAction.REJECT_AUCTION,
                    target_id=str(auction_id),
                    target_type="auction",
                    details=f"Reason: {reason}" if reason else None,
                    conn=conn,
                )
            return auction

        return await run_with_conflict_retry(_once, auction_id, "admin reject_auction")

    @staticmethod
    async def get_recent_bids(actor_id: int, limit: int = AUCTION.RECENT_BIDS_LIMIT) -> List[Bid]:
        """최근 입찰 (입찰 검토 화면)"""
        await require_admin(actor_id)
        return await BidLedger.get_recent_bids(limit)

    @staticmethod
    async def get_audit_logs(actor_id: int, limit: int = 50) -> List[AuditLog]:
        await require_admin(actor_id)
        return await AuditService.get_recent(limit)

    @staticmethod
    async def get_snapshot(auction_id: int) -> AuctionSnapshot:
        auction = await Auction.get_or_none(id=auction_id)
        if not auction:
            raise AuctionNotFoundError(auction_id)
        bids = await BidLedger.get_auction_bids(auction_id)
        return AuctionSnapshot(auction=auction, bids=bids)
