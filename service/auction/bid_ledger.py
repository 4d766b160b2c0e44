"""
입찰 원장

입찰 시도를 검증하고 기록하며, 경매별 최고 입찰을 조회합니다.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from tortoise.transactions import in_transaction

from config.auction import AUCTION
from exceptions import (
    AuctionEndedError,
    AuctionNotActiveError,
    AuctionNotFoundError,
    BidAlreadyVoidedError,
    BidNotFoundError,
    BidTooLowError,
    InvalidBidAmountError,
    SelfBidError,
)
from models.auction import Auction, AuctionStatus
from models.bid import Bid, BidStatus
from service.auction.concurrency import run_with_conflict_retry, update_auction_versioned
from utils.clock import utc_now

logger = logging.getLogger(__name__)


class BidLedger:
    """입찰 원장 비즈니스 로직"""

    # =========================================================================
    # 입찰 (Bidding)
    # =========================================================================

    @staticmethod
    async def place_bid(
        auction_id: int,
        bidder_id: int,
        amount: int,
        now: Optional[datetime] = None
    ) -> Bid:
        """
        입찰

        Args:
            auction_id: 경매 ID
            bidder_id: 입찰자 User.id
            amount: 입찰 금액
            now: 입찰 시각 (기본값: 현재 UTC)

        Returns:
            생성된 Bid

        Raises:
            AuctionNotFoundError: 경매 없음
            AuctionNotActiveError: 진행 중이 아님
            AuctionEndedError: 종료 시각 경과
            SelfBidError: 본인 경매 입찰
            InvalidBidAmountError: 금액이 양의 정수가 아님
            BidTooLowError: 최소 입찰가 미달
            AuctionConflictError: 재시도 후에도 동시 쓰기 충돌
        """
        now = utc_now(now)

        bid = await run_with_conflict_retry(
            lambda: BidLedger._place_bid_once(auction_id, bidder_id, amount, now),
            auction_id,
            "place_bid",
        )

        logger.info(f"User {bidder_id} bid R{amount} on auction {auction_id}")
        return bid

    @staticmethod
    async def _place_bid_once(
        auction_id: int,
        bidder_id: int,
        amount: int,
        now: datetime
    ) -> Bid:
        # Transaction: 경매 재조회 + 검증 + 버전 검사 갱신 + 입찰 생성
        async with in_transaction() as conn:
            auction = await Auction.get_or_none(id=auction_id, using_db=conn)

            if not auction:
                raise AuctionNotFoundError(auction_id)

            # Guard: ACTIVE 상태 확인
            if auction.status != AuctionStatus.ACTIVE:
                raise AuctionNotActiveError(auction_id, auction.status.value)

            # Guard: 종료 시각 확인
            if auction.has_ended(now):
                raise AuctionEndedError(auction_id)

            # Guard: 본인 물품 입찰 방지
            if auction.seller_id == bidder_id:
                raise SelfBidError()

            # Guard: 금액 형식 (bool은 int의 하위 타입이라 별도로 거름)
            if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
                raise InvalidBidAmountError(amount)

            # Guard: 최소 입찰가
            has_bids = await Bid.filter(
                auction_id=auction_id,
                status=BidStatus.VALID
            ).using_db(conn).exists()
            minimum = auction.minimum_next_bid(has_bids)
            if amount < minimum:
                raise BidTooLowError(minimum, amount)

            changes = {"current_price": amount}

            # 마감 직전 입찰이면 종료 시각 연장 (soft close)
            window = timedelta(seconds=AUCTION.SOFT_CLOSE_WINDOW_SECONDS)
            if auction.end_time - now < window:
                changes["end_time"] = now + window
                changes["is_extended"] = True

            await update_auction_versioned(auction, conn, **changes)

            bid = await Bid.create(
                auction_id=auction_id,
                bidder_id=bidder_id,
                amount=amount,
                placed_at=now,
                status=BidStatus.VALID,
                using_db=conn
            )

        if changes.get("is_extended"):
            logger.info(f"Auction {auction_id} extended to {auction.end_time.isoformat()}")

        return bid

    # =========================================================================
    # 무효 처리 (Void)
    # =========================================================================

    @staticmethod
    async def void_bid(
        bid_id: int,
        reason: str,
        actor_id: int,
        now: Optional[datetime] = None,
        conn=None
    ) -> Bid:
        """
        입찰 무효 처리

        입찰을 voided로 바꾸고 같은 트랜잭션 안에서 경매 현재가를 다시 계산합니다.
        conn이 주어지면 호출자의 트랜잭션 안에서 한 번만 실행하고, 충돌 재시도는 호출자가 맡습니다.

        Raises:
            BidNotFoundError: 입찰 없음
            BidAlreadyVoidedError: 이미 무효 처리됨
            AuctionConflictError: 재시도 후에도 동시 쓰기 충돌
        """
        now = utc_now(now)

        if conn is not None:
            return await BidLedger._void_in(bid_id, reason, actor_id, now, conn)

        bid = await Bid.get_or_none(id=bid_id)
        if not bid:
            raise BidNotFoundError(bid_id)

        bid = await run_with_conflict_retry(
            lambda: BidLedger._void_bid_once(bid_id, reason, actor_id, now),
            bid.auction_id,
            "void_bid",
        )
        return bid

    @staticmethod
    async def _void_bid_once(
        bid_id: int,
        reason: str,
        actor_id: int,
        now: datetime
    ) -> Bid:
        async with in_transaction() as conn:
            return await BidLedger._void_in(bid_id, reason, actor_id, now, conn)

    @staticmethod
    async def _void_in(
        bid_id: int,
        reason: str,
        actor_id: int,
        now: datetime,
        conn
    ) -> Bid:
        from service.auction.settlement_service import SettlementService

        bid = await Bid.get_or_none(id=bid_id, using_db=conn)

        if not bid:
            raise BidNotFoundError(bid_id)

        if bid.status == BidStatus.VOIDED:
            raise BidAlreadyVoidedError(bid_id)

        updated = await Bid.filter(
            id=bid_id,
            status=BidStatus.VALID
        ).using_db(conn).update(
            status=BidStatus.VOIDED,
            void_reason=reason,
            voided_by_id=actor_id,
            voided_at=now,
        )
        if not updated:
            raise BidAlreadyVoidedError(bid_id)

        bid.status = BidStatus.VOIDED
        bid.void_reason = reason
        bid.voided_by_id = actor_id
        bid.voided_at = now

        await SettlementService.recompute_price(bid.auction_id, conn=conn)

        logger.info(f"User {actor_id} voided bid {bid_id} on auction {bid.auction_id}: {reason}")
        return bid

    # =========================================================================
    # 조회 (Query)
    # =========================================================================

    @staticmethod
    async def leading_bid(auction_id: int, conn=None) -> Optional[Bid]:
        """최고 유효 입찰 (동액이면 먼저 들어온 입찰)"""
        query = Bid.filter(auction_id=auction_id, status=BidStatus.VALID)
        if conn is not None:
            query = query.using_db(conn)
        return await query.order_by("-amount", "placed_at", "id").first()

    @staticmethod
    async def get_auction_bids(
        auction_id: int,
        limit: int = AUCTION.RECENT_BIDS_LIMIT,
        include_voided: bool = True
    ) -> List[Bid]:
        """경매 입찰 내역 (최신순)"""
        query = Bid.filter(auction_id=auction_id)
        if not include_voided:
            query = query.filter(status=BidStatus.VALID)
        return await query.order_by("-placed_at", "-id").limit(limit)

    @staticmethod
    async def get_recent_bids(limit: int = AUCTION.RECENT_BIDS_LIMIT) -> List[Bid]:
        """전체 최근 입찰 (관리자 검토용)"""
        return await Bid.all().order_by("-placed_at", "-id").limit(limit).prefetch_related("auction")

    @staticmethod
    async def get_bidder_bids(bidder_id: int, limit: int = AUCTION.RECENT_BIDS_LIMIT) -> List[Bid]:
        """내 입찰 내역 (최신순, 경매 포함)"""
        return await Bid.filter(
            bidder_id=bidder_id
        ).order_by("-placed_at", "-id").limit(limit).prefetch_related("auction")
