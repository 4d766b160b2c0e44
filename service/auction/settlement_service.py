"""
경매 정산 서비스

경매 상태 전이(등록 → 검토 → 진행 → 낙찰/유찰/반려)와 현재가 재계산,
만료 경매 일괄 정산(스윕)을 담당합니다.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from tortoise.transactions import in_transaction

from config.auction import AUCTION
from exceptions import (
    AgriBidError,
    AuctionNotEndedError,
    AuctionNotFoundError,
    InvalidDurationError,
    InvalidListingError,
    InvalidTransitionError,
    NotAuctionOwnerError,
    UserNotFoundError,
)
from models.auction import Auction, AuctionStatus
from models.notification import NotificationType
from models.users import User
from service.auction.bid_ledger import BidLedger
from service.auction.concurrency import run_with_conflict_retry, update_auction_versioned
from utils.clock import utc_now
from service.notification.notification_service import NotificationService

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    """스윕 1회 결과"""

    sold: List[int] = field(default_factory=list)
    unsold: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)

    @property
    def settled_count(self) -> int:
        return len(self.sold) + len(self.unsold)


class SettlementService:
    """경매 상태 전이 및 정산 로직"""

    # =========================================================================
    # 등록 (Listing)
    # =========================================================================

    @staticmethod
    def derive_min_increment(starting_price: int) -> int:
        if starting_price < AUCTION.SMALL_INCREMENT_THRESHOLD:
            return AUCTION.SMALL_MIN_INCREMENT
        return AUCTION.LARGE_MIN_INCREMENT

    @staticmethod
    async def create_listing(
        seller_id: int,
        title: str,
        make: str,
        model_name: str,
        year: int,
        starting_price: int,
        reserve_price: int,
        operating_hours: int = 0,
        location: str = "",
        description: Optional[str] = None,
        submit: bool = True,
        now: Optional[datetime] = None
    ) -> Auction:
        """
        경매 등록

        Args:
            seller_id: 판매자 User.id
            title: 제목
            make: 제조사
            model_name: 모델명
            year: 연식
            starting_price: 시작가
            reserve_price: 최저 낙찰가
            operating_hours: 가동 시간
            location: 위치
            description: 설명
            submit: True면 바로 검토 대기(pending_review)로 제출
            now: 등록 시각

        Returns:
            생성된 Auction

        Raises:
            UserNotFoundError: 판매자 없음
            InvalidListingError: 가격/연식이 유효하지 않음
        """
        now = utc_now(now)

        if not await User.exists(id=seller_id):
            raise UserNotFoundError(seller_id)

        # Guard: 가격 검증
        if starting_price <= 0:
            raise InvalidListingError("시작가는 0보다 커야 합니다")

        if reserve_price < starting_price:
            raise InvalidListingError("최저 낙찰가는 시작가 이상이어야 합니다")

        if year <= 0:
            raise InvalidListingError("연식이 올바르지 않습니다")

        # 시작/종료 시각은 승인 시점에 다시 정해짐
        auction = await Auction.create(
            seller_id=seller_id,
            title=title,
            make=make,
            model_name=model_name,
            year=year,
            operating_hours=operating_hours,
            location=location,
            description=description,
            starting_price=starting_price,
            reserve_price=reserve_price,
            min_increment=SettlementService.derive_min_increment(starting_price),
            current_price=starting_price,
            start_time=now,
            end_time=now + timedelta(days=AUCTION.DEFAULT_DURATION_DAYS),
            status=AuctionStatus.DRAFT,
        )

        logger.info(
            f"User {seller_id} created auction {auction.id} "
            f"(start R{starting_price}, reserve R{reserve_price})"
        )

        if submit:
            auction = await SettlementService.submit_for_review(auction.id, seller_id)

        return auction

    # =========================================================================
    # 상태 전이 (Transitions)
    # =========================================================================

    @staticmethod
    async def transition(
        auction_id: int,
        target: AuctionStatus,
        conn=None,
        **changes
    ) -> Auction:
        """
        상태 전이 (버전 검사 + 충돌 재시도)

        conn이 주어지면 호출자의 트랜잭션 안에서 한 번만 실행합니다.

        Raises:
            AuctionNotFoundError: 경매 없음
            InvalidTransitionError: 전이 표에 없는 전이
        """
        async def _apply(db) -> Auction:
            auction = await Auction.get_or_none(id=auction_id, using_db=db)
            if not auction:
                raise AuctionNotFoundError(auction_id)

            SettlementService._check_transition(auction, target)
            await update_auction_versioned(auction, db, status=target, **changes)
            return auction

        if conn is not None:
            auction = await _apply(conn)
        else:
            async def _once() -> Auction:
                async with in_transaction() as new_conn:
                    return await _apply(new_conn)

            auction = await run_with_conflict_retry(_once, auction_id, f"transition to {target.value}")

        logger.info(f"Auction {auction_id} -> {target.value}")
        return auction

    @staticmethod
    def _check_transition(auction: Auction, target: AuctionStatus) -> None:
        if not auction.status.can_transition_to(target):
            raise InvalidTransitionError(auction.id, auction.status.value, target.value)

    @staticmethod
    async def submit_for_review(auction_id: int, seller_id: int) -> Auction:
        """draft → pending_review (판매자 제출)"""
        auction = await Auction.get_or_none(id=auction_id)
        if not auction:
            raise AuctionNotFoundError(auction_id)

        # Guard: 본인 확인
        if auction.seller_id != seller_id:
            raise NotAuctionOwnerError(auction_id, seller_id)

        return await SettlementService.transition(auction_id, AuctionStatus.PENDING_REVIEW)

    @staticmethod
    async def approve_auction(
        auction_id: int,
        duration_days: int = AUCTION.DEFAULT_DURATION_DAYS,
        now: Optional[datetime] = None,
        conn=None
    ) -> Auction:
        """
        pending_review → active (관리자 승인)

        승인 시각부터 duration_days 동안 진행됩니다.

        Raises:
            InvalidDurationError: 기간이 1~365일 범위를 벗어남
        """
        if not (1 <= duration_days <= AUCTION.MAX_DURATION_DAYS):
            raise InvalidDurationError(duration_days, AUCTION.MAX_DURATION_DAYS)

        now = utc_now(now)
        return await SettlementService.transition(
            auction_id,
            AuctionStatus.ACTIVE,
            conn=conn,
            start_time=now,
            end_time=now + timedelta(days=duration_days),
        )

    @staticmethod
    async def reject_auction(auction_id: int, reason: Optional[str] = None, conn=None) -> Auction:
        """pending_review → rejected (관리자 반려)"""
        return await SettlementService.transition(
            auction_id,
            AuctionStatus.REJECTED,
            conn=conn,
            rejection_reason=reason,
        )

    # =========================================================================
    # 정산 (Settlement)
    # =========================================================================

    @staticmethod
    async def settle_auction(auction_id: int, now: Optional[datetime] = None) -> Auction:
        """
        만료 경매 1건 정산

        최고 유효 입찰이 있고 현재가가 최저 낙찰가 이상이면 sold, 아니면 unsold.

        Raises:
            AuctionNotFoundError: 경매 없음
            InvalidTransitionError: 이미 정산되었거나 진행 중이 아님
            AuctionNotEndedError: 종료 시각 전 (마감 연장 포함)
        """
        now = utc_now(now)

        async def _once() -> Auction:
            async with in_transaction() as conn:
                auction = await Auction.get_or_none(id=auction_id, using_db=conn)
                if not auction:
                    raise AuctionNotFoundError(auction_id)

                if auction.status != AuctionStatus.ACTIVE:
                    raise InvalidTransitionError(
                        auction_id, auction.status.value, "sold|unsold"
                    )

                if not auction.has_ended(now):
                    raise AuctionNotEndedError(auction_id)

                leading = await BidLedger.leading_bid(auction_id, conn=conn)

                if leading and auction.current_price >= auction.reserve_price:
                    await update_auction_versioned(
                        auction, conn,
                        status=AuctionStatus.SOLD,
                        winner_id=leading.bidder_id,
                        settled_at=now,
                    )
                else:
                    await update_auction_versioned(
                        auction, conn,
                        status=AuctionStatus.UNSOLD,
                        winner_id=None,
                        settled_at=now,
                    )
            return auction

        auction = await run_with_conflict_retry(_once, auction_id, "settle_auction")

        logger.info(
            f"Settled auction {auction_id}: {auction.status.value} "
            f"at R{auction.current_price} (reserve R{auction.reserve_price})"
        )
        return auction

    @staticmethod
    async def settle_expired_auctions(now: Optional[datetime] = None) -> SweepResult:
        """
        만료 경매 일괄 정산 (크론잡용)

        경매별로 독립 처리하며, 한 건의 실패가 나머지 정산을 막지 않습니다.
        이미 정산된 경매는 조회 조건(status == active)에서 빠지므로 재실행해도 결과가 같습니다.
        """
        now = utc_now(now)
        result = SweepResult()

        expired_ids = await Auction.filter(
            status=AuctionStatus.ACTIVE,
            end_time__lte=now
        ).order_by("end_time").values_list("id", flat=True)

        for auction_id in expired_ids:
            try:
                auction = await SettlementService.settle_auction(auction_id, now)
            except (InvalidTransitionError, AuctionNotEndedError) as e:
                # 다른 스윕이 먼저 정산했거나 마감이 연장됨
                logger.debug(f"Skipped auction {auction_id}: {e.message}")
                result.skipped.append(auction_id)
                continue
            except AgriBidError as e:
                logger.warning(f"Failed to settle auction {auction_id}: {e.message}")
                result.failed.append(auction_id)
                continue
            except Exception as e:
                logger.error(f"Unexpected error settling auction {auction_id}: {e}", exc_info=True)
                result.failed.append(auction_id)
                continue

            if auction.status == AuctionStatus.SOLD:
                result.sold.append(auction_id)
            else:
                result.unsold.append(auction_id)

            await SettlementService._notify_settlement(auction)

        if expired_ids:
            logger.info(
                f"Sweep processed {len(expired_ids)} expired auctions "
                f"(sold={len(result.sold)}, unsold={len(result.unsold)}, "
                f"skipped={len(result.skipped)}, failed={len(result.failed)})"
            )

        return result

    # =========================================================================
    # 현재가 재계산 (Recompute)
    # =========================================================================

    @staticmethod
    async def recompute_price(auction_id: int, conn=None) -> Auction:
        """
        현재가 재계산

        최고 유효 입찰가(없으면 시작가)로 current_price를 맞춥니다. 상태는 바꾸지 않으며,
        이미 낙찰된 경매는 낙찰자도 새 최고 입찰자로 맞춥니다.
        conn이 주어지면 호출자의 트랜잭션 안에서 실행합니다.
        """
        if conn is not None:
            return await SettlementService._recompute_in(auction_id, conn)

        async def _once() -> Auction:
            async with in_transaction() as new_conn:
                return await SettlementService._recompute_in(auction_id, new_conn)

        return await run_with_conflict_retry(_once, auction_id, "recompute_price")

    @staticmethod
    async def _recompute_in(auction_id: int, conn) -> Auction:
        auction = await Auction.get_or_none(id=auction_id, using_db=conn)
        if not auction:
            raise AuctionNotFoundError(auction_id)

        leading = await BidLedger.leading_bid(auction_id, conn=conn)
        new_price = leading.amount if leading else auction.starting_price

        changes = {"current_price": new_price}
        if auction.status == AuctionStatus.SOLD:
            changes["winner_id"] = leading.bidder_id if leading else None

        old_price = auction.current_price
        await update_auction_versioned(auction, conn, **changes)

        logger.info(f"Recomputed auction {auction_id} price: R{old_price} -> R{new_price}")
        return auction

    # =========================================================================
    # 조회 (Query)
    # =========================================================================

    @staticmethod
    async def get_active_auctions(
        search: Optional[str] = None,
        limit: int = AUCTION.RECENT_BIDS_LIMIT
    ) -> List[Auction]:
        """진행 중인 경매 (마감 임박순, 제목 검색)"""
        query = Auction.filter(status=AuctionStatus.ACTIVE)
        if search and search.strip():
            query = query.filter(title__icontains=search.strip())
        return await query.order_by("end_time", "id").limit(limit)

    @staticmethod
    async def get_seller_auctions(
        seller_id: int,
        status: Optional[AuctionStatus] = None
    ) -> List[Auction]:
        """내 경매 (최신 등록순)"""
        query = Auction.filter(seller_id=seller_id)
        if status is not None:
            query = query.filter(status=status)
        return await query.order_by("-created_at", "-id")

    # =========================================================================
    # 내부 헬퍼
    # =========================================================================

    @staticmethod
    async def _notify_settlement(auction: Auction) -> None:
        """정산 결과 알림 (실패해도 정산은 유지)"""
        link = f"/auction/{auction.id}"
        try:
            if auction.status == AuctionStatus.SOLD:
                await NotificationService.notify(
                    recipient_id=auction.seller_id,
                    notification_type=NotificationType.SUCCESS,
                    title="경매 낙찰",
                    message=f"**{auction.title}**이(가) R{auction.current_price:,}에 낙찰되었습니다.",
                    link=link,
                )
                await NotificationService.notify(
                    recipient_id=auction.winner_id,
                    notification_type=NotificationType.SUCCESS,
                    title="경매 낙찰 성공",
                    message=f"**{auction.title}**을(를) R{auction.current_price:,}에 낙찰받았습니다.",
                    link=link,
                )
            else:
                await NotificationService.notify(
                    recipient_id=auction.seller_id,
                    notification_type=NotificationType.WARNING,
                    title="경매 유찰",
                    message=(
                        f"**{auction.title}**의 경매가 최저 낙찰가 "
                        f"R{auction.reserve_price:,}에 도달하지 못해 유찰되었습니다."
                    ),
                    link=link,
                )
        except Exception as e:
            logger.error(f"Failed to send settlement notifications for auction {auction.id}: {e}", exc_info=True)
