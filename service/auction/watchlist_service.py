"""
관심 경매 서비스
"""
import logging
from typing import List

from tortoise.exceptions import IntegrityError

from exceptions import AuctionNotFoundError
from models.auction import Auction
from models.watchlist import WatchlistEntry

logger = logging.getLogger(__name__)


class WatchlistService:
    """관심 경매 등록/해제/조회"""

    @staticmethod
    async def toggle(user_id: int, auction_id: int) -> bool:
        """
        관심 경매 토글

        Returns:
            토글 후 관심 등록 상태 (True: 등록, False: 해제)

        Raises:
            AuctionNotFoundError: 경매 없음
        """
        if not await Auction.exists(id=auction_id):
            raise AuctionNotFoundError(auction_id)

        deleted = await WatchlistEntry.filter(user_id=user_id, auction_id=auction_id).delete()
        if deleted:
            logger.info(f"User {user_id} unwatched auction {auction_id}")
            return False

        try:
            await WatchlistEntry.create(user_id=user_id, auction_id=auction_id)
        except IntegrityError:
            # 동시에 들어온 다른 토글이 먼저 등록함
            pass

        logger.info(f"User {user_id} watched auction {auction_id}")
        return True

    @staticmethod
    async def is_watched(user_id: int, auction_id: int) -> bool:
        return await WatchlistEntry.exists(user_id=user_id, auction_id=auction_id)

    @staticmethod
    async def get_watched_auctions(user_id: int) -> List[Auction]:
        """관심 경매 목록 (최근 등록순)"""
        entries = await WatchlistEntry.filter(
            user_id=user_id
        ).order_by("-created_at", "-id").prefetch_related("auction")
        return [entry.auction for entry in entries]
