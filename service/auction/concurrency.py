"""
경매 행 단위 동시성 제어

경매 한 건의 가격/상태 쓰기는 (id, version) compare-and-set으로 직렬화합니다.
경매끼리는 서로 잠그지 않습니다.
"""
import logging
from typing import Awaitable, Callable, TypeVar

from config.auction import AUCTION
from exceptions import AuctionConflictError
from models.auction import Auction

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def update_auction_versioned(auction: Auction, conn, **changes) -> None:
    """
    버전 검사 후 경매 갱신

    읽은 시점의 version과 DB의 version이 같을 때만 쓰고, 성공하면
    인스턴스에도 변경 내용과 증가한 version을 반영합니다.

    Raises:
        AuctionConflictError: 그 사이 다른 요청이 경매를 갱신함
    """
    next_version = auction.version + 1
    updated = await Auction.filter(
        id=auction.id,
        version=auction.version
    ).using_db(conn).update(version=next_version, **changes)

    if not updated:
        raise AuctionConflictError(auction.id)

    for field_name, value in changes.items():
        setattr(auction, field_name, value)
    auction.version = next_version


async def run_with_conflict_retry(
    operation: Callable[[], Awaitable[T]],
    auction_id: int,
    label: str,
    max_attempts: int = AUCTION.MAX_WRITE_ATTEMPTS
) -> T:
    """
    충돌 시 재시도

    operation은 매번 새 트랜잭션에서 경매를 다시 읽어야 합니다.
    max_attempts 번 모두 충돌하면 마지막 AuctionConflictError를 그대로 올립니다.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except AuctionConflictError:
            if attempt == max_attempts:
                logger.warning(
                    f"{label} on auction {auction_id} gave up after {attempt} conflicting attempts"
                )
                raise
            logger.debug(f"{label} on auction {auction_id} conflicted (attempt {attempt}), retrying")

    raise AuctionConflictError(auction_id)
