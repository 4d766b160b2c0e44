"""
pytest 설정 및 공통 픽스처 정의
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import AsyncGenerator
from unittest.mock import MagicMock, AsyncMock

import pytest

# 프로젝트 루트를 Python 경로에 추가
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tests.fixtures.auctions import TRACTOR_LISTING  # noqa: E402
from tests.fixtures.users import ADMIN, BUYER_A, BUYER_B, SELLER  # noqa: E402


# 테스트 기준 시각
NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


# =============================================================================
# pytest 설정
# =============================================================================


def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


# =============================================================================
# 데이터베이스 픽스처
# =============================================================================


@pytest.fixture(scope="function")
async def test_db() -> AsyncGenerator[None, None]:
    """
    테스트용 인메모리 SQLite 데이터베이스
    각 테스트 함수마다 새로운 DB 생성
    """
    from tortoise import Tortoise

    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": ["models"]}
    )
    await Tortoise.generate_schemas()

    yield

    await Tortoise.close_connections()


# =============================================================================
# Mock 픽스처
# =============================================================================


@pytest.fixture
def mock_discord_interaction() -> MagicMock:
    """Mock Discord Interaction 객체"""
    interaction = MagicMock()
    interaction.user = MagicMock()
    interaction.user.id = 123456789
    interaction.user.name = "TestUser"
    interaction.command = MagicMock()
    interaction.command.name = "입찰"
    interaction.response = MagicMock()
    interaction.response.is_done = MagicMock(return_value=False)
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    return interaction


# =============================================================================
# 엔티티 팩토리 픽스처
# =============================================================================


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def user_factory(test_db):
    """테스트용 User 생성 팩토리 (DB 저장)"""
    from models.users import User, UserRole

    async def _create_user(discord_id: int, username: str, role: str = "buyer") -> User:
        return await User.create(discord_id=discord_id, username=username, role=UserRole(role))

    return _create_user


@pytest.fixture
async def seller(user_factory):
    return await user_factory(**SELLER)


@pytest.fixture
async def buyer_a(user_factory):
    return await user_factory(**BUYER_A)


@pytest.fixture
async def buyer_b(user_factory):
    return await user_factory(**BUYER_B)


@pytest.fixture
async def admin(user_factory):
    return await user_factory(**ADMIN)


@pytest.fixture
def auction_factory(test_db, seller):
    """
    진행 중(active) 경매 생성 팩토리

    기본값은 시작가 1,000 / 증분 100 / 최저 낙찰가 5,000, 종료는 NOW + 1일
    """
    from models.auction import Auction, AuctionStatus

    async def _create_auction(
        status: AuctionStatus = AuctionStatus.ACTIVE,
        end_time: datetime | None = None,
        **overrides
    ) -> Auction:
        data = {**TRACTOR_LISTING, **overrides}
        data.setdefault("current_price", data["starting_price"])
        return await Auction.create(
            seller_id=seller.id,
            status=status,
            start_time=NOW - timedelta(days=6),
            end_time=end_time or NOW + timedelta(days=1),
            **data
        )

    return _create_auction


@pytest.fixture
async def auction(auction_factory):
    """기본 진행 중 경매"""
    return await auction_factory()
