"""배경 작업 Cog - 만료 경매 주기 정산"""
import logging
from discord.ext import commands, tasks

from config.auction import SWEEP
from service.auction.settlement_service import SettlementService

logger = logging.getLogger(__name__)


class BackgroundTasksCog(commands.Cog):
    """주기적 배경 작업 관리"""

    def __init__(self, bot):
        self.bot = bot
        self.settle_expired_auctions.start()
        logger.info("BackgroundTasksCog initialized")

    def cog_unload(self):
        """Cog 언로드 시 작업 정지"""
        self.settle_expired_auctions.cancel()
        logger.info("BackgroundTasksCog unloaded")

    @tasks.loop(minutes=SWEEP.INTERVAL_MINUTES)
    async def settle_expired_auctions(self):
        """만료 경매 정산 (1분마다)"""
        try:
            result = await SettlementService.settle_expired_auctions()

            if result.settled_count > 0:
                logger.info(
                    f"🔨 Settled {result.settled_count} expired auctions "
                    f"(sold={len(result.sold)}, unsold={len(result.unsold)})"
                )
            else:
                logger.debug("No expired auctions to settle")

        except Exception as e:
            logger.error(f"Failed to settle expired auctions: {e}", exc_info=True)

    @settle_expired_auctions.before_loop
    async def before_settle(self):
        """봇 준비 대기"""
        await self.bot.wait_until_ready()
        logger.info("Auction settlement task ready")


async def setup(bot):
    """Cog 로드"""
    await bot.add_cog(BackgroundTasksCog(bot))
