"""
관리자 커맨드

경매 승인/반려와 입찰 무효 처리를 제공합니다.
"""
import logging

import discord
from discord import app_commands
from discord.ext import commands

from bot import GUILD_ID
from cogs.auction_command import build_auction_embed
from config.auction import AUCTION
from models.repos import get_account_by_discord_id
from service.auction import AdminAuctionService
from utils.interaction import send_ephemeral, send_error

logger = logging.getLogger(__name__)


class AdminCommand(commands.GroupCog, group_name="admin", group_description="관리자 전용 명령어"):
    """관리자 커맨드"""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        super().__init__()

    async def _actor_id(self, interaction: discord.Interaction) -> int | None:
        user = await get_account_by_discord_id(interaction.user.id)
        if user is None:
            await send_ephemeral(interaction, "❗ 계정 등록이 필요합니다.")
            return None
        return user.id

    @app_commands.command(name="승인", description="검토 대기 중인 경매를 승인합니다")
    @app_commands.describe(auction_id="경매 번호", duration_days="진행 기간 (일)")
    async def approve(
        self,
        interaction: discord.Interaction,
        auction_id: int,
        duration_days: int = AUCTION.DEFAULT_DURATION_DAYS
    ):
        actor_id = await self._actor_id(interaction)
        if actor_id is None:
            return

        try:
            auction = await AdminAuctionService.approve_auction(actor_id, auction_id, duration_days)
        except Exception as e:
            await send_error(interaction, e)
            return

        await interaction.response.send_message(
            f"✅ 경매 **#{auction.id}** 승인 완료. "
            f"종료: {discord.utils.format_dt(auction.end_time, style='F')}",
            ephemeral=True
        )

    @app_commands.command(name="반려", description="검토 대기 중인 경매를 반려합니다")
    @app_commands.describe(auction_id="경매 번호", reason="반려 사유")
    async def reject(self, interaction: discord.Interaction, auction_id: int, reason: str | None = None):
        actor_id = await self._actor_id(interaction)
        if actor_id is None:
            return

        try:
            auction = await AdminAuctionService.reject_auction(actor_id, auction_id, reason)
        except Exception as e:
            await send_error(interaction, e)
            return

        await interaction.response.send_message(f"🚫 경매 **#{auction.id}** 반려 완료.", ephemeral=True)

    @app_commands.command(name="입찰무효", description="입찰을 무효 처리하고 현재가를 다시 계산합니다")
    @app_commands.describe(bid_id="입찰 번호", reason="무효 사유")
    async def void_bid(self, interaction: discord.Interaction, bid_id: int, reason: str):
        actor_id = await self._actor_id(interaction)
        if actor_id is None:
            return

        await interaction.response.defer(ephemeral=True)
        try:
            snapshot = await AdminAuctionService.void_bid(actor_id, bid_id, reason)
        except Exception as e:
            await send_error(interaction, e)
            return

        await interaction.followup.send(
            f"🗑️ 입찰 **#{bid_id}** 무효 처리 완료. 새 현재가: **R{snapshot.current_price:,}**",
            embed=build_auction_embed(snapshot.auction, snapshot.bids),
            ephemeral=True
        )

    @app_commands.command(name="최근입찰", description="최근 입찰 내역을 확인합니다")
    async def recent_bids(self, interaction: discord.Interaction):
        actor_id = await self._actor_id(interaction)
        if actor_id is None:
            return

        try:
            bids = await AdminAuctionService.get_recent_bids(actor_id, limit=20)
        except Exception as e:
            await send_error(interaction, e)
            return

        lines = [
            f"`#{bid.id}` {bid.auction.title} · R{bid.amount:,} · {bid.status.value}"
            for bid in bids
        ]
        await interaction.response.send_message("\n".join(lines) or "입찰 없음", ephemeral=True)


async def setup(bot: commands.Bot):
    await bot.add_cog(AdminCommand(bot), guild=discord.Object(id=GUILD_ID))
