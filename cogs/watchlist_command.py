"""
관심 경매 커맨드
"""
import logging

import discord
from discord import app_commands
from discord.ext import commands

from bot import GUILD_IDS
from cogs.auction_command import format_auction_lines
from decorator.account import requires_account
from models.repos import get_account_by_discord_id
from service.auction import WatchlistService
from utils.interaction import send_error

logger = logging.getLogger(__name__)


class WatchlistCommand(commands.Cog):
    """관심 경매 커맨드"""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="관심", description="⭐ 경매를 관심 목록에 추가하거나 뺍니다")
    @app_commands.guilds(*GUILD_IDS)
    @app_commands.describe(auction_id="경매 번호")
    @requires_account()
    async def toggle(self, interaction: discord.Interaction, auction_id: int):
        user = await get_account_by_discord_id(interaction.user.id)
        try:
            watched = await WatchlistService.toggle(user.id, auction_id)
        except Exception as e:
            await send_error(interaction, e)
            return

        message = "⭐ 관심 목록에 추가했습니다." if watched else "☆ 관심 목록에서 뺐습니다."
        await interaction.response.send_message(f"경매 **#{auction_id}**: {message}", ephemeral=True)

    @app_commands.command(name="관심목록", description="⭐ 관심 경매 목록을 확인합니다")
    @app_commands.guilds(*GUILD_IDS)
    @requires_account()
    async def watched(self, interaction: discord.Interaction):
        user = await get_account_by_discord_id(interaction.user.id)
        auctions = await WatchlistService.get_watched_auctions(user.id)

        await interaction.response.send_message(
            format_auction_lines(auctions[:20], show_status=True) or "관심 경매가 없습니다.",
            ephemeral=True
        )


async def setup(bot: commands.Bot):
    await bot.add_cog(WatchlistCommand(bot))
