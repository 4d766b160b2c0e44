"""
유저 관련 명령어 (등록, 알림)
"""
import logging

import discord
from discord import app_commands
from discord.ext import commands

from bot import GUILD_IDS
from decorator.account import requires_account
from exceptions import AgriBidError
from models import UserRole
from models.repos import get_account_by_discord_id
from service.notification import NotificationService
from service.user_service import register_user
from utils.interaction import send_error

logger = logging.getLogger(__name__)


class UserCommand(commands.Cog):
    """유저 관련 명령어"""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="등록", description="📝 경매장 계정을 등록합니다")
    @app_commands.guilds(*GUILD_IDS)
    @app_commands.describe(role="구매자 또는 판매자")
    @app_commands.choices(role=[
        app_commands.Choice(name="구매자", value=UserRole.BUYER.value),
        app_commands.Choice(name="판매자", value=UserRole.SELLER.value),
    ])
    async def register(self, interaction: discord.Interaction, role: app_commands.Choice[str]):
        try:
            user = await register_user(
                discord_id=interaction.user.id,
                username=interaction.user.name,
                role=UserRole(role.value),
            )
        except AgriBidError as e:
            await send_error(interaction, e)
            return

        await interaction.response.send_message(
            f"✅ **{user.username}** 님, {role.name} 계정으로 등록되었습니다.",
            ephemeral=True
        )

    @app_commands.command(name="알림", description="🔔 읽지 않은 알림을 확인합니다")
    @app_commands.guilds(*GUILD_IDS)
    @requires_account()
    async def notifications(self, interaction: discord.Interaction):
        user = await get_account_by_discord_id(interaction.user.id)
        unread = await NotificationService.get_unread(user.id, limit=10)

        if not unread:
            await interaction.response.send_message("📭 새 알림이 없습니다.", ephemeral=True)
            return

        embed = discord.Embed(
            title=f"🔔 새 알림 ({len(unread)}건)",
            color=discord.Color.blue()
        )
        for notification in unread:
            embed.add_field(name=notification.title, value=notification.message, inline=False)

        await NotificationService.mark_all_as_read(user.id)
        await interaction.response.send_message(embed=embed, ephemeral=True)


async def setup(bot: commands.Bot):
    await bot.add_cog(UserCommand(bot))
