"""
경매 커맨드

구매자/판매자용 경매 명령어를 제공합니다.
"""
import logging

import discord
from discord import app_commands
from discord.ext import commands

from bot import GUILD_IDS
from decorator.account import requires_account
from exceptions import AuctionNotFoundError, BidTooLowError
from models.auction import Auction
from models.users import UserRole
from models.bid import BidStatus
from models.repos import get_account_by_discord_id
from service.auction import BidLedger, SettlementService
from utils.interaction import send_error

logger = logging.getLogger(__name__)


def build_auction_embed(auction: Auction, bids) -> discord.Embed:
    """경매 정보 Embed"""
    embed = discord.Embed(
        title=f"🚜 {auction.title}",
        description=f"{auction.year} {auction.make} {auction.model_name}",
        color=discord.Color.green()
    )
    embed.add_field(name="상태", value=auction.status.value, inline=True)
    embed.add_field(name="현재가", value=f"R{auction.current_price:,}", inline=True)
    embed.add_field(name="최소 증분", value=f"R{auction.min_increment:,}", inline=True)
    embed.add_field(
        name="종료",
        value=discord.utils.format_dt(auction.end_time, style="R")
        + (" (연장됨)" if auction.is_extended else ""),
        inline=True
    )

    lines = []
    for bid in bids[:10]:
        mark = "~~" if bid.status == BidStatus.VOIDED else ""
        lines.append(f"{mark}R{bid.amount:,} · <t:{int(bid.placed_at.timestamp())}:T>{mark}")
    embed.add_field(name="입찰 내역", value="\n".join(lines) or "입찰 없음", inline=False)
    return embed


def format_auction_lines(auctions, show_status: bool = False) -> str:
    """경매 목록 한 줄 요약"""
    lines = []
    for auction in auctions:
        line = (
            f"`#{auction.id}` **{auction.title}** · R{auction.current_price:,} · "
            f"{discord.utils.format_dt(auction.end_time, style='R')}"
        )
        if show_status:
            line += f" · {auction.status.value}"
        lines.append(line)
    return "\n".join(lines)


class AuctionCommand(commands.Cog):
    """경매 커맨드"""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="경매정보", description="🏛️ 경매 정보와 입찰 내역을 확인합니다")
    @app_commands.guilds(*GUILD_IDS)
    @app_commands.describe(auction_id="경매 번호")
    async def auction_info(self, interaction: discord.Interaction, auction_id: int):
        auction = await Auction.get_or_none(id=auction_id)
        if not auction:
            await send_error(interaction, AuctionNotFoundError(auction_id))
            return

        bids = await BidLedger.get_auction_bids(auction_id)
        await interaction.response.send_message(embed=build_auction_embed(auction, bids))

    @app_commands.command(name="입찰", description="💰 경매에 입찰합니다")
    @app_commands.guilds(*GUILD_IDS)
    @app_commands.describe(auction_id="경매 번호", amount="입찰 금액")
    @requires_account()
    async def place_bid(self, interaction: discord.Interaction, auction_id: int, amount: int):
        user = await get_account_by_discord_id(interaction.user.id)

        await interaction.response.defer(ephemeral=False)
        try:
            bid = await BidLedger.place_bid(auction_id, user.id, amount)
        except BidTooLowError as e:
            await interaction.followup.send(
                f"⚠️ 입찰 금액이 너무 낮습니다.\n"
                f"입찰가: **R{e.bid_amount:,}**\n"
                f"최소 입찰가: **R{e.minimum_amount:,}**",
                ephemeral=True,
            )
            return
        except Exception as e:
            await send_error(interaction, e)
            return

        await interaction.followup.send(
            f"✅ **입찰 완료!**\n"
            f"경매: **#{auction_id}**\n"
            f"입찰가: **R{bid.amount:,}**"
        )

    @app_commands.command(name="경매등록", description="📋 새 경매를 등록하고 검토를 요청합니다")
    @app_commands.guilds(*GUILD_IDS)
    @app_commands.describe(
        title="제목",
        make="제조사",
        model_name="모델명",
        year="연식",
        starting_price="시작가",
        reserve_price="최저 낙찰가",
    )
    @requires_account(UserRole.SELLER)
    async def create_listing(
        self,
        interaction: discord.Interaction,
        title: str,
        make: str,
        model_name: str,
        year: int,
        starting_price: int,
        reserve_price: int
    ):
        user = await get_account_by_discord_id(interaction.user.id)
        try:
            auction = await SettlementService.create_listing(
                seller_id=user.id,
                title=title,
                make=make,
                model_name=model_name,
                year=year,
                starting_price=starting_price,
                reserve_price=reserve_price,
            )
        except Exception as e:
            await send_error(interaction, e)
            return

        await interaction.response.send_message(
            f"✅ 경매 **#{auction.id}** 등록 완료. 관리자 검토 후 진행됩니다.",
            ephemeral=True
        )

    @app_commands.command(name="경매목록", description="🔎 진행 중인 경매를 찾아봅니다")
    @app_commands.guilds(*GUILD_IDS)
    @app_commands.describe(search="제목 검색어")
    async def active_auctions(self, interaction: discord.Interaction, search: str | None = None):
        auctions = await SettlementService.get_active_auctions(search=search, limit=20)
        if not auctions:
            await interaction.response.send_message("📭 진행 중인 경매가 없습니다.", ephemeral=True)
            return

        embed = discord.Embed(
            title=f"🏛️ 진행 중인 경매 ({len(auctions)}건)",
            description=format_auction_lines(auctions),
            color=discord.Color.green()
        )
        await interaction.response.send_message(embed=embed)

    @app_commands.command(name="내경매", description="📦 내가 등록한 경매를 확인합니다")
    @app_commands.guilds(*GUILD_IDS)
    @requires_account()
    async def my_auctions(self, interaction: discord.Interaction):
        user = await get_account_by_discord_id(interaction.user.id)
        auctions = await SettlementService.get_seller_auctions(user.id)

        await interaction.response.send_message(
            format_auction_lines(auctions[:20], show_status=True) or "등록한 경매가 없습니다.",
            ephemeral=True
        )

    @app_commands.command(name="내입찰", description="🧾 내 입찰 내역을 확인합니다")
    @app_commands.guilds(*GUILD_IDS)
    @requires_account()
    async def my_bids(self, interaction: discord.Interaction):
        user = await get_account_by_discord_id(interaction.user.id)
        bids = await BidLedger.get_bidder_bids(user.id, limit=20)

        lines = []
        for bid in bids:
            mark = "~~" if bid.status == BidStatus.VOIDED else ""
            lines.append(f"{mark}`#{bid.auction.id}` {bid.auction.title} · R{bid.amount:,}{mark}")
        await interaction.response.send_message("\n".join(lines) or "입찰 내역이 없습니다.", ephemeral=True)


async def setup(bot: commands.Bot):
    await bot.add_cog(AuctionCommand(bot))
