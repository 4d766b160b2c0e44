"""
Interaction 응답 유틸리티

도메인 예외를 사용자 메시지로 바꿔 응답합니다.
"""
import logging

import discord

from exceptions import AgriBidError, UnexpectedError

logger = logging.getLogger(__name__)


async def send_ephemeral(interaction: discord.Interaction, content: str) -> None:
    """응답 여부에 따라 response/followup 중 하나로 전송"""
    if interaction.response.is_done():
        await interaction.followup.send(content, ephemeral=True)
    else:
        await interaction.response.send_message(content, ephemeral=True)


async def send_error(interaction: discord.Interaction, error: Exception) -> None:
    """
    예외를 사용자 메시지로 전송

    AgriBidError는 message를 그대로, 그 외 예외는 로그만 남기고 일반 메시지로 응답합니다.
    """
    if isinstance(error, AgriBidError):
        await send_ephemeral(interaction, f"⚠️ {error.message}")
        return

    logger.error(f"Unexpected error in /{interaction.command.name if interaction.command else '?'}: {error}", exc_info=error)
    await send_ephemeral(interaction, f"❌ {UnexpectedError().message}")
