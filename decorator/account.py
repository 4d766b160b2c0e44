from discord import Interaction, app_commands

from models import UserRole, get_account_by_discord_id


def requires_account(*roles: UserRole):
    """
    등록된 계정만 사용 가능한 명령어

    roles를 주면 해당 역할(또는 관리자)만 통과합니다.
    """
    async def predicate(interaction: Interaction):
        user = await get_account_by_discord_id(interaction.user.id)
        if user is None:
            await interaction.response.send_message(
                "❗ 계정 등록이 필요합니다. `/등록` 명령어로 먼저 등록해주세요.",
                ephemeral=True
            )
            return False

        if roles and user.role not in roles and not user.is_admin:
            allowed = ", ".join(role.value for role in roles)
            await interaction.response.send_message(
                f"❗ 이 명령어는 {allowed} 계정만 사용할 수 있습니다.",
                ephemeral=True
            )
            return False
        return True

    return app_commands.check(predicate)
