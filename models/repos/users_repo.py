from models.users import User


async def get_account_by_discord_id(discord_id) -> User | None:
    return await User.get_or_none(discord_id=discord_id)

async def exists_account_by_discord_id(discord_id) -> bool:
    return await User.exists(discord_id=discord_id)
