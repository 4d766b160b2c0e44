import logging

from exceptions import AdminPermissionError, UserAlreadyExistsError, UserNotFoundError
from models import User, UserRole
from models.repos import exists_account_by_discord_id

logger = logging.getLogger(__name__)


async def register_user(discord_id: int, username: str, role: UserRole = UserRole.BUYER) -> User:
    if await exists_account_by_discord_id(discord_id):
        raise UserAlreadyExistsError(discord_id)
    user = await User.create(discord_id=discord_id, username=username, role=role)
    logger.info(f"Registered user {user.id} ({role.value})")
    return user


async def require_admin(user_id: int) -> User:
    """관리자 권한 확인 후 User 반환"""
    user = await User.get_or_none(id=user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    if not user.is_admin:
        raise AdminPermissionError(user_id)
    return user
