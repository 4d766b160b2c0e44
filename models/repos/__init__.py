from models.repos.users_repo import (
    get_account_by_discord_id,
    exists_account_by_discord_id,
)
