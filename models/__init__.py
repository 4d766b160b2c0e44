from models.users import User, UserRole
from models.auction import Auction, AuctionStatus, ALLOWED_TRANSITIONS, TERMINAL_STATUSES
from models.bid import Bid, BidStatus
from models.audit_log import AuditLog, AuditAction
from models.notification import Notification, NotificationType
from models.watchlist import WatchlistEntry
from models.repos.users_repo import (
    get_account_by_discord_id,
    exists_account_by_discord_id,
)

__all__ = [
    "User",
    "UserRole",
    "Auction",
    "AuctionStatus",
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "Bid",
    "BidStatus",
    "AuditLog",
    "AuditAction",
    "Notification",
    "NotificationType",
    "WatchlistEntry",
    "get_account_by_discord_id",
    "exists_account_by_discord_id",
]
