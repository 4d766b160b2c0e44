"""경매 입찰/정산 시스템"""

from service.auction.bid_ledger import BidLedger
from service.auction.settlement_service import SettlementService, SweepResult
from service.auction.admin_service import AdminAuctionService, AuctionSnapshot
from service.auction.watchlist_service import WatchlistService

__all__ = [
    "BidLedger",
    "SettlementService",
    "SweepResult",
    "AdminAuctionService",
    "AuctionSnapshot",
    "WatchlistService",
]
