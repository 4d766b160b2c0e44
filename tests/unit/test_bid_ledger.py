"""
입찰 원장 테스트
"""
import asyncio
from datetime import timedelta

import pytest

from config.auction import AUCTION
from exceptions import (
    AuctionConflictError,
    AuctionEndedError,
    AuctionNotActiveError,
    AuctionNotFoundError,
    BidAlreadyVoidedError,
    BidNotFoundError,
    BidTooLowError,
    InvalidBidAmountError,
    SelfBidError,
)
from models.auction import Auction, AuctionStatus
from models.bid import Bid, BidStatus
from service.auction.bid_ledger import BidLedger


class TestPlaceBid:
    @pytest.mark.asyncio
    async def test_first_bid_at_starting_price_accepted(self, auction, buyer_a, now):
        bid = await BidLedger.place_bid(auction.id, buyer_a.id, 1000, now)

        assert bid.status == BidStatus.VALID
        assert bid.amount == 1000
        refreshed = await Auction.get(id=auction.id)
        assert refreshed.current_price == 1000
        assert refreshed.version == auction.version + 1

    @pytest.mark.asyncio
    async def test_first_bid_below_starting_price_rejected(self, auction, buyer_a, now):
        with pytest.raises(BidTooLowError) as exc_info:
            await BidLedger.place_bid(auction.id, buyer_a.id, 999, now)

        assert exc_info.value.minimum_amount == 1000

    @pytest.mark.asyncio
    async def test_increment_scenario(self, auction, buyer_a, buyer_b, now):
        await BidLedger.place_bid(auction.id, buyer_a.id, 1000, now)

        with pytest.raises(BidTooLowError) as exc_info:
            await BidLedger.place_bid(auction.id, buyer_b.id, 1050, now + timedelta(minutes=1))
        assert exc_info.value.minimum_amount == 1100

        await BidLedger.place_bid(auction.id, buyer_b.id, 1200, now + timedelta(minutes=2))

        refreshed = await Auction.get(id=auction.id)
        assert refreshed.current_price == 1200
        assert await Bid.filter(auction_id=auction.id).count() == 2

    @pytest.mark.asyncio
    async def test_rejected_bid_has_no_side_effects(self, auction, buyer_a, now):
        await BidLedger.place_bid(auction.id, buyer_a.id, 1000, now)
        before = await Auction.get(id=auction.id)

        with pytest.raises(BidTooLowError):
            await BidLedger.place_bid(auction.id, buyer_a.id, 1099, now)

        after = await Auction.get(id=auction.id)
        assert after.current_price == before.current_price
        assert after.version == before.version
        assert await Bid.filter(auction_id=auction.id).count() == 1

    @pytest.mark.asyncio
    async def test_auction_not_found(self, test_db, buyer_a, now):
        with pytest.raises(AuctionNotFoundError):
            await BidLedger.place_bid(9999, buyer_a.id, 1000, now)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [
        AuctionStatus.DRAFT,
        AuctionStatus.PENDING_REVIEW,
        AuctionStatus.SOLD,
        AuctionStatus.UNSOLD,
        AuctionStatus.REJECTED,
    ])
    async def test_auction_not_active(self, auction_factory, buyer_a, now, status):
        auction = await auction_factory(status=status)

        with pytest.raises(AuctionNotActiveError):
            await BidLedger.place_bid(auction.id, buyer_a.id, 5000, now)

    @pytest.mark.asyncio
    async def test_auction_ended(self, auction_factory, buyer_a, now):
        auction = await auction_factory(end_time=now)

        with pytest.raises(AuctionEndedError):
            await BidLedger.place_bid(auction.id, buyer_a.id, 5000, now)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [1, 1000, 5000, 10_000_000])
    async def test_self_bid_always_rejected(self, auction, seller, now, amount):
        with pytest.raises(SelfBidError):
            await BidLedger.place_bid(auction.id, seller.id, amount, now)

    @pytest.mark.asyncio
    async def test_self_bid_checked_before_amount(self, auction, seller, now):
        with pytest.raises(SelfBidError):
            await BidLedger.place_bid(auction.id, seller.id, -5, now)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -100, 1500.5, True, "2000"])
    async def test_invalid_amount(self, auction, buyer_a, now, amount):
        with pytest.raises(InvalidBidAmountError):
            await BidLedger.place_bid(auction.id, buyer_a.id, amount, now)

    @pytest.mark.asyncio
    async def test_new_price_visible_to_next_reader(self, auction, buyer_a, now):
        await BidLedger.place_bid(auction.id, buyer_a.id, 1300, now)

        assert (await Auction.get(id=auction.id)).current_price == 1300

    @pytest.mark.asyncio
    async def test_soft_close_extends_end_time(self, auction_factory, buyer_a, now):
        auction = await auction_factory(end_time=now + timedelta(seconds=60))

        await BidLedger.place_bid(auction.id, buyer_a.id, 1000, now)

        refreshed = await Auction.get(id=auction.id)
        assert refreshed.is_extended is True
        assert refreshed.end_time == now + timedelta(seconds=AUCTION.SOFT_CLOSE_WINDOW_SECONDS)

    @pytest.mark.asyncio
    async def test_no_extension_outside_window(self, auction, buyer_a, now):
        await BidLedger.place_bid(auction.id, buyer_a.id, 1000, now)

        refreshed = await Auction.get(id=auction.id)
        assert refreshed.is_extended is False
        assert refreshed.end_time == auction.end_time


class TestConcurrentBids:
    @pytest.mark.asyncio
    async def test_concurrent_bids_keep_price_monotonic(self, auction, user_factory, now):
        bidders = [
            await user_factory(discord_id=200000000 + i, username=f"racer{i}")
            for i in range(6)
        ]
        amounts = [1000, 1100, 1150, 1200, 1400, 1450]

        results = await asyncio.gather(
            *(
                BidLedger.place_bid(auction.id, bidder.id, amount, now)
                for bidder, amount in zip(bidders, amounts)
            ),
            return_exceptions=True
        )

        for result in results:
            assert isinstance(result, (Bid, BidTooLowError)), result

        accepted = await Bid.filter(auction_id=auction.id).order_by("id")
        assert accepted

        previous_price = None
        for bid in accepted:
            if previous_price is None:
                assert bid.amount >= auction.starting_price
            else:
                assert bid.amount >= previous_price + auction.min_increment
            previous_price = bid.amount

        refreshed = await Auction.get(id=auction.id)
        assert refreshed.current_price == max(b.amount for b in accepted)

    @pytest.mark.asyncio
    async def test_same_amount_race_accepts_one(self, auction, user_factory, buyer_a, now):
        await BidLedger.place_bid(auction.id, buyer_a.id, 1000, now)
        racers = [
            await user_factory(discord_id=300000000 + i, username=f"same{i}")
            for i in range(4)
        ]

        results = await asyncio.gather(
            *(BidLedger.place_bid(auction.id, r.id, 1100, now) for r in racers),
            return_exceptions=True
        )

        assert sum(isinstance(r, Bid) for r in results) == 1
        assert sum(isinstance(r, BidTooLowError) for r in results) == 3

    @pytest.mark.asyncio
    async def test_conflict_surfaces_after_bounded_retries(self, auction, buyer_a, now, monkeypatch):
        calls = []

        async def always_conflict(auction_id, bidder_id, amount, at):
            calls.append(auction_id)
            raise AuctionConflictError(auction_id)

        monkeypatch.setattr(BidLedger, "_place_bid_once", always_conflict)

        with pytest.raises(AuctionConflictError):
            await BidLedger.place_bid(auction.id, buyer_a.id, 1000, now)

        assert len(calls) == AUCTION.MAX_WRITE_ATTEMPTS


class TestVoidBid:
    @pytest.mark.asyncio
    async def test_void_leading_bid_recomputes_price(self, auction, buyer_a, buyer_b, admin, now):
        await BidLedger.place_bid(auction.id, buyer_a.id, 1000, now)
        await BidLedger.place_bid(auction.id, buyer_b.id, 1200, now + timedelta(minutes=1))
        top = await BidLedger.place_bid(auction.id, buyer_a.id, 1500, now + timedelta(minutes=2))

        voided = await BidLedger.void_bid(top.id, "shill bidding", admin.id, now)

        assert voided.status == BidStatus.VOIDED
        stored = await Bid.get(id=top.id)
        assert stored.status == BidStatus.VOIDED
        assert stored.void_reason == "shill bidding"
        assert stored.voided_by_id == admin.id
        assert (await Auction.get(id=auction.id)).current_price == 1200

    @pytest.mark.asyncio
    async def test_void_only_bid_resets_to_starting_price(self, auction, buyer_a, admin, now):
        bid = await BidLedger.place_bid(auction.id, buyer_a.id, 1300, now)

        await BidLedger.void_bid(bid.id, "duplicate", admin.id, now)

        assert (await Auction.get(id=auction.id)).current_price == auction.starting_price

    @pytest.mark.asyncio
    async def test_next_bid_after_void_uses_recomputed_price(self, auction, buyer_a, buyer_b, admin, now):
        await BidLedger.place_bid(auction.id, buyer_a.id, 1000, now)
        top = await BidLedger.place_bid(auction.id, buyer_b.id, 3000, now)
        await BidLedger.void_bid(top.id, "mistake", admin.id, now)

        bid = await BidLedger.place_bid(auction.id, buyer_b.id, 1100, now)

        assert bid.amount == 1100

    @pytest.mark.asyncio
    async def test_voided_bid_retained(self, auction, buyer_a, admin, now):
        bid = await BidLedger.place_bid(auction.id, buyer_a.id, 1000, now)

        await BidLedger.void_bid(bid.id, "test", admin.id, now)

        history = await BidLedger.get_auction_bids(auction.id)
        assert [b.id for b in history] == [bid.id]
        assert await BidLedger.get_auction_bids(auction.id, include_voided=False) == []

    @pytest.mark.asyncio
    async def test_void_twice(self, auction, buyer_a, admin, now):
        bid = await BidLedger.place_bid(auction.id, buyer_a.id, 1000, now)
        await BidLedger.void_bid(bid.id, "first", admin.id, now)

        with pytest.raises(BidAlreadyVoidedError):
            await BidLedger.void_bid(bid.id, "second", admin.id, now)

    @pytest.mark.asyncio
    async def test_void_missing_bid(self, test_db, admin, now):
        with pytest.raises(BidNotFoundError):
            await BidLedger.void_bid(424242, "missing", admin.id, now)


class TestLeadingBid:
    @pytest.mark.asyncio
    async def test_none_without_bids(self, auction):
        assert await BidLedger.leading_bid(auction.id) is None

    @pytest.mark.asyncio
    async def test_tie_broken_by_earliest_timestamp(self, auction, buyer_a, buyer_b, now):
        late = await Bid.create(auction_id=auction.id, bidder_id=buyer_b.id, amount=2000,
                                placed_at=now + timedelta(minutes=5))
        early = await Bid.create(auction_id=auction.id, bidder_id=buyer_a.id, amount=2000,
                                 placed_at=now)

        leading = await BidLedger.leading_bid(auction.id)

        assert leading.id == early.id
        assert leading.id != late.id

    @pytest.mark.asyncio
    async def test_voided_bids_ignored(self, auction, buyer_a, buyer_b, now):
        await Bid.create(auction_id=auction.id, bidder_id=buyer_a.id, amount=9000,
                         placed_at=now, status=BidStatus.VOIDED)
        valid = await Bid.create(auction_id=auction.id, bidder_id=buyer_b.id, amount=1500,
                                 placed_at=now)

        assert (await BidLedger.leading_bid(auction.id)).id == valid.id


class TestBidderBids:
    @pytest.mark.asyncio
    async def test_own_bids_newest_first(self, auction_factory, buyer_a, buyer_b, now):
        tractor = await auction_factory()
        baler = await auction_factory(title="Kuhn LSB 1290")
        first = await BidLedger.place_bid(tractor.id, buyer_a.id, 1000, now)
        await BidLedger.place_bid(tractor.id, buyer_b.id, 1100, now + timedelta(minutes=1))
        second = await BidLedger.place_bid(baler.id, buyer_a.id, 1000, now + timedelta(minutes=2))

        bids = await BidLedger.get_bidder_bids(buyer_a.id)

        assert [b.id for b in bids] == [second.id, first.id]
        assert bids[0].auction.title == "Kuhn LSB 1290"

    @pytest.mark.asyncio
    async def test_naive_timestamp_accepted(self, auction, buyer_a, now):
        bid = await BidLedger.place_bid(auction.id, buyer_a.id, 1000, now.replace(tzinfo=None))

        assert bid.placed_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_naive_timestamp_after_end(self, auction_factory, buyer_a, now):
        auction = await auction_factory(end_time=now)

        with pytest.raises(AuctionEndedError):
            await BidLedger.place_bid(auction.id, buyer_a.id, 1000, now.replace(tzinfo=None))
