"""
exceptions.py 유닛 테스트
"""
import pytest

from exceptions import (
    AgriBidError,
    NotFoundError,
    InvalidStateError,
    ValidationFailedError,
    PermissionDeniedError,
    ConflictError,
    UnexpectedError,
    AuctionNotFoundError,
    AuctionNotActiveError,
    AuctionEndedError,
    InvalidTransitionError,
    AuctionConflictError,
    BidNotFoundError,
    BidAlreadyVoidedError,
    SelfBidError,
    InvalidBidAmountError,
    BidTooLowError,
    AdminPermissionError,
)


class TestAgriBidError:
    """기본 예외 클래스 테스트"""

    def test_default_message(self):
        """기본 메시지 테스트"""
        error = AgriBidError()
        assert error.message == "알 수 없는 오류가 발생했습니다"
        assert str(error) == "알 수 없는 오류가 발생했습니다"

    def test_custom_message(self):
        """커스텀 메시지 테스트"""
        error = AgriBidError("커스텀 에러 메시지")
        assert error.message == "커스텀 에러 메시지"

    def test_inheritance(self):
        """상속 관계 테스트"""
        assert isinstance(AgriBidError(), Exception)


class TestTaxonomy:
    """분류별 상속 관계 테스트"""

    @pytest.mark.parametrize("error, category", [
        (AuctionNotFoundError(1), NotFoundError),
        (BidNotFoundError(1), NotFoundError),
        (AuctionNotActiveError(1, "draft"), InvalidStateError),
        (AuctionEndedError(1), InvalidStateError),
        (InvalidTransitionError(1, "sold", "active"), InvalidStateError),
        (BidAlreadyVoidedError(1), InvalidStateError),
        (SelfBidError(), ValidationFailedError),
        (InvalidBidAmountError(-1), ValidationFailedError),
        (BidTooLowError(1100, 1050), ValidationFailedError),
        (AuctionConflictError(1), ConflictError),
        (AdminPermissionError(1), PermissionDeniedError),
    ])
    def test_category(self, error, category):
        assert isinstance(error, category)
        assert isinstance(error, AgriBidError)

    def test_each_bid_rejection_is_distinct(self):
        kinds = {AuctionNotFoundError, AuctionNotActiveError, AuctionEndedError,
                 SelfBidError, InvalidBidAmountError, BidTooLowError}
        assert len(kinds) == 6
        for a in kinds:
            for b in kinds - {a}:
                assert not issubclass(a, b)


class TestBidTooLowError:
    """최소 입찰가 미달 예외 테스트"""

    def test_values_stored(self):
        error = BidTooLowError(1100, 1050)
        assert error.minimum_amount == 1100
        assert error.bid_amount == 1050

    def test_message_states_minimum(self):
        error = BidTooLowError(1100, 1050)
        assert "R1,100" in str(error)
        assert "최소 입찰가" in str(error)


class TestInvalidStateError:
    """잘못된 상태 예외 테스트"""

    def test_default_message(self):
        error = InvalidStateError("active", "draft")
        assert error.expected_state == "active"
        assert error.current_state == "draft"
        assert "active" in str(error) and "draft" in str(error)

    def test_transition_message(self):
        error = InvalidTransitionError(7, "sold", "active")
        assert error.auction_id == 7
        assert error.target_status == "active"
        assert "sold" in str(error)


class TestConflictError:
    """충돌 예외 테스트"""

    def test_retryable(self):
        error = AuctionConflictError(3)
        assert error.retryable is True
        assert error.auction_id == 3


class TestUnexpectedError:
    """예상 외 예외 테스트"""

    def test_generic_message(self):
        error = UnexpectedError()
        assert "다시 시도" in error.message
