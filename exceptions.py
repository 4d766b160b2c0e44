"""
AgriBid 커스텀 예외 클래스 정의

모든 예외는 AgriBidError를 상속받아 일관된 에러 처리를 제공합니다.
message는 사용자에게 그대로 노출해도 되는 문장으로 작성합니다.
"""


class AgriBidError(Exception):
    """AgriBid 기본 예외 클래스"""

    def __init__(self, message: str = "알 수 없는 오류가 발생했습니다"):
        self.message = message
        super().__init__(self.message)


# =============================================================================
# 분류 (Taxonomy)
# =============================================================================


class NotFoundError(AgriBidError):
    """대상을 찾을 수 없음"""
    pass


class InvalidStateError(AgriBidError):
    """잘못된 상태"""

    def __init__(self, expected_state: str, current_state: str, message: str | None = None):
        self.expected_state = expected_state
        self.current_state = current_state
        super().__init__(
            message or f"잘못된 상태입니다. (예상: {expected_state}, 현재: {current_state})"
        )


class ValidationFailedError(AgriBidError):
    """입력 검증 실패"""
    pass


class PermissionDeniedError(AgriBidError):
    """권한 없음"""
    pass


class ConflictError(AgriBidError):
    """동시 쓰기 충돌 (재시도 가능)"""

    retryable = True


class UnexpectedError(AgriBidError):
    """예상하지 못한 오류 (원본 메시지는 로그에만 남김)"""

    def __init__(self):
        super().__init__("요청을 처리하는 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요.")


# =============================================================================
# 사용자 관련 예외
# =============================================================================


class UserNotFoundError(NotFoundError):
    """사용자를 찾을 수 없음"""

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"사용자를 찾을 수 없습니다: {user_id}")


class UserAlreadyExistsError(ValidationFailedError):
    """이미 등록된 사용자"""

    def __init__(self, discord_id: int):
        self.discord_id = discord_id
        super().__init__(f"이미 등록된 사용자입니다: {discord_id}")


class AdminPermissionError(PermissionDeniedError):
    """관리자 권한 필요"""

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("관리자 권한이 필요합니다.")


# =============================================================================
# 경매 관련 예외
# =============================================================================


class AuctionNotFoundError(NotFoundError):
    """경매를 찾을 수 없음"""

    def __init__(self, auction_id: int):
        self.auction_id = auction_id
        super().__init__(f"경매를 찾을 수 없습니다: {auction_id}")


class AuctionNotActiveError(InvalidStateError):
    """진행 중이 아닌 경매"""

    def __init__(self, auction_id: int, current_status: str):
        self.auction_id = auction_id
        super().__init__(
            "active",
            current_status,
            f"진행 중인 경매가 아닙니다. (현재 상태: {current_status})",
        )


class AuctionEndedError(InvalidStateError):
    """종료 시각이 지난 경매"""

    def __init__(self, auction_id: int):
        self.auction_id = auction_id
        super().__init__("active", "ended", "이미 종료된 경매입니다.")


class AuctionNotEndedError(InvalidStateError):
    """아직 종료 시각이 지나지 않은 경매"""

    def __init__(self, auction_id: int):
        self.auction_id = auction_id
        super().__init__("ended", "active", "아직 종료되지 않은 경매입니다.")


class InvalidTransitionError(InvalidStateError):
    """허용되지 않은 상태 전이"""

    def __init__(self, auction_id: int, current_status: str, target_status: str):
        self.auction_id = auction_id
        self.target_status = target_status
        super().__init__(
            target_status,
            current_status,
            f"경매 상태를 {current_status}에서 {target_status}(으)로 변경할 수 없습니다.",
        )


class NotAuctionOwnerError(PermissionDeniedError):
    """본인 경매가 아님"""

    def __init__(self, auction_id: int, user_id: int):
        self.auction_id = auction_id
        self.user_id = user_id
        super().__init__("본인의 경매만 처리할 수 있습니다.")


class InvalidListingError(ValidationFailedError):
    """잘못된 등록 정보"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"경매 등록 정보가 올바르지 않습니다: {reason}")


class InvalidDurationError(ValidationFailedError):
    """잘못된 경매 기간"""

    def __init__(self, duration_days: int, max_days: int):
        self.duration_days = duration_days
        super().__init__(f"경매 기간은 1~{max_days}일이어야 합니다. (입력: {duration_days})")


class AuctionConflictError(ConflictError):
    """같은 경매에 대한 동시 쓰기 충돌"""

    def __init__(self, auction_id: int):
        self.auction_id = auction_id
        super().__init__("다른 요청과 충돌했습니다. 다시 시도해주세요.")


# =============================================================================
# 입찰 관련 예외
# =============================================================================


class BidNotFoundError(NotFoundError):
    """입찰을 찾을 수 없음"""

    def __init__(self, bid_id: int):
        self.bid_id = bid_id
        super().__init__(f"입찰을 찾을 수 없습니다: {bid_id}")


class BidAlreadyVoidedError(InvalidStateError):
    """이미 무효 처리된 입찰"""

    def __init__(self, bid_id: int):
        self.bid_id = bid_id
        super().__init__("valid", "voided", "이미 무효 처리된 입찰입니다.")


class SelfBidError(ValidationFailedError):
    """본인 경매 입찰"""

    def __init__(self):
        super().__init__("자신이 등록한 경매에는 입찰할 수 없습니다.")


class InvalidBidAmountError(ValidationFailedError):
    """입찰 금액이 양의 정수가 아님"""

    def __init__(self, bid_amount):
        self.bid_amount = bid_amount
        super().__init__("입찰 금액은 1 이상의 정수여야 합니다.")


class BidTooLowError(ValidationFailedError):
    """최소 입찰가 미달"""

    def __init__(self, minimum_amount: int, bid_amount: int):
        self.minimum_amount = minimum_amount
        self.bid_amount = bid_amount
        super().__init__(
            f"입찰 금액이 너무 낮습니다. 최소 입찰가는 R{minimum_amount:,}입니다. "
            f"(입찰가: R{bid_amount:,})"
        )


class InvalidVoidReasonError(ValidationFailedError):
    """무효 사유 누락"""

    def __init__(self):
        super().__init__("입찰 무효 사유를 입력해주세요.")
