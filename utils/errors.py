"""Domain exceptions raised by the service layer and mapped to HTTP responses."""

from typing import Any, Dict, Optional


class KonnectError(Exception):
    """Base exception for all service errors."""

    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(KonnectError):
    """Raised when input fails validation, before anything is written."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 400, details)


class ForbiddenError(KonnectError):
    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 403, details)


class NotFoundError(KonnectError):
    def __init__(self, message: str = "Not found", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 404, details)


class ProfileRequiredError(NotFoundError):
    """Raised when the caller has no dating profile yet."""

    def __init__(self, message: str = "Create your dating profile first") -> None:
        super().__init__(message, {'requires_profile': True})


class ConflictError(KonnectError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 409, details)


class AlreadySwipedError(ConflictError):
    """Raised when a swiper decides on the same candidate twice."""

    def __init__(self, swiper_id: str, swiped_id: str) -> None:
        super().__init__(
            "You have already swiped on this profile",
            {'swiper_id': swiper_id, 'swiped_id': swiped_id}
        )


class InsufficientFundsError(KonnectError):
    def __init__(self, message: str = "You don't have enough funds in your wallet") -> None:
        super().__init__(message, 400)


class WalletAPIError(KonnectError):
    """
    Raised when the Wallet API rejects a request or cannot be reached.

    Attributes:
        result_code: The API's own result code, when it sent one.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 502,
        result_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.result_code = result_code
        super().__init__(message, status_code, details)

    @property
    def is_unauthorized(self) -> bool:
        """True when the wallet session must be re-established by logging in again."""
        if self.status_code == 401:
            return True
        return "401" in self.message or "unauthorized" in self.message.lower()


class WalletResponseError(WalletAPIError):
    """Raised when a Wallet API response cannot be decoded into the expected shape."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 502, result_code="DECODE_ERROR", details=details)
