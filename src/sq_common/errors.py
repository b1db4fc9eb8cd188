"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  3xxx: Market / option state
  4xxx: Trade input
  5xxx: Position
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/User ---

class UserNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1001, f"User not found: {user_id}", 404)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired token", 401)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Admin access required", 403)


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3001, f"Market not found: {market_id}", 404)


class MarketNotActiveError(AppError):
    def __init__(self, market_id: str, status: str) -> None:
        super().__init__(3002, f"Market {market_id} is not active (status={status})", 422)


class OptionNotFoundError(AppError):
    def __init__(self, option_id: str, market_id: str) -> None:
        super().__init__(3003, f"Option {option_id} not found in market {market_id}", 404)


class MarketAlreadyResolvedError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3004, f"Market is already resolved: {market_id}", 422)


class OptionsLockedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3005, f"Options cannot be changed: {detail}", 422)


# --- 4xxx: Trade input ---

class InvalidInputError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4001, f"Invalid input: {detail}", 400)


class BetAmountOutOfRangeError(AppError):
    def __init__(self, amount: object, max_amount: object) -> None:
        super().__init__(4002, f"Amount {amount} must be in (0, {max_amount}]", 400)


# --- 5xxx: Position ---

class InsufficientPositionError(AppError):
    def __init__(self, requested: object, available: object) -> None:
        super().__init__(
            5001,
            f"Insufficient position: requested {requested}, available {available}",
            422,
        )


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class PersistenceError(AppError):
    """Transaction aborted mid-write; nothing was committed, safe to retry."""

    def __init__(self) -> None:
        super().__init__(9003, "Storage failure, please retry", 503)
