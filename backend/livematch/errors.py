"""Caller-facing errors raised by the wallet, token and ledger services."""

from typing import Any, Dict


class LiveMatchError(Exception):
    """Base class for errors surfaced to the requester as a structured failure."""

    code = 'ERROR'
    status_code = 400

    def __init__(self, message: str = '', **extra: Any) -> None:
        super().__init__(message or self.code)
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        payload = {'error': self.code}
        payload.update(self.extra)
        return payload


class InvalidToken(LiveMatchError):
    code = 'INVALID_TOKEN'


class InvalidUser(LiveMatchError):
    code = 'INVALID_USER'


class InvalidAmount(LiveMatchError):
    code = 'INVALID_AMOUNT'


class InsufficientCoins(LiveMatchError):
    """Raised when a debit exceeds the balance; carries the untouched balance."""

    code = 'INSUFFICIENT_COINS'

    def __init__(self, coins: int) -> None:
        super().__init__(f'balance {coins} is too low', coins=coins)
        self.coins = coins


class UnknownAction(LiveMatchError):
    code = 'UNKNOWN_ACTION'


class MissingMatchId(LiveMatchError):
    code = 'MISSING_MATCH_ID'
