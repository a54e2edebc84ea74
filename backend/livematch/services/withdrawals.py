import logging
import threading
from typing import List, Tuple

from livematch.errors import InvalidAmount, InvalidUser
from livematch.models import WithdrawRequest, now_ms
from .wallet import WalletStore

logger = logging.getLogger(__name__)


def parse_amount(value) -> int:
    """Coerce a client supplied amount to a positive int or raise InvalidAmount."""
    if isinstance(value, bool) or value is None:
        raise InvalidAmount('amount is required')
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidAmount(f'amount must be a whole number, got {value!r}')
        value = int(value)
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidAmount(f'amount must be a whole number, got {value!r}') from None
    if not isinstance(value, int) or value <= 0:
        raise InvalidAmount(f'amount must be positive, got {value!r}')
    return value


class WithdrawLedger:
    """Append-only record of cash-out requests backed by wallet debits."""

    def __init__(self, wallet: WalletStore) -> None:
        self.wallet = wallet
        self._requests: List[WithdrawRequest] = []
        self._lock = threading.RLock()

    def request_withdraw(self, user_id, amount) -> WithdrawRequest:
        return self.submit(user_id, amount)[0]

    def submit(self, user_id, amount) -> Tuple[WithdrawRequest, int]:
        """Debit the wallet and append a PENDING request; returns it with the new balance."""
        if not self.wallet.exists(user_id):
            raise InvalidUser(f'unknown user {user_id!r}')
        amount = parse_amount(amount)
        # Debit and append under one lock so ids follow debit order.
        with self._lock:
            coins = self.wallet.debit(user_id, amount)
            request = WithdrawRequest(
                id=len(self._requests) + 1,
                user_id=str(user_id),
                amount=amount,
                status='PENDING',
                created_at=now_ms(),
            )
            self._requests.append(request)
        logger.info(f"[withdraw] id={request.id} user={request.user_id} amount={amount}")
        return request, coins

    def all(self) -> List[WithdrawRequest]:
        with self._lock:
            return list(self._requests)

    def __len__(self) -> int:
        with self._lock:
            return len(self._requests)
