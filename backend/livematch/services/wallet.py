import logging
import threading
from typing import Dict, Optional

from livematch.errors import InsufficientCoins, InvalidAmount, InvalidUser
from livematch.models import User

logger = logging.getLogger(__name__)


class WalletStore:
    """In-memory coin balances keyed by user id.

    Every mutation runs under one lock, so a check-then-decrement on a user's
    balance can never interleave with another mutation of the same balance.
    """

    def __init__(self, initial_coins: int = 1000) -> None:
        self.initial_coins = int(initial_coins)
        self._users: Dict[str, User] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    def create_user(self, name: Optional[str] = None) -> User:
        with self._lock:
            user_id = str(self._next_id)
            self._next_id += 1
            user = User(id=user_id, display_name=name or f"player_{user_id}", coins=self.initial_coins)
            self._users[user_id] = user
        logger.info(f"[user-create] id={user.id} coins={user.coins}")
        return self.get_user(user_id)

    def get_user(self, user_id) -> User:
        """Return a snapshot copy of the user so callers never see a half-applied update."""
        with self._lock:
            user = self._users.get(self._key(user_id))
            if user is None:
                raise InvalidUser(f'unknown user {user_id!r}')
            return User(id=user.id, display_name=user.display_name, coins=user.coins)

    def exists(self, user_id) -> bool:
        with self._lock:
            return self._key(user_id) in self._users

    def get_balance(self, user_id) -> int:
        return self.get_user(user_id).coins

    def debit(self, user_id, amount: int) -> int:
        with self._lock:
            user = self._require(user_id)
            _check_amount(amount)
            if user.coins < amount:
                raise InsufficientCoins(user.coins)
            user.coins -= amount
            return user.coins

    def credit(self, user_id, amount: int) -> int:
        with self._lock:
            user = self._require(user_id)
            _check_amount(amount)
            user.coins += amount
            return user.coins

    def _require(self, user_id) -> User:
        user = self._users.get(self._key(user_id))
        if user is None:
            raise InvalidUser(f'unknown user {user_id!r}')
        return user

    @staticmethod
    def _key(user_id) -> Optional[str]:
        return None if user_id is None else str(user_id)


def _check_amount(amount) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmount(f'amount must be a positive integer, got {amount!r}')
