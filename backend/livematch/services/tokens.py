import json
import logging
import random
import string
import threading
from typing import Any, Dict, List, Optional

from livematch.errors import InvalidToken
from livematch.models import TokenRecord

logger = logging.getLogger(__name__)

TOKEN_ALPHABET = string.ascii_lowercase + string.digits
CHANNEL_PREFIX = 'room_'

_rng = random.SystemRandom()


def generate_token(length: int = 8) -> str:
    return ''.join(_rng.choices(TOKEN_ALPHABET, k=length))


def normalize_match_id(value: Any) -> Optional[str]:
    """Turn a client supplied match id into the string key it is indexed under.

    5 and "5" name the same match. Falsy values mean no match. Objects and
    lists are keyed by their compact JSON text.
    """
    if value is None or value is False or value == '' or value == 0:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return 'true'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, sort_keys=True, separators=(',', ':'))


class TokenRegistry:
    """Maps join tokens to the channel they open and the match that owns it."""

    def __init__(self, token_length: int = 8) -> None:
        self.token_length = int(token_length)
        self._records: Dict[str, TokenRecord] = {}
        self._lock = threading.RLock()

    def create_token(self, match_id: Optional[str] = None, created_by: Optional[str] = None) -> TokenRecord:
        with self._lock:
            while True:
                token = generate_token(self.token_length)
                if token not in self._records:
                    break
                logger.debug(f"[token-collision] token={token} regenerating")
            record = TokenRecord(
                token=token,
                channel=f"{CHANNEL_PREFIX}{token}",
                match_id=normalize_match_id(match_id),
                created_by=created_by or None,
            )
            self._records[token] = record
        return record

    def resolve(self, token) -> TokenRecord:
        if not token or not isinstance(token, str):
            raise InvalidToken('token is required')
        with self._lock:
            record = self._records.get(token)
        if record is None:
            raise InvalidToken(f'unknown token {token!r}')
        return record

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class MatchChannelIndex:
    """Match id -> channels opened for it.

    Channels are appended per registration call without deduplication; a
    caller that registers the same channel twice will see it listed twice.
    """

    def __init__(self) -> None:
        self._channels: Dict[str, List[str]] = {}
        self._lock = threading.RLock()

    def register_channel(self, match_id, channel: str) -> None:
        match_id = normalize_match_id(match_id)
        if match_id is None:
            return
        with self._lock:
            self._channels.setdefault(match_id, []).append(channel)

    def channels_for(self, match_id) -> List[str]:
        match_id = normalize_match_id(match_id)
        if match_id is None:
            return []
        with self._lock:
            return list(self._channels.get(match_id, []))
