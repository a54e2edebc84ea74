from dataclasses import dataclass
from typing import Any, Dict, Optional
import time


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class User:
    id: str
    display_name: str
    coins: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.display_name,
            'coins': self.coins,
        }


@dataclass(frozen=True)
class TokenRecord:
    token: str
    channel: str
    match_id: Optional[str] = None
    created_by: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'token': self.token,
            'channel': self.channel,
            'matchId': self.match_id,
            'createdBy': self.created_by,
        }


@dataclass(frozen=True)
class WithdrawRequest:
    id: int
    user_id: str
    amount: int
    status: str = 'PENDING'
    created_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'userId': self.user_id,
            'amount': self.amount,
            'status': self.status,
            'createdAt': self.created_at,
        }


@dataclass(frozen=True)
class GameEvent:
    """A live match update. Built per simulate call and never stored."""

    timestamp: int
    match_id: str
    over: Any = None
    runs: Optional[int] = None
    wicket: bool = False
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'matchId': self.match_id,
            'over': self.over,
            'runs': self.runs,
            'wicket': self.wicket,
            'message': self.message,
        }
