"""Request commands consumed by the HTTP layer.

Each command computes its result first and returns the pushes it implies as
a list of notifications; the caller decides when (and whether) to deliver
them through the ``BroadcastRouter``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from livematch.errors import InvalidUser, MissingMatchId, UnknownAction
from livematch.models import GameEvent, now_ms
from .broadcast import BroadcastRouter, Notification
from .tokens import MatchChannelIndex, TokenRegistry, normalize_match_id
from .wallet import WalletStore
from .withdrawals import WithdrawLedger


@dataclass
class Outcome:
    result: Dict[str, Any]
    notifications: List[Notification] = field(default_factory=list)


@dataclass
class LiveMatchHub:
    """The stores owned by one server instance."""

    wallet: WalletStore
    tokens: TokenRegistry
    index: MatchChannelIndex
    router: BroadcastRouter
    ledger: WithdrawLedger
    frontend_url: str = 'http://localhost:5173'
    cost_per_play: int = 20

    @classmethod
    def from_config(cls, config: Mapping[str, Any], transport=None) -> 'LiveMatchHub':
        wallet = WalletStore(initial_coins=int(config.get('INITIAL_COINS', 1000)))
        tokens = TokenRegistry(token_length=int(config.get('TOKEN_LENGTH', 8)))
        index = MatchChannelIndex()
        return cls(
            wallet=wallet,
            tokens=tokens,
            index=index,
            router=BroadcastRouter(tokens, index, transport),
            ledger=WithdrawLedger(wallet),
            frontend_url=str(config.get('FRONTEND_URL', 'http://localhost:5173')).rstrip('/'),
            cost_per_play=int(config.get('COST_PER_PLAY', 20)),
        )

    @property
    def action_costs(self) -> Dict[str, int]:
        return {'play': self.cost_per_play}

    def join_link(self, token: str) -> str:
        return f"{self.frontend_url}/?token={token}"

    def deliver(self, outcome: Outcome) -> Dict[str, Any]:
        self.router.dispatch(outcome.notifications)
        return outcome.result


def create_token(hub: LiveMatchHub, match_id: Optional[str] = None, created_by: Optional[str] = None) -> Outcome:
    record = hub.tokens.create_token(match_id, created_by)
    hub.index.register_channel(record.match_id, record.channel)
    return Outcome({
        'token': record.token,
        'channel': record.channel,
        'link': hub.join_link(record.token),
    })


def simulate_event(hub: LiveMatchHub, match_id: Optional[str], over=None, runs=None,
                   wicket=False, message: Optional[str] = None) -> Outcome:
    match_id = normalize_match_id(match_id)
    if match_id is None:
        raise MissingMatchId('matchId required')
    channels = hub.index.channels_for(match_id)
    event = GameEvent(
        timestamp=now_ms(),
        match_id=match_id,
        over=over or None,
        runs=runs,
        wicket=bool(wicket),
        message=message or None,
    ).to_dict()
    return Outcome(
        {'ok': True, 'event': event, 'channels': channels},
        [Notification.to_match(match_id, 'gameEvent', event)] if channels else [],
    )


def create_user(hub: LiveMatchHub, name: Optional[str] = None) -> Outcome:
    user = hub.wallet.create_user(name)
    return Outcome({'user': user.to_dict()})


def get_user(hub: LiveMatchHub, user_id) -> Outcome:
    return Outcome({'user': hub.wallet.get_user(user_id).to_dict()})


def player_action(hub: LiveMatchHub, token, user_id, action) -> Outcome:
    record = hub.tokens.resolve(token)
    if not user_id or not hub.wallet.exists(user_id):
        raise InvalidUser(f'unknown user {user_id!r}')
    cost = hub.action_costs.get(action)
    if cost is None:
        raise UnknownAction(f'unknown action {action!r}')
    coins = hub.wallet.debit(user_id, cost)
    update = {'userId': str(user_id), 'coins': coins}
    return Outcome(
        {'ok': True, 'coins': coins},
        [Notification.to_channel(record.channel, 'balanceUpdate', update)],
    )


def request_withdraw(hub: LiveMatchHub, user_id, amount) -> Outcome:
    request, coins = hub.ledger.submit(user_id, amount)
    payload = request.to_dict()
    return Outcome(
        {'ok': True, 'request': payload, 'coins': coins},
        [Notification.to_everyone('withdrawRequest', payload)],
    )


def list_withdrawals(hub: LiveMatchHub) -> Outcome:
    return Outcome({'requests': [r.to_dict() for r in hub.ledger.all()]})


def match_channels(hub: LiveMatchHub, match_id: str) -> Outcome:
    return Outcome({'matchId': match_id, 'channels': hub.index.channels_for(match_id)})
