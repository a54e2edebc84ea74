"""Live match domain services: wallets, join tokens, broadcast and withdrawals.

HTTP routes and socket handlers import from here; nothing in this package
touches Flask, so the stores can be exercised without a live transport.
"""

from .broadcast import BroadcastRouter, Notification, SocketIOTransport
from .commands import LiveMatchHub, Outcome
from .tokens import MatchChannelIndex, TokenRegistry
from .wallet import WalletStore
from .withdrawals import WithdrawLedger

__all__ = [
    'BroadcastRouter',
    'LiveMatchHub',
    'MatchChannelIndex',
    'Notification',
    'Outcome',
    'SocketIOTransport',
    'TokenRegistry',
    'WalletStore',
    'WithdrawLedger',
]
