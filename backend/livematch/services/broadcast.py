"""Subscription bookkeeping and fan-out of push notifications.

The router decides *who* receives an event; the transport only knows how to
put a packet on the wire. Delivery is best effort: a failing send is logged
and dropped, never raised to the code that triggered it.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Set

from livematch.errors import InvalidToken
from .tokens import MatchChannelIndex, TokenRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """A push waiting to be delivered. With no target set it goes to everyone."""

    event: str
    payload: Any
    channel: Optional[str] = None
    match_id: Optional[str] = None
    sid: Optional[str] = None

    @classmethod
    def to_channel(cls, channel: str, event: str, payload: Any) -> 'Notification':
        return cls(event, payload, channel=channel)

    @classmethod
    def to_match(cls, match_id: str, event: str, payload: Any) -> 'Notification':
        return cls(event, payload, match_id=match_id)

    @classmethod
    def to_connection(cls, sid: str, event: str, payload: Any) -> 'Notification':
        return cls(event, payload, sid=sid)

    @classmethod
    def to_everyone(cls, event: str, payload: Any) -> 'Notification':
        return cls(event, payload)


class SocketIOTransport:
    """Maps channels onto Socket.IO rooms of one namespace."""

    def __init__(self, socketio, namespace: str = '/') -> None:
        self.socketio = socketio
        self.namespace = namespace

    def enter(self, sid: str, channel: str) -> None:
        self.socketio.server.enter_room(sid, channel, namespace=self.namespace)

    def exit(self, sid: str, channel: str) -> None:
        self.socketio.server.leave_room(sid, channel, namespace=self.namespace)

    def send(self, event: str, payload: Any, to: str) -> None:
        self.socketio.emit(event, payload, to=to, namespace=self.namespace)


class BroadcastRouter:
    def __init__(self, tokens: TokenRegistry, index: MatchChannelIndex, transport=None) -> None:
        self.tokens = tokens
        self.index = index
        self.transport = transport
        self._connected: Set[str] = set()
        self._channel_of: Dict[str, str] = {}
        self._members: Dict[str, Set[str]] = {}
        self._lock = threading.RLock()

    # ---- subscription lifecycle ----

    def connect(self, sid: str) -> None:
        with self._lock:
            self._connected.add(sid)

    def join(self, sid: str, token) -> Optional[str]:
        """Subscribe ``sid`` to the channel behind ``token``.

        Returns the channel, or None when the token is unknown (the requester
        alone receives an ``error``). Joining while already subscribed moves
        the connection to the new channel.
        """
        try:
            record = self.tokens.resolve(token)
        except InvalidToken:
            logger.info(f"[join-rejected] sid={sid} token={token!r}")
            self._send('error', 'Invalid token', to=sid)
            return None

        channel = record.channel
        with self._lock:
            self._connected.add(sid)
            previous = self._channel_of.get(sid)
            if previous and previous != channel:
                self._drop_member(sid, previous)
                self._call('exit', sid, previous)
            self._channel_of[sid] = channel
            self._members.setdefault(channel, set()).add(sid)
            self._call('enter', sid, channel)
        logger.info(f"[join] sid={sid} channel={channel} match={record.match_id}")
        self._send('joined', {'channel': channel}, to=sid)
        return channel

    def leave(self, sid: str) -> None:
        with self._lock:
            self._connected.discard(sid)
            channel = self._channel_of.pop(sid, None)
            if channel is None:
                return
            self._drop_member(sid, channel)
            self._call('exit', sid, channel)

    def channel_of(self, sid: str) -> Optional[str]:
        with self._lock:
            return self._channel_of.get(sid)

    def subscribers(self, channel: str) -> Set[str]:
        with self._lock:
            return set(self._members.get(channel, ()))

    def connections(self) -> Set[str]:
        with self._lock:
            return set(self._connected)

    # ---- publishing ----

    def publish_to_channel(self, channel: str, event: str, payload: Any) -> int:
        """Deliver to everyone subscribed to ``channel`` right now; returns how many."""
        count = len(self.subscribers(channel))
        if count:
            self._send(event, payload, to=channel)
        return count

    def publish_to_match(self, match_id: str, event: str, payload: Any) -> List[str]:
        channels = self.index.channels_for(match_id)
        for channel in channels:
            self.publish_to_channel(channel, event, payload)
        return channels

    def publish_global(self, event: str, payload: Any) -> int:
        """Deliver to every connected sid, joined or not; each send fails on its own."""
        sids = self.connections()
        for sid in sorted(sids):
            self._send(event, payload, to=sid)
        return len(sids)

    def send_to(self, sid: str, event: str, payload: Any) -> None:
        self._send(event, payload, to=sid)

    def dispatch(self, notifications: Iterable[Notification]) -> None:
        for note in notifications:
            if note.sid is not None:
                self.send_to(note.sid, note.event, note.payload)
            elif note.channel is not None:
                self.publish_to_channel(note.channel, note.event, note.payload)
            elif note.match_id is not None:
                self.publish_to_match(note.match_id, note.event, note.payload)
            else:
                self.publish_global(note.event, note.payload)

    # ---- internals ----

    def _drop_member(self, sid: str, channel: str) -> None:
        members = self._members.get(channel)
        if members is None:
            return
        members.discard(sid)
        if not members:
            del self._members[channel]

    def _send(self, event: str, payload: Any, to: str) -> None:
        self._call('send', event, payload, to=to)

    def _call(self, method: str, *args, **kwargs) -> None:
        if self.transport is None:
            return
        try:
            getattr(self.transport, method)(*args, **kwargs)
        except Exception as exc:  # delivery failures never reach the caller
            logger.warning(f"[delivery-dropped] op={method} args={args!r} error={exc}")
