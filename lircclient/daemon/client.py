"""Client for the LIRC daemon.

Each request opens its own connection, sends one line and (optionally)
validates the reply before closing. The client also caches the directory of
remotes and owns at most one broadcast listener.

Usage:
    client = LircClient()                       # /var/run/lirc/lircd
    client = LircClient.from_address("pi.local", 8765)

    client.refresh_remotes()
    client.remote("tv").command("KEY_POWER").send(wait_for_reply=True)

    listener = client.add_listener(print)
    listener.loop.run_forever()
"""

import asyncio
import logging
from typing import Callable, List, Optional, Tuple

from lircclient.daemon.endpoint import DEFAULT_SOCKET_PATH, Endpoint, TcpEndpoint, UnixEndpoint
from lircclient.daemon.listener import CloseCallback, EventCallback, EventListener
from lircclient.daemon.protocol import (
    ListRequest,
    Request,
    SendType,
    build_send_request,
    parse_reply,
)
from lircclient.daemon.transport import DEFAULT_SETTLE_DELAY, SocketTransport, Transport
from lircclient.errors import LircError, RemoteNotFound
from lircclient.remotes import Command, Remote

logger = logging.getLogger(__name__)


class LircClient:
    """
    Client bound to one daemon endpoint.

    The endpoint is fixed at construction. ``transport_factory`` replaces the
    socket transport, e.g. with a fake in tests.
    """

    def __init__(
        self,
        endpoint: Optional[Endpoint] = None,
        *,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        transport_factory: Optional[Callable[[], Transport]] = None,
    ):
        self.endpoint = endpoint or UnixEndpoint()
        self.settle_delay = settle_delay
        self._transport_factory = transport_factory or self._socket_transport
        self._remotes: Tuple[Remote, ...] = ()
        self._listener: Optional[EventListener] = None

    @classmethod
    def from_socket_path(cls, socket_path: str = DEFAULT_SOCKET_PATH, **kwargs) -> "LircClient":
        return cls(UnixEndpoint(socket_path), **kwargs)

    @classmethod
    def from_address(cls, host: str, port: int, **kwargs) -> "LircClient":
        return cls(TcpEndpoint(host, port), **kwargs)

    def _socket_transport(self) -> Transport:
        return SocketTransport(self.endpoint, self.settle_delay)

    # ------------------------------------------------------------------
    # Request / reply
    # ------------------------------------------------------------------

    def send_request(self, request: Request, wait_for_reply: bool = False) -> List[str]:
        """
        Send one request over a fresh connection.

        Returns:
            The validated reply payload, or [] when not waiting for a reply

        Raises:
            LircError: Connection, send or reply validation failure
        """
        text = request.text
        logger.debug(f"Sending {text.strip()!r} to {self.endpoint}")
        with self._transport_factory() as transport:
            transport.connect()
            transport.send_line(text)
            if not wait_for_reply:
                return []
            raw = transport.receive_available() or b""
        return parse_reply(raw.decode("utf-8", errors="replace"), text)

    def list_remotes(self) -> List[str]:
        return self.send_request(ListRequest(), wait_for_reply=True)

    def list_commands(self, remote: str) -> List[str]:
        """Command names of one remote (last field of each listed line)."""
        lines = self.send_request(ListRequest(remote), wait_for_reply=True)
        return [_last_token(line) for line in lines]

    def send(
        self,
        send_type: SendType,
        remote: str,
        command: str,
        count: int = 0,
        wait_for_reply: bool = False,
    ) -> List[str]:
        request = build_send_request(send_type, remote, command, count)
        return self.send_request(request, wait_for_reply=wait_for_reply)

    # ------------------------------------------------------------------
    # Remote directory
    # ------------------------------------------------------------------

    def _build_remotes(self) -> Tuple[Remote, ...]:
        remotes = []
        for name in self.list_remotes():
            commands = tuple(
                Command(command, name, self) for command in self.list_commands(name)
            )
            remotes.append(Remote(name, commands))
        return tuple(remotes)

    @property
    def all_remotes(self) -> Tuple[Remote, ...]:
        """
        Cached remotes, built on first access.

        Best effort: a failed build is logged and leaves the cache as it was.
        Use refresh_remotes() to see the error.
        """
        if not self._remotes:
            try:
                self._remotes = self._build_remotes()
            except LircError as e:
                logger.warning(f"Could not load remotes from {self.endpoint}: {e}")
        return self._remotes

    def refresh_remotes(self) -> Tuple[Remote, ...]:
        """Rebuild the directory; the cache is only replaced on success."""
        remotes = self._build_remotes()
        self._remotes = remotes
        return remotes

    def remote(self, named: str) -> Remote:
        wanted = named.lower()
        for remote in self.all_remotes:
            if remote.name.lower() == wanted:
                return remote
        raise RemoteNotFound(named)

    # ------------------------------------------------------------------
    # Broadcast listener
    # ------------------------------------------------------------------

    @property
    def listener(self) -> Optional[EventListener]:
        return self._listener

    def add_listener(
        self,
        callback: EventCallback,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        on_close: Optional[CloseCallback] = None,
    ) -> EventListener:
        """Start the single listening session, replacing any existing one."""
        self.remove_listener()
        listener = EventListener(self._transport_factory)
        listener.start(callback, loop, on_close)
        self._listener = listener
        return listener

    def remove_listener(self) -> None:
        if self._listener is not None:
            self._listener.stop()
            self._listener = None

    def close(self) -> None:
        self.remove_listener()

    def __enter__(self) -> "LircClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _last_token(line: str) -> str:
    tokens = line.split()
    return tokens[-1] if tokens else ""
