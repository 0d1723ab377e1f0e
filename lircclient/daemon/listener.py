"""Event listener for the daemon's broadcast stream.

One connection stays open for the whole session. Its descriptor is
registered with an asyncio event loop (``loop.add_reader``); every readiness
notification drains what is available without blocking and delivers the well-formed
broadcast lines to the callback in order.

Lines split across two reads are not reassembled.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

from lircclient.daemon.protocol import BroadcastEvent, parse_broadcast_chunk
from lircclient.daemon.transport import Transport
from lircclient.errors import LircError

logger = logging.getLogger(__name__)

EventCallback = Callable[[BroadcastEvent], None]
CloseCallback = Callable[[], None]


class ListenerState(Enum):
    IDLE = "idle"
    CONNECTED = "connected"
    LISTENING = "listening"
    CLOSED = "closed"


class EventListener:
    """Single listening session over one transport."""

    def __init__(self, transport_factory: Callable[[], Transport]):
        self._transport_factory = transport_factory
        self._transport: Optional[Transport] = None
        self._fd: Optional[int] = None
        self._callback: Optional[EventCallback] = None
        self._on_close: Optional[CloseCallback] = None
        self.loop: Optional[asyncio.AbstractEventLoop] = None
        self.state = ListenerState.IDLE

    @property
    def listening(self) -> bool:
        return self.state is ListenerState.LISTENING

    def start(
        self,
        callback: EventCallback,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        on_close: Optional[CloseCallback] = None,
    ) -> None:
        """
        Open a fresh connection and start delivering events to ``callback``.

        An existing session is torn down first. Without ``loop`` the running
        loop is used, or a new one is created and left in ``self.loop`` for
        the caller to run. ``on_close`` is called if the session ends on its
        own (daemon hangup or read error), not on stop().

        Raises:
            LircError: If the connection can't be established
        """
        if self.state is not ListenerState.IDLE:
            self.stop()
            self.state = ListenerState.IDLE

        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = asyncio.new_event_loop()

        transport = self._transport_factory()
        try:
            transport.connect()
        except Exception:
            transport.close()
            raise
        self._transport = transport
        self.state = ListenerState.CONNECTED

        self.loop = loop
        self._callback = callback
        self._on_close = on_close
        self._fd = transport.fileno()
        loop.add_reader(self._fd, self._on_readable)
        self.state = ListenerState.LISTENING
        logger.debug("Listener session started")

    def stop(self) -> None:
        """Deregister from the event loop and release the connection."""
        if self._fd is not None and self.loop is not None and not self.loop.is_closed():
            self.loop.remove_reader(self._fd)
        self._fd = None

        if self._transport is not None:
            self._transport.close()
            self._transport = None
            logger.debug("Listener session closed")

        self._callback = None
        self._on_close = None
        self.state = ListenerState.CLOSED

    def _on_readable(self) -> None:
        if self._transport is None or self._callback is None:
            return

        try:
            data = self._transport.receive_available(settle=False)
        except LircError as e:
            logger.error(f"Broadcast read failed: {e}")
            self._close_by_itself()
            return
        if data is None:
            logger.warning("Daemon closed the broadcast stream")
            self._close_by_itself()
            return
        if not data:
            # Spurious wakeup
            return

        callback = self._callback
        for event in parse_broadcast_chunk(data.decode("utf-8", errors="replace")):
            callback(event)

    def _close_by_itself(self) -> None:
        on_close = self._on_close
        self.stop()
        if on_close is not None:
            on_close()
