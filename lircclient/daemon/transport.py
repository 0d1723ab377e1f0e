"""Socket transport to the daemon.

A transport owns at most one descriptor. Request/reply calls use a fresh
transport per call (lircd expects one request per connection); the event
listener keeps one open for the whole session.
"""

import errno
import logging
import socket
import time
from abc import ABC, abstractmethod
from typing import Optional

from lircclient.daemon.endpoint import Endpoint
from lircclient.daemon.protocol import encode_line
from lircclient.errors import ConnectError, SendError, SocketCreateError

logger = logging.getLogger(__name__)

# The daemon needs a moment to flush its reply before a non-blocking read
DEFAULT_SETTLE_DELAY = 0.05
RECV_SIZE = 4096


class Transport(ABC):
    """Connect/send/receive/close interface shared by real and fake transports."""

    @abstractmethod
    def connect(self) -> None:
        ...

    @abstractmethod
    def send_line(self, text: str) -> None:
        ...

    @abstractmethod
    def receive_available(self, settle: bool = True) -> Optional[bytes]:
        """Available bytes (possibly empty), or None once the peer has hung up."""

    @abstractmethod
    def fileno(self) -> int:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class SocketTransport(Transport):
    """Stream socket to a Unix path or TCP host."""

    def __init__(self, endpoint: Endpoint, settle_delay: float = DEFAULT_SETTLE_DELAY):
        self.endpoint = endpoint
        self.settle_delay = settle_delay
        self._sock: Optional[socket.socket] = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        """
        Resolve the endpoint, create the socket and connect it.

        Raises:
            AddressResolutionError: If the endpoint can't be resolved
            SocketCreateError: If the socket can't be created
            ConnectError: If the connection is refused or fails
        """
        if self._sock is not None:
            return

        family, address = self.endpoint.resolve()
        try:
            sock = socket.socket(family, socket.SOCK_STREAM)
        except OSError as e:
            raise SocketCreateError(f"Error creating socket: {e}") from e

        try:
            sock.connect(address)
        except (OSError, ValueError) as e:
            # ValueError: a Unix path with an embedded NUL byte
            sock.close()
            raise ConnectError(f"Error connecting to socket {self.endpoint}: {e}") from e

        logger.debug(f"Connected to {self.endpoint}")
        self._sock = sock

    def send_line(self, text: str) -> None:
        """Send ``text`` stripped and terminated by exactly one newline."""
        sock = self._require_socket()
        try:
            sock.sendall(encode_line(text))
        except OSError as e:
            raise SendError(f"Error sending: {e}") from e

    def receive_available(self, settle: bool = True) -> Optional[bytes]:
        """
        Read everything available right now, without waiting for more.

        Args:
            settle: Sleep the settle delay before reading

        Returns:
            Bytes read (empty when nothing was available), or None when the
            peer has closed the stream and nothing was read
        """
        sock = self._require_socket()
        if settle and self.settle_delay > 0:
            time.sleep(self.settle_delay)

        chunks = []
        while True:
            try:
                chunk = sock.recv(RECV_SIZE, socket.MSG_DONTWAIT)
            except BlockingIOError:
                break
            except OSError as e:
                if e.errno in (errno.EAGAIN, errno.EWOULDBLOCK):
                    break
                raise SendError(f"Error receiving: {e}") from e
            if not chunk:
                if not chunks:
                    return None
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def fileno(self) -> int:
        return self._require_socket().fileno()

    def close(self) -> None:
        if self._sock is None:
            return
        try:
            self._sock.close()
        finally:
            self._sock = None
            logger.debug(f"Closed connection to {self.endpoint}")

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise SendError(f"Not connected to {self.endpoint}")
        return self._sock
