"""Daemon communication for lircclient.

- protocol: request encoding, reply validation, broadcast decoding
- transport: socket connection with deterministic open/close
- client: request/reply calls and the cached remote directory
- listener: broadcast event session on an asyncio event loop
"""

from lircclient.daemon.client import LircClient
from lircclient.daemon.listener import EventListener, ListenerState
from lircclient.daemon.protocol import (
    encode_line,
    parse_reply,
    parse_broadcast,
    parse_broadcast_chunk,
)
from lircclient.daemon.transport import SocketTransport, Transport

__all__ = [
    "LircClient",
    "EventListener",
    "ListenerState",
    "SocketTransport",
    "Transport",
    "encode_line",
    "parse_reply",
    "parse_broadcast",
    "parse_broadcast_chunk",
]
