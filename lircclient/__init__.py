"""Client library for the LIRC infrared daemon (lircd).

Lists remotes and their commands, sends IR commands and receives the
daemon's broadcast of decoded IR events over a Unix or TCP socket.
"""

__version__ = "0.2.0"

from lircclient.daemon.client import LircClient
from lircclient.daemon.endpoint import TcpEndpoint, UnixEndpoint, parse_address
from lircclient.daemon.listener import EventListener, ListenerState
from lircclient.daemon.protocol import BroadcastEvent, SendType
from lircclient.errors import (
    AddressResolutionError,
    BadData,
    BadReply,
    CommandNotFound,
    ConnectError,
    LircError,
    RemoteNotFound,
    ReplyTooShort,
    SendError,
    SocketCreateError,
)
from lircclient.remotes import Command, Remote

__all__ = [
    "__version__",
    "LircClient",
    "UnixEndpoint",
    "TcpEndpoint",
    "parse_address",
    "EventListener",
    "ListenerState",
    "BroadcastEvent",
    "SendType",
    "Remote",
    "Command",
    "LircError",
    "AddressResolutionError",
    "SocketCreateError",
    "ConnectError",
    "SendError",
    "ReplyTooShort",
    "BadReply",
    "BadData",
    "RemoteNotFound",
    "CommandNotFound",
]
