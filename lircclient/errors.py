"""Exception types raised by the LIRC client.

Every failure surfaces from the operation that detected it. Nothing is
retried automatically.
"""

from typing import List, Optional


class LircError(Exception):
    """Base class for all client errors."""

    def __init__(self, description: str):
        super().__init__(description)
        self.description = description

    def __str__(self) -> str:
        return self.description


class AddressResolutionError(LircError):
    """Endpoint lookup (getaddrinfo) failed."""


class SocketCreateError(LircError):
    """The OS refused to allocate a socket."""


class ConnectError(LircError):
    """Stream establishment failed."""


class SendError(LircError):
    """Writing to (or reading from) the transport failed."""


class ReplyTooShort(LircError):
    """The reply had fewer than four usable lines."""

    def __init__(self, reply: str):
        super().__init__(f"Reply Too Short {reply!r}")
        self.reply = reply


class BadReply(LircError):
    """BEGIN/END/echo/status mismatch in a reply."""

    def __init__(self, error: str):
        super().__init__(f"Bad Reply {error}")


class BadData(LircError):
    """
    The DATA block could not be read.

    ``data`` holds the payload lines collected before the failure
    (empty when the count itself was unusable).
    """

    def __init__(self, error: str, data: Optional[List[str]] = None):
        self.data = list(data or [])
        super().__init__(f"Bad Data {error}: {self.data}")


class RemoteNotFound(LircError):
    def __init__(self, remote: str):
        super().__init__(f"Remote not found: {remote}")
        self.remote = remote


class CommandNotFound(LircError):
    def __init__(self, command: str):
        super().__init__(f"Command not found: {command}")
        self.command = command
