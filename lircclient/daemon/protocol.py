"""Line-based protocol spoken by lircd.

Request format (one line, UTF-8):
    <directive> <remote> <command>[ <count>]

Reply format:
    BEGIN
    <echoed request>
    SUCCESS | ERROR
    [DATA
     <n>
     <n payload lines>]
    END

Broadcast format (one line per received IR event):
    <code-hex> <repeat-count> <button-name> <remote-name>

Replies are validated strictly in order; no payload is returned until every
preceding structural check has passed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from lircclient.errors import BadData, BadReply, ReplyTooShort


# ============================================================================
# Requests
# ============================================================================

@dataclass(frozen=True)
class ListRequest:
    remote: str = ""
    directive = "list"

    @property
    def text(self) -> str:
        return f"{self.directive} {self.remote} "


@dataclass(frozen=True)
class SendOnceRequest:
    remote: str
    command: str
    count: int = 0
    directive = "send_once"

    @property
    def text(self) -> str:
        suffix = f" {self.count}" if self.count > 0 else ""
        return f"{self.directive} {self.remote} {self.command}{suffix}"


@dataclass(frozen=True)
class SendStartRequest:
    remote: str
    command: str
    directive = "send_start"

    @property
    def text(self) -> str:
        return f"{self.directive} {self.remote} {self.command}"


@dataclass(frozen=True)
class SendStopRequest:
    remote: str
    command: str
    directive = "send_stop"

    @property
    def text(self) -> str:
        return f"{self.directive} {self.remote} {self.command}"


Request = Union[ListRequest, SendOnceRequest, SendStartRequest, SendStopRequest]


def encode_line(text: str) -> bytes:
    """Wire bytes for a request line: trimmed text plus exactly one newline."""
    return (text.strip() + "\n").encode("utf-8")


class SendType(Enum):
    ONCE = "send_once"
    START = "send_start"
    STOP = "send_stop"


def parse_send_type(value: str) -> SendType:
    """
    Parse a send type name.

    Accepts the directive names (send_once, send_start, send_stop) and the
    short forms (once, start, stop), case-insensitive.

    Raises:
        ValueError: If the name is not a known send type
    """
    name = value.strip().lower()
    if not name.startswith("send_"):
        name = f"send_{name}"
    try:
        return SendType(name)
    except ValueError:
        raise ValueError(f"Unknown send type: {value}") from None


def build_send_request(
    send_type: SendType,
    remote: str,
    command: str,
    count: int = 0,
) -> Request:
    """Map a send type and its arguments onto the matching request."""
    if count < 0:
        raise ValueError(f"Repeat count must be non-negative, got {count}")
    if send_type is SendType.ONCE:
        return SendOnceRequest(remote, command, count)
    if send_type is SendType.START:
        return SendStartRequest(remote, command)
    return SendStopRequest(remote, command)


# ============================================================================
# Replies
# ============================================================================

def split_reply_lines(raw: str) -> List[str]:
    """Split a reply into non-empty lines, dropping any containing NUL."""
    return [line for line in raw.split("\n") if line and "\0" not in line]


def parse_reply(raw: str, request_text: str) -> List[str]:
    """
    Validate a reply against the request that produced it.

    Args:
        raw: Reply text as read from the socket
        request_text: The request line that was sent

    Returns:
        The DATA payload lines, or ["SUCCESS"] when the reply carries no DATA

    Raises:
        ReplyTooShort: Fewer than four lines
        BadReply: Missing BEGIN/END, wrong echo, or a non-SUCCESS status
        BadData: Unusable or under-delivered DATA block
    """
    lines = split_reply_lines(raw)
    if len(lines) < 4:
        raise ReplyTooShort(raw)

    if lines[0] != "BEGIN":
        raise BadReply(f"No BEGIN: {raw!r}")
    if lines[1].strip() != request_text.strip():
        raise BadReply(f"Wrong reply message, expected {request_text.strip()!r}: {raw!r}")
    if lines[2] != "SUCCESS":
        raise BadReply(f"Not SUCCESS: {raw!r}")
    if lines[-1] != "END":
        raise BadReply(f"No END: {raw!r}")

    if lines[3] != "DATA":
        return [lines[2]]

    try:
        count = int(lines[4])
    except ValueError:
        raise BadData(f"Couldn't get Data count {raw!r}") from None
    if count < 0:
        raise BadData(f"Negative Data count {raw!r}")

    # Payload sits between the count line and the END terminator
    data = lines[5:-1][:count]
    if len(data) < count:
        raise BadData(f"Expected {count}, got {len(data)}", data)
    return data


# ============================================================================
# Broadcasts
# ============================================================================

@dataclass(frozen=True)
class BroadcastEvent:
    """One received IR event, as broadcast by the daemon."""

    code: str
    repeat: str
    button: str
    remote: str
    line: str

    @property
    def repeat_count(self) -> int:
        # lircd prints the repeat counter as hex
        return int(self.repeat, 16)

    def __str__(self) -> str:
        return self.line


def parse_broadcast(line: str) -> Optional[BroadcastEvent]:
    """Return an event for a well-formed broadcast line, else None."""
    fields = line.split()
    if len(fields) != 4:
        return None
    code, repeat, button, remote = fields
    return BroadcastEvent(code, repeat, button, remote, line.strip())


def parse_broadcast_chunk(text: str) -> List[BroadcastEvent]:
    """Decode every well-formed line of one read, in order."""
    events = []
    for line in text.splitlines():
        event = parse_broadcast(line)
        if event is not None:
            events.append(event)
    return events
