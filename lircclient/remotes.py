"""Remotes and their commands as reported by the daemon."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Tuple

from lircclient.daemon.protocol import SendType
from lircclient.errors import CommandNotFound

if TYPE_CHECKING:
    from lircclient.daemon.client import LircClient  # pragma: no cover


@dataclass(frozen=True)
class Command:
    name: str
    remote_name: str
    client: "LircClient" = field(repr=False, compare=False)

    def send(
        self,
        send_type: SendType = SendType.ONCE,
        wait_for_reply: bool = False,
        count: int = 0,
    ) -> List[str]:
        """
        Send this command through the owning client.

        Args:
            send_type: once, start (press and hold) or stop
            wait_for_reply: If False, daemon-reported errors are not surfaced;
                if True, the reply is validated and errors raise
            count: Repeat count for a ONCE send (0 = no count)
        """
        return self.client.send(
            send_type,
            self.remote_name,
            self.name,
            count=count,
            wait_for_reply=wait_for_reply,
        )

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Remote:
    name: str
    commands: Tuple[Command, ...] = ()

    def command(self, named: str) -> Command:
        """Case-insensitive lookup; the first match wins."""
        wanted = named.lower()
        for command in self.commands:
            if command.name.lower() == wanted:
                return command
        raise CommandNotFound(named)

    def __str__(self) -> str:
        names = ", ".join(command.name for command in self.commands)
        return f"Remote({self.name}, Commands: [{names}])"
