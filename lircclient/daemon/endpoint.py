"""Where the daemon lives: a Unix-domain socket path or a TCP host and port."""

import socket
from dataclasses import dataclass
from typing import Any, Tuple, Union

from lircclient.errors import AddressResolutionError

DEFAULT_SOCKET_PATH = "/var/run/lirc/lircd"
DEFAULT_PORT = 8765


@dataclass(frozen=True)
class UnixEndpoint:
    path: str = DEFAULT_SOCKET_PATH

    def resolve(self) -> Tuple[int, Any]:
        return socket.AF_UNIX, self.path

    def __str__(self) -> str:
        return f"unix:{self.path}"


@dataclass(frozen=True)
class TcpEndpoint:
    host: str
    port: int = DEFAULT_PORT

    def resolve(self) -> Tuple[int, Any]:
        """
        Look up the host, returning the first stream address found.

        The returned family is AF_INET or AF_INET6 depending on the host.

        Raises:
            AddressResolutionError: If the lookup fails or yields nothing
        """
        if not 0 <= self.port <= 65535:
            raise AddressResolutionError(f"Port out of range for {self}")
        try:
            infos = socket.getaddrinfo(
                self.host, self.port, type=socket.SOCK_STREAM
            )
        except (socket.gaierror, UnicodeError, OverflowError) as e:
            raise AddressResolutionError(f"getaddrinfo {self}: {e}") from e
        if not infos:
            raise AddressResolutionError(f"Couldn't get address info for {self}")
        family, _, _, _, sockaddr = infos[0]
        return family, sockaddr

    def __str__(self) -> str:
        if ":" in self.host:
            return f"tcp:[{self.host}]:{self.port}"
        return f"tcp:{self.host}:{self.port}"


Endpoint = Union[UnixEndpoint, TcpEndpoint]


def parse_address(address: str) -> TcpEndpoint:
    """
    Parse ``host[:port]`` into a TCP endpoint.

    IPv6 literals may be given bare (``::1``) or bracketed with a port
    (``[::1]:8765``).

    Raises:
        ValueError: If the address is empty or the port is not a valid number
    """
    address = address.strip()
    if not address:
        raise ValueError("Empty address")

    port = str(DEFAULT_PORT)
    if address.startswith("["):
        host, _, rest = address[1:].partition("]")
        if rest:
            if not rest.startswith(":"):
                raise ValueError(f"Invalid address: {address}")
            port = rest[1:]
    elif address.count(":") == 1:
        host, port = address.split(":")
    else:
        host = address

    if not host:
        raise ValueError(f"Missing host in address: {address}")
    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"Invalid port in address: {address}") from None
    if not 0 < port_number < 65536:
        raise ValueError(f"Port out of range in address: {address}")
    return TcpEndpoint(host, port_number)
