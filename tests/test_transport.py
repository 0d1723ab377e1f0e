"""
Tests for daemon/endpoint.py and daemon/transport.py - address parsing and a
real Unix socket round trip against a scripted peer.
"""

import os
import shutil
import socket
import tempfile
import threading
import unittest

from lircclient.daemon.client import LircClient
from lircclient.daemon.endpoint import TcpEndpoint, UnixEndpoint, parse_address
from lircclient.daemon.transport import SocketTransport
from lircclient.errors import AddressResolutionError, ConnectError, SendError


class TestEndpoints(unittest.TestCase):

    def test_unix_default_path(self):
        self.assertEqual(UnixEndpoint().path, "/var/run/lirc/lircd")
        self.assertEqual(UnixEndpoint().resolve(), (socket.AF_UNIX, "/var/run/lirc/lircd"))

    def test_ipv4_and_ipv6_families(self):
        family, sockaddr = TcpEndpoint("127.0.0.1", 8765).resolve()
        self.assertEqual(family, socket.AF_INET)
        self.assertEqual(sockaddr[:2], ("127.0.0.1", 8765))

        if socket.has_ipv6:
            family, _ = TcpEndpoint("::1", 8765).resolve()
            self.assertEqual(family, socket.AF_INET6)

    def test_unresolvable_host(self):
        with self.assertRaises(AddressResolutionError):
            TcpEndpoint("123.345.345.654", 5432).resolve()

    def test_port_out_of_range(self):
        with self.assertRaises(AddressResolutionError):
            TcpEndpoint("127.0.0.1", 70000).resolve()

    def test_describe(self):
        self.assertEqual(str(UnixEndpoint("/tmp/x")), "unix:/tmp/x")
        self.assertEqual(str(TcpEndpoint("pi", 1)), "tcp:pi:1")
        self.assertEqual(str(TcpEndpoint("::1", 1)), "tcp:[::1]:1")

    def test_parse_address(self):
        self.assertEqual(parse_address("pi.local"), TcpEndpoint("pi.local", 8765))
        self.assertEqual(parse_address("pi.local:9000"), TcpEndpoint("pi.local", 9000))
        self.assertEqual(parse_address("::1"), TcpEndpoint("::1", 8765))
        self.assertEqual(parse_address("[::1]:9000"), TcpEndpoint("::1", 9000))

    def test_parse_address_rejects_garbage(self):
        for bad in ("", "host:port", ":8765", "host:70000", "[::1]x"):
            with self.assertRaises(ValueError):
                parse_address(bad)


class ScriptedPeer:
    """Unix socket server answering each connection with a fixed reply."""

    def __init__(self, path: str, reply: bytes, hold: bool = True):
        self.reply = reply
        self.hold = hold
        self.received = []
        self.server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self.server.bind(path)
        self.server.listen(4)
        self.thread = threading.Thread(target=self._serve, daemon=True)
        self.thread.start()

    def _serve(self) -> None:
        while True:
            try:
                conn, _ = self.server.accept()
            except OSError:
                return
            with conn:
                data = b""
                while not data.endswith(b"\n"):
                    chunk = conn.recv(1024)
                    if not chunk:
                        break
                    data += chunk
                self.received.append(data)
                if self.reply:
                    conn.sendall(self.reply)
                if not self.hold:
                    continue
                # Hold the connection until the client hangs up
                try:
                    conn.recv(1024)
                except OSError:
                    pass

    def close(self) -> None:
        self.server.close()


class TestSocketTransport(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.temp_dir, "lircd")

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_connect_to_missing_socket(self):
        transport = SocketTransport(UnixEndpoint(self.path))
        with self.assertRaises(ConnectError) as context:
            transport.connect()
        self.assertIn(self.path, str(context.exception))
        self.assertFalse(transport.connected)

    def test_send_before_connect(self):
        with self.assertRaises(SendError):
            SocketTransport(UnixEndpoint(self.path)).send_line("list")

    def test_request_reply_round_trip(self):
        peer = ScriptedPeer(self.path, b"BEGIN\nlist\nSUCCESS\nDATA\n2\nKitchen\nLivingRoom\nEND\n")
        self.addCleanup(peer.close)

        client = LircClient(UnixEndpoint(self.path), settle_delay=0.3)
        self.assertEqual(client.list_remotes(), ["Kitchen", "LivingRoom"])
        self.assertEqual(peer.received, [b"list\n"])

    def test_receive_without_data_returns_empty(self):
        peer = ScriptedPeer(self.path, b"")
        self.addCleanup(peer.close)

        with SocketTransport(UnixEndpoint(self.path), settle_delay=0) as transport:
            transport.connect()
            self.assertEqual(transport.receive_available(), b"")
        self.assertFalse(transport.connected)

    def test_path_with_nul_byte(self):
        transport = SocketTransport(UnixEndpoint(os.path.join(self.temp_dir, "a\0b")))
        with self.assertRaises(ConnectError):
            transport.connect()
        self.assertFalse(transport.connected)

    def test_reply_larger_than_one_read(self):
        lines = [f"{i:016x} KEY_BUTTON_{i:04d}" for i in range(300)]
        reply = "BEGIN\nlist tv\nSUCCESS\nDATA\n300\n" + "\n".join(lines) + "\nEND\n"
        self.assertGreater(len(reply), 4096)
        peer = ScriptedPeer(self.path, reply.encode())
        self.addCleanup(peer.close)

        client = LircClient(UnixEndpoint(self.path), settle_delay=0.3)
        commands = client.list_commands("tv")
        self.assertEqual(len(commands), 300)
        self.assertEqual(commands[0], "KEY_BUTTON_0000")
        self.assertEqual(commands[-1], "KEY_BUTTON_0299")

    def test_receive_after_peer_hangup_returns_none(self):
        peer = ScriptedPeer(self.path, b"BEGIN\nlist\nSUCCESS\nEND\n", hold=False)
        self.addCleanup(peer.close)

        with SocketTransport(UnixEndpoint(self.path), settle_delay=0.3) as transport:
            transport.connect()
            transport.send_line("list")
            self.assertEqual(transport.receive_available(), b"BEGIN\nlist\nSUCCESS\nEND\n")
            self.assertIsNone(transport.receive_available())


    def test_close_is_idempotent(self):
        peer = ScriptedPeer(self.path, b"")
        self.addCleanup(peer.close)

        transport = SocketTransport(UnixEndpoint(self.path))
        transport.connect()
        transport.close()
        transport.close()
        self.assertFalse(transport.connected)


if __name__ == "__main__":
    unittest.main()
