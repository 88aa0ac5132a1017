"""Tests for the UDP datagram transmitter."""

import logging
import socket
import time

import pytest

from avasync.core.errors import TransportError
from avasync.core.livelink.livelink_init import create_socket_connection
from avasync.core.livelink.transmitter import DatagramTransmitter


class FailingSocket:
    def sendto(self, payload, address):
        raise ConnectionRefusedError("port unreachable")

    def close(self):
        pass


@pytest.fixture
def receiver():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


class TestLoopback:

    def test_one_payload_one_datagram(self, receiver):
        port = receiver.getsockname()[1]
        with DatagramTransmitter("127.0.0.1", port) as transmitter:
            transmitter.send(b'{"Res":null}')
            transmitter.send(b'{"Res":{"x":1,"y":1}}')
            assert receiver.recv(65535) == b'{"Res":null}'
            assert receiver.recv(65535) == b'{"Res":{"x":1,"y":1}}'
            assert transmitter.sent == 2
        assert transmitter.socket_connection is None

    def test_create_socket_connection_is_non_blocking(self):
        sock = create_socket_connection("127.0.0.1", 11111)
        try:
            assert sock.gettimeout() == 0.0
            # Unconnected: refusals for one frame are not reported on the next
            with pytest.raises(OSError):
                sock.getpeername()
        finally:
            sock.close()

    def test_closed_port_does_not_fail_later_frames(self):
        placeholder = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        placeholder.bind(("127.0.0.1", 0))
        port = placeholder.getsockname()[1]
        placeholder.close()

        with DatagramTransmitter("127.0.0.1", port) as transmitter:
            for i in range(6):
                transmitter.send(b'{"frame":%d}' % i)
                time.sleep(0.01)
        assert transmitter.sent == 6
        assert transmitter.failed == 0


class TestFailures:

    def test_socket_error_becomes_transport_error(self):
        transmitter = DatagramTransmitter(socket_connection=FailingSocket())
        with pytest.raises(TransportError):
            transmitter.send(b"{}")
        assert transmitter.failed == 1
        assert transmitter.sent == 0

    def test_oversized_payload_is_not_sent(self, recording_socket):
        transmitter = DatagramTransmitter(socket_connection=recording_socket, hard_limit=16)
        with pytest.raises(TransportError):
            transmitter.send(b"x" * 17)
        assert recording_socket.datagrams == []

    def test_soft_limit_warns_once(self, recording_socket, caplog):
        transmitter = DatagramTransmitter(socket_connection=recording_socket, soft_limit=4)
        with caplog.at_level(logging.WARNING, logger="avasync.core.livelink.transmitter"):
            transmitter.send(b"123456")
            transmitter.send(b"123456")
        assert len(recording_socket.datagrams) == 2
        assert len([r for r in caplog.records if "fragmented" in r.getMessage()]) == 1

    def test_send_after_close_fails(self, receiver):
        transmitter = DatagramTransmitter("127.0.0.1", receiver.getsockname()[1]).open()
        transmitter.close()
        transmitter.close()
        with pytest.raises(TransportError):
            transmitter.send(b"{}")


def test_borrowed_socket_is_not_closed(recording_socket):
    with DatagramTransmitter(socket_connection=recording_socket) as transmitter:
        transmitter.send(b"{}")
    assert not recording_socket.closed
    assert recording_socket.datagrams == [b"{}"]
    assert recording_socket.addresses == [("127.0.0.1", 11111)]
