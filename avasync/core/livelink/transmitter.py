# This software is licensed under a **dual-license model**
# For individuals and businesses earning **under $1M per year**, this software is licensed under the **MIT License**
# Businesses or organizations with **annual revenue of $1,000,000 or more** must obtain permission to use this software commercially.

import logging
from threading import Lock

from ..config import (
    DEFAULT_UDP_HOST,
    DEFAULT_UDP_PORT,
    DEFAULT_DATAGRAM_SOFT_LIMIT,
    DEFAULT_DATAGRAM_HARD_LIMIT,
)
from ..errors import TransportError
from .livelink_init import create_socket_connection

logger = logging.getLogger(__name__)


class DatagramTransmitter:
    """
    Sends one encoded frame record per UDP datagram to the rig.

    The socket is opened once and reused for every frame. Sends are
    best-effort: no acknowledgement, no retry, no fragmentation.
    """

    def __init__(self, host=DEFAULT_UDP_HOST, port=DEFAULT_UDP_PORT,
                 soft_limit=DEFAULT_DATAGRAM_SOFT_LIMIT,
                 hard_limit=DEFAULT_DATAGRAM_HARD_LIMIT,
                 socket_connection=None):
        """
        Args:
            host, port: rig endpoint.
            soft_limit: payloads above this size are sent but logged (IP fragmentation risk).
            hard_limit: payloads above this size are refused.
            socket_connection: optional pre-existing socket; the caller keeps ownership.
        """
        self.host = host
        self.port = int(port)
        self.soft_limit = soft_limit
        self.hard_limit = hard_limit
        self.socket_connection = socket_connection
        self.own_socket = False
        self.sent = 0
        self.failed = 0
        self._send_lock = Lock()
        self._oversize_warned = False

    @property
    def address(self):
        return (self.host, self.port)

    def open(self):
        with self._send_lock:
            if self.socket_connection is None:
                self.socket_connection = create_socket_connection(self.host, self.port)
                self.own_socket = True
        return self

    def close(self):
        """Close the socket if this transmitter created it. Safe to call twice."""
        with self._send_lock:
            if self.own_socket and self.socket_connection is not None:
                try:
                    self.socket_connection.close()
                    logger.info(f"Closed LiveLink socket to {self.host}:{self.port}")
                except OSError as e:
                    logger.error(f"Error closing LiveLink socket: {e}")
            self.socket_connection = None
            self.own_socket = False

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def send(self, payload: bytes) -> int:
        """
        Send one datagram.

        Returns:
            int: number of bytes handed to the transport.

        Raises:
            TransportError: socket closed, payload too large, or the send failed.
        """
        size = len(payload)
        # One writer at a time on the shared socket
        with self._send_lock:
            if size > self.hard_limit:
                self.failed += 1
                raise TransportError(f"Record of {size} bytes exceeds the {self.hard_limit} byte datagram limit")
            if size > self.soft_limit and not self._oversize_warned:
                # Once per transmitter, every frame would flood the log
                logger.warning(
                    f"Record of {size} bytes exceeds {self.soft_limit} bytes and may be fragmented on the network"
                )
                self._oversize_warned = True
            if self.socket_connection is None:
                self.failed += 1
                raise TransportError("Transmitter is not open")
            try:
                sent = self.socket_connection.sendto(payload, self.address)
            except OSError as e:
                self.failed += 1
                raise TransportError(f"Send to {self.host}:{self.port} failed: {e}") from e
            self.sent += 1
        return sent
