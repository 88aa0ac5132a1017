# This software is licensed under a **dual-license model**
# For individuals and businesses earning **under $1M per year**, this software is licensed under the **MIT License**
# Businesses or organizations with **annual revenue of $1,000,000 or more** must obtain permission to use this software commercially.

# # livelink_init.py

import logging
import socket

from ..config import DEFAULT_UDP_HOST, DEFAULT_UDP_PORT

logger = logging.getLogger(__name__)


def create_socket_connection(host=DEFAULT_UDP_HOST, port=DEFAULT_UDP_PORT):
    """
    Create a non-blocking UDP socket for the rig endpoint.

    The socket stays unconnected and every frame goes out with sendto(),
    so an ICMP refusal for one frame is never reported on a later send.
    """
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    s.setblocking(False)
    logger.info(f"LiveLink socket ready for {host}:{port}")
    return s
