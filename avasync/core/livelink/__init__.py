"""Wire encoding and UDP transport to the rig.

- encode_frame_record / serialize_record build the per-frame JSON datagram.
- DatagramTransmitter owns the socket and sends one datagram per frame.
"""

from .encoder import RECORD_KEYS, encode_frame_record, serialize_record
from .livelink_init import create_socket_connection
from .transmitter import DatagramTransmitter
