# This software is licensed under a **dual-license model**
# For individuals and businesses earning **under $1M per year**, this software is licensed under the **MIT License**
# Businesses or organizations with **annual revenue of $1,000,000 or more** must obtain permission to use this software commercially.

"""Exception types raised by the AvaSync core.

SchemaMismatch only ever costs one field of one frame, TransportError only ever
costs one frame, and CalibrationProfileError is raised while loading assets at
startup.
"""


class AvaSyncError(Exception):
    """Base class for all AvaSync errors."""


class SchemaMismatch(AvaSyncError, ValueError):
    """An input field does not match the schema the calibration profile expects."""


class TransportError(AvaSyncError, OSError):
    """A datagram could not be handed to the transport."""


class CalibrationProfileError(AvaSyncError, ValueError):
    """A calibration profile asset is missing or inconsistent."""
