import os
import logging
import dotenv

# Load environment variables
dotenv.load_dotenv()

logger = logging.getLogger(__name__)

# Default configuration values
DEFAULT_UDP_HOST = "127.0.0.1"
DEFAULT_UDP_PORT = 11111  # LiveLink default
DEFAULT_FALLBACK_RESOLUTION = (1920, 1080)

# Keep datagrams under a typical LAN MTU to avoid IP fragmentation; the hard
# limit is the largest payload a single UDP/IPv4 datagram can carry.
DEFAULT_DATAGRAM_SOFT_LIMIT = 1400
DEFAULT_DATAGRAM_HARD_LIMIT = 65507

DEFAULT_LOG_LEVEL = "INFO"


def _env_int(name, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer, using {default}")
        return default


def setup_logging(level=None):
    """Configure root logging once for command-line entry points."""
    level_name = (level or os.getenv("AVASYNC_LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def get_stream_config():
    """
    Build the streaming configuration dictionary based on environment variables.

    Returns:
        dict: Configuration with UDP_HOST, UDP_PORT, FALLBACK_RESOLUTION,
        CALIBRATION_PROFILE, DATAGRAM_SOFT_LIMIT and DATAGRAM_HARD_LIMIT.
    """
    port = _env_int("AVASYNC_UDP_PORT", DEFAULT_UDP_PORT)
    if not 0 < port < 65536:
        logger.warning(f"AVASYNC_UDP_PORT={port} is out of range, using {DEFAULT_UDP_PORT}")
        port = DEFAULT_UDP_PORT

    hard_limit = _env_int("AVASYNC_DATAGRAM_HARD_LIMIT", DEFAULT_DATAGRAM_HARD_LIMIT)
    if not 0 < hard_limit <= DEFAULT_DATAGRAM_HARD_LIMIT:
        hard_limit = DEFAULT_DATAGRAM_HARD_LIMIT

    return {
        "UDP_HOST": os.getenv("AVASYNC_UDP_HOST", DEFAULT_UDP_HOST) or DEFAULT_UDP_HOST,
        "UDP_PORT": port,
        "FALLBACK_RESOLUTION": (
            _env_int("AVASYNC_FALLBACK_WIDTH", DEFAULT_FALLBACK_RESOLUTION[0]),
            _env_int("AVASYNC_FALLBACK_HEIGHT", DEFAULT_FALLBACK_RESOLUTION[1]),
        ),
        # Empty means the profile bundled with the package
        "CALIBRATION_PROFILE": os.getenv("AVASYNC_CALIBRATION_PROFILE", "").strip(),
        "DATAGRAM_SOFT_LIMIT": _env_int("AVASYNC_DATAGRAM_SOFT_LIMIT", DEFAULT_DATAGRAM_SOFT_LIMIT),
        "DATAGRAM_HARD_LIMIT": hard_limit,
    }
