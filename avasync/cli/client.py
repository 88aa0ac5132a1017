#!/usr/bin/env python3
# This software is licensed under a **dual-license model**
# For individuals and businesses earning **under $1M per year**, this software is licensed under the **MIT License**
# Businesses or organizations with **annual revenue of $1,000,000 or more** must obtain permission to use this software commercially.

"""
Streams frames to the rig from a JSON-lines source.

Each input line is one frame object (see FrameInput.from_dict). Point a
perception process at stdin, or give a file with --input.
"""

import argparse
import json
import logging
import sys

from ..core.calibration.profile import load_calibration_profile
from ..core.color_text import ColorText
from ..core.config import get_stream_config, setup_logging
from ..core.errors import CalibrationProfileError
from ..core.model.frame_input import FrameInput
from ..core.runtime.streamer import FrameStreamer

logger = logging.getLogger(__name__)


class _PrintTransmitter:
    """Stands in for the socket with --dry-run: writes records to stdout."""

    def __init__(self, out):
        self.out = out

    def open(self):
        return self

    def close(self):
        pass

    def send(self, payload):
        self.out.write(payload.decode("utf-8") + "\n")
        return len(payload)


def iter_frames(lines):
    """Yield (line_number, FrameInput), skipping blank and malformed lines."""
    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            yield line_number, FrameInput.from_dict(json.loads(line))
        except ValueError as e:
            # json.JSONDecodeError is a ValueError too
            logger.warning(f"Skipping line {line_number}: {e}")


def build_parser(config):
    parser = argparse.ArgumentParser(description="AvaSync frame streamer (JSON lines -> UDP)")
    parser.add_argument("--input", default="-", help="JSON-lines file with one frame per line ('-' for stdin)")
    parser.add_argument("--host", default=config["UDP_HOST"], help="Rig host")
    parser.add_argument("--port", type=int, default=config["UDP_PORT"], help="Rig UDP port")
    parser.add_argument("--profile", default=config["CALIBRATION_PROFILE"] or None,
                        help="Calibration profile directory or profile.json (default: bundled)")
    parser.add_argument("--fallback-width", type=int, default=config["FALLBACK_RESOLUTION"][0])
    parser.add_argument("--fallback-height", type=int, default=config["FALLBACK_RESOLUTION"][1])
    parser.add_argument("--log-level", default=None, help="Logging level (default: AVASYNC_LOG_LEVEL or INFO)")
    parser.add_argument("--dry-run", action="store_true", help="Print encoded records instead of sending them")
    parser.add_argument("--show-profile", action="store_true", help="Print the calibration profile and exit")
    return parser


def main(argv=None):
    config = get_stream_config()
    args = build_parser(config).parse_args(argv)
    setup_logging(args.log_level)

    try:
        profile = load_calibration_profile(args.profile)
    except CalibrationProfileError as e:
        print(f"{ColorText.RED}Invalid calibration profile: {e}{ColorText.END}", file=sys.stderr)
        return 2

    if args.show_profile:
        print(f"{ColorText.BOLD}Calibration profile:{ColorText.END} {profile.describe()}")
        for a, b in profile.swap_pairs:
            print(f"  swap     {profile.channels[a]} <-> {profile.channels[b]}")
        for target, source, coefficient in profile.couplings:
            print(f"  coupling {profile.channels[target]} += {coefficient:+g} * {profile.channels[source]}")
        return 0

    config.update({"UDP_HOST": args.host, "UDP_PORT": args.port,
                   "FALLBACK_RESOLUTION": (args.fallback_width, args.fallback_height)})
    if args.dry_run:
        streamer = FrameStreamer(profile=profile, transmitter=_PrintTransmitter(sys.stdout),
                                 fallback_resolution=config["FALLBACK_RESOLUTION"])
    else:
        streamer = FrameStreamer.from_config(config, profile=profile)
        print(f"{ColorText.BOLD}[LiveLink]{ColorText.END} Streaming to {args.host}:{args.port}", file=sys.stderr)

    try:
        source = sys.stdin if args.input == "-" else open(args.input, "r", encoding="utf-8")
    except OSError as e:
        print(f"{ColorText.RED}Cannot read frames from {args.input}: {e}{ColorText.END}", file=sys.stderr)
        return 2

    try:
        with streamer:
            for _, frame in iter_frames(source):
                streamer.process_frame(frame)
    except KeyboardInterrupt:
        print("Interrupted. Stopping stream.", file=sys.stderr)
    finally:
        if source is not sys.stdin:
            source.close()

    stats = streamer.stats()
    colour = ColorText.GREEN if stats["frames_dropped"] == 0 else ColorText.YELLOW
    print(
        f"{colour}Frames: {stats['frames_processed']} processed, {stats['frames_sent']} sent, "
        f"{stats['frames_dropped']} dropped, {stats['field_failures']} field failures{ColorText.END}",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
