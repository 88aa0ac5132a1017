# This software is licensed under a **dual-license model**
# For individuals and businesses earning **under $1M per year**, this software is licensed under the **MIT License**
# Businesses or organizations with **annual revenue of $1,000,000 or more** must obtain permission to use this software commercially.

import json
from typing import Any, Dict, List, Optional

# The consumer dispatches on key existence, so every key is always written.
RECORD_KEYS = ("Res", "Body", "LHand", "RHand", "Face", "BlendShape")


def encode_frame_record(res: Optional[Dict[str, int]] = None,
                        body: Optional[List[Dict]] = None,
                        lhand: Optional[List[Dict]] = None,
                        rhand: Optional[List[Dict]] = None,
                        face: Optional[List[Dict]] = None,
                        blendshape: Optional[List[float]] = None) -> Dict[str, Any]:
    """Merge one frame's results into a record; missing parts stay as None (null)."""
    return dict(zip(RECORD_KEYS, (res, body, lhand, rhand, face, blendshape)))


def serialize_record(record: Dict[str, Any]) -> bytes:
    """Compact UTF-8 JSON, key order preserved."""
    return json.dumps(record, separators=(",", ":"), allow_nan=False).encode("utf-8")
