"""
Notes API — Object Id Generation & Parsing
===========================================

What:  Generates and parses the 24-character hexadecimal ids of note
       documents.
How:   Each id packs 12 bytes:

           ┌──────────────┬──────────────────┬────────────┐
           │ 4B timestamp │ 5B process value │ 3B counter │
           └──────────────┴──────────────────┴────────────┘

       The timestamp is big-endian seconds since the Unix epoch, the process
       value is random once per process, the counter starts at a random
       value and wraps at 2**24.
Who:   The Note model uses new_object_id() as the primary key default; the
       note service parses every id that arrives from a request path.
"""

import itertools
import os
import re
import threading
import time
from typing import Any

from notes_api.exceptions import MalformedIdError

OBJECT_ID_LENGTH = 24

_OBJECT_ID_RE = re.compile(r"[0-9a-fA-F]{24}")

_process_value = os.urandom(5)
_counter = itertools.count(int.from_bytes(os.urandom(3), "big"))
_counter_lock = threading.Lock()


def new_object_id() -> str:
    """Return a fresh, lowercase 24-character hex id."""
    with _counter_lock:
        count = next(_counter) % 0x1000000
    timestamp = int(time.time()) & 0xFFFFFFFF
    raw = timestamp.to_bytes(4, "big") + _process_value + count.to_bytes(3, "big")
    return raw.hex()


def is_valid_object_id(value: Any) -> bool:
    return isinstance(value, str) and _OBJECT_ID_RE.fullmatch(value) is not None


def parse_object_id(value: Any) -> str:
    """
    Normalize an id taken from a request.

    Returns:
        The lowercase form of `value`.

    Raises:
        MalformedIdError: `value` is not 24 hexadecimal characters.
    """
    if not is_valid_object_id(value):
        raise MalformedIdError(value=value)
    return value.lower()
