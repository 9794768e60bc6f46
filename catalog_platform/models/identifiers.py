"""
Document identifiers for the Catalog Platform.

Records are keyed by an opaque 24-character hexadecimal id (12 bytes), the
ObjectId format used by document databases:

    4 bytes  big-endian Unix timestamp (seconds)
    5 bytes  random value, fixed per process
    3 bytes  incrementing counter, starting at a random value

Ids produced by one process therefore sort in creation order, which is what
the stores rely on for their "natural order".

Callers never build ids by hand; they either generate one with
`new_document_id()` or validate untrusted input with `is_valid()` /
`parse_document_id()`.
"""

import itertools
import os
import re
import threading
import time
from dataclasses import dataclass, field
from typing import Any, NewType, Optional

from ..errors import InvalidId

DocumentId = NewType("DocumentId", str)

_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
_COUNTER_MAX = 0xFFFFFF


def is_valid(value: Any) -> bool:
    """True if `value` is a well-formed document id (24 hex characters)."""
    return isinstance(value, str) and bool(_ID_PATTERN.match(value))


def parse_document_id(value: Any) -> DocumentId:
    """
    Validate untrusted input and return it as a normalized DocumentId.

    Raises:
        InvalidId: If the value is not 24 hexadecimal characters.
    """
    if not is_valid(value):
        raise InvalidId("Invalid ID format")
    return DocumentId(value.lower())


@dataclass
class DocumentIdGenerator:
    """
    Process-local ObjectId-style generator.

    Thread-safe: the counter is advanced under a lock so concurrent request
    handlers never receive the same id.
    """
    process_bytes: bytes = field(default_factory=lambda: os.urandom(5))
    start: Optional[int] = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _counter: itertools.count = field(init=False, repr=False)

    def __post_init__(self):
        if self.start is None:
            self.start = int.from_bytes(os.urandom(3), "big")
        self._counter = itertools.count(self.start)

    def generate(self, timestamp: Optional[float] = None) -> DocumentId:
        with self._lock:
            n = next(self._counter) & _COUNTER_MAX
        seconds = int(time.time() if timestamp is None else timestamp)
        raw = (
            seconds.to_bytes(4, "big")
            + self.process_bytes
            + n.to_bytes(3, "big")
        )
        return DocumentId(raw.hex())


_default_generator = DocumentIdGenerator()


def new_document_id() -> DocumentId:
    """Generate a fresh id from the process-wide generator."""
    return _default_generator.generate()
