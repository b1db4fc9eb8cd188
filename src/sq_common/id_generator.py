"""Sortable string IDs for bets, options, markets and price points.

IDs look like ``bet_4f1c2a9e3b7d0000``: a type prefix plus a hex snowflake
(millisecond timestamp | per-millisecond sequence), so rows inserted by one
process sort in creation order. Uniqueness across processes comes from the
random node bits.
"""

import secrets
import threading
import time

_EPOCH_MS = 1_700_000_000_000  # 2023-11-14 approx
_NODE_BITS = 8
_SEQUENCE_BITS = 12
_MAX_SEQUENCE = (1 << _SEQUENCE_BITS) - 1


class IdGenerator:
    def __init__(self, node: int | None = None) -> None:
        if node is None:
            node = secrets.randbelow(1 << _NODE_BITS)
        if not (0 <= node < (1 << _NODE_BITS)):
            raise ValueError(f"node must be 0-{(1 << _NODE_BITS) - 1}")
        self._node = node
        self._sequence = 0
        self._last_ms = -1
        self._lock = threading.Lock()

    def next_int(self) -> int:
        with self._lock:
            now = int(time.time() * 1000)
            if now <= self._last_ms:
                now = self._last_ms
                self._sequence = (self._sequence + 1) & _MAX_SEQUENCE
                if self._sequence == 0:
                    now += 1
            else:
                self._sequence = 0
            self._last_ms = now
            return (
                ((now - _EPOCH_MS) << (_NODE_BITS + _SEQUENCE_BITS))
                | (self._node << _SEQUENCE_BITS)
                | self._sequence
            )

    def next_id(self, prefix: str) -> str:
        return f"{prefix}_{self.next_int():016x}"


_default_generator = IdGenerator()


def generate_id(prefix: str) -> str:
    """Generate a prefixed ID with the module-level default generator."""
    return _default_generator.next_id(prefix)
