"""Atomic compare-and-swap on an integer."""

import threading

__all__ = ["AtomicInt", "main"]


class AtomicInt:
    """Integer cell supporting an atomic compare-and-swap."""

    def __init__(self, value=0):
        self.value = value
        self._lock = threading.Lock()

    def compare_and_swap(self, old, new):
        """Set the value to ``new`` if it equals ``old``; return whether it did."""
        with self._lock:
            if self.value == old:
                self.value = new
                return True
            return False


def main(argv=None):
    cell = AtomicInt(0)
    print(f"before successful cas: {cell.value}")
    success = int(cell.compare_and_swap(0, 100))
    print(f"after successful cas: {cell.value} (success: {success})")
    print(f"before failing cas: {cell.value}")
    success = int(cell.compare_and_swap(0, 200))
    print(f"after failing cas: {cell.value} (old: {success})")
    return 0