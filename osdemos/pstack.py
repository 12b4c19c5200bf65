"""A stack of integers kept in a memory-mapped file."""

import mmap
import os
import struct
import sys

__all__ = ["PersistentStack", "run", "main"]

_COUNT = struct.Struct("@N")
_ITEM = struct.Struct("@i")


def _atoi(text):
    """Parse a leading decimal integer the way atoi does; 0 if none."""
    s = text.lstrip()
    sign = 1
    if s[:1] in ("+", "-"):
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    digits = ""
    for ch in s:
        if not ch.isdigit():
            break
        digits += ch
    value = sign * int(digits) if digits else 0
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


class PersistentStack:
    """Stack whose count and items live in an existing, pre-sized file.

    The file starts with a native size_t holding the item count; native
    ints follow. Pushes that do not fit are ignored.
    """

    def __init__(self, path):
        self._file = open(path, "r+b")
        try:
            size = os.fstat(self._file.fileno()).st_size
            if size < _COUNT.size or size % _ITEM.size:
                raise ValueError(
                    f"backing file size {size} must be at least {_COUNT.size} "
                    f"and a multiple of {_ITEM.size}"
                )
            self._size = size
            self._map = mmap.mmap(self._file.fileno(), size)
        except BaseException:
            self._file.close()
            raise

    def _count(self):
        return _COUNT.unpack_from(self._map, 0)[0]

    def _set_count(self, n):
        _COUNT.pack_into(self._map, 0, n)

    def __len__(self):
        return self._count()

    def push(self, value):
        """Push ``value``; return False if the stack is full."""
        n = self._count()
        if _COUNT.size + (n + 1) * _ITEM.size > self._size:
            return False
        _ITEM.pack_into(self._map, _COUNT.size + n * _ITEM.size, value)
        self._set_count(n + 1)
        return True

    def pop(self):
        """Pop and return the top item, or None if the stack is empty."""
        n = self._count()
        if n == 0:
            return None
        n -= 1
        self._set_count(n)
        return _ITEM.unpack_from(self._map, _COUNT.size + n * _ITEM.size)[0]

    def close(self):
        if not self._map.closed:
            self._map.flush()
            self._map.close()
        self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def run(path, commands):
    """Apply "pop" or push commands in order; return the popped values."""
    popped = []
    with PersistentStack(path) as stack:
        for command in commands:
            if command == "pop":
                value = stack.pop()
                if value is not None:
                    popped.append(value)
            else:
                stack.push(_atoi(command))
    return popped


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    for value in run("ps.img", args):
        print(value)
    return 0