"""Introductory demos: CPU, file I/O, memory and address-space layout."""

import argparse
import errno
import inspect
import itertools
import mmap
import os
import stat
import sys
import time

from .timing import spin

__all__ = [
    "repeat_print",
    "write_hello",
    "memory_counter",
    "address_layout",
    "main",
]

_HEAP_BLOCK = 100_000_000


def _emit(out, text):
    out.write(text + "\n")
    out.flush()


def _iterations(count):
    return itertools.count() if count is None else range(count)


def repeat_print(text, count=None, interval=1, out=None):
    """Print ``text`` and busy-wait ``interval`` seconds, ``count`` times.

    With ``count`` of None the loop never ends.
    """
    out = sys.stdout if out is None else out
    for _ in _iterations(count):
        _emit(out, text)
        spin(interval)


def write_hello(path="/tmp/file"):
    """Write "hello world" to ``path``, force it to disk, and return its length."""
    data = b"hello world\n"
    fd = os.open(
        path,
        os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
        stat.S_IRUSR | stat.S_IWUSR,
    )
    try:
        written = os.write(fd, data)
        if written != len(data):
            raise OSError(errno.EIO, f"short write to {path}")
        os.fsync(fd)
    finally:
        os.close(fd)
    return written


def memory_counter(value, count=None, interval=0.01, out=None):
    """Keep a value in a heap cell and increment it ``count`` times.

    Returns the final value; with ``count`` of None the loop never ends.
    """
    out = sys.stdout if out is None else out
    cell = [value]
    pid = os.getpid()
    _emit(out, f"({pid}) addr pointed to by p: {id(cell):#x}")
    for _ in _iterations(count):
        time.sleep(interval)
        cell[0] += 1
        _emit(out, f"({pid}) value of p: {cell[0]}")
    return cell[0]


def address_layout():
    """Return identities of a code object, a large heap block and a stack frame."""
    heap_block = mmap.mmap(-1, _HEAP_BLOCK)
    frame = inspect.currentframe()
    try:
        return {
            "code": id(address_layout.__code__),
            "heap": id(heap_block),
            "stack": id(frame),
        }
    finally:
        del frame
        heap_block.close()


def main(argv=None):
    parser = argparse.ArgumentParser(prog="intro")
    sub = parser.add_subparsers(dest="demo", required=True)

    cpu = sub.add_parser("cpu", help="print a string once a second")
    cpu.add_argument("string")
    cpu.add_argument("--count", type=int, default=None)
    cpu.add_argument("--interval", type=float, default=1.0)

    io_demo = sub.add_parser("io", help="write a file and sync it")
    io_demo.add_argument("path", nargs="?", default="/tmp/file")

    mem = sub.add_parser("mem", help="increment a value on the heap")
    mem.add_argument("value", type=int)
    mem.add_argument("--count", type=int, default=None)
    mem.add_argument("--interval", type=float, default=0.01)

    sub.add_parser("va", help="show where code, heap and stack live")

    args = parser.parse_args(argv)
    if args.demo == "cpu":
        repeat_print(args.string, args.count, args.interval)
    elif args.demo == "io":
        write_hello(args.path)
    elif args.demo == "mem":
        memory_counter(args.value, args.count, args.interval)
    else:
        layout = address_layout()
        print(f"location of code : {layout['code']:#x}")
        print(f"location of heap : {layout['heap']:#x}")
        print(f"location of stack: {layout['stack']:#x}")
    return 0