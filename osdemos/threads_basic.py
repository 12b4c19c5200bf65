"""First steps with threads: creating, joining, passing and returning values."""

import argparse
import sys
import threading
from dataclasses import dataclass

__all__ = [
    "ThreadResult",
    "print_letters",
    "count_race",
    "thread_args",
    "thread_simple_return",
    "thread_struct_return",
    "main",
]


@dataclass(frozen=True)
class _ThreadArgs:
    a: int
    b: int


@dataclass(frozen=True)
class ThreadResult:
    """Pair of values handed back by a thread."""

    x: int
    y: int


class _Printer:
    """Thread-safe line writer that also keeps what it wrote."""

    def __init__(self, out):
        self._out = sys.stdout if out is None else out
        self._lock = threading.Lock()
        self.lines = []

    def __call__(self, text):
        with self._lock:
            self.lines.append(text)
            self._out.write(text + "\n")
            self._out.flush()


class _Worker(threading.Thread):
    """Thread whose return value (or exception) is handed back by ``result``."""

    def __init__(self, work, *args):
        super().__init__()
        self._work = work
        self._args = args
        self._value = None
        self._error = None

    def run(self):
        try:
            self._value = self._work(*self._args)
        except BaseException as exc:
            self._error = exc

    def result(self):
        self.join()
        if self._error is not None:
            raise self._error
        return self._value


def print_letters(out=None):
    """Two threads each print a letter; return the lines in the order written."""
    emit = _Printer(out)
    emit("main: begin")
    workers = [_Worker(emit, letter) for letter in ("A", "B")]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.result()
    emit("main: end")
    return emit.lines


def _race(loops, emit=None):
    cell = [0]

    def worker(letter):
        if emit is not None:
            emit(f"{letter}: begin [addr of i: {id(threading.current_thread()):#x}]")
        for _ in range(loops):
            cell[0] = cell[0] + 1
        if emit is not None:
            emit(f"{letter}: done")

    if emit is not None:
        emit(f"main: begin [counter = {cell[0]}] [{id(cell):x}]")
    workers = [_Worker(worker, letter) for letter in ("A", "B")]
    for w in workers:
        w.start()
    for w in workers:
        w.result()
    return cell[0]


def count_race(loops):
    """Two threads each add one to a shared, unprotected counter ``loops`` times.

    Returns the final counter, which may fall short of ``2 * loops``.
    """
    return _race(loops)


def thread_args(a, b, out=None):
    """Hand a structure of two ints to a thread that prints them."""
    emit = _Printer(out)
    worker = _Worker(lambda args: emit(f"{args.a} {args.b}"), _ThreadArgs(a, b))
    worker.start()
    worker.result()
    emit("done")
    return emit.lines


def thread_simple_return(value, out=None):
    """A thread prints ``value`` and returns it plus one."""
    emit = _Printer(out)

    def work(arg):
        emit(f"{arg}")
        return arg + 1

    worker = _Worker(work, value)
    worker.start()
    returned = worker.result()
    emit(f"returned {returned}")
    return returned


def thread_struct_return(a, b, out=None):
    """A thread prints its arguments and returns a freshly built pair."""
    emit = _Printer(out)

    def work(args):
        emit(f"args {args.a} {args.b}")
        return ThreadResult(1, 2)

    worker = _Worker(work, _ThreadArgs(a, b))
    worker.start()
    result = worker.result()
    emit(f"returned {result.x} {result.y}")
    return result


def main(argv=None):
    parser = argparse.ArgumentParser(prog="threads-basic")
    sub = parser.add_subparsers(dest="demo", required=True)
    sub.add_parser("t0", help="two threads print a letter each")
    t1 = sub.add_parser("t1", help="two threads race on a counter")
    t1.add_argument("loopcount", type=int)
    threads = sub.add_parser("threads", help="count with two threads")
    threads.add_argument("loops", type=int)
    sub.add_parser("create", help="pass a structure to a thread")
    sub.add_parser("simple", help="pass and return a plain value")
    sub.add_parser("struct", help="pass and return structures")
    args = parser.parse_args(argv)

    if args.demo == "t0":
        print_letters()
    elif args.demo == "t1":
        emit = _Printer(None)
        counter = _race(args.loopcount, emit)
        emit(f"main: done\n [counter: {counter}]\n [should: {args.loopcount * 2}]")
    elif args.demo == "threads":
        print("Initial value : 0")
        print(f"Final value   : {count_race(args.loops)}")
    elif args.demo == "create":
        thread_args(10, 20)
    elif args.demo == "simple":
        thread_simple_return(100)
    else:
        thread_struct_return(10, 20)
    return 0