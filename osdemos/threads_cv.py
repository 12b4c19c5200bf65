"""Condition variables: joining a thread and a bounded producer/consumer buffer."""

import argparse
import sys
import threading
import time
from types import SimpleNamespace

__all__ = [
    "END_MARKER",
    "Synchronizer",
    "BoundedBuffer",
    "join_cv",
    "join_spin",
    "produce_consume",
    "main",
]

END_MARKER = -1


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


class Synchronizer:
    """One-shot signal guarded by a lock; ``wait`` resets it for the next use."""

    def __init__(self):
        self.done = False
        self._cond = threading.Condition(threading.Lock())

    def signal(self):
        """Mark the event as done and wake one waiter."""
        with self._cond:
            self.done = True
            self._cond.notify()

    def wait(self):
        """Block until the event is done, then clear it."""
        with self._cond:
            while not self.done:
                self._cond.wait()
            self.done = False


class BoundedBuffer:
    """Fixed-size ring of slots shared by producers and consumers.

    With ``single_cv`` producers and consumers share one condition variable,
    which can leave every thread asleep when there are several consumers.
    """

    def __init__(self, size, single_cv=False):
        if size < 1:
            raise ValueError(f"buffer size must be positive, got {size}")
        self._slots = [0] * size
        self._size = size
        self._use = 0
        self._fill = 0
        self._count = 0
        lock = threading.Lock()
        self._empty = threading.Condition(lock)
        self._full = self._empty if single_cv else threading.Condition(lock)

    def __len__(self):
        return self._count

    def put(self, value):
        """Store ``value``, waiting while every slot is taken."""
        with self._empty:
            while self._count == self._size:
                self._empty.wait()
            self._slots[self._fill] = value
            self._fill = (self._fill + 1) % self._size
            self._count += 1
            self._full.notify()

    def get(self):
        """Remove and return the oldest value, waiting while none is stored."""
        with self._full:
            while self._count == 0:
                self._full.wait()
            value = self._slots[self._use]
            self._use = (self._use + 1) % self._size
            self._count -= 1
            self._empty.notify()
            return value


def join_cv(delay=1, out=None):
    """Parent waits on a condition variable for a child that sleeps ``delay``.

    Returns the lines written, in order.
    """
    emit = _Printer(out)
    sync = Synchronizer()

    def child():
        emit("child")
        time.sleep(delay)
        sync.signal()

    emit("parent: begin")
    worker = threading.Thread(target=child)
    worker.start()
    sync.wait()
    emit("parent: end")
    worker.join()
    return emit.lines


def join_spin(delay=5, out=None):
    """Parent busy-waits on a flag a child sets after ``delay`` seconds.

    Returns the lines written, in order.
    """
    emit = _Printer(out)
    state = SimpleNamespace(done=False)

    def child():
        emit("child")
        time.sleep(delay)
        state.done = True

    emit("parent: begin")
    worker = threading.Thread(target=child)
    worker.start()
    while not state.done:
        pass
    emit("parent: end")
    worker.join()
    return emit.lines


def _join_no_lock(delay, wait_delay, timeout, emit):
    """Child sets the flag and signals without the lock; the signal is lost.

    Returns True if the parent was woken, False if its wait timed out.
    """
    cond = threading.Condition(threading.Lock())
    state = SimpleNamespace(done=False)

    def child():
        emit("child: begin")
        time.sleep(delay)
        state.done = True
        emit("child: signal")
        # A signal sent while the parent holds the lock finds nobody waiting.
        if cond.acquire(blocking=False):
            try:
                cond.notify()
            finally:
                cond.release()

    emit("parent: begin")
    worker = threading.Thread(target=child, daemon=True)
    worker.start()
    with cond:
        emit("parent: check condition")
        while not state.done:
            time.sleep(wait_delay)
            emit("parent: wait to be signalled...")
            if not cond.wait(timeout):
                return False
    emit("parent: end")
    return True


def _join_no_state_var(wait_delay, timeout, emit):
    """Child signals before the parent waits; with no flag the parent misses it.

    Returns True if the parent was woken, False if its wait timed out.
    """
    cond = threading.Condition(threading.Lock())

    def child():
        emit("child: begin")
        with cond:
            emit("child: signal")
            cond.notify()

    emit("parent: begin")
    worker = threading.Thread(target=child, daemon=True)
    worker.start()
    time.sleep(wait_delay)
    emit("parent: wait to be signalled...")
    with cond:
        woken = cond.wait(timeout)
    if woken:
        emit("parent: end")
    return woken


def produce_consume(buffer_size, loops, consumers=1, single_cv=False):
    """One producer puts 0..loops-1, then one end marker per consumer.

    Returns, for each consumer, the values it took (end marker excluded).
    """
    buffer = BoundedBuffer(buffer_size, single_cv)
    received = [[] for _ in range(consumers)]

    def producer():
        for i in range(loops):
            buffer.put(i)
        for _ in range(consumers):
            buffer.put(END_MARKER)

    def consumer(taken):
        while (value := buffer.get()) != END_MARKER:
            taken.append(value)

    threads = [threading.Thread(target=producer)]
    threads += [threading.Thread(target=consumer, args=(taken,)) for taken in received]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return received


def main(argv=None):
    parser = argparse.ArgumentParser(prog="threads-cv")
    sub = parser.add_subparsers(dest="demo", required=True)
    for name in ("join", "join-modular"):
        join = sub.add_parser(name, help="join with a condition variable")
        join.add_argument("--delay", type=float, default=1.0)
    spin = sub.add_parser("join-spin", help="join by spinning on a flag")
    spin.add_argument("--delay", type=float, default=5.0)
    no_lock = sub.add_parser("join-no-lock", help="signal without holding the lock")
    no_lock.add_argument("--delay", type=float, default=1.0)
    no_lock.add_argument("--wait-delay", type=float, default=2.0)
    no_lock.add_argument("--timeout", type=float, default=None)
    no_state = sub.add_parser("join-no-state-var", help="signal with no state variable")
    no_state.add_argument("--wait-delay", type=float, default=2.0)
    no_state.add_argument("--timeout", type=float, default=None)
    for name in ("pc", "pc-single"):
        pc = sub.add_parser(name, help="bounded-buffer producer/consumer")
        pc.add_argument("buffersize", type=int)
        pc.add_argument("loops", type=int)
        pc.add_argument("consumers", type=int)
    args = parser.parse_args(argv)

    if args.demo in ("join", "join-modular"):
        join_cv(args.delay)
    elif args.demo == "join-spin":
        join_spin(args.delay)
    elif args.demo == "join-no-lock":
        if not _join_no_lock(args.delay, args.wait_delay, args.timeout, _Printer(None)):
            return 1
    elif args.demo == "join-no-state-var":
        if not _join_no_state_var(args.wait_delay, args.timeout, _Printer(None)):
            return 1
    else:
        try:
            produce_consume(args.buffersize, args.loops, args.consumers, args.demo == "pc-single")
        except ValueError as exc:
            print(f"{args.demo}: {exc}", file=sys.stderr)
            return 1
    return 0