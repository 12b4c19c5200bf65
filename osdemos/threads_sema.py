"""Semaphores as locks, join signals, bounded buffers, reader-writer locks and throttles."""

import argparse
import sys
import threading
import time
from types import SimpleNamespace

__all__ = [
    "CMAX",
    "END_MARKER",
    "RWLock",
    "SemaphoreBuffer",
    "binary_counter",
    "sema_join",
    "produce_consume",
    "rwlock_demo",
    "throttle",
    "main",
]

CMAX = 10
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


class RWLock:
    """Reader-writer lock built from two binary semaphores.

    The first reader in takes the write lock and the last reader out gives
    it back, so writers can starve while readers keep arriving.
    """

    def __init__(self):
        self.readers = 0
        self._lock = threading.Semaphore(1)
        self._writelock = threading.Semaphore(1)

    def acquire_readlock(self):
        with self._lock:
            self.readers += 1
            if self.readers == 1:
                self._writelock.acquire()

    def release_readlock(self):
        with self._lock:
            self.readers -= 1
            if self.readers == 0:
                self._writelock.release()

    def acquire_writelock(self):
        self._writelock.acquire()

    def release_writelock(self):
        self._writelock.release()


class SemaphoreBuffer:
    """Ring of ``size`` slots guarded by empty, full and mutex semaphores."""

    def __init__(self, size):
        if size < 1:
            raise ValueError(f"buffer size must be positive, got {size}")
        self._slots = [0] * size
        self._size = size
        self._use = 0
        self._fill = 0
        self._empty = threading.Semaphore(size)
        self._full = threading.Semaphore(0)
        self._mutex = threading.Semaphore(1)

    def put(self, value):
        """Store ``value``, waiting while every slot is taken."""
        self._empty.acquire()
        with self._mutex:
            self._slots[self._fill] = value
            self._fill = (self._fill + 1) % self._size
        self._full.release()

    def get(self):
        """Remove and return the oldest value, waiting while none is stored."""
        self._full.acquire()
        with self._mutex:
            value = self._slots[self._use]
            self._use = (self._use + 1) % self._size
        self._empty.release()
        return value


def binary_counter(loops=10_000_000):
    """Two threads each add one to a counter ``loops`` times under a semaphore.

    Returns the final counter, always ``2 * loops``.
    """
    mutex = threading.Semaphore(1)
    state = SimpleNamespace(counter=0)

    def child():
        for _ in range(loops):
            with mutex:
                state.counter += 1

    workers = [threading.Thread(target=child) for _ in range(2)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()
    return state.counter


def sema_join(delay=2, out=None):
    """Parent waits on a semaphore that a child posts after ``delay`` seconds.

    Returns the lines written, in order.
    """
    emit = _Printer(out)
    sem = threading.Semaphore(0)

    def child():
        time.sleep(delay)
        emit("child")
        sem.release()

    emit("parent: begin")
    worker = threading.Thread(target=child)
    worker.start()
    sem.acquire()
    emit("parent: end")
    worker.join()
    return emit.lines


def produce_consume(buffer_size, loops, consumers=1, out=None):
    """One producer puts 0..loops-1, then one end marker per consumer.

    Each consumer writes its index and every value it takes, end marker
    included. Returns, per consumer, the values taken (end marker excluded).
    """
    if consumers > CMAX:
        raise ValueError(f"at most {CMAX} consumers, got {consumers}")
    buffer = SemaphoreBuffer(buffer_size)
    emit = _Printer(out)
    received = [[] for _ in range(consumers)]

    def producer():
        for i in range(loops):
            buffer.put(i)
        for _ in range(consumers):
            buffer.put(END_MARKER)

    def consumer(index, taken):
        while True:
            value = buffer.get()
            emit(f"{index} {value}")
            if value == END_MARKER:
                return
            taken.append(value)

    threads = [threading.Thread(target=producer)]
    threads += [
        threading.Thread(target=consumer, args=(index, taken))
        for index, taken in enumerate(received)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return received


def rwlock_demo(read_loops, write_loops, out=None):
    """A reader and a writer share a counter through a reader-writer lock.

    Returns the final counter.
    """
    emit = _Printer(out)
    lock = RWLock()
    state = SimpleNamespace(counter=0)

    def reader():
        local = 0
        for _ in range(read_loops):
            lock.acquire_readlock()
            local = state.counter
            lock.release_readlock()
            emit(f"read {local}")
        emit(f"read done: {local}")

    def writer():
        for _ in range(write_loops):
            lock.acquire_writelock()
            state.counter += 1
            lock.release_writelock()
        emit("write done")

    workers = [threading.Thread(target=reader), threading.Thread(target=writer)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()
    emit("all done")
    return state.counter


def throttle(num_threads, sem_value, delay=1, out=None):
    """Start ``num_threads`` children; at most ``sem_value`` run at once.

    Each child prints its index and sleeps ``delay`` seconds inside the
    throttled section. Returns the most children seen inside it together.
    """
    sem = threading.Semaphore(sem_value)
    emit = _Printer(out)
    guard = threading.Lock()
    state = SimpleNamespace(inside=0, peak=0)

    def child(index):
        with sem:
            with guard:
                state.inside += 1
                state.peak = max(state.peak, state.inside)
            emit(f"child {index}")
            time.sleep(delay)
            with guard:
                state.inside -= 1

    emit("parent: begin")
    workers = [threading.Thread(target=child, args=(i,)) for i in range(num_threads)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()
    emit("parent: end")
    return state.peak


def main(argv=None):
    parser = argparse.ArgumentParser(prog="threads-sema")
    sub = parser.add_subparsers(dest="demo", required=True)
    binary = sub.add_parser("binary", help="semaphore as a lock")
    binary.add_argument("--loops", type=int, default=10_000_000)
    join = sub.add_parser("join", help="semaphore as a join signal")
    join.add_argument("--delay", type=float, default=2.0)
    pc = sub.add_parser("pc", help="bounded-buffer producer/consumer")
    pc.add_argument("buffersize", type=int)
    pc.add_argument("loops", type=int)
    pc.add_argument("consumers", type=int)
    rw = sub.add_parser("rwlock", help="reader-writer lock")
    rw.add_argument("readloops", type=int)
    rw.add_argument("writeloops", type=int)
    thr = sub.add_parser("throttle", help="limit how many threads run at once")
    thr.add_argument("num_threads", type=int)
    thr.add_argument("sem_value", type=int)
    thr.add_argument("--delay", type=float, default=1.0)
    args = parser.parse_args(argv)

    try:
        if args.demo == "binary":
            counter = binary_counter(args.loops)
            print(f"result: {counter} (should be {2 * args.loops})")
        elif args.demo == "join":
            sema_join(args.delay)
        elif args.demo == "pc":
            produce_consume(args.buffersize, args.loops, args.consumers)
        elif args.demo == "rwlock":
            rwlock_demo(args.readloops, args.writeloops)
        else:
            throttle(args.num_threads, args.sem_value, args.delay)
    except ValueError as exc:
        print(f"{args.demo}: {exc}", file=sys.stderr)
        return 1
    return 0