"""Classic concurrency bugs: atomicity violation, deadlock and ordering."""

import argparse
import sys
import threading
import time
from types import SimpleNamespace

__all__ = ["PR_STATE_INIT", "PRThread", "atomicity", "deadlock", "ordering", "main"]

PR_STATE_INIT = 0

_T2_PAD = " " * 17
_DEADLOCK_PAD = " " * 27


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


class PRThread:
    """Thread record: starts ``target``, then pauses ``delay`` seconds."""

    def __init__(self, target, delay=1):
        self.state = PR_STATE_INIT
        self._thread = threading.Thread(target=target, daemon=True)
        self._thread.start()
        time.sleep(delay)

    def wait(self):
        """Wait for the thread to finish."""
        self._thread.join()


def atomicity(fixed=False, use_delay=2, clear_delay=1, out=None):
    """One thread checks then uses a record while another clears it.

    Returns the pid the first thread printed, or None if it found the record
    already cleared. Raises RuntimeError when the check-then-use is broken.
    """
    emit = _Printer(out)
    shared = SimpleNamespace(proc_info=SimpleNamespace(pid=100))
    lock = threading.Lock()
    outcome = SimpleNamespace(pid=None, error=None)

    def thread1():
        emit("t1: before check")
        if fixed:
            lock.acquire()
        try:
            if shared.proc_info is not None:
                emit("t1: after check")
                time.sleep(use_delay)
                emit("t1: use!")
                try:
                    outcome.pid = shared.proc_info.pid
                except AttributeError as exc:
                    outcome.error = exc
                    return
                emit(f"{outcome.pid}")
        finally:
            if fixed:
                lock.release()

    def thread2():
        emit(f"{_T2_PAD}t2: begin")
        time.sleep(clear_delay)
        if fixed:
            lock.acquire()
        try:
            emit(f"{_T2_PAD}t2: set to NULL")
            shared.proc_info = None
        finally:
            if fixed:
                lock.release()

    emit("main: begin")
    workers = [threading.Thread(target=thread1), threading.Thread(target=thread2)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()
    if outcome.error is not None:
        raise RuntimeError("t1 used the record after it was cleared") from outcome.error
    emit("main: end")
    return outcome.pid


def deadlock(timeout=None, out=None):
    """Two threads take two locks in opposite orders.

    Each waits at most ``timeout`` seconds for its second lock (forever when
    None). Returns True if both got both locks, False if they deadlocked.
    """
    emit = _Printer(out)
    l1, l2 = threading.Lock(), threading.Lock()
    stuck = threading.Event()
    wait = -1 if timeout is None else timeout

    def worker(name, pad, first, first_name, second, second_name):
        emit(f"{pad}{name}: begin")
        emit(f"{pad}{name}: try to acquire {first_name}...")
        with first:
            emit(f"{pad}{name}: {first_name} acquired")
            emit(f"{pad}{name}: try to acquire {second_name}...")
            if not second.acquire(timeout=wait):
                stuck.set()
                emit(f"{pad}{name}: deadlock waiting for {second_name}")
                return
            emit(f"{pad}{name}: {second_name} acquired")
            second.release()

    emit("main: begin")
    workers = [
        threading.Thread(target=worker, args=("t1", "", l1, "L1", l2, "L2")),
        threading.Thread(target=worker, args=("t2", _DEADLOCK_PAD, l2, "L2", l1, "L1")),
    ]
    for w in workers:
        w.start()
    for w in workers:
        w.join()
    emit("main: end")
    return not stuck.is_set()


def ordering(fixed=False, delay=1, out=None):
    """A thread reads its own record, which the creator fills in afterwards.

    Returns the state the thread read. Raises RuntimeError if the thread ran
    ahead of the record being set.
    """
    emit = _Printer(out)
    shared = SimpleNamespace(thread=None, initialized=False, state=None, failed=False)
    cond = threading.Condition()

    def m_main():
        emit("mMain: begin")
        if fixed:
            with cond:
                cond.wait_for(lambda: shared.initialized)
        record = shared.thread
        if record is None:
            shared.failed = True
            return
        shared.state = record.state
        emit(f"mMain: state is {shared.state}")

    emit("ordering: begin")
    shared.thread = PRThread(m_main, delay)
    if fixed:
        with cond:
            shared.initialized = True
            cond.notify()
    shared.thread.wait()
    if shared.failed:
        raise RuntimeError("mMain read the thread record before it was set")
    emit("ordering: end")
    return shared.state


def main(argv=None):
    parser = argparse.ArgumentParser(prog="threads-bugs")
    sub = parser.add_subparsers(dest="demo", required=True)
    atom = sub.add_parser("atomicity", help="check-then-use race")
    atom.add_argument("--fixed", action="store_true")
    atom.add_argument("--use-delay", type=float, default=2.0)
    atom.add_argument("--clear-delay", type=float, default=1.0)
    dead = sub.add_parser("deadlock", help="locks taken in opposite orders")
    dead.add_argument("--timeout", type=float, default=None)
    order = sub.add_parser("ordering", help="use before initialisation")
    order.add_argument("--fixed", action="store_true")
    order.add_argument("--delay", type=float, default=1.0)
    args = parser.parse_args(argv)

    try:
        if args.demo == "atomicity":
            atomicity(args.fixed, args.use_delay, args.clear_delay)
        elif args.demo == "deadlock":
            if not deadlock(args.timeout):
                return 1
        else:
            ordering(args.fixed, args.delay)
    except RuntimeError as exc:
        print(f"{args.demo}: {exc}", file=sys.stderr)
        return 1
    return 0