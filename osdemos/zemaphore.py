"""A counting semaphore built from a lock and a condition variable."""

import argparse
import threading
import time

__all__ = ["Zemaphore", "demo", "main"]


class Zemaphore:
    """Counting semaphore: ``wait`` blocks while the value is not positive."""

    def __init__(self, value=0):
        self.value = value
        self._cond = threading.Condition(threading.Lock())

    def wait(self):
        """Block until the value is positive, then decrement it."""
        with self._cond:
            while self.value <= 0:
                self._cond.wait()
            self.value -= 1

    def post(self):
        """Increment the value and wake one waiter."""
        with self._cond:
            self.value += 1
            self._cond.notify()


def demo(delay=4):
    """Parent waits on a semaphore posted by a child thread after ``delay``.

    Returns the messages in the order they were produced.
    """
    events = []
    record_lock = threading.Lock()

    def record(message):
        with record_lock:
            events.append(message)

    sem = Zemaphore(0)

    def child():
        time.sleep(delay)
        record("child")
        sem.post()

    record("parent: begin")
    worker = threading.Thread(target=child)
    worker.start()
    sem.wait()
    record("parent: end")
    worker.join()
    return events


def main(argv=None):
    parser = argparse.ArgumentParser(prog="zemaphore")
    parser.add_argument("delay", nargs="?", type=float, default=4.0)
    args = parser.parse_args(argv)
    for line in demo(args.delay):
        print(line)
    return 0