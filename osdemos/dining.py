"""Dining philosophers with semaphores, with and without deadlock avoidance."""

import argparse
import sys
import threading

__all__ = ["PHILOSOPHERS", "Table", "left", "right", "dine", "main"]

PHILOSOPHERS = 5


def left(p):
    """Fork on philosopher ``p``'s left."""
    return p % PHILOSOPHERS


def right(p):
    """Fork on philosopher ``p``'s right."""
    return (p + 1) % PHILOSOPHERS


class Table:
    """Five forks, each a binary semaphore.

    With ``avoid_deadlock`` the last philosopher picks up the right fork
    first, which breaks the circular wait. When ``out`` is given, each step
    is written there, indented ten spaces per philosopher, and kept in
    ``lines``.
    """

    def __init__(self, avoid_deadlock=False, out=None):
        self.avoid_deadlock = avoid_deadlock
        self._forks = [threading.Semaphore(1) for _ in range(PHILOSOPHERS)]
        self._print_lock = threading.Semaphore(1)
        self._out = out
        self.lines = []

    def _say(self, p, text):
        if self._out is None:
            return
        with self._print_lock:
            line = " " * (p * 10) + text
            self.lines.append(line)
            self._out.write(line + "\n")
            self._out.flush()

    def _try_message(self, p, fork):
        if not self.avoid_deadlock:
            return f"{p}: try {fork}"
        if p == PHILOSOPHERS - 1:
            return f"{p} try {fork}"
        return f"try {fork}"

    def get_forks(self, p):
        """Pick up both of philosopher ``p``'s forks, waiting as needed."""
        if self.avoid_deadlock and p == PHILOSOPHERS - 1:
            order = (right(p), left(p))
        else:
            order = (left(p), right(p))
        for fork in order:
            self._say(p, self._try_message(p, fork))
            self._forks[fork].acquire()

    def put_forks(self, p):
        """Put down both of philosopher ``p``'s forks."""
        self._forks[left(p)].release()
        self._forks[right(p)].release()

    def _philosopher(self, p, num_loops):
        self._say(p, f"{p}: start")
        for _ in range(num_loops):
            self._say(p, f"{p}: think")
            self.get_forks(p)
            self._say(p, f"{p}: eat")
            self.put_forks(p)
            self._say(p, f"{p}: done")


def dine(num_loops, avoid_deadlock=False, verbose=False, out=None):
    """Run five philosophers for ``num_loops`` meals each.

    Without ``avoid_deadlock`` this may never return. Returns the lines
    written, in order.
    """
    out = sys.stdout if out is None else out
    out.write("dining: started\n")
    out.flush()
    table = Table(avoid_deadlock, out if verbose else None)
    threads = [
        threading.Thread(target=table._philosopher, args=(p, num_loops))
        for p in range(PHILOSOPHERS)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    out.write("dining: finished\n")
    out.flush()
    return ["dining: started", *table.lines, "dining: finished"]


def main(argv=None):
    parser = argparse.ArgumentParser(prog="dining_philosophers")
    parser.add_argument("num_loops", type=int)
    parser.add_argument("--no-deadlock", action="store_true", help="order the last philosopher's forks")
    parser.add_argument("--print", dest="verbose", action="store_true", help="show every step")
    args = parser.parse_args(argv)
    dine(args.num_loops, args.no_deadlock, args.verbose)
    return 0