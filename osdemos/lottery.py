"""Lottery scheduling over a list of jobs holding tickets."""

import sys
from collections import deque

__all__ = ["GlibcRandom", "Lottery", "run", "main"]

_MODULUS = 2147483647


def _to_int32(value):
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _trunc_div(a, b):
    q = abs(a) // b
    return -q if a < 0 else q


class GlibcRandom:
    """The additive feedback generator behind the C library's random()."""

    def __init__(self, seed):
        seed &= 0xFFFFFFFF
        if seed == 0:
            seed = 1
        word = _to_int32(seed)
        table = [word]
        for _ in range(30):
            hi = _trunc_div(word, 127773)
            lo = word - hi * 127773
            word = 16807 * lo - 2836 * hi
            if word < 0:
                word += _MODULUS
            table.append(word)
        table.extend(table[:3])
        self._state = deque((v & 0xFFFFFFFF for v in table[3:]), maxlen=31)
        for _ in range(310):
            self._advance()

    def _advance(self):
        value = (self._state[0] + self._state[-3]) & 0xFFFFFFFF
        self._state.append(value)
        return value

    def random(self):
        """Return the next value in the range [0, 2**31)."""
        return self._advance() >> 1


class Lottery:
    """Jobs kept newest first, each with a number of tickets."""

    def __init__(self):
        self._jobs = []

    def insert(self, tickets):
        """Add a job at the head of the list."""
        self._jobs.insert(0, tickets)

    def tickets(self):
        """Total number of tickets held by all jobs."""
        return sum(self._jobs)

    def pick(self, winner):
        """Return the ticket count of the job holding ticket ``winner``."""
        counter = 0
        for job in self._jobs:
            counter += job
            if counter > winner:
                return job
        raise ValueError(f"no job holds ticket {winner}")

    def format_list(self):
        return "List: " + "".join(f"[{job}] " for job in self._jobs)


def run(seed, loops):
    """Hold ``loops`` lotteries and return the lines of the report."""
    rng = GlibcRandom(seed)
    lottery = Lottery()
    for tickets in (50, 100, 25):
        lottery.insert(tickets)
    lines = [lottery.format_list()]
    total = lottery.tickets()
    for _ in range(loops):
        winner = rng.random() % total
        job = lottery.pick(winner)
        lines.append(lottery.format_list())
        lines.append(f"winner: {winner} {job}")
        lines.append("")
    return lines


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print("usage: lottery <seed> <loops>", file=sys.stderr)
        return 1
    try:
        seed, loops = int(args[0]), int(args[1])
    except ValueError:
        print("usage: lottery <seed> <loops>", file=sys.stderr)
        return 1
    print("\n".join(run(seed, loops)))
    return 0