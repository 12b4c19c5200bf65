# osdemos

Small, runnable programs that show how an operating system behaves:
creating and waiting for processes, lottery scheduling, a stack kept in a
memory-mapped file, threads racing on shared data, locks, condition
variables, semaphores, the dining philosophers and a tiny UDP
client/server.

Each demonstration is a command you can run and a set of functions you
can call from Python. The package uses only the standard library. The
process demonstrations use `os.fork` and so need a POSIX system.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Commands

### `osdemos-processes`

Subcommands `p1` to `p5`:

- `p1`: fork; parent and child each print their pid.
- `p2`: fork; the child sleeps a second and the parent waits for it.
- `p3 [PATH]`: fork; the child runs `wc PATH` (default `Makefile`), the
  parent waits.
- `p4 [PATH] [--output FILE]`: fork; the child sends its standard output
  to `FILE` (default `./p4.output`) and runs `wc PATH`.
- `p5`: parent and child change separate copies of a variable.

`p3` and `p4` need a `wc` program on the `PATH`. If forking fails the
command prints `fork failed` and exits with status 1.

### `osdemos-intro`

- `cpu STRING [--count N] [--interval SECONDS]`: print `STRING`, then
  busy-wait; without `--count` it runs until interrupted.
- `io [PATH]`: write `hello world` to `PATH` (default `/tmp/file`) and
  `fsync` it.
- `mem VALUE [--count N] [--interval SECONDS]`: keep a value in a heap
  cell and print it as it is incremented; without `--count` it runs
  until interrupted.
- `va`: print identities of a code object, a 100 MB anonymous mapping and
  the current stack frame. These are Python object identities, not raw
  machine addresses.

### `osdemos-lottery SEED LOOPS`

Three jobs holding 50, 100 and 25 tickets; each round draws a winning
ticket from a seeded generator that yields the same sequence as the C
library's `random()`, and prints the list and the winner:

```
osdemos-lottery 1 10
```

With the wrong number of arguments it prints a usage line and exits 1.

### `osdemos-pstack [VALUE | pop]...`

A stack of ints kept in the file `ps.img` in the current directory. The
file must already exist; its size must be at least the size of a native
`size_t` and a multiple of the size of an int. Create an empty one with:

```
truncate -s 4096 ps.img
```

Then items persist between runs:

```
osdemos-pstack 7 13 47 pop
osdemos-pstack pop pop
```

Each `pop` prints the top item; popping an empty stack prints nothing and
pushes that do not fit are ignored.

### `osdemos-cas`

Shows one compare-and-swap that succeeds (0 to 100) and one that fails.

### `osdemos-udp`

- `server [--port PORT]`: answer every datagram with `goodbye world`
  (default port 10000); runs until interrupted.
- `client [--host HOST] [--port PORT] [--client-port PORT]`: send
  `hello world` from port 20000 to `localhost:10000` and print the reply.

Socket errors are printed and the command exits with status 1.

### `osdemos-threads`

- `t0`: two threads print `A` and `B`.
- `t1 LOOPCOUNT`: two threads race on an unprotected counter, printing
  the result and the expected value.
- `threads LOOPS`: the same race, reported as initial and final values.
- `create`: pass a pair of ints to a thread.
- `simple`: pass 100 to a thread that returns 101.
- `struct`: pass a pair in and get a pair back.

### `osdemos-threads-bugs`

- `atomicity [--fixed] [--use-delay S] [--clear-delay S]`: one thread
  checks and then uses a record that another thread clears. Without
  `--fixed` the use fails and the command exits 1.
- `deadlock [--timeout S]`: two threads take two locks in opposite order.
  Without `--timeout` it may hang; with it, a deadlock exits 1.
- `ordering [--fixed] [--delay S]`: a thread reads its own record before
  its creator has stored it. Without `--fixed` this fails and exits 1.

### `osdemos-threads-cv`

- `join [--delay S]`, `join-modular [--delay S]`: the parent waits on a
  condition variable for a child.
- `join-spin [--delay S]`: the parent busy-waits on a flag (default 5 s).
- `join-no-lock [--delay S] [--wait-delay S] [--timeout S]`: the child
  signals without the lock, so the signal is lost.
- `join-no-state-var [--wait-delay S] [--timeout S]`: the child signals
  before the parent waits and there is no flag to check.
- `pc BUFFERSIZE LOOPS CONSUMERS`, `pc-single BUFFERSIZE LOOPS CONSUMERS`:
  a bounded-buffer producer/consumer with two condition variables or
  with one. It prints nothing; with one condition variable and several
  consumers it can hang.

For the two broken joins, a `--timeout` that expires exits 1; without it
the parent can wait forever.

### `osdemos-dining NUM_LOOPS [--no-deadlock] [--print]`

Five philosophers eat `NUM_LOOPS` times each. Without `--no-deadlock` the
run can deadlock; `--print` shows every step, indented ten spaces per
philosopher.

### `osdemos-threads-sema`

- `binary [--loops N]`: two threads count under a semaphore used as a
  lock (default 10,000,000 each).
- `join [--delay S]`: the parent waits on a semaphore the child posts.
- `pc BUFFERSIZE LOOPS CONSUMERS`: a semaphore-based producer/consumer;
  each consumer prints its index and each value it takes. At most 10
  consumers.
- `rwlock READLOOPS WRITELOOPS`: a reader and a writer share a counter
  through a reader-writer lock.
- `throttle NUM_THREADS SEM_VALUE [--delay S]`: at most `SEM_VALUE`
  children run at once.

A buffer size below 1 or more than 10 consumers exits 1.

### `osdemos-zemaphore [DELAY]`

The parent waits on a `Zemaphore` that a child posts after `DELAY`
seconds (default 4).

## Using the library

```python
from osdemos.zemaphore import Zemaphore
from osdemos.cas import AtomicInt
from osdemos.lottery import run
from osdemos.pstack import PersistentStack
from osdemos.threads_cv import produce_consume

sem = Zemaphore(1)
sem.wait()
sem.post()

cell = AtomicInt(0)
cell.compare_and_swap(0, 100)   # True
cell.compare_and_swap(0, 200)   # False, value stays 100

lines = run(1, 10)              # the lottery report as a list of lines

with PersistentStack("ps.img") as stack:   # the file must already exist
    stack.push(7)
    stack.push(13)
    print(stack.pop(), len(stack))

print(produce_consume(4, 10, consumers=2))  # values taken by each consumer
```

The modules and what they offer:

- `osdemos.timing`: `get_time`, `spin`.
- `osdemos.zemaphore`: `Zemaphore`, `demo`.
- `osdemos.lottery`: `GlibcRandom`, `Lottery`, `run`.
- `osdemos.pstack`: `PersistentStack`, `run`.
- `osdemos.cas`: `AtomicInt`.
- `osdemos.processes`: `fork_hello`, `fork_and_wait`, `fork_and_exec`,
  `fork_redirect`, `fork_copy`.
- `osdemos.intro`: `repeat_print`, `write_hello`, `memory_counter`,
  `address_layout`.
- `osdemos.udp`: `udp_open`, `fill_sock_addr`, `udp_write`, `udp_read`,
  `run_client`, `serve`.
- `osdemos.threads_basic`: `ThreadResult`, `print_letters`, `count_race`,
  `thread_args`, `thread_simple_return`, `thread_struct_return`.
- `osdemos.threads_bugs`: `PRThread`, `atomicity`, `deadlock`, `ordering`.
- `osdemos.threads_cv`: `Synchronizer`, `BoundedBuffer`, `join_cv`,
  `join_spin`, `produce_consume`.
- `osdemos.dining`: `Table`, `left`, `right`, `dine`.
- `osdemos.threads_sema`: `RWLock`, `SemaphoreBuffer`, `binary_counter`,
  `sema_join`, `produce_consume`, `rwlock_demo`, `throttle`.

Every module also has a `main(argv=None)` that the matching command runs.