"""Process creation demos: fork, wait, exec and output redirection."""

import argparse
import os
import sys
import traceback

__all__ = [
    "fork_hello",
    "fork_and_wait",
    "fork_and_exec",
    "fork_redirect",
    "fork_copy",
    "main",
]


def _emit(out, text):
    out.write(text + "\n")
    out.flush()


def _fork(out):
    """Flush pending output so it is not duplicated, then fork."""
    out.flush()
    sys.stdout.flush()
    sys.stderr.flush()
    return os.fork()


def _run_child(action):
    """Run ``action`` in the child and leave the process without unwinding."""
    code = 0
    try:
        code = action() or 0
    except BaseException:
        traceback.print_exc()
        code = 1
    os._exit(code)


def _redirect_stdout(out):
    """Point file descriptor 1 at ``out`` when it is backed by a real file."""
    try:
        fd = out.fileno()
    except (AttributeError, OSError, ValueError):
        return
    if fd != 1:
        os.dup2(fd, 1)


def _exec_wc(path):
    os.execvp("wc", ["wc", path])


def fork_hello(out=None):
    """Fork once; both processes report themselves.

    In the parent the child's pid is returned and the child is not reaped;
    the child exits without returning.
    """
    out = sys.stdout if out is None else out
    _emit(out, f"hello world (pid:{os.getpid()})")
    rc = _fork(out)
    if rc == 0:
        _run_child(lambda: _emit(out, f"hello, I am child (pid:{os.getpid()})"))
    _emit(out, f"hello, I am parent of {rc} (pid:{os.getpid()})")
    return rc


def fork_and_wait(out=None):
    """Fork, let the child sleep a second, and wait for it in the parent.

    Returns ``(child_pid, reaped_pid)``.
    """
    out = sys.stdout if out is None else out
    _emit(out, f"hello world (pid:{os.getpid()})")
    rc = _fork(out)
    if rc == 0:
        def child():
            _emit(out, f"hello, I am child (pid:{os.getpid()})")
            import time

            time.sleep(1)

        _run_child(child)
    wc, _ = os.waitpid(rc, 0)
    _emit(out, f"hello, I am parent of {rc} (wc:{wc}) (pid:{os.getpid()})")
    return rc, wc


def fork_and_exec(path="Makefile", out=None):
    """Fork; the child runs ``wc`` on ``path`` and the parent waits.

    The child's standard output is sent to ``out`` when ``out`` has a file
    descriptor. Returns ``(child_pid, reaped_pid)``.
    """
    out = sys.stdout if out is None else out
    _emit(out, f"hello world (pid:{os.getpid()})")
    rc = _fork(out)
    if rc == 0:
        def child():
            _emit(out, f"hello, I am child (pid:{os.getpid()})")
            _redirect_stdout(out)
            try:
                _exec_wc(path)
            except OSError:
                pass
            _emit(out, "this shouldn't print out")
            return 1

        _run_child(child)
    wc, _ = os.waitpid(rc, 0)
    _emit(out, f"hello, I am parent of {rc} (wc:{wc}) (pid:{os.getpid()})")
    return rc, wc


def fork_redirect(output="./p4.output", path="Makefile"):
    """Fork; the child sends its standard output to ``output`` and runs ``wc``.

    Returns the pid reaped by the parent.
    """
    rc = _fork(sys.stdout)
    if rc == 0:
        def child():
            fd = os.open(output, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o700)
            if fd != 1:
                os.dup2(fd, 1)
                os.close(fd)
            try:
                _exec_wc(path)
            except OSError:
                pass
            return 1

        _run_child(child)
    wc, _ = os.waitpid(rc, 0)
    if wc < 0:
        raise ChildProcessError(f"wait returned {wc}")
    return wc


def fork_copy(out=None):
    """Show that parent and child change separate copies of a variable.

    In the parent the child's pid is returned and the child is not reaped.
    """
    out = sys.stdout if out is None else out
    _emit(out, f"hello world (pid:{os.getpid()})")
    x = 100
    rc = _fork(out)
    if rc == 0:
        def child():
            value = x
            _emit(out, f"hello, x is {value} (pid:{os.getpid()})")
            value += 1
            _emit(out, f"hello, x is {value} (pid:{os.getpid()})")

        _run_child(child)
    _emit(out, f"parent, x is {x} (pid:{os.getpid()})")
    x -= 1
    _emit(out, f"parent, x is {x} (pid:{os.getpid()})")
    return rc


def main(argv=None):
    parser = argparse.ArgumentParser(prog="processes")
    sub = parser.add_subparsers(dest="demo", required=True)
    sub.add_parser("p1", help="fork and report")
    sub.add_parser("p2", help="fork and wait")
    p3 = sub.add_parser("p3", help="fork and exec wc")
    p3.add_argument("path", nargs="?", default="Makefile")
    p4 = sub.add_parser("p4", help="fork, redirect and exec wc")
    p4.add_argument("path", nargs="?", default="Makefile")
    p4.add_argument("--output", default="./p4.output")
    sub.add_parser("p5", help="fork and change a copied variable")
    args = parser.parse_args(argv)

    try:
        if args.demo == "p1":
            fork_hello()
        elif args.demo == "p2":
            fork_and_wait()
        elif args.demo == "p3":
            fork_and_exec(args.path)
        elif args.demo == "p4":
            fork_redirect(args.output, args.path)
        else:
            fork_copy()
    except OSError:
        print("fork failed", file=sys.stderr)
        return 1
    return 0