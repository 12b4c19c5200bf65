import os

import pytest

from osdemos.processes import (
    fork_and_exec,
    fork_and_wait,
    fork_copy,
    fork_hello,
    fork_redirect,
    main,
)


@pytest.fixture
def log(tmp_path):
    path = tmp_path / "out.txt"
    with open(path, "a", encoding="utf-8") as handle:
        yield handle, path


def _lines(path):
    return path.read_text(encoding="utf-8").splitlines()


def test_fork_hello_reports_both_processes(log):
    out, path = log
    pid = fork_hello(out)
    _, status = os.waitpid(pid, 0)
    me = os.getpid()
    lines = _lines(path)
    assert lines[0] == f"hello world (pid:{me})"
    assert sorted(lines[1:]) == sorted(
        [
            f"hello, I am parent of {pid} (pid:{me})",
            f"hello, I am child (pid:{pid})",
        ]
    )
    assert os.waitstatus_to_exitcode(status) == 0


def test_fork_copy_keeps_separate_values(log):
    out, path = log
    pid = fork_copy(out)
    _, status = os.waitpid(pid, 0)
    me = os.getpid()
    lines = _lines(path)
    assert lines[0] == f"hello world (pid:{me})"
    assert [line for line in lines if line.startswith("hello, x")] == [
        f"hello, x is 100 (pid:{pid})",
        f"hello, x is 101 (pid:{pid})",
    ]
    assert [line for line in lines if line.startswith("parent,")] == [
        f"parent, x is 100 (pid:{me})",
        f"parent, x is 99 (pid:{me})",
    ]
    assert os.waitstatus_to_exitcode(status) == 0


def test_fork_and_wait_orders_output(log):
    out, path = log
    rc, wc = fork_and_wait(out)
    me = os.getpid()
    assert rc == wc
    assert _lines(path) == [
        f"hello world (pid:{me})",
        f"hello, I am child (pid:{rc})",
        f"hello, I am parent of {rc} (wc:{wc}) (pid:{me})",
    ]


def test_fork_and_exec_runs_word_count(log, tmp_path):
    out, path = log
    target = tmp_path / "words.txt"
    content = "one two\nthree\n"
    target.write_text(content, encoding="utf-8")
    rc, wc = fork_and_exec(str(target), out)
    me = os.getpid()
    lines = _lines(path)
    assert rc == wc
    assert lines[0] == f"hello world (pid:{me})"
    assert lines[1] == f"hello, I am child (pid:{rc})"
    assert lines[-1] == f"hello, I am parent of {rc} (wc:{wc}) (pid:{me})"
    tokens = lines[2].split()
    assert tokens[-1] == str(target)
    assert int(tokens[0]) == len(content.splitlines())
    assert "this shouldn't print out" not in lines


def test_fork_redirect_writes_to_output_file(tmp_path):
    target = tmp_path / "data.txt"
    target.write_text("alpha beta\n", encoding="utf-8")
    output = tmp_path / "p4.output"
    wc = fork_redirect(str(output), str(target))
    assert wc > 0
    tokens = output.read_text(encoding="utf-8").split()
    assert tokens[-1] == str(target)


def test_fork_redirect_truncates_output(tmp_path):
    output = tmp_path / "p4.output"
    output.write_text("stale contents that must vanish\n", encoding="utf-8")
    missing = tmp_path / "missing.txt"
    wc = fork_redirect(str(output), str(missing))
    assert wc > 0
    assert output.read_text(encoding="utf-8") == ""


def test_main_rejects_unknown_demo():
    with pytest.raises(SystemExit):
        main(["p9"])