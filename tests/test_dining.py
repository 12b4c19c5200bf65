import io
import threading

import pytest

from osdemos.dining import PHILOSOPHERS, Table, dine, left, right, main


@pytest.mark.parametrize("p", range(PHILOSOPHERS))
def test_left_and_right_are_neighbours(p):
    assert left(p) == p
    assert right(p) == left((p + 1) % PHILOSOPHERS)


def test_right_of_last_wraps_to_zero():
    assert right(PHILOSOPHERS - 1) == 0


def test_deadlock_table_tries_left_first():
    out = io.StringIO()
    table = Table(False, out)
    table.get_forks(0)
    assert table.lines == ["0: try 0", "0: try 1"]
    assert out.getvalue().splitlines() == table.lines


def test_ordered_table_last_philosopher_tries_right_first():
    table = Table(True, io.StringIO())
    table.get_forks(4)
    assert table.lines == [" " * 40 + "4 try 0", " " * 40 + "4 try 4"]


def test_ordered_table_other_philosopher_message():
    table = Table(True, io.StringIO())
    table.get_forks(2)
    assert table.lines == [" " * 20 + "try 2", " " * 20 + "try 3"]


def test_silent_table_keeps_no_lines():
    table = Table(True)
    table.get_forks(1)
    table.put_forks(1)
    assert table.lines == []


def test_neighbour_waits_until_forks_are_put_down():
    table = Table(True)
    table.get_forks(0)
    neighbour = threading.Thread(target=table.get_forks, args=(1,), daemon=True)
    neighbour.start()
    neighbour.join(0.1)
    assert neighbour.is_alive()
    table.put_forks(0)
    neighbour.join(2)
    assert not neighbour.is_alive()


def test_quiet_dinner_prints_only_header_and_footer():
    out = io.StringIO()
    lines = dine(20, True, False, out)
    assert lines == ["dining: started", "dining: finished"]
    assert out.getvalue().splitlines() == lines


def test_zero_loops_cannot_deadlock():
    lines = dine(0, False, True, io.StringIO())
    assert lines[0] == "dining: started"
    assert lines[-1] == "dining: finished"
    assert sorted(line.strip() for line in lines[1:-1]) == [f"{p}: start" for p in range(PHILOSOPHERS)]


def test_verbose_dinner_follows_each_philosophers_steps():
    loops = 2
    lines = dine(loops, True, True, io.StringIO())
    body = lines[1:-1]
    for p in range(PHILOSOPHERS):
        pad = " " * (p * 10)
        mine = [line[len(pad):] for line in body if line.startswith(pad) and line[len(pad)] != " "]
        first, second = (right(p), left(p)) if p == PHILOSOPHERS - 1 else (left(p), right(p))
        prefix = f"{p} " if p == PHILOSOPHERS - 1 else ""
        meal = [
            f"{p}: think",
            f"{prefix}try {first}",
            f"{prefix}try {second}",
            f"{p}: eat",
            f"{p}: done",
        ]
        assert mine == [f"{p}: start"] + meal * loops


def test_main_runs_ordered_dinner(capsys):
    assert main(["3", "--no-deadlock"]) == 0
    assert capsys.readouterr().out.splitlines() == ["dining: started", "dining: finished"]


def test_main_requires_loop_count():
    with pytest.raises(SystemExit):
        main([])