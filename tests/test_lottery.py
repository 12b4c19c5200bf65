import re

import pytest

from osdemos.lottery import GlibcRandom, Lottery, main, run


def test_glibc_random_seed_one_sequence():
    rng = GlibcRandom(1)
    assert rng.random() == 1804289383
    assert rng.random() == 846930886


def test_glibc_random_zero_seed_same_as_one():
    a = GlibcRandom(0)
    b = GlibcRandom(1)
    assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]


def test_glibc_random_deterministic_and_in_range():
    a = GlibcRandom(12345)
    b = GlibcRandom(12345)
    values = [a.random() for _ in range(200)]
    assert values == [b.random() for _ in range(200)]
    assert all(0 <= v < 2**31 for v in values)


def test_glibc_random_seeds_differ():
    a = GlibcRandom(3)
    b = GlibcRandom(4)
    assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]


def _sample():
    lottery = Lottery()
    for tickets in (50, 100, 25):
        lottery.insert(tickets)
    return lottery


def test_insert_prepends_and_totals():
    lottery = _sample()
    assert lottery.format_list() == "List: [25] [100] [50] "
    assert lottery.tickets() == 25 + 100 + 50


@pytest.mark.parametrize(
    "winner, expected",
    [(0, 25), (24, 25), (25, 100), (124, 100), (125, 50), (174, 50)],
)
def test_pick_boundaries(winner, expected):
    assert _sample().pick(winner) == expected


def test_pick_out_of_range():
    with pytest.raises(ValueError):
        _sample().pick(175)


def test_empty_list_format():
    assert Lottery().format_list() == "List: "


def test_run_without_loops():
    assert run(1, 0) == ["List: [25] [100] [50] "]


def test_run_report_consistent():
    lines = run(7, 10)
    assert len(lines) == 1 + 3 * 10
    lottery = _sample()
    for i in range(10):
        listing, winner_line, blank = lines[1 + 3 * i : 4 + 3 * i]
        assert listing == "List: [25] [100] [50] "
        assert blank == ""
        match = re.fullmatch(r"winner: (\d+) (\d+)", winner_line)
        assert match
        winner, job = int(match.group(1)), int(match.group(2))
        assert 0 <= winner < 175
        assert lottery.pick(winner) == job


def test_run_uses_generator():
    rng = GlibcRandom(1)
    first = rng.random() % 175
    assert run(1, 1)[2].startswith(f"winner: {first} ")


def test_main_usage(capsys):
    assert main(["1"]) == 1
    assert "usage: lottery <seed> <loops>" in capsys.readouterr().err


def test_main_prints(capsys):
    assert main(["2", "3"]) == 0
    assert capsys.readouterr().out.splitlines() == run(2, 3)