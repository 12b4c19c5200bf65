import threading
import time

import pytest

from osdemos.zemaphore import Zemaphore, demo, main


def test_wait_decrements_positive_value():
    sem = Zemaphore(2)
    sem.wait()
    assert sem.value == 1
    sem.wait()
    assert sem.value == 0


def test_post_increments_value():
    sem = Zemaphore(0)
    sem.post()
    sem.post()
    assert sem.value == 2


def test_wait_blocks_until_post():
    sem = Zemaphore(0)
    finished = threading.Event()

    def waiter():
        sem.wait()
        finished.set()

    thread = threading.Thread(target=waiter)
    thread.start()
    assert not finished.wait(0.1)
    sem.post()
    assert finished.wait(2)
    thread.join()
    assert sem.value == 0


def test_limits_concurrency():
    sem = Zemaphore(2)
    active = 0
    peak = 0
    guard = threading.Lock()

    def worker():
        nonlocal active, peak
        sem.wait()
        with guard:
            active += 1
            peak = max(peak, active)
        time.sleep(0.02)
        with guard:
            active -= 1
        sem.post()

    threads = [threading.Thread(target=worker) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert 1 <= peak <= 2
    assert sem.value == 2


def test_demo_order():
    assert demo(0.01) == ["parent: begin", "child", "parent: end"]


def test_main_prints(capsys):
    assert main(["0.01"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "parent: begin",
        "child",
        "parent: end",
    ]


def test_main_rejects_bad_delay():
    with pytest.raises(SystemExit):
        main(["soon"])