import io
import threading

import pytest

from osdemos.threads_cv import (
    END_MARKER,
    BoundedBuffer,
    Synchronizer,
    join_cv,
    join_spin,
    main,
    produce_consume,
)


def test_synchronizer_signal_then_wait_resets():
    sync = Synchronizer()
    sync.signal()
    assert sync.done is True
    sync.wait()
    assert sync.done is False


def test_synchronizer_wait_wakes_on_signal_from_thread():
    sync = Synchronizer()
    timer = threading.Timer(0.05, sync.signal)
    timer.start()
    sync.wait()
    timer.join()
    assert sync.done is False


def test_bounded_buffer_is_fifo_and_wraps():
    buffer = BoundedBuffer(2)
    buffer.put(1)
    buffer.put(2)
    assert buffer.get() == 1
    buffer.put(3)
    assert len(buffer) == 2
    assert [buffer.get(), buffer.get()] == [2, 3]
    assert len(buffer) == 0


@pytest.mark.parametrize("size", [0, -3])
def test_bounded_buffer_rejects_bad_size(size):
    with pytest.raises(ValueError):
        BoundedBuffer(size)


@pytest.mark.parametrize("single_cv", [False, True])
def test_bounded_buffer_get_blocks_until_put(single_cv):
    buffer = BoundedBuffer(1, single_cv)
    got = []
    reader = threading.Thread(target=lambda: got.append(buffer.get()), daemon=True)
    reader.start()
    reader.join(0.05)
    assert reader.is_alive()
    buffer.put(7)
    reader.join(2)
    assert got == [7]


def test_join_cv_order():
    out = io.StringIO()
    lines = join_cv(0.01, out)
    assert lines == ["parent: begin", "child", "parent: end"]
    assert out.getvalue().splitlines() == lines


def test_join_spin_order():
    lines = join_spin(0.01, io.StringIO())
    assert lines == ["parent: begin", "child", "parent: end"]


@pytest.mark.parametrize(
    "size, loops, consumers, single_cv",
    [(1, 20, 1, False), (3, 50, 4, False), (2, 30, 1, True)],
)
def test_produce_consume_delivers_every_value_once(size, loops, consumers, single_cv):
    received = produce_consume(size, loops, consumers, single_cv)
    assert len(received) == consumers
    flat = sorted(v for taken in received for v in taken)
    assert flat == list(range(loops))
    assert END_MARKER not in flat
    for taken in received:
        assert taken == sorted(taken)


def test_main_pc_rejects_zero_buffer():
    assert main(["pc", "0", "5", "1"]) == 1


def test_main_join_prints(capsys):
    assert main(["join", "--delay", "0"]) == 0
    assert capsys.readouterr().out.splitlines() == ["parent: begin", "child", "parent: end"]


def test_main_join_no_lock_loses_signal(capsys):
    code = main(
        ["join-no-lock", "--delay", "0.05", "--wait-delay", "0.3", "--timeout", "0.1"]
    )
    lines = capsys.readouterr().out.splitlines()
    assert code == 1
    assert "child: signal" in lines
    assert "parent: wait to be signalled..." in lines
    assert "parent: end" not in lines


def test_main_join_no_state_var_misses_signal(capsys):
    code = main(["join-no-state-var", "--wait-delay", "0.3", "--timeout", "0.1"])
    lines = capsys.readouterr().out.splitlines()
    assert code == 1
    assert lines.index("child: signal") < lines.index("parent: wait to be signalled...")
    assert "parent: end" not in lines