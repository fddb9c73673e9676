import threading

import pytest

from menuconsole.context import Cancelled, Context, DeadlineExceeded


def test_first_cancel_wins():
    ctx, cancel = Context.with_cancel()
    assert not ctx.done()
    assert ctx.cause is None

    assert cancel(ValueError("first")) is True
    assert cancel(KeyError("second")) is False
    assert ctx.done()
    assert isinstance(ctx.cause, ValueError)


def test_cancel_without_cause_records_cancelled():
    ctx, cancel = Context.with_cancel()
    cancel()
    assert isinstance(ctx.cause, Cancelled)
    with pytest.raises(Cancelled):
        ctx.raise_if_cancelled()


def test_parent_cancels_children():
    parent, cancel = Context.with_cancel()
    child = Context(parent)
    grandchild = Context(child)

    cancel(RuntimeError("stop"))
    assert child.done() and grandchild.done()
    assert isinstance(grandchild.cause, RuntimeError)


def test_child_of_done_parent_starts_done():
    parent, cancel = Context.with_cancel()
    cancel()
    assert Context(parent).done()


def test_child_cancel_leaves_parent_alone():
    parent = Context.background()
    child, cancel = Context.with_cancel(parent)
    cancel()
    assert child.done()
    assert not parent.done()


def test_finished_children_detach_from_parent():
    parent = Context.background()
    children = [Context(parent) for _ in range(5)]
    assert len(parent._children) == 5

    for child in children:
        child.cancel()
    assert parent._children == []
    assert not parent.done()

    expired, _ = Context.with_timeout(0, parent)
    assert expired.done()
    assert parent._children == []


def test_done_callbacks_run_once():
    ctx, cancel = Context.with_cancel()
    calls = []
    ctx.add_done_callback(calls.append)
    cancel()
    cancel()
    assert calls == [ctx]

    # registered after the fact: called immediately
    ctx.add_done_callback(calls.append)
    assert calls == [ctx, ctx]


def test_deadline_expires():
    ctx, _ = Context.with_timeout(0.05)
    assert ctx.remaining() is not None
    assert ctx.wait(2) is True
    assert isinstance(ctx.cause, DeadlineExceeded)


def test_child_inherits_earlier_deadline():
    parent, _ = Context.with_timeout(0.05)
    child, _ = Context.with_timeout(30, parent)
    assert child.deadline == parent.deadline


def test_wait_wakes_on_cancel_from_another_thread():
    ctx, cancel = Context.with_cancel()
    timer = threading.Timer(0.05, cancel)
    timer.start()
    try:
        assert ctx.wait(2) is True
    finally:
        timer.cancel()


def test_wait_times_out_while_live():
    ctx = Context.background()
    assert ctx.wait(0.01) is False
