"""Tests for the drag-reorder state machine and intent dispatch."""
import asyncio

import pytest

from bookmark_launcher import drag
from bookmark_launcher.drag import (
    AFTER, BEFORE, DragPhase, DragReorderController, DragSession, ReorderDispatcher, ReorderIntent,
)
from bookmark_launcher.ordering import array_move, assign_sort_orders

ORDER = ("A", "B", "C", "D")


@pytest.fixture
def emitted():
    return []


@pytest.fixture
def ctl(emitted):
    return DragReorderController("c1", ORDER, on_reorder=emitted.append)


def test_array_move_front_to_index_two():
    assert array_move(["A", "B", "C", "D"], 0, 2) == ["B", "C", "A", "D"]


def test_array_move_back_to_front():
    assert array_move(["A", "B", "C", "D"], 3, 0) == ["D", "A", "B", "C"]


def test_assign_sort_orders_is_dense():
    assert assign_sort_orders(["B", "C", "A", "D"]) == {"B": 0, "C": 1, "A": 2, "D": 3}
    assert assign_sort_orders([]) == {}


def test_assign_sort_orders_rejects_duplicates():
    with pytest.raises(ValueError):
        assign_sort_orders(["A", "B", "A"])


def test_drop_moves_and_emits(ctl, emitted):
    assert ctl.start("A")
    assert ctl.phase is DragPhase.DRAGGING
    ctl.over("C")
    intent = ctl.drop()

    assert intent == ReorderIntent("c1", ("B", "C", "A", "D"))
    assert emitted == [intent]
    assert ctl.order == ("B", "C", "A", "D")
    assert ctl.phase is DragPhase.IDLE
    assert ctl.active_id is None and ctl.over_id is None


def test_sort_orders_dense_and_increasing_after_drop(ctl):
    ctl.start("D")
    ctl.over("B")
    intent = ctl.drop()
    orders = intent.sort_orders
    assert sorted(orders.values()) == list(range(len(ORDER)))
    assert [orders[i] for i in intent.ordered_ids] == [0, 1, 2, 3]
    assert intent.ordered_ids == ("A", "D", "B", "C")


def test_drop_onto_itself_is_noop(ctl, emitted):
    before = ctl.order
    ctl.start("B")
    ctl.over("B")
    assert ctl.drop() is None
    assert ctl.order is before
    assert emitted == []
    assert ctl.phase is DragPhase.IDLE


def test_drop_without_hover_is_noop(ctl, emitted):
    ctl.start("B")
    ctl.over("C")
    ctl.over(None)
    assert ctl.drop() is None
    assert ctl.order == ORDER
    assert emitted == []


def test_cancel_emits_nothing(ctl, emitted):
    ctl.start("A")
    ctl.over("D")
    ctl.cancel()
    assert ctl.phase is DragPhase.IDLE
    assert ctl.drop() is None
    assert ctl.order == ORDER
    assert emitted == []


def test_second_start_is_rejected(ctl):
    assert ctl.start("A")
    assert not ctl.start("B")
    assert ctl.active_id == "A"


def test_stale_ids_are_a_noop(ctl, emitted):
    ctl.start("A")
    ctl.over("C")
    ctl.replace_order(("A", "B", "D"))
    assert ctl.drop() is None
    assert ctl.order == ("A", "B", "D")
    assert emitted == []


def test_snapshot_without_active_cancels_drag(ctl):
    ctl.start("A")
    ctl.replace_order(("B", "C", "D"))
    assert ctl.phase is DragPhase.IDLE


def test_snapshot_replaces_optimistic_order(ctl):
    ctl.start("A")
    ctl.over("B")
    ctl.drop()
    assert ctl.order == ("B", "A", "C", "D")
    ctl.replace_order(["D", "C", "B", "A"])
    assert ctl.order == ("D", "C", "B", "A")


def test_phase_is_dropping_while_intent_is_emitted():
    seen = []

    def on_reorder(intent):
        seen.append(ctl.phase)
        seen.append(ctl.start("B"))

    ctl = DragReorderController("c1", ORDER, on_reorder=on_reorder)
    ctl.start("A")
    ctl.over("C")
    ctl.drop()
    assert seen == [DragPhase.DROPPING, False]
    assert ctl.phase is DragPhase.IDLE


def test_drop_position_hints(ctl):
    assert ctl.drop_position("C") is None
    ctl.start("A")
    ctl.over("C")
    assert ctl.drop_position("C") == AFTER
    assert ctl.drop_position("A") is None
    assert ctl.drop_position("B") is None

    ctl.cancel()
    ctl.start("D")
    ctl.over("B")
    assert ctl.drop_position("B") == BEFORE
    assert ctl.drop_position("D") is None


def test_pure_transitions_ignore_wrong_phase():
    idle = DragSession()
    assert drag.over(idle, "A").session is idle
    assert drag.drop(idle, "c1", ORDER) == (idle, None)
    dragging = drag.start(idle, "A").session
    assert drag.start(dragging, "B").session is dragging
    assert drag.cancel(dragging).session == idle


def test_for_category(dev_category):
    ctl = DragReorderController.for_category(dev_category)
    assert ctl.category_id == dev_category.id
    assert list(ctl.order) == dev_category.bookmark_ids


def intent(cat, *ids):
    return ReorderIntent(cat, tuple(ids))


def test_dispatcher_coalesces_while_in_flight():
    async def scenario():
        gate = asyncio.Event()
        calls = []

        async def persist(i):
            calls.append(i.ordered_ids)
            await gate.wait()

        d = ReorderDispatcher(persist)
        d.submit(intent("c1", "A", "B"))
        await asyncio.sleep(0)
        d.submit(intent("c1", "B", "A"))
        d.submit(intent("c1", "A", "B", "C"))
        assert d.in_flight("c1")
        gate.set()
        await d.join()
        assert not d.in_flight("c1")
        return calls

    assert asyncio.run(scenario()) == [("A", "B"), ("A", "B", "C")]


def test_dispatcher_categories_are_independent():
    async def scenario():
        calls = []

        async def persist(i):
            calls.append(i.category_id)

        d = ReorderDispatcher(persist)
        d(intent("c1", "A"))
        d(intent("c2", "X"))
        await d.join()
        return calls

    assert sorted(asyncio.run(scenario())) == ["c1", "c2"]


def test_dispatcher_reports_failures_and_keeps_going():
    async def scenario():
        failures = []
        calls = []

        async def persist(i):
            calls.append(i.ordered_ids)
            if i.ordered_ids == ("bad",):
                raise RuntimeError("backend down")

        d = ReorderDispatcher(persist, on_error=lambda i, e: failures.append((i.ordered_ids, str(e))))
        d.submit(intent("c1", "bad"))
        await d.join()
        d.submit(intent("c1", "good"))
        await d.join()
        return calls, failures

    calls, failures = asyncio.run(scenario())
    assert calls == [("bad",), ("good",)]
    assert failures == [(("bad",), "backend down")]


def test_dispatcher_without_error_handler_raises():
    async def scenario():
        async def persist(i):
            raise RuntimeError("backend down")

        d = ReorderDispatcher(persist)
        d.submit(intent("c1", "A"))
        await d.join()

    with pytest.raises(RuntimeError):
        asyncio.run(scenario())


def test_dispatcher_persists_pending_order_after_failure():
    async def scenario():
        gate = asyncio.Event()
        calls = []

        async def persist(i):
            calls.append(i.ordered_ids)
            if i.ordered_ids == ("A", "B"):
                await gate.wait()
                raise RuntimeError("backend down")

        d = ReorderDispatcher(persist)
        d.submit(intent("c1", "A", "B"))
        await asyncio.sleep(0)
        d.submit(intent("c1", "B", "A"))
        gate.set()
        with pytest.raises(RuntimeError):
            await d.join()
        assert not d.in_flight("c1")
        return calls

    assert asyncio.run(scenario()) == [("A", "B"), ("B", "A")]


def test_intent_carries_dense_sort_orders():
    assert intent("c1", "B", "A").sort_orders == {"B": 0, "A": 1}
    with pytest.raises(ValueError):
        intent("c1", "A", "B", "A")


def test_drop_rejects_repeated_ids(emitted):
    ctl = DragReorderController("c1", ("A", "B", "A", "C"), on_reorder=emitted.append)
    ctl.start("B")
    ctl.over("C")
    with pytest.raises(ValueError):
        ctl.drop()
    assert emitted == []
    assert ctl.order == ("A", "B", "A", "C")
    assert ctl.phase is DragPhase.IDLE
