# drag.py - drag-to-reorder for the bookmarks of one category
#
# The session is an explicit little state machine:
#
#   idle --start--> dragging --over--> dragging
#   dragging --drop--> dropping --> idle      (may emit a ReorderIntent)
#   dragging --cancel--> idle                 (never emits)
#
# Transitions are plain functions returning (next_session, intent). The
# controller object keeps the current session plus the working order of ids
# and hands emitted intents to whoever persists them.

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Hashable, Iterable, NamedTuple, Optional, Tuple

from .ordering import array_move, assign_sort_orders

log = logging.getLogger(__name__)

BEFORE = "before"
AFTER = "after"


class DragPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    DROPPING = "dropping"


@dataclass(frozen=True)
class DragSession:
    phase: DragPhase = DragPhase.IDLE
    active_id: Optional[Hashable] = None
    over_id: Optional[Hashable] = None


IDLE = DragSession()


@dataclass(frozen=True)
class ReorderIntent:
    """New display order for a category, to be written by the store.

    ``sort_orders`` is filled in from ``ordered_ids`` when not given, so an
    order with a repeated id is rejected (ValueError) when the intent is built.
    """
    category_id: Hashable
    ordered_ids: Tuple[Hashable, ...]
    sort_orders: Dict[Hashable, int] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.sort_orders is None:
            object.__setattr__(self, "sort_orders", assign_sort_orders(self.ordered_ids))


class Transition(NamedTuple):
    session: DragSession
    intent: Optional[ReorderIntent] = None


def start(session: DragSession, bookmark_id: Hashable) -> Transition:
    if session.phase is not DragPhase.IDLE:
        log.warning("drag start for %r rejected, session already %s (active=%r)",
                    bookmark_id, session.phase.value, session.active_id)
        return Transition(session)
    if bookmark_id is None:
        return Transition(session)
    return Transition(DragSession(DragPhase.DRAGGING, bookmark_id, None))


def over(session: DragSession, bookmark_id: Optional[Hashable]) -> Transition:
    """Hover update; ``None`` means the pointer is over empty space."""
    if session.phase is not DragPhase.DRAGGING:
        return Transition(session)
    return Transition(replace(session, over_id=bookmark_id))


def drop(session: DragSession, category_id: Hashable, order: Iterable[Hashable]) -> Transition:
    """Finish the drag against the *current* order.

    Both ids are looked up again here: the order may have been refreshed while
    the pointer was down, and a vanished id makes the drop a no-op.
    """
    if session.phase not in (DragPhase.DRAGGING, DragPhase.DROPPING):
        return Transition(session)

    active_id, over_id = session.active_id, session.over_id
    if over_id is None or over_id == active_id:
        return Transition(IDLE)

    ids = list(order)
    try:
        old_index = ids.index(active_id)
        new_index = ids.index(over_id)
    except ValueError:
        log.warning("stale drop in category %r: active=%r over=%r not both in current order",
                    category_id, active_id, over_id)
        return Transition(IDLE)

    moved = array_move(ids, old_index, new_index)
    return Transition(IDLE, ReorderIntent(category_id, tuple(moved), assign_sort_orders(moved)))


def cancel(session: DragSession) -> Transition:
    return Transition(IDLE)


def drop_position(session: DragSession, order: Iterable[Hashable], bookmark_id: Hashable) -> Optional[str]:
    """Where the insertion marker goes for ``bookmark_id``: "before", "after" or None."""
    if session.phase is not DragPhase.DRAGGING:
        return None
    if session.active_id is None or session.over_id is None:
        return None
    if bookmark_id == session.active_id or bookmark_id != session.over_id:
        return None

    ids = list(order)
    try:
        active_index = ids.index(session.active_id)
        over_index = ids.index(session.over_id)
    except ValueError:
        return None
    if active_index < over_index:
        return AFTER
    if active_index > over_index:
        return BEFORE
    return None


class DragReorderController:
    """One category view's drag state plus its working order of bookmark ids."""

    def __init__(self, category_id: Hashable, bookmark_ids: Iterable[Hashable],
                 on_reorder: Optional[Callable[[ReorderIntent], Any]] = None):
        self.category_id = category_id
        self.order: Tuple[Hashable, ...] = tuple(bookmark_ids)
        self.on_reorder = on_reorder
        self.session = IDLE

    @classmethod
    def for_category(cls, category, on_reorder=None) -> "DragReorderController":
        return cls(category.id, [b.id for b in category.bookmarks], on_reorder)

    @property
    def phase(self) -> DragPhase:
        return self.session.phase

    @property
    def active_id(self):
        return self.session.active_id

    @property
    def over_id(self):
        return self.session.over_id

    def start(self, bookmark_id) -> bool:
        """Begin dragging; False if a drag is already in progress."""
        before = self.session
        self.session = start(self.session, bookmark_id).session
        return self.session is not before

    def over(self, bookmark_id) -> None:
        self.session = over(self.session, bookmark_id).session

    def drop(self) -> Optional[ReorderIntent]:
        if self.session.phase is not DragPhase.DRAGGING:
            return None
        self.session = replace(self.session, phase=DragPhase.DROPPING)
        try:
            _, intent = drop(self.session, self.category_id, self.order)
            if intent is not None:
                self.order = intent.ordered_ids
                if self.on_reorder is not None:
                    self.on_reorder(intent)
        finally:
            self.session = IDLE
        return intent

    def cancel(self) -> None:
        self.session = cancel(self.session).session

    def drop_position(self, bookmark_id) -> Optional[str]:
        return drop_position(self.session, self.order, bookmark_id)

    def replace_order(self, bookmark_ids: Iterable[Hashable]) -> None:
        """Adopt an authoritative snapshot from the store, wholesale."""
        self.order = tuple(bookmark_ids)
        if self.session.phase is DragPhase.DRAGGING and self.session.active_id not in self.order:
            log.info("active bookmark %r vanished from category %r, cancelling drag",
                     self.session.active_id, self.category_id)
            self.cancel()


class ReorderDispatcher:
    """Hands reorder intents to an async ``persist`` one category at a time.

    While an intent for a category is being persisted, newer intents for that
    category replace each other; only the latest is written afterwards.
    """

    def __init__(self, persist: Callable[[ReorderIntent], Awaitable[Any]],
                 on_error: Optional[Callable[[ReorderIntent, Exception], Any]] = None):
        self._persist = persist
        self._on_error = on_error
        self._pending: Dict[Hashable, ReorderIntent] = {}
        self._workers: Dict[Hashable, asyncio.Task] = {}

    def __call__(self, intent: ReorderIntent) -> None:
        self.submit(intent)

    def submit(self, intent: ReorderIntent) -> None:
        """Queue ``intent``; must be called from a running event loop."""
        cat = intent.category_id
        if cat in self._pending:
            log.debug("coalescing reorder for category %r", cat)
        self._pending[cat] = intent
        if cat not in self._workers:
            self._workers[cat] = asyncio.get_running_loop().create_task(self._drain(cat))

    def in_flight(self, category_id: Hashable) -> bool:
        return category_id in self._workers

    async def join(self) -> None:
        while self._workers:
            await asyncio.gather(*list(self._workers.values()))

    async def _drain(self, category_id: Hashable) -> None:
        # A failed write does not strand a newer pending order; without an
        # on_error handler the first failure is raised once the queue is empty.
        first_error = None
        try:
            while category_id in self._pending:
                intent = self._pending.pop(category_id)
                log.debug("persisting order for category %r: %r", category_id, intent.ordered_ids)
                try:
                    await self._persist(intent)
                except Exception as e:
                    log.exception("reorder of category %r failed", category_id)
                    if self._on_error is not None:
                        self._on_error(intent, e)
                    elif first_error is None:
                        first_error = e
        finally:
            self._workers.pop(category_id, None)
        if first_error is not None:
            raise first_error
