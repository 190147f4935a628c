"""
Ordered collection of animated slots driven by edit scripts.

Every visible row is a :class:`Slot`.  Inserted rows enter, removed rows stay
in place while they exit and are spliced out only once their exit animation
has finished, so neighbouring rows never jump mid-transition.

Positions in edit ops are *logical*: they count live slots only (entering and
steady ones).  Exiting slots still occupy a *physical* row until they are
spliced out; signals and :attr:`AnimatedSequence.visible` use physical rows.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Set, Tuple

from chatlist.config import ENTER_ANIMATION_MS, EXIT_ANIMATION_MS
from chatlist.domain.models import Item, ItemKey
from chatlist.errors import InvalidEditOpError

from .animation import Animation
from .diff import Change, EditOp, Insert, Move, Remove
from .easing import Curve
from .keying import key_of
from .signal import Signal

LOGGER = logging.getLogger(__name__)


class AnimationState(str, enum.Enum):
    ENTERING = "entering"
    STEADY = "steady"
    EXITING = "exiting"


@dataclass(eq=False)
class Slot:
    """Animation-tracked presence of one item."""

    key: ItemKey
    item: Item
    state: AnimationState = AnimationState.STEADY
    animation: Optional[Animation] = None

    @property
    def is_live(self) -> bool:
        return self.state is not AnimationState.EXITING

    @property
    def progress(self) -> float:
        """Linear progress of the running transition, ``1.0`` when steady."""
        if self.animation is None:
            return 1.0
        return self.animation.progress

    @property
    def visibility(self) -> float:
        """How present the row is, in ``[0, 1]``; exits run from 1 down to 0."""
        if self.state is AnimationState.STEADY or self.animation is None:
            return 1.0
        if self.state is AnimationState.ENTERING:
            return self.animation.value
        return self.animation.curve.transform(1.0 - self.animation.progress)


class AnimatedSequence:
    """Apply edit scripts to a slot collection and animate the transitions.

    Signals
    -------
    rows_about_to_be_inserted(first, last) / rows_inserted(first, last):
        Physical rows about to be / just created.
    rows_about_to_be_removed(first, last) / rows_removed(first, last):
        Physical rows about to be / just spliced out.
    layout_about_to_change() / layout_changed():
        Emitted around :class:`Move` reorders.
    rows_changed(first, last):
        Item data or animation progress of existing rows changed.
    slot_settled(slot):
        An entering slot finished its enter animation.
    slot_exited(slot):
        An exiting slot left the collection.
    """

    def __init__(
        self,
        items: Sequence[Item] = (),
        *,
        enter_duration_ms: float = ENTER_ANIMATION_MS,
        exit_duration_ms: float = EXIT_ANIMATION_MS,
        enter_curve: Curve = Curve.EASE_IN_QUAD,
        exit_curve: Curve = Curve.EASE_IN_QUAD,
    ) -> None:
        self.enter_duration_ms = enter_duration_ms
        self.exit_duration_ms = exit_duration_ms
        self.enter_curve = enter_curve
        self.exit_curve = exit_curve
        self._slots: List[Slot] = [Slot(key=key_of(item), item=item) for item in items]

        self.rows_about_to_be_inserted = Signal("rows_about_to_be_inserted")
        self.rows_inserted = Signal("rows_inserted")
        self.rows_about_to_be_removed = Signal("rows_about_to_be_removed")
        self.rows_removed = Signal("rows_removed")
        self.layout_about_to_change = Signal("layout_about_to_change")
        self.layout_changed = Signal("layout_changed")
        self.rows_changed = Signal("rows_changed")
        self.slot_settled = Signal("slot_settled")
        self.slot_exited = Signal("slot_exited")

    # -- read access -------------------------------------------------------

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[Slot]:
        return iter(list(self._slots))

    @property
    def visible(self) -> Tuple[Slot, ...]:
        """All slots not yet spliced out, in physical order."""
        return tuple(self._slots)

    def slot_at(self, index: int) -> Slot:
        return self._slots[index]

    @property
    def live_slots(self) -> Tuple[Slot, ...]:
        return tuple(slot for slot in self._slots if slot.is_live)

    @property
    def live_items(self) -> List[Item]:
        return [slot.item for slot in self._slots if slot.is_live]

    @property
    def is_animating(self) -> bool:
        return any(slot.state is not AnimationState.STEADY for slot in self._slots)

    def find_index_for_key(self, key: ItemKey) -> Optional[int]:
        """Physical row of the slot keyed *key*, or ``None``.

        A live slot wins over an exiting one with the same key (a row removed
        and re-inserted in quick succession).
        """
        fallback: Optional[int] = None
        for index, slot in enumerate(self._slots):
            if slot.key != key:
                continue
            if slot.is_live:
                return index
            if fallback is None:
                fallback = index
        return fallback

    def logical_position(self, physical: int) -> Optional[int]:
        """Logical index of the live slot at *physical*, ``None`` for exiting rows."""
        if not self._slots[physical].is_live:
            return None
        return sum(1 for slot in self._slots[:physical] if slot.is_live)

    # -- mutation ----------------------------------------------------------

    def apply_ops(
        self,
        ops: Sequence[EditOp],
        old_items: Optional[Sequence[Item]] = None,
        new_items: Optional[Sequence[Item]] = None,
    ) -> None:
        """Apply an edit script produced against *old_items*.

        Before the ops run, transitions left over from earlier updates whose
        key is in neither *old_items* nor *new_items* are snapped to their
        end so nothing animates indefinitely.  When *new_items* is given the
        live slots are afterwards reconciled with it: item data is refreshed
        in place and any length or key mismatch raises
        :class:`InvalidEditOpError`.
        """
        if old_items is not None or new_items is not None:
            base_keys = {key_of(item) for item in (old_items or ())}
            base_keys.update(key_of(item) for item in (new_items or ()))
            self._snap_orphans(base_keys)

        for op in ops:
            if isinstance(op, Remove):
                self._remove(op)
            elif isinstance(op, Insert):
                self._insert(op, new_items)
            elif isinstance(op, Move):
                self._move(op)
            elif isinstance(op, Change):
                self._change(op)
            else:
                raise TypeError(f"unknown edit op: {op!r}")

        if new_items is not None:
            self._reconcile(new_items)
        LOGGER.debug("applied %d ops, %d rows (%d live)", len(ops), len(self._slots), len(self.live_slots))

    def tick(self, elapsed_ms: float) -> bool:
        """Advance every transition by *elapsed_ms*; return whether any is still running."""
        touched = False
        index = 0
        while index < len(self._slots):
            slot = self._slots[index]
            if slot.animation is None or slot.state is AnimationState.STEADY:
                index += 1
                continue
            touched = True
            slot.animation.advance(elapsed_ms)
            # A transition can start already complete, e.g. removing a row
            # that has not entered yet.
            if slot.animation.is_completed and self._finish(index):
                continue
            index += 1
        if touched and self._slots:
            self.rows_changed.emit(0, len(self._slots) - 1)
        return self.is_animating

    def complete_all(self) -> None:
        """Snap every running transition to its end."""
        index = 0
        while index < len(self._slots):
            slot = self._slots[index]
            if slot.animation is not None and slot.state is not AnimationState.STEADY:
                slot.animation.complete()
                if self._finish(index):
                    continue
            index += 1
        if self._slots:
            self.rows_changed.emit(0, len(self._slots) - 1)

    # -- internal ----------------------------------------------------------

    def _live_count(self) -> int:
        return sum(1 for slot in self._slots if slot.is_live)

    def _physical_index(self, logical: int) -> int:
        """Physical row of the *logical*-th live slot; ``len`` for one past the end."""
        seen = 0
        for index, slot in enumerate(self._slots):
            if not slot.is_live:
                continue
            if seen == logical:
                return index
            seen += 1
        return len(self._slots)

    def _finish(self, index: int) -> bool:
        """Complete the transition of the slot at *index*; ``True`` if it was spliced out."""
        slot = self._slots[index]
        if slot.state is AnimationState.ENTERING:
            slot.state = AnimationState.STEADY
            slot.animation = None
            self.slot_settled.emit(slot)
            return False
        if slot.state is AnimationState.EXITING:
            self.rows_about_to_be_removed.emit(index, index)
            del self._slots[index]
            self.rows_removed.emit(index, index)
            self.slot_exited.emit(slot)
            return True
        return False

    def _snap_orphans(self, base_keys: Set[ItemKey]) -> None:
        index = 0
        while index < len(self._slots):
            slot = self._slots[index]
            if slot.state is not AnimationState.STEADY and slot.key not in base_keys:
                LOGGER.debug("snapping orphaned %s slot %r", slot.state.value, slot.key)
                if slot.animation is not None:
                    slot.animation.complete()
                if self._finish(index):
                    continue
                self.rows_changed.emit(index, index)
            index += 1

    def _remove(self, op: Remove) -> None:
        live = self._live_count()
        if op.count < 0 or op.position < 0 or op.position + op.count > live:
            raise InvalidEditOpError(op, live)
        first = self._physical_index(op.position)
        # Marking a slot exiting drops it from the logical numbering, so the
        # next slot to remove is again at ``op.position``.
        for _ in range(op.count):
            index = self._physical_index(op.position)
            slot = self._slots[index]
            start = 0.0
            if slot.state is AnimationState.ENTERING and slot.animation is not None:
                start = 1.0 - slot.animation.progress
            slot.state = AnimationState.EXITING
            slot.animation = Animation(self.exit_duration_ms, self.exit_curve, progress=start)
            last = index
        if op.count:
            self.rows_changed.emit(first, last)

    def _insert(self, op: Insert, new_items: Optional[Sequence[Item]]) -> None:
        live = self._live_count()
        if op.count < 0 or not 0 <= op.position <= live:
            raise InvalidEditOpError(op, live)
        items: Sequence[Item] = op.items
        if not items and op.count:
            if new_items is None or op.position + op.count > len(new_items):
                raise InvalidEditOpError(op, live, "insert carries no items")
            items = new_items[op.position : op.position + op.count]
        if len(items) != op.count:
            raise InvalidEditOpError(op, live, f"carries {len(items)} items")
        if not op.count:
            return
        index = self._physical_index(op.position)
        slots = [
            Slot(
                key=key_of(item),
                item=item,
                state=AnimationState.ENTERING,
                animation=Animation(self.enter_duration_ms, self.enter_curve),
            )
            for item in items
        ]
        self.rows_about_to_be_inserted.emit(index, index + op.count - 1)
        self._slots[index:index] = slots
        self.rows_inserted.emit(index, index + op.count - 1)

    def _move(self, op: Move) -> None:
        live = self._live_count()
        if not 0 <= op.from_index < live or not 0 <= op.to_index < live:
            raise InvalidEditOpError(op, live)
        if op.from_index == op.to_index:
            return
        self.layout_about_to_change.emit()
        slot = self._slots.pop(self._physical_index(op.from_index))
        self._slots.insert(self._physical_index(op.to_index), slot)
        self.layout_changed.emit()

    def _change(self, op: Change) -> None:
        live = self._live_count()
        if not 0 <= op.position < live:
            raise InvalidEditOpError(op, live)
        if op.payload is None:
            return
        index = self._physical_index(op.position)
        self._slots[index].item = op.payload
        self.rows_changed.emit(index, index)

    def _reconcile(self, new_items: Sequence[Item]) -> None:
        live = [slot for slot in self._slots if slot.is_live]
        if len(live) != len(new_items):
            raise InvalidEditOpError(
                None, len(live), f"ops leave {len(live)} live rows, expected {len(new_items)}"
            )
        for position, (slot, item) in enumerate(zip(live, new_items)):
            key = key_of(item)
            if slot.key != key:
                raise InvalidEditOpError(
                    None, len(live), f"row {position} holds {slot.key!r}, expected {key!r}"
                )
            slot.item = item
