"""Tests for AnimatedSequence slot lifecycles."""

import random

import pytest

from chatlist.core.animated_sequence import AnimatedSequence, AnimationState
from chatlist.core.diff import Insert, Move, Remove, diff
from chatlist.domain.models import Message, MessageItem, User
from chatlist.errors import InvalidEditOpError


def _msg(message_id: str, text: str = "") -> MessageItem:
    return MessageItem(Message(id=message_id, author=User(id="u1"), text=text))


def _update(sequence: AnimatedSequence, old, new, **kwargs):
    ops = diff(old, new, **kwargs)
    sequence.apply_ops(ops, old, new)
    return ops


def _visible_keys(sequence: AnimatedSequence):
    return [slot.key for slot in sequence.visible]


def _states(sequence: AnimatedSequence):
    return [slot.state for slot in sequence.visible]


class TestLifecycle:
    def test_inserted_slot_enters_then_settles(self):
        sequence = AnimatedSequence()
        settled = []
        sequence.slot_settled.connect(settled.append)
        m1 = _msg("m1")

        ops = _update(sequence, [], [m1])

        assert ops == [Insert(0, 1)]
        slot = sequence.visible[0]
        assert slot.state is AnimationState.ENTERING
        assert slot.progress == 0.0

        assert sequence.tick(50) is True
        assert slot.progress == pytest.approx(0.5)
        assert sequence.tick(50) is False

        assert slot.state is AnimationState.STEADY
        assert slot.visibility == 1.0
        assert settled == [slot]

    def test_removed_slot_stays_in_place_until_exit_finishes(self):
        m1, m2 = _msg("m1"), _msg("m2")
        sequence = AnimatedSequence([m1, m2])
        exited = []
        removed = []
        sequence.slot_exited.connect(exited.append)
        sequence.rows_removed.connect(lambda first, last: removed.append((first, last)))

        ops = _update(sequence, [m1, m2], [m2])

        assert ops == [Remove(0, 1)]
        assert _visible_keys(sequence) == ["m1", "m2"]
        assert _states(sequence) == [AnimationState.EXITING, AnimationState.STEADY]
        assert sequence.live_items == [m2]

        sequence.tick(150)
        assert _visible_keys(sequence) == ["m1", "m2"]
        assert sequence.visible[0].visibility == pytest.approx(0.25)
        assert removed == []

        sequence.tick(150)
        assert _visible_keys(sequence) == ["m2"]
        assert removed == [(0, 0)]
        assert [slot.key for slot in exited] == ["m1"]

    def test_insert_signals_bracket_the_mutation(self):
        sequence = AnimatedSequence([_msg("a")])
        seen = []
        sequence.rows_about_to_be_inserted.connect(lambda f, l: seen.append(("before", f, l, len(sequence))))
        sequence.rows_inserted.connect(lambda f, l: seen.append(("after", f, l, len(sequence))))

        _update(sequence, [_msg("a")], [_msg("x"), _msg("y"), _msg("a")])

        assert seen == [("before", 0, 1, 1), ("after", 0, 1, 3)]

    def test_insert_lands_after_exiting_neighbour(self):
        a, b, x = _msg("a"), _msg("b"), _msg("x")
        sequence = AnimatedSequence([a, b])

        ops = _update(sequence, [a, b], [x, b])

        assert ops == [Remove(0, 1), Insert(0, 1)]
        assert _visible_keys(sequence) == ["a", "x", "b"]
        assert [slot.key for slot in sequence.live_slots] == ["x", "b"]

    def test_remove_while_entering_reverses_from_current_visibility(self):
        m1 = _msg("m1")
        sequence = AnimatedSequence()
        _update(sequence, [], [m1])
        sequence.tick(40)

        _update(sequence, [m1], [])

        slot = sequence.visible[0]
        assert slot.state is AnimationState.EXITING
        assert slot.progress == pytest.approx(0.6)
        sequence.tick(100)
        assert len(sequence) == 1
        sequence.tick(30)
        assert len(sequence) == 0

    def test_remove_before_first_tick_leaves_on_next_tick(self):
        m1 = _msg("m1")
        sequence = AnimatedSequence()
        exited = []
        sequence.slot_exited.connect(exited.append)
        _update(sequence, [], [m1])

        _update(sequence, [m1], [])

        assert sequence.visible[0].state is AnimationState.EXITING
        assert sequence.tick(16) is False
        assert len(sequence) == 0
        assert not sequence.is_animating
        assert [slot.key for slot in exited] == ["m1"]

    def test_complete_all_snaps_everything(self):
        a, b = _msg("a"), _msg("b")
        sequence = AnimatedSequence([a])
        _update(sequence, [a], [b])
        assert sequence.is_animating

        sequence.complete_all()

        assert not sequence.is_animating
        assert _visible_keys(sequence) == ["b"]

    def test_content_change_refreshes_item_without_animation(self):
        old = _msg("m1", "draft")
        new = _msg("m1", "sent")
        sequence = AnimatedSequence([old])
        changed = []
        sequence.rows_changed.connect(lambda f, l: changed.append((f, l)))

        _update(sequence, [old], [new], content_equals=lambda x, y: x == y)

        assert sequence.visible[0].item is new
        assert sequence.visible[0].state is AnimationState.STEADY
        assert (0, 0) in changed

    def test_custom_durations(self):
        sequence = AnimatedSequence(enter_duration_ms=10)
        _update(sequence, [], [_msg("m1")])
        assert sequence.tick(10) is False


class TestReentrancy:
    def test_running_transitions_continue_across_updates(self):
        m1, m2 = _msg("m1"), _msg("m2")
        sequence = AnimatedSequence()
        _update(sequence, [], [m1])
        sequence.tick(50)

        _update(sequence, [m1], [m2, m1])

        assert _visible_keys(sequence) == ["m2", "m1"]
        assert sequence.visible[1].progress == pytest.approx(0.5)
        assert sequence.visible[0].progress == 0.0

    def test_orphaned_exit_is_snapped(self):
        m1, m2, m3 = _msg("m1"), _msg("m2"), _msg("m3")
        sequence = AnimatedSequence([m1, m2])
        exited = []
        sequence.slot_exited.connect(lambda slot: exited.append(slot.key))
        _update(sequence, [m1, m2], [m2])

        _update(sequence, [m2], [m3])

        assert exited == ["m1"]
        assert _visible_keys(sequence) == ["m2", "m3"]
        assert _states(sequence) == [AnimationState.EXITING, AnimationState.ENTERING]

    def test_reinserted_key_coexists_with_its_exiting_twin(self):
        m1, m2 = _msg("m1"), _msg("m2")
        sequence = AnimatedSequence([m1, m2])
        _update(sequence, [m1, m2], [m2])
        assert sequence.find_index_for_key("m1") == 0

        _update(sequence, [m2], [m1, m2])

        assert _visible_keys(sequence) == ["m1", "m1", "m2"]
        assert sequence.find_index_for_key("m1") == 1
        assert sequence.find_index_for_key("m2") == 2
        assert sequence.find_index_for_key("missing") is None
        assert [sequence.logical_position(i) for i in range(3)] == [None, 0, 1]

    @pytest.mark.parametrize("seed", range(8))
    def test_random_updates_settle_on_last_snapshot(self, seed):
        rng = random.Random(seed)
        pool = [f"k{i}" for i in range(12)]
        sequence = AnimatedSequence()
        current = []
        for _ in range(15):
            new = [_msg(key) for key in rng.sample(pool, rng.randint(0, 8))]
            _update(sequence, current, new)
            assert [slot.key for slot in sequence.live_slots] == [m.message.id for m in new]
            sequence.tick(rng.choice([0, 20, 80, 400]))
            current = new

        while sequence.is_animating:
            sequence.tick(16)

        assert _visible_keys(sequence) == [m.message.id for m in current]


class TestMoves:
    def test_move_reorders_instantly(self):
        a, b, c = _msg("a"), _msg("b"), _msg("c")
        sequence = AnimatedSequence([a, b, c])
        layout = []
        sequence.layout_about_to_change.connect(lambda: layout.append("before"))
        sequence.layout_changed.connect(lambda: layout.append("after"))

        ops = _update(sequence, [a, b, c], [c, a, b], detect_moves=True)

        assert ops == [Move(2, 0)]
        assert _visible_keys(sequence) == ["c", "a", "b"]
        assert not sequence.is_animating
        assert layout == ["before", "after"]


class TestInvalidOps:
    def test_remove_out_of_range(self):
        sequence = AnimatedSequence([_msg("m1")])
        op = Remove(3, 1)

        with pytest.raises(InvalidEditOpError) as excinfo:
            sequence.apply_ops([op])

        assert excinfo.value.op == op
        assert excinfo.value.length == 1

    def test_insert_out_of_range(self):
        sequence = AnimatedSequence([_msg("m1")])
        with pytest.raises(InvalidEditOpError):
            sequence.apply_ops([Insert(5, 1, (_msg("m2"),))])

    def test_insert_without_items(self):
        sequence = AnimatedSequence()
        with pytest.raises(InvalidEditOpError, match="insert carries no items"):
            sequence.apply_ops([Insert(0, 1)])

    def test_exiting_rows_do_not_count_as_positions(self):
        m1, m2 = _msg("m1"), _msg("m2")
        sequence = AnimatedSequence([m1, m2])
        _update(sequence, [m1, m2], [m2])

        with pytest.raises(InvalidEditOpError):
            sequence.apply_ops([Remove(1, 1)])

    def test_script_that_misses_the_target(self):
        m1 = _msg("m1")
        sequence = AnimatedSequence([m1])

        with pytest.raises(InvalidEditOpError) as excinfo:
            sequence.apply_ops([], [m1], [m1, _msg("m2")])

        assert excinfo.value.op is None
        assert "expected 2" in str(excinfo.value)
