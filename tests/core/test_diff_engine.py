"""Tests for the keyed list diff."""

import random
from datetime import datetime

import pytest

from chatlist.core.diff import (
    Change,
    Insert,
    Move,
    Remove,
    apply_ops_to_list,
    count_edits,
    diff,
    expand_ops,
)
from chatlist.core.keying import key_of
from chatlist.domain.models import DateHeader, Message, MessageItem, Spacer, User
from chatlist.errors import InvalidEditOpError


def _msg(message_id: str, text: str = "") -> MessageItem:
    return MessageItem(Message(id=message_id, author=User(id="u1"), text=text))


def _items(keys: str):
    return [_msg(key) for key in keys]


def _keys(items):
    return [key_of(item) for item in items]


def _lcs_length(a, b) -> int:
    rows = [[0] * (len(b) + 1) for _ in range(len(a) + 1)]
    for i in range(len(a) - 1, -1, -1):
        for j in range(len(b) - 1, -1, -1):
            if a[i] == b[j]:
                rows[i][j] = rows[i + 1][j + 1] + 1
            else:
                rows[i][j] = max(rows[i + 1][j], rows[i][j + 1])
    return rows[0][0]


# ---------------------------------------------------------------------------
# Basic scripts
# ---------------------------------------------------------------------------


def test_insert_into_empty_list():
    m1 = _msg("m1")
    ops = diff([], [m1])

    assert ops == [Insert(0, 1)]
    assert ops[0].items == (m1,)


def test_remove_first_item():
    assert diff(_items("ab"), _items("b")) == [Remove(0, 1)]


def test_identical_lists_produce_no_ops():
    assert diff(_items("abc"), _items("abc")) == []
    assert diff([], []) == []


def test_empty_new_removes_everything():
    assert diff(_items("abc"), []) == [Remove(0, 3)]


def test_empty_old_inserts_everything():
    ops = diff([], _items("abc"))
    assert ops == [Insert(0, 3)]
    assert _keys(ops[0].items) == ["a", "b", "c"]


def test_removals_run_back_to_front():
    ops = diff(_items("abcde"), _items("ace"))
    assert ops == [Remove(3, 1), Remove(1, 1)]


def test_insert_positions_are_post_op_indices():
    old = _items("ac")
    new = _items("xabcy")
    ops = diff(old, new)

    assert ops == [Insert(0, 1), Insert(2, 1), Insert(4, 1)]
    assert _keys(apply_ops_to_list(old, ops)) == _keys(new)


def test_mixed_update():
    old = [_msg("a"), _msg("b"), _msg("c", "v1")]
    new = [_msg("a"), _msg("c", "v2"), _msg("d")]
    ops = diff(old, new, content_equals=lambda x, y: x == y)

    assert ops == [Remove(1, 1), Insert(2, 1), Change(1)]
    assert ops[2].payload is new[1]
    assert apply_ops_to_list(old, ops) == new


# ---------------------------------------------------------------------------
# Identity stability
# ---------------------------------------------------------------------------


def test_content_change_is_not_remove_insert():
    old = [_msg("m1", "hello")]
    new = [_msg("m1", "hello, edited")]

    assert diff(old, new) == []
    assert diff(old, new, content_equals=lambda x, y: x == y) == [Change(0)]


def test_strict_equals_reports_replacement():
    old = [_msg("m1", "hello")]
    new = [_msg("m1", "hello, edited")]
    ops = diff(old, new, equals=lambda x, y: x == y)

    assert ops == [Remove(0, 1), Insert(0, 1)]


def test_types_never_match_across_variants():
    day = datetime(2024, 5, 1)
    old = [Spacer("top"), DateHeader(day)]
    new = [Spacer("top"), _msg("x")]
    ops = diff(old, new)

    assert ops == [Remove(1, 1), Insert(1, 1)]


# ---------------------------------------------------------------------------
# Batching and moves
# ---------------------------------------------------------------------------


def test_unbatched_ops_cover_one_item_each():
    ops = diff([], _items("abc"), batch=False)
    assert ops == [Insert(0, 1), Insert(1, 1), Insert(2, 1)]

    ops = diff(_items("abc"), [], batch=False)
    assert ops == [Remove(2, 1), Remove(1, 1), Remove(0, 1)]


def test_expand_ops_keeps_inserted_items():
    ops = list(expand_ops([Insert(1, 2, tuple(_items("xy")))]))
    assert [op.items[0].message.id for op in ops] == ["x", "y"]


def test_reorder_without_move_detection():
    old = _items("ab")
    new = _items("ba")
    ops = diff(old, new)

    assert count_edits(ops) == 2
    assert not any(isinstance(op, Move) for op in ops)
    assert _keys(apply_ops_to_list(old, ops)) == ["b", "a"]


def test_detect_moves():
    old = _items("abc")
    new = _items("cab")
    ops = diff(old, new, detect_moves=True)

    assert ops == [Move(2, 0)]
    assert _keys(apply_ops_to_list(old, ops)) == ["c", "a", "b"]


def test_detect_moves_with_inserts_and_removals():
    old = _items("abcde")
    new = _items("xdacb")
    ops = diff(old, new, detect_moves=True)

    assert _keys(apply_ops_to_list(old, ops)) == _keys(new)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("seed", range(20))
def test_random_scripts_are_correct_and_minimal(seed):
    rng = random.Random(seed)
    pool = [f"k{i}" for i in range(30)]
    old_keys = rng.sample(pool, rng.randint(0, 20))
    # Keep part of the old order so the LCS is non-trivial.
    new_keys = [key for key in old_keys if rng.random() < 0.6]
    fresh = [key for key in pool if key not in old_keys]
    rng.shuffle(fresh)
    for key in fresh[: rng.randint(0, 8)]:
        new_keys.insert(rng.randint(0, len(new_keys)), key)
    if len(new_keys) > 1 and rng.random() < 0.3:
        i, j = rng.sample(range(len(new_keys)), 2)
        new_keys[i], new_keys[j] = new_keys[j], new_keys[i]
    old = [_msg(key) for key in old_keys]
    new = [_msg(key) for key in new_keys]

    ops = diff(old, new)

    assert _keys(apply_ops_to_list(old, ops)) == new_keys
    assert count_edits(ops) <= len(old) + len(new) - 2 * _lcs_length(old_keys, new_keys)


@pytest.mark.parametrize("seed", range(10))
def test_random_scripts_with_moves_are_correct(seed):
    rng = random.Random(1000 + seed)
    pool = [f"k{i}" for i in range(15)]
    old_keys = rng.sample(pool, rng.randint(0, 12))
    new_keys = rng.sample(pool, rng.randint(0, 12))
    old = [_msg(key) for key in old_keys]
    new = [_msg(key) for key in new_keys]

    ops = diff(old, new, detect_moves=True, content_equals=lambda x, y: x == y)

    assert _keys(apply_ops_to_list(old, ops)) == new_keys


def test_large_append_is_cheap_to_compute():
    old = [_msg(f"m{i}") for i in range(5000)]
    new = [_msg("fresh")] + old
    assert diff(old, new) == [Insert(0, 1)]


def test_duplicate_keys_do_not_crash():
    old = [_msg("a", "1"), _msg("a", "2"), _msg("b")]
    new = [_msg("a", "1"), _msg("b"), _msg("a", "2")]
    ops = diff(old, new)

    assert _keys(apply_ops_to_list(old, ops)) == ["a", "b", "a"]


# ---------------------------------------------------------------------------
# apply_ops_to_list
# ---------------------------------------------------------------------------


def test_apply_rejects_out_of_range_remove():
    op = Remove(5, 1)
    with pytest.raises(InvalidEditOpError) as excinfo:
        apply_ops_to_list(_items("ab"), [op])

    assert excinfo.value.op == op
    assert excinfo.value.length == 2


def test_apply_insert_needs_items_or_source():
    with pytest.raises(InvalidEditOpError):
        apply_ops_to_list([], [Insert(0, 1)])

    source = _items("x")
    assert apply_ops_to_list([], [Insert(0, 1)], source) == source


def test_apply_rejects_unknown_op():
    with pytest.raises(TypeError):
        apply_ops_to_list([], ["insert"])
