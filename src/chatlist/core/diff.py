"""Compute minimal edit scripts between two item sequences.

Items are matched by identity (see :func:`~chatlist.core.keying.keys_equal`)
rather than by position or content, so a message whose text changed is still
the same row.  The longest common subsequence is found with Myers' O((N+M)·D)
algorithm after trimming the common head and tail, which makes the usual chat
updates (a few rows added or dropped at either end) close to linear.

The returned script is meant to be applied in order, each position being
relative to the sequence as it stands when that op is applied:

* every :class:`Remove` comes first, back to front, so its position is the
  index of the removed run in ``old``;
* then :class:`Insert` and :class:`Move` ops, front to back, where an insert
  position is the index the first inserted item occupies afterwards;
* :class:`Change` ops come last and index into ``new``.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple, Union

from chatlist.errors import InvalidEditOpError

from .keying import key_of, keys_equal

LOGGER = logging.getLogger(__name__)

Equality = Callable[[Any, Any], bool]


@dataclass(frozen=True)
class Insert:
    position: int
    count: int = 1
    # The inserted items, in order.  Excluded from equality so scripts can be
    # compared by shape alone.
    items: Tuple[Any, ...] = field(default=(), compare=False, repr=False)


@dataclass(frozen=True)
class Remove:
    position: int
    count: int = 1


@dataclass(frozen=True)
class Change:
    position: int
    payload: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class Move:
    from_index: int
    to_index: int


EditOp = Union[Insert, Remove, Change, Move]


def diff(
    old: Sequence[Any],
    new: Sequence[Any],
    equals: Optional[Equality] = None,
    *,
    content_equals: Optional[Equality] = None,
    detect_moves: bool = False,
    batch: bool = True,
) -> List[EditOp]:
    """Return the edit script turning *old* into *new*.

    Parameters
    ----------
    equals:
        Identity relation; defaults to :func:`keys_equal`.  Items that are
        ``equals`` are never reported as a removal plus an insertion unless
        their relative order changed and *detect_moves* is off.
    content_equals:
        Optional content relation.  Every matched pair that is not
        content-equal yields a :class:`Change` carrying the new item.
    detect_moves:
        Pair up reordered items and report them as :class:`Move` instead of
        a removal plus an insertion.
    batch:
        Merge contiguous single-item inserts and removals into ranged ops.
        With ``batch=False`` every op covers exactly one item.
    """

    equals = equals or keys_equal
    old = list(old)
    new = list(new)

    matches = _lcs_matches(old, new, equals)
    matched_old: Set[int] = {x for x, _ in matches}
    new_to_old: Dict[int, int] = {y: x for x, y in matches}

    moves: Dict[int, int] = {}
    if detect_moves:
        moves = _pair_moves(old, new, equals, matched_old, new_to_old)
    moved_old = set(moves.values())

    ops: List[EditOp] = []

    removed = (x for x in range(len(old)) if x not in matched_old and x not in moved_old)
    for start, count in reversed(_runs(removed)):
        ops.append(Remove(start, count))

    # ``working`` mirrors the list while inserts and moves are replayed.  It
    # holds old indices for surviving items and ``None`` for inserted ones;
    # ``last`` is the working index of the most recently placed new item.
    working: List[Optional[int]] = [x for x in range(len(old)) if x in matched_old or x in moved_old]
    last = -1
    y = 0
    while y < len(new):
        if y in new_to_old:
            last = working.index(new_to_old[y], last + 1)
            y += 1
        elif y in moves:
            x = moves[y]
            source = working.index(x)
            del working[source]
            if source <= last:
                last -= 1
            target = last + 1
            working.insert(target, x)
            if source != target:
                ops.append(Move(source, target))
            last = target
            y += 1
        else:
            start = y
            while y < len(new) and y not in new_to_old and y not in moves:
                y += 1
            position = last + 1
            working[position:position] = [None] * (y - start)
            ops.append(Insert(position, y - start, tuple(new[start:y])))
            last += y - start

    if content_equals is not None:
        for y, item in enumerate(new):
            x = new_to_old.get(y, moves.get(y))
            if x is not None and not content_equals(old[x], item):
                ops.append(Change(y, item))

    LOGGER.debug(
        "diff %d -> %d items: %d matched, %d moved, %d ops",
        len(old),
        len(new),
        len(matches),
        len(moves),
        len(ops),
    )
    if not batch:
        return list(expand_ops(ops))
    return ops


def expand_ops(ops: Iterable[EditOp]) -> Iterator[EditOp]:
    """Split ranged inserts and removals into single-item ops."""
    for op in ops:
        if isinstance(op, Remove):
            # Back to front keeps every position equal to the original index.
            for offset in reversed(range(op.count)):
                yield Remove(op.position + offset, 1)
        elif isinstance(op, Insert):
            for offset in range(op.count):
                items = (op.items[offset],) if op.items else ()
                yield Insert(op.position + offset, 1, items)
        else:
            yield op


def apply_ops_to_list(
    items: Sequence[Any],
    ops: Iterable[EditOp],
    source: Optional[Sequence[Any]] = None,
) -> List[Any]:
    """Apply *ops* to a copy of *items* and return the result.

    Inserts take their items from the op, falling back to the same positions
    in *source* when the op carries none.
    """
    result = list(items)
    for op in ops:
        if isinstance(op, Remove):
            if op.count < 0 or op.position < 0 or op.position + op.count > len(result):
                raise InvalidEditOpError(op, len(result))
            del result[op.position : op.position + op.count]
        elif isinstance(op, Insert):
            if op.count < 0 or not 0 <= op.position <= len(result):
                raise InvalidEditOpError(op, len(result))
            payload: Sequence[Any] = op.items
            if not payload and op.count:
                if source is None:
                    raise InvalidEditOpError(op, len(result), "insert carries no items")
                payload = source[op.position : op.position + op.count]
            result[op.position : op.position] = list(payload)
        elif isinstance(op, Move):
            if not 0 <= op.from_index < len(result) or not 0 <= op.to_index < len(result):
                raise InvalidEditOpError(op, len(result))
            result.insert(op.to_index, result.pop(op.from_index))
        elif isinstance(op, Change):
            if not 0 <= op.position < len(result):
                raise InvalidEditOpError(op, len(result))
            result[op.position] = op.payload
        else:
            raise TypeError(f"unknown edit op: {op!r}")
    return result


def count_edits(ops: Iterable[EditOp]) -> int:
    """Number of single-item inserts and removals described by *ops*."""
    return sum(op.count for op in ops if isinstance(op, (Insert, Remove)))


# -- internal ----------------------------------------------------------------


def _runs(indices: Iterable[int]) -> List[Tuple[int, int]]:
    runs: List[Tuple[int, int]] = []
    for index in indices:
        if runs and runs[-1][0] + runs[-1][1] == index:
            start, count = runs[-1]
            runs[-1] = (start, count + 1)
        else:
            runs.append((index, 1))
    return runs


def _lcs_matches(old: List[Any], new: List[Any], equals: Equality) -> List[Tuple[int, int]]:
    limit = min(len(old), len(new))
    prefix = 0
    while prefix < limit and equals(old[prefix], new[prefix]):
        prefix += 1
    suffix = 0
    while (
        suffix < limit - prefix
        and equals(old[len(old) - 1 - suffix], new[len(new) - 1 - suffix])
    ):
        suffix += 1

    matches = [(i, i) for i in range(prefix)]
    middle_old = old[prefix : len(old) - suffix]
    middle_new = new[prefix : len(new) - suffix]
    for x, y in _shortest_edit_matches(middle_old, middle_new, equals):
        matches.append((x + prefix, y + prefix))
    tail_old = len(old) - suffix
    tail_new = len(new) - suffix
    matches.extend((tail_old + i, tail_new + i) for i in range(suffix))
    return matches


def _shortest_edit_matches(a: List[Any], b: List[Any], equals: Equality) -> List[Tuple[int, int]]:
    """Myers' greedy forward search; returns the matched (a, b) index pairs."""
    n, m = len(a), len(b)
    if n == 0 or m == 0:
        return []

    # v[k] is the furthest x reached on diagonal k = x - y.  A snapshot is
    # kept per round for the backtrack, so memory grows with D² only.
    v: Dict[int, int] = {1: 0}
    trace: List[Dict[int, int]] = []
    for d in range(n + m + 1):
        trace.append(dict(v))
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[k - 1] < v[k + 1]):
                x = v[k + 1]
            else:
                x = v[k - 1] + 1
            y = x - k
            while x < n and y < m and equals(a[x], b[y]):
                x += 1
                y += 1
            v[k] = x
            if x >= n and y >= m:
                return _backtrack(trace, n, m)
    return []  # pragma: no cover - the loop always reaches (n, m)


def _backtrack(trace: List[Dict[int, int]], n: int, m: int) -> List[Tuple[int, int]]:
    matches: List[Tuple[int, int]] = []
    x, y = n, m
    for d in range(len(trace) - 1, -1, -1):
        v = trace[d]
        k = x - y
        if k == -d or (k != d and v[k - 1] < v[k + 1]):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = v[prev_k]
        prev_y = prev_x - prev_k
        while x > prev_x and y > prev_y:
            x -= 1
            y -= 1
            matches.append((x, y))
        x, y = prev_x, prev_y
    matches.reverse()
    return matches


def _pair_moves(
    old: List[Any],
    new: List[Any],
    equals: Equality,
    matched_old: Set[int],
    new_to_old: Dict[int, int],
) -> Dict[int, int]:
    pending_old = [x for x in range(len(old)) if x not in matched_old]
    pending_new = [y for y in range(len(new)) if y not in new_to_old]
    moves: Dict[int, int] = {}
    if not pending_old or not pending_new:
        return moves

    if equals is keys_equal:
        buckets: Dict[Tuple[type, Any], Deque[int]] = defaultdict(deque)
        for x in pending_old:
            buckets[(type(old[x]), key_of(old[x]))].append(x)
        for y in pending_new:
            bucket = buckets.get((type(new[y]), key_of(new[y])))
            if bucket:
                moves[y] = bucket.popleft()
        return moves

    # Custom relations have no hashable identity; fall back to a scan over
    # the unmatched remainder only.
    available = list(pending_old)
    for y in pending_new:
        for i, x in enumerate(available):
            if equals(old[x], new[y]):
                moves[y] = x
                del available[i]
                break
    return moves
