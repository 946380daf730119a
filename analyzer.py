from typing import List, NamedTuple, Optional

import config

EQUAL, INSERT, DELETE = "equal", "insert", "delete"


class DiffOp(NamedTuple):
    op: str
    text: str


def _append(ops, op, lines):
    text = "".join(lines)
    if not text:
        return
    if ops and ops[-1].op == op:
        ops[-1] = DiffOp(op, ops[-1].text + text)
    else:
        ops.append(DiffOp(op, text))


def _shortest_edit(a, b, max_d):
    """
    Greedy Myers search. Returns the furthest-reaching x per diagonal before
    each round, or None if more than ``max_d`` edits are needed.
    """
    n, m = len(a), len(b)
    v = {1: 0}
    trace = []
    for d in range(max_d + 1):
        trace.append(dict(v))
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[k - 1] < v[k + 1]):
                x = v[k + 1]
            else:
                x = v[k - 1] + 1
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            v[k] = x
            if x >= n and y >= m:
                return trace
    return None


def _edit_script(a, b, trace):
    """Walk the trace back from the end into (op, line) pairs, in order."""
    x, y = len(a), len(b)
    script = []
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
            script.append((EQUAL, a[x]))
        if d > 0:
            if x == prev_x:
                script.append((INSERT, b[prev_y]))
            else:
                script.append((DELETE, a[prev_x]))
        x, y = prev_x, prev_y
    script.reverse()
    return script


def diff_texts(a: str, b: str, max_work: Optional[int] = None) -> List[DiffOp]:
    """
    Line-level diff of two snapshot contents.

    Lines keep their terminators, so joining every non-delete op gives ``b``
    back and joining every non-insert op gives ``a``. Within a changed run
    the deleted lines come first, then the inserted ones.

    Common leading and trailing lines are peeled off, then the rest is
    matched with Myers' O((N+M)D) algorithm. The edit distance D searched
    for is capped at ``max_work // (N+M)``; a region needing more edits than
    that is reported as one delete plus one insert.
    """
    if max_work is None:
        max_work = config.DIFF_MAX_WORK
    la = a.splitlines(keepends=True)
    lb = b.splitlines(keepends=True)

    head = 0
    while head < len(la) and head < len(lb) and la[head] == lb[head]:
        head += 1
    tail = 0
    while tail < len(la) - head and tail < len(lb) - head and la[-1 - tail] == lb[-1 - tail]:
        tail += 1
    mid_a = la[head:len(la) - tail]
    mid_b = lb[head:len(lb) - tail]

    ops = []
    _append(ops, EQUAL, la[:head])
    size = len(mid_a) + len(mid_b)
    trace = None
    if size:
        trace = _shortest_edit(mid_a, mid_b, min(size, max_work // size))
    if trace is None:
        _append(ops, DELETE, mid_a)
        _append(ops, INSERT, mid_b)
    else:
        deleted, inserted = [], []
        for op, line in _edit_script(mid_a, mid_b, trace):
            if op == DELETE:
                deleted.append(line)
            elif op == INSERT:
                inserted.append(line)
            else:
                _append(ops, DELETE, deleted)
                _append(ops, INSERT, inserted)
                deleted, inserted = [], []
                _append(ops, EQUAL, [line])
        _append(ops, DELETE, deleted)
        _append(ops, INSERT, inserted)
    _append(ops, EQUAL, la[len(la) - tail:])
    return ops


def summarize(ops: List[DiffOp]):
    added = sum(len(o.text.splitlines()) for o in ops if o.op == INSERT)
    removed = sum(len(o.text.splitlines()) for o in ops if o.op == DELETE)
    return {"added": added, "removed": removed, "changed": bool(added or removed)}
