"""Flat token walking over a buffer of consecutive values.

This does not build trees.  It only keeps a stack of how many children
each open Array/Map still expects, which is enough to report a nesting
depth per token and to tell a clean end of stream from one that stops
inside a container.
"""

from __future__ import annotations

from typing import Iterator, List, Tuple

from ._constants import MAX_DEPTH
from ._core import BytesLike, Value, _as_view, child_count, decode_at
from ._errors import REASON_DEPTH, EndOfStream, InvalidEncoding, NeedMoreData


def iter_tokens(data: BytesLike,
                max_depth: int = MAX_DEPTH) -> Iterator[Tuple[int, int, Value]]:
    """Yield (offset, depth, value) for every token in data.

    Depth 0 is a top-level value; the elements of a top-level array sit at
    depth 1, and so on.  Iteration stops when the buffer ends on a value
    boundary with no container left open.  InvalidEncoding and NeedMoreData
    from the decoder propagate unchanged.
    """
    view = _as_view(data)
    off = 0
    pending: List[int] = []

    while True:
        try:
            value, end = decode_at(view, off)
        except EndOfStream:
            if pending:
                # The announced children never arrived.
                raise NeedMoreData(None, "stream ended with {} open container(s)".format(len(pending)))
            return

        yield off, len(pending), value
        off = end

        if pending:
            pending[-1] -= 1
        n = child_count(value)
        if n:
            if len(pending) >= max_depth:
                raise InvalidEncoding(REASON_DEPTH,
                                      "nesting exceeds max_depth={}".format(max_depth))
            pending.append(n)
        while pending and pending[-1] == 0:
            pending.pop()
