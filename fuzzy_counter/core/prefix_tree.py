# prefix_tree.py
# Adaptive prefix tree keyed by fixed-width chunks of masked strings.
# Each node owns the entries that matched the path so far but have not been
# pushed deeper yet. Lookup only walks exact chunk keys, so descent is
# O(len / step) and the fuzzy comparison only runs against one subtree.

from __future__ import annotations

from collections import deque
from typing import Any, Dict, Iterator, List, Optional, Tuple

from fuzzy_counter.core.entry import Entry
from fuzzy_counter.errors import ConfigurationError


def chunk_at(masked: str, start: int, step: int) -> Optional[str]:
    """Return masked[start:start+step], or None when the string is too short to have that chunk."""
    end = start + step
    if len(masked) < end:
        return None
    return masked[start:end]


class PrefixNode:
    """
    A single node in the tree.
    start: offset where this node's discriminating chunk begins
    step: chunk width (same at every depth)
    children: chunk -> PrefixNode
    pending: entries held here, either too short to chunk at `start` ("stunted")
             or not promoted yet
    """

    __slots__ = ("start", "step", "children", "pending")

    def __init__(self, start: int, step: int, pending: Optional[List[Entry]] = None) -> None:
        self.start = start
        self.step = step
        self.children: Dict[str, PrefixNode] = {}
        self.pending: List[Entry] = pending if pending is not None else []

    def chunk(self, masked: str) -> Optional[str]:
        return chunk_at(masked, self.start, self.step)

    def __repr__(self) -> str:
        return (
            f"PrefixNode(start={self.start}, pending={len(self.pending)}, "
            f"children={len(self.children)})"
        )


class PrefixTree:
    """
    Chunk trie used by the FuzzyCounter.

    Growth policy:
     - leaf_limit == 0: split on insert, every entry long enough to have a chunk
       at the node's offset is routed into a child right away
     - leaf_limit > 0: a node keeps up to leaf_limit pending entries and only
       redistributes them once that limit is exceeded
    Both keep every entry reachable from the terminal node of its masked form.
    """

    def __init__(self, step: int, leaf_limit: int = 0) -> None:
        if isinstance(step, bool) or not isinstance(step, int) or step < 1:
            raise ConfigurationError(f"chunk width must be an integer >= 1, got {step!r}")
        if isinstance(leaf_limit, bool) or not isinstance(leaf_limit, int) or leaf_limit < 0:
            raise ConfigurationError(f"leaf limit must be an integer >= 0, got {leaf_limit!r}")
        self.step = step
        self.leaf_limit = leaf_limit
        self.root = PrefixNode(0, step)
        self._size = 0

    # lookup -------------------------------------------------------------
    def descend(self, masked: str) -> PrefixNode:
        """Follow exact chunk keys from the root and return the deepest matching node. Never mutates."""
        node = self.root
        while True:
            key = node.chunk(masked)
            if key is None:
                return node
            nxt = node.children.get(key)
            if nxt is None:
                return node
            node = nxt

    # insertion/growth ----------------------------------------------------
    def insert(self, node: PrefixNode, entry: Entry) -> None:
        """
        Add entry to node and redistribute node.pending into children.
        Routing into an existing child is itself an insert, handled through a
        FIFO work queue instead of recursion so very deep trees (step=1 on
        long lines) stay within the interpreter's stack.
        """
        self._size += 1
        work = deque([(node, entry)])
        while work:
            n, e = work.popleft()
            n.pending.append(e)
            if self.leaf_limit and len(n.pending) <= self.leaf_limit:
                continue
            work.extend(self._grow(n))

    def _grow(self, node: PrefixNode) -> List[Tuple[PrefixNode, Entry]]:
        """
        Move every long-enough pending entry of node one level down.
        New chunks get a fresh child holding exactly that entry; entries whose
        chunk already has a child are returned for a follow-up insert.
        """
        stunted: List[Entry] = []
        deferred: List[Tuple[PrefixNode, Entry]] = []
        for e in node.pending:
            key = node.chunk(e.masked)
            if key is None:
                stunted.append(e)
                continue
            child = node.children.get(key)
            if child is None:
                node.children[key] = PrefixNode(node.start + node.step, node.step, [e])
            else:
                deferred.append((child, e))
        node.pending = stunted
        return deferred

    # traversal -----------------------------------------------------------
    def collect(self, node: PrefixNode) -> List[Entry]:
        """
        Every entry held at or beneath node: node.pending first, then the
        children's entries. Sibling order is not a contract.
        """
        out: List[Entry] = []
        stack = [node]
        while stack:
            n = stack.pop()
            out.extend(n.pending)
            stack.extend(n.children.values())
        return out

    def entries(self) -> List[Entry]:
        return self.collect(self.root)

    def nodes(self) -> Iterator[Tuple[str, PrefixNode]]:
        """Yield (path, node) for every node, path being the concatenated chunk keys."""
        stack = [("", self.root)]
        while stack:
            path, n = stack.pop()
            yield path, n
            for key, child in n.children.items():
                stack.append((path + key, child))

    # convenience/debugging -------------------------------------------------
    def __len__(self) -> int:
        return self._size

    def depth(self) -> int:
        """Number of chunk levels below the root."""
        return max((n.start // self.step for _, n in self.nodes()), default=0)

    def verify(self) -> None:
        """
        Check the prefix invariant: every entry under a node starts with the
        chunk path from the root to that node. Raises AssertionError on the
        first violation (a defect, never an input problem).
        """
        for path, n in self.nodes():
            if len(path) != n.start:
                raise AssertionError(f"node at {path!r} has start {n.start}")
            for e in self.collect(n):
                if not e.masked.startswith(path):
                    raise AssertionError(f"entry {e.masked!r} reachable under {path!r}")

    def as_dict(self, node: Optional[PrefixNode] = None) -> Dict[str, Any]:
        """Nested plain-dict view of the tree (masked forms only). For inspection, not runtime."""
        n = node or self.root
        return {
            "start": n.start,
            "pending": [e.masked for e in n.pending],
            "children": {k: self.as_dict(c) for k, c in n.children.items()},
        }
