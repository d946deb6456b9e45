'''Build-once, query-many suffix tree over a fixed text.

This module provides `build`, which validates a text and constructs its suffix tree
with Ukkonen's algorithm, and `SuffixTree`, the read-only handle queries run against.

Queries return plain data:
- `SuffixTree.search(pattern)` gives a `SearchResult` with every occurrence offset.
- `SuffixTree.tandem_repeats(occurrences, pattern_length)` gives the back-to-back runs.
- `SuffixTree.analyze(pattern)` bundles both into a `PatternReport`.
- `SuffixTree.count_many(patterns)` counts occurrences for a batch of patterns as a numpy array.

Typical usage:
    >>> tree = build(b"AABAACAADAABAAABAA")
    >>> sorted(tree.search(b"AAB").occurrences)
    [0, 9, 13]
'''
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np
from loguru import logger

from .config import DEFAULT_CONFIG, SuffixTreeConfig
from .errors import AllocationFailure, PatternEmpty, PatternTooLarge, TreeStateError
from .python_backend.matcher import match
from .python_backend.occurrences import collect_occurrences
from .python_backend.online_suffix import build_tree
from .python_backend.tandem import find_tandem_repeats, merge_sort
from .python_backend.text_buffer import TextBuffer, to_bytes
from .python_backend.tree_store import ROOT, TreeStore


@dataclass(frozen=True)
class SearchResult:
    """Outcome of searching one pattern.

    Attributes:
        found: True if the pattern occurs in the text.
        occurrences: Start offsets of every occurrence, in tree order.
        count: Number of occurrences, always `len(occurrences)`.
    """
    found: bool
    occurrences: List[int] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.occurrences)


@dataclass(frozen=True)
class PatternReport:
    """Search result, sorted positions and tandem repeats for one pattern, as plain data."""
    pattern_length: int
    found: bool
    occurrences: List[int]
    sorted_positions: List[int]
    tandem_repeats: List[Tuple[int, int]]


class SuffixTree:
    '''A frozen suffix tree and the queries it answers.

    Instances come from `build`. The underlying store is never mutated after
    construction; `release` drops it, after which every query raises `TreeStateError`.

    Attributes:
        config (SuffixTreeConfig): Limits and encoding the tree was built with.
    '''
    def __init__(self, store: TreeStore, config: SuffixTreeConfig = DEFAULT_CONFIG):
        self._store = store
        self.config = config

    @property
    def text(self) -> bytes:
        """The indexed text, without its sentinel."""
        return self._live_store().text.text

    def __len__(self) -> int:
        """Length of the indexed text including the sentinel."""
        return len(self._live_store().text)

    @property
    def node_count(self) -> int:
        return len(self._live_store())

    def _live_store(self) -> TreeStore:
        if self._store.released:
            raise TreeStateError("The tree has been released.")
        return self._store

    def _pattern_bytes(self, pattern) -> bytes:
        raw = to_bytes(pattern, self.config.encoding)
        if not raw:
            raise PatternEmpty("Cannot search for an empty pattern.")
        limit = self.config.max_pattern_length
        if limit is not None and len(raw) > limit:
            raise PatternTooLarge(len(raw), limit)
        return raw

    def search(self, pattern) -> SearchResult:
        """Finds every occurrence of `pattern` in the text.

        Args:
            pattern: The bytes (or str) to look for. Matching is exact and case-sensitive.

        Returns:
            A `SearchResult`. A pattern that does not occur gives `found=False` and
            no occurrences; that is not an error.

        Raises:
            PatternEmpty: If the pattern is empty.
            PatternTooLarge: If the pattern exceeds `config.max_pattern_length`.
        """
        raw = self._pattern_bytes(pattern)
        store = self._live_store()

        if store.text.sentinel in raw:
            # The sentinel terminates the tree, it is not part of the text.
            return SearchResult(False)

        outcome = match(store, raw)
        if not outcome.matched:
            return SearchResult(False)
        try:
            occurrences = collect_occurrences(store, outcome.node)
        except MemoryError as e:
            logger.error(f"Ran out of memory collecting occurrences of a {len(raw)}-byte pattern")
            raise AllocationFailure("Out of memory while collecting occurrences.") from e
        return SearchResult(True, occurrences)

    def contains(self, pattern) -> bool:
        """Returns True if `pattern` is a substring of the text."""
        raw = self._pattern_bytes(pattern)
        store = self._live_store()
        if store.text.sentinel in raw:
            return False
        return match(store, raw).matched

    def count(self, pattern) -> int:
        """Returns how many times `pattern` occurs in the text."""
        raw = self._pattern_bytes(pattern)
        store = self._live_store()
        if store.text.sentinel in raw:
            return 0
        outcome = match(store, raw)
        return store.count_leaves(outcome.node) if outcome.matched else 0

    def count_many(self, patterns: Iterable) -> np.ndarray:
        """Counts occurrences for a batch of patterns.

        Args:
            patterns: Patterns as bytes or str.

        Returns:
            A numpy integer array with one count per pattern, in input order.
        """
        patterns = list(patterns)
        if not patterns:
            return np.array([], dtype=np.int64)
        return np.array([self.count(p) for p in patterns], dtype=np.int64)

    @staticmethod
    def tandem_repeats(occurrences: Iterable[int], pattern_length: int) -> List[Tuple[int, int]]:
        """Returns the `(start, end)` spans of back-to-back runs in `occurrences`.

        See `python_backend.tandem.find_tandem_repeats`.
        """
        return find_tandem_repeats(occurrences, pattern_length)

    def analyze(self, pattern) -> PatternReport:
        """Searches `pattern` and reports its sorted positions and tandem repeats."""
        raw = self._pattern_bytes(pattern)
        result = self.search(raw)
        positions = merge_sort(result.occurrences)
        repeats = find_tandem_repeats(positions, len(raw)) if result.found else []
        logger.debug(f"Pattern of length {len(raw)}: {result.count} occurrences, "
                     f"{len(repeats)} tandem repeat runs")
        return PatternReport(
            pattern_length=len(raw),
            found=result.found,
            occurrences=result.occurrences,
            sorted_positions=positions,
            tandem_repeats=repeats,
        )

    def count_leaves(self, node: Optional[int] = None) -> int:
        """Counts leaves under `node` (the whole tree by default).

        A complete tree has one leaf per suffix, i.e. `len(self)` leaves.
        """
        store = self._live_store()
        return store.count_leaves(ROOT if node is None else node)

    def edges(self) -> Iterator[Tuple[int, bytes, int]]:
        """Yields `(depth, label, suffix_index)` for every edge, depth first.

        Depth is the number of edges from the root to the edge's lower node.
        Children are visited in ascending byte order so the walk is deterministic.
        """
        store = self._live_store()
        stack = [(child, 1) for _, child in sorted(store.node(ROOT).children.items(), reverse=True)]
        while stack:
            index, depth = stack.pop()
            node = store.node(index)
            yield depth, store.edge_label(index), node.suffix_index
            for _, child in sorted(node.children.items(), reverse=True):
                stack.append((child, depth + 1))

    def render(self) -> str:
        """Returns a text drawing of the tree, one edge per line.

        Leaf lines end with the leaf's suffix index in brackets.
        """
        store = self._live_store()
        lines = ["Suffix Tree (Root):"]

        def push_children(index: int, prefix: str) -> None:
            children = [child for _, child in sorted(store.node(index).children.items())]
            for i, child in reversed(list(enumerate(children))):
                stack.append((child, prefix, i == len(children) - 1))

        # Explicit stack: a text of one repeated byte is as deep as it is long.
        stack: list = []
        push_children(ROOT, "")
        while stack:
            child, prefix, is_last_child = stack.pop()
            connector = "└── " if is_last_child else "├── "
            node = store.node(child)
            label = store.edge_label(child).decode("latin-1")
            suffix_info = f" [{node.suffix_index}]" if node.is_leaf else ""
            lines.append(f"{prefix}{connector}'{label}'{suffix_info}")
            push_children(child, prefix + ("    " if is_last_child else "│   "))
        return "\n".join(lines)

    def display(self) -> None:
        """Prints `render()` for debugging."""
        print(self.render())

    def release(self) -> None:
        """Drops every node of the tree at once. Further queries raise `TreeStateError`."""
        if not self._store.released:
            self._store.release()

    @property
    def released(self) -> bool:
        return self._store.released

    def __enter__(self) -> 'SuffixTree':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        if self._store.released:
            return "SuffixTree(released)"
        return f"SuffixTree(length={len(self)}, nodes={self.node_count})"


def build(text, max_length: Optional[int] = None, config: Optional[SuffixTreeConfig] = None) -> SuffixTree:
    """Validates `text` and builds its suffix tree.

    Args:
        text: The text to index, as bytes or str. Must not contain the sentinel.
        max_length: Maximum text length in bytes. Defaults to `config.max_text_length`.
        config: Limits, sentinel and encoding. Defaults to `DEFAULT_CONFIG`.

    Returns:
        A frozen `SuffixTree`.

    Raises:
        InputTooLarge: If the text is longer than the maximum.
        InvalidSentinel: If the sentinel occurs in the text.
        AllocationFailure: If memory runs out mid-build. No partial tree is returned.
    """
    config = config or DEFAULT_CONFIG
    buffer = TextBuffer(text, max_length=max_length, config=config)
    try:
        store = build_tree(buffer)
    except MemoryError as e:
        logger.error(f"Ran out of memory building a suffix tree over {len(buffer)} bytes")
        raise AllocationFailure(f"Out of memory while building a suffix tree over {len(buffer)} bytes.") from e
    return SuffixTree(store, config)


# --- Example Usage ---
if __name__ == '__main__':
    from .logger import setup_logger

    setup_logger(debug=True)

    sample_text = "AABAACAADAABAAABAA"
    sample_tree = build(sample_text)
    sample_tree.display()

    for sample_pattern in ["AA", "AABA", "AAE"]:
        report = sample_tree.analyze(sample_pattern)
        print(f"\nPattern <{sample_pattern}> (length {report.pattern_length}) found: {report.found}")
        print(f"  Positions in increasing order: {report.sorted_positions}")
        print(f"  Tandem repeats: {report.tandem_repeats}")

    print(f"\nBatch counts: {sample_tree.count_many(['A', 'B', 'C', 'D', 'AAB'])}")
    sample_tree.release()
