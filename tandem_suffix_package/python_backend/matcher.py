'''Walks a finished suffix tree against a query pattern.

The walk reports whether the pattern is a substring of the text and, if so, the
node whose incoming edge the pattern ends on. Every occurrence of the pattern is
a leaf somewhere beneath that node.
'''
from dataclasses import dataclass

from .tree_store import ROOT, TreeStore


@dataclass(frozen=True)
class MatchOutcome:
    """Result of matching one pattern.

    Attributes:
        matched: True if the pattern occurs in the text.
        node: Index of the node the match ended under, or None on no match.
    """
    matched: bool
    node: int | None = None


NO_MATCH = MatchOutcome(False)


def match(store: TreeStore, pattern: bytes) -> MatchOutcome:
    """Matches `pattern` from the root, byte by byte, exact and case-sensitive.

    Ending mid-edge and ending exactly at an edge boundary both count as a match.

    Args:
        store: A frozen, indexed tree.
        pattern: A non-empty byte pattern.

    Returns:
        `MatchOutcome(True, node)` or `NO_MATCH`.
    """
    data = store.text.data
    pattern_length = len(pattern)
    if pattern_length > len(data):
        return NO_MATCH

    current = ROOT
    idx = 0
    while True:
        child = store.child(current, pattern[idx])
        if child is None:
            return NO_MATCH

        node = store.node(child)
        start = node.edge_start
        end = store.end_of(child)
        # Compare the remaining pattern against this edge's label.
        k = start
        while k <= end and idx < pattern_length:
            if data[k] != pattern[idx]:
                return NO_MATCH
            k += 1
            idx += 1

        if idx == pattern_length:
            return MatchOutcome(True, child)
        current = child
