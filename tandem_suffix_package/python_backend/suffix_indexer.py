'''Assigns each leaf the start offset of the suffix it spells.'''
from ..errors import TreeStateError
from .tree_store import ROOT, TreeStore


def assign_suffix_indices(store: TreeStore) -> None:
    """Sets `suffix_index = len(text) - depth` on every leaf, depth counted in bytes.

    Internal nodes keep -1. Must run exactly once, after the final phase.

    Raises:
        TreeStateError: If construction has not finished or indices were already assigned.
    """
    if store.indexed:
        raise TreeStateError("Suffix indices have already been assigned.")
    text_length = len(store.text)
    if store.leaf_end != text_length - 1:
        raise TreeStateError("Cannot index a tree before its last phase has run.")

    nodes = store.nodes
    stack = [(ROOT, 0)]
    while stack:
        index, depth = stack.pop()
        node = nodes[index]
        if node.children:
            for child in node.children.values():
                stack.append((child, depth + store.edge_length(child)))
        elif index != ROOT:
            node.suffix_index = text_length - depth

    store.indexed = True
