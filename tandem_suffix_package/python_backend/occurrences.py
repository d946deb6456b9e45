'''Collects the suffix offsets of every leaf below a node.'''
from .tree_store import TreeStore


def collect_occurrences(store: TreeStore, index: int) -> list[int]:
    """Returns the suffix index of every leaf in the subtree rooted at `index`.

    Results come out in depth-first order, children visited in insertion order.
    A leaf on its own yields a single offset.
    """
    occurrences = []
    stack = [index]
    while stack:
        node = store.node(stack.pop())
        if node.children:
            # Reversed so children pop in insertion order.
            stack.extend(reversed(list(node.children.values())))
        else:
            occurrences.append(node.suffix_index)
    return occurrences
