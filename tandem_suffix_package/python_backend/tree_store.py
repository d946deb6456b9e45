'''Arena storage for suffix tree nodes.

All nodes live in one list owned by `TreeStore` and refer to each other by their index
in that list: children and suffix links are integers, never object references. Dropping
the list releases the whole tree at once.

Every edge label is stored on the node the edge leads into, as a `(edge_start, edge_end)`
pair of inclusive offsets into the text. The end is one of two kinds:

- `SHARED_END`: used by every leaf edge. It resolves to the store's `leaf_end`, which the
  builder advances once per phase so all leaves grow together.
- `OwnedEnd(value)`: a fixed end created when an edge is split. It belongs to the internal
  node that the split produced and never changes afterwards.

Classes:
    SharedEnd: Marker type for leaf edges that end at the shared leaf end.
    OwnedEnd: A fixed end offset owned by a single internal node.
    Node: A root, internal or leaf node.
    TreeStore: The node arena plus the shared leaf end.
'''
from ..errors import TreeStateError

ROOT = 0
UNSET_SUFFIX_INDEX = -1


class SharedEnd:
    """Marker for an edge that ends wherever the tree's leaves currently end."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "SHARED_END"


SHARED_END = SharedEnd()


class OwnedEnd:
    """A frozen end offset created by an edge split.

    Attributes:
        value (int): The inclusive end offset of the edge label.
    """
    __slots__ = ('value',)

    def __init__(self, value: int):
        self.value = value

    def __repr__(self) -> str:
        return f"OwnedEnd({self.value})"


class Node:
    """A node of the suffix tree.

    Attributes:
        edge_start (int): Start offset of the label on the edge into this node. -1 for the root.
        edge_end (SharedEnd | OwnedEnd | None): End of that label. None for the root.
        children (dict[int, int]): Maps the first byte of each outgoing edge to the child's index.
        suffix_link (int): Index of the node this node's suffix link points to.
        suffix_index (int): Start offset of the suffix a leaf spells, -1 for other nodes.
    """
    __slots__ = ('edge_start', 'edge_end', 'children', 'suffix_link', 'suffix_index')

    def __init__(self, edge_start: int, edge_end: 'SharedEnd | OwnedEnd | None'):
        self.edge_start = edge_start
        self.edge_end = edge_end
        self.children: dict[int, int] = {}
        # New internal nodes link to the root until an extension resolves them.
        self.suffix_link = ROOT
        self.suffix_index = UNSET_SUFFIX_INDEX

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def __repr__(self) -> str:
        return (f"Node(edge=({self.edge_start}, {self.edge_end!r}), children={sorted(self.children)}, "
                f"suffix_link={self.suffix_link}, suffix_index={self.suffix_index})")


class TreeStore:
    """Owns every node of one suffix tree.

    The store is writable while the builder runs, then frozen. After `release` it
    holds no nodes and refuses every access.

    Attributes:
        text (TextBuffer): The text the edge labels index into.
        nodes (list[Node]): The arena. Index 0 is the root.
        leaf_end (int): The offset every `SHARED_END` resolves to.
    """
    __slots__ = ('text', 'nodes', 'leaf_end', 'frozen', 'indexed', 'released')

    def __init__(self, text):
        self.text = text
        root = Node(-1, None)
        self.nodes: list[Node] = [root]
        self.leaf_end = -1
        self.frozen = False
        self.indexed = False
        self.released = False

    def new_node(self, edge_start: int, edge_end: SharedEnd | OwnedEnd) -> int:
        """Allocates a node and returns its index."""
        if self.frozen:
            raise TreeStateError("Cannot add nodes to a frozen tree.")
        self.nodes.append(Node(edge_start, edge_end))
        return len(self.nodes) - 1

    def node(self, index: int) -> Node:
        if self.released:
            raise TreeStateError("The tree has been released.")
        return self.nodes[index]

    def end_of(self, index: int) -> int:
        """Resolves the inclusive end offset of the edge into node `index`."""
        end = self.node(index).edge_end
        if end is SHARED_END:
            return self.leaf_end
        if end is None:
            return -1
        return end.value

    def edge_length(self, index: int) -> int:
        if index == ROOT:
            return 0
        return self.end_of(index) - self.node(index).edge_start + 1

    def edge_label(self, index: int) -> bytes:
        if index == ROOT:
            return b""
        return self.text.label(self.node(index).edge_start, self.end_of(index))

    def child(self, index: int, byte: int) -> int | None:
        return self.node(index).children.get(byte)

    def count_leaves(self, index: int = ROOT) -> int:
        """Counts the leaves in the subtree rooted at `index`."""
        count = 0
        stack = [index]
        while stack:
            current = self.node(stack.pop())
            if current.children:
                stack.extend(current.children.values())
            else:
                count += 1
        return count

    def freeze(self) -> None:
        """Stops further node allocation.

        Only `new_node` checks the flag. Node fields stay writable; query code
        reads them and never assigns to them.
        """
        self.frozen = True

    def release(self) -> None:
        """Drops the whole arena in one step.

        Ends are either the shared marker or owned by exactly one node, so dropping the
        list is the only teardown needed.
        """
        self.nodes = []
        self.frozen = True
        self.released = True

    def __len__(self) -> int:
        return len(self.nodes)

    def __repr__(self) -> str:
        state = "released" if self.released else ("frozen" if self.frozen else "building")
        return f"TreeStore(nodes={len(self.nodes)}, leaf_end={self.leaf_end}, {state})"
