'''Pure Python suffix tree construction using Ukkonen's algorithm.

This module provides `SuffixTreeBuilder`, which grows a `TreeStore` one text position
(one *phase*) at a time, and `build_tree`, which runs every phase, assigns suffix indices
and freezes the result.

Construction is amortized O(n) for a text of length n: leaf edges share one end
offset so they all lengthen for free each phase (Rule 1), the skip/count walk down
never rescans characters already verified, and a Rule 3 match ends a phase early.

Classes:
    SuffixTreeBuilder: Holds the active point and the pending-extension counter.
'''
from loguru import logger

from .suffix_indexer import assign_suffix_indices
from .text_buffer import TextBuffer
from .tree_store import ROOT, SHARED_END, OwnedEnd, TreeStore


class SuffixTreeBuilder:
    """Runs Ukkonen's algorithm over a single `TextBuffer`.

    The construction cursor lives on the builder instance, so two builds never
    share state. Nothing outside the builder sees it before `run` returns.

    Attributes:
        text (TextBuffer): The sentinel-terminated text being indexed.
        store (TreeStore): The tree being built.
        active_node (int): (Ukkonen) Index of the node extensions resume from.
        active_edge (int): (Ukkonen) Offset in the text of the first byte of the edge the
                           active point is on. If `active_length` is 0, this is the
                           offset of the byte about to be added from `active_node`.
        active_length (int): (Ukkonen) How many bytes along `active_edge` the active point is.
        remainder (int): (Ukkonen) Suffixes still waiting to be added explicitly.
        last_new_node (int | None): Internal node created in this phase that still
                                    waits for its suffix link.
    """
    __slots__ = ('text', 'store', 'active_node', 'active_edge', 'active_length',
                 'remainder', 'last_new_node')

    def __init__(self, text: TextBuffer):
        self.text = text
        self.store = TreeStore(text)
        self.active_node = ROOT
        self.active_edge = -1
        self.active_length = 0
        self.remainder = 0
        self.last_new_node: int | None = None

    def walk_down(self, next_node: int) -> bool:
        """Skip/count trick: moves the active point below `next_node` if it lies past that edge.

        Returns:
            True if the active point moved and the extension must be retried.
        """
        edge_length = self.store.edge_length(next_node)
        if self.active_length >= edge_length:
            self.active_edge += edge_length
            self.active_length -= edge_length
            self.active_node = next_node
            return True
        return False

    def extend(self, pos: int) -> None:
        """Runs phase `pos`: adds `text[pos]` to every suffix that still needs it.

        Args:
            pos (int): Offset of the byte being added.
        """
        store = self.store
        data = self.text.data
        nodes = store.nodes

        # Rule 1: every existing leaf now ends at pos.
        store.leaf_end = pos
        self.remainder += 1
        self.last_new_node = None

        while self.remainder > 0:
            if self.active_length == 0:
                self.active_edge = pos

            active = nodes[self.active_node]
            edge_byte = data[self.active_edge]
            next_node = active.children.get(edge_byte)

            if next_node is None:
                # Rule 2: no edge starts with this byte, hang a new leaf off active_node.
                active.children[edge_byte] = store.new_node(pos, SHARED_END)

                if self.last_new_node is not None:
                    nodes[self.last_new_node].suffix_link = self.active_node
                    self.last_new_node = None
            else:
                if self.walk_down(next_node):
                    continue  # Retry the same extension from the new active_node.

                following = nodes[next_node]
                if data[following.edge_start + self.active_length] == data[pos]:
                    # Rule 3: this suffix and every shorter one are already implicit.
                    if self.last_new_node is not None and self.active_node != ROOT:
                        nodes[self.last_new_node].suffix_link = self.active_node
                        self.last_new_node = None
                    self.active_length += 1
                    break

                # Rule 2 (split): the path leaves the edge mid-way.
                split_end = OwnedEnd(following.edge_start + self.active_length - 1)
                split = store.new_node(following.edge_start, split_end)
                active.children[edge_byte] = split

                split_node = nodes[split]
                split_node.children[data[pos]] = store.new_node(pos, SHARED_END)
                following.edge_start += self.active_length
                split_node.children[data[following.edge_start]] = next_node

                if self.last_new_node is not None:
                    nodes[self.last_new_node].suffix_link = split
                self.last_new_node = split

            self.remainder -= 1

            if self.active_node == ROOT and self.active_length > 0:
                self.active_length -= 1
                self.active_edge = pos - self.remainder + 1
            elif self.active_node != ROOT:
                self.active_node = nodes[self.active_node].suffix_link

    def run(self) -> TreeStore:
        """Runs every phase and returns the finished (not yet indexed) store."""
        for pos in range(len(self.text)):
            self.extend(pos)
        return self.store


def build_tree(text: TextBuffer) -> TreeStore:
    """Builds, indexes and freezes the suffix tree of `text`.

    Suffix indices are assigned only after the last phase, since a node is known
    to be a leaf only once construction is complete.

    Args:
        text: The sentinel-terminated text.

    Returns:
        A frozen `TreeStore` ready for queries.

    Raises:
        MemoryError: If memory runs out. The partial store is released first.
    """
    builder = SuffixTreeBuilder(text)
    try:
        store = builder.run()
        assign_suffix_indices(store)
    except MemoryError:
        # A half-built tree is inconsistent; drop it before the error propagates.
        builder.store.release()
        raise
    store.freeze()
    logger.debug(f"Built suffix tree over {len(text)} bytes: {len(store)} nodes, "
                 f"{store.count_leaves()} leaves")
    return store
