"""
Arena-backed binary tree container and traversal helpers.
"""
from __future__ import annotations

import copy
from typing import Generic, Iterator, List, Optional, Tuple, TypeVar

P = TypeVar("P")


class TreeNode(Generic[P]):
    """Arena slot holding a payload and the handles of its children.

    Args:
        payload: Arbitrary object owned by the node.
    """

    __slots__ = ("payload", "left", "right")

    def __init__(self, payload: P):
        self.payload: P = payload
        self.left: Optional[int] = None
        self.right: Optional[int] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None


class BinaryTree(Generic[P]):
    """Binary tree whose nodes live in a flat list and refer to each other by index.

    The root always has handle ``0``. Children are only ever appended, so a
    handle stays valid for the lifetime of the tree.
    """

    __slots__ = ("nodes",)

    ROOT = 0

    def __init__(self, root_payload: P):
        self.nodes: List[TreeNode[P]] = [TreeNode(root_payload)]

    def add_node(self, payload: P) -> int:
        """Allocate a detached leaf and return its handle."""
        self.nodes.append(TreeNode(payload))
        return len(self.nodes) - 1

    def payload(self, handle: int) -> P:
        return self.nodes[handle].payload

    def is_leaf(self, handle: int) -> bool:
        return self.nodes[handle].is_leaf

    def left(self, handle: int) -> Optional[int]:
        return self.nodes[handle].left

    def right(self, handle: int) -> Optional[int]:
        return self.nodes[handle].right

    def attach_children(self, handle: int, left_payload: P, right_payload: P) -> Tuple[int, int]:
        """Turn a leaf into an internal node with two fresh leaf children.

        Args:
            handle: The leaf being split.
            left_payload: Payload of the new left child.
            right_payload: Payload of the new right child.

        Returns:
            The handles `(left, right)` of the new children.

        Raises:
            ValueError: If the node already has children.
        """
        node = self.nodes[handle]
        if not node.is_leaf:
            raise ValueError(f"Node {handle} already has children.")
        left = self.add_node(left_payload)
        right = self.add_node(right_payload)
        node.left = left
        node.right = right
        return left, right

    def _walk(self) -> Iterator[Tuple[int, int]]:
        """Depth-first `(handle, depth)` pairs over nodes reachable from the root."""
        stack = [(self.ROOT, 1)]
        while stack:
            handle, depth = stack.pop()
            yield handle, depth
            node = self.nodes[handle]
            if not node.is_leaf:
                stack.append((node.right, depth + 1))
                stack.append((node.left, depth + 1))

    def leaves(self) -> Iterator[int]:
        for handle, _ in self._walk():
            if self.nodes[handle].is_leaf:
                yield handle

    def size(self) -> int:
        return sum(1 for _ in self._walk())

    def num_leaves(self) -> int:
        return sum(1 for _ in self.leaves())

    def max_depth(self) -> int:
        """Length of the longest root-to-leaf path, counted in nodes (a lone root is 1)."""
        return max(depth for _, depth in self._walk())

    def copy(self) -> "BinaryTree[P]":
        return copy.deepcopy(self)

    def draw(self) -> str:
        """Render the tree as indented text, one node per line."""
        lines = []
        for handle, depth in self._walk():
            lines.append("    " * (depth - 1) + str(self.nodes[handle].payload))
        return "\n".join(lines)

    def __len__(self) -> int:
        return self.size()
