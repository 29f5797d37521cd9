# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tree node class.

TreeNode is internal to the package: nodes are created, linked and
discarded only by Tree, and callers address them through integer
identities instead of holding node references.
"""

from __future__ import annotations

import weakref
from typing import Any


class TreeNode:
    """A vertex of a Tree.

    Each node has:
    - value: The stored value
    - identity: Integer handle assigned by the tree's registry (-1 until assigned)
    - children: Ordered list of child nodes, owned by this node
    - parent: The containing node, held through a weak reference

    Example:
        >>> root = TreeNode('R')
        >>> child = root.add_child('A')
        >>> child.parent is root
        True
    """

    __slots__ = ('value', 'identity', 'children', '_parent', '__weakref__')

    def __init__(self, value: Any, parent: TreeNode | None = None) -> None:
        """Initialize a TreeNode.

        Args:
            value: The node's value.
            parent: The node whose children list will contain this node,
                or None for a root.
        """
        self.value = value
        self.identity = -1
        self.children: list[TreeNode] = []
        self._parent = weakref.ref(parent) if parent is not None else None

    def __repr__(self) -> str:
        return (
            f"TreeNode({self.identity}, value={self.value!r}, "
            f"children={len(self.children)})"
        )

    @property
    def parent(self) -> TreeNode | None:
        """The parent node, or None for a root or a detached node."""
        if self._parent is None:
            return None
        return self._parent()

    @property
    def is_leaf(self) -> bool:
        """True if this node has no children."""
        return not self.children

    def add_child(self, value: Any) -> TreeNode:
        """Create a child holding value, append it last and return it."""
        child = TreeNode(value, parent=self)
        self.children.append(child)
        return child

    def detach_child(self, child: TreeNode) -> int:
        """Remove child from this node's children and return its former position.

        Raises:
            ValueError: If child is not a child of this node.
        """
        for idx, node in enumerate(self.children):
            if node is child:
                del self.children[idx]
                child._parent = None
                return idx
        raise ValueError(f"{child!r} is not a child of {self!r}")

    def iter_preorder(self):
        """Yield this node and its descendants, parents before children."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_postorder(self):
        """Yield descendants before this node, children left to right."""
        stack: list[tuple[TreeNode, bool]] = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded:
                yield node
                continue
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))
