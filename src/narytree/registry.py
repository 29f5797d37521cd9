# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Identity registry for tree nodes.

Maps integer identities to live nodes with O(1) lookup. Identities are
handed out from a counter that only grows, so an identity is never reused
within the lifetime of a registry, even after its node is removed.
"""

from __future__ import annotations

from typing import Iterator

from .exceptions import NoSuchNodeError
from .node import TreeNode


class IdentityRegistry:
    """Identity to node mapping owned by a Tree.

    Example:
        >>> registry = IdentityRegistry()
        >>> root = TreeNode('R')
        >>> registry.assign(root)
        0
        >>> registry.resolve(0) is root
        True
    """

    __slots__ = ('_nodes', '_next_identity')

    def __init__(self) -> None:
        self._nodes: dict[int, TreeNode] = {}
        self._next_identity = 0

    def __repr__(self) -> str:
        return f"IdentityRegistry({sorted(self._nodes)})"

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, identity: object) -> bool:
        try:
            return identity in self._nodes
        except TypeError:
            return False

    def __iter__(self) -> Iterator[int]:
        return iter(self._nodes)

    @property
    def next_identity(self) -> int:
        """The identity the next registered node will receive."""
        return self._next_identity

    def assign(self, subtree: TreeNode) -> int:
        """Assign fresh identities to a subtree in pre-order and register them.

        Args:
            subtree: Root of a subtree not yet registered.

        Returns:
            The identity assigned to the subtree root.
        """
        for node in subtree.iter_preorder():
            node.identity = self._next_identity
            self._nodes[node.identity] = node
            self._next_identity += 1
        return subtree.identity

    def release(self, subtree: TreeNode) -> None:
        """Deregister every node of a subtree, children before parents."""
        for node in subtree.iter_postorder():
            del self._nodes[node.identity]

    def resolve(self, identity: int) -> TreeNode:
        """Return the node registered under identity.

        Raises:
            NoSuchNodeError: If no live node has this identity.
        """
        try:
            return self._nodes[identity]
        except (KeyError, TypeError):
            raise NoSuchNodeError(identity) from None
