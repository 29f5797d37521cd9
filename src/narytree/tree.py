# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tree - A generic N-ary tree with identity-based access.

This module provides the Tree class, the container at the heart of the
narytree library. Nodes are never handed out: every node receives an integer
identity when it is created, and all reads and mutations go through those
identities.

Key Features:
    - **Identity access**: O(1) lookup of any node by its integer identity
    - **Ownership-safe mutation**: nodes are created already linked, and
      removing a node removes and deregisters its whole subtree
    - **Stable identities**: assigned in pre-order, never reused
    - **Text serialization**: lossless line-oriented format, see codec

Example:
    Basic usage::

        tree = Tree(str)
        root = tree.set_root('R')
        a = tree.append_child(root, 'A')
        tree.append_child(root, 'B')
        tree.append_child(a, 'C')

        tree.get_children(root)  # [1, 2]
        tree[a]                  # 'A'
        print(tree.serialize())

    With a custom value type::

        tree = Tree(StoryNode, root=StoryNode('start', 'You wake up.'))
"""

from __future__ import annotations

from typing import Any, Iterator

from .contract import ValueCodec, check_value, check_value_type
from .exceptions import AlreadyInitializedError, IllegalOperationError
from .node import TreeNode
from .registry import IdentityRegistry


class Tree:
    """An N-ary tree of values of a single type.

    Tree provides:
    - set_root(value) / append_child(parent, value): create nodes, returning identities
    - remove_subtree(identity): delete a node and all its descendants
    - get_value(identity) / tree[identity]: read values
    - get_children(identity) / get_parent(identity): navigate
    - serialize() / Tree.deserialize(text, value_type): text round trip

    The value type is checked once at construction with an encode/decode
    round trip of its default instance. Every inserted value is checked
    the same way and must encode to a single line.

    Attributes:
        value_type: The type of the values stored in this tree.

    Example:
        >>> tree = Tree(int, root=1)
        >>> child = tree.append_child(tree.root_identity, 2)
        >>> tree.get_children(tree.root_identity) == [child]
        True
    """

    __slots__ = ('value_type', '_codec', '_root', '_registry')

    def __init__(self, value_type: type = str, root: Any = None) -> None:
        """Initialize a Tree.

        Args:
            value_type: Type of the stored values. Builtin scalars (str, int,
                float, bool) and TreeValue implementations are accepted.
            root: Optional value for the root node. If None, the tree starts
                empty and set_root() creates the root later.

        Raises:
            IncompatibleValueTypeError: If value_type fails the round trip check,
                or root is not an instance of value_type.
            InvalidValueError: If root cannot be stored on a single line.
        """
        self._codec: ValueCodec = check_value_type(value_type)
        self.value_type = value_type
        self._root: TreeNode | None = None
        self._registry = IdentityRegistry()

        if root is not None:
            self.set_root(root)

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        """Return string representation showing type and size."""
        return f"Tree({self.value_type.__name__}, nodes={len(self._registry)})"

    def __len__(self) -> int:
        """Return the number of live nodes."""
        return len(self._registry)

    def __contains__(self, identity: object) -> bool:
        """Check if identity names a live node."""
        return identity in self._registry

    def __iter__(self) -> Iterator[int]:
        """Iterate over node identities in pre-order."""
        if self._root is None:
            return iter(())
        return (node.identity for node in self._root.iter_preorder())

    def __getitem__(self, identity: int) -> Any:
        """Get the value of a node.

        Raises:
            NoSuchNodeError: If identity is not a live node.
        """
        return self._registry.resolve(identity).value

    @property
    def codec(self) -> ValueCodec:
        """The value codec validated for this tree's value type."""
        return self._codec

    @property
    def is_empty(self) -> bool:
        """True if the tree has no root."""
        return self._root is None

    # ==================== Core API ====================

    def set_root(self, value: Any) -> int:
        """Create the root node.

        Args:
            value: The root value.

        Returns:
            Identity of the new root.

        Raises:
            AlreadyInitializedError: If the tree already has a root.
            IncompatibleValueTypeError: If value is not a value_type instance.
            InvalidValueError: If value contains a line break or does not
                read back equal from its text form.
        """
        if self._root is not None:
            raise AlreadyInitializedError("The root node has already been set")
        check_value(self._codec, value)
        node = TreeNode(value)
        self._root = node
        return self._registry.assign(node)

    def append_child(self, parent_identity: int, value: Any) -> int:
        """Append a new node as the last child of a parent.

        Args:
            parent_identity: Identity of the parent node.
            value: Value of the new node.

        Returns:
            Identity of the new node.

        Raises:
            NoSuchNodeError: If parent_identity is not a live node.
            IncompatibleValueTypeError: If value is not a value_type instance.
            InvalidValueError: If value contains a line break or does not
                read back equal from its text form.
        """
        parent = self._registry.resolve(parent_identity)
        check_value(self._codec, value)
        return self._registry.assign(parent.add_child(value))

    def remove_subtree(self, identity: int) -> None:
        """Remove a node and its whole subtree.

        The subtree's identities are deregistered children first, then the
        node is detached from its parent. Remaining siblings keep their order.

        Args:
            identity: Identity of the node to remove.

        Raises:
            IllegalOperationError: If identity names the root.
            NoSuchNodeError: If identity is not a live node.
        """
        if self._root is not None and identity == self._root.identity:
            raise IllegalOperationError("The root node cannot be removed")
        node = self._registry.resolve(identity)
        parent = node.parent
        self._registry.release(node)
        parent.detach_child(node)

    def get_value(self, identity: int) -> Any:
        """Get the value of a node.

        Raises:
            NoSuchNodeError: If identity is not a live node.
        """
        return self._registry.resolve(identity).value

    def get_children(self, identity: int) -> list[int]:
        """Return the identities of a node's children in order.

        Returns:
            List of child identities, empty for a leaf.

        Raises:
            NoSuchNodeError: If identity is not a live node.
        """
        return [child.identity for child in self._registry.resolve(identity).children]

    def get_parent(self, identity: int) -> int | None:
        """Return the identity of a node's parent, or None for the root.

        Raises:
            NoSuchNodeError: If identity is not a live node.
        """
        parent = self._registry.resolve(identity).parent
        return None if parent is None else parent.identity

    def get_root_identity(self) -> int | None:
        """Return the root identity, or None if the tree is empty."""
        return None if self._root is None else self._root.identity

    @property
    def root_identity(self) -> int | None:
        """The root identity, or None if the tree is empty."""
        return self.get_root_identity()

    # ==================== Walk ====================

    def walk(self) -> Iterator[tuple[int, int, Any]]:
        """Walk the tree in pre-order.

        Yields:
            Tuples of (depth, identity, value), root at depth 0.

        Example:
            >>> for depth, identity, value in tree.walk():
            ...     print('  ' * depth + str(value))
        """
        if self._root is None:
            return
        stack: list[tuple[int, TreeNode]] = [(0, self._root)]
        while stack:
            depth, node = stack.pop()
            yield depth, node.identity, node.value
            stack.extend((depth + 1, child) for child in reversed(node.children))

    # ==================== Serialization ====================

    def linearize(self) -> list[Any]:
        """Return the flat token sequence of the tree (values and END markers)."""
        from .linear import linearize
        return linearize(self)

    def linearized(self) -> str:
        """Return the flat token sequence rendered as '[ v, v, X, ... ]'."""
        from .linear import format_linearized
        return format_linearized(self.linearize(), self._codec)

    def serialize(self) -> str:
        """Serialize the tree to its line-oriented text form."""
        from .codec import serialize
        return serialize(self)

    @classmethod
    def deserialize(cls, text: str, value_type: type = str) -> Tree:
        """Rebuild a tree from its serialized text.

        Args:
            text: Text produced by serialize().
            value_type: Type of the stored values.

        Returns:
            A new Tree with freshly assigned identities.

        Raises:
            DeserializationError: If the text is malformed; no tree is produced.
        """
        from .codec import deserialize
        return deserialize(text, value_type)
