# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Linearization of trees into flat token sequences and back.

A tree is flattened by a pre-order walk that emits each node's value on
entry and an END marker once all of its children have been emitted. Every
value opens a scope and every END closes the innermost open one, so the
sequence carries the whole shape without parent or child indices::

          1
         /|\\
        2 3 4
       /| |
      5 6 7

    [ 1, 2, 5, X, 6, X, X, 3, 7, X, X, 4, X, X ]

A tree of n nodes yields exactly n values and n END markers.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from .exceptions import StructuralMismatchError

if TYPE_CHECKING:
    from .contract import ValueCodec
    from .node import TreeNode
    from .tree import Tree


class EndMarker:
    """End-of-children token. Use the END singleton."""

    __slots__ = ()

    def __repr__(self) -> str:
        return 'END'


END = EndMarker()


def linearize(tree: Tree) -> list[Any]:
    """Flatten a tree into its value / END token sequence.

    Walks the tree with an explicit stack: a popped node emits its value,
    then pushes an END marker followed by its children in reverse order, so
    the marker surfaces only after the last child's subtree is emitted.

    Args:
        tree: The tree to flatten.

    Returns:
        List of values and END markers; empty for an empty tree.
    """
    tokens: list[Any] = []
    stack: list[TreeNode | EndMarker] = []
    if tree._root is not None:
        stack.append(tree._root)

    while stack:
        current = stack.pop()
        if current is END:
            tokens.append(END)
            continue
        tokens.append(current.value)
        stack.append(END)
        stack.extend(reversed(current.children))
    return tokens


def delinearize(tokens: list[Any], value_type: type = str) -> Tree:
    """Rebuild a tree from a value / END token sequence.

    The first value becomes the root. Each later value is appended under the
    identity on top of a parent stack and pushed in turn; END pops the stack.
    An END with nothing left to close is ignored.

    Args:
        tokens: Sequence produced by linearize() or decoded from text.
        value_type: Type of the values, used to build the new tree.

    Returns:
        A new Tree with freshly assigned identities.

    Raises:
        StructuralMismatchError: If a value follows the close of the root
            scope, which would require a second root.
    """
    from .tree import Tree

    tree = Tree(value_type)
    parents: list[int] = []

    for position, token in enumerate(tokens):
        if token is END:
            if parents:
                parents.pop()
            continue
        if not parents:
            if not tree.is_empty:
                raise StructuralMismatchError(
                    f"Value at token {position} follows the end of the root's "
                    f"children; a tree has a single root"
                )
            parents.append(tree.set_root(token))
        else:
            parents.append(tree.append_child(parents[-1], token))
    return tree


def format_linearized(tokens: list[Any], codec: ValueCodec | None = None) -> str:
    """Render a token sequence as '[ v1, v2, X, ... ]' for inspection.

    Args:
        tokens: Values and END markers.
        codec: Optional codec used to render values; str() otherwise.
    """
    encode = codec.encode if codec is not None else str
    items = ['X' if token is END else encode(token) for token in tokens]
    return f"[ {', '.join(items)} ]"
