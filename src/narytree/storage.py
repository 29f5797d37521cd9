# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Reading and writing serialized trees from files."""

from __future__ import annotations

import logging
from pathlib import Path

from .codec import deserialize, serialize
from .tree import Tree

logger = logging.getLogger(__name__)


def save_tree(tree: Tree, path: str | Path, encoding: str = 'utf-8') -> Path:
    """Write the serialized tree to path, replacing any existing file.

    Returns:
        The path written.
    """
    path = Path(path)
    text = serialize(tree)
    path.write_text(text, encoding=encoding)
    logger.debug("Saved %d nodes to %s", len(tree), path)
    return path


def load_tree(path: str | Path, value_type: type = str, encoding: str = 'utf-8') -> Tree:
    """Read a serialized tree from path.

    Args:
        path: File to read.
        value_type: Type of the stored values.
        encoding: Text encoding of the file.

    Raises:
        FileNotFoundError: If path does not exist.
        DeserializationError: If the file content is not a valid serialization.
    """
    path = Path(path)
    text = path.read_text(encoding=encoding)
    tree = deserialize(text, value_type)
    logger.debug("Loaded %d nodes from %s", len(tree), path)
    return tree
