# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""narytree - Generic N-ary trees with identity access and text serialization.

A lightweight, zero-dependency library providing an N-ary tree container
whose nodes are addressed by integer identities, plus a line-oriented text
format that round-trips any tree shape.
"""

__version__ = "0.1.0"

from .codec import deserialize, serialize
from .contract import TreeValue, ValueCodec, check_value, check_value_type, codec_for
from .exceptions import (
    AlreadyInitializedError,
    DecodeFailureError,
    DeserializationError,
    IllegalOperationError,
    IncompatibleValueTypeError,
    InvalidValueError,
    MalformedInputError,
    NoSuchNodeError,
    StructuralMismatchError,
    TreeError,
)
from .linear import END, delinearize, format_linearized, linearize
from .storage import load_tree, save_tree
from .story import StoryNode
from .tree import Tree

__all__ = [
    # Core classes
    "Tree",
    # Value types
    "TreeValue",
    "ValueCodec",
    "StoryNode",
    "check_value",
    "check_value_type",
    "codec_for",
    # Serialization
    "END",
    "linearize",
    "delinearize",
    "format_linearized",
    "serialize",
    "deserialize",
    "load_tree",
    "save_tree",
    # Exceptions
    "TreeError",
    "AlreadyInitializedError",
    "NoSuchNodeError",
    "IllegalOperationError",
    "IncompatibleValueTypeError",
    "InvalidValueError",
    "DeserializationError",
    "MalformedInputError",
    "DecodeFailureError",
    "StructuralMismatchError",
]
