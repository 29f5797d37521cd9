# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Line-oriented text codec for trees.

The serialized form has one token per line::

    [0]: R        <--- value line, [n]: encoded value
    [1]: A
    [2]: C
    [X]           <--- end-of-children marker
    [X]
    [3]: B
    [X]
    [X]

``n`` counts value lines from zero. It is positional only and is not
reused as a node identity when the text is read back.
"""

from __future__ import annotations

import re
from typing import Any, TYPE_CHECKING

from .contract import DECODE_ERRORS, check_value, check_value_type
from .exceptions import (
    DecodeFailureError,
    MalformedInputError,
    StructuralMismatchError,
)
from .linear import END, delinearize, linearize

if TYPE_CHECKING:
    from .tree import Tree

END_LINE = '[X]'

_VALUE_LINE = re.compile(r'^\[(\d+)\]: ([^\r]*)$')


def serialize(tree: Tree) -> str:
    """Serialize a tree to text.

    Args:
        tree: The tree to serialize.

    Returns:
        One line per token, each terminated by a newline; '' for an empty tree.
    """
    encode = tree.codec.encode
    lines: list[str] = []
    count = 0
    for token in linearize(tree):
        if token is END:
            lines.append(END_LINE)
        else:
            lines.append(f"[{count}]: {encode(token)}")
            count += 1
    return ''.join(f"{line}\n" for line in lines)


def _split_lines(text: str) -> list[str]:
    lines = text.split('\n')
    if lines and lines[-1] == '':
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]


def parse_tokens(text: str, value_type: type = str) -> list[Any]:
    """Decode and validate serialized text into a token sequence.

    Args:
        text: Serialized tree text.
        value_type: Type of the encoded values.

    Returns:
        List of decoded values and END markers forming a single tree.

    Raises:
        MalformedInputError: If a line is neither '[X]' nor '[n]: value',
            or holds a carriage return other than its line ending.
        DecodeFailureError: If a value cannot be decoded, or the decoded
            value could not be stored in a tree.
        StructuralMismatchError: If markers close more scopes than were
            opened, a value follows the close of the root, or the input
            ends with scopes still open.
    """
    codec = check_value_type(value_type)
    tokens: list[Any] = []
    values = ends = 0

    for line_number, line in enumerate(_split_lines(text), start=1):
        if line == END_LINE:
            ends += 1
            if ends > values:
                raise StructuralMismatchError(
                    "Too many end-of-children markers: a valid serialization "
                    "has one marker for every node",
                    line_number,
                )
            tokens.append(END)
            continue

        match = _VALUE_LINE.match(line)
        if match is None:
            raise MalformedInputError(
                f"Invalid line format {line!r}: expected '[n]: value' for "
                f"nodes or '[X]' for end-of-children markers",
                line_number,
            )
        if values and values == ends:
            raise StructuralMismatchError(
                "Value after the root node was closed: a serialization "
                "holds a single tree",
                line_number,
            )
        try:
            value = codec.decode(match.group(2))
            check_value(codec, value)
        except DECODE_ERRORS as exc:
            raise DecodeFailureError(
                f"Unable to decode value {match.group(2)!r}: {exc}",
                line_number,
            ) from exc
        tokens.append(value)
        values += 1

    if values != ends:
        raise StructuralMismatchError(
            f"Too few end-of-children markers: {values} values but {ends} "
            f"markers"
        )
    return tokens


def deserialize(text: str, value_type: type = str) -> Tree:
    """Rebuild a tree from serialized text.

    The whole input is validated before any node is created; on error no
    tree is produced.

    Args:
        text: Serialized tree text. Empty text yields an empty tree.
        value_type: Type of the encoded values.

    Returns:
        A new Tree with freshly assigned identities.

    Raises:
        DeserializationError: Any of MalformedInputError, DecodeFailureError
            or StructuralMismatchError.
    """
    return delinearize(parse_tokens(text, value_type), value_type)
